"""Core utilities and configuration for VoxStory.

This module contains:
- Configuration and settings management
- Security utilities (password hashing, session tokens)
"""
from .config import Settings, configure_logging, get_settings
from .security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "configure_logging",
    # Security - Password
    "hash_password",
    "verify_password",
    # Security - Session
    "create_session_token",
    "decode_session_token",
]
