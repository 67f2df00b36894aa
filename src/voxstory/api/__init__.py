"""FastAPI application and REST API endpoints.

This module contains:
- Main FastAPI application configuration
- Cookie session authentication
- Project storage endpoints
- Story generation endpoint
"""
