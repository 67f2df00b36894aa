"""Tests for password hashing and session tokens."""

from datetime import UTC, datetime, timedelta

from jose import jwt

from voxstory.core.config import Settings
from voxstory.core.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)


def make_settings(**overrides) -> Settings:
    values = {"_env_file": None, "secret_key": "unit-test-secret"}
    values.update(overrides)
    return Settings(**values)


class TestPasswordHashing:
    """Test bcrypt password hashing."""

    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        assert hashed != "pw123"
        assert hashed.startswith("$2b$04$")

    def test_hash_is_salted(self) -> None:
        assert hash_password("pw123", rounds=4) != hash_password("pw123", rounds=4)

    def test_verify_matches(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        assert verify_password("pw123", hashed)
        assert not verify_password("pw124", hashed)

    def test_verify_rejects_garbage_hash(self) -> None:
        assert not verify_password("pw123", "not-a-bcrypt-hash")


class TestSessionTokens:
    """Test signed session tokens."""

    def test_roundtrip_returns_user_id(self) -> None:
        settings = make_settings()
        token = create_session_token("user-a", settings)
        assert decode_session_token(token, settings) == "user-a"

    def test_token_for_one_user_never_verifies_as_another(self) -> None:
        settings = make_settings()
        token_a = create_session_token("user-a", settings)
        token_b = create_session_token("user-b", settings)
        assert decode_session_token(token_a, settings) != "user-b"
        assert decode_session_token(token_b, settings) != "user-a"

    def test_no_expiry_by_default(self) -> None:
        settings = make_settings()
        token = create_session_token("user-a", settings)
        claims = jwt.get_unverified_claims(token)
        assert "exp" not in claims
        assert claims["type"] == "session"

    def test_configured_expiry_adds_claim(self) -> None:
        settings = make_settings(session_expire_minutes=30)
        token = create_session_token("user-a", settings)
        claims = jwt.get_unverified_claims(token)
        assert "exp" in claims
        assert decode_session_token(token, settings) == "user-a"

    def test_expired_token_is_invalid(self) -> None:
        settings = make_settings()
        token = create_session_token("user-a", settings, expires_delta=timedelta(seconds=-10))
        assert decode_session_token(token, settings) is None

    def test_tampered_token_is_invalid(self) -> None:
        settings = make_settings()
        token = create_session_token("user-a", settings)
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        assert decode_session_token(f"{header}.{payload}.{flipped}", settings) is None

    def test_swapped_payload_is_invalid(self) -> None:
        settings = make_settings()
        token_a = create_session_token("user-a", settings)
        token_b = create_session_token("user-b", settings)
        header, _, signature = token_a.split(".")
        payload_b = token_b.split(".")[1]
        assert decode_session_token(f"{header}.{payload_b}.{signature}", settings) is None

    def test_truncated_token_is_invalid(self) -> None:
        settings = make_settings()
        token = create_session_token("user-a", settings)
        assert decode_session_token(token[:-5], settings) is None
        assert decode_session_token(token[: len(token) // 2], settings) is None

    def test_missing_or_malformed_token_is_invalid(self) -> None:
        settings = make_settings()
        assert decode_session_token(None, settings) is None
        assert decode_session_token("", settings) is None
        assert decode_session_token("not.a.jwt", settings) is None
        assert decode_session_token("garbage", settings) is None

    def test_other_secret_is_invalid(self) -> None:
        token = create_session_token("user-a", make_settings(secret_key="one"))
        assert decode_session_token(token, make_settings(secret_key="two")) is None

    def test_jwt_secret_key_takes_precedence(self) -> None:
        settings = make_settings(secret_key="fallback", jwt_secret_key="primary")
        token = create_session_token("user-a", settings)
        assert decode_session_token(token, make_settings(secret_key="primary")) == "user-a"

    def test_wrong_token_type_is_invalid(self) -> None:
        settings = make_settings()
        token = jwt.encode(
            {"sub": "user-a", "type": "refresh", "iat": datetime.now(UTC)},
            settings.effective_jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_session_token(token, settings) is None

    def test_missing_subject_is_invalid(self) -> None:
        settings = make_settings()
        token = jwt.encode(
            {"type": "session"},
            settings.effective_jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_session_token(token, settings) is None
