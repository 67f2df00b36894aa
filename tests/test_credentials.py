"""Tests for the credential store."""

import threading

import bcrypt
import pytest
from sqlalchemy import func, select

from conftest import TEST_HASH_ROUNDS
from voxstory.models import User
from voxstory.services import credentials as credentials_module
from voxstory.services.credentials import (
    AuthFailureError,
    CredentialStore,
    DuplicateIdentityError,
    dummy_password_hash,
)


@pytest.fixture
def store(session) -> CredentialStore:
    return CredentialStore(session, hash_rounds=TEST_HASH_ROUNDS)


async def count_users(session) -> int:
    result = await session.execute(select(func.count()).select_from(User))
    return result.scalar_one()


class TestCreate:
    """Test user creation."""

    async def test_create_returns_defaults(self, store: CredentialStore) -> None:
        user = await store.create("alice@example.com", "pw123")
        assert user.id
        assert user.email == "alice@example.com"
        assert user.favorite_genre == "Fantasy"
        assert user.favorite_voice == "Kore"

    async def test_password_is_not_stored_in_plaintext(self, store: CredentialStore) -> None:
        user = await store.create("alice@example.com", "pw123")
        assert user.password_hash != "pw123"
        assert "pw123" not in user.password_hash

    async def test_ids_are_unique(self, store: CredentialStore) -> None:
        a = await store.create("a@example.com", "pw")
        b = await store.create("b@example.com", "pw")
        assert a.id != b.id

    async def test_duplicate_email_fails_without_new_row(self, store: CredentialStore, session) -> None:
        await store.create("alice@example.com", "pw123")
        with pytest.raises(DuplicateIdentityError):
            await store.create("alice@example.com", "different")
        assert await count_users(session) == 1

    async def test_email_is_case_sensitive(self, store: CredentialStore, session) -> None:
        await store.create("alice@example.com", "pw123")
        await store.create("Alice@example.com", "pw123")
        assert await count_users(session) == 2


class TestVerify:
    """Test credential verification."""

    async def test_signup_then_login(self, store: CredentialStore) -> None:
        created = await store.create("alice@example.com", "pw123")
        verified = await store.verify("alice@example.com", "pw123")
        assert verified.id == created.id

    async def test_wrong_password(self, store: CredentialStore) -> None:
        await store.create("alice@example.com", "pw123")
        with pytest.raises(AuthFailureError) as wrong_password:
            await store.verify("alice@example.com", "nope")
        with pytest.raises(AuthFailureError) as unknown_email:
            await store.verify("nobody@example.com", "pw123")
        assert str(wrong_password.value) == str(unknown_email.value)

    async def test_unknown_email_costs_the_same_as_wrong_password(self, session, monkeypatch) -> None:
        """Each request gets a fresh store; none of them should hash again."""
        calls = {"hashpw": 0, "checkpw": 0}
        real_hashpw, real_checkpw = bcrypt.hashpw, bcrypt.checkpw

        def counting_hashpw(*args):
            calls["hashpw"] += 1
            return real_hashpw(*args)

        def counting_checkpw(*args):
            calls["checkpw"] += 1
            return real_checkpw(*args)

        await CredentialStore(session, hash_rounds=TEST_HASH_ROUNDS).create("alice@example.com", "pw123")
        dummy_password_hash(TEST_HASH_ROUNDS)
        monkeypatch.setattr(bcrypt, "hashpw", counting_hashpw)
        monkeypatch.setattr(bcrypt, "checkpw", counting_checkpw)

        for _ in range(2):
            with pytest.raises(AuthFailureError):
                await CredentialStore(session, hash_rounds=TEST_HASH_ROUNDS).verify("nobody@example.com", "pw123")
        unknown_email = dict(calls)

        calls.update(hashpw=0, checkpw=0)
        for _ in range(2):
            with pytest.raises(AuthFailureError):
                await CredentialStore(session, hash_rounds=TEST_HASH_ROUNDS).verify("alice@example.com", "nope")
        wrong_password = dict(calls)

        assert unknown_email == wrong_password == {"hashpw": 0, "checkpw": 2}

    async def test_bcrypt_runs_off_the_event_loop(self, store: CredentialStore, monkeypatch) -> None:
        loop_thread = threading.get_ident()
        threads = []
        real_hash, real_verify = credentials_module.hash_password, credentials_module.verify_password

        def recording_hash(*args):
            threads.append(threading.get_ident())
            return real_hash(*args)

        def recording_verify(*args):
            threads.append(threading.get_ident())
            return real_verify(*args)

        monkeypatch.setattr(credentials_module, "hash_password", recording_hash)
        monkeypatch.setattr(credentials_module, "verify_password", recording_verify)

        await store.create("alice@example.com", "pw123")
        await store.verify("alice@example.com", "pw123")
        assert len(threads) == 2
        assert loop_thread not in threads


class TestPreferences:
    """Test preference updates."""

    async def test_update_preferences(self, store: CredentialStore) -> None:
        user = await store.create("alice@example.com", "pw123")
        await store.update_preferences(user.id, genre="Horror", voice="Puck")
        updated = await store.get(user.id)
        await store.db.refresh(updated)
        assert updated.favorite_genre == "Horror"
        assert updated.favorite_voice == "Puck"

    async def test_any_string_is_accepted(self, store: CredentialStore) -> None:
        user = await store.create("alice@example.com", "pw123")
        await store.update_preferences(user.id, genre="Space Opera Noir", voice="")
        updated = await store.get(user.id)
        await store.db.refresh(updated)
        assert updated.favorite_genre == "Space Opera Noir"
        assert updated.favorite_voice == ""

    async def test_get_unknown_user(self, store: CredentialStore) -> None:
        assert await store.get("missing") is None
