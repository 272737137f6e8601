"""Tests for one-time session tokens."""

import time

import pytest

from coursehub.core.session_token import SessionTokenGuard, generate_session_token
from coursehub.infrastructure.redis import RedisClient
from coursehub.persistence.repositories import SessionTokenRepository

SECRET = "test-session-secret"


class TestVerify:
    """Tests for token verification without consumption."""

    def test_issued_token_verifies(self, token_guard):
        token = token_guard.issue(7)
        assert token_guard.verify(7, token) is True

    def test_bound_to_user(self, token_guard):
        token = token_guard.issue(7)
        assert token_guard.verify(8, token) is False

    def test_tampered_signature(self, token_guard):
        token = token_guard.issue(7)
        assert token_guard.verify(7, token[:-1] + ("0" if token[-1] != "0" else "1")) is False

    def test_forged_owner(self, token_guard):
        """Changing the owner invalidates the signature."""
        _, issued, nonce, signature = token_guard.issue(7).split(".")
        assert token_guard.verify(8, f"8.{issued}.{nonce}.{signature}") is False

    def test_other_secret(self, token_guard):
        token = generate_session_token(7, "another-secret")
        assert token_guard.verify(7, token) is False

    def test_expired(self, token_guard):
        issued = int(time.time()) - 3600
        token = generate_session_token(7, SECRET, issued_at=issued)
        assert token_guard.verify(7, token) is False
        assert token_guard.verify(7, token, now=issued + 60) is True

    def test_issued_in_future(self, token_guard):
        token = generate_session_token(7, SECRET, issued_at=int(time.time()) + 3600)
        assert token_guard.verify(7, token) is False

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c.d", "7.notanumber.nonce.sig", None])
    def test_malformed(self, token_guard, token):
        assert token_guard.verify(7, token) is False

    def test_tokens_are_unique(self, token_guard):
        assert token_guard.issue(7) != token_guard.issue(7)


class TestConsume:
    """Tests for one-time consumption."""

    @pytest.mark.asyncio
    async def test_consumed_once(self, token_guard):
        token = token_guard.issue(7)

        assert await token_guard.consume(7, token) is True
        assert await token_guard.consume(7, token) is False

    @pytest.mark.asyncio
    async def test_verify_does_not_consume(self, token_guard):
        token = token_guard.issue(7)

        assert token_guard.verify(7, token) is True
        assert await token_guard.consume(7, token) is True

    @pytest.mark.asyncio
    async def test_invalid_token_not_claimed(self, token_guard, fake_redis):
        assert await token_guard.consume(7, "7.1.nonce.bad") is False
        assert fake_redis.store == {}

    @pytest.mark.asyncio
    async def test_claim_expires_with_token(self, fake_redis):
        guard = SessionTokenGuard(redis=fake_redis, secret=SECRET, ttl_seconds=30)
        token = guard.issue(7)

        await guard.consume(7, token)

        claim_keys = [key for key in fake_redis.store if key.startswith("session-token:used:")]
        assert len(claim_keys) == 1
        assert fake_redis.store[claim_keys[0]] == "7"


@pytest.fixture
def offline_guard(monkeypatch):
    """Guard on a real RedisClient that is switched off."""
    redis = RedisClient()
    monkeypatch.setattr(redis, "_enabled", False)
    return SessionTokenGuard(redis=redis, secret=SECRET, ttl_seconds=600)


class TestConsumeWithoutRedis:
    """Claims fall back to the database when Redis is unavailable."""

    @pytest.mark.asyncio
    async def test_consumed_once(self, offline_guard, world):
        token = offline_guard.issue(world.teacher.id)

        assert await offline_guard.consume(world.teacher.id, token, session=world.session) is True
        assert await offline_guard.consume(world.teacher.id, token, session=world.session) is False

    @pytest.mark.asyncio
    async def test_claim_is_stored(self, offline_guard, world):
        token = offline_guard.issue(world.teacher.id)

        await offline_guard.consume(world.teacher.id, token, session=world.session)

        repo = SessionTokenRepository(world.session)
        assert await repo.is_claimed(token.rsplit(".", 1)[-1]) is True

    @pytest.mark.asyncio
    async def test_refused_without_any_store(self, offline_guard):
        token = offline_guard.issue(7)

        assert offline_guard.verify(7, token) is True
        assert await offline_guard.consume(7, token) is False
