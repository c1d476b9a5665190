"""Tests for the session token codec."""

from datetime import UTC, datetime, timedelta

import pytest

from blink.core.tokens import (
    SessionClaims,
    TokenCodec,
    TokenInvalidError,
    TokenType,
)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, tzinfo=UTC))


@pytest.fixture
def codec(clock: FakeClock) -> TokenCodec:
    return TokenCodec("secret", issuer="blink", audience="blink-api", clock=clock)


@pytest.fixture
def claims() -> SessionClaims:
    return SessionClaims(user_id="user-1", session_id="session-1")


class TestEncodeDecode:
    def test_decode_recovers_identity(self, codec: TokenCodec, claims: SessionClaims) -> None:
        decoded = codec.decode(codec.encode(claims, ttl=300))

        assert decoded.user_id == "user-1"
        assert decoded.session_id == "session-1"
        assert decoded.typ == TokenType.ACCESS
        assert decoded.iss == "blink"
        assert decoded.aud == "blink-api"

    def test_stamps_iat_and_exp(
        self, codec: TokenCodec, claims: SessionClaims, clock: FakeClock
    ) -> None:
        decoded = codec.decode(codec.encode(claims, ttl=timedelta(minutes=5)))

        assert decoded.iat == int(clock.now.timestamp())
        assert decoded.exp == decoded.iat + 300
        assert decoded.expires_at == clock.now + timedelta(minutes=5)

    def test_same_claims_encode_differently(
        self, codec: TokenCodec, claims: SessionClaims
    ) -> None:
        assert codec.encode(claims, ttl=300) != codec.encode(claims, ttl=300)

    def test_payload_is_opaque(self, codec: TokenCodec, claims: SessionClaims) -> None:
        token = codec.encode(claims, ttl=300)
        assert "user-1" not in token
        assert "session-1" not in token

    def test_refresh_type_round_trips(self, codec: TokenCodec) -> None:
        token = codec.encode(
            SessionClaims(user_id="u", session_id="s", token_type=TokenType.REFRESH),
            ttl=60,
        )
        assert codec.decode(token).typ == TokenType.REFRESH


class TestExpiry:
    def test_valid_until_just_before_exp(
        self, codec: TokenCodec, claims: SessionClaims, clock: FakeClock
    ) -> None:
        token = codec.encode(claims, ttl=300)
        clock.advance(299)
        assert codec.decode(token).user_id == "user-1"

    def test_rejected_at_exp(
        self, codec: TokenCodec, claims: SessionClaims, clock: FakeClock
    ) -> None:
        token = codec.encode(claims, ttl=300)
        clock.advance(300)

        with pytest.raises(TokenInvalidError) as exc_info:
            codec.decode(token)
        assert exc_info.value.reason == "expired"


class TestRejection:
    def test_tampered_token(self, codec: TokenCodec, claims: SessionClaims) -> None:
        token = codec.encode(claims, ttl=300)
        # Flip one character in the middle (ciphertext area)
        i = len(token) // 2
        tampered = token[:i] + ("A" if token[i] != "A" else "B") + token[i + 1 :]

        with pytest.raises(TokenInvalidError) as exc_info:
            codec.decode(tampered)
        assert exc_info.value.reason == "forged"

    def test_other_secret(self, codec: TokenCodec, claims: SessionClaims, clock) -> None:
        other = TokenCodec("other-secret", issuer="blink", audience="blink-api", clock=clock)
        with pytest.raises(TokenInvalidError):
            other.decode(codec.encode(claims, ttl=300))

    def test_wrong_issuer(self, codec: TokenCodec, claims: SessionClaims, clock) -> None:
        other = TokenCodec("secret", issuer="someone-else", audience="blink-api", clock=clock)
        with pytest.raises(TokenInvalidError) as exc_info:
            codec.decode(other.encode(claims, ttl=300))
        assert exc_info.value.reason == "issuer"

    def test_wrong_audience(self, codec: TokenCodec, claims: SessionClaims, clock) -> None:
        other = TokenCodec("secret", issuer="blink", audience="other-api", clock=clock)
        with pytest.raises(TokenInvalidError) as exc_info:
            codec.decode(other.encode(claims, ttl=300))
        assert exc_info.value.reason == "audience"

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "Zm9vYmFy", "tökén"])
    def test_garbage(self, codec: TokenCodec, garbage: str) -> None:
        with pytest.raises(TokenInvalidError):
            codec.decode(garbage)
