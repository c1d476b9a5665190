"""Session token codec.

Access and refresh tokens are JSON claim bundles encrypted with Fernet
(AES-128-CBC + HMAC-SHA256). The payload is opaque to clients and any
modification breaks the HMAC. Fernet draws a fresh IV per call, so the
same claims never encrypt to the same token twice.

decode() collapses every failure (bad ciphertext, wrong issuer, expiry)
into TokenInvalidError. The reason attribute exists for logs only and
must not reach API responses.

Usage:
    codec = TokenCodec(secret, issuer="blink", audience="blink-api")
    token = codec.encode(SessionClaims(user_id=..., session_id=...), ttl=300)
    claims = codec.decode(token)
"""

import base64
import json
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from pydantic import BaseModel, ValidationError

_KEY_INFO = b"blink-session-token-v1"


class TokenType(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


class SessionClaims(BaseModel):
    """Identity carried by every token."""

    user_id: str
    session_id: str
    token_type: TokenType = TokenType.ACCESS


class TokenClaims(BaseModel):
    """Decoded token payload (wire names are JWT-style)."""

    sub: str  # user_id
    sid: str  # session_id
    typ: TokenType
    iss: str
    aud: str
    iat: int
    exp: int

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def session_id(self) -> str:
        return self.sid

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=UTC)


class TokenInvalidError(Exception):
    """Token could not be accepted.

    Attributes:
        reason: Internal failure classification (for logging only)
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Token invalid: {reason}")


def derive_fernet_key(secret: str) -> bytes:
    """Derive a Fernet key from an arbitrary-length server secret."""
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=_KEY_INFO)
    return base64.urlsafe_b64encode(hkdf.derive(secret.encode("utf-8")))


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TokenCodec:
    """Encrypts and decrypts session claims with a server-held key."""

    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._fernet = Fernet(derive_fernet_key(secret))
        self.issuer = issuer
        self.audience = audience
        self._clock = clock

    def encode(self, claims: SessionClaims, ttl: int | timedelta) -> str:
        """Stamp iat/exp/iss/aud onto claims and encrypt.

        Args:
            claims: Identity to carry
            ttl: Lifetime in seconds or as timedelta

        Returns:
            URL-safe token string
        """
        token, _ = self.issue(claims, ttl)
        return token

    def issue(
        self, claims: SessionClaims, ttl: int | timedelta
    ) -> tuple[str, TokenClaims]:
        """Like encode(), also returning the stamped claims."""
        if isinstance(ttl, timedelta):
            ttl = int(ttl.total_seconds())

        issued_at = int(self._clock().timestamp())
        payload = TokenClaims(
            sub=claims.user_id,
            sid=claims.session_id,
            typ=claims.token_type,
            iss=self.issuer,
            aud=self.audience,
            iat=issued_at,
            exp=issued_at + ttl,
        )
        data = json.dumps(payload.model_dump(mode="json"), separators=(",", ":"))
        return self._fernet.encrypt(data.encode("utf-8")).decode("ascii"), payload

    def decode(self, token: str) -> TokenClaims:
        """Decrypt and validate a token.

        Raises:
            TokenInvalidError: On any integrity, format, issuer/audience or expiry failure
        """
        try:
            data = self._fernet.decrypt(token.encode("ascii"))
        except UnicodeEncodeError as e:
            raise TokenInvalidError("malformed") from e
        except InvalidToken as e:
            raise TokenInvalidError("forged") from e

        try:
            claims = TokenClaims.model_validate_json(data)
        except ValidationError as e:
            raise TokenInvalidError("claims") from e

        if claims.iss != self.issuer:
            raise TokenInvalidError("issuer")
        if claims.aud != self.audience:
            raise TokenInvalidError("audience")
        if int(self._clock().timestamp()) >= claims.exp:
            raise TokenInvalidError("expired")

        return claims
