"""Login, refresh and logout.

Tokens are minted by TokenCodec and bound to a Session row:
- login: verify credentials, create a session, mint access + refresh tokens
- refresh: mint a new access token while the session row exists
- logout: delete the session row

Access tokens are verified without touching the database, so one that
was issued before logout keeps working until its own exp. The access
TTL is the revocation window.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from argon2 import PasswordHasher
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from blink.app.config import SecurityConfig
from blink.app.metrics.collector import AUTH_EVENTS_TOTAL
from blink.core.errors import InvalidCredentialsError
from blink.core.logging_schema import LogEvent
from blink.core.models import User
from blink.core.security import hash_password_async, verify_password_async
from blink.core.tokens import (
    SessionClaims,
    TokenClaims,
    TokenCodec,
    TokenInvalidError,
    TokenType,
)
from blink.services.session_service import SessionService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user_id: str
    session_id: str
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class RefreshResult:
    access_token: str
    access_expires_at: datetime


class AuthService:
    """Issues and revokes session tokens."""

    def __init__(
        self,
        codec: TokenCodec,
        sessions: SessionService,
        security_config: SecurityConfig,
        hasher: PasswordHasher,
    ) -> None:
        self.codec = codec
        self.sessions = sessions
        self.config = security_config
        self.hasher = hasher
        self._dummy_hash: str | None = None

    async def _burn_verify(self, password: str) -> None:
        # Unknown emails cost the same as a wrong password
        if self._dummy_hash is None:
            self._dummy_hash = await hash_password_async("blink-dummy", self.hasher)
        await verify_password_async(password, self._dummy_hash, self.hasher)

    def _reject_login(self, reason: str) -> InvalidCredentialsError:
        AUTH_EVENTS_TOTAL.labels(event=LogEvent.LOGIN_FAILED).inc()
        logger.info(
            "Login failed",
            extra={"event": LogEvent.LOGIN_FAILED, "reason": reason},
        )
        return InvalidCredentialsError()

    async def login(self, db: AsyncSession, email: str, password: str) -> LoginResult:
        """Authenticate by email and password.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password (same message)
        """
        result = await db.execute(select(User).where(col(User.email) == email))
        user = result.scalar_one_or_none()

        if user is None:
            await self._burn_verify(password)
            raise self._reject_login("unknown_email")

        if not await verify_password_async(password, user.password_hash, self.hasher):
            raise self._reject_login("wrong_password")

        session = await self.sessions.create(db, user.id)
        access_token, access_claims = self._mint(
            user.id, session.id, TokenType.ACCESS, self.config.access_token_ttl
        )
        refresh_token, refresh_claims = self._mint(
            user.id, session.id, TokenType.REFRESH, self.config.refresh_token_ttl
        )

        AUTH_EVENTS_TOTAL.labels(event=LogEvent.LOGIN_SUCCEEDED).inc()
        logger.info(
            "Login succeeded",
            extra={
                "event": LogEvent.LOGIN_SUCCEEDED,
                "user_id": user.id,
                "session_id": session.id,
            },
        )
        return LoginResult(
            user_id=user.id,
            session_id=session.id,
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=access_claims.expires_at,
            refresh_expires_at=refresh_claims.expires_at,
        )

    async def refresh(self, db: AsyncSession, refresh_token: str) -> RefreshResult:
        """Mint a new access token from a refresh token.

        The refresh token is not rotated.

        Raises:
            InvalidCredentialsError: Undecodable token, wrong token type, or session gone
        """
        try:
            claims = self.codec.decode(refresh_token)
        except TokenInvalidError as e:
            raise self._reject_token(e.reason) from e

        if claims.typ != TokenType.REFRESH:
            raise self._reject_token("wrong_type")

        if not await self.sessions.exists(db, claims.session_id):
            raise self._reject_token("session_missing")

        access_token, access_claims = self._mint(
            claims.user_id,
            claims.session_id,
            TokenType.ACCESS,
            self.config.access_token_ttl,
        )
        AUTH_EVENTS_TOTAL.labels(event=LogEvent.TOKEN_REFRESHED).inc()
        logger.info(
            "Access token refreshed",
            extra={
                "event": LogEvent.TOKEN_REFRESHED,
                "user_id": claims.user_id,
                "session_id": claims.session_id,
            },
        )
        return RefreshResult(
            access_token=access_token, access_expires_at=access_claims.expires_at
        )

    async def logout(self, db: AsyncSession, session_id: str) -> None:
        """Delete the session. Succeeds even if it is already gone."""
        removed = await self.sessions.delete(db, session_id)
        AUTH_EVENTS_TOTAL.labels(event=LogEvent.SESSION_REVOKED).inc()
        logger.info(
            "Session revoked",
            extra={
                "event": LogEvent.SESSION_REVOKED,
                "session_id": session_id,
                "removed": removed,
            },
        )

    def _mint(
        self, user_id: str, session_id: str, token_type: TokenType, ttl: int
    ) -> tuple[str, TokenClaims]:
        return self.codec.issue(
            SessionClaims(user_id=user_id, session_id=session_id, token_type=token_type),
            ttl=ttl,
        )

    def _reject_token(self, reason: str) -> InvalidCredentialsError:
        AUTH_EVENTS_TOTAL.labels(event=LogEvent.TOKEN_REJECTED).inc()
        logger.info(
            "Refresh token rejected",
            extra={"event": LogEvent.TOKEN_REJECTED, "reason": reason},
        )
        return InvalidCredentialsError()
