"""Authentication and authorization dependencies.

Each guard returns a frozen context object that route handlers receive
as a parameter. Guards build on each other:

    require_authenticated -> AuthContext
    require_member / require_administrator -> MemberContext
    require_blink_writer -> BlinkWriterContext

FastAPI caches a dependency per request, so a route that also depends on
the db session or AuthContext directly gets the same instances.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blink.app.container import Services, get_services
from blink.app.logging import set_user_id
from blink.core.domain import WorkspaceMemberRole, has_at_least
from blink.core.errors import (
    AccessDeniedError,
    AuthenticationRequiredError,
    InvalidCredentialsError,
)
from blink.core.logging_schema import LogEvent
from blink.core.models import Blink, WorkspaceMember
from blink.core.tokens import TokenInvalidError, TokenType
from blink.infra import get_session

logger = logging.getLogger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_session)]
ServicesDep = Annotated[Services, Depends(get_services)]


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    session_id: str


@dataclass(frozen=True)
class MemberContext:
    auth: AuthContext
    workspace_id: str
    member: WorkspaceMember

    @property
    def user_id(self) -> str:
        return self.auth.user_id


@dataclass(frozen=True)
class BlinkWriterContext:
    member: MemberContext
    blink: Blink


def _deny(resource: str, user_id: str) -> AccessDeniedError:
    logger.info(
        "Access denied",
        extra={
            "event": LogEvent.ACCESS_DENIED,
            "resource": resource,
            "user_id": user_id,
        },
    )
    return AccessDeniedError(resource)


def _bearer_token(request: Request, cookie_name: str) -> str | None:
    """Authorization header first, then the access cookie.

    Raises:
        InvalidCredentialsError: Header present but not "Bearer <token>"
    """
    header = request.headers.get("authorization")
    if header is not None:
        scheme, _, token = header.partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise InvalidCredentialsError()
        return token
    return request.cookies.get(cookie_name) or None


async def require_authenticated(request: Request, services: ServicesDep) -> AuthContext:
    """Recover the caller's identity from an access token.

    Stateless: the session table is not consulted.
    """
    token = _bearer_token(request, services.settings.cookie.access_name)
    if token is None:
        raise AuthenticationRequiredError()

    try:
        claims = services.codec.decode(token)
    except TokenInvalidError as e:
        logger.info(
            "Access token rejected",
            extra={"event": LogEvent.TOKEN_REJECTED, "reason": e.reason},
        )
        raise InvalidCredentialsError() from e

    if claims.typ != TokenType.ACCESS:
        logger.info(
            "Access token rejected",
            extra={"event": LogEvent.TOKEN_REJECTED, "reason": "wrong_type"},
        )
        raise InvalidCredentialsError()

    set_user_id(claims.user_id)
    return AuthContext(user_id=claims.user_id, session_id=claims.session_id)


Authenticated = Annotated[AuthContext, Depends(require_authenticated)]


def require_member_role_at_least(
    min_role: WorkspaceMemberRole,
) -> Callable[..., Awaitable[MemberContext]]:
    """Build a guard requiring membership of {workspace_id} with min_role.

    A missing workspace and a missing membership produce the same 403.
    """

    async def guard(
        workspace_id: str,
        auth: Authenticated,
        db: DbSession,
        services: ServicesDep,
    ) -> MemberContext:
        member = await services.members.find_membership(db, workspace_id, auth.user_id)
        if member is None or not has_at_least(member.role, min_role):
            raise _deny(f"/workspaces/{workspace_id}", auth.user_id)
        return MemberContext(auth=auth, workspace_id=workspace_id, member=member)

    return guard


# Module-level instances so FastAPI resolves each once per request
require_member = require_member_role_at_least(WorkspaceMemberRole.DEFAULT)
require_administrator = require_member_role_at_least(WorkspaceMemberRole.ADMINISTRATOR)

Member = Annotated[MemberContext, Depends(require_member)]
Administrator = Annotated[MemberContext, Depends(require_administrator)]


async def require_own_user(user_id: str, auth: Authenticated) -> AuthContext:
    if auth.user_id != user_id:
        raise _deny(f"/users/{user_id}", auth.user_id)
    return auth


OwnUser = Annotated[AuthContext, Depends(require_own_user)]


async def require_blink_writer(
    blink_id: str,
    member: Member,
    db: DbSession,
    services: ServicesDep,
) -> BlinkWriterContext:
    """Allow the blink's creator or a workspace ADMINISTRATOR.

    Membership is already proven here, so a missing blink is a plain 404.
    """
    blink = await services.blinks.get(db, member.workspace_id, blink_id)

    is_creator = blink.creator_id == member.user_id
    is_admin = has_at_least(member.member.role, WorkspaceMemberRole.ADMINISTRATOR)
    if not (is_creator or is_admin):
        raise _deny(
            f"/workspaces/{member.workspace_id}/blinks/{blink_id}", member.user_id
        )
    return BlinkWriterContext(member=member, blink=blink)


BlinkWriter = Annotated[BlinkWriterContext, Depends(require_blink_writer)]
