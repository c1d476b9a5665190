"""Service wiring.

Services are plain objects built once from Settings. Routes reach them
through the get_services dependency; tests override it with a container
built from test settings.
"""

from dataclasses import dataclass
from functools import lru_cache

from argon2 import PasswordHasher

from blink.app.config import Settings, get_settings
from blink.core.security import build_hasher
from blink.core.tokens import TokenCodec
from blink.services import (
    AuthService,
    BlinkService,
    MemberService,
    RedirectIdAllocator,
    SessionService,
    UserService,
    WorkspaceService,
)


@dataclass(frozen=True)
class Services:
    settings: Settings
    hasher: PasswordHasher
    codec: TokenCodec
    sessions: SessionService
    auth: AuthService
    users: UserService
    workspaces: WorkspaceService
    members: MemberService
    allocator: RedirectIdAllocator
    blinks: BlinkService


def build_services(settings: Settings) -> Services:
    security = settings.security
    hasher = build_hasher(
        time_cost=security.password_time_cost,
        memory_cost=security.password_memory_cost,
        parallelism=security.password_parallelism,
    )
    codec = TokenCodec(
        secret=security.token_secret,
        issuer=security.token_issuer,
        audience=security.token_audience,
    )
    sessions = SessionService()
    allocator = RedirectIdAllocator(settings.redirect)
    return Services(
        settings=settings,
        hasher=hasher,
        codec=codec,
        sessions=sessions,
        auth=AuthService(codec, sessions, settings.security, hasher),
        users=UserService(hasher),
        workspaces=WorkspaceService(),
        members=MemberService(),
        allocator=allocator,
        blinks=BlinkService(allocator),
    )


@lru_cache
def get_services() -> Services:
    return build_services(get_settings())
