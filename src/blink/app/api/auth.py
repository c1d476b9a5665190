"""Authentication API endpoints.

Endpoints:
- POST /auth/login - Login with email/password
- POST /auth/refresh - New access token from a refresh token
- POST /auth/logout - Delete the current session

Tokens travel both in the JSON body (login) and as HttpOnly cookies, so
browser clients never need to touch them.
"""

from fastapi import APIRouter, Request, Response
from pydantic import EmailStr, Field

from blink.app.api.dependencies import Authenticated, DbSession, ServicesDep
from blink.app.api.schemas import CamelModel
from blink.app.config import CookieConfig
from blink.core.errors import AuthenticationRequiredError

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    access_token: str
    refresh_token: str


class RefreshRequest(CamelModel):
    refresh_token: str | None = Field(default=None, min_length=1)


def _set_token_cookie(
    response: Response, config: CookieConfig, name: str, value: str, max_age: int
) -> None:
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        path="/",
        domain=config.domain,
        secure=config.secure,
        httponly=True,
        samesite="strict",
    )


def _clear_token_cookie(response: Response, config: CookieConfig, name: str) -> None:
    response.delete_cookie(
        key=name,
        path="/",
        domain=config.domain,
        secure=config.secure,
        httponly=True,
        samesite="strict",
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: DbSession,
    services: ServicesDep,
) -> LoginResponse:
    """Login with email and password.

    Returns both tokens and sets them as cookies. Unknown email and wrong
    password produce the same 401.
    """
    result = await services.auth.login(db, body.email, body.password)

    settings = services.settings
    _set_token_cookie(
        response,
        settings.cookie,
        settings.cookie.access_name,
        result.access_token,
        settings.security.access_token_ttl,
    )
    _set_token_cookie(
        response,
        settings.cookie,
        settings.cookie.refresh_name,
        result.refresh_token,
        settings.security.refresh_token_ttl,
    )
    return LoginResponse(
        access_token=result.access_token, refresh_token=result.refresh_token
    )


@router.post("/refresh", status_code=204)
async def refresh(
    request: Request,
    db: DbSession,
    services: ServicesDep,
    body: RefreshRequest | None = None,
) -> Response:
    """Issue a new access token.

    The refresh token comes from the body or, failing that, the refresh
    cookie. The new access token is returned in the X-Access-Token header
    and as a cookie.
    """
    settings = services.settings
    refresh_token = (body.refresh_token if body else None) or request.cookies.get(
        settings.cookie.refresh_name
    )
    if not refresh_token:
        raise AuthenticationRequiredError()

    result = await services.auth.refresh(db, refresh_token)

    response = Response(status_code=204)
    response.headers["X-Access-Token"] = result.access_token
    _set_token_cookie(
        response,
        settings.cookie,
        settings.cookie.access_name,
        result.access_token,
        settings.security.access_token_ttl,
    )
    return response


@router.post("/logout", status_code=204)
async def logout(auth: Authenticated, db: DbSession, services: ServicesDep) -> Response:
    """Delete the caller's session and clear token cookies.

    Access tokens already handed out stay valid until they expire.
    """
    await services.auth.logout(db, auth.session_id)

    cookie = services.settings.cookie
    response = Response(status_code=204)
    _clear_token_cookie(response, cookie, cookie.access_name)
    _clear_token_cookie(response, cookie, cookie.refresh_name)
    return response
