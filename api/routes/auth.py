"""
api/routes/auth.py -- Registration, login and logout endpoints.

Routes:
  POST /auth/register  -- create an account; 201 with the public user view
  POST /auth/login     -- email/password login; 200 with access + refresh JWTs
  POST /auth/logout    -- revoke the presented bearer token; 200
  GET  /auth/me        -- identity of the current caller (requires auth)

Anything else under /auth falls through to the app-level 404 handler.

Security:
  POST /login is rate-limited per client IP (Settings.login_rate_limit).
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_email() + validate_password().
  Cache-Control: no-store on login responses so tokens are never cached.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import AuthRequest, MessageResponse, TokenPairResponse, UserResponse
from auth.dependencies import authenticate, get_bearer_token, try_get_identity
from auth.models import Identity
from auth.store import TokenStore, UserStore
from auth.tokens import authenticate_user, create_access_token, create_refresh_token
from core.config import get_settings
from core.errors import AuthorizationError, NotFoundError

# Auth policy:
# - POST /auth/register: public
# - POST /auth/login:    public, rate-limited
# - POST /auth/logout:   bearer token required (404 without one)
# - GET  /auth/me:       requires auth (authenticate)
router = APIRouter(prefix="/auth")


@router.post("/register", response_model=UserResponse, status_code=201)
def register(request: Request, body: AuthRequest) -> UserResponse:
    """Create a user with the default role.

    A duplicate email raises ConflictError inside the store, which the app
    renders as 409 {"message": "User with email ... already exists"}.
    """
    user_store: UserStore = request.app.state.user_store
    user = user_store.create_user(body.email, body.password)
    return UserResponse.from_user(user)


def _login_rate_limit() -> str:
    # Read per request so a changed setting applies without re-importing.
    return get_settings().login_rate_limit


# @router must be OUTERMOST so FastAPI registers the rate-limited wrapper.
# slowapi's middleware leaves decorated routes to that wrapper.
@router.post("/login", response_model=TokenPairResponse)
@limiter.limit(_login_rate_limit)
def login(request: Request, body: AuthRequest) -> JSONResponse:
    """Check credentials and issue an access/refresh token pair.

    Unknown email and wrong password get the same 401 so the response does
    not reveal which emails are registered.
    """
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        resp = JSONResponse(
            status_code=401,
            content=MessageResponse(message="Invalid email or password").model_dump(exclude_none=True),
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    access_token = create_access_token(user.id, user.email, user.role)
    refresh_token = create_refresh_token(user.id)
    user_store.set_refresh_token(user.email, refresh_token)

    resp = JSONResponse(
        status_code=200,
        content=TokenPairResponse(access_token=access_token, refresh_token=refresh_token).model_dump(by_alias=True),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/logout", response_model=MessageResponse, response_model_exclude_none=True)
async def logout(request: Request) -> MessageResponse:
    """Revoke the presented bearer token, then confirm.

    The token is revoked even if it is expired or already revoked. When it
    still verified, the owner's stored refresh token is revoked and cleared
    as well; if that owner no longer exists the request is refused with 403.
    Without a bearer token there is nothing to log out and the route
    answers like any unknown endpoint.
    """
    token = get_bearer_token(request)
    if token is None:
        raise NotFoundError()

    identity = try_get_identity(request)

    token_store: TokenStore = request.app.state.token_store
    token_store.revoke(token)

    if identity is not None:
        user_store: UserStore = request.app.state.user_store
        user = user_store.get_by_email(identity.email)
        if user is not None and user.refresh_token:
            token_store.revoke(user.refresh_token)
        if not user_store.set_refresh_token(identity.email, None):
            raise AuthorizationError()

    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def me(request: Request, identity: Identity = Depends(authenticate)) -> UserResponse:
    """Return the stored record for the authenticated caller."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(identity.id)
    if user is None:
        raise NotFoundError("User not found")
    return UserResponse.from_user(user)
