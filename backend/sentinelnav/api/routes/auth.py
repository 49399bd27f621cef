"""Auth Routes — administrator login/logout and session introspection.

Invariants:
    - The session token travels in an httpOnly, SameSite=strict cookie for 24 hours
    - Logout only clears the cookie: tokens are stateless and expire on their own
"""

from fastapi import APIRouter, Depends, Response

from sentinelnav.api.dependencies import (
    AUTH_COOKIE, get_settings_dep, get_token_issuer, require_session,
)
from sentinelnav.config import Settings
from sentinelnav.core.domain_types import SESSION_TTL_MS
from sentinelnav.core.tokens import SessionClaims, TokenIssuer
from sentinelnav.schemas.auth import LoginRequest, MeResponse, SessionUser
from sentinelnav.schemas.site import SuccessResponse
from sentinelnav.services.authentication import login

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=SuccessResponse)
async def login_admin(
    body: LoginRequest,
    response: Response,
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings_dep),
):
    token = login(
        issuer,
        username=body.username,
        password=body.password,
        captcha_token=body.captcha_token,
        captcha_answer=body.captcha_answer,
        admin_username=settings.admin_username,
        admin_password_hash=settings.admin_password_hash,
    )
    response.set_cookie(
        AUTH_COOKIE,
        token,
        max_age=SESSION_TTL_MS // 1000,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path="/",
    )
    return SuccessResponse(success=True)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response, settings: Settings = Depends(get_settings_dep)):
    response.delete_cookie(
        AUTH_COOKIE, path="/", httponly=True,
        secure=settings.cookie_secure, samesite="strict",
    )
    return SuccessResponse(success=True)


@router.get("/me", response_model=MeResponse)
async def me(claims: SessionClaims = Depends(require_session)):
    return MeResponse(user=SessionUser(username=claims.subject, role=claims.role))
