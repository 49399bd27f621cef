"""API Dependencies — per-request access to the process-wide collaborators.

Invariants:
    - Store, issuer and orchestrator are built once by the lifespan and read
      from app.state; routes never construct them
    - require_session accepts the auth_token cookie first, then a Bearer header
    - A missing, tampered or expired token is always 401 UNAUTHORIZED
"""

from fastapi import Depends, Request

from sentinelnav.config import Settings, get_settings
from sentinelnav.core.errors import UnauthorizedError
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.core.tokens import SessionClaims, TokenIssuer
from sentinelnav.services.monitoring import MonitoringOrchestrator

AUTH_COOKIE = "auth_token"


def get_settings_dep() -> Settings:
    return get_settings()


def get_store(request: Request) -> PersistenceStore:
    return request.app.state.store


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_orchestrator(request: Request) -> MonitoringOrchestrator:
    return request.app.state.orchestrator


def session_token(request: Request) -> str | None:
    """Raw session token from the cookie or Authorization header, if any."""
    token = request.cookies.get(AUTH_COOKIE)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def optional_session(
    request: Request, issuer: TokenIssuer = Depends(get_token_issuer),
) -> SessionClaims | None:
    token = session_token(request)
    return issuer.verify_session(token) if token else None


def require_session(
    claims: SessionClaims | None = Depends(optional_session),
) -> SessionClaims:
    if claims is None:
        raise UnauthorizedError()
    return claims
