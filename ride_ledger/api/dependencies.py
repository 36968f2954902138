"""Dependency injection for FastAPI endpoints"""

import logging
from typing import NoReturn, List, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ride_ledger.config import settings
from ride_ledger.domain.exceptions import AuthProviderError, NotAuthenticatedError
from ride_ledger.domain.models import UserIdentity
from ride_ledger.infrastructure.clients.auth import AuthClient
from ride_ledger.infrastructure.clients.routing import RoutingClient
from ride_ledger.infrastructure.observability.metrics import auth_failures_counter
from ride_ledger.services.session import SessionStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_auth_client() -> AuthClient:
    """Provide auth provider client instance"""
    return AuthClient()


def get_routing_client() -> RoutingClient:
    """Provide geocoding/routing client instance"""
    return RoutingClient()


def error_detail(message: str, fields: Optional[List[str]] = None) -> dict:
    """Transient error notification shown to the user"""
    return {
        "type": "error",
        "message": message,
        "dismiss_after_ms": settings.notification_dismiss_ms,
        "fields": fields or [],
    }


def fail(status_code: int, message: str, fields: Optional[List[str]] = None) -> NoReturn:
    raise HTTPException(status_code=status_code, detail=error_detail(message, fields))


async def get_session_store(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_client: AuthClient = Depends(get_auth_client),
) -> SessionStore:
    """Session for the bearer token on the request; 401 when there is none"""
    store = SessionStore(auth_client)
    if credentials is None:
        fail(401, "Please sign in")

    try:
        await store.restore(credentials.credentials)
    except NotAuthenticatedError:
        fail(401, "Your session has expired, please sign in again")
    except AuthProviderError as e:
        auth_failures_counter.labels(operation="get_user").inc()
        logging.error(f"Auth provider error: {e}", extra={"request_id": get_request_id(request)})
        fail(503, "Authentication service unavailable")

    return store


def get_current_user(store: SessionStore = Depends(get_session_store)) -> UserIdentity:
    """Identity of the signed-in user, passed explicitly to each handler"""
    return store.require_user()
