"""Sign-in, sign-up and sign-out against the auth provider"""

import logging
from fastapi import APIRouter, Depends, Request

from ride_ledger.api.v1.schemas import (
    DeleteResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
    UserSchema,
    success,
)
from ride_ledger.api.dependencies import (
    fail,
    get_auth_client,
    get_current_user,
    get_request_id,
    get_session_store,
)
from ride_ledger.domain.exceptions import AuthProviderError, ValidationError
from ride_ledger.domain.models import UserIdentity
from ride_ledger.infrastructure.clients.auth import AuthClient
from ride_ledger.infrastructure.observability.metrics import auth_failures_counter
from ride_ledger.services.session import SessionStore

router = APIRouter()


@router.post("/auth/sign-in", response_model=SessionResponse)
async def sign_in(
    request_body: SignInRequest,
    request: Request,
    auth_client: AuthClient = Depends(get_auth_client),
):
    """Exchange email and password for a session"""
    request_id = get_request_id(request)
    store = SessionStore(auth_client)

    try:
        session = await store.sign_in(request_body.email, request_body.password)
    except ValidationError as e:
        fail(422, str(e), e.fields)
    except AuthProviderError as e:
        auth_failures_counter.labels(operation="sign_in").inc()
        logging.warning(f"Sign-in failed: {e}", extra={"request_id": request_id})
        if e.unavailable:
            fail(503, "Authentication service unavailable")
        fail(400, str(e))

    return SessionResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user=UserSchema(id=session.user.id, email=session.user.email),
        notification=success("Signed in"),
    )


@router.post("/auth/sign-up", response_model=SignUpResponse, status_code=201)
async def sign_up(
    request_body: SignUpRequest,
    request: Request,
    auth_client: AuthClient = Depends(get_auth_client),
):
    """Register a new driver account"""
    request_id = get_request_id(request)
    store = SessionStore(auth_client)

    try:
        result = await store.sign_up(
            request_body.email,
            request_body.password,
            request_body.confirm_password,
        )
    except ValidationError as e:
        fail(422, str(e), e.fields)
    except AuthProviderError as e:
        auth_failures_counter.labels(operation="sign_up").inc()
        logging.warning(f"Sign-up failed: {e}", extra={"request_id": request_id})
        if e.unavailable:
            fail(503, "Authentication service unavailable")
        fail(400, str(e))

    message = (
        "Account created, check your email to confirm it"
        if result.confirmation_pending
        else "Account created successfully"
    )
    return SignUpResponse(
        user=UserSchema(id=result.user.id, email=result.user.email),
        confirmation_pending=result.confirmation_pending,
        notification=success(message),
    )


@router.post("/auth/sign-out", response_model=DeleteResponse)
async def sign_out(
    request: Request,
    store: SessionStore = Depends(get_session_store),
):
    try:
        await store.sign_out()
    except AuthProviderError as e:
        auth_failures_counter.labels(operation="sign_out").inc()
        logging.error(f"Sign-out failed: {e}", extra={"request_id": get_request_id(request)})
        fail(503 if e.unavailable else 400, "Could not sign out")

    return DeleteResponse(notification=success("Signed out"))


@router.get("/auth/me", response_model=UserSchema)
def me(user: UserIdentity = Depends(get_current_user)):
    return UserSchema(id=user.id, email=user.email)
