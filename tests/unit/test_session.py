"""Unit tests for the session store and auth client"""

import httpx
import pytest
from ride_ledger.domain.exceptions import AuthProviderError, NotAuthenticatedError, ValidationError
from ride_ledger.infrastructure.clients.auth import AuthClient
from ride_ledger.services.session import SIGNED_IN, SIGNED_OUT, SessionStore


async def test_sign_in_normalizes_email_and_stores_session(auth_client: AuthClient):
    store = SessionStore(auth_client)
    events = []
    store.subscribe(lambda event, session: events.append((event, session.user.id if session else None)))

    session = await store.sign_in("  Driver@Example.COM ", "secret123")

    assert session.access_token == "valid-token"
    assert store.require_user().id == "driver-1"
    assert events == [(SIGNED_IN, "driver-1")]


async def test_sign_in_wrong_password(auth_client: AuthClient):
    store = SessionStore(auth_client)

    with pytest.raises(AuthProviderError) as exc_info:
        await store.sign_in("driver@example.com", "wrong")

    assert str(exc_info.value) == "Invalid email or password"
    assert exc_info.value.unavailable is False
    assert store.current is None


async def test_sign_in_requires_fields(auth_client: AuthClient):
    with pytest.raises(ValidationError):
        await SessionStore(auth_client).sign_in("", "secret123")


async def test_sign_out_clears_session(auth_client: AuthClient):
    store = SessionStore(auth_client)
    events = []
    await store.sign_in("driver@example.com", "secret123")
    store.subscribe(lambda event, session: events.append(event))

    await store.sign_out()

    assert store.current is None
    assert events == [SIGNED_OUT]
    with pytest.raises(NotAuthenticatedError):
        store.require_user()


async def test_unsubscribe_stops_notifications(auth_client: AuthClient):
    store = SessionStore(auth_client)
    events = []
    unsubscribe = store.subscribe(lambda event, session: events.append(event))
    unsubscribe()

    await store.sign_in("driver@example.com", "secret123")

    assert events == []


async def test_restore_from_token(auth_client: AuthClient):
    store = SessionStore(auth_client)

    session = await store.restore("valid-token")

    assert session.user.email == "driver@example.com"
    assert store.user.id == "driver-1"


async def test_restore_rejects_unknown_token(auth_client: AuthClient):
    with pytest.raises(NotAuthenticatedError):
        await SessionStore(auth_client).restore("stale-token")


@pytest.mark.parametrize(
    "email, password, confirm",
    [
        ("", "secret123", "secret123"),
        ("new@example.com", "secret123", "secret124"),
        ("new@example.com", "short", "short"),
    ],
)
async def test_sign_up_form_checks(auth_client: AuthClient, email, password, confirm):
    with pytest.raises(ValidationError):
        await SessionStore(auth_client).sign_up(email, password, confirm)


async def test_sign_up_pending_confirmation(auth_client: AuthClient):
    result = await SessionStore(auth_client).sign_up("New@Example.com", "secret123", "secret123")

    assert result.user.id == "new-driver"
    assert result.confirmation_pending is True


async def test_sign_up_existing_account(auth_client: AuthClient):
    with pytest.raises(AuthProviderError) as exc_info:
        await SessionStore(auth_client).sign_up("driver@example.com", "secret123", "secret123")

    assert str(exc_info.value) == "An account with this email already exists"


async def test_auth_provider_down():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = AuthClient(base_url="http://auth.test", api_key="k", transport=httpx.MockTransport(handler))

    with pytest.raises(AuthProviderError) as exc_info:
        await SessionStore(client).sign_in("driver@example.com", "secret123")

    assert exc_info.value.unavailable is True


async def test_auth_client_sends_api_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["apikey"] = request.headers.get("apikey")
        seen["grant_type"] = request.url.params.get("grant_type")
        return httpx.Response(400, json={"msg": "Email not confirmed"})

    client = AuthClient(base_url="http://auth.test", api_key="anon-key", transport=httpx.MockTransport(handler))

    with pytest.raises(AuthProviderError) as exc_info:
        await client.sign_in("driver@example.com", "secret123")

    assert seen == {"apikey": "anon-key", "grant_type": "password"}
    assert str(exc_info.value) == "Please confirm your email before signing in"


@pytest.mark.parametrize("body", [["bad request"], "bad request", {"msg": 42}])
async def test_auth_rejection_with_unexpected_body(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json=body)

    client = AuthClient(base_url="http://auth.test", api_key="k", transport=httpx.MockTransport(handler))

    with pytest.raises(AuthProviderError) as exc_info:
        await SessionStore(client).sign_in("driver@example.com", "secret123")

    assert exc_info.value.unavailable is False
    assert str(exc_info.value)
