"""Auth provider HTTP client (GoTrue-style password auth)"""

import httpx
from typing import Any, Dict, Optional
from ride_ledger.domain.models import AuthSession, SignUpResult, UserIdentity
from ride_ledger.domain.exceptions import AuthProviderError, NotAuthenticatedError
from ride_ledger.config import settings

# Provider messages mapped to what the user sees
FRIENDLY_MESSAGES = {
    "invalid login credentials": "Invalid email or password",
    "email not confirmed": "Please confirm your email before signing in",
    "user already registered": "An account with this email already exists",
}


def friendly_message(payload: Dict[str, Any], fallback: str) -> str:
    raw = str(payload.get("msg") or payload.get("error_description") or payload.get("message") or "")
    return FRIENDLY_MESSAGES.get(raw.strip().lower(), raw or fallback)


def _parse_user(data: Dict[str, Any]) -> UserIdentity:
    return UserIdentity(id=str(data["id"]), email=data.get("email", ""))


class AuthClient:
    """Client for the hosted auth provider"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.auth_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.auth_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self, access_token: str | None = None) -> Dict[str, str]:
        headers = {"apikey": self.api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        fallback_message: str,
        access_token: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Single attempt against the provider.

        Raises:
            AuthProviderError: provider rejected the request (4xx) or is
                unreachable (timeout, network error, 5xx)
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=self._headers(access_token),
                    **kwargs,
                )
                response.raise_for_status()
                return response

            except httpx.TimeoutException as e:
                raise AuthProviderError(f"Auth service timeout after {self.timeout}s", unavailable=True) from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code >= 500:
                    raise AuthProviderError("Auth service unavailable", unavailable=True) from e
                try:
                    payload = e.response.json()
                except ValueError:
                    payload = {}
                if not isinstance(payload, dict):
                    payload = {}
                raise AuthProviderError(friendly_message(payload, fallback_message)) from e
            except httpx.RequestError as e:
                raise AuthProviderError(f"Auth service unreachable: {e}", unavailable=True) from e

    async def sign_in(self, email: str, password: str) -> AuthSession:
        response = await self._request(
            "POST",
            "/auth/v1/token",
            "Unexpected error while signing in",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        try:
            data = response.json()
            return AuthSession(
                access_token=data["access_token"],
                refresh_token=data.get("refresh_token"),
                expires_in=data.get("expires_in"),
                user=_parse_user(data["user"]),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise AuthProviderError(f"Invalid session data from auth service: {e}", unavailable=True) from e

    async def sign_up(self, email: str, password: str) -> SignUpResult:
        response = await self._request(
            "POST",
            "/auth/v1/signup",
            "Unexpected error while registering",
            json={"email": email, "password": password},
        )
        try:
            data = response.json()
            # Autoconfirm projects answer with a session, others with the bare user
            if "access_token" in data:
                return SignUpResult(user=_parse_user(data["user"]), confirmation_pending=False)
            return SignUpResult(user=_parse_user(data), confirmation_pending=not data.get("email_confirmed_at"))
        except (KeyError, ValueError, TypeError) as e:
            raise AuthProviderError(f"Invalid sign-up data from auth service: {e}", unavailable=True) from e

    async def sign_out(self, access_token: str) -> None:
        await self._request("POST", "/auth/v1/logout", "Unexpected error while signing out", access_token=access_token)

    async def get_user(self, access_token: str) -> UserIdentity:
        """
        Resolve an access token to the user it was issued for.

        Raises:
            NotAuthenticatedError: token expired, revoked or unknown
        """
        try:
            response = await self._request("GET", "/auth/v1/user", "Session expired", access_token=access_token)
        except AuthProviderError as e:
            if e.unavailable:
                raise
            raise NotAuthenticatedError(str(e)) from e

        try:
            return _parse_user(response.json())
        except (KeyError, ValueError, TypeError) as e:
            raise AuthProviderError(f"Invalid user data from auth service: {e}", unavailable=True) from e
