"""Async HTTP client for the bank API that attaches the session bearer token."""

from typing import Any

import httpx

from bank_client.api.models import Credentials, TokenResponse, UserProfile
from bank_client.auth.errors import SessionExpired
from bank_client.auth.models import ClearReport
from bank_client.auth.session_gate import SessionGate
from bank_client.config import API_BASE_URL, API_TIMEOUT_SECONDS
from bank_client.utils.logger import get_logger

logger = get_logger("bank_client.api.client")

# Endpoints relative to API_BASE_URL
LOGIN_PATH = "/auth/login"
REGISTER_PATH = "/auth/register"
ME_PATH = "/auth/me"


class BankApiClient:
    """Thin wrapper over httpx.AsyncClient.

    Authenticated requests read the token through the gate on every call, so a
    logout takes effect immediately. A 401 response logs the session out locally
    and raises SessionExpired.
    """

    def __init__(
        self,
        gate: SessionGate,
        base_url: str = API_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._gate = gate
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(API_TIMEOUT_SECONDS),
        )

    async def __aenter__(self) -> "BankApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        if authenticated:
            token = await self._gate.get_current_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
            else:
                logger.warning("api.request.no_token", method=method, path=path)

        response = await self._http.request(method, path, json=json, headers=headers)
        logger.debug("api.request", method=method, path=path, status_code=response.status_code)

        if response.status_code == 401 and authenticated:
            logger.warning("api.request.unauthorized", method=method, path=path)
            await self._gate.on_logout()
            raise SessionExpired(f"{method} {path} rejected the session token")
        response.raise_for_status()
        return response

    async def login(self, username: str, password: str) -> TokenResponse:
        """Authenticate and establish the local session.

        PersistenceFailure propagates when the token cannot be stored; the user stays signed out.
        """
        body = Credentials(username=username, password=password)
        response = await self.request("POST", LOGIN_PATH, json=body.model_dump(), authenticated=False)
        result = TokenResponse.model_validate(response.json())
        await self._gate.on_login_success(result.token or "")
        logger.info("api.login.ok", username=username)
        return result

    async def register(self, username: str, password: str) -> TokenResponse:
        """Create an account. Signs in as well when the server returns a token."""
        body = Credentials(username=username, password=password)
        response = await self.request("POST", REGISTER_PATH, json=body.model_dump(), authenticated=False)
        result = TokenResponse.model_validate(response.json())
        if result.token:
            await self._gate.on_login_success(result.token)
        logger.info("api.register.ok", username=username, signed_in=bool(result.token))
        return result

    async def logout(self) -> ClearReport:
        """Local logout. The API has no server-side session to end."""
        return await self._gate.on_logout()

    async def get_my_profile(self) -> UserProfile:
        response = await self.request("GET", ME_PATH)
        return UserProfile.model_validate(response.json())
