"""
Remote authentication client.

Transport layer only: it reports what the server said as an AuthResult and
never raises for an unreachable or unhappy backend. Choosing the local
fallback is the identity store's job.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from whispernotes.config import settings
from whispernotes.logging import get_logger
from whispernotes.models import AuthResult, ProfileUpdate, SignInRequest, SignUpRequest, User

logger = get_logger('services.auth_client')

LOGIN_PATH = "/api/auth/login"
SIGNUP_PATH = "/api/auth/signup"
PROFILE_PATH = "/api/auth/profile"

TRANSIENT_STATUS_CODES = {429, 502, 503, 504}


class AuthClient:
    """Client for the /api/auth endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (settings.API_BASE_URL if base_url is None else base_url).rstrip("/")
        self.timeout = settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self.max_retries = settings.AUTH_MAX_RETRIES if max_retries is None else max_retries
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.token: Optional[str] = None

        if not self.base_url:
            logger.warning("API_BASE_URL not set - identity runs in local-only mode")

    @property
    def is_available(self) -> bool:
        return bool(self.base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _is_transient_error(self, error: Exception) -> bool:
        if isinstance(error, (httpx.TimeoutException, httpx.TransportError)):
            return True
        if isinstance(error, httpx.HTTPStatusError):
            return error.response.status_code in TRANSIENT_STATUS_CODES
        return False

    async def _run_with_retry(
        self,
        operation_name: str,
        operation: Callable[[], Awaitable[httpx.Response]],
    ) -> httpx.Response:
        total_attempts = max(int(self.max_retries), 0) + 1
        base_delay = max(float(settings.AUTH_RETRY_BASE_SECONDS), 0.0)
        max_delay = max(float(settings.AUTH_RETRY_MAX_SECONDS), base_delay)

        attempt = 1
        while True:
            try:
                response = await operation()
                if response.status_code in TRANSIENT_STATUS_CODES:
                    response.raise_for_status()
                return response
            except httpx.HTTPStatusError as error:
                if attempt >= total_attempts:
                    return error.response
                last_error: Exception = error
            except httpx.HTTPError as error:
                if attempt >= total_attempts or not self._is_transient_error(error):
                    raise
                last_error = error

            delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
            logger.warning(
                "Auth %s failed (attempt %d/%d): %s. Retrying in %.2fs",
                operation_name,
                attempt,
                total_attempts,
                last_error,
                delay,
            )
            if delay > 0:
                await asyncio.sleep(delay)
            attempt += 1

    def _error_message(self, response: httpx.Response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return default
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return default

    def _parse_user(self, response: httpx.Response, default_error: str) -> AuthResult:
        if not response.is_success:
            return AuthResult(
                success=False,
                error=self._error_message(response, default_error),
                status_code=response.status_code,
            )
        try:
            body = response.json()
            user = User.model_validate(body["user"])
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            return AuthResult(
                success=False,
                error=f"Malformed auth response: {e}",
                status_code=response.status_code,
            )
        token = body.get("token") if isinstance(body.get("token"), str) else None
        return AuthResult(success=True, user=user, token=token, status_code=response.status_code)

    async def _call(
        self,
        operation_name: str,
        method: str,
        path: str,
        payload: dict[str, Any],
        default_error: str,
    ) -> AuthResult:
        if not self.is_available:
            return AuthResult(success=False, error="Auth service unavailable")

        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        try:
            response = await self._run_with_retry(
                operation_name,
                lambda: self.client.request(method, path, json=payload, headers=headers),
            )
        except httpx.HTTPError as e:
            logger.warning(f"Auth {operation_name} request failed: {e}")
            return AuthResult(success=False, error=str(e) or type(e).__name__)

        result = self._parse_user(response, default_error)
        if result.success and result.token:
            self.token = result.token
        return result

    # ── Endpoints ──

    async def login(self, email: str, password: str) -> AuthResult:
        body = SignInRequest(email=email, password=password)
        return await self._call("login", "POST", LOGIN_PATH, body.model_dump(), "Login failed")

    async def signup(self, name: str, email: str, password: str) -> AuthResult:
        body = SignUpRequest(name=name, email=email, password=password)
        return await self._call("signup", "POST", SIGNUP_PATH, body.model_dump(), "Signup failed")

    async def update_profile(self, changes: ProfileUpdate) -> AuthResult:
        return await self._call(
            "update_profile", "PATCH", PROFILE_PATH, changes.changes(), "Profile update failed"
        )

    def forget_token(self) -> None:
        self.token = None
