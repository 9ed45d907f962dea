"""HTTP transport for the club REST API"""

import asyncio
from typing import Any, Dict, Optional

import httpx
import structlog

from clubtable.auth.session import AuthSession
from clubtable.config import Settings, get_settings
from clubtable.errors import HttpError, NetworkError, UnauthorizedError
from clubtable.schemas.notification import parse_error_envelope

logger = structlog.get_logger()


class ApiClient:
    """Async JSON client with bearer auth and the retry policy.

    Network failures and 5xx responses are retried with linear backoff
    (``retry_backoff_seconds * attempt``). 4xx responses are raised at once.
    A 401 on an authenticated call logs the session out.
    """

    def __init__(
        self,
        session: AuthSession,
        settings: Optional[Settings] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.api_timeout_seconds,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the underlying client if this instance created it"""
        if self._owns_http:
            await self.http.aclose()

    def _headers(self, auth: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if auth and self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> Any:
        """Send a request, retrying transient failures"""
        attempts = max(1, self.settings.retry_attempts)

        for attempt in range(1, attempts + 1):
            try:
                return await self._send(method, path, json=json, params=params, auth=auth)
            except (NetworkError, HttpError) as e:
                if isinstance(e, HttpError) and not e.retryable:
                    raise
                if attempt == attempts:
                    raise

                delay = self.settings.retry_backoff_seconds * attempt
                logger.warning(
                    "Retrying API request",
                    method=method,
                    path=path,
                    attempt=attempt,
                    delay=delay,
                    error=e.message,
                )
                await asyncio.sleep(delay)

    async def _send(
        self,
        method: str,
        path: str,
        json: Any,
        params: Optional[Dict[str, Any]],
        auth: bool,
    ) -> Any:
        try:
            response = await self.http.request(
                method,
                path,
                json=json,
                params=params,
                headers=self._headers(auth),
            )
        except httpx.TransportError as e:
            logger.error("API request failed", method=method, path=path, error=str(e))
            raise NetworkError(str(e) or e.__class__.__name__, method=method, path=path) from e

        if response.status_code == 401 and auth:
            logger.warning("API rejected credentials", method=method, path=path)
            self.session.logout(reason="unauthorized")
            raise UnauthorizedError(method=method, path=path)

        if response.status_code == 204:
            return None

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            envelope = parse_error_envelope(data, response.status_code)
            logger.error(
                "API error",
                method=method,
                path=path,
                status=response.status_code,
                error=envelope.summary,
            )
            raise HttpError(response.status_code, envelope, method=method, path=path)

        return data

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, auth: bool = True) -> Any:
        return await self.request("POST", path, json=json, auth=auth)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
