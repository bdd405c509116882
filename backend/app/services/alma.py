from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.config import settings
from app.core.errors import AlmaApiError

logger = logging.getLogger(__name__)

USERS_PATH = "/almaws/v1/users"


class AlmaUsersClient:
    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._client = httpx.AsyncClient(
            base_url=(base_url or "").rstrip("/"),
            timeout=httpx.Timeout(timeout_s),
            transport=transport,
            headers={
                "Accept": "application/json",
                "Authorization": f"apikey {self._api_key}",
            },
        )

    @classmethod
    def from_settings(cls, transport: httpx.AsyncBaseTransport | None = None) -> "AlmaUsersClient":
        return cls(
            api_key=settings.ALMA_API_KEY,
            base_url=settings.ALMA_API_URL,
            timeout_s=settings.ALMA_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AlmaUsersClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def create_user(self, user: dict[str, Any]) -> dict[str, Any]:
        """POST a new user. Returns the created user as sent back by Alma."""
        try:
            resp = await self._client.post(
                USERS_PATH,
                params={"social_authentication": "false"},
                json=user,
            )
        except httpx.HTTPError as exc:
            logger.warning("Users API request failed: %s", exc)
            raise AlmaApiError(f"Users API request failed: {exc}") from exc

        if resp.status_code >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            logger.warning("Users API returned %s for POST %s", resp.status_code, USERS_PATH)
            raise AlmaApiError(
                f"Users API error {resp.status_code}: {resp.reason_phrase}",
                status_code=resp.status_code,
                payload=payload,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise AlmaApiError("Users API returned a non-JSON response", status_code=resp.status_code) from exc
        if not isinstance(data, dict):
            raise AlmaApiError("Users API returned an unexpected response", status_code=resp.status_code)
        return data
