"""HTTP client for the registration API."""

import logging
from dataclasses import dataclass, field

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"


@dataclass(frozen=True)
class ApiResponse:
    """Status and JSON body of one call. status_code is None when the request never completed."""

    status_code: int | None
    body: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300


class RegistrationApiClient:
    """Thin wrapper over httpx. Never raises on transport errors; returns ApiResponse(None)."""

    def __init__(self, client: httpx.Client | None = None, base_url: str = DEFAULT_API_URL) -> None:
        self._client = client or httpx.Client(base_url=base_url)

    def close(self) -> None:
        self._client.close()

    def _call(self, method: str, path: str, **kwargs) -> ApiResponse:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return ApiResponse(status_code=None)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return ApiResponse(status_code=response.status_code, body=body)

    def create_contact(self, name: str, email: str, phone: str) -> ApiResponse:
        return self._call(
            "POST",
            "/api/contacts",
            json={"name": name, "email": email, "phone": phone},
        )

    def count(self) -> int | None:
        """Running total, or None if it could not be fetched."""
        response = self._call("GET", "/api/contacts/count")
        if not response.ok or not response.body.get("success"):
            return None
        count = response.body.get("count")
        return count if isinstance(count, int) else None

    def sheet_url(self) -> str | None:
        response = self._call("GET", "/api/contacts/sheet-url")
        if not response.ok or not response.body.get("success"):
            return None
        return response.body.get("url") or None
