"""HTTP client for the Gemini image generation API."""

import logging
from typing import Any

import httpx

from ..config import GeminiConfig
from ..models import GenerationRequest

logger = logging.getLogger(__name__)


class ServiceResponseError(Exception):
    """The service answered with a non-2xx status or an unreadable body."""


class GeminiClient:
    """Client for Gemini's ``generateContent`` endpoint.

    Created once per process and shared by every request of a run.
    """

    def __init__(
        self,
        config: GeminiConfig,
        api_key: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-goog-api-key"] = self._api_key
        return headers

    async def check_connection(self) -> bool:
        """Verify the model endpoint is reachable with the configured key."""
        try:
            response = await self.client.get(self.config.model_url, headers=self._headers())
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def generate_content(self, request: GenerationRequest) -> dict[str, Any]:
        """Send one generation request and return the decoded JSON response.

        Raises:
            httpx.HTTPError: on transport failures and timeouts
            ServiceResponseError: on non-2xx status or a malformed body
        """
        url = f"{self.config.base_url}/models/{request.model}:generateContent"
        response = await self.client.post(
            url,
            json=request.to_payload(),
            headers=self._headers(),
        )

        if not response.is_success:
            raise ServiceResponseError(
                f"service returned HTTP {response.status_code}: {_error_detail(response)}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ServiceResponseError(f"service returned a malformed response: {e}") from e

        if not isinstance(body, dict):
            raise ServiceResponseError("service returned a malformed response")
        return body

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


def _error_detail(response: httpx.Response) -> str:
    """Pull the error message out of a service error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message") or body["error"])[:500]
    return response.text[:500]
