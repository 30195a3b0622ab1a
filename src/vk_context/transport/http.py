"""
VK API method client over HTTP.
"""

import json
import logging
from typing import Any, Optional

import httpx

from vk_context.errors import RemoteOperationFailed

DEFAULT_BASE_URL = "https://api.vk.com/method"
DEFAULT_API_VERSION = "5.131"

logger = logging.getLogger(__name__)


def _encode_params(params: dict[str, Any]) -> dict[str, str]:
    """VK takes form fields: lists as comma-separated values, objects as JSON."""
    encoded: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            encoded[key] = ",".join(str(item) for item in value)
        elif isinstance(value, dict):
            encoded[key] = json.dumps(value)
        elif isinstance(value, bool):
            encoded[key] = str(int(value))
        else:
            encoded[key] = str(value)
    return encoded


class HttpApiClient:
    def __init__(
        self,
        access_token: Optional[str] = None,
        api_version: str = DEFAULT_API_VERSION,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token = access_token
        self._api_version = api_version
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "vk-context/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def set_token(self, token: str) -> None:
        self._token = token

    @staticmethod
    def _unwrap(method: str, params: dict[str, Any], json_data: Any) -> Any:
        """Unwrap the standard VK response: { "response": <data> } or { "error": {...} }"""
        if isinstance(json_data, dict) and "error" in json_data:
            error = json_data["error"]
            raise RemoteOperationFailed(
                error.get("error_code", "api_error"),
                f"{method}: {error.get('error_msg', 'unknown error')}",
                details=params,
            )
        if isinstance(json_data, dict) and "response" in json_data:
            return json_data["response"]
        return json_data

    async def call(self, method: str, params: Optional[dict[str, Any]] = None) -> Any:
        params = params or {}
        form = _encode_params(params)
        form["v"] = self._api_version
        if self._token:
            form["access_token"] = self._token

        logger.debug("Calling %s", method)
        resp = await self._client.post(f"/{method}", data=form)
        if resp.status_code >= 400:
            raise RemoteOperationFailed("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}", details=params)
        return self._unwrap(method, params, resp.json())

    async def close(self) -> None:
        await self._client.aclose()
