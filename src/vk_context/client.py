"""
AsyncVK — wires the HTTP method client to message views.
"""

from typing import Any, Optional, Union

import httpx

from vk_context.constants import UpdateSource
from vk_context.message import MessageView
from vk_context.transport.http import DEFAULT_API_VERSION, DEFAULT_BASE_URL, HttpApiClient


class AsyncVK:
    """Async VK client (primary)."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_version: str = DEFAULT_API_VERSION,
        base_url: str = DEFAULT_BASE_URL,
        upload: Any = None,
        group_id: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api = HttpApiClient(
            access_token=access_token,
            api_version=api_version,
            base_url=base_url,
            transport=transport,
        )
        self.upload = upload
        self.group_id = group_id

    def message_context(
        self,
        payload: Any,
        source: str = UpdateSource.WEBHOOK,
        update_type: Union[str, int] = "message_new",
        state: Optional[dict[str, Any]] = None,
    ) -> MessageView:
        """Build a view over an incoming update (webhook object or long-poll array)."""
        return MessageView(
            self.api,
            payload,
            source,
            upload=self.upload,
            update_type=update_type,
            group_id=self.group_id,
            state=state,
        )

    async def fetch_message(
        self,
        message_id: int = 0,
        peer_id: Optional[int] = None,
        conversation_message_id: Optional[int] = None,
    ) -> MessageView:
        """Fetch a full message by id, or by conversation message id within a peer."""
        stub = self.message_context(
            {"id": message_id, "peer_id": peer_id, "conversation_message_id": conversation_message_id},
            UpdateSource.API,
        )
        await stub.promote(force=True)
        return stub

    async def close(self) -> None:
        await self.api.close()

    async def __aenter__(self) -> "AsyncVK":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
