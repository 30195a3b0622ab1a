"""
Collaborator contracts consumed by message views.
"""

from typing import Any, Optional, Protocol

from vk_context.models.attachments import AttachmentDescriptor


class RemoteClient(Protocol):
    async def call(self, method: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Invoke `method` (e.g. "messages.send"); raise RemoteOperationFailed on failure."""
        ...


class UploadClient(Protocol):
    async def message_photo(self, source: Any, *, peer_id: int) -> AttachmentDescriptor: ...

    async def message_document(self, source: Any, *, peer_id: int) -> AttachmentDescriptor: ...

    async def audio_message(self, source: Any, *, peer_id: int) -> AttachmentDescriptor: ...

    async def chat_photo(self, source: Any, *, chat_id: int, **params: Any) -> dict[str, Any]: ...
