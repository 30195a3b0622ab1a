"""
Attachment descriptors — tagged by `type`.

Referenceable kinds carry owner/id and can be re-attached to another
message as `"{type}{owner_id}_{id}[_{access_key}]"`. Everything else is an
ExternalAttachment that only exposes its raw payload.
"""

from typing import Any, Optional, Union
from pydantic import BaseModel, Field

from vk_context.constants import AttachmentType

REFERENCEABLE_TYPES = {
    AttachmentType.PHOTO,
    AttachmentType.VIDEO,
    AttachmentType.AUDIO,
    AttachmentType.DOCUMENT,
    AttachmentType.WALL,
    AttachmentType.MARKET,
    AttachmentType.MARKET_ALBUM,
    AttachmentType.POLL,
    AttachmentType.STORY,
    AttachmentType.GRAFFITI,
    AttachmentType.AUDIO_MESSAGE,
}


class Attachment(BaseModel):
    type: str
    owner_id: int
    id: int
    access_key: Optional[str] = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def can_be_attached(self) -> bool:
        return True

    def __str__(self) -> str:
        ref = f"{self.type}{self.owner_id}_{self.id}"
        if self.access_key:
            ref += f"_{self.access_key}"
        return ref


class ExternalAttachment(BaseModel):
    type: str
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def can_be_attached(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.type


AttachmentDescriptor = Union[Attachment, ExternalAttachment]


def transform_attachment(raw: dict[str, Any]) -> AttachmentDescriptor:
    """Build a descriptor from a `{type, <type>: {...}}` wire object."""
    kind = raw["type"]
    payload = raw.get(kind) or {}
    if kind in REFERENCEABLE_TYPES and "id" in payload and "owner_id" in payload:
        return Attachment(
            type=kind,
            owner_id=payload["owner_id"],
            id=payload["id"],
            access_key=payload.get("access_key"),
            payload=payload,
        )
    return ExternalAttachment(type=kind, payload=payload)


def transform_attachments(raw: Optional[list[dict[str, Any]]]) -> list[AttachmentDescriptor]:
    return [transform_attachment(item) for item in raw or []]
