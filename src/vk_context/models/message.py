"""
Message wire models — the `message_new` object and its envelope.
"""

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, Field

from vk_context.constants import ActionKindName, ButtonKind


class GeoCoordinates(BaseModel):
    latitude: float
    longitude: float


class Geo(BaseModel):
    type: str = "point"
    coordinates: Optional[GeoCoordinates] = None
    place: Optional[dict[str, Any]] = None

    model_config = {"extra": "allow"}


class ActionEvent(BaseModel):
    """Service action attached to a chat message (`message.action`)."""
    type: ActionKindName
    member_id: Optional[int] = None
    text: Optional[str] = None
    email: Optional[str] = None
    photo: Optional[dict[str, str]] = None


class MessageFragment(BaseModel):
    """A message record, top-level or embedded as a reply/forward.

    `id` and `peer_id` are deliberately optional: embedded fragments often
    omit them and a missing value surfaces in the accessors that use it.
    """
    id: Optional[int] = None
    conversation_message_id: Optional[int] = None
    out: int = 0
    peer_id: Optional[int] = None
    from_id: Optional[int] = None
    text: Optional[str] = None
    date: int = 0
    update_time: Optional[int] = None
    random_id: int = 0
    ref: Optional[str] = None
    ref_source: Optional[str] = None
    attachments: list[dict[str, Any]] = Field(default_factory=list)
    important: bool = False
    geo: Optional[Geo] = None
    payload: Optional[str] = None
    reply_message: Optional[MessageFragment] = None
    fwd_messages: list[MessageFragment] = Field(default_factory=list)
    action: Optional[ActionEvent] = None

    model_config = {"extra": "allow"}


class ClientCapabilities(BaseModel):
    """`client_info` — defaults are what bare fragments get synthesized with."""
    button_actions: list[str] = Field(default_factory=lambda: [ButtonKind.TEXT])
    keyboard: bool = True
    inline_keyboard: bool = False
    carousel: bool = False
    lang_id: int = 0


class Envelope(BaseModel):
    message: MessageFragment
    client_info: ClientCapabilities = Field(default_factory=ClientCapabilities)


MessageFragment.model_rebuild()
