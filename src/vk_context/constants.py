"""
Shared constants — peer ranges, update sources and wire tags.
"""

from typing import Literal

# Peer ids above this value address multi-user chats (chat_id = peer_id - CHAT_PEER_BASE)
CHAT_PEER_BASE = 2_000_000_000


class UpdateSource:
    POLLING = "polling"
    WEBHOOK = "webhook"
    API = "api"


class PeerType:
    USER = "user"
    GROUP = "group"
    CHAT = "chat"


class AttachmentType:
    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "doc"
    LINK = "link"
    STICKER = "sticker"
    WALL = "wall"
    WALL_REPLY = "wall_reply"
    MARKET = "market"
    MARKET_ALBUM = "market_album"
    POLL = "poll"
    GIFT = "gift"
    GRAFFITI = "graffiti"
    AUDIO_MESSAGE = "audio_message"
    STORY = "story"


class ButtonKind:
    TEXT = "text"
    VKPAY = "vkpay"
    OPEN_APP = "open_app"
    LOCATION = "location"
    OPEN_LINK = "open_link"
    CALLBACK = "callback"


class ActionKind:
    CHAT_PHOTO_UPDATE = "chat_photo_update"
    CHAT_PHOTO_REMOVE = "chat_photo_remove"
    CHAT_CREATE = "chat_create"
    CHAT_TITLE_UPDATE = "chat_title_update"
    CHAT_INVITE_USER = "chat_invite_user"
    CHAT_KICK_USER = "chat_kick_user"
    CHAT_PIN_MESSAGE = "chat_pin_message"
    CHAT_UNPIN_MESSAGE = "chat_unpin_message"
    CHAT_INVITE_USER_BY_LINK = "chat_invite_user_by_link"


ActionKindName = Literal[
    "chat_photo_update",
    "chat_photo_remove",
    "chat_create",
    "chat_title_update",
    "chat_invite_user",
    "chat_kick_user",
    "chat_pin_message",
    "chat_unpin_message",
    "chat_invite_user_by_link",
]


# Long-poll update codes that carry a message
LONGPOLL_SUBTYPES = {
    4: "message_new",
    5: "message_edit",
}


def get_peer_type(peer_id: int) -> str:
    """Classify a peer/sender id as chat, group or user."""
    if peer_id > CHAT_PEER_BASE:
        return PeerType.CHAT
    if peer_id < 0:
        return PeerType.GROUP
    return PeerType.USER
