"""
User long-poll message decoder.

Message updates (codes 4 and 5) arrive as positional arrays:

    [code, message_id, flags, peer_id, timestamp, text,
     extra, attachments, random_id, conversation_message_id, edit_time]

Trailing elements may be missing. The decoder maps them onto a partial
MessageFragment; anything the long-poll does not carry (full attachment
objects, geo details, nested forwards) stays empty until the view is
promoted.
"""

import json
import logging
from typing import Any, Sequence

from vk_context.constants import CHAT_PEER_BASE
from vk_context.models.message import ActionEvent, Geo, MessageFragment

logger = logging.getLogger(__name__)

FLAG_OUTBOX = 2
FLAG_IMPORTANT = 8

_ARITY = 11


def _parse_attachment_ref(ref: str) -> dict[str, Any]:
    owner_id, sep, rest = ref.partition("_")
    # stickers and gifts are referenced by a bare id
    if not sep:
        return {"id": int(ref)} if ref.lstrip("-").isdigit() else {"ref": ref}
    item_id, _, access_key = rest.partition("_")
    payload: dict[str, Any] = {"owner_id": int(owner_id), "id": int(item_id)}
    if access_key:
        payload["access_key"] = access_key
    return payload


def _decode_attachments(raw: dict[str, Any]) -> list[dict[str, Any]]:
    attachments = []
    index = 1
    while f"attach{index}_type" in raw:
        kind = raw[f"attach{index}_type"]
        ref = raw.get(f"attach{index}")
        if ref:
            payload = _parse_attachment_ref(ref)
            if raw.get(f"attach{index}_product_id"):
                payload["product_id"] = int(raw[f"attach{index}_product_id"])
            attachments.append({"type": kind, kind: payload})
        else:
            attachments.append({"type": kind, kind: {}})
        index += 1
    return attachments


def decode_longpoll_message(update: Sequence[Any]) -> MessageFragment:
    """Map a long-poll message update onto a (partial) MessageFragment."""
    padded = list(update) + [None] * (_ARITY - len(update))
    (
        _code, message_id, flags, peer_id, timestamp, text,
        extra, attachments, random_id, conversation_message_id, edit_time,
    ) = padded[:_ARITY]

    flags = flags or 0
    extra = extra or {}
    attachments = attachments or {}

    if extra.get("from"):
        from_id = int(extra["from"])
    else:
        from_id = peer_id

    fields: dict[str, Any] = {
        "id": message_id,
        "conversation_message_id": conversation_message_id,
        "peer_id": peer_id,
        "from_id": from_id,
        "date": timestamp or 0,
        "update_time": edit_time or None,
        "text": text,
        "random_id": random_id or 0,
        "out": int(bool(flags & FLAG_OUTBOX)),
        "important": bool(flags & FLAG_IMPORTANT),
        "attachments": _decode_attachments(attachments),
    }

    if extra.get("payload"):
        fields["payload"] = extra["payload"]

    if extra.get("source_act"):
        member_id = extra.get("source_mid")
        fields["action"] = ActionEvent(
            type=extra["source_act"],
            member_id=int(member_id) if member_id else None,
            text=extra.get("source_text"),
            email=extra.get("source_email"),
        )

    # Only presence is known; coordinates require a full fetch
    if attachments.get("geo"):
        fields["geo"] = Geo()

    if attachments.get("reply"):
        try:
            reply = json.loads(attachments["reply"])
        except ValueError:
            logger.debug("Ignoring malformed long-poll reply reference: %r", attachments["reply"])
        else:
            fields["reply_message"] = MessageFragment(
                conversation_message_id=reply.get("conversation_message_id"),
                peer_id=peer_id,
            )

    if peer_id is not None and peer_id > CHAT_PEER_BASE and not extra.get("from"):
        logger.debug("Chat long-poll update %s has no sender in extra fields", message_id)

    return MessageFragment(**fields)
