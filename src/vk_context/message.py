"""
MessageView — the message context handed to bot handlers.

A view is either a stub (built from a long-poll record or from a message we
just sent; `filled` is False) or full (webhook/API payload). Stubs can be
promoted with `promote()`, which fetches the full message and rebuilds the
reply/forward/attachment views.
"""

import asyncio
import json
import logging
import random
import re
import time
from typing import Any, Optional, Union

from vk_context.api import RemoteClient, UploadClient
from vk_context.attachments import AttachmentView
from vk_context.constants import (
    CHAT_PEER_BASE,
    LONGPOLL_SUBTYPES,
    PeerType,
    UpdateSource,
    get_peer_type,
)
from vk_context.embedded import ForwardChain, ReplyView
from vk_context.errors import NotAChat, PayloadIncomplete
from vk_context.models.attachments import AttachmentDescriptor, transform_attachments
from vk_context.models.message import ClientCapabilities, Envelope, Geo, MessageFragment
from vk_context.normalize import BareInput, decode_payload, normalize, resolve_input, unescape_text

logger = logging.getLogger(__name__)


def get_random_id() -> int:
    """Idempotency token for messages.send."""
    return int(f"{random.randint(0, 9999)}{int(time.time() * 1000)}")


def _prepare_send_params(params: dict[str, Any]) -> dict[str, Any]:
    attachment = params.get("attachment")
    if isinstance(attachment, (list, tuple)):
        params["attachment"] = ",".join(str(item) for item in attachment)
    elif attachment is not None and not isinstance(attachment, str):
        params["attachment"] = str(attachment)

    keyboard = params.get("keyboard")
    if keyboard is not None and not isinstance(keyboard, str):
        params["keyboard"] = json.dumps(keyboard)
    return params


class MessageView:
    def __init__(
        self,
        api: RemoteClient,
        payload: Any,
        source: str = UpdateSource.WEBHOOK,
        *,
        upload: Optional[UploadClient] = None,
        update_type: Union[str, int] = "message_new",
        group_id: Optional[int] = None,
        state: Optional[dict[str, Any]] = None,
    ):
        self.api = api
        self.upload = upload
        self.source = source
        self.update_type = update_type
        self.group_id = group_id
        self.state: dict[str, Any] = state if state is not None else {}
        self.match: Optional[re.Match] = None

        self._filled = source != UpdateSource.POLLING
        self._apply(normalize(payload, source))

        self.subtypes = [
            self.event_type
            or LONGPOLL_SUBTYPES.get(update_type)  # type: ignore[arg-type]
            or update_type
        ]

    def _apply(self, envelope: Envelope) -> None:
        self._envelope = envelope
        message = envelope.message

        self.text = unescape_text(message.text)
        self._attachments = AttachmentView(transform_attachments(message.attachments))
        self._reply = ReplyView(message.reply_message, self.api) if message.reply_message else None
        self._forwards = ForwardChain.from_fragments(message.fwd_messages, self.api)
        self._message_payload = decode_payload(message.payload)

    @property
    def _message(self) -> MessageFragment:
        return self._envelope.message

    # Lifecycle

    @property
    def filled(self) -> bool:
        return self._filled

    async def promote(self, force: bool = False) -> None:
        """Fetch the full message and rebuild the view. No-op once full unless forced."""
        if self._filled and not force:
            return

        if self.id != 0:
            logger.debug("Promoting message %s via messages.getById", self.id)
            result = await self.api.call("messages.getById", {"message_ids": [self.id]})
        else:
            logger.debug(
                "Promoting message %s@%s via messages.getByConversationMessageId",
                self.conversation_message_id, self.peer_id,
            )
            result = await self.api.call("messages.getByConversationMessageId", {
                "peer_id": self.peer_id,
                "conversation_message_ids": [self.conversation_message_id],
            })

        message = result["items"][0]
        if isinstance(resolve_input(message), BareInput):
            envelope = Envelope(
                message=MessageFragment.model_validate(message),
                client_info=self._envelope.client_info,
            )
        else:
            envelope = normalize(message, UpdateSource.API)
        self._apply(envelope)
        self._filled = True

    # Derived flags

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    @property
    def has_reply_message(self) -> bool:
        return self._reply is not None

    @property
    def has_forwards(self) -> bool:
        return len(self._forwards) > 0

    @property
    def has_message_payload(self) -> bool:
        return self._message_payload is not None

    @property
    def has_geo(self) -> bool:
        return self._message.geo is not None

    @property
    def is_chat(self) -> bool:
        return self.peer_type == PeerType.CHAT

    @property
    def is_user(self) -> bool:
        return self.sender_type == PeerType.USER

    @property
    def is_group(self) -> bool:
        return self.sender_type == PeerType.GROUP

    @property
    def is_from_user(self) -> bool:
        return self.peer_type == PeerType.USER

    @property
    def is_from_group(self) -> bool:
        return self.peer_type == PeerType.GROUP

    @property
    def is_dm(self) -> bool:
        """Direct messages: the peer is a user or a community, not a chat."""
        return self.is_from_user or self.is_from_group

    @property
    def is_event(self) -> bool:
        return self.event_type is not None

    @property
    def is_outbound(self) -> bool:
        return bool(self._message.out)

    @property
    def is_inbound(self) -> bool:
        return not self.is_outbound

    @property
    def is_important(self) -> bool:
        return self._message.important

    # Scalars

    @property
    def id(self) -> int:
        return self._message.id  # type: ignore[return-value]

    @property
    def conversation_message_id(self) -> Optional[int]:
        return self._message.conversation_message_id

    @property
    def peer_id(self) -> int:
        return self._message.peer_id  # type: ignore[return-value]

    @property
    def peer_type(self) -> str:
        return get_peer_type(self._message.peer_id)  # type: ignore[arg-type]

    @property
    def sender_id(self) -> int:
        return self._message.from_id  # type: ignore[return-value]

    @property
    def sender_type(self) -> str:
        return get_peer_type(self._message.from_id)  # type: ignore[arg-type]

    @property
    def chat_id(self) -> Optional[int]:
        if not self.is_chat:
            return None
        return self.peer_id - CHAT_PEER_BASE

    @property
    def referral_value(self) -> Optional[str]:
        return self._message.ref

    @property
    def referral_source(self) -> Optional[str]:
        return self._message.ref_source

    @property
    def created_at(self) -> int:
        return self._message.date

    @property
    def updated_at(self) -> Optional[int]:
        return self._message.update_time

    @property
    def geo(self) -> Optional[Geo]:
        """Geo is never delivered in stub form, so stubs must be promoted first."""
        if not self._filled:
            raise PayloadIncomplete()
        return self._message.geo

    @property
    def event_type(self) -> Optional[str]:
        action = self._message.action
        return action.type if action else None

    @property
    def event_member_id(self) -> Optional[int]:
        action = self._message.action
        return action.member_id if action else None

    @property
    def event_text(self) -> Optional[str]:
        action = self._message.action
        return action.text if action else None

    @property
    def event_email(self) -> Optional[str]:
        action = self._message.action
        return action.email if action else None

    @property
    def message_payload(self) -> Any:
        return self._message_payload

    @property
    def forwards(self) -> ForwardChain:
        return self._forwards

    @property
    def reply_message(self) -> Optional[ReplyView]:
        return self._reply

    @property
    def attachments(self) -> AttachmentView:
        return self._attachments

    @property
    def client_info(self) -> ClientCapabilities:
        return self._envelope.client_info

    # Attachment lookup

    def has_attachments(self, kind: Optional[str] = None) -> bool:
        return self._attachments.has_attachments(kind)

    def get_attachments(self, kind: Optional[str] = None) -> list[AttachmentDescriptor]:
        return self._attachments.get_attachments(kind)

    def has_all_attachments(self, kind: Optional[str] = None) -> bool:
        """Search own attachments, then the reply, then the forwards."""
        return (
            self.has_attachments(kind)
            or (self._reply is not None and self._reply.has_attachments(kind))
            or self._forwards.has_attachments(kind)
        )

    def get_all_attachments(self, kind: Optional[str] = None) -> list[AttachmentDescriptor]:
        """Own attachments first, then the reply's, then the forward chain's."""
        found = self.get_attachments(kind)
        if self._reply is not None:
            found.extend(self._reply.get_attachments(kind))
        found.extend(self._forwards.get_attachments(kind))
        return found

    def match_text(self, pattern: Union[str, re.Pattern]) -> Optional[re.Match]:
        self.match = re.search(pattern, self.text or "")
        return self.match

    # Remote operations

    async def edit_message(self, **params: Any) -> int:
        """Edit this message, keeping re-attachable attachments, forwards and snippets."""
        if self.id != 0:
            target: dict[str, Any] = {"message_id": self.id}
        else:
            target = {"conversation_message_id": self.conversation_message_id}

        request = {
            **target,
            "attachment": ",".join(
                str(item) for item in self._attachments if item.can_be_attached
            ),
            "message": self.text,
            "keep_forward_messages": 1,
            "keep_snippets": 1,
            **_prepare_send_params(params),
            "peer_id": self.peer_id,
        }
        return await self.api.call("messages.edit", request)

    async def edit_text(self, text: str) -> int:
        response = await self.edit_message(message=text)
        self.text = text
        return response

    async def send(self, text: Union[str, dict[str, Any], None] = None, **params: Any) -> "MessageView":
        """Send a message to this peer; returns an unfilled view of the sent message."""
        random_id = get_random_id()

        if isinstance(text, dict):
            options = {**text, **params}
        elif text is not None:
            options = {"message": text, **params}
        else:
            options = dict(params)

        request = {
            "peer_id": self.peer_id,
            "random_id": random_id,
            **_prepare_send_params(options),
        }
        message_id = await self.api.call("messages.send", request)
        logger.debug("Sent message %s to peer %s", message_id, request["peer_id"])

        sent = Envelope(
            client_info=self.client_info,
            message=MessageFragment(
                id=message_id,
                conversation_message_id=0,
                from_id=self._message.from_id,
                peer_id=self._message.peer_id,
                out=1,
                important=False,
                random_id=random_id,
                text=request.get("message"),
                date=int(time.time()),
                attachments=[],
            ),
        )
        view = MessageView(
            self.api,
            sent,
            UpdateSource.WEBHOOK,
            upload=self.upload,
            update_type="message_new",
            group_id=self.group_id,
            state=self.state,
        )
        view._filled = False
        return view

    async def reply(self, text: Union[str, dict[str, Any], None] = None, **params: Any) -> "MessageView":
        if isinstance(text, dict):
            params = {**text, **params}
        elif text is not None:
            params = {"message": text, **params}
        return await self.send({"reply_to": self.id, **params})

    async def send_sticker(self, sticker_id: int) -> "MessageView":
        return await self.send(sticker_id=sticker_id)

    async def _upload_all(self, method: str, sources: Any) -> list[AttachmentDescriptor]:
        if not isinstance(sources, (list, tuple)):
            sources = [sources]
        upload = getattr(self.upload, method)
        # gather keeps input order and raises on the first failed upload
        return list(await asyncio.gather(*(
            upload(source, peer_id=self.peer_id) for source in sources
        )))

    async def send_photos(self, sources: Any, **params: Any) -> "MessageView":
        attachment = await self._upload_all("message_photo", sources)
        return await self.send(**{**params, "attachment": attachment})

    async def send_documents(self, sources: Any, **params: Any) -> "MessageView":
        attachment = await self._upload_all("message_document", sources)
        return await self.send(**{**params, "attachment": attachment})

    async def send_audio_message(self, source: Any, **params: Any) -> "MessageView":
        attachment = await self.upload.audio_message(source, peer_id=self.peer_id)
        return await self.send(**{**params, "attachment": attachment})

    async def set_typing_activity(self) -> bool:
        result = await self.api.call("messages.setActivity", {
            "peer_id": self.peer_id,
            "type": "typing",
        })
        return bool(result)

    async def mark_important(self, ids: Optional[list[int]] = None, important: Optional[bool] = None) -> list[int]:
        """Toggle the important mark; local state follows only acknowledged ids."""
        if ids is None:
            ids = [self.id]
        if important is None:
            important = not self.is_important

        message_ids = await self.api.call("messages.markAsImportant", {
            "message_ids": ids,
            "important": int(important),
        })
        if self.id in message_ids:
            self._message.important = important
        return message_ids

    async def delete(self, ids: Optional[list[int]] = None, spam: bool = False) -> Any:
        return await self.api.call("messages.delete", {
            "message_ids": ids if ids is not None else [self.id],
            "spam": int(spam),
        })

    async def restore(self) -> bool:
        result = await self.api.call("messages.restore", {"message_id": self.id})
        return bool(result)

    # Chat-only operations

    def _assert_is_chat(self) -> None:
        if not self.is_chat:
            raise NotAChat()

    async def rename_chat(self, title: str) -> bool:
        self._assert_is_chat()
        result = await self.api.call("messages.editChat", {"chat_id": self.chat_id, "title": title})
        return bool(result)

    async def set_chat_photo(self, source: Any, **params: Any) -> dict[str, Any]:
        self._assert_is_chat()
        return await self.upload.chat_photo(source, chat_id=self.chat_id, **params)

    async def clear_chat_photo(self) -> bool:
        self._assert_is_chat()
        await self.api.call("messages.deleteChatPhoto", {"chat_id": self.chat_id})
        return True

    async def invite_member(self, member_id: Optional[int] = None) -> bool:
        self._assert_is_chat()
        result = await self.api.call("messages.addChatUser", {
            "chat_id": self.chat_id,
            "user_id": member_id if member_id is not None else self.event_member_id,
        })
        return bool(result)

    async def remove_member(self, member_id: Optional[int] = None) -> bool:
        self._assert_is_chat()
        result = await self.api.call("messages.removeChatUser", {
            "chat_id": self.chat_id,
            "member_id": member_id if member_id is not None else self.event_member_id,
        })
        return bool(result)

    async def pin_message(self) -> bool:
        self._assert_is_chat()
        result = await self.api.call("messages.pin", {"peer_id": self.peer_id, "message_id": self.id})
        return bool(result)

    async def unpin_message(self) -> bool:
        self._assert_is_chat()
        result = await self.api.call("messages.unpin", {"peer_id": self.peer_id, "message_id": self.id})
        return bool(result)

    # Serialized view

    def serialize(self) -> dict[str, Any]:
        """Fixed-order projection used by repr, logs and the CLI."""
        data: dict[str, Any] = {
            "id": self.id,
            "conversation_message_id": self.conversation_message_id,
            "peer_id": self.peer_id,
            "peer_type": self.peer_type,
            "sender_id": self.sender_id,
            "sender_type": self.sender_type,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "text": self.text,
        }
        if self.is_event:
            data["event_type"] = self.event_type
            data["event_member_id"] = self.event_member_id
            data["event_text"] = self.event_text
            data["event_email"] = self.event_email
        if self._reply is not None:
            data["reply_message"] = self._reply.serialize()

        data["forwards"] = self._forwards.serialize()
        data["attachments"] = [str(item) for item in self._attachments]

        if self.has_message_payload:
            data["message_payload"] = self._message_payload
        data["is_outbound"] = self.is_outbound
        if self.referral_value:
            data["referral_value"] = self.referral_value
            data["referral_source"] = self.referral_source
        if self.match is not None:
            data["match"] = [self.match.group(0), *self.match.groups()]
        return data

    def __repr__(self) -> str:
        return f"MessageView({self.serialize()!r})"
