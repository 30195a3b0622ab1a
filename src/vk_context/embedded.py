"""
Views over messages embedded in another message: the replied-to message and
the chain of forwarded messages.

Embedded views never fetch anything; whatever the parent payload carried is
all they expose.
"""

from typing import Any, Iterator, Optional

from vk_context.attachments import AttachmentView
from vk_context.models.attachments import AttachmentDescriptor, transform_attachments
from vk_context.models.message import MessageFragment
from vk_context.normalize import unescape_text


class ReplyView:
    def __init__(self, fragment: MessageFragment, api: Any = None):
        self._fragment = fragment
        self.api = api
        self.text = unescape_text(fragment.text)
        self._attachments = AttachmentView(transform_attachments(fragment.attachments))

    @property
    def id(self) -> Optional[int]:
        return self._fragment.id

    @property
    def conversation_message_id(self) -> Optional[int]:
        return self._fragment.conversation_message_id

    @property
    def peer_id(self) -> Optional[int]:
        return self._fragment.peer_id

    @property
    def sender_id(self) -> Optional[int]:
        return self._fragment.from_id

    @property
    def created_at(self) -> int:
        return self._fragment.date

    @property
    def updated_at(self) -> Optional[int]:
        return self._fragment.update_time

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    @property
    def attachments(self) -> AttachmentView:
        return self._attachments

    def has_attachments(self, kind: Optional[str] = None) -> bool:
        return self._attachments.has_attachments(kind)

    def get_attachments(self, kind: Optional[str] = None) -> list[AttachmentDescriptor]:
        return self._attachments.get_attachments(kind)

    def serialize(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "conversation_message_id": self.conversation_message_id,
            "peer_id": self.peer_id,
            "sender_id": self.sender_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "text": self.text,
            "attachments": [str(item) for item in self._attachments],
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.serialize()!r})"


class ForwardView(ReplyView):
    """A forwarded message; may carry its own forwards."""

    def __init__(self, fragment: MessageFragment, api: Any = None):
        super().__init__(fragment, api)
        self._forwards = ForwardChain.from_fragments(fragment.fwd_messages, api)

    @property
    def forwards(self) -> "ForwardChain":
        return self._forwards

    @property
    def has_forwards(self) -> bool:
        return len(self._forwards) > 0

    def serialize(self) -> dict[str, Any]:
        data = super().serialize()
        data["forwards"] = self._forwards.serialize()
        return data


class ForwardChain:
    """Ordered forwarded messages.

    Attachment lookup covers each element's own attachments only; nested
    forwards of an element are not searched.
    """

    __slots__ = ("_items",)

    def __init__(self, items: tuple[ForwardView, ...] = ()):
        self._items = tuple(items)

    @classmethod
    def from_fragments(cls, fragments: list[MessageFragment], api: Any = None) -> "ForwardChain":
        return cls(tuple(ForwardView(fragment, api) for fragment in fragments))

    def has_attachments(self, kind: Optional[str] = None) -> bool:
        return any(item.has_attachments(kind) for item in self._items)

    def get_attachments(self, kind: Optional[str] = None) -> list[AttachmentDescriptor]:
        found: list[AttachmentDescriptor] = []
        for item in self._items:
            found.extend(item.get_attachments(kind))
        return found

    @property
    def flatten(self) -> list[ForwardView]:
        """All forwards at every depth, depth-first."""
        flat: list[ForwardView] = []
        for item in self._items:
            flat.append(item)
            flat.extend(item.forwards.flatten)
        return flat

    def serialize(self) -> list[dict[str, Any]]:
        return [item.serialize() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ForwardView]:
        return iter(self._items)

    def __getitem__(self, index: int) -> ForwardView:
        return self._items[index]

    def __repr__(self) -> str:
        return f"ForwardChain(size={len(self._items)})"
