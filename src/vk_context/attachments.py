"""
Attachment lookup over an ordered, read-only sequence of descriptors.
"""

from typing import Iterator, Optional, Protocol, Sequence, runtime_checkable

from vk_context.models.attachments import AttachmentDescriptor


@runtime_checkable
class AttachmentQueryable(Protocol):
    def has_attachments(self, kind: Optional[str] = None) -> bool: ...

    def get_attachments(self, kind: Optional[str] = None) -> list[AttachmentDescriptor]: ...


class AttachmentView:
    __slots__ = ("_items",)

    def __init__(self, items: Sequence[AttachmentDescriptor] = ()):
        self._items = tuple(items)

    def has_attachments(self, kind: Optional[str] = None) -> bool:
        """True if any descriptor has `kind`; with no kind, if there are any at all."""
        if kind is None:
            return len(self._items) > 0
        return any(item.type == kind for item in self._items)

    def get_attachments(self, kind: Optional[str] = None) -> list[AttachmentDescriptor]:
        if kind is None:
            return list(self._items)
        return [item for item in self._items if item.type == kind]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AttachmentDescriptor]:
        return iter(self._items)

    def __getitem__(self, index: int) -> AttachmentDescriptor:
        return self._items[index]

    def __repr__(self) -> str:
        return f"AttachmentView({[str(item) for item in self._items]!r})"
