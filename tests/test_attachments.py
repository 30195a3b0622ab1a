"""Attachment descriptors and lookup over reply/forward views."""

from vk_context.attachments import AttachmentQueryable, AttachmentView
from vk_context.embedded import ForwardChain, ForwardView, ReplyView
from vk_context.models.attachments import Attachment, ExternalAttachment, transform_attachment, transform_attachments
from vk_context.models.message import MessageFragment


def photo(owner_id, item_id, access_key=None):
    payload = {"owner_id": owner_id, "id": item_id}
    if access_key:
        payload["access_key"] = access_key
    return {"type": "photo", "photo": payload}


def doc(owner_id, item_id):
    return {"type": "doc", "doc": {"owner_id": owner_id, "id": item_id, "title": "file.txt"}}


def sticker(sticker_id):
    return {"type": "sticker", "sticker": {"sticker_id": sticker_id}}


class TestDescriptors:
    def test_referenceable_attachment(self):
        attachment = transform_attachment(photo(1, 2, "key"))
        assert isinstance(attachment, Attachment)
        assert attachment.can_be_attached
        assert str(attachment) == "photo1_2_key"

    def test_reference_without_access_key(self):
        assert str(transform_attachment(doc(-5, 3))) == "doc-5_3"

    def test_sticker_is_external(self):
        attachment = transform_attachment(sticker(11))
        assert isinstance(attachment, ExternalAttachment)
        assert not attachment.can_be_attached
        assert attachment.payload == {"sticker_id": 11}

    def test_unknown_kind_is_external(self):
        attachment = transform_attachment({"type": "mini_app", "mini_app": {"app_id": 1}})
        assert isinstance(attachment, ExternalAttachment)
        assert attachment.type == "mini_app"

    def test_referenceable_kind_without_ids_is_external(self):
        assert isinstance(transform_attachment({"type": "photo", "photo": {}}), ExternalAttachment)


class TestAttachmentView:
    def test_has_and_get_by_kind(self):
        view = AttachmentView(transform_attachments([photo(1, 1), doc(1, 2), photo(1, 3)]))
        assert view.has_attachments()
        assert view.has_attachments("photo")
        assert not view.has_attachments("video")
        assert [str(a) for a in view.get_attachments("photo")] == ["photo1_1", "photo1_3"]
        assert len(view.get_attachments()) == 3

    def test_empty_view(self):
        view = AttachmentView()
        assert not view.has_attachments()
        assert view.get_attachments() == []
        assert len(view) == 0

    def test_get_returns_a_copy(self):
        view = AttachmentView(transform_attachments([photo(1, 1)]))
        view.get_attachments().clear()
        assert len(view) == 1

    def test_views_satisfy_the_protocol(self):
        fragment = MessageFragment(id=1)
        assert isinstance(AttachmentView(), AttachmentQueryable)
        assert isinstance(ReplyView(fragment), AttachmentQueryable)
        assert isinstance(ForwardChain(), AttachmentQueryable)


class TestReplyView:
    def test_scalars_and_text(self):
        reply = ReplyView(MessageFragment(
            id=3, conversation_message_id=2, peer_id=10, from_id=11,
            date=100, update_time=120, text="x &amp; y", attachments=[photo(1, 1)],
        ))
        assert reply.id == 3
        assert reply.sender_id == 11
        assert reply.text == "x & y"
        assert reply.has_text
        assert reply.updated_at == 120
        assert reply.has_attachments("photo")
        assert reply.serialize()["attachments"] == ["photo1_1"]


class TestForwardChain:
    def make_chain(self):
        nested = MessageFragment(id=30, attachments=[photo(9, 9)])
        return ForwardChain.from_fragments([
            MessageFragment(id=10, attachments=[photo(1, 1), doc(1, 2)]),
            MessageFragment(id=20, attachments=[photo(2, 2)], fwd_messages=[nested]),
        ])

    def test_iteration_order(self):
        chain = self.make_chain()
        assert len(chain) == 2
        assert [forward.id for forward in chain] == [10, 20]
        assert isinstance(chain[1], ForwardView)
        assert chain[1].has_forwards

    def test_aggregate_is_one_level_deep(self):
        chain = self.make_chain()
        assert [str(a) for a in chain.get_attachments("photo")] == ["photo1_1", "photo2_2"]
        assert chain.has_attachments("doc")

    def test_nested_forward_attachments_are_not_searched(self):
        chain = ForwardChain.from_fragments([
            MessageFragment(id=1, fwd_messages=[MessageFragment(id=2, attachments=[doc(1, 1)])]),
        ])
        assert not chain.has_attachments("doc")
        assert chain[0].forwards.has_attachments("doc")

    def test_flatten_walks_every_depth(self):
        assert [forward.id for forward in self.make_chain().flatten] == [10, 20, 30]

    def test_empty_chain(self):
        chain = ForwardChain()
        assert not chain.has_attachments()
        assert chain.get_attachments() == []
        assert chain.serialize() == []
