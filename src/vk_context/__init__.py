"""
vk-context — message contexts for VK bots.

Normalizes webhook, API and long-poll message updates into one MessageView
with reply/forward/attachment lookup and message actions.
"""

from vk_context.client import AsyncVK
from vk_context.message import MessageView
from vk_context.attachments import AttachmentQueryable, AttachmentView
from vk_context.embedded import ForwardChain, ForwardView, ReplyView
from vk_context.normalize import normalize
from vk_context.constants import AttachmentType, PeerType, UpdateSource, CHAT_PEER_BASE
from vk_context.errors import (
    VKContextError,
    PayloadIncomplete,
    NotAChat,
    RemoteOperationFailed,
    UploadError,
)

__version__ = "0.1.0"
__all__ = [
    "AsyncVK",
    "MessageView",
    "AttachmentQueryable",
    "AttachmentView",
    "ForwardChain",
    "ForwardView",
    "ReplyView",
    "normalize",
    "AttachmentType",
    "PeerType",
    "UpdateSource",
    "CHAT_PEER_BASE",
    "VKContextError",
    "PayloadIncomplete",
    "NotAChat",
    "RemoteOperationFailed",
    "UploadError",
]
