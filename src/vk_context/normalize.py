"""
Payload normalization.

Two wire shapes describe the same message:

* webhook `message_new` objects: `{"message": {...}, "client_info": {...}}`
* everything else (API responses, event logs, long-poll): a bare message
  object, or a positional long-poll array

Both are reshaped into one Envelope. A bare fragment gets default client
capabilities; detection is by presence of the `client_info` key only.
"""

import html
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from vk_context.constants import UpdateSource
from vk_context.models.message import ClientCapabilities, Envelope, MessageFragment
from vk_context.transport.longpoll import decode_longpoll_message

logger = logging.getLogger(__name__)

CLIENT_INFO_KEY = "client_info"


@dataclass(frozen=True)
class BareInput:
    fragment: Union[MessageFragment, Mapping[str, Any]]


@dataclass(frozen=True)
class EnvelopedInput:
    envelope: Union[Envelope, Mapping[str, Any]]


NormalizerInput = Union[BareInput, EnvelopedInput]


def resolve_input(raw: Union[Envelope, MessageFragment, Mapping[str, Any]]) -> NormalizerInput:
    """Tag a webhook/API payload as bare fragment or full envelope."""
    if isinstance(raw, Envelope):
        return EnvelopedInput(raw)
    if isinstance(raw, MessageFragment):
        return BareInput(raw)
    if CLIENT_INFO_KEY in raw:
        return EnvelopedInput(raw)
    return BareInput(raw)


def default_client_info() -> ClientCapabilities:
    return ClientCapabilities()


def _wrap(fragment: Union[MessageFragment, Mapping[str, Any]]) -> Envelope:
    if not isinstance(fragment, MessageFragment):
        fragment = MessageFragment.model_validate(fragment)
    return Envelope(message=fragment, client_info=default_client_info())


def normalize(raw: Any, source: str = UpdateSource.WEBHOOK) -> Envelope:
    """Reshape a raw update into an Envelope.

    Long-poll payloads are positional arrays and always produce a bare
    fragment. Webhook/API payloads are mappings; only those carrying
    `client_info` are taken as-is.
    """
    if source == UpdateSource.POLLING:
        return _wrap(decode_longpoll_message(raw))

    resolved = resolve_input(raw)
    if isinstance(resolved, BareInput):
        logger.debug("Synthesizing default client_info for bare message fragment")
        return _wrap(resolved.fragment)

    if isinstance(resolved.envelope, Envelope):
        return resolved.envelope
    return Envelope.model_validate(resolved.envelope)


def unescape_text(text: Optional[str]) -> Optional[str]:
    """Undo the HTML escaping VK applies to message text."""
    if not text:
        return None
    return html.unescape(text.replace("<br>", "\n"))


def decode_payload(raw: Optional[str]) -> Any:
    """Decode a button payload string; invalid or absent JSON gives None."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.debug("Ignoring undecodable message payload: %r", raw)
        return None


def is_longpoll_update(raw: Any) -> bool:
    return isinstance(raw, Sequence) and not isinstance(raw, (str, bytes))
