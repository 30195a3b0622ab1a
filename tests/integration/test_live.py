"""
Integration tests against the real VK API.

Requires environment variables:
  VK_ACCESS_TOKEN  — community token with messages access
  VK_PEER_ID       — peer the community may write to
  VK_API_VERSION   — (optional) defaults to the client's version

Run: VK_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest

from vk_context import AsyncVK
from vk_context.transport.http import DEFAULT_API_VERSION

SKIP = not os.environ.get("VK_INTEGRATION")
ACCESS_TOKEN = os.environ.get("VK_ACCESS_TOKEN", "")
PEER_ID = int(os.environ.get("VK_PEER_ID", "0"))
API_VERSION = os.environ.get("VK_API_VERSION", DEFAULT_API_VERSION)

pytestmark = pytest.mark.skipif(SKIP, reason="VK_INTEGRATION not set")


def make_client() -> AsyncVK:
    return AsyncVK(access_token=ACCESS_TOKEN, api_version=API_VERSION)


class TestSendAndPromote:
    @pytest.mark.asyncio
    async def test_sent_message_can_be_promoted(self):
        async with make_client() as vk:
            context = vk.message_context({"id": 0, "peer_id": PEER_ID, "from_id": PEER_ID})
            sent = await context.send("vk-context integration check")
            assert not sent.filled

            await sent.promote()
            assert sent.filled
            assert sent.text == "vk-context integration check"

            await sent.delete(spam=False)

    @pytest.mark.asyncio
    async def test_rejects_invalid_token(self):
        async with AsyncVK(access_token="invalid", api_version=API_VERSION) as vk:
            with pytest.raises(Exception):
                await vk.fetch_message(1)
