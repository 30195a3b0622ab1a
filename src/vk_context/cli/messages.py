"""CLI: vkctx inspect, vkctx fetch"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.json import JSON

from vk_context.constants import UpdateSource
from vk_context.errors import VKContextError
from vk_context.message import MessageView
from vk_context.normalize import is_longpoll_update

console = Console()


def _get_client():
    from vk_context.cli.main import _get_client
    return _get_client()


def _run(coro):
    from vk_context.cli.main import _run
    return _run(coro)


def _print_view(view: MessageView, json_output: bool) -> None:
    data = view.serialize()
    if json_output:
        click.echo(json.dumps(data, default=str))
        return
    state = "full" if view.filled else "stub"
    console.print(f"[bold]{view.peer_type}[/bold] message {view.id} [dim]({state})[/dim]")
    console.print(JSON.from_data(data, default=str))


@click.command("inspect")
@click.argument("path", type=click.File("r"))
@click.option(
    "--source",
    type=click.Choice(["auto", UpdateSource.POLLING, UpdateSource.WEBHOOK, UpdateSource.API]),
    default="auto",
)
@click.option("--update-type", default="message_new")
@click.option("--json-output", "--json", is_flag=True)
def inspect_cmd(path, source: str, update_type: str, json_output: bool):
    """Normalize a saved update (JSON) and print its message view."""
    raw = json.load(path)
    if isinstance(raw, dict) and "type" in raw and "object" in raw:
        # Callback API wrapper: {"type", "object", "group_id", ...}
        update_type = raw["type"]
        raw = raw["object"]
    if source == "auto":
        source = UpdateSource.POLLING if is_longpoll_update(raw) else UpdateSource.WEBHOOK
    if source == UpdateSource.POLLING and raw and isinstance(raw[0], int):
        update_type = raw[0]
    view = MessageView(None, raw, source, update_type=update_type)
    _print_view(view, json_output)


@click.command("fetch")
@click.argument("message_id", type=int)
@click.option("--peer-id", type=int, default=None, help="Peer for conversation-scoped lookup")
@click.option("--cmid", "conversation_message_id", type=int, default=None, help="Conversation message id")
@click.option("--json-output", "--json", is_flag=True)
def fetch_cmd(message_id: int, peer_id: Optional[int], conversation_message_id: Optional[int], json_output: bool):
    """Fetch a message (use 0 with --peer-id/--cmid for conversation lookup)."""
    client = _get_client()

    async def _fetch():
        try:
            return await client.fetch_message(message_id, peer_id, conversation_message_id)
        finally:
            await client.close()

    try:
        if json_output:
            view = _run(_fetch())
        else:
            with console.status("Fetching message..."):
                view = _run(_fetch())
    except VKContextError as e:
        console.print(f"[red]{e.code}: {e}[/red]")
        raise SystemExit(1)
    _print_view(view, json_output)
