"""
vk-context CLI — `vkctx` command.

Commands:
  vkctx inspect <file>       Normalize a saved update and print its message view
  vkctx fetch <message-id>   Fetch a message through the API and print it
  vkctx config <cmd>         Manage the stored access token
"""

import asyncio
import json
import logging
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install vk-context[cli]")

from vk_context.client import AsyncVK
from vk_context.transport.http import DEFAULT_API_VERSION, DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = Path.home() / ".vk_context" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client() -> AsyncVK:
    cfg = _load_config()
    if not cfg.get("access_token"):
        console.print("[red]No access token. Run `vkctx config set-token` first.[/red]")
        raise SystemExit(1)
    return AsyncVK(
        access_token=cfg["access_token"],
        api_version=cfg.get("api_version", DEFAULT_API_VERSION),
        base_url=cfg.get("base_url", DEFAULT_BASE_URL),
    )


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
def main(verbose: bool):
    """vk-context CLI — inspect and fetch VK message contexts."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register subcommands from separate modules
from vk_context.cli.config import config
from vk_context.cli.messages import fetch_cmd, inspect_cmd

main.add_command(config)
main.add_command(inspect_cmd)
main.add_command(fetch_cmd)


if __name__ == "__main__":
    main()
