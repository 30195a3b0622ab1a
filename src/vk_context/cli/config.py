"""CLI: vkctx config set-token|show|clear"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _load_config() -> dict:
    from vk_context.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from vk_context.cli.main import _save_config
    _save_config(cfg)


@click.group()
def config():
    """Stored credentials and API settings."""


@config.command("set-token")
@click.option("--token", default=None, help="Access token (prompted if omitted)")
@click.option("--api-version", default=None, help="VK API version")
@click.option("--base-url", default=None, help="VK API method endpoint")
def config_set_token(token: Optional[str], api_version: Optional[str], base_url: Optional[str]):
    """Save an access token."""
    cfg = _load_config()
    token = token or click.prompt("Access token", hide_input=True)
    cfg["access_token"] = token
    if api_version:
        cfg["api_version"] = api_version
    if base_url:
        cfg["base_url"] = base_url
    _save_config(cfg)
    console.print("[green]Token saved to ~/.vk_context/config.json[/green]")


@config.command("show")
def config_show():
    """Show current settings (token masked)."""
    cfg = _load_config()
    if not cfg.get("access_token"):
        console.print("[yellow]No access token. Run `vkctx config set-token`.[/yellow]")
        return
    token = cfg["access_token"]
    console.print(f"[green]Token[/green] {token[:4]}…{token[-4:]}")
    console.print(f"API version: {cfg.get('api_version', 'default')}")
    console.print(f"Base URL: {cfg.get('base_url', 'default')}")


@config.command("clear")
def config_clear():
    """Clear saved settings."""
    _save_config({})
    console.print("[green]Settings cleared.[/green]")
