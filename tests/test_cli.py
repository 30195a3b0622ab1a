"""CLI commands via click's CliRunner."""

import json

import httpx
import pytest
from click.testing import CliRunner

from vk_context.cli import main as cli_main
from vk_context.client import AsyncVK


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(cli_main, "CONFIG_FILE", path)
    return path


def test_inspect_webhook_payload(tmp_path):
    update = tmp_path / "update.json"
    update.write_text(json.dumps({
        "message": {"id": 3, "peer_id": 2000000002, "from_id": 8, "text": "a &amp; b", "date": 1,
                    "attachments": [{"type": "photo", "photo": {"owner_id": 1, "id": 2}}]},
        "client_info": {"button_actions": ["text"], "keyboard": True, "inline_keyboard": False,
                        "carousel": False, "lang_id": 0},
    }))

    result = CliRunner().invoke(cli_main.main, ["inspect", str(update), "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["peer_type"] == "chat"
    assert data["text"] == "a & b"
    assert data["attachments"] == ["photo1_2"]


def test_inspect_detects_longpoll(tmp_path):
    update = tmp_path / "update.json"
    update.write_text(json.dumps([4, 10, 2, 123, 1, "hi"]))

    result = CliRunner().invoke(cli_main.main, ["inspect", str(update), "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["id"] == 10
    assert data["is_outbound"] is True


def test_config_roundtrip(config_file):
    runner = CliRunner()

    result = runner.invoke(cli_main.main, ["config", "set-token", "--token", "secret-token-1234"])
    assert result.exit_code == 0, result.output
    assert json.loads(config_file.read_text())["access_token"] == "secret-token-1234"

    result = runner.invoke(cli_main.main, ["config", "show"])
    assert "secr" in result.output
    assert "secret-token-1234" not in result.output

    runner.invoke(cli_main.main, ["config", "clear"])
    assert json.loads(config_file.read_text()) == {}


def test_fetch_requires_token(config_file):
    result = CliRunner().invoke(cli_main.main, ["fetch", "1"])
    assert result.exit_code == 1


def test_fetch_prints_message(config_file, monkeypatch):
    def handler(request):
        return httpx.Response(200, json={"response": {"items": [
            {"id": 1, "peer_id": 5, "from_id": 5, "text": "fetched", "date": 1},
        ]}})

    monkeypatch.setattr(
        cli_main, "_get_client",
        lambda: AsyncVK(access_token="tok", transport=httpx.MockTransport(handler)),
    )

    result = CliRunner().invoke(cli_main.main, ["fetch", "1", "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["text"] == "fetched"


def test_fetch_reports_api_errors(config_file, monkeypatch):
    def handler(request):
        return httpx.Response(200, json={"error": {"error_code": 5, "error_msg": "User authorization failed"}})

    monkeypatch.setattr(
        cli_main, "_get_client",
        lambda: AsyncVK(access_token="bad", transport=httpx.MockTransport(handler)),
    )

    result = CliRunner().invoke(cli_main.main, ["fetch", "1"])

    assert result.exit_code == 1
    assert "User authorization failed" in result.output


def test_inspect_unwraps_callback_event(tmp_path):
    update = tmp_path / "update.json"
    update.write_text(json.dumps({
        "type": "message_new",
        "object": {
            "message": {"id": 4, "peer_id": 12, "from_id": 12, "text": "hello", "date": 1},
            "client_info": {"button_actions": ["text"], "keyboard": True, "inline_keyboard": False,
                            "carousel": False, "lang_id": 0},
        },
        "group_id": 1,
    }))

    result = CliRunner().invoke(cli_main.main, ["inspect", str(update), "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["id"] == 4
    assert data["peer_type"] == "user"
    assert data["text"] == "hello"
