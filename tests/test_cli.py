"""
CLI tests - run commands in-process against a fake transport.

Run with: python -m pytest tests/test_cli.py -v
"""

import json
import urllib.error

import pytest

from dm_cli import cli
from dm_cli.core.client import USER_BY_USERNAME_URL
from dm_cli.sdk import TwitterClient


@pytest.fixture
def run_cli(monkeypatch, opener, capsys):
    """Run the CLI with a client bound to the fake opener; returns (exit_code, stdout)."""
    monkeypatch.setattr(cli, "TwitterClient", lambda: TwitterClient("ck", "cs", "at", "as", opener=opener))
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)

    def run(*args: str) -> tuple[int, str]:
        code = 0
        try:
            cli.main(list(args))
        except SystemExit as e:
            code = e.code or 0
        return code, capsys.readouterr().out

    return run


def test_user(run_cli, opener):
    opener.queue({"data": {"id": "12", "name": "jack", "username": "jack"}})

    code, out = run_cli("user", "@jack")

    assert code == 0
    assert json.loads(out) == {"id": "12", "name": "jack", "username": "jack"}
    assert opener.requests[0].full_url == USER_BY_USERNAME_URL + "jack"


def test_list_json_output(run_cli, opener):
    opener.queue({"events": [], "next_cursor": ""})

    code, out = run_cli("list")

    assert code == 0
    assert json.loads(out) == {"data": [], "next_cursor": ""}


def test_send_by_handle(run_cli, opener):
    opener.queue({"data": {"id": "12", "name": "jack", "username": "jack"}})
    opener.queue(
        {
            "event": {
                "type": "message_create",
                "id": "900",
                "created_timestamp": "1",
                "message_create": {"target": {"recipient_id": "12"}, "message_data": {"text": "yo"}},
            }
        }
    )

    code, out = run_cli("send", "--handle", "jack", "yo")

    assert code == 0
    assert json.loads(out)["id"] == "900"
    body = json.loads(opener.requests[1].data)
    assert body["event"]["message_create"]["target"]["recipient_id"] == "12"


def test_api_error_exits_nonzero(run_cli, opener):
    opener.queue({"errors": [{"code": 88, "message": "Rate limit exceeded"}, {"code": 130, "message": "Over"}]})

    code, out = run_cli("show", "1")

    assert code == 1
    assert json.loads(out)["error"] == "88, 130"


def test_ratelimit_unavailable(run_cli, opener):
    opener.fail(urllib.error.URLError("down"))

    code, out = run_cli("ratelimit")

    assert code == 1
    assert json.loads(out) == {"error": "Rate limit status unavailable"}


def test_no_command_prints_help(run_cli):
    code, out = run_cli()

    assert code == 0
    assert "usage: dm" in out


def test_unescaped_id_prints_json_error(run_cli, opener):
    code, out = run_cli("show", "1 2")

    assert code == 1
    assert "Invalid request URL" in json.loads(out)["error"]
