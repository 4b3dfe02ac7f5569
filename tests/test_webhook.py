"""Tests for webhook registration and CRC responses."""
import base64
import hashlib
import hmac

import pytest
import requests

from conftest import FakeHttp, FakeResponse
from tweet_cli import webhook


def test_challenge_response_is_base64_hmac_sha256():
    expected = base64.b64encode(
        hmac.new(b"consumer-secret", b"crc-token", hashlib.sha256).digest()
    ).decode()

    assert webhook.create_challenge_response("crc-token", "consumer-secret") == f"sha256={expected}"


def test_webhook_url_joins_origin_and_path():
    assert webhook.webhook_url("https://bot.example.com/", "webhook/twitter") == "https://bot.example.com/webhook/twitter"
    assert webhook.webhook_url("https://bot.example.com") == "https://bot.example.com/webhook/twitter"


def test_register_webhook_posts_url():
    http = FakeHttp([FakeResponse(200, {"id": "1234", "url": "https://bot.example.com/webhook/twitter"})])
    auth = object()

    data = webhook.register_webhook(
        http, auth, endpoint="https://api.example.com/webhooks.json", url="https://bot.example.com/webhook/twitter"
    )

    assert data["id"] == "1234"
    call = http.calls[0]
    assert call["url"] == "https://api.example.com/webhooks.json"
    assert call["params"] == {"url": "https://bot.example.com/webhook/twitter"}
    assert call["auth"] is auth


def test_register_webhook_surfaces_api_error():
    http = FakeHttp([FakeResponse(400, {"errors": [{"code": 214, "message": "Webhook URL does not meet the requirements."}]})])

    with pytest.raises(SystemExit) as exc:
        webhook.register_webhook(http, None, url="https://bot.example.com/webhook/twitter")

    assert "Webhook URL does not meet the requirements." in str(exc.value)


def test_store_and_load_webhook_id(tmp_path):
    path = tmp_path / "nested" / "webhook.json"
    webhook.store_webhook_id({"id": "1234", "valid": True}, path)

    assert webhook.load_webhook_id(path) == {"id": "1234", "valid": True}
    assert webhook.load_webhook_id(tmp_path / "missing.json") is None


def test_crc_command_prints_response_token(twitter_env, capsys):
    from tweet_cli.cli import main

    assert main(["webhook", "crc", "abc"]) == 0
    assert webhook.create_challenge_response("abc", "secret") in capsys.readouterr().out


def test_register_webhook_connection_error_exits():
    http = FakeHttp([requests.ConnectionError("connection refused")])

    with pytest.raises(SystemExit) as exc:
        webhook.register_webhook(http, None, endpoint="https://api.example.com/webhooks.json", url="https://bot.example.com/w")

    assert "connection refused" in str(exc.value)


def test_register_webhook_non_json_body_exits():
    http = FakeHttp([FakeResponse(200, None, text="<html>maintenance</html>")])

    with pytest.raises(SystemExit) as exc:
        webhook.register_webhook(http, None, endpoint="https://api.example.com/webhooks.json", url="https://bot.example.com/w")

    assert "invalid webhook response" in str(exc.value)
