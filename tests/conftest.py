"""Pytest configuration and fixtures."""
import copy
from urllib.parse import parse_qsl

import pytest
import requests

from tweet_cli import config


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Ignore any config file on the machine running the tests."""
    monkeypatch.setattr(config, "_config_cache", copy.deepcopy(config.DEFAULT_CONFIG))


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeHttp:
    """Records posts; answers with the queued responses (or raises queued exceptions)."""

    def __init__(self, responses):
        self.calls = []
        self._responses = iter(responses)

    def post(self, url, data=None, headers=None, timeout=None, **kwargs):
        params = dict(parse_qsl(data)) if isinstance(data, str) else data
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout, **kwargs})
        r = next(self._responses)
        if isinstance(r, Exception):
            raise r
        return r


class FakeSigner:
    def __init__(self):
        self.calls = []

    def sign(self, url, method, params):
        self.calls.append((url, method, dict(params)))
        return f"OAuth test-{len(self.calls)}"


def ok(tweet_id):
    return FakeResponse(200, {"id_str": tweet_id, "text": "..."})


@pytest.fixture
def fake_signer():
    return FakeSigner()


@pytest.fixture
def twitter_env(monkeypatch):
    """Credentials from the environment, with pass unavailable."""
    monkeypatch.setattr("tweet_cli.auth.load_from_pass", lambda *a, **k: None)
    monkeypatch.setenv("TWITTER_API_KEY", "key")
    monkeypatch.setenv("TWITTER_API_KEY_SECRET", "secret")
    monkeypatch.setenv("TWITTER_ACCESS_TOKEN", "token")
    monkeypatch.setenv("TWITTER_ACCESS_TOKEN_SECRET", "token-secret")
