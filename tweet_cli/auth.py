"""Credentials and OAuth 1.0a request signing for the Twitter API."""
from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from urllib.parse import urlencode

import requests
from requests_oauthlib import OAuth1

from .errors import CredentialsError

PASS_PATH = "api/twitter"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

CREDENTIAL_KEYS = (
    "TWITTER_API_KEY",
    "TWITTER_API_KEY_SECRET",
    "TWITTER_ACCESS_TOKEN",
    "TWITTER_ACCESS_TOKEN_SECRET",
)


@dataclass(frozen=True)
class Credentials:
    api_key: str
    api_key_secret: str
    access_token: str
    access_token_secret: str


def load_from_pass(pass_path: str = PASS_PATH) -> dict | None:
    """Load credentials from pass."""
    try:
        result = subprocess.run(
            ["pass", "show", pass_path],
            capture_output=True, text=True, timeout=5
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if result.returncode != 0:
        return None
    out: dict[str, str] = {}
    for line in result.stdout.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        out[k.strip()] = v.strip()
    return out if out else None


def load_credentials(pass_path: str = PASS_PATH) -> Credentials:
    """Load credentials from pass, falling back to environment variables."""
    env = load_from_pass(pass_path) or {}
    values = {key: env.get(key) or os.environ.get(key) for key in CREDENTIAL_KEYS}

    missing = [key for key, value in values.items() if not value]
    if missing:
        raise CredentialsError(f"Missing Twitter credentials: {', '.join(missing)}")

    return Credentials(
        api_key=values["TWITTER_API_KEY"],
        api_key_secret=values["TWITTER_API_KEY_SECRET"],
        access_token=values["TWITTER_ACCESS_TOKEN"],
        access_token_secret=values["TWITTER_ACCESS_TOKEN_SECRET"],
    )


def make_oauth1(credentials: Credentials) -> OAuth1:
    """requests auth object for calls that let requests sign the body itself."""
    return OAuth1(
        credentials.api_key,
        client_secret=credentials.api_key_secret,
        resource_owner_key=credentials.access_token,
        resource_owner_secret=credentials.access_token_secret,
    )


def encode_params(params: dict) -> str:
    return urlencode(params)


class OAuthSigner:
    """Produce OAuth 1.0a Authorization headers for form-encoded requests."""

    def __init__(self, credentials: Credentials):
        self.credentials = credentials
        self._auth = make_oauth1(credentials)

    def sign(self, url: str, method: str, params: dict) -> str:
        """Return the Authorization header for `method url` with `params` as body."""
        prepared = requests.Request(
            method.upper(),
            url,
            data=encode_params(params),
            headers={"Content-Type": FORM_CONTENT_TYPE},
            auth=self._auth,
        ).prepare()
        header = prepared.headers["Authorization"]
        return header.decode("utf-8") if isinstance(header, bytes) else header
