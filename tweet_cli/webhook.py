"""Account Activity webhook registration and CRC challenge-response."""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from pathlib import Path

import requests

from .config import get
from .http import RateLimitedSession, http_error_detail

LOG = logging.getLogger(__name__)


def create_challenge_response(crc_token: str, consumer_secret: str) -> str:
    """Answer a Twitter CRC check: base64 HMAC-SHA256 of the token."""
    digest = hmac.new(
        consumer_secret.encode("utf-8"),
        crc_token.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return "sha256=" + base64.b64encode(digest).decode("ascii")


def webhook_url(origin: str | None = None, path: str | None = None) -> str:
    origin = (origin or get("webhook.origin", "")).rstrip("/")
    path = path or get("webhook.path", "/webhook/twitter")
    return origin + "/" + path.lstrip("/")


def register_webhook(
    http: RateLimitedSession,
    auth,
    *,
    endpoint: str | None = None,
    url: str | None = None,
    timeout: float | None = None,
) -> dict:
    """Register our webhook URL with the Account Activity API."""
    endpoint = endpoint or get("api.webhook_registration_endpoint")
    url = url or webhook_url()
    LOG.info("Registering webhook %s at %s", url, endpoint)

    try:
        r = http.post(
            endpoint,
            data={"url": url},
            auth=auth,
            timeout=timeout if timeout is not None else get("api.timeout", 20),
        )
        r.raise_for_status()
        data = r.json()
    except requests.RequestException as err:
        raise SystemExit(f"Twitter API error while registering webhook: {http_error_detail(err)}") from err
    except ValueError as err:
        raise SystemExit(f"Twitter API returned an invalid webhook response: {err}") from err

    if not isinstance(data, dict):
        raise SystemExit(f"Twitter API returned an unexpected webhook response: {data!r}")
    LOG.info("Webhook registered: %s", data.get("id"))
    return data


def store_webhook_id(data: dict, path: str | Path | None = None) -> Path:
    """Write the registration response (id, url, ...) to disk."""
    path = Path(path or get("webhook.id_file")).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


def load_webhook_id(path: str | Path | None = None) -> dict | None:
    path = Path(path or get("webhook.id_file")).expanduser()
    if not path.exists():
        return None
    return json.loads(path.read_text())


def run(args) -> int:
    """Execute webhook command."""
    from .auth import load_credentials, make_oauth1
    from .errors import CredentialsError

    if args.webhook_command == "show":
        data = load_webhook_id()
        if not data:
            print("(no webhook registered)")
            return 1
        print(json.dumps(data, indent=2))
        return 0

    try:
        credentials = load_credentials()
    except CredentialsError as e:
        raise SystemExit(str(e)) from e

    if args.webhook_command == "crc":
        print(json.dumps({"response_token": create_challenge_response(args.token, credentials.api_key_secret)}))
        return 0

    data = register_webhook(
        RateLimitedSession(),
        make_oauth1(credentials),
        url=webhook_url(origin=args.origin),
    )
    path = store_webhook_id(data)
    print(f"✓ Webhook registered: {data.get('id')} (saved to {path})")
    return 0
