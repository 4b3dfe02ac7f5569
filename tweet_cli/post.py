"""post, reply and split commands."""
from __future__ import annotations

import json
import logging

from .errors import CredentialsError, SplitError, ThreadBrokenError
from .models import ThreadResult
from .splitter import split
from .text import parse_tweet

LOG = logging.getLogger(__name__)


def _print_segments(segments: list[str]) -> None:
    for i, segment in enumerate(segments, start=1):
        label = f"Tweet {i}/{len(segments)}" if len(segments) > 1 else "Text"
        print(f"{label}: {segment}")
        print(f"    Weighted length: {parse_tweet(segment).weighted_length}")


def _report(thread: ThreadResult) -> int:
    for i, result in enumerate(thread.results, start=1):
        if result.ok:
            print(f"✓ {i}: https://twitter.com/i/web/status/{result.tweet_id}")
        else:
            print(f"✗ {i}: {result.reason}")
    return 0 if thread.results and thread.ok else 1


def _send(args, parent_id: str | None = None) -> int:
    text = (args.text or "").strip()
    if not text:
        print("Error: text is required")
        return 2

    try:
        segments = split(text)
    except SplitError as e:
        raise SystemExit(str(e)) from e

    if args.dry_run:
        print("DRY RUN")
        if parent_id:
            print(f"Replying to: {parent_id}")
        _print_segments(segments)
        return 0

    from .status import build_service

    try:
        service = build_service(policy=getattr(args, "on_failure", None))
    except CredentialsError as e:
        raise SystemExit(str(e)) from e

    try:
        thread = service.send_or_thread(
            text,
            parent_id=parent_id,
            auto_populate_reply_metadata=parent_id is not None,
        )
    except ThreadBrokenError as e:
        print(f"✗ {e}")
        thread = ThreadResult(e.results)
    return _report(thread)


def run(args) -> int:
    """Execute post command."""
    return _send(args)


def run_reply(args) -> int:
    """Execute reply command."""
    LOG.info("Replying to %s (%s)", getattr(args, "user", None) or "unknown user", args.tweet_id)
    return _send(args, parent_id=args.tweet_id)


def run_split(args) -> int:
    """Show how text would be split, without posting."""
    try:
        segments = split(args.text or "")
    except SplitError as e:
        raise SystemExit(str(e)) from e

    if args.json:
        print(json.dumps(
            [{"text": s, "weighted_length": parse_tweet(s).weighted_length} for s in segments],
            indent=2,
            ensure_ascii=False,
        ))
        return 0

    if not segments:
        print("(empty text: nothing to post)")
        return 0
    _print_segments(segments)
    return 0
