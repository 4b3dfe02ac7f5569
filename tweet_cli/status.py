"""Post tweets, turning text that is too long into a thread of replies."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

import requests

from .auth import FORM_CONTENT_TYPE, OAuthSigner, encode_params
from .config import get
from .errors import SplitError, ThreadBrokenError
from .events import EventBus
from .http import RateLimitedSession, http_error_detail
from .models import (
    Message,
    PostResult,
    StatusCreateEvent,
    StatusReplyEvent,
    ThreadResult,
)
from .splitter import split

LOG = logging.getLogger(__name__)


class ChainPolicy(str, Enum):
    """What to do with the rest of a thread once a post in it failed."""

    CONTINUE = "continue"
    ABORT = "abort"


class StatusService:
    """Sends tweets and threads through a rate-limited session.

    Posts within one send operation are strictly sequential: a reply is only
    issued once the previous post's id (or failure) is known.
    """

    def __init__(
        self,
        http: RateLimitedSession,
        signer: OAuthSigner,
        *,
        endpoint: str | None = None,
        policy: ChainPolicy | str | None = None,
        timeout: float | None = None,
        splitter: Callable[[str], list[str]] = split,
    ):
        self.http = http
        self.signer = signer
        self.endpoint = endpoint or get("api.status_update_endpoint")
        self.policy = ChainPolicy(policy or get("thread.on_failure", ChainPolicy.CONTINUE.value))
        self.timeout = timeout if timeout is not None else get("api.timeout", 20)
        self.split = splitter

    def subscribe(self, bus: EventBus) -> None:
        bus.subscribe(StatusCreateEvent, self.on_post)
        bus.subscribe(StatusReplyEvent, self.on_reply)

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def on_post(self, event: StatusCreateEvent) -> Optional[ThreadResult]:
        LOG.info("Sending tweet: %s", event.text)
        return self._handle(event.text)

    def on_reply(self, event: StatusReplyEvent) -> Optional[ThreadResult]:
        LOG.info("Replying to %s: %s", event.user or event.in_reply_to_tweet_id, event.text)
        return self._handle(
            event.text,
            parent_id=event.in_reply_to_tweet_id,
            auto_populate_reply_metadata=True,
        )

    def _handle(self, text: str, **kwargs) -> Optional[ThreadResult]:
        try:
            return self.send_or_thread(text, **kwargs)
        except ThreadBrokenError as e:
            LOG.warning("%s; %d segment(s) sent", e, len(e.results) - 1)
        except SplitError as e:
            LOG.error("%s", e)
        return None

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def send_or_thread(
        self,
        text: str,
        parent_id: Optional[str] = None,
        auto_populate_reply_metadata: bool = False,
    ) -> ThreadResult:
        """Post text as one tweet, or as a thread when it does not fit."""
        segments = self.split(text)
        thread = ThreadResult()

        if not segments:
            LOG.debug("Nothing to send")
            return thread

        if len(segments) == 1:
            LOG.info("This tweet is valid, making a single tweet")
            thread.results.append(
                self.send_tweet(Message(segments[0], parent_id, auto_populate_reply_metadata))
            )
            return thread

        LOG.warning("This tweet isn't valid, making a thread of %d tweets", len(segments))

        if parent_id is not None:
            return self.make_thread(parent_id, segments, thread)

        root = self.send_tweet(Message(segments[0], None, auto_populate_reply_metadata))
        thread.results.append(root)
        self._check_link(thread, remaining=len(segments) - 1)
        return self.make_thread(root.tweet_id, segments[1:], thread)

    def make_thread(
        self,
        parent_id: Optional[str],
        segments: list[str],
        thread: Optional[ThreadResult] = None,
    ) -> ThreadResult:
        """Post segments in order, each replying to the one before."""
        thread = thread if thread is not None else ThreadResult()
        reply_to = parent_id

        for i, segment in enumerate(segments):
            result = self.send_tweet(Message(segment, reply_to, True))
            thread.results.append(result)
            self._check_link(thread, remaining=len(segments) - i - 1)
            reply_to = result.tweet_id

        return thread

    def _check_link(self, thread: ThreadResult, remaining: int) -> None:
        last = thread.results[-1]
        if last.ok or remaining == 0:
            return

        index = len(thread.results) - 1
        if self.policy is ChainPolicy.ABORT:
            raise ThreadBrokenError(index, thread.results)

        # The failure itself was logged by send_tweet; next post goes out unlinked.
        LOG.debug(
            "Segment %d has no id, posting the remaining %d segment(s) unlinked",
            index + 1, remaining,
        )

    def send_tweet(self, message: Message) -> PostResult:
        """Sign and post one message. Failures are returned, not raised."""
        url = self.endpoint
        params = message.to_params()

        try:
            authorization = self.signer.sign(url, "POST", params)
        except Exception as err:
            return self._failed(message, f"could not sign request: {err!r}")

        headers = {"Authorization": authorization, "Content-Type": FORM_CONTENT_TYPE}
        try:
            r = self.http.post(url, data=encode_params(params), headers=headers, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as err:
            return self._failed(message, http_error_detail(err))
        except ValueError as err:
            return self._failed(message, f"invalid response: {err}")

        tweet_id = data.get("id_str") if isinstance(data, dict) else None
        if not tweet_id:
            return self._failed(message, "response has no id_str")

        LOG.info("Tweet sent (%s): %s", tweet_id, message.body)
        return PostResult.success(str(tweet_id))

    def _failed(self, message: Message, reason: str) -> PostResult:
        LOG.error("Tweet failed (reply to %s): %s", message.reply_to_id, reason)
        return PostResult.failure(reason)


def build_service(policy: ChainPolicy | str | None = None) -> StatusService:
    """StatusService wired to real credentials and the process-wide limiter."""
    from .auth import load_credentials

    return StatusService(
        RateLimitedSession(),
        OAuthSigner(load_credentials()),
        policy=policy,
    )
