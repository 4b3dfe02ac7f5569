"""Data models shared by the dispatcher, the event bus and the CLI."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Message:
    """One status update, as sent to statuses/update."""

    body: str
    reply_to_id: Optional[str] = None
    auto_populate_reply_metadata: bool = False

    def to_params(self) -> dict:
        params = {"status": self.body}
        if self.reply_to_id is not None:
            params["in_reply_to_status_id"] = self.reply_to_id
        if self.auto_populate_reply_metadata:
            params["auto_populate_reply_metadata"] = "true"
        return params


@dataclass(frozen=True)
class PostResult:
    """Outcome of one post: the new tweet id, or why there is none."""

    tweet_id: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, tweet_id: str) -> "PostResult":
        return cls(tweet_id=tweet_id)

    @classmethod
    def failure(cls, reason: str) -> "PostResult":
        return cls(tweet_id=None, reason=reason)

    @property
    def ok(self) -> bool:
        return self.tweet_id is not None


@dataclass
class ThreadResult:
    """Results of one send operation, in posting order."""

    results: list[PostResult] = field(default_factory=list)

    @property
    def ids(self) -> list[Optional[str]]:
        return [r.tweet_id for r in self.results]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def broken_at(self) -> Optional[int]:
        """Index of the first failed post, if any."""
        for i, r in enumerate(self.results):
            if not r.ok:
                return i
        return None


@dataclass(frozen=True)
class StatusCreateEvent:
    text: str


@dataclass(frozen=True)
class StatusReplyEvent:
    text: str
    in_reply_to_tweet_id: str
    user: str = ""
