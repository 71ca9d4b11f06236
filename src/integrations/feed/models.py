from dataclasses import dataclass, field
from typing import Any


class FeedError(Exception):
    """Base class for every way a feed fetch can fail."""

    user_message = "We couldn't load the latest products."


class NetworkError(FeedError):
    user_message = "We couldn't reach the product feed."


class FeedNotConfiguredError(NetworkError):
    user_message = "The product feed is not configured yet."


class HttpError(FeedError):
    def __init__(self, status_code: int):
        super().__init__(f"Feed responded with HTTP {status_code}")
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        return f"The product feed responded with an error (HTTP {self.status_code})."


class ParseError(FeedError):
    user_message = "The product feed sent data we couldn't read."


class EmptyResultError(FeedError):
    user_message = "No products available at the moment."


@dataclass
class FeedResult:
    """Outcome of one feed fetch: raw payloads on success, the error otherwise."""

    payloads: list[Any] = field(default_factory=list)
    error: FeedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payloads: list[Any]) -> "FeedResult":
        return cls(payloads=payloads)

    @classmethod
    def failure(cls, error: FeedError) -> "FeedResult":
        return cls(error=error)
