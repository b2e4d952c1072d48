"""Exceptions raised by the Wiki.js client."""

from __future__ import annotations


class WikiError(Exception):
    """Base class for failures talking to Wiki.js."""


class WikiTransportError(WikiError):
    """HTTP-level failure: network error, non-2xx status or unparseable body."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class WikiRemoteError(WikiError):
    """The GraphQL endpoint answered with a non-empty ``errors`` array."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__(f"GraphQL error: {', '.join(messages)}")
