"""Boundary Protocols — contracts between signals and the host that writes responses.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - A terminal action writes through a ResponseSink and nothing else
    - Exactly one of write_body / write_json / write_redirect resolves a sink

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Sink methods are sync: they only buffer the response; the shell sends it.
      Terminal actions MAY still be async (TerminalAction allows an awaitable)
"""

from typing import Any, Awaitable, Callable, Protocol

from throwres.core.domain_types import JsonValue


class ResponseSink(Protocol):
    """Response-writing primitives exposed by the host pipeline."""

    @property
    def resolved(self) -> bool: ...

    def set_status(self, status_code: int) -> None: ...
    def set_header(self, name: str, value: str) -> None: ...
    def write_body(
        self, content: str | bytes, media_type: str | None = None,
    ) -> None: ...
    def write_json(self, value: JsonValue) -> None: ...
    def write_redirect(self, status_code: int, location: str) -> None: ...


# Receives the value to forward down the host's error chain.
Continuation = Callable[[BaseException], Any]

TerminalAction = Callable[
    [Any, ResponseSink, Continuation], Awaitable[None] | None,
]
