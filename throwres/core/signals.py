"""Response Signals — raisable descriptors of a terminal HTTP response.

Invariants:
    - A signal carries exactly one terminal action and a non-empty message
    - Construction has no side effects; raising and dispatch do
    - Signals are immutable: every field is a read-only property
    - RedirectSignal validates its status code at construction (fail-fast)
    - JsonSignal never inspects its payload; serialization errors surface at dispatch
    - is_response_signal() is the interceptor's capability test; it never reads message

Design Decisions:
    - Exception subclass: Python's raise is the non-local exit, no Outcome wrapper
      threaded through every return (ADR: only this one value type is intercepted)
    - Closed set {Redirect, Json, Custom}: bare ResponseSignal IS the custom kind,
      one level of subclassing only
    - Terminal actions capture str(location) / payload at construction so the
      action is fully determined by the constructor arguments
"""

from throwres.core.boundary_protocols import (
    Continuation, ResponseSink, TerminalAction,
)
from throwres.core.domain_types import (
    DEFAULT_SIGNAL_MESSAGE, REDIRECT_STATUS_CODES,
    JsonValue, RedirectStatus, SignalKind,
)
from throwres.core.errors import InvalidRedirectStatusError, InvalidStatusCodeError


class ResponseSignal(Exception):
    """Terminate the current request with whatever terminal_action writes.

    Example:
        raise ResponseSignal(
            lambda request, sink, continuation: sink.write_body(
                "<h1>Access Denied</h1>", media_type="text/html",
            ),
            "Admin page denied",
        )
    """

    _kind = SignalKind.CUSTOM

    def __init__(
        self, terminal_action: TerminalAction, message: str | None = None,
    ):
        if not callable(terminal_action):
            raise TypeError(
                f"terminal_action must be callable, "
                f"got {type(terminal_action).__name__}",
            )
        message = message or DEFAULT_SIGNAL_MESSAGE
        super().__init__(message)
        self._terminal_action = terminal_action
        self._message = message

    @property
    def terminal_action(self) -> TerminalAction:
        return self._terminal_action

    @property
    def message(self) -> str:
        return self._message

    @property
    def kind(self) -> SignalKind:
        return self._kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r})"


class RedirectSignal(ResponseSignal):
    """Terminate the request with a redirect to location (default 302)."""

    _kind = SignalKind.REDIRECT

    def __init__(
        self, location: object, status_code: int = RedirectStatus.FOUND,
    ):
        status = _validate_redirect_status(status_code)
        target = str(location)

        def write_redirect(
            request, sink: ResponseSink, continuation: Continuation,
        ) -> None:
            sink.write_redirect(int(status), target)

        super().__init__(write_redirect, f"Redirecting to {location}")
        self._location = location
        self._status_code = status

    @property
    def location(self) -> object:
        return self._location

    @property
    def status_code(self) -> RedirectStatus:
        return self._status_code


class JsonSignal(ResponseSignal):
    """Terminate the request with payload serialized as JSON (default 200)."""

    _kind = SignalKind.JSON

    def __init__(self, payload: JsonValue, status_code: int = 200):
        _validate_status_code(status_code)

        def write_json(
            request, sink: ResponseSink, continuation: Continuation,
        ) -> None:
            sink.set_status(status_code)
            sink.write_json(payload)

        super().__init__(write_json, f"JSON response: {status_code}")
        self._payload = payload
        self._status_code = status_code

    @property
    def payload(self) -> JsonValue:
        return self._payload

    @property
    def status_code(self) -> int:
        return self._status_code


def is_response_signal(value: object) -> bool:
    """Capability test used by the interceptor. Never looks at message or fields."""
    return isinstance(value, ResponseSignal)


# ─── Custom-kind helpers ─────────────────────────────────────────

def html_signal(
    content: str, status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> ResponseSignal:
    """Signal that answers with an HTML document."""
    return _body_signal(content, "text/html", status_code, headers)


def text_signal(
    content: str, status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> ResponseSignal:
    """Signal that answers with plain text."""
    return _body_signal(content, "text/plain", status_code, headers)


def status_signal(status_code: int) -> ResponseSignal:
    """Signal that answers with a bare status and an empty body."""
    _validate_status_code(status_code)

    def write_status(
        request, sink: ResponseSink, continuation: Continuation,
    ) -> None:
        sink.set_status(status_code)
        sink.write_body(b"")

    return ResponseSignal(write_status, f"Status response: {status_code}")


def _body_signal(
    content: str, media_type: str, status_code: int,
    headers: dict[str, str] | None,
) -> ResponseSignal:
    _validate_status_code(status_code)
    header_items = tuple((headers or {}).items())

    def write_body(
        request, sink: ResponseSink, continuation: Continuation,
    ) -> None:
        sink.set_status(status_code)
        for name, value in header_items:
            sink.set_header(name, value)
        sink.write_body(content, media_type=media_type)

    return ResponseSignal(
        write_body, f"{media_type} response: {status_code}",
    )


# ─── Validation ──────────────────────────────────────────────────

def _validate_redirect_status(status_code: object) -> RedirectStatus:
    # bool is an int subclass; True must not pass as a status
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        raise InvalidRedirectStatusError(status_code)
    if status_code not in REDIRECT_STATUS_CODES:
        raise InvalidRedirectStatusError(status_code)
    return RedirectStatus(status_code)


def _validate_status_code(status_code: object) -> None:
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        raise InvalidStatusCodeError(status_code)
