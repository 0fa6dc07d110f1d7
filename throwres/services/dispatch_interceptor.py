"""Dispatch Interceptor — executes raised ResponseSignals, forwards everything else.

Invariants:
    - Signal caught → terminal_action(request, sink, continuation) runs once,
      continuation is never called
    - Anything else → continuation(caught) with the value unchanged, no terminal
      action runs
    - First signal to reach a sink wins: a sink that is already resolved is
      never written again
    - A terminal action that returns without resolving the sink is an error
    - Failures inside terminal_action propagate to the caller; no retry, no suppression

Design Decisions:
    - Explicit instance passed to register_error_handlers, no module-level
      singleton (ADR: the termination boundary is a visible dependency)
    - Awaits async terminal actions and continuations so asynchronous failures
      reach the host's error chain instead of being dropped
"""

import inspect
import logging

from throwres.core.boundary_protocols import Continuation, ResponseSink
from throwres.core.errors import ErrorContext, UnresolvedResponseError
from throwres.core.signals import ResponseSignal, is_response_signal

logger = logging.getLogger(__name__)


class DispatchInterceptor:
    """The one consumer of ResponseSignal values at the tail of the error chain."""

    def __init__(self, log_level: int | str = logging.DEBUG):
        if isinstance(log_level, str):
            log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            raise ValueError(f"Unknown log level: {log_level!r}")
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    async def dispatch(
        self,
        caught: BaseException,
        request,
        sink: ResponseSink,
        continuation: Continuation,
    ) -> None:
        """Execute caught if it is a signal, otherwise hand it to continuation."""
        if not is_response_signal(caught):
            await _settle(continuation(caught))
            return

        path = _request_path(request)
        if sink.resolved:
            logger.warning(
                f"Ignoring {caught!r}: response already resolved by an earlier signal",
                extra={"signal_kind": caught.kind.value, "path": path},
            )
            return

        logger.log(
            self._log_level,
            f"Dispatching {caught.kind.value} signal: {caught.message}",
            extra={
                "signal_kind": caught.kind.value,
                "status_code": _status_code(caught),
                "path": path,
            },
        )
        await _settle(caught.terminal_action(request, sink, continuation))
        if not sink.resolved:
            raise UnresolvedResponseError(
                caught.message,
                ErrorContext(path=path, signal_kind=caught.kind.value),
            )


async def _settle(result) -> None:
    if inspect.isawaitable(result):
        await result


def _request_path(request) -> str | None:
    url = getattr(request, "url", None)
    return getattr(url, "path", None)


def _status_code(signal: ResponseSignal) -> int | None:
    # log extra only; custom signals may carry anything under this name
    status = getattr(signal, "status_code", None)
    if isinstance(status, bool) or not isinstance(status, int):
        return None
    return int(status)
