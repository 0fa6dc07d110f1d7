"""Dispatch Interceptor — tests for signal execution and forwarding.

Tests cover:
    - Signals run their terminal action and never call continuation
    - Non-signals reach continuation unchanged and run no terminal action
    - Async terminal actions and async continuations are awaited
    - Only the first signal to reach a sink is executed
    - Terminal actions that leave the sink unresolved raise
    - Terminal action failures propagate unchanged
    - Each dispatch is logged with kind, status and path (DEBUG by default)
    - Custom signals with a non-int status_code attribute are still executed
"""

import logging
from types import SimpleNamespace

import pytest

from throwres.core.errors import PayloadSerializationError, UnresolvedResponseError
from throwres.core.signals import JsonSignal, RedirectSignal, ResponseSignal
from throwres.services.dispatch_interceptor import DispatchInterceptor
from tests.services.fake_sink import RecordingSink


class _Continuation:
    def __init__(self):
        self.received = []

    def __call__(self, value):
        self.received.append(value)


def _request(path="/orders/7"):
    return SimpleNamespace(url=SimpleNamespace(path=path))


@pytest.fixture
def interceptor():
    return DispatchInterceptor()


async def test_signal_runs_terminal_action_without_continuation(interceptor):
    sink, cont = RecordingSink(), _Continuation()
    await interceptor.dispatch(
        JsonSignal({"error": "Not found"}, 404), _request(), sink, cont,
    )
    assert sink.calls == [
        ("set_status", 404), ("write_json", {"error": "Not found"}),
    ]
    assert cont.received == []


async def test_redirect_signal_dispatch(interceptor):
    sink, cont = RecordingSink(), _Continuation()
    await interceptor.dispatch(RedirectSignal("/login"), _request(), sink, cont)
    assert sink.writes() == [("write_redirect", 302, "/login")]
    assert cont.received == []


@pytest.mark.parametrize("value", [
    RuntimeError("db down"),
    ValueError("Redirecting to /login"),
    KeyError("x"),
])
async def test_non_signal_is_forwarded_unchanged(interceptor, value):
    sink, cont = RecordingSink(), _Continuation()
    await interceptor.dispatch(value, _request(), sink, cont)
    assert len(cont.received) == 1
    assert cont.received[0] is value
    assert sink.calls == []


async def test_forwarding_continuation_may_raise(interceptor):
    def reraise(value):
        raise value

    err = RuntimeError("boom")
    with pytest.raises(RuntimeError) as info:
        await interceptor.dispatch(err, _request(), RecordingSink(), reraise)
    assert info.value is err


async def test_async_continuation_is_awaited(interceptor):
    received = []

    async def continuation(value):
        received.append(value)

    err = LookupError("missing")
    await interceptor.dispatch(err, _request(), RecordingSink(), continuation)
    assert received == [err]


async def test_async_terminal_action_is_awaited(interceptor):
    async def action(request, sink, continuation):
        sink.set_status(418)
        sink.write_body("teapot", media_type="text/plain")

    sink = RecordingSink()
    await interceptor.dispatch(
        ResponseSignal(action), _request(), sink, _Continuation(),
    )
    assert sink.calls == [
        ("set_status", 418), ("write_body", "teapot", "text/plain"),
    ]


async def test_terminal_action_receives_request_and_continuation(interceptor):
    seen = {}

    def action(request, sink, continuation):
        seen["request"], seen["continuation"] = request, continuation
        sink.write_body("")

    req, cont = _request(), _Continuation()
    await interceptor.dispatch(ResponseSignal(action), req, RecordingSink(), cont)
    assert seen["request"] is req
    assert seen["continuation"] is cont
    assert cont.received == []


async def test_only_first_signal_is_executed(interceptor, caplog):
    sink, cont = RecordingSink(), _Continuation()
    await interceptor.dispatch(JsonSignal({"first": True}, 400), _request(), sink, cont)
    with caplog.at_level(logging.WARNING):
        await interceptor.dispatch(RedirectSignal("/second"), _request(), sink, cont)

    assert sink.writes() == [("write_json", {"first": True})]
    assert cont.received == []
    assert "already resolved" in caplog.text


async def test_unresolved_sink_raises(interceptor):
    signal = ResponseSignal(lambda request, sink, continuation: sink.set_status(500))
    with pytest.raises(UnresolvedResponseError) as info:
        await interceptor.dispatch(signal, _request("/half"), RecordingSink(), _Continuation())
    assert info.value.context.path == "/half"
    assert info.value.context.signal_kind == "custom"


async def test_terminal_action_failure_propagates(interceptor):
    failure = PayloadSerializationError("Circular reference detected")

    def action(request, sink, continuation):
        raise failure

    cont = _Continuation()
    with pytest.raises(PayloadSerializationError) as info:
        await interceptor.dispatch(ResponseSignal(action), _request(), RecordingSink(), cont)
    assert info.value is failure
    assert cont.received == []


async def test_dispatch_is_logged_with_extras(caplog):
    interceptor = DispatchInterceptor(log_level="info")
    with caplog.at_level(logging.INFO, logger="throwres.services.dispatch_interceptor"):
        await interceptor.dispatch(
            RedirectSignal("/login", 307), _request("/account"),
            RecordingSink(), _Continuation(),
        )
    record = next(r for r in caplog.records if "Dispatching" in r.getMessage())
    assert record.levelno == logging.INFO
    assert record.signal_kind == "redirect"
    assert record.status_code == 307
    assert record.path == "/account"


async def test_request_without_url_is_tolerated(interceptor):
    sink = RecordingSink()
    await interceptor.dispatch(JsonSignal(None), object(), sink, _Continuation())
    assert sink.writes() == [("write_json", None)]


def test_log_level_accepts_names_and_numbers():
    assert DispatchInterceptor("warning").log_level == logging.WARNING
    assert DispatchInterceptor(logging.ERROR).log_level == logging.ERROR


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValueError):
        DispatchInterceptor("chatty")


def test_default_log_level_is_debug():
    assert DispatchInterceptor().log_level == logging.DEBUG


class _LabelledSignal(ResponseSignal):
    """Custom signal whose status_code is not an int."""

    def __init__(self, label):
        super().__init__(
            lambda request, sink, continuation: sink.write_body("created"),
            "Labelled response",
        )
        self.status_code = label


@pytest.mark.parametrize("label", ["201 Created", True, None, 201.0])
async def test_non_int_status_code_attribute_still_dispatches(interceptor, caplog, label):
    sink, cont = RecordingSink(), _Continuation()
    with caplog.at_level(logging.DEBUG, logger="throwres.services.dispatch_interceptor"):
        await interceptor.dispatch(_LabelledSignal(label), _request(), sink, cont)
    assert sink.writes() == [("write_body", "created", None)]
    assert cont.received == []
    record = next(r for r in caplog.records if "Dispatching" in r.getMessage())
    assert record.status_code is None


async def test_status_code_method_on_custom_signal_still_dispatches(interceptor):
    class _MethodSignal(ResponseSignal):
        def status_code(self):
            return 201

    signal = _MethodSignal(lambda request, sink, continuation: sink.write_body("ok"))
    sink = RecordingSink()
    await interceptor.dispatch(signal, None, sink, _Continuation())
    assert sink.writes() == [("write_body", "ok", None)]
