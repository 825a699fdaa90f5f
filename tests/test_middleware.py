import pytest

from pydux import (
    Action, BaseMiddleware, DispatchError, EnhancedStore, ErrorHandler, ErrorMiddleware,
    LoggerMiddleware, MiddlewareAPI, PerformanceMonitorMiddleware, apply_middleware,
    compose, create_store,
)


def counter_reducer(state, action):
    if isinstance(action, dict) and action.get("type") == "increment":
        return state + 1
    return state


def marker_middleware(name, log):
    def middleware(api):
        def wrap(next_dispatch):
            def dispatch(action=None):
                log.append(name)
                return next_dispatch(action)
            return dispatch
        return wrap
    return middleware


# =============================================================================
# apply_middleware
# =============================================================================

def test_without_middleware_returns_base_store():
    store = create_store(counter_reducer, 0, apply_middleware())

    assert not isinstance(store, EnhancedStore)
    store.dispatch({"type": "increment"})
    assert store.get_state() == 1


def test_middleware_runs_in_call_site_order():
    log = []
    store = create_store(counter_reducer, 0, apply_middleware(
        marker_middleware("m1", log),
        marker_middleware("m2", log),
    ))
    store.subscribe(lambda: log.append("listener"))

    store.dispatch({"type": "increment"})

    assert log == ["m1", "m2", "listener"]
    assert store.get_state() == 1


def test_enhanced_store_delegates_to_base_store():
    store = create_store(counter_reducer, 0, apply_middleware(marker_middleware("m", [])))
    calls = []

    unsubscribe = store.subscribe(lambda: calls.append(store.get_state()))
    store.dispatch({"type": "increment"})
    unsubscribe()
    store.dispatch({"type": "increment"})

    assert calls == [1]
    assert store.state == 2

    store.replace_reducer(lambda state, action: "replaced")
    store.dispatch("anything")
    assert store.get_state() == "replaced"


def test_dispatch_returns_action_through_chain():
    store = create_store(counter_reducer, 0, apply_middleware(marker_middleware("m", [])))
    action = {"type": "increment"}

    assert store.dispatch(action) is action


def test_middleware_api_is_bound_to_base_store():
    captured = []

    def capture(api):
        captured.append(api)
        return lambda next_dispatch: next_dispatch

    store = create_store(counter_reducer, 5, apply_middleware(capture))

    api = captured[0]
    assert isinstance(api, MiddlewareAPI)
    assert api.get_state() == 5
    assert api.state == 5
    assert api.dispatch == store._store.dispatch


def test_middleware_api_dispatch_skips_chain():
    log = []

    def redispatch(api):
        def wrap(next_dispatch):
            def dispatch(action=None):
                log.append(("redispatch", action))
                if action == "double":
                    api.dispatch({"type": "increment"})
                    return next_dispatch({"type": "increment"})
                return next_dispatch(action)
            return dispatch
        return wrap

    store = create_store(counter_reducer, 0, apply_middleware(
        redispatch,
        marker_middleware("inner", log),
    ))

    store.dispatch("double")

    # api.dispatch 是原始 dispatch，不會再經過任何中介軟體
    assert log == [("redispatch", "double"), "inner"]
    assert store.get_state() == 2


def test_middleware_can_transform_action():
    def upper(api):
        return lambda next_dispatch: lambda action: next_dispatch(action.upper())

    store = create_store(lambda state, action: state + [action], [], apply_middleware(upper))
    store.dispatch("a")

    assert store.get_state() == ["A"]


def test_non_callable_middleware_fails_when_enhancer_runs():
    enhancer = apply_middleware(42)

    with pytest.raises(TypeError):
        create_store(counter_reducer, 0, enhancer)


def test_enhancers_compose():
    log = []
    enhancer = compose(
        apply_middleware(marker_middleware("outer", log)),
        apply_middleware(marker_middleware("inner", log)),
    )
    store = create_store(counter_reducer, 0, enhancer)

    store.dispatch({"type": "increment"})

    assert log == ["outer", "inner"]
    assert store.get_state() == 1


def test_middleware_classes_are_instantiated():
    events = []

    class Recording(BaseMiddleware):
        def on_next(self, action, prev_state):
            events.append(("next", action, prev_state))

        def on_complete(self, next_state, action):
            events.append(("complete", action, next_state))

    store = create_store(counter_reducer, 0, apply_middleware(Recording))
    action = {"type": "increment"}

    assert store.dispatch(action) is action
    assert events == [("next", action, 0), ("complete", action, 1)]


# =============================================================================
# BaseMiddleware hooks
# =============================================================================

def test_base_middleware_on_error_then_reraises():
    events = []

    class Recording(BaseMiddleware):
        def on_error(self, error, action):
            events.append(("error", str(error), action))

        def on_complete(self, next_state, action):
            events.append(("complete", action))

    def failing(state, action):
        raise ValueError("reducer failed")

    store = create_store(failing, 0, apply_middleware(Recording()))

    with pytest.raises(ValueError, match="reducer failed"):
        store.dispatch("boom")

    assert events == [("error", "reducer failed", "boom")]
    assert store.get_state() == 0


def test_logger_middleware_prints(capsys):
    store = create_store(counter_reducer, 0, apply_middleware(LoggerMiddleware))

    store.dispatch({"type": "increment"})

    out = capsys.readouterr().out
    assert "dispatching increment" in out
    assert "state before increment: 0" in out
    assert "state after increment: 1" in out


def test_logger_middleware_custom_printer_and_error():
    lines = []

    def failing(state, action):
        raise RuntimeError("nope")

    store = create_store(failing, 0, apply_middleware(LoggerMiddleware(printer=lines.append)))

    with pytest.raises(RuntimeError):
        store.dispatch(Action("[Test] Fail"))

    assert lines[0] == "▶️ dispatching [Test] Fail"
    assert lines[-1] == "❌ error in [Test] Fail: nope"


def test_performance_monitor_collects_metrics():
    lines = []
    monitor = PerformanceMonitorMiddleware(threshold_ms=10_000, log_all=True, printer=lines.append)
    store = create_store(counter_reducer, 0, apply_middleware(monitor))

    store.dispatch({"type": "increment"})
    store.dispatch({"type": "increment"})
    store.dispatch(Action("other"))

    metrics = monitor.get_metrics()
    assert metrics["increment"]["count"] == 2
    assert metrics["other"]["count"] == 1
    assert metrics["increment"]["min"] <= metrics["increment"]["avg"] <= metrics["increment"]["max"]
    assert len(lines) == 3
    assert all("Performance: Action" in line for line in lines)


def test_performance_monitor_silent_under_threshold():
    lines = []
    monitor = PerformanceMonitorMiddleware(threshold_ms=10_000, printer=lines.append)
    store = create_store(counter_reducer, 0, apply_middleware(monitor))

    store.dispatch({"type": "increment"})

    assert lines == []
    assert store.get_state() == 1


def test_performance_monitor_reports_failures():
    lines = []
    monitor = PerformanceMonitorMiddleware(printer=lines.append)

    def failing(state, action):
        raise KeyError("missing")

    store = create_store(failing, 0, apply_middleware(monitor))

    with pytest.raises(KeyError):
        store.dispatch("boom")

    assert len(lines) == 1
    assert lines[0].startswith("❌ Action 'boom' failed after")
    assert monitor.get_metrics() == {}


def test_error_middleware_reports_and_reraises():
    reported = []
    handler = ErrorHandler(log_to_console=False)
    handler.register_handler(reported.append)

    def failing(state, action):
        raise ValueError("bad state")

    store = create_store(failing, 0, apply_middleware(ErrorMiddleware(handler)))

    with pytest.raises(ValueError, match="bad state"):
        store.dispatch(Action("[Test] Fail", 1))

    assert len(reported) == 1
    error = reported[0]
    assert isinstance(error, DispatchError)
    assert error.action_type == "[Test] Fail"
    assert error.action == Action("[Test] Fail", 1)
    assert error.details["original_type"] == "ValueError"
    assert isinstance(error.__cause__, ValueError)


def test_error_middleware_passes_successful_dispatch():
    reported = []
    handler = ErrorHandler(log_to_console=False)
    handler.register_handler(reported.append)
    store = create_store(counter_reducer, 0, apply_middleware(ErrorMiddleware(handler)))

    store.dispatch({"type": "increment"})

    assert reported == []
    assert store.get_state() == 1
