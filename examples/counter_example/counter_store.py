from pydux import (
    LoggerMiddleware, PerformanceMonitorMiddleware, apply_middleware, create_store
)

from counter_reducers import root_reducer

performance = PerformanceMonitorMiddleware(threshold_ms=5)

# 創建Store
store = create_store(
    root_reducer,
    {"version": 1},
    apply_middleware(LoggerMiddleware, performance),
)
