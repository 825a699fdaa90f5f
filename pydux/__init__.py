"""
Pydux：單向資料流的狀態管理庫。

單一 Store 持有狀態，只能透過 reducer 處理 dispatch 的 action 來更新，
並在每次更新後通知訂閱者。
"""

from .errors import PyduxError, DispatchError, ErrorHandler, global_error_handler
from .actions import Action, create_action, bind_action_creators, get_action_type, init_store
from .compose import compose
from .reducers import combine_reducers, create_reducer, on
from .store import Store, create_store
from .middleware import (
    MiddlewareAPI, EnhancedStore, apply_middleware,
    BaseMiddleware, LoggerMiddleware, PerformanceMonitorMiddleware, ErrorMiddleware
)
from .selectors import create_selector

__version__ = "0.1.0"

# 匯出所有公開 API
__all__ = [
    # Errors
    "PyduxError", "DispatchError", "ErrorHandler", "global_error_handler",

    # Actions
    "Action", "create_action", "bind_action_creators", "get_action_type", "init_store",

    # Compose
    "compose",

    # Reducers
    "combine_reducers", "create_reducer", "on",

    # Store
    "Store", "create_store",

    # Middleware
    "MiddlewareAPI", "EnhancedStore", "apply_middleware",
    "BaseMiddleware", "LoggerMiddleware", "PerformanceMonitorMiddleware", "ErrorMiddleware",

    # Selectors
    "create_selector",
]
