"""
Pydux 共用的類型定義模組。

集中定義 reducer、listener、dispatch、enhancer 與 middleware 等
可調用物件的類型別名，供其他模組引用。
"""
from typing import Any, Callable, Optional, TypeVar

from typing_extensions import TypedDict

S = TypeVar("S")  # 狀態類型
P = TypeVar("P")  # 負載類型

# (state, action) -> new_state
Reducer = Callable[[Any, Any], Any]

# 無參數的訂閱回調
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]

DispatchFunction = Callable[..., Any]
NextDispatch = DispatchFunction
GetState = Callable[[], Any]

# (reducer, preloaded_state) -> store
StoreCreator = Callable[..., Any]
StoreEnhancer = Callable[[StoreCreator], StoreCreator]

# middleware(api)(next_dispatch) -> dispatch
MiddlewareFunction = Callable[[NextDispatch], DispatchFunction]
Middleware = Callable[[Any], MiddlewareFunction]

StateSelector = Callable[[Any], Any]
ResultSelector = Callable[..., Any]


class ActionContext(TypedDict, total=False):
    """單次 dispatch 過程中在中介軟體內傳遞的上下文數據。"""
    action: Any
    prev_state: Any
    next_state: Any
    result: Any
    error: Optional[BaseException]
    timestamp: float
