"""
基於 Pydux 的中介軟體定義模組。

此模組提供 `apply_middleware`，將一組中介軟體串成一個 store enhancer，
以及幾個可以直接使用的類型化中介軟體，用於在動作分發過程中插入
日誌記錄、錯誤回報、性能監控等自定義邏輯。

中介軟體的形式為 `middleware(api)(next_dispatch) -> dispatch`：
`api` 提供 `dispatch` 與 `get_state`，`next_dispatch` 是鏈中下一層的 dispatch。
"""
import contextlib
import inspect
import time
from typing import Any, Callable, Dict, Generator, List, Optional

from reactivex import Observable

from .actions import get_action_type
from .compose import compose
from .errors import DispatchError, ErrorHandler, global_error_handler
from .types import (
    ActionContext, DispatchFunction, GetState, Listener, Middleware,
    MiddlewareFunction, NextDispatch, Reducer, StoreCreator, StoreEnhancer, Unsubscribe
)


def _action_type(action: Any) -> str:
    """取得 action 的類型名稱，供日誌與統計使用；沒有類型時使用 repr。"""
    action_type = get_action_type(action)
    if action_type is None:
        return repr(action)
    return str(action_type)


class MiddlewareAPI:
    """
    傳給中介軟體的受限 store 視圖。

    `dispatch` 固定綁定在建立時的底層 store 的原始 dispatch，
    而非整條中介軟體鏈組合後的 dispatch。
    """
    __slots__ = ('dispatch', 'get_state')

    def __init__(self, dispatch: DispatchFunction, get_state: GetState):
        self.dispatch = dispatch
        self.get_state = get_state

    @property
    def state(self) -> Any:
        return self.get_state()


class EnhancedStore:
    """
    套用中介軟體後的 store。

    除 dispatch 外的操作都委派給底層 store。
    """

    def __init__(self, store: Any, dispatch: DispatchFunction):
        self._store = store
        self.dispatch = dispatch

    def get_state(self) -> Any:
        return self._store.get_state()

    @property
    def state(self) -> Any:
        return self._store.get_state()

    def subscribe(self, listener: Optional[Listener] = None) -> Unsubscribe:
        return self._store.subscribe(listener)

    def replace_reducer(self, next_reducer: Optional[Reducer] = None) -> None:
        self._store.replace_reducer(next_reducer)

    def select(self, selector: Optional[Callable[[Any], Any]] = None) -> Observable:
        return self._store.select(selector)

    def __repr__(self) -> str:
        return f"EnhancedStore({self._store!r})"


def apply_middleware(*middlewares: Middleware) -> StoreEnhancer:
    """
    將多個中介軟體組合成一個 store enhancer。

    第一個中介軟體位於最外層，最先看到每個 action；
    最後一個中介軟體最接近底層 store 的 dispatch。
    傳入的類別會先以無參數方式實例化。

    Args:
        *middlewares: 要套用的中介軟體，可以是函數、類別或實例。

    Returns:
        store enhancer，接收 store 建構函數並返回新的建構函數。

    範例:
        >>> store = create_store(reducer, 0, apply_middleware(LoggerMiddleware))
    """
    def enhancer(store_creator: StoreCreator) -> StoreCreator:
        def create(reducer: Optional[Reducer] = None, preloaded_state: Any = None) -> Any:
            store = store_creator(reducer, preloaded_state)

            if not middlewares:
                return store

            api = MiddlewareAPI(store.dispatch, store.get_state)
            chain = []
            for mw in middlewares:
                inst = mw() if inspect.isclass(mw) else mw
                chain.append(inst(api))

            dispatch = compose(*chain)(store.dispatch)
            return EnhancedStore(store, dispatch)

        return create

    return enhancer


# ———— Base Middleware ————
class BaseMiddleware:
    """
    基礎中介類，定義所有中介可能實現的鉤子。

    實例本身是可調用的中介軟體，可以直接傳給 apply_middleware。
    中介軟體可以介入動作分發的流程，在動作到達 Reducer 前、
    動作處理完成後或出現錯誤時執行自定義邏輯。
    """

    def on_next(self, action: Any, prev_state: Any) -> None:
        """
        在 action 發送給 reducer 之前調用。

        Args:
            action: 正在 dispatch 的 Action
            prev_state: dispatch 之前的狀態
        """
        pass

    def on_complete(self, next_state: Any, action: Any) -> None:
        """
        在 reducer 與訂閱者處理完 action 之後調用。

        Args:
            next_state: dispatch 之後的最新狀態
            action: 剛剛 dispatch 的 Action
        """
        pass

    def on_error(self, error: Exception, action: Any) -> None:
        """
        如果 dispatch 過程中拋出異常，則調用此鉤子。異常之後會繼續向外拋出。

        Args:
            error: 拋出的異常
            action: 導致異常的 Action
        """
        pass

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        """
        以上下文管理器的形式處理單次 action 分發的生命週期。

        進入時調用 on_next，正常離開時以 context['next_state'] 調用 on_complete，
        發生異常時調用 on_error 並重新拋出。

        Args:
            action: 要分發的 Action
            prev_state: 分發前的狀態

        Yields:
            ActionContext: 用於在上下文內部與外部之間傳遞數據的字典
        """
        context: ActionContext = {
            'action': action,
            'prev_state': prev_state,
            'next_state': None,
            'result': None,
            'error': None,
            'timestamp': time.time(),
        }

        self.on_next(action, prev_state)
        try:
            yield context
        except Exception as err:
            context['error'] = err
            self.on_error(err, action)
            raise
        self.on_complete(context['next_state'], action)

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        """
        配置中介軟體。

        Args:
            api: 提供 dispatch 與 get_state 的 store 視圖

        Returns:
            配置函數，接收 next_dispatch 並返回新的 dispatch 函數
        """
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Any = None) -> Any:
                with self.action_context(action, api.get_state()) as context:
                    context['result'] = next_dispatch(action)
                    context['next_state'] = api.get_state()
                return context['result']
            return dispatch
        return middleware


# ———— LoggerMiddleware ————
class LoggerMiddleware(BaseMiddleware):
    """
    日誌中介，打印每個 action 發送前和發送後的 state。

    使用場景:
    - 偵錯時需要觀察每次 state 的變化。
    - 確保 action 的執行順序正確。
    """

    def __init__(self, printer: Callable[[str], Any] = print):
        """
        Args:
            printer: 輸出函數，預設為 print
        """
        self.printer = printer

    def on_next(self, action: Any, prev_state: Any) -> None:
        action_type = _action_type(action)
        self.printer(f"▶️ dispatching {action_type}")
        self.printer(f"🔄 state before {action_type}: {prev_state}")

    def on_complete(self, next_state: Any, action: Any) -> None:
        self.printer(f"✅ state after {_action_type(action)}: {next_state}")

    def on_error(self, error: Exception, action: Any) -> None:
        self.printer(f"❌ error in {_action_type(action)}: {error}")


# ———— PerformanceMonitorMiddleware ————
class PerformanceMonitorMiddleware(BaseMiddleware):
    """
    性能監控中間件，記錄 action 處理時間。
    """

    def __init__(self, threshold_ms: float = 100, log_all: bool = False,
                 printer: Callable[[str], Any] = print):
        """
        初始化 PerformanceMonitorMiddleware。

        Args:
            threshold_ms: 性能警告閾值，單位為毫秒，預設為 100 毫秒
            log_all: 是否記錄所有 action 的性能指標，預設為 False (只記錄超過閾值的)
            printer: 輸出函數，預設為 print
        """
        self.threshold_ms = threshold_ms
        self.log_all = log_all
        self.printer = printer
        self.metrics: Dict[str, List[float]] = {}

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        action_type = _action_type(action)
        start_time = time.perf_counter()
        with super().action_context(action, prev_state) as context:
            try:
                yield context
            except Exception as err:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                self.printer(f"❌ Action {action_type} failed after {elapsed_ms:.2f}ms: {err}")
                raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self.metrics.setdefault(action_type, []).append(elapsed_ms)
        if self.log_all or elapsed_ms > self.threshold_ms:
            self.printer(f"⏱️ Performance: Action {action_type} took {elapsed_ms:.2f}ms")
            if elapsed_ms > self.threshold_ms:
                self.printer(f"⚠️ Warning: Action {action_type} exceeded threshold ({self.threshold_ms}ms)")

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        """
        獲取性能指標統計信息。

        Returns:
            以 action 類型為鍵，包含 avg、max、min、count 的字典
        """
        result = {}
        for action_type, times in self.metrics.items():
            if not times:
                continue
            result[action_type] = {
                'avg': sum(times) / len(times),
                'max': max(times),
                'min': min(times),
                'count': len(times),
            }
        return result


# ———— ErrorMiddleware ————
class ErrorMiddleware(BaseMiddleware):
    """
    捕獲 dispatch 過程中的異常並交給錯誤處理器，之後原樣重新拋出。

    使用場景:
    - 當需要統一記錄或上報所有異常時。
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None):
        """
        Args:
            error_handler: 錯誤處理器，預設為 global_error_handler
        """
        self.error_handler = error_handler if error_handler is not None else global_error_handler

    def on_error(self, error: Exception, action: Any) -> None:
        dispatch_error = DispatchError(
            f"dispatch failed: {error}",
            _action_type(action),
            action,
            original_type=error.__class__.__name__,
        )
        dispatch_error.__cause__ = error
        self.error_handler.handle(dispatch_error)
