"""
基於 Pydux 的 Store 定義模組。

Store 持有唯一的狀態、目前使用的 reducer 以及訂閱者集合，
狀態只能透過 dispatch 由 reducer 計算出新值來替換。
"""
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from reactivex import Observable, Subject, operators as ops

from .types import Listener, Reducer, StoreEnhancer, Unsubscribe

S = TypeVar("S")


def _noop_reducer(state: Any = None, action: Any = None) -> None:
    return None


class Store(Generic[S]):
    """
    狀態容器，管理應用狀態並在每次 dispatch 後通知訂閱者。

    所有操作都是同步的：dispatch 會依序執行 reducer、替換狀態、
    通知訂閱者，完成後才返回。
    """

    def __init__(self, reducer: Optional[Reducer] = None, preloaded_state: Optional[S] = None):
        """
        初始化 Store 實例。

        Args:
            reducer: 狀態轉換函數，預設為永遠返回 None 的 reducer。
            preloaded_state: 初始狀態，預設為 None。
        """
        self._reducer: Reducer = reducer if reducer is not None else _noop_reducer
        self._state = preloaded_state
        # 以 id 為鍵的有序映射，按物件身分去重並保留註冊順序
        self._listeners: Dict[int, Listener] = {}
        # 狀態流，發送 (old_state, new_state)
        self._state_subject = Subject()

    def get_state(self) -> S:
        """
        獲取當前狀態。

        Returns:
            當前狀態。
        """
        return self._state

    @property
    def state(self) -> S:
        """當前狀態的唯讀屬性。"""
        return self._state

    def dispatch(self, action: Any = None) -> Any:
        """
        分發一個動作，計算新狀態並通知訂閱者。

        reducer 拋出異常時，異常會直接向外傳遞，狀態保持不變。
        訂閱者拋出異常時同樣向外傳遞，剩餘的訂閱者不會被通知。

        Args:
            action: 要分發的 Action，可以是任意值。

        Returns:
            傳入的 action 本身。
        """
        # dispatch 開始時先複製訂閱者快照；期間的新增或取消只影響之後的 dispatch
        listeners = list(self._listeners.values())

        old_state = self._state
        self._state = self._reducer(old_state, action)

        self._state_subject.on_next((old_state, self._state))

        for listener in listeners:
            listener()

        return action

    def subscribe(self, listener: Optional[Listener] = None) -> Unsubscribe:
        """
        註冊一個訂閱者，每次 dispatch 後以無參數方式調用。

        同一個 listener 物件重複註冊只會保留一份；以物件身分判斷，不依賴 __eq__ 或 __hash__。

        Args:
            listener: 無參數的回調函數，預設為不做任何事的函數。

        Returns:
            取消訂閱的函數，重複調用不會有額外效果。
        """
        if listener is None:
            def listener() -> None:
                pass

        self._listeners[id(listener)] = listener

        def unsubscribe() -> None:
            self._listeners.pop(id(listener), None)

        return unsubscribe

    def replace_reducer(self, next_reducer: Optional[Reducer] = None) -> None:
        """
        替換目前使用的 reducer，只影響之後的 dispatch。

        Args:
            next_reducer: 新的 reducer，預設為永遠返回 None 的 reducer。
        """
        self._reducer = next_reducer if next_reducer is not None else _noop_reducer

    def select(self, selector: Optional[Callable[[S], Any]] = None) -> Observable:
        """
        選擇狀態的一部分進行觀察。

        Args:
            selector: 一個函數，接收整個狀態並返回希望觀察的部分；
                預設觀察整個狀態。

        Returns:
            一個可觀察對象，發送 (selector(old_state), selector(new_state))，
            只有當選取結果不再是同一個物件時才發出。
        """
        if selector is None:
            selector = _identity

        return self._state_subject.pipe(
            ops.map(lambda states: (selector(states[0]), selector(states[1]))),
            # 以物件身分比較，不做深度比較
            ops.distinct_until_changed(lambda pair: pair[1], lambda a, b: a is b),
        )

    def __repr__(self) -> str:
        return f"Store(state={self._state!r}, listeners={len(self._listeners)})"


def _identity(value: Any) -> Any:
    return value


def create_store(
    reducer: Optional[Reducer] = None,
    preloaded_state: Any = None,
    enhancer: Optional[StoreEnhancer] = None,
) -> Store:
    """
    創建一個新的 Store 實例。

    Args:
        reducer: 狀態轉換函數 (state, action) -> new_state。
        preloaded_state: 初始狀態。
        enhancer: 可選的 store enhancer，接收 store 建構函數並返回新的建構函數。

    Returns:
        Store: 新創建的 Store；提供 enhancer 時為 enhancer 產生的 store。

    範例:
        >>> store = create_store(lambda state, action: state + 1, 0)
        >>> store.dispatch("tick")
        'tick'
        >>> store.get_state()
        1
    """
    if enhancer is not None:
        return enhancer(create_store)(reducer, preloaded_state)

    return Store(reducer, preloaded_state)
