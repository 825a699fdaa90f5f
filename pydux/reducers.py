"""
Reducer 相關工具。

提供組合多個 reducer 的 `combine_reducers`，以及用 action 類型
對應處理函式來建立 reducer 的 `create_reducer` / `on`。
"""
from typing import Any, Dict, Mapping, Optional, Union, Tuple

from immutables import Map
from pydantic import BaseModel

from .actions import get_action_type
from .types import Reducer, S

Handler = Union[Tuple[str, Reducer], Dict[str, Reducer]]


def combine_reducers(reducers: Optional[Mapping[str, Reducer]] = None) -> Reducer:
    """
    將多個以鍵名區分的 reducer 合併成單一 reducer。

    合併後的 reducer 以舊狀態的淺拷貝為起點，依照 `reducers` 的順序，
    將 `reducer(state[key], action)` 的結果寫入新狀態的對應鍵。
    沒有對應 reducer 的鍵原樣保留；子 reducer 返回 None 時也照樣寫入。

    支援的整體狀態：
    - 一般 Mapping（dict 等）
    - immutables.Map，結果仍是 Map
    - pydantic BaseModel，子狀態以屬性存取，結果為 model_copy
    - None，視為空字典

    Args:
        reducers: 鍵名到 reducer 的映射，可以為空。

    Returns:
        合併後的 reducer 函式。
    """
    reducers = dict(reducers or {})

    def combination(state: Any = None, action: Any = None) -> Any:
        if state is None:
            state = {}

        if isinstance(state, BaseModel):
            updates = {
                key: reducer(getattr(state, key, None), action)
                for key, reducer in reducers.items()
            }
            return state.model_copy(update=updates)

        if isinstance(state, Map):
            with state.mutate() as mutation:
                for key, reducer in reducers.items():
                    mutation[key] = reducer(state.get(key), action)
                return mutation.finish()

        # 浅拷貝，避免修改原始 state
        next_state = state.copy() if isinstance(state, dict) else dict(state)
        for key, reducer in reducers.items():
            next_state[key] = reducer(state.get(key), action)
        return next_state

    # 保留子 reducer 映射以便檢查
    combination.reducers = reducers  # type: ignore[attr-defined]

    return combination


def on(action_creator_or_type: Any, handler: Reducer) -> Dict[str, Reducer]:
    """
    創建一個 action 類型與處理函式的映射。

    Args:
        action_creator_or_type: Action 創建器函式或 Action 類型字串。
        handler: 處理該 Action 的函式，接收 (state, action) 並返回新狀態。

    Returns:
        一個包含 {action_type: handler} 的字典。
    """
    if callable(action_creator_or_type) and hasattr(action_creator_or_type, 'type'):
        # 如果是 action 創建器函式，則提取其類型
        action_type = action_creator_or_type.type
    else:
        # 否則直接將其轉為字串作為類型
        action_type = str(action_creator_or_type)

    return {action_type: handler}


def create_reducer(initial_state: S, *handlers: Handler) -> Reducer:
    """
    創建一個 reducer 函式，用於處理狀態變更。

    Args:
        initial_state: 初始狀態，當傳入的 state 為 None 時使用。
        *handlers: 一系列 (action_type, handler_fn) 元組或使用 on 函式創建的處理器。

    action 的類型以 get_action_type 判斷：支援具有 `type` 屬性的物件，
    以及帶有 "type" 鍵的 Mapping（例如 {"type": "[Counter] Increment"}）。
    沒有對應處理器的 action 會原樣返回 state。

    Returns:
        一個 reducer 函式，根據 action 的類型執行對應的處理邏輯。

    範例:
        >>> increment = create_action("[Counter] Increment")
        >>> reducer = create_reducer(0, on(increment, lambda state, action: state + 1))
        >>> reducer(None, increment())
        1
    """
    action_handlers: Dict[str, Reducer] = {}

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        else:
            action_handlers.update(handler)

    def reducer(state: Any = None, action: Any = None) -> Any:
        if state is None:
            state = initial_state

        action_type = get_action_type(action)
        handler_fn = action_handlers.get(action_type) if action_type is not None else None
        if handler_fn is None:
            return state
        return handler_fn(state, action)

    reducer.initial_state = initial_state  # type: ignore[attr-defined]
    reducer.handlers = action_handlers  # type: ignore[attr-defined]

    return reducer
