"""
基於 Pydux 的 Action 定義模組。

此模組提供 Action 類別、創建 Action 生成器的功能，
以及將 Action 生成器綁定到 dispatch 的工具。
"""
import functools
from typing import Any, Callable, Dict, Generic, Mapping, Optional, Union, overload

from .types import P, DispatchFunction


class Action(Generic[P]):
    """
    表示一個有類型和可選負載的動作。

    泛型參數:
        P: 負載的類型

    屬性:
        type: 動作的類型字符串
        payload: 動作的負載數據（可選）
    """
    __slots__ = ('type', 'payload')

    def __init__(self, type: str, payload: Optional[P] = None):
        super().__setattr__('type', type)
        super().__setattr__('payload', payload)

    def __setattr__(self, name, value):
        raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")

    def __delattr__(self, name):
        raise AttributeError(f"Cannot delete immutable instance attribute '{name}'")

    def __eq__(self, other):
        if not isinstance(other, Action):
            return NotImplemented
        return self.type == other.type and self.payload == other.payload

    def __hash__(self):
        return hash((self.type, self.payload))

    def __repr__(self):
        return f"Action(type='{self.type}', payload={self.payload!r})"


def get_action_type(action: Any) -> Optional[str]:
    """
    取得 action 的類型。

    支援具有 `type` 屬性的物件（如 Action），以及帶有 "type" 鍵的 Mapping；
    其他值沒有類型，返回 None。

    Args:
        action: 任意形態的 action

    Returns:
        action 的類型，無法判斷時為 None
    """
    if hasattr(action, "type"):
        return action.type
    if isinstance(action, Mapping):
        return action.get("type")
    return None


ActionCreator = Callable[..., Action[Any]]


@overload
def create_action(action_type: str) -> ActionCreator:
    ...


@overload
def create_action(action_type: str, prepare_fn: Callable[..., P]) -> ActionCreator:
    ...


def create_action(action_type: str, prepare_fn: Optional[Callable[..., Any]] = None) -> ActionCreator:
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action

    範例:
        >>> increment = create_action("[Counter] Increment")
        >>> increment()  # 返回 Action(type="[Counter] Increment", payload=None)
        >>>
        >>> add = create_action("[Counter] Add", lambda amount: amount)
        >>> add(5)  # 返回 Action(type="[Counter] Add", payload=5)
    """
    def action_creator(*args: Any, **kwargs: Any) -> Action[Any]:
        if prepare_fn:
            return Action(action_type, prepare_fn(*args, **kwargs))
        if len(args) == 1 and not kwargs:
            return Action(action_type, args[0])
        if args or kwargs:
            payload: Dict[Union[int, str], Any] = dict(zip(range(len(args)), args))
            payload.update(kwargs)
            return Action(action_type, payload)

        # 無參數，無負載
        return Action(action_type)

    # 添加 type 屬性以便於識別
    action_creator.type = action_type  # type: ignore[attr-defined]
    action_creator.__name__ = action_type

    return action_creator


# 根 Actions
init_store: ActionCreator = create_action("[Root] Init Store")


def bind_action_creators(action_creators: Any, dispatch: DispatchFunction) -> Any:
    """
    將 Action 生成器綁定到 dispatch，調用時不必再手動傳遞 dispatch。

    依序判斷參數的形態：
    - 可調用：返回包裝函數，轉發所有參數給生成器，並返回 dispatch 的結果。
    - Mapping：返回鍵相同的新字典，每個值都遞迴綁定（支援巢狀結構）。
    - 其他值（例如 None、數字、字串）：原樣返回，不會調用 dispatch。

    Args:
        action_creators: 單個 Action 生成器，或由生成器組成的（巢狀）Mapping。
        dispatch: 用於分發 Action 的函數。

    Returns:
        綁定後的函數或字典，或原樣返回的值。
    """
    if callable(action_creators):
        creator = action_creators

        @functools.wraps(creator)
        def bound_action_creator(*args: Any, **kwargs: Any) -> Any:
            return dispatch(creator(*args, **kwargs))

        return bound_action_creator

    if isinstance(action_creators, Mapping):
        return {
            key: bind_action_creators(value, dispatch)
            for key, value in action_creators.items()
        }

    return action_creators
