"""
記憶化選擇器。
"""
from typing import Any, Callable, Optional, Tuple

from .types import ResultSelector, StateSelector

_UNSET = object()


def create_selector(*selectors: StateSelector, result_fn: Optional[ResultSelector] = None) -> Callable[[Any], Any]:
    """
    創建一個複合選擇器，輸入值沒有變化時直接返回上一次的結果。

    輸入值以物件身分 (`is`) 比較，不做深度比較。狀態原樣傳給每個輸入選擇器，
    不論其形態；搭配 store.select 時，select 會分別對新舊狀態調用選擇器。

    Args:
        *selectors: 多個輸入選擇器，這些函數會從 state 中提取對應的值
        result_fn: 處理輸出結果的函數，將多個選擇器的輸出進行處理；
            預設返回所有輸入值組成的元組

    Returns:
        經過快取優化的 selector 函數；只有一個選擇器且沒有 result_fn 時，
        直接返回該選擇器
    """
    if result_fn is None and len(selectors) == 1:
        return selectors[0]

    if result_fn is None:
        result_fn = lambda *args: args

    last_inputs: Tuple[Any, ...] = ()
    last_result: Any = _UNSET

    def selector(state: Any) -> Any:
        nonlocal last_inputs, last_result

        inputs = tuple(select(state) for select in selectors)

        if last_result is not _UNSET and len(inputs) == len(last_inputs) \
                and all(a is b for a, b in zip(inputs, last_inputs)):
            return last_result

        last_inputs = inputs
        last_result = result_fn(*inputs)
        return last_result

    def cache_clear() -> None:
        nonlocal last_inputs, last_result
        last_inputs = ()
        last_result = _UNSET

    selector.cache_clear = cache_clear  # type: ignore[attr-defined]

    return selector
