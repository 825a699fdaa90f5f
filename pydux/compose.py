"""
函數組合工具。
"""
from functools import reduce
from typing import Any, Callable


def _return_none(*args: Any, **kwargs: Any) -> None:
    return None


def compose(*funcs: Callable[..., Any]) -> Callable[..., Any]:
    """
    由右至左組合多個函數。

    `compose(f, g, h)(x)` 等同於 `f(g(h(x)))`：最後一個函數接收原始參數，
    之前的每個函數只接收下一個函數的單一返回值。

    Args:
        *funcs: 要組合的函數，可以為空。

    Returns:
        組合後的函數。沒有傳入函數時，返回一個永遠返回 None 的函數；
        只傳入一個函數時，直接返回該函數本身。

    範例:
        >>> compose(lambda x: x * 2, lambda a, b: a + b)(1, 3)
        8
    """
    if not funcs:
        return _return_none

    if len(funcs) == 1:
        return funcs[0]

    def _compose2(outer: Callable[..., Any], inner: Callable[..., Any]) -> Callable[..., Any]:
        def composed(*args: Any, **kwargs: Any) -> Any:
            return outer(inner(*args, **kwargs))
        return composed

    return reduce(_compose2, funcs)
