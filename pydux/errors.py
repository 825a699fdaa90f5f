"""
Pydux 錯誤處理模組。

核心的 Store、reducer 組合與中介軟體鏈不定義任何錯誤，所有異常都會原樣向外傳遞。
此模組提供結構化的錯誤類型與集中式的錯誤處理器，供 ErrorMiddleware 等
選用元件回報 dispatch 過程中的異常。
"""
import sys
import time
import traceback as tb
from typing import Any, Callable, Dict, List, Optional, Union


class PyduxError(Exception):
    """所有 Pydux 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = tb.format_exc() if sys.exc_info()[0] is not None else ""

    def to_dict(self) -> Dict[str, Any]:
        """
        將錯誤轉換為可序列化的字典。

        Returns:
            包含錯誤類型、訊息、細節與堆疊的字典。
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        if not self.details:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({details})"


class DispatchError(PyduxError):
    """dispatch 某個 Action 時發生的錯誤。"""

    def __init__(self, message: str, action_type: Optional[str], action: Any = None, **kwargs: Any) -> None:
        details = {"action_type": action_type, **kwargs}
        super().__init__(message, details)
        self.action_type = action_type
        self.action = action


class ErrorHandler:
    """集中式錯誤處理器，用於捕獲、日誌記錄和錯誤報告。"""

    def __init__(self, log_to_console: bool = True, log_to_file: bool = False, log_file: Optional[str] = None) -> None:
        """
        初始化錯誤處理器。

        Args:
            log_to_console: 是否將錯誤打印到控制台。
            log_to_file: 是否將錯誤追加寫入檔案。
            log_file: 錯誤日誌檔案路徑，預設為 "pydux_errors.log"。
        """
        self.log_to_console = log_to_console
        self.log_to_file = log_to_file
        self.log_file = log_file or "pydux_errors.log"
        self.handlers: List[Callable[[PyduxError], None]] = []

    def register_handler(self, handler: Callable[[PyduxError], None]) -> None:
        """
        註冊一個錯誤回調，handle 時依註冊順序調用。

        Args:
            handler: 接收 PyduxError 的函數。
        """
        self.handlers.append(handler)

    def handle(self, error: Union[PyduxError, Exception]) -> PyduxError:
        """
        處理一個錯誤：必要時包裝為 PyduxError，記錄後交給已註冊的回調。

        Args:
            error: 要處理的異常。

        Returns:
            處理後的 PyduxError。
        """
        if not isinstance(error, PyduxError):
            wrapped = PyduxError(str(error), {"original_type": error.__class__.__name__})
            wrapped.__cause__ = error
            error = wrapped

        if self.log_to_console:
            print(f"❌ [{error.__class__.__name__}] {error}")

        if self.log_to_file:
            timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"[{timestamp}] {error.__class__.__name__}: {error}\n")
                if error.traceback:
                    f.write(error.traceback)

        for handler in self.handlers:
            handler(error)

        return error


# 單例錯誤處理器
global_error_handler = ErrorHandler()
