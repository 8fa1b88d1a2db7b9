"""
@PURPOSE: 编辑器对外输出的提示与导航通道
@OUTLINE:
  - class Variant: 提示类型 (success/error/warning/info)
  - class Notification: 单条提示
  - class Notifier: 提示通道基类
  - class ConsoleNotifier: 使用 rich 输出到终端
  - class Navigator: 导航通道基类
  - class RecordingNavigator: 记录跳转路径 (CLI 用来决定退出码)
@GOTCHAS:
  - 通知与导航都由调用方注入编辑器, 编辑器不依赖全局上下文
@DEPENDENCIES:
  - 外部: rich, loguru
@RELATED: editor.py, cli.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from loguru import logger
from rich.console import Console


class Variant(str, Enum):
    """提示类型."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    variant: Variant = Variant.INFO


class Notifier(ABC):
    """提示通道基类 (对应页面上的 snackbar)."""

    @abstractmethod
    def enqueue(self, message: str, variant: Variant = Variant.INFO) -> None:
        """显示一条提示."""

    @abstractmethod
    def close_all(self) -> None:
        """关闭当前所有提示."""


class ConsoleNotifier(Notifier):
    """在终端输出提示."""

    STYLES = {
        Variant.SUCCESS: "bold green",
        Variant.ERROR: "bold red",
        Variant.WARNING: "yellow",
        Variant.INFO: "cyan",
    }

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)
        self.history: list[Notification] = []

    def enqueue(self, message: str, variant: Variant = Variant.INFO) -> None:
        variant = Variant(variant)
        self.history.append(Notification(message, variant))
        self.console.print(message, style=self.STYLES[variant], markup=False, highlight=False)

    def close_all(self) -> None:
        # 终端输出无法撤回, 仅清空记录
        self.history.clear()


class Navigator(ABC):
    """导航通道基类."""

    @abstractmethod
    def push(self, path: str) -> None:
        """跳转到指定路径."""


class RecordingNavigator(Navigator):
    """记录所有跳转."""

    def __init__(self) -> None:
        self.history: list[str] = []

    @property
    def current(self) -> str | None:
        return self.history[-1] if self.history else None

    def push(self, path: str) -> None:
        logger.info("跳转页面: {}", path)
        self.history.append(path)
