"""日志配置模块

基于 loguru 的统一日志配置, 供商品后台编辑器及其 CLI 复用。

Examples:
    基础使用::

        from packages.common.logger import setup_logger

        log = setup_logger("product_admin", level="DEBUG")
        log.info("应用启动")

    绑定上下文::

        from packages.common.logger import get_logger_with_context

        log = get_logger_with_context(product_id="abc", operation="load")
        log.info("开始加载商品")
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from loguru import logger

CONTEXT_KEYS: tuple[str, ...] = ("product_id", "operation", "target")


def _context_suffix(extra: dict[str, Any]) -> str:
    parts = [f"{key}={extra[key]}" for key in CONTEXT_KEYS if extra.get(key)]
    return f" [{', '.join(parts)}]" if parts else ""


def format_detailed(record: dict[str, Any]) -> str:
    """详细格式化器, 在消息前附加绑定的上下文.

    Args:
        record: loguru 日志记录

    Returns:
        loguru 格式模板
    """
    # 上下文来自用户输入, 花括号与尖括号需转义以免被 loguru 当作占位符或颜色标签
    context_str = (
        _context_suffix(record["extra"])
        .replace("{", "{{")
        .replace("}", "}}")
        .replace("<", r"\<")
    )
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
        f"{context_str} | "
        "<level>{message}</level>\n"
        "{exception}"
    )


def format_simple(record: dict[str, Any]) -> str:
    """简单格式化器."""
    return "{time:HH:mm:ss} | {level: <8} | {message}\n{exception}"


def setup_logger(
    name: str,
    level: str = "INFO",
    *,
    simple: bool = False,
) -> Any:
    """配置并返回 logger

    Args:
        name: logger 名称
        level: 日志级别（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        simple: 是否使用简单格式（CLI 场景）

    Returns:
        绑定了名称的 loguru logger

    Examples:
        >>> log = setup_logger("product_admin", level="DEBUG")
        >>> log.info("测试消息")
    """
    # 移除默认 handler
    logger.remove()

    logger.add(
        sys.stderr,
        format=format_simple if simple else format_detailed,
        level=level.upper(),
        colorize=True,
    )

    return logger.bind(name=name)


def setup_file_logger(
    name: str,
    log_file: str | Path,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> Any:
    """追加文件日志输出

    Args:
        name: logger 名称
        log_file: 日志文件路径
        level: 日志级别
        rotation: 日志轮转规则
        retention: 日志保留时间

    Returns:
        绑定了名称的 logger
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_path),
        format=format_detailed,
        level=level.upper(),
        rotation=rotation,
        retention=retention,
        compression="zip",
        encoding="utf-8",
    )

    return logger.bind(name=name)


def get_logger_with_context(**context: Any) -> Any:
    """获取带上下文的 logger.

    Examples:
        >>> log = get_logger_with_context(product_id="abc", operation="submit")
        >>> log.info("提交商品")
    """
    return logger.bind(**context)
