"""
@PURPOSE: 通用组件和工具库，提供项目中多个组件共享的通用功能
@OUTLINE:
  - BaseAppConfig: 应用配置基类
  - setup_logger / setup_file_logger: 日志配置函数
  - get_logger_with_context: 带上下文的 logger
@DEPENDENCIES:
  - 内部: .config, .logger
"""

__version__ = "0.1.0"

from packages.common.config import BaseAppConfig
from packages.common.logger import get_logger_with_context, setup_file_logger, setup_logger

__all__ = [
    "BaseAppConfig",
    "get_logger_with_context",
    "setup_file_logger",
    "setup_logger",
]
