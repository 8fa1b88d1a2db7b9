"""
@PURPOSE: 商品编辑器配置, 使用 Pydantic Settings 从环境变量/.env 加载
@OUTLINE:
  - class EditorSettings: 编辑器配置
  - def get_settings(): 获取配置实例 (可指定 JSON/YAML 配置文件)
@GOTCHAS:
  - 环境变量前缀为 PRODUCT_ADMIN_, 例如 PRODUCT_ADMIN_API_BASE_URL
  - 优先级: 环境变量 > .env > 默认值; 指定配置文件时以文件为准
  - token 为敏感字段, to_dict() 时会被打码
@DEPENDENCIES:
  - 外部: pydantic, pydantic_settings
  - 内部: packages.common.config
"""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from packages.common.config import BaseAppConfig


class EditorSettings(BaseAppConfig):
    """编辑器配置.

    Attributes:
        api_base_url: 后台 API 根地址
        timeout: 请求超时时间（秒）
        session_file: 登录会话文件
        token: 直接指定的 Bearer 令牌 (优先于会话文件)
        login_path: 未登录时跳转的页面
        products_path: 保存成功后跳转的商品列表页
        log_file: 日志文件 (为空则仅输出到终端)
    """

    model_config = SettingsConfigDict(
        env_prefix="PRODUCT_ADMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    SECRET_FIELDS: ClassVar[tuple[str, ...]] = ("token",)

    api_base_url: str = Field(
        default="http://localhost:3000/api/admin", description="后台 API 根地址"
    )
    timeout: float = Field(default=10.0, gt=0, description="请求超时时间（秒）")
    session_file: Path = Field(default=Path("data/session.json"), description="会话文件")
    token: str | None = Field(default=None, description="Bearer 令牌")
    login_path: str = Field(default="/login", description="登录页路径")
    products_path: str = Field(default="/admin/products", description="商品列表页路径")
    log_file: Path | None = Field(default=None, description="日志文件")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        allowed = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        upper = value.upper()
        if upper not in allowed:
            raise ValueError(f"无效的日志级别: {value}")
        return upper


def get_settings(config_path: Path | None = None) -> EditorSettings:
    """获取配置实例

    Args:
        config_path: 配置文件路径（可选, 支持 .json/.yaml/.yml）

    Returns:
        配置对象

    Raises:
        FileNotFoundError: 配置文件不存在
    """
    if config_path is None:
        return EditorSettings()
    if not config_path.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")
    return EditorSettings.from_file(config_path)  # type: ignore[return-value]
