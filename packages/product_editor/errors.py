"""
@PURPOSE: 商品编辑器的异常定义与错误信息提取
@OUTLINE:
  - ProductEditorError: 异常基类
  - SessionMissingError: 缺少登录会话
  - FormValidationError: 表单必填校验失败
  - ProductApiError: 远程接口调用失败 (网络或服务端)
  - def get_error(): 从错误对象中提取可读的错误信息
@GOTCHAS:
  - get_error 优先使用服务端返回的 response.data.message, 缺失时回退到 message
@DEPENDENCIES:
  - 外部: httpx
  - 内部: .models.GError
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .models import GError


class ProductEditorError(Exception):
    """商品编辑器异常基类."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SessionMissingError(ProductEditorError):
    """当前没有可用的登录会话."""

    def __init__(self, message: str = "未登录或会话已失效, 请重新登录") -> None:
        super().__init__(message)


class FormValidationError(ProductEditorError):
    """表单校验失败, 不会进入请求状态机.

    Attributes:
        errors: 字段名 -> 提示文本
    """

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(f"表单校验失败: {', '.join(self.errors)}")


class ProductApiError(ProductEditorError):
    """远程 API 调用失败.

    Attributes:
        message: 传输层/客户端错误描述
        status_code: HTTP 状态码, 网络错误时为 None
        server_message: 服务端返回的 message 字段
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message

    @classmethod
    def from_httpx(cls, exc: httpx.HTTPError) -> ProductApiError:
        """将 httpx 异常转换为 ProductApiError."""
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            return cls(
                f"Request failed with status code {response.status_code}",
                status_code=response.status_code,
                server_message=_server_message(response),
            )
        return cls(str(exc) or exc.__class__.__name__)


def _server_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, Mapping):
        message = payload.get("message")
        if message:
            return str(message)
    return None


def get_error(error: Any) -> str:
    """提取错误信息.

    优先返回服务端提供的 ``response.data.message``, 否则回退到 ``message``.

    Args:
        error: 异常对象, GError 模型, 或同结构的字典

    Returns:
        可展示给管理员的错误信息

    Examples:
        >>> get_error({"response": {"data": {"message": "X"}}})
        'X'
        >>> get_error({"message": "Y"})
        'Y'
    """
    if isinstance(error, ProductApiError):
        return error.server_message or error.message
    if isinstance(error, httpx.HTTPStatusError):
        return _server_message(error.response) or str(error)
    if isinstance(error, GError):
        nested = error.response.data.message if error.response and error.response.data else None
        return nested or error.message
    if isinstance(error, Mapping):
        return get_error(GError.model_validate(error))
    if isinstance(error, ProductEditorError):
        return error.message
    # 鸭子类型: 具有 response.data.message / message 属性的对象
    nested = getattr(getattr(getattr(error, "response", None), "data", None), "message", None)
    if nested:
        return str(nested)
    return str(getattr(error, "message", None) or error)
