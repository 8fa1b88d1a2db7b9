"""
@PURPOSE: 商城后台 REST API 客户端, 负责商品读取/保存与图片上传
@OUTLINE:
  - class ProductApiClient: API 客户端主类
    - async def get_product(): GET /products/{id}
    - async def update_product(): PUT /products/{id}
    - async def upload_image(): POST /upload (multipart, 字段名 image)
@GOTCHAS:
  - 所有请求都携带 Authorization: Bearer <token>
  - 失败统一抛出 ProductApiError, 由编辑器转换为状态
  - 超时沿用 httpx 客户端的 timeout 配置, 不做重试
@DEPENDENCIES:
  - 外部: httpx
  - 内部: .errors, .models
@RELATED: editor.py
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any, BinaryIO

import httpx
from loguru import logger

from .errors import ProductApiError
from .models import Product


class ProductApiClient:
    """商城后台 API 客户端.

    Examples:
        >>> async with ProductApiClient("http://localhost:3000/api/admin") as client:
        ...     product = await client.get_product("62a1...", token="xxx")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000/api/admin",
        timeout: float = 10.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """初始化 API 客户端.

        Args:
            base_url: 后台 API 根地址
            timeout: 请求超时时间（秒）
            transport: 自定义传输层 (测试时注入)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """获取或创建 HTTP 客户端."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """关闭 HTTP 客户端."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = await self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP 错误: {method} {url} -> {e.response.status_code}")
            raise ProductApiError.from_httpx(e) from e
        except httpx.HTTPError as e:
            logger.error(f"请求失败: {method} {url} ({e.__class__.__name__})")
            raise ProductApiError.from_httpx(e) from e
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ProductApiError(
                "Invalid JSON response", status_code=response.status_code
            ) from e

    async def get_product(self, product_id: str, *, token: str) -> Product:
        """获取单个商品.

        Args:
            product_id: 商品ID
            token: Bearer 令牌

        Returns:
            商品数据
        """
        response = await self._request(
            "GET", f"/products/{product_id}", headers=self._auth_headers(token)
        )
        data = self._json(response)
        try:
            return Product.model_validate(data)
        except ValueError as e:
            raise ProductApiError(f"Invalid product payload: {e}") from e

    async def update_product(
        self, product_id: str, payload: dict[str, Any], *, token: str
    ) -> dict[str, Any]:
        """保存商品.

        Args:
            product_id: 商品ID
            payload: 线上字段名组成的请求体
            token: Bearer 令牌

        Returns:
            服务端响应 (通常为 {message})
        """
        response = await self._request(
            "PUT",
            f"/products/{product_id}",
            json=payload,
            headers=self._auth_headers(token),
        )
        if not response.content:
            return {}
        data = self._json(response)
        return data if isinstance(data, dict) else {"data": data}

    async def upload_image(
        self,
        file: BinaryIO | bytes,
        *,
        token: str,
        filename: str = "upload.bin",
        content_type: str = "application/octet-stream",
    ) -> str:
        """上传图片并返回图床地址.

        Args:
            file: 文件对象或字节内容
            token: Bearer 令牌
            filename: 上传文件名
            content_type: MIME 类型

        Returns:
            secure_url 图片地址
        """
        response = await self._request(
            "POST",
            "/upload",
            files={"image": (filename, file, content_type)},
            headers=self._auth_headers(token),
        )
        data = self._json(response)
        url = data.get("secure_url") if isinstance(data, dict) else None
        if not url:
            raise ProductApiError("Upload response is missing secure_url")
        logger.debug("图片上传完成: {}", url)
        return str(url)

    async def upload_image_file(self, path: str | Path, *, token: str) -> str:
        """上传本地图片文件."""
        file_path = Path(path)
        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        with file_path.open("rb") as fh:
            return await self.upload_image(
                fh.read(), token=token, filename=file_path.name, content_type=content_type
            )

    async def __aenter__(self) -> ProductApiClient:
        """异步上下文管理器入口."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """异步上下文管理器退出，自动关闭客户端."""
        await self.close()
