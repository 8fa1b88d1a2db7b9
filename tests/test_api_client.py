"""
@PURPOSE: 测试商城后台 API 客户端
@OUTLINE:
  - TestProductApiClient: 商品读取/保存/上传与错误转换
@DEPENDENCIES:
  - 外部: httpx, pytest, pytest-asyncio
  - 内部: packages.product_editor.api_client
"""

from __future__ import annotations

import json

import httpx
import pytest

from packages.product_editor.api_client import ProductApiClient
from packages.product_editor.errors import ProductApiError

from tests.mocks import BASE_URL, PRODUCT_ID, TOKEN


class TestProductApiClient:
    """测试 ProductApiClient"""

    @pytest.mark.asyncio
    async def test_get_product(self, api, backend):
        product = await api.get_product(PRODUCT_ID, token=TOKEN)

        assert product.name == "Widget"
        request = backend.requests[0]
        assert request.method == "GET"
        assert request.url.path == f"/api/admin/products/{PRODUCT_ID}"
        assert request.headers["authorization"] == f"Bearer {TOKEN}"
        await api.close()

    @pytest.mark.asyncio
    async def test_update_product_sends_json(self, api, backend):
        result = await api.update_product(PRODUCT_ID, {"name": "New"}, token=TOKEN)

        assert result == {"message": "Product Updated Successfully"}
        assert backend.updated == [{"name": "New"}]
        assert json.loads(backend.requests[0].content) == {"name": "New"}
        await api.close()

    @pytest.mark.asyncio
    async def test_upload_image_returns_secure_url(self, api, backend):
        backend.upload_url = "https://res.cloudinary.com/demo/a.png"

        url = await api.upload_image(b"data", token=TOKEN, filename="a.png")

        assert url == "https://res.cloudinary.com/demo/a.png"
        assert b'name="image"; filename="a.png"' in backend.requests[0].content
        await api.close()

    @pytest.mark.asyncio
    async def test_upload_without_secure_url_fails(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        async with ProductApiClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ProductApiError, match="secure_url"):
                await client.upload_image(b"x", token=TOKEN)

    @pytest.mark.asyncio
    async def test_http_error_converted(self, api, backend):
        backend.failures[("GET", "products")] = (401, {"message": "Token is not valid"})

        with pytest.raises(ProductApiError) as exc_info:
            await api.get_product(PRODUCT_ID, token="bad")

        assert exc_info.value.status_code == 401
        assert exc_info.value.server_message == "Token is not valid"
        await api.close()

    @pytest.mark.asyncio
    async def test_network_error_converted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Network Error", request=request)

        async with ProductApiClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ProductApiError) as exc_info:
                await client.get_product(PRODUCT_ID, token=TOKEN)

        assert exc_info.value.status_code is None
        assert exc_info.value.message == "Network Error"

    @pytest.mark.asyncio
    async def test_invalid_json_converted(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="not json"))
        async with ProductApiClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ProductApiError, match="Invalid JSON"):
                await client.get_product(PRODUCT_ID, token=TOKEN)

    @pytest.mark.asyncio
    async def test_client_recreated_after_close(self, api):
        first = await api._get_client()
        await api.close()
        second = await api._get_client()

        assert first is not second
        assert first.is_closed
        await api.close()

    def test_base_url_trailing_slash_stripped(self):
        assert ProductApiClient("http://host/api/admin/").base_url == "http://host/api/admin"
