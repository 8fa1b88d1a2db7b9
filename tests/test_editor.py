"""
@PURPOSE: 测试商品编辑器的 加载/上传/保存 流程
@OUTLINE:
  - TestLoad: 加载商品与会话缺失
  - TestUploadAsset: 图片上传写回目标字段
  - TestSubmit: 保存, 推荐开关合并与失败保留编辑数据
  - TestLifecycle: 卸载后丢弃结果, 上传中拒绝保存
  - TestEndToEnd: 完整编辑场景
@DEPENDENCIES:
  - 外部: pytest, pytest-asyncio
  - 内部: packages.product_editor.editor
"""

from __future__ import annotations

import asyncio
import json

import pytest
from loguru import logger

from packages.product_editor.editor import (
    UPDATE_FIELDS,
    UPDATE_SUCCESS_MESSAGE,
    UPLOAD_SUCCESS_MESSAGE,
    build_update_payload,
)
from packages.product_editor.feedback import Variant
from packages.product_editor.session import InMemorySession
from packages.product_editor.status import RequestState, UploadTarget

from tests.mocks import PRODUCT_ID, TOKEN


async def _loaded(make_editor, **kwargs):
    editor = make_editor(**kwargs)
    assert await editor.mount() is True
    return editor


class TestLoad:
    """测试商品加载"""

    @pytest.mark.asyncio
    async def test_load_populates_every_field(self, make_editor, backend):
        editor = await _loaded(make_editor)

        assert editor.status.fetch.state is RequestState.SUCCEEDED
        assert editor.form.values() == {
            "name": "Widget",
            "slug": "widget",
            "price": 9.99,
            "image": "img1",
            "featuredImage": "img1",
            "category": "Tools",
            "brand": "Acme",
            "countInStock": 5,
            "description": "d",
        }
        assert editor.is_featured is False
        request = backend.requests_for("GET", "products")[0]
        assert request.url.path.endswith(f"/products/{PRODUCT_ID}")
        assert request.headers["authorization"] == f"Bearer {TOKEN}"

    @pytest.mark.asyncio
    async def test_load_keeps_server_featured_image(self, make_editor, backend):
        backend.product.update(featuredImage="feat.png", isFeatured=True)
        editor = await _loaded(make_editor)

        assert editor.form.get_value("featuredImage") == "feat.png"
        assert editor.form.get_value("image") == "img1"
        assert editor.is_featured is True

    @pytest.mark.asyncio
    async def test_load_without_session_redirects_to_login(
        self, make_editor, backend, navigator, notifier
    ):
        editor = make_editor(session=InMemorySession())

        assert await editor.mount() is False
        assert backend.requests == []
        assert navigator.history == ["/login"]
        assert notifier.messages == []
        assert editor.status.fetch.state is RequestState.IDLE

    @pytest.mark.asyncio
    async def test_load_failure_prefers_server_message(self, make_editor, backend, notifier):
        backend.failures[("GET", "products")] = (404, {"message": "Product Not Found"})
        editor = make_editor()

        assert await editor.mount() is False
        assert editor.status.fetch.state is RequestState.FAILED
        assert editor.status.fetch.message == "Product Not Found"
        # 加载失败只在页面内显示
        assert notifier.messages == []

    @pytest.mark.asyncio
    async def test_load_failure_falls_back_to_transport_message(self, make_editor, backend):
        backend.failures[("GET", "products")] = (500, "oops")
        editor = make_editor()

        await editor.mount()
        assert editor.status.fetch.message == "Request failed with status code 500"

    @pytest.mark.asyncio
    async def test_mount_loads_only_once(self, make_editor, backend):
        editor = await _loaded(make_editor)
        assert await editor.mount() is True
        assert len(backend.requests_for("GET", "products")) == 1

    @pytest.mark.asyncio
    async def test_load_logs_carry_product_context(self, make_editor):
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            await _loaded(make_editor)
        finally:
            logger.remove(handler_id)

        assert any(
            r["extra"].get("product_id") == PRODUCT_ID and r["extra"].get("operation") == "load"
            for r in records
        )

    def test_title_uses_short_id(self, make_editor):
        assert make_editor().title == "Edit Product b8c9d0"


class TestUploadAsset:
    """测试图片上传"""

    @pytest.mark.asyncio
    async def test_upload_writes_only_target_field(self, make_editor, backend, notifier):
        editor = await _loaded(make_editor)
        before = editor.form.values()

        assert await editor.upload_asset(b"png-bytes", "featuredImage", filename="x.png") is True

        after = editor.form.values()
        assert after["featuredImage"] == "https://cdn/x.png"
        assert {k: v for k, v in after.items() if k != "featuredImage"} == {
            k: v for k, v in before.items() if k != "featuredImage"
        }
        assert editor.status.upload(UploadTarget.FEATURED_IMAGE).succeeded
        assert editor.status.upload(UploadTarget.IMAGE).state is RequestState.IDLE
        assert notifier.of(Variant.SUCCESS) == [UPLOAD_SUCCESS_MESSAGE]

        request = backend.requests_for("POST", "upload")[0]
        assert request.headers["authorization"] == f"Bearer {TOKEN}"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="image"' in request.content

    @pytest.mark.asyncio
    async def test_upload_defaults_to_primary_image(self, make_editor):
        editor = await _loaded(make_editor)
        await editor.upload_asset(b"data")
        assert editor.form.get_value("image") == "https://cdn/x.png"
        assert editor.form.get_value("featuredImage") == "img1"

    @pytest.mark.asyncio
    async def test_upload_from_path(self, make_editor, backend, tmp_path):
        image = tmp_path / "cover.png"
        image.write_bytes(b"\x89PNG")
        editor = await _loaded(make_editor)

        assert await editor.upload_asset(image, UploadTarget.IMAGE) is True
        request = backend.requests_for("POST", "upload")[0]
        assert b'filename="cover.png"' in request.content
        assert b"image/png" in request.content

    @pytest.mark.asyncio
    async def test_upload_missing_file_fails_softly(self, make_editor, notifier, tmp_path):
        editor = await _loaded(make_editor)

        assert await editor.upload_asset(tmp_path / "missing.png") is False
        assert editor.status.upload().is_failed
        assert len(notifier.of(Variant.ERROR)) == 1

    @pytest.mark.asyncio
    async def test_upload_failure_notifies(self, make_editor, backend, notifier):
        backend.failures[("POST", "upload")] = (400, {"message": "No file uploaded"})
        editor = await _loaded(make_editor)

        assert await editor.upload_asset(b"x") is False
        assert editor.status.upload().message == "No file uploaded"
        assert notifier.of(Variant.ERROR) == ["No file uploaded"]
        assert editor.form.get_value("image") == "img1"


class TestSubmit:
    """测试商品保存"""

    @pytest.mark.asyncio
    async def test_submit_sends_full_payload(self, make_editor, backend, notifier, navigator):
        editor = await _loaded(make_editor)
        editor.form.set_value("price", "19.5")

        assert await editor.save() is True

        body = backend.updated[0]
        assert list(body) == list(UPDATE_FIELDS)
        assert body["price"] == 19.5
        assert body["isFeatured"] is False
        request = backend.requests_for("PUT", "products")[0]
        assert request.url.path.endswith(f"/products/{PRODUCT_ID}")
        assert request.headers["authorization"] == f"Bearer {TOKEN}"
        assert editor.status.update.succeeded
        assert notifier.of(Variant.SUCCESS) == [UPDATE_SUCCESS_MESSAGE]
        assert notifier.close_count == 1
        assert navigator.history == ["/admin/products"]

    @pytest.mark.asyncio
    async def test_is_featured_follows_ui_flag(self, make_editor, backend):
        backend.product["isFeatured"] = True
        editor = await _loaded(make_editor)
        editor.set_featured(False)

        await editor.save()
        assert backend.updated[0]["isFeatured"] is False

    @pytest.mark.asyncio
    async def test_failed_submit_keeps_session(self, make_editor, backend, notifier, navigator):
        backend.failures[("PUT", "products")] = (500, {"message": "Slug already exists"})
        editor = await _loaded(make_editor)
        editor.form.set_value("name", "Edited")
        before = editor.form.values()

        assert await editor.save() is False

        assert editor.form.values() == before
        assert editor.status.update.state is RequestState.FAILED
        assert editor.status.update.message == "Slug already exists"
        assert notifier.of(Variant.ERROR) == ["Slug already exists"]
        assert navigator.history == []

    @pytest.mark.asyncio
    async def test_validation_errors_never_reach_state_machine(self, make_editor, backend):
        editor = await _loaded(make_editor)
        editor.form.set_value("slug", "  ")
        editor.form.set_value("countInStock", "")

        assert await editor.save() is False
        assert editor.form.errors == {
            "slug": "Enter product slug",
            "countInStock": "Enter product count in stock",
        }
        assert editor.status.update.state is RequestState.IDLE
        assert backend.requests_for("PUT", "products") == []

    @pytest.mark.asyncio
    async def test_submit_without_session_redirects(self, make_editor, backend, navigator):
        editor = make_editor(session=InMemorySession())
        assert await editor.submit({"name": "x"}) is False
        assert navigator.history == ["/login"]
        assert backend.requests == []

    def test_build_update_payload_accepts_attribute_names(self):
        payload = build_update_payload(
            {"featured_image": "f.png", "count_in_stock": 3, "isFeatured": False}, True
        )
        assert payload["featuredImage"] == "f.png"
        assert payload["countInStock"] == 3
        assert payload["isFeatured"] is True
        assert payload["name"] is None


class TestLifecycle:
    """测试卸载与并发保护"""

    @pytest.mark.asyncio
    async def test_submit_refused_while_upload_pending(
        self, make_editor, backend, notifier
    ):
        editor = await _loaded(make_editor)
        gate = asyncio.Event()
        backend.gates[("POST", "upload")] = gate

        task = asyncio.create_task(editor.upload_asset(b"x", UploadTarget.FEATURED_IMAGE))
        await asyncio.sleep(0)
        assert editor.status.upload(UploadTarget.FEATURED_IMAGE).is_pending
        assert editor.can_submit is False

        assert await editor.save() is False
        assert backend.requests_for("PUT", "products") == []
        assert len(notifier.of(Variant.WARNING)) == 1

        gate.set()
        assert await task is True
        assert editor.can_submit is True
        assert await editor.save() is True
        assert backend.updated[0]["featuredImage"] == "https://cdn/x.png"

    @pytest.mark.asyncio
    async def test_uploads_to_both_targets_tracked_separately(self, make_editor, backend):
        editor = await _loaded(make_editor)
        backend.failures[("POST", "upload")] = (413, {"message": "File too large"})

        await editor.upload_asset(b"x", UploadTarget.IMAGE)
        del backend.failures[("POST", "upload")]
        await editor.upload_asset(b"y", UploadTarget.FEATURED_IMAGE)

        assert editor.status.upload(UploadTarget.IMAGE).message == "File too large"
        assert editor.status.upload(UploadTarget.FEATURED_IMAGE).succeeded

    @pytest.mark.asyncio
    async def test_results_after_unmount_are_discarded(self, make_editor, backend, notifier):
        gate = asyncio.Event()
        backend.gates[("GET", "products")] = gate
        editor = make_editor()

        task = asyncio.create_task(editor.mount())
        await asyncio.sleep(0)
        editor.unmount()
        gate.set()

        assert await task is False
        assert editor.product is None
        assert editor.form.get_value("name") == ""
        assert editor.status.fetch.is_pending
        assert notifier.messages == []

    @pytest.mark.asyncio
    async def test_submit_after_unmount_does_not_navigate(
        self, make_editor, backend, navigator, notifier
    ):
        editor = await _loaded(make_editor)
        gate = asyncio.Event()
        backend.gates[("PUT", "products")] = gate

        task = asyncio.create_task(editor.save())
        await asyncio.sleep(0)
        editor.unmount()
        gate.set()

        assert await task is False
        assert navigator.history == []
        assert notifier.of(Variant.SUCCESS) == []


class TestEndToEnd:
    """完整编辑场景"""

    @pytest.mark.asyncio
    async def test_load_upload_submit(self, make_editor, backend, notifier, navigator):
        backend.product = {
            "name": "Widget",
            "slug": "widget",
            "price": 9.99,
            "image": "img1",
            "category": "Tools",
            "brand": "Acme",
            "countInStock": 5,
            "description": "d",
            "isFeatured": False,
        }
        editor = make_editor("abc123")
        assert await editor.mount() is True
        assert editor.form.get_value("name") == "Widget"
        assert editor.is_featured is False

        assert await editor.upload_asset(b"png", "featuredImage") is True
        assert editor.form.get_value("featuredImage") == "https://cdn/x.png"
        assert editor.form.get_value("image") == "img1"

        assert await editor.save() is True
        assert navigator.history == ["/admin/products"]
        assert notifier.of(Variant.SUCCESS) == [UPLOAD_SUCCESS_MESSAGE, UPDATE_SUCCESS_MESSAGE]
        assert json.loads(backend.requests_for("PUT", "products")[0].content)[
            "featuredImage"
        ] == "https://cdn/x.png"
