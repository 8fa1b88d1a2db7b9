"""
@PURPOSE: 商品编辑器, 协调 加载/图片上传/保存 三类异步请求并维护其状态
@OUTLINE:
  - UPDATE_FIELDS: 保存请求体字段顺序
  - def build_update_payload(): 组装保存请求体
  - class ProductEditor: 编辑器主类
    - async def mount(): 激活编辑页并加载商品 (每次激活只加载一次)
    - def unmount(): 离开编辑页, 之后返回的请求结果一律丢弃
    - async def load(): 加载商品并填充表单
    - async def upload_asset(): 上传图片并写回目标字段
    - async def submit(): 保存商品, 成功后返回商品列表
    - async def save(): 表单校验 + submit
@GOTCHAS:
  - 会话缺失时跳转登录页, 不发请求也不提示
  - 远程调用失败一律转换为 FAILED 状态, 不向外抛出
  - 加载失败只显示在页面内 (status.fetch.message), 不弹提示
  - 有图片仍在上传时拒绝保存, 避免提交旧的图片地址
@DEPENDENCIES:
  - 内部: packages.common.logger, .api_client, .errors, .feedback, .form, .models, .session, .status
@RELATED: cli.py
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO

from packages.common.logger import get_logger_with_context

from .api_client import ProductApiClient
from .errors import ProductApiError, SessionMissingError, get_error
from .feedback import Navigator, Notifier, Variant
from .form import PRODUCT_FORM_FIELDS, EditSession, ProductForm
from .models import Product, short_product_id
from .session import SessionProvider
from .status import (
    EditorEvent,
    EditorStatus,
    FetchFailed,
    FetchRequested,
    FetchSucceeded,
    UpdateFailed,
    UpdateRequested,
    UpdateSucceeded,
    UploadFailed,
    UploadRequested,
    UploadSucceeded,
    UploadTarget,
    transition,
)

UPDATE_FIELDS: tuple[str, ...] = (
    "name",
    "slug",
    "price",
    "image",
    "brand",
    "category",
    "isFeatured",
    "featuredImage",
    "countInStock",
    "description",
)

UPLOAD_SUCCESS_MESSAGE = "Image uploaded successfully"
UPDATE_SUCCESS_MESSAGE = "Product updated successfully"
UPLOAD_PENDING_MESSAGE = "Please wait until the image upload finishes"

_WIRE_NAMES = {f.attr: f.name for f in PRODUCT_FORM_FIELDS} | {
    f.name: f.name for f in PRODUCT_FORM_FIELDS
}


def build_update_payload(fields: Mapping[str, Any], is_featured: bool) -> dict[str, Any]:
    """组装保存请求体.

    Args:
        fields: 表单值 (线上字段名或属性名均可)
        is_featured: 页面上的推荐开关

    Returns:
        按 UPDATE_FIELDS 顺序排列的请求体, isFeatured 始终取自推荐开关
    """
    values = {_WIRE_NAMES[key]: value for key, value in fields.items() if key in _WIRE_NAMES}
    return {
        key: is_featured if key == "isFeatured" else values.get(key) for key in UPDATE_FIELDS
    }


class ProductEditor:
    """单个商品的编辑器.

    编辑器持有一份 EditSession (self.form.session), 只在显式 submit 时持久化。
    会话, 提示与导航通道均由调用方注入。

    Attributes:
        product_id: 商品ID
        form: 表单控制器
        is_featured: 推荐开关 (不属于表单字段)
        status: 三类请求的状态快照
        product: 最近一次成功加载的商品

    Examples:
        >>> editor = ProductEditor(
        ...     "62a1f0c2b3d4e5f6a7b8c9d0",
        ...     api=ProductApiClient(),
        ...     session=InMemorySession.from_token("xxx"),
        ...     notifier=ConsoleNotifier(),
        ...     navigator=RecordingNavigator(),
        ... )
        >>> await editor.mount()
        >>> await editor.upload_asset(Path("cover.png"), UploadTarget.FEATURED_IMAGE)
        >>> await editor.save()
    """

    def __init__(
        self,
        product_id: str,
        *,
        api: ProductApiClient,
        session: SessionProvider,
        notifier: Notifier,
        navigator: Navigator,
        login_path: str = "/login",
        products_path: str = "/admin/products",
    ) -> None:
        self.product_id = product_id
        self.api = api
        self.session = session
        self.notifier = notifier
        self.navigator = navigator
        self.login_path = login_path
        self.products_path = products_path

        self.form = ProductForm()
        self.is_featured = False
        self.status = EditorStatus()
        self.product: Product | None = None

        self._mounted = True
        self._activated = False
        self._log = get_logger_with_context(product_id=product_id)

    # ========== 页面生命周期 ==========

    @property
    def title(self) -> str:
        return f"Edit Product {short_product_id(self.product_id)}"

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def mount(self) -> bool:
        """激活编辑页并加载商品, 重复调用不会重复加载."""
        if self._activated:
            return self.status.fetch.succeeded
        self._activated = True
        return await self.load()

    def unmount(self) -> None:
        """离开编辑页, 之后完成的请求不再更新任何状态."""
        self._mounted = False
        self._log.debug("编辑页已卸载")

    @property
    def can_submit(self) -> bool:
        return (
            self._mounted
            and not self.status.any_upload_pending
            and not self.status.update.is_pending
        )

    def set_featured(self, value: bool) -> None:
        self.is_featured = bool(value)

    def dispatch(self, event: EditorEvent) -> None:
        if not self._mounted:
            self._log.debug("编辑页已卸载, 忽略状态事件: {}", type(event).__name__)
            return
        self.status = transition(self.status, event)

    def _require_token(self, operation: str) -> str | None:
        try:
            return self.session.require_token()
        except SessionMissingError:
            self._log.bind(operation=operation).info("未登录, 跳转登录页")
            self.navigator.push(self.login_path)
            return None

    # ========== 请求 ==========

    async def load(self) -> bool:
        """加载商品并填充全部表单字段.

        Returns:
            是否加载成功
        """
        token = self._require_token("load")
        if token is None:
            return False

        log = self._log.bind(operation="load")
        self.dispatch(FetchRequested())
        log.info("开始加载商品")
        try:
            product = await self.api.get_product(self.product_id, token=token)
        except ProductApiError as exc:
            message = get_error(exc)
            log.warning(f"商品加载失败: {message}")
            self.dispatch(FetchFailed(message))
            return False

        if not self._mounted:
            log.debug("编辑页已卸载, 丢弃加载结果")
            return False

        self.product = product
        self.form.reset(EditSession.from_product(product))
        self.is_featured = product.is_featured
        self.dispatch(FetchSucceeded())
        log.success(f"商品加载完成: {product.name}")
        return True

    async def upload_asset(
        self,
        file: BinaryIO | bytes | Path,
        target: UploadTarget | str = UploadTarget.IMAGE,
        *,
        filename: str = "upload.bin",
        content_type: str = "application/octet-stream",
    ) -> bool:
        """上传图片并将返回的地址写入目标字段.

        Args:
            file: 本地文件路径, 文件对象或字节内容
            target: 写回的字段 (默认主图)
            filename: 上传文件名 (file 为路径时取文件名)
            content_type: MIME 类型 (file 为路径时自动推断)

        Returns:
            是否上传成功
        """
        target = UploadTarget(target)
        token = self._require_token("upload")
        if token is None:
            return False

        log = self._log.bind(operation="upload", target=target.value)
        self.dispatch(UploadRequested(target))
        log.info("开始上传图片")
        try:
            if isinstance(file, Path):
                url = await self.api.upload_image_file(file, token=token)
            else:
                url = await self.api.upload_image(
                    file, token=token, filename=filename, content_type=content_type
                )
        except (ProductApiError, OSError) as exc:
            message = get_error(exc)
            log.warning(f"图片上传失败: {message}")
            if self._mounted:
                self.dispatch(UploadFailed(target, message))
                self.notifier.enqueue(message, Variant.ERROR)
            return False

        if not self._mounted:
            log.debug("编辑页已卸载, 丢弃上传结果")
            return False

        self.dispatch(UploadSucceeded(target))
        self.form.set_value(target.value, url)
        self.notifier.enqueue(UPLOAD_SUCCESS_MESSAGE, Variant.SUCCESS)
        log.success(f"图片上传完成: {url}")
        return True

    async def submit(self, edited_fields: Mapping[str, Any]) -> bool:
        """保存商品.

        调用前表单层应已完成必填校验。

        Args:
            edited_fields: 表单值

        Returns:
            是否保存成功
        """
        log = self._log.bind(operation="submit")
        if self.status.any_upload_pending:
            log.warning("图片仍在上传, 暂不保存")
            self.notifier.enqueue(UPLOAD_PENDING_MESSAGE, Variant.WARNING)
            return False
        if self.status.update.is_pending:
            log.debug("保存请求进行中, 忽略重复提交")
            return False

        token = self._require_token("submit")
        if token is None:
            return False

        self.notifier.close_all()
        self.dispatch(UpdateRequested())
        payload = build_update_payload(edited_fields, self.is_featured)
        log.info("开始保存商品")
        try:
            await self.api.update_product(self.product_id, payload, token=token)
        except ProductApiError as exc:
            message = get_error(exc)
            log.warning(f"商品保存失败: {message}")
            if self._mounted:
                self.dispatch(UpdateFailed(message))
                self.notifier.enqueue(message, Variant.ERROR)
            return False

        if not self._mounted:
            log.debug("编辑页已卸载, 丢弃保存结果")
            return False

        self.dispatch(UpdateSucceeded())
        self.notifier.enqueue(UPDATE_SUCCESS_MESSAGE, Variant.SUCCESS)
        log.success("商品保存成功")
        self.navigator.push(self.products_path)
        return True

    async def save(self) -> bool:
        """校验表单后保存, 返回是否保存成功."""
        saved = False

        async def _on_valid(values: dict[str, Any]) -> None:
            nonlocal saved
            saved = await self.submit(values)

        await self.form.handle_submit(_on_valid)
        return saved
