"""
@PURPOSE: 商品编辑表单层, 负责字段元数据, 编辑中数据 (EditSession) 与必填校验
@OUTLINE:
  - dataclass FormField: 表单字段结构
  - PRODUCT_FORM_FIELDS: 商品编辑表单的全部字段
  - class EditSession: 尚未提交的商品可编辑字段
  - class ProductForm: 表单控制器 (取值/赋值/校验/提交)
@GOTCHAS:
  - 校验失败在表单层拦截, 不会进入请求状态机
  - isFeatured 不属于表单字段, 由编辑器单独维护并在提交时合并
  - 价格/库存允许为 0, 空字符串视为未填写
@DEPENDENCIES:
  - 外部: pydantic
  - 内部: .errors, .models
@RELATED: editor.py, cli.py
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import FormValidationError
from .models import Product

FieldKind = Literal["text", "number", "image"]


@dataclass(frozen=True, slots=True)
class FormField:
    """表单字段描述.

    Attributes:
        name: 线上字段名 (camelCase)
        attr: EditSession 属性名
        label: 字段标签
        help_text: 校验失败时的提示
        kind: 字段类型
        required: 是否必填
    """

    name: str
    attr: str
    label: str
    help_text: str
    kind: FieldKind = "text"
    required: bool = True


PRODUCT_FORM_FIELDS: tuple[FormField, ...] = (
    FormField("name", "name", "Name", "Enter product name"),
    FormField("slug", "slug", "Slug", "Enter product slug"),
    FormField("price", "price", "Price", "Enter product price", kind="number"),
    FormField("image", "image", "Image", "Enter product image", kind="image"),
    FormField(
        "featuredImage", "featured_image", "Featured Image", "Enter featured image", kind="image"
    ),
    FormField("category", "category", "Category", "Enter product category"),
    FormField("brand", "brand", "Brand", "Enter product brand"),
    FormField(
        "countInStock",
        "count_in_stock",
        "Count in stock",
        "Enter product count in stock",
        kind="number",
    ),
    FormField("description", "description", "Description", "Enter product description"),
)

_FIELDS_BY_KEY: dict[str, FormField] = {
    **{f.name: f for f in PRODUCT_FORM_FIELDS},
    **{f.attr: f for f in PRODUCT_FORM_FIELDS},
}


def resolve_field(key: str) -> FormField:
    """按线上字段名或属性名查找字段.

    Raises:
        KeyError: 未知字段
    """
    try:
        return _FIELDS_BY_KEY[key]
    except KeyError:
        raise KeyError(f"未知的表单字段: {key}") from None


class EditSession(BaseModel):
    """编辑中的商品字段, 提交前不会持久化."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    name: str = ""
    slug: str = ""
    price: float | None = None
    image: str = ""
    featured_image: str = ""
    category: str = ""
    brand: str = ""
    count_in_stock: int | None = None
    description: str = ""

    @field_validator("price", "count_in_stock", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_product(cls, product: Product) -> EditSession:
        """从商品数据生成编辑数据, 推荐图缺省时使用主图."""
        return cls(
            name=product.name,
            slug=product.slug,
            price=product.price,
            image=product.image,
            featured_image=product.featured_image or product.image,
            category=product.category,
            brand=product.brand,
            count_in_stock=product.count_in_stock,
            description=product.description,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_values(session: EditSession) -> dict[str, str]:
    """返回未填写的必填字段及提示 (线上字段名 -> 提示)."""
    return {
        f.name: f.help_text
        for f in PRODUCT_FORM_FIELDS
        if f.required and _is_blank(getattr(session, f.attr))
    }


class ProductForm:
    """商品编辑表单.

    Examples:
        >>> form = ProductForm()
        >>> form.set_value("name", "Widget")
        >>> form.get_value("name")
        'Widget'
    """

    def __init__(self, session: EditSession | None = None) -> None:
        self.session = session or EditSession()
        self.errors: dict[str, str] = {}

    def reset(self, session: EditSession) -> None:
        """整体替换编辑数据 (加载完成时)."""
        self.session = session
        self.errors = {}

    def get_value(self, key: str) -> Any:
        return getattr(self.session, resolve_field(key).attr)

    def set_value(self, key: str, value: Any) -> None:
        """设置字段值.

        Raises:
            KeyError: 未知字段
            FormValidationError: 值无法转换为字段类型
        """
        field = resolve_field(key)
        try:
            setattr(self.session, field.attr, value)
        except ValidationError as exc:
            logger.debug("字段赋值失败: {}={!r} ({})", field.name, value, exc.error_count())
            self.errors[field.name] = field.help_text
            raise FormValidationError({field.name: field.help_text}) from exc
        self.errors.pop(field.name, None)

    def update(self, values: Mapping[str, Any]) -> None:
        """批量设置字段值, 汇总所有错误后再抛出."""
        errors: dict[str, str] = {}
        for key, value in values.items():
            try:
                self.set_value(key, value)
            except FormValidationError as exc:
                errors.update(exc.errors)
        if errors:
            raise FormValidationError(errors)

    def values(self) -> dict[str, Any]:
        """以线上字段名导出当前值."""
        return self.session.to_payload()

    def validate(self) -> dict[str, str]:
        self.errors = validate_values(self.session)
        return dict(self.errors)

    async def handle_submit(
        self, on_valid: Callable[[dict[str, Any]], Awaitable[Any]]
    ) -> bool:
        """校验通过后调用提交回调.

        Args:
            on_valid: 接收表单值的异步回调

        Returns:
            校验是否通过 (不代表提交成功)
        """
        errors = self.validate()
        if errors:
            logger.warning("表单校验未通过: {}", ", ".join(errors))
            return False
        await on_valid(self.values())
        return True
