"""
@PURPOSE: 商城共享数据模型, 使用 Pydantic 定义商品/用户/订单等结构
@OUTLINE:
  - class StoreModel: 模型基类 (camelCase 别名, 忽略未知字段)
  - class Product: 商品 (后台编辑的资源)
  - class Location, Address: 收货地址
  - class AuthUser, Users, User: 认证用户 / 会话用户 / 注册用户
  - class ItemReview, ProductWithReviews: 商品评价
  - class FilterArgs: 商品搜索筛选参数
  - class CartItems, CartState: 购物车状态
  - class OrderItems, OrderState: 订单及订单页状态
  - class Sales, DashboardData: 后台仪表盘数据
  - class GError, ErrorResponse, ErrorResponseData: 错误载荷结构
@GOTCHAS:
  - 线上字段为 camelCase, Python 属性为 snake_case, 序列化时需 by_alias=True
  - Product.id 对应服务端的 `_id`, 一经分配不可修改
@DEPENDENCIES:
  - 外部: pydantic
@RELATED: form.py, api_client.py
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StoreModel(BaseModel):
    """商城模型基类."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict[str, Any]:
        """按线上字段名导出."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Product(StoreModel):
    """商品.

    Attributes:
        id: 商品ID (服务端 `_id`)
        name: 名称
        slug: URL 标识
        category: 类目
        image: 主图地址
        featured_image: 推荐位图片地址 (可缺省)
        price: 价格
        brand: 品牌
        count_in_stock: 库存
        description: 描述
        is_featured: 是否推荐
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", alias="_id", description="商品ID")
    name: str = ""
    slug: str = ""
    category: str = ""
    image: str = ""
    featured_image: str | None = None
    price: float = 0
    brand: str = ""
    rating: float = 0
    quantity: int = 0
    num_reviews: int = 0
    count_in_stock: int = 0
    description: str = ""
    is_featured: bool = False
    created_at: str | None = None
    updated_at: str | None = None


def short_product_id(product_id: str) -> str:
    """截取 24 位 ObjectId 的最后 6 位用于展示.

    Examples:
        >>> short_product_id("62a1f0c2b3d4e5f6a7b8c9d0")
        'b8c9d0'
    """
    return product_id[18:24]


class Location(StoreModel):
    """地图坐标."""

    lat: str
    lng: str


class Address(StoreModel):
    """收货地址."""

    full_name: str
    address: str
    city: str
    postal_code: int
    location: Location | None = None
    country: str


class AuthUser(StoreModel):
    """解码后的令牌载荷."""

    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    email: str | None = None
    is_admin: bool | None = None
    exp: int | None = None
    iat: int | None = None


class Users(StoreModel):
    """会话中保存的登录用户信息."""

    id: str = Field(alias="_id")
    name: str
    email: str
    password: str = ""
    is_admin: bool = False
    token: str


class User(Users):
    """注册表单用户."""

    confirm_password: str


class ItemReview(StoreModel):
    """商品评价."""

    id: str | None = Field(default=None, alias="_id")
    user: str
    name: str
    rating: float
    comment: str
    created_at: str | None = None
    updated_at: str | None = None


class ProductWithReviews(Product):
    """带评价列表的商品."""

    reviews: list[ItemReview] = Field(default_factory=list)


class FilterArgs(StoreModel):
    """商品搜索筛选参数."""

    price: str | None = None
    sort: str | None = None
    rating: str | None = None
    brand: str | None = None
    category: str | None = None
    query: Any = None
    min: str | None = None
    max: str | None = None
    page: str | int | None = None
    search_query: str | None = None


class CartItems(StoreModel):
    """购物车内容."""

    cart_items: list[Product] = Field(default_factory=list)
    shipping_address: Address | None = None
    payment_method: str | None = None


class CartState(StoreModel):
    """全局购物车状态."""

    dark_mode: bool = False
    cart: CartItems = Field(default_factory=CartItems)
    user_info: Users | None = None


class OrderItems(StoreModel):
    """订单."""

    id: str = Field(alias="_id")
    user: Users
    order_items: list[Product] = Field(default_factory=list)
    shipping_address: Address
    payment_method: str
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float
    is_paid: bool = False
    is_delivered: bool = False
    paid_at: str | None = None
    delivered_at: str | None = None
    created_at: str | None = None


class OrderState(StoreModel):
    """订单详情页状态."""

    loading: bool = False
    success_pay: bool | None = None
    order: OrderItems | None = None
    error: str = ""
    loading_deliver: bool | None = None
    success_deliver: bool | None = None


class Sales(StoreModel):
    """按月销售额."""

    id: str = Field(alias="_id")
    total_sales: float


class DashboardData(StoreModel):
    """后台仪表盘汇总."""

    orders_count: int = 0
    products_count: int = 0
    users_count: int = 0
    orders_price: float = 0
    sales_data: list[Sales] = Field(default_factory=list)


class ErrorResponseData(StoreModel):
    message: str | None = None


class ErrorResponse(StoreModel):
    data: ErrorResponseData | None = None


class GError(StoreModel):
    """请求失败时的错误载荷结构."""

    message: str = ""
    response: ErrorResponse | None = None
