"""
@PURPOSE: 商城后台商品编辑器, 提供 加载/图片上传/保存 的异步请求状态机与共享数据模型
@OUTLINE:
  - ProductEditor: 编辑器主类
  - ProductApiClient: 后台 REST API 客户端
  - EditorStatus / RequestStatus / transition: 请求状态机
  - ProductForm / EditSession: 表单层
  - get_error: 错误信息提取
@DEPENDENCIES:
  - 内部: .editor, .api_client, .status, .form, .errors, .models, .session, .feedback
"""

__version__ = "0.1.0"

from .api_client import ProductApiClient
from .editor import ProductEditor, build_update_payload
from .errors import (
    FormValidationError,
    ProductApiError,
    ProductEditorError,
    SessionMissingError,
    get_error,
)
from .feedback import ConsoleNotifier, Navigator, Notifier, RecordingNavigator, Variant
from .form import PRODUCT_FORM_FIELDS, EditSession, ProductForm
from .models import Product, Users
from .session import FileSessionStore, InMemorySession, SessionProvider
from .status import EditorStatus, RequestState, RequestStatus, UploadTarget, transition

__all__ = [
    "PRODUCT_FORM_FIELDS",
    "ConsoleNotifier",
    "EditSession",
    "EditorStatus",
    "FileSessionStore",
    "FormValidationError",
    "InMemorySession",
    "Navigator",
    "Notifier",
    "Product",
    "ProductApiClient",
    "ProductApiError",
    "ProductEditor",
    "ProductEditorError",
    "ProductForm",
    "RecordingNavigator",
    "RequestState",
    "RequestStatus",
    "SessionMissingError",
    "SessionProvider",
    "UploadTarget",
    "Users",
    "Variant",
    "build_update_payload",
    "get_error",
    "transition",
]
