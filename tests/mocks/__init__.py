"""
@PURPOSE: 测试 Mock 模块
@OUTLINE:
  - MockStoreBackend: 模拟商城后台 API
  - MockNotifier: 模拟提示通道
@DEPENDENCIES:
  - 外部: httpx
"""

from .api_mock import BASE_URL, PRODUCT_ID, PRODUCT_PAYLOAD, TOKEN, MockStoreBackend
from .feedback_mock import MockNotifier

__all__ = [
    "BASE_URL",
    "PRODUCT_ID",
    "PRODUCT_PAYLOAD",
    "TOKEN",
    "MockNotifier",
    "MockStoreBackend",
]
