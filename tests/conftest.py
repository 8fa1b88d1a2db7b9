"""
@PURPOSE: Pytest 配置和通用 fixtures
@OUTLINE:
  - backend: 后台 API 替身
  - api: 指向替身的 ProductApiClient
  - notifier / navigator / session: 编辑器协作者
  - make_editor: 编辑器工厂
@DEPENDENCIES:
  - 外部: pytest, pytest-asyncio
  - 内部: packages.product_editor, tests.mocks
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# 添加仓库根目录到路径
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from packages.product_editor.api_client import ProductApiClient  # noqa: E402
from packages.product_editor.editor import ProductEditor  # noqa: E402
from packages.product_editor.feedback import RecordingNavigator  # noqa: E402
from packages.product_editor.models import Users  # noqa: E402
from packages.product_editor.session import InMemorySession  # noqa: E402
from tests.mocks import (  # noqa: E402
    BASE_URL,
    PRODUCT_ID,
    PRODUCT_PAYLOAD,
    TOKEN,
    MockNotifier,
    MockStoreBackend,
)


@pytest.fixture
def product_payload() -> dict[str, Any]:
    return dict(PRODUCT_PAYLOAD)


@pytest.fixture
def backend() -> MockStoreBackend:
    return MockStoreBackend()


@pytest.fixture
def api(backend: MockStoreBackend) -> ProductApiClient:
    return ProductApiClient(BASE_URL, timeout=5.0, transport=backend.transport)


@pytest.fixture
def notifier() -> MockNotifier:
    return MockNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def admin_user() -> Users:
    return Users(id="u1", name="Admin", email="admin@example.com", is_admin=True, token=TOKEN)


@pytest.fixture
def session(admin_user: Users) -> InMemorySession:
    return InMemorySession(admin_user)


@pytest.fixture
def make_editor(api, session, notifier, navigator):
    """编辑器工厂, 可覆盖任意协作者."""

    def _make(product_id: str = PRODUCT_ID, **overrides: Any) -> ProductEditor:
        return ProductEditor(
            product_id,
            api=overrides.pop("api", api),
            session=overrides.pop("session", session),
            notifier=overrides.pop("notifier", notifier),
            navigator=overrides.pop("navigator", navigator),
            **overrides,
        )

    return _make
