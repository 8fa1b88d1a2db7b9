"""
@PURPOSE: 登录会话提供者, 为编辑器提供当前管理员的 Bearer 令牌
@OUTLINE:
  - class SessionProvider: 会话提供者基类
  - class InMemorySession: 内存会话 (测试/令牌直传)
  - class FileSessionStore: 基于 JSON 文件的会话存储
@GOTCHAS:
  - 令牌缺失时编辑器直接跳转登录页, 不发任何请求
  - 会话文件内容与前端 userInfo 一致: {_id, name, email, isAdmin, token}
@DEPENDENCIES:
  - 内部: .models.Users
@RELATED: editor.py, cli.py
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .errors import SessionMissingError
from .models import Users


class SessionProvider(ABC):
    """会话提供者基类."""

    @abstractmethod
    def current_user(self) -> Users | None:
        """返回当前登录用户, 未登录返回 None."""

    @property
    def token(self) -> str | None:
        """当前用户的 Bearer 令牌."""
        user = self.current_user()
        if user is None or not user.token:
            return None
        return user.token

    def require_token(self) -> str:
        """返回令牌, 未登录时抛出 SessionMissingError."""
        token = self.token
        if not token:
            raise SessionMissingError()
        return token


class InMemorySession(SessionProvider):
    """保存在内存中的会话."""

    def __init__(self, user: Users | None = None) -> None:
        self._user = user

    @classmethod
    def from_token(cls, token: str) -> InMemorySession:
        """仅凭令牌构造会话 (令牌来自环境变量等场景)."""
        return cls(Users(id="", name="", email="", is_admin=True, token=token))

    def current_user(self) -> Users | None:
        return self._user


class FileSessionStore(SessionProvider):
    """JSON 文件会话存储.

    Examples:
        >>> store = FileSessionStore("data/session.json")
        >>> store.token is None
        True
    """

    def __init__(self, session_file: str | Path = "data/session.json") -> None:
        self.session_file = Path(session_file)

    def current_user(self) -> Users | None:
        if not self.session_file.exists():
            logger.debug("会话文件不存在: {}", self.session_file)
            return None
        try:
            data = json.loads(self.session_file.read_text(encoding="utf-8"))
            return Users.model_validate(data)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("会话文件无效: {} ({})", self.session_file, exc)
            return None

    def save(self, user: Users) -> None:
        """保存会话到文件."""
        self.session_file.parent.mkdir(parents=True, exist_ok=True)
        self.session_file.write_text(
            json.dumps(user.to_payload(), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        logger.info("会话已保存: {}", self.session_file)

    def clear(self) -> None:
        """删除会话文件."""
        if self.session_file.exists():
            self.session_file.unlink()
            logger.info("会话已清除")
