"""
@PURPOSE: 异步请求状态机, 以事件驱动的纯函数维护 加载/上传/更新 三类请求的状态
@OUTLINE:
  - class RequestState: 请求状态枚举 (idle/pending/succeeded/failed)
  - class RequestStatus: 单个请求的状态 + 错误信息
  - class UploadTarget: 上传结果写回的字段
  - Fetch*/Update*/Upload* 事件: 各请求的 请求/成功/失败 事件
  - class EditorStatus: 三类请求状态的不可变集合
  - def transition(): (状态集合, 事件) -> 新状态集合
@GOTCHAS:
  - 每类请求的状态互相独立, 加载状态不会阻塞更新状态
  - 上传状态按 UploadTarget 分别记录, 主图与推荐图可以同时上传
@DEPENDENCIES:
  - 标准库: dataclasses, enum
@RELATED: editor.py
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType


class RequestState(str, Enum):
    """请求运行状态."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RequestStatus:
    """单个异步请求的状态.

    Attributes:
        state: 当前状态
        message: 失败原因, 仅在 FAILED 时有值
    """

    state: RequestState = RequestState.IDLE
    message: str = ""

    @property
    def is_pending(self) -> bool:
        return self.state is RequestState.PENDING

    @property
    def is_failed(self) -> bool:
        return self.state is RequestState.FAILED

    @property
    def succeeded(self) -> bool:
        return self.state is RequestState.SUCCEEDED

    @classmethod
    def pending(cls) -> RequestStatus:
        return cls(RequestState.PENDING)

    @classmethod
    def success(cls) -> RequestStatus:
        return cls(RequestState.SUCCEEDED)

    @classmethod
    def failure(cls, message: str) -> RequestStatus:
        return cls(RequestState.FAILED, message)


IDLE = RequestStatus()


class UploadTarget(str, Enum):
    """上传完成后写回的商品字段 (值为线上字段名)."""

    IMAGE = "image"
    FEATURED_IMAGE = "featuredImage"


# ========== 事件 ==========


@dataclass(frozen=True, slots=True)
class FetchRequested:
    pass


@dataclass(frozen=True, slots=True)
class FetchSucceeded:
    pass


@dataclass(frozen=True, slots=True)
class FetchFailed:
    message: str


@dataclass(frozen=True, slots=True)
class UpdateRequested:
    pass


@dataclass(frozen=True, slots=True)
class UpdateSucceeded:
    pass


@dataclass(frozen=True, slots=True)
class UpdateFailed:
    message: str


@dataclass(frozen=True, slots=True)
class UploadRequested:
    target: UploadTarget


@dataclass(frozen=True, slots=True)
class UploadSucceeded:
    target: UploadTarget


@dataclass(frozen=True, slots=True)
class UploadFailed:
    target: UploadTarget
    message: str


EditorEvent = (
    FetchRequested
    | FetchSucceeded
    | FetchFailed
    | UpdateRequested
    | UpdateSucceeded
    | UpdateFailed
    | UploadRequested
    | UploadSucceeded
    | UploadFailed
)


def _empty_uploads() -> Mapping[UploadTarget, RequestStatus]:
    return MappingProxyType({target: IDLE for target in UploadTarget})


@dataclass(frozen=True, slots=True)
class EditorStatus:
    """编辑页全部请求状态的快照.

    Attributes:
        fetch: 商品加载状态
        update: 商品保存状态
        uploads: 每个上传目标字段的状态
    """

    fetch: RequestStatus = IDLE
    update: RequestStatus = IDLE
    uploads: Mapping[UploadTarget, RequestStatus] = field(default_factory=_empty_uploads)

    def upload(self, target: UploadTarget | str = UploadTarget.IMAGE) -> RequestStatus:
        return self.uploads.get(UploadTarget(target), IDLE)

    @property
    def any_upload_pending(self) -> bool:
        return any(status.is_pending for status in self.uploads.values())

    def _with_upload(self, target: UploadTarget, status: RequestStatus) -> EditorStatus:
        uploads = dict(self.uploads)
        uploads[target] = status
        return replace(self, uploads=MappingProxyType(uploads))


def transition(status: EditorStatus, event: EditorEvent) -> EditorStatus:
    """根据事件计算新的状态集合, 不修改入参.

    Args:
        status: 当前状态集合
        event: 请求结果事件

    Returns:
        新的状态集合

    Raises:
        TypeError: 未知事件类型

    Examples:
        >>> s = transition(EditorStatus(), FetchRequested())
        >>> s.fetch.state
        <RequestState.PENDING: 'pending'>
    """
    if isinstance(event, FetchRequested):
        return replace(status, fetch=RequestStatus.pending())
    if isinstance(event, FetchSucceeded):
        return replace(status, fetch=RequestStatus.success())
    if isinstance(event, FetchFailed):
        return replace(status, fetch=RequestStatus.failure(event.message))
    if isinstance(event, UpdateRequested):
        return replace(status, update=RequestStatus.pending())
    if isinstance(event, UpdateSucceeded):
        return replace(status, update=RequestStatus.success())
    if isinstance(event, UpdateFailed):
        return replace(status, update=RequestStatus.failure(event.message))
    if isinstance(event, UploadRequested):
        return status._with_upload(event.target, RequestStatus.pending())
    if isinstance(event, UploadSucceeded):
        return status._with_upload(event.target, RequestStatus.success())
    if isinstance(event, UploadFailed):
        return status._with_upload(event.target, RequestStatus.failure(event.message))
    raise TypeError(f"未知的状态事件: {event!r}")
