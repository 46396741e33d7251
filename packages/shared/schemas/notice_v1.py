"""Shared notice payload schema (v1).

Every user-facing outcome of a storefront action is rendered from one of these: a level for
the banner colour, a message, and where the client should go next.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NoticeLevelV1(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class CheckoutStatusV1(str, Enum):
    SUCCEEDED = "SUCCEEDED"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"
    EMPTY_CART = "EMPTY_CART"
    PROFILE_MISSING = "PROFILE_MISSING"
    ERROR = "ERROR"


class NoticeV1(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str = "1"
    level: NoticeLevelV1
    message: str

    # Client-side route to navigate to after showing the notice.
    redirect_to: str | None = None


class CheckoutNoticeV1(NoticeV1):
    status: CheckoutStatusV1
    succeeded_count: int = 0
    failed_messages: list[str] = Field(default_factory=list)
    order_ids: list[str] = Field(default_factory=list)
