"""模型基类"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """声明式基类"""


def new_id() -> str:
    """生成字符串 UUID 主键"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """当前 UTC 时间（naive，统一存储格式）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    """创建/更新时间戳（客户端生成，flush 后无需 refresh）"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
