"""数据库连接管理

使用 Provider 模式支持多种数据库后端（SQLite、PostgreSQL）
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.db.provider import get_database_provider
from storefront.core.logging import get_logger

logger = get_logger("database")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话（请求结束时提交，异常时回滚）"""
    session_factory = get_database_provider().session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话（上下文管理器，用于脚本与启动任务）"""
    session_factory = get_database_provider().session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise


async def init_db() -> None:
    """初始化数据库（创建表）"""
    from storefront.core.config import settings
    from storefront.models import Base

    settings.ensure_data_dir()
    provider = get_database_provider()
    await provider.init_db(Base)
    logger.info("数据库表初始化完成", backend=provider.backend_name)
