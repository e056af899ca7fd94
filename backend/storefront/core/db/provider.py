"""数据库 Provider

按 DATABASE_BACKEND 创建 SQLite 或 PostgreSQL 异步引擎，
并持有进程内唯一的会话工厂。
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.core.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.orm import DeclarativeBase

    from storefront.core.config import Settings

logger = get_logger("db.provider")


class DatabaseProvider:
    """引擎与会话工厂的持有者，子类只负责构造引擎"""

    backend_name = "unknown"

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    async def init_db(self, base: "type[DeclarativeBase]") -> None:
        """按模型元数据建表（已存在的表跳过）"""
        async with self._engine.begin() as conn:
            await conn.run_sync(base.metadata.create_all)
        logger.info("数据库表已就绪", backend=self.backend_name, tables=len(base.metadata.tables))

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("数据库连接已释放", backend=self.backend_name)


class SQLiteProvider(DatabaseProvider):
    """SQLite（aiosqlite）

    驱动默认的隐式事务会破坏 SAVEPOINT，
    连接时关闭驱动自身的 BEGIN，改由 SQLAlchemy 显式发出。
    """

    backend_name = "sqlite"

    def __init__(self, database_url: str):
        kwargs: dict[str, Any] = {"connect_args": {"timeout": 30, "check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:"):
            # 内存库只存在于单个连接内
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(database_url, **kwargs)

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

        super().__init__(engine)


class PostgresProvider(DatabaseProvider):
    """PostgreSQL（asyncpg），带连接池"""

    backend_name = "postgres"

    def __init__(self, database_url: str, *, pool_size: int = 5, max_overflow: int = 10, pool_timeout: int = 30):
        self.pool_size = pool_size
        super().__init__(
            create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
            )
        )


def build_provider(config: "Settings") -> DatabaseProvider:
    """根据配置构造 Provider"""
    if config.DATABASE_BACKEND == "sqlite":
        logger.info("使用 SQLite", path=config.DATABASE_PATH)
        return SQLiteProvider(config.database_url)
    if config.DATABASE_BACKEND == "postgres":
        logger.info("使用 PostgreSQL", host=config.POSTGRES_HOST, pool_size=config.DATABASE_POOL_SIZE)
        return PostgresProvider(
            config.database_url,
            pool_size=config.DATABASE_POOL_SIZE,
            max_overflow=config.DATABASE_POOL_MAX_OVERFLOW,
            pool_timeout=config.DATABASE_POOL_TIMEOUT,
        )
    raise ValueError(f"不支持的数据库后端: {config.DATABASE_BACKEND}")


_provider: DatabaseProvider | None = None


def get_database_provider() -> DatabaseProvider:
    """进程内单例"""
    global _provider
    if _provider is None:
        from storefront.core.config import settings

        _provider = build_provider(settings)
    return _provider


def set_database_provider(provider: DatabaseProvider | None) -> None:
    """替换 Provider（测试与脚本使用）"""
    global _provider
    _provider = provider


async def close_database_provider() -> None:
    global _provider
    if _provider is not None:
        await _provider.close()
        _provider = None
