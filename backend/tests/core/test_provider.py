"""数据库 Provider 测试"""

import pytest
from sqlalchemy import text

from storefront.core.config import Settings
from storefront.core.db.provider import PostgresProvider, SQLiteProvider, build_provider


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestBuildProvider:
    """测试按配置构造 Provider"""

    def test_sqlite(self, tmp_path):
        provider = build_provider(_settings(DATABASE_BACKEND="sqlite", DATABASE_PATH=str(tmp_path / "t.db")))
        assert isinstance(provider, SQLiteProvider)
        assert provider.backend_name == "sqlite"

    def test_postgres(self):
        provider = build_provider(_settings(DATABASE_BACKEND="postgres", DATABASE_POOL_SIZE=3))
        assert isinstance(provider, PostgresProvider)
        assert provider.pool_size == 3

    def test_unknown_backend(self):
        config = _settings()
        config.DATABASE_BACKEND = "oracle"
        with pytest.raises(ValueError):
            build_provider(config)


@pytest.mark.anyio
class TestSQLiteProvider:
    """测试 SQLite 连接设置"""

    async def test_foreign_keys_enabled(self, db_provider):
        async with db_provider.engine.connect() as conn:
            result = await conn.execute(text("PRAGMA foreign_keys"))
            assert result.scalar() == 1

    async def test_savepoint_rollback_keeps_outer_transaction(self, session, make_category):
        outer = await make_category("Outer", "outer")
        with pytest.raises(RuntimeError):
            async with session.begin_nested():
                await make_category("Inner", "inner")
                raise RuntimeError("boom")

        names = (await session.execute(text("SELECT name FROM categories"))).scalars().all()
        assert names == [outer.name]
