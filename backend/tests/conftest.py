"""Pytest 配置"""

import os

import pytest

# 测试使用简洁日志，避免 rich traceback 干扰输出
os.environ.setdefault("LOG_MODE", "simple")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_BACKEND", "sqlite")

from httpx import ASGITransport, AsyncClient  # noqa: E402

from storefront.core.db.provider import SQLiteProvider  # noqa: E402
from storefront.models import Base, Category, Product  # noqa: E402
from storefront.repositories.category import CategoryRepository  # noqa: E402
from storefront.repositories.product import ProductRepository  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def db_provider(anyio_backend):
    """内存 SQLite（每个测试独立）"""
    provider = SQLiteProvider("sqlite+aiosqlite:///:memory:")
    await provider.init_db(Base)
    yield provider
    await provider.close()


@pytest.fixture
async def session(db_provider):
    async with db_provider.session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_category(session):
    """创建分类（不应用预设）"""

    async def _make(name: str = "Laptops", slug: str | None = "laptops") -> Category:
        return await CategoryRepository(session).create(Category(name=name, slug=slug))

    return _make


@pytest.fixture
def make_product(session):
    """创建商品"""

    async def _make(category_id: str | None, name: str = "Product") -> Product:
        return await ProductRepository(session).create(Product(name=name, category_id=category_id))

    return _make


@pytest.fixture
async def client(db_provider):
    """API 客户端，请求会话使用内存数据库"""
    from storefront.core.dependencies import get_db_session
    from storefront.main import app

    async def _override_session():
        async with db_provider.session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
