"""BaseRepository 测试"""

from typing import Generic
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from storefront.models import Category
from storefront.repositories.base import BaseRepository, ModelT
from storefront.repositories.category import CategoryRepository


class TestBaseRepositoryInit:
    """测试 BaseRepository 初始化"""

    def test_init_with_session(self):
        """测试使用 session 初始化"""
        mock_session = MagicMock()

        class DummyRepository(BaseRepository):
            model = MagicMock()

        repo = DummyRepository(mock_session)
        assert repo.session is mock_session

    def test_is_generic_class(self):
        """测试是泛型类"""
        assert issubclass(BaseRepository, Generic)
        assert ModelT is not None


@pytest.mark.anyio
class TestBaseRepositoryCrud:
    """测试通用 CRUD（内存 SQLite）"""

    async def test_create_and_get(self, session):
        repo = CategoryRepository(session)
        category = await repo.create(Category(name="Laptops", slug="laptops"))

        assert category.id
        assert category.created_at is not None
        assert await repo.get_by_id(category.id) is category

    async def test_get_all_sorted_by_name(self, session):
        repo = CategoryRepository(session)
        await repo.create(Category(name="Monitors", slug="monitors"))
        await repo.create(Category(name="Cases", slug="cases"))

        assert [c.name for c in await repo.get_all()] == ["Cases", "Monitors"]

    async def test_update(self, session):
        repo = CategoryRepository(session)
        category = await repo.create(Category(name="Laptops", slug="laptops"))

        updated = await repo.update(category, name="Notebooks")

        assert updated.name == "Notebooks"
        assert (await repo.get_by_slug("laptops")).name == "Notebooks"

    async def test_delete(self, session):
        repo = CategoryRepository(session)
        category = await repo.create(Category(name="Laptops", slug="laptops"))

        await repo.delete(category)

        assert await repo.get_by_slug("laptops") is None

    async def test_failed_write_rolls_back_only_itself(self, session):
        """测试失败的写入只回滚自身，之前的写入保留"""
        repo = CategoryRepository(session)
        await repo.create(Category(name="Laptops", slug="laptops"))

        with pytest.raises(IntegrityError):
            await repo.create(Category(name="Duplicate", slug="laptops"))

        assert [c.name for c in await repo.get_all()] == ["Laptops"]
