"""分类 Repository"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.category import Category
from storefront.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """分类数据访问"""

    model = Category

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_all(self) -> list[Category]:
        """按名称排序获取全部分类"""
        result = await self.session.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Category | None:
        """根据 slug 获取分类"""
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()
