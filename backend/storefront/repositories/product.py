"""商品 Repository"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.models.product import Product
from storefront.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """商品数据访问"""

    model = Product

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_category(self, category_id: str) -> list[Product]:
        """根据分类获取商品"""
        result = await self.session.execute(
            select(Product).where(Product.category_id == category_id).order_by(Product.name)
        )
        return list(result.scalars().all())

    async def get_by_category_with_specifications(self, category_id: str) -> list[Product]:
        """获取分类下全部商品及其规格（全量扫描，无分页）"""
        stmt = (
            select(Product)
            .options(selectinload(Product.specifications))
            .where(Product.category_id == category_id)
            .order_by(Product.name)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_many_with_specifications(self, product_ids: list[str]) -> list[Product]:
        """按 ID 批量获取商品及其规格与分类"""
        if not product_ids:
            return []
        stmt = (
            select(Product)
            .options(selectinload(Product.specifications), selectinload(Product.category))
            .where(Product.id.in_(product_ids))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
