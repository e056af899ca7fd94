"""规格 Repository

replace_* 方法把“先删后插”放在同一个 SAVEPOINT 中，
中途失败时旧数据保持不变。
"""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.specification import ProductSpecification, SpecificationTemplate
from storefront.repositories.base import BaseRepository


class SpecificationTemplateRepository(BaseRepository[SpecificationTemplate]):
    """分类规格模板数据访问"""

    model = SpecificationTemplate

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_category(self, category_id: str) -> list[SpecificationTemplate]:
        """获取分类模板，按 display_order 排序"""
        stmt = (
            select(SpecificationTemplate)
            .where(SpecificationTemplate.category_id == category_id)
            .order_by(SpecificationTemplate.display_order, SpecificationTemplate.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_category(self, category_id: str) -> int:
        """统计分类已有模板数量"""
        stmt = select(func.count(SpecificationTemplate.id)).where(
            SpecificationTemplate.category_id == category_id
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def create_many(self, category_id: str, rows: list[dict[str, Any]]) -> list[SpecificationTemplate]:
        """批量创建模板（单个 SAVEPOINT，任一失败全部回滚）"""
        templates = [SpecificationTemplate(**{**row, "category_id": category_id}) for row in rows]
        async with self.session.begin_nested():
            self.session.add_all(templates)
            await self.session.flush()
        return templates

    async def replace_for_category(
        self,
        category_id: str,
        rows: list[dict[str, Any]],
    ) -> tuple[int, list[SpecificationTemplate]]:
        """删除分类全部模板后写入新模板

        Returns:
            (删除数量, 新模板列表)
        """
        templates = [SpecificationTemplate(**{**row, "category_id": category_id}) for row in rows]
        async with self.session.begin_nested():
            result = await self.session.execute(
                delete(SpecificationTemplate).where(SpecificationTemplate.category_id == category_id)
            )
            if templates:
                self.session.add_all(templates)
            await self.session.flush()
        return result.rowcount or 0, templates


class ProductSpecificationRepository(BaseRepository[ProductSpecification]):
    """商品规格数据访问"""

    model = ProductSpecification

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_product(self, product_id: str) -> list[ProductSpecification]:
        """获取商品规格，按 display_order 排序"""
        stmt = (
            select(ProductSpecification)
            .where(ProductSpecification.product_id == product_id)
            .order_by(ProductSpecification.display_order, ProductSpecification.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_template(self, template_id: str) -> list[ProductSpecification]:
        """获取由某模板生成的全部规格值"""
        stmt = select(ProductSpecification).where(ProductSpecification.template_id == template_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_for_product(
        self,
        product_id: str,
        rows: list[dict[str, Any]],
    ) -> list[ProductSpecification]:
        """整体替换商品规格：删除全部旧值，再插入新值（空列表则只删除）"""
        specifications = [ProductSpecification(**{**row, "product_id": product_id}) for row in rows]
        async with self.session.begin_nested():
            await self.session.execute(
                delete(ProductSpecification).where(ProductSpecification.product_id == product_id)
            )
            if specifications:
                self.session.add_all(specifications)
            await self.session.flush()
        return specifications
