"""分类与商品服务

规格子系统的协作方：分类创建/改 slug 时触发预设模板，
商品创建时按分类模板生成规格。
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.logging import get_logger
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.repositories.category import CategoryRepository
from storefront.repositories.product import ProductRepository
from storefront.schemas.catalog import CategoryCreate, CategoryUpdate, ProductCreate
from storefront.schemas.specification import (
    ProductSpecificationRead,
    ServiceResult,
    TemplateApplyResult,
    TemplateUpdateResult,
)
from storefront.services.specification.registry import TemplateRegistry
from storefront.services.specification.store import SpecificationStore

logger = get_logger("catalog.service")


class CategoryService:
    """分类服务"""

    def __init__(self, session: AsyncSession, registry: TemplateRegistry | None = None):
        self.session = session
        self.repo = CategoryRepository(session)
        self.registry = registry or TemplateRegistry(session)

    async def list_categories(self) -> list[Category]:
        return await self.repo.get_all()

    async def get_category(self, category_id: str) -> Category | None:
        return await self.repo.get_by_id(category_id)

    async def create_category(self, data: CategoryCreate) -> tuple[Category, TemplateApplyResult | None]:
        """创建分类并应用预设模板

        Raises:
            ValueError: slug 已存在
        """
        try:
            category = await self.repo.create(Category(name=data.name, slug=data.slug))
        except IntegrityError as e:
            raise ValueError(f"Category slug already exists: {data.slug}") from e

        logger.info("创建分类", category_id=category.id, slug=category.slug)
        if not category.slug:
            return category, None
        return category, await self.registry.apply_templates_for_category(category.id, category.slug)

    async def update_category(
        self,
        category_id: str,
        data: CategoryUpdate,
    ) -> tuple[Category, TemplateUpdateResult | None] | None:
        """更新分类，slug 变化时按新 slug 重建模板

        Raises:
            ValueError: slug 已存在
        """
        category = await self.repo.get_by_id(category_id)
        if category is None:
            return None

        old_slug = category.slug
        values = data.model_dump(exclude_unset=True)
        if values.get("name") is None:
            values.pop("name", None)
        try:
            category = await self.repo.update(category, **values)
        except IntegrityError as e:
            raise ValueError(f"Category slug already exists: {data.slug}") from e

        logger.info("更新分类", category_id=category_id, fields=list(values))
        if not category.slug or category.slug == old_slug:
            return category, None
        return category, await self.registry.update_templates_for_category(category.id, category.slug)

    async def delete_category(self, category_id: str) -> bool:
        """删除分类（模板随之删除，商品保留并解除分类）"""
        category = await self.repo.get_by_id(category_id)
        if category is None:
            return False
        await self.repo.delete(category)
        logger.info("删除分类", category_id=category_id)
        return True


class ProductService:
    """商品服务"""

    def __init__(self, session: AsyncSession, store: SpecificationStore | None = None):
        self.session = session
        self.repo = ProductRepository(session)
        self.category_repo = CategoryRepository(session)
        self.store = store or SpecificationStore(session)

    async def list_products(self, category_id: str) -> list[Product]:
        return await self.repo.get_by_category(category_id)

    async def get_product(self, product_id: str) -> Product | None:
        return await self.repo.get_by_id(product_id)

    async def create_product(
        self,
        data: ProductCreate,
    ) -> tuple[Product, ServiceResult[list[ProductSpecificationRead]] | None] | None:
        """创建商品；指定分类时按分类模板生成规格

        Returns:
            (商品, 规格保存结果)；分类不存在返回 None
        """
        if data.category_id and await self.category_repo.get_by_id(data.category_id) is None:
            return None

        product = await self.repo.create(
            Product(name=data.name, slug=data.slug, price=data.price, category_id=data.category_id)
        )
        logger.info("创建商品", product_id=product.id, category_id=product.category_id)

        if not data.category_id:
            return product, None
        specifications = await self.store.create_product_specifications_from_templates(
            product.id, data.category_id, data.specifications
        )
        return product, specifications

    async def delete_product(self, product_id: str) -> bool:
        """删除商品（规格值随之删除）"""
        product = await self.repo.get_by_id(product_id)
        if product is None:
            return False
        await self.repo.delete(product)
        logger.info("删除商品", product_id=product_id)
        return True
