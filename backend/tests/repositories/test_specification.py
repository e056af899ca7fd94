"""规格 Repository 测试"""

import pytest

from storefront.repositories.product import ProductRepository
from storefront.repositories.specification import (
    ProductSpecificationRepository,
    SpecificationTemplateRepository,
)


@pytest.mark.anyio
class TestSpecificationTemplateRepository:
    """测试模板数据访问"""

    async def test_create_many_and_count(self, session, make_category):
        category = await make_category()
        repo = SpecificationTemplateRepository(session)

        created = await repo.create_many(
            category.id,
            [
                {"name": "ram", "display_name": "RAM", "display_order": 2},
                {"name": "cpu", "display_name": "CPU", "display_order": 1},
            ],
        )

        assert len(created) == 2
        assert await repo.count_by_category(category.id) == 2
        assert [t.name for t in await repo.get_by_category(category.id)] == ["cpu", "ram"]

    async def test_replace_for_category(self, session, make_category):
        category = await make_category()
        repo = SpecificationTemplateRepository(session)
        await repo.create_many(category.id, [{"name": "ram", "display_name": "RAM"}])

        removed, created = await repo.replace_for_category(category.id, [{"name": "gpu", "display_name": "GPU"}])

        assert removed == 1
        assert [t.name for t in await repo.get_by_category(category.id)] == ["gpu"]
        assert created[0].category_id == category.id

    async def test_category_delete_cascades_to_templates(self, session, make_category):
        """测试删除分类时模板随之删除"""
        category = await make_category()
        repo = SpecificationTemplateRepository(session)
        await repo.create_many(category.id, [{"name": "ram", "display_name": "RAM"}])

        from storefront.repositories.category import CategoryRepository

        await CategoryRepository(session).delete(category)

        assert await repo.count_by_category(category.id) == 0


@pytest.mark.anyio
class TestProductSpecificationRepository:
    """测试商品规格数据访问"""

    async def test_replace_and_list(self, session, make_product):
        product = await make_product(None)
        repo = ProductSpecificationRepository(session)

        await repo.replace_for_product(product.id, [{"name": "ram", "display_name": "RAM", "value": "16"}])
        await repo.replace_for_product(product.id, [{"name": "cpu", "display_name": "CPU", "value": "i7"}])

        assert [s.name for s in await repo.get_by_product(product.id)] == ["cpu"]

    async def test_product_delete_cascades_to_specifications(self, session, make_product):
        """测试删除商品时规格随之删除"""
        product = await make_product(None)
        repo = ProductSpecificationRepository(session)
        await repo.replace_for_product(product.id, [{"name": "ram", "display_name": "RAM", "value": "16"}])

        await ProductRepository(session).delete(product)

        assert await repo.get_by_product(product.id) == []

    async def test_products_with_specifications(self, session, make_category, make_product):
        category = await make_category()
        product = await make_product(category.id)
        await ProductSpecificationRepository(session).replace_for_product(
            product.id, [{"name": "ram", "display_name": "RAM", "value": "16"}]
        )

        products = await ProductRepository(session).get_by_category_with_specifications(category.id)

        assert [s.value for s in products[0].specifications] == ["16"]
