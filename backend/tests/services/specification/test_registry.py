"""分类规格模板注册表测试"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from storefront.models import SpecificationTemplate
from storefront.repositories.specification import ProductSpecificationRepository
from storefront.schemas.specification import TemplateBase, TemplateCreate, TemplateUpdate
from storefront.services.specification.registry import TemplateRegistry


@pytest.fixture
def registry(session):
    return TemplateRegistry(session)


def _create_many_failing_for(failing_category_id: str):
    """批量创建的替身：指定分类失败，其它分类返回构造好的模板"""

    async def _create_many(category_id, rows):
        if category_id == failing_category_id:
            raise SQLAlchemyError("boom")
        now = datetime(2024, 1, 1)
        return [
            SpecificationTemplate(id=f"t{i}", category_id=category_id, created_at=now, updated_at=now, **row)
            for i, row in enumerate(rows)
        ]

    return _create_many


def _create(category_id: str, name: str = "ram", **overrides) -> TemplateCreate:
    data = {"category_id": category_id, "name": name, "display_name": name.upper(), "data_type": "text"}
    data.update(overrides)
    return TemplateCreate(**data)


@pytest.mark.anyio
class TestTemplateCrud:
    """测试模板 CRUD"""

    async def test_get_ordered_by_display_order(self, registry, make_category):
        """测试按 display_order 排序"""
        category = await make_category()
        await registry.create_template(_create(category.id, "b", display_order=2))
        await registry.create_template(_create(category.id, "a", display_order=1))

        result = await registry.get_templates_for_category(category.id)

        assert result.success is True
        assert [t.name for t in result.data] == ["a", "b"]

    async def test_create_template(self, registry, make_category):
        category = await make_category()
        result = await registry.create_template(_create(category.id, unit="GB", data_type="number"))

        assert result.success is True
        assert result.data.id
        assert result.data.category_id == category.id
        assert result.data.unit == "GB"
        assert result.data.is_filter is True

    async def test_create_duplicate_name_fails(self, registry, make_category):
        """测试同分类重名模板被拒绝，会话仍可继续使用"""
        category = await make_category()
        assert (await registry.create_template(_create(category.id))).success is True

        result = await registry.create_template(_create(category.id))

        assert result.success is False
        assert result.errors
        templates = await registry.get_templates_for_category(category.id)
        assert len(templates.data) == 1

    async def test_create_enum_without_values_fails(self, registry, make_category):
        category = await make_category()
        result = await registry.create_template(_create(category.id, data_type="enum"))

        assert result.success is False
        assert "enum_values must be non-empty" in result.errors[0]

    async def test_bulk_create_is_all_or_nothing(self, registry, make_category):
        """测试批量创建中任一失败则全部不写入"""
        category = await make_category()
        templates = [
            TemplateBase(name="ram", display_name="RAM"),
            TemplateBase(name="cpu", display_name="CPU"),
            TemplateBase(name="ram", display_name="RAM again"),
        ]

        result = await registry.create_templates_for_category(category.id, templates)

        assert result.success is False
        assert (await registry.get_templates_for_category(category.id)).data == []

    async def test_bulk_create_empty(self, registry, make_category):
        category = await make_category()
        result = await registry.create_templates_for_category(category.id, [])
        assert result.success is True
        assert result.data == []

    async def test_update_template(self, registry, make_category):
        category = await make_category()
        created = (await registry.create_template(_create(category.id))).data

        result = await registry.update_template(created.id, TemplateUpdate(display_name="Memory", unit="GB"))

        assert result.success is True
        assert result.data.display_name == "Memory"
        assert result.data.unit == "GB"
        assert result.data.name == "ram"

    async def test_update_missing_template(self, registry):
        result = await registry.update_template("missing", TemplateUpdate(display_name="X"))
        assert result.success is False
        assert result.errors == ["Template not found"]

    async def test_update_checks_merged_enum_values(self, registry, make_category):
        """测试更新为枚举类型但没有可选值时失败"""
        category = await make_category()
        created = (await registry.create_template(_create(category.id))).data

        result = await registry.update_template(created.id, TemplateUpdate(data_type="enum"))
        assert result.success is False

        result = await registry.update_template(
            created.id, TemplateUpdate(data_type="enum", enum_values=["DDR4", "DDR5"])
        )
        assert result.success is True
        assert result.data.enum_values == ["DDR4", "DDR5"]

    async def test_clearing_enum_values_of_enum_template_fails(self, registry, make_category):
        category = await make_category()
        created = (
            await registry.create_template(_create(category.id, data_type="enum", enum_values=["A", "B"]))
        ).data

        result = await registry.update_template(created.id, TemplateUpdate(enum_values=None))

        assert result.success is False

    async def test_delete_template_keeps_product_values(self, registry, session, make_category, make_product):
        """测试删除模板不影响已有商品规格"""
        category = await make_category()
        product = await make_product(category.id)
        template = (await registry.create_template(_create(category.id))).data
        spec_repo = ProductSpecificationRepository(session)
        await spec_repo.replace_for_product(
            product.id,
            [{"name": "ram", "display_name": "RAM", "value": "16", "template_id": template.id}],
        )

        result = await registry.delete_template(template.id)

        assert result.success is True
        assert (await registry.get_templates_for_category(category.id)).data == []
        remaining = await spec_repo.get_by_product(product.id)
        assert [s.value for s in remaining] == ["16"]
        assert remaining[0].template_id == template.id

    async def test_delete_missing_template(self, registry):
        result = await registry.delete_template("missing")
        assert result.success is False


@pytest.mark.anyio
class TestApplyTemplates:
    """测试预设模板应用"""

    async def test_apply_laptops_preset(self, registry, make_category):
        """测试 laptops 预设写入 5 个模板并按顺序返回"""
        category = await make_category("Laptops", "laptops")

        result = await registry.apply_templates_for_category(category.id, "laptops")

        assert result.success is True
        assert result.templates_applied == 5
        templates = (await registry.get_templates_for_category(category.id)).data
        assert len(templates) == 5
        orders = [t.display_order for t in templates]
        assert orders == sorted(orders)

    async def test_apply_is_idempotent(self, registry, make_category):
        """测试重复应用不会改变已有模板"""
        category = await make_category("Laptops", "laptops")
        await registry.apply_templates_for_category(category.id, "laptops")
        before = {t.id for t in (await registry.get_templates_for_category(category.id)).data}

        result = await registry.apply_templates_for_category(category.id, "laptops")

        assert result.success is True
        assert result.templates_applied == 0
        after = {t.id for t in (await registry.get_templates_for_category(category.id)).data}
        assert after == before

    async def test_apply_skips_category_with_custom_templates(self, registry, make_category):
        """测试已有自定义模板时不合并预设"""
        category = await make_category("Laptops", "laptops")
        await registry.create_template(_create(category.id, "custom"))

        result = await registry.apply_templates_for_category(category.id, "laptops")

        assert result.templates_applied == 0
        assert [t.name for t in (await registry.get_templates_for_category(category.id)).data] == ["custom"]

    async def test_apply_unknown_slug(self, registry, make_category):
        category = await make_category("Garden", "garden-tools")
        result = await registry.apply_templates_for_category(category.id, "garden-tools")
        assert result.success is True
        assert result.templates_applied == 0

    async def test_slug_change_replaces_templates(self, registry, make_category):
        """测试 slug 变更后旧模板全部替换为新预设（重名也是新记录）"""
        category = await make_category("Laptops", "laptops")
        await registry.apply_templates_for_category(category.id, "laptops")
        old_ids = {t.id for t in (await registry.get_templates_for_category(category.id)).data}

        result = await registry.update_templates_for_category(category.id, "monitors")

        assert result.success is True
        templates = (await registry.get_templates_for_category(category.id)).data
        assert result.templates_updated == len(templates) == 6
        assert old_ids.isdisjoint({t.id for t in templates})
        assert "screen_size" in {t.name for t in templates}

    async def test_slug_change_to_unknown_slug_clears_templates(self, registry, make_category):
        category = await make_category("Laptops", "laptops")
        await registry.apply_templates_for_category(category.id, "laptops")

        result = await registry.update_templates_for_category(category.id, "garden-tools")

        assert result.success is True
        assert result.templates_updated == 0
        assert (await registry.get_templates_for_category(category.id)).data == []

    async def test_slug_change_failure_keeps_old_templates(self, registry, make_category):
        """测试重建失败时旧模板保留"""
        category = await make_category("Laptops", "laptops")
        await registry.apply_templates_for_category(category.id, "laptops")
        registry.template_repo.replace_for_category = AsyncMock(side_effect=SQLAlchemyError("boom"))

        result = await registry.update_templates_for_category(category.id, "monitors")

        assert result.success is False
        assert result.templates_updated == 0
        assert len((await registry.get_templates_for_category(category.id)).data) == 5


@pytest.mark.anyio
class TestTemplateInfo:
    """测试诊断信息"""

    async def test_needs_application(self, registry, make_category):
        category = await make_category("Laptops", "laptops")

        info = await registry.get_category_template_info(category.id, "laptops")

        assert info.has_hardcoded_templates is True
        assert info.hardcoded_templates_count == 5
        assert info.applied_templates_count == 0
        assert info.needs_template_application is True

    async def test_after_application(self, registry, make_category):
        category = await make_category("Laptops", "laptops")
        await registry.apply_templates_for_category(category.id, "laptops")

        info = await registry.get_category_template_info(category.id, "laptops")

        assert info.applied_templates_count == 5
        assert info.needs_template_application is False

    async def test_storage_error_returns_empty_info(self, session):
        template_repo = MagicMock()
        template_repo.count_by_category = AsyncMock(side_effect=SQLAlchemyError("boom"))
        registry = TemplateRegistry(session, template_repo=template_repo)

        info = await registry.get_category_template_info("c1", "laptops")

        assert info.has_hardcoded_templates is False
        assert info.hardcoded_templates_count == 0
        assert info.needs_template_application is False

    async def test_available_categories(self, registry):
        assert "laptops" in registry.get_available_template_categories()


@pytest.mark.anyio
class TestInitializeAll:
    """测试全量初始化"""

    async def test_initialize_all(self, registry, make_category):
        laptops = await make_category("Laptops", "laptops")
        monitors = await make_category("Monitors", "monitors")
        await make_category("Garden", "garden-tools")
        await make_category("Unsorted", None)
        await registry.create_template(_create(monitors.id, "custom"))

        result = await registry.initialize_all_category_templates()

        assert result.success is True
        assert result.processed_categories == 3
        assert result.applied_templates == 5
        assert result.errors is None
        assert len((await registry.get_templates_for_category(laptops.id)).data) == 5

    async def test_initialize_collects_errors(self, session):
        """测试单个分类失败时继续处理并收集错误"""
        first, second = MagicMock(id="c1", slug="laptops"), MagicMock(id="c2", slug="monitors")
        first.name, second.name = "Laptops", "Monitors"
        category_repo = MagicMock()
        category_repo.get_all = AsyncMock(return_value=[first, second])
        template_repo = MagicMock()
        template_repo.get_by_category = AsyncMock(return_value=[])
        template_repo.create_many = AsyncMock(side_effect=_create_many_failing_for("c1"))
        registry = TemplateRegistry(session, template_repo=template_repo, category_repo=category_repo)

        result = await registry.initialize_all_category_templates()

        assert result.success is False
        assert result.processed_categories == 2
        assert result.applied_templates == 6
        assert len(result.errors) == 1

    async def test_initialize_storage_error(self, session):
        category_repo = MagicMock()
        category_repo.get_all = AsyncMock(side_effect=SQLAlchemyError("boom"))
        registry = TemplateRegistry(session, category_repo=category_repo)

        result = await registry.initialize_all_category_templates()

        assert result.success is False
        assert result.processed_categories == 0


@pytest.mark.anyio
class TestUsageStats:
    """测试模板使用统计"""

    async def test_unused_template(self, registry):
        result = await registry.get_template_usage_stats("t1")
        assert result.success is True
        assert result.data.total_products == 0
        assert result.data.most_common_value is None

    async def test_usage_stats(self, registry, session, make_category, make_product):
        category = await make_category()
        template = (await registry.create_template(_create(category.id))).data
        spec_repo = ProductSpecificationRepository(session)
        for value in ["16", "32", "16", ""]:
            product = await make_product(category.id)
            await spec_repo.replace_for_product(
                product.id,
                [{"name": "ram", "display_name": "RAM", "value": value, "template_id": template.id}],
            )

        result = await registry.get_template_usage_stats(template.id)

        assert result.success is True
        assert result.data.total_products == 4
        assert result.data.unique_values == 2
        assert result.data.most_common_value == "16"
        assert result.data.last_used is not None


@pytest.mark.anyio
class TestStorageErrors:
    """测试存储异常转换为失败结果"""

    async def test_get_templates_storage_error(self, session):
        template_repo = MagicMock()
        template_repo.get_by_category = AsyncMock(side_effect=SQLAlchemyError("boom"))
        registry = TemplateRegistry(session, template_repo=template_repo)

        result = await registry.get_templates_for_category("c1")

        assert result.success is False
        assert "boom" in result.errors[0]

    async def test_apply_storage_error(self, session):
        template_repo = MagicMock()
        template_repo.get_by_category = AsyncMock(side_effect=SQLAlchemyError("boom"))
        registry = TemplateRegistry(session, template_repo=template_repo)

        result = await registry.apply_templates_for_category("c1", "laptops")

        assert result.success is False
        assert result.templates_applied == 0
