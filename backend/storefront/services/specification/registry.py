"""分类规格模板注册表

管理每个分类允许的规格属性，并在分类首次配置时从预设模板初始化。
所有方法都返回结果对象，存储异常在这里记录日志并转换为失败结果。
"""

from collections import Counter
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.logging import get_logger
from storefront.models.specification import SpecDataType, SpecificationTemplate
from storefront.repositories.category import CategoryRepository
from storefront.repositories.specification import (
    ProductSpecificationRepository,
    SpecificationTemplateRepository,
)
from storefront.schemas.specification import (
    CategoryTemplateInfo,
    ServiceResult,
    TemplateApplyResult,
    TemplateBase,
    TemplateCreate,
    TemplateInitializationResult,
    TemplateRead,
    TemplateUpdate,
    TemplateUpdateResult,
    TemplateUsageStats,
)
from storefront.services.specification.presets import (
    get_available_category_slugs,
    get_templates_for_category_slug,
)

logger = get_logger("specification.registry")

# 更新时不允许置空的列
_NON_NULLABLE_FIELDS = frozenset({"display_name", "data_type", "is_required", "is_filter", "display_order"})


def _enum_violation(display_name: str, data_type: Any, enum_values: list[str] | None) -> str | None:
    if SpecDataType(data_type) == SpecDataType.ENUM and not enum_values:
        return f"{display_name}: enum_values must be non-empty when data_type is enum"
    return None


def _template_row(entry: TemplateBase) -> dict[str, Any]:
    return entry.model_dump(mode="json", exclude={"category_id"})


class TemplateRegistry:
    """分类规格模板服务"""

    def __init__(
        self,
        session: AsyncSession,
        template_repo: SpecificationTemplateRepository | None = None,
        category_repo: CategoryRepository | None = None,
        spec_repo: ProductSpecificationRepository | None = None,
    ):
        self.session = session
        self.template_repo = template_repo or SpecificationTemplateRepository(session)
        self.category_repo = category_repo or CategoryRepository(session)
        self.spec_repo = spec_repo or ProductSpecificationRepository(session)

    # ========== 模板 CRUD ==========

    async def get_templates_for_category(self, category_id: str) -> ServiceResult[list[TemplateRead]]:
        """获取分类模板（按 display_order 排序）"""
        try:
            templates = await self.template_repo.get_by_category(category_id)
        except SQLAlchemyError as e:
            logger.error("获取分类模板失败", category_id=category_id, error=str(e))
            return ServiceResult.fail(str(e))
        return ServiceResult.ok([TemplateRead.model_validate(t) for t in templates])

    async def create_template(self, data: TemplateCreate) -> ServiceResult[TemplateRead]:
        """创建单个模板"""
        violation = _enum_violation(data.display_name, data.data_type, data.enum_values)
        if violation:
            return ServiceResult.fail(violation)

        try:
            template = await self.template_repo.create(
                SpecificationTemplate(category_id=data.category_id, **_template_row(data))
            )
        except SQLAlchemyError as e:
            logger.error("创建模板失败", category_id=data.category_id, name=data.name, error=str(e))
            return ServiceResult.fail(str(e))

        logger.info("创建模板", template_id=template.id, category_id=data.category_id, name=data.name)
        return ServiceResult.ok(TemplateRead.model_validate(template))

    async def create_templates_for_category(
        self,
        category_id: str,
        templates: list[TemplateBase],
    ) -> ServiceResult[list[TemplateRead]]:
        """批量创建模板，任一失败则全部不写入"""
        violations = [
            v for t in templates if (v := _enum_violation(t.display_name, t.data_type, t.enum_values))
        ]
        if violations:
            return ServiceResult.fail(*violations)
        if not templates:
            return ServiceResult.ok([])

        try:
            created = await self.template_repo.create_many(category_id, [_template_row(t) for t in templates])
        except SQLAlchemyError as e:
            logger.error("批量创建模板失败", category_id=category_id, count=len(templates), error=str(e))
            return ServiceResult.fail(str(e))

        logger.info("批量创建模板", category_id=category_id, count=len(created))
        return ServiceResult.ok([TemplateRead.model_validate(t) for t in created])

    async def update_template(self, template_id: str, data: TemplateUpdate) -> ServiceResult[TemplateRead]:
        """更新模板（按合并后的结果校验枚举约束）"""
        values = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or key not in _NON_NULLABLE_FIELDS
        }
        try:
            template = await self.template_repo.get_by_id(template_id)
            if template is None:
                return ServiceResult.fail("Template not found")

            violation = _enum_violation(
                values.get("display_name", template.display_name),
                values.get("data_type", template.data_type),
                values["enum_values"] if "enum_values" in values else template.enum_values,
            )
            if violation:
                return ServiceResult.fail(violation)

            template = await self.template_repo.update(template, **values)
        except SQLAlchemyError as e:
            logger.error("更新模板失败", template_id=template_id, error=str(e))
            return ServiceResult.fail(str(e))

        logger.info("更新模板", template_id=template_id, fields=list(values))
        return ServiceResult.ok(TemplateRead.model_validate(template))

    async def delete_template(self, template_id: str) -> ServiceResult[None]:
        """删除模板（已有商品规格值保留）"""
        try:
            template = await self.template_repo.get_by_id(template_id)
            if template is None:
                return ServiceResult.fail("Template not found")
            await self.template_repo.delete(template)
        except SQLAlchemyError as e:
            logger.error("删除模板失败", template_id=template_id, error=str(e))
            return ServiceResult.fail(str(e))

        logger.info("删除模板", template_id=template_id)
        return ServiceResult.ok()

    # ========== 预设模板 ==========

    async def apply_templates_for_category(self, category_id: str, category_slug: str) -> TemplateApplyResult:
        """为分类应用预设模板

        分类已有任意模板时不做任何修改（幂等，先到先得）。
        """
        presets = get_templates_for_category_slug(category_slug)
        if not presets:
            logger.debug("分类无预设模板", category_id=category_id, slug=category_slug)
            return TemplateApplyResult(success=True, templates_applied=0)

        existing = await self.get_templates_for_category(category_id)
        if not existing.success:
            return TemplateApplyResult(success=False, errors=existing.errors)
        if existing.data:
            logger.debug(
                "分类已有模板，跳过预设",
                category_id=category_id,
                slug=category_slug,
                existing=len(existing.data),
            )
            return TemplateApplyResult(success=True, templates_applied=0)

        result = await self.create_templates_for_category(category_id, presets)
        if not result.success:
            logger.warning("应用预设模板失败", category_id=category_id, slug=category_slug, errors=result.errors)
            return TemplateApplyResult(success=False, errors=result.errors)

        logger.info("应用预设模板", category_id=category_id, slug=category_slug, count=len(presets))
        return TemplateApplyResult(success=True, templates_applied=len(presets))

    async def update_templates_for_category(self, category_id: str, new_slug: str) -> TemplateUpdateResult:
        """分类 slug 变更后重建模板

        删除分类全部模板并按新 slug 写入预设，两步在同一事务单元内完成；
        失败时旧模板保持不变。管理员对模板的自定义修改会丢失。
        """
        presets = get_templates_for_category_slug(new_slug) or []
        try:
            removed, created = await self.template_repo.replace_for_category(
                category_id, [_template_row(t) for t in presets]
            )
        except SQLAlchemyError as e:
            logger.error("重建分类模板失败", category_id=category_id, slug=new_slug, error=str(e))
            return TemplateUpdateResult(success=False, errors=[str(e)])

        logger.info("重建分类模板", category_id=category_id, slug=new_slug, removed=removed, created=len(created))
        return TemplateUpdateResult(success=True, templates_updated=len(created))

    async def get_category_template_info(self, category_id: str, category_slug: str) -> CategoryTemplateInfo:
        """分类模板诊断信息"""
        presets = get_templates_for_category_slug(category_slug)
        try:
            applied = await self.template_repo.count_by_category(category_id)
        except SQLAlchemyError as e:
            logger.error("获取分类模板信息失败", category_id=category_id, error=str(e))
            return CategoryTemplateInfo()

        has_presets = presets is not None
        return CategoryTemplateInfo(
            has_hardcoded_templates=has_presets,
            hardcoded_templates_count=len(presets or []),
            applied_templates_count=applied,
            needs_template_application=has_presets and applied == 0,
        )

    def get_available_template_categories(self) -> list[str]:
        """有预设模板的分类 slug 列表"""
        return get_available_category_slugs()

    async def initialize_all_category_templates(self) -> TemplateInitializationResult:
        """为所有分类补齐预设模板（逐个处理，单个失败不影响其它分类）"""
        try:
            categories = await self.category_repo.get_all()
        except SQLAlchemyError as e:
            logger.error("读取分类失败", error=str(e))
            return TemplateInitializationResult(success=False, errors=[str(e)])

        processed = 0
        applied = 0
        errors: list[str] = []
        for category in categories:
            if not category.slug:
                continue
            try:
                result = await self.apply_templates_for_category(category.id, category.slug)
            except Exception as e:
                logger.exception("处理分类失败", category_id=category.id, name=category.name)
                errors.append(f"Error processing category {category.name}: {e}")
                continue
            processed += 1
            applied += result.templates_applied
            if not result.success:
                errors.extend(result.errors or [f"Failed to apply templates for category {category.name}"])

        logger.info("分类模板初始化完成", processed=processed, applied=applied, errors=len(errors))
        return TemplateInitializationResult(
            success=not errors,
            processed_categories=processed,
            applied_templates=applied,
            errors=errors or None,
        )

    async def get_template_usage_stats(self, template_id: str) -> ServiceResult[TemplateUsageStats]:
        """模板使用统计"""
        try:
            specifications = await self.spec_repo.get_by_template(template_id)
        except SQLAlchemyError as e:
            logger.error("获取模板使用统计失败", template_id=template_id, error=str(e))
            return ServiceResult.fail(str(e))

        if not specifications:
            return ServiceResult.ok(TemplateUsageStats())

        counts = Counter(s.value for s in specifications if s.value)
        most_common = counts.most_common(1)
        return ServiceResult.ok(
            TemplateUsageStats(
                total_products=len(specifications),
                unique_values=len(counts),
                most_common_value=most_common[0][0] if most_common else None,
                last_used=max(s.created_at for s in specifications),
            )
        )
