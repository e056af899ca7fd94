"""商品规格存储

商品规格值的读取、整体替换保存与校验。校验是提示性的：
未通过校验的值依然保存，并通过 warnings 返回给调用方。
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.logging import get_logger
from storefront.repositories.specification import (
    ProductSpecificationRepository,
    SpecificationTemplateRepository,
)
from storefront.schemas.specification import (
    GroupedSpecifications,
    ProductSpecificationCreate,
    ProductSpecificationRead,
    ProductSpecificationUpdate,
    ServiceResult,
    SpecificationValidationResult,
)
from storefront.services.specification.validation import TemplateLike, validate_specification_value

logger = get_logger("specification.store")

_NON_NULLABLE_FIELDS = frozenset(
    {"display_name", "value", "data_type", "is_required", "is_filter", "display_order"}
)


class SpecificationStore:
    """商品规格服务"""

    def __init__(
        self,
        session: AsyncSession,
        spec_repo: ProductSpecificationRepository | None = None,
        template_repo: SpecificationTemplateRepository | None = None,
    ):
        self.session = session
        self.spec_repo = spec_repo or ProductSpecificationRepository(session)
        self.template_repo = template_repo or SpecificationTemplateRepository(session)

    async def get_product_specifications(self, product_id: str) -> ServiceResult[list[ProductSpecificationRead]]:
        """获取商品规格（按 display_order 排序）"""
        try:
            specifications = await self.spec_repo.get_by_product(product_id)
        except SQLAlchemyError as e:
            logger.error("获取商品规格失败", product_id=product_id, error=str(e))
            return ServiceResult.fail(str(e))
        return ServiceResult.ok([ProductSpecificationRead.model_validate(s) for s in specifications])

    async def get_grouped_product_specifications(self, product_id: str) -> ServiceResult[GroupedSpecifications]:
        """按必填/可选分组获取商品规格"""
        result = await self.get_product_specifications(product_id)
        if not result.success:
            return ServiceResult.fail(*(result.errors or []))

        specifications = result.data or []
        return ServiceResult.ok(
            GroupedSpecifications(
                required=[s for s in specifications if s.is_required],
                optional=[s for s in specifications if not s.is_required],
                all=specifications,
            )
        )

    async def save_product_specifications(
        self,
        product_id: str,
        specifications: list[ProductSpecificationCreate],
    ) -> ServiceResult[list[ProductSpecificationRead]]:
        """整体替换保存商品规格

        删除商品全部旧规格后写入新列表（空列表即清空），
        两步在同一事务单元内完成。
        """
        warnings: list[str] = []
        for spec in specifications:
            check = validate_specification_value(spec, spec.value)
            warnings.extend(check.errors)

        rows = [spec.model_dump(mode="json", exclude={"product_id"}) for spec in specifications]
        try:
            saved = await self.spec_repo.replace_for_product(product_id, rows)
        except SQLAlchemyError as e:
            logger.error("保存商品规格失败", product_id=product_id, count=len(rows), error=str(e))
            return ServiceResult.fail(str(e))

        if warnings:
            logger.warning("商品规格存在未通过校验的值", product_id=product_id, warnings=warnings)
        logger.info("保存商品规格", product_id=product_id, count=len(saved))
        return ServiceResult.ok(
            [ProductSpecificationRead.model_validate(s) for s in saved],
            warnings=warnings,
        )

    async def update_product_specification(
        self,
        specification_id: str,
        data: ProductSpecificationUpdate,
    ) -> ServiceResult[ProductSpecificationRead]:
        """更新单条商品规格"""
        values = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or key not in _NON_NULLABLE_FIELDS
        }
        try:
            specification = await self.spec_repo.get_by_id(specification_id)
            if specification is None:
                return ServiceResult.fail("Specification not found")
            specification = await self.spec_repo.update(specification, **values)
        except SQLAlchemyError as e:
            logger.error("更新商品规格失败", specification_id=specification_id, error=str(e))
            return ServiceResult.fail(str(e))

        logger.info("更新商品规格", specification_id=specification_id, fields=list(values))
        return ServiceResult.ok(ProductSpecificationRead.model_validate(specification))

    @staticmethod
    def validate_specification_value(template: TemplateLike, value: str | None) -> SpecificationValidationResult:
        """按模板校验单个值"""
        return validate_specification_value(template, value)

    async def validate_product_specifications(
        self,
        category_id: str,
        values: dict[str, str],
    ) -> ServiceResult[dict[str, SpecificationValidationResult]]:
        """按分类模板校验一组规格值（缺失的键按空值处理）"""
        try:
            templates = await self.template_repo.get_by_category(category_id)
        except SQLAlchemyError as e:
            logger.error("获取分类模板失败", category_id=category_id, error=str(e))
            return ServiceResult.fail(str(e))

        return ServiceResult.ok(
            {t.name: validate_specification_value(t, values.get(t.name, "")) for t in templates}
        )

    async def create_product_specifications_from_templates(
        self,
        product_id: str,
        category_id: str,
        values: dict[str, str] | None = None,
    ) -> ServiceResult[list[ProductSpecificationRead]]:
        """根据分类模板生成商品规格并整体保存"""
        values = values or {}
        try:
            templates = await self.template_repo.get_by_category(category_id)
        except SQLAlchemyError as e:
            logger.error("获取分类模板失败", category_id=category_id, error=str(e))
            return ServiceResult.fail(str(e))

        drafts = [
            ProductSpecificationCreate(
                product_id=product_id,
                template_id=t.id,
                name=t.name,
                display_name=t.display_name,
                value=values.get(t.name, ""),
                data_type=t.data_type,
                is_required=t.is_required,
                is_filter=t.is_filter,
                display_order=t.display_order,
                enum_values=t.enum_values,
                unit=t.unit,
            )
            for t in templates
        ]
        return await self.save_product_specifications(product_id, drafts)
