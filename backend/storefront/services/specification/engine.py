"""筛选与对比

- 根据分类模板生成筛选项（数值筛选附带当前商品的取值范围）
- 按规格筛选分类内商品（全量加载后在内存中匹配）
- 多商品规格对比
"""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.core.logging import get_logger
from storefront.models.product import Product
from storefront.models.specification import ProductSpecification, SpecDataType
from storefront.repositories.product import ProductRepository
from storefront.repositories.specification import (
    ProductSpecificationRepository,
    SpecificationTemplateRepository,
)
from storefront.schemas.specification import (
    ComparisonEntry,
    FilterDescriptor,
    ProductComparison,
    RangeFilter,
    ServiceResult,
)
from storefront.services.specification.values import (
    coerce_stored_value,
    format_number,
    matches_filter,
    parse_number,
)

logger = get_logger("specification.engine")


def format_specification_value(value: str | None, data_type: str, unit: str | None = None) -> str:
    """规格值展示文本"""
    if not value:
        return settings.SPEC_NOT_SPECIFIED_LABEL

    if data_type == SpecDataType.BOOLEAN.value:
        return settings.SPEC_YES_LABEL if value.strip().lower() in ("true", "1") else settings.SPEC_NO_LABEL

    if data_type == SpecDataType.NUMBER.value:
        number = parse_number(value)
        if number is None:
            return value
        text = format_number(number)
        return f"{text} {unit}" if unit else text

    return value


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _in_range(spec: ProductSpecification, bounds: RangeFilter) -> bool:
    number = parse_number(spec.value)
    if number is None:
        return False
    if bounds.min is not None and number < bounds.min:
        return False
    if bounds.max is not None and number > bounds.max:
        return False
    return True


def _product_matches(product: Product, filters: dict[str, Any]) -> bool:
    by_name = {s.name: s for s in product.specifications}
    for name, expected in filters.items():
        spec = by_name.get(name)
        if spec is None:
            return False
        if isinstance(expected, RangeFilter):
            if not _in_range(spec, expected):
                return False
        elif not matches_filter(coerce_stored_value(spec.value, spec.data_type), expected):
            return False
    return True


def _normalize_filters(filters: dict[str, Any]) -> dict[str, Any]:
    """去掉空值条件；字典形式的 {min, max} 转为区间条件"""
    active: dict[str, Any] = {}
    for name, value in filters.items():
        if isinstance(value, dict):
            value = RangeFilter.model_validate(value)
        if isinstance(value, RangeFilter) and value.min is None and value.max is None:
            continue
        if _is_blank(value):
            continue
        active[name] = value
    return active


class FilterEngine:
    """规格筛选与对比服务"""

    def __init__(
        self,
        session: AsyncSession,
        template_repo: SpecificationTemplateRepository | None = None,
        product_repo: ProductRepository | None = None,
        spec_repo: ProductSpecificationRepository | None = None,
    ):
        self.session = session
        self.template_repo = template_repo or SpecificationTemplateRepository(session)
        self.product_repo = product_repo or ProductRepository(session)
        self.spec_repo = spec_repo or ProductSpecificationRepository(session)

    async def get_filters_for_category(self, category_id: str) -> ServiceResult[list[FilterDescriptor]]:
        """获取分类筛选项"""
        try:
            templates = [t for t in await self.template_repo.get_by_category(category_id) if t.is_filter]
            numeric = {t.name for t in templates if t.data_type == SpecDataType.NUMBER.value}
            bounds = await self._numeric_bounds(category_id, numeric) if numeric else {}
        except SQLAlchemyError as e:
            logger.error("获取筛选项失败", category_id=category_id, error=str(e))
            return ServiceResult.fail(str(e))

        filters = []
        for t in templates:
            low, high = bounds.get(t.name, (None, None))
            filters.append(
                FilterDescriptor(
                    name=t.name,
                    display_name=t.display_name,
                    data_type=t.data_type,
                    values=t.enum_values,
                    unit=t.unit,
                    min_value=low,
                    max_value=high,
                )
            )
        return ServiceResult.ok(filters)

    async def _numeric_bounds(self, category_id: str, names: set[str]) -> dict[str, tuple[float, float]]:
        values: dict[str, list[float]] = {}
        for product in await self.product_repo.get_by_category_with_specifications(category_id):
            for spec in product.specifications:
                if spec.name not in names:
                    continue
                number = parse_number(spec.value)
                if number is not None:
                    values.setdefault(spec.name, []).append(number)
        return {name: (min(numbers), max(numbers)) for name, numbers in values.items()}

    async def search_products_by_specifications(
        self,
        category_id: str,
        filters: dict[str, Any],
    ) -> ServiceResult[list[str]]:
        """按规格筛选分类内商品，返回商品 ID 列表

        每个条件都要求商品存在同名规格，且按该规格自身的类型转换后严格相等；
        区间条件按闭区间比较。空值条件忽略。
        """
        active = _normalize_filters(filters)
        try:
            products = await self.product_repo.get_by_category_with_specifications(category_id)
        except SQLAlchemyError as e:
            logger.error("规格筛选失败", category_id=category_id, error=str(e))
            return ServiceResult.fail(str(e))

        matched = [p.id for p in products if _product_matches(p, active)]
        logger.debug(
            "规格筛选",
            category_id=category_id,
            filters=list(active),
            scanned=len(products),
            matched=len(matched),
        )
        return ServiceResult.ok(matched)

    async def compare_products(self, product_ids: list[str]) -> ServiceResult[ProductComparison]:
        """对比多个商品的规格

        按规格名关联；缺失的值以占位文案填充，所有值不完全相同的规格记入 differences。
        """
        placeholder = settings.SPEC_NOT_SPECIFIED_LABEL
        specs_by_product: dict[str, dict[str, ProductSpecification]] = {}
        try:
            for product_id in product_ids:
                specs = await self.spec_repo.get_by_product(product_id)
                specs_by_product[product_id] = {s.name: s for s in specs}
        except SQLAlchemyError as e:
            logger.error("商品对比失败", product_ids=product_ids, error=str(e))
            return ServiceResult.fail(str(e))

        # 规格名按首次出现顺序，展示信息取首个拥有该规格的商品
        first_seen: dict[str, ProductSpecification] = {}
        for specs in specs_by_product.values():
            for name, spec in specs.items():
                first_seen.setdefault(name, spec)

        comparison = ProductComparison()
        for name, meta in first_seen.items():
            values = {
                product_id: specs[name].value if name in specs else placeholder
                for product_id, specs in specs_by_product.items()
            }
            comparison.specifications[name] = ComparisonEntry(
                display_name=meta.display_name,
                values=values,
                data_type=meta.data_type,
                unit=meta.unit,
            )
            if len(set(values.values())) > 1:
                comparison.differences.append(meta.display_name)

        return ServiceResult.ok(comparison)

    @staticmethod
    def format_specification_value(value: str | None, data_type: str, unit: str | None = None) -> str:
        return format_specification_value(value, data_type, unit)
