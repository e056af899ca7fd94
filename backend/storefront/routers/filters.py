"""筛选与对比 API 路由"""

from fastapi import APIRouter, Depends, Query

from storefront.core.dependencies import ServiceContainer, get_service_container
from storefront.models.specification import SpecDataType
from storefront.schemas.specification import (
    CompareRequest,
    FilterDescriptor,
    FormattedValue,
    ProductComparison,
    ServiceResult,
    SpecificationSearchRequest,
)
from storefront.services.specification import format_specification_value

router = APIRouter(prefix="/api/v1/filters", tags=["filters"])


@router.get("/categories/{category_id}", response_model=ServiceResult[list[FilterDescriptor]])
async def get_filters(
    category_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """获取分类筛选项"""
    return await services.filters.get_filters_for_category(category_id)


@router.post("/categories/{category_id}/search", response_model=ServiceResult[list[str]])
async def search_products(
    category_id: str,
    data: SpecificationSearchRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """按规格筛选商品，返回商品 ID"""
    return await services.filters.search_products_by_specifications(category_id, data.filters)


@router.post("/compare", response_model=ServiceResult[ProductComparison])
async def compare_products(
    data: CompareRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """商品规格对比"""
    return await services.filters.compare_products(data.product_ids)


@router.get("/format", response_model=FormattedValue)
async def format_value(
    value: str = "",
    data_type: SpecDataType = SpecDataType.TEXT,
    unit: str | None = Query(None),
):
    """规格值展示文本"""
    return FormattedValue(value=value, formatted=format_specification_value(value, data_type.value, unit))
