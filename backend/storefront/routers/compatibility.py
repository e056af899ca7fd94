"""装机兼容性 API 路由"""

from fastapi import APIRouter, Depends

from storefront.core.dependencies import ServiceContainer, get_service_container
from storefront.schemas.compatibility import (
    CompatibilityCheck,
    CompatibilityCheckRequest,
    CompatibleProductsRequest,
)
from storefront.schemas.specification import ServiceResult

router = APIRouter(prefix="/api/v1/compatibility", tags=["compatibility"])


@router.post("/check", response_model=ServiceResult[CompatibilityCheck])
async def check_compatibility(
    data: CompatibilityCheckRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """检查候选商品与当前配置的兼容性"""
    return await services.compatibility.check_compatibility(data.build, data.candidate_id)


@router.post("/categories/{category_id}", response_model=ServiceResult[list[str]])
async def compatible_products(
    category_id: str,
    data: CompatibleProductsRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """按当前配置筛选分类内可选商品"""
    return await services.compatibility.filter_compatible_products(category_id, data.build)
