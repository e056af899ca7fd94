"""商品规格 API 路由"""

from fastapi import APIRouter, Depends

from storefront.core.dependencies import ServiceContainer, get_service_container
from storefront.schemas.specification import (
    GroupedSpecifications,
    ProductSpecificationCreate,
    ProductSpecificationRead,
    ProductSpecificationUpdate,
    ServiceResult,
    SpecificationsFromTemplatesRequest,
    SpecificationValidationResult,
    SpecificationValuesRequest,
    ValidateValueRequest,
)

router = APIRouter(prefix="/api/v1/specifications", tags=["specifications"])


@router.get("/products/{product_id}", response_model=ServiceResult[list[ProductSpecificationRead]])
async def get_product_specifications(
    product_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """获取商品规格"""
    return await services.specifications.get_product_specifications(product_id)


@router.get("/products/{product_id}/grouped", response_model=ServiceResult[GroupedSpecifications])
async def get_grouped_specifications(
    product_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """获取按必填分组的商品规格"""
    return await services.specifications.get_grouped_product_specifications(product_id)


@router.put("/products/{product_id}", response_model=ServiceResult[list[ProductSpecificationRead]])
async def save_product_specifications(
    product_id: str,
    specifications: list[ProductSpecificationCreate],
    services: ServiceContainer = Depends(get_service_container),
):
    """整体替换商品规格"""
    return await services.specifications.save_product_specifications(product_id, specifications)


@router.post(
    "/products/{product_id}/from-templates",
    response_model=ServiceResult[list[ProductSpecificationRead]],
)
async def create_from_templates(
    product_id: str,
    data: SpecificationsFromTemplatesRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """按分类模板生成商品规格"""
    return await services.specifications.create_product_specifications_from_templates(
        product_id, data.category_id, data.values
    )


@router.patch("/{specification_id}", response_model=ServiceResult[ProductSpecificationRead])
async def update_specification(
    specification_id: str,
    data: ProductSpecificationUpdate,
    services: ServiceContainer = Depends(get_service_container),
):
    """更新单条商品规格"""
    return await services.specifications.update_product_specification(specification_id, data)


@router.post("/validate", response_model=SpecificationValidationResult)
async def validate_value(
    data: ValidateValueRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """按模板校验单个值"""
    return services.specifications.validate_specification_value(data.template, data.value)


@router.post(
    "/categories/{category_id}/validate",
    response_model=ServiceResult[dict[str, SpecificationValidationResult]],
)
async def validate_values(
    category_id: str,
    data: SpecificationValuesRequest,
    services: ServiceContainer = Depends(get_service_container),
):
    """按分类模板校验一组规格值"""
    return await services.specifications.validate_product_specifications(category_id, data.values)
