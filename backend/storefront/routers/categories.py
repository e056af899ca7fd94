"""分类 API 路由"""

from fastapi import APIRouter, Depends, status

from storefront.core.dependencies import ServiceContainer, get_service_container
from storefront.core.errors import raise_conflict, raise_not_found
from storefront.schemas.catalog import (
    CategoryCreate,
    CategoryCreateResponse,
    CategoryRead,
    CategoryUpdate,
    CategoryUpdateResponse,
)

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryRead])
async def list_categories(services: ServiceContainer = Depends(get_service_container)):
    """获取分类列表"""
    categories = await services.categories.list_categories()
    return [CategoryRead.model_validate(c) for c in categories]


@router.post("", response_model=CategoryCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    services: ServiceContainer = Depends(get_service_container),
):
    """创建分类（有预设时自动应用规格模板）"""
    try:
        category, templates = await services.categories.create_category(data)
    except ValueError as e:
        raise_conflict("category_slug_conflict", str(e), {"slug": data.slug})
    return CategoryCreateResponse(category=CategoryRead.model_validate(category), templates=templates)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """获取分类详情"""
    category = await services.categories.get_category(category_id)
    if category is None:
        raise_not_found("category", category_id)
    return CategoryRead.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryUpdateResponse)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    services: ServiceContainer = Depends(get_service_container),
):
    """更新分类（slug 变更会按新 slug 重建规格模板）"""
    try:
        result = await services.categories.update_category(category_id, data)
    except ValueError as e:
        raise_conflict("category_slug_conflict", str(e), {"slug": data.slug})
    if result is None:
        raise_not_found("category", category_id)
    category, templates = result
    return CategoryUpdateResponse(category=CategoryRead.model_validate(category), templates=templates)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """删除分类"""
    if not await services.categories.delete_category(category_id):
        raise_not_found("category", category_id)
