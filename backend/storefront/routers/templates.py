"""规格模板 API 路由"""

from fastapi import APIRouter, Depends, Query

from storefront.core.dependencies import ServiceContainer, get_service_container
from storefront.core.errors import raise_not_found
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

router = APIRouter(prefix="/api/v1/templates", tags=["templates"])


async def _resolve_slug(services: ServiceContainer, category_id: str, slug: str | None) -> str:
    """未显式指定 slug 时使用分类当前 slug"""
    if slug:
        return slug
    category = await services.categories.get_category(category_id)
    if category is None:
        raise_not_found("category", category_id)
    return category.slug or ""


# ========== 预设 ==========


@router.get("/presets", response_model=list[str])
async def list_preset_categories(services: ServiceContainer = Depends(get_service_container)):
    """有预设模板的分类 slug"""
    return services.templates.get_available_template_categories()


@router.post("/initialize", response_model=TemplateInitializationResult)
async def initialize_all(services: ServiceContainer = Depends(get_service_container)):
    """为所有分类补齐预设模板"""
    return await services.templates.initialize_all_category_templates()


# ========== 分类模板 ==========


@router.get("/categories/{category_id}", response_model=ServiceResult[list[TemplateRead]])
async def list_category_templates(
    category_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """获取分类模板"""
    return await services.templates.get_templates_for_category(category_id)


@router.post("/categories/{category_id}", response_model=ServiceResult[list[TemplateRead]])
async def create_category_templates(
    category_id: str,
    templates: list[TemplateBase],
    services: ServiceContainer = Depends(get_service_container),
):
    """批量创建分类模板"""
    return await services.templates.create_templates_for_category(category_id, templates)


@router.post("/categories/{category_id}/apply", response_model=TemplateApplyResult)
async def apply_category_templates(
    category_id: str,
    slug: str | None = Query(None, description="预设 slug，默认使用分类 slug"),
    services: ServiceContainer = Depends(get_service_container),
):
    """应用预设模板（分类已有模板时不做修改）"""
    resolved = await _resolve_slug(services, category_id, slug)
    return await services.templates.apply_templates_for_category(category_id, resolved)


@router.post("/categories/{category_id}/reset", response_model=TemplateUpdateResult)
async def reset_category_templates(
    category_id: str,
    slug: str | None = Query(None, description="预设 slug，默认使用分类 slug"),
    services: ServiceContainer = Depends(get_service_container),
):
    """删除分类全部模板并重新应用预设"""
    resolved = await _resolve_slug(services, category_id, slug)
    return await services.templates.update_templates_for_category(category_id, resolved)


@router.get("/categories/{category_id}/info", response_model=CategoryTemplateInfo)
async def category_template_info(
    category_id: str,
    slug: str | None = Query(None, description="预设 slug，默认使用分类 slug"),
    services: ServiceContainer = Depends(get_service_container),
):
    """分类模板诊断信息"""
    resolved = await _resolve_slug(services, category_id, slug)
    return await services.templates.get_category_template_info(category_id, resolved)


# ========== 单个模板 ==========


@router.post("", response_model=ServiceResult[TemplateRead])
async def create_template(
    data: TemplateCreate,
    services: ServiceContainer = Depends(get_service_container),
):
    """创建模板"""
    return await services.templates.create_template(data)


@router.patch("/{template_id}", response_model=ServiceResult[TemplateRead])
async def update_template(
    template_id: str,
    data: TemplateUpdate,
    services: ServiceContainer = Depends(get_service_container),
):
    """更新模板"""
    return await services.templates.update_template(template_id, data)


@router.delete("/{template_id}", response_model=ServiceResult[None])
async def delete_template(
    template_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """删除模板（已有商品规格值保留）"""
    return await services.templates.delete_template(template_id)


@router.get("/{template_id}/usage", response_model=ServiceResult[TemplateUsageStats])
async def template_usage(
    template_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """模板使用统计"""
    return await services.templates.get_template_usage_stats(template_id)
