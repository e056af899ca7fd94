"""商品 API 路由"""

from fastapi import APIRouter, Depends, Query, status

from storefront.core.dependencies import ServiceContainer, get_service_container
from storefront.core.errors import raise_not_found
from storefront.schemas.catalog import ProductCreate, ProductRead, ProductWriteResponse

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("", response_model=list[ProductRead])
async def list_products(
    category_id: str = Query(..., description="分类 ID"),
    services: ServiceContainer = Depends(get_service_container),
):
    """获取分类下的商品"""
    products = await services.products.list_products(category_id)
    return [ProductRead.model_validate(p) for p in products]


@router.post("", response_model=ProductWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    services: ServiceContainer = Depends(get_service_container),
):
    """创建商品（指定分类时按模板生成规格）"""
    result = await services.products.create_product(data)
    if result is None:
        raise_not_found("category", data.category_id)
    product, specifications = result
    return ProductWriteResponse(product=ProductRead.model_validate(product), specifications=specifications)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """获取商品详情"""
    product = await services.products.get_product(product_id)
    if product is None:
        raise_not_found("product", product_id)
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    services: ServiceContainer = Depends(get_service_container),
):
    """删除商品（规格随之删除）"""
    if not await services.products.delete_product(product_id):
        raise_not_found("product", product_id)
