"""分类与商品 Schema（规格子系统的协作方）"""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.schemas.specification import (
    ProductSpecificationRead,
    ServiceResult,
    TemplateApplyResult,
    TemplateUpdateResult,
)


class CategoryCreate(BaseModel):
    """创建分类请求"""

    name: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=100)


class CategoryUpdate(BaseModel):
    """更新分类请求"""

    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=100)


class CategoryRead(BaseModel):
    """分类读取响应"""

    id: str
    name: str
    slug: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryCreateResponse(BaseModel):
    """分类创建响应，附带预设模板应用结果"""

    category: CategoryRead
    templates: TemplateApplyResult | None = None


class CategoryUpdateResponse(BaseModel):
    """分类更新响应，slug 变更时附带模板重建结果"""

    category: CategoryRead
    templates: TemplateUpdateResult | None = None


class ProductCreate(BaseModel):
    """创建商品请求

    specifications 为按模板名填写的规格值，会按分类当前模板生成规格。
    """

    name: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200)
    price: float | None = Field(None, ge=0)
    category_id: str | None = None
    specifications: dict[str, str] | None = None


class ProductRead(BaseModel):
    """商品读取响应"""

    id: str
    name: str
    slug: str | None
    price: float | None
    category_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProductWriteResponse(BaseModel):
    """商品创建响应，附带规格生成结果"""

    product: ProductRead
    specifications: ServiceResult[list[ProductSpecificationRead]] | None = None
