"""规格相关 Schema 定义"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

from storefront.models.specification import SpecDataType

DataT = TypeVar("DataT")


# ========== 统一结果信封 ==========


class ServiceResult(BaseModel, Generic[DataT]):
    """服务层统一返回结构

    服务方法不向调用方抛出存储异常，调用方根据 success 分支处理。
    warnings 用于提示性信息（例如保存了未通过校验的规格值）。
    """

    success: bool
    data: DataT | None = None
    errors: list[str] | None = None
    warnings: list[str] | None = None
    message: str | None = None

    @classmethod
    def ok(
        cls,
        data: Any = None,
        *,
        warnings: list[str] | None = None,
        message: str | None = None,
    ) -> "ServiceResult":
        return cls(success=True, data=data, warnings=warnings or None, message=message)

    @classmethod
    def fail(cls, *errors: str) -> "ServiceResult":
        return cls(success=False, errors=list(errors) or ["Unknown error"])


# ========== 模板 ==========


class TemplateBase(BaseModel):
    """模板基础字段"""

    name: str = Field(..., min_length=1, max_length=100, description="机器键名")
    display_name: str = Field(..., min_length=1, max_length=200, description="展示名称")
    data_type: SpecDataType = Field(default=SpecDataType.TEXT, description="数据类型")
    is_required: bool = Field(default=False, description="是否必填")
    is_filter: bool = Field(default=True, description="是否作为筛选项")
    display_order: int = Field(default=0, description="排序")
    enum_values: list[str] | None = Field(default=None, description="枚举可选值")
    unit: str | None = Field(default=None, max_length=20, description="单位")
    placeholder: str | None = None
    help_text: str | None = None


class TemplateDefinition(TemplateBase):
    """可写入的模板定义（枚举类型必须提供可选值）"""

    @model_validator(mode="after")
    def _enum_values_required(self) -> "TemplateDefinition":
        if self.data_type == SpecDataType.ENUM and not self.enum_values:
            raise ValueError("enum_values must be non-empty when data_type is enum")
        return self


class TemplatePresetEntry(TemplateDefinition):
    """预设模板条目（不含分类）"""


class TemplateCreate(TemplateBase):
    """创建模板请求（枚举约束由服务层校验并以失败结果返回）"""

    category_id: str = Field(..., min_length=1)


class TemplateUpdate(BaseModel):
    """更新模板请求（name 为机器键，不允许修改）"""

    display_name: str | None = Field(None, min_length=1, max_length=200)
    data_type: SpecDataType | None = None
    is_required: bool | None = None
    is_filter: bool | None = None
    display_order: int | None = None
    enum_values: list[str] | None = None
    unit: str | None = Field(None, max_length=20)
    placeholder: str | None = None
    help_text: str | None = None


class TemplateRead(TemplateBase):
    """模板读取响应"""

    id: str
    category_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryTemplatePreset(BaseModel):
    """分类预设模板"""

    category_name: str
    category_slug: str
    templates: list[TemplatePresetEntry]


# ========== 模板注册表结果 ==========


class TemplateApplyResult(BaseModel):
    """应用预设模板结果"""

    success: bool
    templates_applied: int = 0
    errors: list[str] | None = None


class TemplateUpdateResult(BaseModel):
    """分类 slug 变更后重建模板结果"""

    success: bool
    templates_updated: int = 0
    errors: list[str] | None = None


class CategoryTemplateInfo(BaseModel):
    """分类模板诊断信息"""

    has_hardcoded_templates: bool = False
    hardcoded_templates_count: int = 0
    applied_templates_count: int = 0
    needs_template_application: bool = False


class TemplateInitializationResult(BaseModel):
    """全量初始化结果"""

    success: bool
    processed_categories: int = 0
    applied_templates: int = 0
    errors: list[str] | None = None


class TemplateUsageStats(BaseModel):
    """模板使用统计"""

    total_products: int = 0
    unique_values: int = 0
    most_common_value: str | None = None
    last_used: datetime | None = None


# ========== 商品规格 ==========


class ProductSpecificationBase(BaseModel):
    """商品规格基础字段"""

    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=200)
    value: str = Field(default="", description="规格值（文本存储）")
    data_type: SpecDataType = SpecDataType.TEXT
    is_required: bool = False
    is_filter: bool = True
    display_order: int = 0
    enum_values: list[str] | None = None
    unit: str | None = Field(default=None, max_length=20)
    template_id: str | None = Field(default=None, description="来源模板 ID，自定义规格为空")


class ProductSpecificationCreate(ProductSpecificationBase):
    """创建商品规格（product_id 以保存接口参数为准）"""

    product_id: str | None = None


class ProductSpecificationUpdate(BaseModel):
    """更新商品规格"""

    display_name: str | None = Field(None, min_length=1, max_length=200)
    value: str | None = None
    data_type: SpecDataType | None = None
    is_required: bool | None = None
    is_filter: bool | None = None
    display_order: int | None = None
    enum_values: list[str] | None = None
    unit: str | None = Field(None, max_length=20)


class ProductSpecificationRead(ProductSpecificationBase):
    """商品规格读取响应"""

    id: str
    product_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GroupedSpecifications(BaseModel):
    """按必填分组的商品规格"""

    required: list[ProductSpecificationRead]
    optional: list[ProductSpecificationRead]
    all: list[ProductSpecificationRead]


class SpecificationValidationResult(BaseModel):
    """规格值校验结果"""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    normalized_value: bool | float | str | None = None


class SpecificationValuesRequest(BaseModel):
    """按模板名提交的规格值"""

    values: dict[str, str] = Field(default_factory=dict)


class ValidateValueRequest(BaseModel):
    """单值校验请求"""

    template: TemplateBase
    value: str = ""


# ========== 筛选与对比 ==========


class FilterDescriptor(BaseModel):
    """筛选项描述（供前端渲染控件）"""

    name: str
    display_name: str
    data_type: SpecDataType
    values: list[str] | None = None
    unit: str | None = None
    min_value: float | None = None
    max_value: float | None = None


class RangeFilter(BaseModel):
    """数值区间筛选（闭区间，缺省端不限制）"""

    min: float | None = None
    max: float | None = None


FilterValue = bool | float | str | RangeFilter


class SpecificationSearchRequest(BaseModel):
    """规格筛选请求"""

    filters: dict[str, FilterValue | None] = Field(default_factory=dict)


class CompareRequest(BaseModel):
    """商品对比请求"""

    product_ids: list[str] = Field(default_factory=list)


class ComparisonEntry(BaseModel):
    """单个规格的对比数据"""

    display_name: str
    values: dict[str, str]
    data_type: SpecDataType
    unit: str | None = None


class ProductComparison(BaseModel):
    """商品对比结果"""

    specifications: dict[str, ComparisonEntry] = Field(default_factory=dict)
    differences: list[str] = Field(default_factory=list)


class SpecificationsFromTemplatesRequest(BaseModel):
    """按分类模板生成商品规格请求"""

    category_id: str = Field(..., min_length=1)
    values: dict[str, str] = Field(default_factory=dict)


class FormattedValue(BaseModel):
    """规格值展示文本"""

    value: str
    formatted: str
