"""Schema 定义"""

from storefront.schemas.catalog import (
    CategoryCreate,
    CategoryCreateResponse,
    CategoryRead,
    CategoryUpdate,
    CategoryUpdateResponse,
    ProductCreate,
    ProductRead,
    ProductWriteResponse,
)
from storefront.schemas.compatibility import (
    CompatibilityCheck,
    CompatibilityCheckRequest,
    CompatibilityReason,
    CompatibilitySeverity,
    CompatibleProductsRequest,
    ComponentRole,
)
from storefront.schemas.specification import (
    CategoryTemplateInfo,
    CategoryTemplatePreset,
    ComparisonEntry,
    CompareRequest,
    FilterDescriptor,
    FormattedValue,
    GroupedSpecifications,
    ProductComparison,
    ProductSpecificationCreate,
    ProductSpecificationRead,
    ProductSpecificationUpdate,
    RangeFilter,
    ServiceResult,
    SpecDataType,
    SpecificationSearchRequest,
    SpecificationValidationResult,
    SpecificationValuesRequest,
    SpecificationsFromTemplatesRequest,
    TemplateApplyResult,
    TemplateBase,
    TemplateCreate,
    TemplateInitializationResult,
    TemplatePresetEntry,
    TemplateRead,
    TemplateUpdate,
    TemplateUpdateResult,
    TemplateUsageStats,
    ValidateValueRequest,
)

__all__ = [
    "CategoryCreate",
    "CategoryCreateResponse",
    "CategoryRead",
    "CategoryTemplateInfo",
    "CategoryTemplatePreset",
    "CategoryUpdate",
    "CategoryUpdateResponse",
    "ComparisonEntry",
    "CompareRequest",
    "CompatibilityCheck",
    "CompatibilityCheckRequest",
    "CompatibilityReason",
    "CompatibilitySeverity",
    "CompatibleProductsRequest",
    "ComponentRole",
    "FilterDescriptor",
    "FormattedValue",
    "GroupedSpecifications",
    "ProductComparison",
    "ProductCreate",
    "ProductRead",
    "ProductWriteResponse",
    "ProductSpecificationCreate",
    "ProductSpecificationRead",
    "ProductSpecificationUpdate",
    "RangeFilter",
    "ServiceResult",
    "SpecDataType",
    "SpecificationSearchRequest",
    "SpecificationValidationResult",
    "SpecificationValuesRequest",
    "SpecificationsFromTemplatesRequest",
    "TemplateApplyResult",
    "TemplateBase",
    "TemplateCreate",
    "TemplateInitializationResult",
    "TemplatePresetEntry",
    "TemplateRead",
    "TemplateUpdate",
    "TemplateUpdateResult",
    "TemplateUsageStats",
    "ValidateValueRequest",
]
