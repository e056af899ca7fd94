"""规格与筛选服务"""

from storefront.services.specification.compatibility import CompatibilityService
from storefront.services.specification.engine import FilterEngine, format_specification_value
from storefront.services.specification.registry import TemplateRegistry
from storefront.services.specification.store import SpecificationStore
from storefront.services.specification.validation import validate_specification_value

__all__ = [
    "CompatibilityService",
    "FilterEngine",
    "SpecificationStore",
    "TemplateRegistry",
    "format_specification_value",
    "validate_specification_value",
]
