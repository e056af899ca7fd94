"""数据模型"""

from storefront.models.base import Base
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.specification import (
    ProductSpecification,
    SpecDataType,
    SpecificationTemplate,
)

__all__ = [
    "Base",
    "Category",
    "Product",
    "ProductSpecification",
    "SpecDataType",
    "SpecificationTemplate",
]
