"""数据访问层"""

from storefront.repositories.base import BaseRepository
from storefront.repositories.category import CategoryRepository
from storefront.repositories.product import ProductRepository
from storefront.repositories.specification import (
    ProductSpecificationRepository,
    SpecificationTemplateRepository,
)

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "ProductRepository",
    "ProductSpecificationRepository",
    "SpecificationTemplateRepository",
]
