"""分类模型"""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from storefront.models.product import Product
    from storefront.models.specification import SpecificationTemplate


class Category(Base, TimestampMixin):
    """商品分类

    slug 决定应用哪一套预设规格模板。
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(100), nullable=True, unique=True, index=True)

    templates: Mapped[list["SpecificationTemplate"]] = relationship(
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    products: Mapped[list["Product"]] = relationship(back_populates="category", passive_deletes=True)
