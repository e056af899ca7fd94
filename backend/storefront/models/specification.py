"""规格模型

- SpecificationTemplate: 分类级的规格定义（允许哪些属性、类型、是否可筛选）
- ProductSpecification: 商品级的规格值，值一律以文本存储

两者在值层面解耦：template_id 只是回溯引用，不建外键，
删除模板不会影响已有商品规格。
"""

from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from storefront.models.category import Category
    from storefront.models.product import Product


class SpecDataType(str, PyEnum):
    """规格数据类型"""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"


class SpecificationTemplate(Base, TimestampMixin):
    """分类规格模板"""

    __tablename__ = "category_spec_templates"
    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_category_spec_templates_name"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    category_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    data_type: Mapped[str] = mapped_column(String(20), nullable=False, default=SpecDataType.TEXT.value)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_filter: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    enum_values: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(20), nullable=True)
    placeholder: Mapped[str | None] = mapped_column(Text, nullable=True)
    help_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    category: Mapped["Category"] = relationship(back_populates="templates")

    def __repr__(self) -> str:
        return f"<SpecificationTemplate {self.name} ({self.data_type}) category={self.category_id}>"


class ProductSpecification(Base, TimestampMixin):
    """商品规格值"""

    __tablename__ = "product_specifications"
    __table_args__ = (UniqueConstraint("product_id", "name", name="uq_product_specifications_name"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # 来源模板（自定义规格为空），仅作展示分组用
    template_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    data_type: Mapped[str] = mapped_column(String(20), nullable=False, default=SpecDataType.TEXT.value)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_filter: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    enum_values: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(20), nullable=True)

    product: Mapped["Product"] = relationship(back_populates="specifications")

    def __repr__(self) -> str:
        return f"<ProductSpecification {self.name}={self.value!r} product={self.product_id}>"
