"""
Material model for purchasable raw ingredients.

A material is priced per package: ``unit_price`` buys ``package_size`` units
(grams, milliliters or pieces). Recipes reference materials by id.
"""

from sqlalchemy import Column, String, Float, Index, CheckConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import MaterialCategory, MaterialUnit


def _in_list(column: str, enum_cls) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


class Material(BaseModel):
    """
    Material model representing a purchasable ingredient.

    Attributes:
        name: Display name (e.g., "Bread Flour")
        category: One of MaterialCategory values
        unit: One of MaterialUnit values
        unit_price: Price paid for one package
        package_size: Quantity contained in one package (> 0)

    Relationships:
        recipe_lines: One-to-Many with RecipeMaterial (deletion is refused while non-empty)
    """

    __tablename__ = "materials"

    name = Column(String(200), nullable=False)
    category = Column(String(20), nullable=False)
    unit = Column(String(20), nullable=False)
    unit_price = Column(Float, nullable=False)
    package_size = Column(Float, nullable=False)

    recipe_lines = relationship(
        "RecipeMaterial",
        back_populates="material",
        lazy="select",
        passive_deletes="all",
    )

    __table_args__ = (
        Index("idx_material_name", "name"),
        Index("idx_material_category", "category"),
        CheckConstraint(
            _in_list("category", MaterialCategory),
            name="ck_material_category",
        ),
        CheckConstraint(
            _in_list("unit", MaterialUnit),
            name="ck_material_unit",
        ),
        CheckConstraint("unit_price >= 0", name="ck_material_unit_price_non_negative"),
        CheckConstraint("package_size > 0", name="ck_material_package_size_positive"),
    )

    def __repr__(self) -> str:
        """String representation of material."""
        return f"Material(id={self.id}, name='{self.name}', unit='{self.unit}')"

    @property
    def price_per_unit(self) -> float:
        """Price of a single gram/milliliter/piece."""
        return self.unit_price / self.package_size
