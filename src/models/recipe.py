"""
Recipe models for bakery products.

This module contains:
- Recipe: A product definition (yield, labor time, notes)
- RecipeMaterial: Junction table linking recipes to materials with quantities
"""

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Text,
    ForeignKey,
    Index,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Recipe(BaseModel):
    """
    Recipe model representing one batch of a bakery product.

    Attributes:
        product_name: Product name (required)
        yield_count: Number of finished units one batch produces (> 0)
        labor_time_minutes: Hands-on labor for one batch (>= 0)
        notes: Additional notes

    Relationships:
        lines: Ordered RecipeMaterial rows (cascade delete)
    """

    __tablename__ = "recipes"

    product_name = Column(String(200), nullable=False, index=True)
    yield_count = Column(Integer, nullable=False)
    labor_time_minutes = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)

    lines = relationship(
        "RecipeMaterial",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeMaterial.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_recipe_product_name", "product_name"),
        CheckConstraint("yield_count > 0", name="ck_recipe_yield_positive"),
        CheckConstraint("labor_time_minutes >= 0", name="ck_recipe_labor_time_non_negative"),
    )

    def __repr__(self) -> str:
        """String representation of recipe."""
        return f"Recipe(id={self.id}, product_name='{self.product_name}')"


class RecipeMaterial(BaseModel):
    """
    Junction table linking recipes to materials with quantities.

    Attributes:
        recipe_id: Foreign key to Recipe (cascade delete)
        material_id: Foreign key to Material (restrict delete)
        quantity: Amount needed, in the material's unit
        position: Display/calculation order within the recipe
    """

    __tablename__ = "recipe_materials"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    material_id = Column(
        Integer, ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False
    )

    quantity = Column(Float, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="lines")
    material = relationship("Material", back_populates="recipe_lines", lazy="joined")

    __table_args__ = (
        Index("idx_recipe_material_recipe", "recipe_id"),
        Index("idx_recipe_material_material", "material_id"),
        UniqueConstraint("recipe_id", "material_id", name="uq_recipe_material"),
        CheckConstraint("quantity >= 0", name="ck_recipe_material_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        """String representation of recipe line."""
        return (
            f"RecipeMaterial(recipe_id={self.recipe_id}, "
            f"material_id={self.material_id}, quantity={self.quantity})"
        )
