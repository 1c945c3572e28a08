"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .enums import MaterialCategory, MaterialUnit
from .material import Material
from .recipe import Recipe, RecipeMaterial
from .cost_settings import CostSettings

__all__ = [
    "Base",
    "BaseModel",
    # Enums
    "MaterialCategory",
    "MaterialUnit",
    # Catalog
    "Material",
    "Recipe",
    "RecipeMaterial",
    # Settings
    "CostSettings",
]
