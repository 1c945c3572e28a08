"""
Enumerations for the materials catalog.

- MaterialCategory: Grouping used for catalog listings
- MaterialUnit: Unit in which a material's package size and recipe quantities are measured
"""

from enum import Enum


class MaterialCategory(str, Enum):
    """
    Material catalog category.

    Values:
        FLOUR: Flours and starches
        DAIRY: Milk, butter substitutes, cream, eggs
        SUGAR: Sugars and syrups
        FAT: Butter, oils, shortening
        OTHER: Anything else (yeast, salt, packaging)
    """

    FLOUR = "flour"
    DAIRY = "dairy"
    SUGAR = "sugar"
    FAT = "fat"
    OTHER = "other"


class MaterialUnit(str, Enum):
    """
    Measurement unit for a material.

    Recipe line quantities are expressed in the same unit as the material's
    package size; no conversion between units is performed.
    """

    GRAM = "gram"
    MILLILITER = "milliliter"
    PIECE = "piece"
