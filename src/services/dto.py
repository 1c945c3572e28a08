"""Data Transfer Objects for the costing layer.

Two groups of immutable dataclasses live here:

- Input snapshots (MaterialSnapshot, RecipeLine, RecipeSnapshot,
  CostSettingsSnapshot) copied out of ORM rows, so the cost engine never
  touches a session and can run after the session is closed.
- Results (MaterialCostLine, CostBreakdown, ReportSummary, CostReport)
  returned by the engine and the report aggregator.

Field names are snake_case in Python. ``to_dict()`` produces the camelCase
shape used by the CLI's JSON output; the row adapters at the bottom do the
same for catalog records. Nothing else in the code base knows about camelCase.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from src.services.dto_utils import to_decimal, decimal_to_json
from src.utils.datetime_utils import to_iso


# ============================================================================
# Engine inputs
# ============================================================================


@dataclass(frozen=True)
class MaterialSnapshot:
    """Price data of one material, as the engine sees it.

    Attributes:
        id: Material ID
        name: Display name
        unit: Measurement unit of package_size and recipe quantities
        unit_price: Price of one package
        package_size: Quantity in one package (> 0)
        category: Catalog category
    """

    id: int
    name: str
    unit: str
    unit_price: Decimal
    package_size: Decimal
    category: str = "other"

    @classmethod
    def from_model(cls, material) -> "MaterialSnapshot":
        """Build a snapshot from a Material row."""
        return cls(
            id=material.id,
            name=material.name,
            unit=material.unit,
            unit_price=to_decimal(material.unit_price),
            package_size=to_decimal(material.package_size),
            category=material.category,
        )


@dataclass(frozen=True)
class RecipeLine:
    """One (material, quantity) edge of a recipe."""

    material_id: int
    quantity: Decimal

    @classmethod
    def from_model(cls, line) -> "RecipeLine":
        """Build a line from a RecipeMaterial row."""
        return cls(material_id=line.material_id, quantity=to_decimal(line.quantity))


@dataclass(frozen=True)
class RecipeSnapshot:
    """Recipe header plus its ordered material lines."""

    id: int
    product_name: str
    yield_count: int
    labor_time_minutes: int
    lines: Tuple[RecipeLine, ...] = ()

    @classmethod
    def from_model(cls, recipe) -> "RecipeSnapshot":
        """Build a snapshot from a Recipe row (lines must be loaded)."""
        return cls(
            id=recipe.id,
            product_name=recipe.product_name,
            yield_count=recipe.yield_count,
            labor_time_minutes=recipe.labor_time_minutes,
            lines=tuple(RecipeLine.from_model(line) for line in recipe.lines),
        )

    @property
    def material_ids(self) -> set:
        """Ids of every material the recipe references."""
        return {line.material_id for line in self.lines}


@dataclass(frozen=True)
class CostSettingsSnapshot:
    """Immutable copy of the cost settings passed into each engine call."""

    labor_cost_per_hour: Decimal
    overhead_cost_per_unit: Decimal
    target_profit_margin: Decimal

    @classmethod
    def from_model(cls, settings) -> "CostSettingsSnapshot":
        """Build a snapshot from the CostSettings row."""
        return cls(
            labor_cost_per_hour=to_decimal(settings.labor_cost_per_hour),
            overhead_cost_per_unit=to_decimal(settings.overhead_cost_per_unit),
            target_profit_margin=to_decimal(settings.target_profit_margin),
        )


# ============================================================================
# Engine results
# ============================================================================


@dataclass(frozen=True)
class MaterialCostLine:
    """Cost of one recipe line, rounded to 2 places."""

    material_id: int
    material_name: str
    quantity: Decimal
    unit: str
    cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase output shape."""
        return {
            "materialId": self.material_id,
            "materialName": self.material_name,
            "quantity": float(self.quantity),
            "unit": self.unit,
            "cost": decimal_to_json(self.cost),
        }


@dataclass(frozen=True)
class CostComponents:
    """Unrounded cost figures for one recipe.

    Produced by ``cost_engine.compute_components``; ``compute_breakdown``
    rounds these once to build the presented CostBreakdown.
    """

    material_cost: Decimal
    labor_cost: Decimal
    overhead_cost: Decimal
    total_cost: Decimal
    unit_cost: Decimal
    suggested_price: Decimal
    line_costs: Tuple[Decimal, ...] = ()


@dataclass(frozen=True)
class CostBreakdown:
    """Full cost decomposition of one recipe.

    Currency fields are rounded to 2 places; suggested_price to a whole unit.
    profit_margin is the configured target margin, not a margin derived from
    suggested_price.
    """

    recipe_id: int
    recipe_name: str
    yield_count: int
    material_cost: Decimal
    labor_cost: Decimal
    overhead_cost: Decimal
    total_cost: Decimal
    unit_cost: Decimal
    suggested_price: Decimal
    profit_margin: Decimal
    material_lines: Tuple[MaterialCostLine, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase output shape."""
        return {
            "recipeId": self.recipe_id,
            "recipeName": self.recipe_name,
            "yield": self.yield_count,
            "materialCost": decimal_to_json(self.material_cost),
            "laborCost": decimal_to_json(self.labor_cost),
            "overheadCost": decimal_to_json(self.overhead_cost),
            "totalCost": decimal_to_json(self.total_cost),
            "unitCost": decimal_to_json(self.unit_cost),
            "suggestedPrice": decimal_to_json(self.suggested_price),
            "profitMargin": decimal_to_json(self.profit_margin),
            "materialLines": [line.to_dict() for line in self.material_lines],
        }


@dataclass(frozen=True)
class ReportSummary:
    """Summary statistics over a set of breakdowns."""

    count: int
    average_unit_cost: Decimal
    average_profit_margin: Decimal
    highest: Optional[CostBreakdown] = None
    lowest: Optional[CostBreakdown] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase output shape."""
        return {
            "count": self.count,
            "averageUnitCost": decimal_to_json(self.average_unit_cost),
            "averageProfitMargin": decimal_to_json(self.average_profit_margin),
            "highest": self.highest.to_dict() if self.highest else None,
            "lowest": self.lowest.to_dict() if self.lowest else None,
        }


@dataclass(frozen=True)
class CostReport:
    """Per-recipe breakdowns plus their summary."""

    per_recipe: Tuple[CostBreakdown, ...]
    summary: ReportSummary

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase output shape."""
        return {
            "perRecipe": [breakdown.to_dict() for breakdown in self.per_recipe],
            "summary": self.summary.to_dict(),
        }


# ============================================================================
# Row adapters (ORM -> output shape)
# ============================================================================


def material_to_dict(material) -> Dict[str, Any]:
    """Convert a Material row to the camelCase output shape."""
    return {
        "id": material.id,
        "name": material.name,
        "category": material.category,
        "unit": material.unit,
        "unitPrice": material.unit_price,
        "packageSize": material.package_size,
        "createdAt": to_iso(material.created_at),
        "updatedAt": to_iso(material.updated_at),
    }


def recipe_to_dict(recipe) -> Dict[str, Any]:
    """Convert a Recipe row (with lines loaded) to the camelCase output shape."""
    materials: List[Dict[str, Any]] = []
    for line in recipe.lines:
        materials.append(
            {
                "materialId": line.material_id,
                "quantity": line.quantity,
                "material": material_to_dict(line.material) if line.material else None,
            }
        )

    result = {
        "id": recipe.id,
        "productName": recipe.product_name,
        "yield": recipe.yield_count,
        "laborTimeMinutes": recipe.labor_time_minutes,
        "materials": materials,
        "createdAt": to_iso(recipe.created_at),
        "updatedAt": to_iso(recipe.updated_at),
    }
    if recipe.notes:
        result["notes"] = recipe.notes
    return result


def settings_to_dict(settings) -> Dict[str, Any]:
    """Convert the CostSettings row to the camelCase output shape."""
    return {
        "laborCostPerHour": settings.labor_cost_per_hour,
        "overheadCostPerUnit": settings.overhead_cost_per_unit,
        "targetProfitMargin": settings.target_profit_margin,
    }
