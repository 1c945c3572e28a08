"""
Cost Calculation Engine - per-recipe cost breakdown and suggested price.

Given one recipe, the materials it references and the cost settings, this
module computes:

    line cost      = unit_price / package_size * quantity   (per recipe line)
    material cost  = sum of line costs
    labor cost     = labor_cost_per_hour * labor_time_minutes / 60
    overhead cost  = overhead_cost_per_unit * yield
    total cost     = material + labor + overhead
    unit cost      = total / yield
    suggested price = unit cost / (1 - target_profit_margin / 100)

Pricing is linear in quantity (no package rounding or bulk discounts).

Rounding policy:
    Arithmetic runs on Decimal at full context precision. Each presented
    figure is rounded exactly once, at the end: currency to 2 places and the
    suggested price to a whole unit, ROUND_HALF_UP. Because the total is
    rounded from the exact sum, it can differ from the sum of the rounded
    components by at most 0.01.

All functions are pure: they take immutable snapshots (see ``dto``), touch no
database session and keep no state, so they are safe to call concurrently.

Usage:
    from src.services.cost_engine import compute_breakdown

    breakdown = compute_breakdown(recipe, {m.id: m for m in materials}, settings)
    print(breakdown.suggested_price)
"""

from decimal import Decimal
from typing import List, Mapping, Tuple

from src.services.dto import (
    CostBreakdown,
    CostComponents,
    CostSettingsSnapshot,
    MaterialCostLine,
    MaterialSnapshot,
    RecipeLine,
    RecipeSnapshot,
)
from src.services.dto_utils import round_currency, round_price, to_decimal
from src.services.exceptions import (
    CostCalculationError,
    InvalidMarginError,
    InvalidYieldError,
    ResolutionError,
)

MINUTES_PER_HOUR = Decimal(60)
HUNDRED = Decimal(100)


def resolve_lines(
    recipe: RecipeSnapshot,
    materials: Mapping[int, MaterialSnapshot],
) -> List[Tuple[RecipeLine, MaterialSnapshot]]:
    """
    Pair every recipe line with its material, in recipe order.

    Args:
        recipe: Recipe whose lines are resolved
        materials: Mapping of material ID to MaterialSnapshot; may contain
            materials the recipe does not use

    Returns:
        List of (line, material) tuples

    Raises:
        ResolutionError: If a line references an ID missing from ``materials``
    """
    resolved = []
    for line in recipe.lines:
        material = materials.get(line.material_id)
        if material is None:
            raise ResolutionError(recipe.id, line.material_id)
        resolved.append((line, material))
    return resolved


def line_cost(line: RecipeLine, material: MaterialSnapshot) -> Decimal:
    """
    Unrounded cost of one recipe line.

    Example:
        unit_price=500 for package_size=1000, quantity=300 -> 150
    """
    if material.package_size <= 0:
        raise CostCalculationError(
            f"Material {material.id} has package size {material.package_size}; must be > 0"
        )
    return material.unit_price / material.package_size * to_decimal(line.quantity)


def _check_inputs(recipe: RecipeSnapshot, settings: CostSettingsSnapshot) -> None:
    """Reject a yield or margin that would make a divisor zero or negative."""
    if recipe.yield_count is None or recipe.yield_count <= 0:
        raise InvalidYieldError(recipe.id, recipe.yield_count)

    margin = to_decimal(settings.target_profit_margin)
    if not margin.is_finite() or margin < 0 or margin >= HUNDRED:
        raise InvalidMarginError(settings.target_profit_margin)


def compute_components(
    recipe: RecipeSnapshot,
    materials: Mapping[int, MaterialSnapshot],
    settings: CostSettingsSnapshot,
) -> CostComponents:
    """
    Compute the unrounded cost figures of a recipe.

    Args:
        recipe: Recipe snapshot (yield > 0)
        materials: Mapping of material ID to MaterialSnapshot
        settings: Cost settings snapshot (margin in [0, 100))

    Returns:
        CostComponents at full Decimal precision

    Raises:
        InvalidYieldError: If yield_count <= 0
        InvalidMarginError: If target_profit_margin is outside [0, 100)
        ResolutionError: If a referenced material is missing
    """
    return _compute(recipe, materials, settings)[1]


def _compute(
    recipe: RecipeSnapshot,
    materials: Mapping[int, MaterialSnapshot],
    settings: CostSettingsSnapshot,
) -> Tuple[List[Tuple[RecipeLine, MaterialSnapshot]], CostComponents]:
    _check_inputs(recipe, settings)
    pairs = resolve_lines(recipe, materials)

    line_costs = tuple(line_cost(line, material) for line, material in pairs)
    material_cost = sum(line_costs, Decimal(0))

    yield_count = Decimal(recipe.yield_count)
    labor_cost = (
        to_decimal(settings.labor_cost_per_hour)
        * Decimal(recipe.labor_time_minutes or 0)
        / MINUTES_PER_HOUR
    )
    overhead_cost = to_decimal(settings.overhead_cost_per_unit) * yield_count

    total_cost = material_cost + labor_cost + overhead_cost
    unit_cost = total_cost / yield_count
    suggested_price = unit_cost / (1 - to_decimal(settings.target_profit_margin) / HUNDRED)

    return pairs, CostComponents(
        material_cost=material_cost,
        labor_cost=labor_cost,
        overhead_cost=overhead_cost,
        total_cost=total_cost,
        unit_cost=unit_cost,
        suggested_price=suggested_price,
        line_costs=line_costs,
    )


def compute_breakdown(
    recipe: RecipeSnapshot,
    materials: Mapping[int, MaterialSnapshot],
    settings: CostSettingsSnapshot,
) -> CostBreakdown:
    """
    Compute the presented cost breakdown of a recipe.

    Args:
        recipe: Recipe snapshot (yield > 0)
        materials: Mapping of material ID to MaterialSnapshot
        settings: Cost settings snapshot (margin in [0, 100))

    Returns:
        CostBreakdown with currency rounded to 2 places and the suggested
        price rounded to a whole unit. profit_margin echoes the target margin.

    Raises:
        InvalidYieldError: If yield_count <= 0
        InvalidMarginError: If target_profit_margin is outside [0, 100)
        ResolutionError: If a referenced material is missing
    """
    pairs, components = _compute(recipe, materials, settings)

    material_lines = tuple(
        MaterialCostLine(
            material_id=material.id,
            material_name=material.name,
            quantity=to_decimal(line.quantity),
            unit=material.unit,
            cost=round_currency(cost),
        )
        for (line, material), cost in zip(pairs, components.line_costs)
    )

    return CostBreakdown(
        recipe_id=recipe.id,
        recipe_name=recipe.product_name,
        yield_count=recipe.yield_count,
        material_cost=round_currency(components.material_cost),
        labor_cost=round_currency(components.labor_cost),
        overhead_cost=round_currency(components.overhead_cost),
        total_cost=round_currency(components.total_cost),
        unit_cost=round_currency(components.unit_cost),
        suggested_price=round_price(components.suggested_price),
        profit_margin=round_currency(settings.target_profit_margin),
        material_lines=material_lines,
    )
