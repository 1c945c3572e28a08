"""
Reporting Aggregator - cost breakdowns and summary statistics for many recipes.

Runs the cost engine over a list of recipes and folds the results into a
summary: recipe count, mean unit cost, mean profit margin, and the recipes
with the highest and lowest profit margin.

Averages are taken over the presented (rounded) per-recipe figures and
rounded to 2 places; both are 0 for an empty list. Highest/lowest keep the
first recipe encountered when margins tie, so with one shared target margin
both point at the first recipe.
"""

from decimal import Decimal
from typing import Mapping, Optional, Sequence

from src.services.cost_engine import compute_breakdown
from src.services.dto import (
    CostBreakdown,
    CostReport,
    CostSettingsSnapshot,
    MaterialSnapshot,
    RecipeSnapshot,
    ReportSummary,
)
from src.services.dto_utils import round_currency


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return round_currency(0)
    return round_currency(sum(values, Decimal(0)) / len(values))


def summarize(breakdowns: Sequence[CostBreakdown]) -> ReportSummary:
    """
    Fold breakdowns into summary statistics.

    Args:
        breakdowns: Breakdowns in report order

    Returns:
        ReportSummary; highest/lowest are None when ``breakdowns`` is empty
    """
    highest: Optional[CostBreakdown] = None
    lowest: Optional[CostBreakdown] = None

    for breakdown in breakdowns:
        # Strict comparisons keep the first occurrence on ties
        if highest is None or breakdown.profit_margin > highest.profit_margin:
            highest = breakdown
        if lowest is None or breakdown.profit_margin < lowest.profit_margin:
            lowest = breakdown

    return ReportSummary(
        count=len(breakdowns),
        average_unit_cost=_mean([b.unit_cost for b in breakdowns]),
        average_profit_margin=_mean([b.profit_margin for b in breakdowns]),
        highest=highest,
        lowest=lowest,
    )


def compute_report(
    recipes: Sequence[RecipeSnapshot],
    materials: Mapping[int, MaterialSnapshot],
    settings: CostSettingsSnapshot,
) -> CostReport:
    """
    Compute breakdowns for every recipe and summarize them.

    Args:
        recipes: Recipes to cost, in report order
        materials: Mapping of material ID to MaterialSnapshot covering every
            material the recipes reference
        settings: Cost settings snapshot shared by all recipes

    Returns:
        CostReport with one breakdown per recipe, in input order

    Raises:
        CostCalculationError: Propagated from the engine for the first bad recipe
    """
    per_recipe = tuple(compute_breakdown(recipe, materials, settings) for recipe in recipes)
    return CostReport(per_recipe=per_recipe, summary=summarize(per_recipe))
