"""
Costing Service - runs the cost engine against the database.

Each public function reads one consistent snapshot (recipes, the materials
they reference, the cost settings) inside a single session, converts the rows
into immutable DTO snapshots and hands them to the pure engine/aggregator.
Nothing is written back.

Usage:
    from src.services import costing_service

    breakdown = costing_service.calculate_recipe_cost(recipe_id)
    report = costing_service.generate_cost_report()
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from src.services.cost_engine import compute_breakdown
from src.services.cost_report import compute_report
from src.services.cost_settings_service import get_settings_snapshot
from src.services.database import session_scope
from src.services.dto import CostBreakdown, CostReport, MaterialSnapshot, RecipeSnapshot
from src.services.exceptions import CostCalculationError, MaterialNotFound, ResolutionError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.material_service import resolve_materials
from src.services.recipe_service import get_recipe, list_recipes

logger = get_service_logger(__name__)


def _material_snapshots(
    recipes: Sequence[RecipeSnapshot],
    sess: Session,
) -> Dict[int, MaterialSnapshot]:
    """Resolve every material the recipes reference, as snapshots."""
    wanted = set()
    for recipe in recipes:
        wanted |= recipe.material_ids

    try:
        rows = resolve_materials(wanted, session=sess)
    except MaterialNotFound as e:
        missing = e.material_ids[0]
        owner = next(r.id for r in recipes if missing in r.material_ids)
        raise ResolutionError(owner, missing) from e

    return {material_id: MaterialSnapshot.from_model(row) for material_id, row in rows.items()}


def _snapshots(recipes: Iterable) -> List[RecipeSnapshot]:
    return [RecipeSnapshot.from_model(recipe) for recipe in recipes]


def calculate_recipe_cost(recipe_id: int, session: Optional[Session] = None) -> CostBreakdown:
    """
    Compute the cost breakdown of one recipe.

    Args:
        recipe_id: Recipe to cost
        session: Optional database session

    Returns:
        CostBreakdown

    Raises:
        RecipeNotFound: If recipe doesn't exist
        CostCalculationError: If the stored data cannot be costed
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> CostBreakdown:
        recipe = RecipeSnapshot.from_model(get_recipe(recipe_id, session=sess))
        materials = _material_snapshots([recipe], sess)
        settings = get_settings_snapshot(session=sess)

        try:
            breakdown = compute_breakdown(recipe, materials, settings)
        except CostCalculationError as e:
            log_operation(
                logger,
                "calculate_recipe_cost",
                "error",
                level=logging.WARNING,
                recipe_id=recipe_id,
                error=str(e),
            )
            raise

        log_operation(
            logger,
            "calculate_recipe_cost",
            "success",
            level=logging.DEBUG,
            recipe_id=recipe_id,
            unit_cost=str(breakdown.unit_cost),
            suggested_price=str(breakdown.suggested_price),
        )
        return breakdown

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def calculate_all_costs(session: Optional[Session] = None) -> List[CostBreakdown]:
    """
    Compute the cost breakdown of every recipe, ordered by product name.

    Raises:
        CostCalculationError: For the first recipe that cannot be costed
        DatabaseError: If database operation fails
    """
    return list(generate_cost_report(session=session).per_recipe)


def generate_cost_report(session: Optional[Session] = None) -> CostReport:
    """
    Compute breakdowns for all recipes plus summary statistics.

    Returns:
        CostReport (per-recipe breakdowns ordered by product name, and summary)

    Raises:
        CostCalculationError: For the first recipe that cannot be costed
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> CostReport:
        recipes = _snapshots(list_recipes(session=sess))
        materials = _material_snapshots(recipes, sess)
        settings = get_settings_snapshot(session=sess)

        report = compute_report(recipes, materials, settings)

        log_operation(
            logger,
            "generate_cost_report",
            "success",
            recipe_count=report.summary.count,
            average_unit_cost=str(report.summary.average_unit_cost),
        )
        return report

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
