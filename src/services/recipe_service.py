"""
Recipe Service - Business logic for recipe management.

This service provides CRUD operations for recipes with:
- Input validation (yield > 0, labor time >= 0, one line per material)
- Recipe material line management (lines are replaced as a whole)
- Copying a recipe with all of its lines
- Search and filtering

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models import Recipe, RecipeMaterial
from src.services.database import session_scope
from src.services.exceptions import (
    DatabaseError,
    RecipeNotFound,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.services.material_service import resolve_materials
from src.utils.constants import COPY_SUFFIX, MAX_NAME_LENGTH
from src.utils.validators import validate_recipe_data, validate_recipe_lines

logger = get_service_logger(__name__)

RECIPE_FIELDS = ("product_name", "yield_count", "labor_time_minutes", "notes")


# ============================================================================
# Helpers
# ============================================================================


def _get_or_raise(sess: Session, recipe_id: int) -> Recipe:
    recipe = sess.query(Recipe).filter(Recipe.id == recipe_id).first()
    if recipe is None:
        raise RecipeNotFound(recipe_id)
    return recipe


def _load_lines(recipe: Recipe) -> Recipe:
    """Touch lines and their materials so the recipe is usable after the session closes."""
    for line in recipe.lines:
        _ = line.material
    return recipe


def _check_lines(lines_data: List[Dict], sess: Session) -> None:
    """Validate line data and make sure every referenced material exists."""
    is_valid, errors = validate_recipe_lines(lines_data)
    if not is_valid:
        raise ValidationError(errors)
    resolve_materials([line["material_id"] for line in lines_data], session=sess)


def _build_lines(lines_data: List[Dict]) -> List[RecipeMaterial]:
    return [
        RecipeMaterial(
            material_id=line["material_id"],
            quantity=float(line["quantity"]),
            position=position,
        )
        for position, line in enumerate(lines_data)
    ]


# ============================================================================
# CRUD Operations
# ============================================================================


def create_recipe(
    recipe_data: Dict,
    lines_data: Optional[List[Dict]] = None,
    session: Optional[Session] = None,
) -> Recipe:
    """
    Create a new recipe with optional material lines.

    Args:
        recipe_data: Dictionary with recipe fields:
            - product_name: str (required)
            - yield_count: int > 0 (required)
            - labor_time_minutes: int >= 0 (required)
            - notes: str (optional)
        lines_data: List of line dicts with:
            - material_id: int
            - quantity: float >= 0
        session: Optional database session

    Returns:
        Created Recipe instance with lines loaded

    Raises:
        ValidationError: If data validation fails
        MaterialNotFound: If a material_id doesn't exist
        DatabaseError: If database operation fails
    """
    is_valid, errors = validate_recipe_data(recipe_data)
    if not is_valid:
        raise ValidationError(errors)

    lines_data = lines_data or []

    def _impl(sess: Session) -> Recipe:
        _check_lines(lines_data, sess)

        recipe = Recipe(
            product_name=recipe_data["product_name"].strip(),
            yield_count=int(recipe_data["yield_count"]),
            labor_time_minutes=int(recipe_data["labor_time_minutes"]),
            notes=recipe_data.get("notes") or None,
        )
        recipe.lines = _build_lines(lines_data)

        sess.add(recipe)
        sess.flush()
        sess.refresh(recipe)

        log_operation(
            logger,
            "create_recipe",
            "success",
            recipe_id=recipe.id,
            line_count=len(lines_data),
        )
        return _load_lines(recipe)

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create recipe", e)


def get_recipe(recipe_id: int, session: Optional[Session] = None) -> Recipe:
    """
    Retrieve a recipe by ID.

    Returns:
        Recipe instance with lines and their materials loaded

    Raises:
        RecipeNotFound: If recipe doesn't exist
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> Recipe:
        return _load_lines(_get_or_raise(sess, recipe_id))

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to retrieve recipe {recipe_id}", e)


def list_recipes(
    name_search: Optional[str] = None,
    material_id: Optional[int] = None,
    session: Optional[Session] = None,
) -> List[Recipe]:
    """
    Retrieve all recipes ordered by product name, with optional filtering.

    Args:
        name_search: Filter by product name (case-insensitive partial match)
        material_id: Filter by recipes using a specific material
        session: Optional database session

    Returns:
        List of Recipe instances with lines loaded

    Raises:
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> List[Recipe]:
        query = sess.query(Recipe)

        if name_search:
            query = query.filter(Recipe.product_name.ilike(f"%{name_search}%"))

        if material_id is not None:
            query = query.filter(
                Recipe.lines.any(RecipeMaterial.material_id == material_id)
            )

        recipes = query.order_by(Recipe.product_name, Recipe.id).all()
        for recipe in recipes:
            _load_lines(recipe)
        return recipes

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve recipes", e)


def update_recipe(
    recipe_id: int,
    recipe_data: Dict,
    lines_data: Optional[List[Dict]] = None,
    session: Optional[Session] = None,
) -> Recipe:
    """
    Update a recipe and optionally replace its lines.

    Args:
        recipe_id: Recipe ID
        recipe_data: Dictionary with the recipe fields to change; absent
            fields are left as they are
        lines_data: If provided, replaces all recipe lines (an empty list
            removes them all)
        session: Optional database session

    Returns:
        Updated Recipe instance

    Raises:
        RecipeNotFound: If recipe doesn't exist
        ValidationError: If data validation fails
        MaterialNotFound: If a material_id doesn't exist
        DatabaseError: If database operation fails
    """
    changes = {key: value for key, value in recipe_data.items() if key in RECIPE_FIELDS}
    is_valid, errors = validate_recipe_data(changes, partial=True)
    if not is_valid:
        raise ValidationError(errors)

    def _impl(sess: Session) -> Recipe:
        recipe = _get_or_raise(sess, recipe_id)

        if "product_name" in changes:
            recipe.product_name = changes["product_name"].strip()
        if "yield_count" in changes:
            recipe.yield_count = int(changes["yield_count"])
        if "labor_time_minutes" in changes:
            recipe.labor_time_minutes = int(changes["labor_time_minutes"])
        if "notes" in changes:
            recipe.notes = changes["notes"] or None

        if lines_data is not None:
            _check_lines(lines_data, sess)
            # Old rows must be gone before re-inserting the same material
            recipe.lines.clear()
            sess.flush()
            recipe.lines.extend(_build_lines(lines_data))

        sess.flush()
        sess.refresh(recipe)

        log_operation(
            logger,
            "update_recipe",
            "success",
            recipe_id=recipe_id,
            lines_replaced=lines_data is not None,
        )
        return _load_lines(recipe)

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update recipe {recipe_id}", e)


def delete_recipe(recipe_id: int, session: Optional[Session] = None) -> bool:
    """
    Delete a recipe and its lines.

    Returns:
        True if deleted successfully

    Raises:
        RecipeNotFound: If recipe doesn't exist
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> bool:
        recipe = _get_or_raise(sess, recipe_id)

        # Cascade removes recipe_materials
        sess.delete(recipe)
        sess.flush()

        log_operation(logger, "delete_recipe", "success", recipe_id=recipe_id)
        return True

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete recipe {recipe_id}", e)


def copy_recipe(
    recipe_id: int,
    product_name: Optional[str] = None,
    session: Optional[Session] = None,
) -> Recipe:
    """
    Duplicate a recipe together with its lines.

    Args:
        recipe_id: Recipe to copy
        product_name: Name of the copy; defaults to "<original name> (copy)"
        session: Optional database session

    Returns:
        The new Recipe instance

    Raises:
        RecipeNotFound: If recipe doesn't exist
        ValidationError: If the resulting name is invalid
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> Recipe:
        source = _get_or_raise(sess, recipe_id)

        name = product_name
        if name is None:
            name = f"{source.product_name}{COPY_SUFFIX}"[:MAX_NAME_LENGTH]

        recipe_data = {
            "product_name": name,
            "yield_count": source.yield_count,
            "labor_time_minutes": source.labor_time_minutes,
            "notes": source.notes,
        }
        lines_data = [
            {"material_id": line.material_id, "quantity": line.quantity}
            for line in source.lines
        ]

        copy = create_recipe(recipe_data, lines_data, session=sess)
        log_operation(
            logger,
            "copy_recipe",
            "success",
            recipe_id=recipe_id,
            new_recipe_id=copy.id,
        )
        return copy

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to copy recipe {recipe_id}", e)

