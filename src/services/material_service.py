"""
Material Service - CRUD operations for the materials catalog.

Materials are purchasable ingredients priced per package. Recipes reference
them by ID, so a material cannot be deleted while any recipe still uses it.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models import Material, RecipeMaterial
from src.services.database import session_scope
from src.services.exceptions import (
    DatabaseError,
    MaterialInUse,
    MaterialNotFound,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.validators import validate_material_data, validate_material_category

logger = get_service_logger(__name__)


def _get_or_raise(sess: Session, material_id: int) -> Material:
    material = sess.query(Material).filter(Material.id == material_id).first()
    if material is None:
        raise MaterialNotFound(material_id)
    return material


def create_material(
    name: str,
    category: str,
    unit: str,
    unit_price: float,
    package_size: float,
    session: Optional[Session] = None,
) -> Material:
    """
    Create a new material.

    Args:
        name: Display name (e.g., "Bread Flour")
        category: One of 'flour', 'dairy', 'sugar', 'fat', 'other'
        unit: One of 'gram', 'milliliter', 'piece'
        unit_price: Price of one package (>= 0)
        package_size: Quantity in one package (> 0)
        session: Optional database session

    Returns:
        Created Material instance

    Raises:
        ValidationError: If any field is invalid
        DatabaseError: If database operation fails
    """
    data = {
        "name": name,
        "category": category,
        "unit": unit,
        "unit_price": unit_price,
        "package_size": package_size,
    }
    is_valid, errors = validate_material_data(data)
    if not is_valid:
        raise ValidationError(errors)

    def _impl(sess: Session) -> Material:
        material = Material(
            name=name.strip(),
            category=category,
            unit=unit,
            unit_price=float(unit_price),
            package_size=float(package_size),
        )
        sess.add(material)
        sess.flush()
        sess.refresh(material)

        log_operation(logger, "create_material", "success", material_id=material.id)
        return material

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create material", e)


def get_material(material_id: int, session: Optional[Session] = None) -> Material:
    """
    Retrieve a material by ID.

    Raises:
        MaterialNotFound: If material doesn't exist
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> Material:
        return _get_or_raise(sess, material_id)

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to retrieve material {material_id}", e)


def list_materials(
    category: Optional[str] = None,
    session: Optional[Session] = None,
) -> List[Material]:
    """
    List materials ordered by category, then name.

    Args:
        category: Optional category filter
        session: Optional database session

    Returns:
        List of Material instances

    Raises:
        ValidationError: If category is not a known category
        DatabaseError: If database operation fails
    """
    if category is not None:
        is_valid, error = validate_material_category(category)
        if not is_valid:
            raise ValidationError([error])

    def _impl(sess: Session) -> List[Material]:
        query = sess.query(Material)
        if category is not None:
            query = query.filter(Material.category == category)
        return query.order_by(Material.category, Material.name).all()

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve materials", e)


def update_material(
    material_id: int,
    name: Optional[str] = None,
    category: Optional[str] = None,
    unit: Optional[str] = None,
    unit_price: Optional[float] = None,
    package_size: Optional[float] = None,
    session: Optional[Session] = None,
) -> Material:
    """
    Update material fields. Fields left as None are unchanged.

    Args:
        material_id: Material ID to update
        name: New name (optional)
        category: New category (optional)
        unit: New unit (optional)
        unit_price: New package price (optional)
        package_size: New package size (optional)
        session: Optional database session

    Returns:
        Updated Material instance

    Raises:
        MaterialNotFound: If material doesn't exist
        ValidationError: If any provided field is invalid
        DatabaseError: If database operation fails
    """
    changes = {
        key: value
        for key, value in {
            "name": name,
            "category": category,
            "unit": unit,
            "unit_price": unit_price,
            "package_size": package_size,
        }.items()
        if value is not None
    }
    is_valid, errors = validate_material_data(changes, partial=True)
    if not is_valid:
        raise ValidationError(errors)

    def _impl(sess: Session) -> Material:
        material = _get_or_raise(sess, material_id)

        if "name" in changes:
            material.name = changes["name"].strip()
        if "category" in changes:
            material.category = changes["category"]
        if "unit" in changes:
            material.unit = changes["unit"]
        if "unit_price" in changes:
            material.unit_price = float(changes["unit_price"])
        if "package_size" in changes:
            material.package_size = float(changes["package_size"])

        sess.flush()
        sess.refresh(material)

        log_operation(
            logger,
            "update_material",
            "success",
            material_id=material_id,
            fields=sorted(changes),
        )
        return material

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update material {material_id}", e)


def count_recipes_using_material(material_id: int, session: Optional[Session] = None) -> int:
    """Number of distinct recipes with a line referencing the material."""

    def _impl(sess: Session) -> int:
        return (
            sess.query(func.count(func.distinct(RecipeMaterial.recipe_id)))
            .filter(RecipeMaterial.material_id == material_id)
            .scalar()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_material(material_id: int, session: Optional[Session] = None) -> bool:
    """
    Delete a material. Refused while any recipe uses it.

    Returns:
        True if deleted successfully

    Raises:
        MaterialNotFound: If material doesn't exist
        MaterialInUse: If one or more recipes reference the material
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> bool:
        material = _get_or_raise(sess, material_id)

        recipe_count = count_recipes_using_material(material_id, session=sess)
        if recipe_count > 0:
            log_operation(
                logger,
                "delete_material",
                "in_use",
                level=logging.WARNING,
                material_id=material_id,
                recipe_count=recipe_count,
            )
            raise MaterialInUse(material_id, recipe_count)

        sess.delete(material)
        sess.flush()
        log_operation(logger, "delete_material", "success", material_id=material_id)
        return True

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete material {material_id}", e)


def resolve_materials(
    material_ids: Iterable[int],
    session: Optional[Session] = None,
) -> Dict[int, Material]:
    """
    Fetch a set of materials by ID in one query.

    Args:
        material_ids: IDs to resolve (duplicates are ignored)
        session: Optional database session

    Returns:
        Mapping of material ID to Material

    Raises:
        MaterialNotFound: Listing every ID that does not exist
        DatabaseError: If database operation fails
    """
    wanted = set(material_ids)

    def _impl(sess: Session) -> Dict[int, Material]:
        if not wanted:
            return {}
        rows = sess.query(Material).filter(Material.id.in_(wanted)).all()
        resolved = {material.id: material for material in rows}

        missing = wanted - set(resolved)
        if missing:
            raise MaterialNotFound(missing)
        return resolved

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to resolve materials", e)
