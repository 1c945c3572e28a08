"""
Cost Settings Service - the singleton labor/overhead/margin configuration.

Exactly one CostSettings row exists. It is created with defaults when the
database is initialized, and ``get_cost_settings`` recreates it if it has
gone missing, so readers always get a record.

Margins of 100% or more are rejected here, before they can reach the cost
engine.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models import CostSettings
from src.services.database import session_scope
from src.services.dto import CostSettingsSnapshot
from src.services.exceptions import DatabaseError, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import (
    COST_SETTINGS_ID,
    DEFAULT_LABOR_COST_PER_HOUR,
    DEFAULT_OVERHEAD_COST_PER_UNIT,
    DEFAULT_TARGET_PROFIT_MARGIN,
)
from src.utils.validators import validate_cost_settings_data

logger = get_service_logger(__name__)


def ensure_cost_settings(session: Optional[Session] = None) -> CostSettings:
    """
    Return the settings row, inserting the defaults if it does not exist.

    Idempotent; called from database initialization.
    """

    def _impl(sess: Session) -> CostSettings:
        settings = sess.get(CostSettings, COST_SETTINGS_ID)
        if settings is None:
            settings = CostSettings(
                id=COST_SETTINGS_ID,
                labor_cost_per_hour=float(DEFAULT_LABOR_COST_PER_HOUR),
                overhead_cost_per_unit=float(DEFAULT_OVERHEAD_COST_PER_UNIT),
                target_profit_margin=float(DEFAULT_TARGET_PROFIT_MARGIN),
            )
            sess.add(settings)
            sess.flush()
            log_operation(logger, "ensure_cost_settings", "created_defaults")
        return settings

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_cost_settings(session: Optional[Session] = None) -> CostSettings:
    """
    Get the current cost settings.

    Returns:
        The CostSettings row (never None)

    Raises:
        DatabaseError: If database operation fails
    """
    try:
        return ensure_cost_settings(session=session)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to retrieve cost settings", e)


def get_settings_snapshot(session: Optional[Session] = None) -> CostSettingsSnapshot:
    """Get the current cost settings as an immutable snapshot for the engine."""
    return CostSettingsSnapshot.from_model(get_cost_settings(session=session))


def update_cost_settings(
    labor_cost_per_hour: float,
    overhead_cost_per_unit: float,
    target_profit_margin: float,
    session: Optional[Session] = None,
) -> CostSettings:
    """
    Replace all three cost settings.

    Args:
        labor_cost_per_hour: Wage cost of one labor hour (>= 0)
        overhead_cost_per_unit: Indirect cost per finished unit (>= 0)
        target_profit_margin: Percent of the selling price kept as profit, in [0, 100)
        session: Optional database session

    Returns:
        Updated CostSettings row

    Raises:
        ValidationError: If any value is missing or out of range
        DatabaseError: If database operation fails
    """
    data = {
        "labor_cost_per_hour": labor_cost_per_hour,
        "overhead_cost_per_unit": overhead_cost_per_unit,
        "target_profit_margin": target_profit_margin,
    }
    is_valid, errors = validate_cost_settings_data(data)
    if not is_valid:
        log_operation(logger, "update_cost_settings", "validation_failed", errors=errors)
        raise ValidationError(errors)

    def _impl(sess: Session) -> CostSettings:
        settings = ensure_cost_settings(session=sess)
        settings.labor_cost_per_hour = float(labor_cost_per_hour)
        settings.overhead_cost_per_unit = float(overhead_cost_per_unit)
        settings.target_profit_margin = float(target_profit_margin)
        sess.flush()
        sess.refresh(settings)

        log_operation(logger, "update_cost_settings", "success", **data)
        return settings

    try:
        if session is not None:
            return _impl(session)

        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to update cost settings", e)
