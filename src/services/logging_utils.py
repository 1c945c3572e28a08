"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across catalog and costing operations.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log successful operation
    log_operation(
        logger,
        operation="calculate_recipe_cost",
        outcome="success",
        recipe_id=12,
        unit_cost="45.20",
    )

    # Log a refused operation
    log_operation(
        logger,
        operation="delete_material",
        outcome="in_use",
        level=logging.WARNING,
        material_id=3,
        recipe_count=2,
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "bakery_cost.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger named '<LOGGER_PREFIX>.<module>'.

    Example:
        >>> logger = get_service_logger("src.services.costing_service")
        >>> logger.name
        'bakery_cost.services.costing_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message is "<operation>: <outcome>"; context fields are attached to
    the record through ``extra`` so handlers can emit them as structured data.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "create_recipe", "generate_cost_report")
        outcome: Outcome description (e.g., "success", "not_found", "in_use")
        level: Log level (default: INFO). Use DEBUG for verbose/frequent logs.
        **context: Additional context fields (entity IDs, counts, error details)
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
