"""Service layer exception classes for the Bakery Cost Tracker.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── DatabaseError
    ├── MaterialNotFound
    ├── RecipeNotFound
    ├── MaterialInUse
    └── CostCalculationError
        ├── ResolutionError
        ├── InvalidYieldError
        └── InvalidMarginError
"""

from typing import Iterable


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class MaterialNotFound(ServiceError):
    """Raised when one or more materials cannot be found by ID.

    Args:
        material_ids: The missing material ID, or an iterable of IDs

    Example:
        >>> raise MaterialNotFound([3, 7])
        MaterialNotFound: Material(s) with ID 3, 7 not found
    """

    def __init__(self, material_ids):
        if isinstance(material_ids, Iterable) and not isinstance(material_ids, str):
            self.material_ids = sorted(material_ids)
        else:
            self.material_ids = [material_ids]
        ids = ", ".join(str(i) for i in self.material_ids)
        if len(self.material_ids) == 1:
            super().__init__(f"Material with ID {ids} not found")
        else:
            super().__init__(f"Material(s) with ID {ids} not found")


class RecipeNotFound(ServiceError):
    """Raised when a recipe cannot be found by ID."""

    def __init__(self, recipe_id: int):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with ID {recipe_id} not found")


class MaterialInUse(ServiceError):
    """Raised when attempting to delete a material that recipes still use.

    Args:
        material_id: The material that was to be deleted
        recipe_count: Number of recipes referencing it
    """

    def __init__(self, material_id: int, recipe_count: int):
        self.material_id = material_id
        self.recipe_count = recipe_count
        super().__init__(
            f"Cannot delete material {material_id}: used in {recipe_count} recipe(s)"
        )


# Cost calculation errors. These are deterministic functions of the input,
# so callers should report them rather than retry.


class CostCalculationError(ServiceError):
    """Base class for errors raised by the cost calculation engine."""

    pass


class ResolutionError(CostCalculationError):
    """Raised when a recipe line references a material that was not supplied.

    Args:
        recipe_id: Recipe being costed
        material_id: The unresolved material reference
    """

    def __init__(self, recipe_id, material_id):
        self.recipe_id = recipe_id
        self.material_id = material_id
        super().__init__(
            f"Recipe {recipe_id} references material {material_id}, which could not be resolved"
        )


class InvalidYieldError(CostCalculationError):
    """Raised when a recipe's yield is not a positive number."""

    def __init__(self, recipe_id, yield_count):
        self.recipe_id = recipe_id
        self.yield_count = yield_count
        super().__init__(f"Recipe {recipe_id} has invalid yield {yield_count}; must be > 0")


class InvalidMarginError(CostCalculationError):
    """Raised when the target profit margin is outside [0, 100).

    A margin of 100% would divide the unit cost by zero.
    """

    def __init__(self, margin):
        self.margin = margin
        super().__init__(
            f"Target profit margin {margin} is invalid; must be at least 0 and less than 100"
        )
