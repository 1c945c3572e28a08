"""Services package - Business logic layer for the Bakery Cost Tracker.

Architecture:
- Services: Stateless functions organized by domain (materials, recipes, settings)
- Cost engine: Pure functions over immutable snapshots (cost_engine, cost_report)
- Orchestration: costing_service reads the database and calls the engine
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation before database operations

Service Modules:
- material_service: Materials catalog CRUD
- recipe_service: Recipe and recipe line management
- cost_settings_service: Labor/overhead/margin settings singleton
- cost_engine: Per-recipe cost breakdown
- cost_report: Cost breakdowns and summary across recipes
- costing_service: Database-backed cost calculation and reporting

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- dto / dto_utils: Value objects and money rounding
- logging_utils: Structured operation logging
"""

from . import (
    database,
    material_service,
    recipe_service,
    cost_settings_service,
    cost_engine,
    cost_report,
    costing_service,
)

from .exceptions import (
    ServiceError,
    ValidationError,
    DatabaseError,
    MaterialNotFound,
    RecipeNotFound,
    MaterialInUse,
    CostCalculationError,
    ResolutionError,
    InvalidYieldError,
    InvalidMarginError,
)

__all__ = [
    "database",
    "material_service",
    "recipe_service",
    "cost_settings_service",
    "cost_engine",
    "cost_report",
    "costing_service",
    "ServiceError",
    "ValidationError",
    "DatabaseError",
    "MaterialNotFound",
    "RecipeNotFound",
    "MaterialInUse",
    "CostCalculationError",
    "ResolutionError",
    "InvalidYieldError",
    "InvalidMarginError",
]
