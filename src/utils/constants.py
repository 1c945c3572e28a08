"""
Constants and enumerations for the Bakery Cost Tracker application.

This module defines all system-wide constants including:
- Material categories and units
- Default cost settings
- Validation limits
- Application metadata
"""

from typing import Dict, List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Bakery Cost Tracker"
APP_VERSION = "0.1.0"

# ============================================================================
# Material Categories
# ============================================================================

MATERIAL_CATEGORIES: List[str] = [
    "flour",
    "dairy",
    "sugar",
    "fat",
    "other",
]

# ============================================================================
# Material Units
# ============================================================================

MATERIAL_UNITS: List[str] = [
    "gram",
    "milliliter",
    "piece",
]

# Short labels used in listings
UNIT_LABELS: Dict[str, str] = {
    "gram": "g",
    "milliliter": "ml",
    "piece": "pc",
}

# ============================================================================
# Cost Settings Defaults
# ============================================================================

DEFAULT_LABOR_COST_PER_HOUR = 1000
DEFAULT_OVERHEAD_COST_PER_UNIT = 10
DEFAULT_TARGET_PROFIT_MARGIN = 30

# Margin is a percentage of the selling price; 100 would mean zero cost share
MIN_PROFIT_MARGIN = 0.0
MAX_PROFIT_MARGIN = 100.0

# ============================================================================
# Validation Limits
# ============================================================================

MAX_NAME_LENGTH = 200
MAX_NOTES_LENGTH = 2000

MIN_QUANTITY = 0.0
MAX_QUANTITY = 999999.99
MIN_COST = 0.0
MAX_COST = 999999.99
MAX_YIELD = 100000
MAX_LABOR_MINUTES = 60 * 24 * 7

# ============================================================================
# Formatting
# ============================================================================

CURRENCY_DECIMAL_PLACES = 2
PRICE_DECIMAL_PLACES = 0

COPY_SUFFIX = " (copy)"

# ============================================================================
# Database
# ============================================================================

DATABASE_FILENAME = "bakery_cost.db"

TABLE_MATERIAL = "materials"
TABLE_RECIPE = "recipes"
TABLE_RECIPE_MATERIAL = "recipe_materials"
TABLE_COST_SETTINGS = "cost_settings"

COST_SETTINGS_ID = 1

# ============================================================================
# Error Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Must be a valid number"
ERROR_INVALID_POSITIVE = "Must be a positive number"
ERROR_INVALID_NON_NEGATIVE = "Must be zero or greater"
ERROR_INVALID_INTEGER = "Must be a whole number"
ERROR_INVALID_UNIT = "Invalid unit"
ERROR_INVALID_CATEGORY = "Invalid category"
