"""
Input validation functions for the Bakery Cost Tracker application.

This module provides validation functions for all user inputs including:
- Numeric validation (positive, non-negative, integer, ranges)
- String validation (length, required fields)
- Material category and unit validation
- Complete record validation (material, recipe, recipe lines, cost settings)

Field validators return ``(is_valid, error_message)``; record validators
return ``(is_valid, list_of_errors)`` so services can raise a single
ValidationError carrying every problem at once.
"""

import math
from typing import Optional, Tuple

from .constants import (
    MATERIAL_CATEGORIES,
    MATERIAL_UNITS,
    MAX_NAME_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_QUANTITY,
    MAX_COST,
    MAX_YIELD,
    MAX_LABOR_MINUTES,
    MIN_PROFIT_MARGIN,
    MAX_PROFIT_MARGIN,
    ERROR_REQUIRED_FIELD,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_POSITIVE,
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_INTEGER,
    ERROR_INVALID_UNIT,
    ERROR_INVALID_CATEGORY,
)


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_string_length(
    value: str, max_length: int, field_name: str = "Field"
) -> Tuple[bool, str]:
    """
    Validate that a string doesn't exceed maximum length.

    Args:
        value: The string value to validate
        max_length: Maximum allowed length
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value and len(value) > max_length:
        return False, f"{field_name}: Must be {max_length} characters or less"
    return True, ""


def _as_number(value: any) -> Optional[float]:
    """Coerce to a finite float, rejecting booleans and unparseable values."""
    if isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (ValueError, TypeError):
        return None
    if not math.isfinite(num):
        return None
    return num


def validate_positive_number(value: any, field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a value is a positive number (> 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    num_value = _as_number(value)
    if num_value is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if num_value <= 0:
        return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
    return True, ""


def validate_non_negative_number(value: any, field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a value is a non-negative number (>= 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    num_value = _as_number(value)
    if num_value is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if num_value < 0:
        return False, f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}"
    return True, ""


def validate_number_range(
    value: any, min_value: float, max_value: float, field_name: str = "Field"
) -> Tuple[bool, str]:
    """
    Validate that a number is within a specified (inclusive) range.

    Args:
        value: The value to validate
        min_value: Minimum allowed value
        max_value: Maximum allowed value
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    num_value = _as_number(value)
    if num_value is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if num_value < min_value or num_value > max_value:
        return False, f"{field_name}: Must be between {min_value} and {max_value}"
    return True, ""


def validate_integer(value: any, field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a value is a whole number.

    Accepts ints and integral floats (e.g. 12.0), rejects 12.5 and booleans.
    """
    num_value = _as_number(value)
    if num_value is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if not num_value.is_integer():
        return False, f"{field_name}: {ERROR_INVALID_INTEGER}"
    return True, ""


def validate_material_category(category: str, field_name: str = "Category") -> Tuple[bool, str]:
    """
    Validate that a category is one of the fixed material categories.

    Args:
        category: The category string to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not category:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"

    if category not in MATERIAL_CATEGORIES:
        return False, f"{field_name}: {ERROR_INVALID_CATEGORY}. Valid: {', '.join(MATERIAL_CATEGORIES)}"

    return True, ""


def validate_material_unit(unit: str, field_name: str = "Unit") -> Tuple[bool, str]:
    """
    Validate that a unit is one of the supported material units.

    Args:
        unit: The unit string to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not unit:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"

    if unit not in MATERIAL_UNITS:
        return False, f"{field_name}: {ERROR_INVALID_UNIT}. Valid: {', '.join(MATERIAL_UNITS)}"

    return True, ""


def validate_material_data(data: dict, partial: bool = False) -> Tuple[bool, list]:  # noqa: C901
    """
    Validate all fields for a material.

    Args:
        data: Dictionary containing material fields
        partial: If True, only fields present in ``data`` are checked (updates)

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    def _present(field: str) -> bool:
        return not partial or field in data

    if _present("name"):
        is_valid, error = validate_required_string(data.get("name"), "Name")
        if not is_valid:
            errors.append(error)
        else:
            is_valid, error = validate_string_length(data.get("name"), MAX_NAME_LENGTH, "Name")
            if not is_valid:
                errors.append(error)

    if _present("category"):
        is_valid, error = validate_material_category(data.get("category"), "Category")
        if not is_valid:
            errors.append(error)

    if _present("unit"):
        is_valid, error = validate_material_unit(data.get("unit"), "Unit")
        if not is_valid:
            errors.append(error)

    if _present("unit_price"):
        is_valid, error = validate_number_range(data.get("unit_price"), 0, MAX_COST, "Unit Price")
        if not is_valid:
            errors.append(error)

    # Package size is the divisor of the per-unit price
    if _present("package_size"):
        is_valid, error = validate_positive_number(data.get("package_size"), "Package Size")
        if not is_valid:
            errors.append(error)
        else:
            is_valid, error = validate_number_range(
                data.get("package_size"), 0, MAX_QUANTITY, "Package Size"
            )
            if not is_valid:
                errors.append(error)

    return len(errors) == 0, errors


def validate_recipe_data(data: dict, partial: bool = False) -> Tuple[bool, list]:  # noqa: C901
    """
    Validate the header fields of a recipe.

    Args:
        data: Dictionary containing recipe fields
        partial: If True, only fields present in ``data`` are checked (updates)

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    def _present(field: str) -> bool:
        return not partial or field in data

    if _present("product_name"):
        is_valid, error = validate_required_string(data.get("product_name"), "Product Name")
        if not is_valid:
            errors.append(error)
        else:
            is_valid, error = validate_string_length(
                data.get("product_name"), MAX_NAME_LENGTH, "Product Name"
            )
            if not is_valid:
                errors.append(error)

    # Yield is the divisor of the unit cost
    if _present("yield_count"):
        value = data.get("yield_count")
        is_valid, error = validate_positive_number(value, "Yield")
        if is_valid:
            is_valid, error = validate_integer(value, "Yield")
        if is_valid:
            is_valid, error = validate_number_range(value, 1, MAX_YIELD, "Yield")
        if not is_valid:
            errors.append(error)

    if _present("labor_time_minutes"):
        value = data.get("labor_time_minutes")
        is_valid, error = validate_non_negative_number(value, "Labor Time")
        if is_valid:
            is_valid, error = validate_integer(value, "Labor Time")
        if is_valid:
            is_valid, error = validate_number_range(value, 0, MAX_LABOR_MINUTES, "Labor Time")
        if not is_valid:
            errors.append(error)

    if data.get("notes"):
        is_valid, error = validate_string_length(data.get("notes"), MAX_NOTES_LENGTH, "Notes")
        if not is_valid:
            errors.append(error)

    return len(errors) == 0, errors


def validate_recipe_lines(lines: list) -> Tuple[bool, list]:
    """
    Validate the material lines of a recipe.

    Each line is a dict with ``material_id`` and ``quantity``. A material may
    appear only once per recipe.

    Args:
        lines: List of line dictionaries

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if not isinstance(lines, (list, tuple)):
        return False, ["Materials: Must be a list"]

    seen = set()
    for index, line in enumerate(lines, start=1):
        label = f"Material line {index}"
        material_id = line.get("material_id") if isinstance(line, dict) else None
        if material_id is None:
            errors.append(f"{label}: material_id {ERROR_REQUIRED_FIELD.lower()}")
            continue

        if material_id in seen:
            errors.append(f"{label}: material {material_id} is listed more than once")
        seen.add(material_id)

        is_valid, error = validate_number_range(line.get("quantity"), 0, MAX_QUANTITY, f"{label} quantity")
        if not is_valid:
            errors.append(error)

    return len(errors) == 0, errors


def validate_cost_settings_data(data: dict) -> Tuple[bool, list]:
    """
    Validate a complete cost settings record.

    All three fields are required. The profit margin must lie in [0, 100):
    a margin of 100% or more has no finite suggested price.

    Args:
        data: Dictionary with labor_cost_per_hour, overhead_cost_per_unit,
              target_profit_margin

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    is_valid, error = validate_number_range(
        data.get("labor_cost_per_hour"), 0, MAX_COST, "Labor Cost Per Hour"
    )
    if not is_valid:
        errors.append(error)

    is_valid, error = validate_number_range(
        data.get("overhead_cost_per_unit"), 0, MAX_COST, "Overhead Cost Per Unit"
    )
    if not is_valid:
        errors.append(error)

    margin = _as_number(data.get("target_profit_margin"))
    if margin is None:
        errors.append(f"Target Profit Margin: {ERROR_INVALID_NUMBER}")
    elif margin < MIN_PROFIT_MARGIN or margin >= MAX_PROFIT_MARGIN:
        errors.append(
            f"Target Profit Margin: Must be at least {MIN_PROFIT_MARGIN:g} "
            f"and less than {MAX_PROFIT_MARGIN:g}"
        )

    return len(errors) == 0, errors
