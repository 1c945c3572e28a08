"""
Bakery Cost CLI Utility

Command-line interface for the materials catalog, recipes, cost settings
and cost calculations. No UI required - designed for scripting and testing.

Usage Examples:
    # Add a material: 1000 g of flour for 500
    python -m src.utils.cost_cli materials add "Bread Flour" --category flour \\
        --unit gram --price 500 --package-size 1000

    # Add a recipe using material 1 (300 g)
    python -m src.utils.cost_cli recipes add "Country Loaf" --yield 1 \\
        --labor-minutes 180 --material 1:300

    # Show / change cost settings
    python -m src.utils.cost_cli settings show
    python -m src.utils.cost_cli settings set --labor-cost-per-hour 1000 \\
        --overhead-cost-per-unit 10 --target-profit-margin 30

    # Cost one recipe, all recipes, or the summary report
    python -m src.utils.cost_cli calculate 1
    python -m src.utils.cost_cli calculate
    python -m src.utils.cost_cli report --format table
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from src.services import costing_service, cost_settings_service, material_service, recipe_service
from src.services.database import initialize_app_database
from src.services.dto import material_to_dict, recipe_to_dict, settings_to_dict
from src.services.dto_utils import cost_to_string
from src.services.exceptions import ServiceError
from src.utils.config import init_config
from src.utils.constants import (
    APP_NAME,
    APP_VERSION,
    MATERIAL_CATEGORIES,
    MATERIAL_UNITS,
    UNIT_LABELS,
)


# ============================================================================
# Output helpers
# ============================================================================


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _print_breakdown_table(breakdown) -> None:
    print(f"{breakdown.recipe_name} (#{breakdown.recipe_id}, yield {breakdown.yield_count})")
    for line in breakdown.material_lines:
        unit = UNIT_LABELS.get(line.unit, line.unit)
        print(f"  {line.material_name:<30} {line.quantity:>10} {unit:<3} {cost_to_string(line.cost):>12}")
    print(f"  {'Material cost':<45} {cost_to_string(breakdown.material_cost):>12}")
    print(f"  {'Labor cost':<45} {cost_to_string(breakdown.labor_cost):>12}")
    print(f"  {'Overhead cost':<45} {cost_to_string(breakdown.overhead_cost):>12}")
    print(f"  {'Total cost':<45} {cost_to_string(breakdown.total_cost):>12}")
    print(f"  {'Unit cost':<45} {cost_to_string(breakdown.unit_cost):>12}")
    print(f"  {'Suggested price':<45} {breakdown.suggested_price:>12}")
    print(f"  {'Target profit margin %':<45} {cost_to_string(breakdown.profit_margin):>12}")


def _print_summary_table(summary) -> None:
    print("Summary")
    print(f"  Recipes:                 {summary.count}")
    print(f"  Average unit cost:       {cost_to_string(summary.average_unit_cost)}")
    print(f"  Average profit margin %: {cost_to_string(summary.average_profit_margin)}")
    if summary.highest is not None:
        print(f"  Highest margin:          {summary.highest.recipe_name}")
        print(f"  Lowest margin:           {summary.lowest.recipe_name}")


def _parse_material_line(value: str) -> dict:
    """Parse a MATERIAL_ID:QUANTITY argument."""
    try:
        material_id, quantity = value.split(":", 1)
        return {"material_id": int(material_id), "quantity": float(quantity)}
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid material line '{value}', expected MATERIAL_ID:QUANTITY"
        )


# ============================================================================
# Command handlers
# ============================================================================


def materials_cmd(args) -> int:
    """Materials catalog commands."""
    if args.action == "list":
        materials = material_service.list_materials(category=args.category)
        if args.format == "table":
            for m in materials:
                unit = UNIT_LABELS.get(m.unit, m.unit)
                print(
                    f"{m.id:>4}  {m.name:<30} {m.category:<6} "
                    f"{cost_to_string(m.unit_price):>10} / {m.package_size:g} {unit}"
                    f"  ({m.price_per_unit:.4f} per {unit})"
                )
        else:
            _print_json([material_to_dict(m) for m in materials])
        return 0

    if args.action == "add":
        material = material_service.create_material(
            args.name, args.category, args.unit, args.price, args.package_size
        )
        _print_json(material_to_dict(material))
        return 0

    if args.action == "update":
        material = material_service.update_material(
            args.material_id,
            name=args.name,
            category=args.category,
            unit=args.unit,
            unit_price=args.price,
            package_size=args.package_size,
        )
        _print_json(material_to_dict(material))
        return 0

    if args.action == "delete":
        material_service.delete_material(args.material_id)
        print(f"Deleted material {args.material_id}")
        return 0

    print(f"Unknown materials action: {args.action}")
    return 1


def recipes_cmd(args) -> int:
    """Recipe commands."""
    if args.action == "list":
        recipes = recipe_service.list_recipes(name_search=args.search)
        if args.format == "table":
            for r in recipes:
                print(
                    f"{r.id:>4}  {r.product_name:<30} yield {r.yield_count:<5} "
                    f"labor {r.labor_time_minutes} min, {len(r.lines)} material(s)"
                )
        else:
            _print_json([recipe_to_dict(r) for r in recipes])
        return 0

    if args.action == "show":
        _print_json(recipe_to_dict(recipe_service.get_recipe(args.recipe_id)))
        return 0

    if args.action == "add":
        recipe = recipe_service.create_recipe(
            {
                "product_name": args.name,
                "yield_count": args.yield_count,
                "labor_time_minutes": args.labor_minutes,
                "notes": args.notes,
            },
            args.materials or [],
        )
        _print_json(recipe_to_dict(recipe))
        return 0

    if args.action == "copy":
        recipe = recipe_service.copy_recipe(args.recipe_id, product_name=args.name)
        _print_json(recipe_to_dict(recipe))
        return 0

    if args.action == "delete":
        recipe_service.delete_recipe(args.recipe_id)
        print(f"Deleted recipe {args.recipe_id}")
        return 0

    print(f"Unknown recipes action: {args.action}")
    return 1


def settings_cmd(args) -> int:
    """Cost settings commands."""
    if args.action == "set":
        settings = cost_settings_service.update_cost_settings(
            args.labor_cost_per_hour,
            args.overhead_cost_per_unit,
            args.target_profit_margin,
        )
    else:
        settings = cost_settings_service.get_cost_settings()
    _print_json(settings_to_dict(settings))
    return 0


def calculate_cmd(args) -> int:
    """Cost one recipe, or every recipe when no ID is given."""
    if args.recipe_id is not None:
        breakdowns = [costing_service.calculate_recipe_cost(args.recipe_id)]
    else:
        breakdowns = costing_service.calculate_all_costs()

    if args.format == "table":
        for breakdown in breakdowns:
            _print_breakdown_table(breakdown)
    elif args.recipe_id is not None:
        _print_json(breakdowns[0].to_dict())
    else:
        _print_json([b.to_dict() for b in breakdowns])
    return 0


def report_cmd(args) -> int:
    """Cost report over all recipes."""
    report = costing_service.generate_cost_report()
    if args.format == "table":
        for breakdown in report.per_recipe:
            _print_breakdown_table(breakdown)
        _print_summary_table(report.summary)
    else:
        _print_json(report.to_dict())
    return 0


COMMANDS = {
    "materials": materials_cmd,
    "recipes": recipes_cmd,
    "settings": settings_cmd,
    "calculate": calculate_cmd,
    "report": report_cmd,
}


# ============================================================================
# Argument parsing
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    # Also accepted after the subcommand; SUPPRESS leaves the top-level value in place
    output = argparse.ArgumentParser(add_help=False)
    output.add_argument(
        "--format", choices=["json", "table"], default=argparse.SUPPRESS, help="Output format"
    )

    parser = argparse.ArgumentParser(
        description=f"{APP_NAME} - materials, recipes and product pricing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src.utils.cost_cli materials list --format table
  python -m src.utils.cost_cli recipes add "Country Loaf" --yield 1 --labor-minutes 180 --material 1:300
  python -m src.utils.cost_cli calculate 1
  python -m src.utils.cost_cli report
""",
    )
    parser.add_argument("--env", choices=["production", "development"], help="Environment")
    parser.add_argument("--database-url", help="SQLAlchemy database URL (overrides --env)")
    parser.add_argument(
        "--format", choices=["json", "table"], default="json", help="Output format"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # materials
    materials = subparsers.add_parser("materials", help="Manage the materials catalog")
    material_actions = materials.add_subparsers(dest="action", required=True)

    m_list = material_actions.add_parser("list", parents=[output], help="List materials")
    m_list.add_argument("--category", choices=MATERIAL_CATEGORIES)

    m_add = material_actions.add_parser("add", help="Add a material")
    m_add.add_argument("name")
    m_add.add_argument("--category", choices=MATERIAL_CATEGORIES, required=True)
    m_add.add_argument("--unit", choices=MATERIAL_UNITS, required=True)
    m_add.add_argument("--price", type=float, required=True, help="Price of one package")
    m_add.add_argument("--package-size", type=float, required=True)

    m_update = material_actions.add_parser("update", help="Update a material")
    m_update.add_argument("material_id", type=int)
    m_update.add_argument("--name")
    m_update.add_argument("--category", choices=MATERIAL_CATEGORIES)
    m_update.add_argument("--unit", choices=MATERIAL_UNITS)
    m_update.add_argument("--price", type=float)
    m_update.add_argument("--package-size", type=float)

    m_delete = material_actions.add_parser("delete", help="Delete an unused material")
    m_delete.add_argument("material_id", type=int)

    # recipes
    recipes = subparsers.add_parser("recipes", help="Manage recipes")
    recipe_actions = recipes.add_subparsers(dest="action", required=True)

    r_list = recipe_actions.add_parser("list", parents=[output], help="List recipes")
    r_list.add_argument("--search", help="Filter by product name")

    r_show = recipe_actions.add_parser("show", help="Show one recipe")
    r_show.add_argument("recipe_id", type=int)

    r_add = recipe_actions.add_parser("add", help="Add a recipe")
    r_add.add_argument("name")
    r_add.add_argument("--yield", dest="yield_count", type=int, required=True)
    r_add.add_argument("--labor-minutes", type=int, required=True)
    r_add.add_argument("--notes")
    r_add.add_argument(
        "--material",
        dest="materials",
        action="append",
        type=_parse_material_line,
        metavar="MATERIAL_ID:QUANTITY",
        help="Material line (repeatable)",
    )

    r_copy = recipe_actions.add_parser("copy", help="Copy a recipe with its materials")
    r_copy.add_argument("recipe_id", type=int)
    r_copy.add_argument("--name", help="Name of the copy")

    r_delete = recipe_actions.add_parser("delete", help="Delete a recipe")
    r_delete.add_argument("recipe_id", type=int)

    # settings
    settings = subparsers.add_parser("settings", help="Show or change cost settings")
    settings_actions = settings.add_subparsers(dest="action", required=True)
    settings_actions.add_parser("show", help="Show cost settings")
    s_set = settings_actions.add_parser("set", help="Replace cost settings")
    s_set.add_argument("--labor-cost-per-hour", type=float, required=True)
    s_set.add_argument("--overhead-cost-per-unit", type=float, required=True)
    s_set.add_argument("--target-profit-margin", type=float, required=True)

    # calculate / report
    calculate = subparsers.add_parser(
        "calculate", parents=[output], help="Cost one recipe or all recipes"
    )
    calculate.add_argument("recipe_id", type=int, nargs="?")

    subparsers.add_parser(
        "report", parents=[output], help="Cost report with summary statistics"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_config(environment=args.env, database_url=args.database_url)
    initialize_app_database()

    try:
        return COMMANDS[args.command](args)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
