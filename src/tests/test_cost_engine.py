"""Tests for the cost calculation engine.

The engine is pure, so these tests build snapshots directly and never touch
a database.
"""

from decimal import Decimal

import pytest

from src.services import cost_engine
from src.services.cost_engine import (
    compute_breakdown,
    compute_components,
    line_cost,
    resolve_lines,
)
from src.services.dto import CostSettingsSnapshot, MaterialSnapshot, RecipeLine
from src.services.exceptions import (
    CostCalculationError,
    InvalidMarginError,
    InvalidYieldError,
    ResolutionError,
)


def _settings(labor="1000", overhead="10", margin="30"):
    return CostSettingsSnapshot(
        labor_cost_per_hour=Decimal(labor),
        overhead_cost_per_unit=Decimal(overhead),
        target_profit_margin=Decimal(margin),
    )


class TestCostComponents:
    """Each cost component in isolation."""

    def test_line_cost_is_price_per_unit_times_quantity(self, flour_snapshot):
        """500 per 1000 g, 300 g used -> 150."""
        line = RecipeLine(material_id=1, quantity=Decimal("300"))
        assert line_cost(line, flour_snapshot) == Decimal("150")

    def test_material_cost_single_line(self, recipe_factory, materials):
        recipe = recipe_factory(lines=[(1, 300)])
        breakdown = compute_breakdown(recipe, materials, _settings(overhead="0", labor="0"))

        assert breakdown.material_cost == Decimal("150.00")
        assert breakdown.material_lines[0].cost == Decimal("150.00")

    def test_labor_cost_from_minutes(self, recipe_factory, materials):
        """1000 per hour for 180 minutes -> 3000."""
        recipe = recipe_factory(yield_count=1, labor=180)
        breakdown = compute_breakdown(recipe, materials, _settings())

        assert breakdown.labor_cost == Decimal("3000.00")

    def test_overhead_cost_scales_with_yield(self, recipe_factory, materials):
        """10 per unit, yield 8 -> 80."""
        recipe = recipe_factory(yield_count=8)
        breakdown = compute_breakdown(recipe, materials, _settings())

        assert breakdown.overhead_cost == Decimal("80.00")

    def test_unit_cost_and_suggested_price(self, recipe_factory, materials, default_settings):
        """Total 213, yield 1, margin 30% -> unit 213, price round(304.28...) = 304."""
        recipe = recipe_factory(yield_count=1, labor=0, lines=[(1, 300), (2, 200)])
        breakdown = compute_breakdown(recipe, materials, default_settings)

        assert breakdown.material_cost == Decimal("203.00")
        assert breakdown.overhead_cost == Decimal("10.00")
        assert breakdown.total_cost == Decimal("213.00")
        assert breakdown.unit_cost == Decimal("213.00")
        assert breakdown.suggested_price == Decimal("304")

    def test_unit_cost_divides_by_yield(self, recipe_factory, materials, default_settings):
        recipe = recipe_factory(yield_count=4, labor=30, lines=[(1, 300)])
        components = compute_components(recipe, materials, default_settings)

        assert components.unit_cost == components.total_cost / 4

    def test_zero_margin_prices_at_unit_cost(self, recipe_factory, materials):
        recipe = recipe_factory(yield_count=2, labor=0, lines=[(1, 300)])
        breakdown = compute_breakdown(recipe, materials, _settings(overhead="0", margin="0"))

        assert breakdown.unit_cost == Decimal("75.00")
        assert breakdown.suggested_price == Decimal("75")


class TestBreakdownShape:
    """Structure and echo fields of the breakdown."""

    def test_identity_fields(self, recipe_factory, materials, default_settings):
        recipe = recipe_factory(recipe_id=42, name="Baguette", yield_count=3)
        breakdown = compute_breakdown(recipe, materials, default_settings)

        assert breakdown.recipe_id == 42
        assert breakdown.recipe_name == "Baguette"
        assert breakdown.yield_count == 3

    def test_profit_margin_echoes_target(self, recipe_factory, materials):
        """The margin is the configured target, not derived from the rounded price."""
        recipe = recipe_factory(yield_count=3, labor=7, lines=[(1, 123)])
        breakdown = compute_breakdown(recipe, materials, _settings(margin="27.5"))

        assert breakdown.profit_margin == Decimal("27.50")

    def test_material_lines_follow_recipe_order(self, recipe_factory, materials, default_settings):
        recipe = recipe_factory(lines=[(2, 200), (1, 300)])
        breakdown = compute_breakdown(recipe, materials, default_settings)

        assert [line.material_id for line in breakdown.material_lines] == [2, 1]
        assert [line.material_name for line in breakdown.material_lines] == [
            "Granulated Sugar",
            "Bread Flour",
        ]
        assert breakdown.material_lines[0].cost == Decimal("53.00")
        assert breakdown.material_lines[0].unit == "gram"

    def test_lines_are_resolved_once(self, recipe_factory, materials, default_settings, monkeypatch):
        calls = []

        def counting_resolve(recipe, materials):
            calls.append(recipe.id)
            return resolve_lines(recipe, materials)

        monkeypatch.setattr(cost_engine, "resolve_lines", counting_resolve)
        recipe = recipe_factory(lines=[(2, 200), (1, 300)])

        breakdown = compute_breakdown(recipe, materials, default_settings)

        assert len(calls) == 1
        assert [line.cost for line in breakdown.material_lines] == [
            Decimal("53.00"),
            Decimal("150.00"),
        ]

    def test_empty_recipe_costs_labor_and_overhead_only(
        self, recipe_factory, materials, default_settings
    ):
        recipe = recipe_factory(yield_count=5, labor=60, lines=[])
        breakdown = compute_breakdown(recipe, materials, default_settings)

        assert breakdown.material_cost == Decimal("0.00")
        assert breakdown.material_lines == ()
        assert breakdown.total_cost == breakdown.labor_cost + breakdown.overhead_cost

    def test_unused_materials_are_ignored(self, recipe_factory, flour_snapshot, default_settings):
        extra = MaterialSnapshot(
            id=99, name="Unused", unit="piece", unit_price=Decimal("1"), package_size=Decimal("1")
        )
        recipe = recipe_factory(lines=[(1, 300)])
        breakdown = compute_breakdown(recipe, {1: flour_snapshot, 99: extra}, default_settings)

        assert len(breakdown.material_lines) == 1

    def test_to_dict_uses_camel_case(self, recipe_factory, materials, default_settings):
        recipe = recipe_factory(yield_count=1, lines=[(1, 300), (2, 200)])
        data = compute_breakdown(recipe, materials, default_settings).to_dict()

        assert data["recipeId"] == 1
        assert data["recipeName"] == "Test Bread"
        assert data["yield"] == 1
        assert data["materialCost"] == 203.0
        assert data["suggestedPrice"] == 304
        assert isinstance(data["suggestedPrice"], int)
        assert data["profitMargin"] == 30.0
        assert data["materialLines"][0] == {
            "materialId": 1,
            "materialName": "Bread Flour",
            "quantity": 300.0,
            "unit": "gram",
            "cost": 150.0,
        }


class TestRounding:
    """Rounding happens once, ROUND_HALF_UP."""

    def test_currency_rounds_half_up(self, recipe_factory):
        """1 per 200 units, 1 unit used -> 0.005 -> 0.01 (half-even would give 0.00)."""
        material = MaterialSnapshot(
            id=1, name="Yeast", unit="gram", unit_price=Decimal("1"), package_size=Decimal("200")
        )
        recipe = recipe_factory(lines=[(1, 1)])
        breakdown = compute_breakdown(recipe, {1: material}, _settings("0", "0", "0"))

        assert breakdown.material_cost == Decimal("0.01")

    def test_suggested_price_rounds_half_up(self, recipe_factory):
        """Unit cost 12.5 at 0% margin -> 13."""
        material = MaterialSnapshot(
            id=1, name="Cream", unit="milliliter", unit_price=Decimal("25"), package_size=Decimal("2")
        )
        recipe = recipe_factory(lines=[(1, 1)])
        breakdown = compute_breakdown(recipe, {1: material}, _settings("0", "0", "0"))

        assert breakdown.unit_cost == Decimal("12.50")
        assert breakdown.suggested_price == Decimal("13")

    def test_total_within_a_cent_of_rounded_parts(self, recipe_factory):
        material = MaterialSnapshot(
            id=1, name="Cocoa", unit="gram", unit_price=Decimal("100"), package_size=Decimal("3")
        )
        recipe = recipe_factory(yield_count=3, labor=7, lines=[(1, 1)])
        breakdown = compute_breakdown(recipe, {1: material}, _settings("1000", "10", "30"))

        parts = breakdown.material_cost + breakdown.labor_cost + breakdown.overhead_cost
        assert abs(breakdown.total_cost - parts) <= Decimal("0.01")

    def test_float_inputs_do_not_leak_binary_noise(self, recipe_factory):
        material = MaterialSnapshot(
            id=1, name="Salt", unit="gram", unit_price=Decimal("0.1"), package_size=Decimal("1")
        )
        recipe = recipe_factory(lines=[(1, 3)])
        breakdown = compute_breakdown(recipe, {1: material}, _settings("0", "0", "0"))

        assert breakdown.material_cost == Decimal("0.30")

    def test_compute_is_idempotent(self, recipe_factory, materials, default_settings):
        recipe = recipe_factory(yield_count=7, labor=95, lines=[(1, 333), (2, 17)])

        first = compute_breakdown(recipe, materials, default_settings)
        second = compute_breakdown(recipe, materials, default_settings)

        assert first == second


class TestEngineErrors:
    """Inputs the engine refuses."""

    def test_missing_material_raises_resolution_error(self, recipe_factory, flour_snapshot):
        recipe = recipe_factory(recipe_id=7, lines=[(1, 300), (5, 10)])

        with pytest.raises(ResolutionError) as exc:
            compute_breakdown(recipe, {1: flour_snapshot}, _settings())

        assert exc.value.recipe_id == 7
        assert exc.value.material_id == 5

    def test_resolve_lines_pairs_in_order(self, recipe_factory, materials):
        recipe = recipe_factory(lines=[(2, 1), (1, 2)])
        pairs = resolve_lines(recipe, materials)

        assert [material.id for _, material in pairs] == [2, 1]

    @pytest.mark.parametrize("yield_count", [0, -2])
    def test_non_positive_yield_raises(self, recipe_factory, materials, yield_count):
        recipe = recipe_factory(yield_count=yield_count)

        with pytest.raises(InvalidYieldError) as exc:
            compute_breakdown(recipe, materials, _settings())

        assert exc.value.yield_count == yield_count

    @pytest.mark.parametrize("margin", ["100", "150", "-1", "NaN", "Infinity"])
    def test_margin_outside_range_raises(self, recipe_factory, materials, margin):
        recipe = recipe_factory()

        with pytest.raises(InvalidMarginError):
            compute_breakdown(recipe, materials, _settings(margin=margin))

    def test_margin_just_below_hundred_is_accepted(self, recipe_factory, materials):
        recipe = recipe_factory(lines=[(1, 300)])
        breakdown = compute_breakdown(recipe, materials, _settings("0", "0", "99.9"))

        assert breakdown.suggested_price == Decimal("150000")

    def test_errors_share_a_base_class(self):
        assert issubclass(ResolutionError, CostCalculationError)
        assert issubclass(InvalidYieldError, CostCalculationError)
        assert issubclass(InvalidMarginError, CostCalculationError)

    def test_zero_package_size_is_rejected(self):
        material = MaterialSnapshot(
            id=1, name="Broken", unit="gram", unit_price=Decimal("1"), package_size=Decimal("0")
        )
        line = RecipeLine(material_id=1, quantity=Decimal("1"))

        with pytest.raises(CostCalculationError):
            line_cost(line, material)
