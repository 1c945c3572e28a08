"""Tests for the costing service (database-backed cost calculation)."""

from decimal import Decimal

import pytest

from src.services import (
    cost_settings_service,
    costing_service,
    material_service,
    recipe_service,
)
from src.services.exceptions import MaterialNotFound, RecipeNotFound, ResolutionError


@pytest.fixture
def bakery(test_db):
    """Two materials and two recipes.

    - Country Loaf: 300 g flour, 200 g sugar, no labor, yield 1 -> unit cost 213
    - Butter Cookies: 100 g flour, 45 g butter, 30 min labor, yield 10
    """
    flour = material_service.create_material("Bread Flour", "flour", "gram", 500, 1000)
    sugar = material_service.create_material("Granulated Sugar", "sugar", "gram", 265, 1000)
    butter = material_service.create_material("Unsalted Butter", "fat", "gram", 900, 450)

    loaf = recipe_service.create_recipe(
        {"product_name": "Country Loaf", "yield_count": 1, "labor_time_minutes": 0},
        [
            {"material_id": flour.id, "quantity": 300},
            {"material_id": sugar.id, "quantity": 200},
        ],
    )
    cookies = recipe_service.create_recipe(
        {"product_name": "Butter Cookies", "yield_count": 10, "labor_time_minutes": 30},
        [
            {"material_id": flour.id, "quantity": 100},
            {"material_id": butter.id, "quantity": 45},
        ],
    )
    return {"flour": flour, "sugar": sugar, "butter": butter, "loaf": loaf, "cookies": cookies}


class TestCalculateRecipeCost:
    """Tests for calculate_recipe_cost()."""

    def test_breakdown_from_stored_data(self, bakery):
        breakdown = costing_service.calculate_recipe_cost(bakery["loaf"].id)

        assert breakdown.recipe_name == "Country Loaf"
        assert breakdown.material_cost == Decimal("203.00")
        assert breakdown.labor_cost == Decimal("0.00")
        assert breakdown.overhead_cost == Decimal("10.00")
        assert breakdown.total_cost == Decimal("213.00")
        assert breakdown.unit_cost == Decimal("213.00")
        assert breakdown.suggested_price == Decimal("304")
        assert breakdown.profit_margin == Decimal("30.00")

    def test_multi_unit_recipe(self, bakery):
        breakdown = costing_service.calculate_recipe_cost(bakery["cookies"].id)

        # 50 flour + 90 butter
        assert breakdown.material_cost == Decimal("140.00")
        assert breakdown.labor_cost == Decimal("500.00")
        assert breakdown.overhead_cost == Decimal("100.00")
        assert breakdown.total_cost == Decimal("740.00")
        assert breakdown.unit_cost == Decimal("74.00")
        # 74 / 0.7 = 105.71...
        assert breakdown.suggested_price == Decimal("106")

    def test_reflects_updated_settings(self, bakery):
        cost_settings_service.update_cost_settings(2000, 0, 50)

        breakdown = costing_service.calculate_recipe_cost(bakery["cookies"].id)

        assert breakdown.labor_cost == Decimal("1000.00")
        assert breakdown.overhead_cost == Decimal("0.00")
        assert breakdown.unit_cost == Decimal("114.00")
        assert breakdown.suggested_price == Decimal("228")
        assert breakdown.profit_margin == Decimal("50.00")

    def test_reflects_updated_material_price(self, bakery):
        material_service.update_material(bakery["sugar"].id, unit_price=0)

        breakdown = costing_service.calculate_recipe_cost(bakery["loaf"].id)

        assert breakdown.material_cost == Decimal("150.00")

    def test_missing_recipe(self, test_db):
        with pytest.raises(RecipeNotFound):
            costing_service.calculate_recipe_cost(999)

    def test_dangling_material_raises_resolution_error(self, bakery, monkeypatch):
        def _missing(material_ids, session=None):
            raise MaterialNotFound([bakery["sugar"].id])

        monkeypatch.setattr(costing_service, "resolve_materials", _missing)

        with pytest.raises(ResolutionError) as exc:
            costing_service.calculate_recipe_cost(bakery["loaf"].id)

        assert exc.value.recipe_id == bakery["loaf"].id
        assert exc.value.material_id == bakery["sugar"].id


class TestCostReport:
    """Tests for calculate_all_costs() and generate_cost_report()."""

    def test_all_costs_ordered_by_name(self, bakery):
        breakdowns = costing_service.calculate_all_costs()

        assert [b.recipe_name for b in breakdowns] == ["Butter Cookies", "Country Loaf"]

    def test_report_summary(self, bakery):
        report = costing_service.generate_cost_report()

        assert report.summary.count == 2
        # (74.00 + 213.00) / 2
        assert report.summary.average_unit_cost == Decimal("143.50")
        assert report.summary.average_profit_margin == Decimal("30.00")
        # Shared margin: both extremes are the first recipe in report order
        assert report.summary.highest.recipe_name == "Butter Cookies"
        assert report.summary.lowest.recipe_name == "Butter Cookies"

    def test_report_to_dict(self, bakery):
        data = costing_service.generate_cost_report().to_dict()

        assert set(data) == {"perRecipe", "summary"}
        assert len(data["perRecipe"]) == 2
        assert data["summary"]["averageUnitCost"] == 143.5
        assert data["summary"]["highest"]["recipeName"] == "Butter Cookies"

    def test_empty_report(self, test_db):
        report = costing_service.generate_cost_report()

        assert report.per_recipe == ()
        assert report.summary.count == 0
        assert report.summary.highest is None
        assert costing_service.calculate_all_costs() == []

    def test_recipe_without_materials(self, test_db):
        recipe_service.create_recipe(
            {"product_name": "Water Rolls", "yield_count": 4, "labor_time_minutes": 60}
        )

        breakdown = costing_service.calculate_all_costs()[0]

        assert breakdown.material_cost == Decimal("0.00")
        assert breakdown.total_cost == Decimal("1040.00")
