"""Pytest configuration and fixtures for service layer tests."""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from src.models.base import Base
from src.services.dto import CostSettingsSnapshot, MaterialSnapshot, RecipeLine, RecipeSnapshot


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables and the default cost settings row
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    from src.models import material, recipe, cost_settings  # noqa: F401
    from src.services.cost_settings_service import ensure_cost_settings

    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    session = Session()
    ensure_cost_settings(session=session)
    session.commit()
    Session.remove()

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    # Restore original session factory
    db_module.get_session_factory = original_get_session


@pytest.fixture(scope="function")
def sample_flour(test_db):
    """Provide a sample material: 1000 g of bread flour for 500."""
    from src.services import material_service

    return material_service.create_material(
        name="Bread Flour",
        category="flour",
        unit="gram",
        unit_price=500,
        package_size=1000,
    )


@pytest.fixture(scope="function")
def sample_butter(test_db):
    """Provide a sample material: 450 g of butter for 900."""
    from src.services import material_service

    return material_service.create_material(
        name="Unsalted Butter",
        category="fat",
        unit="gram",
        unit_price=900,
        package_size=450,
    )


@pytest.fixture(scope="function")
def sample_recipe(test_db, sample_flour, sample_butter):
    """Provide a sample recipe using flour (300 g) and butter (45 g)."""
    from src.services import recipe_service

    return recipe_service.create_recipe(
        {
            "product_name": "Country Loaf",
            "yield_count": 1,
            "labor_time_minutes": 180,
        },
        [
            {"material_id": sample_flour.id, "quantity": 300},
            {"material_id": sample_butter.id, "quantity": 45},
        ],
    )


# ============================================================================
# Engine fixtures (no database)
# ============================================================================


@pytest.fixture
def flour_snapshot():
    """Flour priced 500 per 1000 g."""
    return MaterialSnapshot(
        id=1,
        name="Bread Flour",
        unit="gram",
        unit_price=Decimal("500"),
        package_size=Decimal("1000"),
        category="flour",
    )


@pytest.fixture
def sugar_snapshot():
    """Sugar priced 265 per 1000 g."""
    return MaterialSnapshot(
        id=2,
        name="Granulated Sugar",
        unit="gram",
        unit_price=Decimal("265"),
        package_size=Decimal("1000"),
        category="sugar",
    )


@pytest.fixture
def materials(flour_snapshot, sugar_snapshot):
    """Materials keyed by ID, as the engine expects."""
    return {m.id: m for m in (flour_snapshot, sugar_snapshot)}


@pytest.fixture
def default_settings():
    """Labor 1000/hour, overhead 10/unit, margin 30%."""
    return CostSettingsSnapshot(
        labor_cost_per_hour=Decimal("1000"),
        overhead_cost_per_unit=Decimal("10"),
        target_profit_margin=Decimal("30"),
    )


def make_recipe(recipe_id=1, name="Test Bread", yield_count=1, labor=0, lines=()):
    """Build a RecipeSnapshot from (material_id, quantity) pairs."""
    return RecipeSnapshot(
        id=recipe_id,
        product_name=name,
        yield_count=yield_count,
        labor_time_minutes=labor,
        lines=tuple(RecipeLine(material_id=m, quantity=Decimal(str(q))) for m, q in lines),
    )


@pytest.fixture
def recipe_factory():
    """Factory for RecipeSnapshot objects (see make_recipe)."""
    return make_recipe
