"""
Cost settings model.

Exactly one row (id = 1) holds the parameters the cost calculation needs:
labor cost per hour, overhead per produced unit and the target profit margin.
"""

from sqlalchemy import Column, Integer, Float, DateTime, CheckConstraint

from .base import Base
from src.utils.datetime_utils import utc_now


class CostSettings(Base):
    """
    Singleton cost settings row.

    Attributes:
        id: Always 1 (enforced by a CHECK constraint)
        labor_cost_per_hour: Wage cost of one hour of labor
        overhead_cost_per_unit: Indirect cost (utilities etc.) per finished unit
        target_profit_margin: Desired profit share of the selling price, percent in [0, 100)
        updated_at: Last modification timestamp
    """

    __tablename__ = "cost_settings"

    id = Column(Integer, primary_key=True, autoincrement=False, default=1)
    labor_cost_per_hour = Column(Float, nullable=False)
    overhead_cost_per_unit = Column(Float, nullable=False)
    target_profit_margin = Column(Float, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        CheckConstraint("id = 1", name="ck_cost_settings_singleton"),
        CheckConstraint(
            "target_profit_margin >= 0 AND target_profit_margin < 100",
            name="ck_cost_settings_margin_range",
        ),
    )

    def __repr__(self) -> str:
        """String representation of cost settings."""
        return (
            f"CostSettings(labor_cost_per_hour={self.labor_cost_per_hour}, "
            f"overhead_cost_per_unit={self.overhead_cost_per_unit}, "
            f"target_profit_margin={self.target_profit_margin})"
        )
