import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import pandas as pd

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------
# CONSTANTS
# --------------------------------------------------------------------
# Declared order drives field layout, report rows and slice colours.
CATEGORIES = (
    "coalProduction",
    "energyConsumption",
    "transportationEmissions",
    "employeeCommuting",
    "supplyChainEmissions",
)

# t CO₂e per unit of activity
DEFAULT_EMISSION_FACTORS = {
    "coalProduction": 1.2,
    "energyConsumption": 0.8,
    "transportationEmissions": 1.5,
    "employeeCommuting": 0.2,
    "supplyChainEmissions": 1.1,
}

COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#FF4563"]

CHART_WIDTH = 400
CHART_HEIGHT = 300
PIE_OUTER_RADIUS = 100


# --------------------------------------------------------------------
# HELPERS
# --------------------------------------------------------------------
def category_label(category: str) -> str:
    """'coalProduction' -> 'coal Production'."""
    return re.sub(r"([A-Z])", r" \1", category)


def category_color(index: int) -> str:
    return COLORS[index % len(COLORS)]


def coerce_amount(value: Any) -> float:
    """
    Turn raw field input into a stored amount.

    Empty, non-numeric and non-finite values become 0; negatives are
    clamped to 0.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Non-numeric value %r coerced to 0", value)
        return 0.0
    if not math.isfinite(number):
        logger.debug("Non-finite value %r coerced to 0", value)
        return 0.0
    if number <= 0:
        if number < 0:
            logger.debug("Negative value %r clamped to 0", value)
        return 0.0
    return number


def nice_number(x: float, ndigits: int = 2) -> str:
    return f"{x:.{ndigits}f}"


# --------------------------------------------------------------------
# CORE CALCULATION
# --------------------------------------------------------------------
@dataclass(frozen=True)
class Report:
    total_emissions: float
    emissions_by_category: Dict[str, float]

    def shares(self) -> Dict[str, float]:
        """Percentage of the total per category (all 0 when the total is 0)."""
        if self.total_emissions <= 0:
            return {c: 0.0 for c in self.emissions_by_category}
        return {
            c: value / self.total_emissions * 100
            for c, value in self.emissions_by_category.items()
        }

    def dominant_category(self) -> Optional[str]:
        if self.total_emissions <= 0:
            return None
        return max(self.emissions_by_category, key=self.emissions_by_category.get)


def calculate_footprint(inputs: Mapping[str, float], factors: Mapping[str, float]) -> Report:
    """
    Emissions per category = activity × factor; total = sum of categories.

    Missing categories count as 0.
    """
    emissions_by_category = {
        c: inputs.get(c, 0.0) * factors.get(c, 0.0) for c in CATEGORIES
    }
    total_emissions = sum(emissions_by_category.values())
    return Report(total_emissions=total_emissions, emissions_by_category=emissions_by_category)


# --------------------------------------------------------------------
# WIDGET STATE
# --------------------------------------------------------------------
@dataclass
class CalculatorState:
    """Activity inputs and emission factors for one session, plus the derived report."""

    inputs: Dict[str, float] = field(default_factory=lambda: {c: 0.0 for c in CATEGORIES})
    factors: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_EMISSION_FACTORS))
    report: Optional[Report] = None

    def __post_init__(self):
        self.recalculate()

    def recalculate(self) -> Report:
        self.report = calculate_footprint(self.inputs, self.factors)
        logger.debug("Recalculated footprint: total=%.4f", self.report.total_emissions)
        return self.report

    def set_input(self, category: str, value: Any) -> float:
        """Store an activity amount for one category; returns the stored value."""
        if category not in self.inputs:
            raise KeyError(category)
        stored = coerce_amount(value)
        self.inputs[category] = stored
        self.recalculate()
        return stored

    def set_factor(self, category: str, value: Any) -> float:
        """Store an emission factor for one category; returns the stored value."""
        if category not in self.factors:
            raise KeyError(category)
        stored = coerce_amount(value)
        self.factors[category] = stored
        self.recalculate()
        return stored

    def reset_factors(self) -> Report:
        self.factors = dict(DEFAULT_EMISSION_FACTORS)
        return self.recalculate()


def breakdown_dataframe(state: CalculatorState) -> pd.DataFrame:
    report = state.report
    shares = report.shares()
    data_rows = [
        {
            "Category": category_label(c),
            "Activity data": state.inputs[c],
            "Emission factor": state.factors[c],
            "Emissions (t CO₂e)": report.emissions_by_category[c],
            "Share (%)": shares[c],
        }
        for c in CATEGORIES
    ]
    df_breakdown = pd.DataFrame(data_rows)
    df_breakdown["Emissions (t CO₂e)"] = df_breakdown["Emissions (t CO₂e)"].round(2)
    df_breakdown["Share (%)"] = df_breakdown["Share (%)"].round(1)
    return df_breakdown
