import math

import pytest

from footprint import (
    CATEGORIES,
    DEFAULT_EMISSION_FACTORS,
    CalculatorState,
    breakdown_dataframe,
    calculate_footprint,
    category_color,
    category_label,
    coerce_amount,
    nice_number,
)


def test_category_label_inserts_space_before_capitals():
    assert category_label("coalProduction") == "coal Production"
    assert category_label("supplyChainEmissions") == "supply Chain Emissions"


def test_colors_cycle_by_index():
    assert category_color(0) == "#0088FE"
    assert category_color(4) == "#FF4563"
    assert category_color(5) == category_color(0)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12.5", 12.5),
        (3, 3.0),
        ("-5", 0.0),
        (-0.1, 0.0),
        ("", 0.0),
        (None, 0.0),
        ("abc", 0.0),
        (float("nan"), 0.0),
        ("inf", 0.0),
        ("-0", 0.0),
        (-0.0, 0.0),
    ],
)
def test_coerce_amount(raw, expected):
    assert coerce_amount(raw) == expected


@pytest.mark.parametrize("raw", ["-0", "-0.0", -0.0])
def test_negative_zero_is_stored_as_positive_zero(raw):
    state = CalculatorState()

    stored_input = state.set_input("coalProduction", raw)
    stored_factor = state.set_factor("energyConsumption", raw)

    assert math.copysign(1.0, stored_input) == 1.0
    assert math.copysign(1.0, stored_factor) == 1.0
    assert nice_number(stored_input) == "0.00"
    assert nice_number(state.report.emissions_by_category["coalProduction"]) == "0.00"
    assert nice_number(state.report.total_emissions) == "0.00"


def test_initial_report_is_zero_with_default_factors():
    state = CalculatorState()

    assert state.factors == DEFAULT_EMISSION_FACTORS
    assert state.report is not None
    assert state.report.total_emissions == 0.0
    assert all(v == 0.0 for v in state.report.emissions_by_category.values())


def test_coal_only_scenario():
    state = CalculatorState()
    state.set_input("coalProduction", 10)

    report = state.report
    assert f"{report.total_emissions:.2f}" == "12.00"
    assert report.emissions_by_category["coalProduction"] == pytest.approx(12.0)
    for c in CATEGORIES[1:]:
        assert report.emissions_by_category[c] == 0.0


def test_all_ones_with_default_factors():
    report = calculate_footprint({c: 1 for c in CATEGORIES}, DEFAULT_EMISSION_FACTORS)
    assert f"{report.total_emissions:.2f}" == "4.80"


def test_total_matches_weighted_sum():
    inputs = {c: float(i + 1) * 3.7 for i, c in enumerate(CATEGORIES)}
    factors = {c: 0.25 * (i + 2) for i, c in enumerate(CATEGORIES)}

    report = calculate_footprint(inputs, factors)

    expected = sum(inputs[c] * factors[c] for c in CATEGORIES)
    assert report.total_emissions == pytest.approx(expected)
    assert report.total_emissions == pytest.approx(sum(report.emissions_by_category.values()))


def test_missing_categories_count_as_zero():
    report = calculate_footprint({"energyConsumption": 5}, DEFAULT_EMISSION_FACTORS)
    assert report.total_emissions == pytest.approx(4.0)
    assert report.emissions_by_category["coalProduction"] == 0.0


@pytest.mark.parametrize("category", CATEGORIES)
def test_negative_entry_is_stored_as_zero(category):
    state = CalculatorState()
    state.set_input(category, 2)

    assert state.set_input(category, "-5") == 0.0
    assert state.inputs[category] == 0.0
    assert state.report.emissions_by_category[category] == 0.0

    assert state.set_factor(category, "-5") == 0.0
    assert state.factors[category] == 0.0


def test_single_edit_only_changes_its_category():
    state = CalculatorState()
    for c in CATEGORIES:
        state.set_input(c, 2)
    before = dict(state.report.emissions_by_category)

    state.set_input("employeeCommuting", 50)

    after = state.report.emissions_by_category
    for c in CATEGORIES:
        if c == "employeeCommuting":
            assert after[c] == pytest.approx(10.0)
        else:
            assert after[c] == before[c]
    assert state.report.total_emissions == pytest.approx(sum(after.values()))


def test_factor_edit_recalculates():
    state = CalculatorState()
    state.set_input("transportationEmissions", 4)
    state.set_factor("transportationEmissions", "2.5")

    assert state.report.total_emissions == pytest.approx(10.0)


def test_reset_factors_restores_defaults():
    state = CalculatorState()
    state.set_input("supplyChainEmissions", 10)
    state.set_factor("supplyChainEmissions", 9)

    state.reset_factors()

    assert state.factors == DEFAULT_EMISSION_FACTORS
    assert state.factors is not DEFAULT_EMISSION_FACTORS
    assert state.report.total_emissions == pytest.approx(11.0)


def test_unknown_category_raises():
    state = CalculatorState()
    with pytest.raises(KeyError):
        state.set_input("methaneLeaks", 1)
    with pytest.raises(KeyError):
        state.set_factor("methaneLeaks", 1)


def test_shares_and_dominant_category():
    state = CalculatorState()
    assert state.report.dominant_category() is None
    assert all(v == 0.0 for v in state.report.shares().values())

    state.set_input("coalProduction", 10)
    state.set_input("energyConsumption", 10)

    shares = state.report.shares()
    assert sum(shares.values()) == pytest.approx(100.0)
    assert shares["coalProduction"] == pytest.approx(60.0)
    assert state.report.dominant_category() == "coalProduction"


def test_breakdown_dataframe_rows_follow_category_order():
    state = CalculatorState()
    state.set_input("coalProduction", 10)

    df = breakdown_dataframe(state)

    assert list(df["Category"]) == [category_label(c) for c in CATEGORIES]
    assert df.loc[0, "Emissions (t CO₂e)"] == pytest.approx(12.0)
    assert df.loc[0, "Share (%)"] == pytest.approx(100.0)
