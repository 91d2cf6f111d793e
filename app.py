import logging

import altair as alt
import pandas as pd
import streamlit as st

from footprint import (
    CATEGORIES,
    CHART_HEIGHT,
    CHART_WIDTH,
    PIE_OUTER_RADIUS,
    CalculatorState,
    breakdown_dataframe,
    category_color,
    category_label,
    nice_number,
)
from report_pdf import create_report_pdf

logger = logging.getLogger(__name__)

STATE_KEY = "carbon_footprint_state"


def input_key(category: str) -> str:
    return f"activity_{category}"


def factor_key(category: str) -> str:
    return f"factor_{category}"


# --------------------------------------------------------------------
# SESSION STATE & CALLBACKS
# --------------------------------------------------------------------
def get_state() -> CalculatorState:
    """Calculator state for this session, created (and widget keys seeded) on first run."""
    if STATE_KEY not in st.session_state:
        state = CalculatorState()
        st.session_state[STATE_KEY] = state
        for c in CATEGORIES:
            st.session_state[input_key(c)] = state.inputs[c]
            st.session_state[factor_key(c)] = state.factors[c]
    return st.session_state[STATE_KEY]


def on_input_change(category: str):
    state = get_state()
    key = input_key(category)
    st.session_state[key] = state.set_input(category, st.session_state.get(key))


def on_factor_change(category: str):
    state = get_state()
    key = factor_key(category)
    st.session_state[key] = state.set_factor(category, st.session_state.get(key))


def on_reset_factors():
    state = get_state()
    state.reset_factors()
    for c in CATEGORIES:
        st.session_state[factor_key(c)] = state.factors[c]
    logger.debug("Emission factors reset to defaults")


# --------------------------------------------------------------------
# CHART
# --------------------------------------------------------------------
def build_pie_chart(state: CalculatorState) -> alt.Chart:
    labels = [category_label(c) for c in CATEGORIES]
    chart_df = pd.DataFrame(
        {
            "Category": labels,
            "Emissions (t CO₂e)": [state.report.emissions_by_category[c] for c in CATEGORIES],
            "Order": list(range(len(CATEGORIES))),
        }
    )
    return (
        alt.Chart(chart_df)
        .mark_arc(outerRadius=PIE_OUTER_RADIUS)
        .encode(
            theta=alt.Theta("Emissions (t CO₂e):Q"),
            color=alt.Color(
                "Category:N",
                sort=labels,
                scale=alt.Scale(domain=labels, range=[category_color(i) for i in range(len(labels))]),
            ),
            order=alt.Order("Order:Q"),
            tooltip=["Category", alt.Tooltip("Emissions (t CO₂e):Q", format=".2f")],
        )
        .properties(width=CHART_WIDTH, height=CHART_HEIGHT)
    )


# --------------------------------------------------------------------
# STREAMLIT APP
# --------------------------------------------------------------------
def main():
    st.set_page_config(
        page_title="Carbon Footprint Calculator",
        page_icon="🌱",
        layout="centered",
    )

    st.title("Carbon Footprint Calculator")

    state = get_state()

    for c in CATEGORIES:
        st.number_input(
            category_label(c),
            step=1.0,
            key=input_key(c),
            on_change=on_input_change,
            args=(c,),
        )

    st.subheader("Custom Emission Factors")
    for c in CATEGORIES:
        st.number_input(
            category_label(c),
            step=0.1,
            key=factor_key(c),
            on_change=on_factor_change,
            args=(c,),
        )
    st.button("↺ Reset emission factors", on_click=on_reset_factors)

    report = state.report
    st.subheader("Carbon Footprint Report")
    st.markdown(f"Total Emissions: {nice_number(report.total_emissions)} tons")
    for c in CATEGORIES:
        st.markdown(f"{category_label(c)}: {nice_number(report.emissions_by_category[c])} tons")

    st.dataframe(breakdown_dataframe(state), use_container_width=True, hide_index=True)

    st.altair_chart(build_pie_chart(state), use_container_width=False)

    st.download_button(
        label="📄 Download report (PDF)",
        data=create_report_pdf(state),
        file_name="carbon_footprint_report.pdf",
        mime="application/pdf",
    )


if __name__ == "__main__":
    main()
