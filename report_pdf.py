import io
import logging

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from footprint import (
    CATEGORIES,
    CalculatorState,
    breakdown_dataframe,
    category_color,
    category_label,
    nice_number,
)

logger = logging.getLogger(__name__)


def _report_header(story, styles):
    story.append(Paragraph("Carbon Footprint Report", styles["Title"]))
    story.append(Spacer(1, 0.4 * cm))
    story.append(
        Paragraph(
            "Emissions for each category are computed as activity data multiplied "
            "by the emission factor entered in the calculator. The total is the "
            "sum of all categories.",
            styles["Normal"],
        )
    )
    story.append(Spacer(1, 0.5 * cm))


def _summary_section(story, styles, state):
    report = state.report
    normal = styles["Normal"]

    story.append(Paragraph("Summary", styles["Heading2"]))
    story.append(
        Paragraph(
            f"Total Emissions: <b>{nice_number(report.total_emissions)}</b> tons",
            normal,
        )
    )
    for c in CATEGORIES:
        story.append(
            Paragraph(
                f"• {category_label(c)}: {nice_number(report.emissions_by_category[c])} tons",
                normal,
            )
        )
    story.append(Spacer(1, 0.4 * cm))


def _breakdown_section(story, styles, state):
    story.append(Paragraph("Breakdown by category", styles["Heading2"]))

    df_display = breakdown_dataframe(state)
    table_cols = list(df_display.columns)
    rows = [
        [
            row["Category"],
            nice_number(row["Activity data"]),
            nice_number(row["Emission factor"]),
            nice_number(row["Emissions (t CO₂e)"]),
            nice_number(row["Share (%)"], 1),
        ]
        for _, row in df_display.iterrows()
    ]
    table = Table([table_cols] + rows, colWidths=[5 * cm, 3 * cm, 3 * cm, 3.5 * cm, 2.5 * cm])

    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
    ]
    # colour swatch in the first column matches the pie chart
    for index in range(len(CATEGORIES)):
        style.append(("LINEBEFORE", (0, index + 1), (0, index + 1), 4, colors.HexColor(category_color(index))))
    table.setStyle(TableStyle(style))
    story.append(table)
    story.append(Spacer(1, 0.3 * cm))

    dominant = state.report.dominant_category()
    if dominant is None:
        text = "All categories are currently zero, so there is no dominant emission source."
    else:
        share_pct = state.report.shares()[dominant]
        text = (
            f"The largest contributor is <b>{category_label(dominant)}</b> with "
            f"{nice_number(state.report.emissions_by_category[dominant])} tons "
            f"({nice_number(share_pct)}% of total emissions)."
        )
    story.append(Paragraph(text, styles["Normal"]))


def create_report_pdf(state: CalculatorState) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2 * cm,
        leftMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
    )
    styles = getSampleStyleSheet()
    story = []

    _report_header(story, styles)
    _summary_section(story, styles, state)
    _breakdown_section(story, styles, state)

    doc.build(story)
    buffer.seek(0)
    pdf_bytes = buffer.getvalue()
    logger.debug("Rendered PDF report (%d bytes)", len(pdf_bytes))
    return pdf_bytes
