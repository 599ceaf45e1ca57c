"""
PDF rendition of a dataset analysis: summary, health score, issues, crop
frequencies, insights and anomalies.
"""

from pathlib import Path
from typing import Sequence, Union

from fpdf import FPDF
from fpdf.fonts import FontFace

from farmadvisor.analysis.anomalies import summarize_anomalies
from farmadvisor.analysis.pipeline import DatasetAnalysis

ACCENT = (16, 185, 129)
TEXT_COLOR = (40, 40, 40)
PRIORITY_COLORS = {
    "high": (220, 38, 38),
    "medium": (217, 119, 6),
    "low": (16, 185, 129),
}
MAX_ANOMALY_ROWS = 50

HEADINGS = FontFace(emphasis="BOLD", color=(255, 255, 255), fill_color=ACCENT)


def _latin1(text) -> str:
    # core PDF fonts only cover latin-1
    return str(text).replace("σ", " sd").encode("latin-1", "replace").decode("latin-1")


class ReportPDF(FPDF):
    """A4 report page with the dataset fingerprint in the running header."""

    def __init__(self, fingerprint: str = ""):
        super().__init__()
        self.fingerprint = fingerprint
        self.set_auto_page_break(auto=True, margin=18)

    def header(self):
        self.set_font("Helvetica", "B", 9)
        self.set_text_color(*ACCENT)
        self.cell(95, 8, "Soil Dataset Report")
        self.set_font("Helvetica", "", 8)
        self.set_text_color(120, 120, 120)
        self.cell(0, 8, f"dataset {self.fingerprint[:12]}", align="R",
                  new_x="LMARGIN", new_y="NEXT")
        self.ln(2)

    def footer(self):
        self.set_y(-12)
        self.set_font("Helvetica", "", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 8, f"{self.page_no()}/{{nb}}", align="C")

    def section(self, title: str):
        self.ln(2)
        self.set_font("Helvetica", "B", 14)
        self.set_text_color(*TEXT_COLOR)
        self.cell(0, 10, _latin1(title), new_x="LMARGIN", new_y="NEXT")

    def paragraph(self, text: str, color=TEXT_COLOR):
        self.set_font("Helvetica", "", 10)
        self.set_text_color(*color)
        self.multi_cell(0, 5.5, _latin1(text), new_x="LMARGIN", new_y="NEXT")
        self.ln(1)

    def grid(self, headings: Sequence[str], rows, col_widths=None):
        """Bordered table whose first row is the heading row."""
        self.set_font("Helvetica", "", 9)
        self.set_text_color(*TEXT_COLOR)
        with self.table(col_widths=col_widths, text_align="CENTER",
                        headings_style=HEADINGS) as table:
            heading = table.row()
            for text in headings:
                heading.cell(_latin1(text))
            for values in rows:
                row = table.row()
                for value in values:
                    row.cell(_latin1(value))
        self.ln(2)


def render_pdf(analysis: DatasetAnalysis) -> bytes:
    """Render ``analysis`` to PDF bytes."""
    pdf = ReportPDF(analysis.fingerprint)
    pdf.add_page()

    pdf.section("Dataset Summary")
    report = analysis.report
    if report is None:
        pdf.paragraph("No data to report.")
        return bytes(pdf.output())

    avg = report.avg
    pdf.grid(
        ["Rows", "pH", "N", "P", "K", "Moisture", "Temp (°C)"],
        [[report.count, f"{avg.ph:.2f}", f"{avg.nitrogen:.1f}", f"{avg.phosphorus:.1f}",
          f"{avg.potassium:.1f}", f"{avg.moisture:.1f}", f"{avg.temperature:.1f}"]],
    )

    if analysis.health is not None:
        h = analysis.health
        pdf.section(f"Health Score: {h.overall}/100")
        pdf.paragraph(f"Nutrient {h.nutrient}, pH {h.ph}, completeness {h.completeness}.")

    pdf.section("Issues and Crops")
    pdf.grid(list(report.issues), [list(report.issues.values())])
    pdf.paragraph("Top recommended crops: " + (", ".join(report.top_crops) or "-"))
    pdf.grid(["Crop", "Rows"], list(report.crop_counts.items()), col_widths=(2, 1))

    if analysis.insights:
        pdf.section("Insights")
        for insight in analysis.insights:
            color = PRIORITY_COLORS.get(insight.priority, TEXT_COLOR)
            pdf.paragraph(f"{insight.title}: {insight.message}", color=color)

    pdf.section("Anomalies")
    summary = summarize_anomalies(analysis.anomalies)
    pdf.paragraph(", ".join(f"{sev}: {n}" for sev, n in summary.items()))
    if analysis.anomalies:
        pdf.grid(
            ["Row", "Severity", "Field", "Message"],
            [[a.row_number, a.severity, a.field, a.message]
             for a in analysis.anomalies[:MAX_ANOMALY_ROWS]],
            col_widths=(1, 1.4, 1.6, 6),
        )
        if len(analysis.anomalies) > MAX_ANOMALY_ROWS:
            pdf.paragraph(f"... {len(analysis.anomalies) - MAX_ANOMALY_ROWS} more not shown.")

    return bytes(pdf.output())


def build_pdf_report(analysis: DatasetAnalysis, path: Union[str, Path]) -> Path:
    """Write the PDF report for ``analysis`` to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_pdf(analysis))
    return path
