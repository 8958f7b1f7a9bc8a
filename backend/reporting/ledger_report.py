"""Generate the monthly cash report PDF."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.reporting.charts import render_cashflow_chart
from shared.formatting import format_rupiah, format_signed_rupiah, month_label, transaction_type_label
from shared.models import MemberContribution, MonthlyBucket, PeriodSummary, Transaction
from shared.ui_state import Theme


_TRANSACTIONS_DISPLAY_LIMIT = 250
_HEADER_BACKGROUND = colors.HexColor("#EEF1F4")
_GRID_COLOR = colors.HexColor("#D7DCE2")
_STRIPE_BACKGROUND = colors.HexColor("#FAFBFC")


@dataclass(slots=True)
class LedgerReportData:
    """Input payload for the monthly cash report."""

    period: str
    balance: int
    summary: PeriodSummary
    ranking: list[MemberContribution]
    monthly_series: list[MonthlyBucket]
    transactions: list[Transaction] = field(default_factory=list)
    group_name: str = "Kas Grup"


class _FooterCanvas(Canvas):
    def __init__(self, *args, generated_on: str, **kwargs):
        super().__init__(*args, **kwargs)
        self._generated_on = generated_on
        self._saved_page_states: list[dict] = []

    def showPage(self) -> None:  # noqa: N802 (ReportLab API)
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(page_count=page_count)
            super().showPage()
        super().save()

    def _draw_footer(self, *, page_count: int) -> None:
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.HexColor("#8A8F98"))
        self.drawString(20 * mm, 10 * mm, f"Dibuat pada {self._generated_on}")
        self.drawRightString(190 * mm, 10 * mm, f"Halaman {self._pageNumber}/{page_count}")


def _striped(table_data: list[list[str]], base_style: list[tuple]) -> TableStyle:
    table_style = list(base_style)
    for row_index in range(1, len(table_data)):
        if row_index % 2 == 0:
            table_style.append(("BACKGROUND", (0, row_index), (-1, row_index), _STRIPE_BACKGROUND))
    return TableStyle(table_style)


def _build_kpi_cards(data: LedgerReportData) -> Table:
    styles = getSampleStyleSheet()
    card_style = ParagraphStyle(
        name="KpiCard",
        parent=styles["BodyText"],
        fontSize=10,
        leading=14,
        textColor=colors.HexColor("#1F2937"),
    )
    cells = [
        [
            Paragraph("<b>Saldo kas</b><br/>" + format_rupiah(data.balance), card_style),
            Paragraph("<b>Pemasukan bulan ini</b><br/>" + format_rupiah(data.summary.income), card_style),
            Paragraph("<b>Pengeluaran bulan ini</b><br/>" + format_rupiah(data.summary.expense), card_style),
        ]
    ]
    table = Table(cells, colWidths=[58 * mm, 58 * mm, 58 * mm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#F4F6F8")),
                ("BOX", (0, 0), (-1, -1), 0.6, colors.HexColor("#DDE2E8")),
                ("INNERGRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#DDE2E8")),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("RIGHTPADDING", (0, 0), (-1, -1), 8),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return table


def _build_ranking_table(ranking: list[MemberContribution]) -> Table:
    table_data = [["#", "Kontributor", "Total"]]
    for position, row in enumerate(ranking, start=1):
        table_data.append([str(position), row.name, format_rupiah(row.total)])

    table = Table(table_data, colWidths=[12 * mm, 110 * mm, 52 * mm], repeatRows=1)
    table.setStyle(
        _striped(
            table_data,
            [
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BACKGROUND),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.25, _GRID_COLOR),
                ("ALIGN", (2, 1), (2, -1), "RIGHT"),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ],
        )
    )
    return table


def _build_transactions_table(transactions: list[Transaction]) -> Table:
    def _truncate_text(value: str, max_length: int = 40) -> str:
        if len(value) <= max_length:
            return value
        return value[: max_length - 1].rstrip() + "…"

    table_data = [["Tanggal", "Keterangan", "Kontributor", "Tipe", "Nominal"]]
    if not transactions:
        table_data.append(["-", "Tidak ada transaksi", "-", "-", "-"])
    for row in transactions[:_TRANSACTIONS_DISPLAY_LIMIT]:
        table_data.append(
            [
                row.date,
                _truncate_text(row.description),
                row.member_name or "-",
                transaction_type_label(row.type),
                format_signed_rupiah(row.amount, row.type),
            ]
        )

    table = Table(table_data, colWidths=[24 * mm, 62 * mm, 36 * mm, 24 * mm, 32 * mm], repeatRows=1)
    table.setStyle(
        _striped(
            table_data,
            [
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BACKGROUND),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.25, _GRID_COLOR),
                ("ALIGN", (4, 1), (4, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ],
        )
    )
    return table


def generate_ledger_report_pdf(data: LedgerReportData) -> bytes:
    """Render a 2-page report: summary with charts, then the month's transactions."""

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=16 * mm,
        leftMargin=16 * mm,
        topMargin=16 * mm,
        bottomMargin=14 * mm,
    )
    styles = getSampleStyleSheet()
    section_title_style = ParagraphStyle(name="SectionTitle", parent=styles["Heading2"], spaceAfter=4, fontSize=12)
    subtitle_style = ParagraphStyle(name="Subtitle", parent=styles["BodyText"], fontSize=9, textColor=colors.HexColor("#6B7280"))
    period_label = month_label(data.period)
    generated_on = date.today().isoformat()

    story = [
        Paragraph(f"Laporan {data.group_name}", styles["Title"]),
        Spacer(1, 1 * mm),
        Paragraph(f"Periode: {period_label}", styles["BodyText"]),
        Paragraph(f"Dibuat pada {generated_on}", subtitle_style),
        Spacer(1, 5 * mm),
        _build_kpi_cards(data),
        Spacer(1, 6 * mm),
        Paragraph("Arus kas bulanan", section_title_style),
        Spacer(1, 1 * mm),
    ]
    chart_bytes = render_cashflow_chart(data.monthly_series, Theme.LIGHT)
    story.append(Image(BytesIO(chart_bytes), width=172 * mm, height=86 * mm))
    story.append(Spacer(1, 4 * mm))

    story.append(Paragraph("Peringkat kontributor", section_title_style))
    if data.ranking:
        story.append(_build_ranking_table(data.ranking))
    else:
        story.append(Paragraph("Belum ada kontribusi bulan ini.", styles["BodyText"]))

    story.append(PageBreak())
    story.append(Paragraph("Rincian transaksi", styles["Title"]))
    story.append(Spacer(1, 2 * mm))
    story.append(Paragraph(f"Periode: {period_label}", styles["BodyText"]))
    story.append(Spacer(1, 4 * mm))
    if len(data.transactions) > _TRANSACTIONS_DISPLAY_LIMIT:
        story.append(Paragraph(f"Daftar dipotong menjadi {_TRANSACTIONS_DISPLAY_LIMIT} transaksi.", styles["Italic"]))
        story.append(Spacer(1, 2 * mm))
    story.append(_build_transactions_table(data.transactions))

    doc.build(
        story,
        canvasmaker=lambda *args, **kwargs: _FooterCanvas(*args, generated_on=generated_on, **kwargs),
    )
    buffer.seek(0)
    return buffer.read()
