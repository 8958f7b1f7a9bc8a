"""PNG charts for the dashboard: monthly cash flow and contributor leaderboard.

One renderer per chart, parameterised by a ``ChartTheme`` palette.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter

from shared.formatting import format_rupiah, month_label
from shared.models import MemberContribution, MonthlyBucket
from shared.ui_state import Theme


@dataclass(frozen=True, slots=True)
class ChartTheme:
    background: str
    grid: str
    tick: str
    text: str
    income: str
    expense: str
    contributor: str
    leader: str


CHART_THEMES: dict[Theme, ChartTheme] = {
    Theme.LIGHT: ChartTheme(
        background="#FFFFFF",
        grid="#E2E8F0",
        tick="#64748B",
        text="#0F172A",
        income="#10B981",
        expense="#F43F5E",
        contributor="#6366F1",
        leader="#F59E0B",
    ),
    Theme.DARK: ChartTheme(
        background="#1E293B",
        grid="#334155",
        tick="#94A3B8",
        text="#F1F5F9",
        income="#10B981",
        expense="#F43F5E",
        contributor="#6366F1",
        leader="#F59E0B",
    ),
}


def chart_theme(theme: Theme | str) -> ChartTheme:
    return CHART_THEMES[Theme(theme)]


def _rupiah_axis(value: float, _position: int) -> str:
    return format_rupiah(int(value))


def _style_axes(fig, ax, palette: ChartTheme) -> None:
    fig.patch.set_facecolor(palette.background)
    ax.set_facecolor(palette.background)
    for spine in ax.spines.values():
        spine.set_visible(False)
    ax.tick_params(colors=palette.tick, labelsize=8, length=0)
    ax.title.set_color(palette.text)


def _to_png(fig) -> bytes:
    image_buffer = BytesIO()
    fig.savefig(image_buffer, format="png", bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    image_buffer.seek(0)
    return image_buffer.read()


def _empty_chart(message: str, title: str, palette: ChartTheme) -> bytes:
    fig, ax = plt.subplots(figsize=(6.4, 3.2), dpi=120)
    _style_axes(fig, ax, palette)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title, loc="left", fontweight="bold")
    ax.text(0.5, 0.5, message, ha="center", va="center", color=palette.tick, transform=ax.transAxes)
    return _to_png(fig)


def render_cashflow_chart(buckets: list[MonthlyBucket], theme: Theme | str = Theme.LIGHT) -> bytes:
    """Grouped income/expense bars, one pair per month bucket."""

    palette = chart_theme(theme)
    title = "Analisis Arus Kas Bulanan"
    if not buckets:
        return _empty_chart("Belum ada data transaksi untuk grafik.", title, palette)

    labels = [month_label(bucket.period, short=True) for bucket in buckets]
    positions = list(range(len(buckets)))
    bar_width = 0.38

    fig, ax = plt.subplots(figsize=(7.2, 3.6), dpi=120)
    _style_axes(fig, ax, palette)
    ax.bar(
        [position - bar_width / 2 for position in positions],
        [bucket.income for bucket in buckets],
        width=bar_width,
        color=palette.income,
        label="Pemasukan",
    )
    ax.bar(
        [position + bar_width / 2 for position in positions],
        [bucket.expense for bucket in buckets],
        width=bar_width,
        color=palette.expense,
        label="Pengeluaran",
    )
    ax.set_xticks(positions)
    ax.set_xticklabels(labels)
    ax.yaxis.set_major_formatter(FuncFormatter(_rupiah_axis))
    ax.grid(axis="y", color=palette.grid, linestyle="--", linewidth=0.6)
    ax.set_axisbelow(True)
    ax.set_title(title, loc="left", fontweight="bold")
    legend = ax.legend(frameon=False, loc="upper center", bbox_to_anchor=(0.5, -0.12), ncol=2)
    for text in legend.get_texts():
        text.set_color(palette.text)
    return _to_png(fig)


def render_contributor_chart(
    ranking: list[MemberContribution],
    period: str,
    theme: Theme | str = Theme.LIGHT,
) -> bytes:
    """Horizontal leaderboard; the top contributor is drawn in the leader colour."""

    palette = chart_theme(theme)
    title = f"Peringkat Kontributor {month_label(period)}"
    if not ranking:
        return _empty_chart("Belum ada kontribusi bulan ini", title, palette)

    names = [row.name for row in ranking]
    totals = [row.total for row in ranking]
    colors = [palette.leader if index == 0 else palette.contributor for index in range(len(ranking))]
    height = max(2.8, 0.5 * len(ranking) + 1.2)

    fig, ax = plt.subplots(figsize=(7.2, height), dpi=120)
    _style_axes(fig, ax, palette)
    ax.barh(names, totals, color=colors, height=0.6)
    ax.invert_yaxis()
    ax.xaxis.set_major_formatter(FuncFormatter(_rupiah_axis))
    ax.grid(axis="x", color=palette.grid, linestyle="--", linewidth=0.6)
    ax.set_axisbelow(True)
    for label in ax.get_yticklabels():
        label.set_color(palette.text)
        label.set_fontweight("bold")
    ax.set_title(title, loc="left", fontweight="bold")
    return _to_png(fig)
