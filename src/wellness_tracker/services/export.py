"""Spreadsheet export of the energy estimate and the food log."""

import csv
import io
from collections.abc import Sequence

from wellness_tracker.domain.energy import EnergyEstimate
from wellness_tracker.domain.log import LogItem
from wellness_tracker.numeric import format_factor, round_half_up
from wellness_tracker.services.rollup import assess_totals, rollup
from wellness_tracker.services.wellness import assess_item, item_calories

Cell = str | int | float
Row = list[Cell]

EMPTY_LOG_MARKER = "(No items logged)"
ITEM_HEADER: Row = [
    "Name",
    "Brand",
    "Serving (g)",
    "kcal",
    "Protein (g)",
    "Fat (g)",
    "Carbs (g)",
    "Fiber (g)",
    "Sugar (g)",
    "Sat Fat (g)",
    "Sodium (mg)",
    "Cholesterol (mg)",
    "FF",
    "PF",
    "WF",
    "EF",
]


def build_export_rows(items: Sequence[LogItem], energy: EnergyEstimate) -> list[Row]:
    """Build the Energy, Food Log totals and Items sections."""
    totals = rollup(items)
    report = assess_totals(totals)
    rows: list[Row] = [
        ["=== Energy ==="],
        ["BMR (kcal)", _rounded(energy.bmr)],
        ["TDEE (kcal)", _rounded(energy.tdee)],
        ["Target (kcal)", _rounded(energy.target)],
        [""],
        ["=== Food Log (totals) ==="],
        ["Amount (g)", _rounded(totals.mass_g, 1)],
        ["Calories (kcal)", _rounded(totals.calories_kcal)],
        ["Fiber (g)", _rounded(totals.fiber_g, 1)],
        ["Protein (g)", _rounded(totals.protein_g, 1)],
        *([badge.label, badge.text] for badge in report.badges()),
        [""],
        ["=== Items ==="],
        list(ITEM_HEADER),
    ]
    rows.extend(_item_row(item) for item in items)
    if not items:
        rows.append([EMPTY_LOG_MARKER])
    return rows


def to_csv(rows: Sequence[Sequence[Cell]], excel_friendly: bool = True) -> str:
    """Render rows as CSV with CRLF line endings, BOM-prefixed for Excel."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerows(rows)
    content = buffer.getvalue().removesuffix("\r\n")
    return "\ufeff" + content if excel_friendly else content


def _item_row(item: LogItem) -> Row:
    nutrients = item.nutrients
    report = assess_item(item)
    return [
        item.name,
        item.brand or "",
        max(0, _rounded(item.serving_g, 1)),
        _rounded(item_calories(item)),
        _rounded(nutrients.protein_g, 1),
        _rounded(nutrients.fat_g, 1),
        _rounded(nutrients.carbs_g, 1),
        _rounded(nutrients.micro("fiber"), 1),
        _rounded(nutrients.micro("sugar"), 1),
        _rounded(nutrients.micro("satfat"), 1),
        _rounded(nutrients.micro("sodium")),
        _rounded(nutrients.micro("cholesterol")),
        format_factor(report.fiber_factor),
        format_factor(report.protein_factor),
        format_factor(report.wellness_factor),
        format_factor(report.energy_factor, is_energy_factor=True),
    ]


def _rounded(value: float, decimals: int = 0) -> int | float:
    # Whole numbers are written without a trailing ".0".
    number = round_half_up(value, decimals)
    return int(number) if number.is_integer() else number
