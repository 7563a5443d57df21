"""Tests for the spreadsheet export."""

from tests.conftest import CHICKEN_RECORD, OATS_RECORD
from wellness_tracker.domain.energy import EnergyEstimate
from wellness_tracker.services.export import (
    EMPTY_LOG_MARKER,
    ITEM_HEADER,
    build_export_rows,
    to_csv,
)
from wellness_tracker.services.food_log import create_log_item, set_amount

ENERGY = EnergyEstimate(bmr=1780.4, tdee=2759.62, target=2483.658)


def test_empty_log_rows() -> None:
    rows = build_export_rows([], ENERGY)

    assert rows[0] == ["=== Energy ==="]
    assert rows[1] == ["BMR (kcal)", 1780]
    assert rows[2] == ["TDEE (kcal)", 2760]
    assert rows[3] == ["Target (kcal)", 2484]
    assert ["Amount (g)", 0] in rows
    assert ["FF", "∞"] in rows
    assert rows[-2] == ITEM_HEADER
    assert rows[-1] == [EMPTY_LOG_MARKER]


def test_item_rows_follow_log_order() -> None:
    oats = set_amount(create_log_item(OATS_RECORD), 50)
    chicken = create_log_item(CHICKEN_RECORD)

    rows = build_export_rows([oats, chicken], ENERGY)

    oats_row, chicken_row = rows[-2], rows[-1]
    assert oats_row[:3] == ["Oats", "SR Legacy", 50]
    assert oats_row[7] == 5.3
    assert chicken_row[1] == "Costco"
    assert chicken_row[2] == 112
    assert ["Amount (g)", 162] in rows


def test_csv_is_excel_friendly() -> None:
    content = to_csv([["Name", "Brand"], ['Bar, "big"', ""]])

    assert content.startswith("\ufeff")
    assert content == '\ufeffName,Brand\r\n"Bar, ""big""",'
    assert not content.endswith("\r\n")


def test_csv_without_bom() -> None:
    assert to_csv([["a"], ["b"]], excel_friendly=False) == "a\r\nb"
