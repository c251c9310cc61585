from datetime import datetime
from decimal import Decimal

import pytest

from cashcat.aggregate import STATUS_OK, STATUS_OVER, STATUS_WARNING
from cashcat.domain import Budget, Period
from cashcat.formatting import (
    budget_type_text,
    format_currency,
    format_percent,
    period_label,
    progress_color,
)
from cashcat.theme import THEME_STYLES, Theme, load_theme, save_theme, style_for


def test_missing_theme_file_means_default(tmp_path):
    assert load_theme(tmp_path / "nope.json") is Theme.DEFAULT


def test_corrupt_theme_file_falls_back(tmp_path, caplog):
    path = tmp_path / "theme.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_theme(path) is Theme.DEFAULT
    assert "unreadable theme file" in caplog.text

    path.write_text('{"theme": "neon"}', encoding="utf-8")
    assert load_theme(path) is Theme.DEFAULT


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "theme.json"
    save_theme(Theme.FOREST, path)
    assert load_theme(path) is Theme.FOREST
    save_theme("dark", path)
    assert load_theme(path) is Theme.DARK


def test_styles():
    assert set(THEME_STYLES) == set(Theme)
    assert style_for("ocean") is THEME_STYLES[Theme.OCEAN]
    assert style_for("neon") is THEME_STYLES[Theme.DEFAULT]
    assert style_for(Theme.DARK).is_dark
    assert not style_for(Theme.SUNSET).is_dark


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("1234.5"), "$1,234.50"),
        (0, "$0.00"),
        (Decimal("-10"), "-$10.00"),
        (0.1, "$0.10"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_symbol():
    assert format_currency(5, symbol="€") == "€5.00"


def test_format_percent():
    assert format_percent(Decimal("80")) == "80.0%"
    assert format_percent(Decimal("33.333"), digits=2) == "33.33%"


def test_budget_type_text():
    assert budget_type_text(Budget("b", "x", fixed_amount=Decimal("400"), percentage_amount=Decimal("10"))) == (
        "$400 or 10% (whichever is less)"
    )
    assert budget_type_text(Budget("b", "x", fixed_amount=Decimal("500.00"))) == "$500 fixed"
    assert budget_type_text(Budget("b", "x", percentage_amount=Decimal("12.50"))) == "12.5% of income"
    assert budget_type_text(Budget("b", "x")) == ""


def test_period_label():
    period = Period(datetime(2024, 2, 15), datetime(2024, 3, 14, 23, 59, 59, 999000))
    assert period_label(period) == "Feb 15 - Mar 14"


def test_progress_color():
    assert progress_color(STATUS_OVER) == "red"
    assert progress_color(STATUS_WARNING) == "orange"
    assert progress_color(STATUS_OK) == "green"
