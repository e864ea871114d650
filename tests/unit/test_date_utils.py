"""Unit tests for date helpers"""

import calendar
from datetime import date
from society_portal.utils.date_utils import MONTH_ABBREVIATIONS, due_date_for, month_name, previous_month


def test_month_names_ignore_locale(monkeypatch):
    """Labels stay English even when the calendar module is localised"""
    monkeypatch.setattr(calendar, "month_name", [""] + [f"Mes {i}" for i in range(1, 13)])
    monkeypatch.setattr(calendar, "month_abbr", [""] + [f"M{i}" for i in range(1, 13)])

    assert month_name(3) == "March"
    assert MONTH_ABBREVIATIONS == ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def test_previous_month_wraps_year():
    assert previous_month(2024, 1) == (2023, 12)
    assert previous_month(2024, 3) == (2024, 2)


def test_due_date_clamped():
    assert due_date_for(2024, 2, 31) == date(2024, 2, 29)
    assert due_date_for(2024, 3) == date(2024, 3, 15)
