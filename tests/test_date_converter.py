"""Tests for travel date conversion."""

from datetime import date

import pytest

from monitoring.models import SearchQuery
from utils.date_converter import format_travel_date, now_in_timezone, parse_travel_date


def test_parse_travel_date():
    assert parse_travel_date("16.03.2026") == date(2026, 3, 16)
    assert parse_travel_date(" 01.12.2025 ") == date(2025, 12, 1)


@pytest.mark.parametrize("value", ["2026-03-16", "31.02.2026", "16/03/2026", "", None])
def test_parse_travel_date_rejects_bad_input(value):
    with pytest.raises(ValueError):
        parse_travel_date(value)


def test_format_travel_date_pads_day_and_month():
    assert format_travel_date(date(2026, 1, 5)) == "05.01.2026"


def test_now_in_timezone_is_aware():
    assert now_in_timezone("Europe/Moscow").utcoffset() is not None


def test_search_query_from_strings():
    query = SearchQuery.from_strings(" Москва ", "Сочи", "16.03.2026")

    assert query.origin == "Москва"
    assert query.date == date(2026, 3, 16)
    assert query.date_text == "16.03.2026"
    assert str(query) == "Москва -> Сочи on 16.03.2026"


@pytest.mark.parametrize("origin, destination", [("", "Сочи"), ("Москва", "   ")])
def test_search_query_requires_cities(origin, destination):
    with pytest.raises(ValueError):
        SearchQuery.from_strings(origin, destination, "16.03.2026")
