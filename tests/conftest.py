"""Shared pytest fixtures for the price monitor tests."""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
import pytz
from selenium.common.exceptions import NoSuchElementException

from monitoring.models import PriceReading, SearchQuery


class FakeElement:
    """Stands in for a Selenium WebElement that is always visible and enabled."""

    def __init__(self, text=""):
        self.text = text
        self.keys = []
        self.clicks = 0

    def is_displayed(self):
        return True

    def is_enabled(self):
        return True

    def click(self):
        self.clicks += 1

    def send_keys(self, *values):
        self.keys.extend(values)


class FakeDriver:
    """
    Minimal WebDriver double for the real WebDriverWait/expected_conditions code.

    Any selector containing one of ``missing`` is never found.
    """

    def __init__(self, price_text="25 901 ₽", missing=()):
        self.price_text = price_text
        self.missing = list(missing)
        self.visited = []
        self.elements = {}
        self.quit_calls = 0

    def get(self, url):
        self.visited.append(url)

    def find_element(self, by, value):
        if any(marker in value for marker in self.missing):
            raise NoSuchElementException(f"Unable to locate {value}")
        if value not in self.elements:
            text = self.price_text if "price-chart__item-price" in value else ""
            self.elements[value] = FakeElement(text)
        return self.elements[value]

    def element(self, marker):
        """Return the element whose selector contains ``marker``."""
        for selector, element in self.elements.items():
            if marker in selector:
                return element
        raise KeyError(marker)

    def quit(self):
        self.quit_calls += 1


@pytest.fixture(autouse=True)
def mock_sleep():
    """Patch time.sleep globally so wait polling runs instantly."""
    with patch("time.sleep"):
        yield


@pytest.fixture
def make_driver():
    return FakeDriver


@pytest.fixture
def query():
    return SearchQuery(origin="Москва", destination="Сочи", date=date(2026, 3, 16))


@pytest.fixture
def make_reading():
    def _make(value):
        return PriceReading(
            value=Decimal(value),
            timestamp=pytz.timezone("Europe/Moscow").localize(datetime(2026, 3, 1, 12, 0)),
        )

    return _make
