"""
Flight Price Fetcher

Drives the airline booking form with Selenium and reads the price shown for
the selected date in the results chart.

The form is filled as an ordered sequence of named steps (load page, fill
origin, fill destination, set date, submit, wait for results, extract price).
Every step blocks on an explicit wait with the same timeout, and a failure is
reported with the name of the step that was pending.
"""

import logging
import math
import re
from contextlib import contextmanager
from decimal import Decimal

from selenium import webdriver
from selenium.common.exceptions import (
    InvalidSessionIdException,
    NoSuchWindowException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from monitoring.errors import BrowserSessionError, InteractionError, ParseError
from monitoring.models import PriceReading
from utils.date_converter import format_travel_date, now_in_timezone

logger = logging.getLogger(__name__)

DEFAULT_WAIT_TIMEOUT = 20

# Selectors for the current version of the booking page
SEARCH_FORM = ".main-module__search-form__inner"
ORIGIN_FIELD = "#ticket-city-departure-0-booking"
DESTINATION_FIELD = "#ticket-city-arrival-0-booking"
DATE_FIELD = "#ticket-date-from-booking"
DATE_PICKER = ".pika-single"
SEARCH_BUTTON = "button.main-module__button--lg"
RESULTS_CHART = ".price-chart"
ACTIVE_PRICE = (
    "//div[contains(@class, 'price-chart__item--active')]"
    "//div[contains(@class, 'price-chart__item-price')]"
)
SUGGESTION_TEMPLATE = "//div[contains(@class, 'suggestion-item') and .//*[contains(text(), {})]]"

STEP_START = "start browser"
STEP_LOAD = "load search page"
STEP_ORIGIN = "fill origin"
STEP_DESTINATION = "fill destination"
STEP_DATE = "set date"
STEP_SUBMIT = "submit search"
STEP_RESULTS = "wait for results"
STEP_EXTRACT = "extract price"

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_price(price_text):
    """
    Convert displayed price text to a number.

    Every non-digit character is dropped, which removes currency symbols,
    non-breaking spaces and thousands separators alike. The site shows whole
    prices only, so there is no decimal point to preserve.

    Args:
        price_text (str): Price as shown on the page (e.g. "25 901 ₽")

    Returns:
        Decimal: The price as a whole number

    Raises:
        ParseError: If the text contains no digits
    """
    digits = _NON_DIGITS.sub("", price_text or "")
    if not digits:
        raise ParseError(price_text)
    return Decimal(digits)


def xpath_literal(value):
    """Quote a string for use inside an XPath expression."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = ", \"'\", ".join(f"'{part}'" for part in value.split("'"))
    return f"concat({parts})"


def get_driver(headless=True):
    """
    Get a configured Chrome driver.
    """
    chrome_options = Options()
    if headless:
        chrome_options.add_argument("--headless=new")
    chrome_options.add_argument("--disable-gpu")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--window-size=1920,1200")

    return webdriver.Chrome(
        service=Service(ChromeDriverManager().install()), options=chrome_options
    )


class StepSequencer:
    """
    Tracks which protocol step is pending and attributes failures to it.

    Selenium errors raised inside a step are re-raised as InteractionError
    (or BrowserSessionError when the session is gone) carrying the step name.
    """

    def __init__(self, wait_timeout=DEFAULT_WAIT_TIMEOUT):
        self.wait_timeout = wait_timeout
        self.pending = None
        self.completed = []

    def reset(self):
        self.pending = None
        self.completed = []

    @contextmanager
    def step(self, name):
        self.pending = name
        logger.debug(f"Step started: {name}")
        try:
            yield
        except (InvalidSessionIdException, NoSuchWindowException) as e:
            raise BrowserSessionError(name, f"browser session lost: {e.msg}") from e
        except TimeoutException as e:
            raise InteractionError(
                name, f"element not ready within {self.wait_timeout}s"
            ) from e
        except WebDriverException as e:
            raise InteractionError(name, e.msg or type(e).__name__) from e
        self.completed.append(name)
        self.pending = None


class PriceFetcher:
    """
    Owns one browser session and reads one price per fetch() call.

    The session is not reentrant: callers must not invoke fetch() from two
    threads at once.
    """

    def __init__(
        self,
        url,
        wait_timeout=DEFAULT_WAIT_TIMEOUT,
        driver=None,
        headless=True,
        timezone="Europe/Moscow",
    ):
        if not math.isfinite(wait_timeout) or wait_timeout <= 0:
            raise ValueError(f"Wait timeout must be a positive number of seconds, got {wait_timeout}")
        self.url = url
        self.wait_timeout = wait_timeout
        self.headless = headless
        self.timezone = timezone
        self.steps = StepSequencer(wait_timeout)
        self._driver = driver
        self._wait = None
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _ensure_driver(self):
        if self._closed:
            raise BrowserSessionError(STEP_START, "fetcher has been closed")
        if self._driver is None:
            logger.info(f"Starting Chrome session (headless={self.headless})")
            try:
                self._driver = get_driver(headless=self.headless)
            except Exception as e:
                raise BrowserSessionError(STEP_START, f"could not start Chrome: {e}") from e
        if self._wait is None:
            self._wait = WebDriverWait(self._driver, self.wait_timeout)
        return self._driver

    def fetch(self, query):
        """
        Run the full search protocol for the query and return the price.

        Args:
            query (SearchQuery): Route and travel date

        Returns:
            PriceReading: The price for the selected date

        Raises:
            InteractionError: A page element did not appear or accept input in time
            BrowserSessionError: The browser could not be started or was lost
            ParseError: The price text held no digits
        """
        self.steps.reset()
        logger.info(f"Fetching price for {query}")

        with self.steps.step(STEP_START):
            driver = self._ensure_driver()

        with self.steps.step(STEP_LOAD):
            driver.get(self.url)
            self._wait.until(
                EC.presence_of_element_located((By.CSS_SELECTOR, SEARCH_FORM))
            )

        with self.steps.step(STEP_ORIGIN):
            self._fill_city_field(ORIGIN_FIELD, query.origin)

        with self.steps.step(STEP_DESTINATION):
            self._fill_city_field(DESTINATION_FIELD, query.destination)

        with self.steps.step(STEP_DATE):
            self._set_date(DATE_FIELD, query.date)

        with self.steps.step(STEP_SUBMIT):
            search_button = self._wait.until(
                EC.element_to_be_clickable((By.CSS_SELECTOR, SEARCH_BUTTON))
            )
            search_button.click()

        with self.steps.step(STEP_RESULTS):
            self._wait.until(
                EC.presence_of_element_located((By.CSS_SELECTOR, RESULTS_CHART))
            )

        with self.steps.step(STEP_EXTRACT):
            price_element = self._wait.until(
                EC.presence_of_element_located((By.XPATH, ACTIVE_PRICE))
            )
            price_text = price_element.text

        value = parse_price(price_text)
        reading = PriceReading(value=value, timestamp=now_in_timezone(self.timezone))
        logger.info(f"Price for {query}: {value} (raw text {price_text!r})")
        return reading

    def _fill_city_field(self, selector, city):
        """
        Type a city name and pick the autocomplete entry containing it.

        The first suggestion whose label contains the typed text is selected.
        """
        field = self._wait.until(EC.element_to_be_clickable((By.CSS_SELECTOR, selector)))
        field.send_keys(Keys.CONTROL + "a")
        field.send_keys(Keys.DELETE)
        field.send_keys(city)

        suggestion_locator = (By.XPATH, SUGGESTION_TEMPLATE.format(xpath_literal(city)))
        suggestion = self._wait.until(EC.element_to_be_clickable(suggestion_locator))
        suggestion.click()

    def _set_date(self, selector, travel_date):
        date_field = self._wait.until(EC.element_to_be_clickable((By.CSS_SELECTOR, selector)))
        date_field.click()

        # The picker overlay has to be open before the field accepts typed dates
        self._wait.until(EC.presence_of_element_located((By.CSS_SELECTOR, DATE_PICKER)))

        date_field.send_keys(Keys.CONTROL + "a")
        date_field.send_keys(format_travel_date(travel_date))
        date_field.send_keys(Keys.ENTER)

    def close(self):
        """
        Quit the browser and release the session. Safe to call more than once.
        """
        if self._closed:
            return
        self._closed = True
        if self._driver is None:
            return
        try:
            self._driver.quit()
            logger.info("Browser session closed")
        except WebDriverException as e:
            logger.warning(f"Error while closing browser session: {e}")
        finally:
            self._driver = None
            self._wait = None
