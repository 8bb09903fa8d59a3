# price_scout/scrapers/base_scraper.py

"""Abstract base class for all marketplace price adapters."""

import json
import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from price_scout.config.settings import Settings
from price_scout.models.errors import ConfigurationMissing, FetchError
from price_scout.models.market import (
    FallbackNotes,
    MarketSummary,
    PriceSample,
)

_NON_DIGITS = re.compile(r"[^0-9]")


def is_success(status_code: int) -> bool:
    """True for any 2xx HTTP status."""
    return 200 <= status_code < 300


class BaseScraper(ABC):
    """Abstract base class for all marketplace price adapters.

    Subclasses describe their marketplace through class attributes
    (currency, documented placeholder summary, fallback notes, optional
    credential) and implement :meth:`fetch_prices`.
    """

    CURRENCY: ClassVar[str]
    DEFAULT_SUMMARY: ClassVar[MarketSummary]
    NOTES: ClassVar[FallbackNotes]
    # Name of the Settings attribute holding a required credential
    REQUIRED_CREDENTIAL: ClassVar[str | None] = None

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"price_scout.{source_name}"
        )
        self.settings = Settings()
        self.selectors: dict[str, str] = self._load_selectors()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._current_delay: float = (
            self.settings.REQUEST_DELAY
        )
        self._request_timeout: int = (
            self.settings.REQUEST_TIMEOUT
        )

    def _load_selectors(self) -> dict[str, str]:
        """Load CSS selectors for this source from selectors.json."""
        with open(self.settings.SELECTORS_PATH, encoding="utf-8") as f:
            all_selectors: dict[str, Any] = json.load(f)
        result: dict[str, str] = all_selectors.get(
            self.source_name, {}
        )
        return result

    def check_credentials(self) -> None:
        """Raise ConfigurationMissing if a required credential is absent."""
        setting = self.REQUIRED_CREDENTIAL
        if setting and not getattr(self.settings, setting, ""):
            raise ConfigurationMissing(self.source_name, setting)

    # Cloudflare challenge page markers (checked before keyword scan)
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def _validate_response(self, resp: Any) -> bool:
        """Check for Cloudflare challenge pages and CAPTCHA indicators."""
        text = str(resp.text)
        if text.lstrip().startswith(("{", "[")):
            return True
        lower = text.lower()

        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Cloudflare challenge detected "
                    "(marker: '%s')",
                    self.source_name,
                    marker,
                )
                return False

        # Real search pages can mention "captcha" in inline scripts
        has_body_content = (
            "<body" in lower and len(text) > 5000
        )
        if not has_body_content:
            for keyword in self.settings.CAPTCHA_KEYWORDS:
                if keyword in lower:
                    self.logger.warning(
                        "[%s] CAPTCHA keyword '%s' "
                        "detected",
                        self.source_name,
                        keyword,
                    )
                    return False
        return True

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(
            self._current_delay * 2, max_delay
        )
        self.logger.warning(
            "[%s] Rate-limited, delay escalated to %.1fs",
            self.source_name,
            self._current_delay,
        )

    def _fetch_get(
        self,
        url: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
    ) -> curl_requests.Response:
        """GET with bounded retries and rate-limit backoff.

        Raises:
            FetchError: When no attempt produced a usable 2xx response.
        """
        reason = "no response"
        status_code: int | None = None
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=headers,
                    params=params,
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                reason = f"request error: {exc}"
                status_code = None
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.source_name,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                time.sleep(
                    self._current_delay * (attempt + 1)
                )
                continue

            status_code = resp.status_code
            if is_success(resp.status_code):
                if self._validate_response(resp):
                    self._current_delay = self.settings.REQUEST_DELAY
                    return resp
                reason = "challenge page"
                self._escalate_delay()
                time.sleep(self._current_delay)
                continue

            reason = "HTTP error"
            self.logger.warning(
                "[%s] HTTP %d on attempt %d",
                self.source_name,
                resp.status_code,
                attempt + 1,
            )
            if resp.status_code in (429, 403):
                self._escalate_delay()
                time.sleep(self._current_delay)
            elif 400 <= resp.status_code < 500:
                # Permanent client error, retrying won't help
                break
            else:
                time.sleep(
                    self._current_delay * (attempt + 1)
                )

        raise FetchError(self.source_name, reason, status_code)

    def _get_page(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> BeautifulSoup:
        """Fetch an HTML page, falling back to cloudscraper on failure.

        Raises:
            FetchError: When both curl_cffi and cloudscraper fail.
        """
        request_headers: dict[str, str] = headers or {
            **self.settings.DEFAULT_HEADERS,
            "Referer": self._get_homepage(),
        }

        # Primary: curl_cffi (browser-impersonating TLS)
        try:
            resp = self._fetch_get(url, request_headers)
            return BeautifulSoup(resp.text, "lxml")
        except FetchError as primary_error:
            self.logger.info(
                "[%s] curl_cffi exhausted (%s), falling back "
                "to cloudscraper",
                self.source_name,
                primary_error,
            )
            failure = primary_error

        # Fallback: cloudscraper (JS challenge solver)
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                url,
                headers=request_headers,
                timeout=self._request_timeout,
            )
            if is_success(
                int(fallback_resp.status_code)
            ) and self._validate_response(fallback_resp):
                return BeautifulSoup(
                    str(fallback_resp.text), "lxml"
                )
            self.logger.warning(
                "[%s] cloudscraper fallback returned HTTP %s",
                self.source_name,
                fallback_resp.status_code,
            )
        except Exception as e:
            self.logger.error(
                "[%s] cloudscraper fallback also failed: %s",
                self.source_name,
                e,
                exc_info=True,
            )

        raise failure

    @staticmethod
    def extract_price(text: str | None) -> int:
        """Strip every non-digit from *text* and parse the rest.

        ``"¥1,280"`` becomes ``1280``; text without digits becomes 0.
        """
        if not text:
            return 0
        digits = _NON_DIGITS.sub("", text)
        return int(digits) if digits else 0

    @abstractmethod
    def _get_homepage(self) -> str:
        """Return the homepage URL for the Referer header."""
        ...

    @abstractmethod
    def fetch_prices(self, query: str) -> PriceSample:
        """Return every usable price observed for *query*.

        An empty list is a valid result. Raises FetchError only when the
        marketplace could not be reached.
        """
        ...
