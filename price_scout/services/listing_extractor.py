# price_scout/services/listing_extractor.py

"""Fetch reference listing pages and extract their title/description."""

import asyncio
import json
import logging
import re
from typing import Any

from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from price_scout.config.settings import Settings
from price_scout.models.errors import (
    AllSourcesFailed,
    FetchError,
    InvalidRequest,
)
from price_scout.models.listing import (
    ListingExample,
    TemplateBuildResult,
)
from price_scout.scrapers.base_scraper import is_success
from price_scout.services.template_synthesizer import TemplateSynthesizer

logger = logging.getLogger("price_scout.listings")

_DESCRIPTION = re.compile(r"^description$", re.IGNORECASE)
_OG_DESCRIPTION = re.compile(r"^og:description$", re.IGNORECASE)


def _meta_content(soup: BeautifulSoup, attrs: dict[str, Any]) -> str:
    """Return the stripped ``content`` of the first matching <meta>."""
    for tag in soup.find_all("meta", attrs=attrs):
        content = str(tag.get("content") or "").strip()
        if content:
            return content
    return ""


class ListingExtractor:
    """Reads the title and description of reference listing pages."""

    def __init__(self) -> None:
        self.settings = Settings()
        self.title_suffix: str = self._load_title_suffix()

    def _load_title_suffix(self) -> str:
        """Load the marketplace title suffix from selectors.json."""
        with open(self.settings.SELECTORS_PATH, encoding="utf-8") as f:
            all_selectors: dict[str, Any] = json.load(f)
        suffix: str = all_selectors.get("listing", {}).get(
            "title_suffix", ""
        )
        return suffix

    def parse(self, url: str, html: str) -> ListingExample:
        """Extract a :class:`ListingExample` from raw page HTML."""
        soup = BeautifulSoup(html, "lxml")

        title = ""
        title_el = soup.find("title")
        if title_el is not None:
            title = title_el.get_text().strip()
            if self.title_suffix:
                title = title.removesuffix(self.title_suffix).strip()

        description = _meta_content(
            soup, attrs={"name": _DESCRIPTION}
        ) or _meta_content(
            soup, attrs={"property": _OG_DESCRIPTION}
        )
        return ListingExample(
            url=url, title=title, description=description
        )

    def extract(self, url: str) -> ListingExample:
        """Fetch *url* and extract its listing text.

        Raises:
            FetchError: On network failure or a non-2xx status.
        """
        session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        try:
            resp = session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            logger.warning(
                "Request error for %s: %s", url, exc, exc_info=True
            )
            raise FetchError(url, f"request error: {exc}") from exc
        finally:
            session.close()

        if not is_success(resp.status_code):
            logger.warning("HTTP %d for %s", resp.status_code, url)
            raise FetchError(url, "HTTP error", resp.status_code)

        return self.parse(url, resp.text)

    async def extract_many(
        self, urls: list[str],
    ) -> tuple[list[ListingExample], dict[str, str]]:
        """Extract every URL concurrently.

        Returns the successful examples (input order) and a mapping of
        failed URL to reason.

        Raises:
            InvalidRequest: When no non-blank URL was given.
        """
        targets = [u.strip() for u in urls if u.strip()]
        if not targets:
            raise InvalidRequest(
                "URLが指定されていません", code="no_urls"
            )

        outcomes = await asyncio.gather(
            *(
                asyncio.wait_for(
                    asyncio.to_thread(self.extract, url),
                    timeout=self.settings.ADAPTER_TIMEOUT,
                )
                for url in targets
            ),
            return_exceptions=True,
        )

        examples: list[ListingExample] = []
        failures: dict[str, str] = {}
        for url, outcome in zip(targets, outcomes):
            if isinstance(outcome, ListingExample):
                examples.append(outcome)
            else:
                failures[url] = str(outcome) or type(outcome).__name__
                logger.warning("Skipping %s: %s", url, failures[url])
        return examples, failures

    async def build_template(
        self, urls: list[str],
    ) -> TemplateBuildResult:
        """Extract reference listings and synthesize a template.

        Raises:
            InvalidRequest: When no non-blank URL was given.
            AllSourcesFailed: When every URL failed to load.
        """
        examples, failures = await self.extract_many(urls)
        if not examples:
            raise AllSourcesFailed(failures)

        template = TemplateSynthesizer.synthesize(examples)
        return TemplateBuildResult(results=examples, template=template)
