# price_scout/config/settings.py

"""Central configuration for the price_scout engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the price_scout engine."""

    # --- Scraping ---
    REQUEST_DELAY: float = 1.0          # Base backoff between retries
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    ADAPTER_TIMEOUT: float = 15.0       # Cap for one adapter invocation
    MAX_RETRIES: int = 2                # Attempts per request inside an adapter

    # --- Resilience ---
    MAX_DELAY_MULTIPLIER: int = 4       # Cap for adaptive backoff
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Parsing ---
    ZENPLUS_PRICE_CEILING: int = 1_000_000   # SKU-like numbers above this
    EBAY_ENTRIES_PER_PAGE: int = 100

    # --- Credentials ---
    EBAY_APP_ID: str = os.getenv("EBAY_APP_ID", "")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")

    # --- Image classification ---
    VISION_MODEL: str = os.getenv("PRICE_SCOUT_VISION_MODEL", "gpt-4o")
    VISION_MAX_TOKENS: int = 500

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )
    DEFAULT_HEADERS: dict[str, str] = {
        "User-Agent": USER_AGENT,
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "ja-JP,ja;q=0.9,en-US;q=0.8,en;q=0.7",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = Path(__file__).resolve().parent / "selectors.json"
    LOGS_DIR: Path = BASE_DIR / "logs"
    TEMPLATES_PATH: Path = BASE_DIR / "data" / "templates.json"

    # --- Sources (order is the wire order of AggregateResult) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "mercari",
            "label": "Mercari",
            "scraper": "price_scout.scrapers.mercari_scraper.MercariScraper",
        },
        {
            "id": "zenplus",
            "label": "ZenPlus",
            "scraper": "price_scout.scrapers.zenplus_scraper.ZenPlusScraper",
        },
        {
            "id": "ebay",
            "label": "eBay",
            "scraper": "price_scout.scrapers.ebay_scraper.EbayScraper",
        },
    ]
