# price_scout/models/errors.py

"""Exception taxonomy for price discovery and listing ingestion."""


class PriceScoutError(Exception):
    """Base class for all price_scout errors."""

    code: str = "price_scout_error"


class FetchError(PriceScoutError):
    """Network failure, non-2xx response or timeout reaching a source."""

    code = "fetch_failed"

    def __init__(
        self,
        source: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        self.source = source
        self.reason = reason
        self.status_code = status_code
        detail = f" (HTTP {status_code})" if status_code else ""
        super().__init__(f"[{source}] {reason}{detail}")


class ConfigurationMissing(PriceScoutError):
    """A credential required by a source is not configured."""

    code = "configuration_missing"

    def __init__(self, source: str, setting: str) -> None:
        self.source = source
        self.setting = setting
        super().__init__(f"[{source}] {setting} is not configured")


class InvalidRequest(PriceScoutError):
    """Caller input that cannot be processed at all."""

    def __init__(self, message: str, code: str = "invalid_request") -> None:
        self.code = code
        super().__init__(message)


class AllSourcesFailed(PriceScoutError):
    """Every requested reference URL failed; nothing to synthesize."""

    code = "all_urls_failed"

    def __init__(self, failures: dict[str, str]) -> None:
        self.failures = failures
        super().__init__(
            f"All {len(failures)} URL(s) failed to load"
        )


class PricesUnavailable(PriceScoutError):
    """A source returned listings but none of them carried a price."""

    code = "prices_unavailable"

    def __init__(self, source: str, listings: int) -> None:
        self.source = source
        self.listings = listings
        super().__init__(
            f"[{source}] {listings} listing(s) without a usable price"
        )
