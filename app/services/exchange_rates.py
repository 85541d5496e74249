import logging
import time
from functools import lru_cache
from typing import Dict, Optional

import requests

from app.config import settings
from app.constants.pricing_tables import FALLBACK_EXCHANGE_RATES
from app.schemas.pricing_schemas import RateTable

logger = logging.getLogger(__name__)


def fetch_live_rates(url: str, timeout: float) -> Optional[Dict[str, float]]:
    """Return the provider's rates keyed by lower-case currency, or None if unavailable."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Live exchange rates unavailable, using fallback table: {e}")
        return None

    rates = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(rates, dict):
        logger.warning("Exchange rate response has no rates, using fallback table")
        return None

    return {str(code).lower(): value for code, value in rates.items()}


def _usable(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def select_rates(
    live: Optional[Dict[str, float]],
    fallback: Dict[str, float] = FALLBACK_EXCHANGE_RATES,
) -> RateTable:
    """Pick each supported currency from the live table when it holds a positive number."""
    live = live or {}
    chosen = {}
    from_live = 0

    for currency, fallback_rate in fallback.items():
        value = live.get(currency)
        if _usable(value):
            chosen[currency] = float(value)
            from_live += 1
        else:
            chosen[currency] = float(fallback_rate)

    if from_live == len(fallback):
        source = "live"
    elif from_live:
        source = "mixed"
    else:
        source = "fallback"

    return RateTable(rates=chosen, source=source)


def _ttl_bucket(ttl: int) -> int:
    return int(time.time() // ttl)


@lru_cache(maxsize=8)
def _cached_live_rates(url: str, timeout: float, bucket: int):
    return fetch_live_rates(url, timeout)


class ExchangeRateProvider:
    """Live rates from the remote source, cached per TTL bucket, over the static table."""

    def __init__(self, url: str, timeout: float, ttl: int):
        self.url = url
        self.timeout = timeout
        self.ttl = ttl

    def current(self) -> RateTable:
        live = _cached_live_rates(self.url, self.timeout, _ttl_bucket(self.ttl))
        return select_rates(live)


class StaticRateProvider:
    def current(self) -> RateTable:
        return select_rates(None)


rate_provider = ExchangeRateProvider(
    url=settings.exchange_rate_url,
    timeout=settings.exchange_rate_timeout_seconds,
    ttl=settings.exchange_rate_cache_ttl,
)


def get_rate_provider():
    return rate_provider
