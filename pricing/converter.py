import math
from decimal import Decimal

import requests
import structlog
from starlette.concurrency import run_in_threadpool

from core.logging import BusinessEvents
from core.settings import Settings

log = structlog.get_logger(__name__)

COIN_ID = "ethereum"
VS_CURRENCY = "eur"


class PriceConverter:
    """Converts an ether amount to EUR using the CoinGecko simple price API."""

    def __init__(self, settings: Settings):
        self.url = settings.PRICE_FEED_URL
        self.timeout = settings.PRICE_FEED_TIMEOUT

    def _fetch_rate(self) -> float:
        r = requests.get(
            self.url,
            params={"ids": COIN_ID, "vs_currencies": VS_CURRENCY},
            timeout=self.timeout,
        )
        r.raise_for_status()
        rate = float(r.json()[COIN_ID][VS_CURRENCY])
        if not math.isfinite(rate) or rate <= 0:
            raise ValueError(f"unusable {COIN_ID}/{VS_CURRENCY} rate: {rate}")
        return rate

    async def convert(self, amount: Decimal | float) -> float | None:
        """
        Convert ``amount`` ether to EUR.

        Returns None when the feed cannot be reached or answers with
        something unusable.
        """
        try:
            rate = await run_in_threadpool(self._fetch_rate)
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            log.error(BusinessEvents.PRICE_FEED_FAILED, url=self.url, error=str(e))
            return None
        return float(amount) * rate
