"""
Price Pipeline

Chains the contract reader and the price converter into a single
"current price in EUR" lookup. Also holds the amount rounding helpers used
when turning a quote into a payment intent.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import structlog

from core.logging import BusinessEvents
from pricing.contract import ContractReader
from pricing.converter import PriceConverter

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PriceQuote:
    native_amount: Decimal
    fiat_amount: float
    native_unit: str = "ETH"
    currency: str = "EUR"


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_minor_units(amount: float) -> int:
    """EUR amount to cents, rounding half up."""
    return _round_half_up(Decimal(str(amount)) * 100)


def to_major_units(amount: float) -> int:
    """EUR amount rounded half up to whole euros."""
    return _round_half_up(Decimal(str(amount)))


class PricePipeline:
    def __init__(self, reader: ContractReader, converter: PriceConverter):
        self.reader = reader
        self.converter = converter

    async def current_price(self) -> PriceQuote | None:
        """
        Read the contract price and convert it to EUR.

        Returns None if the conversion is unavailable. ContractReadError from
        the reader propagates to the caller.
        """
        native = await self.reader.current_price()
        fiat = await self.converter.convert(native)
        if fiat is None:
            log.warning(BusinessEvents.PRICE_UNAVAILABLE, native_amount=str(native))
            return None

        quote = PriceQuote(native_amount=native, fiat_amount=fiat)
        log.info(
            BusinessEvents.PRICE_QUOTED,
            native_amount=str(native),
            native_unit=quote.native_unit,
            fiat_amount=fiat,
            currency=quote.currency,
        )
        return quote
