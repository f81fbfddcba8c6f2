"""
Exchange-rate and corridor listing lookups (static tables only).
"""

from typing import List, Union

from pydantic import BaseModel

from mybambu_mcp.corridors import EXCHANGE_RATES, TRANSFER_CORRIDORS
from mybambu_mcp.transfer.schemas import Rejected, RejectionKind


class ExchangeRate(BaseModel):
    currency: str
    rate: float


class SupportedCountry(BaseModel):
    country: str
    currency: str
    delivery_estimate: str


def get_exchange_rate(currency: str) -> Union[ExchangeRate, Rejected]:
    rate = EXCHANGE_RATES.get(currency)
    if rate is None:
        return Rejected(
            kind=RejectionKind.UNSUPPORTED_CURRENCY,
            detail=f"Unsupported currency: {currency}",
            supported=list(EXCHANGE_RATES.keys()),
            currency=currency,
        )
    return ExchangeRate(currency=currency, rate=rate)


def list_supported_countries() -> List[SupportedCountry]:
    return [
        SupportedCountry(country=country, currency=c.currency, delivery_estimate=c.delivery_estimate)
        for country, c in TRANSFER_CORRIDORS.items()
    ]
