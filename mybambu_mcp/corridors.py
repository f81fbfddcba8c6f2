"""
Static corridor and fallback-rate tables.

Both tables are defined at import time and never mutated. Declaration order
of TRANSFER_CORRIDORS is the order countries are listed to users.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Corridor(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency: str = Field(..., min_length=3, max_length=3)
    delivery_estimate: str
    min_amount: float = Field(..., gt=0)
    max_amount: float = Field(..., gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "Corridor":
        if self.min_amount >= self.max_amount:
            raise ValueError("min_amount must be lower than max_amount")
        return self

    def allows(self, amount: float) -> bool:
        return self.min_amount <= amount <= self.max_amount


TRANSFER_CORRIDORS: Mapping[str, Corridor] = MappingProxyType({
    "Mexico": Corridor(currency="MXN", delivery_estimate="1-2 business days", min_amount=10, max_amount=10000),
    "Colombia": Corridor(currency="COP", delivery_estimate="1-3 business days", min_amount=10, max_amount=10000),
    "Brazil": Corridor(currency="BRL", delivery_estimate="1-3 business days", min_amount=10, max_amount=10000),
    "United Kingdom": Corridor(currency="GBP", delivery_estimate="Same day", min_amount=10, max_amount=10000),
    "Europe": Corridor(currency="EUR", delivery_estimate="1 business day", min_amount=10, max_amount=10000),
})

# USD -> target currency. Demo/fallback only; real transfers use provider rates.
EXCHANGE_RATES: Mapping[str, float] = MappingProxyType({
    "MXN": 17.2,
    "COP": 3750,
    "BRL": 5.1,
    "GBP": 0.79,
    "EUR": 0.92,
})

SIMULATED_FEE_RATE = 0.03


def find_corridor(country: str) -> Optional[Corridor]:
    # Exact, case-sensitive match on the table label.
    return TRANSFER_CORRIDORS.get(country)


def supported_country_names() -> list[str]:
    return list(TRANSFER_CORRIDORS.keys())
