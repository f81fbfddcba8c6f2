"""
Shared fixtures: settings for both runtime modes and fakes for the two
collaborators of the transfer service (bank requirements + payment provider).
"""

from typing import List, Mapping, Optional

import pytest

from mybambu_mcp.common import recipient_fields
from mybambu_mcp.common.recipient_fields import BankRequirements, BankValidation
from mybambu_mcp.config import Mode, Settings
from mybambu_mcp.transfer.schemas import ProviderTransferParams, ProviderTransferResult, TransferRequest


class FakeProvider:
    """Records every call; returns `result` or raises `error`."""

    def __init__(self, result: Optional[ProviderTransferResult] = None, error: Optional[Exception] = None):
        self.result = result or ProviderTransferResult(
            target_amount=8401.37,
            rate=17.3412,
            fee=4.83,
            estimated_delivery="by Thursday",
            transfer_id="50001234",
        )
        self.error = error
        self.calls: List[ProviderTransferParams] = []

    async def send_money(self, params: ProviderTransferParams) -> ProviderTransferResult:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.result


class SpyRequirements:
    """Delegates to the real recipient_fields module and counts calls."""

    def __init__(self):
        self.calls = 0

    def get_requirements(self, currency: str) -> Optional[BankRequirements]:
        self.calls += 1
        return recipient_fields.get_bank_requirements(currency)

    def validate(self, currency: str, bank_details: Mapping[str, str]) -> BankValidation:
        self.calls += 1
        return recipient_fields.validate_bank_details(currency, bank_details)


@pytest.fixture
def demo_settings() -> Settings:
    return Settings(mode=Mode.DEMO)


@pytest.fixture
def production_settings() -> Settings:
    return Settings(mode=Mode.PRODUCTION, wise_api_key="test-key", wise_profile_id="16000000")


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def requirements() -> SpyRequirements:
    return SpyRequirements()


def make_request(amount=500, country="Mexico", name="Ana", bank_details=None) -> TransferRequest:
    return TransferRequest(
        amount_usd=amount,
        destination_country=country,
        recipient_name=name,
        bank_details=bank_details or {},
    )


VALID_BANK_DETAILS = {
    "Mexico": {"clabe": "002010077777777771"},
    "United Kingdom": {"sortCode": "04-00-04", "accountNumber": "12345678"},
    "Brazil": {"accountNumber": "0009795493", "cpf": "123.456.789-09"},
    "Europe": {"iban": "DE89 3704 0044 0532 0130 00"},
    "Colombia": {
        "accountNumber": "1234567890",
        "idDocumentNumber": "1020304050",
        "phoneNumber": "+573001234567",
        "address": "Calle 123 #45-67",
        "city": "Bogotá",
        "postCode": "110111",
    },
}
