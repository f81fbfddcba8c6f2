"""
Transfer Service Business Logic

Decides what happens to a send_money request:
  corridor lookup -> amount limits -> mode -> bank details -> execute / simulate

Every call returns exactly one of NeedsInfo, Completed, Simulated or Rejected.
Nothing here formats user-facing text (see transfer/messages.py).
"""

import logging
from typing import Callable, Dict, Mapping, Optional, Protocol, Union

from mybambu_mcp.common import recipient_fields
from mybambu_mcp.common.recipient_fields import BankRequirements, BankValidation
from mybambu_mcp.config import Settings
from mybambu_mcp.corridors import (
    EXCHANGE_RATES,
    SIMULATED_FEE_RATE,
    Corridor,
    find_corridor,
    supported_country_names,
)
from mybambu_mcp.transfer.schemas import (
    Completed,
    NeedsInfo,
    ProviderTransferParams,
    ProviderTransferResult,
    Rejected,
    RejectionKind,
    Simulated,
    TransferOutcome,
    TransferRequest,
)

logger = logging.getLogger("mybambu.transfer")

DEMO_MODE_REASON = "demo mode"


class BankRequirementsAdapter(Protocol):
    def get_requirements(self, currency: str) -> Optional[BankRequirements]: ...

    def validate(self, currency: str, bank_details: Mapping[str, str]) -> BankValidation: ...


class PaymentProvider(Protocol):
    async def send_money(self, params: ProviderTransferParams) -> ProviderTransferResult: ...


class RecipientFieldsAdapter:
    """BankRequirementsAdapter backed by common.recipient_fields."""

    def get_requirements(self, currency: str) -> Optional[BankRequirements]:
        return recipient_fields.get_bank_requirements(currency)

    def validate(self, currency: str, bank_details: Mapping[str, str]) -> BankValidation:
        return recipient_fields.validate_bank_details(currency, bank_details)


# -----------------------
# Bank field extraction
# -----------------------

BankFields = Dict[str, Optional[str]]


def _account_only(key: str) -> Callable[[Mapping[str, str]], BankFields]:
    def extract(details: Mapping[str, str]) -> BankFields:
        return {
            "recipient_bank_account": details.get(key) or "",
            "recipient_bank_code": "",
        }
    return extract


def _account_and_code(account_key: str, code_key: str) -> Callable[[Mapping[str, str]], BankFields]:
    def extract(details: Mapping[str, str]) -> BankFields:
        return {
            "recipient_bank_account": details.get(account_key) or "",
            "recipient_bank_code": details.get(code_key) or "",
        }
    return extract


def _colombia(details: Mapping[str, str]) -> BankFields:
    return {
        "recipient_bank_account": details.get("accountNumber") or "",
        "recipient_bank_code": "",
        "account_type": details.get("accountType") or "SAVINGS",
        "phone_number": details.get("phoneNumber"),
        "id_document_number": details.get("idDocumentNumber"),
        "address": details.get("address"),
        "city": details.get("city"),
        "post_code": details.get("postCode"),
    }


# Settlement currency -> how to map generic bank details to provider fields.
BANK_FIELD_EXTRACTORS: Mapping[str, Callable[[Mapping[str, str]], BankFields]] = {
    "MXN": _account_only("clabe"),
    "GBP": _account_and_code("accountNumber", "sortCode"),
    "BRL": _account_and_code("accountNumber", "cpf"),
    "EUR": _account_only("iban"),
    "COP": _colombia,
}


def extract_bank_fields(currency: str, bank_details: Mapping[str, str]) -> Optional[BankFields]:
    """
    Map caller bank details to the provider's normalized fields.
    Returns None when the currency has no extraction entry.
    """
    extractor = BANK_FIELD_EXTRACTORS.get(currency)
    if extractor is None:
        return None
    return extractor(bank_details)


def simulate(amount_usd: float, corridor: Corridor, reason: str) -> Simulated:
    """Estimate an outcome from the static rate table; never touches a provider."""
    rate = EXCHANGE_RATES[corridor.currency]
    fee = amount_usd * SIMULATED_FEE_RATE
    net = amount_usd - fee
    return Simulated(
        currency=corridor.currency,
        recipient_amount=net * rate,
        rate=rate,
        fee=fee,
        delivery_estimate=corridor.delivery_estimate,
        reason=reason,
    )


class TransferService:
    """
    Orchestrates a single send_money request. Stateless between calls; the
    corridor and rate tables are only read.
    """

    def __init__(
        self,
        settings: Settings,
        provider: Optional[PaymentProvider] = None,
        requirements: Optional[BankRequirementsAdapter] = None,
    ):
        self.settings = settings
        self.provider = provider
        self.requirements = requirements or RecipientFieldsAdapter()

    @property
    def use_real_provider(self) -> bool:
        return self.settings.use_real_provider and self.provider is not None

    async def execute_transfer(self, request: TransferRequest) -> TransferOutcome:
        corridor = find_corridor(request.destination_country)
        if corridor is None:
            supported = supported_country_names()
            logger.info("Rejected transfer to unsupported country %r", request.destination_country)
            return Rejected(
                kind=RejectionKind.UNSUPPORTED_COUNTRY,
                detail=f"Transfers to {request.destination_country} are not supported. "
                       f"Supported countries: {', '.join(supported)}",
                supported=supported,
            )

        if not corridor.allows(request.amount_usd):
            logger.info(
                "Rejected amount %s for %s (limits %s-%s)",
                request.amount_usd, request.destination_country, corridor.min_amount, corridor.max_amount,
            )
            return Rejected(
                kind=RejectionKind.AMOUNT_OUT_OF_RANGE,
                detail=f"Amount must be between ${corridor.min_amount:g} and ${corridor.max_amount:g} USD "
                       f"for {request.destination_country} ({corridor.currency})",
                min_amount=corridor.min_amount,
                max_amount=corridor.max_amount,
                currency=corridor.currency,
            )

        if not self.use_real_provider:
            logger.info("Simulating %s USD transfer to %s (demo mode)", request.amount_usd, request.destination_country)
            return simulate(request.amount_usd, corridor, DEMO_MODE_REASON)

        requirements = self.requirements.get_requirements(corridor.currency)
        if requirements is not None:
            validation = self.requirements.validate(corridor.currency, request.bank_details)
            if not validation.valid:
                logger.info(
                    "Bank details incomplete for %s missing=%s invalid=%s",
                    corridor.currency, validation.missing_fields, validation.invalid_fields,
                )
                return NeedsInfo(
                    currency=corridor.currency,
                    instructions=requirements.instructions,
                    fields=requirements.fields,
                    missing_fields=validation.missing_fields,
                    invalid_fields=validation.invalid_fields,
                )

        bank_fields = extract_bank_fields(corridor.currency, request.bank_details)
        if bank_fields is None:
            logger.warning("No bank field mapping for currency %s", corridor.currency)
            return Rejected(
                kind=RejectionKind.UNSUPPORTED_CURRENCY,
                detail=f"Real transfers in {corridor.currency} are not supported yet",
                currency=corridor.currency,
            )

        params = ProviderTransferParams(
            amount=request.amount_usd,
            recipient_name=request.recipient_name,
            recipient_country=request.destination_country,
            target_currency=corridor.currency,
            reference=f"MyBambu transfer to {request.recipient_name}",
            **bank_fields,
        )
        return await self._execute_real(params, corridor)

    async def _execute_real(self, params: ProviderTransferParams, corridor: Corridor) -> Union[Completed, Simulated]:
        """One provider attempt; any failure degrades to a simulated estimate."""
        try:
            logger.info("Processing real transfer of %s USD to %s", params.amount, params.recipient_country)
            result = await self.provider.send_money(params)
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            logger.exception("Provider transfer failed, falling back to simulation: %s", message)
            return simulate(params.amount, corridor, f"provider error: {message}")

        logger.info("Real transfer created: %s", result.transfer_id)
        return Completed(
            currency=corridor.currency,
            recipient_amount=result.target_amount,
            rate=result.rate,
            fee=result.fee,
            delivery_estimate=result.estimated_delivery or corridor.delivery_estimate,
            provider_transaction_id=result.transfer_id,
        )
