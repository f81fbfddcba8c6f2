"""
Wise Client
Executes real international transfers through the Wise REST API.

Flow for one transfer:
  1. create a quote (USD -> target currency)
  2. create the recipient account for the target currency
  3. create the transfer against the quote
  4. fund the transfer from the profile's balance
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from mybambu_mcp.common.recipient_fields import normalize_identifier
from mybambu_mcp.transfer.schemas import ProviderTransferParams, ProviderTransferResult

logger = logging.getLogger("mybambu.wise")

SOURCE_CURRENCY = "USD"

# Wise recipient account type per settlement currency.
ACCOUNT_TYPES = {
    "MXN": "mexican",
    "GBP": "sort_code",
    "BRL": "brazil",
    "EUR": "iban",
    "COP": "colombia",
}


class ProviderError(Exception):
    """Raised for any failed call to the payment provider."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProviderNotConfigured(ProviderError):
    pass


def _error_message(response: httpx.Response) -> str:
    """Pull the most useful message out of a Wise error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict):
                return first.get("message") or first.get("code") or str(first)
        for key in ("error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)[:200]


def build_account_details(params: ProviderTransferParams) -> Dict[str, Any]:
    """
    Wise `details` block for the recipient account of params.target_currency.
    Pattern-checked identifiers are sent without separators.
    """
    currency = params.target_currency
    details: Dict[str, Any] = {"legalType": "PRIVATE"}

    if currency == "MXN":
        details["clabe"] = normalize_identifier(params.recipient_bank_account)
    elif currency == "GBP":
        details["sortCode"] = normalize_identifier(params.recipient_bank_code)
        details["accountNumber"] = normalize_identifier(params.recipient_bank_account)
    elif currency == "BRL":
        details["accountNumber"] = params.recipient_bank_account
        details["cpf"] = normalize_identifier(params.recipient_bank_code)
        details["accountType"] = "CHECKING"
    elif currency == "EUR":
        details["IBAN"] = normalize_identifier(params.recipient_bank_account)
    elif currency == "COP":
        details.update({
            "accountNumber": params.recipient_bank_account,
            "accountType": (params.account_type or "SAVINGS").upper(),
            "phoneNumber": params.phone_number,
            "idDocumentType": "CC",
            "idDocumentNumber": normalize_identifier(params.id_document_number or ""),
            "address": {
                "country": "CO",
                "city": params.city,
                "postCode": params.post_code,
                "firstLine": params.address,
            },
        })
    else:
        raise ProviderError(f"No Wise account type for currency {currency}")
    return details


def _pick_payment_option(quote: Dict[str, Any]) -> Dict[str, Any]:
    options = [o for o in quote.get("paymentOptions") or [] if not o.get("disabled")]
    for option in options:
        if option.get("payIn") == "BALANCE" and option.get("payOut") == "BANK_TRANSFER":
            return option
    if options:
        return options[0]
    raise ProviderError("Wise quote returned no usable payment option")


def quote_terms(quote: Dict[str, Any]) -> Dict[str, Any]:
    """
    Rate, target amount, fee and delivery estimate of a quote.
    Raises ProviderError if any monetary value is missing or not a number.
    """
    option = _pick_payment_option(quote)
    fee = option.get("fee") or {}
    try:
        terms = {
            "rate": float(quote["rate"]),
            "target_amount": float(option["targetAmount"]),
            "fee": float(fee["total"]),
        }
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderError(f"Wise quote is missing pricing data: {e}") from e
    terms["estimated_delivery"] = option.get("formattedEstimatedDelivery") or option.get("estimatedDelivery")
    return terms


class WiseClient:
    """
    Async client for the subset of the Wise API needed to send money.

    Without an injected http_client, each send_money call opens and closes
    its own httpx.AsyncClient.
    """

    def __init__(
        self,
        api_key: str,
        profile_id: str,
        api_url: str = "https://api.sandbox.transferwise.tech",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ProviderNotConfigured("Wise API key is not configured")
        self.profile_id = profile_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.http_client = http_client
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.http_client is not None:
            yield self.http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def _post(self, client: httpx.AsyncClient, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.api_url}{path}"
        try:
            logger.info("Wise POST %s payload_keys=%s", path, list(payload.keys()))
            response = await client.post(url, json=payload, headers=self._headers)
        except httpx.RequestError as e:
            logger.error("Wise POST %s unreachable: %s", path, e)
            raise ProviderError(f"Wise API unreachable: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error("Wise POST %s failed status=%s detail=%s", path, response.status_code, message)
            raise ProviderError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Wise API returned invalid JSON for {path}") from e

    async def _create_quote(self, client: httpx.AsyncClient, target_currency: str, source_amount: float) -> Dict[str, Any]:
        return await self._post(
            client,
            f"/v3/profiles/{self.profile_id}/quotes",
            {
                "sourceCurrency": SOURCE_CURRENCY,
                "targetCurrency": target_currency,
                "sourceAmount": source_amount,
                "targetAmount": None,
                "payOut": "BANK_TRANSFER",
            },
        )

    async def _create_recipient(self, client: httpx.AsyncClient, params: ProviderTransferParams) -> Dict[str, Any]:
        account_type = ACCOUNT_TYPES.get(params.target_currency)
        if account_type is None:
            raise ProviderError(f"No Wise account type for currency {params.target_currency}")
        return await self._post(
            client,
            "/v1/accounts",
            {
                "currency": params.target_currency,
                "type": account_type,
                "profile": self.profile_id,
                "accountHolderName": params.recipient_name,
                "details": build_account_details(params),
            },
        )

    async def _create_transfer(
        self, client: httpx.AsyncClient, recipient_id: Any, quote_id: str, reference: str
    ) -> Dict[str, Any]:
        return await self._post(
            client,
            "/v1/transfers",
            {
                "targetAccount": recipient_id,
                "quoteUuid": quote_id,
                "customerTransactionId": str(uuid.uuid4()),
                "details": {"reference": reference},
            },
        )

    async def _fund_transfer(self, client: httpx.AsyncClient, transfer_id: Any) -> Dict[str, Any]:
        data = await self._post(
            client,
            f"/v3/profiles/{self.profile_id}/transfers/{transfer_id}/payments",
            {"type": "BALANCE"},
        )
        if data.get("status") != "COMPLETED":
            raise ProviderError(
                f"Funding transfer {transfer_id} failed: {data.get('errorCode') or data.get('status')}"
            )
        return data

    async def send_money(self, params: ProviderTransferParams) -> ProviderTransferResult:
        """
        Run the full quote -> recipient -> transfer -> fund sequence.
        Raises ProviderError on any failure; nothing is retried. The result is
        built before funding, so nothing can fail once money has moved.
        """
        if not self.profile_id:
            raise ProviderNotConfigured("Wise profile id is not configured")

        async with self._session() as client:
            quote = await self._create_quote(client, params.target_currency, params.amount)
            terms = quote_terms(quote)
            if not quote.get("id"):
                raise ProviderError("Wise quote has no id")

            recipient = await self._create_recipient(client, params)
            if not recipient.get("id"):
                raise ProviderError("Wise recipient account has no id")

            transfer = await self._create_transfer(client, recipient["id"], quote["id"], params.reference)
            if not transfer.get("id"):
                raise ProviderError("Wise transfer has no id")

            result = ProviderTransferResult(transfer_id=str(transfer["id"]), **terms)
            await self._fund_transfer(client, transfer["id"])

        logger.info("Wise transfer %s funded for %s %s", result.transfer_id, params.amount, SOURCE_CURRENCY)
        return result
