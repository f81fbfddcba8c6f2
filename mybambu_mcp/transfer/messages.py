"""
User-facing text for transfer outcomes and quote lookups.

Kept apart from the transfer service so decisions can be tested on data,
not on strings.
"""

from typing import List, Union

from mybambu_mcp.common.utils import format_currency, format_rate, format_usd
from mybambu_mcp.quotes import ExchangeRate, SupportedCountry
from mybambu_mcp.transfer.schemas import (
    Completed,
    NeedsInfo,
    Rejected,
    RejectionKind,
    Simulated,
    TransferOutcome,
    TransferRequest,
)


def _render_needs_info(outcome: NeedsInfo, request: TransferRequest) -> str:
    fields = "\n\n".join(
        f"• **{f.label}**: {f.description}\n  Example: {f.example}"
        for f in outcome.required_fields
    )
    text = (
        f"📝 To complete this {format_usd(request.amount_usd)} transfer to {request.recipient_name} "
        f"in {request.destination_country}, I need their bank details:\n\n"
        f"{outcome.instructions}\n\n"
        f"**Required fields:**\n{fields}\n\n"
    )
    if outcome.optional_fields:
        optional = "\n".join(
            f"• **{f.label}**: {f.description}" + (f" (defaults to {f.default})" if f.default else "")
            for f in outcome.optional_fields
        )
        text += f"Optional:\n{optional}\n\n"
    if outcome.invalid_fields:
        text += f"⚠️ These fields look invalid, please double-check: {', '.join(outcome.invalid_fields)}\n\n"
    return text + "**Once you provide these, I'll process the transfer immediately.**"


def _render_completed(outcome: Completed, request: TransferRequest) -> str:
    return (
        "✅ **Transfer Completed!**\n\n"
        f"💰 You sent: {format_usd(request.amount_usd)} USD\n"
        f"📩 {request.recipient_name} receives: {format_currency(outcome.recipient_amount, outcome.currency)}\n"
        f"💱 Exchange rate: {outcome.rate:.2f} {outcome.currency} per USD\n"
        f"💵 Wise fee: {format_usd(outcome.fee)} USD\n"
        f"⏱️  Estimated delivery: {outcome.delivery_estimate}\n"
        f"🆔 Transfer ID: {outcome.provider_transaction_id}\n\n"
        "✨ Real transfer processed via Wise API"
    )


def _render_simulated(outcome: Simulated, request: TransferRequest) -> str:
    if outcome.is_provider_fallback:
        header = "⚠️ **Transfer Simulated (Wise API Error)**"
        footer = (
            f"ℹ️ Wise API error: {outcome.reason[len('provider error: '):]}\n"
            "This was a simulated transfer. No real money was sent."
        )
    else:
        header = "✅ **Transfer Demo**"
        footer = (
            "🎭 This is a demo. No real money was sent.\n"
            "Set MODE=PRODUCTION to enable real transfers."
        )
    return (
        f"{header}\n\n"
        f"💰 You sent: {format_usd(request.amount_usd)} USD\n"
        f"📩 {request.recipient_name} receives: ~{format_currency(outcome.recipient_amount, outcome.currency)}\n"
        f"💱 Exchange rate: ~{format_rate(outcome.rate)} (estimated)\n"
        f"💵 Fee: ~{format_usd(outcome.fee)}\n"
        f"⏱️  Estimated delivery: {outcome.delivery_estimate}\n\n"
        f"{footer}"
    )


def render_rejected(outcome: Rejected) -> str:
    if outcome.kind is RejectionKind.UNSUPPORTED_COUNTRY:
        return f"❌ Sorry, we can't send money there yet.\n\n{outcome.detail}"
    return f"❌ {outcome.detail}"


def render_outcome(outcome: TransferOutcome, request: TransferRequest) -> str:
    if isinstance(outcome, NeedsInfo):
        return _render_needs_info(outcome, request)
    if isinstance(outcome, Completed):
        return _render_completed(outcome, request)
    if isinstance(outcome, Simulated):
        return _render_simulated(outcome, request)
    return render_rejected(outcome)


def render_rate(result: Union[ExchangeRate, Rejected]) -> str:
    if isinstance(result, Rejected):
        return f"{render_rejected(result)}\n\nSupported currencies: {', '.join(result.supported)}"
    return f"Current exchange rate: 1 USD = {format_rate(result.rate)} {result.currency}"


def render_countries(countries: List[SupportedCountry]) -> str:
    lines = "\n".join(f"• {c.country} ({c.currency}) - {c.delivery_estimate}" for c in countries)
    return f"We support transfers to:\n\n{lines}"
