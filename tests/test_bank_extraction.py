"""Currency-keyed mapping of caller bank details to provider fields."""

from mybambu_mcp.transfer import service as transfer_service
from mybambu_mcp.transfer.schemas import Rejected, RejectionKind
from mybambu_mcp.transfer.service import TransferService, extract_bank_fields

from tests.conftest import VALID_BANK_DETAILS, make_request


def test_gbp_uses_account_number_and_sort_code():
    fields = extract_bank_fields("GBP", {"accountNumber": "123", "sortCode": "04-00-04"})
    assert fields == {"recipient_bank_account": "123", "recipient_bank_code": "04-00-04"}


def test_mxn_uses_clabe_and_empty_code():
    fields = extract_bank_fields("MXN", {"clabe": "002010077777777771"})
    assert fields == {"recipient_bank_account": "002010077777777771", "recipient_bank_code": ""}


def test_brl_sends_cpf_as_bank_code():
    fields = extract_bank_fields("BRL", {"accountNumber": "0009795493", "cpf": "12345678909"})
    assert fields == {"recipient_bank_account": "0009795493", "recipient_bank_code": "12345678909"}


def test_eur_uses_iban():
    fields = extract_bank_fields("EUR", {"iban": "DE89370400440532013000", "accountNumber": "999"})
    assert fields == {"recipient_bank_account": "DE89370400440532013000", "recipient_bank_code": ""}


def test_cop_defaults_account_type_and_keeps_extras():
    fields = extract_bank_fields("COP", {"accountNumber": "1", "phoneNumber": "+57300", "city": "Cali"})

    assert fields["recipient_bank_account"] == "1"
    assert fields["account_type"] == "SAVINGS"
    assert fields["phone_number"] == "+57300"
    assert fields["city"] == "Cali"
    assert fields["address"] is None


def test_cop_keeps_explicit_account_type():
    fields = extract_bank_fields("COP", {"accountNumber": "1", "accountType": "CURRENT"})
    assert fields["account_type"] == "CURRENT"


def test_missing_values_become_empty_strings():
    assert extract_bank_fields("GBP", {}) == {"recipient_bank_account": "", "recipient_bank_code": ""}


def test_unknown_currency_has_no_mapping():
    assert extract_bank_fields("JPY", {"accountNumber": "1"}) is None


def test_extraction_does_not_touch_input():
    details = {"clabe": "002010077777777771"}
    extract_bank_fields("MXN", details)
    assert details == {"clabe": "002010077777777771"}


async def test_corridor_without_mapping_is_rejected_before_provider(
    monkeypatch, production_settings, provider, requirements
):
    extractors = {k: v for k, v in transfer_service.BANK_FIELD_EXTRACTORS.items() if k != "MXN"}
    monkeypatch.setattr(transfer_service, "BANK_FIELD_EXTRACTORS", extractors)
    service = TransferService(production_settings, provider=provider, requirements=requirements)

    outcome = await service.execute_transfer(make_request(bank_details=VALID_BANK_DETAILS["Mexico"]))

    assert isinstance(outcome, Rejected)
    assert outcome.kind is RejectionKind.UNSUPPORTED_CURRENCY
    assert outcome.currency == "MXN"
    assert provider.calls == []
