"""Tool dispatch: name routing, argument validation and success/error tagging."""

import pytest
from fastmcp import FastMCP

from mybambu_mcp.mcp_server import TOOL_METADATA, ToolDispatcher, build_server, build_service
from mybambu_mcp.clients.wise_client import WiseClient
from mybambu_mcp.transfer.service import TransferService

from tests.conftest import FakeProvider


@pytest.fixture
def dispatcher(demo_settings):
    return ToolDispatcher(TransferService(demo_settings))


async def test_unknown_tool_is_error(dispatcher):
    result = await dispatcher.dispatch("delete_account", {})

    assert result.is_error
    assert result.text == "Error: Unknown tool: delete_account"


async def test_exchange_rate(dispatcher):
    result = await dispatcher.dispatch("get_exchange_rate", {"target_currency": "COP"})

    assert not result.is_error
    assert result.text == "Current exchange rate: 1 USD = 3,750 COP"


async def test_unsupported_currency_is_not_a_protocol_error(dispatcher):
    result = await dispatcher.dispatch("get_exchange_rate", {"target_currency": "JPY"})

    assert not result.is_error
    assert "Unsupported currency: JPY" in result.text


async def test_missing_arguments_are_errors(dispatcher):
    result = await dispatcher.dispatch("get_exchange_rate", {})

    assert result.is_error
    assert "target_currency" in result.text


async def test_supported_countries(dispatcher):
    result = await dispatcher.dispatch("get_supported_countries")

    assert not result.is_error
    assert result.text.startswith("We support transfers to:")
    assert "• United Kingdom (GBP) - Same day" in result.text


async def test_demo_send_money(dispatcher):
    result = await dispatcher.dispatch(
        "send_money",
        {"amount": 500, "to_country": "Mexico", "recipient_name": "Ana", "bank_details": {}},
    )

    assert not result.is_error
    assert "Transfer Demo" in result.text
    assert "~8,342.00 MXN" in result.text
    assert "~$15.00" in result.text
    assert "No real money was sent" in result.text


async def test_send_money_out_of_range_is_normal_result(dispatcher):
    result = await dispatcher.dispatch(
        "send_money", {"amount": 50000, "to_country": "Mexico", "recipient_name": "Ana"}
    )

    assert not result.is_error
    assert "between $10 and $10000" in result.text


async def test_send_money_bad_amount_is_error(dispatcher):
    result = await dispatcher.dispatch(
        "send_money", {"amount": "lots", "to_country": "Mexico", "recipient_name": "Ana"}
    )

    assert result.is_error
    assert "amount" in result.text


async def test_send_money_blank_recipient_is_error(dispatcher):
    result = await dispatcher.dispatch(
        "send_money", {"amount": 100, "to_country": "Mexico", "recipient_name": "   "}
    )
    assert result.is_error


async def test_needs_info_is_not_an_error(production_settings):
    dispatcher = ToolDispatcher(TransferService(production_settings, provider=FakeProvider()))

    result = await dispatcher.dispatch(
        "send_money", {"amount": 100, "to_country": "Europe", "recipient_name": "Hans", "bank_details": None}
    )

    assert not result.is_error
    assert "**IBAN**" in result.text
    assert "Example: DE89370400440532013000" in result.text


async def test_real_transfer_text(production_settings):
    provider = FakeProvider()
    dispatcher = ToolDispatcher(TransferService(production_settings, provider=provider))

    result = await dispatcher.dispatch(
        "send_money",
        {
            "amount": 500,
            "to_country": "Mexico",
            "recipient_name": "Ana",
            "bank_details": {"clabe": 200010077777777771},
        },
    )

    assert not result.is_error
    assert "Transfer Completed" in result.text
    assert "Transfer ID: 50001234" in result.text
    assert provider.calls[0].recipient_bank_account == "200010077777777771"


def test_tool_metadata_covers_dispatcher(dispatcher):
    assert sorted(TOOL_METADATA) == sorted(dispatcher.tool_names)


def test_build_service_uses_wise_only_in_production(demo_settings, production_settings):
    assert build_service(demo_settings).provider is None
    assert isinstance(build_service(production_settings).provider, WiseClient)


def test_build_server(demo_settings):
    assert isinstance(build_server(demo_settings), FastMCP)
