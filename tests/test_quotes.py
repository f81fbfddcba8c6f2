"""Static rate lookup and corridor listing."""

import pytest
from pydantic import ValidationError

from mybambu_mcp.corridors import TRANSFER_CORRIDORS, Corridor
from mybambu_mcp.quotes import ExchangeRate, get_exchange_rate, list_supported_countries
from mybambu_mcp.transfer.schemas import Rejected, RejectionKind


def test_rate_lookup_returns_table_value():
    result = get_exchange_rate("COP")
    assert result == ExchangeRate(currency="COP", rate=3750)


def test_unknown_currency_rejected():
    result = get_exchange_rate("JPY")
    assert isinstance(result, Rejected)
    assert result.kind is RejectionKind.UNSUPPORTED_CURRENCY
    assert "JPY" in result.detail


def test_countries_listed_in_declaration_order():
    countries = list_supported_countries()

    assert [c.country for c in countries] == ["Mexico", "Colombia", "Brazil", "United Kingdom", "Europe"]
    assert countries[3].currency == "GBP"
    assert countries[3].delivery_estimate == "Same day"


def test_corridor_bounds_must_be_ordered():
    with pytest.raises(ValidationError):
        Corridor(currency="MXN", delivery_estimate="x", min_amount=100, max_amount=10)


def test_corridors_are_frozen():
    with pytest.raises(ValidationError):
        TRANSFER_CORRIDORS["Mexico"].max_amount = 1
    with pytest.raises(TypeError):
        TRANSFER_CORRIDORS["Japan"] = TRANSFER_CORRIDORS["Mexico"]
