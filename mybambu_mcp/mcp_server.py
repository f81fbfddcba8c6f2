"""
MyBambu FastMCP Server
----------------------
MCP tool server for international money transfers, meant to be driven by an
LLM chat agent (Claude Desktop, WhatsApp bridge, ...).

Tools exposed:
 - get_exchange_rate
 - get_supported_countries
 - send_money

Runs on stdio by default; set MCP_TRANSPORT=streamable-http to serve HTTP.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Literal, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, ValidationError

from mybambu_mcp.clients.wise_client import WiseClient
from mybambu_mcp.config import Settings, load_settings
from mybambu_mcp.logging_config import get_logger, setup_logging
from mybambu_mcp.quotes import get_exchange_rate, list_supported_countries
from mybambu_mcp.transfer.messages import render_countries, render_outcome, render_rate
from mybambu_mcp.transfer.schemas import BankDetails, ExchangeRateInput, SendMoneyInput, TransferRequest
from mybambu_mcp.transfer.service import TransferService

logger = logging.getLogger("mybambu.mcp_server")

SERVER_NAME = "mybambu-transfers"

# Canonical tool metadata (name -> description/params).
TOOL_METADATA = {
    "get_exchange_rate": {
        "description": "Get current exchange rate for USD to target currency",
        "params": {
            "target_currency": {
                "type": "string",
                "required": True,
                "enum": ["MXN", "COP", "BRL", "GBP", "EUR"],
            },
        },
    },
    "get_supported_countries": {
        "description": "Get list of countries where we can send money",
        "params": {},
    },
    "send_money": {
        "description": (
            "Send money internationally via Wise. Collects recipient bank details naturally "
            "through conversation. IMPORTANT: If bank details are missing, ask user for them, "
            "then call this tool again WITH bank_details parameter."
        ),
        "params": {
            "amount": {"type": "number", "required": True},
            "to_country": {"type": "string", "required": True},
            "recipient_name": {"type": "string", "required": True},
            "bank_details": {"type": "object", "required": False},
        },
    },
}

CurrencyCode = Literal["MXN", "COP", "BRL", "GBP", "EUR"]


class ToolResult(BaseModel):
    text: str
    is_error: bool = False


def _describe_validation_error(name: str, error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in e['loc']) or 'arguments'}: {e['msg']}"
        for e in error.errors()
    )
    return f"Invalid arguments for {name}: {problems}"


class ToolDispatcher:
    """
    Routes a tool name + argument payload to its handler and wraps the text
    into a success/error result.
    """

    def __init__(self, service: TransferService):
        self.service = service
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[str]]] = {
            "get_exchange_rate": self._get_exchange_rate,
            "get_supported_countries": self._get_supported_countries,
            "send_money": self._send_money,
        }

    @property
    def tool_names(self) -> list:
        return list(self._handlers.keys())

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        handler = self._handlers.get(name)
        if handler is None:
            logger.error("Tool error: Unknown tool: %s", name)
            return ToolResult(text=f"Error: Unknown tool: {name}", is_error=True)

        try:
            text = await handler(arguments or {})
        except ValidationError as e:
            message = _describe_validation_error(name, e)
            logger.error("Tool error: %s", message)
            return ToolResult(text=f"Error: {message}", is_error=True)
        except Exception as e:
            logger.exception("Tool error in %s: %s", name, e)
            return ToolResult(text=f"Error: {e}", is_error=True)
        return ToolResult(text=text)

    async def _get_exchange_rate(self, arguments: Dict[str, Any]) -> str:
        payload = ExchangeRateInput.model_validate(arguments)
        return render_rate(get_exchange_rate(payload.target_currency))

    async def _get_supported_countries(self, arguments: Dict[str, Any]) -> str:  # noqa: ARG002
        return render_countries(list_supported_countries())

    async def _send_money(self, arguments: Dict[str, Any]) -> str:
        payload = SendMoneyInput.model_validate(arguments)
        request = TransferRequest.from_input(payload)
        logger.info(
            "send_money amount=%s to_country=%s bank_fields=%s",
            request.amount_usd, request.destination_country, sorted(request.bank_details.keys()),
        )
        outcome = await self.service.execute_transfer(request)
        logger.info("send_money outcome=%s", outcome.outcome)
        return render_outcome(outcome, request)


def build_service(settings: Settings) -> TransferService:
    provider = None
    if settings.use_real_provider:
        provider = WiseClient(
            api_key=settings.wise_api_key,
            profile_id=settings.wise_profile_id,
            api_url=settings.wise_api_url,
            timeout=settings.wise_request_timeout,
        )
        logger.info("Wise service initialized for %s", settings.wise_api_url)
    return TransferService(settings, provider=provider)


def build_server(settings: Settings, service: Optional[TransferService] = None) -> FastMCP:
    dispatcher = ToolDispatcher(service or build_service(settings))
    mcp = FastMCP(name=SERVER_NAME)

    async def _call(name: str, arguments: Dict[str, Any]) -> str:
        result = await dispatcher.dispatch(name, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return result.text

    @mcp.tool(name="get_exchange_rate", description=TOOL_METADATA["get_exchange_rate"]["description"])
    async def get_exchange_rate_tool(target_currency: CurrencyCode) -> str:
        return await _call("get_exchange_rate", {"target_currency": target_currency})

    @mcp.tool(name="get_supported_countries", description=TOOL_METADATA["get_supported_countries"]["description"])
    async def get_supported_countries_tool() -> str:
        return await _call("get_supported_countries", {})

    @mcp.tool(name="send_money", description=TOOL_METADATA["send_money"]["description"])
    async def send_money_tool(
        amount: float,
        to_country: str,
        recipient_name: str,
        bank_details: Optional[BankDetails] = None,
    ) -> str:
        arguments: Dict[str, Any] = {
            "amount": amount,
            "to_country": to_country,
            "recipient_name": recipient_name,
        }
        if bank_details is not None:
            arguments["bank_details"] = bank_details.model_dump(exclude_none=True)
        return await _call("send_money", arguments)

    return mcp


# -----------------------------
# Start MCP server
# -----------------------------
def main():
    settings = load_settings()
    setup_logging(settings.log_dir, settings.log_level)
    log = get_logger("mcp_server")

    log.info("Initializing MyBambu MCP Server %s", settings.describe())
    server = build_server(settings)

    if settings.mcp_transport == "stdio":
        log.info("MCP Server running on stdio")
        server.run()
    else:
        log.info("Starting MCP HTTP server on http://%s:%s", settings.mcp_host, settings.mcp_port)
        server.run(
            transport=settings.mcp_transport,
            host=settings.mcp_host,
            port=settings.mcp_port,
        )


if __name__ == "__main__":
    main()
