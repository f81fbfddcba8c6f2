"""
Schemas for the send_money tool: the validated request, the provider-facing
parameters and result, and the four mutually exclusive transfer outcomes.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mybambu_mcp.common.recipient_fields import BankField


class BankDetails(BaseModel):
    """
    Caller-supplied recipient bank details. A superset across currencies;
    which fields are required depends on the corridor currency.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    clabe: Optional[str] = None
    iban: Optional[str] = None
    sortCode: Optional[str] = None
    accountNumber: Optional[str] = None
    cpf: Optional[str] = None
    bankCode: Optional[str] = None
    accountType: Optional[str] = None
    phoneNumber: Optional[str] = None
    idDocumentNumber: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postCode: Optional[str] = None

    def as_mapping(self) -> Dict[str, str]:
        return {k: str(v) for k, v in self.model_dump(exclude_none=True).items()}


class SendMoneyInput(BaseModel):
    """Tool arguments for send_money."""

    amount: float
    to_country: str
    recipient_name: str = Field(..., min_length=1)
    bank_details: BankDetails = Field(default_factory=BankDetails)

    @field_validator("bank_details", mode="before")
    @classmethod
    def _default_bank_details(cls, value):
        return {} if value is None else value

    @field_validator("recipient_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("recipient_name must not be empty")
        return value


class ExchangeRateInput(BaseModel):
    target_currency: str


class TransferRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_usd: float
    destination_country: str
    recipient_name: str = Field(..., min_length=1)
    bank_details: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_input(cls, payload: SendMoneyInput) -> "TransferRequest":
        return cls(
            amount_usd=payload.amount,
            destination_country=payload.to_country,
            recipient_name=payload.recipient_name,
            bank_details=payload.bank_details.as_mapping(),
        )


class ProviderTransferParams(BaseModel):
    """Normalized parameters handed to the payment provider."""

    amount: float
    recipient_name: str
    recipient_country: str
    target_currency: str
    recipient_bank_account: str = ""
    recipient_bank_code: str = ""
    reference: str = ""
    account_type: Optional[str] = None
    phone_number: Optional[str] = None
    id_document_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    post_code: Optional[str] = None


class ProviderTransferResult(BaseModel):
    target_amount: float
    rate: float
    fee: float
    transfer_id: str
    estimated_delivery: Optional[str] = None


class RejectionKind(str, Enum):
    UNSUPPORTED_COUNTRY = "UnsupportedCountry"
    AMOUNT_OUT_OF_RANGE = "AmountOutOfRange"
    UNSUPPORTED_CURRENCY = "UnsupportedCurrency"


class NeedsInfo(BaseModel):
    outcome: Literal["needs_info"] = "needs_info"
    currency: str
    instructions: str
    fields: List[BankField]
    missing_fields: List[str] = Field(default_factory=list)
    invalid_fields: List[str] = Field(default_factory=list)

    @property
    def required_fields(self) -> List[BankField]:
        return [f for f in self.fields if f.required]

    @property
    def optional_fields(self) -> List[BankField]:
        return [f for f in self.fields if not f.required]


class Completed(BaseModel):
    outcome: Literal["completed"] = "completed"
    currency: str
    recipient_amount: float
    rate: float
    fee: float
    delivery_estimate: str
    provider_transaction_id: str


class Simulated(BaseModel):
    outcome: Literal["simulated"] = "simulated"
    currency: str
    recipient_amount: float
    rate: float
    fee: float
    delivery_estimate: str
    reason: str

    @property
    def is_provider_fallback(self) -> bool:
        return self.reason.startswith("provider error")


class Rejected(BaseModel):
    outcome: Literal["rejected"] = "rejected"
    kind: RejectionKind
    detail: str
    supported: List[str] = Field(default_factory=list)
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    currency: Optional[str] = None


TransferOutcome = Annotated[
    Union[NeedsInfo, Completed, Simulated, Rejected],
    Field(discriminator="outcome"),
]
