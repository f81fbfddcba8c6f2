"""
Recipient bank-field requirements per settlement currency.

Answers two questions for the transfer service:
  - which fields must be collected for a currency (with labels, descriptions
    and examples the chat agent can show to the user)
  - whether a candidate bank-details mapping satisfies those requirements
"""

import re
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field


class BankField(BaseModel):
    name: str
    label: str
    description: str
    example: str
    pattern: Optional[str] = None
    required: bool = True
    default: Optional[str] = None


class BankRequirements(BaseModel):
    currency: str
    instructions: str
    fields: List[BankField]


class BankValidation(BaseModel):
    valid: bool
    missing_fields: List[str] = Field(default_factory=list)
    invalid_fields: List[str] = Field(default_factory=list)


# Characters users commonly type inside numeric identifiers.
_SEPARATORS = re.compile(r"[\s\-./]")

_REQUIREMENTS: Dict[str, BankRequirements] = {
    "MXN": BankRequirements(
        currency="MXN",
        instructions="For Mexico, I need the recipient's CLABE (interbank account number).",
        fields=[
            BankField(
                name="clabe",
                label="CLABE",
                description="18-digit Mexican interbank account number",
                example="002010077777777771",
                pattern=r"^\d{18}$",
            ),
        ],
    ),
    "GBP": BankRequirements(
        currency="GBP",
        instructions="For the United Kingdom, I need the recipient's sort code and account number.",
        fields=[
            BankField(
                name="sortCode",
                label="Sort code",
                description="6-digit UK bank sort code",
                example="04-00-04",
                pattern=r"^\d{6}$",
            ),
            BankField(
                name="accountNumber",
                label="Account number",
                description="8-digit UK account number",
                example="12345678",
                pattern=r"^\d{8}$",
            ),
        ],
    ),
    "BRL": BankRequirements(
        currency="BRL",
        instructions="For Brazil, I need the recipient's account number and CPF.",
        fields=[
            BankField(
                name="accountNumber",
                label="Account number",
                description="Brazilian bank account number",
                example="0009795493",
            ),
            BankField(
                name="cpf",
                label="CPF",
                description="11-digit Brazilian taxpayer ID (Cadastro de Pessoas Físicas)",
                example="123.456.789-09",
                pattern=r"^\d{11}$",
            ),
        ],
    ),
    "EUR": BankRequirements(
        currency="EUR",
        instructions="For Europe, I need the recipient's IBAN.",
        fields=[
            BankField(
                name="iban",
                label="IBAN",
                description="International Bank Account Number",
                example="DE89370400440532013000",
                pattern=r"^[A-Z]{2}\d{2}[A-Z0-9]{11,30}$",
            ),
        ],
    ),
    "COP": BankRequirements(
        currency="COP",
        instructions=(
            "For Colombia, I need the recipient's account number, Cédula, "
            "phone number and address."
        ),
        fields=[
            BankField(
                name="accountNumber",
                label="Account number",
                description="Colombian bank account number",
                example="1234567890",
            ),
            BankField(
                name="accountType",
                label="Account type",
                description="SAVINGS or CURRENT",
                example="SAVINGS",
                required=False,
                default="SAVINGS",
            ),
            BankField(
                name="idDocumentNumber",
                label="Cédula",
                description="Colombian national ID number",
                example="1234567890",
                pattern=r"^\d{6,10}$",
            ),
            BankField(
                name="phoneNumber",
                label="Phone number",
                description="Recipient's phone number including country code",
                example="+573001234567",
            ),
            BankField(
                name="address",
                label="Address",
                description="Recipient's street address",
                example="Calle 123 #45-67",
            ),
            BankField(
                name="city",
                label="City",
                description="Recipient's city",
                example="Bogotá",
            ),
            BankField(
                name="postCode",
                label="Postal code",
                description="Recipient's postal code",
                example="110111",
            ),
        ],
    ),
}

ACCOUNT_TYPES = ("SAVINGS", "CURRENT", "CHECKING")


def normalize_identifier(value: str) -> str:
    """Strip separators and upper-case, e.g. '04-00-04' -> '040004'."""
    return _SEPARATORS.sub("", value).upper()


def get_bank_requirements(currency: str) -> Optional[BankRequirements]:
    """
    Return the fields to collect for `currency`, or None when no bank details
    are needed for it.
    """
    return _REQUIREMENTS.get(currency.upper())


def validate_bank_details(currency: str, bank_details: Mapping[str, str]) -> BankValidation:
    requirements = get_bank_requirements(currency)
    if requirements is None:
        return BankValidation(valid=True)

    missing: List[str] = []
    invalid: List[str] = []
    for field in requirements.fields:
        raw = bank_details.get(field.name)
        value = str(raw).strip() if raw is not None else ""
        if not value:
            if field.required:
                missing.append(field.name)
            continue
        if field.pattern and not re.match(field.pattern, normalize_identifier(value)):
            invalid.append(field.name)

    account_type = bank_details.get("accountType")
    if currency.upper() == "COP" and account_type and account_type.strip().upper() not in ACCOUNT_TYPES:
        invalid.append("accountType")

    return BankValidation(
        valid=not missing and not invalid,
        missing_fields=missing,
        invalid_fields=invalid,
    )
