"""
Common utilities for the MyBambu tools
"""


def format_usd(amount: float) -> str:
    """
    Format a USD amount, e.g. 1500 -> '$1,500.00'
    """
    return f"${amount:,.2f}"


def format_currency(amount: float, currency: str) -> str:
    """
    Format amount in a settlement currency, e.g. '8,342.00 MXN'
    """
    return f"{amount:,.2f} {currency}"


def format_rate(rate: float) -> str:
    # Keep table rates like 3750 or 0.79 readable without trailing zeros.
    return f"{rate:,.4f}".rstrip("0").rstrip(".")
