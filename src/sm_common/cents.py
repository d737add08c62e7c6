"""Integer arithmetic utilities for cents-based balances.

All prices, amounts, and balances use int (cents). No float, no Decimal.
"""


def validate_amount(amount: int, field: str = "amount") -> None:
    """Validate that a money amount is a strictly positive integer of cents."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValueError(f"{field} must be a positive integer of cents, got {amount!r}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
