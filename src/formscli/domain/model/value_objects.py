"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from formscli.domain.exceptions import InvalidArgumentError, ValidationError

_CURRENCY_SYMBOLS = {
    "USD": ("$", ""),
    "CAD": ("$", " CAD"),
    "AUD": ("$", " AUD"),
    "EUR": ("", " €"),
    "GBP": ("£", ""),
    "JPY": ("¥", ""),
}


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency, used to display payment amounts.

    Uses Decimal so stored strings such as ``"10.10"`` render exactly.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        prefix, suffix = _CURRENCY_SYMBOLS.get(
            self.currency.upper(), ("", f" {self.currency.upper()}")
        )
        sign = "-" if self.amount < 0 else ""
        digits = 0 if self.currency.upper() == "JPY" else 2
        return f"{sign}{prefix}{abs(self.amount):,.{digits}f}{suffix}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str | None = None) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        text = str(amount).replace(",", "").strip()
        try:
            return Money(Decimal(text), currency or "USD")
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True, order=True)
class Version:
    """A dotted release number such as ``1.9.17.8``, compared numerically."""

    parts: tuple[int, ...]

    @staticmethod
    def parse(text: str) -> Version:
        # Pre-release suffixes ("1.0-beta-2") compare by their numeric prefix.
        core = str(text).strip().split("-", 1)[0]
        try:
            parts = tuple(int(p) for p in core.split("."))
        except ValueError:
            raise InvalidArgumentError(f"Invalid version: {text!r}")
        # Strip trailing zeros so 2.4 == 2.4.0
        while len(parts) > 1 and parts[-1] == 0:
            parts = parts[:-1]
        return Version(parts)

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.parts)
