"""Money and Quantity, the two value objects every aggregate is built from.

Both are frozen dataclasses that reject bad input in ``__post_init__``,
so an Order or Payment can never hold a negative price or a zero line.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from matpay.domain.exceptions import InvalidAmount, ValidationError

DEFAULT_CURRENCY = "GHS"
CENT = Decimal("0.01")


@total_ordering
@dataclass(frozen=True)
class Money:
    """A non-negative Decimal amount tagged with an ISO currency code.

    Amounts stay in major units (cedis) everywhere except at the gateway
    boundary, which asks for ``minor_units``.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise InvalidAmount(f"Expected a Decimal amount, got {type(self.amount).__name__}")
        if self.amount.is_signed() and self.amount != 0:
            raise InvalidAmount(f"Negative amounts are not allowed: {self.amount}")

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build from user or JSON input; floats go through ``str`` first."""
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidAmount(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0.00"), currency)

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same(other).amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        remaining = self.amount - self._same(other).amount
        if remaining < 0:
            raise InvalidAmount(f"Cannot subtract {other} from {self}")
        return Money(remaining, self.currency)

    def __mul__(self, times: int) -> Money:
        if not isinstance(times, int):
            raise TypeError(f"Money can only be multiplied by an int, not {type(times).__name__}")
        return Money(self.amount * times, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._same(other).amount

    def apply_rate(self, rate: Decimal) -> Money:
        """Multiply by a fractional rate, rounded half-up to the cent."""
        return Money((self.amount * rate).quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    def rounded(self) -> Money:
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def minor_units(self) -> int:
        """Amount in the smallest currency unit (pesewas, kobo, cents)."""
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"

    def _same(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise ValidationError(f"Currency mismatch: {self.currency} vs {other.currency}")
        return other


@dataclass(frozen=True)
class Quantity:
    """Units of one material on an order line; always at least 1."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not pass as one unit
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Quantity must be a whole number, got {self.value!r}")
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
