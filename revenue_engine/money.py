"""
Money Value Type

Fixed-precision currency amounts backed by Decimal. Arithmetic never rounds;
rounding to cents happens only in `quantized()` and the display helpers.
"""

import os
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import CurrencyMismatchError, InputValidationError

# One currency per deployment
DEFAULT_CURRENCY = os.environ.get("REVENUE_CURRENCY", "USD")

CENT = Decimal("0.01")


def to_decimal(value, field: str = "value") -> Decimal:
    """Convert int/str/float/Decimal to a finite Decimal via str() so floats keep their printed value."""
    if isinstance(value, bool):
        raise InputValidationError(f"{field} must be numeric, got: {value!r}", field=field)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InputValidationError(f"{field} must be numeric, got: {value!r}", field=field) from None
    if not result.is_finite():
        raise InputValidationError(f"{field} must be a finite number, got: {value!r}", field=field)
    return result


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """An immutable amount in a single currency."""

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", to_decimal(self.amount, "amount"))
        if not self.amount.is_finite():
            raise InputValidationError(f"amount must be finite, got: {self.amount}", field="amount")

    @classmethod
    def of(cls, value, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(to_decimal(value, "amount"), currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(Decimal("0"), currency)

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def multiply(self, factor) -> "Money":
        return Money(self.amount * to_decimal(factor, "factor"), self.currency)

    __add__ = add
    __sub__ = subtract

    def __mul__(self, factor) -> "Money":
        return self.multiply(factor)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def quantized(self) -> "Money":
        """Rounded to cents. Display and persistence boundary only."""
        return Money(quantize_money(self.amount), self.currency)

    def __str__(self) -> str:
        return f"{quantize_money(self.amount):,.2f} {self.currency}"
