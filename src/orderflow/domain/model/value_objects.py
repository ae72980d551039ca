"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from orderflow.domain.exceptions import ConflictError, ValidationError

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.  Amounts are always stored
    rounded half-up to two decimal places.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if not isinstance(self.currency, str) or not self.currency.strip():
            raise ValidationError("Currency cannot be empty")

        # quantize fails once the cents no longer fit the decimal precision
        try:
            rounded = self.amount.copy_abs().quantize(_CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValidationError(
                f"Money amount out of range: {self.amount}"
            ) from exc

        # frozen dataclass: normalise through object.__setattr__
        # (copy_abs drops the sign of Decimal("-0"))
        object.__setattr__(self, "amount", rounded)
        object.__setattr__(self, "currency", self.currency.strip().upper())

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount).strip()), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0"), currency)


_PRODUCT_CODE_PATTERN = re.compile(r"[A-Z0-9-]+")
MAX_PRODUCT_CODE_LENGTH = 50


@dataclass(frozen=True)
class ProductCode:
    """Stock keeping unit: upper-case letters, digits and hyphens only."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError("SKU cannot be empty")
        if len(self.value) > MAX_PRODUCT_CODE_LENGTH:
            raise ValidationError(
                f"SKU cannot exceed {MAX_PRODUCT_CODE_LENGTH} characters"
            )
        if not _PRODUCT_CODE_PATTERN.fullmatch(self.value):
            raise ValidationError(
                f"SKU '{self.value}' must contain only uppercase letters, "
                f"numbers, and hyphens"
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StockCounters:
    """Available and reserved units for one catalog item.

    Invariants:
    - neither counter is ever negative
    - ``reserve`` and ``release`` only move units between the two counters;
      ``commit`` is the only transition that shrinks ``total``

    Every transition returns a new instance.
    """

    available: int
    reserved: int = 0

    def __post_init__(self) -> None:
        for label, value in (("Available", self.available), ("Reserved", self.reserved)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValidationError(
                    f"{label} stock must be an integer, got {type(value).__name__}"
                )
            if value < 0:
                raise ValidationError(f"{label} stock cannot be negative")

    @property
    def total(self) -> int:
        return self.available + self.reserved

    def reserve(self, quantity: int) -> StockCounters:
        """Move *quantity* units from available to reserved."""
        _require_positive(quantity, "Reserve")
        if quantity > self.available:
            raise ConflictError(
                f"Cannot reserve {quantity} items. Only {self.available} available."
            )
        return StockCounters(self.available - quantity, self.reserved + quantity)

    def release(self, quantity: int) -> StockCounters:
        """Return *quantity* reserved units to available."""
        _require_positive(quantity, "Release")
        if quantity > self.reserved:
            raise ConflictError(
                f"Cannot release {quantity} items. Only {self.reserved} reserved."
            )
        return StockCounters(self.available + quantity, self.reserved - quantity)

    def commit(self, quantity: int) -> StockCounters:
        """Remove *quantity* reserved units from stock for good (e.g. shipped)."""
        _require_positive(quantity, "Commit")
        if quantity > self.reserved:
            raise ConflictError(
                f"Cannot commit {quantity} items. Only {self.reserved} reserved."
            )
        return StockCounters(self.available, self.reserved - quantity)

    def adjust(self, new_available: int) -> StockCounters:
        """Overwrite the available count; reservations are untouched."""
        if not isinstance(new_available, int) or isinstance(new_available, bool):
            raise ValidationError("Stock level must be an integer")
        if new_available < 0:
            raise ValidationError("Stock level cannot be negative")
        return StockCounters(new_available, self.reserved)

    def __str__(self) -> str:
        return f"Available: {self.available}, Reserved: {self.reserved}"


def _require_positive(quantity: int, action: str) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError(f"{action} quantity must be positive")
