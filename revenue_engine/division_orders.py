"""
Division Orders and Interest Validation

A division order records which partner holds what decimal interest in a
well's revenue. Before distributions for a well are trusted, the decimal
interests of all active owners must sum to 1 within a small tolerance.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from .errors import DivisionOrderImbalanceError, InputValidationError
from .money import to_decimal

# Absorbs rounding from interests stored at 8 decimal places
INTEREST_TOLERANCE = Decimal("0.000001")

MIN_DECIMAL_INTEREST = Decimal("0.00000001")
MAX_DECIMAL_INTEREST = Decimal("1")

# Open-ended orders run to the far future
_FAR_FUTURE = date(2100, 12, 31)


@dataclass(frozen=True)
class DivisionOrder:
    """One partner's decimal interest in one well, over an effective date range."""

    well_id: str
    partner_id: str
    decimal_interest: Decimal
    effective_date: date
    end_date: date | None = None
    is_active: bool = True
    organization_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not self.well_id or not self.well_id.strip():
            raise InputValidationError("well_id is required", field="well_id")
        if not self.partner_id or not self.partner_id.strip():
            raise InputValidationError("partner_id is required", field="partner_id")

        interest = to_decimal(self.decimal_interest, "decimal_interest")
        if not (MIN_DECIMAL_INTEREST <= interest <= MAX_DECIMAL_INTEREST):
            raise InputValidationError(
                f"decimal_interest must be between {MIN_DECIMAL_INTEREST} and "
                f"{MAX_DECIMAL_INTEREST}, got: {interest}",
                field="decimal_interest",
            )
        object.__setattr__(self, "decimal_interest", interest)

        if self.end_date is not None and self.end_date <= self.effective_date:
            raise InputValidationError("end_date must be after effective_date", field="end_date")

    @classmethod
    def from_dict(cls, data: dict) -> "DivisionOrder":
        params = {
            "well_id": str(data.get("well_id") or ""),
            "partner_id": str(data.get("partner_id") or ""),
            "decimal_interest": to_decimal(data.get("decimal_interest"), "decimal_interest"),
            "effective_date": _parse_date(data.get("effective_date"), "effective_date"),
            "end_date": _parse_date(data.get("end_date"), "end_date") if data.get("end_date") else None,
            "is_active": bool(data.get("is_active", True)),
            "organization_id": data.get("organization_id"),
        }
        if data.get("id"):
            params["id"] = data["id"]
        return cls(**params)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "well_id": self.well_id,
            "partner_id": self.partner_id,
            "decimal_interest": float(self.decimal_interest),
            "effective_date": self.effective_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
            "organization_id": self.organization_id,
        }

    def is_effective_on(self, on: date) -> bool:
        if on < self.effective_date:
            return False
        if self.end_date is not None and on > self.end_date:
            return False
        return self.is_active

    def overlaps_with(self, other: "DivisionOrder") -> bool:
        """Same well and partner with intersecting date ranges."""
        if self.well_id != other.well_id or self.partner_id != other.partner_id:
            return False
        this_end = self.end_date or _FAR_FUTURE
        other_end = other.end_date or _FAR_FUTURE
        return self.effective_date <= other_end and other.effective_date <= this_end


@dataclass(frozen=True)
class DivisionOrderInterest:
    """A (partner, decimal interest) pair contributing to a well's interest sum."""

    partner_id: str
    decimal_interest: Decimal
    division_order_id: str | None = None

    @classmethod
    def from_division_order(cls, order: DivisionOrder) -> "DivisionOrderInterest":
        return cls(order.partner_id, order.decimal_interest, order.id)


@dataclass(frozen=True)
class InterestValidationResult:
    """Outcome of an interest-sum check, with the entries so callers can report suspects."""

    valid: bool
    total: Decimal
    difference: Decimal
    tolerance: Decimal
    entries: tuple[DivisionOrderInterest, ...]
    well_id: str | None = None
    as_of: date | None = None

    def raise_for_imbalance(self) -> None:
        if not self.valid:
            raise DivisionOrderImbalanceError(self.well_id, self.total, self.tolerance)

    def to_dict(self) -> dict:
        return {
            "well_id": self.well_id,
            "as_of": self.as_of.isoformat() if self.as_of else None,
            "valid": self.valid,
            "sum": float(self.total),
            "difference": float(self.difference),
            "tolerance": float(self.tolerance),
            "entries": [
                {
                    "partner_id": entry.partner_id,
                    "decimal_interest": float(entry.decimal_interest),
                    "division_order_id": entry.division_order_id,
                }
                for entry in self.entries
            ],
        }


class DivisionOrderInterestValidator:
    """Checks that a well's active decimal interests sum to 1."""

    def __init__(self, tolerance: Decimal = INTEREST_TOLERANCE):
        self.tolerance = to_decimal(tolerance, "tolerance")

    def validate(
        self,
        entries,
        well_id: str | None = None,
        as_of: date | None = None,
    ) -> InterestValidationResult:
        """An empty set sums to 0 and is therefore invalid."""
        entries = tuple(entries)
        total = sum((to_decimal(e.decimal_interest, "decimal_interest") for e in entries), Decimal("0"))
        difference = total - Decimal("1")
        return InterestValidationResult(
            valid=abs(difference) <= self.tolerance,
            total=total,
            difference=difference,
            tolerance=self.tolerance,
            entries=entries,
            well_id=well_id,
            as_of=as_of,
        )


def _parse_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InputValidationError(
            f"{field_name} must be an ISO date (YYYY-MM-DD), got: {value!r}", field=field_name
        ) from None
