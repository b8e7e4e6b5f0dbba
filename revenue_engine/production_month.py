"""
Production Month Value Type

A calendar month that a production or revenue record pertains to. The
canonical "YYYY-MM" form is the natural-key component of a distribution.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .errors import InputValidationError

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
_DATABASE_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


@dataclass(frozen=True, order=True)
class ProductionMonth:
    """Immutable (year, month) pair, year in [1900, 2100] and month in [1, 12]."""

    year: int
    month: int

    MIN_YEAR = 1900
    MAX_YEAR = 2100

    def __post_init__(self):
        if not _is_int(self.year) or not (self.MIN_YEAR <= self.year <= self.MAX_YEAR):
            raise InputValidationError(
                f"Year must be an integer between {self.MIN_YEAR} and {self.MAX_YEAR}, got: {self.year!r}",
                field="year",
            )
        if not _is_int(self.month) or not (1 <= self.month <= 12):
            raise InputValidationError(
                f"Month must be an integer between 1 and 12, got: {self.month!r}",
                field="month",
            )

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_date(cls, value: date) -> "ProductionMonth":
        return cls(value.year, value.month)

    @classmethod
    def from_string(cls, value: str) -> "ProductionMonth":
        """Parse the canonical "YYYY-MM" form."""
        match = _MONTH_PATTERN.match(value.strip()) if isinstance(value, str) else None
        if not match:
            raise InputValidationError(
                f"Invalid production month format. Expected YYYY-MM, got: {value!r}",
                field="production_month",
            )
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_database_date(cls, value) -> "ProductionMonth":
        """Accept a date, a datetime, or a "YYYY-MM-DD" string."""
        if isinstance(value, (date, datetime)):
            return cls.from_date(value)
        match = _DATABASE_DATE_PATTERN.match(value) if isinstance(value, str) else None
        if not match:
            raise InputValidationError(
                f"Invalid database date. Expected YYYY-MM-DD, got: {value!r}",
                field="production_month",
            )
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def current(cls) -> "ProductionMonth":
        return cls.from_date(date.today())

    @classmethod
    def previous(cls) -> "ProductionMonth":
        return cls.current().previous_month()

    @classmethod
    def range(cls, start: "ProductionMonth", end: "ProductionMonth") -> list["ProductionMonth"]:
        """Every month from start to end, inclusive."""
        if start > end:
            raise InputValidationError(
                "Start month must be before or equal to end month", field="production_month"
            )
        months = []
        cursor = start
        while cursor <= end:
            months.append(cursor)
            if cursor == end:
                break
            cursor = cursor.next_month()
        return months

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def formatted_string(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def display_string(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def short_display_string(self) -> str:
        return f"{calendar.month_abbr[self.month]} {self.year}"

    def __str__(self) -> str:
        return self.formatted_string()

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month())

    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def to_database_date(self) -> date:
        return self.first_day()

    def is_future_month(self, today: date | None = None) -> bool:
        return self > ProductionMonth.from_date(today or date.today())

    # -------------------------------------------------------------------------
    # Comparison and navigation
    # -------------------------------------------------------------------------

    def is_before(self, other: "ProductionMonth") -> bool:
        return self < other

    def is_after(self, other: "ProductionMonth") -> bool:
        return self > other

    def months_between(self, other: "ProductionMonth") -> int:
        """Signed number of months from self to other."""
        return (other.year - self.year) * 12 + (other.month - self.month)

    def previous_month(self) -> "ProductionMonth":
        prior = self.first_day() - timedelta(days=1)
        return ProductionMonth(prior.year, prior.month)

    def next_month(self) -> "ProductionMonth":
        following = self.last_day() + timedelta(days=1)
        return ProductionMonth(following.year, following.month)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
