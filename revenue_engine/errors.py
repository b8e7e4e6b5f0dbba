"""
Error Types for the Revenue Distribution Engine

Every error carries a machine-readable `code` so HTTP and automation callers
can branch on the kind of failure instead of parsing messages.

    RevenueEngineError
    +-- InputValidationError (also a ValueError)
    |   +-- UnknownStrategyError
    |   +-- CurrencyMismatchError
    +-- BusinessRuleError
    |   +-- AlreadyPaidError
    |   +-- NegativeNetRevenueError
    |   +-- DuplicateDistributionError
    +-- ConcurrencyError
    |   +-- VersionConflictError
    +-- DistributionNotFoundError
    +-- DivisionOrderImbalanceError
"""


class RevenueEngineError(Exception):
    """Base class for all engine errors."""

    code: str = "REVENUE_ENGINE_ERROR"


class InputValidationError(RevenueEngineError, ValueError):
    """Malformed input, rejected before any state changes."""

    code: str = "INVALID_INPUT"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class UnknownStrategyError(InputValidationError):
    code: str = "UNKNOWN_STRATEGY"

    def __init__(self, kind: str, tag: str):
        self.kind = kind
        self.tag = tag
        super().__init__(f"Unknown {kind} strategy: {tag}", field="strategy")


class CurrencyMismatchError(InputValidationError):
    code: str = "CURRENCY_MISMATCH"

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"All amounts must use the same currency: expected {expected}, got {actual}",
            field="currency",
        )


class BusinessRuleError(RevenueEngineError):
    """A well-formed request that the distribution's state does not allow."""

    code: str = "BUSINESS_RULE_VIOLATION"


class AlreadyPaidError(BusinessRuleError):
    code: str = "ALREADY_PAID"

    def __init__(self, distribution_id: str, action: str):
        self.distribution_id = distribution_id
        self.action = action
        super().__init__(f"Cannot {action} revenue distribution {distribution_id}: already paid")


class NegativeNetRevenueError(BusinessRuleError):
    code: str = "NEGATIVE_NET_REVENUE"

    def __init__(self, net_revenue):
        self.net_revenue = net_revenue
        super().__init__(f"Net revenue cannot be negative, got: {net_revenue}")


class DuplicateDistributionError(BusinessRuleError):
    code: str = "DUPLICATE_DISTRIBUTION"

    def __init__(self, well_id: str, partner_id: str, production_month: str):
        self.well_id = well_id
        self.partner_id = partner_id
        self.production_month = production_month
        super().__init__(
            f"Revenue distribution already exists for well {well_id}, "
            f"partner {partner_id}, month {production_month}"
        )


class ConcurrencyError(RevenueEngineError):
    code: str = "CONCURRENCY_ERROR"


class VersionConflictError(ConcurrencyError):
    """The stored version moved on since the record was loaded. Reload and retry."""

    code: str = "VERSION_CONFLICT"

    def __init__(self, distribution_id: str, expected_version: int | None, actual_version: int | None):
        self.distribution_id = distribution_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Version conflict on revenue distribution {distribution_id}: "
            f"expected version {expected_version}, stored version is {actual_version}"
        )


class DistributionNotFoundError(RevenueEngineError):
    code: str = "DISTRIBUTION_NOT_FOUND"

    def __init__(self, distribution_id: str):
        self.distribution_id = distribution_id
        super().__init__(f"Revenue distribution not found: {distribution_id}")


class DivisionOrderImbalanceError(RevenueEngineError):
    code: str = "DIVISION_ORDER_IMBALANCE"

    def __init__(self, well_id: str | None, total, tolerance):
        self.well_id = well_id
        self.total = total
        self.tolerance = tolerance
        super().__init__(
            f"Division order interests for well {well_id} sum to {total}, "
            f"expected 1 within {tolerance}"
        )


def http_status_for(error: Exception) -> int:
    """HTTP status for an engine error. Conflicts are 409 so clients know to reload and retry."""
    if isinstance(error, DistributionNotFoundError):
        return 404
    if isinstance(error, (ConcurrencyError, DuplicateDistributionError, AlreadyPaidError)):
        return 409
    if isinstance(error, (BusinessRuleError, DivisionOrderImbalanceError)):
        return 422
    if isinstance(error, (ValueError, KeyError, TypeError)):
        return 400
    return 500
