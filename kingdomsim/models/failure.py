"""
Failure classification for the purchase and scoring engine.

Two kinds of problems exist:

- Recoverable data problems (missing points table, missing cost map,
  nameless hero). These are NEVER raised. They are logged as warnings and
  replaced with a neutral default so a simulation keeps moving.
- Caller misuse (missing collections, oversized battlefield, spending
  emergency resources past the limit). These raise a KnownError subclass
  immediately. This is the only class of error that aborts a simulation.

Purchase attempts themselves are classified by PurchaseOutcome. A refused
purchase is an outcome, not an exception.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_DATA = "invalid_data"
    MISSING_REQUIRED = "missing_required"
    DUPLICATE_ID = "duplicate_id"

    # Rule violations
    BATTLEFIELD_LIMIT = "battlefield_limit"
    EMERGENCY_LIMIT = "emergency_limit"


class PurchaseOutcome(str, Enum):
    """High-level outcome of a purchase step."""

    COMPLETED = "completed"
    REFUSED = "refused"
    PASSED = "passed"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the engine knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)


class GameDataError(KnownError):
    """Raised when the hero, title or event pools are missing or unusable."""

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        kind: FailureKind = FailureKind.MISSING_REQUIRED,
    ):
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion="Load heroes, titles and events before making decisions.",
        )


class MarketIntegrityError(KnownError):
    """Raised when a market would contain two entries with the same id."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            kind=FailureKind.DUPLICATE_ID,
            message=f"Duplicate {entity} id in market: {entity_id}",
        )


class BattlefieldLimitError(KnownError):
    """
    Raised when a battlefield exceeds its deployment limits.

    Subset enumeration is exponential in battlefield size, so an oversized
    battlefield is rejected rather than searched.
    """

    def __init__(self, size: int, limit: int, detail: str | None = None):
        self.size = size
        self.limit = limit
        super().__init__(
            kind=FailureKind.BATTLEFIELD_LIMIT,
            message=f"Battlefield holds {size} cards, limit is {limit}",
            detail=detail,
        )


class EmergencyLimitError(KnownError):
    """Raised when emergency resources are spent past the per-game maximum."""

    def __init__(self, used: int, limit: int):
        self.used = used
        self.limit = limit
        super().__init__(
            kind=FailureKind.EMERGENCY_LIMIT,
            message=f"Emergency resources exhausted: {used}/{limit}",
            suggestion="Check emergency eligibility before choosing an emergency purchase.",
        )
