"""Error Hierarchy — typed, categorized exceptions for all CrowdVault failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) leave campaign state untouched; the caller may retry
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CrowdVaultError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_TRANSFER = "external_transfer"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    caller: str | None = None
    request_index: int | None = None
    debug_info: dict[str, Any] | None = None


class CrowdVaultError(Exception):
    """Base exception for all CrowdVault errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "caller": self.context.caller,
                    "request_index": self.context.request_index,
                },
            }
        }


# ─── Contribution Errors ─────────────────────────────────────────

class DeadlinePassedError(CrowdVaultError):
    """Contribution arrived at or after the deadline."""
    def __init__(self, deadline: int, context: ErrorContext | None = None):
        super().__init__(
            f"Campaign deadline ({deadline}) has passed; contributions are closed.",
            "DEADLINE_PASSED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.deadline = deadline


class ContributionTooSmallError(CrowdVaultError):
    """Contribution below the campaign floor."""
    def __init__(self, amount: int, minimum: int, context: ErrorContext | None = None):
        super().__init__(
            f"Contribution of {amount} is below the minimum of {minimum}.",
            "CONTRIBUTION_TOO_SMALL", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.amount = amount
        self.minimum = minimum


class InvalidCampaignParametersError(CrowdVaultError):
    """Construction parameters rejected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_CAMPAIGN_PARAMETERS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Refund Errors ───────────────────────────────────────────────

class NotEligibleForRefundError(CrowdVaultError):
    """Deadline not passed, goal met, or caller holds no refundable stake."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Not eligible for refund: {reason}",
            "NOT_ELIGIBLE_FOR_REFUND", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.reason = reason


# ─── Authorization Errors ────────────────────────────────────────

class NotAdminError(CrowdVaultError):
    """Caller lacks the administrative capability."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only the campaign admin may perform this operation.",
            "NOT_ADMIN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class NotContributorError(CrowdVaultError):
    """Caller's stake does not exceed the minimum contribution."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only contributors holding stake above the minimum may vote.",
            "NOT_CONTRIBUTOR", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


# ─── Request / Payment Errors ────────────────────────────────────

class RequestNotFoundError(CrowdVaultError):
    """Request index outside the registry."""
    def __init__(self, request_index: int, context: ErrorContext | None = None):
        super().__init__(
            f"Spending request {request_index} does not exist.",
            "REQUEST_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.request_index = request_index


class InvalidRequestError(CrowdVaultError):
    """Spending request parameters rejected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class AlreadyCompletedError(CrowdVaultError):
    """Request has already been paid."""
    def __init__(self, request_index: int, context: ErrorContext | None = None):
        super().__init__(
            f"Spending request {request_index} is already completed.",
            "ALREADY_COMPLETED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.request_index = request_index


class GoalNotReachedError(CrowdVaultError):
    """Payments are locked until the goal is reached."""
    def __init__(self, raised: int, goal: int, context: ErrorContext | None = None):
        super().__init__(
            f"Funding goal not reached ({raised}/{goal}).",
            "GOAL_NOT_REACHED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.raised = raised
        self.goal = goal


class QuorumNotMetError(CrowdVaultError):
    """Fewer than half of the current contributors approved the request."""
    def __init__(
        self, vote_count: int, number_of_contributors: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Quorum not met: {vote_count} of {number_of_contributors} contributors approved.",
            "QUORUM_NOT_MET", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.vote_count = vote_count
        self.number_of_contributors = number_of_contributors


class InsufficientFundsError(CrowdVaultError):
    """Request value exceeds the custodied balance."""
    def __init__(self, value: int, balance: int, context: ErrorContext | None = None):
        super().__init__(
            f"Request value {value} exceeds custodied balance {balance}.",
            "INSUFFICIENT_FUNDS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.value = value
        self.balance = balance


class AlreadyVotedError(CrowdVaultError):
    """Caller already approved this request."""
    def __init__(self, request_index: int, context: ErrorContext | None = None):
        super().__init__(
            f"Caller has already voted on spending request {request_index}.",
            "ALREADY_VOTED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.request_index = request_index


class DivisionByZeroError(CrowdVaultError):
    """compute_percent called with a zero denominator."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot compute a percentage with a zero denominator.",
            "DIVISION_BY_ZERO", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── External / Infrastructure Errors ────────────────────────────

class TransferFailedError(CrowdVaultError):
    """The value-transfer capability reported failure. Local effects were rolled back."""
    def __init__(self, recipient: str, amount: int, context: ErrorContext | None = None):
        super().__init__(
            f"Transfer of {amount} to {recipient} failed.",
            "TRANSFER_FAILED", ErrorCategory.EXTERNAL_TRANSFER,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.recipient = recipient
        self.amount = amount


class CampaignNotFoundError(CrowdVaultError):
    """No campaign has been deployed yet."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No campaign has been deployed.",
            "CAMPAIGN_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class CampaignExistsError(CrowdVaultError):
    """A campaign is already deployed; there is exactly one."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "A campaign has already been deployed.",
            "CAMPAIGN_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DatabaseError(CrowdVaultError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
