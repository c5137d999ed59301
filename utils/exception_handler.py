"""
Exception Handler Module
Provides the custom exceptions raised by the Planmoni calculations and services
"""

import logging

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom validation error for input validation failures"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidAmount(ValidationError):
    """Raised when an amount cannot be read as a non-negative finite decimal"""

    USER_MESSAGE = "Please enter a valid amount"

    def __init__(self, value, reason: str = "not a non-negative number"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid amount {value!r}: {reason}")


class InvalidWithdrawalTier(ValidationError):
    """Raised when an emergency withdrawal option is not one of the known tiers"""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown withdrawal option {value!r}")


class InvalidPlan(ValidationError):
    """Raised when payout plan counters cannot produce progress figures"""
    pass


class TransactionLimitExceeded(ValidationError):
    """Raised when an amount exceeds the limit of the user's KYC tier"""

    def __init__(self, tier: int, kind: str, amount, limit):
        self.tier = tier
        self.kind = kind
        self.amount = amount
        self.limit = limit
        super().__init__(
            f"Tier {tier} {kind.replace('_', ' ')} limit is {limit}, requested {amount}"
        )


class PlanNotFound(Exception):
    """Raised when a payout plan does not exist or belongs to another user"""

    def __init__(self, plan_id):
        self.plan_id = plan_id
        super().__init__(f"Payout plan {plan_id} not found")


class WithdrawalRejected(Exception):
    """Raised when an emergency withdrawal cannot be applied to a plan"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InsufficientBalance(Exception):
    """Raised when a wallet cannot cover the requested operation"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(Exception):
    """Raised when a bearer token is missing, unknown or expired"""
    pass
