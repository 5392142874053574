"""
Custom Exceptions for the Leave Workflow Engine

This module defines the exception classes raised by repositories, the
balance ledger and the workflow state machine. Services convert them into
ServiceResult failures carrying the same error code.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"

    # Repository errors
    DATABASE_ERROR = "DATABASE_ERROR"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

    # Leave validation errors
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    DATE_OVERLAP = "DATE_OVERLAP"
    INSUFFICIENT_NOTICE = "INSUFFICIENT_NOTICE"
    DESIRED_MONTHS_REQUIRED = "DESIRED_MONTHS_REQUIRED"
    DESIRED_MONTHS_VIOLATION = "DESIRED_MONTHS_VIOLATION"
    MISSING_STUDY_PROGRAM = "MISSING_STUDY_PROGRAM"

    # Desired months lock
    INVALID_MONTH_SELECTION = "INVALID_MONTH_SELECTION"
    ALREADY_SUBMITTED_DESIRED_MONTHS = "ALREADY_SUBMITTED_DESIRED_MONTHS"

    # Workflow errors
    INVALID_TRANSITION = "INVALID_TRANSITION"
    UNAUTHORIZED = "UNAUTHORIZED"
    LEDGER_INVARIANT_VIOLATION = "LEDGER_INVARIANT_VIOLATION"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# Repository Exceptions
# ========================================

class RepositoryError(BaseAppException):
    """Exception raised when a persistence operation fails"""
    default_code = ErrorCode.DATABASE_ERROR


class EntityNotFoundError(BaseAppException):
    """Exception raised when a requested entity does not exist"""
    default_code = ErrorCode.NOT_FOUND

    def __init__(self, entity_type: str, entity_id: Any = None):
        message = f"{entity_type} not found"
        if entity_id is not None:
            message += f" (ID: {entity_id})"
        super().__init__(
            message,
            details={"resource_type": entity_type, "resource_id": str(entity_id) if entity_id is not None else None},
        )


class EntityAlreadyExistsError(BaseAppException):
    """Exception raised when a unique constraint rejects an insert"""
    default_code = ErrorCode.ALREADY_EXISTS


class ConcurrentModificationError(BaseAppException):
    """
    Raised when an optimistic version check fails.

    The losing operation wrote nothing; the caller may retry.
    """
    default_code = ErrorCode.CONCURRENT_MODIFICATION

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(
            f"{resource} was modified by another request; please retry",
            details={"resource": resource, "resource_id": str(resource_id) if resource_id is not None else None},
        )


class ValidationError(BaseAppException):
    """Exception raised when input data validation fails"""
    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: Optional[ErrorCode] = None,
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details)


# ========================================
# Leave Balance Ledger Exceptions
# ========================================

class InsufficientBalanceError(BaseAppException):
    """Raised when a reservation exceeds the available balance"""
    default_code = ErrorCode.INSUFFICIENT_BALANCE

    def __init__(self, leave_type: str, required_days: int, available_days: int):
        super().__init__(
            f"Insufficient {leave_type} leave balance: {required_days} day(s) requested, "
            f"{available_days} available",
            details={"required_days": required_days, "available_days": available_days},
        )


class LedgerInvariantError(BaseAppException):
    """Raised when a ledger movement would break allocated = used + pending + available"""
    default_code = ErrorCode.LEDGER_INVARIANT_VIOLATION


# ========================================
# Desired Months Lock Exceptions
# ========================================

class InvalidMonthSelectionError(BaseAppException):
    """Raised unless exactly two distinct months in 1..12 are chosen"""
    default_code = ErrorCode.INVALID_MONTH_SELECTION


class AlreadySubmittedDesiredMonthsError(BaseAppException):
    """Raised on any second desired-months submission for a user"""
    default_code = ErrorCode.ALREADY_SUBMITTED_DESIRED_MONTHS

    def __init__(self, user_id: Any):
        super().__init__(
            "You have already submitted your desired leave months",
            details={"user_id": str(user_id)},
        )


# ========================================
# Workflow Exceptions
# ========================================

class InvalidTransitionError(BaseAppException):
    """Raised when an action does not apply to the application's current status"""
    default_code = ErrorCode.INVALID_TRANSITION

    def __init__(self, status: str, action: str):
        super().__init__(
            f"Cannot {action} an application with status '{status}'",
            details={"status": status, "action": action},
        )


class UnauthorizedActionError(BaseAppException):
    """Raised when the actor lacks authority for the requested transition"""
    default_code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str, role: Optional[str] = None, status: Optional[str] = None):
        super().__init__(message, details={"role": role, "status": status})


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "RepositoryError",
    "EntityNotFoundError",
    "EntityAlreadyExistsError",
    "ConcurrentModificationError",
    "ValidationError",
    "InsufficientBalanceError",
    "LedgerInvariantError",
    "InvalidMonthSelectionError",
    "AlreadySubmittedDesiredMonthsError",
    "InvalidTransitionError",
    "UnauthorizedActionError",
]
