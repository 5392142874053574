"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from leaveflow.config.logging import get_logger
from leaveflow.core.exceptions import (
    BaseAppException,
    ConcurrentModificationError,
    EntityAlreadyExistsError,
)
from leaveflow.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

# Domain failures the caller can act on; logged below ERROR.
EXPECTED_FAILURE_CODES = {
    ErrorCode.VALIDATION_ERROR,
    ErrorCode.MISSING_REQUIRED_FIELD,
    ErrorCode.INVALID_DATE_RANGE,
    ErrorCode.NOT_FOUND,
    ErrorCode.INSUFFICIENT_BALANCE,
    ErrorCode.INVALID_MONTH_SELECTION,
    ErrorCode.ALREADY_SUBMITTED_DESIRED_MONTHS,
    ErrorCode.INVALID_TRANSITION,
    ErrorCode.UNAUTHORIZED,
    ErrorCode.CONCURRENT_MODIFICATION,
}


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, db_session: Session):
        """
        Initialize base service.

        Args:
            db_session: SQLAlchemy database session
        """
        self.db: Session = db_session
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Domain exceptions keep their own code and message; anything else
        becomes INTERNAL_ERROR and is logged with the traceback.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            additional_context: Extra context for logging/debugging
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, BaseAppException):
            if exception.error_code in EXPECTED_FAILURE_CODES:
                self._logger.info(
                    f"{operation} refused: {exception.error_code.value}: {exception.message}",
                    extra=context,
                )
                return ServiceResult.failure(
                    ServiceError.from_exception(exception, severity=ErrorSeverity.WARNING)
                )
            self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
            return ServiceResult.failure(ServiceError.from_exception(exception))

        self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}",
                details={
                    "error": str(exception),
                    "entity_ref": str(entity_ref) if entity_ref is not None else None,
                },
                severity=ErrorSeverity.CRITICAL,
            )
        )

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True):
        """
        Context manager for database transactions with automatic rollback.

        Args:
            auto_commit: Whether to commit automatically on success

        Yields:
            The database session

        Example:
            with self.transaction():
                self.ledger.reserve(...)
                # automatic commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception as e:
            self._rollback()
            self._logger.debug(f"Transaction failed: {e}")
            raise

    def _commit(self) -> None:
        """Commit the current transaction, translating version and unique conflicts."""
        try:
            self.db.commit()
            self._logger.debug("Transaction committed successfully")
        except StaleDataError as e:
            raise ConcurrentModificationError("Record") from e
        except IntegrityError as e:
            raise EntityAlreadyExistsError(
                "Record already exists", details={"error": str(e.orig)}
            ) from e

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except Exception as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")
