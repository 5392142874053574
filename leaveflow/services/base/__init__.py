from leaveflow.services.base.base_service import BaseService
from leaveflow.services.base.service_result import ErrorCode, ErrorSeverity, ServiceError, ServiceResult

__all__ = ["BaseService", "ErrorCode", "ErrorSeverity", "ServiceError", "ServiceResult"]
