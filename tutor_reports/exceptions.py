"""Application exception hierarchy.

Every domain error carries an error code, a user-facing message and an HTTP
status so the global exception handlers can render a consistent ErrorResponse.
"""

from typing import Any, Optional


class BaseAPIException(Exception):
    """Base class for all application errors surfaced through the API."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


# ============================================================================
# Request / resource errors
# ============================================================================


class ResourceNotFoundError(BaseAPIException):
    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            message=f"{resource_type} not found: {resource_id}",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class NotLoggedInError(BaseAPIException):
    status_code = 401
    error_code = "NOT_LOGGED_IN"

    def __init__(self, message: str = "請先登入。"):
        super().__init__(message=message)


class FieldValidationError(BaseAPIException):
    """A submitted field failed validation; nothing was written."""

    status_code = 422
    error_code = "FIELD_VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(message=message, details={"field": field})
        self.field = field


class DatabaseError(BaseAPIException):
    status_code = 500
    error_code = "DATABASE_ERROR"


# ============================================================================
# Enrichment workflow errors
# ============================================================================


class WorkflowStateError(BaseAPIException):
    """Requested transition is not defined for the workflow's current state."""

    status_code = 409
    error_code = "WORKFLOW_STATE_ERROR"

    def __init__(self, action: str, state: str):
        super().__init__(
            message=f"Cannot {action} while workflow is {state}",
            details={"action": action, "state": state},
        )
        self.action = action
        self.state = state


class CaptureDeviceError(BaseAPIException):
    status_code = 503
    error_code = "CAPTURE_DEVICE_ERROR"

    def __init__(self, reason: str, message: str = "無法開啟相機，請確認權限設定。"):
        super().__init__(message=message, details={"reason": reason})
        self.reason = reason


class InvalidImageError(BaseAPIException):
    status_code = 422
    error_code = "INVALID_IMAGE"

    def __init__(self, reason: str):
        super().__init__(message="無法讀取圖片檔案。", details={"reason": reason})
        self.reason = reason


class AnalysisFailedError(BaseAPIException):
    """The vision model call failed or returned nothing usable."""

    status_code = 502
    error_code = "ANALYSIS_FAILED"

    def __init__(self, provider: str, reason: str):
        super().__init__(
            message="AI 分析失敗，請稍後再試。",
            details={"provider": provider, "reason": reason},
        )
        self.provider = provider
        self.reason = reason
