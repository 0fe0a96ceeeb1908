"""Custom exceptions for the backend API

Each exception carries structured error information that the global
exception handlers turn into the `{"error": {...}}` response body.
"""
from typing import Optional, Dict, Any


class APIException(Exception):
    """Base exception for all API-related errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "API_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}


class ServiceException(Exception):
    """Exception raised when the upstream LLM service fails"""

    def __init__(
        self,
        message: str,
        service_name: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None,
        error_code: str = "",
        stage: str = "",
        upstream_status: Optional[int] = None,
        api_response: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.service_name = service_name
        self.retryable = retryable
        self.original_error = original_error
        self.error_code = error_code  # upstream error code, e.g. "invalid_api_key"
        self.stage = stage  # generation step that failed: script, title, scenes, narration
        self.upstream_status = upstream_status
        self.api_response = api_response

    def to_dict(self) -> Dict[str, Any]:
        """Details block for the API error response"""
        return {
            "service": self.service_name,
            "stage": self.stage,
            "retryable": self.retryable,
            "error_code": self.error_code,
            "upstream_status": self.upstream_status,
            "api_response": self.api_response,
        }


class ValidationException(APIException):
    """Exception raised for validation errors"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else {}
        )
        self.field = field
