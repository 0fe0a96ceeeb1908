"""Global error handling middleware

Every exception is logged and converted to a `{"error": {code, message,
details}}` body. The client page reads `error.message` for display.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.core.exceptions import (
    APIException,
    ServiceException,
    ValidationException
)
from backend.utils.logger import get_logger

logger = get_logger(__name__)


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": jsonable_encoder(details or {})
            }
        }
    )


def setup_exception_handlers(app: FastAPI):
    """Setup global exception handlers for the FastAPI app

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(request: Request, exc: ValidationException):
        logger.warning(f"Validation error | field={exc.field} | message={exc.message}")
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.error_code, exc.message, exc.details)

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        logger.error(
            f"API Exception | path={request.url.path} | "
            f"code={exc.error_code} | message={exc.message}"
        )
        return _error_response(exc.status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(ServiceException)
    async def service_exception_handler(request: Request, exc: ServiceException):
        """Upstream failures surface the upstream message unchanged"""
        logger.error(
            f"Service Exception | path={request.url.path} | "
            f"service={exc.service_name} | stage={exc.stage} | "
            f"upstream_status={exc.upstream_status} | error={exc.message}"
        )
        return _error_response(status.HTTP_502_BAD_GATEWAY, "SERVICE_ERROR", exc.message, exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors"""
        errors = exc.errors()
        logger.warning(f"Request validation error | path={request.url.path} | count={len(errors)}")
        # input echoes the request body, which holds the credential
        safe_errors = [{k: v for k, v in err.items() if k != "input"} for err in errors]
        return _error_response(
            422,
            "VALIDATION_ERROR",
            "Request validation failed",
            safe_errors
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            f"HTTP Exception | path={request.url.path} | "
            f"status={exc.status_code} | detail={exc.detail}"
        )
        return _error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other unexpected exceptions"""
        logger.exception(
            f"Unexpected error | path={request.url.path} | "
            f"error={type(exc).__name__} | message={str(exc)}"
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            str(exc) or "Failed to generate video content",
            {"type": type(exc).__name__}
        )
