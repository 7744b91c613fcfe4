from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class TaskApiError(Exception):
    """Base error carrying the HTTP status and the client-facing message"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskApiError):
    """Malformed or missing required input"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(TaskApiError):
    """Referenced task does not exist"""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


class StorageFailure(TaskApiError):
    """Backing store fault; the store logs the detail, clients get a generic message"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(None)
        self.detail = message


class OriginNotAllowed(TaskApiError):
    """Request origin is not on the allow-list"""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed by CORS"


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


async def task_api_error_handler(request: Request, exc: TaskApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _format_validation_errors(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto `{"error": message}` responses"""
    app.add_exception_handler(TaskApiError, task_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
