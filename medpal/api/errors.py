import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from medpal.core.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    MedPalError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Status code and user-facing message per error kind; None keeps the error's own message
ERROR_RESPONSES = {
    ValidationError: (status.HTTP_400_BAD_REQUEST, None),
    DuplicateUserError: (status.HTTP_409_CONFLICT, "User already exists with this email"),
    InvalidCredentialsError: (status.HTTP_401_UNAUTHORIZED, "Invalid email or password"),
    StoreError: (status.HTTP_503_SERVICE_UNAVAILABLE, "Database connection issue - please try again"),
}


async def medpal_error_handler(request: Request, exc: MedPalError) -> JSONResponse:
    status_code, message = status.HTTP_500_INTERNAL_SERVER_ERROR, "Request failed"
    for error_cls, (code, text) in ERROR_RESPONSES.items():
        if isinstance(exc, error_cls):
            status_code, message = code, text or exc.message
            break

    if status_code >= 500:
        logger.error(f"❌ {request.url.path} failed: {type(exc).__name__}: {exc.message}")

    content = {"error": message}
    if isinstance(exc, ValidationError) and exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MedPalError, medpal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
