"""HTTP error mapping for use case errors"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error


class ClientError(Exception):
    """
    Raised by routes to turn a use case Error into an HTTP response

    Body format: {"error": {"code", "message", "reason"}}
    """

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.error = error
        self.status_code = status_code
        super().__init__(error.message)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error.to_dict()},
    )


# Use case error code -> HTTP status
ERROR_STATUS_CODES = {
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "TRANSACTION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "TRANSACTION_ALREADY_PROCESSED": status.HTTP_409_CONFLICT,
    "INSUFFICIENT_FUNDS": status.HTTP_402_PAYMENT_REQUIRED,
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "SETTLEMENT_CONFLICT": status.HTTP_503_SERVICE_UNAVAILABLE,
    "ACCOUNT_NOT_ACTIVE": status.HTTP_409_CONFLICT,
    "DUPLICATE_REFERENCE": status.HTTP_409_CONFLICT,
    "USERNAME_TAKEN": status.HTTP_409_CONFLICT,
    "EMAIL_TAKEN": status.HTTP_409_CONFLICT,
}


def raise_for_error(error: Error) -> None:
    """Raise ClientError with the status code mapped from error.code (500 if unknown)"""
    raise ClientError(
        error,
        status_code=ERROR_STATUS_CODES.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )
