"""Application errors and their HTTP rendering."""

from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base application error with an error code and HTTP status."""

    code = "error"
    status_code = 400

    def __init__(
        self,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code or self.code
        self.status_code = status_code or self.status_code
        self.details = details
        super().__init__(self.code)

    def to_response(self) -> JSONResponse:
        content: Dict[str, Any] = {"error": self.code}
        if self.details is not None:
            content["details"] = self.details
        return JSONResponse(status_code=self.status_code, content=content)


class InvalidInput(AppError):
    code = "invalid_input"
    status_code = 400

    @classmethod
    def for_field(cls, field: str, *messages: str) -> "InvalidInput":
        return cls(details={field: list(messages)})


class Conflict(AppError):
    code = "conflict"
    status_code = 409


class NotFound(AppError):
    code = "not_found"
    status_code = 404


class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status_code = 401


class BadCurrentPassword(AppError):
    code = "bad_current"
    status_code = 400


class Unauthorized(AppError):
    code = "unauthorized"
    status_code = 401

    def to_response(self) -> JSONResponse:
        response = super().to_response()
        response.headers["WWW-Authenticate"] = "Bearer"
        return response


class InvalidToken(Exception):
    """Token failed structural, signature, expiry or purpose checks."""


class OAuthError(Exception):
    """Upstream identity provider failure. Never shown to the client verbatim."""


class OAuthExchangeFailed(OAuthError):
    pass


class OAuthProfileFetchFailed(OAuthError):
    pass


def validation_details(exc: RequestValidationError) -> Dict[str, List[str]]:
    details: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return details


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return exc.to_response()


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return InvalidInput(details=validation_details(exc)).to_response()
