from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from incident_map.core import exceptions as domain_exceptions
from incident_map.logging import get_logger

logger = get_logger(__name__)

# Most specific first; lookup walks the exception MRO anyway.
_STATUS_BY_ERROR: tuple[tuple[type[domain_exceptions.DomainError], int, str], ...] = (
    (domain_exceptions.ValidationError, 400, "Bad Request"),
    (domain_exceptions.InvalidStateError, 400, "Bad Request"),
    (domain_exceptions.UnauthorizedError, 401, "Unauthorized"),
    (domain_exceptions.NotFoundError, 404, "Not Found"),
    (domain_exceptions.DuplicateVoteError, 409, "Already Voted"),
    (domain_exceptions.ConflictError, 409, "Conflict"),
    (domain_exceptions.RateLimitError, 429, "Too Many Requests"),
    (domain_exceptions.InfrastructureError, 503, "Service Unavailable"),
)


def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Keep simple, unified error message (avoid verbose FastAPI default list)
    return JSONResponse(
        status_code=422,
        content={"detail": "Unprocessable Entity", "code": domain_exceptions.ValidationError.code},
    )


def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    # Hide internal details by default
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def _domain_error_handler(status_code: int, default_detail: str):
    def _handler(request: Request, exc: domain_exceptions.DomainError) -> JSONResponse:
        detail = str(exc) or default_detail
        headers: dict[str, str] = {}
        if isinstance(exc, domain_exceptions.RateLimitError) and exc.retry_after:
            headers["Retry-After"] = str(exc.retry_after)
        logger.info(
            "domain_error",
            status=status_code,
            code=exc.code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": detail, "code": exc.code},
            headers=headers or None,
        )

    return _handler


def install(app) -> None:
    # Register centralized exception handlers
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    for error_cls, status_code, default_detail in _STATUS_BY_ERROR:
        app.add_exception_handler(error_cls, _domain_error_handler(status_code, default_detail))
    app.add_exception_handler(Exception, _unhandled_exception_handler)
