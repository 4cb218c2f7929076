from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import OperationalError

from matti.common.exceptions import ConflictException, LLMResponseException, NotFoundException, UnauthorizedException

_STATUS_CODES: dict[type[Exception], int] = {
    NotFoundException: status.HTTP_404_NOT_FOUND,
    ConflictException: status.HTTP_409_CONFLICT,
    UnauthorizedException: status.HTTP_401_UNAUTHORIZED,
    LLMResponseException: status.HTTP_502_BAD_GATEWAY,
}


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain exceptions into JSON error responses."""

    async def _domain_error(request: Request, exc: Exception) -> JSONResponse:
        status_code = _STATUS_CODES[type(exc)]
        logger.warning("Request failed", path=request.url.path, status_code=status_code, error=str(exc))
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    async def _database_unavailable(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Database unavailable", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": "Database not available"})

    for exception_class in _STATUS_CODES:
        app.add_exception_handler(exception_class, _domain_error)
    app.add_exception_handler(OperationalError, _database_unavailable)
