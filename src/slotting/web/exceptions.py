"""Error handlers for the REST API.

Placement endpoints return structured results; these handlers cover the
endpoints that raise (layout lookups, configuration validation).
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from slotting.application.config import ConfigError
from slotting.domain.exceptions import AllocationError, NotFoundError


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details or None,
            },
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": {"identifier": exc.identifier} if exc.identifier else None,
            },
        )

    @app.exception_handler(AllocationError)
    async def allocation_error_handler(
        request: Request, exc: AllocationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": None,
            },
        )
