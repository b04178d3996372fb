"""Translate domain errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from boxoffice.exceptions import BoxOfficeError

logger = logging.getLogger(__name__)


async def handle_domain_error(request: Request, exc: BoxOfficeError) -> JSONResponse:
    """Answer with the error's status code and its message as ``detail``."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BoxOfficeError, handle_domain_error)
