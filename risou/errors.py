from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarHTTP

from .logging_config import log_failure


def install_error_handlers(app):
    """Uniform `{"error", "detail"}` bodies for every failure the API can return."""

    @app.exception_handler(StarHTTP)
    async def http_exc(_: Request, exc: StarHTTP):
        return JSONResponse(
            {"error": f"HTTP_{exc.status_code}", "detail": exc.detail},
            status_code=exc.status_code,
        )

    @app.exception_handler(RequestValidationError)
    async def bad_request_body(_: Request, exc: RequestValidationError):
        return JSONResponse(
            {"error": "VALIDATION_ERROR", "detail": jsonable_encoder(exc.errors())},
            status_code=422,
        )

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        log_failure("INTERNAL_ERROR", {"path": request.url.path, "error": repr(exc)})
        return JSONResponse({"error": "INTERNAL_ERROR", "detail": "Unexpected error"}, status_code=500)
