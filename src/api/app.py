import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    # details (attempts_remaining, expired, problems...) sit next to "error"
    return JSONResponse(
        status_code=exc.status_code,
        content={**exc.base_error.details, "error": error_dict},
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def make_unhandled_error_handler(expose_message: bool):
    async def handle_unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        message = str(exc) if expose_message and str(exc) else "Internal server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"code": "INTERNAL_ERROR", "message": message}},
        )

    return handle_unhandled_error


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Signature Service API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(log_requests)

    from src.api.routes import (
        audit,
        health_check,
        notifications,
        sales,
        settings,
        signature_otp,
        workflow,
    )

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(signature_otp.router, tags=["Signature OTP"])
    app.include_router(workflow.router, tags=["Workflow"])
    app.include_router(sales.router, tags=["Sales"])
    app.include_router(settings.router, tags=["Settings"])
    app.include_router(notifications.router, tags=["Notifications"])
    app.include_router(audit.router, tags=["Audit"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(
        Exception, make_unhandled_error_handler(ApplicationConfig.EXPOSE_INTERNAL_ERRORS)
    )

    return app
