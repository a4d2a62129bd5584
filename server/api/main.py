# FastAPI application
# Storefront API: checkout, menu, schema preflight, account, delivery zones, back office, catering

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.config import Config
from utils.logger import setup_logging
from utils.response import create_error_response
from api.middleware import setup_middleware

from api.auth import auth_router
from api.orders import orders_router
from api.menu import menu_router
from api.health import health_router, LivenessResponse
from api.account import account_router
from api.zones import zones_router
from api.admin import admin_router
from api.catering import catering_router

config = Config()

setup_logging(config.config)
logger = logging.getLogger(__name__)

# Codes for HTTP errors raised without a structured detail (routing 404/405 and the like)
HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
    422: "INVALID_PAYLOAD",
    429: "RATE_LIMITED",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{config.get('app.name')} starting")
    logger.info(f"Environment: {config.env}")
    logger.info(f"Debug: {config.get('app.debug', False)}")

    settings = config.get_backend_settings()
    if not settings.is_configured:
        logger.warning(f"Backend not configured, missing: {', '.join(settings.missing)}")

    yield

    logger.info(f"{config.get('app.name')} shutting down")


app = FastAPI(
    title=config.config['app']['name'],
    version=config.config['app']['version'],
    description=config.config['app'].get('description', ''),
    debug=config.config['app']['debug'],
    lifespan=lifespan
)

setup_middleware(app, config.config)

app.include_router(auth_router)
app.include_router(orders_router)
app.include_router(menu_router)
app.include_router(health_router)
app.include_router(account_router)
app.include_router(zones_router)
app.include_router(admin_router)
app.include_router(catering_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {code, error}, keeping headers such as Allow"""
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        return create_error_response(
            exc.detail["code"],
            exc.detail.get("error", ""),
            exc.status_code,
            headers=exc.headers,
            **{k: v for k, v in exc.detail.items() if k not in ("code", "error")}
        )

    return create_error_response(
        HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail),
        exc.status_code,
        headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return create_error_response(
        "INVALID_REQUEST", "Invalid request parameters", 422,
        details=jsonable_encoder(exc.errors())
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return create_error_response("INTERNAL_ERROR", "Internal server error", 500)


@app.get("/health", response_model=LivenessResponse, tags=["health"])
async def health_check():
    """Liveness probe, no backend call"""
    return LivenessResponse(
        status="healthy",
        version=config.config['app']['version'],
        environment=config.env
    )


if __name__ == "__main__":
    import uvicorn

    server_config = config.config['server']
    reload = bool(server_config.get('reload', False))

    uvicorn.run(
        "api.main:app",
        host=server_config.get('host', '127.0.0.1'),
        port=int(server_config.get('port', 8000)),
        reload=reload,
        workers=1 if reload else int(server_config.get('workers', 1)),
        log_level="debug" if config.config['app']['debug'] else "info"
    )
