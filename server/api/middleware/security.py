# Security middleware
# Response hardening headers and a request body size limit

from fastapi import FastAPI, Request
from typing import Dict, Any
import logging

from utils.response import create_error_response

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUEST_SIZE = 256 * 1024


def setup_security_middleware(app: FastAPI, config: Dict[str, Any]):
    """
    Install security headers and the request size limit

    Args:
        app: FastAPI application
        config: Configuration dict
    """
    security_config = config.get('security', {})
    max_request_size = int(security_config.get('max_request_size', DEFAULT_MAX_REQUEST_SIZE))

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"

        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response

    @app.middleware("http")
    async def limit_request_size(request: Request, call_next):
        content_length = request.headers.get('content-length')
        if content_length and content_length.isdigit() and int(content_length) > max_request_size:
            logger.warning(f"Request size {content_length} exceeds limit {max_request_size}")
            return create_error_response("PAYLOAD_TOO_LARGE", "Request entity too large", 413)

        return await call_next(request)
