# CORS middleware

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Dict, Any

DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:4173",
]


def setup_cors_middleware(app: FastAPI, config: Dict[str, Any]):
    """
    Allow the storefront origins listed in the cors config section

    Args:
        app: FastAPI application
        config: Configuration dict
    """
    cors_config = config.get('cors', {})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.get('allowed_origins', DEFAULT_ORIGINS),
        allow_credentials=cors_config.get('allow_credentials', True),
        allow_methods=cors_config.get('allowed_methods', ["GET", "POST", "OPTIONS"]),
        allow_headers=cors_config.get('allowed_headers', ["authorization", "content-type", "idempotency-key"]),
        expose_headers=["X-Request-ID"],
    )
