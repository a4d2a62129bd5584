# Storefront client SDK

from .api_client import ApiClientError, fetch_json
from .cart import CartLine, CartStore
from .checkout import CheckoutClient, CheckoutError, build_order
from .menu_repository import MenuRepository
from .preflight import PreflightResult, check_schema_preflight
from .query_error import QueryError, normalize_query_error
from .retry import is_retryable, with_retry

__all__ = [
    "ApiClientError",
    "fetch_json",
    "CartLine",
    "CartStore",
    "CheckoutClient",
    "CheckoutError",
    "build_order",
    "MenuRepository",
    "PreflightResult",
    "check_schema_preflight",
    "QueryError",
    "normalize_query_error",
    "is_retryable",
    "with_retry"
]
