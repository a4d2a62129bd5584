# Query error normalisation tests

import pytest

from db.backend import BackendError
from sdk.api_client import ApiClientError
from sdk.query_error import normalize_query_error

FALLBACK = "Menu is unavailable"
CONFIGURATION = "Server configuration error"


def normalize(error):
    return normalize_query_error(error, "MENU_LOAD_FAILED", FALLBACK, CONFIGURATION)


class TestNormalizeQueryError:

    @pytest.mark.parametrize("code, status, kind, message", [
        ("HTTP_ERROR", 401, "unauthorized", FALLBACK),
        ("HTTP_ERROR", 500, "server", CONFIGURATION),
        ("HTTP_ERROR", 503, "server", CONFIGURATION),
        ("HTTP_ERROR", 502, "unknown", FALLBACK),
        ("TIMEOUT", None, "timeout", FALLBACK),
        ("NETWORK_ERROR", None, "unknown", FALLBACK),
    ])
    def test_api_client_errors(self, code, status, kind, message):
        error = normalize(ApiClientError(code, "raw", status, "https://shop.test"))

        assert error.code == f"MENU_LOAD_FAILED:{code}"
        assert error.kind == kind
        assert error.message == message
        assert error.status == status

    def test_backend_error(self):
        error = normalize(BackendError("permission denied", code="42501", status=403))

        assert error.code == "MENU_LOAD_FAILED:42501"
        assert error.kind == "unauthorized"
        assert error.message == "permission denied"

    def test_backend_error_without_code(self):
        error = normalize(BackendError("  ", code=" ", status=500))

        assert error.code == "MENU_LOAD_FAILED:BACKEND"
        assert error.kind == "server"
        assert error.message == FALLBACK

    def test_unexpected_error(self):
        error = normalize(RuntimeError("boom"))

        assert error.code == "MENU_LOAD_FAILED:UNKNOWN"
        assert error.kind == "unknown"
        assert error.message == "boom"

    def test_configuration_message_defaults_to_fallback(self):
        error = normalize_query_error(ApiClientError("HTTP_ERROR", "raw", 500, "u"), "X", FALLBACK)

        assert error.message == FALLBACK
