# Schema preflight command tests

import logging

import pytest

import scripts.schema_check as schema_check
from db.backend import BackendError, BackendUnavailableError
from utils.config import Config


@pytest.fixture
def patched_backend(monkeypatch, backend):
    monkeypatch.setattr(schema_check, "BackendClient", backend)
    return backend


@pytest.mark.asyncio
@pytest.mark.usefixtures("backend_env")
class TestSchemaCheckCommand:

    async def test_compatible(self, patched_backend):
        assert await schema_check.run_schema_check(Config()) == schema_check.EXIT_OK
        assert patched_backend.instances[0]["api_key"] == "anon-key"

    async def test_mismatch_lists_every_issue(self, patched_backend, caplog):
        patched_backend.select_results = {
            "menu_categories": BackendError("column sort does not exist", code="42703"),
            "delivery_zones": BackendUnavailableError("timed out", code="TIMEOUT"),
        }

        with caplog.at_level(logging.ERROR):
            exit_code = await schema_check.run_schema_check(Config())

        assert exit_code == schema_check.EXIT_MISMATCH
        messages = [record.getMessage() for record in caplog.records]
        assert any(message.startswith("- menu_categories (") for message in messages)
        assert any(message.startswith("- delivery_zones (") for message in messages)


@pytest.mark.asyncio
@pytest.mark.usefixtures("no_backend_env")
class TestSchemaCheckConfiguration:

    async def test_missing_configuration(self, patched_backend):
        assert await schema_check.run_schema_check(Config()) == schema_check.EXIT_MISCONFIGURED
        assert patched_backend.instances == []
