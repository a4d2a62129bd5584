#!/usr/bin/env python3
# Schema preflight from the command line
# Exit codes: 0 compatible, 1 mismatch, 2 missing configuration

import asyncio
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from db.backend import BackendClient
from db.supporting_operations import SupportingOperations
from utils.config import Config

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_MISCONFIGURED = 2


async def run_schema_check(config: Config) -> int:
    """
    Probe the required tables and report every issue found

    Returns:
        Process exit code
    """
    settings = config.get_backend_settings()
    if not settings.is_configured:
        logging.error(f"[schema-check] Missing {' or '.join(settings.missing)}")
        return EXIT_MISCONFIGURED

    backend = BackendClient(settings.origin, settings.anon_key, timeout=settings.timeout_seconds)
    issues = await SupportingOperations(backend).check_schema()

    if issues:
        logging.error("[schema-check] DB schema mismatch detected:")
        for issue in issues:
            logging.error(f"- {issue.table} ({','.join(issue.columns)}): {issue.message}")
        return EXIT_MISMATCH

    logging.info("[schema-check] Schema is compatible.")
    return EXIT_OK


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    sys.exit(asyncio.run(run_schema_check(Config())))


if __name__ == "__main__":
    main()
