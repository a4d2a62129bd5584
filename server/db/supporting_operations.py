# Supporting operations
# Schema preflight and catering rate-limit bookkeeping

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from .backend import BackendClient, BackendError, BackendUnavailableError
from .models import SchemaIssue, SchemaRequirement

logger = logging.getLogger(__name__)

SCHEMA_REQUIREMENTS = [
    SchemaRequirement(
        table="menu_categories",
        columns=["full_label", "image_url", "fallback_background", "sort", "is_active"],
    ),
    SchemaRequirement(table="delivery_zones", columns=["priority", "polygon_geojson"]),
]


class SupportingOperations:
    """
    Operations that support the storefront without being part of an order
    """
    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def check_schema(self, requirements: Optional[Sequence[SchemaRequirement]] = None) -> List[SchemaIssue]:
        """
        Probe each required table/columns set with a one-row select.

        Requirements are checked one after another; every failing requirement
        is reported, not only the first.

        Args:
            requirements: Defaults to SCHEMA_REQUIREMENTS

        Returns:
            Issues found (empty when the schema is compatible)
        """
        issues = []
        for requirement in requirements or SCHEMA_REQUIREMENTS:
            try:
                await self.backend.select(requirement.table, requirement.columns, limit=1)
            except BackendError as e:
                logger.warning(
                    f"Schema check failed for {requirement.table}({', '.join(requirement.columns)}): "
                    f"{e.code} {e.message}"
                )
                issues.append(SchemaIssue(
                    table=requirement.table,
                    columns=list(requirement.columns),
                    message=e.message,
                    transport=isinstance(e, BackendUnavailableError),
                ))
        return issues

    async def count_recent_catering_requests(self, phone: str, window_minutes: int,
                                             now: Optional[datetime] = None) -> int:
        """Catering requests stored for the phone within the last window_minutes"""
        now = now or datetime.now(timezone.utc)
        window_start = (now - timedelta(minutes=window_minutes)).isoformat()
        return await self.backend.count("catering_requests", filters={"phone": phone},
                                        since=("created_at", window_start))
