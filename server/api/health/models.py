# Health models

from typing import List, Optional

from pydantic import BaseModel

from db.models import SchemaIssue


class SchemaHealthResponse(BaseModel):
    ok: bool
    code: Optional[str] = None
    error: Optional[str] = None
    schemaIssues: Optional[List[SchemaIssue]] = None


class LivenessResponse(BaseModel):
    status: str
    version: str
    environment: str
