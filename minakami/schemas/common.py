"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class WriteResult(BaseModel):
    """Outcome of a mutating call: new row id (inserts) and affected row count."""
    insert_id: Optional[int] = Field(default=None, description="Row id of the inserted record.")
    rows_affected: int = Field(description="Rows changed by the statement.")
