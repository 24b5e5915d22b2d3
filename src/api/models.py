# src/api/models.py — v2
"""Response envelope returned to callers of the facade.

Serialized with camelCase keys:
``{success, data | error, metadata: {fromCache, processingTimeMs, requestId, cacheKey, timestamp, ...}}``
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorBody(BaseModel):
    """Machine code plus human message."""

    code: str
    message: str
    type: str


class ResponseMetadata(BaseModel):
    """Observability fields attached to every response."""

    model_config = ConfigDict(populate_by_name=True)

    from_cache: bool | None = Field(default=None, alias="fromCache")
    processing_time_ms: int = Field(alias="processingTimeMs")
    request_id: str = Field(alias="requestId")
    cache_key: str | None = Field(default=None, alias="cacheKey")
    timestamp: str
    model: str | None = None
    degraded: bool | None = None
    user_id: str | None = Field(default=None, alias="userId")


class AnalysisResponse(BaseModel):
    """Success or failure envelope."""

    success: bool
    data: dict[str, Any] | None = None
    error: ErrorBody | None = None
    metadata: ResponseMetadata
    status_code: int = Field(default=200, exclude=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
