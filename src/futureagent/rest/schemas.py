"""Pydantic models for REST API responses that are not plain read models."""
from typing import Literal

from pydantic import BaseModel, Field


class DatabaseCheck(BaseModel):
    status: Literal["ok", "error"]
    response_time_ms: int = Field(serialization_alias="responseTimeMs")
    error: str | None = None


class HealthChecks(BaseModel):
    database: DatabaseCheck


class HealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
    timestamp: str
    checks: HealthChecks
    version: str


class AdminCounts(BaseModel):
    """Dashboard tiles; each count falls back to 0 independently."""
    tools: int
    published_tools: int
    posts: int
    published_posts: int
    categories: int
    affiliate_links: int
    affiliate_clicks: int
