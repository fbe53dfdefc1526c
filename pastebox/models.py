"""
Pydantic models for stored pastes and request/response validation.
"""
from typing import Optional
from pydantic import BaseModel, Field

# 100 years; keeps expires_at well inside the range datetime can render
MAX_TTL_SECONDS = 100 * 365 * 24 * 60 * 60


class Paste(BaseModel):
    """A stored paste record. Timestamps are epoch milliseconds."""
    id: str
    content: str
    created_at: int
    expires_at: Optional[int] = None
    max_views: Optional[int] = None
    view_count: int = 0


class PasteCreate(BaseModel):
    """Schema for creating a new paste."""
    content: str = Field(..., min_length=1, description="Text content (required, non-empty)")
    ttl_seconds: Optional[int] = Field(None, ge=1, le=MAX_TTL_SECONDS, description="Optional TTL in seconds")
    max_views: Optional[int] = Field(None, ge=1, description="Optional view limit")


class PasteResponse(BaseModel):
    """Schema for paste creation response."""
    id: str = Field(..., description="Unique paste ID")
    url: str = Field(..., description="Shareable URL to view the paste")


class PasteView(BaseModel):
    """Schema for viewing/fetching a paste."""
    content: str = Field(..., description="Paste text content")
    remaining_views: Optional[int] = Field(None, description="Views left (null if unlimited)")
    expires_at: Optional[str] = Field(None, description="Expiry timestamp (ISO 8601, null if no TTL)")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")
