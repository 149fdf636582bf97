"""
Pydantic models for API request/response validation.

Changelog entries are parsed into plain dataclasses by the parser service;
these models describe the shapes served to the updates page.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CategoryKey(str, Enum):
    """Recognized change categories of a changelog version."""
    ADDED = "added"
    CHANGED = "changed"
    FIXED = "fixed"
    SECURITY = "security"


class ChangelogItem(BaseModel):
    """
    A single change line, split for display.

    Attributes:
        text: The change line exactly as parsed.
        headline: Text before the first " | " separator (the whole line if none).
        sub_items: Remaining " | " separated parts.
    """
    text: str = Field(..., description="Change line as parsed")
    headline: str = Field(..., description="Main text of the change")
    sub_items: list[str] = Field(default_factory=list, description="Detail lines")


class ChangelogSection(BaseModel):
    """A category block of a version, in display order."""
    key: CategoryKey = Field(..., description="Category key")
    label: str = Field(..., description="Spanish display label")
    items: list[ChangelogItem] = Field(default_factory=list, description="Change lines")


class ChangelogEntryView(BaseModel):
    """
    A changelog version prepared for the updates page.

    Attributes:
        version: Version token as written in the heading.
        version_label: "v1.2.0", or "En desarrollo" for unreleased changes.
        date: ISO date from the heading, empty when absent.
        formatted_date: Spanish display date, empty when absent.
        is_latest: True for the first (most recent) entry.
        categories: Raw parsed categories keyed by category.
        sections: Categories in display order with labels.
    """
    version: str = Field(..., description="Version token")
    version_label: str = Field(..., description="Display label for the version")
    date: str = Field(default="", description="ISO release date")
    formatted_date: str = Field(default="", description="Spanish display date")
    is_latest: bool = Field(default=False, description="Most recent entry")
    categories: dict[str, list[str]] = Field(default_factory=dict, description="Parsed categories")
    sections: list[ChangelogSection] = Field(default_factory=list, description="Display sections")


class ChangelogResponse(BaseModel):
    """Response containing all changelog entries in source order."""
    entries: list[ChangelogEntryView] = Field(default_factory=list, description="Changelog entries")
    total: int = Field(..., ge=0, description="Number of entries")
    source: str | None = Field(default=None, description="Changelog source file")


MAX_PARSE_CONTENT_CHARS = 500_000


class ParseChangelogRequest(BaseModel):
    """Raw changelog markdown to parse without reading the bundled file."""
    content: str = Field(default="", max_length=MAX_PARSE_CONTENT_CHARS, description="Changelog markdown")


class HealthStatus(str, Enum):
    """System health status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"


class HealthResponse(BaseModel):
    """
    Health check response for monitoring.

    Attributes:
        status: Overall system health status.
        version: Application version.
        environment: Deployment environment.
        checks: Individual component health checks.
    """
    status: HealthStatus = Field(..., description="Overall health status")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    checks: dict[str, bool] = Field(default_factory=dict, description="Component health checks")


class ErrorResponse(BaseModel):
    """
    Standardized error response.

    Attributes:
        error: Error type/code.
        message: Human-readable error message.
        details: Additional error details.
        request_id: Request ID for tracing.
    """
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict | None = Field(default=None, description="Additional details")
    request_id: str | None = Field(default=None, description="Request ID for tracing")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
