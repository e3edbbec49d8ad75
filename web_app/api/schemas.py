"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")
    custom_code: Optional[str] = Field(
        None,
        description="Optional custom short code (letters, digits, '-' and '_')",
        validation_alias=AliasChoices("custom_code", "customCode"),
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "custom_code": None
                },
                {
                    "url": "https://github.com/user/repo",
                    "custom_code": "myrepo"
                }
            ]
        }
    }


class URLResponse(BaseModel):
    """A stored short URL with its click statistics."""

    id: int
    short_code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    clicks: int = Field(..., description="Number of redirects served")
    created_at: datetime = Field(..., description="Creation timestamp")
    last_accessed: Optional[datetime] = Field(None, description="Time of the last redirect")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "short_code": "abc123",
                    "short_url": "https://short.link/abc123",
                    "original_url": "https://example.com/very/long/path",
                    "clicks": 0,
                    "created_at": "2024-01-01T12:00:00Z",
                    "last_accessed": None
                }
            ]
        },
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
