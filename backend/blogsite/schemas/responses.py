"""
Blogsite Backend — Response Schemas
====================================

What:  Pydantic models for the JSON bodies the API returns on success.
Why:   Key names are part of the client contract (snake case, as the site's
       JavaScript reads them), so they are pinned here instead of built ad hoc.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class CreateResponse(BaseModel):
    """Returned by POST /api/blogposts/post with HTTP 201."""

    inserted_id: str = Field(description="Hex identifier assigned by MongoDB")
    document: Dict[str, Any] = Field(description="The stored post, every field present")


class DeleteAllResponse(BaseModel):
    """Returned by POST /api/deleteall."""

    message: str = Field(default="all blogposts deleted successfully")
    deleted_count: int = Field(description="Number of posts removed")


class EditResponse(BaseModel):
    """Returned by POST /api/blogposts/edit."""

    modified_count: int = Field(description="0 when nothing changed, 1 otherwise")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for container and load balancer probes.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
