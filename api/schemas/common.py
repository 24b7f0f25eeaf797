"""
Common Pydantic schemas used across the API.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="User-facing error message")
    code: str = Field(..., description="Machine-readable error code")
    details: dict[str, Any] | None = Field(default=None, description="Additional error details")


class SuccessResponse(BaseModel):
    """Simple acknowledgement."""

    success: bool = True
    message: str | None = None


class HealthStatus(str, Enum):
    """Health check status enum."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    status: HealthStatus
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] | None = None


class HealthCheckResponse(BaseModel):
    """Liveness response."""

    status: str = "ok"
    timestamp: datetime
    service: str
    version: str


class AIHealthResponse(BaseModel):
    """Admin-only view of providers, catalog and backing services."""

    status: HealthStatus
    timestamp: datetime
    providers: dict[str, dict[str, Any]] = Field(default_factory=dict)
    catalog: dict[str, int] = Field(default_factory=dict)
    costs: dict[str, Any] = Field(default_factory=dict)
    environment: dict[str, bool] = Field(default_factory=dict)
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
