"""Shared response models: error envelope, health, plain messages."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "VALIDATION_ERROR",
                "message": "Invalid number of shares",
                "status": 400,
            }
        }
    )

    error: str = Field(..., description="Machine-readable code, e.g. NOT_FOUND")
    message: str = Field(..., description="Text suitable for showing to the user")
    status: int
    details: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Aggregate status plus one flag per dependency."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, bool] = Field(
        default_factory=dict, description="database and quote_provider reachability"
    )


class MessageResponse(BaseModel):
    message: str
