"""
Common Schemas
Shared Pydantic models for API error and status responses
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional


class ErrorResponse(BaseModel):
    """
    Standard error response model

    Used for all API error responses
    """
    error: str = Field(..., description="Error type or category")
    message: str = Field(..., description="Human-readable error message")
    detail: Optional[Dict[str, Any]] = Field(None, description="Additional error details")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "state_conflict",
                "message": "Only submitted requisitions can be approved",
                "detail": {
                    "entity": "Requisition",
                    "entity_id": 12,
                    "current_status": "draft",
                    "action": "approve"
                }
            }
        }
    )


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="healthy or degraded")
    version: str
    database: str = Field(..., description="connected or disconnected")
    debug: bool
