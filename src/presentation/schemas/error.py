"""Pydantic schema for API error responses."""

from typing import List

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["INVALID_APPLICATION"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Date of birth is required; Current city is required"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )
    errors: List[str] | None = Field(
        None,
        description="Individual validation problems, when there are several",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "INVALID_APPLICATION",
                    "message": "Date of birth is required; Current city is required",
                    "request_id": "abc123",
                    "errors": ["Date of birth is required", "Current city is required"],
                }
            ]
        }
    }
