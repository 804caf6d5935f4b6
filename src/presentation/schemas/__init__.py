"""Pydantic schemas for API request/response validation."""

from .decision import (
    DecisionRequestSchema,
    DecisionResponseSchema,
    ModuleScoreSchema,
    ValidationResponseSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "DecisionRequestSchema",
    "DecisionResponseSchema",
    "ModuleScoreSchema",
    "ValidationResponseSchema",
    "ErrorResponseSchema",
]
