"""Data Transfer Objects for application layer."""

from .decision import DecisionRequest, DecisionResponse, ValidationResponse

__all__ = [
    "DecisionRequest",
    "DecisionResponse",
    "ValidationResponse",
]
