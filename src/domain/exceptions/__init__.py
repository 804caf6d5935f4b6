"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .decision import (
    InvalidApplicationException,
    InvalidDecisionRequestException,
)

__all__ = [
    "DomainException",
    "InvalidApplicationException",
    "InvalidDecisionRequestException",
]
