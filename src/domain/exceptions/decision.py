"""Decision-related domain exceptions."""

from typing import List

from .base import DomainException


class InvalidApplicationException(DomainException):
    """Raised when an application is missing data required for scoring."""

    def __init__(self, errors: List[str]):
        super().__init__(
            message="; ".join(errors),
            code="INVALID_APPLICATION",
        )
        self.errors = list(errors)


class InvalidDecisionRequestException(DomainException):
    """Raised when a decision request is malformed."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_DECISION_REQUEST",
        )
