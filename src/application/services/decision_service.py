"""Decision service - orchestrates the card decision use case."""

from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from src.application.dto import DecisionRequest, DecisionResponse, ValidationResponse
from src.domain.exceptions import InvalidApplicationException, InvalidDecisionRequestException
from src.service.scoring import ScoringSettings, evaluate, scoring_settings

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DecisionService:
    """
    Application service for card decision use cases.

    Scoring itself is pure; the service adds payload validation and the
    evaluation clock so tests can pin the date an application is scored on.
    """

    def __init__(
        self,
        settings: ScoringSettings = scoring_settings,
        strict_validation: bool = False,
        clock: Clock = utc_now,
    ):
        self._settings = settings
        self._strict = strict_validation
        self._clock = clock

    def validate(self, request: DecisionRequest) -> ValidationResponse:
        """Check an application payload without scoring it."""
        errors = request.validate()
        return ValidationResponse(valid=not errors, errors=errors)

    async def make_decision(self, request: DecisionRequest) -> DecisionResponse:
        """
        Process a card decision request.

        Args:
            request: The application with optional bureau, system-check and
                exposure data

        Returns:
            DecisionResponse with the decision, limit and module breakdown

        Raises:
            InvalidDecisionRequestException: If the application payload is empty
            InvalidApplicationException: If validation fails in strict mode
        """
        if not request.application:
            raise InvalidDecisionRequestException("application is required")

        errors = request.validate()
        log = logger.bind(strict=request.strict or self._strict)
        if errors:
            if request.strict or self._strict:
                log.warning("application_rejected", errors=errors)
                raise InvalidApplicationException(errors)
            # Modules degrade to conservative defaults for missing data
            log.info("application_incomplete", errors=errors)

        result = evaluate(
            request.application,
            bureau=request.bureau,
            system_checks=request.system_checks,
            credit_limit_context=request.credit_limit_context,
            now=self._clock(),
            settings=self._settings,
        )
        return DecisionResponse.from_result(result, warnings=errors)
