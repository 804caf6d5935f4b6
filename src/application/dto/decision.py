"""Data transfer objects for card decision operations."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from src.service.scoring import DecisionResult, explain_decision, validate_application


@dataclass(frozen=True)
class DecisionRequest:
    """Input data for requesting a card decision."""
    application: Mapping[str, Any]
    bureau: Optional[Mapping[str, Any]] = None
    system_checks: Optional[Mapping[str, Any]] = None
    credit_limit_context: Optional[Mapping[str, Any]] = None
    strict: bool = False

    def validate(self) -> List[str]:
        return validate_application(self.application)


@dataclass(frozen=True)
class DecisionResponse:
    """Response data for a card decision."""

    application_id: str
    final_score: int
    decision: str
    risk_level: str
    action_required: str
    customer_type: str
    dbr_percentage: float
    assigned_credit_limit: Optional[int]
    card_type: Optional[str]
    hard_stop_rule: Optional[str]
    payload: Dict[str, Any]
    explanation: str
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_result(cls, result: DecisionResult, warnings: Optional[List[str]] = None) -> "DecisionResponse":
        return cls(
            application_id=result.application_id,
            final_score=result.final_score,
            decision=result.decision.value,
            risk_level=result.risk_level.value,
            action_required=result.action_required,
            customer_type=result.customer_type.value,
            dbr_percentage=round(result.dbr_percentage, 2),
            assigned_credit_limit=result.assigned_credit_limit,
            card_type=result.card_type.value if result.card_type else None,
            hard_stop_rule=result.hard_stop_rule,
            payload=result.to_dict(),
            explanation=explain_decision(result),
            warnings=list(warnings or []),
        )


@dataclass(frozen=True)
class ValidationResponse:
    """Result of checking an application payload without scoring it."""

    valid: bool
    errors: List[str]
