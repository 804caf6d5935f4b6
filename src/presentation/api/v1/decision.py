"""Decision API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import DecisionRequest
from src.application.services import DecisionService
from src.core.dependencies import get_decision_service
from src.core.metrics import record_decision, record_hard_stop, track_decision_latency
from src.presentation.schemas import (
    DecisionRequestSchema,
    DecisionResponseSchema,
    ErrorResponseSchema,
    ValidationResponseSchema,
)

decision_router = APIRouter(
    prefix="/decision",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        422: {"model": ErrorResponseSchema, "description": "Application failed validation"},
    },
)


def _to_dto(request: DecisionRequestSchema) -> DecisionRequest:
    return DecisionRequest(
        application=request.application,
        bureau=request.bureau,
        system_checks=request.system_checks,
        credit_limit_context=request.credit_limit_context,
        strict=request.strict,
    )


@decision_router.post(
    "",
    response_model=DecisionResponseSchema,
    response_model_by_alias=True,
    status_code=200,
    summary="Evaluate Card Application",
    description="""Score a credit-card application and return the decision, risk level, credit limit and module breakdown""",
    responses={
        200: {"description": "Decision processed successfully"},
    },
)
async def create_decision(
    request: DecisionRequestSchema,
    decision_service: Annotated[DecisionService, Depends(get_decision_service)],
) -> DecisionResponseSchema:
    """
    Evaluate a card application.

    A hard stop is still a 200 response with decision FAIL; only malformed
    or, in strict mode, incomplete applications are rejected.
    """
    with track_decision_latency():
        response = await decision_service.make_decision(_to_dto(request))

    # Record business metrics
    record_decision(
        response.decision,
        response.risk_level,
        response.assigned_credit_limit,
        response.card_type,
    )
    if response.hard_stop_rule:
        record_hard_stop(response.hard_stop_rule)

    return DecisionResponseSchema.model_validate(
        {
            **response.payload,
            "explanation": response.explanation,
            "warnings": response.warnings,
        }
    )


@decision_router.post(
    "/validate",
    response_model=ValidationResponseSchema,
    summary="Validate Card Application",
    description="Check an application payload for missing or inconsistent fields without scoring it.",
)
async def validate_decision_request(
    request: DecisionRequestSchema,
    decision_service: Annotated[DecisionService, Depends(get_decision_service)],
) -> ValidationResponseSchema:
    result = decision_service.validate(_to_dto(request))
    return ValidationResponseSchema(valid=result.valid, errors=result.errors)
