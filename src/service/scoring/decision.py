"""
Decision Engine for card applications.

This module orchestrates the complete decision-making process:
1. Normalize the application, bureau, system-check and exposure payloads
2. Run every scoring and compliance module against one frozen clock
3. Evaluate the hard-stop rules in priority order
4. Otherwise blend module scores with customer-type weights
5. Map the final score to a decision band and attach the credit limit

This is the main entry point for the scoring module.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import structlog

from .age import score_age
from .application_scorecard import score_application
from .behavioral_scorecard import score_behavior
from .credit_limit import assign_credit_limit
from .dbr import dbr_percentage, score_dbr
from .documentation import assess_documentation
from .geography import score_geography
from .hard_stops import first_hard_stop
from .income import score_income
from .income_verification import assess_income_verification
from .models import (
    ApplicationRecord,
    BureauRecord,
    CardType,
    CreditLimitContext,
    DecisionOutcome,
    DecisionResult,
    ModuleDecision,
    ModuleResult,
    RiskLevel,
    SystemChecksRecord,
)
from .normalize import as_date, as_float, as_text
from .screening import score_eamvu, score_spu
from .settings import ScoringSettings, scoring_settings
from .special_segments import assess_special_segments
from .system_checks import run_system_checks
from .verification import assess_verification

logger = structlog.get_logger(__name__)

Payload = Optional[Mapping[str, Any]]


def _record(value, record_type):
    if value is None or isinstance(value, record_type):
        return value
    return record_type.from_mapping(value)


def decision_band(score: int, settings: ScoringSettings = scoring_settings) -> Tuple[DecisionOutcome, RiskLevel, str]:
    """Map a final score to (decision, risk level, action required)."""
    if score >= settings.band_very_low_min:
        return DecisionOutcome.PASS, RiskLevel.VERY_LOW, "None"
    if score >= settings.band_low_min:
        return DecisionOutcome.PASS, RiskLevel.LOW, "Basic conditions"
    if score >= settings.band_medium_min:
        return DecisionOutcome.CONDITIONAL_PASS, RiskLevel.MEDIUM, "Additional conditions"
    if score >= settings.band_high_min:
        return DecisionOutcome.CONDITIONAL_PASS, RiskLevel.HIGH, "Manual review"
    return DecisionOutcome.FAIL, RiskLevel.VERY_HIGH, "Low score - Decline application"


def weighted_score(
    results: Mapping[str, ModuleResult],
    is_etb: bool,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Blend module scores with customer-type weights.

    Only modules that carry a weight and produced a result take part; the
    sum is normalized by their total weight, rounded and clamped to 0-100.
    """
    total = 0.0
    weight_sum = 0.0
    for name, weight in settings.module_weights(is_etb).items():
        if weight <= 0 or name not in results:
            continue
        total += results[name].score * weight
        weight_sum += weight
    if weight_sum <= 0:
        return 0
    return max(0, min(100, int(round(total / weight_sum))))


def run_modules(
    application: ApplicationRecord,
    bureau: BureauRecord,
    system_checks: Optional[SystemChecksRecord],
    context: Optional[CreditLimitContext],
    today: date,
    settings: ScoringSettings = scoring_settings,
) -> Dict[str, ModuleResult]:
    """Run every scoring and compliance module, keyed by module name."""
    dbr = score_dbr(application, bureau, settings)
    modules = [
        dbr,
        score_spu(application),
        score_eamvu(application),
        score_age(application, today, settings),
        score_geography(application),
        score_income(application),
        score_application(application, bureau, dbr.score, today),
        score_behavior(application, bureau),
        assign_credit_limit(application, dbr_percentage(dbr), context, settings),
        run_system_checks(system_checks, settings),
        assess_documentation(application.documentation, today, settings),
        assess_verification(application),
        assess_income_verification(application),
        assess_special_segments(application, today),
    ]
    return {result.name: result for result in modules}


def evaluate(
    application: Union[ApplicationRecord, Mapping[str, Any]],
    bureau: Union[BureauRecord, Payload] = None,
    system_checks: Union[SystemChecksRecord, Payload] = None,
    credit_limit_context: Union[CreditLimitContext, Payload] = None,
    now: Optional[datetime] = None,
    settings: ScoringSettings = scoring_settings,
) -> DecisionResult:
    """
    Evaluate a card application and produce the final decision.

    Decision Logic:
        - Hard stops (age, SPU, Annexure A, DBR, system checks) in that
          order: the first match fails the application with score 0
        - Otherwise the weighted score selects the decision band
        - A credit limit and card type are attached unless the decision is
          FAIL; a declined limit turns a passing score into FAIL

    Args:
        application: Application record or raw payload
        bureau: Bureau (CBS) record or payload; local fallbacks apply when absent
        system_checks: System check record or payload; checks are PENDING when absent
        credit_limit_context: Current exposure; no existing exposure when absent
        now: Evaluation clock; read once and shared by every module
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        DecisionResult with every module result attached
    """
    evaluated_at = now or datetime.now(timezone.utc)
    today = evaluated_at.date()

    application = _record(application, ApplicationRecord)
    bureau = _record(bureau, BureauRecord) or BureauRecord()
    system_checks = _record(system_checks, SystemChecksRecord)
    credit_limit_context = _record(credit_limit_context, CreditLimitContext)

    log = logger.bind(
        application_id=application.application_id,
        customer_type=application.customer_type.value,
    )
    log.info(
        "evaluation_started",
        has_bureau_dbr=bureau.upstream_dbr is not None,
        has_system_checks=system_checks is not None,
    )

    results = run_modules(application, bureau, system_checks, credit_limit_context, today, settings)
    dbr_pct = dbr_percentage(results["dbr"])

    common = dict(
        module_results=results,
        customer_type=application.customer_type,
        evaluated_at=evaluated_at,
        application_id=application.application_id,
        customer_name=application.full_name,
        cnic=application.cnic,
        dbr_percentage=dbr_pct,
    )

    rule = first_hard_stop(results)
    if rule is not None:
        reason = rule.reason(results)
        log.warning("hard_stop_triggered", rule=rule.name, reason=reason)
        return DecisionResult(
            final_score=0,
            decision=DecisionOutcome.FAIL,
            risk_level=RiskLevel.VERY_HIGH,
            action_required=reason,
            hard_stop_rule=rule.name,
            **common,
        )

    final_score = weighted_score(results, application.is_etb, settings)
    decision, risk_level, action = decision_band(final_score, settings)

    limit: Optional[int] = None
    card_type: Optional[CardType] = None
    limit_result = results["creditLimit"]
    if decision != DecisionOutcome.FAIL:
        if limit_result.decision == ModuleDecision.DECLINE:
            # A non-failed decision always carries a limit and a card
            decision, risk_level = DecisionOutcome.FAIL, RiskLevel.VERY_HIGH
            action = f"{limit_result.details['reason']} - Decline application"
        else:
            limit = limit_result.details["assignedLimit"]
            card_type = CardType(limit_result.details["cardType"])

    log.info(
        "decision_made",
        final_score=final_score,
        decision=decision.value,
        risk_level=risk_level.value,
        dbr_percentage=round(dbr_pct, 2),
        credit_limit=limit,
        card_type=card_type.value if card_type else None,
    )

    return DecisionResult(
        final_score=final_score,
        decision=decision,
        risk_level=risk_level,
        action_required=action,
        assigned_credit_limit=limit,
        card_type=card_type,
        **common,
    )


def validate_application(data: Mapping[str, Any], today: Optional[date] = None) -> List[str]:
    """
    Check an application payload for fields the modules cannot score without.

    Returns every problem found rather than stopping at the first, so the
    caller can report them together. An empty list means the payload is
    complete enough to evaluate.
    """
    today = today or datetime.now(timezone.utc).date()
    errors: List[str] = []

    raw_dob = data.get("date_of_birth")
    if raw_dob in (None, ""):
        errors.append("Date of birth is required")
    else:
        dob = as_date(raw_dob)
        if dob is None:
            errors.append("Date of birth is not a valid date")
        elif dob > today:
            errors.append("Date of birth cannot be in the future")

    if not as_text(data.get("curr_city")):
        errors.append("Current city is required")

    net = as_float(next(
        (data[key] for key in ("total_income", "net_monthly_income", "netMonthlyIncome") if data.get(key) is not None),
        None,
    ))
    gross = as_float(data.get("gross_monthly_income"))
    if net <= 0:
        errors.append("Net monthly income must be greater than 0")
    elif gross > 0 and net > gross:
        errors.append("Net monthly income cannot exceed gross monthly income")

    if not as_text(data.get("employment_type")):
        errors.append("Employment type is required")

    if data.get("eamvu_submitted") is None and data.get("eavmu_submitted") is None:
        errors.append("EAMVU submission flag is required")

    return errors


def explain_decision(result: DecisionResult) -> str:
    """
    Generate a human-readable explanation of a decision.

    This can be used for:
    - Logging and debugging
    - Credit officer reference

    Args:
        result: The decision to explain

    Returns:
        Human-readable explanation string
    """
    lines = [f"Decision: {result.decision.value} ({result.risk_level.value} risk)"]
    lines.append(f"Final Score: {result.final_score}/100")
    lines.append(f"Action Required: {result.action_required}")

    if result.is_hard_stop:
        lines.append(f"Hard Stop: {result.hard_stop_rule}")
    elif result.assigned_credit_limit is not None:
        lines.append(f"Credit Limit: PKR {result.assigned_credit_limit:,} ({result.card_type.value})")

    lines.append(f"DBR: {result.dbr_percentage:.2f}%")
    lines.append("")
    lines.append("Module Scores:")
    for name, module in result.module_results.items():
        suffix = f" [{module.decision.value}]" if module.decision else ""
        marker = " (HARD STOP)" if module.hard_stop else ""
        lines.append(f"  - {name}: {module.score:g}{suffix}{marker}")

    return "\n".join(lines)
