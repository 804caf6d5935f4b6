"""
Credit Limit Assignment.

This module derives the card limit from three candidate limits:

- income-based: net income times a multiple chosen by income bracket and
  adjusted for employment type, salary transfer and special segments
- DBR-based: residual income after reserving a share for obligations,
  divided by the monthly obligation assumed per unit of limit
- regulatory: remaining headroom under the total, unsecured and aggregate
  card + personal-loan exposure caps

The smallest candidate wins. Post-assignment checks reduce the limit to the
binding constraint (decision CAP). Any positive limit gets a card, the
lowest tier when it falls under that tier's minimum; only a zero limit is
declined.
"""

import math
from typing import List, Optional, Tuple

from .models import (
    ApplicationRecord,
    CardType,
    CreditLimitContext,
    ModuleDecision,
    ModuleResult,
)
from .settings import ScoringSettings, scoring_settings

MODULE_NAME = "creditLimit"

# (upper bound of net income, ETB multiple, NTB multiple)
INCOME_MULTIPLES: Tuple[Tuple[float, float, float], ...] = (
    (20_000, 2.5, 2.0),
    (50_000, 3.0, 2.5),
    (100_000, 3.5, 2.75),
    (150_000, 4.0, 3.25),
    (math.inf, 5.0, 3.75),
)
SELF_EMPLOYED_MULTIPLE = (2.75, 2.5)
REMITTANCE_MULTIPLE = (1.0, 0.8)
PENSIONER_MULTIPLE = 2.0
MVC_MULTIPLE_CAP = 4.5


def _round(value: float) -> int:
    """Round half up, matching how limits are quoted to customers."""
    return int(math.floor(value + 0.5))


def income_multiple(application: ApplicationRecord) -> float:
    """
    Income multiple for the applicant.

    Args:
        application: Normalized application

    Returns:
        Multiple applied to net monthly income
    """
    is_etb = application.is_etb
    net = application.net_monthly_income
    segments = application.segments

    multiple = 0.0
    for upper, etb_multiple, ntb_multiple in INCOME_MULTIPLES:
        if net < upper:
            multiple = etb_multiple if is_etb else ntb_multiple
            break

    if application.employment_type == "self_employed":
        multiple = SELF_EMPLOYED_MULTIPLE[0] if is_etb else SELF_EMPLOYED_MULTIPLE[1]
    elif application.employment_type == "contractual":
        multiple *= 0.9

    if application.salary_transfer:
        multiple *= 1.1

    if segments.is_pensioner:
        multiple = PENSIONER_MULTIPLE
    elif segments.is_remittance_customer:
        multiple = REMITTANCE_MULTIPLE[0] if is_etb else REMITTANCE_MULTIPLE[1]
    elif segments.is_mvc:
        multiple = min(multiple * 1.2, MVC_MULTIPLE_CAP)

    return multiple


def income_based_limit(application: ApplicationRecord) -> int:
    return max(0, _round(application.net_monthly_income * income_multiple(application)))


def dbr_based_limit(net_income: float, settings: ScoringSettings = scoring_settings) -> int:
    available = net_income * (1 - settings.limit_max_dbr)
    return max(0, _round(available / settings.limit_obligation_ratio))


def exposure_headroom(
    context: CreditLimitContext,
    settings: ScoringSettings = scoring_settings,
) -> dict:
    """Remaining capacity under each regulatory exposure cap."""
    return {
        "totalExposure": settings.total_exposure_cap - context.total_exposure,
        "unsecuredExposure": settings.unsecured_exposure_cap - context.unsecured_exposure,
        "aggregateCardAndPersonalLoan": settings.aggregate_cc_pl_cap
        - (context.credit_card_exposure + context.personal_loan_exposure),
    }


def card_tier_for(limit: int, settings: ScoringSettings = scoring_settings) -> Optional[Tuple[str, int, int]]:
    """
    Highest tier whose minimum the limit reaches.

    Positive limits under the lowest tier's minimum still get the lowest
    tier; None only when there is no limit at all.
    """
    if limit <= 0:
        return None
    chosen = settings.card_tiers[0]
    for tier in settings.card_tiers:
        if limit >= tier[1]:
            chosen = tier
    return chosen


def _platinum_eligible(application: ApplicationRecord) -> bool:
    segments = application.segments
    return (
        not application.is_etb
        or segments.is_cross_sell
        or segments.is_mvc
        or segments.is_remittance_customer
    )


def _tier_score(limit: int, tier: Tuple[str, int, int], settings: ScoringSettings) -> int:
    names = [name for name, _, _ in settings.card_tiers]
    # Top tier scores 100, each tier below it 20 less
    base = 100 - 20 * (len(names) - 1 - names.index(tier[0]))
    span = tier[2] - tier[1]
    position = max(0, min(limit, tier[2]) - tier[1]) / span if span else 1.0
    return min(100, _round(base + position * 20))


def assign_credit_limit(
    application: ApplicationRecord,
    dbr_percentage: float,
    context: Optional[CreditLimitContext] = None,
    settings: ScoringSettings = scoring_settings,
) -> ModuleResult:
    """
    Assign a credit limit and card tier.

    Args:
        application: Normalized application
        dbr_percentage: DBR percentage from the DBR module (reported only)
        context: Current exposure; no existing exposure when omitted
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ModuleResult with decision APPROVE, CAP or DECLINE and the assigned
        limit and card type in details
    """
    context = context or CreditLimitContext()
    notes: List[str] = []
    flags: List[str] = []

    by_income = income_based_limit(application)
    by_dbr = dbr_based_limit(application.net_monthly_income, settings)
    headroom = exposure_headroom(context, settings)
    regulatory = _round(min(headroom.values()))
    notes.append(f"Income-based limit: PKR {by_income:,}")
    notes.append(f"DBR-based limit: PKR {by_dbr:,}")
    notes.append(f"Regulatory cap: PKR {regulatory:,}")

    calculated = max(0, min(by_income, by_dbr, regulatory))
    notes.append(f"Final calculated limit: PKR {calculated:,}")

    limit = calculated
    decision = ModuleDecision.APPROVE
    reason = ""

    total_ok = context.total_exposure + limit <= settings.total_exposure_cap
    unsecured_ok = context.unsecured_exposure + limit <= settings.unsecured_exposure_cap
    if not total_ok or not unsecured_ok:
        binding = max(0, _round(min(headroom["totalExposure"], headroom["unsecuredExposure"])))
        decision = ModuleDecision.CAP
        reason = (
            "Total exposure exceeds regulatory limit"
            if not total_ok
            else "Unsecured exposure exceeds regulatory limit"
        )
        limit = min(limit, binding)
        flags.append("EXPOSURE_CAP")
        notes.append(f"CAP: {reason}; limit reduced to PKR {limit:,}")

    tier = card_tier_for(limit, settings)
    top_tier = settings.card_tiers[-1]
    platinum_eligible = _platinum_eligible(application)
    tier_eligible = tier is None or tier[0] != top_tier[0] or platinum_eligible
    if not tier_eligible:
        ceiling = settings.card_tiers[-2][2] if len(settings.card_tiers) > 1 else top_tier[1] - 1
        decision = ModuleDecision.CAP
        reason = reason or "Card type not eligible for customer profile"
        limit = min(limit, ceiling)
        tier = card_tier_for(limit, settings)
        flags.append("CARD_TYPE_CAP")
        notes.append(f"CAP: {top_tier[0]} not available for this profile; limit reduced to PKR {limit:,}")

    card_type: Optional[CardType] = None
    if tier is None:
        decision = ModuleDecision.DECLINE
        reason = "No credit limit available within income, DBR and exposure limits"
        flags.append("NO_LIMIT_AVAILABLE")
        notes.append(f"DECLINE: {reason}")
        limit = 0
        score = 0
    else:
        card_type = CardType(tier[0])
        if limit < tier[1]:
            flags.append("LIMIT_BELOW_MINIMUM")
            notes.append(f"Limit below {tier[0]} minimum of PKR {tier[1]:,}; {tier[0]} assigned")
        notes.append(f"Card type: {tier[0]} (PKR {tier[1]:,} - {tier[2]:,})")
        score = 50 if decision == ModuleDecision.CAP else _tier_score(limit, tier, settings)

    segments = application.segments
    for active, label in (
        (segments.is_pensioner, "Pensioner customer"),
        (segments.is_remittance_customer, "Foreign remittance customer"),
        (segments.is_cross_sell, "Cross-sell customer"),
        (segments.is_mvc, "Most Valued Customer"),
    ):
        if active:
            notes.append(f"Special segment: {label}")

    return ModuleResult(
        name=MODULE_NAME,
        score=score,
        notes=tuple(notes),
        flags=tuple(flags),
        decision=decision,
        details={
            "assignedLimit": limit,
            "cardType": card_type.value if card_type else None,
            "reason": reason,
            "incomeBasedLimit": by_income,
            "incomeMultiple": round(income_multiple(application), 4),
            "dbrBasedLimit": by_dbr,
            "regulatoryCap": regulatory,
            "exposureHeadroom": headroom,
            "calculatedLimit": calculated,
            "finalLimit": limit,
            "dbrPercentage": round(dbr_percentage, 2),
            "cardTypeReason": f"PKR {tier[1]:,} - {tier[2]:,}" if tier else "Below minimum limit",
            "regulatoryCompliance": {
                "totalExposureWithinLimit": total_ok,
                "unsecuredExposureWithinLimit": unsecured_ok,
                "cardTypeEligible": tier_eligible,
            },
            "specialSegmentEligibility": {
                "isPensioner": segments.is_pensioner,
                "isRemittance": segments.is_remittance_customer,
                "isCrossSell": segments.is_cross_sell,
                "isMVC": segments.is_mvc,
            },
        },
    )
