"""
Behavioral scorecard for existing-to-bank customers.

Nine bureau behavior metrics, each scored by its own banding table and
combined with fixed weights. New-to-bank applicants have no history with
the bank and always score 0.
"""

from typing import Dict, Tuple

from .models import ApplicationRecord, BureauRecord, ModuleResult

MODULE_NAME = "behavioralScore"

BEHAVIORAL_WEIGHTS: Dict[str, float] = {
    "bad_counts_industry": 0.15,
    "bad_counts_bank": 0.15,
    "dpd_30_plus": 0.12,
    "dpd_60_plus": 0.12,
    "defaults_12m": 0.10,
    "late_payments": 0.08,
    "avg_deposit_balance": 0.10,
    "partial_payments": 0.08,
    "credit_utilization": 0.10,
}

# (maximum count, score); counts above the last band score the fallback
BAD_COUNTS_INDUSTRY_BANDS = ((0, 100), (1, 80), (3, 60), (5, 40), (10, 20))
BAD_COUNTS_BANK_BANDS = ((0, 100), (1, 75), (2, 50), (4, 25))
DPD_30_BANDS = ((0, 100), (2, 80), (5, 60), (10, 40), (20, 20))
DPD_60_BANDS = ((0, 100), (1, 70), (3, 50), (6, 30), (12, 10))
DEFAULTS_12M_BANDS = ((0, 100), (1, 60), (2, 30), (4, 10))
LATE_PAYMENT_BANDS = ((0, 100), (3, 85), (6, 70), (12, 55), (24, 40), (36, 25))
PARTIAL_PAYMENT_BANDS = ((0, 100), (2, 80), (5, 60), (10, 40), (20, 20))
UTILIZATION_BANDS = (
    (0.1, 100), (0.2, 90), (0.3, 80), (0.4, 70), (0.5, 60),
    (0.6, 50), (0.7, 40), (0.8, 30), (0.9, 20), (1.0, 10),
)

# (minimum balance, score)
DEPOSIT_BALANCE_BANDS = (
    (2_000_000, 100), (1_000_000, 90), (500_000, 80), (250_000, 70), (100_000, 60),
    (50_000, 50), (25_000, 40), (10_000, 30), (5_000, 20),
)


def band_at_most(value: float, bands: Tuple[Tuple[float, int], ...], fallback: int = 0) -> int:
    for maximum, score in bands:
        if value <= maximum:
            return score
    return fallback


def band_at_least(value: float, bands: Tuple[Tuple[float, int], ...], fallback: int) -> int:
    for minimum, score in bands:
        if value >= minimum:
            return score
    return fallback


def behavioral_breakdown(bureau: BureauRecord) -> Dict[str, int]:
    """Per-metric scores for a bureau record."""
    return {
        "bad_counts_industry": band_at_most(bureau.bad_counts_industry, BAD_COUNTS_INDUSTRY_BANDS),
        "bad_counts_bank": band_at_most(bureau.bad_counts_bank, BAD_COUNTS_BANK_BANDS),
        "dpd_30_plus": band_at_most(bureau.dpd_30_plus, DPD_30_BANDS),
        "dpd_60_plus": band_at_most(bureau.dpd_60_plus, DPD_60_BANDS),
        "defaults_12m": band_at_most(bureau.defaults_12m, DEFAULTS_12M_BANDS),
        "late_payments": band_at_most(bureau.late_payments, LATE_PAYMENT_BANDS, fallback=10),
        "avg_deposit_balance": band_at_least(bureau.average_deposit_balance, DEPOSIT_BALANCE_BANDS, 10),
        "partial_payments": band_at_most(bureau.partial_payments, PARTIAL_PAYMENT_BANDS),
        "credit_utilization": band_at_most(bureau.credit_utilization_ratio, UTILIZATION_BANDS),
    }


def risk_assessment(score: float) -> str:
    if score >= 90:
        return "EXCELLENT"
    if score >= 80:
        return "VERY_GOOD"
    if score >= 70:
        return "GOOD"
    if score >= 60:
        return "FAIR"
    if score >= 50:
        return "POOR"
    return "VERY_POOR"


def score_behavior(application: ApplicationRecord, bureau: BureauRecord) -> ModuleResult:
    """
    Compute the behavioral scorecard.

    Args:
        application: Normalized application (only the ETB flag is used)
        bureau: Bureau record

    Returns:
        ModuleResult; 0 with an explanatory note for new-to-bank customers
    """
    if not application.is_etb:
        return ModuleResult(
            name=MODULE_NAME,
            score=0,
            notes=("Behavioral scoring only for ETB customers",),
            details={
                "customerType": "NTB",
                "applicabilityReason": "Behavioral scoring not applicable for New-to-Bank customers",
                "breakdown": {},
                "totalComponents": 0,
                "scoringMethod": "NOT_APPLICABLE",
                "riskAssessment": "N/A (NTB Customer)",
            },
        )

    breakdown = behavioral_breakdown(bureau)
    total = round(sum(score * BEHAVIORAL_WEIGHTS[metric] for metric, score in breakdown.items()))

    return ModuleResult(
        name=MODULE_NAME,
        score=total,
        notes=tuple(
            f"{metric}: {score}/100 (weight: {BEHAVIORAL_WEIGHTS[metric] * 100:.1f}%)"
            for metric, score in breakdown.items()
        ),
        details={
            "customerType": "ETB",
            "applicabilityReason": "Full behavioral scoring applied for Existing-to-Bank customers",
            "breakdown": breakdown,
            "totalComponents": len(breakdown),
            "scoringMethod": "WEIGHTED_CBS_COMPONENTS",
            "riskAssessment": risk_assessment(total),
        },
    )
