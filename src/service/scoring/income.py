"""
Income capacity scoring.

Three additive components capped at 100:

- Threshold (60 pts): net income against the minimum for the applicant's
  employment type, salary-transfer status and relationship with the bank
- Stability (up to 25 pts): net/gross ratio
- Tenure (up to 15 pts): years with the current employer
"""

from typing import Dict, Tuple

from .models import ApplicationRecord, ModuleResult

MODULE_NAME = "income"

THRESHOLD_POINTS = 60

# (employment category, salary transfer) -> (ETB threshold, NTB threshold)
INCOME_THRESHOLDS: Dict[Tuple[str, bool], Tuple[int, int]] = {
    ("permanent", True): (40_000, 45_000),
    ("permanent", False): (45_000, 50_000),
    ("contractual", True): (60_000, 65_000),
    ("contractual", False): (65_000, 70_000),
    ("self_employed", True): (100_000, 120_000),
    ("self_employed", False): (100_000, 120_000),
}


def income_threshold(employment_type: str, salary_transfer: bool, is_etb: bool) -> int:
    """
    Minimum net monthly income for the applicant's profile.

    Probation has no threshold (0). Unlisted categories use the permanent,
    non-salary-transfer threshold.
    """
    if employment_type == "probation":
        return 0
    etb, ntb = INCOME_THRESHOLDS.get(
        (employment_type, salary_transfer),
        INCOME_THRESHOLDS[("permanent", False)],
    )
    return etb if is_etb else ntb


def stability_points(ratio: float) -> Tuple[str, int]:
    if ratio >= 0.8:
        return "High Stability", 25
    if ratio >= 0.6:
        return "Medium Stability", 20
    return "Low Stability", 10


def tenure_points(years: float) -> Tuple[str, int]:
    if years >= 5:
        return "Excellent", 15
    if years >= 3:
        return "Good", 12
    if years >= 1:
        return "Acceptable", 8
    return "Low", 0


def income_risk_profile(score: float) -> str:
    if score >= 80:
        return "LOW"
    if score >= 60:
        return "MEDIUM"
    if score >= 40:
        return "HIGH"
    return "VERY_HIGH"


def score_income(application: ApplicationRecord) -> ModuleResult:
    """
    Score the applicant's income capacity.

    Args:
        application: Normalized application

    Returns:
        ModuleResult with threshold, stability and tenure analyses in details
    """
    gross = application.gross_monthly_income
    net = application.net_monthly_income
    tenure = application.tenure_years
    employment_type = application.employment_type
    notes = []

    expected = income_threshold(employment_type, application.salary_transfer, application.is_etb)
    threshold_met = False
    if employment_type == "probation":
        notes.append("Probation case: score based on DBR, no threshold credit")
    else:
        threshold_met = net >= expected
        if threshold_met:
            notes.append(f"Income threshold met: PKR {net:,.0f} >= {expected:,}")
        else:
            notes.append(f"Income threshold NOT met: PKR {net:,.0f} < {expected:,}")
    threshold_score = THRESHOLD_POINTS if threshold_met else 0

    ratio = 0.0
    stability_level, stability_score = "Not Measurable", 0
    if gross > 0 and net > 0:
        ratio = net / gross
        stability_level, stability_score = stability_points(ratio)
        notes.append(f"{stability_level}: {ratio * 100:.1f}% -> +{stability_score}")
    else:
        notes.append("Stability not measurable (missing gross/net income)")

    tenure_level, tenure_score = tenure_points(tenure)
    notes.append(f"{tenure_level} tenure: {tenure:g} years -> +{tenure_score}")

    total = min(100, threshold_score + stability_score + tenure_score)

    return ModuleResult(
        name=MODULE_NAME,
        score=total,
        notes=tuple(notes),
        flags=() if threshold_met or employment_type == "probation" else ("INCOME_BELOW_THRESHOLD",),
        details={
            "grossIncome": gross,
            "netIncome": net,
            "employmentType": employment_type,
            "salaryTransfer": application.salary_transfer,
            "thresholdAnalysis": {
                "expected": expected,
                "actual": net,
                "met": threshold_met,
                "points": threshold_score,
            },
            "stabilityAnalysis": {
                "ratio": round(ratio, 4),
                "level": stability_level,
                "points": stability_score,
            },
            "tenureAnalysis": {
                "years": tenure,
                "level": tenure_level,
                "points": tenure_score,
            },
            "customerType": application.customer_type.value,
            "riskProfile": income_risk_profile(total),
        },
    )
