"""
Application scorecard.

Fifteen applicant and bureau attributes, each scored 0-100 by its own
lookup table and combined with fixed weights that sum to 1.0. The age and
city attributes are recomputed here with scorecard-specific tables; the DBR
attribute reuses the DBR module's score.
"""

import re
from datetime import date
from typing import Dict, Optional, Tuple

from .age import calculate_age
from .models import ApplicationRecord, BureauRecord, ModuleResult

MODULE_NAME = "applicationScore"

APPLICATION_WEIGHTS: Dict[str, float] = {
    "education": 0.08,
    "marital_status": 0.08,
    "employment_status": 0.03,
    "net_income": 0.13,
    "residence_ownership": 0.02,
    "dependents": 0.02,
    "length_of_employment": 0.11,
    "industry": 0.03,
    "portfolio_type": 0.09,
    "deposits": 0.15,
    "highest_dpd": 0.04,
    "industry_exposure": 0.04,
    "age": 0.07,
    "city": 0.05,
    "dbr_score": 0.06,
}

# Keyword tables are checked in order; the first keyword found wins
EDUCATION_SCORES: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("phd", "doctorate"), 100),
    (("masters", "mba"), 85),
    (("bachelor", "graduation"), 70),
    (("intermediate", "college"), 55),
    (("matric", "secondary"), 40),
)

MARITAL_SCORES: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("married",), 75),
    (("single",), 60),
    (("divorced", "separated"), 45),
    (("widowed",), 50),
)

EMPLOYMENT_STATUS_SCORES: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("self-employed", "self employed", "business"), 65),
    (("permanent", "employed"), 100),
    (("contractual",), 75),
    (("probation",), 50),
    (("retired",), 40),
)

RESIDENCE_SCORES: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("owned",), 100),
    (("family",), 75),
    (("rented",), 50),
    (("company",), 60),
)

INDUSTRY_SCORES: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("government", "banking", "education", "healthcare"), 100),
    (("it", "software", "engineering", "finance"), 85),
    (("manufacturing", "telecom", "consulting"), 70),
    (("retail", "sales", "marketing"), 55),
    (("construction", "real estate", "hospitality"), 40),
)

TIER_1_CITIES = ("karachi", "lahore", "islamabad", "rawalpindi")
TIER_2_CITIES = ("faisalabad", "multan", "hyderabad", "gujranwala")
CLUSTER_CITY_SCORES = {"FEDERAL": 90, "SOUTH": 75, "NORTHERN_PUNJAB": 65}


def _keyword_score(text: str, table, default: int) -> int:
    words = set(re.findall(r"[a-z]+", text))
    for keywords, score in table:
        for keyword in keywords:
            # Short keywords must match a whole word ("it" is not "security")
            if (keyword in words) if len(keyword) <= 2 else (keyword in text):
                return score
    return default


def _step_score(value: float, bands: Tuple[Tuple[float, int], ...], default: int) -> int:
    """Score for the first band whose minimum ``value`` reaches."""
    for minimum, score in bands:
        if value >= minimum:
            return score
    return default


def _ceiling_score(value: float, bands: Tuple[Tuple[float, int], ...], default: int) -> int:
    """Score for the first band whose maximum ``value`` does not exceed."""
    for maximum, score in bands:
        if value <= maximum:
            return score
    return default


def education_score(education: str) -> int:
    return _keyword_score(education.lower(), EDUCATION_SCORES, 25)


def marital_status_score(status: str) -> int:
    return _keyword_score(status.lower(), MARITAL_SCORES, 40)


def employment_status_score(status: str) -> int:
    return _keyword_score(status.lower(), EMPLOYMENT_STATUS_SCORES, 20)


def net_income_score(net: float) -> int:
    return _step_score(
        net,
        ((200_000, 100), (150_000, 90), (100_000, 80), (75_000, 70), (50_000, 60), (30_000, 45), (20_000, 30)),
        15,
    )


def residence_score(residence: str) -> int:
    return _keyword_score(residence.lower(), RESIDENCE_SCORES, 40)


def dependents_score(dependents: int) -> int:
    return _ceiling_score(dependents, ((0, 100), (2, 80), (4, 60), (6, 40)), 20)


def employment_length_score(years: float) -> int:
    return _step_score(years, ((10, 100), (5, 85), (3, 70), (2, 60), (1, 45)), 25)


def industry_score(business_nature: str, occupation: str) -> int:
    return _keyword_score(f"{business_nature} {occupation}".lower(), INDUSTRY_SCORES, 50)


def portfolio_score(is_etb: bool) -> int:
    return 85 if is_etb else 60


def deposits_score(balance: float) -> int:
    return _step_score(
        balance,
        ((1_000_000, 100), (500_000, 85), (250_000, 70), (100_000, 55), (50_000, 40), (10_000, 25)),
        10,
    )


def highest_dpd_score(dpd: int) -> int:
    return _ceiling_score(dpd, ((0, 100), (7, 80), (30, 60), (60, 40), (90, 20)), 0)


def industry_exposure_score(exposure: float) -> int:
    return _ceiling_score(
        exposure,
        ((0, 100), (50_000, 85), (100_000, 70), (250_000, 55), (500_000, 40)),
        20,
    )


def scorecard_age_score(date_of_birth: Optional[date], today: date) -> int:
    age = calculate_age(date_of_birth, today)
    if age is None:
        return 50
    if 25 <= age <= 45:
        return 100
    if 22 <= age <= 55:
        return 85
    if 18 <= age <= 65:
        return 70
    return 30


def scorecard_city_score(curr_city: str, office_city: str, cluster: str) -> int:
    cities = f"{curr_city} {office_city}".lower()
    if any(city in cities for city in TIER_1_CITIES):
        return 100
    if any(city in cities for city in TIER_2_CITIES):
        return 80
    return CLUSTER_CITY_SCORES.get(cluster.upper(), 50)


def score_application(
    application: ApplicationRecord,
    bureau: BureauRecord,
    dbr_score: float,
    today: date,
) -> ModuleResult:
    """
    Compute the weighted application scorecard.

    Args:
        application: Normalized application
        bureau: Bureau record (defaults are used when the bureau is silent)
        dbr_score: Score produced by the DBR module
        today: Frozen evaluation date

    Returns:
        ModuleResult whose details carry the per-attribute breakdown
    """
    breakdown = {
        "education": education_score(application.education),
        "marital_status": marital_status_score(application.marital_status),
        "employment_status": employment_status_score(application.employment_status),
        "net_income": net_income_score(application.net_monthly_income),
        "residence_ownership": residence_score(application.residence),
        "dependents": dependents_score(application.dependents),
        "length_of_employment": employment_length_score(application.tenure_years),
        "industry": industry_score(application.business_nature, application.occupation),
        "portfolio_type": portfolio_score(application.is_etb),
        "deposits": deposits_score(bureau.average_deposit_balance),
        "highest_dpd": highest_dpd_score(bureau.highest_dpd),
        "industry_exposure": industry_exposure_score(bureau.exposure_in_industry),
        "age": scorecard_age_score(application.date_of_birth, today),
        "city": scorecard_city_score(application.curr_city, application.office_city, application.cluster),
        "dbr_score": int(min(100, max(0, dbr_score))),
    }

    total = sum(score * APPLICATION_WEIGHTS[component] for component, score in breakdown.items())
    notes = tuple(
        f"{component}: {score}/100 (weight: {APPLICATION_WEIGHTS[component] * 100:.1f}%)"
        for component, score in breakdown.items()
    )

    return ModuleResult(
        name=MODULE_NAME,
        score=round(total),
        notes=notes,
        details={
            "breakdown": breakdown,
            "customerType": application.customer_type.value,
            "totalComponents": len(breakdown),
            "maxPossibleScore": 100,
            "scoringMethod": "WEIGHTED_COMPONENTS",
        },
    )
