"""
Age banding.

Validates the applicant's age against the window for their employment
band. An age outside the window is a hard stop, not a low score.
"""

import math
from datetime import date
from typing import Optional

from .models import ApplicationRecord, ModuleResult
from .settings import ScoringSettings, scoring_settings

MODULE_NAME = "age"


def calculate_age(date_of_birth: Optional[date], today: date) -> Optional[int]:
    """
    Whole years between ``date_of_birth`` and ``today``.

    Uses floor(days / 365.25). Returns None when the date of birth is
    missing and a negative number when it lies in the future.
    """
    if date_of_birth is None:
        return None
    return math.floor((today - date_of_birth).days / 365.25)


def _result(age, band, employment_type, status, risk, low, high, allowed, score, note, hard_stop=False):
    return ModuleResult(
        name=MODULE_NAME,
        score=score,
        notes=(note,),
        flags=("AGE_HARD_STOP",) if hard_stop else (),
        details={
            "calculatedAge": age,
            "band": band,
            "employmentType": employment_type,
            "ageRange": {"min": low, "max": high, "allowedRange": allowed},
            "validationStatus": status,
            "riskCategory": risk,
        },
        hard_stop=hard_stop,
    )


def score_age(
    application: ApplicationRecord,
    today: date,
    settings: ScoringSettings = scoring_settings,
) -> ModuleResult:
    """
    Score the applicant's age for their employment band.

    Args:
        application: Normalized application
        today: Frozen evaluation date
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ModuleResult with score 100 (in window), the edge or retired score,
        or 0 with ``hard_stop`` set
    """
    age = calculate_age(application.date_of_birth, today)

    if age is None or age < 0:
        return _result(
            None, "Invalid", "UNKNOWN", "INVALID_DOB", "CRITICAL", 0, 0, "Invalid",
            0, "Invalid DOB or future-dated - Hard Stop", hard_stop=True,
        )

    if "self" in application.occupation.lower():
        low, high = settings.self_employed_min_age, settings.self_employed_max_age
        allowed = f"Self-Employed: {low}-{high} years"
        band = f"Self-Employed {low}-{high}"
        if low <= age <= high:
            return _result(
                age, band, "SELF_EMPLOYED", "VALID", "LOW", low, high, allowed,
                100, f"Age {age} within {low}-{high} (Self-Employed) - Full score",
            )
        return _result(
            age, band, "SELF_EMPLOYED", "OUT_OF_RANGE", "CRITICAL", low, high, allowed,
            0, f"Age {age} outside {low}-{high} (Self-Employed) - Hard Stop", hard_stop=True,
        )

    if application.employment_status.strip().lower() == "retired":
        low, high = settings.retired_min_age, settings.retired_max_age
        allowed = f"Retired: {low}-{high} years"
        if low <= age <= high:
            return _result(
                age, "Salaried (Retired)", "SALARIED_RETIRED", "VALID_PENALIZED", "MEDIUM",
                low, high, allowed,
                settings.retired_score, f"Retired at age {age} - Penalized score",
            )
        return _result(
            age, "Salaried (Retired)", "SALARIED_RETIRED", "OUT_OF_RANGE", "CRITICAL",
            low, high, allowed,
            0, f"Age {age} not acceptable for Salaried (Retired) - Hard Stop", hard_stop=True,
        )

    low, high = settings.salaried_min_age, settings.salaried_max_age
    allowed = f"Salaried: {low}-{high} years ({low - 1}-{high + 1} with tolerance)"
    if low <= age <= high:
        return _result(
            age, f"Salaried {low}-{high}", "SALARIED", "VALID", "LOW", low, high, allowed,
            100, f"Age {age} within {low}-{high} (Salaried) - Full score",
        )
    if age in (low - 1, high + 1):
        return _result(
            age, "Salaried (Edge)", "SALARIED", "VALID_EDGE", "MEDIUM", low, high, allowed,
            settings.salaried_edge_score, f"Age {age} edge tolerance - Reduced score",
        )
    return _result(
        age, "Salaried (Out of Range)", "SALARIED", "OUT_OF_RANGE", "CRITICAL", low, high, allowed,
        0, f"Age {age} outside {low - 1}-{high + 1} (Salaried) - Hard Stop", hard_stop=True,
    )
