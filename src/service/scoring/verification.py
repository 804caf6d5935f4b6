"""
Verification requirement framework.

Decides which field verifications (office, residence, telephonic,
references) an application needs, which are waived, and scores how
complete the verification picture is.
"""

import re
from typing import Dict, List

from .models import ApplicationRecord, ModuleDecision, ModuleResult

MODULE_NAME = "verification"

# Employers whose premises cannot be visited; office verification is waived
RESTRICTED_ENTITIES = (
    "KANUPP", "Cantonment boards", "CM House", "Dockyard", "Atco Labs", "COD",
    "City School", "FBR", "Bin Qasim", "Security Printing", "CAA", "KE/KESC",
    "Lotte", "Diplomatic Enclave", "Accountant General", "Airport Security",
    "Atomic NDC", "PTCL Head Office",
)

ACCEPTED_UTILITY_BILLS = frozenset({"ELECTRICITY", "GAS", "PTCL", "WATER"})
KNOWN_COMPANY_TYPES = frozenset({"KNOWN", "UNKNOWN", "GOVT", "ARMED_FORCES", "EB"})

WAIVER_BONUS = {"office": 10, "residence": 10, "telephonic": 5, "references": 5}
POINTS_PER_VERIFICATION = 25

_CNIC_PATTERN = re.compile(r"^\d{13}$")

REQUIRED = "REQUIRED"
WAIVED = "WAIVED"
DONE = "DONE"


def is_restricted_entity(company_type: str) -> bool:
    company = company_type.lower()
    return bool(company) and any(entity.lower() in company for entity in RESTRICTED_ENTITIES)


def _clean_etb_profile(application: ApplicationRecord) -> bool:
    v = application.verification
    return (
        application.is_etb
        and v.clean_ecib_12m
        and v.never_30_dpd
        and v.address_match
        and v.salary_in_statement
        and v.limit_under_500k
    )


def waiver_eligibility(application: ApplicationRecord) -> Dict[str, bool]:
    """Which verifications this applicant may skip."""
    v = application.verification
    clean = _clean_etb_profile(application)
    return {
        "office": is_restricted_entity(application.company_type),
        "residence": clean and v.utility_bill_provided and v.utility_bill_type in ACCEPTED_UTILITY_BILLS,
        "telephonic": clean,
        "references": v.is_restricted_entity or (application.is_etb and v.clean_ecib_12m),
    }


def verification_requirements(application: ApplicationRecord, waivers: Dict[str, bool]) -> Dict[str, str]:
    v = application.verification
    if waivers["office"]:
        office = WAIVED
    else:
        office = DONE if v.office_verification_done else REQUIRED

    def done_or_waived(done: bool, waived: bool) -> str:
        if done:
            return DONE
        return WAIVED if waived else REQUIRED

    references_done = v.references_provided >= 2 and v.positive_references >= 1
    return {
        "office": office,
        "residence": done_or_waived(v.residence_verification_done, waivers["residence"]),
        "telephonic": done_or_waived(v.telephonic_verification_done, waivers["telephonic"]),
        "references": done_or_waived(references_done, waivers["references"]),
    }


def verification_level(requirements: Dict[str, str], waivers: Dict[str, bool]) -> str:
    completed = sum(1 for status in requirements.values() if status in (DONE, WAIVED))
    if sum(waivers.values()) >= 3:
        return "WAIVED"
    if completed >= 4:
        return "FULL"
    if completed >= 3:
        return "PARTIAL"
    return "MINIMAL"


def assess_verification(application: ApplicationRecord) -> ModuleResult:
    """
    Evaluate verification requirements and waivers.

    Args:
        application: Normalized application

    Returns:
        ModuleResult; a negative reference is always a DECLINE
    """
    v = application.verification
    notes: List[str] = []

    waivers = waiver_eligibility(application)
    requirements = verification_requirements(application, waivers)

    score = sum(POINTS_PER_VERIFICATION for status in requirements.values() if status in (DONE, WAIVED))
    for check, bonus in WAIVER_BONUS.items():
        if waivers[check]:
            score += bonus
            notes.append(f"{check.capitalize()} verification waived - bonus points")

    compliance = {
        "cnicValidation": bool(_CNIC_PATTERN.match(application.cnic)),
        "addressVerification": bool(application.curr_city and application.office_city),
        "employmentVerification": (
            application.employment_status == "Employed"
            and application.company_type.upper() in KNOWN_COMPANY_TYPES
        ),
        "referenceCheck": v.positive_references >= 1 and v.negative_references == 0,
    }

    flags: List[str] = []
    if v.negative_references > 0:
        decision = ModuleDecision.DECLINE
        reason = "Negative reference check - automatic decline"
        flags.append("NEGATIVE_REFERENCE")
        notes.append("CRITICAL: Negative reference detected")
    elif score >= 80 and compliance["cnicValidation"] and compliance["addressVerification"] and not (
        v.no_response_references > 0 and v.positive_references == 0
    ):
        decision = ModuleDecision.APPROVE
        reason = "All verification requirements met"
    elif score >= 60:
        decision = ModuleDecision.CONDITIONAL
        reason = "Partial verification - additional requirements needed"
    else:
        decision = ModuleDecision.DECLINE
        reason = "Insufficient verification or compliance failures"

    if v.no_response_references > 0 and v.positive_references == 0:
        flags.append("REFERENCES_NO_RESPONSE")
        notes.append("WARNING: No response from references - retry required")

    level = verification_level(requirements, waivers)
    notes.append(f"Verification level: {level}")

    return ModuleResult(
        name=MODULE_NAME,
        score=score,
        notes=tuple(notes),
        flags=tuple(flags),
        decision=decision,
        details={
            "reason": reason,
            "verificationLevel": level,
            "requirements": requirements,
            "waivers": waivers,
            "references": {
                "provided": v.references_provided,
                "positive": v.positive_references,
                "negative": v.negative_references,
                "noResponse": v.no_response_references,
            },
            "compliance": compliance,
        },
    )
