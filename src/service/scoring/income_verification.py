"""
Income verification matrix.

Applicants fall into one of three employment classes:

- A: salary credited to the bank, or employed by an enlisted employer (EB)
- B: salaried without salary transfer
- C: self-employed or business owner

Each class has its own income threshold table (keyed by relationship,
permanence and whether the employer is known) and its own verification and
document requirements.
"""

from typing import Dict, List, Tuple

from .models import ApplicationRecord, ModuleDecision, ModuleResult

MODULE_NAME = "incomeVerification"

KNOWN_EMPLOYERS = frozenset({"KNOWN", "GOVT", "ARMED_FORCES"})
OFFICE_WAIVED_EMPLOYERS = frozenset({"GOVT", "ARMED_FORCES"})
SPECIAL_SEGMENT_BONUS = 10

# class -> relationship -> (permanent, known employer) -> threshold
THRESHOLDS: Dict[str, Dict[str, Dict[Tuple[bool, bool], int]]] = {
    "A": {
        "ETB": {(True, True): 40_000, (True, False): 40_000, (False, True): 60_000, (False, False): 60_000},
        "NTB": {(True, True): 45_000, (True, False): 50_000, (False, True): 65_000, (False, False): 70_000},
    },
    "B": {
        "ETB": {(True, True): 45_000, (True, False): 50_000, (False, True): 65_000, (False, False): 70_000},
        "NTB": {(True, True): 50_000, (True, False): 60_000, (False, True): 70_000, (False, False): 70_000},
    },
}
EB_THRESHOLDS = {True: 35_000, False: 55_000}
SELF_EMPLOYED_THRESHOLDS = {"ETB": 100_000, "NTB": 120_000}

CLASS_DESCRIPTIONS = {
    "A": "Salary Transfer (including EB)",
    "B": "Non-Salary Transfer",
    "C": "Self-Employed/Business",
}


def employment_class(application: ApplicationRecord) -> str:
    if application.employment_status in ("Self-Employed", "Business") or application.employment_type == "self_employed":
        return "C"
    if application.salary_transfer or application.company_type.upper() == "EB":
        return "A"
    return "B"


def verification_threshold(application: ApplicationRecord, employment: str) -> int:
    relationship = application.customer_type.value
    if employment == "C":
        return SELF_EMPLOYED_THRESHOLDS[relationship]

    permanent = application.employment_type == "permanent"
    company = application.company_type.upper()
    if employment == "A" and company == "EB":
        return EB_THRESHOLDS[permanent]
    return THRESHOLDS[employment][relationship][(permanent, company in KNOWN_EMPLOYERS)]


def verification_statuses(application: ApplicationRecord, employment: str) -> Dict[str, str]:
    v = application.verification
    docs = application.income_documents
    company = application.company_type.upper()

    if employment == "C":
        office = "REQUIRED"
    elif company in OFFICE_WAIVED_EMPLOYERS:
        office = "WAIVED"
    else:
        office = "DONE" if v.office_verification_done else "REQUIRED"

    if employment == "A" and not application.salary_transfer:
        bank_statement = "WAIVED"
    else:
        bank_statement = "DONE" if docs.bank_statement_provided else "REQUIRED"

    if employment == "C":
        salary_slip = "WAIVED"
    else:
        salary_slip = "DONE" if docs.salary_slip_provided else "REQUIRED"

    return {
        "office": office,
        "residence": "DONE" if v.residence_verification_done else "REQUIRED",
        "bankStatement": bank_statement,
        "salarySlip": salary_slip,
    }


def document_status(application: ApplicationRecord, employment: str) -> dict:
    docs = application.income_documents
    salaried = employment in ("A", "B")
    statement_waived = employment == "A" and application.salary_transfer
    provided: List[str] = []
    missing: List[str] = []

    for label, present, needed in (
        ("Salary Slip", docs.salary_slip_provided, salaried),
        ("Bank Statement", docs.bank_statement_provided, not statement_waived),
        ("Employment Certificate", docs.employment_certificate_provided, salaried),
        ("HR Letter", docs.hr_letter_provided, salaried),
    ):
        if present:
            provided.append(label)
        elif needed:
            missing.append(label)

    return {"complete": not missing, "missing": missing, "provided": provided}


def income_verification_requirements(application: ApplicationRecord, employment: str) -> dict:
    mandatory: List[str] = []
    recommended: List[str] = []
    waived: List[str] = []
    ntb = not application.is_etb

    if employment == "A":
        mandatory += ["Salary Slip", "Bank Statement"]
        if ntb:
            mandatory.append("Employment Certificate")
        if application.company_type.upper() == "UNKNOWN":
            mandatory += ["Office Verification", "Residence Verification"]
        else:
            waived.append("Office Verification")
    elif employment == "B":
        mandatory += ["Salary Slip", "Bank Statement", "Office Verification", "Residence Verification"]
        if ntb:
            mandatory.append("Employment Certificate")
    else:
        mandatory += ["Bank Statement", "Office Verification", "Residence Verification"]
        recommended += ["Business Registration", "Financial Statements"]

    return {"mandatory": mandatory, "recommended": recommended, "waived": waived}


def assess_income_verification(application: ApplicationRecord) -> ModuleResult:
    """
    Score income evidence against the verification matrix.

    Args:
        application: Normalized application

    Returns:
        ModuleResult with decision APPROVE (>= 80), CONDITIONAL (>= 60) or DECLINE
    """
    notes: List[str] = []
    employment = employment_class(application)
    notes.append(f"Employment Type: {employment} ({CLASS_DESCRIPTIONS[employment]})")

    net = application.net_monthly_income
    expected = verification_threshold(application, employment)
    threshold_met = net >= expected
    score = 60 if threshold_met else 0
    notes.append(
        f"Income threshold {'met' if threshold_met else 'NOT met'}: "
        f"PKR {net:,.0f} (Expected: PKR {expected:,})"
    )

    statuses = verification_statuses(application, employment)
    documents = document_status(application, employment)
    completed = sum(1 for status in statuses.values() if status in ("DONE", "WAIVED"))
    score += 10 * completed
    score += 10 if documents["complete"] else max(0, 10 - 2 * len(documents["missing"]))

    if application.segments.any_segment:
        score += SPECIAL_SEGMENT_BONUS
        notes.append("Special segment customer - bonus points applied")

    if completed >= 4 and documents["complete"]:
        level = "FULL"
    elif completed >= 3:
        level = "PARTIAL"
    elif completed >= 2:
        level = "MINIMAL"
    else:
        level = "NONE"

    if score >= 80:
        decision, reason = ModuleDecision.APPROVE, "All verification requirements met"
    elif score >= 60:
        decision, reason = ModuleDecision.CONDITIONAL, "Partial verification - additional documentation required"
    else:
        decision, reason = ModuleDecision.DECLINE, "Insufficient verification or income below threshold"

    if documents["missing"]:
        notes.append(f"Missing documents: {', '.join(documents['missing'])}")

    segments = application.segments
    return ModuleResult(
        name=MODULE_NAME,
        score=score,
        notes=tuple(notes),
        flags=() if threshold_met else ("INCOME_VERIFICATION_BELOW_THRESHOLD",),
        decision=decision,
        details={
            "reason": reason,
            "employmentType": employment,
            "verificationLevel": level,
            "incomeThreshold": {
                "expected": expected,
                "actual": net,
                "met": threshold_met,
                "points": 60 if threshold_met else 0,
            },
            "verificationStatus": statuses,
            "documentationStatus": documents,
            "requirements": income_verification_requirements(application, employment),
            "specialSegmentEligibility": {
                "isPensioner": segments.is_pensioner,
                "isRemittance": segments.is_remittance_customer,
                "isCrossSell": segments.is_cross_sell,
                "isMVC": segments.is_mvc,
            },
        },
    )
