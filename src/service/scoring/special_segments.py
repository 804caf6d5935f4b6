"""
Special segment policies: cross-sell, pensioner, remittance and MVC.

Each segment is analysed independently. An eligible segment adds bonus points
and benefits (DBR cap, maximum limit, verification waivers); a flagged
segment that fails its criteria records an exclusion.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from .models import ApplicationRecord, ModuleDecision, ModuleResult, SegmentProfile

MODULE_NAME = "specialSegments"

CROSS_SELL_MAX_LOAN_AGE_MONTHS = 6
CROSS_SELL_MAX_LATE_PAYMENTS = 1

PENSIONER_MIN_INCOME = 40_000
PENSIONER_MIN_CREDITS = 6

REMITTANCE_MIN_MONTHLY = 100_000
REMITTANCE_MIN_ENTRIES = 6
REMITTANCE_MAX_LIMIT_NTB = 250_000
REMITTANCE_MAX_LIMIT_ETB = 500_000

MVC_MIN_BUSINESS_MONTHS = 6
MVC_MIN_AVERAGE_BALANCE = 500_000
MVC_MIN_CREDITS_6M = 2
MVC_DBR_CAP = 40
MVC_LIMIT_MULTIPLIER = 4.5

SEGMENT_POINTS = {"CROSS_SELL": 20, "PENSIONER": 15, "REMITTANCE": 15, "MVC": 25}


@dataclass
class SegmentAnalysis:
    eligible: bool = False
    exclusions: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)
    requirements: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "eligible": self.eligible,
            "exclusions": self.exclusions,
            "benefits": self.benefits,
            "requirements": self.requirements,
        }


def months_since(start: date, today: date) -> int:
    """Whole 30-day months between two dates."""
    return abs((today - start).days) // 30


def analyze_cross_sell(segments: SegmentProfile, today: date) -> SegmentAnalysis:
    analysis = SegmentAnalysis()
    if not segments.is_cross_sell:
        return analysis

    if not segments.has_auto_loan and not segments.has_mortgage_loan:
        exclusion = "No existing auto or mortgage loan"
    elif (
        segments.loan_disbursement_date is not None
        and months_since(segments.loan_disbursement_date, today) > CROSS_SELL_MAX_LOAN_AGE_MONTHS
    ):
        exclusion = "Loan disbursement older than 6 months"
    elif segments.has_auto_loan and segments.vehicle_tracker_status != "ACTIVE":
        exclusion = "Vehicle tracker not active"
    elif segments.late_payments_count > CROSS_SELL_MAX_LATE_PAYMENTS:
        exclusion = "Too many late payments"
    elif segments.is_deviation_account:
        exclusion = "Deviation account not eligible"
    elif segments.is_islamic_poa:
        exclusion = "Islamic POA cases excluded"
    elif segments.has_mortgage_loan and not segments.asset_in_use:
        exclusion = "Mortgage asset not in use"
    else:
        exclusion = None

    if exclusion:
        analysis.exclusions.append(exclusion)
        return analysis

    if segments.fresh_ecib_required:
        analysis.requirements.append("Fresh eCIB report required")
    if segments.address_changed:
        analysis.requirements.append("Address re-verification required")
    analysis.eligible = True
    analysis.benefits += ["Reuse previous income documents", "Reuse previous verifications"]
    analysis.requirements += ["Positive Collections recommendation", "Fresh eCIB report", "Negative database check"]
    return analysis


def analyze_pensioner(segments: SegmentProfile) -> SegmentAnalysis:
    analysis = SegmentAnalysis()
    if not segments.is_pensioner:
        return analysis

    if segments.pension_income < PENSIONER_MIN_INCOME:
        analysis.exclusions.append(f"Pension income below minimum (PKR {PENSIONER_MIN_INCOME:,})")
    elif segments.pension_credits_count < PENSIONER_MIN_CREDITS:
        analysis.exclusions.append(
            f"Insufficient pension credits ({segments.pension_credits_count}/{PENSIONER_MIN_CREDITS})"
        )
    elif not segments.credit_shield_insurance:
        analysis.exclusions.append("Credit Shield insurance mandatory for pensioners")
    else:
        analysis.eligible = True
        analysis.benefits += ["Office verification waived", "Same thresholds as govt/armed forces"]
        analysis.requirements += [
            "Pension book/receipt/slip",
            "Bank statement with pension credits",
            "Credit Shield insurance",
        ]
    return analysis


def analyze_remittance(segments: SegmentProfile) -> SegmentAnalysis:
    analysis = SegmentAnalysis()
    if not segments.is_remittance_customer:
        return analysis

    if not segments.blood_relative_proof:
        analysis.exclusions.append("Blood relative proof required")
    elif segments.remittance_amount_12m / 12 < REMITTANCE_MIN_MONTHLY:
        analysis.exclusions.append(f"Monthly remittance below minimum (PKR {REMITTANCE_MIN_MONTHLY:,})")
    elif segments.remittance_entries_count < REMITTANCE_MIN_ENTRIES:
        analysis.exclusions.append(
            f"Insufficient remittance entries ({segments.remittance_entries_count}/{REMITTANCE_MIN_ENTRIES})"
        )
    elif not segments.relationship_proof_provided:
        analysis.exclusions.append("Relationship proof required")
    else:
        analysis.eligible = True
        analysis.benefits += ["Special income calculation", "Flexible documentation requirements"]
        analysis.requirements += ["12-month bank statement", "Relationship proof", "Authorized remitter proof"]
    return analysis


def analyze_mvc(segments: SegmentProfile) -> SegmentAnalysis:
    analysis = SegmentAnalysis()
    if not segments.is_mvc:
        return analysis

    if segments.business_duration_months < MVC_MIN_BUSINESS_MONTHS:
        analysis.exclusions.append(
            f"Business duration insufficient ({segments.business_duration_months}/{MVC_MIN_BUSINESS_MONTHS} months)"
        )
    elif segments.average_balance < MVC_MIN_AVERAGE_BALANCE:
        analysis.exclusions.append(
            f"Average balance below minimum (PKR {segments.average_balance:,.0f}/PKR {MVC_MIN_AVERAGE_BALANCE:,})"
        )
    elif segments.credits_last_6m < MVC_MIN_CREDITS_6M:
        analysis.exclusions.append(f"Insufficient credits ({segments.credits_last_6m}/{MVC_MIN_CREDITS_6M})")
    elif segments.kyc_mismatch and not segments.branch_manager_endorsement:
        analysis.exclusions.append("KYC mismatch requires Branch Manager endorsement")
    else:
        analysis.eligible = True
        analysis.benefits += ["DBR capped at 40%", "Max limit 4.5x income", "Premium customer benefits"]
        if segments.kyc_mismatch:
            analysis.requirements.append("Branch Manager endorsement for KYC mismatch")
    return analysis


def segment_benefits(application: ApplicationRecord, eligibility: Dict[str, bool]) -> dict:
    dbr_cap: Optional[float] = None
    max_limit: Optional[float] = None
    verification_waivers: List[str] = []
    documentation_waivers: List[str] = []

    if eligibility["crossSell"]:
        verification_waivers += ["Office verification", "Residence verification"]
        documentation_waivers += ["Income documents", "Employment verification"]
    if eligibility["pensioner"]:
        verification_waivers.append("Office verification")
        dbr_cap = MVC_DBR_CAP
    if eligibility["remittance"]:
        if application.is_etb:
            max_limit = REMITTANCE_MAX_LIMIT_ETB
        else:
            max_limit = min(application.net_monthly_income, REMITTANCE_MAX_LIMIT_NTB)
    if eligibility["mvc"]:
        dbr_cap = MVC_DBR_CAP
        max_limit = application.net_monthly_income * MVC_LIMIT_MULTIPLIER

    return {
        "dbrCap": dbr_cap,
        "maxLimit": max_limit,
        "verificationWaivers": list(dict.fromkeys(verification_waivers)),
        "documentationWaivers": documentation_waivers,
    }


def assess_special_segments(application: ApplicationRecord, today: date) -> ModuleResult:
    """
    Evaluate special segment eligibility and benefits.

    Applicants with no segment flag are STANDARD and the module only reports
    PROCEED. Flagged applicants are scored by segment bonuses. Exclusions on
    cross-sell, pensioner or remittance decline and an MVC exclusion is
    conditional, unless other eligible segments reach 40 points.

    Args:
        application: Normalized application
        today: Frozen evaluation date, used for loan age

    Returns:
        ModuleResult with the segment type, eligibility and benefits in details
    """
    segments = application.segments
    analyses = {
        "CROSS_SELL": analyze_cross_sell(segments, today),
        "PENSIONER": analyze_pensioner(segments),
        "REMITTANCE": analyze_remittance(segments),
        "MVC": analyze_mvc(segments),
    }
    eligibility = {
        "crossSell": analyses["CROSS_SELL"].eligible,
        "pensioner": analyses["PENSIONER"].eligible,
        "remittance": analyses["REMITTANCE"].eligible,
        "mvc": analyses["MVC"].eligible,
    }

    notes: List[str] = []
    score = 0
    segment_type = "STANDARD"
    for segment, analysis in analyses.items():
        if analysis.eligible:
            segment_type = segment
            score += SEGMENT_POINTS[segment]
            notes.append(f"{segment.replace('_', '-').title()} customer - benefits applied")

    decision = ModuleDecision.APPROVE
    reason = ""
    for segment, analysis in analyses.items():
        if analysis.exclusions:
            decision = ModuleDecision.CONDITIONAL if segment == "MVC" else ModuleDecision.DECLINE
            reason = f"{segment.replace('_', '-').title()} exclusions: {', '.join(analysis.exclusions)}"
            notes.append(reason)

    if not segments.any_segment:
        decision = ModuleDecision.PROCEED
        reason = "Standard customer - no special segment"
    elif decision == ModuleDecision.APPROVE:
        reason = "Special segment benefits applied successfully"
    elif score >= 40:
        # Another segment still qualifies with enough weight to carry the application
        decision = ModuleDecision.CONDITIONAL

    return ModuleResult(
        name=MODULE_NAME,
        score=score,
        notes=tuple(notes),
        flags=tuple(f"SEGMENT_EXCLUDED_{segment}" for segment, a in analyses.items() if a.exclusions),
        decision=decision,
        details={
            "reason": reason,
            "segmentType": segment_type,
            "eligibility": eligibility,
            "benefits": segment_benefits(application, eligibility),
            "analysis": {segment: analysis.to_dict() for segment, analysis in analyses.items()},
        },
    )
