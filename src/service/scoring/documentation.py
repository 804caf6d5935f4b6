"""
Documentation and identity compliance.

Points are awarded for a valid CNIC (25), NADRA biometric verification
(30 when successful, 20 when documented as not possible), Verisys approval
(25) and complete supporting documents (20). An active BVS deferral pends
the application until the biometric result arrives.
"""

from datetime import date
from typing import List, Optional

from .models import DocumentationRecord, ModuleDecision, ModuleResult
from .settings import ScoringSettings, scoring_settings

MODULE_NAME = "documentation"


def cnic_status(doc: DocumentationRecord, today: date, settings: ScoringSettings = scoring_settings) -> dict:
    days_to_expiry: Optional[int] = None
    expiry_status = "UNKNOWN"
    action = ""
    if doc.cnic_expiry_date is not None:
        days_to_expiry = (doc.cnic_expiry_date - today).days
        if days_to_expiry < 0:
            expiry_status = "EXPIRED"
            action = (
                "DECLINE - Expired CNIC"
                if doc.is_new_applicant
                else "TEMP_BLOCK - Update CNIC within 30 days"
            )
        elif days_to_expiry <= settings.cnic_expiry_warning_days:
            expiry_status = "EXPIRING_SOON"
            action = "Send expiry notice to customer"
        else:
            expiry_status = "VALID"

    return {
        "valid": doc.cnic_valid and expiry_status != "EXPIRED",
        "expiryStatus": expiry_status,
        "daysToExpiry": days_to_expiry,
        "actionRequired": action,
    }


def bvs_status(doc: DocumentationRecord, today: date, settings: ScoringSettings = scoring_settings) -> dict:
    deferral = "NONE"
    days_remaining = 0
    if doc.bvs_deferral_date is not None:
        elapsed = (today - doc.bvs_deferral_date).days
        if elapsed <= settings.bvs_deferral_max_days:
            deferral = "ACTIVE"
            days_remaining = settings.bvs_deferral_max_days - elapsed
        else:
            deferral = "EXPIRED"

    return {
        "required": doc.is_new_applicant,
        "performed": doc.bvs_performed,
        "successful": doc.bvs_successful,
        "notPossibleReason": doc.bvs_not_possible_reason,
        "deferralStatus": deferral,
        "daysRemaining": days_remaining,
    }


def documentation_requirements(doc: DocumentationRecord, cnic: dict, bvs: dict, verisys_required: bool) -> dict:
    mandatory: List[str] = ["Valid CNIC", "2 CNIC copies"]
    waived: List[str] = []

    if cnic["expiryStatus"] in ("EXPIRED", "EXPIRING_SOON"):
        mandatory.append("CNIC renewal")

    if bvs["required"]:
        if bvs["successful"]:
            mandatory.append("BVS successful")
        elif bvs["notPossibleReason"]:
            mandatory.append("Verisys with authority approval")
            waived.append("BVS (not possible)")
        else:
            mandatory.append("BVS required")
    else:
        waived.append("BVS (not required)")

    if verisys_required:
        mandatory.append("Verisys approval")
    else:
        waived.append("Verisys (not required)")

    mandatory.extend(["Address verification", "Signature verification"])
    if doc.afd_clearance_required:
        mandatory.append("AFD clearance")

    return {"mandatory": mandatory, "recommended": [], "waived": waived}


def assess_documentation(
    doc: DocumentationRecord,
    today: date,
    settings: ScoringSettings = scoring_settings,
) -> ModuleResult:
    """
    Assess identity documents and NADRA verification.

    Args:
        doc: Documentation record from the application
        today: Frozen evaluation date
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ModuleResult with decision APPROVE (>= 80), CONDITIONAL (>= 60),
        DECLINE, or PEND while a BVS deferral is active
    """
    notes: List[str] = []
    score = 0
    blocked = False

    cnic = cnic_status(doc, today, settings)
    if cnic["valid"]:
        score += 25
        notes.append("CNIC validation passed")
    else:
        blocked = True
        notes.append("CNIC validation failed")
    if cnic["expiryStatus"] == "EXPIRING_SOON":
        notes.append(f"CNIC expires in {cnic['daysToExpiry']} days")

    bvs = bvs_status(doc, today, settings)
    if bvs["deferralStatus"] == "ACTIVE":
        notes.append(f"BVS deferral active ({bvs['daysRemaining']} days remaining)")
    elif bvs["required"] and not bvs["successful"] and not bvs["notPossibleReason"]:
        blocked = True
        notes.append("BVS required but not performed or failed")
    elif bvs["successful"]:
        score += 30
        notes.append("BVS successful")
    elif bvs["notPossibleReason"]:
        score += 20
        notes.append(f"BVS not possible: {bvs['notPossibleReason']}")

    verisys_required = bool(bvs["required"] and not bvs["successful"] and bvs["notPossibleReason"])
    if verisys_required and not doc.verisys_approved:
        blocked = True
        notes.append("Verisys required but not approved")
    elif doc.verisys_approved:
        score += 25
        notes.append("Verisys approved")

    cnic_copies = doc.cnic_copy_provided and doc.cnic_copies_count >= 2
    complete = cnic_copies and doc.address_verification_done and doc.signature_verification_done
    if complete:
        score += 20
        notes.append("Documentation complete")
    else:
        blocked = True
        notes.append("Incomplete documentation")

    compliance = {
        "cnicCompliance": cnic["valid"],
        "bvsCompliance": (
            not bvs["required"] or bvs["successful"] or bool(bvs["notPossibleReason"]) or doc.verisys_approved
        ),
        "verisysCompliance": not verisys_required or doc.verisys_approved,
        "afdCompliance": not doc.afd_clearance_required or doc.afd_clearance_obtained,
    }
    if not (compliance["cnicCompliance"] and compliance["bvsCompliance"] and compliance["verisysCompliance"]):
        compliance_status = "NON_COMPLIANT"
    elif bvs["deferralStatus"] == "ACTIVE":
        compliance_status = "PENDING"
    else:
        compliance_status = "COMPLIANT"

    if bvs["deferralStatus"] == "ACTIVE":
        decision = ModuleDecision.PEND
        reason = "BVS deferral active - waiting for biometric verification"
    elif not blocked and score >= 80:
        decision = ModuleDecision.APPROVE
        reason = "All documentation and compliance requirements met"
    elif score >= 60:
        decision = ModuleDecision.CONDITIONAL
        reason = "Partial compliance - additional documentation required"
    else:
        decision = ModuleDecision.DECLINE
        reason = "Insufficient documentation or compliance failures"

    return ModuleResult(
        name=MODULE_NAME,
        score=score,
        notes=tuple(notes),
        flags=(f"DOCUMENTATION_{compliance_status}",),
        decision=decision,
        details={
            "reason": reason,
            "complianceStatus": compliance_status,
            "requirements": documentation_requirements(doc, cnic, bvs, verisys_required),
            "cnicValidation": cnic,
            "bvsStatus": bvs,
            "verisysStatus": {
                "required": verisys_required,
                "performed": doc.verisys_performed,
                "approved": doc.verisys_approved,
                "authority": doc.verisys_authority,
            },
            "documentationStatus": {
                "cnicCopies": cnic_copies,
                "addressVerification": doc.address_verification_done,
                "signatureVerification": doc.signature_verification_done,
                "complete": complete,
            },
            "compliance": compliance,
        },
    )
