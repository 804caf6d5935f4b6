"""
Mandatory system checks: eCIB, Verisys, AFD, PEP and World Check.

Any critical hit declines the application. Checks that were not run are
reported as PENDING and do not block on their own.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import ModuleDecision, ModuleResult, SystemChecksRecord
from .settings import ScoringSettings, scoring_settings

MODULE_NAME = "systemChecks"

CLEAN = "CLEAN"
HIT = "HIT"
PENDING = "PENDING"
WARNING = "WARNING"


@dataclass
class CheckOutcome:
    status: str
    notes: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"status": self.status, **self.details}


def check_ecib(checks: SystemChecksRecord, settings: ScoringSettings = scoring_settings) -> CheckOutcome:
    """
    eCIB delinquency and exposure rules.

    HIT on any delinquency in the last 2 months or any 90+ DPD, more than one
    delinquency in 6 months or more than one 60+ DPD, or exposure above the
    regulatory caps. More than two delinquencies in 12 months or more than two
    30+ DPD is a warning.
    """
    if not checks.ecib_individual_check and not checks.ecib_corporate_check:
        return CheckOutcome(
            PENDING,
            notes=["eCIB checks not performed - PENDING"],
            details={
                "individualCheck": False,
                "corporateCheck": False,
                "delinquencyStatus": CLEAN,
                "exposureStatus": "WITHIN_LIMITS",
            },
        )

    ecib = checks.ecib
    notes: List[str] = []
    warnings: List[str] = []

    delinquency = CLEAN
    if ecib.last_2m_delinquency > 0 or ecib.dpd_90_count > 0:
        delinquency = HIT
        notes.append("eCIB HIT: Delinquency in last 2 months or 90+ DPD")
    elif ecib.last_6m_delinquency > 1 or ecib.dpd_60_count > 1:
        delinquency = HIT
        notes.append("eCIB HIT: More than 1 delinquency in last 6 months or 60+ DPD")
    elif ecib.last_12m_delinquency > 2 or ecib.dpd_30_count > 2:
        delinquency = WARNING
        warnings.append("eCIB WARNING: High delinquency in last 12 months")

    exposure = "WITHIN_LIMITS"
    if ecib.unsecured_exposure > settings.unsecured_exposure_cap:
        exposure = "EXCEEDED"
        notes.append(f"eCIB HIT: Unsecured exposure exceeds PKR {settings.unsecured_exposure_cap:,} limit")
    elif ecib.total_exposure > settings.total_exposure_cap:
        exposure = "EXCEEDED"
        notes.append(f"eCIB HIT: Total exposure exceeds PKR {settings.total_exposure_cap:,} limit")

    notes.append(f"Delinquency Status: {delinquency}")
    notes.append(f"Exposure Status: {exposure}")

    return CheckOutcome(
        HIT if delinquency == HIT or exposure == "EXCEEDED" else CLEAN,
        notes=notes,
        warnings=warnings,
        details={
            "individualCheck": checks.ecib_individual_check,
            "corporateCheck": checks.ecib_corporate_check,
            "delinquencyStatus": delinquency,
            "exposureStatus": exposure,
        },
    )


def check_verisys(checks: SystemChecksRecord) -> CheckOutcome:
    """Only an explicit False from Verisys counts as a mismatch."""
    if not checks.verisys_cnic_check:
        return CheckOutcome(
            PENDING,
            notes=["VERISYS check not performed - PENDING"],
            details={"cnicValid": False, "biometricVerified": False, "dataMatch": False},
        )

    data = checks.verisys
    cnic_valid = data.cnic_valid is not False
    biometric = data.biometric_verified is not False
    data_match = all(flag is not False for flag in (data.name_match, data.dob_match, data.address_match))

    notes = []
    if not cnic_valid:
        notes.append("VERISYS HIT: Invalid CNIC")
    if not biometric:
        notes.append("VERISYS HIT: Biometric verification failed")
    if not data_match:
        notes.append("VERISYS HIT: Data mismatch detected")

    return CheckOutcome(
        CLEAN if cnic_valid and biometric and data_match else HIT,
        notes=notes,
        details={"cnicValid": cnic_valid, "biometricVerified": biometric, "dataMatch": data_match},
    )


def check_afd(checks: SystemChecksRecord) -> CheckOutcome:
    if not checks.afd_delinquency_check and not checks.afd_compliance_check:
        return CheckOutcome(
            PENDING,
            notes=["AFD checks not performed - PENDING"],
            details={"delinquencyCheck": False, "complianceCheck": False, "negativeDatabaseHit": False},
        )

    notes = []
    if checks.afd_cross_product_delinquency:
        notes.append("AFD HIT: Cross-product delinquency detected")
    if checks.afd_negative_database_hit:
        notes.append("AFD HIT: Negative database hit")
    if checks.afd_compliance_issues:
        notes.append("AFD HIT: Compliance issues detected")

    return CheckOutcome(
        HIT if notes else CLEAN,
        notes=notes,
        details={
            "delinquencyCheck": checks.afd_delinquency_check,
            "complianceCheck": checks.afd_compliance_check,
            "negativeDatabaseHit": checks.afd_negative_database_hit,
        },
    )


def check_pep(checks: SystemChecksRecord) -> CheckOutcome:
    if not checks.pep_check:
        return CheckOutcome(
            PENDING,
            notes=["PEP check not performed - PENDING"],
            details={"isPep": False, "riskLevel": "UNKNOWN"},
        )

    risk = checks.pep_risk_level or "UNKNOWN"
    notes = [f"PEP HIT: Politically Exposed Person - {risk} risk"] if checks.is_pep else []
    return CheckOutcome(
        HIT if checks.is_pep else CLEAN,
        notes=notes,
        details={"isPep": checks.is_pep, "category": checks.pep_category or None, "riskLevel": risk},
    )


def check_world(checks: SystemChecksRecord) -> CheckOutcome:
    hit = checks.world_check_hit
    return CheckOutcome(
        HIT if hit else CLEAN,
        notes=["World Check HIT: Sanctions/negative screening hit"] if hit else [],
        details={"result": hit},
    )


def run_system_checks(
    checks: Optional[SystemChecksRecord],
    settings: ScoringSettings = scoring_settings,
) -> ModuleResult:
    """
    Run every system check and combine them.

    Args:
        checks: System check outcomes; all checks are PENDING when omitted
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ModuleResult with decision DECLINE and score 0 on any critical hit,
        otherwise PROCEED and score 100
    """
    checks = checks or SystemChecksRecord()
    outcomes = {
        "ecib": ("eCIB", check_ecib(checks, settings)),
        "verisys": ("VERISYS", check_verisys(checks)),
        "afd": ("AFD", check_afd(checks)),
        "pep": ("PEP", check_pep(checks)),
        "worldCheck": ("World Check", check_world(checks)),
    }

    critical_hits = [f"{label} Critical Hit" for label, outcome in outcomes.values() if outcome.status == HIT]
    pending = [label for label, outcome in outcomes.values() if outcome.status == PENDING]
    warnings = [warning for _, outcome in outcomes.values() for warning in outcome.warnings]
    notes = [note for _, outcome in outcomes.values() for note in outcome.notes]

    if critical_hits:
        overall = HIT
    elif pending:
        overall = PENDING
    else:
        overall = CLEAN
    declined = bool(critical_hits)

    flags = ["SYSTEM_CHECK_HIT"] if declined else []
    if pending:
        flags.append("SYSTEM_CHECK_PENDING")

    return ModuleResult(
        name=MODULE_NAME,
        score=0 if declined else 100,
        notes=tuple(notes + warnings),
        flags=tuple(flags),
        decision=ModuleDecision.DECLINE if declined else ModuleDecision.PROCEED,
        details={
            "overallStatus": overall,
            "criticalHits": critical_hits,
            "pendingChecks": pending,
            "warnings": warnings,
            **{key: outcome.to_dict() for key, (_, outcome) in outcomes.items()},
        },
    )
