"""
Unit Tests for compliance modules.

These tests verify:
1. System checks (eCIB, Verisys, AFD, PEP, World Check)
2. Documentation and NADRA verification
3. Verification requirements and waivers
4. The income verification matrix
5. Special segment policies
"""

from datetime import date

from src.service.scoring.documentation import assess_documentation
from src.service.scoring.income_verification import (
    assess_income_verification,
    employment_class,
    verification_threshold,
)
from src.service.scoring.models import (
    ApplicationRecord,
    DocumentationRecord,
    ModuleDecision,
    SystemChecksRecord,
)
from src.service.scoring.special_segments import assess_special_segments, months_since
from src.service.scoring.system_checks import run_system_checks
from src.service.scoring.verification import assess_verification, is_restricted_entity

TODAY = date(2024, 1, 15)


def application(**fields) -> ApplicationRecord:
    return ApplicationRecord.from_mapping(fields)


def system_checks(clean_system_checks, **overrides) -> SystemChecksRecord:
    return SystemChecksRecord.from_mapping({**clean_system_checks, **overrides})


# =============================================================================
# System Checks
# =============================================================================

class TestSystemChecks:
    """Tests for run_system_checks."""

    def test_missing_checks_are_pending(self):
        result = run_system_checks(None)

        assert result.decision == ModuleDecision.PROCEED
        assert result.score == 100
        assert result.details["overallStatus"] == "PENDING"
        assert result.details["pendingChecks"] == ["eCIB", "VERISYS", "AFD", "PEP"]
        assert result.flags == ("SYSTEM_CHECK_PENDING",)

    def test_clean(self, clean_system_checks):
        result = run_system_checks(system_checks(clean_system_checks))

        assert result.decision == ModuleDecision.PROCEED
        assert result.details["overallStatus"] == "CLEAN"
        assert result.flags == ()

    def test_recent_ecib_delinquency(self, clean_system_checks):
        result = run_system_checks(
            system_checks(clean_system_checks, ecib_data={"last_2m_delinquency": 1})
        )

        assert result.decision == ModuleDecision.DECLINE
        assert result.score == 0
        assert result.details["criticalHits"] == ["eCIB Critical Hit"]

    def test_ecib_warning_does_not_decline(self, clean_system_checks):
        result = run_system_checks(
            system_checks(clean_system_checks, ecib_data={"last_12m_delinquency": 3})
        )

        assert result.decision == ModuleDecision.PROCEED
        assert result.details["ecib"]["delinquencyStatus"] == "WARNING"
        assert result.details["warnings"] == ["eCIB WARNING: High delinquency in last 12 months"]

    def test_unsecured_exposure_over_cap(self, clean_system_checks):
        result = run_system_checks(
            system_checks(clean_system_checks, ecib_data={"unsecured_exposure": 3_500_000})
        )
        assert result.details["ecib"]["exposureStatus"] == "EXCEEDED"
        assert result.decision == ModuleDecision.DECLINE

    def test_verisys_explicit_mismatch(self, clean_system_checks):
        data = {**clean_system_checks["verisys_data"], "name_match": False}
        result = run_system_checks(system_checks(clean_system_checks, verisys_data=data))

        assert result.details["verisys"]["dataMatch"] is False
        assert result.decision == ModuleDecision.DECLINE

    def test_verisys_unreported_fields_pass(self, clean_system_checks):
        result = run_system_checks(system_checks(clean_system_checks, verisys_data={}))
        assert result.details["verisys"]["status"] == "CLEAN"

    def test_pep_hit(self, clean_system_checks):
        result = run_system_checks(
            system_checks(clean_system_checks, pep_data={"is_pep": True, "risk_level": "high"})
        )
        assert result.details["pep"]["riskLevel"] == "HIGH"
        assert result.decision == ModuleDecision.DECLINE

    def test_world_check_hit(self, clean_system_checks):
        result = run_system_checks(system_checks(clean_system_checks, world_check_result=True))
        assert "World Check Critical Hit" in result.details["criticalHits"]


# =============================================================================
# Documentation
# =============================================================================

class TestDocumentation:
    """Tests for assess_documentation."""

    complete = dict(
        cnic_valid=True,
        cnic_expiry_date=date(2030, 1, 1),
        cnic_copy_provided=True,
        cnic_copies_count=2,
        address_verification_done=True,
        signature_verification_done=True,
    )

    def test_new_applicant_fully_verified(self):
        doc = DocumentationRecord(
            **self.complete, bvs_performed=True, bvs_successful=True, verisys_approved=True
        )
        result = assess_documentation(doc, TODAY)

        assert result.score == 100
        assert result.decision == ModuleDecision.APPROVE
        assert result.details["complianceStatus"] == "COMPLIANT"

    def test_bvs_not_possible_needs_verisys(self):
        doc = DocumentationRecord(**self.complete, bvs_not_possible_reason="ELDERLY", verisys_approved=True)
        result = assess_documentation(doc, TODAY)

        assert result.score == 90
        assert result.decision == ModuleDecision.APPROVE
        assert "Verisys with authority approval" in result.details["requirements"]["mandatory"]

    def test_missing_bvs_blocks_approval(self):
        doc = DocumentationRecord(**self.complete, verisys_approved=True)
        result = assess_documentation(doc, TODAY)

        assert result.score == 70
        assert result.decision == ModuleDecision.CONDITIONAL

    def test_active_deferral_pends(self):
        doc = DocumentationRecord(
            **self.complete, bvs_deferral_date=date(2024, 1, 10), verisys_approved=True
        )
        result = assess_documentation(doc, TODAY)

        assert result.decision == ModuleDecision.PEND
        assert result.details["bvsStatus"]["daysRemaining"] == 5
        assert result.details["complianceStatus"] == "PENDING"

    def test_expired_cnic_new_applicant(self):
        doc = DocumentationRecord(**{**self.complete, "cnic_expiry_date": date(2023, 12, 1)})
        result = assess_documentation(doc, TODAY)

        assert result.details["cnicValidation"]["expiryStatus"] == "EXPIRED"
        assert result.details["cnicValidation"]["actionRequired"] == "DECLINE - Expired CNIC"
        assert result.decision == ModuleDecision.DECLINE

    def test_expired_cnic_existing_customer_is_blocked_temporarily(self):
        doc = DocumentationRecord(
            **{**self.complete, "cnic_expiry_date": date(2023, 12, 1)}, is_new_applicant=False
        )
        result = assess_documentation(doc, TODAY)
        assert result.details["cnicValidation"]["actionRequired"].startswith("TEMP_BLOCK")

    def test_expiring_soon(self):
        doc = DocumentationRecord(**{**self.complete, "cnic_expiry_date": date(2024, 2, 1)})
        result = assess_documentation(doc, TODAY)

        assert result.details["cnicValidation"]["expiryStatus"] == "EXPIRING_SOON"
        assert "CNIC renewal" in result.details["requirements"]["mandatory"]

    def test_unknown_expiry(self):
        doc = DocumentationRecord(cnic_valid=True)
        result = assess_documentation(doc, TODAY)
        assert result.details["cnicValidation"]["expiryStatus"] == "UNKNOWN"


# =============================================================================
# Verification
# =============================================================================

class TestVerification:
    """Tests for assess_verification."""

    def test_restricted_entity(self):
        assert is_restricted_entity("Karachi Port - KANUPP") is True
        assert is_restricted_entity("Acme Ltd") is False

    def test_clean_etb_waives_everything(self):
        result = assess_verification(application(
            cnic="4210112345671",
            curr_city="Karachi",
            office_city="Karachi",
            company_type="KANUPP",
            is_ubl_customer=True,
            clean_ecib_12m=True,
            never_30_dpd=True,
            address_match=True,
            salary_in_statement=True,
            limit_under_500k=True,
            utility_bill_provided=True,
            utility_bill_type="electricity",
        ))

        assert result.score == 100
        assert result.decision == ModuleDecision.APPROVE
        assert result.details["verificationLevel"] == "WAIVED"
        assert set(result.details["requirements"].values()) == {"WAIVED"}

    def test_partial_verification(self):
        result = assess_verification(application(
            office_verification_done=True,
            residence_verification_done=True,
            references_provided=2,
            positive_references=1,
        ))

        assert result.score == 75
        assert result.decision == ModuleDecision.CONDITIONAL
        assert result.details["verificationLevel"] == "PARTIAL"
        assert result.details["requirements"]["telephonic"] == "REQUIRED"

    def test_negative_reference_declines(self):
        result = assess_verification(application(
            office_verification_done=True,
            residence_verification_done=True,
            telephonic_verification_done=True,
            references_provided=2,
            positive_references=1,
            negative_references=1,
        ))
        assert result.decision == ModuleDecision.DECLINE
        assert "NEGATIVE_REFERENCE" in result.flags

    def test_nothing_done(self):
        result = assess_verification(application())

        assert result.score == 0
        assert result.decision == ModuleDecision.DECLINE
        assert result.details["verificationLevel"] == "MINIMAL"


# =============================================================================
# Income Verification
# =============================================================================

class TestIncomeVerification:
    """Tests for the income verification matrix."""

    def test_classes(self):
        assert employment_class(application(employment_type="Self-Employed")) == "C"
        assert employment_class(application(employment_status="Business")) == "C"
        assert employment_class(application(salary_transfer_flag=True)) == "A"
        assert employment_class(application(company_type="eb")) == "A"
        assert employment_class(application()) == "B"

    def test_thresholds(self):
        eb = application(company_type="EB")
        assert verification_threshold(eb, "A") == 35_000

        contractual_govt = application(employment_type="Contractual", company_type="GOVT")
        assert verification_threshold(contractual_govt, "B") == 70_000

        etb_known = application(is_ubl_customer=True, company_type="KNOWN")
        assert verification_threshold(etb_known, "B") == 45_000

        assert verification_threshold(application(employment_type="Self-Employed"), "C") == 120_000

    def test_fully_documented(self):
        result = assess_income_verification(application(
            is_ubl_customer=True,
            company_type="KNOWN",
            net_monthly_income=60000,
            office_verification_done=True,
            residence_verification_done=True,
            salary_slip_provided=True,
            bank_statement_provided=True,
            employment_certificate_provided=True,
            hr_letter_provided=True,
        ))

        assert result.score == 100
        assert result.decision == ModuleDecision.APPROVE
        assert result.details["verificationLevel"] == "FULL"
        assert result.details["documentationStatus"]["complete"] is True

    def test_missing_documents_reduce_score(self, perfect_etb_application):
        result = assess_income_verification(ApplicationRecord.from_mapping(perfect_etb_application))

        # 60 threshold + 0 statuses + (10 - 2 * 3 missing)
        assert result.score == 64
        assert result.decision == ModuleDecision.CONDITIONAL
        assert result.details["documentationStatus"]["missing"] == [
            "Salary Slip", "Employment Certificate", "HR Letter",
        ]

    def test_eb_without_salary_transfer_waives_statement(self):
        result = assess_income_verification(application(company_type="EB", net_monthly_income=40000))
        assert result.details["verificationStatus"]["bankStatement"] == "WAIVED"

    def test_below_threshold(self):
        result = assess_income_verification(application(net_monthly_income=20000))

        assert result.decision == ModuleDecision.DECLINE
        assert result.flags == ("INCOME_VERIFICATION_BELOW_THRESHOLD",)


# =============================================================================
# Special Segments
# =============================================================================

class TestSpecialSegments:
    """Tests for assess_special_segments."""

    eligible_cross_sell = dict(
        is_cross_sell=True,
        has_auto_loan=True,
        loan_disbursement_date="2023-10-01",
        vehicle_tracker_status="active",
    )
    eligible_mvc = dict(is_mvc=True, business_duration_months=12, average_balance=600000, credits_last_6m=3)

    def test_months_since(self):
        assert months_since(date(2023, 10, 1), TODAY) == 3

    def test_standard_customer(self):
        result = assess_special_segments(application(), TODAY)

        assert result.decision == ModuleDecision.PROCEED
        assert result.score == 0
        assert result.details["segmentType"] == "STANDARD"

    def test_eligible_mvc(self):
        result = assess_special_segments(application(net_monthly_income=200000, **self.eligible_mvc), TODAY)

        assert result.decision == ModuleDecision.APPROVE
        assert result.score == 25
        assert result.details["segmentType"] == "MVC"
        assert result.details["benefits"]["dbrCap"] == 40
        assert result.details["benefits"]["maxLimit"] == 900000

    def test_mvc_exclusion_is_conditional(self):
        result = assess_special_segments(application(is_mvc=True, business_duration_months=3), TODAY)

        assert result.decision == ModuleDecision.CONDITIONAL
        assert result.flags == ("SEGMENT_EXCLUDED_MVC",)

    def test_pensioner_exclusion_declines(self):
        result = assess_special_segments(application(is_pensioner=True, pension_income=30000), TODAY)
        assert result.decision == ModuleDecision.DECLINE

    def test_old_cross_sell_loan_excluded(self):
        fields = {**self.eligible_cross_sell, "loan_disbursement_date": "2023-01-01"}
        result = assess_special_segments(application(**fields), TODAY)

        assert result.details["analysis"]["CROSS_SELL"]["exclusions"] == ["Loan disbursement older than 6 months"]
        assert result.decision == ModuleDecision.DECLINE

    def test_exclusion_with_weak_other_segment_declines(self):
        result = assess_special_segments(
            application(**self.eligible_cross_sell, is_pensioner=True, pension_income=30000), TODAY
        )
        assert result.score == 20
        assert result.decision == ModuleDecision.DECLINE

    def test_exclusion_with_strong_other_segments_is_conditional(self):
        result = assess_special_segments(
            application(**self.eligible_cross_sell, **self.eligible_mvc, is_pensioner=True), TODAY
        )
        assert result.score == 45
        assert result.decision == ModuleDecision.CONDITIONAL

    def test_remittance_ntb_limit(self):
        result = assess_special_segments(
            application(
                net_monthly_income=150000,
                is_remittance_customer=True,
                blood_relative_proof=True,
                remittance_amount_12m=1_500_000,
                remittance_entries_count=12,
                relationship_proof_provided=True,
            ),
            TODAY,
        )
        assert result.decision == ModuleDecision.APPROVE
        assert result.details["benefits"]["maxLimit"] == 150000
