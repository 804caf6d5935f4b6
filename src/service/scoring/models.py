"""
Data models for card decision scoring.

These models represent the data structures used throughout the scoring
pipeline, from raw applicant/bureau/system-check payloads to the final
decision. Input records are built with ``from_mapping`` which applies the
shared normalizers once, so scoring modules never coerce types themselves.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .normalize import (
    as_bool,
    as_date,
    as_float,
    as_int,
    as_optional_float,
    as_text,
    employment_category,
    lower_text,
)


class CustomerType(str, Enum):
    """Relationship of the applicant with the bank."""
    ETB = "ETB"  # Existing-to-bank
    NTB = "NTB"  # New-to-bank


class DecisionOutcome(str, Enum):
    PASS = "PASS"
    CONDITIONAL_PASS = "CONDITIONAL PASS"
    FAIL = "FAIL"


class RiskLevel(str, Enum):
    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class CardType(str, Enum):
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


class ModuleDecision(str, Enum):
    """Module-level outcome reported by compliance and limit modules."""
    APPROVE = "APPROVE"
    CONDITIONAL = "CONDITIONAL"
    DECLINE = "DECLINE"
    PEND = "PEND"
    PROCEED = "PROCEED"
    CAP = "CAP"


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """First value among ``keys`` that is present and not blank."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _optional_bool(value: Any) -> Optional[bool]:
    """Tri-state flag: None when the upstream system did not report it."""
    if value is None:
        return None
    return as_bool(value)


# =============================================================================
# Application
# =============================================================================

@dataclass(frozen=True)
class LoanTerms:
    """
    Obligation inputs for the local DBR calculation.

    Attributes:
        monthly_installment: Explicit proposed installment, if the caller has one
        principal: Loan principal for the amortizing installment formula
        tenure_months: Loan tenure in months
        annual_rate: Nominal annual rate as a fraction (0.25 for 25%)
        zero_interest: True for interest-free plans (installment = P / n)
        existing_obligations: Sum of the applicant's current monthly installments
        credit_card_limit: Existing revolving card limit
        overdraft_annual_interest: Annual interest charged on running finance
    """
    monthly_installment: Optional[float] = None
    principal: Optional[float] = None
    tenure_months: int = 0
    annual_rate: float = 0.0
    zero_interest: bool = False
    existing_obligations: float = 0.0
    credit_card_limit: float = 0.0
    overdraft_annual_interest: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LoanTerms":
        rate = as_float(data.get("proposed_annual_rate"))
        # Rates above 1 are quoted in percent
        if rate > 1:
            rate = rate / 100
        return cls(
            monthly_installment=as_optional_float(data.get("monthly_installment")),
            principal=as_optional_float(
                _pick(data, "proposed_principal", "proposed_loan_amount", "loan_amount")
            ),
            tenure_months=as_int(data.get("proposed_tenure_months")),
            annual_rate=max(0.0, rate),
            zero_interest=as_bool(data.get("zero_interest")),
            existing_obligations=max(0.0, as_float(data.get("existing_monthly_obligations"))),
            credit_card_limit=max(0.0, as_float(data.get("credit_card_limit"))),
            overdraft_annual_interest=max(0.0, as_float(data.get("overdraft_annual_interest"))),
        )


@dataclass(frozen=True)
class DocumentationRecord:
    """Identity documents and NADRA biometric/Verisys verification state."""
    cnic_valid: bool = False
    cnic_expiry_date: Optional[date] = None
    is_new_applicant: bool = True
    bvs_performed: bool = False
    bvs_successful: bool = False
    bvs_not_possible_reason: str = ""
    bvs_deferral_date: Optional[date] = None
    verisys_performed: bool = False
    verisys_approved: bool = False
    verisys_authority: str = ""
    cnic_copy_provided: bool = False
    cnic_copies_count: int = 0
    address_verification_done: bool = False
    signature_verification_done: bool = False
    afd_clearance_required: bool = False
    afd_clearance_obtained: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], is_etb: bool) -> "DocumentationRecord":
        reason = as_text(data.get("bvs_not_possible_reason")).upper()
        new_applicant = data.get("is_new_applicant")
        return cls(
            cnic_valid=as_bool(data.get("cnic_valid")),
            cnic_expiry_date=as_date(data.get("cnic_expiry_date")),
            is_new_applicant=(not is_etb) if new_applicant is None else as_bool(new_applicant),
            bvs_performed=as_bool(data.get("bvs_performed")),
            bvs_successful=as_bool(data.get("bvs_successful")),
            bvs_not_possible_reason="" if reason == "NONE" else reason,
            bvs_deferral_date=as_date(data.get("bvs_deferral_date")),
            verisys_performed=as_bool(data.get("verisys_performed")),
            verisys_approved=as_bool(data.get("verisys_approved")),
            verisys_authority=as_text(data.get("verisys_authority")).upper(),
            cnic_copy_provided=as_bool(data.get("cnic_copy_provided")),
            cnic_copies_count=as_int(data.get("cnic_copies_count")),
            address_verification_done=as_bool(data.get("address_verification_done")),
            signature_verification_done=as_bool(data.get("signature_verification_done")),
            afd_clearance_required=as_bool(data.get("afd_clearance_required")),
            afd_clearance_obtained=as_bool(data.get("afd_clearance_obtained")),
        )


@dataclass(frozen=True)
class VerificationRecord:
    """Field verification history, eCIB cleanliness and references."""
    office_verification_done: bool = False
    residence_verification_done: bool = False
    telephonic_verification_done: bool = False
    clean_ecib_12m: bool = False
    never_30_dpd: bool = False
    address_match: bool = False
    utility_bill_provided: bool = False
    utility_bill_type: str = ""
    salary_in_statement: bool = False
    limit_under_500k: bool = False
    is_restricted_entity: bool = False
    references_provided: int = 0
    positive_references: int = 0
    negative_references: int = 0
    no_response_references: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "VerificationRecord":
        return cls(
            office_verification_done=as_bool(data.get("office_verification_done")),
            residence_verification_done=as_bool(data.get("residence_verification_done")),
            telephonic_verification_done=as_bool(data.get("telephonic_verification_done")),
            clean_ecib_12m=as_bool(_pick(data, "clean_ecib_12m", "clean_eCIB_12m")),
            never_30_dpd=as_bool(data.get("never_30_dpd")),
            address_match=as_bool(data.get("address_match")),
            utility_bill_provided=as_bool(data.get("utility_bill_provided")),
            utility_bill_type=as_text(data.get("utility_bill_type")).upper(),
            salary_in_statement=as_bool(data.get("salary_in_statement")),
            limit_under_500k=as_bool(data.get("limit_under_500k")),
            is_restricted_entity=as_bool(data.get("is_restricted_entity")),
            references_provided=as_int(data.get("references_provided")),
            positive_references=as_int(data.get("positive_references")),
            negative_references=as_int(data.get("negative_references")),
            no_response_references=as_int(data.get("no_response_references")),
        )


@dataclass(frozen=True)
class IncomeDocuments:
    """Income evidence supplied with the application."""
    salary_slip_provided: bool = False
    bank_statement_provided: bool = False
    employment_certificate_provided: bool = False
    hr_letter_provided: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "IncomeDocuments":
        return cls(
            salary_slip_provided=as_bool(data.get("salary_slip_provided")),
            bank_statement_provided=as_bool(data.get("bank_statement_provided")),
            employment_certificate_provided=as_bool(data.get("employment_certificate_provided")),
            hr_letter_provided=as_bool(data.get("hr_letter_provided")),
        )


@dataclass(frozen=True)
class SegmentProfile:
    """Special-segment flags and the evidence each segment policy needs."""
    is_pensioner: bool = False
    is_remittance_customer: bool = False
    is_cross_sell: bool = False
    is_mvc: bool = False

    # Cross-sell
    has_auto_loan: bool = False
    has_mortgage_loan: bool = False
    loan_disbursement_date: Optional[date] = None
    vehicle_tracker_status: str = "NONE"
    late_payments_count: int = 0
    fresh_ecib_required: bool = False
    address_changed: bool = False
    is_deviation_account: bool = False
    is_islamic_poa: bool = False
    asset_in_use: bool = False

    # Pensioner
    pension_income: float = 0.0
    pension_credits_count: int = 0
    credit_shield_insurance: bool = False

    # Remittance
    blood_relative_proof: bool = False
    remittance_amount_12m: float = 0.0
    remittance_entries_count: int = 0
    relationship_proof_provided: bool = False

    # MVC
    business_duration_months: int = 0
    average_balance: float = 0.0
    credits_last_6m: int = 0
    kyc_mismatch: bool = False
    branch_manager_endorsement: bool = False

    @property
    def any_segment(self) -> bool:
        return self.is_pensioner or self.is_remittance_customer or self.is_cross_sell or self.is_mvc

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SegmentProfile":
        return cls(
            is_pensioner=as_bool(data.get("is_pensioner")),
            is_remittance_customer=as_bool(data.get("is_remittance_customer")),
            is_cross_sell=as_bool(data.get("is_cross_sell")),
            is_mvc=as_bool(data.get("is_mvc")),
            has_auto_loan=as_bool(data.get("has_auto_loan")),
            has_mortgage_loan=as_bool(data.get("has_mortgage_loan")),
            loan_disbursement_date=as_date(data.get("loan_disbursement_date")),
            vehicle_tracker_status=as_text(data.get("vehicle_tracker_status")).upper() or "NONE",
            late_payments_count=as_int(data.get("late_payments_count")),
            fresh_ecib_required=as_bool(data.get("fresh_ecib_required")),
            address_changed=as_bool(data.get("address_changed")),
            is_deviation_account=as_bool(data.get("is_deviation_account")),
            is_islamic_poa=as_bool(data.get("is_islamic_poa")),
            asset_in_use=as_bool(data.get("asset_in_use")),
            pension_income=as_float(data.get("pension_income")),
            pension_credits_count=as_int(data.get("pension_credits_count")),
            credit_shield_insurance=as_bool(data.get("credit_shield_insurance")),
            blood_relative_proof=as_bool(data.get("blood_relative_proof")),
            remittance_amount_12m=as_float(data.get("remittance_amount_12m")),
            remittance_entries_count=as_int(data.get("remittance_entries_count")),
            relationship_proof_provided=as_bool(data.get("relationship_proof_provided")),
            business_duration_months=as_int(data.get("business_duration_months")),
            average_balance=as_float(data.get("average_balance")),
            credits_last_6m=as_int(data.get("credits_last_6m")),
            kyc_mismatch=as_bool(data.get("kyc_mismatch")),
            branch_manager_endorsement=as_bool(data.get("branch_manager_endorsement")),
        )


@dataclass(frozen=True)
class ApplicationRecord:
    """
    A single credit-card application.

    Attributes:
        application_id: Upstream application identifier
        full_name: Applicant's name as captured on the form
        cnic: 13-digit national identity number
        date_of_birth: Parsed date of birth (None when missing or invalid)
        employment_type: Canonical employment category (see ``employment_category``)
        employment_status: Free-text status, e.g. "Employed" or "Retired"
        occupation: Free-text occupation; "self" marks self-employed applicants
        business_nature: Industry / sector of the employer or business
        company_type: KNOWN, UNKNOWN, GOVT, ARMED_FORCES, EB or an employer name
        tenure_years: Length of employment in years
        gross_monthly_income: Gross monthly salary
        net_monthly_income: Net / disposable monthly income
        curr_city: Current residence city
        office_city: Office city
        cluster: Manually assigned regional cluster code
        amount_requested: Requested card limit
        is_etb: True for existing-to-bank customers
        salary_transfer: True when salary is credited to the bank
    """
    application_id: str = ""
    full_name: str = ""
    cnic: str = ""
    date_of_birth: Optional[date] = None
    employment_type: str = "permanent"
    employment_status: str = ""
    occupation: str = ""
    business_nature: str = ""
    company_type: str = ""
    tenure_years: float = 0.0
    gross_monthly_income: float = 0.0
    net_monthly_income: float = 0.0
    curr_city: str = ""
    office_city: str = ""
    cluster: str = ""
    amount_requested: float = 0.0
    is_etb: bool = False
    salary_transfer: bool = False

    # Screening flags
    spu_black_list_hit: bool = False
    spu_credit_card_30k_hit: bool = False
    spu_negative_list_hit: bool = False
    eamvu_submitted: bool = False

    # Scorecard attributes
    education: str = ""
    marital_status: str = ""
    residence: str = ""
    dependents: int = 0

    loan: LoanTerms = field(default_factory=LoanTerms)
    documentation: DocumentationRecord = field(default_factory=DocumentationRecord)
    verification: VerificationRecord = field(default_factory=VerificationRecord)
    income_documents: IncomeDocuments = field(default_factory=IncomeDocuments)
    segments: SegmentProfile = field(default_factory=SegmentProfile)

    @property
    def customer_type(self) -> CustomerType:
        return CustomerType.ETB if self.is_etb else CustomerType.NTB

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ApplicationRecord":
        is_etb = as_bool(_pick(data, "is_ubl_customer", "is_etb"))
        name = as_text(_pick(data, "full_name", "customerName"))
        if not name:
            name = " ".join(
                part for part in (as_text(data.get("first_name")), as_text(data.get("last_name"))) if part
            )
        return cls(
            application_id=as_text(_pick(data, "applicationId", "application_id", "id", "los_id")),
            full_name=name,
            cnic=as_text(data.get("cnic")).replace("-", ""),
            date_of_birth=as_date(data.get("date_of_birth")),
            employment_type=employment_category(data.get("employment_type")),
            employment_status=as_text(data.get("employment_status")),
            occupation=as_text(data.get("occupation")),
            business_nature=as_text(_pick(data, "business_nature", "industry")),
            company_type=as_text(data.get("company_type")),
            tenure_years=max(0.0, as_float(data.get("length_of_employment"))),
            gross_monthly_income=as_float(_pick(data, "gross_monthly_income", "grossMonthlySalary")),
            net_monthly_income=as_float(
                _pick(data, "total_income", "net_monthly_income", "netMonthlyIncome")
            ),
            curr_city=lower_text(data.get("curr_city")),
            office_city=lower_text(data.get("office_city")),
            cluster=as_text(data.get("cluster")).upper(),
            amount_requested=as_float(_pick(data, "amount_requested", "amountRequested")),
            is_etb=is_etb,
            salary_transfer=as_bool(data.get("salary_transfer_flag")),
            spu_black_list_hit=as_bool(data.get("spu_black_list_check")),
            spu_credit_card_30k_hit=as_bool(data.get("spu_credit_card_30k_check")),
            spu_negative_list_hit=as_bool(data.get("spu_negative_list_check")),
            eamvu_submitted=as_bool(_pick(data, "eavmu_submitted", "eamvu_submitted")),
            education=lower_text(data.get("education_qualification")),
            marital_status=lower_text(data.get("marital_status")),
            residence=lower_text(data.get("nature_of_residence")),
            dependents=max(0, as_int(data.get("num_dependents"))),
            loan=LoanTerms.from_mapping(data),
            documentation=DocumentationRecord.from_mapping(data, is_etb),
            verification=VerificationRecord.from_mapping(data),
            income_documents=IncomeDocuments.from_mapping(data),
            segments=SegmentProfile.from_mapping(data),
        )


# =============================================================================
# Bureau (CBS) data
# =============================================================================

@dataclass(frozen=True)
class UpstreamDBR:
    """DBR computed by the upstream data engine."""
    percentage: float
    status: str = ""
    threshold: Optional[float] = None
    net_income: float = 0.0
    total_obligations: float = 0.0


@dataclass(frozen=True)
class BureauRecord:
    """
    Behavioral history from the core banking system / credit bureau.

    Counts default to 0 and balances to 0.0 when the bureau omits them.
    """
    bad_counts_industry: int = 0
    bad_counts_bank: int = 0
    dpd_30_plus: int = 0
    dpd_60_plus: int = 0
    defaults_12m: int = 0
    late_payments: int = 0
    partial_payments: int = 0
    average_deposit_balance: float = 0.0
    credit_utilization_ratio: float = 0.0
    highest_dpd: int = 0
    exposure_in_industry: float = 0.0
    upstream_dbr: Optional[UpstreamDBR] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "BureauRecord":
        if not data:
            return cls()
        dbr_block = _section(data, "dbrData") or data
        upstream = None
        percentage = as_optional_float(dbr_block.get("dbr"))
        if percentage is not None:
            details = _section(dbr_block, "dbr_details")
            upstream = UpstreamDBR(
                percentage=percentage,
                status=lower_text(dbr_block.get("status")),
                threshold=as_optional_float(dbr_block.get("threshold")),
                net_income=as_float(details.get("net_income")),
                total_obligations=as_float(details.get("total_obligations")),
            )
        return cls(
            bad_counts_industry=as_int(data.get("bad_counts_industry")),
            bad_counts_bank=as_int(_pick(data, "bad_counts_ubl", "bad_counts_bank")),
            dpd_30_plus=as_int(data.get("dpd_30_plus")),
            dpd_60_plus=as_int(data.get("dpd_60_plus")),
            defaults_12m=as_int(data.get("defaults_12m")),
            late_payments=as_int(data.get("late_payments")),
            partial_payments=as_int(data.get("partial_payments")),
            average_deposit_balance=as_float(data.get("average_deposit_balance")),
            credit_utilization_ratio=as_float(data.get("credit_utilization_ratio")),
            highest_dpd=as_int(data.get("highest_dpd")),
            exposure_in_industry=as_float(data.get("exposure_in_industry")),
            upstream_dbr=upstream,
        )


# =============================================================================
# System checks
# =============================================================================

@dataclass(frozen=True)
class EcibData:
    last_12m_delinquency: int = 0
    last_6m_delinquency: int = 0
    last_2m_delinquency: int = 0
    dpd_30_count: int = 0
    dpd_60_count: int = 0
    dpd_90_count: int = 0
    total_exposure: float = 0.0
    unsecured_exposure: float = 0.0


@dataclass(frozen=True)
class VerisysData:
    """Verisys match flags; None means the field was not reported."""
    cnic_valid: Optional[bool] = None
    name_match: Optional[bool] = None
    dob_match: Optional[bool] = None
    address_match: Optional[bool] = None
    biometric_verified: Optional[bool] = None


@dataclass(frozen=True)
class SystemChecksRecord:
    """Outcomes of the external screening systems."""
    ecib_individual_check: bool = False
    ecib_corporate_check: bool = False
    verisys_cnic_check: bool = False
    afd_delinquency_check: bool = False
    afd_compliance_check: bool = False
    pep_check: bool = False
    world_check_hit: bool = False
    ecib: EcibData = field(default_factory=EcibData)
    verisys: VerisysData = field(default_factory=VerisysData)
    afd_cross_product_delinquency: bool = False
    afd_negative_database_hit: bool = False
    afd_compliance_issues: bool = False
    is_pep: bool = False
    pep_category: str = ""
    pep_risk_level: str = ""

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SystemChecksRecord":
        if not data:
            return cls()
        ecib = _section(data, "ecib_data")
        verisys = _section(data, "verisys_data")
        afd = _section(data, "afd_data")
        pep = _section(data, "pep_data")
        return cls(
            ecib_individual_check=as_bool(data.get("ecib_individual_check")),
            ecib_corporate_check=as_bool(data.get("ecib_corporate_check")),
            verisys_cnic_check=as_bool(data.get("verisys_cnic_check")),
            afd_delinquency_check=as_bool(data.get("afd_delinquency_check")),
            afd_compliance_check=as_bool(data.get("afd_compliance_check")),
            pep_check=as_bool(data.get("pep_check")),
            world_check_hit=as_bool(data.get("world_check_result")),
            ecib=EcibData(
                last_12m_delinquency=as_int(ecib.get("last_12m_delinquency")),
                last_6m_delinquency=as_int(ecib.get("last_6m_delinquency")),
                last_2m_delinquency=as_int(ecib.get("last_2m_delinquency")),
                dpd_30_count=as_int(ecib.get("dpd_30_count")),
                dpd_60_count=as_int(ecib.get("dpd_60_count")),
                dpd_90_count=as_int(ecib.get("dpd_90_count")),
                total_exposure=as_float(ecib.get("total_exposure")),
                unsecured_exposure=as_float(ecib.get("unsecured_exposure")),
            ),
            verisys=VerisysData(
                cnic_valid=_optional_bool(verisys.get("cnic_valid")),
                name_match=_optional_bool(verisys.get("name_match")),
                dob_match=_optional_bool(verisys.get("dob_match")),
                address_match=_optional_bool(verisys.get("address_match")),
                biometric_verified=_optional_bool(verisys.get("biometric_verified")),
            ),
            afd_cross_product_delinquency=as_bool(afd.get("cross_product_delinquency")),
            afd_negative_database_hit=as_bool(afd.get("negative_database_hit")),
            afd_compliance_issues=as_bool(afd.get("compliance_issues")),
            is_pep=as_bool(pep.get("is_pep")),
            pep_category=as_text(pep.get("pep_category")).upper(),
            pep_risk_level=as_text(pep.get("risk_level")).upper(),
        )


@dataclass(frozen=True)
class CreditLimitContext:
    """Current exposure of the applicant across the banking system."""
    total_exposure: float = 0.0
    unsecured_exposure: float = 0.0
    credit_card_exposure: float = 0.0
    personal_loan_exposure: float = 0.0
    income_verified: bool = False
    bank_statement_verified: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "CreditLimitContext":
        if not data:
            return cls()
        return cls(
            total_exposure=max(0.0, as_float(data.get("total_exposure"))),
            unsecured_exposure=max(0.0, as_float(data.get("unsecured_exposure"))),
            credit_card_exposure=max(0.0, as_float(data.get("credit_card_exposure"))),
            personal_loan_exposure=max(0.0, as_float(data.get("personal_loan_exposure"))),
            income_verified=as_bool(data.get("income_verified")),
            bank_statement_verified=as_bool(data.get("bank_statement_verified")),
        )


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class ModuleResult:
    """
    Outcome of one scoring or compliance module.

    Attributes:
        name: Module key used in ``moduleScores``
        score: 0-100; values outside the range are clamped on construction
        notes: Human-readable explanation lines
        flags: Machine-readable markers such as ``DBR_FAIL`` or ``NO_DBR_DATA``
        details: Module-specific structured payload
        hard_stop: True when this result alone must fail the application
        decision: Module-level decision for compliance and limit modules
    """
    name: str
    score: float
    notes: Tuple[str, ...] = ()
    flags: Tuple[str, ...] = ()
    details: Dict[str, Any] = field(default_factory=dict)
    hard_stop: bool = False
    decision: Optional[ModuleDecision] = None

    def __post_init__(self) -> None:
        score = self.score
        if score is None or score != score:
            score = 0.0
        object.__setattr__(self, "score", round(min(100.0, max(0.0, float(score))), 2))
        object.__setattr__(self, "notes", tuple(self.notes))
        object.__setattr__(self, "flags", tuple(self.flags))

    def to_dict(self) -> dict:
        payload = {
            "score": self.score,
            "notes": list(self.notes),
            "flags": list(self.flags),
            "details": self.details,
        }
        if self.decision is not None:
            payload["decision"] = self.decision.value
        if self.hard_stop:
            payload["hardStop"] = True
        return payload


@dataclass(frozen=True)
class DecisionResult:
    """
    The final decision for a card application.

    ``assigned_credit_limit`` and ``card_type`` are only set when the
    decision is not FAIL.
    """
    final_score: int
    decision: DecisionOutcome
    risk_level: RiskLevel
    action_required: str
    module_results: Dict[str, ModuleResult]
    customer_type: CustomerType
    evaluated_at: datetime
    application_id: str = ""
    customer_name: str = ""
    cnic: str = ""
    dbr_percentage: float = 0.0
    assigned_credit_limit: Optional[int] = None
    card_type: Optional[CardType] = None
    hard_stop_rule: Optional[str] = None

    @property
    def is_hard_stop(self) -> bool:
        return self.hard_stop_rule is not None

    def to_dict(self) -> dict:
        """Convert to API response format."""
        payload = {
            "applicationId": self.application_id,
            "customerName": self.customer_name or "Unknown",
            "cnic": self.cnic,
            "finalScore": self.final_score,
            "decision": self.decision.value,
            "riskLevel": self.risk_level.value,
            "actionRequired": self.action_required,
            "customerType": self.customer_type.value,
            "dbrPercentage": round(self.dbr_percentage, 2),
            "hardStopRule": self.hard_stop_rule,
            "evaluatedAt": self.evaluated_at.isoformat(),
            "moduleScores": {
                name: result.to_dict() for name, result in self.module_results.items()
            },
        }
        if self.assigned_credit_limit is not None:
            payload["assignedCreditLimit"] = self.assigned_credit_limit
        if self.card_type is not None:
            payload["cardType"] = self.card_type.value
        return payload
