"""
Shared fixtures for scoring unit tests.

Every scenario is evaluated against a frozen clock so ages and loan ages
are deterministic.
"""

from datetime import datetime, timezone

import pytest


EVALUATION_TIME = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def evaluation_time() -> datetime:
    return EVALUATION_TIME


@pytest.fixture
def perfect_etb_application() -> dict:
    """Salaried existing customer in Karachi (FEDERAL cluster) with a clean profile."""
    return {
        "applicationId": "APP-1001",
        "full_name": "Ayesha Khan",
        "cnic": "42101-1234567-1",
        "date_of_birth": "1985-06-15",
        "gross_monthly_income": 150000,
        "net_monthly_income": 120000,
        "curr_city": "Karachi",
        "office_city": "Karachi",
        "cluster": "FEDERAL",
        "employment_status": "Employed",
        "employment_type": "permanent",
        "length_of_employment": 8,
        "education_qualification": "Masters",
        "marital_status": "Married",
        "is_ubl_customer": True,
        "salary_transfer_flag": True,
        "eamvu_submitted": True,
        "amount_requested": 200000,
    }


@pytest.fixture
def clean_bureau() -> dict:
    return {
        "average_deposit_balance": 500000,
        "bad_counts_industry": 0,
        "bad_counts_ubl": 0,
        "dpd_30_plus": 0,
        "dpd_60_plus": 0,
        "defaults_12m": 0,
        "late_payments": 0,
        "partial_payments": 0,
        "credit_utilization_ratio": 0.2,
    }


@pytest.fixture
def clean_system_checks() -> dict:
    return {
        "ecib_individual_check": True,
        "ecib_corporate_check": True,
        "verisys_cnic_check": True,
        "afd_delinquency_check": True,
        "afd_compliance_check": True,
        "pep_check": True,
        "world_check_result": False,
        "verisys_data": {
            "cnic_valid": True,
            "name_match": True,
            "dob_match": True,
            "address_match": True,
            "biometric_verified": True,
        },
    }
