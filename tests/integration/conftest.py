"""
Fixtures for integration tests.

Provides:
- Test client for the FastAPI app with a frozen evaluation clock
- Request bodies for the main decision scenarios
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from src.application.services import DecisionService
from src.core.dependencies import get_decision_service
from src.main import app

EVALUATION_TIME = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with a pinned decision clock.

    Ages and loan ages are computed against EVALUATION_TIME so expected
    scores do not drift with the calendar.
    """
    def override_get_decision_service() -> DecisionService:
        return DecisionService(clock=lambda: EVALUATION_TIME)

    app.dependency_overrides[get_decision_service] = override_get_decision_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def strict_client() -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose service rejects incomplete applications."""
    def override_get_decision_service() -> DecisionService:
        return DecisionService(strict_validation=True, clock=lambda: EVALUATION_TIME)

    app.dependency_overrides[get_decision_service] = override_get_decision_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def perfect_application() -> dict:
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
def perfect_request(perfect_application) -> dict:
    """Request body for the clean existing customer."""
    return {
        "application": perfect_application,
        "bureauData": {
            "average_deposit_balance": 500000,
            "credit_utilization_ratio": 0.2,
        },
        "systemChecks": {
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
        },
    }


@pytest.fixture
def annexure_request(perfect_application) -> dict:
    """Request body for an applicant living in an Annexure A area."""
    return {"application": {**perfect_application, "curr_city": "Quetta"}}


@pytest.fixture
def high_dbr_request(perfect_application) -> dict:
    """Request body whose existing installments push DBR past 60%."""
    return {"application": {**perfect_application, "existing_monthly_obligations": 80000}}


@pytest.fixture
def incomplete_request() -> dict:
    """Request body missing most required fields."""
    return {"application": {"applicationId": "APP-2002", "curr_city": "Lahore"}}
