"""
Unit Tests for credit limit assignment.

These tests verify:
1. Income multiples by bracket, employment type and segment
2. The minimum of income, DBR and regulatory limits wins
3. Card tier selection, the PLATINUM eligibility cap and declines
"""

import pytest

from src.service.scoring.credit_limit import (
    assign_credit_limit,
    card_tier_for,
    dbr_based_limit,
    income_multiple,
)
from src.service.scoring.models import ApplicationRecord, CreditLimitContext, ModuleDecision


def application(**fields) -> ApplicationRecord:
    return ApplicationRecord.from_mapping(fields)


# =============================================================================
# Income Multiple
# =============================================================================

class TestIncomeMultiple:
    """Tests for income_multiple."""

    @pytest.mark.parametrize(
        "net, is_etb, expected",
        [
            (15000, True, 2.5),
            (15000, False, 2.0),
            (50000, True, 3.5),
            (120000, False, 3.25),
            (150000, True, 5.0),
        ],
    )
    def test_brackets(self, net, is_etb, expected):
        record = application(net_monthly_income=net, is_ubl_customer=is_etb)
        assert income_multiple(record) == pytest.approx(expected)

    def test_salary_transfer_uplift(self):
        record = application(net_monthly_income=120000, is_ubl_customer=True, salary_transfer_flag=True)
        assert income_multiple(record) == pytest.approx(4.4)

    def test_contractual_discount(self):
        record = application(net_monthly_income=60000, employment_type="Contractual")
        assert income_multiple(record) == pytest.approx(2.475)

    def test_self_employed_flat(self):
        record = application(net_monthly_income=500000, employment_type="Self-Employed", is_ubl_customer=True)
        assert income_multiple(record) == pytest.approx(2.75)

    def test_pensioner_override(self):
        record = application(net_monthly_income=60000, is_pensioner=True, salary_transfer_flag=True)
        assert income_multiple(record) == pytest.approx(2.0)

    def test_mvc_capped(self):
        record = application(net_monthly_income=200000, is_ubl_customer=True, is_mvc=True)
        assert income_multiple(record) == pytest.approx(4.5)


# =============================================================================
# Tiers
# =============================================================================

class TestCardTier:
    """Tests for card_tier_for."""

    @pytest.mark.parametrize(
        "limit, expected",
        [(0, None), (24999, "SILVER"), (25000, "SILVER"), (125000, "SILVER"), (125001, "GOLD"), (300000, "PLATINUM")],
    )
    def test_boundaries(self, limit, expected):
        tier = card_tier_for(limit)
        assert (tier[0] if tier else None) == expected


# =============================================================================
# Assignment
# =============================================================================

class TestAssignCreditLimit:
    """Tests for assign_credit_limit."""

    def test_dbr_based_limit(self):
        assert dbr_based_limit(120000) == 1_440_000

    def test_ntb_platinum(self):
        result = assign_credit_limit(application(net_monthly_income=120000), 0.0)

        assert result.decision == ModuleDecision.APPROVE
        assert result.details["assignedLimit"] == 390000
        assert result.details["cardType"] == "PLATINUM"
        assert result.score == 100

    def test_etb_without_segment_capped_to_gold(self):
        record = application(net_monthly_income=120000, is_ubl_customer=True, salary_transfer_flag=True)
        result = assign_credit_limit(record, 0.0)

        assert result.details["calculatedLimit"] == 528000
        assert result.details["assignedLimit"] == 299999
        assert result.details["cardType"] == "GOLD"
        assert result.decision == ModuleDecision.CAP
        assert result.score == 50
        assert "CARD_TYPE_CAP" in result.flags
        assert result.details["regulatoryCompliance"]["cardTypeEligible"] is False

    def test_etb_mvc_keeps_platinum(self):
        record = application(net_monthly_income=200000, is_ubl_customer=True, is_mvc=True)
        result = assign_credit_limit(record, 0.0)

        assert result.details["assignedLimit"] == 900000
        assert result.details["cardType"] == "PLATINUM"
        assert result.decision == ModuleDecision.APPROVE

    def test_gold_score_scales_within_tier(self):
        result = assign_credit_limit(application(net_monthly_income=60000), 0.0)

        assert result.details["assignedLimit"] == 165000
        assert result.details["cardType"] == "GOLD"
        assert result.score == 85

    def test_regulatory_headroom_binds(self):
        context = CreditLimitContext(unsecured_exposure=2_900_000)
        result = assign_credit_limit(application(net_monthly_income=120000), 0.0, context)

        assert result.details["regulatoryCap"] == 100000
        assert result.details["assignedLimit"] == 100000
        assert result.details["cardType"] == "SILVER"

    def test_below_minimum_gets_lowest_tier(self):
        result = assign_credit_limit(application(net_monthly_income=8000), 0.0)

        # 8000 x 2.0 for a new customer
        assert result.details["assignedLimit"] == 16000
        assert result.details["cardType"] == "SILVER"
        assert result.decision == ModuleDecision.APPROVE
        assert result.score == 60
        assert "LIMIT_BELOW_MINIMUM" in result.flags

    def test_exhausted_exposure_declines(self):
        context = CreditLimitContext(total_exposure=7_000_000)
        result = assign_credit_limit(application(net_monthly_income=120000), 0.0, context)

        assert result.decision == ModuleDecision.DECLINE
        assert result.details["assignedLimit"] == 0
        assert result.details["cardType"] is None
        assert result.score == 0
        assert "NO_LIMIT_AVAILABLE" in result.flags

    def test_requested_amount_does_not_cap(self):
        result = assign_credit_limit(application(net_monthly_income=60000, amount_requested=50000), 0.0)
        assert result.details["assignedLimit"] == 165000
