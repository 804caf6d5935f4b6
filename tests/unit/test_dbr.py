"""
Unit Tests for DBR scoring.

These tests verify:
1. Step scores at the band edges
2. The local calculation from application obligations
3. Pass-through of an upstream DBR and its hard-stop conditions
"""

import pytest

from src.service.scoring.dbr import (
    amortized_installment,
    dbr_band_score,
    dbr_percentage,
    proposed_installment,
    score_dbr,
)
from src.service.scoring.decision import evaluate
from src.service.scoring.models import ApplicationRecord, BureauRecord, LoanTerms


def application(**fields) -> ApplicationRecord:
    return ApplicationRecord.from_mapping({"net_monthly_income": 100000, **fields})


# =============================================================================
# Banding
# =============================================================================

class TestDbrBandScore:
    """Tests for dbr_band_score."""

    @pytest.mark.parametrize(
        "percentage, expected",
        [(0, 100), (10, 100), (10.01, 75), (20, 75), (30, 50), (40, 25), (40.5, 0), (95, 0)],
    )
    def test_band_edges(self, percentage, expected):
        assert dbr_band_score(percentage) == expected


# =============================================================================
# Proposed Installment
# =============================================================================

class TestProposedInstallment:
    """Tests for the proposed EMI derivation."""

    def test_card_only_request_has_no_installment(self):
        emi, note = proposed_installment(LoanTerms())
        assert emi == 0.0
        assert "limit, not a monthly obligation" in note

    def test_explicit_installment_wins(self):
        emi, _ = proposed_installment(
            LoanTerms(monthly_installment=7000, principal=120000, tenure_months=12)
        )
        assert emi == 7000

    def test_zero_interest(self):
        emi, _ = proposed_installment(
            LoanTerms(principal=120000, tenure_months=12, annual_rate=0.2, zero_interest=True)
        )
        assert emi == 10000

    def test_no_rate_approximates(self):
        emi, note = proposed_installment(LoanTerms(principal=60000, tenure_months=6))
        assert emi == 10000
        assert "approximated" in note

    def test_amortized(self):
        assert amortized_installment(100000, 0.12, 12) == pytest.approx(8884.88, rel=1e-4)

    def test_negligible_rate_falls_back_to_principal_over_tenure(self):
        # (1 + r) ** n rounds to exactly 1.0
        assert amortized_installment(120000, 1e-18, 12) == 10000

    def test_overflowing_tenure_falls_back_to_interest_only(self):
        emi = amortized_installment(100000, 0.24, 10**7)
        assert emi == pytest.approx(2000)

    def test_long_finite_tenure_approaches_interest_only(self):
        emi = amortized_installment(100000, 0.24, 5000)
        assert emi == pytest.approx(2000)

    def test_principal_without_tenure_is_ignored(self):
        emi, note = proposed_installment(LoanTerms(principal=500000))
        assert emi == 0.0
        assert "without a tenure" in note
        assert "limit" not in note

    def test_extreme_loan_inputs_do_not_raise_from_evaluate(self, perfect_etb_application, evaluation_time):
        for terms in (
            {"proposed_annual_rate": "1e-18", "proposed_tenure_months": 12},
            {"proposed_annual_rate": 0.25, "proposed_tenure_months": 10**7},
        ):
            payload = {**perfect_etb_application, "proposed_principal": 100000, **terms}
            result = evaluate(payload, now=evaluation_time)
            assert result.module_results["dbr"].details["calculationMethod"] == "APPLICATION_DATA"


# =============================================================================
# Local Calculation
# =============================================================================

class TestLocalDbr:
    """Tests for the application-data DBR path."""

    def test_low_obligations(self):
        result = score_dbr(application(existing_monthly_obligations=5000))

        assert result.score == 100
        assert dbr_percentage(result) == 5.0
        assert result.details["decisionBand"] == "PASS"
        assert result.details["calculationMethod"] == "APPLICATION_DATA"
        assert result.hard_stop is False

    def test_all_components(self):
        result = score_dbr(application(
            existing_monthly_obligations=5000,
            credit_card_limit=100000,
            overdraft_annual_interest=60000,
            proposed_principal=60000,
            proposed_tenure_months=12,
            zero_interest=True,
        ))
        # 5000 + 5000 + 5000 + 5000
        assert result.details["totalObligations"] == 20000
        assert dbr_percentage(result) == 20.0
        assert result.score == 75

    def test_conditional_band_scores_zero_without_stopping(self):
        result = score_dbr(application(existing_monthly_obligations=55000))

        assert result.score == 0
        assert result.details["decisionBand"] == "CONDITIONAL"
        assert result.details["dbrThreshold"] == 60.0
        assert result.hard_stop is False

    def test_above_sixty_is_hard_stop(self):
        result = score_dbr(application(net_monthly_income=120000, existing_monthly_obligations=80000))

        assert result.hard_stop is True
        assert "DBR_EXCEED_THRESHOLD" in result.flags
        assert dbr_percentage(result) == 66.67
        assert result.details["riskCategory"] == "CRITICAL"

    def test_requested_card_amount_is_not_an_obligation(self):
        result = score_dbr(application(net_monthly_income=35000, amount_requested=200000))
        assert dbr_percentage(result) == 0.0
        assert result.score == 100

    def test_no_income(self):
        result = score_dbr(application(net_monthly_income=0))

        assert result.score == 0
        assert result.flags == ("NO_DBR_DATA",)
        assert result.hard_stop is False


# =============================================================================
# Upstream DBR
# =============================================================================

class TestUpstreamDbr:
    """Tests for the data-engine DBR path."""

    def test_passthrough(self):
        bureau = BureauRecord.from_mapping({"dbrData": {"dbr": 35, "status": "pass", "threshold": 50}})
        result = score_dbr(application(existing_monthly_obligations=90000), bureau)

        assert result.details["calculationMethod"] == "DATA_ENGINE"
        assert dbr_percentage(result) == 35.0
        assert result.score == 25
        assert result.hard_stop is False

    def test_fail_status(self):
        bureau = BureauRecord.from_mapping({"dbr": 12, "status": "FAIL"})
        result = score_dbr(application(), bureau)

        assert result.score == 0
        assert result.flags == ("DBR_FAIL",)
        assert result.hard_stop is True

    def test_default_threshold(self):
        bureau = BureauRecord.from_mapping({"dbr": 55})
        result = score_dbr(application(), bureau)

        assert result.details["dbrThreshold"] == 60.0
        assert result.details["decisionBand"] == "CONDITIONAL"
        assert result.hard_stop is False

    def test_exceeds_threshold(self):
        bureau = BureauRecord.from_mapping({"dbrData": {"dbr": 52.5, "threshold": 50}})
        result = score_dbr(application(), bureau)

        assert result.hard_stop is True
        assert result.flags == ("DBR_EXCEED_THRESHOLD",)
        assert result.details["decisionBand"] == "FAIL"
