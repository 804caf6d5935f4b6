"""
Unit Tests for the application and behavioral scorecards.
"""

from datetime import date

import pytest

from src.service.scoring.application_scorecard import (
    APPLICATION_WEIGHTS,
    education_score,
    employment_status_score,
    industry_score,
    scorecard_age_score,
    scorecard_city_score,
    score_application,
)
from src.service.scoring.behavioral_scorecard import (
    BEHAVIORAL_WEIGHTS,
    behavioral_breakdown,
    score_behavior,
)
from src.service.scoring.models import ApplicationRecord, BureauRecord

TODAY = date(2024, 1, 15)


# =============================================================================
# Application Scorecard
# =============================================================================

class TestApplicationLookups:
    """Tests for individual scorecard lookups."""

    def test_weights_sum_to_one(self):
        assert sum(APPLICATION_WEIGHTS.values()) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "education, expected",
        [("PhD", 100), ("MBA Finance", 85), ("Bachelors", 70), ("Matric", 40), ("", 25)],
    )
    def test_education(self, education, expected):
        assert education_score(education) == expected

    def test_self_employed_checked_before_employed(self):
        assert employment_status_score("Self Employed") == 65
        assert employment_status_score("Employed") == 100

    def test_short_keyword_needs_whole_word(self):
        assert industry_score("IT Services", "") == 85
        assert industry_score("Security", "") == 50

    @pytest.mark.parametrize(
        "dob, expected",
        [(date(1990, 1, 1), 100), (date(1975, 1, 1), 85), (date(1962, 1, 1), 70), (None, 50)],
    )
    def test_age(self, dob, expected):
        assert scorecard_age_score(dob, TODAY) == expected

    def test_city_falls_back_to_cluster(self):
        assert scorecard_city_score("karachi", "", "") == 100
        assert scorecard_city_score("", "multan", "") == 80
        assert scorecard_city_score("thatta", "", "south") == 75
        assert scorecard_city_score("thatta", "", "") == 50


class TestScoreApplication:
    """Tests for score_application."""

    def test_perfect_etb(self, perfect_etb_application):
        record = ApplicationRecord.from_mapping(perfect_etb_application)
        bureau = BureauRecord.from_mapping({"average_deposit_balance": 500000})

        result = score_application(record, bureau, dbr_score=100, today=TODAY)

        assert result.score == 86
        assert result.details["breakdown"]["deposits"] == 85
        assert result.details["breakdown"]["portfolio_type"] == 85
        assert result.details["totalComponents"] == 15

    def test_dbr_score_is_reused(self, perfect_etb_application):
        record = ApplicationRecord.from_mapping(perfect_etb_application)
        result = score_application(record, BureauRecord(), dbr_score=25, today=TODAY)
        assert result.details["breakdown"]["dbr_score"] == 25


# =============================================================================
# Behavioral Scorecard
# =============================================================================

class TestScoreBehavior:
    """Tests for score_behavior."""

    def test_weights_sum_to_one(self):
        assert sum(BEHAVIORAL_WEIGHTS.values()) == pytest.approx(1.0)

    def test_ntb_scores_zero(self):
        result = score_behavior(ApplicationRecord(is_etb=False), BureauRecord())
        assert result.score == 0
        assert result.details["scoringMethod"] == "NOT_APPLICABLE"

    def test_clean_etb(self, clean_bureau):
        result = score_behavior(ApplicationRecord(is_etb=True), BureauRecord.from_mapping(clean_bureau))
        assert result.score == 97
        assert result.details["riskAssessment"] == "EXCELLENT"

    def test_delinquent_history(self):
        breakdown = behavioral_breakdown(BureauRecord(
            bad_counts_bank=5,
            dpd_60_plus=2,
            defaults_12m=1,
            late_payments=40,
            credit_utilization_ratio=1.2,
        ))
        assert breakdown["bad_counts_bank"] == 0
        assert breakdown["dpd_60_plus"] == 50
        assert breakdown["defaults_12m"] == 60
        assert breakdown["late_payments"] == 10
        assert breakdown["credit_utilization"] == 0
        assert breakdown["avg_deposit_balance"] == 10
