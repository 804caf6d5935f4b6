"""
Unit Tests for eligibility modules.

These tests verify:
1. Age bands, edge tolerance and hard stops
2. Annexure A detection and city/cluster points
3. Income threshold, stability and tenure components
4. SPU and EAMVU screening
"""

from datetime import date

import pytest

from src.service.scoring.age import calculate_age, score_age
from src.service.scoring.geography import is_annexure_a, score_geography
from src.service.scoring.income import income_threshold, score_income
from src.service.scoring.models import ApplicationRecord
from src.service.scoring.screening import score_eamvu, score_spu

TODAY = date(2024, 1, 15)


def dob_for_age(age: int) -> str:
    return date(TODAY.year - age - 1, 6, 15).isoformat()


def application(**fields) -> ApplicationRecord:
    return ApplicationRecord.from_mapping(fields)


# =============================================================================
# Age
# =============================================================================

class TestCalculateAge:
    """Tests for calculate_age."""

    def test_floor_of_years(self):
        assert calculate_age(date(1985, 6, 15), TODAY) == 38

    def test_missing(self):
        assert calculate_age(None, TODAY) is None

    def test_future_is_negative(self):
        assert calculate_age(date(2025, 1, 1), TODAY) < 0


class TestScoreAge:
    """Tests for score_age."""

    @pytest.mark.parametrize("age", [21, 38, 60])
    def test_salaried_window(self, age):
        result = score_age(application(date_of_birth=dob_for_age(age)), TODAY)
        assert result.score == 100
        assert result.hard_stop is False
        assert result.details["calculatedAge"] == age

    @pytest.mark.parametrize("age", [20, 61])
    def test_salaried_edge_tolerance(self, age):
        result = score_age(application(date_of_birth=dob_for_age(age)), TODAY)
        assert result.score == 80
        assert result.details["validationStatus"] == "VALID_EDGE"
        assert result.hard_stop is False

    @pytest.mark.parametrize("age", [19, 62])
    def test_salaried_out_of_range(self, age):
        result = score_age(application(date_of_birth=dob_for_age(age)), TODAY)
        assert result.score == 0
        assert result.hard_stop is True
        assert "AGE_HARD_STOP" in result.flags

    def test_self_employed_window(self):
        result = score_age(
            application(date_of_birth=dob_for_age(22), occupation="Self Employed Trader"), TODAY
        )
        assert result.score == 100
        assert result.details["employmentType"] == "SELF_EMPLOYED"

    def test_self_employed_has_no_edge_tolerance(self):
        result = score_age(
            application(date_of_birth=dob_for_age(21), occupation="Self Employed Trader"), TODAY
        )
        assert result.hard_stop is True
        assert "outside 22-65" in result.notes[0]

    def test_retired_penalized(self):
        result = score_age(
            application(date_of_birth=dob_for_age(61), employment_status="Retired"), TODAY
        )
        assert result.score == 75
        assert result.details["validationStatus"] == "VALID_PENALIZED"

    def test_retired_out_of_range(self):
        result = score_age(
            application(date_of_birth=dob_for_age(62), employment_status="Retired"), TODAY
        )
        assert result.hard_stop is True

    def test_invalid_date_of_birth(self):
        result = score_age(application(date_of_birth="not-a-date"), TODAY)
        assert result.hard_stop is True
        assert result.details["validationStatus"] == "INVALID_DOB"

    def test_future_date_of_birth(self):
        result = score_age(application(date_of_birth="2030-01-01"), TODAY)
        assert result.hard_stop is True


# =============================================================================
# Geography
# =============================================================================

class TestAnnexureA:
    """Tests for is_annexure_a."""

    @pytest.mark.parametrize("city", ["Quetta", "PESHAWAR", "upper dir", "North Waziristan"])
    def test_listed_areas(self, city):
        assert is_annexure_a(city) is True

    @pytest.mark.parametrize("city", ["Karachi", "Lahore", ""])
    def test_other_cities(self, city):
        assert is_annexure_a(city) is False


class TestScoreGeography:
    """Tests for score_geography."""

    def test_annexure_current_city_hard_stop(self):
        result = score_geography(application(curr_city="Quetta", office_city="Karachi"))
        assert result.score == 0
        assert result.hard_stop is True
        assert result.details["currentCityStatus"] == "ANNEXURE_A"
        assert "Current City" in result.notes[0]

    def test_annexure_office_city_hard_stop(self):
        result = score_geography(application(curr_city="Karachi", office_city="Peshawar"))
        assert result.hard_stop is True
        assert result.details["officeCityStatus"] == "ANNEXURE_A"

    def test_city_plus_cluster(self):
        result = score_geography(application(curr_city="Islamabad", cluster="federal"))
        assert result.score == 70
        assert result.details["clusterInfo"] == {"name": "FEDERAL", "points": 30, "tier": "PREMIUM"}
        assert result.details["coverageLevel"] == "FULL_PREMIUM"

    def test_unlisted_cluster_scores_zero(self):
        result = score_geography(application(curr_city="Karachi", cluster="PREMIUM"))
        assert result.score == 40

    def test_office_city_used_when_current_unlisted(self):
        result = score_geography(application(curr_city="Thatta", office_city="Multan", cluster="SOUTH"))
        assert result.details["foundCity"] == "multan"
        assert result.score == 45

    def test_unknown_city(self):
        result = score_geography(application(curr_city="Thatta"))
        assert result.score == 0
        assert result.hard_stop is False
        assert result.details["currentCityStatus"] == "LIMITED_COVERAGE"


# =============================================================================
# Income
# =============================================================================

class TestIncomeThreshold:
    """Tests for income_threshold."""

    @pytest.mark.parametrize(
        "employment_type, salary_transfer, is_etb, expected",
        [
            ("permanent", True, True, 40_000),
            ("permanent", True, False, 45_000),
            ("permanent", False, False, 50_000),
            ("contractual", False, True, 65_000),
            ("self_employed", False, False, 120_000),
            ("probation", False, False, 0),
            ("other", True, True, 45_000),
        ],
    )
    def test_thresholds(self, employment_type, salary_transfer, is_etb, expected):
        assert income_threshold(employment_type, salary_transfer, is_etb) == expected


class TestScoreIncome:
    """Tests for score_income."""

    def test_full_marks(self, perfect_etb_application):
        result = score_income(ApplicationRecord.from_mapping(perfect_etb_application))
        assert result.score == 100
        assert result.details["stabilityAnalysis"]["points"] == 25
        assert result.details["tenureAnalysis"]["points"] == 15

    def test_below_threshold(self):
        result = score_income(
            application(net_monthly_income=30000, gross_monthly_income=32000, length_of_employment=2)
        )
        # 0 threshold + 25 stability + 8 tenure
        assert result.score == 33
        assert "INCOME_BELOW_THRESHOLD" in result.flags

    def test_probation_gets_no_threshold_credit(self):
        result = score_income(
            application(
                employment_type="Probation",
                net_monthly_income=90000,
                gross_monthly_income=100000,
            )
        )
        assert result.score == 25
        assert result.flags == ()

    def test_missing_gross_not_measurable(self):
        result = score_income(application(net_monthly_income=60000, length_of_employment=3))
        assert result.details["stabilityAnalysis"]["level"] == "Not Measurable"
        assert result.score == 72


# =============================================================================
# Screening
# =============================================================================

class TestScreening:
    """Tests for SPU and EAMVU."""

    def test_spu_clean(self):
        result = score_spu(application())
        assert result.score == 100
        assert result.details["overallStatus"] == "CLEAN"

    def test_spu_hit_is_hard_stop(self):
        result = score_spu(application(spu_negative_list_check="Y"))
        assert result.score == 0
        assert result.hard_stop is True
        assert result.notes == ("SPU Critical Hit: NegativeList",)

    def test_eamvu_submitted(self):
        assert score_eamvu(application(eavmu_submitted=True)).score == 100

    def test_eamvu_missing(self):
        result = score_eamvu(application())
        assert result.score == 0
        assert result.hard_stop is False
