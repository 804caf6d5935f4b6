"""
Scoring Settings for the Card Decision Engine.

This module contains the tunable parameters of the decision pipeline: module
weights, decision bands, DBR bands, age windows and the regulatory exposure
caps used for limit assignment. Fixed policy lists (Annexure A areas, city
tiers, scorecard lookup tables) live beside the module that uses them as
immutable constants.

Environment variables use the CARD_SCORING_ prefix:
    CARD_SCORING_WEIGHT_DBR=0.55
    CARD_SCORING_BAND_LOW_MIN=80
    CARD_SCORING_TOTAL_EXPOSURE_CAP=7000000

Usage:
    from src.service.scoring.settings import scoring_settings

    # Use default settings (loaded from env)
    cap = scoring_settings.unsecured_exposure_cap

    # Or create custom settings for testing
    custom = ScoringSettings(weight_documentation=0.05)
"""

import json
from functools import lru_cache
from typing import Dict, List, Tuple

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CARD_TIER_NAMES = ("SILVER", "GOLD", "PLATINUM")


class ScoringSettings(BaseSettings):
    """
    Configurable parameters for the card decision pipeline.

    All settings can be overridden via environment variables with the
    CARD_SCORING_ prefix. Monetary values are in PKR. Scores are 0-100.
    """

    model_config = SettingsConfigDict(
        env_prefix="CARD_SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Module Weights ===
    weight_dbr: float = Field(default=0.55, ge=0.0, le=1.0, description="Weight of the DBR module")
    weight_spu: float = Field(default=0.05, ge=0.0, le=1.0, description="Weight of the blacklist screening")
    weight_eamvu: float = Field(default=0.05, ge=0.0, le=1.0, description="Weight of asset verification")
    weight_age: float = Field(default=0.05, ge=0.0, le=1.0, description="Weight of age banding")
    weight_city: float = Field(default=0.05, ge=0.0, le=1.0, description="Weight of geographic coverage")
    weight_income: float = Field(default=0.10, ge=0.0, le=1.0, description="Weight of income capacity")
    weight_application_etb: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="Application scorecard weight for existing customers",
    )
    weight_application_ntb: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="Application scorecard weight for new customers",
    )
    weight_behavioral_etb: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Behavioral scorecard weight for existing customers",
    )
    weight_behavioral_ntb: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Behavioral scorecard weight for new customers",
    )

    # === Compliance Weights ===
    # Zero by default: compliance outcomes act through the hard-stop cascade.
    # Non-zero values are blended in and the total is renormalized.
    weight_system_checks: float = Field(default=0.0, ge=0.0, le=0.2)
    weight_documentation: float = Field(default=0.0, ge=0.0, le=0.2)
    weight_verification: float = Field(default=0.0, ge=0.0, le=0.2)
    weight_income_verification: float = Field(default=0.0, ge=0.0, le=0.2)

    # === Decision Bands (minimum final score) ===
    band_very_low_min: int = Field(default=90, ge=0, le=100, description="PASS with no conditions")
    band_low_min: int = Field(default=80, ge=0, le=100, description="PASS with basic conditions")
    band_medium_min: int = Field(default=70, ge=0, le=100, description="CONDITIONAL PASS, additional conditions")
    band_high_min: int = Field(default=60, ge=0, le=100, description="CONDITIONAL PASS, manual review")

    # === DBR ===
    dbr_score_bands_json: str = Field(
        default="[[10,100],[20,75],[30,50],[40,25]]",
        description="DBR score bands as JSON: [[max_percentage, score], ...]; above the last band scores 0",
    )
    dbr_pass_max: float = Field(default=50.0, gt=0.0, description="DBR% at or below this is PASS")
    dbr_conditional_max: float = Field(default=60.0, gt=0.0, description="DBR% at or below this is CONDITIONAL")
    dbr_default_upstream_threshold: float = Field(
        default=60.0,
        gt=0.0,
        description="Threshold assumed when the upstream DBR engine omits one",
    )
    dbr_card_limit_ratio: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Share of a revolving card limit counted as a monthly obligation",
    )

    # === Age Windows ===
    salaried_min_age: int = Field(default=21, ge=0)
    salaried_max_age: int = Field(default=60, ge=0)
    salaried_edge_score: int = Field(default=80, ge=0, le=100, description="Score at one year outside the salaried window")
    self_employed_min_age: int = Field(default=22, ge=0)
    self_employed_max_age: int = Field(default=65, ge=0)
    retired_min_age: int = Field(default=20, ge=0)
    retired_max_age: int = Field(default=61, ge=0)
    retired_score: int = Field(default=75, ge=0, le=100)

    # === Credit Limit ===
    total_exposure_cap: int = Field(default=7_000_000, gt=0, description="Maximum total exposure")
    unsecured_exposure_cap: int = Field(default=3_000_000, gt=0, description="Maximum unsecured exposure")
    aggregate_cc_pl_cap: int = Field(default=3_000_000, gt=0, description="Maximum card + personal-loan exposure")
    limit_max_dbr: float = Field(
        default=0.40,
        ge=0.0,
        lt=1.0,
        description="Share of net income reserved for existing obligations in the DBR-based limit",
    )
    limit_obligation_ratio: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Monthly obligation assumed per unit of card limit",
    )
    card_tiers_json: str = Field(
        default='[["SILVER",25000,125000],["GOLD",125001,299999],["PLATINUM",300000,7000000]]',
        description="Card tiers as JSON: [[name, min_limit, max_limit], ...] in ascending order",
    )

    # === Documentation ===
    cnic_expiry_warning_days: int = Field(default=30, ge=0)
    bvs_deferral_max_days: int = Field(default=10, ge=0)

    @field_validator("dbr_score_bands_json")
    @classmethod
    def validate_dbr_bands_json(cls, v: str) -> str:
        """DBR bands must be ascending in percentage and non-increasing in score."""
        try:
            bands = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")
        if not isinstance(bands, list) or not bands:
            raise ValueError("DBR bands must be a non-empty list")
        previous_pct, previous_score = -1.0, 101
        for band in bands:
            if not isinstance(band, list) or len(band) != 2:
                raise ValueError("Each DBR band must be [max_percentage, score]")
            max_pct, score = band
            if max_pct <= previous_pct:
                raise ValueError("DBR band percentages must be strictly ascending")
            if not 0 <= score <= 100 or score > previous_score:
                raise ValueError("DBR band scores must be 0-100 and non-increasing")
            previous_pct, previous_score = max_pct, score
        return v

    @field_validator("card_tiers_json")
    @classmethod
    def validate_card_tiers_json(cls, v: str) -> str:
        """Validate that card tiers are well-formed and ascending."""
        try:
            tiers = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")
        if not isinstance(tiers, list) or not tiers:
            raise ValueError("Card tiers must be a non-empty list")
        previous_max = -1
        for tier in tiers:
            if not isinstance(tier, list) or len(tier) != 3:
                raise ValueError("Each tier must be [name, min_limit, max_limit]")
            name, low, high = tier
            if not isinstance(name, str) or not all(isinstance(x, int) for x in (low, high)):
                raise ValueError("Tier name must be a string and bounds integers")
            if name not in CARD_TIER_NAMES:
                raise ValueError(f"Unknown card tier {name!r}; expected one of {CARD_TIER_NAMES}")
            if low > high:
                raise ValueError(f"min_limit ({low}) > max_limit ({high}) for {name}")
            if low <= previous_max:
                raise ValueError("Card tiers must not overlap")
            previous_max = high
        return v

    @model_validator(mode="after")
    def validate_bands_descending(self) -> "ScoringSettings":
        bands = (
            self.band_very_low_min,
            self.band_low_min,
            self.band_medium_min,
            self.band_high_min,
        )
        if list(bands) != sorted(bands, reverse=True):
            raise ValueError("Decision band minimums must be in descending order")
        if self.dbr_pass_max > self.dbr_conditional_max:
            raise ValueError("dbr_pass_max cannot exceed dbr_conditional_max")
        return self

    @property
    def dbr_score_bands(self) -> List[Tuple[float, int]]:
        """DBR bands as (max_percentage, score) pairs."""
        return [(float(pct), int(score)) for pct, score in json.loads(self.dbr_score_bands_json)]

    @property
    def card_tiers(self) -> List[Tuple[str, int, int]]:
        """Card tiers as (name, min_limit, max_limit), lowest first."""
        return [tuple(tier) for tier in json.loads(self.card_tiers_json)]

    def module_weights(self, is_etb: bool) -> Dict[str, float]:
        """Weights keyed by module name for the given customer type."""
        return {
            "dbr": self.weight_dbr,
            "spu": self.weight_spu,
            "eamvu": self.weight_eamvu,
            "age": self.weight_age,
            "city": self.weight_city,
            "income": self.weight_income,
            "applicationScore": self.weight_application_etb if is_etb else self.weight_application_ntb,
            "behavioralScore": self.weight_behavioral_etb if is_etb else self.weight_behavioral_ntb,
            "systemChecks": self.weight_system_checks,
            "documentation": self.weight_documentation,
            "verification": self.weight_verification,
            "incomeVerification": self.weight_income_verification,
        }


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


scoring_settings = get_scoring_settings()
