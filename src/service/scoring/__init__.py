"""
Card Decision Scoring Module
"""

from .settings import ScoringSettings, scoring_settings, get_scoring_settings
from .models import (
    CustomerType,
    DecisionOutcome,
    RiskLevel,
    CardType,
    ModuleDecision,
    ApplicationRecord,
    BureauRecord,
    SystemChecksRecord,
    CreditLimitContext,
    ModuleResult,
    DecisionResult,
)
from .age import calculate_age, score_age
from .geography import is_annexure_a, score_geography
from .income import score_income
from .dbr import score_dbr, dbr_percentage
from .screening import score_spu, score_eamvu
from .application_scorecard import score_application
from .behavioral_scorecard import score_behavior
from .credit_limit import assign_credit_limit, card_tier_for
from .system_checks import run_system_checks
from .documentation import assess_documentation
from .verification import assess_verification
from .income_verification import assess_income_verification
from .special_segments import assess_special_segments
from .hard_stops import HardStopRule, HARD_STOP_RULES, first_hard_stop
from .decision import evaluate, validate_application, explain_decision, decision_band

__all__ = [
    # Settings
    "ScoringSettings",
    "scoring_settings",
    "get_scoring_settings",
    # Models
    "CustomerType",
    "DecisionOutcome",
    "RiskLevel",
    "CardType",
    "ModuleDecision",
    "ApplicationRecord",
    "BureauRecord",
    "SystemChecksRecord",
    "CreditLimitContext",
    "ModuleResult",
    "DecisionResult",
    # Scoring modules
    "calculate_age",
    "score_age",
    "is_annexure_a",
    "score_geography",
    "score_income",
    "score_dbr",
    "dbr_percentage",
    "score_spu",
    "score_eamvu",
    "score_application",
    "score_behavior",
    # Credit Limit
    "assign_credit_limit",
    "card_tier_for",
    # Compliance
    "run_system_checks",
    "assess_documentation",
    "assess_verification",
    "assess_income_verification",
    "assess_special_segments",
    # Hard stops
    "HardStopRule",
    "HARD_STOP_RULES",
    "first_hard_stop",
    # Decision
    "evaluate",
    "validate_application",
    "explain_decision",
    "decision_band",
]
