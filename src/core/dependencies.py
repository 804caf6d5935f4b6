"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends

from src.application.services import DecisionService
from src.core.config import Settings, get_settings
from src.service.scoring import ScoringSettings, get_scoring_settings


def get_app_settings() -> Settings:
    """Get the application settings."""
    return get_settings()


def get_scoring_config() -> ScoringSettings:
    """Get the scoring settings."""
    return get_scoring_settings()


# Service dependencies
def get_decision_service(
    app_settings: Annotated[Settings, Depends(get_app_settings)],
    scoring: Annotated[ScoringSettings, Depends(get_scoring_config)],
) -> DecisionService:
    """Get a DecisionService instance."""
    return DecisionService(
        settings=scoring,
        strict_validation=app_settings.strict_validation,
    )
