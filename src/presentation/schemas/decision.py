"""Decision-related Pydantic schemas."""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DecisionRequestSchema(BaseModel):
    """Schema for POST /v1/decision request body."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "application": {
                        "applicationId": "APP-1001",
                        "full_name": "Ayesha Khan",
                        "cnic": "42101-1234567-1",
                        "date_of_birth": "1985-06-15",
                        "gross_monthly_income": 150000,
                        "net_monthly_income": 120000,
                        "curr_city": "Karachi",
                        "office_city": "Karachi",
                        "cluster": "PREMIUM",
                        "employment_status": "Employed",
                        "employment_type": "permanent",
                        "is_ubl_customer": True,
                        "salary_transfer_flag": True,
                        "eamvu_submitted": True,
                        "amount_requested": 200000,
                    },
                    "bureau": {"average_deposit_balance": 500000, "credit_utilization_ratio": 0.2},
                }
            ]
        },
    )
    application: Dict[str, Any] = Field(
        ...,
        description="Applicant data as captured by the loan origination system",
    )
    bureau: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("bureau", "bureauData", "cbs_data"),
        description="Bureau (CBS) data, optionally with an upstream dbrData block",
    )
    system_checks: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("system_checks", "systemChecks", "systemChecksData"),
        description="eCIB, Verisys, AFD, PEP and World Check outcomes",
    )
    credit_limit_context: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("credit_limit_context", "creditLimitContext"),
        description="Current exposure used for regulatory caps",
    )
    strict: bool = Field(
        False,
        description="Reject incomplete applications instead of scoring them with defaults",
    )

    @field_validator("application")
    @classmethod
    def validate_application_present(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Ensure the application is not empty."""
        if not v:
            raise ValueError("application cannot be empty")
        return v


class ModuleScoreSchema(BaseModel):
    """Result of a single scoring or compliance module."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    score: float = Field(..., ge=0, le=100)
    notes: List[str] = Field(default_factory=list)
    flags: List[str] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)
    decision: Optional[str] = None
    hard_stop: bool = False


class DecisionResponseSchema(BaseModel):
    """Schema for POST /v1/decision response body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    application_id: str = Field("", description="Application identifier echoed back")
    customer_name: str = Field("Unknown", description="Applicant name")
    cnic: str = Field("", description="CNIC without dashes")
    final_score: int = Field(..., ge=0, le=100, description="Weighted final score; 0 on a hard stop")
    decision: str = Field(..., description="PASS, CONDITIONAL PASS or FAIL", examples=["PASS"])
    risk_level: str = Field(..., description="VERY_LOW to VERY_HIGH", examples=["LOW"])
    action_required: str = Field(..., description="Action for the credit officer")
    customer_type: str = Field(..., description="ETB or NTB")
    dbr_percentage: float = Field(..., ge=0, description="Debt-burden ratio in percent")
    hard_stop_rule: Optional[str] = Field(None, description="Rule that failed the application, if any")
    evaluated_at: str = Field(..., description="ISO timestamp of the evaluation clock")
    assigned_credit_limit: Optional[int] = Field(None, ge=0, description="Assigned limit in PKR")
    card_type: Optional[str] = Field(None, description="SILVER, GOLD or PLATINUM")
    module_scores: Dict[str, ModuleScoreSchema] = Field(default_factory=dict)
    explanation: str = Field("", description="Human-readable decision summary")
    warnings: List[str] = Field(
        default_factory=list,
        description="Validation problems found when scoring a non-strict request",
    )


class ValidationResponseSchema(BaseModel):
    """Schema for POST /v1/decision/validate response body."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
