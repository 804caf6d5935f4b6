"""
Debt-Burden Ratio (DBR) scoring.

Two calculation paths, chosen by data availability:

1. Upstream: the data engine supplied a DBR percentage and status. The
   percentage is passed through and banded; status ``fail`` or a percentage
   above the engine's threshold is a hard stop.
2. Local fallback: monthly obligations are rebuilt from the application
   (existing installments, 5% of revolving card limits, overdraft interest
   and the proposed installment) and divided by net income.

For card products the requested amount is a limit, not an obligation, so a
pure card request contributes nothing to the proposed installment.
"""

import math
from typing import List, Optional, Tuple

from .models import ApplicationRecord, BureauRecord, LoanTerms, ModuleResult, UpstreamDBR
from .settings import ScoringSettings, scoring_settings

MODULE_NAME = "dbr"


def dbr_band_score(
    dbr_percentage: float,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Map a DBR percentage onto its step score.

    Args:
        dbr_percentage: Monthly obligations as a percentage of net income
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Score for the first band whose maximum is >= the percentage,
        0 above the last band
    """
    for max_pct, score in settings.dbr_score_bands:
        if dbr_percentage <= max_pct:
            return score
    return 0


def decision_band(
    dbr_percentage: float,
    settings: ScoringSettings = scoring_settings,
) -> str:
    if dbr_percentage <= settings.dbr_pass_max:
        return "PASS"
    if dbr_percentage <= settings.dbr_conditional_max:
        return "CONDITIONAL"
    return "FAIL"


def dbr_risk_category(dbr_percentage: float, threshold: float) -> str:
    if dbr_percentage > threshold:
        return "CRITICAL"
    if dbr_percentage > threshold * 0.8:
        return "HIGH"
    if dbr_percentage > threshold * 0.6:
        return "MEDIUM"
    return "LOW"


def amortized_installment(principal: float, annual_rate: float, months: int) -> float:
    """
    Standard installment P*r*(1+r)^n / ((1+r)^n - 1) with r = annual_rate / 12.

    Rates too small to move (1+r)^n off 1.0 degrade to principal / months;
    tenures long enough to overflow the power degrade to the interest-only
    limit P*r.
    """
    r = annual_rate / 12
    try:
        growth = (1 + r) ** months
    except OverflowError:
        return principal * r
    if not math.isfinite(growth):
        return principal * r
    # Written as 1 - 1/(1+r)^n so a large finite growth cannot overflow P*r*growth
    denominator = 1 - 1 / growth
    if not denominator > 0:
        return principal / months
    return principal * r / denominator


def proposed_installment(loan: LoanTerms) -> Tuple[float, str]:
    """
    Proposed monthly installment and a note describing how it was derived.

    Priority: explicit installment, then amortizing installment from
    principal, tenure and rate (principal / tenure for zero-interest plans or
    when no rate is given), else 0.
    """
    if loan.monthly_installment is not None and loan.monthly_installment > 0:
        return loan.monthly_installment, "Using provided monthly installment for proposed EMI"

    principal = loan.principal or 0.0
    if principal > 0 and loan.tenure_months > 0:
        if loan.zero_interest:
            return principal / loan.tenure_months, "Zero-interest plan: EMI = principal / tenure"
        if loan.annual_rate > 0:
            emi = amortized_installment(principal, loan.annual_rate, loan.tenure_months)
            return emi, (
                f"Interest-bearing EMI (r={loan.annual_rate / 12:.6f}, n={loan.tenure_months})"
            )
        return principal / loan.tenure_months, "No rate provided; EMI approximated as principal / tenure"

    if principal > 0:
        return 0.0, "Loan principal provided without a tenure; ignored for the proposed EMI"

    return 0.0, "Credit card application: requested amount is a limit, not a monthly obligation"


def _upstream_result(upstream: UpstreamDBR, settings: ScoringSettings) -> ModuleResult:
    percentage = upstream.percentage
    threshold = upstream.threshold or settings.dbr_default_upstream_threshold
    status = upstream.status or "unknown"
    notes: List[str] = [
        f"DBR from data engine: {percentage:.2f}%",
        f"Net Income: PKR {upstream.net_income:,.0f}",
        f"Total Obligations: PKR {upstream.total_obligations:,.0f}",
        f"DBR Threshold: {threshold:g}%",
        f"Status: {status.upper()}",
    ]
    details = {
        "dbrPercentage": round(percentage, 2),
        "dbrThreshold": threshold,
        "netIncome": upstream.net_income,
        "totalObligations": upstream.total_obligations,
        "calculationMethod": "DATA_ENGINE",
        "incomeSource": "DATA_ENGINE",
        "obligationsSource": "DATA_ENGINE",
        "thresholdType": "DYNAMIC",
    }

    if status == "fail":
        notes.append("DBR status is FAIL - Score 0")
        details.update(riskCategory="CRITICAL", statusReason="DATA_ENGINE_FAIL", decisionBand="FAIL")
        return ModuleResult(
            name=MODULE_NAME, score=0, notes=tuple(notes), flags=("DBR_FAIL",),
            details=details, hard_stop=True,
        )

    exceeds = percentage > threshold
    details.update(
        riskCategory=dbr_risk_category(percentage, threshold),
        statusReason="EXCEEDS_THRESHOLD" if exceeds else "WITHIN_THRESHOLD",
        decisionBand="FAIL" if exceeds else decision_band(percentage, settings),
    )
    return ModuleResult(
        name=MODULE_NAME,
        score=0 if exceeds else dbr_band_score(percentage, settings),
        notes=tuple(notes),
        flags=("DBR_EXCEED_THRESHOLD",) if exceeds else (),
        details=details,
        hard_stop=exceeds,
    )


def _local_result(application: ApplicationRecord, settings: ScoringSettings) -> ModuleResult:
    net = application.net_monthly_income
    if net <= 0:
        return ModuleResult(
            name=MODULE_NAME,
            score=0,
            notes=("No DBR data available from data engine or application",),
            flags=("NO_DBR_DATA",),
            details={
                "dbrPercentage": 0.0,
                "dbrThreshold": settings.dbr_conditional_max,
                "netIncome": 0.0,
                "totalObligations": 0.0,
                "calculationMethod": "FAILED",
                "incomeSource": "NONE",
                "obligationsSource": "NONE",
                "thresholdType": "DEFAULT",
                "riskCategory": "CRITICAL",
                "statusReason": "NO_DATA",
            },
        )

    loan = application.loan
    card_component = loan.credit_card_limit * settings.dbr_card_limit_ratio
    overdraft_monthly = loan.overdraft_annual_interest / 12
    emi, emi_note = proposed_installment(loan)
    total = loan.existing_obligations + card_component + overdraft_monthly + emi
    percentage = total / net * 100
    band = decision_band(percentage, settings)
    failed = band == "FAIL"

    notes = [
        emi_note,
        f"DBR calculated from application data: {percentage:.2f}%",
        f"Net Income: PKR {net:,.0f}",
        (
            f"Components: existing PKR {loan.existing_obligations:,.0f}, "
            f"card limit share PKR {card_component:,.0f}, "
            f"overdraft/12 PKR {overdraft_monthly:,.0f}, proposed EMI PKR {emi:,.0f}"
        ),
        f"Total Obligations: PKR {total:,.0f}",
        f"Threshold Bands: PASS <= {settings.dbr_pass_max:g}%, CONDITIONAL <= {settings.dbr_conditional_max:g}%",
        f"Status: {band}",
    ]
    threshold = settings.dbr_pass_max if band == "PASS" else settings.dbr_conditional_max

    return ModuleResult(
        name=MODULE_NAME,
        score=dbr_band_score(percentage, settings),
        notes=tuple(notes),
        flags=("DBR_EXCEED_THRESHOLD",) if failed else (),
        details={
            "dbrPercentage": round(percentage, 2),
            "dbrThreshold": threshold,
            "netIncome": net,
            "totalObligations": round(total, 2),
            "components": {
                "existingObligations": loan.existing_obligations,
                "creditCardComponent": round(card_component, 2),
                "overdraftMonthly": round(overdraft_monthly, 2),
                "proposedInstallment": round(emi, 2),
            },
            "calculationMethod": "APPLICATION_DATA",
            "incomeSource": "APPLICATION",
            "obligationsSource": "APPLICATION",
            "thresholdType": "CALCULATED",
            "riskCategory": dbr_risk_category(percentage, settings.dbr_conditional_max),
            "statusReason": "EXCEEDS_THRESHOLD" if failed else "WITHIN_THRESHOLD",
            "decisionBand": band,
        },
        hard_stop=failed,
    )


def score_dbr(
    application: ApplicationRecord,
    bureau: Optional[BureauRecord] = None,
    settings: ScoringSettings = scoring_settings,
) -> ModuleResult:
    """
    Score the applicant's debt-burden ratio.

    Args:
        application: Normalized application
        bureau: Bureau record; its upstream DBR block takes precedence
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ModuleResult; ``details["dbrPercentage"]`` carries the ratio
    """
    if bureau is not None and bureau.upstream_dbr is not None:
        return _upstream_result(bureau.upstream_dbr, settings)
    return _local_result(application, settings)


def dbr_percentage(result: ModuleResult) -> float:
    return float(result.details.get("dbrPercentage", 0.0))
