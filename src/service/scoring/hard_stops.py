"""
Hard-stop rules, evaluated in priority order after every module has run.

The first rule whose predicate matches fails the application outright; the
weighted score is never computed for a hard stop.
"""

from typing import Callable, Mapping, NamedTuple, Optional

from .models import ModuleDecision, ModuleResult

ModuleResults = Mapping[str, ModuleResult]


class HardStopRule(NamedTuple):
    name: str
    predicate: Callable[[ModuleResults], bool]
    reason: Callable[[ModuleResults], str]


def _hard_stop(module: str) -> Callable[[ModuleResults], bool]:
    def predicate(results: ModuleResults) -> bool:
        result = results.get(module)
        return result is not None and result.hard_stop

    return predicate


def _age_reason(results: ModuleResults) -> str:
    notes = results["age"].notes
    return notes[0] if notes else "Age validation failed"


def _dbr_reason(results: ModuleResults) -> str:
    details = results["dbr"].details
    return (
        f"DBR {details.get('dbrPercentage', 0.0):.2f}% exceeds threshold "
        f"{details.get('dbrThreshold', 0.0):g}%"
    )


def _compliance_declined(results: ModuleResults) -> bool:
    result = results.get("systemChecks")
    return result is not None and result.decision == ModuleDecision.DECLINE


HARD_STOP_RULES = (
    HardStopRule("AGE", _hard_stop("age"), _age_reason),
    HardStopRule("SPU", _hard_stop("spu"), lambda _: "SPU Critical Hit - Automatic Fail"),
    HardStopRule("ANNEXURE_A", _hard_stop("city"), lambda _: "Annexure A Area - Automatic Fail"),
    HardStopRule("DBR", _hard_stop("dbr"), _dbr_reason),
    HardStopRule(
        "COMPLIANCE",
        _compliance_declined,
        lambda _: "System Checks Critical Hit - Automatic Fail",
    ),
)


def first_hard_stop(results: ModuleResults) -> Optional[HardStopRule]:
    """Return the highest-priority rule that matches, if any."""
    for rule in HARD_STOP_RULES:
        if rule.predicate(results):
            return rule
    return None
