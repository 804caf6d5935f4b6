"""
Screening checks: SPU blacklist/negative-list and EAMVU asset verification.
"""

from .models import ApplicationRecord, ModuleResult


def score_spu(application: ApplicationRecord) -> ModuleResult:
    """Any SPU hit scores 0 and is a hard stop; a clean record scores 100."""
    hits = [
        label
        for label, hit in (
            ("BlackList", application.spu_black_list_hit),
            ("CreditCard30k", application.spu_credit_card_30k_hit),
            ("NegativeList", application.spu_negative_list_hit),
        )
        if hit
    ]
    any_hit = bool(hits)

    return ModuleResult(
        name="spu",
        score=0 if any_hit else 100,
        notes=(f"SPU Critical Hit: {', '.join(hits)}",) if any_hit else ("SPU Clean - No hits detected",),
        flags=("SPU_HIT",) if any_hit else (),
        details={
            "blackListStatus": "HIT" if application.spu_black_list_hit else "CLEAN",
            "creditCard30kStatus": "HIT" if application.spu_credit_card_30k_hit else "CLEAN",
            "negativeListStatus": "HIT" if application.spu_negative_list_hit else "CLEAN",
            "overallStatus": "CRITICAL_HIT" if any_hit else "CLEAN",
        },
        hard_stop=any_hit,
    )


def score_eamvu(application: ApplicationRecord) -> ModuleResult:
    submitted = application.eamvu_submitted
    return ModuleResult(
        name="eamvu",
        score=100 if submitted else 0,
        notes=("EAMVU Submitted - Full score",) if submitted else ("EAMVU Not Submitted - Zero score",),
        details={
            "submissionStatus": "SUBMITTED" if submitted else "NOT_SUBMITTED",
            "verificationLevel": "VERIFIED" if submitted else "UNVERIFIED",
            "complianceStatus": "COMPLIANT" if submitted else "NON_COMPLIANT",
        },
    )
