from .equipment import resolve, resolve_with_warnings, classify_environment
from .selector import select
from .safety import SafetyFilter
from .assembler import PlanAssembler
from .tiers import PlanTierGenerator
from .versioner import fingerprint, stamp, is_current, merge_policy
from .profile_adapter import normalize_answers
from .orchestrator import generate_plans, generate_plans_from_answers
from .verifier_fast import fast_verify
from .plan_slots import PlanSlots

__all__ = [
    "resolve",
    "resolve_with_warnings",
    "classify_environment",
    "select",
    "SafetyFilter",
    "PlanAssembler",
    "PlanTierGenerator",
    "fingerprint",
    "stamp",
    "is_current",
    "merge_policy",
    "normalize_answers",
    "generate_plans",
    "generate_plans_from_answers",
    "fast_verify",
    "PlanSlots",
]
