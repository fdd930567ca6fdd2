"""Record reconciliation engine: matching, diffing, deduplication and writes."""

from __future__ import annotations

from .canonical import canonical_entities, pick_preferred, select_canonical
from .deduplicate import DuplicateGroup, detect_duplicates, duplicate_mark_plans
from .diff import build_create_plan, compute_diff
from .engine import (
    PassState,
    ReconciliationConfig,
    ReconciliationDriver,
    scan_duplicates,
)
from .errors import IllegalTransitionError, LoadFailure, ReconciliationError, ValidationFailure
from .execute import ApplyOutcome, UpdateExecutor, WriteFailure
from .keys import IdentityKey, LedgerIndex, identity_key
from .normalize import (
    normalize_date,
    normalize_phone,
    normalize_region,
    normalize_status,
)
from .plan import CreatePlan, PlanPurpose, UpdatePlan, WritePlan
from .profiles import PROFILES, SyncProfile, TrackedField, get_profile
from .report import AmbiguousMatch, PassReport, ValidationIssue
from .resolve import MatchResult, MatchStatus, resolve

__all__ = [
    "PROFILES",
    "AmbiguousMatch",
    "ApplyOutcome",
    "CreatePlan",
    "DuplicateGroup",
    "IdentityKey",
    "IllegalTransitionError",
    "LedgerIndex",
    "LoadFailure",
    "MatchResult",
    "MatchStatus",
    "PassReport",
    "PassState",
    "PlanPurpose",
    "ReconciliationConfig",
    "ReconciliationDriver",
    "ReconciliationError",
    "SyncProfile",
    "TrackedField",
    "UpdateExecutor",
    "UpdatePlan",
    "ValidationFailure",
    "ValidationIssue",
    "WriteFailure",
    "WritePlan",
    "build_create_plan",
    "canonical_entities",
    "compute_diff",
    "detect_duplicates",
    "duplicate_mark_plans",
    "get_profile",
    "identity_key",
    "normalize_date",
    "normalize_phone",
    "normalize_region",
    "normalize_status",
    "pick_preferred",
    "resolve",
    "scan_duplicates",
    "select_canonical",
]
