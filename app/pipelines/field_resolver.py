"""
Field Resolver
app/pipelines/field_resolver.py

Upstream CSV exports are not header-normalized: the same column shows up as
`cases_assigned`, `Cases_Assigned` or `Cases Assigned`. Every logical field
owns a static priority list of spellings; `resolve_field` returns the first
non-empty value.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Tuple


class _Missing:
    """Sentinel for "no candidate column had a value"."""

    _instance: Optional["_Missing"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

# Words always written in capitals in Title_Case exports
_ACRONYMS = {"tat": "TAT", "id": "ID", "ytd": "YTD"}


def spelling_variants(canonical: str) -> Tuple[str, ...]:
    """
    Header spellings for a snake_case field name, most canonical first.

    >>> spelling_variants("avg_tat_days")
    ('avg_tat_days', 'Avg_TAT_Days', 'Avg TAT Days', 'AvgTATDays', 'avg tat days', 'AVG_TAT_DAYS')
    """
    words = canonical.split("_")
    titled = [_ACRONYMS.get(w, w.capitalize()) for w in words]
    variants = [
        canonical,
        "_".join(titled),
        " ".join(titled),
        "".join(titled),
        " ".join(words),
        canonical.upper(),
    ]
    return tuple(dict.fromkeys(variants))


def _candidates(canonical: str, *aliases: str) -> Tuple[str, ...]:
    spellings = list(spelling_variants(canonical))
    for alias in aliases:
        spellings.extend(spelling_variants(alias) if "_" in alias or alias.islower() else (alias,))
    return tuple(dict.fromkeys(spellings))


# =============================================================================
# CANDIDATE TABLE - one static priority list per logical field
# =============================================================================

FIELD_CANDIDATES: Dict[str, Tuple[str, ...]] = {
    "lawyer_id": _candidates("lawyer_id", "attorney_id", "LawyerID"),
    "lawyer_name": _candidates(
        "lawyer_name", "name", "LawyerName", "lawyer", "attorney_name",
    ),
    "expertise_domains": _candidates(
        "expertise_domains", "expertise_domain", "domain", "specialization",
        "practice_area", "area_of_expertise", "legal_domain", "practice_areas",
        "specialty", "field", "area",
    ),
    "branch_name": _candidates("branch_name", "branch"),
    "branch_id": _candidates("branch_id"),
    "allocation_month": _candidates("allocation_month"),
    "allocation_date": _candidates("allocation_date"),
    "case_id": _candidates("case_id"),
    "cases_assigned": _candidates("cases_assigned"),
    "cases_completed": _candidates("cases_completed"),
    "tat_compliance_percent": _candidates("tat_compliance_percent", "tat_compliance"),
    "avg_tat_days": _candidates("avg_tat_days"),
    "client_feedback_score": _candidates(
        "client_feedback_score", "avg_client_feedback_score",
    ),
    "complaint_count": _candidates("complaint_count", "total_complaints", "complaints"),
    "rework_count": _candidates("rework_count", "total_reworks", "reworks"),
    "complaints_per_case": _candidates("complaints_per_case"),
    "reworks_per_case": _candidates("reworks_per_case"),
    "allocation_status": _candidates("allocation_status", "status"),
    "total_cases_ytd": _candidates("total_cases_ytd"),
    "tat_flag": _candidates("tat_flag"),
    "tat_bucket": _candidates("tat_bucket"),
    "quality_check_flag": _candidates("quality_check_flag"),
    "quality_flags": _candidates("quality_flags"),
    "quality_rating": _candidates("quality_rating"),
    "feedback_flag": _candidates("feedback_flag"),
    "max_capacity": _candidates("max_capacity"),
    "blacklist_status": _candidates("blacklist_status", "blacklisted"),
}


def resolve_candidates(row: Mapping[str, object], candidates: Iterable[str]):
    """Return the trimmed value of the first candidate with a non-empty value, else MISSING."""
    for key in candidates:
        value = row.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return MISSING


def resolve_field(row: Mapping[str, object], field: str):
    """Resolve a logical field through its registered candidate list."""
    try:
        candidates = FIELD_CANDIDATES[field]
    except KeyError:
        raise KeyError(f"No candidate spellings registered for field '{field}'") from None
    return resolve_candidates(row, candidates)
