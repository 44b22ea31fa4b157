"""
Aggregation
app/pipelines/aggregation.py

Groups ProcessedRecords by lawyer_id and reduces each group to a single
AggregatedRecord using a fixed per-field rule:

    first        lawyer_name, branch_name, branch_id, allocation_month,
                 allocation_month_num, max_capacity
    unique-join  expertise_domains (deduplicated, sorted, ", "-joined)
    sum          cases_assigned, cases_completed, cases_remaining,
                 rework_count, complaint_count, quality_flags
    mean         completion_rate, tat_compliance_percent, avg_tat_days,
                 client_feedback_score, complaints_per_case, reworks_per_case
    mode         tat_flag, tat_bucket, quality_check_flag, feedback_flag,
                 allocation_status, quality_rating  (ties -> first seen)
    mean->int    *_encoded, total_cases_ytd
    max          low_performance_flag, blacklist_status, allocation_date
    count        case_id (becomes the number of rows in the group)
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import structlog

from app.pipelines.feature_engineering import ProcessedRecord
from app.scoring.utils import mean, round_to_int

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AggregatedRecord:
    """One lawyer, reduced from every row that carried their lawyer_id."""
    lawyer_id: str
    lawyer_name: str
    expertise_domains: str
    branch_name: str
    branch_id: Optional[str]
    allocation_month: str
    allocation_month_num: int
    allocation_date: Optional[date]
    case_id: int

    cases_assigned: int
    cases_completed: int
    cases_remaining: int
    rework_count: int
    complaint_count: int
    quality_flags: int
    max_capacity: int
    total_cases_ytd: int

    completion_rate: float
    tat_compliance_percent: float
    avg_tat_days: float
    client_feedback_score: float
    complaints_per_case: float
    reworks_per_case: float

    tat_flag: str
    tat_bucket: str
    quality_check_flag: str
    feedback_flag: str
    allocation_status: str
    quality_rating: str

    allocation_status_encoded: int
    tat_flag_encoded: int
    feedback_flag_encoded: int
    quality_check_flag_encoded: int

    low_performance_flag: bool
    blacklist_status: bool


# ---------------------------------------------------------------------------
# Reducers
# ---------------------------------------------------------------------------

def first(values: Sequence[Any]) -> Any:
    return values[0]


def total(values: Sequence[Any]) -> Any:
    return sum(values)


def mode(values: Sequence[Any]) -> Any:
    """Most frequent value; ties go to the value seen first."""
    counts = Counter(values)
    top = max(counts.values())
    for value in values:
        if counts[value] == top:
            return value


def mean_int(values: Sequence[float]) -> int:
    return round_to_int(mean(values))


def any_flag(values: Sequence[bool]) -> bool:
    return any(values)


def latest_date(values: Sequence[Optional[date]]) -> Optional[date]:
    dates = [d for d in values if d is not None]
    return max(dates) if dates else None


def unique_join(values: Sequence[str]) -> str:
    """Union of comma-separated domain lists, deduplicated and sorted."""
    domains = set()
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part:
                domains.add(part)
    return ", ".join(sorted(domains))


def row_count(values: Sequence[Any]) -> int:
    return len(values)


AGGREGATION_RULES: Dict[str, Callable[[Sequence[Any]], Any]] = {
    "lawyer_name": first,
    "branch_name": first,
    "branch_id": first,
    "allocation_month": first,
    "allocation_month_num": first,
    "max_capacity": first,
    "expertise_domains": unique_join,
    "cases_assigned": total,
    "cases_completed": total,
    "cases_remaining": total,
    "rework_count": total,
    "complaint_count": total,
    "quality_flags": total,
    "completion_rate": mean,
    "tat_compliance_percent": mean,
    "avg_tat_days": mean,
    "client_feedback_score": mean,
    "complaints_per_case": mean,
    "reworks_per_case": mean,
    "tat_flag": mode,
    "tat_bucket": mode,
    "quality_check_flag": mode,
    "feedback_flag": mode,
    "allocation_status": mode,
    "quality_rating": mode,
    "allocation_status_encoded": mean_int,
    "tat_flag_encoded": mean_int,
    "feedback_flag_encoded": mean_int,
    "quality_check_flag_encoded": mean_int,
    "total_cases_ytd": mean_int,
    "low_performance_flag": any_flag,
    "blacklist_status": any_flag,
    "allocation_date": latest_date,
    "case_id": row_count,
}


def group_by_lawyer(records: Iterable[ProcessedRecord]) -> Dict[str, List[ProcessedRecord]]:
    """Group records by lawyer_id, keeping first-seen group and row order."""
    groups: Dict[str, List[ProcessedRecord]] = {}
    for record in records:
        groups.setdefault(record.lawyer_id, []).append(record)
    return groups


def reduce_group(lawyer_id: str, rows: Sequence[ProcessedRecord]) -> AggregatedRecord:
    if not rows:
        raise ValueError(f"Cannot aggregate an empty group for lawyer_id '{lawyer_id}'")
    values = {
        name: rule([getattr(row, name) for row in rows])
        for name, rule in AGGREGATION_RULES.items()
    }
    return AggregatedRecord(lawyer_id=lawyer_id, **values)


def aggregate_by_lawyer(records: Iterable[ProcessedRecord]) -> List[AggregatedRecord]:
    """One AggregatedRecord per distinct lawyer_id, in first-seen order."""
    groups = group_by_lawyer(records)
    aggregated = [reduce_group(lawyer_id, rows) for lawyer_id, rows in groups.items()]
    logger.info(
        "records_aggregated",
        input_rows=sum(len(rows) for rows in groups.values()),
        lawyers=len(aggregated),
    )
    return aggregated
