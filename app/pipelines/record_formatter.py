"""
Record Formatter
app/pipelines/record_formatter.py

Maps an AggregatedRecord plus its score onto the external LawyerRecord shape.
Ratios are rounded to 4 decimals, percentage/rating-like figures to 2.
"""

from __future__ import annotations

from app.models.enumerations import AllocationStatus
from app.models.lawyer import LawyerRecord
from app.pipelines.aggregation import AggregatedRecord
from app.scoring.utils import clamp, round_half_up

RATIO_PLACES = 4
PERCENT_PLACES = 2

# Internal statuses outside the external vocabulary
OUTPUT_STATUS_MAP = {
    "busy": AllocationStatus.ALLOCATED,
    "on leave": AllocationStatus.PENDING,
}
_OUTPUT_STATUS_BY_LOWER = {s.value.lower(): s for s in AllocationStatus}


def to_output_status(status: str) -> AllocationStatus:
    key = (status or "").strip().lower()
    if key in _OUTPUT_STATUS_BY_LOWER:
        return _OUTPUT_STATUS_BY_LOWER[key]
    return OUTPUT_STATUS_MAP.get(key, AllocationStatus.AVAILABLE)


def _ratio(value: float) -> float:
    return round_half_up(value, RATIO_PLACES)


def _percent(value: float) -> float:
    return round_half_up(value, PERCENT_PLACES)


def format_lawyer_record(record: AggregatedRecord, lawyer_score: float) -> LawyerRecord:
    score = _ratio(clamp(lawyer_score))
    return LawyerRecord(
        lawyer_id=record.lawyer_id,
        lawyer_name=record.lawyer_name or None,
        branch_name=record.branch_name,
        expertise_domains=record.expertise_domains or None,
        allocation_month=record.allocation_month,
        case_id=str(record.case_id),
        cases_assigned=record.cases_assigned,
        cases_completed=record.cases_completed,
        completion_rate=_ratio(clamp(record.completion_rate)),
        cases_remaining=max(0, record.cases_remaining),
        performance_score=score,
        tat_compliance_percent=_percent(clamp(record.tat_compliance_percent, 0.0, 100.0)),
        avg_tat_days=_percent(max(0.0, record.avg_tat_days)),
        tat_flag=record.tat_flag,
        quality_check_flag=record.quality_check_flag == "Pass",
        client_feedback_score=_percent(record.client_feedback_score),
        feedback_flag=record.feedback_flag == "Positive",
        complaints_per_case=_ratio(max(0.0, record.complaints_per_case)),
        reworks_per_case=_ratio(max(0.0, record.reworks_per_case)),
        low_performance_flag=record.low_performance_flag,
        lawyer_score=score,
        quality_rating=_percent(record.client_feedback_score),
        allocation_status=to_output_status(record.allocation_status),
        total_cases_ytd=max(0, record.total_cases_ytd),
    )
