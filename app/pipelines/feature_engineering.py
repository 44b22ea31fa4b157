"""
Feature Engineering
app/pipelines/feature_engineering.py

Turns one raw CSV row into one fully-typed ProcessedRecord:

    1. completion_rate       = cases_completed / cases_assigned   (0 if none assigned)
    2. cases_remaining       = max(0, cases_assigned - cases_completed)
    3. complaints_per_case   = complaint_count / cases_assigned
    4. reworks_per_case      = rework_count / cases_assigned
    5. tat_compliance_percent normalized into [0, 100]
    6. tat_flag              = source column, else Green iff compliance >= 80
    7. categorical encodings (status, tat/feedback/quality flags)
    8. allocation_month_num  from allocation_date (default 1)
    9. low_performance_flag  = completion_rate < 0.5
                               OR tat_compliance_percent < 70
                               OR complaints_per_case > 0.2

Placeholder identity values (id, name, domain) come from an injected
random.Random so runs are reproducible under a fixed seed.
"""

from __future__ import annotations

import random
import string
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

import structlog

from app.pipelines.field_resolver import MISSING, resolve_field
from app.pipelines.utils import parse_bool, parse_count, parse_date, parse_float, parse_number
from app.scoring.utils import clamp, round_to_int

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Fixed encodings and thresholds
# ---------------------------------------------------------------------------

ALLOCATION_STATUS_ENCODING = {
    "Available": 0,
    "Allocated": 1,
    "Pending": 2,
    "Busy": 3,
    "On Leave": 4,
}
_STATUS_BY_LOWER = {k.lower(): k for k in ALLOCATION_STATUS_ENCODING}

LEGAL_DOMAINS = (
    "Corporate Law",
    "Criminal Law",
    "Family Law",
    "Commercial Law",
    "Civil Law",
    "Tax Law",
)

DEFAULT_BRANCH = "Corporate"
DEFAULT_CLIENT_FEEDBACK = 4.0
DEFAULT_MAX_CAPACITY = 50
DEFAULT_TAT_BUCKET = "Normal"
DEFAULT_QUALITY_RATING = "Good"

TAT_GREEN_THRESHOLD = 80.0

LOW_COMPLETION_RATE = 0.5
LOW_TAT_COMPLIANCE = 70.0
HIGH_COMPLAINTS_PER_CASE = 0.2

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class ProcessedRecord:
    """One CSV row after feature engineering."""
    # Identity
    lawyer_id: str
    lawyer_name: str
    expertise_domains: str
    branch_name: str
    branch_id: Optional[str]
    case_id: Optional[str]

    # Temporal
    allocation_month: str
    allocation_date: Optional[date]
    allocation_month_num: int

    # Volume
    cases_assigned: int
    cases_completed: int
    cases_remaining: int
    total_cases_ytd: int
    max_capacity: int

    # Ratios
    completion_rate: float
    complaint_count: int
    rework_count: int
    complaints_per_case: float
    reworks_per_case: float

    # Quality / timeliness
    tat_compliance_percent: float
    avg_tat_days: float
    client_feedback_score: float
    quality_flags: int

    # Categorical
    tat_flag: str
    tat_bucket: str
    quality_check_flag: str
    feedback_flag: str
    quality_rating: str
    allocation_status: str

    # Encodings
    allocation_status_encoded: int
    tat_flag_encoded: int
    feedback_flag_encoded: int
    quality_check_flag_encoded: int

    # Flags
    blacklist_status: bool
    low_performance_flag: bool


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

def normalize_tat_compliance(raw: Optional[float]) -> float:
    """
    Normalize a TAT compliance reading into [0, 100].

        r > 100        -> 100 (anomalous, logged)
        1 < r <= 100   -> r (already a percentage)
        0 <= r <= 1    -> r * 100 (a fraction)
        otherwise      -> 0
    """
    if raw is None:
        return 0.0
    if raw > 100:
        logger.warning("tat_compliance_capped", raw_value=raw)
        value = 100.0
    elif raw > 1:
        value = raw
    elif raw >= 0:
        value = raw * 100
    else:
        logger.warning("tat_compliance_invalid", raw_value=raw)
        value = 0.0
    return clamp(value, 0.0, 100.0)


def encode_allocation_status(status: str) -> int:
    """Fixed category code; unrecognized statuses encode as Available (0)."""
    code = ALLOCATION_STATUS_ENCODING.get(status)
    if code is None:
        logger.warning("allocation_status_unrecognized", allocation_status=status)
        return 0
    return code


def is_low_performance(
    completion_rate: float,
    tat_compliance_percent: float,
    complaints_per_case: float,
) -> bool:
    return (
        completion_rate < LOW_COMPLETION_RATE
        or tat_compliance_percent < LOW_TAT_COMPLIANCE
        or complaints_per_case > HIGH_COMPLAINTS_PER_CASE
    )


def _per_case(count: float, cases_assigned: int) -> float:
    return count / cases_assigned if cases_assigned > 0 else 0.0


def _normalize_choice(value, choices: Mapping[str, str], default: str) -> str:
    if value is MISSING:
        return default
    return choices.get(str(value).strip().lower(), default)


_TAT_FLAGS = {"red": "Red", "green": "Green"}
_QUALITY_CHECK = {
    "pass": "Pass", "passed": "Pass", "true": "Pass", "yes": "Pass", "1": "Pass",
    "fail": "Fail", "failed": "Fail", "false": "Fail", "no": "Fail", "0": "Fail",
}
_FEEDBACK = {
    "positive": "Positive", "neutral": "Neutral", "negative": "Negative",
    "true": "Positive", "1": "Positive", "false": "Negative", "0": "Negative",
}


class FeatureEngineer:
    """Stateless row transformer; randomness and "today" are injected."""

    def __init__(self, rng: Optional[random.Random] = None, today: Optional[date] = None):
        self.rng = rng or random.Random()
        self.today = today

    # -- placeholders -------------------------------------------------------

    def _suffix(self, length: int = 9) -> str:
        return "".join(self.rng.choice(_SUFFIX_ALPHABET) for _ in range(length))

    def placeholder_lawyer_id(self) -> str:
        return f"L{self._suffix()}"

    def placeholder_lawyer_name(self) -> str:
        return f"Lawyer_{self._suffix()}"

    def placeholder_domain(self) -> str:
        return self.rng.choice(LEGAL_DOMAINS)

    # -- main entry ---------------------------------------------------------

    def engineer(self, row: Mapping[str, object], decimal_comma: bool = False) -> ProcessedRecord:
        """`decimal_comma` reads "4,5" as 4.5 (semicolon-delimited sources)."""
        dc = decimal_comma
        lawyer_id = resolve_field(row, "lawyer_id")
        lawyer_name = resolve_field(row, "lawyer_name")
        domains = resolve_field(row, "expertise_domains")
        lawyer_id = lawyer_id if lawyer_id is not MISSING else self.placeholder_lawyer_id()
        lawyer_name = lawyer_name if lawyer_name is not MISSING else self.placeholder_lawyer_name()
        domains = domains if domains is not MISSING else self.placeholder_domain()

        branch_name = resolve_field(row, "branch_name") or DEFAULT_BRANCH
        branch_id = resolve_field(row, "branch_id") or None
        case_id = resolve_field(row, "case_id") or None

        # Volume
        cases_assigned = parse_count(resolve_field(row, "cases_assigned"), decimal_comma=dc)
        cases_completed = parse_count(resolve_field(row, "cases_completed"), decimal_comma=dc)
        cases_remaining = max(0, cases_assigned - cases_completed)
        completion_rate = _per_case(cases_completed, cases_assigned)

        ytd = resolve_field(row, "total_cases_ytd")
        total_cases_ytd = parse_count(ytd, default=cases_assigned, decimal_comma=dc)

        complaint_count, complaints_per_case = self._count_and_rate(
            row, "complaint_count", "complaints_per_case", cases_assigned, dc
        )
        rework_count, reworks_per_case = self._count_and_rate(
            row, "rework_count", "reworks_per_case", cases_assigned, dc
        )

        # Quality / timeliness
        tat_compliance_percent = normalize_tat_compliance(
            parse_number(resolve_field(row, "tat_compliance_percent"), dc)
        )
        avg_tat_days = max(0.0, parse_float(resolve_field(row, "avg_tat_days"), decimal_comma=dc))
        client_feedback_score = parse_float(
            resolve_field(row, "client_feedback_score"), default=DEFAULT_CLIENT_FEEDBACK, decimal_comma=dc
        )

        # Categorical
        derived_tat_flag = "Green" if tat_compliance_percent >= TAT_GREEN_THRESHOLD else "Red"
        tat_flag = _normalize_choice(resolve_field(row, "tat_flag"), _TAT_FLAGS, derived_tat_flag)
        quality_check_flag = _normalize_choice(
            resolve_field(row, "quality_check_flag"), _QUALITY_CHECK, "Pass"
        )
        feedback_flag = _normalize_choice(resolve_field(row, "feedback_flag"), _FEEDBACK, "Positive")

        raw_status = resolve_field(row, "allocation_status")
        if raw_status is MISSING:
            allocation_status = "Available"
        else:
            allocation_status = _STATUS_BY_LOWER.get(raw_status.lower(), raw_status)

        # Temporal
        allocation_date = parse_date(resolve_field(row, "allocation_date") or None)
        allocation_month_num = allocation_date.month if allocation_date else 1
        allocation_month = resolve_field(row, "allocation_month")
        if allocation_month is MISSING:
            reference = allocation_date or self.today or date.today()
            allocation_month = reference.strftime("%Y-%m")

        return ProcessedRecord(
            lawyer_id=lawyer_id,
            lawyer_name=lawyer_name,
            expertise_domains=domains,
            branch_name=branch_name,
            branch_id=branch_id,
            case_id=case_id,
            allocation_month=allocation_month,
            allocation_date=allocation_date,
            allocation_month_num=allocation_month_num,
            cases_assigned=cases_assigned,
            cases_completed=cases_completed,
            cases_remaining=cases_remaining,
            total_cases_ytd=total_cases_ytd,
            max_capacity=parse_count(resolve_field(row, "max_capacity"), DEFAULT_MAX_CAPACITY, dc),
            completion_rate=completion_rate,
            complaint_count=complaint_count,
            rework_count=rework_count,
            complaints_per_case=complaints_per_case,
            reworks_per_case=reworks_per_case,
            tat_compliance_percent=tat_compliance_percent,
            avg_tat_days=avg_tat_days,
            client_feedback_score=client_feedback_score,
            quality_flags=parse_count(resolve_field(row, "quality_flags"), decimal_comma=dc),
            tat_flag=tat_flag,
            tat_bucket=resolve_field(row, "tat_bucket") or DEFAULT_TAT_BUCKET,
            quality_check_flag=quality_check_flag,
            feedback_flag=feedback_flag,
            quality_rating=resolve_field(row, "quality_rating") or DEFAULT_QUALITY_RATING,
            allocation_status=allocation_status,
            allocation_status_encoded=encode_allocation_status(allocation_status),
            tat_flag_encoded=1 if tat_flag == "Red" else 0,
            feedback_flag_encoded=1 if feedback_flag == "Positive" else 0,
            quality_check_flag_encoded=1 if quality_check_flag == "Pass" else 0,
            blacklist_status=parse_bool(resolve_field(row, "blacklist_status") or None),
            low_performance_flag=is_low_performance(
                completion_rate, tat_compliance_percent, complaints_per_case
            ),
        )

    @staticmethod
    def _count_and_rate(row, count_field: str, rate_field: str, cases_assigned: int,
                        decimal_comma: bool = False):
        """Prefer an explicit count; fall back to a per-case rate column."""
        count = resolve_field(row, count_field)
        if count is not MISSING:
            value = parse_count(count, decimal_comma=decimal_comma)
            return value, _per_case(value, cases_assigned)
        rate = parse_number(resolve_field(row, rate_field), decimal_comma)
        if rate is None or rate < 0:
            return 0, 0.0
        return round_to_int(rate * cases_assigned), rate
