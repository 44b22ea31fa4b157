from pydantic import BaseModel, ConfigDict, Field, model_validator
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Optional, List, Any

from app.models.enumerations import AllocationStatus, TatFlag


# Legacy column names still produced by older exports and stored rows
LEGACY_FIELD_NAMES = {
    "domain": "expertise_domains",
    "expertise_domain": "expertise_domains",
    "name": "lawyer_name",
}


class LawyerRecord(BaseModel):
    """
    Scored, aggregated lawyer record.

    This is the shape persisted by the repository and read by the dashboard;
    field names are fixed.
    """

    model_config = ConfigDict(use_enum_values=True)

    lawyer_id: str = Field(..., min_length=1, description="Lawyer identifier (aggregation key)")
    lawyer_name: Optional[str] = Field(default=None)
    branch_name: str = Field(..., description="Branch or practice group")
    expertise_domains: Optional[str] = Field(
        default=None,
        description="Comma-joined, sorted, deduplicated domains",
    )
    allocation_month: str = Field(..., description="YYYY-MM or free text")
    case_id: str = Field(..., description="Number of source rows, stringified")

    cases_assigned: int = Field(..., ge=0)
    cases_completed: int = Field(..., ge=0)
    completion_rate: float = Field(..., ge=0, le=1)
    cases_remaining: int = Field(..., ge=0)
    performance_score: float = Field(..., ge=0, le=1)
    tat_compliance_percent: float = Field(..., ge=0, le=100)
    avg_tat_days: float = Field(..., ge=0)

    tat_flag: TatFlag
    quality_check_flag: bool
    client_feedback_score: float
    feedback_flag: bool
    complaints_per_case: float = Field(..., ge=0)
    reworks_per_case: float = Field(..., ge=0)
    low_performance_flag: bool

    lawyer_score: float = Field(..., ge=0, le=1)
    quality_rating: float
    allocation_status: AllocationStatus
    total_cases_ytd: int = Field(..., ge=0)

    @model_validator(mode="before")
    @classmethod
    def adapt_legacy_names(cls, data: Any) -> Any:
        """Read legacy column names (e.g. `domain`) into the canonical fields."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, canonical in LEGACY_FIELD_NAMES.items():
            if legacy in data:
                value = data.pop(legacy)
                if data.get(canonical) in (None, ""):
                    data[canonical] = value
        if "case_id" in data and data["case_id"] is not None:
            data["case_id"] = str(data["case_id"])
        return data


class LawyerResponse(LawyerRecord):
    """Persisted lawyer record with server-assigned identity."""

    model_config = ConfigDict(use_enum_values=True, from_attributes=True)

    id: UUID = Field(default_factory=uuid4, description="Server-assigned record id")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Server-assigned insertion timestamp (UTC)",
    )


class LawyerListResponse(BaseModel):
    """Response for listing lawyers (newest first, no pagination)."""
    items: List[LawyerResponse]
    total: int


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
