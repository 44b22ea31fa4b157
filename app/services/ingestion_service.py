"""
Ingestion Service - Lawyer Performance Scoring
app/services/ingestion_service.py

Upload orchestration:
    decode -> size check -> remote preprocessing (if configured)
           -> local pipeline fallback -> persist -> invalidate cache

Also serves the cached lawyer list and the dashboard summary.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import redis

from app.config import Settings, get_settings
from app.core.exceptions import (
    InputError,
    ProcessingFailedError,
    RemoteProcessingError,
    RowError,
    UnreadableEncodingError,
    UploadTooLargeError,
)
from app.models.enumerations import AllocationStatus, ProcessingMethod
from app.models.lawyer import LawyerListResponse, LawyerRecord, LawyerResponse
from app.pipelines.runner import LawyerScoringPipeline
from app.repositories.lawyer_repository import LawyerRepository
from app.scoring.utils import mean, round_half_up
from app.services.cache import CACHE_KEY_LAWYERS_ALL, CACHE_PATTERN_LAWYERS, get_cache
from app.services.remote_processor import RemoteProcessor

logger = logging.getLogger(__name__)


@dataclass
class ProcessingOutcome:
    """What one upload produced and how."""
    method: ProcessingMethod
    records: List[LawyerRecord]
    rows_total: int = 0
    rows_processed: int = 0
    rows_failed: int = 0
    row_errors: List[RowError] = field(default_factory=list)
    remote_error: Optional[str] = None
    synthesized: bool = False


@dataclass
class LawyerFilters:
    branch_name: Optional[str] = None
    low_performance: Optional[bool] = None
    search: Optional[str] = None
    min_score: Optional[float] = None

    def matches(self, lawyer: LawyerResponse) -> bool:
        if self.branch_name and lawyer.branch_name != self.branch_name:
            return False
        if self.low_performance is not None and lawyer.low_performance_flag != self.low_performance:
            return False
        if self.min_score is not None and lawyer.lawyer_score < self.min_score:
            return False
        if self.search:
            term = self.search.strip().lower()
            haystack = (
                lawyer.lawyer_id,
                lawyer.lawyer_name or "",
                lawyer.branch_name,
                lawyer.expertise_domains or "",
            )
            if not any(term in value.lower() for value in haystack):
                return False
        return True


def decode_upload(data: bytes, max_bytes: int) -> str:
    """UTF-8 with an optional BOM; anything else is rejected."""
    if len(data) > max_bytes:
        raise UploadTooLargeError(size=len(data), limit=max_bytes)
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnreadableEncodingError(f"CSV file must be UTF-8 encoded: {e.reason}") from e


class IngestionService:
    """Runs uploads through remote or local processing and persists results."""

    def __init__(
        self,
        pipeline: LawyerScoringPipeline,
        repository: LawyerRepository,
        remote_processor: Optional[RemoteProcessor] = None,
        settings: Optional[Settings] = None,
    ):
        self.pipeline = pipeline
        self.repository = repository
        self.remote_processor = remote_processor
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    async def process(
        self,
        data: bytes,
        filename: str = "upload.csv",
        synthesize_samples: bool = False,
    ) -> ProcessingOutcome:
        content = decode_upload(data, self.settings.MAX_UPLOAD_BYTES)

        remote_error: Optional[str] = None
        if self.remote_processor is not None:
            try:
                records = await self.remote_processor.process(data, filename)
                logger.info(f"Remote preprocessing returned {len(records)} lawyers for {filename}")
                return ProcessingOutcome(
                    method=ProcessingMethod.REMOTE,
                    records=records,
                    rows_total=len(records),
                    rows_processed=len(records),
                )
            except RemoteProcessingError as e:
                remote_error = e.message
                logger.warning(f"Remote preprocessing failed, using local processing: {remote_error}")

        try:
            result = self.pipeline.run(content, synthesize_samples=synthesize_samples)
        except InputError:
            raise
        except Exception as e:
            logger.exception(f"Local processing failed for {filename}")
            raise ProcessingFailedError(remote_error=remote_error, local_error=str(e)) from e

        return ProcessingOutcome(
            method=ProcessingMethod.LOCAL,
            records=result.records,
            rows_total=result.rows_total,
            rows_processed=result.rows_processed,
            rows_failed=result.rows_failed,
            row_errors=result.row_errors,
            remote_error=remote_error,
            synthesized=result.synthesized,
        )

    async def ingest(
        self,
        data: bytes,
        filename: str = "upload.csv",
        synthesize_samples: bool = True,
    ) -> ProcessingOutcome:
        """Process an upload, persist its records and invalidate cached lists."""
        outcome = await self.process(data, filename, synthesize_samples)
        self.repository.insert(outcome.records)
        self._invalidate()
        logger.info(
            f"Ingested {len(outcome.records)} lawyers from {filename} via {outcome.method.value}"
        )
        return outcome

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_lawyers(self, filters: Optional[LawyerFilters] = None) -> List[LawyerResponse]:
        lawyers = self._all_lawyers()
        if filters is None:
            return lawyers
        return [lawyer for lawyer in lawyers if filters.matches(lawyer)]

    def summary(self) -> Dict:
        lawyers = self._all_lawyers()
        scores_by_branch: Dict[str, List[float]] = defaultdict(list)
        for lawyer in lawyers:
            scores_by_branch[lawyer.branch_name].append(lawyer.lawyer_score)

        return {
            "total_lawyers": len(lawyers),
            "average_lawyer_score": round_half_up(mean(l.lawyer_score for l in lawyers), 4),
            "low_performers": sum(1 for l in lawyers if l.low_performance_flag),
            "allocated": sum(
                1 for l in lawyers if l.allocation_status == AllocationStatus.ALLOCATED.value
            ),
            "branch_average_scores": {
                branch: round_half_up(mean(scores), 4)
                for branch, scores in sorted(scores_by_branch.items())
            },
        }

    def clear(self) -> int:
        removed = self.repository.clear()
        self._invalidate()
        logger.info(f"Cleared {removed} lawyers")
        return removed

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def _all_lawyers(self) -> List[LawyerResponse]:
        cache = get_cache()
        if cache:
            try:
                cached = cache.get(CACHE_KEY_LAWYERS_ALL, LawyerListResponse)
                if cached is not None:
                    logger.debug(f"Cache HIT for {CACHE_KEY_LAWYERS_ALL}")
                    return cached.items
                logger.debug(f"Cache MISS for {CACHE_KEY_LAWYERS_ALL}")
            except redis.RedisError as e:
                logger.warning(f"Cache read failed for {CACHE_KEY_LAWYERS_ALL}: {e}")

        lawyers = [LawyerResponse.model_validate(row) for row in self.repository.list_all()]

        if cache:
            try:
                cache.set(
                    CACHE_KEY_LAWYERS_ALL,
                    LawyerListResponse(items=lawyers, total=len(lawyers)),
                    self.settings.CACHE_TTL_LAWYERS,
                )
            except redis.RedisError as e:
                logger.warning(f"Cache write failed for {CACHE_KEY_LAWYERS_ALL}: {e}")
        return lawyers

    def _invalidate(self) -> None:
        cache = get_cache()
        if cache:
            try:
                cache.delete_pattern(CACHE_PATTERN_LAWYERS)
            except redis.RedisError as e:
                logger.warning(f"Cache invalidation failed: {e}")
