"""
Pipeline Runner
app/pipelines/runner.py

Runs the full CSV-to-score pipeline over one in-memory upload:

    STEP 1: parse       raw text -> header + RawRows
    STEP 2: engineer    RawRow -> ProcessedRecord (bad rows skipped)
    STEP 3: aggregate   ProcessedRecords -> one AggregatedRecord per lawyer
    STEP 4: score       AggregatedRecord -> lawyer_score in [0, 1]
    STEP 5: format      -> LawyerRecord

Synchronous and side-effect free; reading the upload and persisting the
result happen outside.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from app.core.exceptions import NoDataRowsError, NoValidRowsError, RowError
from app.models.lawyer import LawyerRecord
from app.pipelines.aggregation import aggregate_by_lawyer
from app.pipelines.csv_parser import SEMICOLON, ParsedTable, parse_csv_content
from app.pipelines.feature_engineering import FeatureEngineer, ProcessedRecord
from app.pipelines.record_formatter import format_lawyer_record
from app.pipelines.sample_data import SampleDataGenerator
from app.scoring.lawyer_scorer import LawyerScorer

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_ROWS = 5


@dataclass
class PipelineResult:
    """Output of LawyerScoringPipeline.run()."""
    records: List[LawyerRecord]
    rows_total: int
    rows_processed: int
    rows_failed: int
    row_errors: List[RowError] = field(default_factory=list)
    synthesized: bool = False


class LawyerScoringPipeline:
    """Parse, engineer, aggregate, score and format one CSV upload."""

    def __init__(
        self,
        feature_engineer: Optional[FeatureEngineer] = None,
        scorer: Optional[LawyerScorer] = None,
        sample_generator: Optional[SampleDataGenerator] = None,
        sample_rows: int = DEFAULT_SAMPLE_ROWS,
    ):
        self.feature_engineer = feature_engineer or FeatureEngineer()
        self.scorer = scorer or LawyerScorer()
        self.sample_generator = sample_generator or SampleDataGenerator()
        self.sample_rows = sample_rows

    def run(self, content: str, synthesize_samples: bool = False) -> PipelineResult:
        """
        Raises:
            InputError subclasses: empty/header-only input, or every row failed.
        """
        synthesized = False
        try:
            table = parse_csv_content(content)
        except NoDataRowsError as e:
            if not synthesize_samples:
                raise
            logger.info(f"Only headers found, generating {self.sample_rows} sample rows")
            rows = self.sample_generator.generate(self.sample_rows)
            table = ParsedTable(
                headers=e.headers,
                delimiter=",",
                rows=rows,
                row_numbers=list(range(1, len(rows) + 1)),
            )
            synthesized = True

        processed, row_errors = self._engineer_rows(table)
        rows_total = table.data_row_count

        if not processed:
            raise NoValidRowsError(rows_failed=len(row_errors))

        records = self.score_records(processed)

        logger.info(
            f"Processing complete: {len(processed)} successful, {len(row_errors)} failed, "
            f"{len(records)} lawyers"
        )
        return PipelineResult(
            records=records,
            rows_total=rows_total,
            rows_processed=len(processed),
            rows_failed=len(row_errors),
            row_errors=row_errors,
            synthesized=synthesized,
        )

    def _engineer_rows(self, table: ParsedTable):
        processed: List[ProcessedRecord] = []
        row_errors: List[RowError] = list(table.errors)
        decimal_comma = table.delimiter == SEMICOLON
        for row_number, row in zip(table.row_numbers, table.rows):
            try:
                processed.append(self.feature_engineer.engineer(row, decimal_comma))
            except (ValueError, TypeError, ArithmeticError) as e:
                row_errors.append(RowError(row_number, str(e)))
        for error in row_errors:
            logger.warning(f"Skipped row {error.row_number}: {error.reason}")
        row_errors.sort(key=lambda err: err.row_number)
        return processed, row_errors

    def score_records(self, processed: List[ProcessedRecord]) -> List[LawyerRecord]:
        return [
            format_lawyer_record(record, self.scorer.score(record))
            for record in aggregate_by_lawyer(processed)
        ]
