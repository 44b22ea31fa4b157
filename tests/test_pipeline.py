# tests/test_pipeline.py

"""
Pipeline Runner Tests - end-to-end CSV to scored LawyerRecords
"""

import random

import pytest

from app.core.exceptions import NoDataRowsError, NoValidRowsError
from app.pipelines.sample_data import SampleDataGenerator


class TestEndToEnd:

    def test_two_rows_one_lawyer(self, pipeline, two_row_csv):
        result = pipeline.run(two_row_csv)
        assert result.rows_total == 2
        assert result.rows_processed == 2
        assert result.rows_failed == 0
        assert result.synthesized is False

        [record] = result.records
        assert record.lawyer_id == "L1"
        assert record.cases_assigned == 20
        assert record.cases_completed == 12
        assert record.completion_rate == pytest.approx(0.6)
        assert record.tat_compliance_percent == pytest.approx(75.0)
        assert record.low_performance_flag is True
        assert record.case_id == "2"
        assert 0.0 <= record.lawyer_score <= 1.0

    def test_multi_lawyer(self, pipeline, multi_lawyer_csv):
        result = pipeline.run(multi_lawyer_csv)
        by_id = {r.lawyer_id: r for r in result.records}
        assert list(by_id) == ["L100", "L200", "L300"]

        asha = by_id["L100"]
        assert asha.cases_assigned == 30
        assert asha.expertise_domains == "Civil Law, Corporate Law, Tax Law"
        assert asha.tat_compliance_percent == pytest.approx(93.5)
        assert asha.allocation_status == "Allocated"
        assert asha.low_performance_flag is False

        assert by_id["L200"].low_performance_flag is True
        assert by_id["L200"].allocation_status == "Allocated"
        assert by_id["L300"].allocation_status == "Pending"
        assert asha.lawyer_score > by_id["L200"].lawyer_score

    def test_semicolon_file(self, pipeline):
        result = pipeline.run("lawyer_id;cases_assigned;cases_completed\nS1;4;4\n")
        assert result.records[0].completion_rate == 1.0

    def test_semicolon_file_decimal_commas(self, pipeline):
        content = (
            "lawyer_id;cases_assigned;cases_completed;tat_compliance_percent;client_feedback_score;avg_tat_days\n"
            "L1;10;8;92,5;4,5;12,5\n"
        )
        [record] = pipeline.run(content).records
        assert record.tat_compliance_percent == pytest.approx(92.5)
        assert record.client_feedback_score == pytest.approx(4.5)
        assert record.avg_tat_days == pytest.approx(12.5)
        assert record.quality_rating == pytest.approx(4.5)
        assert record.tat_flag == "Green"

    def test_comma_file_domains_keep_commas(self, pipeline):
        content = 'lawyer_id,expertise_domains,client_feedback_score\nL1,"Tax Law, Civil Law",4.5\n'
        [record] = pipeline.run(content).records
        assert record.expertise_domains == "Civil Law, Tax Law"
        assert record.client_feedback_score == pytest.approx(4.5)


class TestRowFailures:

    def test_bad_rows_skipped_and_counted(self, pipeline):
        content = "lawyer_id,cases_assigned\nL1,5\nL2,5,extra\nL3,2\n"
        result = pipeline.run(content)
        assert [r.lawyer_id for r in result.records] == ["L1", "L3"]
        assert result.rows_total == 3
        assert result.rows_processed == 2
        assert result.rows_failed == 1
        assert result.row_errors[0].row_number == 2

    def test_all_rows_failed(self, pipeline):
        with pytest.raises(NoValidRowsError) as exc_info:
            pipeline.run("a,b\n1,2,3\n4,5,6\n")
        assert exc_info.value.rows_failed == 2


class TestHeaderOnly:

    def test_raises_without_synthesis(self, pipeline, header_only_csv):
        with pytest.raises(NoDataRowsError):
            pipeline.run(header_only_csv)

    def test_synthesized_samples(self, pipeline, header_only_csv):
        result = pipeline.run(header_only_csv, synthesize_samples=True)
        assert result.synthesized is True
        assert result.rows_total == 5
        assert [r.lawyer_id for r in result.records] == [
            "SAMPLE-001", "SAMPLE-002", "SAMPLE-003", "SAMPLE-004", "SAMPLE-005",
        ]
        for record in result.records:
            assert 60.0 <= record.tat_compliance_percent <= 100.0
            assert record.cases_completed <= record.cases_assigned


class TestSampleDataGenerator:

    def test_ranges(self):
        rows = SampleDataGenerator(rng=random.Random(1)).generate(20)
        assert len(rows) == 20
        for row in rows:
            assigned = int(row["cases_assigned"])
            assert 10 <= assigned <= 59
            assert 0.6 * assigned - 1 <= int(row["cases_completed"]) <= 0.9 * assigned
            assert 0.6 <= float(row["tat_compliance_percent"]) <= 1.0
            assert 3.0 <= float(row["client_feedback_score"]) <= 5.0

    def test_seeded_generation_repeats(self):
        first = SampleDataGenerator(rng=random.Random(5)).generate(3)
        second = SampleDataGenerator(rng=random.Random(5)).generate(3)
        assert first == second
