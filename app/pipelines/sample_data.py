"""
Sample Data Generator
app/pipelines/sample_data.py

Placeholder rows for header-only uploads. Rows use canonical column names
and go through the same feature engineering as real data; only this module
jitters values.
"""

from __future__ import annotations

import random
from typing import List, Optional

from app.pipelines.csv_parser import RawRow
from app.pipelines.feature_engineering import LEGAL_DOMAINS

SAMPLE_BRANCHES = ("Corporate", "Criminal", "Family", "Commercial")
SAMPLE_STATUSES = ("Available", "Allocated")


class SampleDataGenerator:
    """Generate jittered but plausible lawyer rows from an injected RNG."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def sample_row(self, index: int) -> RawRow:
        rng = self.rng
        cases_assigned = rng.randint(10, 59)
        cases_completed = int(cases_assigned * (0.6 + rng.random() * 0.3))
        return {
            "lawyer_id": f"SAMPLE-{index:03d}",
            "lawyer_name": f"Sample Lawyer {index}",
            "expertise_domains": rng.choice(LEGAL_DOMAINS),
            "branch_name": rng.choice(SAMPLE_BRANCHES),
            "cases_assigned": str(cases_assigned),
            "cases_completed": str(cases_completed),
            # fraction form, normalized to a percentage downstream
            "tat_compliance_percent": f"{rng.random() * 0.4 + 0.6:.4f}",
            "avg_tat_days": f"{rng.random() * 20 + 5:.2f}",
            "client_feedback_score": f"{rng.random() * 2 + 3:.2f}",
            "complaints_per_case": f"{rng.random() * 0.2:.4f}",
            "reworks_per_case": f"{rng.random() * 0.3:.4f}",
            "allocation_status": rng.choice(SAMPLE_STATUSES),
            "total_cases_ytd": str(cases_assigned * (3 + rng.randint(0, 2))),
        }

    def generate(self, count: int) -> List[RawRow]:
        return [self.sample_row(i + 1) for i in range(count)]
