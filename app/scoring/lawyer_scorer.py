# app/scoring/lawyer_scorer.py
"""
Lawyer Score Calculator
-------------------------------
Computes a composite lawyer score in [0, 1] from an aggregated record.

Formula:
    score = Σ (normalize_f(record.f) × w_f) / Σ w_f     clamped to [0, 1]

Only features present in both the weight table and the normalizer table
contribute; an empty (or all-zero) weight table scores 0.

Default weights are feature-importance coefficients from the offline
gradient-boosted model (sum = 1.0):
    completion_rate            0.612067
    tat_compliance_percent     0.184235
    avg_tat_days               0.166585
    reworks_per_case           0.015159
    complaints_per_case        0.010657
    cases_remaining            0.004215
    total_cases_ytd            0.003676
    allocation_status_encoded  0.003408
"""
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

import structlog

from app.scoring.utils import clamp

logger = structlog.get_logger(__name__)

DEFAULT_FEATURE_WEIGHTS: Dict[str, float] = {
    "completion_rate":           0.612067,
    "tat_compliance_percent":    0.184235,
    "avg_tat_days":              0.166585,
    "reworks_per_case":          0.015159,
    "complaints_per_case":       0.010657,
    "cases_remaining":           0.004215,
    "total_cases_ytd":           0.003676,
    "allocation_status_encoded": 0.003408,
}

# Each normalizer maps a raw aggregated value into [0, 1], higher is better
FEATURE_NORMALIZERS: Dict[str, Callable[[float], float]] = {
    "completion_rate":           lambda v: clamp(v),
    "tat_compliance_percent":    lambda v: clamp(v / 100),
    "avg_tat_days":              lambda v: clamp(1 - v / 30),
    "reworks_per_case":          lambda v: 1 - clamp(v),
    "complaints_per_case":       lambda v: 1 - clamp(v),
    "cases_remaining":           lambda v: clamp(1 - v / 100),
    "total_cases_ytd":           lambda v: clamp(v / 500),
    "allocation_status_encoded": lambda v: clamp(v / 4),
    "client_feedback_score":     lambda v: clamp(v / 5),
}


@dataclass
class ScoreBreakdown:
    """Output of LawyerScorer.explain()."""
    lawyer_score: float
    total_weight: float
    contributions: Dict[str, float]   # feature -> normalized value × weight


class LawyerScorer:
    """Weighted, normalized lawyer score with a swappable weight table."""

    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        self.weights: Dict[str, float] = dict(
            DEFAULT_FEATURE_WEIGHTS if weights is None else weights
        )
        ignored = sorted(set(self.weights) - set(FEATURE_NORMALIZERS))
        if ignored:
            logger.warning("unknown_score_features_ignored", features=ignored)

    @property
    def total_weight(self) -> float:
        return sum(w for f, w in self.weights.items() if f in FEATURE_NORMALIZERS)

    def explain(self, record) -> ScoreBreakdown:
        """
        Args:
            record: any object exposing the weighted feature names as
                    attributes (normally an AggregatedRecord).
        """
        weighted_sum = 0.0
        total_weight = 0.0
        contributions: Dict[str, float] = {}
        for feature, weight in self.weights.items():
            normalize = FEATURE_NORMALIZERS.get(feature)
            if normalize is None:
                continue
            value = normalize(float(getattr(record, feature)))
            contributions[feature] = value * weight
            weighted_sum += value * weight
            total_weight += weight

        if total_weight <= 0:
            logger.warning("empty_weight_table", lawyer_id=getattr(record, "lawyer_id", None))
            return ScoreBreakdown(lawyer_score=0.0, total_weight=0.0, contributions={})

        score = clamp(weighted_sum / total_weight)
        logger.debug(
            "lawyer_scored",
            lawyer_id=getattr(record, "lawyer_id", None),
            lawyer_score=score,
        )
        return ScoreBreakdown(
            lawyer_score=score,
            total_weight=total_weight,
            contributions=contributions,
        )

    def score(self, record) -> float:
        return self.explain(record).lawyer_score
