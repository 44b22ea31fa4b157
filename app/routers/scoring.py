"""
Scoring API Router
app/routers/scoring.py

Endpoints:
  GET  /api/v1/scoring/weights   - Active feature weight table and its total
"""

from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.dependencies import get_lawyer_scorer
from app.scoring.lawyer_scorer import DEFAULT_FEATURE_WEIGHTS, FEATURE_NORMALIZERS, LawyerScorer

router = APIRouter(prefix="/api/v1", tags=["Scoring"])


class WeightsResponse(BaseModel):
    """Weight table the scorer is using right now."""
    weights: Dict[str, float]
    total_weight: float
    is_default: bool
    scored_features: list[str]


@router.get(
    "/scoring/weights",
    response_model=WeightsResponse,
    summary="Active scoring weights",
)
async def get_scoring_weights(
    scorer: LawyerScorer = Depends(get_lawyer_scorer),
) -> WeightsResponse:
    return WeightsResponse(
        weights=scorer.weights,
        total_weight=round(scorer.total_weight, 6),
        is_default=scorer.weights == DEFAULT_FEATURE_WEIGHTS,
        scored_features=[f for f in scorer.weights if f in FEATURE_NORMALIZERS],
    )
