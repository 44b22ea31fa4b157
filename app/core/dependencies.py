"""
Dependencies - Lawyer Performance Scoring
app/core/dependencies.py

FastAPI dependency injection for the repository, scorer, pipeline and
ingestion service. Tests override these via app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends

from app.config import get_settings
from app.pipelines.feature_engineering import FeatureEngineer
from app.pipelines.runner import LawyerScoringPipeline
from app.pipelines.sample_data import SampleDataGenerator
from app.repositories.lawyer_repository import (
    InMemoryLawyerRepository,
    LawyerRepository,
    SnowflakeLawyerRepository,
)
from app.scoring.lawyer_scorer import LawyerScorer
from app.services.ingestion_service import IngestionService
from app.services.remote_processor import RemoteProcessor


@lru_cache()
def get_lawyer_repository() -> LawyerRepository:
    """Get cached repository for the configured STORAGE_BACKEND."""
    if get_settings().STORAGE_BACKEND == "snowflake":
        return SnowflakeLawyerRepository()
    return InMemoryLawyerRepository()


@lru_cache()
def get_lawyer_scorer() -> LawyerScorer:
    """Get cached LawyerScorer using SCORE_WEIGHTS when set."""
    return LawyerScorer(weights=get_settings().SCORE_WEIGHTS)


@lru_cache()
def get_remote_processor():
    settings = get_settings()
    if not settings.PREPROCESS_URL:
        return None
    return RemoteProcessor(settings.PREPROCESS_URL, timeout=settings.PREPROCESS_TIMEOUT_SECONDS)


def get_pipeline(scorer: LawyerScorer = Depends(get_lawyer_scorer)) -> LawyerScoringPipeline:
    """Fresh pipeline per request; the feature engineer pins today's date."""
    return LawyerScoringPipeline(
        feature_engineer=FeatureEngineer(),
        scorer=scorer,
        sample_generator=SampleDataGenerator(),
        sample_rows=get_settings().SAMPLE_ROW_COUNT,
    )


def get_ingestion_service(
    pipeline: LawyerScoringPipeline = Depends(get_pipeline),
    repository: LawyerRepository = Depends(get_lawyer_repository),
    remote_processor=Depends(get_remote_processor),
) -> IngestionService:
    return IngestionService(
        pipeline=pipeline,
        repository=repository,
        remote_processor=remote_processor,
        settings=get_settings(),
    )
