# tests/conftest.py

"""
Pytest Fixtures - Shared test configuration and CSV data for the pipeline and API

The app is always tested against the in-memory repository with Redis and the
remote preprocessor switched off; individual tests patch those back in.
"""

import os

os.environ["STORAGE_BACKEND"] = "memory"
os.environ.pop("PREPROCESS_URL", None)
os.environ.pop("SCORE_WEIGHTS", None)

import random
from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_lawyer_repository, get_remote_processor
from app.main import app
from app.pipelines.feature_engineering import FeatureEngineer
from app.pipelines.runner import LawyerScoringPipeline
from app.pipelines.sample_data import SampleDataGenerator
from app.repositories.lawyer_repository import InMemoryLawyerRepository
from app.scoring.lawyer_scorer import LawyerScorer


# =============================================================================
# REDIS - disabled unless a test patches it in
# =============================================================================

@pytest.fixture(autouse=True)
def no_redis():
    """Make every cache lookup behave as if Redis were unreachable."""
    with patch("app.services.ingestion_service.get_cache", return_value=None), \
            patch("app.routers.health.get_cache", return_value=None):
        yield


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def repository():
    """Fresh in-memory repository per test."""
    return InMemoryLawyerRepository()


@pytest.fixture
def client(repository):
    """TestClient wired to a fresh in-memory repository and no remote processor."""
    app.dependency_overrides[get_lawyer_repository] = lambda: repository
    app.dependency_overrides[get_remote_processor] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# PIPELINE FIXTURES
# =============================================================================

@pytest.fixture
def fixed_today():
    return date(2026, 3, 15)


@pytest.fixture
def feature_engineer(fixed_today):
    """Feature engineer with a seeded RNG and a pinned "today"."""
    return FeatureEngineer(rng=random.Random(42), today=fixed_today)


@pytest.fixture
def pipeline(feature_engineer):
    return LawyerScoringPipeline(
        feature_engineer=feature_engineer,
        scorer=LawyerScorer(),
        sample_generator=SampleDataGenerator(rng=random.Random(7)),
        sample_rows=5,
    )


# =============================================================================
# CSV FIXTURES
# =============================================================================

@pytest.fixture
def two_row_csv():
    """Two rows for one lawyer; the second row alone is low-performing."""
    return (
        "lawyer_id,cases_assigned,cases_completed,tat_compliance_percent\n"
        "L1,10,8,90\n"
        "L1,10,4,60\n"
    )


@pytest.fixture
def multi_lawyer_csv():
    """Three lawyers across two branches, mixed header spellings."""
    return (
        "Lawyer_ID,Lawyer_Name,Branch_Name,Expertise_Domains,Cases_Assigned,Cases_Completed,"
        "TAT_Compliance_Percent,Avg_TAT_Days,Client_Feedback_Score,Allocation_Status\n"
        'L100,Asha Rao,Mumbai,"Tax Law, Corporate Law",20,18,0.95,6,4.6,Allocated\n'
        "L100,Asha Rao,Mumbai,Civil Law,10,9,92,7,4.4,Allocated\n"
        "L200,Ben Ortiz,Delhi,Criminal Law,12,4,55,21,3.1,Busy\n"
        "L300,Chen Li,Mumbai,Family Law,8,7,85,9,4.0,On Leave\n"
    )


@pytest.fixture
def header_only_csv():
    return "lawyer_id,lawyer_name,cases_assigned,cases_completed\n"
