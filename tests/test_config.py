# tests/test_config.py

"""
Settings Tests - defaults and validators
"""

import pytest
from pydantic import ValidationError

from app.config import Settings
from app.scoring.lawyer_scorer import FEATURE_NORMALIZERS


class TestDefaults:

    def test_defaults(self):
        s = Settings()
        assert s.STORAGE_BACKEND == "memory"
        assert s.CACHE_TTL_LAWYERS == 300
        assert s.MAX_UPLOAD_BYTES == 5 * 1024 * 1024
        assert s.SAMPLE_ROW_COUNT == 5
        assert s.SCORE_WEIGHTS is None

    def test_every_scored_feature_accepted(self):
        weights = {feature: 1.0 for feature in FEATURE_NORMALIZERS}
        assert Settings(SCORE_WEIGHTS=weights).SCORE_WEIGHTS == weights


class TestValidators:

    def test_score_weights_accepted(self):
        s = Settings(SCORE_WEIGHTS={"completion_rate": 0.7, "avg_tat_days": 0.3})
        assert s.SCORE_WEIGHTS["completion_rate"] == 0.7

    def test_score_weights_from_env_json(self, monkeypatch):
        monkeypatch.setenv("SCORE_WEIGHTS", '{"completion_rate": 1.0}')
        assert Settings().SCORE_WEIGHTS == {"completion_rate": 1.0}

    def test_accepted_features_follow_scorer_table(self, monkeypatch):
        monkeypatch.setitem(FEATURE_NORMALIZERS, "billable_hours", lambda v: v)
        assert Settings(SCORE_WEIGHTS={"billable_hours": 1.0}).SCORE_WEIGHTS == {"billable_hours": 1.0}
        monkeypatch.delitem(FEATURE_NORMALIZERS, "billable_hours")
        with pytest.raises(ValidationError, match="billable_hours"):
            Settings(SCORE_WEIGHTS={"billable_hours": 1.0})

    def test_unknown_score_feature(self):
        with pytest.raises(ValidationError, match="Unknown scoring features"):
            Settings(SCORE_WEIGHTS={"shoe_size": 1.0})

    def test_negative_weight(self):
        with pytest.raises(ValidationError, match="non-negative"):
            Settings(SCORE_WEIGHTS={"completion_rate": -1.0})

    def test_snowflake_requires_credentials(self, monkeypatch):
        for name in ("SNOWFLAKE_ACCOUNT", "SNOWFLAKE_USER", "SNOWFLAKE_PASSWORD"):
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(ValidationError, match="Snowflake backend requires"):
            Settings(STORAGE_BACKEND="snowflake")

    def test_snowflake_with_credentials(self):
        s = Settings(
            STORAGE_BACKEND="snowflake",
            SNOWFLAKE_ACCOUNT="acct",
            SNOWFLAKE_USER="svc",
            SNOWFLAKE_PASSWORD="secret",
        )
        assert s.SNOWFLAKE_PASSWORD.get_secret_value() == "secret"

    def test_debug_forbidden_in_production(self):
        with pytest.raises(ValidationError, match="DEBUG"):
            Settings(APP_ENV="production", DEBUG=True)

    def test_invalid_storage_backend(self):
        with pytest.raises(ValidationError):
            Settings(STORAGE_BACKEND="postgres")
