"""
Snowflake connection factory
app/services/snowflake.py
"""
from __future__ import annotations

import snowflake.connector

from app.config import get_settings


def get_snowflake_connection() -> snowflake.connector.SnowflakeConnection:
    """Open a Snowflake connection from application settings."""
    settings = get_settings()
    password = settings.SNOWFLAKE_PASSWORD
    return snowflake.connector.connect(
        account=settings.SNOWFLAKE_ACCOUNT,
        user=settings.SNOWFLAKE_USER,
        password=password.get_secret_value() if password else None,
        warehouse=settings.SNOWFLAKE_WAREHOUSE,
        database=settings.SNOWFLAKE_DATABASE,
        schema=settings.SNOWFLAKE_SCHEMA,
        role=settings.SNOWFLAKE_ROLE,
    )
