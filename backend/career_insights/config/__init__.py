"""Configuration module for backend services."""

from career_insights.config.profile import (
    INSIGHT_REFRESH_BATCH_SIZE,
    INSIGHT_REFRESH_DRY_RUN,
    INSIGHT_REFRESH_INTERVAL_DAYS,
    PROFILE_REVALIDATE_PATH,
    TRANSACTION_TIMEOUT_SECONDS,
    next_insight_update,
)

__all__ = [
    "INSIGHT_REFRESH_BATCH_SIZE",
    "INSIGHT_REFRESH_DRY_RUN",
    "INSIGHT_REFRESH_INTERVAL_DAYS",
    "PROFILE_REVALIDATE_PATH",
    "TRANSACTION_TIMEOUT_SECONDS",
    "next_insight_update",
]
