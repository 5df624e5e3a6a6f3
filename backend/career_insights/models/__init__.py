"""
Database models.

Importing this package registers every table on Base.metadata.
"""

from career_insights.models.base import TimestampMixin, generate_uuid
from career_insights.models.industry_insight import (
    IndustryInsight,
    DemandLevel,
    MarketOutlook,
    GENERATED_FIELDS,
)
from career_insights.models.user import User

__all__ = [
    "TimestampMixin",
    "generate_uuid",
    "IndustryInsight",
    "DemandLevel",
    "MarketOutlook",
    "GENERATED_FIELDS",
    "User",
]
