"""
Industry insight model.

One row per industry, holding AI-generated market analytics. Rows are created
on first reference by a user profile and refreshed by the insight refresh job
once next_update has passed.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from sqlalchemy import Column, DateTime, Enum as SAEnum, Float, Index, JSON, String

from career_insights.config.profile import next_insight_update
from career_insights.db_base import Base
from career_insights.models.base import TimestampMixin, generate_uuid


class DemandLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class MarketOutlook(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


# Fields filled from the generator output
GENERATED_FIELDS = (
    "salary_ranges",
    "growth_rate",
    "demand_level",
    "top_skills",
    "market_outlook",
    "key_trends",
    "recommended_skills",
)


class IndustryInsight(Base, TimestampMixin):
    """
    AI-generated analytics for an industry.

    The unique constraint on industry is the only guard against two
    concurrent first references both inserting a row.
    """

    __tablename__ = "industry_insights"

    id = Column(String(255), primary_key=True, default=generate_uuid)
    industry = Column(String(255), nullable=False, unique=True)

    salary_ranges = Column(JSON, nullable=False, default=list)
    growth_rate = Column(Float, nullable=False)
    demand_level = Column(
        SAEnum(DemandLevel, values_callable=lambda enum_cls: [e.value for e in enum_cls]),
        nullable=False,
    )
    top_skills = Column(JSON, nullable=False, default=list)
    market_outlook = Column(
        SAEnum(MarketOutlook, values_callable=lambda enum_cls: [e.value for e in enum_cls]),
        nullable=False,
    )
    key_trends = Column(JSON, nullable=False, default=list)
    recommended_skills = Column(JSON, nullable=False, default=list)

    last_updated = Column(DateTime(timezone=True), nullable=False)
    next_update = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_industry_insights_next_update", "next_update"),
    )

    @classmethod
    def from_generated(
        cls, industry: str, data: Mapping[str, Any], now: datetime
    ) -> "IndustryInsight":
        """Build a new row from generator output."""
        insight = cls(industry=industry)
        insight.apply_generated(data, now)
        return insight

    def apply_generated(self, data: Mapping[str, Any], now: datetime) -> None:
        """Overwrite the generated fields and restart the refresh window."""
        for field_name in GENERATED_FIELDS:
            setattr(self, field_name, data[field_name])
        self.demand_level = DemandLevel(self.demand_level)
        self.market_outlook = MarketOutlook(self.market_outlook)
        self.last_updated = now
        self.next_update = next_insight_update(now)

    def __repr__(self) -> str:
        return (
            f"<IndustryInsight(industry={self.industry}, "
            f"next_update={self.next_update.isoformat() if self.next_update else None})>"
        )
