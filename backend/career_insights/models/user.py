"""
User model.

Users are created by the sign-up sync when Clerk reports a new account.
This service only reads them and updates their profile fields.
"""

from sqlalchemy import Column, ForeignKey, Integer, JSON, String, Text

from career_insights.db_base import Base
from career_insights.models.base import TimestampMixin, generate_uuid


class User(Base, TimestampMixin):
    """
    Application user keyed by the Clerk user id.

    industry points at IndustryInsight.industry; the insight row is created
    lazily the first time any user selects that industry.
    """

    __tablename__ = "users"

    id = Column(String(255), primary_key=True, default=generate_uuid)
    clerk_user_id = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    image_url = Column(String(1024), nullable=True)

    # Profile
    industry = Column(
        String(255),
        ForeignKey("industry_insights.industry"),
        nullable=True,
        index=True,
    )
    experience = Column(Integer, nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)

    @property
    def is_onboarded(self) -> bool:
        return bool(self.industry)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, clerk_user_id={self.clerk_user_id}, industry={self.industry})>"
