"""
Shared pytest fixtures.

Database tests run against in-memory SQLite through real SQLAlchemy sessions
configured like production (autoflush=False, expire_on_commit=False).
StaticPool keeps every session on the same in-memory database.
"""

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import career_insights.models  # noqa: F401  (registers tables)
from career_insights.db_base import Base
from career_insights.models.user import User
from career_insights.services.insight_generator import IndustryInsightData, InsightGenerator
from career_insights.services.page_cache import PageCacheInvalidator

from career_insights.tests.sample_data import SAMPLE_INSIGHT


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


@pytest.fixture
def db(session_factory):
    """Session for arranging and asserting test data."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(session_factory):
    """Insert and return a committed user."""

    def _make_user(clerk_user_id: str = None, **profile) -> User:
        clerk_user_id = clerk_user_id or f"user_{uuid.uuid4().hex[:12]}"
        user = User(
            clerk_user_id=clerk_user_id,
            email=f"{clerk_user_id}@example.com",
            name="Test User",
            **profile,
        )
        with session_factory() as session:
            session.add(user)
            session.commit()
        return user

    return _make_user


@pytest.fixture
def insight_data():
    return IndustryInsightData.model_validate(SAMPLE_INSIGHT)


@pytest.fixture
def mock_generator(insight_data):
    """Insight generator returning SAMPLE_INSIGHT."""
    generator = MagicMock(spec=InsightGenerator)
    generator.generate.return_value = insight_data
    return generator


@pytest.fixture
def mock_page_cache():
    return MagicMock(spec=PageCacheInvalidator)
