"""FastAPI dependencies for session resolution and the profile service."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import sessionmaker

from career_insights.database.session import get_db_session_factory
from career_insights.platform.auth import ClerkConfig, ClerkSessionVerifier
from career_insights.platform.errors import AuthenticationError
from career_insights.services.insight_generator import InsightGenerator, InsightGeneratorConfig
from career_insights.services.page_cache import PageCacheConfig, PageCacheInvalidator
from career_insights.services.user_profile_service import UserProfileService


@lru_cache(maxsize=1)
def get_session_verifier() -> Optional[ClerkSessionVerifier]:
    config = ClerkConfig.from_env()
    if config is None:
        return None
    return ClerkSessionVerifier(config)


@lru_cache(maxsize=1)
def get_insight_generator() -> Optional[InsightGenerator]:
    config = InsightGeneratorConfig.from_env()
    if config is None:
        return None
    return InsightGenerator(config)


@lru_cache(maxsize=1)
def get_page_cache() -> PageCacheInvalidator:
    return PageCacheInvalidator(PageCacheConfig.from_env())


def get_session_subject(
    request: Request,
    verifier: Optional[ClerkSessionVerifier] = Depends(get_session_verifier),
) -> Optional[str]:
    """Session subject for the request, or None when unauthenticated."""
    if verifier is None:
        return None
    return verifier.get_subject(request)


def require_session_subject(
    subject: Optional[str] = Depends(get_session_subject),
) -> str:
    """
    Session subject for the request.

    Declared ahead of the service dependency on each route so that
    anonymous requests get 401 before any database setup runs.

    Raises:
        AuthenticationError: No verified session
    """
    if not subject:
        raise AuthenticationError()
    return subject


def get_user_profile_service(
    session_factory: sessionmaker = Depends(get_db_session_factory),
    insight_generator: Optional[InsightGenerator] = Depends(get_insight_generator),
    page_cache: PageCacheInvalidator = Depends(get_page_cache),
) -> UserProfileService:
    return UserProfileService(
        session_factory=session_factory,
        insight_generator=insight_generator,
        page_cache=page_cache,
    )
