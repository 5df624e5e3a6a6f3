"""
User profile service.

Handles:
- Profile updates, creating the industry insight on first reference
- Onboarding status checks

The profile update runs in two phases:
1. Outside any transaction: check whether the industry insight exists and,
   if not, call the insight generator. The generator is slow and must not
   consume the transaction budget.
2. Inside a bounded transaction: re-check the insight (a concurrent request
   may have created it meanwhile), insert it if still missing, then update
   the user row.

If two requests both pass the re-check before either commits, the unique
constraint on industry_insights.industry fails one of them. That request
reports the generic failure and is not retried.

SECURITY:
- The session subject comes from the verified session token only
- Downstream error messages are logged, never returned to callers
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from career_insights.config.profile import PROFILE_REVALIDATE_PATH
from career_insights.database.transaction import bounded_transaction
from career_insights.models.base import utc_now
from career_insights.models.industry_insight import IndustryInsight
from career_insights.models.user import User
from career_insights.platform.errors import (
    AuthenticationError,
    NotFoundError,
    OperationFailedError,
)
from career_insights.services.insight_generator import (
    IndustryInsightData,
    InsightGenerationError,
    InsightGenerator,
)
from career_insights.services.page_cache import PageCacheInvalidator

logger = logging.getLogger(__name__)

UPDATE_FAILED_MESSAGE = "Failed to update profile"
ONBOARDING_FAILED_MESSAGE = "Failed to check onboarding status"


@dataclass
class ProfileUpdate:
    """Profile fields submitted by the user."""
    industry: str
    experience: Optional[int] = None
    bio: Optional[str] = None
    skills: List[str] = field(default_factory=list)


@dataclass
class OnboardingStatus:
    is_onboarded: bool


class UserProfileService:
    """
    Profile operations for the signed-in user.

    Sessions are opened from the injected factory per phase so no session
    is held across the insight generator call.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        insight_generator: Optional[InsightGenerator],
        page_cache: PageCacheInvalidator,
        transaction_timeout_seconds: Optional[float] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            session_factory: Produces sessions; must use expire_on_commit=False
            insight_generator: Produces insight data for new industries; None
                when generation is not configured (only known industries succeed)
            page_cache: Invalidates the profile page after an update
            transaction_timeout_seconds: Write transaction budget (default from config)
            clock: Returns the current UTC time
        """
        self.session_factory = session_factory
        self.insight_generator = insight_generator
        self.page_cache = page_cache
        self.transaction_timeout_seconds = transaction_timeout_seconds
        self.clock = clock

    # =========================================================================
    # Public Operations
    # =========================================================================

    def update_user(self, subject: Optional[str], data: ProfileUpdate) -> User:
        """
        Update the signed-in user's profile.

        Args:
            subject: Session subject (Clerk user id), None if unauthenticated
            data: Submitted profile fields

        Returns:
            The updated User (detached)

        Raises:
            AuthenticationError: No session
            NotFoundError: No user row for the subject
            OperationFailedError: Any downstream failure
        """
        clerk_user_id = self._require_subject(subject)
        user = self._find_user(clerk_user_id, UPDATE_FAILED_MESSAGE)

        try:
            generated = self._prepare_insight(data.industry)

            with bounded_transaction(
                self.session_factory, self.transaction_timeout_seconds
            ) as tx:
                self._ensure_insight(tx, data.industry, generated)
                updated_user = self._apply_profile(tx, user.id, data)

            self.page_cache.revalidate_path(PROFILE_REVALIDATE_PATH)

        except Exception as e:
            logger.error(
                "user_profile.update_failed",
                extra={
                    "user_id": user.id,
                    "industry": data.industry,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
                exc_info=True,
            )
            raise OperationFailedError(UPDATE_FAILED_MESSAGE) from e

        logger.info(
            "user_profile.updated",
            extra={"user_id": updated_user.id, "industry": updated_user.industry},
        )
        return updated_user

    def get_onboarding_status(self, subject: Optional[str]) -> OnboardingStatus:
        """
        Report whether the signed-in user has chosen an industry.

        Raises:
            AuthenticationError: No session
            NotFoundError: No user row for the subject
            OperationFailedError: Lookup failed
        """
        clerk_user_id = self._require_subject(subject)

        try:
            with self.session_factory() as session:
                user = (
                    session.query(User)
                    .filter(User.clerk_user_id == clerk_user_id)
                    .first()
                )
        except SQLAlchemyError as e:
            logger.error(
                "user_profile.onboarding_check_failed",
                extra={"clerk_user_id": clerk_user_id, "error": str(e)},
                exc_info=True,
            )
            raise OperationFailedError(ONBOARDING_FAILED_MESSAGE) from e

        if user is None:
            raise NotFoundError("User")

        return OnboardingStatus(is_onboarded=user.is_onboarded)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _require_subject(subject: Optional[str]) -> str:
        if not subject:
            raise AuthenticationError()
        return subject

    def _find_user(self, clerk_user_id: str, failure_message: str) -> User:
        try:
            with self.session_factory() as session:
                user = (
                    session.query(User)
                    .filter(User.clerk_user_id == clerk_user_id)
                    .first()
                )
        except SQLAlchemyError as e:
            logger.error(
                "user_profile.lookup_failed",
                extra={"clerk_user_id": clerk_user_id, "error": str(e)},
                exc_info=True,
            )
            raise OperationFailedError(failure_message) from e

        if user is None:
            raise NotFoundError("User")
        return user

    def _prepare_insight(self, industry: str) -> Optional[IndustryInsightData]:
        """Generate insight data if the industry has none yet. Runs outside any transaction."""
        with self.session_factory() as session:
            exists = (
                session.query(IndustryInsight.id)
                .filter(IndustryInsight.industry == industry)
                .first()
                is not None
            )

        if exists:
            return None

        if self.insight_generator is None:
            raise InsightGenerationError("Insight generation is not configured")

        return self.insight_generator.generate(industry)

    def _ensure_insight(
        self,
        tx: Session,
        industry: str,
        generated: Optional[IndustryInsightData],
    ) -> IndustryInsight:
        """Re-check for the insight inside the transaction and create it if still missing."""
        insight = (
            tx.query(IndustryInsight)
            .filter(IndustryInsight.industry == industry)
            .first()
        )

        if insight is not None:
            if generated is not None:
                logger.info(
                    "industry_insight.created_concurrently",
                    extra={"industry": industry},
                )
            return insight

        if generated is None:
            # Existed at pre-check, gone now
            logger.warning("industry_insight.disappeared", extra={"industry": industry})
            raise LookupError(f"Industry insight for {industry!r} was removed during the update")

        insight = IndustryInsight.from_generated(industry, generated.to_record(), self.clock())
        tx.add(insight)
        tx.flush()

        logger.info(
            "industry_insight.created",
            extra={"industry": industry, "next_update": insight.next_update.isoformat()},
        )
        return insight

    @staticmethod
    def _apply_profile(tx: Session, user_id: str, data: ProfileUpdate) -> User:
        user = tx.get(User, user_id)
        if user is None:
            raise NotFoundError("User")

        user.industry = data.industry
        user.experience = data.experience
        user.bio = data.bio
        user.skills = list(data.skills)
        tx.flush()
        return user
