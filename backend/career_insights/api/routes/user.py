"""
User profile API routes.

Provides endpoints for:
- Updating the signed-in user's profile
- Checking onboarding status

SECURITY:
- The user is identified only by the verified Clerk session subject
- Requests without a session fail with 401 before any data access
- Failures return a fixed message; details stay in server logs
"""

from fastapi import APIRouter, Depends

from career_insights.api.dependencies.profile import (
    get_user_profile_service,
    require_session_subject,
)
from career_insights.api.schemas.user import (
    OnboardingStatusResponse,
    ProfileUpdateRequest,
    UserResponse,
)
from career_insights.services.user_profile_service import (
    ProfileUpdate,
    UserProfileService,
)

router = APIRouter(prefix="/api/user", tags=["user"])


@router.put(
    "/profile",
    response_model=UserResponse,
)
def update_profile(
    body: ProfileUpdateRequest,
    subject: str = Depends(require_session_subject),
    service: UserProfileService = Depends(get_user_profile_service),
):
    """
    Update the signed-in user's profile.

    Generates industry insights the first time any user selects an industry.
    """
    user = service.update_user(
        subject,
        ProfileUpdate(
            industry=body.industry,
            experience=body.experience,
            bio=body.bio,
            skills=body.skills,
        ),
    )
    return UserResponse.model_validate(user)


@router.get(
    "/onboarding-status",
    response_model=OnboardingStatusResponse,
)
def get_onboarding_status(
    subject: str = Depends(require_session_subject),
    service: UserProfileService = Depends(get_user_profile_service),
):
    """Whether the signed-in user has completed onboarding."""
    status = service.get_onboarding_status(subject)
    return OnboardingStatusResponse(is_onboarded=status.is_onboarded)
