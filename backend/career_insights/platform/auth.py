"""
Clerk session verification.

Resolves the session subject (Clerk user id) for a request.

Handles:
- Session token lookup (Authorization: Bearer header, then __session cookie)
- RS256 signature verification against the Clerk JWKS
- Optional issuer and authorized-party (azp) checks

SECURITY:
- Only verified tokens produce a subject; anything else is anonymous
- Keys are fetched from the JWKS URL configured in the environment
- Verification failures are logged without the token itself
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import jwt
from fastapi import Request

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "__session"


@dataclass
class ClerkConfig:
    """Clerk configuration from environment."""
    jwks_url: str
    issuer: Optional[str] = None
    authorized_parties: list[str] = field(default_factory=list)
    leeway_seconds: int = 5

    @classmethod
    def from_env(cls) -> Optional["ClerkConfig"]:
        """Load configuration from environment variables."""
        jwks_url = os.getenv("CLERK_JWKS_URL")

        if not jwks_url:
            logger.warning("Clerk JWKS URL not configured; all requests are anonymous")
            return None

        parties = os.getenv("CLERK_AUTHORIZED_PARTIES", "")
        return cls(
            jwks_url=jwks_url,
            issuer=os.getenv("CLERK_ISSUER") or None,
            authorized_parties=[p.strip() for p in parties.split(",") if p.strip()],
            leeway_seconds=int(os.getenv("CLERK_LEEWAY_SECONDS", "5")),
        )


class SessionVerificationError(Exception):
    """Raised when a session token fails verification."""
    pass


def extract_session_token(request: Request) -> Optional[str]:
    """Return the raw session token from header or cookie, if present."""
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    return request.cookies.get(SESSION_COOKIE_NAME) or None


class ClerkSessionVerifier:
    """
    Verifies Clerk session tokens.

    Signing keys are resolved by kid through PyJWKClient, which caches them.
    """

    def __init__(self, config: ClerkConfig, jwk_client: Optional[jwt.PyJWKClient] = None):
        """
        Args:
            config: ClerkConfig with JWKS location and claim checks
            jwk_client: Optional preconfigured key client (tests inject one)
        """
        self.config = config
        self._jwk_client = jwk_client or jwt.PyJWKClient(config.jwks_url, cache_keys=True)

    def verify(self, token: str) -> dict:
        """
        Verify a session token and return its claims.

        Raises:
            SessionVerificationError: If signature, expiry or claims are invalid
        """
        try:
            signing_key = self._jwk_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                issuer=self.config.issuer,
                leeway=self.config.leeway_seconds,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.PyJWTError as e:
            raise SessionVerificationError(str(e)) from e

        azp = claims.get("azp")
        if self.config.authorized_parties and azp not in self.config.authorized_parties:
            raise SessionVerificationError(f"Unauthorized party: {azp}")

        return claims

    def get_subject(self, request: Request) -> Optional[str]:
        """
        Return the session subject for a request, or None if unauthenticated.
        """
        token = extract_session_token(request)
        if not token:
            return None

        try:
            claims = self.verify(token)
        except SessionVerificationError as e:
            logger.info(
                "Session token rejected",
                extra={"reason": str(e), "path": request.url.path},
            )
            return None

        return claims.get("sub") or None
