"""
Frontend page cache invalidation.

Marks a rendered page stale by calling the frontend's revalidation endpoint.

Configuration:
- FRONTEND_REVALIDATE_URL: Revalidation endpoint (unset disables invalidation)
- REVALIDATE_SECRET: Shared secret sent in X-Revalidate-Secret
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class PageCacheConfig:
    """Revalidation endpoint configuration from environment."""
    revalidate_url: str
    secret: Optional[str] = None
    timeout_seconds: float = 5.0

    @classmethod
    def from_env(cls) -> Optional["PageCacheConfig"]:
        revalidate_url = os.getenv("FRONTEND_REVALIDATE_URL")
        if not revalidate_url:
            return None

        return cls(
            revalidate_url=revalidate_url,
            secret=os.getenv("REVALIDATE_SECRET"),
        )


class PageCacheInvalidator:
    """Invalidates cached frontend renders by path."""

    def __init__(
        self,
        config: Optional[PageCacheConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            config: Endpoint configuration; None makes invalidation a logged no-op
            http_client: Optional client (tests inject one with a mock transport)
        """
        self.config = config
        self._http_client = http_client
        if config and http_client is None:
            self._http_client = httpx.Client(timeout=config.timeout_seconds)

    def revalidate_path(self, path: str) -> None:
        """
        Mark the cached render of ``path`` stale.

        Raises:
            httpx.HTTPError: If the frontend rejects or cannot be reached
        """
        if not self.config:
            logger.debug("Page cache invalidation not configured", extra={"path": path})
            return

        headers = {}
        if self.config.secret:
            headers["X-Revalidate-Secret"] = self.config.secret

        response = self._http_client.post(
            self.config.revalidate_url,
            json={"path": path},
            headers=headers,
        )
        response.raise_for_status()

        logger.info("page_cache.revalidated", extra={"path": path})
