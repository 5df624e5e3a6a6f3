"""
Service health checks.

Provides:
- Database connectivity
- Environment variable validation
- Service status reporting
"""

import os
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from career_insights.database.session import get_database_url, get_engine

logger = logging.getLogger(__name__)

SERVICE_NAME = "career-insights-api"

REQUIRED_VARS = [
    "DATABASE_URL",
    "CLERK_JWKS_URL",
]

# Missing optional vars degrade features, not the service
OPTIONAL_VARS = [
    "OPENAI_API_KEY",
    "FRONTEND_REVALIDATE_URL",
]


class HealthChecker:
    """Health check service for deployment probes."""

    def check_database(self) -> Dict[str, Any]:
        """
        Check database connectivity.

        Returns:
            Dict with 'status' (ok/error) and 'message'
        """
        if not get_database_url():
            return {
                "status": "error",
                "message": "DATABASE_URL not configured"
            }

        try:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            return {
                "status": "ok",
                "message": "Database connection successful"
            }
        except SQLAlchemyError as e:
            logger.error("Database connection failed", extra={"error": str(e)})
            return {
                "status": "error",
                "message": "Database connection failed"
            }

    def check_environment_variables(self) -> Dict[str, Any]:
        """
        Check required environment variables are present.

        Returns:
            Dict with 'status', 'present', and 'missing' lists
        """
        present = [var for var in REQUIRED_VARS + OPTIONAL_VARS if os.getenv(var)]
        missing = [var for var in REQUIRED_VARS if not os.getenv(var)]

        return {
            "status": "ok" if not missing else "error",
            "present": present,
            "missing": missing,
            "message": f"{len(present)} vars present, {len(missing)} missing"
        }

    def get_health_status(self) -> Dict[str, Any]:
        """
        Get comprehensive health status.

        Returns:
            Dict with overall status and component checks
        """
        db_check = self.check_database()
        env_check = self.check_environment_variables()

        overall_status = "ok"
        if db_check["status"] != "ok" or env_check["status"] != "ok":
            overall_status = "degraded"

        return {
            "status": overall_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "checks": {
                "database": db_check,
                "environment": env_check,
            }
        }

    def log_config_status(self) -> None:
        """Log which settings are present on startup (NO secret values)."""
        env_check = self.check_environment_variables()

        logger.info("Configuration status", extra={
            "vars_present": env_check["present"],
            "required_vars_missing": env_check["missing"],
        })

        if env_check["missing"]:
            logger.warning("Missing required environment variables", extra={
                "missing_vars": env_check["missing"]
            })


_health_checker: Optional[HealthChecker] = None


def get_health_checker() -> HealthChecker:
    """Get or create health checker instance."""
    global _health_checker
    if _health_checker is None:
        _health_checker = HealthChecker()
    return _health_checker
