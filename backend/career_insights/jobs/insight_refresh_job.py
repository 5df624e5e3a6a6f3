"""
Industry Insight Refresh Job.

Regenerates industry insights whose next_update has passed. Profile updates
only create missing insights; this job is what keeps existing ones current.

Run as a periodic cron job:
    python -m career_insights.jobs.insight_refresh_job

Configuration:
- INSIGHT_REFRESH_BATCH_SIZE: Insights refreshed per run (default: 25)
- INSIGHT_REFRESH_DRY_RUN: Set to "false" to enable writes (default: "true")
"""

import logging
import sys
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import sessionmaker

from career_insights.config.profile import (
    INSIGHT_REFRESH_BATCH_SIZE,
    INSIGHT_REFRESH_DRY_RUN,
)
from career_insights.database.session import get_session_factory
from career_insights.database.transaction import bounded_transaction
from career_insights.models.base import utc_now
from career_insights.models.industry_insight import IndustryInsight
from career_insights.services.insight_generator import (
    InsightGenerator,
    InsightGeneratorConfig,
)

logger = logging.getLogger(__name__)


class InsightRefreshJob:
    """
    Refreshes stale industry insights.

    Process:
    1. Select insights with next_update <= now, oldest first
    2. For each, generate fresh data with no transaction open
    3. Write the new data in a short bounded transaction
    4. Failures are counted per industry and do not stop the batch
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        insight_generator: InsightGenerator,
        batch_size: int = INSIGHT_REFRESH_BATCH_SIZE,
        dry_run: bool = INSIGHT_REFRESH_DRY_RUN,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            session_factory: Produces sessions
            insight_generator: Produces fresh insight data
            batch_size: Maximum insights refreshed per run
            dry_run: If True, only report which insights are due
            clock: Returns the current UTC time
        """
        self.session_factory = session_factory
        self.insight_generator = insight_generator
        self.batch_size = batch_size
        self.dry_run = dry_run
        self.clock = clock
        self.stats: Dict = {
            "due": 0,
            "refreshed": 0,
            "failed": 0,
            "failed_industries": [],
        }

    def find_due_industries(self) -> List[str]:
        """Return industries whose insights are due, oldest first."""
        now = self.clock()
        with self.session_factory() as session:
            rows = (
                session.query(IndustryInsight.industry)
                .filter(IndustryInsight.next_update <= now)
                .order_by(IndustryInsight.next_update.asc())
                .limit(self.batch_size)
                .all()
            )
        return [row.industry for row in rows]

    def refresh_industry(self, industry: str) -> bool:
        """
        Regenerate one industry's insight.

        Returns:
            True if the row was updated, False if it no longer needed it
        """
        data = self.insight_generator.generate(industry)

        with bounded_transaction(self.session_factory) as tx:
            insight = (
                tx.query(IndustryInsight)
                .filter(IndustryInsight.industry == industry)
                .first()
            )
            # Another run may have refreshed or removed it meanwhile
            if insight is None or insight.next_update > self._comparable_now(insight):
                return False

            insight.apply_generated(data.to_record(), self.clock())
            tx.flush()

        return True

    def run(self) -> Dict:
        """Execute one refresh pass and return stats."""
        industries = self.find_due_industries()
        self.stats["due"] = len(industries)

        logger.info(
            "insight_refresh.started",
            extra={"due": len(industries), "dry_run": self.dry_run},
        )

        if self.dry_run:
            logger.info("insight_refresh.dry_run", extra={"industries": industries})
            return self.stats

        for industry in industries:
            try:
                if self.refresh_industry(industry):
                    self.stats["refreshed"] += 1
            except Exception as e:
                self.stats["failed"] += 1
                self.stats["failed_industries"].append(industry)
                logger.error(
                    "insight_refresh.industry_failed",
                    extra={"industry": industry, "error": str(e)},
                    exc_info=True,
                )

        logger.info(
            "insight_refresh.completed",
            extra={
                "refreshed": self.stats["refreshed"],
                "failed": self.stats["failed"],
            },
        )
        return self.stats

    def _comparable_now(self, insight: IndustryInsight) -> datetime:
        # SQLite hands back naive datetimes
        now = self.clock()
        if insight.next_update.tzinfo is None:
            return now.replace(tzinfo=None)
        return now


def main(generator: Optional[InsightGenerator] = None) -> int:
    """Entry point for the cron job. Returns a process exit code."""
    if generator is None:
        config = InsightGeneratorConfig.from_env()
        if config is None:
            logger.error("Insight refresh job requires OPENAI_API_KEY")
            return 1
        generator = InsightGenerator(config)

    job = InsightRefreshJob(
        get_session_factory(),
        generator,
        batch_size=INSIGHT_REFRESH_BATCH_SIZE,
        dry_run=INSIGHT_REFRESH_DRY_RUN,
    )
    stats = job.run()
    return 1 if stats["failed"] else 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    sys.exit(main())
