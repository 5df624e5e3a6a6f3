"""
Profile update and industry insight configuration.

Configuration:
- PROFILE_TRANSACTION_TIMEOUT_SECONDS: Budget for the profile write transaction (default: 10)
- INSIGHT_REFRESH_INTERVAL_DAYS: Days until an insight is due for regeneration (default: 7)
- INSIGHT_REFRESH_BATCH_SIZE: Insights refreshed per job run (default: 25)
- INSIGHT_REFRESH_DRY_RUN: Set to "false" to let the refresh job write (default: "true")
"""

import os
from datetime import datetime, timedelta

# Generation runs outside the transaction, so this only covers database work
TRANSACTION_TIMEOUT_SECONDS = float(os.getenv("PROFILE_TRANSACTION_TIMEOUT_SECONDS", "10"))

INSIGHT_REFRESH_INTERVAL_DAYS = int(os.getenv("INSIGHT_REFRESH_INTERVAL_DAYS", "7"))

INSIGHT_REFRESH_BATCH_SIZE = int(os.getenv("INSIGHT_REFRESH_BATCH_SIZE", "25"))

INSIGHT_REFRESH_DRY_RUN = os.getenv("INSIGHT_REFRESH_DRY_RUN", "true").lower() == "true"

# Page re-rendered after a profile change
PROFILE_REVALIDATE_PATH = "/"


def next_insight_update(now: datetime) -> datetime:
    """Return when an insight generated at ``now`` becomes due for refresh."""
    return now + timedelta(days=INSIGHT_REFRESH_INTERVAL_DAYS)
