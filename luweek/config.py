"""
Feed settings.

There is no config file and no environment lookup: callers that need a
different feed or academic year pass their own FeedConfig.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Feed location & academic year
# ---------------------------------------------------------------------------

ICS_URL = "https://lusiservice.lancs.ac.uk/iCalendar/LancasterWeeks.ics"
TARGET_YEAR = "25/26"

# Seconds; start-up must not hang on a slow feed
FETCH_TIMEOUT = 10.0


@dataclass(frozen=True)
class FeedConfig:
    url: str = ICS_URL
    target_year: str = TARGET_YEAR
    timeout: float = FETCH_TIMEOUT


DEFAULT_CONFIG = FeedConfig()
