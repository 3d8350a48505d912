"""
Central data model definitions used across the project.

This module defines the canonical structure of term blocks and feed events so that:
- the feed ingestor and the week resolver share the same field names
- a refresh can report whether fresh or default data is in use
- the built-in term dates live in exactly one place
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class TermBlock:
    """
    One contiguous term period with a linear week numbering.

    Both dates are inclusive. The week number grows by one every 7 days
    counted from start_date.
    """

    start_date: date
    end_date: date
    start_week: int
    end_week: int

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValueError(f"Term block ends before it starts: {self.start_date} > {self.end_date}")
        if self.end_week < self.start_week:
            raise ValueError(f"Term block week range is inverted: {self.start_week} > {self.end_week}")

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass
class CalendarEvent:
    """
    Represents one VEVENT record of the calendar feed.

    Dates are kept as the raw 8-digit feed tokens; they are only
    converted when a term is reduced to a TermBlock.
    """

    summary: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class RefreshOutcome(Enum):
    FRESH = "fresh"
    FETCH_FAILED = "fetch_failed"
    NO_TERMS = "no_terms"


@dataclass(frozen=True)
class RefreshResult:
    """
    Outcome of one feed refresh.

    blocks is only non-empty for FRESH results; error carries the
    transport error message for FETCH_FAILED.
    """

    outcome: RefreshOutcome
    blocks: Tuple[TermBlock, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def fresh(self) -> bool:
        return self.outcome is RefreshOutcome.FRESH


# 2025/26 academic year, used until (and unless) the feed provides fresh dates
DEFAULT_BLOCKS: Tuple[TermBlock, ...] = (
    TermBlock(date(2025, 10, 6), date(2025, 12, 14), 1, 10),  # Michaelmas
    TermBlock(date(2026, 1, 12), date(2026, 3, 22), 11, 20),  # Lent
    TermBlock(date(2026, 4, 27), date(2026, 6, 28), 22, 30),  # Summer
)
