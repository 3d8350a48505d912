"""
Feed ingestion (iCalendar text -> term blocks).

- Fetches the LancasterWeeks.ics feed
- Extracts EACH VEVENT record as exactly ONE CalendarEvent
- Keeps only events of the target academic year (e.g. "25/26")
- Reduces every term to a single TermBlock

Important rules:
- 1 VEVENT = 1 event, no RRULE / recurrence handling
- A term without usable events is left out, it never becomes an empty block
- Transport errors are reported in the RefreshResult, never raised
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import requests

from luweek.config import DEFAULT_CONFIG, FeedConfig
from luweek.model import CalendarEvent, RefreshOutcome, RefreshResult, TermBlock

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Feed markers
# ---------------------------------------------------------------------------

BEGIN_EVENT = "BEGIN:VEVENT"
END_EVENT = "END:VEVENT"

# Fixed order: blocks are emitted (and later scanned) in this order
TERMS: Tuple[Tuple[str, str], ...] = (
    ("michaelmas", "Michaelmas Term"),
    ("lent", "Lent Term"),
    ("summer", "Summer Term"),
)

WEEK_RE = re.compile(r"Wk (\d+)")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _field_value(line: str, name: str) -> Optional[str]:
    """
    Return the value of a property line, or None if the line is another property.

    Accepts both "DTSTART:20251006" and "DTSTART;VALUE=DATE:20251006".
    """
    if not line.startswith(name):
        return None

    rest = line[len(name):]
    if rest.startswith(":"):
        return rest[1:]
    if rest.startswith(";") and ":" in rest:
        return rest.split(":", 1)[1]
    return None


def _apply_line(event: CalendarEvent, line: str) -> None:
    # Each recognised prefix fills one field, anything else is ignored
    for name, attr in (
        ("SUMMARY", "summary"),
        ("DESCRIPTION", "description"),
        ("DTSTART", "start_date"),
        ("DTEND", "end_date"),
    ):
        value = _field_value(line, name)
        if value is not None:
            setattr(event, attr, value)
            return


def _to_date(raw: Optional[str]) -> date:
    return date.fromisoformat(format_date(raw or ""))


# ---------------------------------------------------------------------------
# Event parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def parse_events(raw_text: str, target_year_tag: str) -> Iterator[CalendarEvent]:
    """
    Yield the VEVENT records of raw_text whose description mentions target_year_tag.
    """
    current: Optional[CalendarEvent] = None

    for raw_line in raw_text.split("\n"):
        # Strip handles CRLF feeds as well
        line = raw_line.strip()

        if line == BEGIN_EVENT:
            current = CalendarEvent()
        elif line == END_EVENT and current is not None:
            if current.description and target_year_tag in current.description:
                yield current
            current = None
        elif current is not None:
            _apply_line(current, line)


def format_date(raw: str) -> str:
    """
    Convert an 8-digit 'YYYYMMDD' token to 'YYYY-MM-DD'.

    Anything else is returned unchanged.
    """
    if len(raw) == 8:
        return f"{raw[0:4]}-{raw[4:6]}-{raw[6:8]}"
    return raw


def group_by_term(events: Iterable[CalendarEvent]) -> Dict[str, List[CalendarEvent]]:
    """
    Sort events into the michaelmas / lent / summer buckets.

    Events that mention none of the terms are dropped.
    """
    terms: Dict[str, List[CalendarEvent]] = {key: [] for key, _ in TERMS}

    for event in events:
        desc = event.description or ""
        for key, label in TERMS:
            if label in desc:
                terms[key].append(event)
                break

    return terms


def extract_week_number(event: CalendarEvent) -> Optional[int]:
    match = WEEK_RE.search(event.description or "")
    if not match:
        return None

    try:
        return int(match.group(1))
    except ValueError:
        # Longer than int() accepts from a string
        log.warning("Ignoring unreadable week number in %.60s", event.description)
        return None


def reduce_term_to_block(events: Iterable[CalendarEvent]) -> Optional[TermBlock]:
    """
    Reduce the events of one term to a single TermBlock.

    The block runs from the start of the lowest week to the end of the
    highest week. Returns None if no event carries a week number or if
    the dates cannot be read.
    """
    # Only week events take part, sorted by their week number
    numbered: List[Tuple[int, CalendarEvent]] = []
    for ev in events:
        week = extract_week_number(ev)
        if week is not None:
            numbered.append((week, ev))

    if not numbered:
        return None
    numbered.sort(key=lambda pair: pair[0])

    first_week, first = numbered[0]
    last_week, last = numbered[-1]

    try:
        return TermBlock(
            start_date=_to_date(first.start_date),
            end_date=_to_date(last.end_date),
            start_week=first_week,
            end_week=last_week,
        )
    except ValueError as exc:
        log.warning("Skipping term with unusable dates (%s): %s", first.description, exc)
        return None


def build_blocks(raw_text: str, target_year_tag: str) -> Tuple[TermBlock, ...]:
    """
    Run parse -> group -> reduce on feed text and return the non-empty blocks.
    """
    terms = group_by_term(parse_events(raw_text, target_year_tag))

    blocks: List[TermBlock] = []
    for key, _ in TERMS:
        log.debug("%s: %d events for %s", key, len(terms[key]), target_year_tag)
        block = reduce_term_to_block(terms[key])
        if block is not None:
            blocks.append(block)

    return tuple(blocks)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def fetch_feed_text(url: str, timeout: float) -> str:
    """
    Download the calendar feed and return it as text.
    """
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.text


def fetch_and_build_blocks(
    config: FeedConfig = DEFAULT_CONFIG,
    fetch: Callable[[str, float], str] = fetch_feed_text,
) -> RefreshResult:
    """
    Fetch the feed and derive fresh term blocks for config.target_year.

    Never raises for fetch problems: the caller keeps its current
    blocks unless the result is FRESH.
    """
    try:
        text = fetch(config.url, config.timeout)
    except requests.RequestException as exc:
        log.error("Failed to fetch calendar feed %s, keeping current dates: %s", config.url, exc)
        return RefreshResult(RefreshOutcome.FETCH_FAILED, error=str(exc))
    except Exception as exc:
        # Injected fetchers may fail with their own transport errors
        log.exception("Failed to fetch calendar feed %s, keeping current dates", config.url)
        return RefreshResult(RefreshOutcome.FETCH_FAILED, error=str(exc))

    blocks = build_blocks(text, config.target_year)
    if not blocks:
        log.warning("Calendar feed has no term weeks for %s, keeping current dates", config.target_year)
        return RefreshResult(RefreshOutcome.NO_TERMS)

    log.info("Derived %d term blocks for %s from %s", len(blocks), config.target_year, config.url)
    return RefreshResult(RefreshOutcome.FRESH, blocks=blocks)
