"""
Week resolution.

Given a date and an ordered list of term blocks, return its display label:
    "Week <n>" inside a term, "VACATION" everywhere else.

Blocks are scanned in order and the first block containing the date wins.
Overlapping blocks are not detected.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Tuple, Union

from luweek.model import DEFAULT_BLOCKS, TermBlock

log = logging.getLogger(__name__)

VACATION = "VACATION"

DateLike = Union[date, datetime]


def _day(value: DateLike) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve(value: DateLike, blocks: Iterable[TermBlock]) -> str:
    """
    Return "Week <n>" for the first block containing value, else "VACATION".

    A date past the block's last declared week (span not a multiple of
    7 days) is also VACATION.
    """
    day = _day(value)

    for block in blocks:
        if not block.contains(day):
            continue

        week = block.start_week + (day - block.start_date).days // 7
        return f"Week {week}" if week <= block.end_week else VACATION

    return VACATION


class WeekResolver:
    """
    Owns the active term block list.

    Starts with the built-in defaults; configure() swaps in a new tuple
    as a whole, so readers always see either the old or the new list.
    """

    def __init__(self, blocks: Iterable[TermBlock] = DEFAULT_BLOCKS) -> None:
        self._blocks: Tuple[TermBlock, ...] = tuple(blocks)
        self._refreshed = False

    @property
    def blocks(self) -> Tuple[TermBlock, ...]:
        return self._blocks

    @property
    def refreshed(self) -> bool:
        """True once fresh blocks have replaced the defaults."""
        return self._refreshed

    def configure(self, blocks: Iterable[TermBlock]) -> bool:
        new_blocks = tuple(blocks)
        if not new_blocks:
            log.warning("Ignoring empty term block list, keeping %d current blocks", len(self._blocks))
            return False

        self._blocks = new_blocks
        self._refreshed = True
        return True

    def label_for(self, value: DateLike) -> str:
        return resolve(value, self._blocks)
