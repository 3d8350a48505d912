"""
Unit tests for week resolution.

Resolution contract:
- Inside a block: "Week <start_week + days // 7>", capped by end_week
- Outside every block, or past end_week: "VACATION"
- The first block containing the date wins
- Time of day is ignored; the whole end date belongs to the block
"""

import unittest
from datetime import date, datetime, timedelta

from luweek.model import DEFAULT_BLOCKS, TermBlock
from luweek.resolver import VACATION, WeekResolver, resolve

MICHAELMAS = TermBlock(date(2025, 10, 6), date(2025, 12, 14), 1, 10)


class TestResolve(unittest.TestCase):
    def test_michaelmas_scenario(self) -> None:
        blocks = [MICHAELMAS]
        self.assertEqual(resolve(date(2025, 10, 6), blocks), "Week 1")
        self.assertEqual(resolve(date(2025, 10, 13), blocks), "Week 2")
        self.assertEqual(resolve(date(2025, 12, 20), blocks), VACATION)

    def test_week_increments_every_seven_days(self) -> None:
        for k in range(10):
            day = MICHAELMAS.start_date + timedelta(days=7 * k)
            self.assertEqual(resolve(day, [MICHAELMAS]), f"Week {1 + k}")
            # last day of the same week
            self.assertEqual(resolve(day + timedelta(days=6), [MICHAELMAS]), f"Week {1 + k}")

    def test_end_date_is_inclusive(self) -> None:
        self.assertEqual(resolve(datetime(2025, 12, 14, 23, 59, 59), [MICHAELMAS]), "Week 10")

    def test_time_of_day_is_ignored(self) -> None:
        self.assertEqual(resolve(datetime(2025, 10, 12, 18, 30), [MICHAELMAS]), "Week 1")
        self.assertEqual(resolve(datetime(2025, 10, 13, 0, 0), [MICHAELMAS]), "Week 2")

    def test_outside_all_blocks(self) -> None:
        self.assertEqual(resolve(date(2025, 10, 5), DEFAULT_BLOCKS), VACATION)
        self.assertEqual(resolve(date(2026, 1, 1), DEFAULT_BLOCKS), VACATION)
        self.assertEqual(resolve(date(2026, 4, 20), DEFAULT_BLOCKS), VACATION)
        self.assertEqual(resolve(date(2026, 7, 1), DEFAULT_BLOCKS), VACATION)
        self.assertEqual(resolve(date(2026, 1, 1), []), VACATION)

    def test_week_past_end_week_is_vacation(self) -> None:
        # 10 days declared as a single week
        block = TermBlock(date(2026, 1, 5), date(2026, 1, 14), 5, 5)
        self.assertEqual(resolve(date(2026, 1, 11), [block]), "Week 5")
        self.assertEqual(resolve(date(2026, 1, 12), [block]), VACATION)

    def test_default_blocks(self) -> None:
        self.assertEqual(resolve(date(2026, 1, 12), DEFAULT_BLOCKS), "Week 11")
        self.assertEqual(resolve(date(2026, 3, 22), DEFAULT_BLOCKS), "Week 20")
        self.assertEqual(resolve(date(2026, 4, 27), DEFAULT_BLOCKS), "Week 22")
        self.assertEqual(resolve(date(2026, 6, 28), DEFAULT_BLOCKS), "Week 30")

    def test_first_match_wins(self) -> None:
        first = TermBlock(date(2025, 10, 6), date(2025, 10, 19), 1, 2)
        second = TermBlock(date(2025, 10, 13), date(2025, 10, 26), 40, 41)
        self.assertEqual(resolve(date(2025, 10, 14), [first, second]), "Week 2")
        self.assertEqual(resolve(date(2025, 10, 14), [second, first]), "Week 40")

    def test_idempotent(self) -> None:
        day = date(2025, 11, 3)
        self.assertEqual(resolve(day, DEFAULT_BLOCKS), resolve(day, DEFAULT_BLOCKS))


class TestWeekResolver(unittest.TestCase):
    def test_starts_with_defaults(self) -> None:
        resolver = WeekResolver()
        self.assertEqual(resolver.blocks, DEFAULT_BLOCKS)
        self.assertFalse(resolver.refreshed)
        self.assertEqual(resolver.label_for(date(2025, 10, 6)), "Week 1")

    def test_configure_replaces_blocks(self) -> None:
        resolver = WeekResolver()
        fresh = [TermBlock(date(2026, 10, 5), date(2026, 12, 13), 1, 10)]

        self.assertTrue(resolver.configure(fresh))
        self.assertTrue(resolver.refreshed)
        self.assertEqual(resolver.blocks, tuple(fresh))
        self.assertEqual(resolver.label_for(date(2025, 10, 6)), VACATION)
        self.assertEqual(resolver.label_for(date(2026, 10, 12)), "Week 2")

    def test_configure_copies_input(self) -> None:
        resolver = WeekResolver()
        fresh = [MICHAELMAS]
        resolver.configure(fresh)
        fresh.clear()
        self.assertEqual(resolver.blocks, (MICHAELMAS,))

    def test_empty_configure_keeps_current_blocks(self) -> None:
        resolver = WeekResolver()
        self.assertFalse(resolver.configure([]))
        self.assertFalse(resolver.refreshed)
        self.assertEqual(resolver.blocks, DEFAULT_BLOCKS)


if __name__ == "__main__":
    unittest.main()
