"""
Plugin lifecycle.

The host calls:

    plugin = LUWeekPlugin()
    plugin.on_load()     # refresh term dates from the feed, patch the formatter
    ...
    plugin.on_unload()   # restore the formatter

Loading always succeeds: if the feed cannot be used, the built-in
term dates stay active and the reason is in the returned RefreshResult.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from luweek.config import DEFAULT_CONFIG, FeedConfig
from luweek.feed import fetch_and_build_blocks, fetch_feed_text
from luweek.formatting import DateFormatter, FormatPatch, formatter as shared_formatter
from luweek.model import RefreshResult
from luweek.resolver import DateLike, WeekResolver

log = logging.getLogger(__name__)


class LUWeekPlugin:
    def __init__(
        self,
        formatter: Optional[DateFormatter] = None,
        config: FeedConfig = DEFAULT_CONFIG,
        fetch: Callable[[str, float], str] = fetch_feed_text,
    ) -> None:
        self.config = config
        self.fetch = fetch
        self.resolver = WeekResolver()
        self.patch = FormatPatch(formatter if formatter is not None else shared_formatter, self.resolver)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def refresh(self) -> RefreshResult:
        """
        Fetch fresh term blocks and install them if the plugin is still loaded.
        """
        result = fetch_and_build_blocks(self.config, fetch=self.fetch)
        if not result.fresh:
            return result

        # The host may have unloaded us while the fetch was running
        if not self._active:
            log.warning("Discarding term blocks fetched after unload")
            return result

        self.resolver.configure(result.blocks)
        log.info("LU week blocks updated from calendar feed: %s", result.blocks)
        return result

    def on_load(self) -> RefreshResult:
        self._active = True
        result = self.refresh()
        if not self._active:
            return result

        self.patch.apply()
        log.info("LUWeek plugin loaded (%s term dates)", "feed" if self.resolver.refreshed else "default")
        return result

    def on_unload(self) -> None:
        self._active = False
        self.patch.remove()
        log.info("LUWeek plugin unloaded")

    def week_label(self, value: DateLike) -> str:
        return self.resolver.label_for(value)
