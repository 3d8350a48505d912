"""
Date formatting with the "LUW" token.

The host renders dates through a shared DateFormatter. FormatPatch wraps its
format() so that every "LUW" in a template is replaced by the term week label
before the rest of the template is rendered, e.g.

    "LUW %b %d %Y"  ->  "Week 3 Jan 12 2026"  /  "VACATION Jan 12 2026"

The patch state lives on the FormatPatch object, never on the formatter.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Optional

from luweek.resolver import WeekResolver

log = logging.getLogger(__name__)

WEEK_TOKEN = "LUW"

_MISSING = object()


class DateFormatter:
    """
    The host's date-formatting engine (strftime templates).
    """

    def format(self, value: date, template: Optional[str] = None) -> str:
        if not template:
            return value.isoformat()
        return value.strftime(template)


# Shared instance used by the host application
formatter = DateFormatter()


def literal(text: str) -> str:
    """
    Escape text so strftime renders it as-is.
    """
    return text.replace("%", "%%")


def substitute_token(template: str, label: str) -> str:
    return template.replace(WEEK_TOKEN, literal(label))


class FormatPatch:
    """
    Replaces target.<attribute> with a "LUW"-aware wrapper.

    apply() and remove() each act at most once per cycle and return
    False when there is nothing to do. Only one patch can hold a target
    at a time, and remove() only takes out this patch's own wrapper.
    """

    def __init__(self, target: Any, resolver: WeekResolver, attribute: str = "format") -> None:
        self.target = target
        self.resolver = resolver
        self.attribute = attribute
        self._wrapper: Optional[Callable[..., str]] = None
        self._own_value: Any = _MISSING

    @property
    def applied(self) -> bool:
        return self._wrapper is not None

    def _wrap(self, original: Callable[..., str]) -> Callable[..., str]:
        resolver = self.resolver

        def format_with_week(value: date, template: Optional[str] = None) -> str:
            if not template or WEEK_TOKEN not in template:
                return original(value, template)
            return original(value, substitute_token(template, resolver.label_for(value)))

        format_with_week.week_patch = self  # type: ignore[attr-defined]
        return format_with_week

    def apply(self) -> bool:
        if self.applied:
            return False

        original = getattr(self.target, self.attribute)
        holder = getattr(original, "week_patch", None)
        if holder is not None:
            log.warning("%s.%s is already patched, not patching again", type(self.target).__name__, self.attribute)
            return False

        # Remember whether the attribute was set on the object itself or came from its class
        self._own_value = vars(self.target).get(self.attribute, _MISSING)
        self._wrapper = self._wrap(original)
        setattr(self.target, self.attribute, self._wrapper)

        log.debug("Patched %s.%s", type(self.target).__name__, self.attribute)
        return True

    def remove(self) -> bool:
        if not self.applied:
            return False

        current = vars(self.target).get(self.attribute, _MISSING)
        if current is not self._wrapper:
            # Someone replaced our wrapper; restoring now would drop their change
            log.warning("%s.%s was replaced after patching, leaving it as is", type(self.target).__name__, self.attribute)
            self._wrapper = None
            self._own_value = _MISSING
            return False

        if self._own_value is _MISSING:
            delattr(self.target, self.attribute)
        else:
            setattr(self.target, self.attribute, self._own_value)

        self._wrapper = None
        self._own_value = _MISSING

        log.debug("Restored %s.%s", type(self.target).__name__, self.attribute)
        return True
