"""Evaluator for the common subset of the OSM ``opening_hours`` syntax.

Handles ``24/7``, weekday selectors, comma separated time spans, spans that run
past midnight and ``off``/``closed`` rules. Anything outside that subset raises
:class:`OpeningHoursError` so callers can treat the hours as unknown.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple


DAY_ORDER = ["mo", "tu", "we", "th", "fr", "sa", "su"]
MINUTES_PER_DAY = 24 * 60

_TIME_SPAN = re.compile(r"^(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\+?$")
_DAY_RANGE = re.compile(r"^(mo|tu|we|th|fr|sa|su)(?:\s*-\s*(mo|tu|we|th|fr|sa|su))?$")


class OpeningHoursError(ValueError):
    pass


@dataclass(frozen=True)
class Rule:
    day_selector: Tuple[Tuple[int, int], ...]  # (start_idx, end_idx) ranges, empty means every day
    spans: Tuple[Tuple[int, int], ...]  # minutes from day start, end may exceed a day
    closed: bool = False

    def days(self) -> List[int]:
        if not self.day_selector:
            return list(range(7))
        out: list[int] = []
        for start, end in self.day_selector:
            idx = start
            while True:
                if idx not in out:
                    out.append(idx)
                if idx == end:
                    break
                idx = (idx + 1) % 7
        return out


def _parse_minutes(hour: str, minute: str) -> int:
    h, m = int(hour), int(minute)
    if m > 59 or h > 24 or (h == 24 and m != 0):
        raise OpeningHoursError(f"invalid time {hour}:{minute}")
    return h * 60 + m


def _parse_span(text: str) -> Tuple[int, int]:
    match = _TIME_SPAN.match(text.strip())
    if not match:
        raise OpeningHoursError(f"invalid time span: {text!r}")
    open_min = _parse_minutes(match.group(1), match.group(2))
    close_min = _parse_minutes(match.group(3), match.group(4))
    if open_min >= MINUTES_PER_DAY:
        raise OpeningHoursError(f"span cannot start at 24:00: {text!r}")
    if close_min <= open_min:
        close_min += MINUTES_PER_DAY
    return open_min, close_min


def _parse_days(text: str) -> Tuple[Tuple[int, int], ...]:
    ranges = []
    for part in text.split(","):
        match = _DAY_RANGE.match(part.strip().lower())
        if not match:
            raise OpeningHoursError(f"unsupported day selector: {part!r}")
        start = DAY_ORDER.index(match.group(1))
        end = DAY_ORDER.index(match.group(2)) if match.group(2) else start
        ranges.append((start, end))
    return tuple(ranges)


def _parse_rule(text: str) -> Rule:
    text = text.strip()
    first, _, rest = text.partition(" ")
    day_selector: Tuple[Tuple[int, int], ...] = ()
    if first and first[0].isalpha() and first.lower() not in {"off", "closed", "open"}:
        day_selector = _parse_days(first)
        text = rest.strip()

    lowered = text.lower()
    if lowered in {"off", "closed"}:
        return Rule(day_selector=day_selector, spans=(), closed=True)
    if lowered.endswith(" open"):
        text = text[: -len(" open")].strip()
    if not text:
        raise OpeningHoursError("rule without times")
    spans = tuple(_parse_span(part) for part in text.split(","))
    return Rule(day_selector=day_selector, spans=spans)


class OpeningHours:
    def __init__(self, value: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise OpeningHoursError("empty opening_hours value")
        self.value = value.strip()
        self.always_open = self.value == "24/7"
        self.rules: List[Rule] = []
        if not self.always_open:
            self.rules = [_parse_rule(seg) for seg in self.value.split(";") if seg.strip()]
            if not self.rules:
                raise OpeningHoursError("no rules in opening_hours value")

    def _day_spans(self) -> List[List[Tuple[int, int]]]:
        """Effective spans per weekday; later rules replace earlier ones."""
        table: list[list[Tuple[int, int]]] = [[] for _ in range(7)]
        for rule in self.rules:
            for day in rule.days():
                table[day] = [] if rule.closed else list(rule.spans)
        return table

    def is_open(self, at: datetime) -> bool:
        if self.always_open:
            return True
        table = self._day_spans()
        today = at.weekday()
        minute = at.hour * 60 + at.minute
        for open_min, close_min in table[today]:
            if open_min <= minute < close_min:
                return True
        # spans of the previous day that run past midnight
        for open_min, close_min in table[(today - 1) % 7]:
            if close_min > MINUTES_PER_DAY and minute < close_min - MINUTES_PER_DAY:
                return True
        return False

    def prettify(self) -> str:
        if self.always_open:
            return "24/7"
        return "; ".join(_render_rule(rule) for rule in self.rules)


def _fmt_minutes(value: int) -> str:
    value = value % MINUTES_PER_DAY if value > MINUTES_PER_DAY else value
    return f"{value // 60:02d}:{value % 60:02d}"


def _render_rule(rule: Rule) -> str:
    days = ",".join(
        DAY_ORDER[start].title() if start == end else f"{DAY_ORDER[start].title()}-{DAY_ORDER[end].title()}"
        for start, end in rule.day_selector
    )
    times = "off" if rule.closed else ",".join(f"{_fmt_minutes(a)}-{_fmt_minutes(b)}" for a, b in rule.spans)
    return f"{days} {times}" if days else times


def evaluate_opening_hours(value: str, now: datetime) -> Tuple[bool, str]:
    """Return (open at ``now``, normalized human string); raises on bad input."""
    hours = OpeningHours(value)
    return hours.is_open(now), hours.prettify()
