"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/time_parser.py
Version:        1.0.0
Description:    Heuristic extraction of a start/end time and a title from a
                single handwritten line ("Dentist at 3", "Sync 9-10:30am").
                Only a fixed set of time phrases is understood; everything
                else is left in the title.
------------------------------------------------------------------------------
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple, Union

from inkplanner.logger import get_logger
from inkplanner.models.types import MeridiemPolicy

logger = get_logger("parser")

_FLAGS = re.IGNORECASE | re.ASCII

# Evaluated in this order, first hit wins
RANGE_PATTERN = re.compile(
    r"\b(?:from\s+)?(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\s*(?:to|-)\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b", _FLAGS
)
AT_TIME_PATTERN = re.compile(r"\bat\s+(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b", _FLAGS)
STANDALONE_PATTERN = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", _FLAGS)
MILITARY_PATTERN = re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b", re.ASCII)

_WHITESPACE = re.compile(r"\s+")
_TITLE_EDGES = re.compile(r"^[-–—,.\s]+|[-–—,.\s]+$")

ONE_HOUR = timedelta(hours=1)
HALF_DAY = timedelta(hours=12)


@dataclass(frozen=True)
class ParsedTime:
    """Result of parsing one line. No start time means an all-day entry."""
    title: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


class TimePhraseParser:
    """
    Parses time phrases relative to a reference day.

    Hours written without am/pm follow the configured MeridiemPolicy:
    AFTERNOON_BIAS reads 1-6 as 13-18 (handwritten "at 3" is rarely 3am),
    LITERAL keeps the number as written.
    """

    def __init__(self, policy: MeridiemPolicy = MeridiemPolicy.AFTERNOON_BIAS) -> None:
        self.policy = MeridiemPolicy(policy)

    def to_24h(self, hour_str: str, minute_str: Optional[str], meridiem: Optional[str]) -> Optional[Tuple[int, int]]:
        """
        Converts matched hour/minute/meridiem groups into (hours, minutes).
        Returns None for hours outside 0-23.
        """
        hours = int(hour_str)
        minutes = int(minute_str) if minute_str else 0

        if hours < 0 or hours > 23:
            return None

        if meridiem:
            is_pm = meridiem.lower() == "pm"
            if hours == 12:
                hours = 12 if is_pm else 0
            elif is_pm:
                hours += 12
        elif self.policy == MeridiemPolicy.AFTERNOON_BIAS and 1 <= hours <= 6:
            hours += 12

        return hours, minutes

    def parse(self, line: str, reference_date: Union[date, datetime]) -> ParsedTime:
        if isinstance(reference_date, datetime):
            reference_date = reference_date.date()
        day_start = datetime.combine(reference_date, time.min)

        def at(hm: Tuple[int, int]) -> datetime:
            return day_start + timedelta(hours=hm[0], minutes=hm[1])

        working = line.strip()
        start: Optional[datetime] = None
        end: Optional[datetime] = None

        match = RANGE_PATTERN.search(working)
        if match:
            first = self.to_24h(match.group(1), match.group(2), match.group(3))
            second = self.to_24h(match.group(4), match.group(5), match.group(6))
            if first and second:
                start, end = at(first), at(second)
                if end <= start:
                    end += HALF_DAY
                    if end <= start:
                        end = start + ONE_HOUR
            # Consumed even when the numbers were out of range
            working = RANGE_PATTERN.sub("", working, count=1).strip()

        if start is None:
            match = AT_TIME_PATTERN.search(working)
            if match:
                parsed = self.to_24h(match.group(1), match.group(2), match.group(3))
                if parsed:
                    start = at(parsed)
                    end = start + ONE_HOUR
                working = AT_TIME_PATTERN.sub("", working, count=1).strip()

        if start is None:
            match = STANDALONE_PATTERN.search(working)
            if match:
                parsed = self.to_24h(match.group(1), match.group(2), match.group(3))
                if parsed:
                    start = at(parsed)
                    end = start + ONE_HOUR
                working = STANDALONE_PATTERN.sub("", working, count=1).strip()

        if start is None:
            match = MILITARY_PATTERN.search(working)
            if match:
                start = at((int(match.group(1)), int(match.group(2))))
                end = start + ONE_HOUR
                working = MILITARY_PATTERN.sub("", working, count=1).strip()

        title = _TITLE_EDGES.sub("", _WHITESPACE.sub(" ", working)).strip()
        title = _capitalize_first(title)
        if not title:
            title = _capitalize_first(line.strip())

        logger.debug(f"Parsed '{line}' -> title='{title}' start={start} end={end}")
        return ParsedTime(title=title, start_time=start, end_time=end)


def parse_event_text(
    line: str,
    reference_date: Union[date, datetime],
    policy: MeridiemPolicy = MeridiemPolicy.AFTERNOON_BIAS,
) -> ParsedTime:
    """Parses one line with the given ambiguous-hour policy."""
    return TimePhraseParser(policy).parse(line, reference_date)
