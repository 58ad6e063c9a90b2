"""
Time Parsing
Conversions between 12-hour and 24-hour clock strings and minute offsets.

All functions are total: unparseable input degrades to midnight rather than
raising, so a malformed time never breaks a screen that lists doses.
"""

import logging
import re
from typing import Optional, Tuple, Union
from datetime import datetime, time

from dosing.entities import Period
from dosing.i18n import Language, is_as_needed_text, label


logger = logging.getLogger(__name__)


AS_NEEDED_MINUTES = -1
MIDNIGHT_24H = "00:00"

_MARKERS = r"(AM|PM|오전|오후)"
_MARKER_AFTER = re.compile(r"(\d{1,2}):(\d{2})\s*" + _MARKERS, re.IGNORECASE)
_MARKER_BEFORE = re.compile(_MARKERS + r"\s*(\d{1,2}):(\d{2})", re.IGNORECASE)
_CLOCK_24 = re.compile(r"(\d{1,2}):(\d{2})")

_PM_MARKERS = ("PM", "오후")


def _to_24_hour(hours: int, marker: str) -> int:
    is_pm = marker.upper() in _PM_MARKERS
    if is_pm and hours != 12:
        return hours + 12
    if not is_pm and hours == 12:
        return 0
    return hours


def _parse_clock(text: str) -> Optional[Tuple[int, int]]:
    """Parse a 12-hour (either marker position) or 24-hour clock string"""
    match = _MARKER_AFTER.search(text)
    if match:
        hours, minutes, marker = int(match.group(1)), int(match.group(2)), match.group(3)
    else:
        match = _MARKER_BEFORE.search(text)
        if match:
            marker, hours, minutes = match.group(1), int(match.group(2)), int(match.group(3))
        else:
            marker = None

    if marker is not None:
        if hours > 12 or minutes > 59:
            return None
        return _to_24_hour(hours, marker), minutes

    match = _CLOCK_24.search(text)
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes


def parse_time_to_minutes(text: Optional[str]) -> int:
    """
    Convert a clock string to minutes since midnight.

    "As needed" entries map to -1 so they sort ahead of every real time;
    empty or unparseable text maps to 0.
    """
    if not text:
        return 0

    if is_as_needed_text(text):
        return AS_NEEDED_MINUTES

    parsed = _parse_clock(text)
    if parsed is None:
        logger.debug(f"Unparseable time {text!r}, using midnight")
        return 0

    hours, minutes = parsed
    return hours * 60 + minutes


def parse_time_to_24hour(text: Optional[str]) -> str:
    """Normalize a clock string to zero-padded "HH:MM" """
    if not text or is_as_needed_text(text):
        return MIDNIGHT_24H

    parsed = _parse_clock(text)
    if parsed is None:
        logger.debug(f"Unparseable time {text!r}, using {MIDNIGHT_24H}")
        return MIDNIGHT_24H

    hours, minutes = parsed
    return f"{hours:02d}:{minutes:02d}"


def format_time_to_12hour(
    time24: str,
    language: Union[Language, str] = Language.KO
) -> str:
    """
    Render a 24-hour time for display.

    Korean puts the marker first ("오후 02:30"), English last ("02:30 PM").
    """
    language = Language.coerce(language)
    hours, minutes = _parse_clock(time24 or "") or (0, 0)

    marker = label("am" if hours < 12 else "pm", language)
    display_hours = hours % 12 or 12
    clock = f"{display_hours:02d}:{minutes:02d}"

    if language == Language.KO:
        return f"{marker} {clock}"
    return f"{clock} {marker}"


def minutes_since_midnight(value: Union[datetime, time, str]) -> int:
    """Clock minutes of a datetime, time, or 24-hour string"""
    if isinstance(value, (datetime, time)):
        return value.hour * 60 + value.minute
    return max(parse_time_to_minutes(value), 0)


def period_for_hour(hour: int) -> Period:
    if hour < 12:
        return Period.MORNING
    if hour < 17:
        return Period.AFTERNOON
    if hour < 21:
        return Period.EVENING
    return Period.NIGHT


def period_for_time(time24: str) -> Period:
    return period_for_hour(minutes_since_midnight(time24) // 60)


def is_valid_time(text: Optional[str]) -> bool:
    """True for a parseable clock string or an "as needed" entry"""
    if not text:
        return False
    return is_as_needed_text(text) or _parse_clock(text) is not None
