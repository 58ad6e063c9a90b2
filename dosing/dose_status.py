"""
Dose Status Calculator
Derives a single dose's lifecycle state from its clock time and the current moment
"""

from typing import Optional
from datetime import datetime

from dosing.entities import DoseStatus
from dosing.time_parsing import minutes_since_midnight


# Actionable window around the scheduled time (minutes)
PENDING_WINDOW_BEFORE = 30
PENDING_WINDOW_AFTER = 15


def calculate_dose_status(
    scheduled_time: str,
    now: Optional[datetime] = None,
    taken_at: Optional[datetime] = None
) -> DoseStatus:
    """
    Calculate the status of a dose scheduled for the current day.

    Only clock minutes are compared; callers must only use this for doses
    scheduled on the date of interest.

    Args:
        scheduled_time: Time in 24-hour format (HH:MM)
        now: Current moment (default: wall clock)
        taken_at: When the dose was taken, if it was

    Returns:
        TAKEN if taken_at is given, otherwise UPCOMING, PENDING or OVERDUE
    """
    if taken_at is not None:
        return DoseStatus.TAKEN

    now = now or datetime.now()
    diff = minutes_since_midnight(now) - minutes_since_midnight(scheduled_time)

    if diff < -PENDING_WINDOW_BEFORE:
        return DoseStatus.UPCOMING
    if diff <= PENDING_WINDOW_AFTER:
        return DoseStatus.PENDING
    return DoseStatus.OVERDUE
