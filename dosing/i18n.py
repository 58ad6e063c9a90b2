"""
Localized labels for the dose-schedule engine.

Exactly two label sets are supported. The engine treats the language tag as
an opaque selector; word order for time markers is handled by the time
formatter.
"""

from enum import Enum
from typing import Union


class Language(str, Enum):
    """Supported display languages"""
    KO = "ko"
    EN = "en"

    @classmethod
    def coerce(cls, value: Union["Language", str, None]) -> "Language":
        """Map a raw tag to a Language, falling back to Korean"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.KO


LABELS = {
    Language.KO: {
        "as_needed": "필요시",
        "overdue": "지연됨",
        "am": "오전",
        "pm": "오후",
        "tomorrow": "내일",
        "completed": "완료됨",
        "paused": "일시중지",
    },
    Language.EN: {
        "as_needed": "As needed",
        "overdue": "Overdue",
        "am": "AM",
        "pm": "PM",
        "tomorrow": "Tomorrow",
        "completed": "Completed",
        "paused": "Paused",
    },
}

# Substrings that mark a time entry as "as needed" in either language
AS_NEEDED_MARKERS = ("필요", "needed")


def label(key: str, language: Union[Language, str, None] = Language.KO) -> str:
    return LABELS[Language.coerce(language)][key]


def is_as_needed_text(text: str) -> bool:
    """True if the text carries an "as needed" marker"""
    lowered = text.lower()
    return any(marker in lowered for marker in AS_NEEDED_MARKERS)
