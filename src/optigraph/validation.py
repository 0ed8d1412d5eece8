"""Input helpers for the admin API."""

from __future__ import annotations

import re

_GUID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)
# Graph content keys are also issued as 32 bare hex digits.
_BARE_KEY = re.compile(r"^[0-9a-f]{32}$", re.IGNORECASE)


def is_valid_guid(value: str) -> bool:
    return bool(_GUID.match(value) or _BARE_KEY.match(value))


def sanitize_input(value: str) -> str:
    """Trim whitespace and strip angle brackets."""

    return value.strip().replace("<", "").replace(">", "")


def clamp_number(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def parse_csv_phrases(text: str) -> list[str]:
    """Split newline-separated phrases, dropping blank lines."""

    return [sanitize_input(line) for line in text.split("\n") if line.strip()]
