import math
import re

WORDS_PER_MINUTE = 200

_non_alnum = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', trim hyphens."""
    return _non_alnum.sub("-", text.lower()).strip("-")


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def estimate_reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    words = [word for word in text.split() if word]
    # never report zero minutes
    return max(1, round_half_up(len(words) / words_per_minute))
