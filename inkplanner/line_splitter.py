import re
from typing import List

_LINE_BREAKS = re.compile(r"[\n\r]+")
_DECORATIVE = re.compile(r"^[-=_]+$")

MIN_LINE_LENGTH = 3


def split_into_event_lines(raw_text: str) -> List[str]:
    """
    Splits recognized text into candidate event lines.

    Lines are trimmed; empty lines, rulers like '----' or '====' and
    fragments shorter than three characters are dropped.
    """
    if not raw_text:
        return []
    lines = []
    for line in _LINE_BREAKS.split(raw_text):
        line = line.strip()
        if not line or _DECORATIVE.match(line) or len(line) < MIN_LINE_LENGTH:
            continue
        lines.append(line)
    return lines
