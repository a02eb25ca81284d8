from __future__ import annotations

import re
from typing import Callable, List

Measure = Callable[[str], float]

TAB_SIZE = 4
_SPACES_RE = re.compile(r"( +)")


def wrap_text(text: str, max_width: float, measure: Measure) -> List[str]:
    """
    Width-driven wrapping.

    Hard line breaks in ``text`` are kept (blank lines included). Each line is
    filled word by word; a word wider than ``max_width`` on its own is broken
    by characters. Leading indentation of a line is preserved on its first
    wrapped segment, and runs of spaces between words survive unless a break
    falls on them.
    """
    out: List[str] = []
    for raw_line in text.expandtabs(TAB_SIZE).splitlines() or [""]:
        out.extend(_wrap_line(raw_line.rstrip(), max_width, measure))
    return out


def _wrap_line(line: str, max_width: float, measure: Measure) -> List[str]:
    if not line or measure(line) <= max_width:
        return [line]

    indent = line[: len(line) - len(line.lstrip(" "))]
    tokens = [t for t in _SPACES_RE.split(line[len(indent):]) if t]

    lines: List[str] = []
    current = indent
    gap = ""
    for word in tokens:
        if word.startswith(" "):
            gap = word
            continue

        candidate = current + gap + word if current.strip() else current + word
        gap = ""
        if measure(candidate) <= max_width:
            current = candidate
            continue

        if current.strip():
            lines.append(current)
            current = ""

        if measure(word) <= max_width:
            current = word
            continue

        pieces = _break_word(word, max_width, measure)
        lines.extend(pieces[:-1])
        current = pieces[-1]

    if current.strip():
        lines.append(current)
    return lines


def _break_word(word: str, max_width: float, measure: Measure) -> List[str]:
    pieces: List[str] = []
    current = ""
    for ch in word:
        if current and measure(current + ch) > max_width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    pieces.append(current)
    return pieces
