"""Truncation policy for long content.

Two strategies:
- window_lines: head + omitted-count + tail over lines (tool result bodies)
- elide_middle: head + omitted-count + tail over characters (tool input values)

plus truncate_preview, the head-only variant used by the compact style.
"""

from dataclasses import dataclass

HEAD_LINES = 20
TAIL_LINES = 20

ELIDE_THRESHOLD = 300
ELIDE_HEAD_CHARS = 200
ELIDE_TAIL_CHARS = 100


@dataclass(frozen=True)
class LineWindow:
    """Result of windowing a multi-line string.

    omitted == 0 means every line is in ``head`` and ``tail`` is empty.
    """

    head: list[str]
    omitted: int
    tail: list[str]


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def window_lines(text: str, head: int = HEAD_LINES, tail: int = TAIL_LINES) -> LineWindow:
    """Keep the first ``head`` and last ``tail`` lines of ``text``.

    A string without newlines is one line and is never windowed.
    """
    lines = text.split("\n")
    total = len(lines)
    if total <= head + tail:
        return LineWindow(head=lines, omitted=0, tail=[])
    return LineWindow(
        head=lines[:head],
        omitted=total - head - tail,
        tail=lines[total - tail:],
    )


def omitted_lines_marker(omitted: int) -> str:
    return f"... ({_plural(omitted, 'more line')}) ..."


def elide_middle(
    value: str,
    threshold: int = ELIDE_THRESHOLD,
    head: int = ELIDE_HEAD_CHARS,
    tail: int = ELIDE_TAIL_CHARS,
) -> str:
    """Shorten ``value`` to head + omitted-char marker + tail when over threshold.

    Strings of exactly ``threshold`` characters are returned unchanged.
    """
    if len(value) <= threshold:
        return value
    omitted = len(value) - head - tail
    return f"{value[:head]} ... ({_plural(omitted, 'char')} omitted) ... {value[len(value) - tail:]}"


def truncate_preview(value: str, limit: int) -> str:
    """Single-line head slice with a trailing ellipsis, no count, no tail."""
    if len(value) <= limit:
        return value
    return value[:limit] + "..."


def flatten(value: str) -> str:
    """Collapse a multi-line string onto one line."""
    return value.replace("\n", " ")
