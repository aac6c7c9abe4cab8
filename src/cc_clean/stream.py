"""Stream controller: line loop, decode-error recovery, result de-duplication.

// [LAW:single-enforcer] The only owner of cross-line state (line counter and
// the last displayed assistant text).
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import IO

from rich.console import Console
from rich.text import Text

from cc_clean.event_types import AssistantEvent, Event, LineDecodeError, ResultEvent, parse_line
from cc_clean.rendering import OutputStyle, RenderOptions, assistant_texts, make_renderer

logger = logging.getLogger(__name__)


def make_console(style: OutputStyle, file: IO[str] | None = None, force_terminal: bool | None = None) -> Console:
    """Console for rendered output. Plain style never emits escape sequences."""
    if style == OutputStyle.PLAIN:
        return Console(file=file, highlight=False, no_color=True, color_system=None)
    return Console(file=file, highlight=False, force_terminal=force_terminal)


def make_err_console(file: IO[str] | None = None) -> Console:
    return Console(file=file, stderr=True, highlight=False)


@dataclass
class StreamStats:
    """Counts accumulated over one run."""

    lines: int = 0
    events: int = 0
    decode_errors: int = 0
    deduplicated: int = 0


class StreamProcessor:
    """Parse, de-duplicate and render a stream-json transcript line by line."""

    def __init__(self, console: Console, err_console: Console, options: RenderOptions):
        self.console = console
        self.err_console = err_console
        self.options = options
        self.renderer = make_renderer(options)
        self.line_num = 0
        self.last_assistant_text: str | None = None
        self.stats = StreamStats()

    def process_stream(self, lines: Iterable[str]) -> StreamStats:
        """Consume every line of ``lines``.

        Read errors raised by the iterable (OSError, UnicodeDecodeError)
        propagate to the caller; decode errors on individual lines do not.
        """
        for line in lines:
            self.process_line(line)
        logger.debug(
            "stream done lines=%d events=%d decode_errors=%d deduplicated=%d",
            self.stats.lines,
            self.stats.events,
            self.stats.decode_errors,
            self.stats.deduplicated,
        )
        return self.stats

    def process_line(self, line: str) -> None:
        self.line_num += 1
        self.stats.lines += 1
        line = line.rstrip("\r\n")
        if not line:
            return

        try:
            event = parse_line(line)
        except LineDecodeError as e:
            self.stats.decode_errors += 1
            logger.debug("decode error line=%d: %s", self.line_num, e)
            self.err_console.print(Text(f"Error parsing line {self.line_num}: {e}"), soft_wrap=True)
            return

        event = self.deduplicate(event)
        for text in self.renderer.render(event, self.line_num):
            self.console.print(text, soft_wrap=True)
        self.stats.events += 1

    def deduplicate(self, event: Event) -> Event:
        """Track assistant text and drop a result body that merely repeats it.

        Comparison is exact and only against the most recent text block.
        """
        if isinstance(event, AssistantEvent):
            for text in assistant_texts(event):
                self.last_assistant_text = text
            return event
        if (
            isinstance(event, ResultEvent)
            and event.result
            and event.result == self.last_assistant_text
        ):
            self.stats.deduplicated += 1
            logger.debug("result body on line %d repeats last assistant text", self.line_num)
            return dataclasses.replace(event, result="")
        return event
