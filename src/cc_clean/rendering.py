"""Rich rendering for stream-json events.

Converts typed events from event_types.py into Rich Text lines for printing.

Two renderer classes share one dispatch:
1. DetailedRenderer: default, minimal and plain. One traversal, parameterized
   by a Frame of per-style primitives (header prefix, gutter, separator, footer).
2. CompactRenderer: one line per event or content block.

# [LAW:single-enforcer] Sanitization and truncation happen only in this module.
# Renderers are pure: event in, list[Text] out. Printing belongs to stream.py.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum

from rich.text import Text

from cc_clean.event_types import (
    AssistantEvent,
    Event,
    JsonValue,
    ResultEvent,
    SystemEvent,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownEvent,
    Usage,
    UserEvent,
)
from cc_clean.sanitize import strip_system_reminders
from cc_clean.truncation import (
    elide_middle,
    flatten,
    omitted_lines_marker,
    truncate_preview,
    window_lines,
)

NO_OUTPUT = "(no output)"

COMPACT_TEXT_CHARS = 100
COMPACT_RESULT_CHARS = 200
COMPACT_INPUT_CHARS = 50


class OutputStyle(Enum):
    """Mutually exclusive output formatting modes."""

    DEFAULT = "default"
    COMPACT = "compact"
    MINIMAL = "minimal"
    PLAIN = "plain"


STYLE_DESCRIPTIONS: dict[OutputStyle, str] = {
    OutputStyle.DEFAULT: "Full output with colored boxes and borders",
    OutputStyle.COMPACT: "Single-line summaries for each message",
    OutputStyle.MINIMAL: "Clean output without box-drawing characters",
    OutputStyle.PLAIN: "No colors, suitable for piping",
}


@dataclass(frozen=True)
class RenderOptions:
    """Options threaded through every render call.

    // [LAW:one-source-of-truth] The only place verbose/line-number state lives.
    """

    style: OutputStyle = OutputStyle.DEFAULT
    verbose: bool = False
    show_line_numbers: bool = False


# ─── Palette ─────────────────────────────────────────────────────────────────

GRAY = "bright_black"

TODO_GLYPHS: dict[str, tuple[str, str]] = {
    "completed": ("✓", "green"),
    "in_progress": ("→", "yellow"),
    "pending": ("○", GRAY),
}
TODO_FALLBACK_GLYPH = ("-", GRAY)


# ─── Value formatting ────────────────────────────────────────────────────────


def format_scalar(value: JsonValue) -> str:
    """JSON spelling for numbers, booleans and null; str() for anything else."""
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return str(value)


def format_input_value(value: JsonValue) -> str:
    """Format one tool_use input value for the detailed styles.

    // [LAW:one-type-per-behavior] Every JSON value shape has an explicit branch.
    """
    if isinstance(value, str):
        return elide_middle(value)
    if isinstance(value, list):
        return f"[{len(value)} items]"
    if isinstance(value, dict):
        return "{...}"
    return format_scalar(value)


def format_compact_input(key: str, value: JsonValue) -> str:
    if isinstance(value, str):
        return f'{key}: "{truncate_preview(flatten(value), COMPACT_INPUT_CHARS)}"'
    if isinstance(value, list):
        return f"{key}: [{len(value)} items]"
    if isinstance(value, dict):
        return f"{key}: {{...}}"
    return f"{key}: {format_scalar(value)}"


def is_todo_list(tool_name: str, key: str, value: JsonValue) -> bool:
    """Only TodoWrite's ``todos`` list is expanded item by item."""
    return tool_name == "TodoWrite" and key == "todos" and isinstance(value, list)


def content_to_text(content: JsonValue) -> str:
    """Coerce a tool_result content value to a string.

    Lists of text parts are joined; any other non-string value is JSON encoded.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = [
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        ]
        if texts:
            return "\n".join(str(t) for t in texts)
    return json.dumps(content, ensure_ascii=False)


def tool_result_text(block: ToolResultBlock, verbose: bool) -> str:
    """Displayable tool result body: coerced, then sanitized unless verbose."""
    text = content_to_text(block.content)
    if verbose:
        return text
    return strip_system_reminders(text)


def format_usage(usage: Usage, detailed: bool = False) -> str:
    parts = [f"Tokens: in={usage.input_tokens} out={usage.output_tokens}"]
    if usage.cache_read_input_tokens > 0:
        parts.append(f"cache_read={usage.cache_read_input_tokens}")
    if usage.cache_creation_input_tokens > 0:
        parts.append(f"cache_create={usage.cache_creation_input_tokens}")
    if detailed:
        cc = usage.cache_creation
        if cc is not None and (cc.ephemeral_5m_input_tokens or cc.ephemeral_1h_input_tokens):
            parts.append(
                f"(5m={cc.ephemeral_5m_input_tokens} 1h={cc.ephemeral_1h_input_tokens})"
            )
        if usage.service_tier:
            parts.append(f"tier={usage.service_tier}")
    return " ".join(parts)


def format_seconds(ms: int) -> str:
    try:
        return f"{ms / 1000.0:.2f}s"
    except OverflowError:
        # Too large for a float; integer arithmetic keeps two truncated decimals.
        seconds, millis = divmod(ms, 1000)
        return f"{seconds}.{millis // 10:02d}s"


def format_cost(usd: float) -> str:
    return f"${usd:.4f}"


def format_denial(denial: JsonValue) -> str:
    if isinstance(denial, str):
        return denial
    return json.dumps(denial, ensure_ascii=False)


def assistant_texts(event: AssistantEvent) -> list[str]:
    """Non-empty text blocks of an assistant event, in order."""
    if event.message is None:
        return []
    return [b.text for b in event.message.content if isinstance(b, TextBlock) and b.text]


# ─── Renderers ───────────────────────────────────────────────────────────────


class Renderer:
    """Shared dispatch for all styles.

    Subclasses implement one method per event kind; each returns list[Text].
    """

    def __init__(self, options: RenderOptions):
        self.options = options

    def render(self, event: Event, line_num: int) -> list[Text]:
        # [LAW:dataflow-not-control-flow] Dispatch table keyed by event class
        handlers = {
            SystemEvent: self.render_system,
            AssistantEvent: self.render_assistant,
            UserEvent: self.render_user,
            ResultEvent: self.render_result,
        }
        handler = handlers.get(type(event), self.render_unknown)
        return handler(event, line_num)

    def render_system(self, event: SystemEvent, line_num: int) -> list[Text]:
        raise NotImplementedError

    def render_assistant(self, event: AssistantEvent, line_num: int) -> list[Text]:
        raise NotImplementedError

    def render_user(self, event: UserEvent, line_num: int) -> list[Text]:
        if event.message is None:
            return []
        lines: list[Text] = []
        for block in event.message.content:
            if isinstance(block, ToolResultBlock):
                lines.extend(self.render_tool_result(block, line_num))
        return lines

    def render_tool_use(self, block: ToolUseBlock, line_num: int) -> list[Text]:
        raise NotImplementedError

    def render_tool_result(self, block: ToolResultBlock, line_num: int) -> list[Text]:
        raise NotImplementedError

    def render_result(self, event: ResultEvent, line_num: int) -> list[Text]:
        raise NotImplementedError

    def render_unknown(self, event: Event, line_num: int) -> list[Text]:
        return []


@dataclass(frozen=True)
class Frame:
    """Per-style formatting primitives injected into DetailedRenderer."""

    header_prefix: str
    gutter: str
    separator: str
    footer: str
    colored: bool
    bracket_glyphs: bool = False
    announce_unknown: bool = False


FRAMES: dict[OutputStyle, Frame] = {
    OutputStyle.DEFAULT: Frame(
        header_prefix="┌─ ",
        gutter="│ ",
        separator="│",
        footer="└─",
        colored=True,
        announce_unknown=True,
    ),
    OutputStyle.MINIMAL: Frame(header_prefix="", gutter="  ", separator="", footer="", colored=True),
    OutputStyle.PLAIN: Frame(
        header_prefix="",
        gutter="  ",
        separator="",
        footer="",
        colored=False,
        bracket_glyphs=True,
    ),
}


class DetailedRenderer(Renderer):
    """Multi-line rendering shared by the default, minimal and plain styles."""

    def __init__(self, options: RenderOptions, frame: Frame):
        super().__init__(options)
        self.frame = frame

    # ── primitives ──

    def _s(self, style: str) -> str:
        return style if self.frame.colored else ""

    def _line_num(self, line_num: int) -> str:
        return f" (line {line_num})" if self.options.show_line_numbers else ""

    def _header(self, label: str, style: str, line_num: int, tag: str = "", tag_style: str = "") -> Text:
        text = Text.assemble((self.frame.header_prefix + label, self._s(style)))
        if tag:
            text.append(tag, self._s(tag_style))
        text.append(self._line_num(line_num), self._s(GRAY))
        return text

    def _body(self, tone: str, *parts: tuple[str, str], level: int = 0) -> Text:
        text = Text(self.frame.gutter + "  " * level, self._s(tone))
        for content, style in parts:
            text.append(content, self._s(style))
        return text

    def _body_lines(self, tone: str, content: str, style: str = "", level: int = 0) -> list[Text]:
        return [self._body(tone, (line, style), level=level) for line in content.split("\n")]

    def _separator(self, tone: str) -> Text:
        return Text(self.frame.separator, self._s(tone))

    def _footer(self, tone: str) -> Text:
        return Text(self.frame.footer, self._s(tone))

    # ── events ──

    def render_system(self, event: SystemEvent, line_num: int) -> list[Text]:
        tag = f" [{event.subtype}]" if event.subtype else ""
        lines = [self._header("SYSTEM", "bold cyan", line_num, tag, "cyan")]
        fields = []
        if event.cwd:
            fields.append(f"Working Directory: {event.cwd}")
        if event.model:
            fields.append(f"Model: {event.model}")
        if event.claude_code_version:
            fields.append(f"Claude Code: v{event.claude_code_version}")
        if event.tools:
            fields.append(f"Tools: {len(event.tools)} available")
        lines.extend(self._body("cyan", (f, "cyan")) for f in fields)
        lines.append(self._footer("cyan"))
        return lines

    def render_assistant(self, event: AssistantEvent, line_num: int) -> list[Text]:
        message = event.message
        if message is None or not message.content:
            return []

        lines: list[Text] = []
        texts = assistant_texts(event)
        if texts:
            lines.append(self._header("ASSISTANT", "bold green", line_num))
            for text in texts:
                lines.extend(self._body_lines("green", text))
            if self.options.verbose and message.usage is not None:
                lines.append(self._body(GRAY, (format_usage(message.usage, detailed=True), GRAY)))
            lines.append(self._footer("green"))

        for block in message.content:
            if isinstance(block, ToolUseBlock):
                lines.extend(self.render_tool_use(block, line_num))
        return lines

    def render_tool_use(self, block: ToolUseBlock, line_num: int) -> list[Text]:
        lines = [self._header(f"TOOL: {block.name}", "bold yellow", line_num)]
        if self.options.verbose:
            lines.append(self._body("yellow", (f"ID: {block.id}", "yellow")))

        if block.input:
            lines.append(self._body("yellow", ("Input:", "yellow")))
            for key, value in block.input.items():
                if is_todo_list(block.name, key, value):
                    lines.append(self._body("yellow", (f"{key}: ", "yellow"), level=1))
                    lines.extend(self._todo_lines(value))
                    continue
                first, *rest = format_input_value(value).split("\n")
                lines.append(self._body("yellow", (f"{key}: ", "yellow"), (first, ""), level=1))
                lines.extend(self._body("yellow", (line, ""), level=2) for line in rest)

        lines.append(self._footer("yellow"))
        return lines

    def _todo_lines(self, todos: list) -> list[Text]:
        lines: list[Text] = []
        for todo in todos:
            if not isinstance(todo, dict):
                continue
            content = todo.get("content")
            status = todo.get("status")
            glyph, glyph_style = (
                TODO_GLYPHS.get(status, TODO_FALLBACK_GLYPH)
                if isinstance(status, str)
                else TODO_FALLBACK_GLYPH
            )
            if self.frame.bracket_glyphs:
                glyph = f"[{glyph}]"
            content_str = content if isinstance(content, str) else ""
            lines.append(
                self._body("yellow", (glyph, glyph_style), (f" {content_str}", "yellow"), level=2)
            )
        return lines

    def render_tool_result(self, block: ToolResultBlock, line_num: int) -> list[Text]:
        if block.is_error:
            lines = [self._header("TOOL RESULT ERROR", "bold red", line_num)]
            tone = "red"
        else:
            lines = [self._header("TOOL RESULT", "bold magenta", line_num)]
            tone = GRAY

        if self.options.verbose:
            lines.append(self._body(tone, (f"Tool ID: {block.tool_use_id}", tone)))

        text = tool_result_text(block, self.options.verbose)
        if not text:
            lines.append(self._body(tone, (NO_OUTPUT, GRAY)))
        else:
            window = window_lines(text)
            lines.extend(self._body(tone, (line, "")) for line in window.head)
            if window.omitted:
                lines.append(self._body(tone, (omitted_lines_marker(window.omitted), GRAY)))
                lines.extend(self._body(tone, (line, "")) for line in window.tail)

        lines.append(self._footer(tone))
        return lines

    def render_result(self, event: ResultEvent, line_num: int) -> list[Text]:
        if event.is_error:
            lines = [self._header("RESULT: ERROR", "bold red", line_num)]
        else:
            lines = [self._header("RESULT: SUCCESS", "bold blue", line_num)]
        tone = "blue"
        verbose = self.options.verbose

        if event.num_turns > 0:
            lines.append(self._body(tone, (f"Turns: {event.num_turns}", tone)))
        if event.duration_ms > 0:
            duration = f"Duration: {format_seconds(event.duration_ms)}"
            if event.duration_api_ms > 0:
                duration += f" (API: {format_seconds(event.duration_api_ms)})"
            lines.append(self._body(tone, (duration, tone)))
        if event.total_cost_usd > 0:
            lines.append(self._body(tone, (f"Cost: {format_cost(event.total_cost_usd)}", tone)))

        if event.usage is not None:
            lines.append(self._separator(tone))
            lines.append(self._body(tone, (format_usage(event.usage, detailed=verbose), tone)))

        if verbose and event.model_usage:
            lines.append(self._separator(tone))
            lines.append(self._body(tone, ("Model Usage:", tone)))
            for model, usage in event.model_usage.items():
                lines.append(self._body(tone, (f"{model}:", tone), level=1))
                if usage.input_tokens is not None:
                    lines.append(self._body(tone, (f"Input: {usage.input_tokens} tokens", tone), level=2))
                if usage.output_tokens is not None:
                    lines.append(self._body(tone, (f"Output: {usage.output_tokens} tokens", tone), level=2))
                if usage.cost_usd is not None:
                    lines.append(self._body(tone, (f"Cost: {format_cost(usage.cost_usd)}", tone), level=2))

        if event.permission_denials:
            lines.append(self._separator(tone))
            lines.append(self._body(tone, (f"Permission Denials: {len(event.permission_denials)}", "red")))
            if verbose:
                for i, denial in enumerate(event.permission_denials, 1):
                    lines.append(self._body(tone, (f"[{i}] {format_denial(denial)}", "red"), level=1))

        if event.result:
            lines.append(self._separator(tone))
            lines.extend(self._body_lines(tone, event.result))

        lines.append(self._footer(tone))
        return lines

    def render_unknown(self, event: Event, line_num: int) -> list[Text]:
        if not self.frame.announce_unknown:
            return []
        event_type = event.type if isinstance(event, UnknownEvent) else type(event).__name__
        return [
            Text(
                f"{self.frame.gutter}[Line {line_num}] Unknown message type: {event_type}",
                self._s(GRAY),
            )
        ]


class CompactRenderer(Renderer):
    """One line per event or content block."""

    def _line_num(self, line_num: int) -> str:
        return f" L{line_num}" if self.options.show_line_numbers else ""

    def render_system(self, event: SystemEvent, line_num: int) -> list[Text]:
        text = Text("SYS", "bold cyan")
        if event.subtype:
            text.append(f"[{event.subtype}]", "cyan")
        text.append(self._line_num(line_num), GRAY)
        if event.model:
            text.append(f" {event.model}", "cyan")
        if event.cwd:
            text.append(f" @{event.cwd}", "cyan")
        return [text]

    def render_assistant(self, event: AssistantEvent, line_num: int) -> list[Text]:
        if event.message is None:
            return []
        lines: list[Text] = []
        # Blocks keep their original interleaving in this style.
        for block in event.message.content:
            if isinstance(block, TextBlock) and block.text:
                lines.append(
                    Text.assemble(
                        ("AST", "bold green"),
                        (self._line_num(line_num) + " ", GRAY),
                        truncate_preview(flatten(block.text), COMPACT_TEXT_CHARS),
                    )
                )
            elif isinstance(block, ToolUseBlock):
                lines.extend(self.render_tool_use(block, line_num))
        return lines

    def render_tool_use(self, block: ToolUseBlock, line_num: int) -> list[Text]:
        text = Text.assemble(
            ("TOOL", "bold yellow"),
            (self._line_num(line_num) + " ", GRAY),
            (block.name, "yellow"),
        )
        if block.input:
            inputs = ", ".join(format_compact_input(k, v) for k, v in block.input.items())
            text.append(f" {{{inputs}}}", "yellow")
        return [text]

    def render_tool_result(self, block: ToolResultBlock, line_num: int) -> list[Text]:
        label = ("ERR", "bold red") if block.is_error else ("RES", "bold magenta")
        text = Text.assemble(label, (self._line_num(line_num) + " ", GRAY))
        body = flatten(tool_result_text(block, self.options.verbose))
        if not body:
            text.append(NO_OUTPUT, GRAY)
        else:
            text.append(truncate_preview(body, COMPACT_TEXT_CHARS))
        return [text]

    def render_result(self, event: ResultEvent, line_num: int) -> list[Text]:
        text = Text("FAIL", "bold red") if event.is_error else Text("OK", "bold blue")
        text.append(self._line_num(line_num), GRAY)
        stats = []
        if event.num_turns > 0:
            stats.append(f" turns={event.num_turns}")
        if event.duration_ms > 0:
            stats.append(f" {format_seconds(event.duration_ms)}")
        if event.total_cost_usd > 0:
            stats.append(f" {format_cost(event.total_cost_usd)}")
        if event.usage is not None:
            stats.append(f" in={event.usage.input_tokens} out={event.usage.output_tokens}")
        text.append("".join(stats), "blue")

        lines = [text]
        if event.result:
            lines.append(Text("  " + truncate_preview(flatten(event.result), COMPACT_RESULT_CHARS)))
        return lines


def make_renderer(options: RenderOptions) -> Renderer:
    """Build the renderer for ``options.style``."""
    if options.style == OutputStyle.COMPACT:
        return CompactRenderer(options)
    return DetailedRenderer(options, FRAMES[options.style])


def render_event(event: Event, line_num: int, options: RenderOptions) -> list[Text]:
    """Render one event to styled lines. Convenience wrapper over make_renderer."""
    return make_renderer(options).render(event, line_num)
