"""Unit tests for the detailed renderers (default, minimal, plain)."""

import pytest

from cc_clean.event_types import ToolResultBlock, Usage, parse_event
from cc_clean.rendering import (
    OutputStyle,
    RenderOptions,
    content_to_text,
    format_input_value,
    format_seconds,
    format_usage,
    is_todo_list,
    render_event,
    tool_result_text,
)
from tests.harness import (
    make_assistant,
    make_result,
    make_system,
    make_tool_result,
    make_tool_use,
    make_user,
    plain_lines,
    plain_text,
)


TODOS = [
    {"content": "A", "status": "completed"},
    {"content": "B", "status": "pending"},
]


# ─── Value formatting ────────────────────────────────────────────────────────


class TestFormatInputValue:
    def test_string(self):
        assert format_input_value("ls -la") == "ls -la"

    def test_long_string_elided(self):
        value = "x" * 301
        assert "(1 char omitted)" in format_input_value(value)

    def test_list(self):
        assert format_input_value([1, 2, 3]) == "[3 items]"

    def test_dict_never_expanded(self):
        assert format_input_value({"nested": {"deep": 1}}) == "{...}"

    @pytest.mark.parametrize(
        "value,expected",
        [(True, "true"), (False, "false"), (None, "null"), (42, "42"), (2.5, "2.5")],
    )
    def test_scalars(self, value, expected):
        assert format_input_value(value) == expected


def test_is_todo_list_only_for_todowrite_todos():
    assert is_todo_list("TodoWrite", "todos", TODOS)
    assert not is_todo_list("TodoWrite", "other", TODOS)
    assert not is_todo_list("Task", "todos", TODOS)
    assert not is_todo_list("TodoWrite", "todos", "not a list")


class TestContentToText:
    def test_string_passthrough(self):
        assert content_to_text("abc") == "abc"

    def test_none_is_empty(self):
        assert content_to_text(None) == ""

    def test_text_parts_joined(self):
        parts = [{"type": "text", "text": "one"}, {"type": "image"}, {"type": "text", "text": "two"}]
        assert content_to_text(parts) == "one\ntwo"

    def test_other_values_json_encoded(self):
        assert content_to_text({"k": 1}) == '{"k": 1}'
        assert content_to_text([1, 2]) == "[1, 2]"


def test_tool_result_text_sanitizes_unless_verbose():
    block = ToolResultBlock(content="out<system-reminder>noise</system-reminder>")
    assert tool_result_text(block, verbose=False) == "out"
    assert "noise" in tool_result_text(block, verbose=True)


def test_format_usage():
    usage = Usage(input_tokens=1, output_tokens=2, cache_read_input_tokens=3, service_tier="standard")
    assert format_usage(usage) == "Tokens: in=1 out=2 cache_read=3"
    assert format_usage(usage, detailed=True) == "Tokens: in=1 out=2 cache_read=3 tier=standard"


# ─── Default style ───────────────────────────────────────────────────────────


class TestDefaultSystem:
    def test_full(self):
        assert plain_lines(make_system()) == [
            "┌─ SYSTEM [init]",
            "│ Working Directory: /home/user/project",
            "│ Model: claude-sonnet-4-5-20250929",
            "│ Claude Code: v2.0.14",
            "│ Tools: 3 available",
            "└─",
        ]

    def test_optional_fields_omitted(self):
        assert plain_lines({"type": "system"}) == ["┌─ SYSTEM", "└─"]

    def test_line_number(self):
        lines = plain_lines(make_system(), line_num=4, show_line_numbers=True)
        assert lines[0] == "┌─ SYSTEM [init] (line 4)"


class TestDefaultAssistant:
    def test_text_blocks_share_one_header(self):
        lines = plain_lines(make_assistant("first", "second"))
        assert lines == ["┌─ ASSISTANT", "│ first", "│ second", "└─"]

    def test_multiline_text_keeps_gutter(self):
        lines = plain_lines(make_assistant("a\nb"))
        assert lines == ["┌─ ASSISTANT", "│ a", "│ b", "└─"]

    def test_no_text_no_header(self):
        lines = plain_lines(make_assistant("", make_tool_use()))
        assert "┌─ ASSISTANT" not in lines
        assert lines[0] == "┌─ TOOL: Bash"

    def test_empty_content_renders_nothing(self):
        assert plain_lines(make_assistant()) == []
        assert plain_lines({"type": "assistant"}) == []

    def test_verbose_usage_footer(self):
        event = make_assistant("hi", usage={"input_tokens": 5, "output_tokens": 6, "cache_read_input_tokens": 7})
        assert "│ Tokens: in=5 out=6 cache_read=7" in plain_lines(event, verbose=True)
        assert not any("Tokens" in line for line in plain_lines(event))

    def test_text_then_tools(self):
        event = make_assistant(make_tool_use("Read", {"file_path": "/f"}), "words")
        lines = plain_lines(event)
        assert lines.index("┌─ ASSISTANT") < lines.index("┌─ TOOL: Read")


class TestDefaultToolUse:
    def test_inputs_listed(self):
        lines = plain_lines(make_assistant(make_tool_use("Bash", {"command": "ls", "timeout": 30})))
        assert lines == [
            "┌─ TOOL: Bash",
            "│ Input:",
            "│   command: ls",
            "│   timeout: 30",
            "└─",
        ]

    def test_verbose_shows_id(self):
        lines = plain_lines(make_assistant(make_tool_use(tool_id="toolu_xyz")), verbose=True)
        assert lines[1] == "│ ID: toolu_xyz"

    def test_id_hidden_by_default(self):
        assert "toolu_01" not in plain_text(make_assistant(make_tool_use()))

    def test_empty_input(self):
        assert plain_lines(make_assistant(make_tool_use("X", {}))) == ["┌─ TOOL: X", "└─"]

    def test_long_string_elided(self):
        value = "a" * 200 + "b" + "c" * 100
        lines = plain_lines(make_assistant(make_tool_use("Write", {"content": value})))
        assert "│   content: " + "a" * 200 + " ... (1 char omitted) ... " + "c" * 100 in lines

    def test_exact_threshold_shown_in_full(self):
        value = "q" * 300
        lines = plain_lines(make_assistant(make_tool_use("Write", {"content": value})))
        assert "│   content: " + value in lines

    def test_multiline_value_continues_in_gutter(self):
        lines = plain_lines(make_assistant(make_tool_use("Write", {"content": "x\ny"})))
        assert "│   content: x" in lines
        assert "│     y" in lines

    def test_todos_expanded(self):
        lines = plain_lines(make_assistant(make_tool_use("TodoWrite", {"todos": TODOS})))
        assert lines == [
            "┌─ TOOL: TodoWrite",
            "│ Input:",
            "│   todos: ",
            "│     ✓ A",
            "│     ○ B",
            "└─",
        ]

    def test_todo_glyphs(self):
        todos = [
            {"content": "a", "status": "completed"},
            {"content": "b", "status": "in_progress"},
            {"content": "c", "status": "pending"},
            {"content": "d", "status": "blocked"},
            {"content": "e"},
            "not a dict",
        ]
        lines = plain_lines(make_assistant(make_tool_use("TodoWrite", {"todos": todos})))
        assert lines[3:8] == ["│     ✓ a", "│     → b", "│     ○ c", "│     - d", "│     - e"]
        assert lines[8] == "└─"

    def test_other_tool_list_not_expanded(self):
        lines = plain_lines(make_assistant(make_tool_use("Task", {"todos": TODOS})))
        assert "│   todos: [2 items]" in lines
        assert not any("✓" in line for line in lines)

    def test_other_key_list_not_expanded(self):
        lines = plain_lines(make_assistant(make_tool_use("TodoWrite", {"items": TODOS})))
        assert "│   items: [2 items]" in lines


class TestDefaultToolResult:
    def test_simple(self):
        lines = plain_lines(make_user(make_tool_result("hello")))
        assert lines == ["┌─ TOOL RESULT", "│ hello", "└─"]

    def test_error_header(self):
        lines = plain_lines(make_user(make_tool_result("boom", is_error=True)))
        assert lines == ["┌─ TOOL RESULT ERROR", "│ boom", "└─"]

    @pytest.mark.parametrize("content", ["", None, "<system-reminder>only</system-reminder>", "  \n  "])
    def test_no_output_placeholder(self, content):
        lines = plain_lines(make_user(make_tool_result(content)))
        assert lines == ["┌─ TOOL RESULT", "│ (no output)", "└─"]

    def test_empty_error_placeholder(self):
        lines = plain_lines(make_user(make_tool_result("", is_error=True)))
        assert "│ (no output)" in lines

    def test_reminder_stripped(self):
        content = "real output\n<system-reminder>\nsecret\n</system-reminder>"
        text = plain_text(make_user(make_tool_result(content)))
        assert "real output" in text
        assert "secret" not in text
        assert "system-reminder" not in text

    def test_verbose_keeps_reminder_and_shows_id(self):
        content = "out<system-reminder>secret</system-reminder>"
        lines = plain_lines(make_user(make_tool_result(content, tool_use_id="t9")), verbose=True)
        assert "│ Tool ID: t9" in lines
        assert "│ out<system-reminder>secret</system-reminder>" in lines

    def test_forty_lines_not_truncated(self):
        content = "\n".join(str(i) for i in range(1, 41))
        lines = plain_lines(make_user(make_tool_result(content)))
        assert len(lines) == 42
        assert not any("more line" in line for line in lines)

    def test_forty_one_lines_truncated(self):
        content = "\n".join(str(i) for i in range(1, 42))
        lines = plain_lines(make_user(make_tool_result(content)))
        body = lines[1:-1]
        assert body[:20] == [f"│ {i}" for i in range(1, 21)]
        assert body[20] == "│ ... (1 more line) ..."
        assert body[21:] == [f"│ {i}" for i in range(22, 42)]

    def test_list_content(self):
        content = [{"type": "text", "text": "from list"}]
        assert "│ from list" in plain_lines(make_user(make_tool_result(content)))

    def test_multiple_results(self):
        event = make_user(make_tool_result("one"), make_tool_result("two"))
        assert plain_text(event).count("TOOL RESULT") == 2

    def test_user_without_tool_results(self):
        assert plain_lines({"type": "user", "message": {"role": "user", "content": "prompt"}}) == []


class TestDefaultResult:
    def test_success(self):
        assert plain_lines(make_result()) == [
            "┌─ RESULT: SUCCESS",
            "│ Turns: 3",
            "│ Duration: 1.50s (API: 1.20s)",
            "│ Cost: $0.0123",
            "│",
            "│ Tokens: in=100 out=50",
            "│",
            "│ Done.",
            "└─",
        ]

    def test_error_header(self):
        assert plain_lines(make_result(is_error=True))[0] == "┌─ RESULT: ERROR"

    def test_zero_stats_omitted(self):
        lines = plain_lines(make_result(result="", num_turns=0, duration_ms=0, total_cost_usd=0))
        assert lines == ["┌─ RESULT: SUCCESS", "│", "│ Tokens: in=100 out=50", "└─"]

    def test_api_duration_only_with_duration(self):
        lines = plain_lines(make_result(duration_ms=2000, duration_api_ms=0))
        assert "│ Duration: 2.00s" in lines

    def test_string_false_is_not_error(self):
        raw = make_result()
        raw["is_error"] = "false"
        assert plain_lines(raw)[0] == "┌─ RESULT: SUCCESS"

    def test_duration_beyond_float_range(self):
        ms = 10**400 + 1234
        assert format_seconds(ms) == f"{10**397 + 1}.23s"
        lines = plain_lines(make_result(duration_ms=ms, duration_api_ms=0))
        assert f"│ Duration: {10**397 + 1}.23s" in lines


    def test_cost_four_decimals(self):
        assert "│ Cost: $1.5000" in plain_lines(make_result(total_cost_usd=1.5))

    def test_model_usage_verbose_only(self):
        event = make_result(
            modelUsage={"claude-sonnet": {"inputTokens": 1200, "outputTokens": 300, "costUSD": 0.01234}}
        )
        assert "Model Usage" not in plain_text(event)
        lines = plain_lines(event, verbose=True)
        start = lines.index("│ Model Usage:")
        assert lines[start + 1:start + 5] == [
            "│   claude-sonnet:",
            "│     Input: 1200 tokens",
            "│     Output: 300 tokens",
            "│     Cost: $0.0123",
        ]

    def test_permission_denials(self):
        denials = [{"tool_name": "Bash"}, {"tool_name": "Write"}]
        event = make_result(permission_denials=denials)
        lines = plain_lines(event)
        assert "│ Permission Denials: 2" in lines
        assert not any("[1]" in line for line in lines)

        verbose_lines = plain_lines(event, verbose=True)
        assert '│   [1] {"tool_name": "Bash"}' in verbose_lines
        assert '│   [2] {"tool_name": "Write"}' in verbose_lines

    def test_multiline_result_body(self):
        lines = plain_lines(make_result(result="one\ntwo"))
        assert lines[-3:] == ["│ one", "│ two", "└─"]


def test_unknown_type_default_diagnostic():
    assert plain_lines({"type": "foo"}, line_num=7) == ["│ [Line 7] Unknown message type: foo"]


# ─── Minimal & plain styles ──────────────────────────────────────────────────


@pytest.mark.parametrize("style", ["minimal", "plain"])
class TestIndentedStyles:
    def test_system(self, style):
        assert plain_lines(make_system(), style=style) == [
            "SYSTEM [init]",
            "  Working Directory: /home/user/project",
            "  Model: claude-sonnet-4-5-20250929",
            "  Claude Code: v2.0.14",
            "  Tools: 3 available",
            "",
        ]

    def test_no_box_drawing(self, style):
        events = [
            make_system(),
            make_assistant("hi", make_tool_use()),
            make_user(make_tool_result("ok")),
            make_result(),
        ]
        for event in events:
            for line in plain_lines(event, style=style):
                assert "┌" not in line and "│" not in line and "└" not in line

    def test_assistant(self, style):
        assert plain_lines(make_assistant("hi"), style=style) == ["ASSISTANT", "  hi", ""]

    def test_line_number(self, style):
        lines = plain_lines(make_assistant("hi"), line_num=9, style=style, show_line_numbers=True)
        assert lines[0] == "ASSISTANT (line 9)"

    def test_tool_use(self, style):
        lines = plain_lines(make_assistant(make_tool_use("Bash", {"command": "ls"})), style=style)
        assert lines == ["TOOL: Bash", "  Input:", "    command: ls", ""]

    def test_tool_result_no_output(self, style):
        lines = plain_lines(make_user(make_tool_result("")), style=style)
        assert lines == ["TOOL RESULT", "  (no output)", ""]

    def test_result(self, style):
        assert plain_lines(make_result(), style=style) == [
            "RESULT: SUCCESS",
            "  Turns: 3",
            "  Duration: 1.50s (API: 1.20s)",
            "  Cost: $0.0123",
            "",
            "  Tokens: in=100 out=50",
            "",
            "  Done.",
            "",
        ]

    def test_unknown_type_silent(self, style):
        assert plain_lines({"type": "foo"}, style=style) == []


def test_minimal_todo_glyphs():
    lines = plain_lines(make_assistant(make_tool_use("TodoWrite", {"todos": TODOS})), style="minimal")
    assert "      ✓ A" in lines
    assert "      ○ B" in lines


def test_plain_todo_glyphs_bracketed():
    lines = plain_lines(make_assistant(make_tool_use("TodoWrite", {"todos": TODOS})), style="plain")
    assert "      [✓] A" in lines
    assert "      [○] B" in lines


def test_plain_lines_carry_no_styles():
    rendered = render_event(parse_event(make_result()), 1, RenderOptions(style=OutputStyle.PLAIN))
    for text in rendered:
        assert not text.spans
        assert not text.style
