"""Test harness for cc-clean.

Re-exports all public API for convenient imports:
    from tests.harness import make_assistant, make_result, to_lines, ...
"""

from tests.harness.builders import (
    make_system,
    make_text,
    make_tool_use,
    make_tool_result,
    make_assistant,
    make_user,
    make_result,
    to_lines,
)
from tests.harness.content import plain_lines, plain_text

__all__ = [
    "make_system",
    "make_text",
    "make_tool_use",
    "make_tool_result",
    "make_assistant",
    "make_user",
    "make_result",
    "to_lines",
    "plain_lines",
    "plain_text",
]
