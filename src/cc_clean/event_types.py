"""Type-safe event model for the stream-json transcript format.

// [LAW:one-source-of-truth] The class IS the type; there is no event_type string field.
// [LAW:single-enforcer] parse_event is the sole validation boundary.

Renderers never touch raw dicts; every loosely-typed field is narrowed here.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field


# ─── Type aliases for JSON-parsed values ─────────────────────────────────────

JsonValue = str | int | float | bool | list | dict | None
JsonDict = dict[str, object]


class LineDecodeError(ValueError):
    """A line of input is not a JSON object."""


# ─── Value types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CacheCreation:
    """Cache creation breakdown by TTL bucket."""

    ephemeral_5m_input_tokens: int = 0
    ephemeral_1h_input_tokens: int = 0


@dataclass(frozen=True)
class Usage:
    """Token usage counts."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_creation: CacheCreation | None = None
    service_tier: str = ""


@dataclass(frozen=True)
class ModelUsage:
    """Per-model usage entry from a result event's modelUsage map.

    Fields are None when the upstream entry omits them.
    """

    input_tokens: int | None = None
    output_tokens: int | None = None
    cost_usd: float | None = None


# ─── Content blocks ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ContentBlock:
    """Base class for message content blocks."""


@dataclass(frozen=True)
class TextBlock(ContentBlock):
    text: str = ""


@dataclass(frozen=True)
class ToolUseBlock(ContentBlock):
    id: str = ""
    name: str = ""
    # Insertion order of the JSON document is kept for display.
    input: dict[str, JsonValue] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultBlock(ContentBlock):
    tool_use_id: str = ""
    is_error: bool = False
    content: JsonValue = None


@dataclass(frozen=True)
class UnknownContentBlock(ContentBlock):
    type: str = ""


@dataclass(frozen=True)
class Message:
    """The message envelope embedded in assistant and user events."""

    id: str = ""
    role: str = ""
    model: str = ""
    content: tuple[ContentBlock, ...] = ()
    stop_reason: str = ""
    usage: Usage | None = None


# ─── Event hierarchy ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Event:
    """Base class for all top-level stream events."""


@dataclass(frozen=True)
class SystemEvent(Event):
    subtype: str = ""
    cwd: str = ""
    model: str = ""
    claude_code_version: str = ""
    tools: tuple[str, ...] = ()
    session_id: str = ""


@dataclass(frozen=True)
class AssistantEvent(Event):
    message: Message | None = None
    session_id: str = ""
    parent_tool_use_id: str = ""


@dataclass(frozen=True)
class UserEvent(Event):
    message: Message | None = None
    session_id: str = ""
    parent_tool_use_id: str = ""


@dataclass(frozen=True)
class ResultEvent(Event):
    """Terminal summary of a run."""

    subtype: str = ""
    is_error: bool = False
    num_turns: int = 0
    duration_ms: int = 0
    duration_api_ms: int = 0
    result: str = ""
    total_cost_usd: float = 0.0
    usage: Usage | None = None
    model_usage: dict[str, ModelUsage] = field(default_factory=dict)
    permission_denials: tuple[JsonValue, ...] = ()
    session_id: str = ""


@dataclass(frozen=True)
class UnknownEvent(Event):
    type: str = ""


# ─── Narrowing helpers ───────────────────────────────────────────────────────


def _str(v: object) -> str:
    """Narrow object to str; None becomes empty."""
    if isinstance(v, str):
        return v
    if v is None:
        return ""
    return str(v)


def _int(v: object) -> int:
    """Narrow object to int; anything unparseable becomes 0."""
    if isinstance(v, bool):
        return int(v)
    if isinstance(v, int):
        return v
    try:
        if isinstance(v, float):
            return int(v)
        return int(str(v))
    except (ValueError, OverflowError):
        return 0


def _float(v: object) -> float:
    try:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return float(v)
        return float(str(v))
    except (ValueError, OverflowError):
        return 0.0


def _bool(v: object) -> bool:
    """Only a JSON true is true; strings like "false" are not."""
    return v is True


def _dict(v: object) -> JsonDict:
    return v if isinstance(v, dict) else {}


def _list(v: object) -> list:
    return v if isinstance(v, list) else []


# ─── Parse boundary ──────────────────────────────────────────────────────────


def parse_usage(raw: object) -> Usage | None:
    """Parse a usage object; None when the field is absent or not an object."""
    if not isinstance(raw, dict):
        return None
    cache_raw = raw.get("cache_creation")
    cache_creation = None
    if isinstance(cache_raw, dict):
        cache_creation = CacheCreation(
            ephemeral_5m_input_tokens=_int(cache_raw.get("ephemeral_5m_input_tokens", 0)),
            ephemeral_1h_input_tokens=_int(cache_raw.get("ephemeral_1h_input_tokens", 0)),
        )
    return Usage(
        input_tokens=_int(raw.get("input_tokens", 0)),
        output_tokens=_int(raw.get("output_tokens", 0)),
        cache_read_input_tokens=_int(raw.get("cache_read_input_tokens", 0)),
        cache_creation_input_tokens=_int(raw.get("cache_creation_input_tokens", 0)),
        cache_creation=cache_creation,
        service_tier=_str(raw.get("service_tier", "")),
    )


def _parse_model_usage(raw: object) -> dict[str, ModelUsage]:
    result: dict[str, ModelUsage] = {}
    for model, entry in _dict(raw).items():
        entry = _dict(entry)
        input_tokens = entry.get("inputTokens")
        output_tokens = entry.get("outputTokens")
        cost = entry.get("costUSD")
        result[model] = ModelUsage(
            input_tokens=_int(input_tokens) if input_tokens is not None else None,
            output_tokens=_int(output_tokens) if output_tokens is not None else None,
            cost_usd=_float(cost) if cost is not None else None,
        )
    return result


def _parse_text_block(raw: JsonDict) -> ContentBlock:
    return TextBlock(text=_str(raw.get("text", "")))


def _parse_tool_use_block(raw: JsonDict) -> ContentBlock:
    return ToolUseBlock(
        id=_str(raw.get("id", "")),
        name=_str(raw.get("name", "")),
        input=_dict(raw.get("input")),
    )


def _parse_tool_result_block(raw: JsonDict) -> ContentBlock:
    return ToolResultBlock(
        tool_use_id=_str(raw.get("tool_use_id", "")),
        is_error=_bool(raw.get("is_error")),
        content=raw.get("content"),
    )


# [LAW:dataflow-not-control-flow] Dispatch table for content block parsing
_CONTENT_BLOCK_PARSERS: dict[str, Callable[[JsonDict], ContentBlock]] = {
    "text": _parse_text_block,
    "tool_use": _parse_tool_use_block,
    "tool_result": _parse_tool_result_block,
}


def parse_content_block(raw: object) -> ContentBlock:
    """Parse one content block dict into a typed ContentBlock."""
    raw = _dict(raw)
    block_type = _str(raw.get("type", ""))
    handler = _CONTENT_BLOCK_PARSERS.get(block_type)
    if handler is None:
        return UnknownContentBlock(type=block_type)
    return handler(raw)


def parse_message(raw: object) -> Message | None:
    if not isinstance(raw, dict):
        return None
    content_raw = raw.get("content")
    # A bare string is a user prompt, not a list of blocks.
    if isinstance(content_raw, str):
        blocks: tuple[ContentBlock, ...] = (TextBlock(text=content_raw),)
    else:
        blocks = tuple(parse_content_block(b) for b in _list(content_raw))
    return Message(
        id=_str(raw.get("id", "")),
        role=_str(raw.get("role", "")),
        model=_str(raw.get("model", "")),
        content=blocks,
        stop_reason=_str(raw.get("stop_reason", "")),
        usage=parse_usage(raw.get("usage")),
    )


def _parse_system(raw: JsonDict) -> Event:
    return SystemEvent(
        subtype=_str(raw.get("subtype", "")),
        cwd=_str(raw.get("cwd", "")),
        model=_str(raw.get("model", "")),
        claude_code_version=_str(raw.get("claude_code_version", "")),
        tools=tuple(_str(t) for t in _list(raw.get("tools"))),
        session_id=_str(raw.get("session_id", "")),
    )


def _parse_assistant(raw: JsonDict) -> Event:
    return AssistantEvent(
        message=parse_message(raw.get("message")),
        session_id=_str(raw.get("session_id", "")),
        parent_tool_use_id=_str(raw.get("parent_tool_use_id", "")),
    )


def _parse_user(raw: JsonDict) -> Event:
    return UserEvent(
        message=parse_message(raw.get("message")),
        session_id=_str(raw.get("session_id", "")),
        parent_tool_use_id=_str(raw.get("parent_tool_use_id", "")),
    )


def _parse_result(raw: JsonDict) -> Event:
    return ResultEvent(
        subtype=_str(raw.get("subtype", "")),
        is_error=_bool(raw.get("is_error")),
        num_turns=_int(raw.get("num_turns", 0)),
        duration_ms=_int(raw.get("duration_ms", 0)),
        duration_api_ms=_int(raw.get("duration_api_ms", 0)),
        result=_str(raw.get("result", "")),
        total_cost_usd=_float(raw.get("total_cost_usd", 0.0)),
        usage=parse_usage(raw.get("usage")),
        model_usage=_parse_model_usage(raw.get("modelUsage")),
        permission_denials=tuple(_list(raw.get("permission_denials"))),
        session_id=_str(raw.get("session_id", "")),
    )


# [LAW:dataflow-not-control-flow] Dispatch table for event parsing
_EVENT_PARSERS: dict[str, Callable[[JsonDict], Event]] = {
    "system": _parse_system,
    "assistant": _parse_assistant,
    "user": _parse_user,
    "result": _parse_result,
}


def parse_event(raw: JsonDict) -> Event:
    """Parse a decoded JSON object into a typed Event.

    Unrecognized or missing ``type`` values produce an UnknownEvent rather than
    an error; the renderers decide how (and whether) to show them.
    """
    event_type = _str(raw.get("type", ""))
    handler = _EVENT_PARSERS.get(event_type)
    if handler is None:
        return UnknownEvent(type=event_type)
    return handler(raw)


def parse_line(line: str) -> Event:
    """Decode one line of stream-json into an Event.

    Raises:
        LineDecodeError: If the line is not valid JSON or not a JSON object.
    """
    try:
        raw = json.loads(line)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integer literals, pathological nesting
        raise LineDecodeError(str(e)) from e
    if not isinstance(raw, dict):
        raise LineDecodeError(f"expected a JSON object, got {type(raw).__name__}")
    return parse_event(raw)
