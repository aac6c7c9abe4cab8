"""Removal of out-of-band annotation regions from tool output.

Tool results often carry <system-reminder> blocks injected by the harness.
They are noise in a transcript, so non-verbose rendering strips them.
"""

import re

# Non-greedy and DOTALL: the first closing tag ends the region, bodies span lines.
_SYSTEM_REMINDER_RE = re.compile(r"<system-reminder>.*?</system-reminder>", re.DOTALL)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def strip_system_reminders(text: str) -> str:
    """Remove system-reminder regions, collapse blank runs, trim.

    Idempotent: stripping already-stripped text returns it unchanged.
    """
    result = text
    # Removing one region can splice a new opening tag together.
    while True:
        stripped = _SYSTEM_REMINDER_RE.sub("", result)
        if stripped == result:
            break
        result = stripped
    result = _BLANK_RUN_RE.sub("\n\n", result)
    return result.strip()
