"""Input sanitization for task names coming from the scheduler."""

from __future__ import annotations

import re

_MAX_LENGTH = 253

# ANSI escape sequences: ESC[ ... final byte, or ESC followed by other sequences
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|\x1b[()][AB012]|\x1b\].*?\x07|\x1b[^[\]()]")

# Control characters, tab/newline/CR and DEL included
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_task_name(name: str) -> str:
    """Strip ANSI escapes and control chars, trim whitespace, truncate.

    Idempotent: sanitize(sanitize(x)) == sanitize(x) for all x.
    """
    result = _ANSI_RE.sub("", name)
    result = _CONTROL_RE.sub("", result)
    result = result.strip()
    return result[:_MAX_LENGTH].rstrip()
