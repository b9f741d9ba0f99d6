"""Duration formatting for the conference clock.

Durations are shown as ``MM:SS`` while under an hour and as ``HH:MM:SS``
from an hour on.  Partial seconds are floored, so ``30_999`` ms and
``30_000`` ms both render as ``"00:30"``.
"""

from __future__ import annotations


def format_duration(milliseconds: int) -> str:
    """Format *milliseconds* as a clock string (negative clamps to zero)."""
    total_seconds = max(0, int(milliseconds)) // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"
