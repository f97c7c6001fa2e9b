from datetime import datetime
from typing import Optional

NOTE_TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M'


def append_note(existing: Optional[str], text: str, now: datetime) -> str:
    """Append a timestamped entry to a notes log; prior content is never rewritten."""
    entry = f"[{now.strftime(NOTE_TIMESTAMP_FORMAT)}] {text}"
    if existing:
        return f"{existing}\n{entry}"
    return entry
