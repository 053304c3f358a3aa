"""Stored filename generation and parsing.

A stored name is ``<timestamp>_<disambiguator>_<originalName>``. The timestamp
is UTC with millisecond precision and path-hostile characters replaced, so
names sort chronologically; the disambiguator keeps two uploads of the same
file within the same millisecond apart. The original name is kept verbatim,
which makes the name alone enough to rebuild a file's record.
"""

import secrets
from datetime import datetime, timezone

from app.storage.errors import InvalidArgument

SEPARATOR = "_"
DISAMBIGUATOR_BYTES = 4  # 8 hex chars
MAX_NAME_BYTES = 255


def safe_basename(filename: str) -> str:
    """Strip any directory part (POSIX or Windows style) from a client-supplied name."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    if not name.strip() or name in (".", "..") or "\x00" in name:
        raise InvalidArgument("Invalid filename")
    return name


def _timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    # 2026-10-16T19:31:05.123+00:00 -> 2026-10-16T19-31-05-123Z
    return iso.replace("+00:00", "Z").replace(":", "-").replace(".", "-")


def generate_stored_name(original_name: str, now: datetime | None = None) -> str:
    original = safe_basename(original_name)
    stored = SEPARATOR.join(
        [_timestamp(now), secrets.token_hex(DISAMBIGUATOR_BYTES), original]
    )
    if len(stored.encode("utf-8")) > MAX_NAME_BYTES:
        raise InvalidArgument("Filename too long")
    return stored


def parse_original_name(stored_name: str) -> str:
    """Recover the original name; legacy names without the prefix come back as-is."""
    parts = stored_name.split(SEPARATOR)
    if len(parts) < 3:
        return stored_name
    return SEPARATOR.join(parts[2:])
