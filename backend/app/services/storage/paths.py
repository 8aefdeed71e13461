"""
paths.py
- Purpose: Object path conventions for uploaded assets.

Storage key convention:
{category}/{unix_ms}_{sanitized_filename}

- Unique per millisecond + name.
- Every char outside [A-Za-z0-9.] becomes "_" so the key never breaks a URL path.
"""

import re
import time

_UNSAFE = re.compile(r"[^A-Za-z0-9.]")


def sanitize_filename(name: str | None) -> str:
    return _UNSAFE.sub("_", name or "")


def now_ms() -> int:
    return int(time.time() * 1000)


def build_destination_path(category: str, filename: str | None, *, timestamp_ms: int | None = None) -> str:
    ts = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{category}/{ts}_{sanitize_filename(filename)}"
