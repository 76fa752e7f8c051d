"""Backup key to object name derivation."""

from __future__ import annotations

import re

OBJECT_NAME_PREFIX = "unleash-backup-"
OBJECT_NAME_SUFFIX = ".json"

_UNSAFE_CHARS_PATTERN = re.compile(r"[^A-Za-z0-9._-]")


def safe_name(key: str) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with ``_``."""
    return _UNSAFE_CHARS_PATTERN.sub("_", key or "")


def object_name(key: str) -> str:
    """Return the bucket object name holding the backup for ``key``."""
    return f"{OBJECT_NAME_PREFIX}{safe_name(key)}{OBJECT_NAME_SUFFIX}"
