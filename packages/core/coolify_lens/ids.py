"""Identifier normalization and ordered fallback lookups.

The platform references the same object by numeric id, string id or UUID,
and any of them may be missing. Every map insertion and lookup in the engine
goes through ``normalize_id`` so ``42``, ``"42"`` and ``" 42 "`` compare equal.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def normalize_id(value: Any) -> str | None:
    """Return the trimmed string form of an identifier, or None if blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _read(record: Any, key: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def first_present(record: Any, *keys: str) -> Any:
    """Return the first value among ``keys`` that is not None.

    Mirrors a ``a ?? b ?? c`` chain: empty strings and zero are "present"
    and stop the chain. Works on dicts and on model instances.
    """
    for key in keys:
        value = _read(record, key)
        if value is not None:
            return value
    return None


def first_id(record: Any, *keys: str) -> str | None:
    """``normalize_id`` applied to ``first_present``."""
    return normalize_id(first_present(record, *keys))


def id_keys(record: Any) -> list[str]:
    """Normalized id and uuid of a record, in that order, skipping blanks."""
    keys = []
    for field in ("id", "uuid"):
        key = normalize_id(_read(record, field))
        if key:
            keys.append(key)
    return keys
