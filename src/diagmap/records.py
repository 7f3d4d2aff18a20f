"""Tolerant reads over raw diagnostic records.

The compiler's JSON schema drifts between releases, so every accessor treats
a missing or mistyped field as absent instead of failing.
"""

from __future__ import annotations

from typing import Any

Record = dict[str, Any]


def get(obj: object, *path: str | int) -> Any:
    cur: Any = obj
    for key in path:
        if isinstance(key, int):
            if not isinstance(cur, list) or not -len(cur) <= key < len(cur):
                return None
        elif not isinstance(cur, dict):
            return None
        cur = cur[key] if isinstance(key, int) else cur.get(key)
    return cur


def as_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def as_int(value: object) -> int | None:
    # bool is an int subclass but never a coordinate.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def as_bool(value: object) -> bool:
    return value is True


def as_list(value: object) -> list[Any]:
    return value if isinstance(value, list) else []


def as_record(value: object) -> Record | None:
    return value if isinstance(value, dict) and value else None
