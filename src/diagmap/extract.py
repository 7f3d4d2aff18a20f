from __future__ import annotations

import re

from .config import DEFAULT_CONFIG, RemapConfig
from .records import Record, as_list, as_str, get

# Observed formats of type mismatch diagnostics:
#
# Up to 1.40, children[].message:
#   "expected type `std::string::String`\n   found type `{integer}`"
# 1.41+, children[].message:
#   "expected struct `std::string::String`\n     found enum `std::option::Option<std::string::String>`"
#   "expected struct `std::string::String`\n    found tuple `({integer}, {float})`"
#   "  expected struct `std::string::String`\nfound opaque type `impl Bar`"
# 1.41+, spans[].label:
#   "expected struct `std::string::String`, found integer"
#   "expected struct `std::string::String`, found `i32`"
_TYPE_ERROR_RE = re.compile(r" *expected (?s:.)*found.* `(.*)`")
_UNQUOTED_TYPE_ERROR_RE = re.compile(r"expected .* found (integer|float)")

EXTRA_HINTS: dict[str, str] = {
    "E0597": (
        "Values assigned to variables in Evcxr cannot contain references "
        "(unless they're static)"
    ),
}

END_OF_INPUT = "<end of input>"


def sanitize_message(message: str, *, config: RemapConfig = DEFAULT_CONFIG) -> str:
    """Replace mentions of the variable-store sentinel, which sits just past
    the end of what the user typed.

    Mostly helps with missing semicolons on let statements, which otherwise
    read "expected `;`, found `evcxr_variable_store`".
    """
    return message.replace(f"`{config.sentinel}`", END_OF_INPUT)


def actual_type(record: Record) -> str | None:
    """Return the "found" type of a type mismatch diagnostic, if it is one."""
    for child in as_list(get(record, "children")):
        message = as_str(get(child, "message"))
        if message is None:
            continue
        m = _TYPE_ERROR_RE.search(message)
        if m:
            return m.group(1)
    for span in as_list(get(record, "spans")):
        label = as_str(get(span, "label"))
        if label is None:
            continue
        m = _TYPE_ERROR_RE.search(label) or _UNQUOTED_TYPE_ERROR_RE.search(label)
        if m:
            return m.group(1)
    return None


def extra_hint(code: str | None) -> str | None:
    if code is None:
        return None
    return EXTRA_HINTS.get(code)
