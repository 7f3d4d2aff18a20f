from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_CONFIG, RemapConfig


class _Kind:
    __slots__ = ()

    tag: str = ""

    def is_user_supplied(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.tag}
        for name in getattr(self, "__dataclass_fields__", {}):
            out[name] = getattr(self, name)
        return out


@dataclass(frozen=True, slots=True)
class OriginalUserCode(_Kind):
    """Text copied verbatim from the user's input.

    `start_line` is the 1-based line of the user's input on which the segment
    begins; `column_offset` is added to columns on that first line only.
    """

    start_line: int = 1
    column_offset: int = 0
    node_index: int = 0

    tag = "original_user_code"

    def is_user_supplied(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class OtherUserCode(_Kind):
    """User code that was rewritten before being placed in the unit."""

    tag = "other_user_code"

    def is_user_supplied(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class PackVariable(_Kind):
    variable_name: str

    tag = "pack_variable"


@dataclass(frozen=True, slots=True)
class AssertCopyType(_Kind):
    variable_name: str

    tag = "assert_copy_type"


@dataclass(frozen=True, slots=True)
class CommandCode(_Kind):
    command: str

    tag = "command"


@dataclass(frozen=True, slots=True)
class OtherGeneratedCode(_Kind):
    tag = "other_generated_code"


@dataclass(frozen=True, slots=True)
class UnknownCode(_Kind):
    tag = "unknown"


CodeKind = (
    OriginalUserCode
    | OtherUserCode
    | PackVariable
    | AssertCopyType
    | CommandCode
    | OtherGeneratedCode
    | UnknownCode
)

_KINDS_BY_TAG: dict[str, type] = {
    k.tag: k
    for k in (
        OriginalUserCode,
        OtherUserCode,
        PackVariable,
        AssertCopyType,
        CommandCode,
        OtherGeneratedCode,
        UnknownCode,
    )
}


def code_kind_from_dict(obj: Mapping[str, Any]) -> CodeKind:
    tag = obj.get("kind")
    cls = _KINDS_BY_TAG.get(tag) if isinstance(tag, str) else None
    if cls is None:
        raise ValueError(f"unknown code kind: {tag!r}")
    fields = {k: v for k, v in obj.items() if k != "kind"}
    return cls(**fields)


def count_lines(text: str) -> int:
    # Only "\n" separates lines and a trailing newline does not start a new one.
    if not text:
        return 0
    n = text.count("\n")
    return n if text.endswith("\n") else n + 1


@dataclass(frozen=True, slots=True)
class Segment:
    kind: CodeKind
    code: str

    @classmethod
    def new(cls, kind: CodeKind, code: str) -> "Segment":
        # Segments are concatenated verbatim, so each one closes its last line.
        if not code.endswith("\n"):
            code += "\n"
        return cls(kind=kind, code=code)

    @property
    def num_lines(self) -> int:
        return count_lines(self.code)

    @property
    def byte_len(self) -> int:
        return len(self.code.encode("utf-8"))


@dataclass(slots=True)
class CodeBlock:
    """The synthetic compilation unit, as an ordered run of segments.

    `prologue_bytes` is the number of bytes the code generator emits ahead of
    the first segment.
    """

    segments: list[Segment] = field(default_factory=list)
    prologue_bytes: int = DEFAULT_CONFIG.prologue_bytes

    def add(self, kind: CodeKind, code: str) -> "CodeBlock":
        self.segments.append(Segment.new(kind, code))
        return self

    def user_code(
        self,
        code: str,
        *,
        start_line: int = 1,
        column_offset: int = 0,
        node_index: int = 0,
    ) -> "CodeBlock":
        kind = OriginalUserCode(
            start_line=start_line, column_offset=column_offset, node_index=node_index
        )
        return self.add(kind, code)

    def generated(self, code: str) -> "CodeBlock":
        return self.add(OtherGeneratedCode(), code)

    def to_source(self) -> str:
        return "".join(s.code for s in self.segments)

    def origin_for_line(self, line_number: int) -> tuple[CodeKind, int]:
        """Return the kind of the segment holding 1-based `line_number` and the
        0-based offset of that line within the segment."""
        current = 1
        for seg in self.segments:
            n = seg.num_lines
            if line_number < current + n:
                return seg.kind, line_number - current
            current += n
        return UnknownCode(), 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "prologue_bytes": self.prologue_bytes,
            "segments": [{"kind": s.kind.to_dict(), "code": s.code} for s in self.segments],
        }

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any], *, config: RemapConfig = DEFAULT_CONFIG) -> "CodeBlock":
        """Rebuild a block from `to_dict` output; malformed input raises `ValueError`."""
        try:
            segments = [
                Segment.new(code_kind_from_dict(s["kind"]), s["code"])
                for s in obj.get("segments", [])
            ]
            prologue_bytes = int(obj.get("prologue_bytes", config.prologue_bytes))
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"malformed code block: {e!r}") from e
        return cls(segments=segments, prologue_bytes=prologue_bytes)


@dataclass(frozen=True, slots=True)
class UserCodeInfo:
    """The user's original input, one entry per line without line terminators."""

    original_lines: tuple[str, ...]

    @classmethod
    def from_source(cls, src: str) -> "UserCodeInfo":
        return cls(original_lines=tuple(split_lines(src)))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "UserCodeInfo":
        return cls(original_lines=tuple(lines))


def split_lines(src: str) -> list[str]:
    if not src:
        return []
    lines = src.split("\n")
    if src.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass(frozen=True, slots=True)
class CommandCall:
    """A `:command args` line in the user's input."""

    command: str
    args: str | None
    line_number: int
