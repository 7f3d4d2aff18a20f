from __future__ import annotations

from dataclasses import dataclass

from wcwidth import wcwidth

from .code_block import CommandCall, OriginalUserCode, Segment


@dataclass(frozen=True, slots=True)
class Span:
    """A region of the user's original input.

    Lines and columns are 1-based. `end_line` is inclusive, `end_column` is
    exclusive. Byte offsets are relative to the user segment the span lands in.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    byte_start: int
    byte_end: int
    code_block_id: int = 0

    def format(self) -> str:
        return f"{self.start_line}:{self.start_column}"

    @classmethod
    def from_command(cls, command: CommandCall, start_column: int, end_column: int) -> "Span":
        return cls(
            start_line=command.line_number,
            start_column=start_column,
            end_line=command.line_number,
            end_column=end_column,
            byte_start=start_column,
            byte_end=end_column,
        )

    @classmethod
    def from_segment(cls, segment: Segment, byte_range: tuple[int, int]) -> "Span | None":
        meta = segment.kind
        if not isinstance(meta, OriginalUserCode):
            return None
        start, end = byte_range
        start_line, start_column = line_and_column(
            segment.code, start, meta.column_offset, meta.start_line
        )
        end_line, end_column = line_and_column(
            segment.code, end, meta.column_offset, meta.start_line
        )
        return cls(
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
            byte_start=start,
            byte_end=end,
            code_block_id=meta.node_index,
        )


def count_columns(line: str) -> int:
    """Display width of `line` in terminal columns."""
    return sum(max(wcwidth(ch), 0) for ch in line)


def line_and_column(
    text: str,
    byte_position: int,
    first_line_column_offset: int,
    start_line: int,
) -> tuple[int, int]:
    """Return the 1-based (line, column) of `byte_position` within `text`.

    `start_line` is the line `text` begins on; `first_line_column_offset` is
    added to columns on that first line.
    """
    prefix = text.encode("utf-8")[:byte_position].decode("utf-8")
    lines = prefix.split("\n")
    if prefix.endswith("\n"):
        lines.pop()
    line = len(lines)
    column = count_columns(lines[-1]) + 1
    if line == 1:
        column += first_line_column_offset
    return start_line + line - 1, column
