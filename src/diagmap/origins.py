from __future__ import annotations

from collections.abc import Iterator

from .code_block import CodeBlock, CodeKind, OriginalUserCode
from .config import DEFAULT_CONFIG, RemapConfig
from .records import Record, as_int, as_list, as_record, as_str, get


def expansion_chain(span: Record) -> Iterator[Record]:
    """Yield `span` followed by each macro invocation site it expands from."""
    cur: Record | None = span
    while cur is not None:
        yield cur
        cur = as_record(get(cur, "expansion", "span"))


def is_local(span: Record, *, config: RemapConfig = DEFAULT_CONFIG) -> bool:
    file_name = as_str(span.get("file_name"))
    return file_name is not None and file_name.endswith(config.file_suffix)


def spans_in_local_source(span: Record, *, config: RemapConfig = DEFAULT_CONFIG) -> Record | None:
    for s in expansion_chain(span):
        if is_local(s, config=config):
            return s
    return None


def _segment_local_offset(offset: int, code_block: CodeBlock) -> int:
    # Strip generated segments ahead of the one the offset lands in, but never
    # step past the start of user code.
    for seg in code_block.segments:
        n = seg.byte_len
        if n > offset or isinstance(seg.kind, OriginalUserCode):
            break
        offset -= n
    return offset


def origins_for_span(
    span: Record,
    code_block: CodeBlock,
    *,
    config: RemapConfig = DEFAULT_CONFIG,
) -> tuple[list[tuple[CodeKind, int]], tuple[int, int]]:
    """Map a diagnostic span onto the segments of `code_block`.

    Returns one (kind, line offset within segment) pair per line the span
    covers, plus the span's byte range relative to the segment it lands in.
    Spans that never reach the synthetic unit map to nothing.
    """
    local = spans_in_local_source(span, config=config)
    if local is None:
        return [], (0, 0)

    origins: list[tuple[CodeKind, int]] = []
    line_start = as_int(local.get("line_start"))
    line_end = as_int(local.get("line_end"))
    if line_start is not None and line_end is not None:
        origins = [code_block.origin_for_line(line) for line in range(line_start, line_end + 1)]

    bs = (as_int(local.get("byte_start")) or 0) + code_block.prologue_bytes
    be = (as_int(local.get("byte_end")) or 0) + code_block.prologue_bytes
    return origins, (_segment_local_offset(bs, code_block), _segment_local_offset(be, code_block))


def code_origins(
    record: Record,
    code_block: CodeBlock,
    *,
    config: RemapConfig = DEFAULT_CONFIG,
) -> list[CodeKind]:
    out: list[CodeKind] = []
    for span in as_list(get(record, "spans")):
        if not isinstance(span, dict):
            continue
        origins, _ = origins_for_span(span, code_block, config=config)
        out.extend(kind for kind, _ in origins)
    return out
