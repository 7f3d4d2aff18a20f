from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .code_block import CodeBlock, OriginalUserCode, Segment, split_lines
from .config import DEFAULT_CONFIG, RemapConfig
from .origins import expansion_chain, is_local, origins_for_span
from .records import Record, as_bool, as_int, as_list, as_str, get
from .spans import Span

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SpannedMessage:
    """A label anchored in the user's input, or span-less when the compiler
    pointed only at generated code."""

    span: Span | None
    label: str = ""
    is_primary: bool = False
    lines: list[str] = field(default_factory=list)

    @classmethod
    def from_record(
        cls,
        span_record: Record,
        code_block: CodeBlock,
        *,
        config: RemapConfig = DEFAULT_CONFIG,
    ) -> "SpannedMessage":
        chain = list(expansion_chain(span_record))
        for depth, rec in enumerate(chain):
            span = _user_span(rec, code_block, config=config)
            if span is None:
                continue
            # Anchor at the expansion that reached user code, but read the
            # outermost label available.
            anchored = chain[: depth + 1]
            label = next((lbl for r in anchored if (lbl := as_str(r.get("label"))) is not None), "")
            if depth:
                logger.debug("anchored span %d expansion(s) deep at %s", depth, span.format())
            return cls(
                span=span,
                label=label,
                is_primary=any(as_bool(r.get("is_primary")) for r in anchored),
            )
        return cls(
            span=None,
            label=as_str(span_record.get("label")) or "",
            is_primary=as_bool(span_record.get("is_primary")),
        )

    @classmethod
    def from_segment_span(cls, segment: Segment, span: Span) -> "SpannedMessage":
        return cls(span=span, lines=split_lines(segment.code), is_primary=True)


def _user_span(rec: Record, code_block: CodeBlock, *, config: RemapConfig) -> Span | None:
    column_start = as_int(rec.get("column_start"))
    column_end = as_int(rec.get("column_end"))
    if column_start is None or column_end is None or not is_local(rec, config=config):
        return None
    origins, (bs, be) = origins_for_span(rec, code_block, config=config)
    if not origins:
        return None
    first, first_offset = origins[0]
    last, last_offset = origins[-1]
    # Spans within generated code mean nothing to the user.
    if not isinstance(first, OriginalUserCode) or not isinstance(last, OriginalUserCode):
        return None
    return Span(
        start_line=first.start_line + first_offset,
        start_column=column_start + (first.column_offset if first_offset == 0 else 0),
        end_line=last.start_line + last_offset,
        end_column=column_end + (last.column_offset if last_offset == 0 else 0),
        byte_start=bs,
        byte_end=be,
        code_block_id=first.node_index,
    )


def build_spanned_messages(
    record: Record,
    code_block: CodeBlock,
    *,
    config: RemapConfig = DEFAULT_CONFIG,
) -> list[SpannedMessage]:
    out = [
        SpannedMessage.from_record(s, code_block, config=config)
        for s in as_list(get(record, "spans"))
        if isinstance(s, dict)
    ]
    if any(m.span is not None for m in out):
        # Once something points at user code, messages like "borrowed value
        # only lives until here" that point at generated code are just noise.
        out = [m for m in out if m.span is not None]
    return out
