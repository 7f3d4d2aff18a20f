from __future__ import annotations

from .records import diagnostic, sample_block, span_record, wrapped

__all__ = ["diagnostic", "sample_block", "span_record", "wrapped"]
