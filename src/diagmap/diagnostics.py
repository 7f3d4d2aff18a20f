from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .code_block import CodeBlock, CodeKind, OtherGeneratedCode, Segment, UserCodeInfo
from .config import DEFAULT_CONFIG, RemapConfig
from .extract import actual_type, extra_hint, sanitize_message
from .messages import SpannedMessage, build_spanned_messages
from .origins import code_origins
from .records import Record, as_list, as_record, as_str, get

logger = logging.getLogger(__name__)

_EPILOGUE_PREFIXES = (
    "aborting due to",
    "For more information about",
    "Some errors occurred",
)


def is_epilogue(message: str) -> bool:
    return message.startswith(_EPILOGUE_PREFIXES)


@dataclass(slots=True)
class CompilationError:
    """A compiler diagnostic translated into the user's coordinates."""

    message: str
    raw: Record = field(default_factory=dict)
    code_origins: list[CodeKind] = field(default_factory=list)
    spanned_messages: list[SpannedMessage] = field(default_factory=list)
    level: str = ""

    @classmethod
    def try_assemble(
        cls,
        record: Record,
        code_block: CodeBlock,
        *,
        config: RemapConfig = DEFAULT_CONFIG,
    ) -> "CompilationError | None":
        """Assemble `record` against the unit described by `code_block`.

        Returns None for records that carry nothing worth reporting: build
        tool chatter without a message and the compiler's closing summaries.
        """
        # Build tools may wrap the compiler's diagnostic in an envelope.
        inner = as_record(record.get("message"))
        if inner is not None:
            record = inner

        origins = code_origins(record, code_block, config=config)
        for child in as_list(record.get("children")):
            if not isinstance(child, dict):
                continue
            child_origins = code_origins(child, code_block, config=config)
            if not _any_user_supplied(origins) and _any_user_supplied(child_origins):
                # The top level is abstract and the child pins it in user code.
                logger.debug("promoting child diagnostic %r", child.get("message"))
                record = child
                origins = child_origins
                break
            origins.extend(child_origins)

        message = as_str(record.get("message"))
        if message is None:
            return None
        if is_epilogue(message):
            logger.debug("suppressing summary diagnostic %r", message)
            return None

        return cls(
            message=sanitize_message(message, config=config),
            raw=record,
            code_origins=origins,
            spanned_messages=build_spanned_messages(record, code_block, config=config),
            level=as_str(record.get("level")) or "",
        )

    @classmethod
    def from_segment_span(
        cls,
        segment: Segment,
        spanned_message: SpannedMessage,
        message: str,
    ) -> "CompilationError":
        """Synthesize an error the evaluator found itself within `segment`."""
        return cls(
            message=message,
            code_origins=[segment.kind],
            spanned_messages=[spanned_message],
            level="error",
        )

    def fill_lines(self, code_info: UserCodeInfo) -> None:
        for msg in self.spanned_messages:
            if msg.span is not None:
                if msg.span.end_line > len(code_info.original_lines):
                    logger.warning(
                        "span %s-%d ends past the %d line(s) of user input; excerpt truncated",
                        msg.span.format(),
                        msg.span.end_line,
                        len(code_info.original_lines),
                    )
                msg.lines = list(code_info.original_lines[msg.span.start_line - 1 : msg.span.end_line])

    def is_from_user_code(self) -> bool:
        return _any_user_supplied(self.code_origins)

    def is_from_generated_code(self) -> bool:
        return OtherGeneratedCode() in self.code_origins

    def code(self) -> str | None:
        return as_str(get(self.raw, "code", "code"))

    def explanation(self) -> str | None:
        return as_str(get(self.raw, "code", "explanation"))

    def evcxr_extra_hint(self) -> str | None:
        return extra_hint(self.code())

    def help(self) -> list[str]:
        out: list[str] = []
        for child in as_list(self.raw.get("children")):
            if get(child, "level") != "help":
                continue
            message = as_str(get(child, "message"))
            if message is None:
                continue
            replacement = as_str(get(child, "spans", 0, "suggested_replacement"))
            if replacement is not None:
                message = f"{message}\n\n{replacement.rstrip()}"
            out.append(message)
        return out

    def primary_spanned_message(self) -> SpannedMessage | None:
        """Return the primary spanned message, falling back to the first one
        when the primary pointed into generated code and was dropped."""
        for msg in self.spanned_messages:
            if msg.is_primary:
                return msg
        return self.spanned_messages[0] if self.spanned_messages else None

    def rendered(self) -> str:
        return as_str(self.raw.get("rendered")) or ""

    def get_actual_type(self) -> str | None:
        return actual_type(self.raw)


def _any_user_supplied(kinds: list[CodeKind]) -> bool:
    return any(k.is_user_supplied() for k in kinds)
