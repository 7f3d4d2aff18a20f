from __future__ import annotations

from .api import check_compilation, parse_diagnostic, parse_diagnostics
from .code_block import (
    AssertCopyType,
    CodeBlock,
    CodeKind,
    CommandCall,
    CommandCode,
    OriginalUserCode,
    OtherGeneratedCode,
    OtherUserCode,
    PackVariable,
    Segment,
    UnknownCode,
    UserCodeInfo,
)
from .config import DEFAULT_CONFIG, RemapConfig
from .diagnostics import CompilationError
from .errors import (
    CompilationErrors,
    EvalError,
    Message,
    SubprocessTerminated,
    TypeRedefinedVariablesLost,
    converting_errors,
    error_from,
)
from .messages import SpannedMessage
from .spans import Span

__all__ = [
    "AssertCopyType",
    "CodeBlock",
    "CodeKind",
    "CommandCall",
    "CommandCode",
    "CompilationError",
    "CompilationErrors",
    "DEFAULT_CONFIG",
    "EvalError",
    "Message",
    "OriginalUserCode",
    "OtherGeneratedCode",
    "OtherUserCode",
    "PackVariable",
    "RemapConfig",
    "Segment",
    "Span",
    "SpannedMessage",
    "SubprocessTerminated",
    "TypeRedefinedVariablesLost",
    "UnknownCode",
    "UserCodeInfo",
    "check_compilation",
    "converting_errors",
    "error_from",
    "parse_diagnostic",
    "parse_diagnostics",
]
