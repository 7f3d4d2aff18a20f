from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from .code_block import CodeBlock, UserCodeInfo
from .config import DEFAULT_CONFIG, RemapConfig
from .diagnostics import CompilationError
from .errors import CompilationErrors, SubprocessTerminated

logger = logging.getLogger(__name__)


def parse_diagnostic(
    line: str,
    code_block: CodeBlock,
    *,
    config: RemapConfig = DEFAULT_CONFIG,
) -> CompilationError | None:
    """Assemble one line of the compiler's JSON output.

    Lines that are not JSON objects are ordinary output, not diagnostics.
    """
    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        logger.debug("skipping non-JSON compiler output: %r", line)
        return None
    if not isinstance(record, dict):
        return None
    return CompilationError.try_assemble(record, code_block, config=config)


def parse_diagnostics(
    lines: Iterable[str],
    code_block: CodeBlock,
    code_info: UserCodeInfo | None = None,
    *,
    config: RemapConfig = DEFAULT_CONFIG,
) -> list[CompilationError]:
    out: list[CompilationError] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        err = parse_diagnostic(line, code_block, config=config)
        if err is None:
            continue
        if code_info is not None:
            err.fill_lines(code_info)
        out.append(err)
    return out


def check_compilation(
    lines: Iterable[str],
    code_block: CodeBlock,
    code_info: UserCodeInfo,
    *,
    returncode: int | None = None,
    config: RemapConfig = DEFAULT_CONFIG,
) -> list[CompilationError]:
    """Raise for a failed compile, otherwise return the remaining diagnostics.

    Raises CompilationErrors when any error-level diagnostic is present, and
    SubprocessTerminated when the compiler failed without explaining why.
    """
    diagnostics = parse_diagnostics(lines, code_block, code_info, config=config)
    errors = [d for d in diagnostics if d.level == "error"]
    if errors:
        raise CompilationErrors(errors)
    if returncode:
        raise SubprocessTerminated(
            f"compiler exited with status {returncode} without reporting an error"
        )
    return diagnostics
