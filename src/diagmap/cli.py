from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path

from .api import parse_diagnostics
from .code_block import CodeBlock, UserCodeInfo
from .config import RemapConfig
from .diagnostics import CompilationError
from .errors import EvalError, converting_errors


def _to_jsonable(obj):
    if is_dataclass(obj):
        return {k: _to_jsonable(v) for k, v in asdict(obj).items()}
    if isinstance(obj, tuple):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, list):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    return obj


def _error_payload(err: CompilationError) -> dict[str, object]:
    return {
        "level": err.level,
        "message": err.message,
        "code": err.code(),
        "from_user_code": err.is_from_user_code(),
        "spanned_messages": [_to_jsonable(m) for m in err.spanned_messages],
        "help": err.help(),
        "extra_hint": err.evcxr_extra_hint(),
    }


def _format_error(err: CompilationError) -> str:
    head = f"{err.level or 'note'}: {err.message}"
    code = err.code()
    if code:
        head = f"{err.level or 'note'}[{code}]: {err.message}"
    primary = err.primary_spanned_message()
    if primary is not None and primary.span is not None:
        head = f"{primary.span.format()}: {head}"
    out = [head]
    if primary is not None:
        out.extend(f"  | {line}" for line in primary.lines)
        if primary.label:
            out.append(f"  = {primary.label}")
    out.extend(f"help: {h}" for h in err.help())
    hint = err.evcxr_extra_hint()
    if hint:
        out.append(f"hint: {hint}")
    return "\n".join(out)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="diagmap",
        description="Translate compiler JSON diagnostics back onto the user's input",
    )
    ap.add_argument("diagnostics", help="File of JSON diagnostic lines ('-' for stdin)")
    ap.add_argument("--code-block", required=True, help="JSON description of the generated unit")
    ap.add_argument("--source", help="The user's original input, for source excerpts")
    ap.add_argument("--json", action="store_true", help="Print errors as JSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        with converting_errors():
            config = RemapConfig.from_env()
            block = CodeBlock.from_dict(json.loads(_read_text(args.code_block)), config=config)
            code_info = UserCodeInfo.from_source(_read_text(args.source)) if args.source else None
            lines = _read_text(args.diagnostics).splitlines()
    except EvalError as e:
        print(f"diagmap: {e}", file=sys.stderr)
        return 2

    errors = parse_diagnostics(lines, block, code_info, config=config)
    if args.json:
        print(json.dumps({"errors": [_error_payload(e) for e in errors]}, indent=2, sort_keys=True))
    else:
        for e in errors:
            print(_format_error(e))
    return 1 if any(e.level == "error" for e in errors) else 0
