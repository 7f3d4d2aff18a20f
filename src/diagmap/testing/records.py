from __future__ import annotations

from typing import Any

from ..code_block import CodeBlock


def span_record(
    line_start: int,
    line_end: int | None = None,
    *,
    column_start: int | None = 1,
    column_end: int | None = 2,
    byte_start: int = 0,
    byte_end: int = 0,
    file_name: str = "src/lib.rs",
    label: str | None = None,
    is_primary: bool = False,
    suggested_replacement: str | None = None,
    expansion: dict[str, Any] | None = None,
) -> dict[str, Any]:
    out: dict[str, Any] = {
        "file_name": file_name,
        "line_start": line_start,
        "line_end": line_start if line_end is None else line_end,
        "byte_start": byte_start,
        "byte_end": byte_end,
        "label": label,
        "is_primary": is_primary,
        "suggested_replacement": suggested_replacement,
        "expansion": None,
    }
    if column_start is not None:
        out["column_start"] = column_start
    if column_end is not None:
        out["column_end"] = column_end
    if expansion is not None:
        out["expansion"] = {"span": expansion, "macro_decl_name": "m!", "def_site_span": None}
    return out


def diagnostic(
    message: str,
    *,
    level: str = "error",
    spans: list[dict[str, Any]] | None = None,
    children: list[dict[str, Any]] | None = None,
    code: str | None = None,
    explanation: str | None = None,
    rendered: str | None = None,
) -> dict[str, Any]:
    return {
        "message": message,
        "level": level,
        "code": None if code is None else {"code": code, "explanation": explanation},
        "spans": spans or [],
        "children": children or [],
        "rendered": rendered,
    }


def wrapped(diag: dict[str, Any]) -> dict[str, Any]:
    """Envelope a diagnostic the way the build tool does."""
    return {
        "reason": "compiler-message",
        "package_id": "ctx 1.0.0",
        "target": {"name": "ctx", "src_path": "/tmp/ctx/src/lib.rs"},
        "message": diag,
    }


def sample_block(*, node_index: int = 0, prologue_bytes: int = 20) -> CodeBlock:
    """A unit of three generated lines, three user lines, then two generated lines.

    Generated line 4 is user line 1.
    """
    block = CodeBlock(prologue_bytes=prologue_bytes)
    block.generated("use std::any::Any;\n")
    block.generated("#[no_mangle]\npub extern \"C\" fn run_user_code_0() {\n")
    block.user_code(
        "let x = 1;\nlet s: String = x;\nprintln!(\"{}\", s)\n",
        start_line=1,
        node_index=node_index,
    )
    block.generated("evcxr_variable_store.put_variable(\"x\", x);\n}\n")
    return block
