from __future__ import annotations

import pytest

from diagmap import (
    AssertCopyType,
    CodeBlock,
    OriginalUserCode,
    OtherGeneratedCode,
    OtherUserCode,
    PackVariable,
    UnknownCode,
    UserCodeInfo,
)
from diagmap.code_block import code_kind_from_dict, count_lines
from diagmap.testing import sample_block


def test_count_lines_ignores_trailing_newline() -> None:
    assert count_lines("") == 0
    assert count_lines("a") == 1
    assert count_lines("a\n") == 1
    assert count_lines("a\nb") == 2
    assert count_lines("a\n\n") == 2


def test_origin_for_line_walks_segments() -> None:
    block = sample_block(node_index=3)
    user = OriginalUserCode(start_line=1, column_offset=0, node_index=3)
    assert block.origin_for_line(1) == (OtherGeneratedCode(), 0)
    assert block.origin_for_line(3) == (OtherGeneratedCode(), 1)
    assert block.origin_for_line(4) == (user, 0)
    assert block.origin_for_line(6) == (user, 2)
    assert block.origin_for_line(8) == (OtherGeneratedCode(), 1)


def test_origin_for_line_past_end_is_unknown() -> None:
    assert sample_block().origin_for_line(100) == (UnknownCode(), 0)


def test_user_supplied_kinds() -> None:
    assert OriginalUserCode().is_user_supplied()
    assert OtherUserCode().is_user_supplied()
    assert not OtherGeneratedCode().is_user_supplied()
    assert not PackVariable("x").is_user_supplied()
    assert not AssertCopyType("x").is_user_supplied()
    assert not UnknownCode().is_user_supplied()


def test_code_block_dict_roundtrip() -> None:
    block = sample_block(node_index=2, prologue_bytes=7)
    block.add(PackVariable("x"), "// pack x\n")
    again = CodeBlock.from_dict(block.to_dict())
    assert again == block
    assert again.to_source() == block.to_source()


def test_unknown_code_kind_is_rejected() -> None:
    with pytest.raises(ValueError) as e:
        code_kind_from_dict({"kind": "bogus"})
    assert "bogus" in str(e.value)


def test_user_code_info_splits_lines() -> None:
    info = UserCodeInfo.from_source("let a = 1;\r\nlet b = 2;\n")
    assert info.original_lines == ("let a = 1;", "let b = 2;")
    assert UserCodeInfo.from_source("").original_lines == ()


def test_unterminated_segments_are_closed() -> None:
    block = CodeBlock().generated("fn run() { ").user_code("foo(1)", node_index=4)
    assert block.to_source() == "fn run() { \nfoo(1)\n"
    assert sum(s.num_lines for s in block.segments) == count_lines(block.to_source())
    assert block.origin_for_line(1) == (OtherGeneratedCode(), 0)
    assert block.origin_for_line(2) == (OriginalUserCode(node_index=4), 0)
    assert block.origin_for_line(3) == (UnknownCode(), 0)


def test_from_dict_closes_unterminated_segments() -> None:
    block = CodeBlock.from_dict(
        {
            "segments": [
                {"kind": {"kind": "other_generated_code"}, "code": "fn run() { "},
                {"kind": {"kind": "original_user_code"}, "code": "foo(1)\n"},
            ]
        }
    )
    assert [s.code for s in block.segments] == ["fn run() { \n", "foo(1)\n"]
    assert block.origin_for_line(2) == (OriginalUserCode(), 0)


@pytest.mark.parametrize(
    "obj",
    [
        {"segments": [{"code": "x\n"}]},
        {"segments": [{"kind": {"kind": "pack_variable"}, "code": "x\n"}]},
        {"segments": [{"kind": "original_user_code", "code": "x\n"}]},
        {"segments": [{"kind": {"kind": "unknown"}, "code": 3}]},
        {"segments": [], "prologue_bytes": None},
    ],
)
def test_from_dict_rejects_malformed_input(obj: dict) -> None:
    with pytest.raises(ValueError):
        CodeBlock.from_dict(obj)
