import pytest

from lineasm.instructions import define_instruction
from lineasm.model import ErrorKind
from lineasm.runner import Runner

LOOP_SOURCE = """start:  mov 10 r0
        add  r0 r1
        jmp  start
"""


def test_scenario_program_parses_three_instructions(toy_instructions):
    runner = Runner(toy_instructions)
    result, error = runner.parse(runner.string_tokenizer(LOOP_SOURCE))
    assert error is None
    assert result.instruction_count == 3
    assert result.get_label("start") == 1
    assert result.parsed_lines == 3
    assert [instr.mnemonic for instr in result.instructions] == ["mov", "add", "jmp"]
    assert result.instruction_at(1).operands == ("10", "r0")


def test_trailing_blank_line_is_counted(toy_instructions):
    runner = Runner(toy_instructions)
    result, error = runner.parse_string(LOOP_SOURCE + "\n")
    assert error is None
    assert result.parsed_lines == 4
    assert result.instruction_count == 3


def test_blank_and_comment_lines_count_and_leave_gaps(toy_instructions):
    runner = Runner(toy_instructions)
    result, error = runner.parse_string("\n; header\nmov 1 r0\n\nloop:\nadd r0 r1\n")
    assert error is None
    assert result.parsed_lines == 6
    assert result.instructions[:2] == [None, None]
    assert result.instruction_at(3).line_no == 3
    assert result.instruction_at(4) is None
    assert result.get_label("loop") == 5
    assert result.instruction_at(5) is None
    assert result.instruction_at(6).mnemonic == "add"


def test_string_operand_is_decoded_through_capture_group():
    runner = Runner(
        [define_instruction("print", ["string"], executor=lambda instr, vm: None)],
        {"syntax": {"string": r'^"(\w*)"'}},
    )
    result, error = runner.parse_string('print "Hello"')
    assert error is None
    assert result.instruction_at(1).operands == ("Hello",)


def test_unknown_mnemonic_stops_parse(toy_instructions):
    runner = Runner(toy_instructions)
    result, error = runner.parse_string("foo bar\nmov 1 r0\n")
    assert error is not None
    assert error.line_no == 1
    assert error.messages == ["no instruction named foo"]
    assert result.parsed_lines == 1
    assert result.instruction_count == 0


def test_duplicate_label_reported_at_second_occurrence(toy_instructions):
    runner = Runner(toy_instructions)
    result, error = runner.parse_string("a: mov 1 r0\nadd r0 r1\n\na:\njmp a\n")
    assert error is not None
    assert error.line_no == 4
    assert error.problems[0].kind is ErrorKind.DUPLICATE_LABEL
    assert result.get_label("a") == 1


def test_partial_result_is_returned_with_error(toy_instructions):
    runner = Runner(toy_instructions)
    result, error = runner.parse_string("mov 1 r0\nadd r0\njmp x\n")
    assert error.line_no == 2
    assert error.problems[0].kind is ErrorKind.WRONG_ARITY
    assert error.text == "add r0"
    assert result.instruction_count == 1


def test_overload_selects_second_definition_and_aggregates_errors():
    defs = [
        define_instruction("mov", ["imm", "reg"], executor=lambda instr, vm: None),
        define_instruction("mov", ["reg", "reg"], executor=lambda instr, vm: None),
    ]
    runner = Runner(defs)
    result, error = runner.parse_string("mov r1, r0")
    assert error is None
    assert result.instruction_at(1).operands == ("r1", "r0")

    _, error = runner.parse_string("mov 1, 2")
    assert len(error.problems) == 2
    assert all(p.kind is ErrorKind.OPERAND_MISMATCH for p in error.problems)


def test_dangling_label_points_past_last_instruction(toy_instructions):
    runner = Runner(toy_instructions)
    result, error = runner.parse_string("mov 1 r0\nend:\n")
    assert error is None
    assert result.get_label("end") == 2
    assert result.instruction_at(2) is None


@pytest.mark.parametrize(
    ("settings", "line"),
    [
        ({"separator": r"[^|]+"}, "mov|10|r0"),
        ({"label": r"^\.(\w+)\s*(.*)$"}, ".start mov 10 r0"),
    ],
)
def test_custom_separator_and_label_rules(toy_instructions, settings, line):
    runner = Runner(toy_instructions, settings)
    result, error = runner.parse_string(line)
    assert error is None
    assert result.instruction_at(1).operands == ("10", "r0")


def test_labels_disabled_treats_prefix_as_mnemonic(toy_instructions):
    runner = Runner(toy_instructions, {"label": False})
    _, error = runner.parse_string("start: mov 10 r0")
    assert error.messages == ["no instruction named start:"]


def test_file_tokenizer_feeds_parser(tmp_path, toy_instructions):
    path = tmp_path / "loop.lasm"
    path.write_text(LOOP_SOURCE, encoding="utf-8")
    runner = Runner(toy_instructions)
    result, error = runner.parse(runner.file_tokenizer(path))
    assert error is None
    assert result.instruction_count == 3


def test_byte_order_mark_does_not_reach_first_mnemonic(tmp_path):
    path = tmp_path / "bom.lasm"
    path.write_bytes(b"\xef\xbb\xbfnop\n")
    runner = Runner([define_instruction("nop", [], executor=lambda instr, vm: None)])
    result, error = runner.parse(runner.file_tokenizer(path))
    assert error is None
    assert result.instruction_at(1).mnemonic == "nop"
