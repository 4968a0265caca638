"""
Assembler tests: two-pass label resolution into absolute indices.
"""

from hrm.assembler import assemble, assemble_program, build_label_table
from hrm.ir import Addr, Instr
from hrm.parser import tokenize
from hrm.program_memory import ProgramMemory


def test_label_resolves_to_next_instruction():
    prog, labels = assemble("a:\n    INBOX\n    JUMP a\n")
    assert labels == {"a": 0}
    assert prog == [Instr("INBOX"), Instr("JUMP", 0)]


def test_operands_are_kept():
    prog = assemble_program("COPYFROM [3]\nCOPYTO 4\nADD 0\nSUB [1]\nBUMPUP 2\nBUMPDN [5]")
    assert prog == [
        Instr("COPYFROM", Addr(3, indirect=True)),
        Instr("COPYTO", Addr(4)),
        Instr("ADD", Addr(0)),
        Instr("SUB", Addr(1, indirect=True)),
        Instr("BUMPUP", Addr(2)),
        Instr("BUMPDN", Addr(5, indirect=True)),
    ]


def test_consecutive_labels_share_an_index():
    labels = build_label_table(tokenize("INBOX\na:\nb:\nOUTBOX\nJUMP a\nJUMP b"))
    assert labels == {"a": 1, "b": 1}


def test_forward_reference():
    prog = assemble_program("JUMP end\nINBOX\nend:\nOUTBOX")
    assert prog == [Instr("JUMP", 2), Instr("INBOX"), Instr("OUTBOX")]


def test_label_after_last_instruction_points_past_end():
    prog, labels = assemble("a:\nINBOX\nJUMPZ done\nJUMP a\ndone:\n")
    assert labels == {"a": 0, "done": 3}
    assert prog[1] == Instr("JUMPZ", 3)


def test_unresolved_jump_is_dropped():
    tokens = tokenize("INBOX\nJUMP missing\nOUTBOX")
    prog = assemble_program("INBOX\nJUMP missing\nOUTBOX")
    assert prog == [Instr("INBOX"), Instr("OUTBOX")]
    assert len(prog) == len(tokens) - 1


def test_dropped_jump_still_counts_when_binding_labels():
    # labels are bound before unresolved jumps are removed
    prog = assemble_program("JUMP missing\nINBOX\na:\nOUTBOX\nJUMP a")
    assert prog == [Instr("INBOX"), Instr("OUTBOX"), Instr("JUMP", 2)]


def test_redefined_label_keeps_last_binding():
    prog = assemble_program("a:\nINBOX\na:\nOUTBOX\nJUMP a")
    assert prog[-1] == Instr("JUMP", 1)


def test_unparsable_source_is_empty_program():
    assert assemble("this is not a program") == ([], {})


def test_debug_trace(capsys):
    assemble("a:\nINBOX\nJUMP a\nJUMP missing", debug=True)
    out = capsys.readouterr().out
    assert "[ASM] label a -> 0" in out
    assert "[ASM 00] emit INBOX" in out
    assert "[ASM 01] emit JUMP 0" in out
    assert "[ASM] drop JUMP missing (undefined label)" in out


def test_program_memory():
    pm = ProgramMemory.from_source("start:\nINBOX\nOUTBOX\nJUMP start")
    assert pm.size() == 3
    assert pm.fetch(0) == Instr("INBOX")
    assert pm.fetch(3) is None
    assert pm.fetch(-1) is None
    assert pm.get_label_addr("start") == 0
    assert pm.get_label_addr("nope") is None
    assert pm.labels_at(0) == ["start"]
    # returned collections are copies
    pm.instructions.clear()
    pm.labels.clear()
    assert pm.size() == 3
    assert pm.labels == {"start": 0}
