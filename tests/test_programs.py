"""
End-to-end runs of the sample programs shipped in programs/.
"""

from hrm import config
from hrm.cpu import CPU, run_program
from hrm.values import Letter, Number


def _source(name):
    return (config.PROGRAMS_DIR / name).read_text(encoding="utf-8")


def N(*xs):
    return [Number(x) for x in xs]


def test_echo():
    inbox = N(3) + [Letter("E")] + N(-9)
    assert run_program(_source("echo.hrm"), inbox=inbox) == inbox


def test_sum_pairs_drops_unpaired_value():
    assert run_program(_source("sum_pairs.hrm"), inbox=N(1, 2, 10, -4, 7)) == N(3, 6)


def test_countdown():
    assert run_program(_source("countdown.hrm"), inbox=N(3, -2, 0)) == N(3, 2, 1, 0, -2, -1, 0, 0)


def test_zero_terminated_sum_ignores_trailing_definitions():
    cpu = CPU.from_source(_source("zero_terminated_sum.hrm"), inbox=N(1, 2, 0, 5, 0), memory={5: Number(0)})
    assert cpu.prog.size() == 10
    assert cpu.run() == N(3, 5)


def test_string_reverse():
    inbox = [Letter(c) for c in "BOX"] + N(0) + [Letter(c) for c in "HI"] + N(0)
    out = run_program(_source("string_reverse.hrm"), inbox=inbox, memory={14: Number(0)})
    assert out == [Letter(c) for c in "XOBIH"]
