import io

from hrm import main as cli
from hrm.values import Letter, Number


def _write(tmp_path, text):
    p = tmp_path / "prog.hrm"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_build_initial_state():
    inbox, mem = cli.build_initial_state(
        ["1", "ab", "-", "0:5", "3:x", "bad", "7", "2:", "q:1", "4:-2"]
    )
    assert inbox == [Number(1), Letter("A"), Letter("B"), Number(7)]
    assert mem == {0: Number(5), 3: Letter("X"), 4: Number(-2)}


def test_letters_before_switch_are_filtered():
    inbox, mem = cli.build_initial_state(["h3llo!", "-3"])
    assert inbox == [Letter("H"), Letter("L"), Letter("L"), Letter("O"), Number(-3)]
    assert mem == {}


def test_memory_argument_uses_second_field():
    inbox, mem = cli.build_initial_state(["-", "3:5:7", "6:ab:c"])
    assert inbox == []
    assert mem == {3: Number(5), 6: Letter("A")}


def test_split_argv():
    assert cli.split_argv(["-f", "p", "--stats", "-xyz", "-h"]) == (["-f", "p", "--stats"], ["-xyz", "-h"])
    assert cli.split_argv(["--debug", "--", "--listing"]) == (["--debug"], ["--listing"])
    assert cli.split_argv(["1", "--stats"]) == ([], ["1", "--stats"])


def test_dash_prefixed_values_become_letters(tmp_path, capsys):
    path = _write(tmp_path, "a:\nINBOX\nOUTBOX\nJUMP a\n")
    assert cli.main(["-f", path, "-xyz"]) == 0
    assert capsys.readouterr().out == "Outbox: ['X', 'Y', 'Z']\n"


def test_help_flag_is_a_value_after_first_value(tmp_path, capsys):
    path = _write(tmp_path, "a:\nINBOX\nOUTBOX\nJUMP a\n")
    assert cli.main(["-f", path, "1", "-h"]) == 0
    assert capsys.readouterr().out == "Outbox: [1, 'H']\n"


def test_run_from_file(tmp_path, capsys):
    path = _write(tmp_path, "a:\nINBOX\nOUTBOX\nJUMP a\n")
    assert cli.main(["-f", path, "1", "hi", "-3"]) == 0
    assert capsys.readouterr().out == "Outbox: [1, 'H', 'I', -3]\n"


def test_run_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("COPYFROM 0\nOUTBOX\n"))
    assert cli.main(["-", "0:z"]) == 0
    assert capsys.readouterr().out == "Outbox: ['Z']\n"


def test_failure_exit_status(tmp_path, capsys):
    path = _write(tmp_path, "OUTBOX\n")
    assert cli.main(["-f", path]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "Program failed with: Empty hands\n"


def test_missing_program_file(tmp_path, capsys):
    assert cli.main(["-f", str(tmp_path / "nope.hrm")]) == 1
    assert "Failed to read program" in capsys.readouterr().err


def test_stats_and_listing(tmp_path, capsys):
    path = _write(tmp_path, "a:\nINBOX\nOUTBOX\nJUMP a\n")
    assert cli.main(["--listing", "--stats", "-f", path, "4", "5"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "a:"
    assert out[1] == "  00  INBOX"
    assert out[-3:] == ["Outbox: [4, 5]", "Size: 3", "Steps: 6"]
