"""
Tests for the dfalab command-line front end.
"""

import json

import pytest

from dfalab.cli import build_parser, main


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


class TestCheck:
    def test_check_ok(self, definition_file, capsys):
        assert main(["check", str(definition_file)]) == 0
        assert "ends_in_a.dfa: ok" in capsys.readouterr().out

    def test_check_reports_errors(self, tmp_path, capsys):
        path = tmp_path / "bad.dfa"
        path.write_text("states: q0\nalphabet: a\n")
        assert main(["check", str(path)]) == 1
        assert "error: no start state declared" in capsys.readouterr().out

    def test_check_reports_warnings(self, tmp_path, capsys):
        path = tmp_path / "partial.dfa"
        path.write_text("states: q0\nalphabet: a, b\nstart: q0\nq0, a -> q0\n")
        assert main(["check", str(path)]) == 0
        assert "warning: no transition from state 'q0' on symbol 'b'" in capsys.readouterr().out

    def test_check_strict(self, tmp_path):
        path = tmp_path / "partial.dfa"
        path.write_text("states: q0\nalphabet: a, b\nstart: q0\nq0, a -> q0\n")
        assert main(["check", "--strict", str(path)]) == 1

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "nope.dfa")]) == 2
        assert "not found" in capsys.readouterr().err

    def test_bad_comment_marker(self, definition_file):
        assert main(["check", "--comment", "##", str(definition_file)]) == 2

    def test_undecodable_definition(self, tmp_path, capsys):
        path = tmp_path / "binary.dfa"
        path.write_bytes(b"states: q0\xff")
        assert main(["check", str(path)]) == 2
        err = capsys.readouterr().err
        assert "not valid UTF-8" in err
        assert len(err.strip().splitlines()) == 1


class TestRun:
    def test_run_prints_verdicts(self, definition_file, input_file, capsys):
        assert main(["run", str(definition_file), str(input_file)]) == 0
        out = capsys.readouterr().out
        assert "1: 'a' VALID [q0 q1]" in out
        assert "2: 'ab' INVALID [q0 q1 q0]" in out
        assert "not in the alphabet" in out
        assert "accepted=2 rejected=1 errored=1 total=4" in out

    def test_run_parse_error(self, tmp_path, input_file, capsys):
        path = tmp_path / "bad.dfa"
        path.write_text("states: q0\n???\n")
        assert main(["run", str(path), str(input_file)]) == 1
        assert "line 2" in capsys.readouterr().err

    def test_run_outputs(self, definition_file, input_file, tmp_path):
        json_path = tmp_path / "report.json"
        csv_path = tmp_path / "report.csv"
        plot_path = tmp_path / "summary.png"
        code = main(
            [
                "run",
                str(definition_file),
                str(input_file),
                "--workers",
                "2",
                "--save",
                "--json",
                str(json_path),
                "--csv",
                str(csv_path),
                "--plot",
                str(plot_path),
            ]
        )
        assert code == 0
        assert input_file.with_suffix(".out").read_text() == "VALID\nINVALID\nVALID\nINVALID\n"
        assert len(json.loads(json_path.read_text())["verdicts"]) == 4
        assert csv_path.read_text().splitlines()[0] == "line,input,status,accepted,final_state,trace,error"
        assert plot_path.exists()


def test_run_undecodable_input(definition_file, tmp_path, capsys):
    """A non-UTF-8 input file is one error line and exit status 2."""
    path = tmp_path / "binary.in"
    path.write_bytes(b"a\n\xff\xfe\n")
    assert main(["run", str(definition_file), str(path)]) == 2
    assert "error: " in capsys.readouterr().err
