#!/usr/bin/env python3
"""
Command line entry point, run in-process.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import io

import pytest

from bft.cli import main


def set_stdin(monkeypatch, data):
    monkeypatch.setattr(sys, 'stdin', io.TextIOWrapper(io.BytesIO(data)))


def write_program(tmp_path, source):
    path = tmp_path / "prog.bf"
    path.write_text(source, encoding="utf-8")
    return str(path)


def test_runs_program(tmp_path, monkeypatch, capsysbinary):
    set_stdin(monkeypatch, b"hi")
    assert main([write_program(tmp_path, ",.,.")]) == 0
    assert capsysbinary.readouterr().out == b"hi"


def test_cells_option(tmp_path, monkeypatch, capsysbinary):
    set_stdin(monkeypatch, b"")
    path = write_program(tmp_path, ">")
    assert main(["--cells", "1", path]) == 1
    err = capsysbinary.readouterr().err
    assert b"Head moved out of memory at row 1 column 1" in err


def test_extensible_option(tmp_path, monkeypatch, capsysbinary):
    set_stdin(monkeypatch, b"")
    path = write_program(tmp_path, ">+.")
    assert main(["-c", "1", "-e", path]) == 0
    assert capsysbinary.readouterr().out == b"\x01"


def test_cell_width_option(tmp_path, monkeypatch, capsysbinary):
    set_stdin(monkeypatch, b"")
    path = write_program(tmp_path, "-.")
    assert main(["--cell-width", "16", path]) == 0
    assert capsysbinary.readouterr().out == b"\xff"


def test_syntax_error(tmp_path, monkeypatch, capsysbinary):
    set_stdin(monkeypatch, b"")
    path = write_program(tmp_path, "+.\n]")
    assert main([path]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    expected = f"bft: error: {path}: Couldn't find matching opening bracket for bracket at row 2 column 1"
    assert expected.encode() in captured.err


def test_missing_file(tmp_path, capsysbinary):
    assert main([str(tmp_path / "nope.bf")]) == 2
    assert b"couldn't read" in capsysbinary.readouterr().err


def test_file_not_utf8(tmp_path, capsysbinary):
    path = tmp_path / "latin1.bf"
    path.write_bytes("caf\xe9 +++.\n".encode("latin-1"))
    assert main([str(path)]) == 2
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert f"bft: error: couldn't read {path}: ".encode() in captured.err
    assert b"utf-8" in captured.err


class ClosedStdout:
    def __init__(self):
        self.buffer = self

    def write(self, data):
        raise BrokenPipeError(32, "Broken pipe")

    def flush(self):
        raise BrokenPipeError(32, "Broken pipe")


def test_closed_stdout_is_reported_once(tmp_path, capsysbinary, monkeypatch):
    set_stdin(monkeypatch, b"")
    path = write_program(tmp_path, "+.")
    monkeypatch.setattr(sys, 'stdout', ClosedStdout())
    assert main([path]) == 1
    err = capsysbinary.readouterr().err
    assert err.count(b"bft: error:") == 1
    assert b"I/O error at row 1 column 2: [Errno 32] Broken pipe" in err


def test_negative_cells(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--cells", "-1", write_program(tmp_path, "")])
    assert exc.value.code == 2
