import io
import sys

import pytest

from pyhtable.main import CommandError, CommandOk, execute, main, run
from pyhtable.table import Table


def test_execute(capsys):
    t = Table()
    assert execute(t, "set mia the best\n") == CommandOk()
    assert execute(t, "set federer 1") == CommandOk()
    assert execute(t, "get mia") == CommandOk()
    assert execute(t, "get nobody") == CommandOk()
    assert execute(t, "len") == CommandOk()
    assert execute(t, "cap") == CommandOk()
    assert execute(t, "") == CommandOk()
    assert execute(t, "# comment") == CommandOk()

    out = capsys.readouterr().out
    assert out == "the best\n(not found)\n2\n16\n"

    assert execute(t, "frob") == CommandError("Unknown command 'frob'")
    assert execute(t, "set onlykey") == CommandError("Unknown command 'set onlykey'")


def test_run(capsys):
    t = Table()
    script = io.StringIO("set a 1\nset b 2\nset a 3\nitems\nlen\n")
    assert run(t, script)

    out = capsys.readouterr().out
    lines = out.splitlines()
    assert sorted(lines[:2]) == ["a = 3", "b = 2"]
    assert lines[2] == "2"

    assert not run(t, io.StringIO("len\nbogus\n"))
    err = capsys.readouterr().err
    assert err == "[line 2] Error: Unknown command 'bogus'\n"


def test_run_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "ok.txt"
    path.write_text("set x 10\nget x\n")
    monkeypatch.setattr(sys, "argv", ["pyhtable", str(path)])
    main()
    assert capsys.readouterr().out == "10\n"

    path = tmp_path / "bad.txt"
    path.write_text("nope\n")
    monkeypatch.setattr(sys, "argv", ["pyhtable", str(path)])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 65


def test_usage(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["pyhtable", "a", "b"])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 64
    assert capsys.readouterr().out == "Usage: pyhtable [path]\n"


def test_repl(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["pyhtable"])
    monkeypatch.setattr(sys, "stdin", io.StringIO("set k v\nget k\nwhat\n"))
    main()

    captured = capsys.readouterr()
    assert "v\n" in captured.out
    assert captured.err == "Error: Unknown command 'what'\n"
