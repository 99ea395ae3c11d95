import tempfile
from pathlib import Path

import pytest

import main
from _version import __version__


def test_version_flag(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["tblview", "-v"])
    main.main()
    assert capsys.readouterr().out.strip() == __version__


def test_help_flag(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["tblview", "-h"])
    main.main()
    assert "Usage:" in capsys.readouterr().out


def test_too_many_arguments(monkeypatch):
    monkeypatch.setattr("sys.argv", ["tblview", "a.csv", "b.csv"])
    with pytest.raises(SystemExit) as exc:
        main.main()
    assert exc.value.code == 2


def test_load_grid_without_path_uses_default():
    grid, handler = main.load_grid(None, {"CELL_WIDTH": 7})
    assert handler is None
    assert (grid.row_count, grid.col_count) == (4, 4)
    assert grid.get_cell(1, 1).width == 7


def test_load_grid_reads_file():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "in.csv"
        path.write_text("1,2\n3,4\n")
        grid, handler = main.load_grid(str(path), {})
        assert handler.path == str(path)
        assert grid.raw_texts() == [["1", "2"], ["3", "4"]]
