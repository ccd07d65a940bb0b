import runpy
import sys
import pytest


def test_main_entrypoint_runs(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["nacho", "layout", "file_control"])
    # runs src/nacho/__main__.py as __main__
    with pytest.raises(SystemExit) as e:
        runpy.run_module("nacho", run_name="__main__")
    assert e.value.code == 0
    assert '"entry_hash"' in capsys.readouterr().out
