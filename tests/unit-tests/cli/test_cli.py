import json
import sys
import pytest
from nacho.cli import main


def _run(monkeypatch, args):
    monkeypatch.setattr(sys, "argv", ["nacho"] + args)
    return main()


def test_inspect_good_file(monkeypatch, capsys, data_dir):
    code = _run(monkeypatch, ["inspect", str(data_dir / "ach" / "good_single_batch.ach")])
    out = capsys.readouterr().out
    assert code == 0
    assert "11 records, 1 batches, 3 entries, 2 addenda, 2 padding" in out
    assert "0 errors found" in out


def test_inspect_reports_each_error(monkeypatch, capsys, data_dir):
    code = _run(monkeypatch, ["inspect", str(data_dir / "ach" / "bad_structure.ach")])
    out = capsys.readouterr().out.splitlines()
    assert code == 1
    assert "8 errors found" in out
    assert "  line 1: batch header not preceeded by file header" in out
    assert '  line 10: unrecognized record type "3"' in out


def test_inspect_json(monkeypatch, capsys, data_dir):
    code = _run(monkeypatch, ["inspect", "--json", str(data_dir / "ach" / "bad_structure.ach")])
    payload = json.loads(capsys.readouterr().out)
    assert code == 1
    assert payload["summary"]["errors"] == 8
    assert payload["errors"][1] == {
        "message": "more than one addendum for entry",
        "line": payload["errors"][1]["line"],
        "line_number": 5,
        "record_type": "7",
    }


def test_export_prints_counters(monkeypatch, capsys, data_dir, tmp_out):
    code = _run(monkeypatch, [
        "export", str(data_dir / "ach" / "good_single_batch.ach"), "--dest", str(tmp_out), "--mode", "chunked",
    ])
    counters = json.loads(capsys.readouterr().out)
    assert code == 0
    assert counters == {"read": 9, "kept": 9, "rejected": 0, "structural_errors": 0}
    assert (tmp_out / "entry_detail.parquet").exists()


def test_export_with_rejected_rows_exits_nonzero(monkeypatch, capsys, data_dir, tmp_out):
    code = _run(monkeypatch, ["export", str(data_dir / "ach" / "bad_fields.ach"), "--dest", str(tmp_out)])
    assert code == 1
    assert json.loads(capsys.readouterr().out)["rejected"] == 2


def test_layout_prints_fields(monkeypatch, capsys):
    code = _run(monkeypatch, ["layout", "entry_detail"])
    spec = json.loads(capsys.readouterr().out)
    assert code == 0
    assert spec["record_length"] == 94
    amount = next(f for f in spec["fields"] if f["name"] == "amount")
    assert (amount["start"], amount["end"], amount["type"]) == (30, 39, "integer")


@pytest.mark.parametrize("args", [
    [],
    ["inspect"],
    ["export", "file.ach"],
    ["layout"],
    ["layout", "padding"],
    ["export", "file.ach", "--dest", "out", "--mode", "streaming"],
])
def test_cli_missing_or_bad_args(monkeypatch, args):
    with pytest.raises(SystemExit):
        _run(monkeypatch, args)


def test_cli_help(monkeypatch, capsys):
    with pytest.raises(SystemExit) as e:
        _run(monkeypatch, ["--help"])
    assert e.value.code == 0
    out = capsys.readouterr().out
    assert "usage:" in out
    assert "inspect" in out and "export" in out


def test_cli_missing_file(monkeypatch, tmp_path):
    with pytest.raises(FileNotFoundError):
        _run(monkeypatch, ["inspect", str(tmp_path / "nope.ach")])


def test_cli_bad_compression(monkeypatch, data_dir, tmp_out):
    with pytest.raises(ValueError, match="Unsupported compression"):
        _run(monkeypatch, [
            "export", str(data_dir / "ach" / "good_single_batch.ach"), "--dest", str(tmp_out), "--compression", "rar",
        ])


def test_cli_version(monkeypatch, capsys):
    with pytest.raises(SystemExit) as e:
        _run(monkeypatch, ["--version"])
    assert e.value.code == 0
    assert "0.1.0" in capsys.readouterr().out


def test_cli_log_level_choices(monkeypatch, capsys):
    assert _run(monkeypatch, ["--log-level", "DEBUG", "layout", "batch_header"]) == 0
    with pytest.raises(SystemExit):
        _run(monkeypatch, ["--log-level", "LOUD", "layout", "batch_header"])
