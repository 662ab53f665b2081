import codecs
import logging
import pytest
from pathlib import Path

from file_inventory.core import InventoryApp
from file_inventory.exceptions import OutputExistsError, ScanSetupError
from file_inventory.main import main, parse_args
from file_inventory.reporting import header_line

from helpers import split_row


def test_writes_csv_file(sample_tree, tmp_path):
    out = tmp_path / "inventory.csv"
    main([str(sample_tree), "-o", str(out), "-v"])

    raw = out.read_bytes()
    assert not raw.startswith(codecs.BOM_UTF8)
    lines = raw.decode("utf-8").splitlines()
    assert lines[0] == header_line()
    assert len(lines) == 5


def test_with_bom_prefixes_the_file(sample_tree, tmp_path):
    out = tmp_path / "inventory.csv"
    main([str(sample_tree), "-o", str(out), "--with-bom"])

    raw = out.read_bytes()
    assert raw.startswith(codecs.BOM_UTF8)
    assert raw.count(codecs.BOM_UTF8) == 1
    assert raw[len(codecs.BOM_UTF8):].decode("utf-8").splitlines()[0] == header_line()


def test_existing_output_is_never_overwritten(sample_tree, tmp_path):
    out = tmp_path / "inventory.csv"
    out.write_text("keep me")

    with pytest.raises(SystemExit) as exc:
        main([str(sample_tree), "-o", str(out)])
    assert exc.value.code == 1
    assert out.read_text() == "keep me"


def test_force_is_accepted_but_does_nothing(sample_tree, tmp_path, caplog):
    out = tmp_path / "inventory.csv"
    out.write_text("keep me")
    caplog.set_level(logging.WARNING)

    with pytest.raises(SystemExit):
        main([str(sample_tree), "-o", str(out), "--force"])
    assert out.read_text() == "keep me"
    assert any("--force" in r.getMessage() for r in caplog.records)


def test_stdout_output(sample_tree, capsys):
    main([str(sample_tree), "-v", "--separator", ";"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == header_line(";")
    assert len(lines) == 5
    assert all(len(split_row(line, ";")) == 10 for line in lines)


def test_missing_root_exits_nonzero_without_output(tmp_path):
    out = tmp_path / "inventory.csv"
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing"), "-o", str(out)])
    assert exc.value.code == 1
    assert not out.exists()


def test_per_file_failures_still_complete(sample_tree, tmp_path, monkeypatch):
    from file_inventory.scanning.hasher import FileHasher
    original = FileHasher.compute_hash

    def fake_compute_hash(self, path):
        if Path(path).name == "a.txt":
            raise PermissionError(13, "Permission denied", str(path))
        return original(self, path)

    monkeypatch.setattr(FileHasher, "compute_hash", fake_compute_hash)
    out = tmp_path / "inventory.csv"
    main([str(sample_tree), "-o", str(out)])  # no SystemExit

    assert len(out.read_text(encoding="utf-8").splitlines()) == 4


def test_separator_must_be_one_character():
    with pytest.raises(SystemExit) as exc:
        parse_args(["--separator", ";;"])
    assert exc.value.code == 2


def test_defaults():
    args = parse_args([])
    assert args.dir == Path(".")
    assert args.output is None
    assert args.separator == ","
    assert args.max_workers == 3
    assert not args.force and not args.with_bom and not args.extended


def test_app_raises_setup_errors(sample_tree, tmp_path):
    app = InventoryApp()
    out = tmp_path / "taken.csv"
    out.write_text("")
    with pytest.raises(OutputExistsError):
        app.run(sample_tree, output=out)

    fresh = tmp_path / "fresh.csv"
    with pytest.raises(ScanSetupError):
        app.run(tmp_path / "missing", output=fresh, with_bom=True)
    assert not fresh.exists()


def test_existing_output_is_a_warning(sample_tree, tmp_path, caplog):
    out = tmp_path / "inventory.csv"
    out.write_text("keep me")
    caplog.set_level(logging.WARNING)

    with pytest.raises(SystemExit) as exc:
        main([str(sample_tree), "-o", str(out)])

    assert exc.value.code == 1
    assert any(r.levelno == logging.WARNING and "already exists" in r.getMessage() for r in caplog.records)
    assert not any(r.levelno >= logging.ERROR for r in caplog.records)
