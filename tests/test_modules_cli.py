from __future__ import annotations

import json
import os
import zipfile

from everest.core.config.models import LoaderConfig
from everest.core.modules.cli import main, metadata_show_payload
from everest.core.modules.parser import parse_metadata_at, read_metadata_document


def test_show_directory_mod(make_mod_dir, rec_logger):
    mod_dir = make_mod_dir("Demo", "Name: Demo\nVersion: 1.4\nDLL: bin\\Demo.dll\n")
    out = metadata_show_payload(mod_dir, logger=rec_logger)
    assert out["ok"] is True
    assert out["display"] == "Demo 1.4.0"
    md = out["metadata"]
    assert md["PathDirectory"] == os.path.abspath(mod_dir)
    assert md["PathArchive"] == ""
    assert md["DLL"] == os.path.join(os.path.abspath(mod_dir), "bin", "Demo.dll")
    assert md["Dependencies"] == [{"Name": "Everest", "Version": "1.0.0"}]


def test_show_zip_mod(tmp_path, rec_logger):
    zpath = tmp_path / "Zipped.zip"
    with zipfile.ZipFile(zpath, "w") as zf:
        zf.writestr("metadata.yaml", "Name: Zipped\nDLL: Code/Zipped.dll\nDependencies:\n  - Name: API\n    Version: 1.1\n")
    out = metadata_show_payload(str(zpath), logger=rec_logger)
    assert out["ok"] is True
    md = out["metadata"]
    assert md["PathArchive"] == os.path.abspath(str(zpath))
    assert md["PathDirectory"] == ""
    assert md["DLL"] == "Code/Zipped.dll"
    assert md["Dependencies"] == [{"Name": "Everest", "Version": "1.1.0"}]
    assert rec_logger.records == []


def test_first_configured_file_name_wins(make_mod_dir):
    mod_dir = make_mod_dir("Both", "Name: FromEverestYaml\n")
    make_mod_dir("Both", "Name: FromMetadataYaml\n", file_name="metadata.yaml")
    assert read_metadata_document(mod_dir) == b"Name: FromEverestYaml\n"
    cfg = LoaderConfig(metadata_file_names=["metadata.yaml", "everest.yaml"])
    assert read_metadata_document(mod_dir, config=cfg) == b"Name: FromMetadataYaml\n"


def test_show_missing_document(tmp_path):
    empty = tmp_path / "Empty"
    empty.mkdir()
    out = metadata_show_payload(str(empty))
    assert out["ok"] is False
    assert "No metadata document" in out["error"]

    out2 = metadata_show_payload(str(tmp_path / "does-not-exist"))
    assert out2["ok"] is False


def test_show_invalid_document(make_mod_dir, rec_logger):
    mod_dir = make_mod_dir("Bad", "Name: [oops\n")
    out = metadata_show_payload(mod_dir, logger=rec_logger)
    assert out["ok"] is False
    assert len(rec_logger.problems) == 1
    assert parse_metadata_at(mod_dir, logger=rec_logger) is None


def test_main_exit_codes(make_mod_dir, tmp_path, capsys, restore_everest_logger):
    good = make_mod_dir("Good", "Name: Good\nDependencies:\n  - Name: Everest\n    Version: 1.2\n")
    assert main(["show", good, "--log-dir", str(tmp_path / "logs")]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["display"] == "Good 1.0.0"

    assert main(["show", str(tmp_path / "missing"), "--log-dir", str(tmp_path / "logs")]) == 1
    assert json.loads(capsys.readouterr().out)["ok"] is False


def test_main_with_config_file(make_mod_dir, tmp_path, capsys, restore_everest_logger):
    mod_dir = make_mod_dir("Cfg", "Name: Cfg\n")
    cfg_path = tmp_path / "loader.json"
    cfg_path.write_text(json.dumps({"platform_name": "Celeste", "minimum_platform_version": "1.3.0"}), encoding="utf-8")
    assert main(["show", mod_dir, "--config", str(cfg_path), "--log-dir", str(tmp_path / "logs")]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["metadata"]["Dependencies"] == [{"Name": "Celeste", "Version": "1.3.0"}]

    cfg_path.write_text("{broken", encoding="utf-8")
    assert main(["show", mod_dir, "--config", str(cfg_path), "--log-dir", str(tmp_path / "logs")]) == 1
    assert json.loads(capsys.readouterr().out)["error"]["code"] == "config_error"


def _write_damaged_zip(zpath) -> None:
    # Stored (uncompressed) member with one flipped byte: the CRC check fails on read.
    with zipfile.ZipFile(zpath, "w", compression=zipfile.ZIP_STORED) as zf:
        zf.writestr("everest.yaml", "Name: Damaged\n")
    blob = bytearray(zpath.read_bytes())
    blob[blob.index(b"Name: Damaged")] = ord("X")
    zpath.write_bytes(bytes(blob))


def test_show_zip_with_damaged_member(tmp_path):
    zpath = tmp_path / "Damaged.zip"
    _write_damaged_zip(zpath)
    assert zipfile.is_zipfile(str(zpath))

    out = metadata_show_payload(str(zpath))
    assert out["ok"] is False
    assert "CRC" in out["error"]


def test_main_reports_damaged_zip_and_writes_log(tmp_path, capsys, restore_everest_logger):
    zpath = tmp_path / "Damaged.zip"
    _write_damaged_zip(zpath)

    log_dir = tmp_path / "logs"
    assert main(["show", str(zpath), "--log-dir", str(log_dir)]) == 1
    assert json.loads(capsys.readouterr().out)["ok"] is False
    assert (log_dir / "everest.log").exists()


def test_main_routes_parser_warnings_to_log_file(make_mod_dir, tmp_path, capsys, restore_everest_logger):
    mod_dir = make_mod_dir("NoDeps", "Name: NoDeps\n")
    log_dir = tmp_path / "logs"
    assert main(["show", mod_dir, "--log-dir", str(log_dir)]) == 0
    capsys.readouterr()
    for h in restore_everest_logger.handlers:
        h.flush()
    assert "No dependency to Everest found in NoDeps 1.0.0" in (log_dir / "everest.log").read_text(encoding="utf-8")
