import json
import os
import zipfile

import pytest

from apps.cli import main as cli_main
from apps.cli.commands import analyze, doctor
from blockprops.engine import PROPERTIES_MEMBER


@pytest.fixture
def catalog_file(tmp_path, catalog_doc):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog_doc), encoding="utf-8")
    return path


@pytest.fixture
def pack_file(tmp_path):
    path = tmp_path / "block.properties"
    path.write_text("block.1=stone furnace:lit=true\nblock.2=stone\n", encoding="utf-8")
    return path


def test_analyze_writes_json(tmp_path, catalog_file, pack_file):
    out = tmp_path / "out" / "report.json"
    code = analyze.main([
        str(pack_file),
        "--catalog", str(catalog_file),
        "--config", str(tmp_path / "missing.ini"),
        "--scan-mode", "quick",
        "--out-json", str(out),
        "--log-level", "critical",
    ])
    assert code == 0
    doc = json.loads(out.read_text(encoding="utf-8"))
    (report,) = doc["reports"]
    assert report["pack"] == "block.properties"
    assert report["duplicate_definitions"] == {"minecraft:stone": [1, 2]}
    assert report["incomplete_block_states"] == {"minecraft:furnace": {"lit": ["false"]}}


def test_analyze_reports_failed_pack(tmp_path, catalog_file, pack_file):
    code = analyze.main([str(pack_file), str(tmp_path / "nope.zip"), "--catalog", str(catalog_file), "--log-level", "critical"])
    assert code == 1


def test_analyze_rejects_unparseable_game_version(tmp_path, catalog_file, pack_file):
    code = analyze.main([
        str(pack_file),
        "--catalog", str(catalog_file),
        "--config", str(tmp_path / "missing.ini"),
        "--mc-version", "latest",
        "--log-level", "critical",
    ])
    assert code == 2


def test_analyze_corrupt_zip_member_fails_only_that_pack(tmp_path, catalog_file, pack_file):
    corrupt = tmp_path / "Corrupt.zip"
    with zipfile.ZipFile(corrupt, "w", compression=zipfile.ZIP_STORED) as zf:
        zf.writestr(PROPERTIES_MEMBER, "block.1=stone\n")
    data = corrupt.read_bytes().replace(b"block.1=stone", b"block.1=STONE")
    corrupt.write_bytes(data)

    out = tmp_path / "report.json"
    code = analyze.main([
        str(corrupt),
        str(pack_file),
        "--catalog", str(catalog_file),
        "--config", str(tmp_path / "missing.ini"),
        "--out-json", str(out),
        "--log-level", "critical",
    ])
    assert code == 1
    (report,) = json.loads(out.read_text(encoding="utf-8"))["reports"]
    assert report["pack"] == "block.properties"


def test_analyze_without_catalog(tmp_path, pack_file):
    code = analyze.main([str(pack_file), "--catalog", str(tmp_path / "nope.json"), "--log-level", "critical"])
    assert code == 2


def test_dispatcher_help_and_unknown():
    assert cli_main.main([]) == 0
    assert cli_main.main(["no-such-command"]) == 2


# ---------------------------------------------------------------------------
# doctor
# ---------------------------------------------------------------------------

SETTINGS = """
[ANALYSIS]
SCAN_MODE = QUICK

[ENVIRONMENT]
MC_VERSION = 1.20.4
"""


@pytest.fixture
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("BLOCKPROPS_"):
            monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "settings.ini"
    path.write_text(SETTINGS, encoding="utf-8")
    return path


def test_doctor_all_checks_pass(clean_env, settings_file, catalog_file):
    argv = ["--config", str(settings_file), "--catalog", str(catalog_file), "--enforce", "--strict"]
    assert doctor.main(argv) == 0


@pytest.mark.parametrize(
    "flags,expected",
    [
        ([], 0),
        (["--enforce"], 0),
        (["--enforce", "--strict"], 1),
    ],
)
def test_doctor_missing_settings_is_a_warning(clean_env, tmp_path, catalog_file, flags, expected):
    argv = ["--config", str(tmp_path / "missing.ini"), "--catalog", str(catalog_file)] + flags
    assert doctor.main(argv) == expected


def test_doctor_missing_catalog_fails(clean_env, settings_file, tmp_path):
    argv = ["--config", str(settings_file), "--catalog", str(tmp_path / "nope.json")]
    assert doctor.main(argv) == 0
    assert doctor.main(argv + ["--enforce"]) == 1


def test_doctor_broken_catalog_fails(clean_env, settings_file, tmp_path):
    broken = tmp_path / "catalog.json"
    broken.write_text("{not json", encoding="utf-8")
    argv = ["--config", str(settings_file), "--catalog", str(broken), "--enforce"]
    assert doctor.main(argv) == 1


def test_doctor_invalid_setting_fails(clean_env, settings_file, catalog_file):
    clean_env.setenv("BLOCKPROPS_MC_VERSION", "latest")
    argv = ["--config", str(settings_file), "--catalog", str(catalog_file)]
    assert doctor.main(argv) == 0
    assert doctor.main(argv + ["--enforce"]) == 1
