import json
from pathlib import Path

import pytest

from orchestration_cli import __version__
from orchestration_cli import cli


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "_load_env_file", lambda: None)
    monkeypatch.delenv("PUBLIC_SITE_URL", raising=False)


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["--version"])
    assert capsys.readouterr().out.strip() == __version__


def test_missing_base_url_exits_non_zero(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 1
    assert "PUBLIC_SITE_URL" in capsys.readouterr().err


def test_missing_catalog_exits_non_zero(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--base-url", "https://site.example.com", "--records", "absent.json"])

    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_run_without_thumbnails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    records = tmp_path / "videos.json"
    records.write_text(json.dumps([{"id": 1, "title": "Plain"}]), encoding="utf-8")
    module = tmp_path / "out" / "allVideos.ts"

    cli.main(["--base-url", "https://site.example.com", "--records", str(records), "--module", str(module)])

    assert module.exists()
    assert (tmp_path / "public" / "picture").is_dir()
    assert "Generated 1 records" in capsys.readouterr().out
