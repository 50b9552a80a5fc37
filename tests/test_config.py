"""
tests/test_config.py — Config loader and CLI smoke tests
=========================================================
"""

from __future__ import annotations

import pytest

from studypass.__main__ import main
from studypass.config import StudyPassConfig, load_config
from studypass.database.engine import create_db_engine


class TestLoadConfig:
    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            'app_name: "StudyPass"\napi_port: 9000\nnotifications_enabled: false\n',
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg == StudyPassConfig(
            app_name="StudyPass", api_port=9000, notifications_enabled=False
        )

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_missing_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("app_name: x\n", encoding="utf-8")
        with pytest.raises(KeyError):
            load_config(path)


class TestCreateEngine:
    def test_requires_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            create_db_engine()

    def test_sqlite_url(self):
        engine = create_db_engine("sqlite://")
        assert engine.url.drivername == "sqlite"


class TestCli:
    def test_tiers(self, capsys):
        assert main(["tiers"]) == 0
        out = capsys.readouterr().out
        assert "Beginner" in out
        assert "Master" in out

    def test_progress(self, capsys):
        assert main(["progress", "450"]) == 0
        out = capsys.readouterr().out
        assert "Beginner" in out
        assert "Explorer in 550 points" in out

    def test_progress_top_tier(self, capsys):
        main(["progress", "20000"])
        assert "top tier" in capsys.readouterr().out
