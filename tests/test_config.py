"""Tests for config/settings: example defaults, env overrides, path resolution, reader selection."""

from pathlib import Path

import pytest

import kiosk
from kiosk.config.settings import (
    DEFAULT_STATIC_DIR,
    EXAMPLE_CONFIG_PATH,
    get_readings_config,
    get_server_config,
    read_config,
)
from kiosk.readings import DirectoryPinReader, SnapshotPinReader, build_reader


class TestServerConfig:
    def test_defaults_from_example(self):
        out = get_server_config({}, environ={})
        assert out["host"] == "0.0.0.0"
        assert out["port"] == 3000
        assert out["static_dir"] == DEFAULT_STATIC_DIR
        assert (out["static_dir"] / "index.html").is_file()
        assert out["webhook_enabled"] is True

    def test_port_env_override(self):
        out = get_server_config({"server": {"port": 4000}}, environ={"PORT": "8080"})
        assert out["port"] == 8080

    def test_port_from_config(self):
        assert get_server_config({"server": {"port": 4000}}, environ={})["port"] == 4000

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_invalid_port_raises(self, port):
        with pytest.raises(ValueError):
            get_server_config({}, environ={"PORT": port})

    def test_webhook_follows_source_when_unset(self):
        assert get_server_config({"readings": {"source": "snapshot"}}, environ={})["webhook_enabled"] is False
        assert get_server_config({"readings": {"source": "directory"}}, environ={})["webhook_enabled"] is True

    def test_webhook_explicit(self):
        cfg = {"server": {"webhook_enabled": True}, "readings": {"source": "snapshot"}}
        assert get_server_config(cfg, environ={})["webhook_enabled"] is True

    def test_absolute_static_dir_kept(self, tmp_path: Path):
        out = get_server_config({"server": {"static_dir": str(tmp_path)}}, environ={})
        assert out["static_dir"] == tmp_path

    def test_relative_static_dir_resolves_against_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        out = get_server_config({"server": {"static_dir": "site"}}, environ={})
        assert out["static_dir"] == Path.cwd() / "site"


class TestReadingsConfig:
    def test_defaults_from_example(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        out = get_readings_config({}, environ={})
        assert out["source"] == "directory"
        assert out["readings_dir"] == Path.cwd() / "pin_readings"
        assert out["snapshot_path"] == Path.cwd() / "pin_readings" / "snapshot.json"

    def test_env_overrides(self, tmp_path: Path):
        env = {
            "KIOSK_SOURCE": "Snapshot",
            "KIOSK_READINGS_DIR": str(tmp_path / "r"),
            "KIOSK_SNAPSHOT_PATH": str(tmp_path / "s.json"),
        }
        out = get_readings_config({}, environ=env)
        assert out["source"] == "snapshot"
        assert out["readings_dir"] == tmp_path / "r"
        assert out["snapshot_path"] == tmp_path / "s.json"

    def test_partial_override_keeps_other_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        out = get_readings_config({"readings": {"source": "snapshot"}}, environ={})
        assert out["source"] == "snapshot"
        assert out["readings_dir"] == Path.cwd() / "pin_readings"


class TestBuildReader:
    def test_directory(self, tmp_path: Path):
        reader = build_reader({"source": "directory", "readings_dir": tmp_path, "snapshot_path": None})
        assert isinstance(reader, DirectoryPinReader)
        assert reader.readings_dir == tmp_path

    def test_snapshot(self, tmp_path: Path):
        reader = build_reader({"source": "snapshot", "readings_dir": None, "snapshot_path": tmp_path / "s.json"})
        assert isinstance(reader, SnapshotPinReader)

    def test_unknown_source(self):
        with pytest.raises(ValueError, match="unknown readings source"):
            build_reader({"source": "mqtt"})


class TestReadConfig:
    def test_falls_back_to_example(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("KIOSK_CONFIG", raising=False)
        config, path = read_config(str(tmp_path / "missing.yaml"))
        assert path.endswith("config.yaml.example")
        assert config["readings"]["source"] == "directory"

    def test_reads_given_file(self, tmp_path: Path):
        p = tmp_path / "c.yaml"
        p.write_text("server:\n  port: 5000\nreadings:\n  source: snapshot\n", encoding="utf-8")
        config, path = read_config(str(p))
        assert path == str(p.resolve())
        assert get_server_config(config, environ={})["port"] == 5000

    def test_env_config_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        p = tmp_path / "c.yaml"
        p.write_text("readings:\n  source: snapshot\n", encoding="utf-8")
        monkeypatch.setenv("KIOSK_CONFIG", str(p))
        config, _ = read_config()
        assert config["readings"]["source"] == "snapshot"

    def test_example_loads(self, config: dict):
        assert "server" in config and "readings" in config

    def test_defaults_ship_inside_package(self):
        package_dir = Path(kiosk.__file__).resolve().parent
        assert EXAMPLE_CONFIG_PATH.is_file()
        assert package_dir in EXAMPLE_CONFIG_PATH.parents
        assert package_dir in DEFAULT_STATIC_DIR.parents

    def test_defaults_independent_of_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("KIOSK_CONFIG", raising=False)
        config, path = read_config()
        assert path == str(EXAMPLE_CONFIG_PATH.resolve())
        out = get_server_config(config, environ={})
        assert out["port"] == 3000
        assert out["static_dir"] == DEFAULT_STATIC_DIR
