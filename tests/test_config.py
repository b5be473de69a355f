"""Tests for core/config.py -- settings and the user .env writer."""

from pathlib import Path

import pytest
from pydantic import ValidationError

import core.config
from core.config import AppSettings, _parse_env_lines, get_env_files, load_settings, write_user_env_vars
from core.domain.language import Language


class TestAppSettings:
    def test_defaults(self) -> None:
        s = AppSettings(_env_file=None)
        assert s.work_dir == Path("/root/compose")
        assert s.snell_version == "v4.0.1"
        assert (s.port_min, s.port_max) == (15000, 50000)
        assert s.psk_bytes == 32
        assert s.language is Language.CHINESE
        assert s.service_name == "snell-server"
        assert s.container_name == "snell"

    def test_derived_paths(self, tmp_path: Path) -> None:
        s = AppSettings(_env_file=None, work_dir=tmp_path)
        assert s.compose_file == tmp_path / "docker-compose.yml"
        assert s.config_file == tmp_path / "snell" / "snell-server.conf"
        assert s.dockerfile == tmp_path / "snell" / "Dockerfile"
        assert s.binary_file == tmp_path / "snell" / "snell-server"

    def test_major_version(self) -> None:
        assert AppSettings(_env_file=None, snell_version="v4.1.0").snell_major_version == 4
        assert AppSettings(_env_file=None, snell_version="v5.0.0b2").snell_major_version == 5

    def test_inverted_port_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, port_min=40000, port_max=20000)

    def test_bad_version_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, snell_version="latest")

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("SNELL_DEPLOY_WORK_DIR", str(tmp_path))
        monkeypatch.setenv("SNELL_DEPLOY_LANGUAGE", "en")
        monkeypatch.setenv("SNELL_DEPLOY_PORT_MIN", "20000")
        s = AppSettings(_env_file=None)
        assert s.work_dir == tmp_path
        assert s.language is Language.ENGLISH
        assert s.port_min == 20000


class TestUserEnv:
    def test_parse_env_lines_skips_comments(self) -> None:
        text = "# comment\nA=1\n\nB = 'two'\nnoise\n"
        assert _parse_env_lines(text) == {"A": "1", "B": "two"}

    def test_write_merges_existing(self, tmp_path: Path) -> None:
        env_path = tmp_path / "cfg" / ".env"
        write_user_env_vars({"B": "2", "A": "1"}, env_path)
        write_user_env_vars({"A": "10", "C": None}, env_path)

        lines = env_path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("#")
        assert lines[1:] == ["A=10", "B=2"]


class TestEnvFiles:
    @pytest.fixture(autouse=True)
    def _isolated(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "root-xdg"))
        monkeypatch.delenv("SUDO_USER", raising=False)
        for name in ("SNELL_DEPLOY_LANGUAGE", "SNELL_DEPLOY_WORK_DIR", "SNELL_DEPLOY_SNELL_VERSION"):
            monkeypatch.delenv(name, raising=False)

    def test_without_sudo(self, tmp_path: Path) -> None:
        assert get_env_files() == (".env", str(tmp_path / "root-xdg" / "docker-snell" / ".env"))

    def test_sudo_reads_invoking_user_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        alice = tmp_path / "home" / "alice"
        monkeypatch.setenv("SUDO_USER", "alice")
        monkeypatch.setattr(core.config, "_sudo_user_home", lambda name: alice if name == "alice" else None)

        write_user_env_vars(
            {"SNELL_DEPLOY_LANGUAGE": "en", "SNELL_DEPLOY_WORK_DIR": "/srv/snell"},
            alice / ".config" / "docker-snell" / ".env",
        )

        assert get_env_files()[1] == str(alice / ".config" / "docker-snell" / ".env")
        s = load_settings()
        assert s.language is Language.ENGLISH
        assert s.work_dir == Path("/srv/snell")

    def test_own_file_wins_over_sudo_user(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        alice = tmp_path / "home" / "alice"
        monkeypatch.setenv("SUDO_USER", "alice")
        monkeypatch.setattr(core.config, "_sudo_user_home", lambda name: alice)

        alice_env = alice / ".config" / "docker-snell" / ".env"
        write_user_env_vars({"SNELL_DEPLOY_SNELL_VERSION": "v4.1.0"}, alice_env)
        write_user_env_vars({"SNELL_DEPLOY_SNELL_VERSION": "v5.0.0"})

        assert load_settings().snell_version == "v5.0.0"

    def test_unknown_sudo_user_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SUDO_USER", "nobody-here")
        monkeypatch.setattr(core.config, "_sudo_user_home", lambda name: None)
        assert len(get_env_files()) == 2
