"""
Tests for crowbar.config - settings from crowbar.toml and pyproject.toml.

Coverage targets:
- Defaults and validation
- crowbar.toml precedence over [tool.crowbar]
- Key spelling, unknown keys and type errors
- Unreadable files
"""
from __future__ import annotations

import logging
import textwrap
from pathlib import Path

import pytest

from crowbar.config import CrowbarConfig, load_config
from crowbar.exceptions import ConfigError


def write(path: Path, content: str) -> Path:
    path.write_text(textwrap.dedent(content))
    return path


# =============================================================================
# CrowbarConfig
# =============================================================================

class TestCrowbarConfig:
    """Tests for the dataclass itself."""

    def test_defaults(self):
        config = CrowbarConfig()

        assert config.compiler == "rustc"
        assert config.compiler_args == []
        assert config.owned_text_constructor == "to_string"
        assert config.skip_macro_bodies is True
        assert config.inject_only_modified is True

    def test_unknown_constructor_rejected(self):
        with pytest.raises(ConfigError, match="owned_text_constructor"):
            CrowbarConfig(owned_text_constructor="into")

    @pytest.mark.parametrize("name", ["compile_timeout", "run_timeout"])
    def test_non_positive_timeout_rejected(self, name: str):
        with pytest.raises(ConfigError, match=name):
            CrowbarConfig(**{name: 0})

    def test_from_dict_accepts_dashed_keys(self):
        config = CrowbarConfig.from_dict({"run-timeout": 3, "compiler-args": ["--edition", "2021"]})

        assert config.run_timeout == 3.0
        assert config.compiler_args == ["--edition", "2021"]

    def test_from_dict_ignores_unknown_keys(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="crowbar.config"):
            config = CrowbarConfig.from_dict({"colour": "blue"})

        assert config == CrowbarConfig()
        assert "colour" in caplog.text

    @pytest.mark.parametrize(
        "data",
        [
            {"compiler_args": "--edition 2021"},
            {"compiler_args": [2021]},
            {"run_timeout": "fast"},
            {"run_timeout": True},
            {"skip_macro_bodies": "yes"},
            {"compiler": 1},
        ],
    )
    def test_from_dict_type_errors(self, data: dict):
        with pytest.raises(ConfigError):
            CrowbarConfig.from_dict(data)


# =============================================================================
# load_config
# =============================================================================

class TestLoadConfig:
    """Tests for load_config()."""

    def test_no_files_gives_defaults(self, tmp_path: Path):
        assert load_config(tmp_path) == CrowbarConfig()

    def test_crowbar_toml(self, tmp_path: Path):
        write(tmp_path / "crowbar.toml", """\
            compiler = "rustc-nightly"
            run_timeout = 2.5
            owned_text_constructor = "from"
        """)

        config = load_config(tmp_path)

        assert config.compiler == "rustc-nightly"
        assert config.run_timeout == 2.5
        assert config.owned_text_constructor == "from"

    def test_pyproject_section(self, tmp_path: Path):
        write(tmp_path / "pyproject.toml", """\
            [project]
            name = "demo"

            [tool.crowbar]
            skip-macro-bodies = false
        """)

        assert load_config(tmp_path).skip_macro_bodies is False

    def test_pyproject_without_section(self, tmp_path: Path):
        write(tmp_path / "pyproject.toml", """\
            [project]
            name = "demo"
        """)

        assert load_config(tmp_path) == CrowbarConfig()

    def test_crowbar_toml_wins(self, tmp_path: Path):
        write(tmp_path / "crowbar.toml", 'compiler = "from-crowbar-toml"\n')
        write(tmp_path / "pyproject.toml", '[tool.crowbar]\ncompiler = "from-pyproject"\n')

        assert load_config(tmp_path).compiler == "from-crowbar-toml"

    def test_current_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        write(tmp_path / "crowbar.toml", "run_timeout = 1\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().run_timeout == 1.0

    def test_invalid_toml(self, tmp_path: Path):
        write(tmp_path / "crowbar.toml", "compiler = \n")

        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(tmp_path)
