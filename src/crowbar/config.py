"""Configuration loaded from ``crowbar.toml`` or ``pyproject.toml``.

Example ``crowbar.toml``::

    compiler = "rustc"
    compiler_args = ["--edition", "2021"]
    run_timeout = 5
    owned_text_constructor = "from"

The same keys may live under ``[tool.crowbar]`` in ``pyproject.toml``.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from crowbar.exceptions import ConfigError

# Python 3.11+ has tomllib built-in
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

CONFIG_FILE = "crowbar.toml"

OWNED_TEXT_CONSTRUCTORS = ("to_string", "from", "to_owned")


@dataclass
class CrowbarConfig:
    """Settings for a Crowbar session.

    Attributes
    ----------
    compiler : str
        Compiler executable, looked up on PATH.
    compiler_args : list[str]
        Extra arguments placed before the source file.
    compile_timeout : float
        Seconds to wait for the compiler.
    run_timeout : float
        Seconds to wait for the compiled program.
    owned_text_constructor : str
        How edited ``String`` values are written: ``"to_string"``,
        ``"from"`` or ``"to_owned"``.
    skip_macro_bodies : bool
        Leave macro token trees untouched when renaming. Uses of the old
        name inside ``println!`` and similar macros then keep it, and the
        program may no longer compile until they are fixed by hand.
    inject_only_modified : bool
        Only rewrite initializers whose value was edited.
    """

    compiler: str = "rustc"
    compiler_args: list[str] = field(default_factory=list)
    compile_timeout: float = 60.0
    run_timeout: float = 10.0
    owned_text_constructor: str = "to_string"
    skip_macro_bodies: bool = True
    inject_only_modified: bool = True

    def __post_init__(self) -> None:
        if self.owned_text_constructor not in OWNED_TEXT_CONSTRUCTORS:
            raise ConfigError(
                f"owned_text_constructor must be one of {', '.join(OWNED_TEXT_CONSTRUCTORS)}, "
                f"got {self.owned_text_constructor!r}"
            )
        for name in ("compile_timeout", "run_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CrowbarConfig:
        """Build a config from parsed TOML, checking value types.

        Unknown keys are logged and ignored.
        """
        kwargs: dict[str, Any] = {}
        known = {f.name: f for f in fields(cls)}
        for key, value in data.items():
            name = key.replace("-", "_")
            if name not in known:
                logger.warning("Ignoring unknown config key %r", key)
                continue
            kwargs[name] = _check_type(name, value)
        return cls(**kwargs)


def _check_type(name: str, value: Any) -> Any:
    if name == "compiler_args":
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{name} must be a list of strings")
        return list(value)
    if name in ("compile_timeout", "run_timeout"):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{name} must be a number")
        return float(value)
    if name in ("skip_macro_bodies", "inject_only_modified"):
        if not isinstance(value, bool):
            raise ConfigError(f"{name} must be true or false")
        return value
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be a string")
    return value


def load_config(directory: str | Path | None = None) -> CrowbarConfig:
    """Load settings for ``directory`` (default: the current directory).

    ``crowbar.toml`` wins over ``[tool.crowbar]`` in ``pyproject.toml``.
    With neither present, defaults are returned.

    Raises
    ------
    ConfigError
        If a file cannot be parsed or holds invalid values.
    """
    base = Path(directory) if directory is not None else Path.cwd()

    crowbar_toml = base / CONFIG_FILE
    if crowbar_toml.is_file():
        return CrowbarConfig.from_dict(_read_toml(crowbar_toml))

    pyproject = base / "pyproject.toml"
    if pyproject.is_file():
        section = _read_toml(pyproject).get("tool", {}).get("crowbar")
        if isinstance(section, dict):
            return CrowbarConfig.from_dict(section)

    return CrowbarConfig()


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
