"""
workerlint configuration.

Runtime configuration plus loading from `workerlint.toml` or the
`[tool.workerlint]` table of `pyproject.toml`:

    [tool.workerlint]
    extensions = [".js", ".ts"]
    exclude-dirs = ["node_modules", "vendor"]
    ignore-directive = "workerlint-ignore"
    jobs = 4

    [tool.workerlint.rules]
    tags = ["recommended"]
    include = []
    exclude = ["no-window-prefix"]

In `workerlint.toml` the same keys live at the top level.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "workerlint.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class ConfigError(Exception):
    """Configuration file could not be read or has invalid values."""
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}{message}")


@dataclass
class LintConfig:
    """Runtime configuration for workerlint."""

    root: Path = field(default_factory=Path.cwd)

    # Rule selection
    tags: tuple[str, ...] = ("recommended",)
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    # File extensions
    extensions: tuple[str, ...] = (".js", ".mjs", ".cjs", ".jsx", ".ts", ".mts", ".cts", ".tsx")

    # Directory exclusions
    exclude_dirs: tuple[str, ...] = (
        ".git",
        "node_modules",
        "dist",
        "build",
        "coverage",
        ".venv",
        "venv",
        "__pycache__",
    )

    ignore_directive: str = "workerlint-ignore"

    # Output settings
    json_output: bool = False

    # Parallel file linting
    jobs: int = 1

    # Where the values came from, if a file was loaded
    config_path: Optional[Path] = None


def should_exclude_path(cfg: LintConfig, path: Path) -> bool:
    """Check if path should be excluded from scanning."""
    return any(d in path.parts for d in cfg.exclude_dirs)


def find_config_file(start: Path) -> Optional[Path]:
    """Search start and its parents for workerlint.toml or a pyproject.toml with [tool.workerlint]."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and "workerlint" in _read_toml(pyproject).get("tool", {}):
            return pyproject
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"cannot read: {e}", path) from e


def _string_tuple(section: dict[str, Any], key: str, path: Path) -> Optional[tuple[str, ...]]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings", path)
    return tuple(value)


def _apply_section(cfg: LintConfig, section: dict[str, Any], path: Path) -> LintConfig:
    updates: dict[str, Any] = {}

    extensions = _string_tuple(section, "extensions", path)
    if extensions is not None:
        updates["extensions"] = tuple(e if e.startswith(".") else f".{e}" for e in extensions)

    exclude_dirs = _string_tuple(section, "exclude-dirs", path)
    if exclude_dirs is not None:
        updates["exclude_dirs"] = exclude_dirs

    directive = section.get("ignore-directive")
    if directive is not None:
        if not isinstance(directive, str) or not directive.strip():
            raise ConfigError("'ignore-directive' must be a non-empty string", path)
        updates["ignore_directive"] = directive.strip()

    jobs = section.get("jobs")
    if jobs is not None:
        if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1:
            raise ConfigError("'jobs' must be a positive integer", path)
        updates["jobs"] = jobs

    rules = section.get("rules", {})
    if not isinstance(rules, dict):
        raise ConfigError("'rules' must be a table", path)
    for key in ("tags", "include", "exclude"):
        value = _string_tuple(rules, key, path)
        if value is not None:
            updates[key] = value

    return replace(cfg, config_path=path, **updates)


def load_config(path: Optional[Path] = None, root: Optional[Path] = None) -> LintConfig:
    """
    Load configuration.

    With an explicit path, that file is read (workerlint.toml layout, or
    pyproject.toml with [tool.workerlint]). Otherwise the nearest config file
    above root is used; with none found, defaults apply.
    """
    root = Path(root) if root is not None else Path.cwd()
    cfg = LintConfig(root=root)

    if path is None:
        path = find_config_file(root)
        if path is None:
            logger.debug("No config file found above %s, using defaults", root)
            return cfg
    path = Path(path)

    data = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        section = data.get("tool", {}).get("workerlint", {})
    else:
        section = data
    if not isinstance(section, dict):
        raise ConfigError("workerlint configuration must be a table", path)

    logger.debug("Loading config from %s", path)
    return _apply_section(cfg, section, path)
