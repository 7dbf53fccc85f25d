"""YAML settings for the solver and the batch runner."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from solver import DEFAULT_MAX_ITERATIONS, SearchLimits, SearchPolicy

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
CHECKOUT_CONFIG_PATH = Path(__file__).resolve().parent.parent / CONFIG_FILENAME

# same values as the config.yaml shipped in the repo
DEFAULT_SETTINGS: dict[str, Any] = {
    "solver": {
        "max_iterations": DEFAULT_MAX_ITERATIONS,
        "prune_revisited": False,
        "partial_runs": False,
    },
    "batch": {
        "start_seed": 1,
        "count": 100,
        "processes": 0,
    },
    "logging": {
        "level": "INFO",
    },
}


class DotDict(dict):
    """Settings mapping whose sections can also be read as attributes (``config.solver.max_iterations``)."""

    def __init__(self, data: dict[str, Any] | None = None):
        super().__init__()
        for key, value in (data or {}).items():
            self[key] = DotDict(value) if isinstance(value, dict) else value

    def __getattr__(self, key: str) -> Any:
        if key not in self:
            raise AttributeError(key)
        return self[key]


def default_config() -> DotDict:
    return DotDict(copy.deepcopy(DEFAULT_SETTINGS))


def get_config_value(config: dict[str, Any], path: str, default: Any | None = None) -> Any:
    """
    Looks up a dotted key such as ``solver.max_iterations``.

    Args:
        config: Loaded settings
        path: Section and key names joined by dots
        default: Value used when any part of the path is missing

    Returns:
        The stored value, or ``default`` after logging a warning
    """
    node: Any = config
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            logger.warning("Config key '%s' missing, using default %r", path, default)
            return default
        node = node[part]
    return node


def find_config_path(candidates: list[Path] | None = None) -> Path | None:
    """First existing settings file: the working directory's, then the one beside the sources."""
    if candidates is None:
        candidates = [Path.cwd() / CONFIG_FILENAME, CHECKOUT_CONFIG_PATH]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path) -> DotDict:
    """
    Reads a YAML settings file.

    Args:
        path: File to read

    Returns:
        The settings, sections accessible as attributes

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a mapping
    """
    config_path = Path(path)
    if not config_path.is_file():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    with config_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return DotDict()
    if not isinstance(data, dict):
        msg = f"Configuration root must be a mapping: {path}"
        raise ValueError(msg)
    logger.debug("settings loaded from %s", config_path)
    return DotDict(data)


def search_limits(config: dict[str, Any]) -> SearchLimits:
    return SearchLimits(
        max_iterations=int(get_config_value(config, "solver.max_iterations", DEFAULT_MAX_ITERATIONS)),
    )


def search_policy(config: dict[str, Any]) -> SearchPolicy:
    return SearchPolicy(
        prune_revisited=bool(get_config_value(config, "solver.prune_revisited", False)),
        partial_runs=bool(get_config_value(config, "solver.partial_runs", False)),
    )
