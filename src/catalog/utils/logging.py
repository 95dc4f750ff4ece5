"""
Project metadata lookups used to label log records and the OpenAPI document
(service name, version).
"""
import tomllib
from pathlib import Path
from importlib import metadata as importlib_metadata
from typing import Any

DEFAULT_PROJECT_NAME = "catalog-api"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    """Walk up from `start` (at most `max_up` directories) to the first pyproject.toml."""
    for directory in [start, *start.parents][:max_up]:
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_pyproject_data(pyproject_path: Path) -> dict:
    with pyproject_path.open("rb") as f:
        return tomllib.load(f)


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Look up a dotted `key` such as "project.version" in the nearest
    pyproject.toml above `start` (this module's folder by default).
    A missing file, an unparsable file or a missing key all give `default`.
    """
    origin = Path(start).resolve() if start is not None else Path(__file__).resolve().parent
    pyproject = find_pyproject(origin, max_up=max_up)
    if pyproject is None or not key:
        return default

    try:
        node: Any = load_pyproject_data(pyproject)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def get_project_name(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str | None = DEFAULT_PROJECT_NAME,
) -> str | None:
    return get_pyproject_value("project.name", start=start, max_up=max_up, default=default)


def get_project_version(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str = "unknown",
    prefer_installed: bool = True,
) -> str:
    """
    The installed distribution's version when there is one (wheels, containers),
    otherwise `project.version` from pyproject.toml, otherwise `default`.
    """
    name = get_project_name(start=start, max_up=max_up, default=None)
    if prefer_installed and name:
        try:
            return importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            pass

    return get_pyproject_value("project.version", start=start, max_up=max_up, default=default)


__all__ = [
    "find_pyproject",
    "load_pyproject_data",
    "get_pyproject_value",
    "get_project_name",
    "get_project_version",
]
