"""Version of the Tablero API distribution."""

import tomllib
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "tablero-api"
UNKNOWN_VERSION = "0.0.0+unknown"


def _find_pyproject(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


@lru_cache
def get_version() -> str:
    """Return the installed version, or the checkout's pyproject version.

    Source checkouts that were never installed fall back to the nearest
    pyproject.toml above this module; UNKNOWN_VERSION when there is none.
    """
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        pyproject_path = _find_pyproject(Path(__file__).resolve().parent)
        if pyproject_path is None:
            return UNKNOWN_VERSION
        with open(pyproject_path, "rb") as f:
            return tomllib.load(f)["project"]["version"]


__version__ = get_version()
