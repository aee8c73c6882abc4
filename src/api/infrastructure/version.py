"""Deskflow API version, from package metadata or the source checkout."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "deskflow-api"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


def get_version() -> str:
    """Installed distribution version, else the one declared in pyproject.toml."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        with _PYPROJECT.open("rb") as f:
            return tomllib.load(f)["project"]["version"]


__version__ = get_version()
