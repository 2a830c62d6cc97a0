from __future__ import annotations

"""Environment helper utilities.

Loads a `.env` file from the project root so that variables such as
``OPENAI_API_KEY`` or ``PRICING_BACKEND`` become available via ``os.getenv``,
and offers small typed readers for them. Uses `python-dotenv`.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

__all__ = ["load_project_dotenv", "env_str", "env_float", "env_int"]


def _find_project_root(start: Path | None = None) -> Path:
    """Walk upwards until a directory containing `pyproject.toml` is found."""
    current = start or Path(__file__).resolve().parent
    for _ in range(10):
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv() -> bool:
    """Load the project-level `.env` if present. Existing variables win."""
    dotenv_path = _find_project_root() / ".env"
    if not dotenv_path.exists():
        return False
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return True


def env_str(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def env_float(name: str, default: float) -> float:
    value = env_str(name, None)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number, got {value!r}") from exc


def env_int(name: str, default: int) -> int:
    value = env_str(name, None)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got {value!r}") from exc
