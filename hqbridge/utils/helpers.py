"""Small helpers shared by the CLI, config and relay."""

import os
from pathlib import Path

DATA_DIR_ENV = "HQBRIDGE_HOME"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Directory holding ``config.json`` and ``.env``.

    ``$HQBRIDGE_HOME`` when set, else ``~/.hqbridge``. Created on demand.
    """
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    return ensure_dir(Path(override).expanduser() if override else Path.home() / ".hqbridge")


def truncate(text: str, limit: int) -> str:
    """First ``limit`` characters of ``text``, for log lines."""
    return text if len(text) <= limit else text[:limit]


def mask_secret(value: str, visible: int = 4) -> str:
    """Replace all but the last ``visible`` characters with ``*``."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]
