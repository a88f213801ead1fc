"""Read and write ``config.json`` (camelCase on disk, snake_case in models)."""

import json
import os
import re
import tempfile
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from loguru import logger

from hqbridge.config.defaults import apply_legacy_env
from hqbridge.config.schema import Config

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def get_config_path() -> Path:
    from hqbridge.utils.helpers import get_data_path

    return get_data_path() / "config.json"


def load_config(config_path: Path | None = None, environ: Mapping[str, str] | None = None) -> Config:
    """
    Build the effective configuration.

    Layers, lowest first: model defaults, the JSON file, legacy variables
    (``GW_URL``, ``GW_TOKEN``, ``GW_SESSION``, ``WEBHOOK_PORT``) and finally
    ``HQBRIDGE_*`` variables read by pydantic-settings.

    Args:
        config_path: File to read. Defaults to ``$HQBRIDGE_HOME/config.json``.
        environ: Mapping consulted for legacy variables. Defaults to ``os.environ``.
    """
    path = config_path or get_config_path()
    raw = _read_file(path)

    applied = apply_legacy_env(raw, environ)
    if applied:
        logger.debug(f"Legacy environment overrides: {', '.join(applied)}")

    return Config(**raw)


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """Write ``config`` atomically with 0600 permissions and return the path."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(convert_to_camel(config.model_dump()), indent=2)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w") as f:
            f.write(payload + "\n")
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def _read_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            raise ValueError("top-level value must be an object")
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}
    return convert_keys(data)


def _rekey(data: Any, rename: Callable[[str], str]) -> Any:
    if isinstance(data, dict):
        return {rename(k): _rekey(v, rename) for k, v in data.items()}
    if isinstance(data, list):
        return [_rekey(v, rename) for v in data]
    return data


def convert_keys(data: Any) -> Any:
    """camelCase keys to snake_case, recursively."""
    return _rekey(data, camel_to_snake)


def convert_to_camel(data: Any) -> Any:
    """snake_case keys to camelCase, recursively."""
    return _rekey(data, snake_to_camel)


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
