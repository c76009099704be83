import logging
import os
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Optional

from ruamel.yaml import YAML

logger = logging.getLogger(__name__)


CONFIG_DIR_ENV_VAR_NAME = "CIRCUITBAX_CONFIG_DIR"
DEFAULT_CONFIG_FILENAME = "default"


def deep_merge(
    base: Mapping[str, Any], over: Mapping[str, Any], ignore_none: bool = True
) -> dict[str, Any]:
    out: dict[str, Any] = dict(base)
    for k, v in over.items():
        if v is None and ignore_none:
            continue
        bv = out.get(k)
        if isinstance(v, Mapping) and isinstance(bv, Mapping):
            out[k] = deep_merge(bv, v)
        else:
            out[k] = v
    return out


def dict_to_namespace(d: Mapping[str, Any]) -> SimpleNamespace:
    """Convert a nested dictionary to a nested SimpleNamespace."""
    return SimpleNamespace(**{
        k: dict_to_namespace(v) if isinstance(v, Mapping) else v
        for k, v in d.items()
    })


def _load_yaml(path: Path) -> Optional[dict]:
    """Return parsed YAML from `path`, or None if missing."""
    if not path.is_file():
        return None
    yaml = YAML(typ="safe")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.load(f) or {}


def _package_config(stem: str) -> dict:
    resource = resources.files("circuitbax.config") / f"{stem}.yml"
    with resources.as_file(resource) as real_path:
        return _load_yaml(Path(real_path)) or {}


def get_user_config_dir() -> Optional[Path]:
    """Get user config directory from environment variable, or return None."""
    env_config_dir = os.environ.get(CONFIG_DIR_ENV_VAR_NAME)
    if env_config_dir is None:
        return None
    return Path(env_config_dir).expanduser()


def load_config(name: str = DEFAULT_CONFIG_FILENAME) -> dict[str, Any]:
    """
    Load a YAML config as a dict.

    Precedence:
      1) user config dir:  {$CIRCUITBAX_CONFIG_DIR}/{name}.yml
      2) base fallback:    circuitbax.config/{name}.yml
    """
    config = _package_config(name)
    user_dir = get_user_config_dir()
    if user_dir is not None:
        user_config = _load_yaml(user_dir / f"{name}.yml")
        if user_config is None:
            logger.debug("No `%s.yml` in user config dir `%s`", name, user_dir)
        else:
            config = deep_merge(config, user_config)
    return config


def _normalize_log_level(label: str, lvl: str | int) -> int:
    if isinstance(lvl, str):
        lvl = lvl.strip().upper()
        try:
            lvl = logging.getLevelNamesMapping()[lvl]
        except KeyError:
            raise ValueError(f"Invalid {label} specified in YAML config: {lvl!r}")
    if not isinstance(lvl, int):
        raise ValueError(f"Cannot parse log level {lvl!r}")
    return lvl


def _setup_logging(logging_ns: SimpleNamespace) -> SimpleNamespace:
    for label in ["file_level", "console_level"]:
        lvl = getattr(logging_ns, label, None)
        if lvl is None:
            continue
        setattr(logging_ns, label, _normalize_log_level(label, lvl))
    return logging_ns


def load_config_as_ns(name: str = DEFAULT_CONFIG_FILENAME) -> SimpleNamespace:
    """Load a config as a namespace, with log levels normalized to ints."""
    config = dict_to_namespace(load_config(name))
    if hasattr(config, "logging"):
        _setup_logging(config.logging)
    return config
