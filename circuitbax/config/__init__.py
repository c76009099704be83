from .config import (
    CONFIG_DIR_ENV_VAR_NAME,
    deep_merge,
    load_config,
    load_config_as_ns,
)

# Project-wide configuration: packaged `default.yml`, overridden by the user's
# `default.yml` in `$CIRCUITBAX_CONFIG_DIR` if present
CONFIG = load_config_as_ns()
