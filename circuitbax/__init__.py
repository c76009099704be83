"""
:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0, see LICENSE for details.
"""

import importlib.metadata
import logging
import os

from circuitbax.acausal import (
    DEMUX,
    MUX,
    AcausalConnection,
    Decoder,
    DigitalSystem,
    Encoder,
    FullAdder,
    HalfAdder,
    LogicProbe,
    LogicSource,
    OnePort,
)
from circuitbax.logic import (
    HIGH,
    LOW,
    UNKNOWN,
    InvalidArity,
    InvalidWidth,
    OutOfRange,
    evaluate,
    expand,
)


try:
    __version__ = importlib.metadata.version("circuitbax")
except importlib.metadata.PackageNotFoundError:
    __version__ = "unknown"


if os.environ.get("CIRCUITBAX_DEBUG", False) == "True":
    DEFAULT_LOG_LEVEL = "DEBUG"
else:
    DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVEL = os.environ.get("CIRCUITBAX_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


logger = logging.getLogger(__package__)
logger.addHandler(logging.NullHandler())
logger.setLevel(LOG_LEVEL)
