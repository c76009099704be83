"""Acausal circuit building blocks for circuitbax.

Provides equation-based component descriptions (electrical pins and
one-ports, digital logic) and assembles digital components into
JAX-traceable combinational circuits.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from circuitbax.acausal.base import (
    AcausalConnection,
    AcausalElement,
    AcausalEquation,
    AcausalPort,
    AcausalVar,
    CircuitLayout,
    Domain,
)
from circuitbax.acausal.electrical import DigitalPin, OnePort, Pin
from circuitbax.acausal.digital import (
    DEMUX,
    MUX,
    Decoder,
    DigitalElement,
    Encoder,
    FullAdder,
    HalfAdder,
    LogicProbe,
    LogicSource,
)
from circuitbax.acausal.assembly import assemble_circuit
from circuitbax.acausal.system import DigitalSystem
