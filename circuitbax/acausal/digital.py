"""Digital-domain acausal elements.

Each element validates its structural parameters, allocates its named
lines, synthesizes one boolean ``Equation`` per driven line, and exposes
one ``DigitalPin`` port per input, select and output line.

Elements
--------
- **HalfAdder / FullAdder** -- fixed sum/carry formulas.
- **MUX** -- selects one of ``N`` inputs with ``n`` select lines.
- **DEMUX** -- routes one input to one of ``N`` outputs.
- **Encoder** -- one-hot ``N`` inputs to an ``n``-bit code.
- **Decoder** -- ``n``-bit address to one-hot ``N`` outputs.
- **LogicSource / LogicProbe** -- externally driven line and read-only
  sensor, used when assembling circuits.

Everywhere, ``N = 2**n`` and select/address line ``j`` carries bit ``j`` of
the channel index (``s0``/``d0`` is the least significant bit).

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field as dc_field
from typing import Optional

from circuitbax.acausal.base import AcausalElement, AcausalVar
from circuitbax.acausal.electrical import DigitalPin
from circuitbax.config import CONFIG
from circuitbax.logic.bits import address_width, check_address_width
from circuitbax.logic.gates import full_adder, half_adder
from circuitbax.logic.synthesis import (
    synthesize_decoder,
    synthesize_demux,
    synthesize_encoder,
    synthesize_mux,
)
from circuitbax.logic.terms import (
    Equation,
    Line,
    LineGroups,
    LineRef,
    LineRole,
    make_bus,
)


logger = logging.getLogger(__name__)


@dataclass
class DigitalElement(AcausalElement):
    """Base for elements described by boolean equations over named lines.

    Attributes:
        lines: The element's lines, grouped by role.
        equations: One ``Equation`` per output and state line, outputs in
            index order.
    """
    lines: LineGroups = dc_field(default_factory=LineGroups)

    def _build(self, lines: LineGroups, equations: list[Equation]) -> None:
        self.lines = lines
        self.equations = list(equations)
        for line in lines.inputs + lines.selects + lines.outputs:
            self.ports[line.name] = DigitalPin(line.name)
        for line in lines.states:
            fqn = f"{self.name}.{line.name}"
            self.variables[fqn] = AcausalVar(name=fqn)
        logger.debug(
            "%s %r: %d lines, %d equations",
            type(self).__name__, self.name, len(lines.all()), len(self.equations),
        )

    def fqn(self, line: Line) -> str:
        """Fully-qualified logic variable for ``line``."""
        if line.role is LineRole.STATE:
            return f"{self.name}.{line.name}"
        return f"{self.name}.{line.name}.val"

    def equation_for(self, name: str) -> Equation:
        """The equation driving the line called ``name``."""
        for eq in self.equations:
            if eq.output.name == name:
                return eq
        raise KeyError(f"No equation drives line '{name}' of '{self.name}'")


# ---------------------------------------------------------------------------
# Adders
# ---------------------------------------------------------------------------

def _adder_lines(n_inputs: int) -> LineGroups:
    return LineGroups(
        inputs=tuple(Line(f"x{k}", LineRole.INPUT, k - 1) for k in range(1, n_inputs + 1)),
        outputs=(Line("y1", LineRole.OUTPUT, 0), Line("y2", LineRole.OUTPUT, 1)),
        states=(Line("sum", LineRole.STATE), Line("carry", LineRole.STATE)),
    )


def _adder_states(lines: LineGroups) -> list[Equation]:
    y1, y2 = lines.outputs
    sum_, carry = lines.states
    return [Equation(sum_, LineRef(y1)), Equation(carry, LineRef(y2))]


@dataclass
class HalfAdder(DigitalElement):
    """Adds two bits.

    Connectors:
        x1, x2 -- the two inputs to add.
        y1 -- sum.
        y2 -- carry.

    States:
        sum, carry -- mirror ``y1`` and ``y2``.
    """

    def __init__(self, name: str):
        super().__init__(name=name)
        lines = _adder_lines(2)
        x1, x2 = lines.inputs
        y1, y2 = lines.outputs
        self._build(lines, half_adder(x1, x2, y1, y2) + _adder_states(lines))


@dataclass
class FullAdder(DigitalElement):
    """Adds three bits.

    Connectors:
        x1, x2, x3 -- the three inputs to add.
        y1 -- sum.
        y2 -- carry.
    """

    def __init__(self, name: str):
        super().__init__(name=name)
        lines = _adder_lines(3)
        x1, x2, x3 = lines.inputs
        y1, y2 = lines.outputs
        self._build(lines, full_adder(x1, x2, x3, y1, y2) + _adder_states(lines))


# ---------------------------------------------------------------------------
# Multiplexers
# ---------------------------------------------------------------------------

@dataclass
class MUX(DigitalElement):
    """Standard multiplexer.

    Selects data from ``N`` input ports using ``n`` select lines, where
    ``N = 2**n``. Input ``d_i`` is selected when the select lines spell the
    binary representation of ``i``.

    Connectors:
        d0 .. d{N-1} -- data inputs.
        s0 .. s{n-1} -- select lines.
        y -- the selected input.
    """
    N: int = 4

    def __init__(self, name: str, N: Optional[int] = None):
        super().__init__(name=name)
        self.N = CONFIG.components.mux_width if N is None else N
        n = address_width(self.N)
        self.N = 2**n
        d = make_bus("d", self.N, LineRole.INPUT)
        s = make_bus("s", n, LineRole.SELECT)
        y = Line("y", LineRole.OUTPUT)
        self._build(
            LineGroups(inputs=d, outputs=(y,), selects=s),
            synthesize_mux(d, s, y),
        )


@dataclass
class DEMUX(DigitalElement):
    """Standard demultiplexer, the reverse of a ``MUX``.

    Routes ``d`` to output ``y_i`` when the select lines spell ``i``; all
    other outputs are low.

    Connectors:
        d -- the input to transmit.
        s0 .. s{n-1} -- select lines.
        y0 .. y{N-1} -- outputs.
    """
    N: int = 4

    def __init__(self, name: str, N: Optional[int] = None):
        super().__init__(name=name)
        self.N = CONFIG.components.demux_width if N is None else N
        n = address_width(self.N)
        self.N = 2**n
        d = Line("d", LineRole.INPUT)
        s = make_bus("s", n, LineRole.SELECT)
        y = make_bus("y", self.N, LineRole.OUTPUT)
        self._build(
            LineGroups(inputs=(d,), outputs=y, selects=s),
            synthesize_demux(d, s, y),
        )


# ---------------------------------------------------------------------------
# Encoder / Decoder
# ---------------------------------------------------------------------------

@dataclass
class Encoder(DigitalElement):
    """Encodes ``N`` one-hot inputs into an ``n``-bit code.

    Exactly one input should be high. If ``d_i`` is high, ``y0 .. y{n-1}``
    carry the binary representation of ``i``. Several high inputs give the
    bitwise OR of their codes.

    Connectors:
        d0 .. d{N-1} -- inputs.
        y0 .. y{n-1} -- code bits, ``y0`` least significant.
    """
    N: int = 4

    def __init__(self, name: str, N: Optional[int] = None):
        super().__init__(name=name)
        self.N = CONFIG.components.encoder_width if N is None else N
        n = address_width(self.N)
        self.N = 2**n
        d = make_bus("d", self.N, LineRole.INPUT)
        y = make_bus("y", n, LineRole.OUTPUT)
        self._build(LineGroups(inputs=d, outputs=y), synthesize_encoder(d, y))


@dataclass
class Decoder(DigitalElement):
    """Decodes an ``n``-bit address into ``N = 2**n`` one-hot outputs.

    Output ``y_i`` is high exactly when the address lines spell ``i``.

    Connectors:
        d0 .. d{n-1} -- address lines, ``d0`` least significant.
        y0 .. y{N-1} -- outputs.
    """
    n: int = 2

    def __init__(self, name: str, n: Optional[int] = None):
        super().__init__(name=name)
        self.n = CONFIG.components.decoder_address_width if n is None else n
        self.n = check_address_width(self.n)
        d = make_bus("d", self.n, LineRole.SELECT)
        y = make_bus("y", 2**self.n, LineRole.OUTPUT)
        self._build(LineGroups(outputs=y, selects=d), synthesize_decoder(d, y))


# ---------------------------------------------------------------------------
# Sources and probes
# ---------------------------------------------------------------------------

@dataclass
class LogicSource(DigitalElement):
    """Line driven from outside the circuit.

    Port:
        y -- its value is supplied as an input of the assembled system.
    """

    def __init__(self, name: str):
        super().__init__(name=name)
        self._build(LineGroups(outputs=(Line("y", LineRole.OUTPUT),)), [])
        self.element_type = "source"


@dataclass
class LogicProbe(DigitalElement):
    """Reads the logic value at a connection node.

    Port:
        x -- read-only; the probe drives nothing.
    """

    def __init__(self, name: str):
        super().__init__(name=name)
        self._build(LineGroups(inputs=(Line("x", LineRole.INPUT),)), [])
        self.element_type = "sensor"
        self.sensor_output = ("x", "val")
