"""DigitalSystem: runtime wrapper around an assembled combinational circuit.

A ``DigitalSystem`` is an Equinox module whose evaluation function is
produced by the assembly algorithm at ``__init__`` time. Sources become
input ports, probes become output ports.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable

import equinox as eqx
from equinox import field
import jax.numpy as jnp
from jaxtyping import Array, ArrayLike

from circuitbax.acausal.assembly import assemble_circuit
from circuitbax.acausal.base import AcausalConnection, CircuitLayout
from circuitbax.acausal.digital import DigitalElement
from circuitbax.logic.evaluate import UNKNOWN


logger = logging.getLogger(__name__)


class DigitalSystem(eqx.Module):
    """Assembled combinational circuit.

    Construction-time:
        Takes element descriptors and connections, runs the assembly
        algorithm, and captures the compiled circuit and layout.

    Runtime:
        ``system(inputs)`` maps ``{source_name: logic}`` to
        ``{probe_name: logic}``. Values broadcast, so a whole truth table
        can be evaluated in one call or under ``jax.vmap``.
    """

    input_ports: tuple[str, ...] = field(static=True)
    output_ports: tuple[str, ...] = field(static=True)
    _layout: CircuitLayout = field(static=True)
    _circuit_fn: Callable = field(static=True)

    def __init__(
        self,
        elements: dict[str, DigitalElement],
        connections: list[AcausalConnection],
    ):
        """Assemble digital elements into a circuit.

        Args:
            elements: Named element descriptors.
            connections: Port-level connections.
        """
        layout, circuit_fn = assemble_circuit(elements, connections)
        self._layout = layout
        self._circuit_fn = circuit_fn
        self.input_ports = tuple(sorted(layout._inputs))
        self.output_ports = tuple(sorted(layout._outputs))

    def net_values(self, inputs: Mapping[str, ArrayLike]) -> dict[str, Array]:
        """Values of every driven or externally supplied net."""
        unknown = set(inputs) - set(self.input_ports)
        if unknown:
            raise ValueError(
                f"Unknown input port(s) {sorted(unknown)}; "
                f"expected a subset of {list(self.input_ports)}"
            )
        return self._circuit_fn(inputs)

    def __call__(self, inputs: Mapping[str, ArrayLike]) -> dict[str, Array]:
        """Evaluate the circuit and read every probe."""
        values = self.net_values(inputs)
        undriven = jnp.asarray(UNKNOWN, dtype=jnp.int32)
        return {
            probe: values.get(self._layout._outputs[probe], undriven)
            for probe in self.output_ports
        }

    def read(
        self,
        inputs: Mapping[str, ArrayLike],
        element: DigitalElement,
        line_name: str,
    ) -> Array:
        """Value of one line of ``element``."""
        net = self._layout.resolve(element.fqn(element.lines[line_name]))
        return self.net_values(inputs).get(net, jnp.asarray(UNKNOWN, dtype=jnp.int32))
