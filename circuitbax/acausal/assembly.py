"""Assembly of digital elements into a single combinational circuit.

The assembler takes a set of elements and connections and produces:

1. A ``CircuitLayout`` mapping every pin variable onto its canonical net.
2. A compiled function ``inputs -> net values`` that evaluates every
   element equation in dependency order. It contains only ``jnp``
   operations and is fully JAX-traceable.

Algorithm outline
-----------------
1. Collect variables from every element/port.
2. Process connections with a Union-Find to identify shared nets.
3. Register sources (external inputs), sensors (outputs) and the single
   driver of each driven net.
4. Order driven nets topologically; a cycle is a combinational loop.
5. Compile each equation with line lookups resolved to canonical nets.

Nets with no driver read as ``UNKNOWN``.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from graphlib import CycleError, TopologicalSorter
from typing import Callable

from jaxtyping import Array, ArrayLike

from circuitbax.acausal.base import (
    AcausalConnection,
    AcausalVar,
    CircuitLayout,
    resolve_alias,
)
from circuitbax.acausal.digital import DigitalElement
from circuitbax.logic.evaluate import as_logic, compile_term
from circuitbax.logic.terms import Equation, term_lines


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Union-Find
# ---------------------------------------------------------------------------

class UnionFind:
    """Disjoint-set (Union-Find) with path compression and union by rank."""

    def __init__(self) -> None:
        self._parent: dict[str, str] = {}
        self._rank: dict[str, int] = {}

    def find(self, x: str) -> str:
        if x not in self._parent:
            self._parent[x] = x
            self._rank[x] = 0
        if self._parent[x] != x:
            self._parent[x] = self.find(self._parent[x])
        return self._parent[x]

    def union(self, x: str, y: str) -> None:
        rx, ry = self.find(x), self.find(y)
        if rx == ry:
            return
        if self._rank[rx] < self._rank[ry]:
            rx, ry = ry, rx
        self._parent[ry] = rx
        if self._rank[rx] == self._rank[ry]:
            self._rank[rx] += 1

    def groups(self) -> dict[str, list[str]]:
        """Return ``{root: [members]}``."""
        g: dict[str, list[str]] = {}
        for x in self._parent:
            root = self.find(x)
            g.setdefault(root, []).append(x)
        return g


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def assemble_circuit(
    elements: dict[str, DigitalElement],
    connections: list[AcausalConnection],
) -> tuple[CircuitLayout, Callable[[Mapping[str, ArrayLike]], dict[str, Array]]]:
    """Assemble digital elements and connections into a compiled circuit.

    Args:
        elements: Named elements.
        connections: Port-level connections between elements.

    Returns:
        layout: ``CircuitLayout`` mapping pin variables onto nets.
        circuit_fn: ``{source_name: value} -> {net: value}``.

    Raises:
        ValueError: On an unknown element or port, a connection between
            different domains, a net with two drivers, or a combinational
            loop.
    """
    for key, elem in elements.items():
        if not isinstance(elem, DigitalElement):
            raise TypeError(
                f"Element '{key}' is a {type(elem).__name__}; only digital "
                "elements can be assembled into a circuit"
            )
        if key != elem.name:
            raise ValueError(f"Element registered as '{key}' is named '{elem.name}'")

    # ---- Step 1: Collect all variables ----------------------------------
    all_vars: dict[str, AcausalVar] = {}
    for elem in elements.values():
        for port in elem.ports.values():
            for slot in port.across_vars:
                fqn = f"{elem.name}.{port.name}.{slot}"
                all_vars[fqn] = AcausalVar(
                    name=fqn, initial_value=port.defaults.get(slot, 0.0),
                )
        for fqn, var in elem.variables.items():
            all_vars[fqn] = AcausalVar(name=fqn, initial_value=var.initial_value)

    # ---- Step 2: Union-Find over across variables -----------------------
    uf = UnionFind()
    for name in all_vars:
        uf.find(name)

    for conn in connections:
        port_a = _port(elements, conn.element_a, conn.port_a)
        port_b = _port(elements, conn.element_b, conn.port_b)
        if port_a.domain is not port_b.domain:
            raise ValueError(
                f"Cannot connect {conn.element_a}.{conn.port_a} "
                f"({port_a.domain.value}) to {conn.element_b}.{conn.port_b} "
                f"({port_b.domain.value})"
            )
        for slot in port_a.across_vars:
            uf.union(
                f"{conn.element_a}.{conn.port_a}.{slot}",
                f"{conn.element_b}.{conn.port_b}.{slot}",
            )

    eliminated: dict[str, str] = {}
    for root, members in uf.groups().items():
        for m in members:
            if m != root:
                all_vars[m].is_eliminated = True
                all_vars[m].alias_of = root
                eliminated[m] = root

    # ---- Step 3: Sources, sensors and drivers ---------------------------
    inputs: dict[str, str] = {}
    outputs: dict[str, str] = {}
    drivers: dict[str, str] = {}
    net_equations: dict[str, tuple[DigitalElement, Equation]] = {}

    def _claim(net: str, driver: str) -> None:
        if net in drivers:
            raise ValueError(
                f"Net '{net}' is driven by both '{drivers[net]}' and '{driver}'"
            )
        drivers[net] = driver

    for elem in elements.values():
        if elem.element_type == "source":
            for line in elem.lines.outputs:
                net = resolve_alias(elem.fqn(line), eliminated)
                _claim(net, elem.fqn(line))
                inputs[elem.name] = net
                all_vars[net].is_input = True
            continue

        if elem.element_type == "sensor" and elem.sensor_output is not None:
            port_name, slot_name = elem.sensor_output
            outputs[elem.name] = resolve_alias(
                f"{elem.name}.{port_name}.{slot_name}", eliminated,
            )

        for eq in elem.equations:
            net = resolve_alias(elem.fqn(eq.output), eliminated)
            _claim(net, elem.fqn(eq.output))
            net_equations[net] = (elem, eq)

    # ---- Step 4: Evaluation order ---------------------------------------
    dependencies: dict[str, set[str]] = {}
    for net, (elem, eq) in net_equations.items():
        dependencies[net] = {
            resolve_alias(elem.fqn(line), eliminated) for line in term_lines(eq.term)
        }
    order = _topological_order(dependencies)

    layout = CircuitLayout(
        _vars=all_vars,
        _eliminated=eliminated,
        _inputs=inputs,
        _outputs=outputs,
        _order=order,
    )
    logger.info(
        "Assembled %d elements into %d nets (%d driven, %d inputs, %d outputs)",
        len(elements), len(layout.nets), len(order), len(inputs), len(outputs),
    )

    # ---- Step 5: Compile ------------------------------------------------
    compiled: list[tuple[str, Callable]] = []
    for net in order:
        elem, eq = net_equations[net]
        compiled.append((
            net,
            compile_term(
                eq.term,
                key_fn=lambda line, _e=elem: resolve_alias(_e.fqn(line), eliminated),
            ),
        ))

    def circuit_fn(source_values: Mapping[str, ArrayLike]) -> dict[str, Array]:
        values: dict[str, Array] = {}
        for source, net in inputs.items():
            if source in source_values:
                values[net] = as_logic(source_values[source])
        for net, fn in compiled:
            values[net] = fn(values)
        return values

    return layout, circuit_fn


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _port(elements: dict[str, DigitalElement], element: str, port: str):
    if element not in elements:
        raise ValueError(f"Connection refers to unknown element '{element}'")
    try:
        return elements[element].ports[port]
    except KeyError:
        raise ValueError(f"Element '{element}' has no port '{port}'") from None


def _topological_order(dependencies: dict[str, set[str]]) -> list[str]:
    """Order driven nets so that each follows the driven nets it reads."""
    sorter = TopologicalSorter({
        net: sorted(dep for dep in dependencies[net] if dep in dependencies)
        for net in sorted(dependencies)
    })
    try:
        return list(sorter.static_order())
    except CycleError as e:
        loop = e.args[1]
        raise ValueError(f"Combinational loop: {' -> '.join(loop)}") from None
