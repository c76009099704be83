"""Core types for acausal circuit descriptions.

Acausal elements are construction-time descriptors (plain Python
dataclasses). Electrical elements contribute numeric equations over their
pins; digital elements contribute symbolic boolean ``Equation``s over their
lines. ``assemble_circuit`` joins connected ports and compiles the digital
equations into a single JAX-traceable function.

Domains
-------
Each domain defines:
- **Across variables**: quantities *shared* at a connection point
  (voltage for electrical; logic value and voltage for digital).
- **Through variable**: the quantity *summed* at a connection node
  (current in both domains).

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Callable, Optional


# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------

class Domain(Enum):
    """Physical domain for acausal ports."""
    ELECTRICAL = "electrical"
    DIGITAL = "digital"


# ---------------------------------------------------------------------------
# Port / Variable / Equation descriptors
# ---------------------------------------------------------------------------

@dataclass
class AcausalPort:
    """A physical connection point on an element.

    Attributes:
        name: Port identifier (unique within its element).
        domain: Domain the port belongs to.
        across_vars: Names of across-variable slots, ordered.
            E.g. ``("v",)`` for an electrical pin.
        through_var: Name of the through-variable slot, e.g. ``"i"``.
        defaults: Start values for the port's slots.
    """
    name: str
    domain: Domain
    across_vars: tuple[str, ...]
    through_var: str
    defaults: dict[str, float] = dc_field(default_factory=dict)


@dataclass
class AcausalVar:
    """A scalar variable in an assembled system.

    Attributes:
        name: Fully qualified name ``"element.port.slot"``.
        is_eliminated: ``True`` when this variable was merged into another
            by a connection.
        alias_of: If eliminated, the canonical variable name.
        is_input: ``True`` when the variable is driven from outside.
        initial_value: Starting value for the variable.
    """
    name: str
    is_eliminated: bool = False
    alias_of: Optional[str] = None
    is_input: bool = False
    initial_value: float = 0.0


@dataclass
class AcausalEquation:
    """A numeric equation contributed by an electrical element.

    The equation reads ``lhs_var = rhs_fn(vals)``, or ``0 = rhs_fn(vals)``
    when ``lhs_var`` is ``None``.

    Attributes:
        lhs_var: Variable name this equation defines, or ``None`` for a
            balance constraint.
        rhs_fn: ``Callable[[dict[str, scalar]], scalar]``.  The dict maps
            fully-qualified variable names to their current values.
        depends_on: Variable names read by ``rhs_fn``.
    """
    lhs_var: Optional[str]
    rhs_fn: Callable
    depends_on: tuple[str, ...]

    def residual(self, vals: dict) -> float:
        """``lhs - rhs``; zero when the equation holds."""
        lhs = vals[self.lhs_var] if self.lhs_var is not None else 0.0
        return lhs - self.rhs_fn(vals)


# ---------------------------------------------------------------------------
# Element / Connection
# ---------------------------------------------------------------------------

@dataclass
class AcausalElement:
    """Base for acausal element descriptors (construction-time only).

    Subclasses populate ``ports``, ``equations`` and ``variables`` during
    ``__init__``.

    Attributes:
        name: Unique element identifier.
        ports: Mapping ``port_name -> AcausalPort``.
        equations: Equations this element contributes.
        variables: Element-level variables (not attached to a port), as
            ``fqn -> AcausalVar``.
        element_type: Discriminator used by the assembly algorithm
            (``"source"``, ``"sensor"``). Regular elements leave this as
            ``"standard"``.
        sensor_output: If this element is a sensor, the
            ``(port_name, slot_name)`` it reads.
    """
    name: str
    ports: dict[str, AcausalPort] = dc_field(default_factory=dict)
    equations: list = dc_field(default_factory=list)
    variables: dict[str, AcausalVar] = dc_field(default_factory=dict)
    element_type: str = "standard"
    sensor_output: Optional[tuple[str, str]] = None


@dataclass
class AcausalConnection:
    """Connection between two ports on (possibly different) elements.

    Attributes:
        element_a: Name of the first element.
        port_a: Port name on the first element.
        element_b: Name of the second element.
        port_b: Port name on the second element.
    """
    element_a: str
    port_a: str
    element_b: str
    port_b: str

    def __init__(
        self,
        port_a: tuple[str, str],
        port_b: tuple[str, str],
    ):
        """Create a connection from two ``(element_name, port_name)`` tuples."""
        self.element_a, self.port_a = port_a
        self.element_b, self.port_b = port_b


# ---------------------------------------------------------------------------
# Layout (output of the assembly step)
# ---------------------------------------------------------------------------

@dataclass
class CircuitLayout:
    """Maps connected variables onto their canonical names.

    Attributes:
        _vars: All variables in the circuit (including eliminated ones).
        _eliminated: ``var_name -> canonical_var_name``.
        _inputs: ``source_name -> canonical var`` for externally driven nets.
        _outputs: ``probe_name -> canonical var`` for sensor readings.
        _order: Driven canonical vars in evaluation order.
    """
    _vars: dict[str, AcausalVar]
    _eliminated: dict[str, str]
    _inputs: dict[str, str]
    _outputs: dict[str, str]
    _order: list[str]

    def resolve(self, name: str) -> str:
        """Follow elimination aliases to the canonical variable name."""
        return resolve_alias(name, self._eliminated)

    @property
    def nets(self) -> list[str]:
        """Canonical variable names."""
        return sorted(n for n, v in self._vars.items() if not v.is_eliminated)


def resolve_alias(name: str, eliminated: dict[str, str]) -> str:
    """Follow an elimination alias chain to its canonical variable name."""
    visited: set[str] = set()
    while name in eliminated:
        if name in visited:
            raise RuntimeError(f"Cyclic alias chain for '{name}'")
        visited.add(name)
        name = eliminated[name]
    return name
