"""Electrical-domain ports and elements.

Elements
--------
- **Pin** -- electrical port with potential ``v`` and current ``i``.
- **DigitalPin** -- port carrying a logic value ``val`` next to ``v``/``i``.
- **OnePort** -- two-pin element with voltage ``v`` across and current
  ``i`` through it.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

from dataclasses import dataclass

from circuitbax.acausal.base import (
    AcausalElement,
    AcausalEquation,
    AcausalPort,
    AcausalVar,
    Domain,
)


def _fqn(element: str, port: str, slot: str) -> str:
    """Fully-qualified variable name."""
    return f"{element}.{port}.{slot}"


def Pin(name: str) -> AcausalPort:
    """Port for an electrical system: potential ``v`` [V], current ``i`` [A]."""
    return AcausalPort(
        name=name,
        domain=Domain.ELECTRICAL,
        across_vars=("v",),
        through_var="i",
        defaults={"v": 1.0, "i": 1.0},
    )


def DigitalPin(name: str) -> AcausalPort:
    """Port for a digital signal: logic value ``val`` plus ``v`` and ``i``."""
    return AcausalPort(
        name=name,
        domain=Domain.DIGITAL,
        across_vars=("val", "v"),
        through_var="i",
        defaults={"val": 0, "i": 0},
    )


# ---------------------------------------------------------------------------
# OnePort
# ---------------------------------------------------------------------------

@dataclass
class OnePort(AcausalElement):
    """Component with two electrical pins ``p`` and ``n``; current flows p -> n.

    Equations::

        v = p.v - n.v
        0 = p.i + n.i
        i = p.i

    Args:
        v_start: [V] Initial voltage across the component.
        i_start: [A] Initial current through the component.
    """

    def __init__(self, name: str, v_start: float = 0.0, i_start: float = 0.0):
        super().__init__(name=name)
        self.ports["p"] = Pin("p")
        self.ports["n"] = Pin("n")

        v = f"{name}.v"
        i = f"{name}.i"
        self.variables[v] = AcausalVar(name=v, initial_value=v_start)
        self.variables[i] = AcausalVar(name=i, initial_value=i_start)

        p_v = _fqn(name, "p", "v")
        n_v = _fqn(name, "n", "v")
        p_i = _fqn(name, "p", "i")
        n_i = _fqn(name, "n", "i")

        self.equations.append(AcausalEquation(
            lhs_var=v,
            rhs_fn=lambda vals, _pv=p_v, _nv=n_v: vals[_pv] - vals[_nv],
            depends_on=(p_v, n_v),
        ))
        # Current conservation between the two pins
        self.equations.append(AcausalEquation(
            lhs_var=None,
            rhs_fn=lambda vals, _pi=p_i, _ni=n_i: vals[_pi] + vals[_ni],
            depends_on=(p_i, n_i),
        ))
        self.equations.append(AcausalEquation(
            lhs_var=i,
            rhs_fn=lambda vals, _pi=p_i: vals[_pi],
            depends_on=(p_i,),
        ))
