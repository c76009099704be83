"""Combinational-logic synthesis for selector and encoder components.

Two families of circuits are generated from a width ``N = 2**n``:

- **Selector-indexed** (MUX, DEMUX, Decoder): each channel ``i`` is gated
  by an *address match*, the conjunction of every select line taken
  directly where bit ``j`` of ``i`` is 1 and inverted where it is 0.
- **Grouped accumulation** (Encoder): output bit ``j`` is the disjunction
  of every data line whose index has bit ``j`` set.

All routines take lines that have already been allocated and return one
``Equation`` per output line, in output index order.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from circuitbax.logic.bits import address_width, expand
from circuitbax.logic.errors import InvalidWidth
from circuitbax.logic.terms import (
    And,
    Equation,
    Line,
    LineRef,
    Term,
    and_,
    not_,
    or_,
)


logger = logging.getLogger(__name__)


def _check_bus(channels: Sequence[Line], select: Sequence[Line], what: str) -> int:
    """Check ``len(channels) == 2**len(select)`` and return ``n``."""
    n = address_width(len(channels))
    if n != len(select):
        raise InvalidWidth(
            f"{what}: {len(channels)} channels need {n} select lines, "
            f"got {len(select)}"
        )
    return n


def select_literals(select: Sequence[Line], i: int) -> tuple[Term, ...]:
    """Per-line literals matching ``i``: ``s_j`` if bit ``j`` is 1, else ``~s_j``."""
    return tuple(
        LineRef(line) if bit else not_(line)
        for line, bit in zip(select, expand(i, len(select)))
    )


def address_match(select: Sequence[Line], i: int) -> And:
    """Term asserted exactly when the select lines spell out ``i``."""
    return and_(*select_literals(select, i))


# ---------------------------------------------------------------------------
# Selector-indexed synthesis
# ---------------------------------------------------------------------------

def synthesize_mux(
    data: Sequence[Line],
    select: Sequence[Line],
    output: Line,
) -> list[Equation]:
    """``y = OR_i (match_i & d_i)``."""
    n = _check_bus(data, select, "MUX")
    products = [
        and_(*select_literals(select, i), d) for i, d in enumerate(data)
    ]
    logger.debug("MUX: %d products over %d select lines", len(products), n)
    return [Equation(output, or_(*products))]


def synthesize_demux(
    data: Line,
    select: Sequence[Line],
    outputs: Sequence[Line],
) -> list[Equation]:
    """``y_i = match_i & d``."""
    _check_bus(outputs, select, "DEMUX")
    return [
        Equation(y, and_(*select_literals(select, i), data))
        for i, y in enumerate(outputs)
    ]


def synthesize_decoder(
    address: Sequence[Line],
    outputs: Sequence[Line],
) -> list[Equation]:
    """``y_i = match_i``."""
    _check_bus(outputs, address, "Decoder")
    return [Equation(y, address_match(address, i)) for i, y in enumerate(outputs)]


# ---------------------------------------------------------------------------
# Grouped-accumulation synthesis
# ---------------------------------------------------------------------------

def synthesize_encoder(
    data: Sequence[Line],
    outputs: Sequence[Line],
) -> list[Equation]:
    """``y_j = OR { d_i : bit j of i is 1 }``.

    Assumes one-hot input. With several inputs asserted the outputs are the
    bitwise OR of their codes; this is not checked.
    """
    n = _check_bus(data, outputs, "Encoder")
    groups: list[list[Line]] = [[] for _ in range(n)]
    for i, d in enumerate(data):
        for j, bit in enumerate(expand(i, n)):
            if bit:
                groups[j].append(d)
    return [Equation(y, or_(*group)) for y, group in zip(outputs, groups)]
