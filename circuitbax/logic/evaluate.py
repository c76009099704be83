"""Tri-valued evaluation of boolean terms with JAX.

Signals take values in ``{LOW, HIGH, UNKNOWN}``, stored as small integers
so that each operator is a lookup into a constant truth table. Compiled
terms contain only ``jnp`` indexing and are safe under ``jax.jit`` and
``jax.vmap``.

Truth tables
------------
- **AND** -- ``LOW`` if any operand is ``LOW``, ``HIGH`` if all are
  ``HIGH``, else ``UNKNOWN``.
- **OR** -- ``HIGH`` if any operand is ``HIGH``, ``LOW`` if all are
  ``LOW``, else ``UNKNOWN``.
- **XOR** -- ``UNKNOWN`` if any operand is ``UNKNOWN``, else parity.
- **NOT** -- swaps ``LOW``/``HIGH``; ``UNKNOWN`` stays ``UNKNOWN``.

A line missing from the value mapping is undriven and reads ``UNKNOWN``, as
does any value outside the encoding.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import reduce
from typing import Callable

import jax.numpy as jnp
from jaxtyping import Array, ArrayLike, Int

from circuitbax.logic.terms import And, Line, LineRef, Not, Or, Term, Xor


LOW = 0
HIGH = 1
UNKNOWN = 2

NOT_TABLE = jnp.array([HIGH, LOW, UNKNOWN], dtype=jnp.int32)

AND_TABLE = jnp.array([
    [LOW, LOW, LOW],
    [LOW, HIGH, UNKNOWN],
    [LOW, UNKNOWN, UNKNOWN],
], dtype=jnp.int32)

OR_TABLE = jnp.array([
    [LOW, HIGH, UNKNOWN],
    [HIGH, HIGH, HIGH],
    [UNKNOWN, HIGH, UNKNOWN],
], dtype=jnp.int32)

XOR_TABLE = jnp.array([
    [LOW, HIGH, UNKNOWN],
    [HIGH, LOW, UNKNOWN],
    [UNKNOWN, UNKNOWN, UNKNOWN],
], dtype=jnp.int32)

_BINARY_TABLES = {And: AND_TABLE, Or: OR_TABLE, Xor: XOR_TABLE}


Logic = Int[Array, "..."]
Values = Mapping[str, ArrayLike]


def as_logic(x: ArrayLike) -> Logic:
    """Coerce booleans or integers to the tri-valued encoding.

    Values outside ``{LOW, HIGH, UNKNOWN}`` read as ``UNKNOWN``.
    """
    x = jnp.asarray(x, dtype=jnp.int32)
    return jnp.where((x < LOW) | (x > UNKNOWN), UNKNOWN, x)


def _line_name(line: Line) -> str:
    return line.name


def compile_term(
    term: Term,
    key_fn: Callable[[Line], str] = _line_name,
) -> Callable[[Values], Logic]:
    """Build ``values -> logic`` for ``term``.

    Args:
        term: Term to compile.
        key_fn: Maps a line to the key it is looked up under in ``values``.
            Defaults to the bare line name.
    """
    if isinstance(term, LineRef):
        key = key_fn(term.line)

        def read(values: Values) -> Logic:
            if key not in values:
                return jnp.asarray(UNKNOWN, dtype=jnp.int32)
            return as_logic(values[key])

        return read

    if isinstance(term, Not):
        inner = compile_term(term.operand, key_fn)
        return lambda values: NOT_TABLE[inner(values)]

    table = _BINARY_TABLES[type(term)]
    operand_fns = [compile_term(o, key_fn) for o in term.operands]

    def combine(values: Values) -> Logic:
        return reduce(
            lambda acc, fn: table[acc, fn(values)],
            operand_fns[1:],
            operand_fns[0](values),
        )

    return combine


def evaluate(term: Term, values: Values) -> Logic:
    """Evaluate ``term`` once against ``{line_name: value}``."""
    return compile_term(term)(values)
