"""Fixed-arity adder formulas.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

from circuitbax.logic.terms import Equation, Line, and_, or_, xor_


def half_adder(x1: Line, x2: Line, sum_: Line, carry: Line) -> list[Equation]:
    """``sum = x1 ^ x2``, ``carry = x1 & x2``."""
    return [
        Equation(sum_, xor_(x1, x2)),
        Equation(carry, and_(x1, x2)),
    ]


def full_adder(
    x1: Line,
    x2: Line,
    x3: Line,
    sum_: Line,
    carry: Line,
) -> list[Equation]:
    """``sum = x1 ^ x2 ^ x3``, ``carry = (x3 & (x1 ^ x2)) | (x1 & x2)``."""
    return [
        Equation(sum_, xor_(x1, x2, x3)),
        Equation(carry, or_(and_(x3, xor_(x1, x2)), and_(x1, x2))),
    ]
