"""Exceptions raised while synthesizing combinational logic.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""


class LogicSynthesisError(ValueError):
    """Base class for logic-synthesis failures."""


class InvalidWidth(LogicSynthesisError):
    """A structural width is not ``2**n`` for a positive integer ``n``."""


class OutOfRange(LogicSynthesisError):
    """An index lies outside ``[0, 2**width)``."""


class InvalidArity(LogicSynthesisError):
    """A variadic boolean operator was called with no operands."""
