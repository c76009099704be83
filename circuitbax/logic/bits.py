"""Fixed-width binary expansion of channel indices.

Every synthesis routine decides line polarity through ``expand``, so the
bit-ordering convention lives in exactly one place: position ``j`` of the
returned tuple is bit ``j`` of the index (little-endian), and corresponds
to select/address line ``j``.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

import operator
from collections.abc import Sequence
from typing import Optional

from circuitbax.logic.errors import InvalidWidth, OutOfRange


def _as_int(x) -> Optional[int]:
    """``x`` as a Python int if it is any integer type other than ``bool``."""
    if isinstance(x, bool):
        return None
    try:
        return operator.index(x)
    except TypeError:
        return None


def check_address_width(n: int) -> int:
    """Validate an address width ``n``; return it as a Python int."""
    width = _as_int(n)
    if width is None or width < 1:
        raise InvalidWidth(f"Address width must be a positive integer, got {n!r}")
    return width


def address_width(N: int) -> int:
    """Return ``n`` such that ``N == 2**n`` with ``n >= 1``."""
    size = _as_int(N)
    if size is None or size < 2 or size & (size - 1):
        raise InvalidWidth(f"`N` must be a power of 2 greater than 1, got {N!r}")
    return size.bit_length() - 1


def expand(i: int, width: int) -> tuple[int, ...]:
    """Binary digits of ``i``, least-significant first, padded to ``width``."""
    width = check_address_width(width)
    index = _as_int(i)
    if index is None or not 0 <= index < 2**width:
        raise OutOfRange(f"Index {i!r} is outside [0, {2**width})")
    return tuple((index >> j) & 1 for j in range(width))


def assemble(bits: Sequence[int]) -> int:
    """Inverse of ``expand``."""
    return sum(int(b) << j for j, b in enumerate(bits))
