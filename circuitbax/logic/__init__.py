"""Boolean terms and combinational-logic synthesis.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from circuitbax.logic.bits import address_width, assemble, check_address_width, expand
from circuitbax.logic.errors import (
    InvalidArity,
    InvalidWidth,
    LogicSynthesisError,
    OutOfRange,
)
from circuitbax.logic.evaluate import HIGH, LOW, UNKNOWN, compile_term, evaluate
from circuitbax.logic.gates import full_adder, half_adder
from circuitbax.logic.synthesis import (
    address_match,
    synthesize_decoder,
    synthesize_demux,
    synthesize_encoder,
    synthesize_mux,
)
from circuitbax.logic.terms import (
    And,
    Equation,
    Line,
    LineGroups,
    LineRef,
    LineRole,
    Not,
    Or,
    Term,
    Xor,
    and_,
    format_term,
    make_bus,
    not_,
    or_,
    term_lines,
    xor_,
)
