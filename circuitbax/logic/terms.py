"""Symbolic boolean terms over named digital lines.

Terms form a closed variant set (``LineRef``, ``Not``, ``And``, ``Or``,
``Xor``). They are immutable trees built bottom-up with the ``not_``,
``and_``, ``or_`` and ``xor_`` constructors, and are never evaluated here;
see ``circuitbax.logic.evaluate`` for the tri-valued evaluation contract.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Optional, Union

from circuitbax.logic.errors import InvalidArity


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

class LineRole(Enum):
    """Role of a line within its component."""
    INPUT = "input"
    OUTPUT = "output"
    SELECT = "select"
    STATE = "state"


@dataclass(frozen=True)
class Line:
    """A named boolean-valued signal endpoint.

    Attributes:
        name: Line identifier, unique within its component (e.g. ``"s0"``).
        role: Whether the line is an input, output, select/address line,
            or an observable state.
        index: Position within an indexed bus, or ``None`` for scalar lines.
    """
    name: str
    role: LineRole
    index: Optional[int] = None


def make_bus(prefix: str, size: int, role: LineRole) -> tuple[Line, ...]:
    """Allocate lines ``prefix0 .. prefix{size-1}``."""
    return tuple(Line(f"{prefix}{i}", role, i) for i in range(size))


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LineRef:
    """Leaf term reading the value of a line."""
    line: Line


@dataclass(frozen=True)
class Not:
    operand: "Term"


@dataclass(frozen=True)
class And:
    operands: tuple["Term", ...]


@dataclass(frozen=True)
class Or:
    operands: tuple["Term", ...]


@dataclass(frozen=True)
class Xor:
    operands: tuple["Term", ...]


Term = Union[LineRef, Not, And, Or, Xor]
TermLike = Union[Line, LineRef, Not, And, Or, Xor]


def as_term(x: TermLike) -> Term:
    """Wrap a bare ``Line`` in a ``LineRef``; pass terms through."""
    if isinstance(x, Line):
        return LineRef(x)
    if isinstance(x, (LineRef, Not, And, Or, Xor)):
        return x
    raise TypeError(f"Expected a Line or a Term, got {type(x).__name__}")


def _operands(op: str, args: Sequence[TermLike]) -> tuple[Term, ...]:
    if len(args) == 0:
        raise InvalidArity(f"`{op}` requires at least one operand")
    return tuple(as_term(a) for a in args)


def not_(x: TermLike) -> Not:
    return Not(as_term(x))


def and_(*args: TermLike) -> And:
    """N-ary conjunction."""
    return And(_operands("and_", args))


def or_(*args: TermLike) -> Or:
    """N-ary disjunction."""
    return Or(_operands("or_", args))


def xor_(*args: TermLike) -> Xor:
    """N-ary exclusive or (odd parity)."""
    return Xor(_operands("xor_", args))


def iter_lines(term: Term) -> Iterator[Line]:
    """Yield every line read by ``term``, depth-first, repeats included."""
    if isinstance(term, LineRef):
        yield term.line
    elif isinstance(term, Not):
        yield from iter_lines(term.operand)
    else:
        for operand in term.operands:
            yield from iter_lines(operand)


def term_lines(term: Term) -> tuple[Line, ...]:
    """Distinct lines read by ``term``, in first-seen order."""
    return tuple(dict.fromkeys(iter_lines(term)))


def format_term(term: Term) -> str:
    """Human-readable infix rendering, e.g. ``(~s0 & d0) | (s0 & d1)``."""
    if isinstance(term, LineRef):
        return term.line.name
    if isinstance(term, Not):
        inner = format_term(term.operand)
        return f"~{inner}" if isinstance(term.operand, (LineRef, Not)) else f"~({inner})"
    symbol = {And: " & ", Or: " | ", Xor: " ^ "}[type(term)]
    parts = [
        format_term(o) if isinstance(o, (LineRef, Not)) else f"({format_term(o)})"
        for o in term.operands
    ]
    return symbol.join(parts)


# ---------------------------------------------------------------------------
# Equations and line groups
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Equation:
    """Assertion that ``output`` carries the value of ``term``."""
    output: Line
    term: Term

    def __str__(self) -> str:
        return f"{self.output.name} ~ {format_term(self.term)}"


@dataclass(frozen=True)
class LineGroups:
    """Lines of a component grouped by role.

    Attributes:
        inputs: Data inputs, in index order.
        outputs: Outputs, in index order.
        selects: Select or address lines, ``s0``/``d0`` being the LSB.
        states: Observable aliases of outputs (e.g. an adder's ``sum``).
    """
    inputs: tuple[Line, ...] = ()
    outputs: tuple[Line, ...] = ()
    selects: tuple[Line, ...] = ()
    states: tuple[Line, ...] = dc_field(default=())

    def all(self) -> tuple[Line, ...]:
        return self.inputs + self.selects + self.outputs + self.states

    def driven(self) -> tuple[Line, ...]:
        """Lines whose value is set by the component's own equations."""
        return self.outputs + self.states

    def __getitem__(self, name: str) -> Line:
        for line in self.all():
            if line.name == name:
                return line
        raise KeyError(name)

    def names(self) -> tuple[str, ...]:
        return tuple(line.name for line in self.all())
