"""Tests for the digital component library.

Each component's synthesized equations are evaluated over its full input
space with the tri-valued evaluator.

:copyright: Copyright 2024-2025 by MLL <mll@mll.bio>.
:license: Apache 2.0.  See LICENSE for details.
"""

import itertools
import logging

import pytest

from circuitbax.acausal import (
    DEMUX,
    MUX,
    Decoder,
    Domain,
    Encoder,
    FullAdder,
    HalfAdder,
    LogicProbe,
    LogicSource,
)
from circuitbax.config import CONFIG
from circuitbax.logic import InvalidWidth, LineRole, assemble, evaluate, expand


def _run(element, **values) -> dict[str, int]:
    """Evaluate every equation of ``element`` in order, feeding results forward."""
    vals = dict(values)
    for eq in element.equations:
        vals[eq.output.name] = int(evaluate(eq.term, vals))
    return vals


def _select(prefix: str, i: int, n: int) -> dict[str, int]:
    return {f"{prefix}{j}": bit for j, bit in enumerate(expand(i, n))}


# =========================================================================
# Adders
# =========================================================================

class TestHalfAdder:

    @pytest.mark.parametrize(
        "x1, x2, expected",
        [(0, 0, (0, 0)), (1, 0, (1, 0)), (0, 1, (1, 0)), (1, 1, (0, 1))],
    )
    def test_truth_table(self, x1, x2, expected):
        vals = _run(HalfAdder("ha"), x1=x1, x2=x2)
        assert (vals["y1"], vals["y2"]) == expected
        assert (vals["sum"], vals["carry"]) == expected

    def test_connectors(self):
        ha = HalfAdder("ha")
        assert set(ha.ports) == {"x1", "x2", "y1", "y2"}
        assert set(ha.variables) == {"ha.sum", "ha.carry"}
        assert all(p.domain is Domain.DIGITAL for p in ha.ports.values())


class TestFullAdder:

    @pytest.mark.parametrize("bits", list(itertools.product([0, 1], repeat=3)))
    def test_truth_table(self, bits):
        x1, x2, x3 = bits
        vals = _run(FullAdder("fa"), x1=x1, x2=x2, x3=x3)
        assert vals["sum"] == (x1 + x2 + x3) % 2
        assert vals["carry"] == int(x1 + x2 + x3 >= 2)

    def test_examples(self):
        assert _run(FullAdder("fa"), x1=1, x2=1, x3=1)["y1"] == 1
        assert _run(FullAdder("fa"), x1=1, x2=1, x3=1)["y2"] == 1
        assert _run(FullAdder("fa"), x1=1, x2=1, x3=0)["y1"] == 0
        assert _run(FullAdder("fa"), x1=1, x2=1, x3=0)["y2"] == 1


# =========================================================================
# Multiplexers
# =========================================================================

class TestMUX:

    def test_default_width_from_config(self):
        mux = MUX("mux")
        assert mux.N == CONFIG.components.mux_width
        assert len(mux.lines.inputs) == mux.N

    def test_line_names(self):
        mux = MUX("mux", N=8)
        assert [l.name for l in mux.lines.inputs] == [f"d{i}" for i in range(8)]
        assert [l.name for l in mux.lines.selects] == ["s0", "s1", "s2"]
        assert [l.name for l in mux.lines.outputs] == ["y"]
        assert len(mux.equations) == 1

    @pytest.mark.parametrize("N", [2, 4, 8])
    def test_selects_indexed_input(self, N):
        n = N.bit_length() - 1
        mux = MUX("mux", N=N)
        for i in range(N):
            for k in range(N):
                data = {f"d{j}": int(j == k) for j in range(N)}
                vals = _run(mux, **data, **_select("s", i, n))
                assert vals["y"] == int(i == k)

    @pytest.mark.parametrize("N", [1, 3, 5, 6, 7, 12])
    def test_invalid_width(self, N):
        with pytest.raises(InvalidWidth):
            MUX("mux", N=N)


class TestDEMUX:

    def test_line_names(self):
        demux = DEMUX("demux", N=4)
        assert demux.lines.names() == ("d", "s0", "s1", "y0", "y1", "y2", "y3")
        assert [eq.output.name for eq in demux.equations] == ["y0", "y1", "y2", "y3"]

    @pytest.mark.parametrize("N", [2, 4, 8])
    def test_routes_input(self, N):
        n = N.bit_length() - 1
        demux = DEMUX("demux", N=N)
        for i in range(N):
            for x in (0, 1):
                vals = _run(demux, d=x, **_select("s", i, n))
                for k in range(N):
                    assert vals[f"y{k}"] == (x if k == i else 0)

    @pytest.mark.parametrize("N", [3, 5, 6, 7])
    def test_invalid_width(self, N):
        with pytest.raises(InvalidWidth):
            DEMUX("demux", N=N)


# =========================================================================
# Encoder / Decoder
# =========================================================================

class TestDecoder:

    def test_address_lines(self):
        dec = Decoder("dec", n=3)
        assert [l.name for l in dec.lines.selects] == ["d0", "d1", "d2"]
        assert len(dec.lines.outputs) == 8
        assert dec.lines.inputs == ()

    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_exactly_one_output(self, n):
        dec = Decoder("dec", n=n)
        for a in range(2**n):
            vals = _run(dec, **_select("d", a, n))
            asserted = [i for i in range(2**n) if vals[f"y{i}"] == 1]
            assert asserted == [a]

    @pytest.mark.parametrize("n", [0, -1, 1.5])
    def test_invalid_address_width(self, n):
        with pytest.raises(InvalidWidth):
            Decoder("dec", n=n)

    def test_default_width_from_config(self):
        assert Decoder("dec").n == CONFIG.components.decoder_address_width


class TestEncoder:

    @pytest.mark.parametrize("N", [2, 4, 8, 16])
    def test_one_hot_gives_binary_code(self, N):
        n = N.bit_length() - 1
        enc = Encoder("enc", N=N)
        assert [l.name for l in enc.lines.outputs] == [f"y{j}" for j in range(n)]
        for k in range(N):
            vals = _run(enc, **{f"d{i}": int(i == k) for i in range(N)})
            assert assemble([vals[f"y{j}"] for j in range(n)]) == k

    def test_multiple_asserted_inputs_give_or_of_codes(self):
        # One-hot input is a documented precondition, not a checked one
        enc = Encoder("enc", N=8)
        vals = _run(enc, d0=0, d1=1, d2=0, d3=0, d4=1, d5=0, d6=0, d7=0)
        assert assemble([vals["y0"], vals["y1"], vals["y2"]]) == 1 | 4

    @pytest.mark.parametrize("N", [3, 5, 6, 7])
    def test_invalid_width(self, N):
        with pytest.raises(InvalidWidth):
            Encoder("enc", N=N)


# =========================================================================
# Facade behaviour
# =========================================================================

class TestElements:

    def test_ports_cover_non_state_lines(self):
        mux = MUX("mux", N=2)
        assert set(mux.ports) == {"d0", "d1", "s0", "y"}
        assert mux.ports["s0"].across_vars == ("val", "v")

    def test_fqn(self):
        ha = HalfAdder("ha")
        assert ha.fqn(ha.lines["x1"]) == "ha.x1.val"
        assert ha.fqn(ha.lines["sum"]) == "ha.sum"

    def test_equation_for(self):
        dec = Decoder("dec", n=1)
        assert dec.equation_for("y1").output.name == "y1"
        with pytest.raises(KeyError):
            dec.equation_for("d0")

    def test_roles(self):
        demux = DEMUX("demux", N=2)
        assert all(l.role is LineRole.SELECT for l in demux.lines.selects)
        assert demux.lines.driven() == demux.lines.outputs

    def test_source_and_probe(self):
        src, probe = LogicSource("a"), LogicProbe("out")
        assert src.element_type == "source" and src.equations == []
        assert probe.element_type == "sensor"
        assert probe.sensor_output == ("x", "val")

    def test_synthesis_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="circuitbax")
        MUX("m", N=2)
        assert any("MUX 'm'" in r.getMessage() for r in caplog.records)

    def test_independent_instances(self):
        a, b = DEMUX("a", N=4), DEMUX("b", N=4)
        assert a.equations == b.equations
        assert a.ports is not b.ports
