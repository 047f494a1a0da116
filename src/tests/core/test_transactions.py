"""
Transaction Interpreter Tests
=============================

Tests the Polyhedron orchestrator with a fake clock:
- Name bookkeeping (Name / ShortenName / dd cancellation)
- Contraction gate on position convergence
- Wait deadlines, terminal Noop
- Composite scripts (bevel, expand) end to end
- Positions stay keyed by live handles

Run: python -m pytest tests/core/test_transactions.py -v
"""

import numpy as np
import pytest
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from conway_graph.builders import cube, tetrahedron
from conway_graph.spec import PHASE_WAIT, FaceDiscoveryExhausted, InvariantViolation, UnknownVertex
from conway_graph.transactions import (
    COMPOSITES,
    PRIMITIVES,
    Contraction,
    Conway,
    ConwayOperator,
    Name,
    Noop,
    Polyhedron,
    PositionStore,
    Release,
    ShortenName,
    Wait,
    lower,
    rename,
)


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def spread_tetrahedron(poly):
    """Place T's vertices at the corners of a regular tetrahedron."""
    corners = [(1, 1, 1), (1, -1, -1), (-1, 1, -1), (-1, -1, 1)]
    for h, corner in zip(poly.shape.distance.handles(), corners):
        poly.positions[h] = corner


# =============================================================================
# TEST A: Names
# =============================================================================

def test_rename_prepends():
    assert rename("C", Name("a")) == "aC"
    assert rename("aC", Name("t")) == "taC"


def test_rename_dual_cancels():
    """dd = identity."""
    assert rename("dC", Name("d")) == "C"
    assert rename("C", Name("d")) == "dC"


def test_rename_shorten():
    assert rename("taC", ShortenName(2)) == "C"


# =============================================================================
# TEST B: Script table
# =============================================================================

def test_every_operator_has_a_script():
    assert set(PRIMITIVES) | set(COMPOSITES) == set(ConwayOperator)
    assert not set(PRIMITIVES) & set(COMPOSITES)


def test_operator_letters():
    assert ConwayOperator("b") is ConwayOperator.BEVEL
    assert [op.value for op in ConwayOperator] == list("djaktesb")


def test_bevel_script_is_static():
    """Composites only schedule; the shape is untouched."""
    shape = cube()
    script = lower(ConwayOperator.BEVEL, shape, now=10.0)
    assert script == [
        Conway(ConwayOperator.AMBO),
        Wait(10.0 + PHASE_WAIT),
        Conway(ConwayOperator.TRUNCATE),
        ShortenName(2),
        Name("b"),
    ]
    assert shape.counts() == (8, 12, 6)


def test_ambo_script_carries_handle_pairs():
    shape = tetrahedron()
    script = lower(ConwayOperator.AMBO, shape, now=0.0)
    contraction, name = script
    assert isinstance(contraction, Contraction)
    assert len(contraction.edges) == 6
    assert name == Name("a")
    live = set(shape.distance.handles())
    assert all(a in live and b in live for a, b in contraction.edges)


def test_join_script_releases_original_edges():
    shape = tetrahedron()
    release, name = lower(ConwayOperator.JOIN, shape, now=0.0)
    assert isinstance(release, Release)
    assert len(release.edges) == 6
    assert name == Name("j")
    assert shape.counts() == (8, 18, 12)


# =============================================================================
# TEST C: Orchestrator
# =============================================================================

def test_preset_name():
    assert Polyhedron.preset("C").name == "C"
    assert Polyhedron.preset("P", 5).name == "P5"


def test_positions_cover_handles_on_start(clock):
    poly = Polyhedron(cube(), clock=clock)
    assert poly.positions.handles() == poly.shape.distance.handles()
    poly.positions.check(poly.shape.distance)


def test_ambo_waits_for_contraction(clock):
    """C1: the Contraction stays at the head until its endpoints meet."""
    poly = Polyhedron(tetrahedron(), name="T", clock=clock)
    spread_tetrahedron(poly)
    poly.request("a")

    done = poly.process_transactions(now=0.0)
    assert done == Conway(ConwayOperator.AMBO)
    assert isinstance(poly.transactions[0], Contraction)
    assert poly.shape.counts() == (12, 18, 8)
    assert len(poly.positions) == 12

    # A small step pulls the ends closer but not together
    head = poly.transactions[0]
    before = [poly.positions.separation(a, b) for a, b in head.edges]
    assert poly.tick(0.01, now=0.1) is None
    after = [poly.positions.separation(a, b) for a, b in head.edges]
    assert all(x < y for x, y in zip(after, before))
    assert poly.shape.counts() == (12, 18, 8)

    # A full step collapses them and the contraction runs
    assert poly.tick(1.0, now=0.2) == head
    assert poly.shape.counts() == (6, 12, 8)
    assert poly.positions.handles() == sorted(poly.shape.distance.handles())

    assert poly.tick(0.0, now=0.3) == Name("a")
    assert poly.name == "aT"
    assert poly.settled()
    print("✓ aT via transactions: contraction gated on convergence")


def test_wait_blocks_until_deadline(clock):
    poly = Polyhedron(cube(), clock=clock)
    poly.push(Wait(5.0))
    assert poly.process_transactions(now=4.9) is None
    assert len(poly.transactions) == 1
    assert poly.process_transactions(now=5.0) == Wait(5.0)
    assert poly.settled()


def test_wait_uses_clock_when_now_omitted(clock):
    poly = Polyhedron(cube(), clock=clock)
    poly.push(Wait(1.0))
    assert poly.tick() is None
    clock.now = 2.0
    assert poly.tick() == Wait(1.0)


def test_noop_never_leaves_head(clock):
    poly = Polyhedron(cube(), clock=clock)
    poly.push(Noop(), Name("x"))
    assert poly.process_transactions(now=0.0) is None
    assert len(poly.transactions) == 2
    poly.run()
    assert len(poly.transactions) == 2
    assert poly.name == ""


def test_failed_operator_leaves_shape_and_queue(clock, monkeypatch):
    """C4: an operator that raises partway through changes nothing."""
    def failing_truncate(shape):
        shape.distance.delete(0)
        raise FaceDiscoveryExhausted(0, 6)

    monkeypatch.setitem(PRIMITIVES, ConwayOperator.TRUNCATE, failing_truncate)
    poly = Polyhedron(cube(), name="C", clock=clock)
    shape = poly.shape
    poly.request("t")

    with pytest.raises(FaceDiscoveryExhausted):
        poly.process_transactions(now=0.0)

    assert poly.shape is shape
    assert poly.shape.counts() == (8, 12, 6)
    assert list(poly.transactions) == [Conway(ConwayOperator.TRUNCATE)]
    assert poly.positions.handles() == poly.shape.distance.handles()
    assert poly.name == "C"


def test_request_unknown_letter():
    with pytest.raises(ValueError):
        Polyhedron(cube()).request("x")


def test_unknown_transaction_type(clock):
    poly = Polyhedron(cube(), clock=clock)
    poly.push("not a transaction")
    with pytest.raises(TypeError):
        poly.process_transactions(now=0.0)


@pytest.mark.parametrize("symbol, letters, name, counts", [
    ("C", "b", "bC", (48, 72, 26)),
    ("T", "e", "eT", (12, 24, 14)),
    ("T", "j", "jT", (8, 12, 6)),
    ("T", "k", "kT", (8, 18, 12)),
    ("C", "t", "tC", (24, 36, 14)),
    ("T", "s", "sT", (12, 30, 20)),
    ("C", "dd", "C", (8, 12, 6)),
    ("C", "ad", "daC", (14, 24, 12)),
])
def test_operators_end_to_end(clock, symbol, letters, name, counts):
    """C2: requested operators run to completion through the queue."""
    poly = Polyhedron.preset(symbol, clock=clock)
    for letter in letters:
        poly.request(letter)
    poly.run(second=1.0)

    assert poly.settled()
    assert poly.name == name
    assert poly.shape.counts() == counts
    poly.positions.check(poly.shape.distance)
    assert poly.positions.array(poly.shape.distance).shape == (counts[0], 3)


def test_operators_queue_behind_each_other(clock):
    """C3: a second request waits until the first script has drained."""
    poly = Polyhedron.preset("T", clock=clock)
    poly.request("a")
    poly.request("d")
    poly.process_transactions(now=0.0)
    # ambo's script sits in front of the dual request
    assert [type(t) for t in poly.transactions] == [Contraction, Name, Conway]
    poly.run()
    assert poly.name == "daT"
    assert poly.shape.counts() == (8, 12, 6)


# =============================================================================
# TEST D: Position store
# =============================================================================

def test_new_vertices_seed_at_origin_mean():
    store = PositionStore(seed=1)
    shape = cube()
    store.sync(shape.distance)
    for h in range(8):
        store[h] = np.zeros(3)
    store[0] = np.array([4.0, 0.0, 0.0])

    d = shape.distance
    v = d.insert(origin=(0, 1))
    store.sync(d)
    pos = store[d.handle(v)]
    assert np.allclose(pos, [2.0, 0.0, 0.0], atol=0.1)


def test_sync_drops_dead_handles():
    store = PositionStore()
    d = cube().distance
    store.sync(d)
    d.delete(3)
    store.sync(d)
    assert 3 not in store
    assert len(store) == 7
    with pytest.raises(UnknownVertex):
        store[3]


def test_check_detects_misalignment():
    store = PositionStore()
    d = cube().distance
    store.sync(d)
    d.insert()
    with pytest.raises(InvariantViolation, match="1 missing"):
        store.check(d)


def test_pull_halves_gap():
    store = PositionStore()
    store[0] = [0.0, 0.0, 0.0]
    store[1] = [2.0, 0.0, 0.0]
    store.pull([(0, 1)], 0.5)
    assert store.separation(0, 1) == pytest.approx(1.0)
    store.pull([(0, 1)], 5.0)
    assert store.separation(0, 1) == pytest.approx(0.0)
