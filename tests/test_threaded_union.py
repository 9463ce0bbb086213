import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
import threaded
from geometry import BoundingBox3, Geometry, Materialize, Union
from threaded import ThreadedUnion


class Cube(Geometry):
    def __init__(self, a, b):
        self.box = BoundingBox3(a, b)

    def bounding_box(self):
        return self.box

    def contains(self, point):
        return self.box.contains(point)


def _column(n):
    """ n materials stacked on one column; child i covers z >= i. """
    return [Materialize(f"m{i}", Cube((0, 0, i), (0, 0, 100))) for i in range(n)]


@pytest.fixture
def parallel(monkeypatch):
    monkeypatch.setattr(config, "GEOMETRY_PARALLEL_MIN", 2)
    monkeypatch.setattr(config, "GEOMETRY_WORKERS", 3)
    threaded.shutdown()
    yield
    threaded.shutdown()


def test_matches_plain_union(parallel):
    children = _column(40)
    tu = ThreadedUnion(children)
    u = Union(children)
    assert tu.bounding_box() == u.bounding_box()
    for z in (-1, 0, 5, 39, 40, 100, 101):
        point = (0, 0, z)
        assert tu.contains(point) == u.contains(point)
        assert tu.material_at(point) == u.material_at(point)


def test_lowest_index_wins(parallel):
    children = list(reversed(_column(30)))
    tu = ThreadedUnion(children)
    # every child covers z = 50; the first one listed is m29
    assert tu.material_at((0, 0, 50)) == "m29"
    # only m0..m9 cover z = 9, and m9 is listed first among them
    assert tu.material_at((0, 0, 9)) == "m9"


def test_points_outside_the_box_are_rejected(parallel):
    tu = ThreadedUnion(_column(20))
    assert not tu.contains((1, 0, 50))
    assert tu.material_at((0, 0, 101)) is None
    assert tu.material_at((0, 0, -1)) is None


def test_retain_drops_children_and_box(parallel):
    tu = ThreadedUnion(_column(20))
    assert tu.bounding_box() == BoundingBox3((0, 0, 0), (0, 0, 100))
    tu.retain(lambda child: child.material not in ("m0", "m1"))
    assert len(tu) == 18
    assert tu.bounding_box() == BoundingBox3((0, 0, 2), (0, 0, 100))
    assert tu.material_at((0, 0, 1)) is None
    assert tu.material_at((0, 0, 50)) == "m2"


def test_empty_union():
    tu = ThreadedUnion([])
    assert not tu.contains((0, 0, 0))
    assert tu.material_at((0, 0, 0)) is None
    assert tu.bounding_box() is None


def test_empty_union_is_neutral_inside_a_union():
    cube = Materialize("a", Cube((0, 0, 0), (2, 2, 2)))
    u = Union([ThreadedUnion([]), cube])
    assert u.bounding_box() == BoundingBox3((0, 0, 0), (2, 2, 2))
    assert u.material_at((1, 1, 1)) == "a"


def test_executor_is_recreated_after_shutdown(parallel):
    first = threaded.executor()
    assert threaded.executor() is first
    threaded.shutdown()
    second = threaded.executor()
    assert second is not first
    tu = ThreadedUnion(_column(10))
    assert tu.contains((0, 0, 5))
