import math
import os
import sys
from collections import deque

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from grid import SparseGrid
from landmass import BOUNDARY, PRESENT, LandmassShape, _derive_cells, discover, generate_mount_points
from util import cardinal4, cardinal8


def disc(radius, center=(0, 0)):
    cx, cy = center
    return lambda p: radius - math.hypot(p[0] - cx, p[1] - cy)


def square_with_hole(p):
    x, y = p
    if max(abs(x - 4), abs(y)) <= 1:
        return -1.0
    if max(abs(x), abs(y)) <= 8:
        return 1.0
    return -1.0


def _edge_components(grid):
    edges = {pos for pos, cell in grid.cells() if cell.edge}
    components = 0
    seen = set()
    for start in edges:
        if start in seen:
            continue
        components += 1
        q = deque([start])
        seen.add(start)
        while q:
            pos = q.popleft()
            for n in cardinal8(pos):
                if n in edges and n not in seen:
                    seen.add(n)
                    q.append(n)
    return components


def _assert_single_numbered_ring(grid):
    scale = config.ORDERING_SCALE
    edges = [cell for _, cell in grid.cells() if cell.edge]
    total = len(edges)
    assert total > 0
    assert sorted(cell.ordering for cell in edges) == sorted(
        int(round(i / total * scale)) for i in range(total)
    )
    assert all(cell.edge_distance == 0 for cell in edges)
    assert _edge_components(grid) == 1


def test_disc_is_discovered_exactly():
    f = disc(10.5)
    grid = discover(f)
    for pos, cell in grid.cells():
        if f(pos) > 0:
            assert not cell.edge
        else:
            assert cell.edge
            # every rim cell touches the positive region
            assert any(f(n) > 0 for n in cardinal4(pos))
    for x in range(-11, 12):
        for y in range(-11, 12):
            if f((x, y)) > 0:
                assert grid.get((x, y)) is not None
    _assert_single_numbered_ring(grid)


def test_rim_cells_have_a_shape_neighbour():
    grid = discover(disc(7.2))
    for pos, cell in grid.cells():
        if cell.edge:
            assert any(grid.get(n) is not None for n in cardinal8(pos))


def test_edge_distance_grows_inward():
    grid = discover(disc(10.5))
    assert grid.get((0, 0)).edge_distance in (10, 11)
    along = [grid.get((x, 0)).edge_distance for x in range(11)]
    assert along == sorted(along, reverse=True)
    # (10, 0) sits right next to the rim cell (11, 0)
    assert along[-1] == 1
    assert grid.get((11, 0)).edge_distance == 0


def test_ordering_follows_the_rim():
    grid = discover(disc(12.5))
    scale = config.ORDERING_SCALE
    for pos, cell in grid.cells():
        assert 0 <= cell.ordering <= scale
    # cells near the same stretch of rim get nearby orderings
    a = grid.get((9, 0)).ordering
    b = grid.get((10, 1)).ordering
    gap = abs(a - b)
    assert min(gap, scale - gap) < scale // 8


def test_holes_are_filled():
    grid = discover(square_with_hole)
    for x in range(3, 6):
        for y in range(-1, 2):
            cell = grid.get((x, y))
            assert cell is not None
            assert not cell.edge
    assert len(grid) == 17 * 17 + 68
    assert sum(1 for cell in grid if cell.edge) == 68
    _assert_single_numbered_ring(grid)


def test_disconnected_blobs_are_ignored():
    main, other = disc(5.5), disc(3.5, center=(20, 0))
    grid = discover(lambda p: max(main(p), other(p)))
    assert grid.get((20, 0)) is None
    assert grid.max()[0] <= 6


def test_is_edge_at():
    shape = LandmassShape.from_field(disc(6.5))
    assert not shape.is_edge_at((0, 0))
    assert shape.is_edge_at((7, 0))
    assert not shape.is_edge_at((50, 50))
    for pos, cell in shape.cells():
        assert shape.is_edge_at(pos) == cell.edge


def test_unnumbered_rim_is_a_runtime_error():
    grid = SparseGrid()
    grid.put((0, 0), PRESENT)
    grid.put((1, 0), BOUNDARY)
    with pytest.raises(RuntimeError):
        _derive_cells(grid, [(1, 0)])


def test_leftover_discovery_state_is_a_runtime_error():
    grid = SparseGrid()
    grid.put((0, 0), PRESENT)
    grid.put((1, 0), 0)
    grid.put((2, 0), BOUNDARY)
    with pytest.raises(RuntimeError):
        _derive_cells(grid, [(1, 0)])


def test_origin_must_be_inside():
    with pytest.raises(ValueError):
        discover(lambda p: -1.0)
    with pytest.raises(ValueError):
        LandmassShape.from_field(lambda p: 0.0)


def test_size_below_one_is_rejected():
    with pytest.raises(ValueError):
        LandmassShape(1, 0.5)


def test_mount_points():
    grid = discover(disc(20.5))
    candidates = [pos for pos, cell in grid.cells() if cell.edge_distance == 5]
    points = generate_mount_points(grid, 5, 8)
    assert 0 < len(points) <= len(candidates) // 8 + 1
    assert all(grid.get(p).edge_distance == 5 for p in points)
    assert len(set(points)) == len(points)


def test_mount_points_when_too_few_candidates():
    grid = discover(disc(20.5))
    candidates = [(cell.ordering, pos) for pos, cell in grid.cells() if cell.edge_distance == 5]
    points = generate_mount_points(grid, 5, len(candidates) + 1)
    assert points == [min(candidates)[1]]
    assert generate_mount_points(grid, 500, 4) == []
    with pytest.raises(ValueError):
        generate_mount_points(grid, 5, 0)


def test_seeded_shape_is_deterministic():
    a = LandmassShape(7, 16.0)
    b = LandmassShape(7, 16.0)
    assert a.grid == b.grid
    assert a.contains((0, 0))
    assert a.outer_edge_count == sum(1 for _, cell in a.cells() if cell.edge)


def test_full_size_shape_has_one_rim():
    shape = LandmassShape(1234, 48.0)
    present = [pos for pos, cell in shape.cells() if not cell.edge]
    assert len(present) > 0
    _assert_single_numbered_ring(shape.grid)
    again = LandmassShape(1234, 48.0)
    assert again.grid == shape.grid
