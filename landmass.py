'''
landmass.py -- landmass shape discovery over a scalar field

A landmass shape is the connected region of positive field values around the
origin, with interior holes filled in. Every cell of the shape carries an
`ordering`, its approximate angular position along the outer rim, and an
`edge_distance`, its distance to the nearest outer rim cell. Pillars and
buildings are placed from these two values.
'''

import math
from collections import deque, namedtuple

import numpy

import config
import logutil
from grid import SparseGrid
from noise import LandmassField
from util import cardinal4, cardinal8

Cell = namedtuple('Cell', 'ordering edge_distance edge')

# Discovery states. Outer rim cells store their walk index (>= 0) instead.
PRESENT = -1
BOUNDARY = -2

# rows of the distance matrix evaluated per numpy call
_DISTANCE_BLOCK = 1024


def _ordering_scale():
    return getattr(config, 'ORDERING_SCALE', 2**32 - 1)


def discover(field):
    """ Discover the landmass cut out of `field` and annotate its cells.

    Parameters
    ----------
    field : callable
        Maps an integer point (x, y) to a float. Must be positive at the
        origin and negative somewhere on every ray leaving it.

    Returns
    -------
    SparseGrid of Cell

    Raises
    ------
    ValueError
        If the field is not positive at the origin.

    """
    origin = (0, 0)
    if not field(origin) > 0:
        raise ValueError("landmass field is not positive at the origin")

    # Flood fill the positive region; negative cells end the search.
    grid = SparseGrid()
    q = deque([origin])
    seen = {origin}
    while q:
        pos = q.popleft()
        if field(pos) > 0:
            grid.put(pos, PRESENT)
            for candidate in cardinal4(pos):
                if candidate not in seen:
                    seen.add(candidate)
                    q.append(candidate)
        else:
            grid.put(pos, BOUNDARY)

    # The boundary cell furthest from the origin lies on the outer rim.
    edges = []
    root = None
    root_norm = -1
    for pos, value in grid.cells():
        if value == BOUNDARY:
            edges.append(pos)
            norm = max(abs(pos[0]), abs(pos[1]))
            if norm >= root_norm:
                root, root_norm = pos, norm
    if root is None:
        raise RuntimeError("flood fill produced no boundary")

    # Walk the outer rim, numbering cells in visiting order.
    index = 0
    q = deque([root])
    queued = {root}
    while q:
        pos = q.popleft()
        grid.put(pos, index)
        for candidate in cardinal8(pos):
            if grid.get(candidate) == BOUNDARY and candidate not in queued:
                queued.add(candidate)
                q.append(candidate)
                # the root only seeds one direction around the rim
                if index == 0:
                    break
        index += 1

    # Boundaries left over belong to holes; fill them and everything they enclose.
    holes = [pos for pos in edges if grid.get(pos) == BOUNDARY]
    outer = [pos for pos in edges if grid.get(pos) != BOUNDARY]
    (x0, y0), (x1, y1) = grid.min(), grid.max()
    q = deque(holes)
    queued = set(holes)
    filled = 0
    while q:
        pos = q.popleft()
        grid.put(pos, PRESENT)
        filled += 1
        for candidate in cardinal4(pos):
            x, y = candidate
            if not (x0 <= x <= x1 and y0 <= y <= y1):
                continue
            if grid.get(candidate) is None and candidate not in queued:
                queued.add(candidate)
                q.append(candidate)

    shape = _derive_cells(grid, outer)
    logutil.log(
        "LANDMASS",
        f"discovered {len(shape)} cells, {len(outer)} on the outer edge, {filled} filled in holes",
        level="DEBUG",
    )
    return shape


def _derive_cells(grid, outer):
    scale = _ordering_scale()
    power = getattr(config, 'DISTANCE_POWER', 4)
    total = len(outer)
    indices = numpy.array([grid.get(pos) for pos in outer], dtype=numpy.float64)
    if not (indices >= 0).all():
        raise RuntimeError("outer edge cell left unnumbered")
    angles = indices / total * 2 * math.pi
    directions = numpy.stack([numpy.cos(angles), numpy.sin(angles)], axis=1)
    rim = numpy.array(outer, dtype=numpy.float64)

    interior = [pos for pos, value in grid.cells() if value == PRESENT]
    orderings = {}
    for start in range(0, len(interior), _DISTANCE_BLOCK):
        block = interior[start:start + _DISTANCE_BLOCK]
        P = numpy.array(block, dtype=numpy.float64)
        D = numpy.hypot(P[:, 0, numpy.newaxis] - rim[:, 0], P[:, 1, numpy.newaxis] - rim[:, 1])
        W = D ** -power
        total_vector = W @ directions
        a = numpy.arctan2(-total_vector[:, 1], -total_vector[:, 0])
        ordering = numpy.floor((a + math.pi) / (2 * math.pi) * scale)
        distance = numpy.floor(D.min(axis=1))
        for pos, o, d in zip(block, ordering, distance):
            orderings[pos] = Cell(int(o), int(d), False)

    shape = SparseGrid()
    shape.expand_to_include(grid.min())
    shape.expand_to_include(grid.max())
    for pos, value in grid.cells():
        if value == PRESENT:
            shape.put(pos, orderings[pos])
        else:
            if value < 0:
                raise RuntimeError(f"unexpected discovery state {value} at {pos}")
            shape.put(pos, Cell(int(round(value / total * scale)), 0, True))
    return shape


def generate_mount_points(grid, distance, spacing):
    """ Pick roughly one point per `spacing` cells lying exactly `distance`
    cells in from the outer edge, spread evenly by ordering.

    """
    if spacing < 1:
        raise ValueError(f"mount point spacing must be at least 1, got {spacing}")
    points = [(pos, cell.ordering) for pos, cell in grid.cells()
              if cell.edge_distance == distance]
    if not points:
        return []
    points.sort(key=lambda item: item[1])
    count = len(points) // spacing
    if count == 0:
        return [points[0][0]]
    stride = len(points) / count
    return [pos for i, (pos, _) in enumerate(points) if math.floor(i % stride) == 0]


class LandmassShape(object):
    """ The footprint of one floating landmass, immutable once discovered. """

    def __init__(self, seed, size):
        if not size >= 1.0:
            raise ValueError(f"landmass size may not be less than 1, got {size}")
        self.seed = seed
        self.size = size
        self._set_grid(discover(LandmassField(seed, size)))

    @classmethod
    def from_field(cls, field):
        """ Discover a shape from an arbitrary field instead of seeded noise. """
        shape = cls.__new__(cls)
        shape.seed = None
        shape.size = None
        shape._set_grid(discover(field))
        return shape

    def _set_grid(self, grid):
        self.grid = grid
        self.outer_edge_count = sum(1 for cell in grid if cell.edge)

    def sample(self, pos):
        return self.grid.get(pos)

    def contains(self, pos):
        return self.grid.get(pos) is not None

    def is_edge_at(self, pos):
        cell = self.grid.get(pos)
        return cell is not None and cell.edge

    def min(self):
        return self.grid.min()

    def max(self):
        return self.grid.max()

    def cells(self):
        return self.grid.cells()

    def mount_points(self, distance=None, spacing=None):
        if distance is None:
            distance = getattr(config, 'PILLAR_EDGE_DISTANCE', 12)
        if spacing is None:
            spacing = getattr(config, 'PILLAR_SPACING', 32)
        return generate_mount_points(self.grid, distance, spacing)

    def __len__(self):
        return len(self.grid)

    def __repr__(self):
        return f"LandmassShape(seed={self.seed}, size={self.size}, cells={len(self)})"
