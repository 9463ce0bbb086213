'''
buildings.py -- greedy building layout on a landmass and the building geometry
'''

from collections import namedtuple

import numpy

import blocks
import config
import logutil
from geometry import BoundingBox3, MaterialGeometry

# Rectangle in coarse cells: anchor (x, y) is its lowest corner.
BuildingShape = namedtuple('BuildingShape', 'x y w h')

UNKNOWN = -2
VACANT = -1


def occupancy_grid(shape):
    """ Downsample a landmass shape 2x into a padded occupancy array.

    Coarse cell (cx, cy) covers fine cells (2cx..2cx+1, 2cy..2cy+1) and is
    VACANT iff all four are non-edge cells of the shape, UNKNOWN otherwise.
    The array is indexed [y, x] and carries one extra ring of UNKNOWN on
    every side.

    Returns
    -------
    occ : numpy.ndarray
    origin : (int, int)
        Coarse coordinate of occ[1, 1].

    """
    (x0, y0), (x1, y1) = shape.min(), shape.max()
    cx0, cy0 = x0 // 2, y0 // 2
    cx1, cy1 = x1 // 2, y1 // 2
    occ = numpy.full((cy1 - cy0 + 3, cx1 - cx0 + 3), UNKNOWN, dtype=numpy.int64)
    for cy in range(cy0, cy1 + 1):
        for cx in range(cx0, cx1 + 1):
            fine = [(2 * cx + dx, 2 * cy + dy) for dx in (0, 1) for dy in (0, 1)]
            cells = [shape.sample(pos) for pos in fine]
            if all(cell is not None and not cell.edge for cell in cells):
                occ[cy - cy0 + 1, cx - cx0 + 1] = VACANT
    return occ, (cx0, cy0)


def _score(occ, ix, iy, w, h):
    """ Occupied halo cells around a candidate, or None if it may not go there. """
    rows, cols = occ.shape
    if iy + h + 1 > rows or ix + w + 1 > cols:
        return None
    if not (occ[iy:iy + h, ix:ix + w] == VACANT).all():
        return None
    region = occ[iy - 1:iy + h + 1, ix - 1:ix + w + 1]
    if (region == UNKNOWN).any():
        return None
    return int(numpy.count_nonzero(region >= 0))


def pack_buildings(shape, rng, min_size=None, max_size=None):
    """ Greedily pack rectangular buildings onto the interior of `shape`.

    Each round proposes one rectangle of random size at every vacant coarse
    cell, keeps the proposals lying wholly on vacant cells whose halo stays on
    the landmass, and places the one touching the most existing buildings
    (the earliest anchor on ties). Packing stops once a round has no valid
    proposal.

    Parameters
    ----------
    shape : LandmassShape
    rng : numpy.random.RandomState
    min_size, max_size : int
        Inclusive bounds on building width and depth in coarse cells.

    Returns
    -------
    list of BuildingShape

    """
    if min_size is None:
        min_size = getattr(config, 'BUILDING_MIN_SIZE', 2)
    if max_size is None:
        max_size = getattr(config, 'BUILDING_MAX_SIZE', 6)
    if not 1 <= min_size <= max_size:
        raise ValueError(f"bad building size bounds {min_size}..{max_size}")

    occ, (cx0, cy0) = occupancy_grid(shape)
    placed = []
    while True:
        anchors = numpy.argwhere(occ == VACANT)
        if len(anchors) == 0:
            break
        ws = rng.randint(min_size, max_size + 1, size=len(anchors))
        hs = rng.randint(min_size, max_size + 1, size=len(anchors))
        best = None
        best_score = -1
        for (iy, ix), w, h in zip(anchors, ws, hs):
            score = _score(occ, ix, iy, w, h)
            if score is not None and score > best_score:
                best, best_score = (ix, iy, int(w), int(h)), score
        if best is None:
            break
        ix, iy, w, h = best
        occ[iy:iy + h, ix:ix + w] = len(placed)
        placed.append(BuildingShape(int(ix) - 1 + cx0, int(iy) - 1 + cy0, w, h))
    logutil.log("PLACEMENT", f"packed {len(placed)} buildings", level="DEBUG")
    return placed


class Building(MaterialGeometry):
    """ Hollow concrete walls with solid corners and a checkered window
    pattern, standing on `level` and rising `height` blocks.

    """
    material = blocks.GRAY_CONCRETE

    def __init__(self, edge1, edge2, level, height):
        self.edge_min = (min(edge1[0], edge2[0]), min(edge1[1], edge2[1]))
        self.edge_max = (max(edge1[0], edge2[0]), max(edge1[1], edge2[1]))
        self.level = level
        self.height = height

    @classmethod
    def from_shape(cls, shape, level, height):
        # one block of each coarse cell is left as a gap between neighbours
        edge1 = (2 * shape.x, 2 * shape.y)
        edge2 = (2 * (shape.x + shape.w) - 2, 2 * (shape.y + shape.h) - 2)
        return cls(edge1, edge2, level, height)

    def top(self):
        return self.level + self.height

    def bounding_box(self):
        return BoundingBox3(self.edge_min + (self.level,), self.edge_max + (self.top(),))

    def contains(self, point):
        x, y, z = point
        if not self.level <= z <= self.top():
            return False
        (x0, y0), (x1, y1) = self.edge_min, self.edge_max
        matches_x = x == x0 or x == x1
        matches_y = y == y0 or y == y1
        within_x = x0 <= x <= x1
        within_y = y0 <= y <= y1
        dz = z - self.level
        return (
            (matches_x and matches_y) or
            (matches_x and within_y and not (y % 2 == 0 and dz % 2 == 0)) or
            (matches_y and within_x and not (x % 2 == 0 and dz % 2 == 0))
        )

    def material_at(self, point):
        if self.contains(point):
            return self.material
        return None

    def __repr__(self):
        return f"Building({self.edge_min}, {self.edge_max}, level={self.level}, height={self.height})"
