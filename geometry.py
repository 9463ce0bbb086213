'''
geometry.py -- bounding boxes and composable spatial predicates

Points are integer tuples, (x, y) in the plane and (x, y, z) in space, with z
pointing up. A Geometry answers membership for a point and advertises a
bounding box (None when it is unbounded); a MaterialGeometry also answers
which block sits at a point. Combinators build new geometries out of others
without ever allocating a dense voxel buffer.
'''

import itertools
from functools import reduce

import config


class _BoundingBox(object):
    """ Inclusive axis-aligned box, immutable once built. """
    __slots__ = ('min', 'max')
    dims = 0

    def __init__(self, a, b):
        if len(a) != self.dims or len(b) != self.dims:
            raise ValueError(f"{type(self).__name__} needs {self.dims}D corners, got {a} and {b}")
        lo = tuple(min(i, j) for i, j in zip(a, b))
        hi = tuple(max(i, j) for i, j in zip(a, b))
        object.__setattr__(self, 'min', lo)
        object.__setattr__(self, 'max', hi)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def union(self, other):
        return type(self)(
            tuple(min(i, j) for i, j in zip(self.min, other.min)),
            tuple(max(i, j) for i, j in zip(self.max, other.max)),
        )

    def intersect(self, other):
        if not self.overlaps(other):
            return None
        return type(self)(
            tuple(max(i, j) for i, j in zip(self.min, other.min)),
            tuple(min(i, j) for i, j in zip(self.max, other.max)),
        )

    def contains(self, point):
        return all(lo <= v <= hi for v, lo, hi in zip(point, self.min, self.max))

    def overlaps(self, other):
        # Neither interval is assumed to be the smaller one.
        for axis in range(self.dims):
            a0, a1 = self.min[axis], self.max[axis]
            b0, b1 = other.min[axis], other.max[axis]
            if not (b0 <= a0 <= b1 or a0 <= b0 <= a1):
                return False
        return True

    def shape(self):
        return tuple(hi - lo + 1 for lo, hi in zip(self.min, self.max))

    def __len__(self):
        n = 1
        for extent in self.shape():
            n *= extent
        return n

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    def __hash__(self):
        return hash((type(self).__name__, self.min, self.max))

    def __repr__(self):
        return f"{type(self).__name__}({self.min}, {self.max})"


class BoundingBox2(_BoundingBox):
    __slots__ = ()
    dims = 2

    def extend(self, z0, z1):
        """ Lift this footprint into space between z0 and z1 (in any order). """
        lo, hi = min(z0, z1), max(z0, z1)
        return BoundingBox3(self.min + (lo,), self.max + (hi,))

    def __iter__(self):
        xs = range(self.min[0], self.max[0] + 1)
        ys = range(self.min[1], self.max[1] + 1)
        return itertools.product(xs, ys)


class BoundingBox3(_BoundingBox):
    __slots__ = ()
    dims = 3

    def truncate(self):
        return BoundingBox2(self.min[:2], self.max[:2])

    def crop(self, box2):
        """ Clip the horizontal extent to `box2`, keeping the vertical range. """
        footprint = self.truncate().intersect(box2)
        if footprint is None:
            return None
        return footprint.extend(self.min[2], self.max[2])

    def intersects_chunk(self, chunk, size=None):
        if size is None:
            size = getattr(config, 'CHUNK_SIZE', 16)
        cx, cy = chunk
        column = BoundingBox2((cx * size, cy * size), (cx * size + size - 1, cy * size + size - 1))
        return self.truncate().overlaps(column)

    def __iter__(self):
        # z outermost, then x, then y
        xs = range(self.min[0], self.max[0] + 1)
        ys = range(self.min[1], self.max[1] + 1)
        for z in range(self.min[2], self.max[2] + 1):
            for x, y in itertools.product(xs, ys):
                yield (x, y, z)


def try_union(a, b):
    """ Union two optional boxes; a missing box is neutral. """
    if a is None:
        return b
    if b is None:
        return a
    return a.union(b)


def try_intersect(a, b):
    """ Intersect two optional boxes; a missing box places no constraint. """
    if a is None:
        return b
    if b is None:
        return a
    return a.intersect(b)


def union_boxes(boxes):
    return reduce(try_union, boxes, None)


def _mask_test(mask, point):
    if isinstance(mask, BoundingBox2):
        return mask.contains(point[:2])
    if isinstance(mask, BoundingBox3):
        return mask.contains(point)
    return mask.contains(point)


class Geometry(object):
    """ Boolean membership over space plus an advertised bounding box. """

    def bounding_box(self):
        return None

    def contains(self, point):
        raise NotImplementedError


class MaterialGeometry(Geometry):
    """ A Geometry that also names the block found at each contained point. """

    def material_at(self, point):
        raise NotImplementedError

    def describe(self, sink):
        """ Send every (point, material) inside the bounding box to `sink`. """
        box = self.bounding_box()
        if box is None:
            return
        material_at = self.material_at
        receive = sink.receive
        for point in box:
            material = material_at(point)
            if material is not None:
                receive(point, material)


class MaskedSink(object):
    """ Forwards only the points that pass `mask` to the wrapped sink. """
    def __init__(self, sink, mask):
        self.sink = sink
        self.mask = mask

    def receive(self, point, material):
        if _mask_test(self.mask, point):
            self.sink.receive(point, material)


class Union(MaterialGeometry):
    """ Pointwise OR of an ordered list of children.

    The first child (in declaration order) that has a material at a point
    supplies it.

    """
    def __init__(self, children):
        self.children = list(children)

    def bounding_box(self):
        return union_boxes(child.bounding_box() for child in self.children)

    def contains(self, point):
        return any(child.contains(point) for child in self.children)

    def material_at(self, point):
        for child in self.children:
            material = child.material_at(point)
            if material is not None:
                return material
        return None

    def describe(self, sink):
        # Reverse order so an overwriting sink ends up with the same block
        # material_at would report.
        for child in reversed(self.children):
            child.describe(sink)

    def __iter__(self):
        return iter(self.children)

    def __len__(self):
        return len(self.children)


class Intersect(MaterialGeometry):
    """ Pointwise AND of two geometries; only the first supplies material.

    The advertised box is the union of both boxes, a deliberate
    over-approximation.

    """
    def __init__(self, geometry1, geometry2):
        self.geometry1 = geometry1
        self.geometry2 = geometry2

    def bounding_box(self):
        return try_union(self.geometry1.bounding_box(), self.geometry2.bounding_box())

    def contains(self, point):
        return self.geometry1.contains(point) and self.geometry2.contains(point)

    def material_at(self, point):
        material = self.geometry1.material_at(point)
        if material is not None and self.geometry2.contains(point):
            return material
        return None


class Mask(MaterialGeometry):
    """ Restrict `geometry` to the points accepted by `mask`.

    `mask` is either a boolean Geometry or a BoundingBox2/BoundingBox3. Box
    masks test membership with a plain range check and also crop the
    advertised bounding box; membership is the same either way.

    """
    def __init__(self, geometry, mask):
        self.geometry = geometry
        self.mask = mask
        self.is_box = isinstance(mask, (BoundingBox2, BoundingBox3))

    def bounding_box(self):
        box = self.geometry.bounding_box()
        if isinstance(self.mask, BoundingBox2):
            return box.crop(self.mask) if box is not None else None
        if isinstance(self.mask, BoundingBox3):
            return try_intersect(box, self.mask)
        return box

    def contains(self, point):
        return _mask_test(self.mask, point) and self.geometry.contains(point)

    def material_at(self, point):
        if _mask_test(self.mask, point):
            return self.geometry.material_at(point)
        return None

    def describe(self, sink):
        if self.is_box:
            # the cropped box already bounds the mask
            MaterialGeometry.describe(self, sink)
        else:
            self.geometry.describe(MaskedSink(sink, self.mask))


class LimitBounds(MaterialGeometry):
    """ Clip the advertised bounding box to a horizontal rectangle.

    Point queries are passed straight through and are not re-checked against
    the rectangle, so only box-driven iteration is cropped. When the wrapped
    geometry is unbounded, the rectangle is lifted to `z_range` if given.

    """
    def __init__(self, geometry, min2d, max2d, z_range=None):
        self.geometry = geometry
        self.rect = BoundingBox2(min2d, max2d)
        self.z_range = z_range

    def bounding_box(self):
        box = self.geometry.bounding_box()
        if box is None:
            if self.z_range is None:
                return None
            return self.rect.extend(*self.z_range)
        return box.crop(self.rect)

    def contains(self, point):
        return self.geometry.contains(point)

    def material_at(self, point):
        return self.geometry.material_at(point)


class Materialize(MaterialGeometry):
    """ Give a boolean geometry a constant material. """
    def __init__(self, material, geometry):
        self.material = material
        self.geometry = geometry

    def bounding_box(self):
        return self.geometry.bounding_box()

    def contains(self, point):
        return self.geometry.contains(point)

    def material_at(self, point):
        if self.geometry.contains(point):
            return self.material
        return None


def describe(geometry, sink):
    geometry.describe(sink)
    return sink
