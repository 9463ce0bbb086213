'''
city.py -- stacked floating landmasses carrying buildings, held up by pillars
'''

import numpy

import blocks
import config
import logutil
from buildings import Building, pack_buildings
from geometry import BoundingBox3, MaterialGeometry, Union
from landmass import LandmassShape
from threaded import ThreadedUnion
from util import random_seed


def sample_checkered(size, pos):
    size = size + 1
    xp = pos[0] % (size * 2)
    yp = pos[1] % (size * 2)
    return (xp == 0 and yp == 0) or (xp == size and yp == size)


class Pillar(MaterialGeometry):
    """ Vertical cylinder of radius `radius` + 0.5 around `origin`. """
    material = blocks.GRAY_CONCRETE

    def __init__(self, origin, radius, min_z, max_z):
        self.origin = tuple(origin)
        self.radius = radius
        self.min_z = min_z
        self.max_z = max_z

    def bounding_box(self):
        r = self.radius + 1
        x, y = self.origin
        return BoundingBox3((x - r, y - r, self.min_z), (x + r, y + r, self.max_z))

    def contains(self, point):
        x, y, z = point
        if not self.min_z <= z <= self.max_z:
            return False
        dx = x - self.origin[0]
        dy = y - self.origin[1]
        r = self.radius + 0.5
        return dx * dx + dy * dy <= r * r

    def material_at(self, point):
        if self.contains(point):
            return self.material
        return None

    def __repr__(self):
        return f"Pillar({self.origin}, r={self.radius}, z={self.min_z}..{self.max_z})"


class Landmass(MaterialGeometry):
    """ A slab with solid top and bottom faces. Between the faces there are
    only the rim walls and a checkered grid of support columns.

    """
    material = blocks.GRAY_CONCRETE

    def __init__(self, shape, level, thickness=None):
        if thickness is None:
            thickness = getattr(config, 'LANDMASS_THICKNESS', 5)
        self.shape = shape
        self.level = level
        self.thickness = thickness
        self.checker_size = getattr(config, 'LANDMASS_CHECKER_SIZE', 2)

    def max_z(self):
        """ The z of the upper face. """
        return self.level

    def min_z(self):
        """ The z of the lower face. """
        return self.level - self.thickness + 1

    def bounding_box(self):
        return BoundingBox3(self.shape.min() + (self.min_z(),), self.shape.max() + (self.max_z(),))

    def contains(self, point):
        x, y, z = point
        lo, hi = self.min_z(), self.max_z()
        if not lo <= z <= hi:
            return False
        if not self.shape.contains((x, y)):
            return False
        if z == lo or z == hi:
            return True
        return self.shape.is_edge_at((x, y)) or sample_checkered(self.checker_size, (x, y))

    def material_at(self, point):
        if self.contains(point):
            return self.material
        return None


class Layer(MaterialGeometry):
    """ One landmass of the city with its pillars and buildings.

    Pillars run from `bottom` up to the upper face at `top`; buildings stand
    on the upper face.

    """
    material = blocks.GRAY_CONCRETE

    def __init__(self, rng, top, bottom, size):
        self.top = top
        self.bottom = bottom
        self.shape = LandmassShape(random_seed(rng), size)
        self.landmass = Landmass(self.shape, top)

        radius = getattr(config, 'PILLAR_RADIUS', 3)
        self.pillars = Union(
            Pillar(origin, radius, bottom, top) for origin in self.shape.mount_points()
        )

        building_rng = numpy.random.RandomState(random_seed(rng))
        min_height = getattr(config, 'BUILDING_MIN_HEIGHT', 6)
        max_height = getattr(config, 'BUILDING_MAX_HEIGHT', 24)
        self.buildings = ThreadedUnion(
            Building.from_shape(s, top, int(building_rng.randint(min_height, max_height + 1)))
            for s in pack_buildings(self.shape, building_rng)
        )

        tallest = max((b.top() for b in self.buildings), default=top)
        self.box = BoundingBox3(self.shape.min() + (bottom,), self.shape.max() + (tallest,))

    def bounding_box(self):
        return self.box

    def contains(self, point):
        if not self.box.contains(point):
            return False
        return (
            self.landmass.contains(point) or
            self.pillars.contains(point) or
            self.buildings.contains(point)
        )

    def material_at(self, point):
        if self.contains(point):
            return self.material
        return None

    def remove_buildings_colliding_with(self, above):
        """ Drop the buildings whose boxes overlap a pillar of `above`. """
        before = len(self.buildings)
        boxes = [pillar.bounding_box() for pillar in above.pillars]
        self.buildings.retain(
            lambda building: not any(building.bounding_box().overlaps(box) for box in boxes)
        )
        return before - len(self.buildings)


class City(Union):
    """ The city layers, bottom to top.

    `layers` is a sequence of (level, size) pairs with increasing levels.
    The lowest layer's pillars reach down to `min_z`; every other layer's
    pillars rest on the upper face of the layer beneath it.

    """
    def __init__(self, rng, layers=None, min_z=None):
        if layers is None:
            layers = getattr(config, 'CITY_LAYERS', ())
        if min_z is None:
            min_z = getattr(config, 'WORLD_MIN_Z', -64)
        built = []
        bottom = min_z
        for level, size in layers:
            if level <= bottom:
                raise ValueError(f"city layer at {level} does not sit above {bottom}")
            layer = Layer(rng, level, bottom, size)
            logutil.log(
                "CITY",
                f"layer at z={level} size={size}: {len(layer.shape)} cells, "
                f"{len(layer.pillars)} pillars, {len(layer.buildings)} buildings",
            )
            built.append(layer)
            bottom = level
        for lower, upper in zip(built, built[1:]):
            removed = lower.remove_buildings_colliding_with(upper)
            if removed:
                logutil.log("CITY", f"removed {removed} buildings under pillars at z={upper.top}")
        Union.__init__(self, built)

    @property
    def layers(self):
        return self.children
