#std/external libs
import itertools
import time

import numpy

#local libs
import config
import logutil
from city import City
from geometry import BoundingBox2, LimitBounds, Mask, Union
from terrain import Bedrock, Ocean
from util import chunk_origin, ring


class Generator(object):
    """ The whole world for one seed: bedrock, the city and the ocean.

    The unbounded bedrock and ocean are limited to the city's footprint, so
    the world's bounding box is the city footprint from the bottom of the
    world to the top of the tallest building.

    """
    def __init__(self, seed, min_z=None, layers=None):
        if min_z is None:
            min_z = getattr(config, 'WORLD_MIN_Z', -64)
        self.seed = seed
        self.min_z = min_z
        rng = numpy.random.RandomState(seed % 2**32)
        self.bedrock = Bedrock(rng, min_z)
        self.ocean = Ocean(rng)
        self.city = City(rng, layers, min_z)

        footprint = self.city.bounding_box().truncate()
        bedrock_top = min_z + getattr(config, 'BEDROCK_THICKNESS', 4)
        sea_level = getattr(config, 'SEA_LEVEL', 0)
        self.geometry = Union([
            LimitBounds(self.bedrock, footprint.min, footprint.max, (min_z, bedrock_top)),
            self.city,
            LimitBounds(self.ocean, footprint.min, footprint.max, (min_z, sea_level)),
        ])
        self.box = self.geometry.bounding_box()
        logutil.log("MAPGEN", f"seed {seed} bounding box {self.box}")

    def bounding_box(self):
        return self.box

    def chunk_exists(self, chunk):
        return self.box.intersects_chunk(chunk)

    def contains(self, point):
        return self.geometry.contains(point)

    def material_at(self, point):
        return self.geometry.material_at(point)

    def chunk_geometry(self, chunk):
        n = getattr(config, 'CHUNK_SIZE', 16)
        x, y = chunk_origin(chunk, n)
        return Mask(self.geometry, BoundingBox2((x, y), (x + n - 1, y + n - 1)))

    def generate_chunk(self, chunk, world):
        """ Describe one chunk column of the world into `world`. """
        t = time.time()
        self.chunk_geometry(chunk).describe(world)
        logutil.log("CHUNK", f"generated chunk {chunk} in {(time.time() - t) * 1000.0:.1f}ms")
        return world

    def generate(self, world, max_rings=None):
        """ Generate chunks ring by ring outward from the origin until a ring
        holds no chunk of the world. Returns the number of chunks generated.

        """
        if max_rings is None:
            max_rings = getattr(config, 'MAX_CHUNK_RINGS', None)
        count = 0
        for n in itertools.count():
            if max_rings is not None and n >= max_rings:
                break
            chunks = [chunk for chunk in ring(n) if self.chunk_exists(chunk)]
            if not chunks:
                break
            for chunk in chunks:
                self.generate_chunk(chunk, world)
            count += len(chunks)
            logutil.log("MAPGEN", f"ring {n}: {len(chunks)} chunks")
        return count


generator = None


def initialize_map_generator(seed=None):
    global generator
    if seed is None:
        seed = int(time.time())
    generator = Generator(seed)
    return generator


def generate_chunk(chunk, world):
    if generator is None:
        initialize_map_generator()
    return generator.generate_chunk(chunk, world)
