'''
terrain.py -- the unbounded bedrock floor and ocean beneath the city
'''

import math

import numpy

import blocks
import config
from geometry import MaterialGeometry
from noise import Fbm, SimplexNoise, TileCache
from util import random_seed


class Bedrock(MaterialGeometry):
    """ A bumpy bedrock floor starting at the bottom of the world.

    The floor height varies between WORLD_MIN_Z and
    WORLD_MIN_Z + BEDROCK_THICKNESS; nothing at or above BEDROCK_CUTOFF is
    bedrock.

    """
    material = blocks.BEDROCK

    def __init__(self, rng, min_z=None):
        if min_z is None:
            min_z = getattr(config, 'WORLD_MIN_Z', -64)
        self.min_z = min_z
        self.thickness = getattr(config, 'BEDROCK_THICKNESS', 4)
        self.cutoff = getattr(config, 'BEDROCK_CUTOFF', -50)
        frequency = getattr(config, 'DETAIL_FREQUENCY', 16.18)
        noise = SimplexNoise(random_seed(rng))
        half = self.thickness / 2.0
        self.height = TileCache(
            lambda Z: (numpy.clip(noise.noise(Z * frequency), -1.0, 1.0) + 1.0) * half
        )

    def sample(self, pos):
        return math.floor(self.height(pos) + self.min_z)

    def contains(self, point):
        x, y, z = point
        return z < self.cutoff and z <= max(self.sample((x, y)), self.min_z)

    def material_at(self, point):
        if self.contains(point):
            return self.material
        return None


# seagrass kinds
NONE = 0
SHORT = 1
TALL = 2


class Ocean(MaterialGeometry):
    """ Water from sea level down to a noisy floor near -OCEAN_FLOOR_DEPTH,
    a layer of gravel under it and deepslate below that, with seagrass
    scattered over the floor.

    """
    def __init__(self, rng):
        self.sea_level = getattr(config, 'SEA_LEVEL', 0)
        self.floor_depth = getattr(config, 'OCEAN_FLOOR_DEPTH', 32)
        self.gravel_depth = getattr(config, 'OCEAN_GRAVEL_DEPTH', 34)
        frequency = getattr(config, 'OCEAN_FREQUENCY', 1.0 / 128)
        amplitude = getattr(config, 'OCEAN_AMPLITUDE', 4.0)
        seed = random_seed(rng)
        floor1 = Fbm(seed, octaves=5, frequency=frequency)
        floor2 = Fbm(seed, octaves=3, frequency=frequency)
        self.floor1 = TileCache(lambda Z: floor1.noise(Z) * amplitude)
        self.floor2 = TileCache(lambda Z: floor2.noise(Z) * amplitude)
        grass = SimplexNoise(random_seed(rng))
        detail = getattr(config, 'DETAIL_FREQUENCY', 16.18)
        self.grass = TileCache(lambda Z: grass.noise(Z * detail))

    def sample_floor(self, pos):
        """ z of the lowest water block; gravel starts just below it. """
        return math.floor(self.floor1(pos) - self.floor_depth)

    def sample_gravel(self, pos):
        return math.floor(self.floor2(pos) - self.gravel_depth)

    def sample_seagrass(self, pos):
        value = math.floor((self.grass(pos) + 1.0) * 100) % 10
        if value <= 5:
            return NONE
        if value <= 8:
            return SHORT
        return TALL

    def contains(self, point):
        return point[2] <= self.sea_level

    def material_at(self, point):
        x, y, z = point
        if z > self.sea_level:
            return None
        floor = self.sample_floor((x, y))
        if z >= floor:
            grass = self.sample_seagrass((x, y))
            if grass == SHORT and z == floor:
                return blocks.SEAGRASS_SHORT
            if grass == TALL and z == floor:
                return blocks.SEAGRASS_TALL_LOWER
            if grass == TALL and z == floor + 1:
                return blocks.SEAGRASS_TALL_UPPER
            return blocks.WATER
        if z >= self.sample_gravel((x, y)):
            return blocks.GRAVEL
        return blocks.DEEPSLATE
