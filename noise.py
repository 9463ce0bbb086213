#
# N-D simplex noise, vectorized with numpy.
#
# Based on example code by Stefan Gustavson (stegu@itn.liu.se).
# Better rank ordering method by Stefan Gustavson in 2012.
#
# This code was placed in the public domain by its original author,
# Stefan Gustavson. You may use it as you see fit, but
# attribution is appreciated.
#
#
import itertools

import numpy

import config


p = numpy.array( [151,160,137,91,90,15,
    131,13,201,95,96,53,194,233,7,225,140,36,103,30,69,142,8,99,37,240,21,10,23,
    190, 6,148,247,120,234,75,0,26,197,62,94,252,219,203,117,35,11,32,57,177,33,
    88,237,149,56,87,174,20,125,136,171,168, 68,175,74,165,71,134,139,48,27,166,
    77,146,158,231,83,111,229,122,60,211,133,230,220,105,92,41,55,46,245,40,244,
    102,143,54, 65,25,63,161, 1,216,80,73,209,76,132,187,208, 89,18,169,200,196,
    135,130,116,188,159,86,164,100,109,198,173,186, 3,64,52,217,226,250,124,123,
    5,202,38,147,118,126,255,82,85,212,207,206,59,227,47,16,58,17,182,189,28,42,
    223,183,170,213,119,248,152, 2,44,154,163, 70,221,153,101,155,167, 43,172,9,
    129,22,39,253, 19,98,108,110,79,113,224,232,178,185, 112,104,218,246,97,228,
    251,34,242,193,238,210,144,12,191,179,162,241, 81,51,145,235,249,14,239,107,
    49,192,214, 31,181,199,106,157,184, 84,204,176,115,121,50,45,127, 4,150,254,
    138,236,205,93,222,114,67,29,24,72,243,141,128,195,78,66,215,61,156,180] )


# returns floor of floating point array by coercing to integer
def fastfloor(x):
    return numpy.array(numpy.floor(x), dtype = numpy.int64)


def _permutation(seed):
    if seed is None:
        base = p
    else:
        base = numpy.random.RandomState(seed % 2**32).permutation(256)
    # To remove the need for index wrapping, double the permutation table length
    return numpy.concatenate([base, base])


class SimplexNoise:
    ''' Simplex noise of any dimension.

    Each instance owns its permutation table, drawn from its own RandomState,
    so two generators with the same seed agree regardless of what else has
    touched numpy's global random state.
    '''
    def __init__(self, seed=None):
        self.seed = seed
        self.perm0 = _permutation(seed)

    def noise(self, Z):
        ''' Sample the noise at the points in Z, an (n, N) array of
        N-dimensional coordinates. Returns n values in roughly [-1, 1].
        '''
        Z = numpy.asarray(Z, dtype=numpy.float64)
        if Z.ndim == 1:
            Z = Z[numpy.newaxis]
        # Skew the space to determine which cell of simplices we're in
        N = Z.shape[-1] #number of dimensions
        N1 = N+1 # number of simplex corners
        Fn = 1.0*(N1**0.5 - 1)/N
        Gn = 1.0*(N1 - N1**0.5)/N/N1

        #skew the Z data and store in z0
        s = Z.sum(-1) * Fn # Factor for skewing
        i = fastfloor(Z+s[:,numpy.newaxis])
        t = (i.sum(-1) * Gn) # Factor for unskewing
        Z0 = i - t[:,numpy.newaxis]
        z0 = Z - Z0

        # Use magnitude ordering to determine the simplices that the point z0 is located in
        rank = numpy.zeros(Z.shape)
        for l,k in itertools.combinations(range(N),2):
            rank[:,k] += z0[:,k]>=z0[:,l]
            rank[:,l] += z0[:,k]<z0[:,l]

        # ind will contain the skewed indices of the N+1 simplex corners
        b = numpy.arange(N+1)[:,numpy.newaxis,numpy.newaxis]
        ind = rank>= N - b
        # zk contains the skewed locations of the N+1 simplex corners
        zk = z0 - ind + 1.0 * b * Gn

        # only the hash lookup wraps; offsets use the unwrapped lattice
        indi = ind.astype(numpy.int64) + (i & 255)
        # the gradients are randomly assigned to each corner
        grad = ((0,-1,1),)*N
        grad = numpy.array(list(itertools.product(*grad))[1:])
        grad = grad[numpy.abs(grad).sum(-1)>=N-1]

        gik = 0
        for x in range(N-1,-1,-1):
            gik = self.perm0[indi[:,:,x] + gik]
        gik = gik%(grad.shape[0])
        # Calculate the contribution from the corners
        tk = 0.5 - (zk*zk).sum(-1)
        tp = tk>=0
        tk = tp * tk * tk
        nk = tp * tk * tk * (grad[gik]*zk).sum(-1)

        # Sum up and scale the result to cover the range [-1,1]
        return nk.sum(0) * (2**6 )


class Fbm(object):
    ''' Fractal sum of simplex octaves.

    Octave k samples an independent SimplexNoise (seed + k) at
    frequency * lacunarity**k with weight persistence**k; the sum is divided
    by the total weight so the result stays near [-1, 1].
    '''
    def __init__(self, seed, octaves=6, persistence=0.5, lacunarity=2.0, frequency=1.0):
        self.seed = seed
        self.octaves = octaves
        self.persistence = persistence
        self.lacunarity = lacunarity
        self.frequency = frequency
        self.layers = [SimplexNoise(seed + k) for k in range(octaves)]

    def noise(self, Z):
        Z = numpy.asarray(Z, dtype=numpy.float64)
        total = 0.0
        weight = 0.0
        amplitude = 1.0
        frequency = self.frequency
        for layer in self.layers:
            total = total + layer.noise(Z * frequency) * amplitude
            weight += amplitude
            amplitude *= self.persistence
            frequency *= self.lacunarity
        return total / weight

    def __call__(self, point):
        return float(self.noise(numpy.array([point], dtype=numpy.float64))[0])


class TileCache(object):
    ''' Point lookups of a vectorized 2D field at integer coordinates.

    `field` maps an (n, 2) float array to n values. The field is evaluated a
    whole square tile at a time and the tile is kept, so walking neighbouring
    cells costs one numpy call per tile instead of one per cell.
    '''
    def __init__(self, field, tile_size=None):
        if tile_size is None:
            tile_size = getattr(config, 'NOISE_TILE_SIZE', 32)
        self.field = field
        self.tile_size = tile_size
        self.tiles = {}
        T = numpy.mgrid[0:tile_size, 0:tile_size]
        # offsets[ix * tile_size + iy] == (ix, iy)
        self._offsets = T.reshape((2, tile_size * tile_size)).T

    def _tile(self, key):
        tile = self.tiles.get(key)
        if tile is None:
            n = self.tile_size
            origin = numpy.array(key) * n
            Z = (self._offsets + origin).astype(numpy.float64)
            tile = numpy.asarray(self.field(Z), dtype=numpy.float64).reshape((n, n))
            self.tiles[key] = tile
        return tile

    def __call__(self, point):
        x, y = int(point[0]), int(point[1])
        n = self.tile_size
        tile = self._tile((x // n, y // n))
        return float(tile[x % n, y % n])


class LandmassField(object):
    ''' The scalar field a floating landmass is cut from.

    f(p) = amplitude * clip(fbm(frequency * p / size), -1, 1)
           + clip(1 - |p| / size, -1, 1)

    so f is positive around the origin and negative once |p| passes
    1.5 * size. It is a pure function of (seed, size).
    '''
    def __init__(self, seed, size, tile_size=None):
        self.seed = seed
        self.size = float(size)
        self.amplitude = getattr(config, 'LANDMASS_NOISE_AMPLITUDE', 0.5)
        self.frequency = getattr(config, 'LANDMASS_NOISE_FREQUENCY', 2.0)
        self.fbm = Fbm(
            seed,
            octaves=getattr(config, 'LANDMASS_OCTAVES', 8),
            persistence=getattr(config, 'LANDMASS_PERSISTENCE', 0.25),
            lacunarity=getattr(config, 'LANDMASS_LACUNARITY', 2.0),
        )
        self.cache = TileCache(self.sample, tile_size)

    def sample(self, Z):
        Z = numpy.asarray(Z, dtype=numpy.float64)
        detail = numpy.clip(self.fbm.noise(Z * (self.frequency / self.size)), -1.0, 1.0)
        falloff = numpy.clip(1.0 - numpy.hypot(Z[:, 0], Z[:, 1]) / self.size, -1.0, 1.0)
        return self.amplitude * detail + falloff

    def __call__(self, point):
        return self.cache(point)
