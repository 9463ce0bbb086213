'''
world.py -- sparse chunked block storage that geometries are described into
'''

import pickle

import numpy

import config
import logutil
from geometry import BoundingBox3

EMPTY = 0


class Palette(object):
    """ Interns values to small dense indices.

    Equal values always get the same index and indices never change once
    handed out. Index 0 is reserved for "empty" and is never returned by
    `index`.

    """
    def __init__(self):
        self.values = [None]
        self._indices = {}

    def index(self, value):
        if value is None:
            raise ValueError("None cannot be interned; it stands for empty")
        index = self._indices.get(value)
        if index is None:
            index = len(self.values)
            self.values.append(value)
            self._indices[value] = index
        return index

    def __getitem__(self, index):
        if index == EMPTY:
            raise KeyError("palette index 0 is reserved for empty")
        return self.values[index]

    def __contains__(self, value):
        return value in self._indices

    def __iter__(self):
        return iter(self.values[1:])

    def __len__(self):
        return len(self.values) - 1


class WorldData(object):
    """ Blocks keyed by (x, y, z), stored as cubic numpy chunks of palette
    indices. Receives points from `Geometry.describe`; later writes to a
    point replace earlier ones.

    """
    def __init__(self, chunk_size=None):
        if chunk_size is None:
            chunk_size = getattr(config, 'CHUNK_SIZE', 16)
        self.chunk_size = chunk_size
        self.chunks = {}
        self.palette = Palette()

    def _split(self, pos):
        n = self.chunk_size
        x, y, z = (int(v) for v in pos)
        return (x // n, y // n, z // n), (x % n, y % n, z % n)

    def touch_chunk(self, key):
        chunk = self.chunks.get(key)
        if chunk is None:
            n = self.chunk_size
            chunk = self.chunks[key] = numpy.zeros((n, n, n), dtype='u2')
        return chunk

    def get(self, pos):
        key, local = self._split(pos)
        chunk = self.chunks.get(key)
        if chunk is None:
            return None
        index = int(chunk[local])
        if index == EMPTY:
            return None
        return self.palette[index]

    def insert(self, pos, value):
        """ Place `value` at `pos`, returning the value it replaced if any. """
        index = self.palette.index(value)
        if index > numpy.iinfo('u2').max:
            raise ValueError(f"palette overflow interning {value!r}")
        key, local = self._split(pos)
        chunk = self.touch_chunk(key)
        old = int(chunk[local])
        chunk[local] = index
        return self.palette[old] if old != EMPTY else None

    def remove(self, pos):
        key, local = self._split(pos)
        chunk = self.chunks.get(key)
        if chunk is None:
            return None
        old = int(chunk[local])
        chunk[local] = EMPTY
        return self.palette[old] if old != EMPTY else None

    def receive(self, point, material):
        self.insert(point, material)

    def bounding_box(self):
        """ Box around every stored chunk, or None if there are none. """
        if not self.chunks:
            return None
        n = self.chunk_size
        keys = numpy.array(list(self.chunks))
        lo = keys.min(axis=0) * n
        hi = keys.max(axis=0) * n + n - 1
        return BoundingBox3(tuple(int(v) for v in lo), tuple(int(v) for v in hi))

    def cells(self):
        """ Yield ((x, y, z), value) for every stored block. """
        n = self.chunk_size
        for (cx, cy, cz), chunk in self.chunks.items():
            for lx, ly, lz in numpy.argwhere(chunk != EMPTY):
                pos = (int(cx * n + lx), int(cy * n + ly), int(cz * n + lz))
                yield pos, self.palette[int(chunk[lx, ly, lz])]

    def __iter__(self):
        for _, value in self.cells():
            yield value

    def __len__(self):
        return sum(int(numpy.count_nonzero(chunk)) for chunk in self.chunks.values())

    def save(self, path):
        payload = pickle.dumps(
            {'chunk_size': self.chunk_size, 'palette': self.palette.values, 'chunks': self.chunks}, -1
        )
        with open(path, 'wb') as f:
            f.write(payload)
        logutil.log("WORLD", f"saved {len(self.chunks)} chunks, {len(payload)} bytes to {path}")

    @classmethod
    def load(cls, path):
        with open(path, 'rb') as f:
            data = pickle.load(f)
        world = cls(data['chunk_size'])
        for value in data['palette'][1:]:
            world.palette.index(value)
        world.chunks = data['chunks']
        return world
