'''
grid.py -- dynamically bounded 2D storage keyed by signed integer coordinates
'''

import operator

import numpy


def _coords(pos):
    x, y = pos
    return operator.index(x), operator.index(y)


class SparseGrid(object):
    """ A 2D window of optional values that grows to include every written
    coordinate and never shrinks.

    Reads outside the window return None, which is also what an empty cell
    inside the window returns. The window is stored as a numpy object array
    indexed [y, x] plus the world coordinate of its [0, 0] corner.

    """
    def __init__(self):
        self._cells = numpy.empty((0, 0), dtype=object)
        self._offset = (0, 0)

    @classmethod
    def from_cells(cls, cells):
        """ Build a grid from an iterable of ((x, y), value) pairs. """
        grid = cls()
        for pos, value in cells:
            grid.put(pos, value)
        return grid

    def _index(self, pos):
        x, y = _coords(pos)
        ix = x - self._offset[0]
        iy = y - self._offset[1]
        if 0 <= ix < self.width() and 0 <= iy < self.height():
            return iy, ix
        return None

    def width(self):
        return self._cells.shape[1]

    def height(self):
        return self._cells.shape[0]

    def size(self):
        return (self.width(), self.height())

    def is_empty_window(self):
        return self._cells.size == 0

    def min(self):
        if self.is_empty_window():
            return None
        return self._offset

    def max(self):
        if self.is_empty_window():
            return None
        return (self._offset[0] + self.width() - 1, self._offset[1] + self.height() - 1)

    def get(self, pos):
        index = self._index(pos)
        if index is None:
            return None
        return self._cells[index]

    def contains(self, pos):
        return self.get(pos) is not None

    def put(self, pos, value):
        """ Store `value` at `pos`, expanding the window when needed. Storing
        None empties the cell without growing the window.

        """
        if value is None:
            self.remove(pos)
            return
        self.expand_to_include(pos)
        self._cells[self._index(pos)] = value

    def remove(self, pos):
        index = self._index(pos)
        if index is None:
            return None
        old = self._cells[index]
        self._cells[index] = None
        return old

    def expand_to_include(self, pos):
        x, y = _coords(pos)
        if self.is_empty_window():
            self._cells = numpy.empty((1, 1), dtype=object)
            self._offset = (x, y)
            return
        (x0, y0), (x1, y1) = self.min(), self.max()
        nx0, ny0 = min(x0, x), min(y0, y)
        nx1, ny1 = max(x1, x), max(y1, y)
        if (nx0, ny0, nx1, ny1) == (x0, y0, x1, y1):
            return
        cells = numpy.empty((ny1 - ny0 + 1, nx1 - nx0 + 1), dtype=object)
        cells[y0 - ny0:y1 - ny0 + 1, x0 - nx0:x1 - nx0 + 1] = self._cells
        self._cells = cells
        self._offset = (nx0, ny0)

    def cells(self):
        """ Yield ((x, y), value) for every non-empty cell, rows (y) outermost. """
        ox, oy = self._offset
        for iy in range(self.height()):
            row = self._cells[iy]
            for ix in range(self.width()):
                value = row[ix]
                if value is not None:
                    yield (ox + ix, oy + iy), value

    def __iter__(self):
        for _, value in self.cells():
            yield value

    def __len__(self):
        return sum(1 for _ in self.cells())

    def __getitem__(self, pos):
        value = self.get(pos)
        if value is None:
            raise KeyError(pos)
        return value

    def __setitem__(self, pos, value):
        self.put(pos, value)

    def __eq__(self, other):
        if not isinstance(other, SparseGrid):
            return NotImplemented
        return dict(self.cells()) == dict(other.cells())

    def __repr__(self):
        return f"SparseGrid(min={self.min()}, max={self.max()}, cells={len(self)})"
