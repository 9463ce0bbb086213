import config

# Neighbour offsets in the plane. CARDINAL8 walks counter-clockwise from east.
CARDINAL4 = [
    ( 1, 0),
    ( 0, 1),
    (-1, 0),
    ( 0,-1),
]

CARDINAL8 = [
    ( 1, 0), #E
    ( 1, 1), #NE
    ( 0, 1), #N
    (-1, 1), #NW
    (-1, 0), #W
    (-1,-1), #SW
    ( 0,-1), #S
    ( 1,-1), #SE
]


def cardinal4(pos):
    x, y = pos
    return [(x + dx, y + dy) for dx, dy in CARDINAL4]


def cardinal8(pos):
    x, y = pos
    return [(x + dx, y + dy) for dx, dy in CARDINAL8]


def ring(n):
    """ Return the chunk positions at Chebyshev distance n from the origin.

    Parameters
    ----------
    n : int
        Ring number, 0 for the origin chunk alone.

    Returns
    -------
    list of (int, int)
        Ring positions walked counter-clockwise, starting at (n, -n).

    """
    if n < 0:
        raise ValueError(f"ring number must not be negative, got {n}")
    if n == 0:
        return [(0, 0)]
    positions = []
    positions.extend((n, y) for y in range(-n, n))
    positions.extend((x, n) for x in range(n, -n, -1))
    positions.extend((-n, y) for y in range(n, -n, -1))
    positions.extend((x, -n) for x in range(-n, n))
    return positions


def chunk_origin(chunk, size=None):
    """ World (x, y) of the lowest corner of a chunk column. """
    if size is None:
        size = getattr(config, 'CHUNK_SIZE', 16)
    return (chunk[0] * size, chunk[1] * size)


def random_seed(rng):
    """ Draw a child seed from a numpy RandomState. """
    return int(rng.randint(2**31))
