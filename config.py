import math

# World vertical extent (z is up).
WORLD_MIN_Z = -64
WORLD_MAX_Z = WORLD_MIN_Z + 64 + 512
SEA_LEVEL = 0

# Chunks are square columns of CHUNK_SIZE x CHUNK_SIZE blocks; world data is stored
# in cubic chunks of the same edge length.
CHUNK_SIZE = 16

DEFAULT_SEED = 0
OUTPUT_PATH = 'world.pkl'
# Stop ring generation after this many rings (None for no limit).
MAX_CHUNK_RINGS = None

# Landmass shape field
LANDMASS_OCTAVES = 8
LANDMASS_PERSISTENCE = 0.25
LANDMASS_LACUNARITY = 2.0
LANDMASS_NOISE_AMPLITUDE = 0.5
LANDMASS_NOISE_FREQUENCY = 2.0
# Edge length of the cached tiles the field is sampled in.
NOISE_TILE_SIZE = 32

# Ordering field: boundary-index and angle are mapped onto [0, ORDERING_SCALE].
ORDERING_SCALE = 2**32 - 1
# Inverse-distance weighting exponent for interior ordering.
DISTANCE_POWER = 4

# Landmass slab
LANDMASS_THICKNESS = 5
LANDMASS_CHECKER_SIZE = 2

# Pillars
PILLAR_RADIUS = 3
PILLAR_EDGE_DISTANCE = 12
PILLAR_SPACING = 32

# Buildings, in coarse (2x2 block) cells.
BUILDING_MIN_SIZE = 2
BUILDING_MAX_SIZE = 6
BUILDING_MIN_HEIGHT = 6
BUILDING_MAX_HEIGHT = 24

# City layers from bottom to top: (level of the upper slab, landmass size).
CITY_LAYERS = (
    (48, 48.0),
    (112, 40.0),
    (176, 32.0),
)

# Bedrock and ocean floors
BEDROCK_THICKNESS = 4
BEDROCK_CUTOFF = -50
OCEAN_FLOOR_DEPTH = 32
OCEAN_GRAVEL_DEPTH = 34
OCEAN_FREQUENCY = 1.0 / 128
OCEAN_AMPLITUDE = 4.0
PHI = (1 + math.sqrt(5)) / 2
DETAIL_FREQUENCY = PHI * 10.0

# Thread pool used by ThreadedUnion.
GEOMETRY_WORKERS = 4
# Below this many children a ThreadedUnion evaluates inline.
GEOMETRY_PARALLEL_MIN = 8

# Enable ANSI colors in logs.
LOG_COLOR = True

# Minimum level to print: DEBUG, INFO, WARN or ERROR.
LOG_LEVEL = 'INFO'

# Log per-chunk generation progress.
LOG_CHUNKS = True
