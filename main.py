import sys
import time

import config
import logutil
import mapgen
import threaded
from world import WorldData


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    seed = getattr(config, 'DEFAULT_SEED', 0)
    if len(argv) > 0:
        try:
            seed = int(argv[0])
        except ValueError:
            logutil.log("MAIN", f"ignoring seed {argv[0]!r}, using {seed}", level="WARN")
    path = argv[1] if len(argv) > 1 else getattr(config, 'OUTPUT_PATH', 'world.pkl')
    logutil.set_seed(seed)

    t = time.time()
    generator = mapgen.initialize_map_generator(seed)
    logutil.log("MAIN", f"generator ready in {time.time() - t:.1f}s")

    world = WorldData()
    try:
        count = generator.generate(world)
    finally:
        threaded.shutdown()
    logutil.log("MAIN", f"generated {count} chunks, {len(world)} blocks in {time.time() - t:.1f}s")
    world.save(path)
    return world


if __name__ == '__main__':
    main()
