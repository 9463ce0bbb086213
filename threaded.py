'''
threaded.py -- union of many geometries evaluated on a shared thread pool
'''

import concurrent.futures
import threading

import config
from geometry import MaterialGeometry, union_boxes

_executor = None
_executor_lock = threading.Lock()


def executor():
    """ Return the process-wide geometry worker pool, creating it on first use. """
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=getattr(config, 'GEOMETRY_WORKERS', 4),
                thread_name_prefix='Geometry',
            )
        return _executor


def shutdown(wait=True):
    global _executor
    with _executor_lock:
        pool, _executor = _executor, None
    if pool is not None:
        pool.shutdown(wait=wait)


def _first_material(children, point):
    for child in children:
        material = child.material_at(point)
        if material is not None:
            return material
    return None


def _any_contains(children, point):
    return any(child.contains(point) for child in children)


class ThreadedUnion(MaterialGeometry):
    """ Union of a large, ordered list of geometries.

    The union box and the per-child boxes are computed once on first use.
    Points outside the union box are rejected without touching any child;
    otherwise the children whose boxes hold the point are split into
    contiguous slices and evaluated on the shared executor. `material_at`
    reports the match with the lowest child index no matter which slice
    finishes first.

    """
    def __init__(self, children):
        self.children = list(children)
        self._box = None
        self._child_boxes = None

    def _ensure_boxes(self):
        boxes = self._child_boxes
        if boxes is None:
            boxes = [child.bounding_box() for child in self.children]
            # concurrent first access computes the same value twice at worst
            self._box = union_boxes(boxes)
            self._child_boxes = boxes
        return boxes

    def bounding_box(self):
        if not self.children:
            return None
        self._ensure_boxes()
        return self._box

    def _candidates(self, point):
        if not self.children:
            return []
        boxes = self._ensure_boxes()
        if self._box is not None and not self._box.contains(point):
            return []
        return [child for child, box in zip(self.children, boxes)
                if box is None or box.contains(point)]

    def _slices(self, candidates):
        workers = getattr(config, 'GEOMETRY_WORKERS', 4)
        step = -(-len(candidates) // workers)
        return [candidates[i:i + step] for i in range(0, len(candidates), step)]

    def _parallel(self, candidates):
        return len(candidates) >= getattr(config, 'GEOMETRY_PARALLEL_MIN', 8)

    def contains(self, point):
        candidates = self._candidates(point)
        if not self._parallel(candidates):
            return _any_contains(candidates, point)
        pool = executor()
        futures = [pool.submit(_any_contains, part, point) for part in self._slices(candidates)]
        try:
            for future in concurrent.futures.as_completed(futures):
                if future.result():
                    return True
            return False
        finally:
            for future in futures:
                future.cancel()

    def material_at(self, point):
        candidates = self._candidates(point)
        if not self._parallel(candidates):
            return _first_material(candidates, point)
        pool = executor()
        futures = [pool.submit(_first_material, part, point) for part in self._slices(candidates)]
        try:
            # slices are in child order, so the first hit in slice order wins
            for future in futures:
                material = future.result()
                if material is not None:
                    return material
            return None
        finally:
            for future in futures:
                future.cancel()

    def retain(self, predicate):
        """ Keep only the children for which predicate(child) is true. """
        self.children = [child for child in self.children if predicate(child)]
        self._box = None
        self._child_boxes = None

    def __iter__(self):
        return iter(self.children)

    def __len__(self):
        return len(self.children)
