import math
import os
import sys
import types

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import blocks
import config
from city import City, Landmass, Layer, Pillar, sample_checkered
from landmass import LandmassShape


@pytest.fixture
def small_city(monkeypatch):
    monkeypatch.setattr(config, "PILLAR_EDGE_DISTANCE", 4)
    monkeypatch.setattr(config, "PILLAR_SPACING", 8)
    monkeypatch.setattr(config, "BUILDING_MAX_HEIGHT", 8)


def disc_shape(radius):
    return LandmassShape.from_field(lambda p: radius - math.hypot(p[0], p[1]))


def test_pillar():
    p = Pillar((0, 0), 3, -10, 10)
    assert p.contains((3, 0, 0))
    assert p.contains((2, 2, -10))
    assert not p.contains((3, 2, 0))
    assert not p.contains((0, 0, 11))
    assert p.bounding_box().min == (-4, -4, -10)
    assert p.bounding_box().max == (4, 4, 10)
    assert p.material_at((0, 0, 0)) == blocks.GRAY_CONCRETE


def test_checkered_supports():
    assert sample_checkered(2, (0, 0))
    assert sample_checkered(2, (3, 3))
    assert sample_checkered(2, (6, -6))
    assert not sample_checkered(2, (3, 0))
    assert not sample_checkered(2, (1, 1))


def test_landmass_slab():
    shape = disc_shape(10.5)
    slab = Landmass(shape, 20, thickness=5)
    assert slab.min_z() == 16
    assert slab.bounding_box().min[2] == 16
    assert slab.bounding_box().max[2] == 20
    for pos, cell in shape.cells():
        x, y = pos
        assert slab.contains((x, y, 20))
        assert slab.contains((x, y, 16))
        assert not slab.contains((x, y, 21))
        assert not slab.contains((x, y, 15))
        middle = slab.contains((x, y, 18))
        assert middle == (cell.edge or sample_checkered(2, pos))
    assert not slab.contains((40, 40, 20))


def test_layer(small_city):
    layer = Layer(np.random.RandomState(2), 30, 0, 16.0)
    box = layer.bounding_box()
    assert box.min[2] == 0
    assert box.max[2] >= 30
    assert len(layer.pillars) > 0
    assert len(layer.buildings) > 0
    for pillar in layer.pillars:
        assert layer.shape.sample(pillar.origin).edge_distance == 4
        assert pillar.min_z == 0 and pillar.max_z == 30
        assert layer.material_at(pillar.origin + (5,)) == blocks.GRAY_CONCRETE
    for building in layer.buildings:
        assert building.level == 30
        corner = building.edge_min + (31,)
        assert layer.contains(corner)
    assert layer.contains((0, 0, 30))
    assert not layer.contains((0, 0, box.max[2] + 1))


def test_remove_buildings_colliding_with(small_city):
    layer = Layer(np.random.RandomState(2), 30, 0, 16.0)
    target = list(layer.buildings)[0]
    x, y = target.edge_min
    above = types.SimpleNamespace(pillars=[Pillar((x, y), 1, 30, 60)])
    before = len(layer.buildings)
    removed = layer.remove_buildings_colliding_with(above)
    assert removed >= 1
    assert len(layer.buildings) == before - removed
    assert target not in list(layer.buildings)
    for building in layer.buildings:
        assert not building.bounding_box().overlaps(above.pillars[0].bounding_box())


def test_city_layers_and_collisions(small_city):
    city = City(np.random.RandomState(11), layers=((10, 16.0), (40, 14.0)), min_z=-20)
    lower, upper = city.layers
    assert lower.bottom == -20
    assert upper.bottom == 10
    for building in lower.buildings:
        for pillar in upper.pillars:
            assert not building.bounding_box().overlaps(pillar.bounding_box())
    box = city.bounding_box()
    assert box.min[2] == -20
    assert box.max[2] >= 40
    assert city.material_at((0, 0, 10)) == blocks.GRAY_CONCRETE
    assert city.material_at((0, 0, 40)) == blocks.GRAY_CONCRETE


def test_city_layers_must_rise():
    with pytest.raises(ValueError):
        City(np.random.RandomState(0), layers=((10, 8.0), (5, 8.0)), min_z=-20)
