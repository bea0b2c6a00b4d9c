#!/usr/bin/env python3
"""
Tests for shape placement, partial updates, removal, selection and hit resolution.
"""

import math
import os
import sys

# Add src directory to path
CURRENT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(CURRENT_DIR, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import pytest

from models.shapes import ShapeKind, Well, Septic, Structure, Ruler
from drawing.scale_manager import ScaleManager
from drawing.shape_store import ShapeStore
from drawing.errors import UnknownShapeReference


def _calibrate(manager, pixel_distance, feet):
    """Two-click calibration: pixel_distance px along x equals feet"""
    manager.set_prompt(lambda message: feet)
    manager.begin_calibration()
    manager.handle_calibration_click((0, 0))
    return manager.handle_calibration_click((pixel_distance, 0))


def _store(scale_factor=None, **kwargs):
    manager = ScaleManager()
    if scale_factor is not None:
        _calibrate(manager, scale_factor * 10, 10)
    return ShapeStore(manager, **kwargs)


def test_place_structure_converts_feet_to_pixels():
    """length=5, width=3 ft at 10 px/ft is stored as 50 x 30 px."""
    store = _store(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (50, 50), {'length': 5, 'width': 3})
    shape = store.get(shape_id)
    assert isinstance(shape, Structure)
    assert (shape.x, shape.y) == (50, 50)
    assert shape.width == 30
    assert shape.length == 50
    assert shape.rotation == 0


def test_place_structure_without_calibration_uses_one_pixel_per_foot():
    store = _store()
    shape = store.get(store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 12, 'width': 8}))
    assert (shape.width, shape.length) == (8, 12)


def test_place_structure_rejects_bad_dimensions():
    store = _store(10.0)
    rejected = []
    store.placement_rejected.connect(rejected.append)
    for params in ({'length': 0, 'width': 3}, {'length': 5, 'width': -1}, {'length': None},
                   {}, {'length': float('nan'), 'width': 2}):
        assert store.place(ShapeKind.STRUCTURE, (0, 0), params) is None
    assert len(store) == 0
    assert len(rejected) == 5


def test_place_icons_use_default_size():
    store = _store(25.0)
    well = store.get(store.place(ShapeKind.WELL, (10, 20)))
    septic = store.get(store.place(ShapeKind.SEPTIC, (30, 40)))
    assert isinstance(well, Well) and isinstance(septic, Septic)
    assert (well.width, well.length) == (80, 80)
    assert (well.scale_x, well.scale_y) == (1.0, 1.0)
    assert (septic.width, septic.length) == (80, 80)
    assert (septic.scale_x, septic.scale_y) == (0.5, 0.5)


def test_place_ruler_defaults_to_100_px_right():
    store = _store()
    ruler = store.get(store.place(ShapeKind.RULER, (0, 0)))
    assert isinstance(ruler, Ruler)
    assert (ruler.x, ruler.y, ruler.x2, ruler.y2) == (0, 0, 100, 0)


def test_configured_defaults():
    store = _store(icon_default_size=40, ruler_default_length=60)
    assert store.get(store.place(ShapeKind.WELL, (0, 0))).width == 40
    assert store.get(store.place(ShapeKind.RULER, (5, 5))).x2 == 65


def test_ids_are_unique_and_never_reused():
    ids = iter(['a', 'a', 'b', 'a', 'b', 'c'])
    store = _store(id_factory=lambda: next(ids))
    first = store.place(ShapeKind.WELL, (0, 0))
    second = store.place(ShapeKind.WELL, (0, 0))
    store.remove(first)
    third = store.place(ShapeKind.WELL, (0, 0))
    assert (first, second, third) == ('a', 'b', 'c')


def test_update_merges_only_given_fields():
    store = _store(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    assert store.update(shape_id, {'x': 12, 'y': 7})
    shape = store.get(shape_id)
    assert (shape.x, shape.y, shape.width, shape.length) == (12, 7, 30, 50)

    assert store.update(shape_id, {'width': 45, 'length': None, 'bogus': 1})
    shape = store.get(shape_id)
    assert (shape.width, shape.length) == (45, 50)


def test_update_rejects_negative_and_non_finite_sizes():
    store = _store(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    assert not store.update(shape_id, {'width': -1})
    assert not store.update(shape_id, {'length': float('nan')})
    assert not store.update(shape_id, {'x': float('inf'), 'width': 10})
    shape = store.get(shape_id)
    assert (shape.x, shape.width, shape.length) == (0, 30, 50)


def test_update_unknown_id_is_noop():
    store = _store()
    updates = []
    store.shape_updated.connect(updates.append)
    assert not store.update('missing', {'x': 1})
    assert updates == []


def test_readers_get_copies():
    store = _store()
    shape_id = store.place(ShapeKind.WELL, (1, 2))
    view = store.get(shape_id)
    view.x = 999
    assert store.get(shape_id).x == 1


def test_remove_clears_selection_only_if_selected():
    store = _store()
    a = store.place(ShapeKind.WELL, (0, 0))
    b = store.place(ShapeKind.WELL, (10, 10))

    store.select(a)
    assert store.remove(b)
    assert store.selected_id == a
    assert store.ids() == [a]

    selections = []
    store.selection_changed.connect(selections.append)
    assert store.remove(a)
    assert store.selected_id is None
    assert selections == [None]
    assert len(store) == 0


def test_remove_unknown_id_is_noop():
    store = _store()
    keep = store.place(ShapeKind.WELL, (0, 0))
    store.select(keep)
    assert not store.remove('nope')
    assert store.ids() == [keep]
    assert store.selected_id == keep


def test_select_unknown_clears():
    store = _store()
    shape_id = store.place(ShapeKind.WELL, (0, 0))
    store.select(shape_id)
    assert store.select('ghost') is None
    assert store.selected_id is None


def test_require_raises_for_missing():
    store = _store()
    with pytest.raises(UnknownShapeReference):
        store.require('missing')


def test_find_containing_shape_walks_suffixes():
    store = _store(id_factory=iter(['ruler-1', 'house_2']).__next__)
    ruler_id = store.place(ShapeKind.RULER, (0, 0))
    structure_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 1, 'width': 1})

    assert store.find_containing_shape(ruler_id) == ruler_id
    assert store.find_containing_shape(f"{ruler_id}_start") == ruler_id
    assert store.find_containing_shape(f"{ruler_id}_end") == ruler_id
    assert store.find_containing_shape(f"{ruler_id}_label_length") == ruler_id
    assert store.find_containing_shape(f"{structure_id}_label_width") == structure_id
    assert store.find_containing_shape("house") is None
    assert store.find_containing_shape("__transformer__:top-left") is None
    assert store.find_containing_shape(None) is None
    assert store.find_containing_shape("") is None


def test_to_dict_includes_type():
    store = _store()
    data = store.get(store.place(ShapeKind.RULER, (1, 2))).to_dict()
    assert data['type'] == 'ruler'
    assert data['x2'] == 101
    assert not math.isnan(data['y2'])
