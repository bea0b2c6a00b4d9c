#!/usr/bin/env python3
"""
Tests for measurement label text, label placement and inline length edits.
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

from models.shapes import ShapeKind
from calculations.geometry import line_angle_degrees, line_length
from drawing.scale_manager import ScaleManager
from drawing.shape_store import ShapeStore
from drawing.measurement_labels import MeasurementLabelEngine, format_feet, parse_label_hit


def _calibrate(manager, pixel_distance, feet):
    """Two-click calibration: pixel_distance px along x equals feet"""
    manager.set_prompt(lambda message: feet)
    manager.begin_calibration()
    manager.handle_calibration_click((0, 0))
    return manager.handle_calibration_click((pixel_distance, 0))


def _engine(scale_factor=None):
    manager = ScaleManager()
    if scale_factor is not None:
        _calibrate(manager, scale_factor * 10, 10)
    store = ShapeStore(manager)
    return MeasurementLabelEngine(store, manager), store, manager


def _texts(engine, store, shape_id):
    return {label.field: label.text for label in engine.labels_for(store.get(shape_id))}


def test_format_feet():
    assert format_feet(3) == "3.0'"
    assert format_feet(12.345) == "12.3'"
    assert format_feet(0) == "0.0'"


def test_structure_labels_after_calibration():
    """3 x 5 ft structure at 10 px/ft reads 3.0' W and 5.0' L."""
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (50, 50), {'length': 5, 'width': 3})
    assert _texts(engine, store, shape_id) == {'width': "3.0' W", 'length': "5.0' L"}


def test_structure_labels_hidden_until_calibrated():
    engine, store, manager = _engine()
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 40, 'width': 20})
    assert engine.labels_for(store.get(shape_id)) == []
    assert not engine.begin_edit(shape_id, 'width')

    _calibrate(manager, 20, 10)
    assert _texts(engine, store, shape_id) == {'width': "10.0' W", 'length': "20.0' L"}


def test_recalibration_updates_labels_without_touching_shapes():
    engine, store, manager = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    before = store.get(shape_id)
    _calibrate(manager, 50, 10)
    assert _texts(engine, store, shape_id) == {'width': "6.0' W", 'length': "10.0' L"}
    assert store.get(shape_id) == before


def test_ruler_label_without_calibration():
    """A default ruler reads 100.0' before any calibration."""
    engine, store, _ = _engine()
    ruler_id = store.place(ShapeKind.RULER, (0, 0))
    assert _texts(engine, store, ruler_id) == {'length': "100.0'"}


def test_icons_have_no_labels():
    engine, store, _ = _engine(10.0)
    for kind in (ShapeKind.WELL, ShapeKind.SEPTIC):
        assert engine.labels_for(store.get(store.place(kind, (0, 0)))) == []


def test_display_value_rounds_to_one_decimal():
    engine, store, _ = _engine(7.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 1, 'width': 1})
    store.update(shape_id, {'width': 100})
    assert engine.display_value(shape_id, 'width') == round(100 / 7.0, 1)


def test_structure_label_positions_follow_rotation():
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (100, 100), {'length': 5, 'width': 3})
    labels = {l.field: l for l in engine.labels_for(store.get(shape_id))}
    assert (labels['width'].x, labels['width'].y, labels['width'].rotation) == (100, 80, 0)
    assert (labels['length'].x, labels['length'].y, labels['length'].rotation) == (150, 100, 90)

    store.update(shape_id, {'rotation': 90})
    labels = {l.field: l for l in engine.labels_for(store.get(shape_id))}
    assert math.isclose(labels['width'].x, 120) and math.isclose(labels['width'].y, 100)
    assert labels['width'].rotation == 90
    assert math.isclose(labels['length'].x, 100) and math.isclose(labels['length'].y, 150)
    assert labels['length'].rotation == 180


def test_ruler_label_sits_off_the_midpoint():
    engine, store, _ = _engine()
    ruler_id = store.place(ShapeKind.RULER, (0, 0))
    label = engine.labels_for(store.get(ruler_id))[0]
    assert math.isclose(label.x, 50) and math.isclose(label.y, -14)
    assert label.rotation == 0
    assert label.offset_x == len("100.0'") * 3
    assert label.offset_y == 7


def test_edit_round_trip_structure():
    """Committing v feet stores v * scale pixels."""
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    started = []
    engine.edit_started.connect(lambda sid, field: started.append((sid, field)))

    assert engine.begin_edit(shape_id, 'width')
    assert started == [(shape_id, 'width')]
    assert engine.editing.text == "3.0"
    result = engine.commit_edit("12.5")
    assert result.success
    assert not engine.is_editing

    shape = store.get(shape_id)
    assert math.isclose(shape.width, 125)
    assert shape.length == 50
    assert shape.rotation == 0 and (shape.x, shape.y) == (0, 0)
    assert engine.display_value(shape_id, 'width') == 12.5


def test_edit_accepts_feet_mark_and_whitespace():
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    engine.begin_edit(shape_id, 'length')
    engine.set_edit_text(" 8' ")
    assert engine.commit_edit().success
    assert store.get(shape_id).length == 80


def test_ruler_length_edit_preserves_angle():
    """Editing to 20 at 10 px/ft puts the end 200 px from the fixed start."""
    engine, store, _ = _engine(10.0)
    ruler_id = store.place(ShapeKind.RULER, (10, 20))
    store.update(ruler_id, {'x2': 40, 'y2': 60})
    before = store.get(ruler_id)

    engine.begin_edit(ruler_id, 'length')
    assert engine.editing.text == "5.0"
    assert engine.commit_edit("20").success

    after = store.get(ruler_id)
    assert (after.x, after.y) == (before.x, before.y)
    assert math.isclose(line_length(after.anchor, after.end), 200)
    assert math.isclose(line_angle_degrees(after.anchor, after.end),
                        line_angle_degrees(before.anchor, before.end))
    assert math.isclose(after.x2, 130) and math.isclose(after.y2, 180)


def test_zero_length_ruler_edit_extends_along_x():
    engine, store, _ = _engine(10.0)
    ruler_id = store.place(ShapeKind.RULER, (5, 5))
    store.update(ruler_id, {'x2': 5, 'y2': 5})
    assert _texts(engine, store, ruler_id) == {'length': "0.0'"}
    engine.begin_edit(ruler_id, 'length')
    engine.commit_edit("3")
    ruler = store.get(ruler_id)
    assert (ruler.x2, ruler.y2) == (35, 5)


def test_invalid_edit_is_rejected_and_geometry_kept():
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    rejected = []
    engine.edit_rejected.connect(rejected.append)
    for text in ("", "abc", "-2", "nan", "inf"):
        engine.begin_edit(shape_id, 'width')
        result = engine.commit_edit(text)
        assert not result.success, f"{text!r} should not commit"
        assert not engine.is_editing
    assert len(rejected) == 5
    assert store.get(shape_id).width == 30


def test_cancel_edit_keeps_geometry():
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    engine.begin_edit(shape_id, 'width')
    engine.set_edit_text("99")
    engine.cancel_edit()
    assert not engine.is_editing
    assert store.get(shape_id).width == 30


def test_edited_label_is_hidden_while_editing():
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    engine.begin_edit(shape_id, 'width')
    assert [l.field for l in engine.labels_for(store.get(shape_id))] == ['length']


def test_opening_second_edit_commits_first():
    engine, store, _ = _engine(10.0)
    shape_id = store.place(ShapeKind.STRUCTURE, (0, 0), {'length': 5, 'width': 3})
    engine.begin_edit(shape_id, 'width')
    engine.set_edit_text("4")
    engine.begin_edit(shape_id, 'length')
    assert store.get(shape_id).width == 40
    assert engine.editing.field == 'length'


def test_parse_label_hit():
    assert parse_label_hit("abc_label_width") == ("abc", "width")
    assert parse_label_hit("a_b_label_length") == ("a_b", "length")
    assert parse_label_hit("abc_label_height") is None
    assert parse_label_hit("abc_start") is None
    assert parse_label_hit(None) is None
