#!/usr/bin/env python3
"""
Tests for the resize/rotate overlay geometry and gestures.
"""

import os
import sys

# Add src directory to path
CURRENT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(CURRENT_DIR, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from models.shapes import Structure, Septic, Well, Ruler
from drawing.transform_handles import (TransformBox, TransformGesture, ROTATE_HANDLE, RESIZE_HANDLES,
                                       attributes_from_box, box_for_shape, handle_hit_id, handle_name,
                                       is_transformer_hit, supports_transform)


def _close(a, b, tol=1e-6):
    return abs(a[0] - b[0]) < tol and abs(a[1] - b[1]) < tol


def _box_close(box, expected, tol=1e-6):
    actual = (box.x, box.y, box.width, box.height, box.rotation)
    return all(abs(a - e) < tol for a, e in zip(actual, expected))


def test_handle_ids():
    hit = handle_hit_id('bottom-right')
    assert is_transformer_hit(hit)
    assert handle_name(hit) == 'bottom-right'
    assert not is_transformer_hit('shape1')
    assert not is_transformer_hit(None)


def test_handle_positions_unrotated():
    positions = TransformBox(100, 100, 40, 20).handle_positions()
    assert set(positions) == set(RESIZE_HANDLES) | {ROTATE_HANDLE}
    assert positions['top-left'] == (100, 100)
    assert positions['middle-right'] == (140, 110)
    assert positions['bottom-right'] == (140, 120)
    assert positions[ROTATE_HANDLE] == (120, 70)


def test_handle_positions_follow_rotation_about_anchor():
    box = TransformBox(100, 100, 40, 20, 90)
    positions = box.handle_positions()
    assert _close(positions['top-left'], (100, 100))
    assert _close(positions['top-right'], (100, 140))
    assert _close(positions['bottom-left'], (80, 100))
    assert _close(box.center, (90, 120))


def test_to_local_inverts_to_scene():
    box = TransformBox(12, -7, 30, 45, 37)
    assert _close(box.to_local(box.to_scene((5, 9))), (5, 9))


def test_resize_bottom_right():
    gesture = TransformGesture('s1', TransformBox(100, 100, 40, 20), 'bottom-right')
    assert _box_close(gesture.update((150, 130)), (100, 100, 50, 30, 0))
    assert gesture.start_box == TransformBox(100, 100, 40, 20)


def test_resize_top_left_moves_anchor():
    gesture = TransformGesture('s1', TransformBox(100, 100, 40, 20), 'top-left')
    assert _box_close(gesture.update((90, 80)), (90, 80, 50, 40, 0))


def test_resize_edge_handle_changes_one_side():
    gesture = TransformGesture('s1', TransformBox(100, 100, 40, 20), 'middle-right')
    assert _box_close(gesture.update((170, 500)), (100, 100, 70, 20, 0))


def test_resize_below_minimum_keeps_previous_box():
    gesture = TransformGesture('s1', TransformBox(100, 100, 40, 20), 'bottom-right')
    gesture.update((150, 130))
    assert _box_close(gesture.update((105, 105)), (100, 100, 50, 30, 0))
    assert _box_close(gesture.update((150, 110)), (100, 100, 50, 30, 0))


def test_rotation_keeps_center():
    gesture = TransformGesture('s1', TransformBox(0, 0, 40, 40), ROTATE_HANDLE)
    assert gesture.is_rotation
    box = gesture.update((60, 20))
    assert abs(box.rotation - 90) < 1e-9
    assert _close((box.x, box.y), (40, 0))
    assert _close(box.center, (20, 20))
    assert (box.width, box.height) == (40, 40)


def test_rotation_angle_from_pointer():
    gesture = TransformGesture('s1', TransformBox(0, 0, 40, 40), ROTATE_HANDLE)
    assert abs(gesture.update((20, -10)).rotation) < 1e-9
    assert abs(gesture.update((-10, 20)).rotation + 90) < 1e-9


def test_box_for_shapes():
    structure = Structure('s', 10, 20, width=30, length=50, rotation=15)
    assert box_for_shape(structure) == TransformBox(10, 20, 30, 50, 15)
    septic = Septic('p', 5, 6)
    assert box_for_shape(septic) == TransformBox(5, 6, 64, 62, 0)
    assert box_for_shape(Well('w', 0, 0)) is None
    assert box_for_shape(Ruler('r', 0, 0, x2=1, y2=1)) is None


def test_only_structures_and_septic_transform():
    assert supports_transform(Structure('s', 0, 0, width=1, length=1))
    assert supports_transform(Septic('p', 0, 0))
    assert not supports_transform(Well('w', 0, 0))
    assert not supports_transform(Ruler('r', 0, 0, x2=1, y2=1))


def test_attributes_from_box():
    structure = Structure('s', 0, 0, width=30, length=50)
    assert attributes_from_box(structure, TransformBox(1, 2, 60, 70, 45)) == {
        'x': 1, 'y': 2, 'width': 60, 'length': 70, 'rotation': 45,
    }
    septic = Septic('p', 0, 0, width=80, length=80)
    attrs = attributes_from_box(septic, TransformBox(3, 4, 256, 62, -10))
    assert attrs == {'x': 3, 'y': 4, 'scale_x': 2.0, 'scale_y': 0.5, 'rotation': -10}
    assert attributes_from_box(Well('w', 0, 0), TransformBox(0, 0, 1, 1)) == {}
