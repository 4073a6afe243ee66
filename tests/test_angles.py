import math

import pytest

from pose_challenge.angles import calculate_angle, extract_arm_angles, extract_leg_angles, vertical_tilt, visible
from pose_challenge.models import Landmark, Point


def p(x, y, z=0.0):
    return Point(x=x, y=y, z=z, visibility=1.0)


def test_right_angle():
    assert calculate_angle(p(1, 0), p(0, 0), p(0, 1)) == pytest.approx(90.0)


def test_straight_and_folded():
    assert calculate_angle(p(-1, 0), p(0, 0), p(1, 0)) == pytest.approx(180.0)
    assert calculate_angle(p(1, 0), p(0, 0), p(2, 0)) == pytest.approx(0.0)


def test_symmetric_under_swap():
    a, m, b = p(0.3, 0.1), p(0.5, 0.5), p(0.9, 0.4)
    assert calculate_angle(a, m, b) == pytest.approx(calculate_angle(b, m, a))


def test_degenerate_ray_returns_zero():
    m = p(0.5, 0.5)
    assert calculate_angle(m, m, p(0.9, 0.4)) == 0.0
    assert calculate_angle(p(0.9, 0.4), m, m) == 0.0


def test_depth_is_ignored():
    assert calculate_angle(p(1, 0, 5.0), p(0, 0, -3.0), p(0, 1, 2.0)) == pytest.approx(90.0)


def test_angle_range():
    m = p(0.5, 0.5)
    for deg in range(0, 360, 15):
        rad = math.radians(deg)
        angle = calculate_angle(p(1.5, 0.5), m, p(0.5 + math.cos(rad), 0.5 + math.sin(rad)))
        assert 0.0 <= angle <= 180.0


def test_vertical_tilt_folds_both_directions():
    # upper point above or below the lower one both count as vertical
    assert vertical_tilt(p(0.5, 0.2), p(0.5, 0.8)) == pytest.approx(0.0)
    assert vertical_tilt(p(0.5, 0.8), p(0.5, 0.2)) == pytest.approx(0.0)
    assert vertical_tilt(p(0.9, 0.5), p(0.1, 0.5)) == pytest.approx(90.0)
    assert vertical_tilt(p(0.6, 0.4), p(0.5, 0.5)) == pytest.approx(45.0)


def test_extract_arm_angles(start_pose):
    for side in ('LEFT', 'RIGHT'):
        angles = extract_arm_angles(start_pose, side)
        assert angles['elbow_angle'] == pytest.approx(180.0)
        assert angles['shoulder_angle'] == pytest.approx(180.0)


def test_extract_arm_angles_arm_down(arms_down):
    angles = extract_arm_angles(arms_down, 'LEFT')
    assert angles['elbow_angle'] == pytest.approx(180.0)
    assert angles['shoulder_angle'] == pytest.approx(0.0)


def test_extract_leg_angles(start_pose):
    angles = extract_leg_angles(start_pose)
    assert angles['knee_angle'] == pytest.approx(180.0)
    assert angles['tilt_angle'] == pytest.approx(0.0)


def test_visible(make_skeleton):
    skeleton = make_skeleton({Landmark.LEFT_WRIST: Point(x=0.6, y=0.1, visibility=0.69)})
    assert not visible(skeleton, [Landmark.LEFT_WRIST], 0.7)
    assert visible(skeleton, [Landmark.RIGHT_WRIST, Landmark.LEFT_HIP], 0.7)
