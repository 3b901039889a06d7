import numpy as np
import pytest

from terrainedit.edit.brush import Brush, Operation, Shape
from terrainedit.edit.volumes import (
    BoxVolume, CapsuleVolume, SphereVolume, WedgeVolume, orthonormal_frame, volume_for_brush,
)
from terrainedit.geometry.primitives import Vertex

ORIGIN = Vertex(0.0, 0.0, 0.0)
FORWARD = Vertex(1.0, 0.0, 0.0)


def test_sphere_boundary_is_closed():
    volume = SphereVolume(Brush.sphere(Operation.SUB, Vertex(1.0, 2.0, 3.0), 2.0))
    assert volume.contains_point(Vertex(3.0, 2.0, 3.0))
    assert volume.contains_point(Vertex(1.0, 2.0, 1.0))
    assert not volume.contains_point(Vertex(3.0 + 1e-9, 2.0, 3.0))
    assert not volume.contains_point(Vertex(1.0, 4.000001, 3.0))


def test_capsule_distance_to_segment():
    volume = CapsuleVolume(Brush.capsule(Operation.SUB, ORIGIN, Vertex(2.0, 0.0, 0.0), half_length=2.0, radius=0.5))
    points = np.array([
        [2.5, 0.0, 0.0],    # past the end cap, on the boundary
        [-2.5, 0.0, 0.0],
        [0.0, 0.5, 0.0],
        [1.0, 0.0, -0.3],
        [2.6, 0.0, 0.0],
        [0.0, 0.51, 0.0],
    ])
    assert volume.contains(points).tolist() == [True, True, True, True, False, False]


def test_wedge_tapers_linearly_to_a_point():
    volume = WedgeVolume(Brush.wedge(Operation.SUB, ORIGIN, FORWARD, base_radius=1.0, length=2.0))
    inside = np.array([
        [0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [1.0, 0.5, 0.0],
        [1.0, 0.0, -0.5],
        [2.0, 0.0, 0.0],
    ])
    outside = np.array([
        [1.0, 0.6, 0.0],
        [-0.1, 0.0, 0.0],
        [2.1, 0.0, 0.0],
        [0.5, 0.0, 0.8],
    ])
    assert volume.contains(inside).all()
    assert not volume.contains(outside).any()


def test_zero_length_wedge_is_a_disk():
    volume = WedgeVolume(Brush.wedge(Operation.SUB, ORIGIN, FORWARD, base_radius=1.0, length=0.0))
    assert volume.contains_point(Vertex(0.0, 0.5, 0.5))
    assert not volume.contains_point(Vertex(0.1, 0.0, 0.0))


def test_box_frame_is_built_from_world_up():
    frame = orthonormal_frame(np.array([1.0, 0.0, 0.0]))
    np.testing.assert_allclose(frame[0], [1.0, 0.0, 0.0])
    np.testing.assert_allclose(frame[2], [0.0, 1.0, 0.0])
    np.testing.assert_allclose(frame @ frame.T, np.eye(3), atol=1e-12)


@pytest.mark.parametrize("direction", [[0.0, 1.0, 0.0], [0.0, -3.0, 0.0], [0.3, -0.2, 0.9]])
def test_box_frame_is_orthonormal_and_deterministic(direction):
    frame = orthonormal_frame(np.array(direction))
    np.testing.assert_allclose(frame @ frame.T, np.eye(3), atol=1e-12)
    np.testing.assert_allclose(np.cross(frame[0], frame[1]), frame[2], atol=1e-12)
    np.testing.assert_array_equal(frame, orthonormal_frame(np.array(direction)))


def test_box_half_extents_follow_the_frame():
    volume = BoxVolume(Brush.box(Operation.SUB, ORIGIN, FORWARD, 1.0, 2.0, 3.0))
    # side axis is up x forward = -Z, up' is +Y
    assert volume.contains_point(Vertex(1.0, 3.0, 2.0))
    assert volume.contains_point(Vertex(-1.0, -3.0, -2.0))
    assert not volume.contains_point(Vertex(1.01, 0.0, 0.0))
    assert not volume.contains_point(Vertex(0.0, 3.01, 0.0))
    assert not volume.contains_point(Vertex(0.0, 0.0, 2.01))

    lo, hi = volume.bounds()
    np.testing.assert_allclose(lo, [-1.0, -3.0, -2.0])
    np.testing.assert_allclose(hi, [1.0, 3.0, 2.0])


def test_rotated_box():
    volume = BoxVolume(Brush.box(Operation.SUB, ORIGIN, Vertex(1.0, 0.0, 1.0), 2.0, 0.1, 0.1))
    assert volume.contains_point(Vertex(1.4, 0.0, 1.4))
    assert not volume.contains_point(Vertex(1.4, 0.0, -1.4))


@pytest.mark.parametrize("brush", [
    Brush.sphere(Operation.SUB, Vertex(1.0, -1.0, 2.0), 1.5),
    Brush.capsule(Operation.SUB, ORIGIN, Vertex(1.0, 1.0, 0.0), 2.0, 0.5),
    Brush.wedge(Operation.SUB, ORIGIN, Vertex(0.0, -1.0, 1.0), 0.75, 1.5),
    Brush.box(Operation.SUB, ORIGIN, Vertex(1.0, 2.0, 3.0), 1.0, 0.5, 0.25),
])
def test_bounds_enclose_the_volume(brush):
    volume = volume_for_brush(brush)
    lo, hi = volume.bounds()

    rng = np.random.default_rng(0)
    r = brush.bounding_radius
    samples = brush.center.to_array() + rng.uniform(-r, r, size=(5000, 3))
    inside = samples[volume.contains(samples)]
    assert len(inside) > 0
    assert np.all(inside >= lo - 1e-12)
    assert np.all(inside <= hi + 1e-12)
    # the bounding sphere encloses everything too
    assert np.all(np.linalg.norm(inside - brush.center.to_array(), axis=1) <= r + 1e-12)


def test_volume_for_brush_dispatches_on_shape():
    assert isinstance(volume_for_brush(Brush.sphere(Operation.ADD, ORIGIN, 1.0)), SphereVolume)
    assert isinstance(volume_for_brush(Brush.box(Operation.ADD, ORIGIN, FORWARD, 1, 1, 1)), BoxVolume)
    assert volume_for_brush(Brush.wedge(Operation.ADD, ORIGIN, FORWARD, 1, 1)).brush.shape == Shape.WEDGE
