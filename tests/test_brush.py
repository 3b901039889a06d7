import dataclasses
import math

import pytest

from terrainedit.core.errors import ValidationError
from terrainedit.edit.brush import Brush, BrushBuilder, Operation, Shape, WIRE_FORMAT
from terrainedit.geometry.primitives import Vertex

ORIGIN = Vertex(0.0, 0.0, 0.0)
FORWARD = Vertex(1.0, 0.0, 0.0)


def builder_for(shape: Shape) -> BrushBuilder:
    b = BrushBuilder().operation(Operation.SUB).shape(shape).center(ORIGIN)
    if shape != Shape.SPHERE:
        b.direction(FORWARD)
    return b


def test_builder_defaults_scalars_to_zero():
    brush = builder_for(Shape.SPHERE).build()
    assert brush.size_a == brush.size_b == brush.size_c == 0.0
    assert brush.energy == 0.0
    assert brush.material_id == 0
    assert brush.seed == 0
    assert brush.direction is None


@pytest.mark.parametrize("missing", ["operation", "shape", "center"])
def test_builder_requires_operation_shape_and_center(missing):
    b = BrushBuilder()
    if missing != "operation":
        b.operation(Operation.ADD)
    if missing != "shape":
        b.shape(Shape.SPHERE)
    if missing != "center":
        b.center(ORIGIN)
    with pytest.raises(ValidationError, match=missing):
        b.build()


@pytest.mark.parametrize("shape", list(Shape))
@pytest.mark.parametrize("field", ["size_a", "size_b", "size_c", "energy"])
def test_negative_scalars_rejected_for_every_shape(shape, field):
    b = builder_for(shape)
    getattr(b, field)(-0.5)
    with pytest.raises(ValidationError, match=field):
        b.build()


@pytest.mark.parametrize("shape", list(Shape))
def test_missing_center_rejected_for_every_shape(shape):
    b = builder_for(shape).center(None)
    with pytest.raises(ValidationError, match="center"):
        b.build()


@pytest.mark.parametrize("shape", [Shape.CAPSULE, Shape.WEDGE, Shape.BOX])
def test_oriented_shapes_require_direction(shape):
    with pytest.raises(ValidationError, match="direction"):
        builder_for(shape).direction(None).build()


def test_sphere_needs_no_direction_and_rejects_one():
    assert builder_for(Shape.SPHERE).build().direction is None
    with pytest.raises(ValidationError):
        builder_for(Shape.SPHERE).direction(FORWARD).build()


def test_zero_direction_rejected():
    with pytest.raises(ValidationError):
        builder_for(Shape.BOX).direction(Vertex(0.0, 0.0, 0.0)).build()


@pytest.mark.parametrize("value", [math.nan, math.inf])
def test_non_finite_values_rejected(value):
    with pytest.raises(ValidationError):
        builder_for(Shape.SPHERE).size_a(value).build()
    with pytest.raises(ValidationError):
        builder_for(Shape.SPHERE).center(Vertex(value, 0.0, 0.0)).build()


def test_integer_fields_are_range_checked():
    with pytest.raises(ValidationError):
        builder_for(Shape.SPHERE).material_id(2 ** 31).build()
    with pytest.raises(ValidationError):
        builder_for(Shape.SPHERE).seed(2 ** 63).build()
    assert builder_for(Shape.SPHERE).seed(-(2 ** 63)).build().seed == -(2 ** 63)


def test_direct_construction_is_validated_too():
    with pytest.raises(ValidationError):
        Brush(operation=Operation.SUB, shape=Shape.SPHERE, center=ORIGIN, size_a=-1.0)
    with pytest.raises(ValidationError):
        Brush(operation=9, shape=Shape.SPHERE, center=ORIGIN)


def test_validation_error_is_a_value_error():
    assert issubclass(ValidationError, ValueError)


def test_brush_is_immutable():
    brush = Brush.sphere(Operation.SUB, ORIGIN, 1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        brush.size_a = 2.0


def test_factories_fill_shape_parameters():
    capsule = Brush.capsule(Operation.ADD, ORIGIN, FORWARD, half_length=2.0, radius=0.5, energy=3.0, material_id=2)
    assert (capsule.shape, capsule.size_a, capsule.size_b) == (Shape.CAPSULE, 0.5, 2.0)
    assert capsule.operation == Operation.ADD
    assert capsule.material_id == 2

    wedge = Brush.wedge(Operation.SUB, ORIGIN, FORWARD, base_radius=0.75, length=1.5)
    assert (wedge.shape, wedge.size_a, wedge.size_b) == (Shape.WEDGE, 0.75, 1.5)

    box = Brush.box(Operation.SUB, ORIGIN, FORWARD, 1.0, 2.0, 3.0, energy=1.0)
    assert (box.size_a, box.size_b, box.size_c) == (1.0, 2.0, 3.0)
    assert box.bounding_radius == pytest.approx(math.sqrt(14.0))


def test_equality_is_field_exact():
    a = Brush.sphere(Operation.SUB, ORIGIN, 1.0, energy=2.0, material_id=1, seed=42)
    b = Brush.sphere(Operation.SUB, Vertex(0.0, 0.0, 0.0), 1.0, energy=2.0, material_id=1, seed=42)
    c = Brush.sphere(Operation.SUB, ORIGIN, 1.0, energy=2.0, material_id=1, seed=43)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c


def test_with_energy_returns_validated_copy():
    brush = Brush.sphere(Operation.SUB, ORIGIN, 1.0, energy=2.0)
    stronger = brush.with_energy(5.0)
    assert stronger.energy == 5.0
    assert brush.energy == 2.0
    with pytest.raises(ValidationError):
        brush.with_energy(-1.0)


class TestWireFormat:
    def test_layout(self):
        brush = Brush.wedge(Operation.SUB, Vertex(1.0, 2.0, 3.0), FORWARD, 0.75, 1.5, energy=10.0,
                            material_id=7, seed=-5)
        data = brush.to_bytes()
        assert len(data) == WIRE_FORMAT.size == 95
        assert data[0] == Operation.SUB
        assert data[1] == Shape.WEDGE
        assert data[26] == 1  # direction flag after op, shape and 3 doubles
        assert data[-12:-8] == (7).to_bytes(4, "big", signed=True)
        assert data[-8:] == (-5).to_bytes(8, "big", signed=True)

    def test_decode_restores_identical_brush(self):
        box = Brush.box(Operation.ADD, Vertex(-1.5, 0.25, 8.0), Vertex(0.0, 0.0, 2.0), 1.0, 2.0, 3.0,
                        energy=4.5, material_id=3, seed=2 ** 40)
        assert Brush.from_bytes(box.to_bytes()) == box

        sphere = Brush.sphere(Operation.SUB, ORIGIN, 2.0)
        data = sphere.to_bytes()
        assert data[26] == 0
        assert Brush.from_bytes(data).direction is None

    def test_decode_rejects_bad_payloads(self):
        with pytest.raises(ValidationError):
            Brush.from_bytes(b"\x00" * 10)

        bad_op = WIRE_FORMAT.pack(7, 0, 0.0, 0.0, 0.0, 0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0, 0)
        with pytest.raises(ValidationError):
            Brush.from_bytes(bad_op)

        negative = WIRE_FORMAT.pack(1, 0, 0.0, 0.0, 0.0, 0, 0.0, 0.0, 0.0, -1.0, 0.0, 0.0, 0.0, 0, 0)
        with pytest.raises(ValidationError):
            Brush.from_bytes(negative)

        capsule_without_direction = WIRE_FORMAT.pack(1, 1, 0.0, 0.0, 0.0, 0, 1.0, 0.0, 0.0, 1.0, 1.0, 0.0, 0.0, 0, 0)
        with pytest.raises(ValidationError):
            Brush.from_bytes(capsule_without_direction)

    def test_dict_form(self):
        brush = Brush.capsule(Operation.SUB, ORIGIN, FORWARD, 1.0, 0.5, energy=2.0, material_id=2, seed=9)
        data = brush.to_dict()
        assert data["operation"] == "SUB"
        assert data["shape"] == "CAPSULE"
        assert Brush.from_dict(data) == brush

        with pytest.raises(ValidationError):
            Brush.from_dict({"shape": "SPHERE"})

    @pytest.mark.parametrize("center", [[1.0, 2.0], [1.0, 2.0, 3.0, 4.0], "abc", "123", ["x", 0.0, 0.0], 5.0, None])
    def test_dict_form_rejects_malformed_centers(self, center):
        data = Brush.sphere(Operation.SUB, ORIGIN, 1.0).to_dict()
        data["center"] = center
        with pytest.raises(ValidationError):
            Brush.from_dict(data)

    @pytest.mark.parametrize("direction", [[1.0, 0.0], "abc", [1.0, "y", 0.0]])
    def test_dict_form_rejects_malformed_directions(self, direction):
        data = Brush.box(Operation.SUB, ORIGIN, FORWARD, 1.0, 1.0, 1.0).to_dict()
        data["direction"] = direction
        with pytest.raises(ValidationError):
            Brush.from_dict(data)


def test_non_numeric_vertices_rejected_on_direct_construction():
    with pytest.raises(ValidationError, match="center"):
        Brush(operation=Operation.SUB, shape=Shape.SPHERE, center=Vertex("a", "b", "c"))
    with pytest.raises(ValidationError, match="direction"):
        Brush(operation=Operation.SUB, shape=Shape.BOX, center=ORIGIN, direction=Vertex(None, 0.0, 0.0))
    with pytest.raises(ValidationError, match="direction"):
        builder_for(Shape.CAPSULE).direction(Vertex(math.nan, 1.0, 0.0)).build()


def test_integer_coordinates_are_accepted():
    brush = Brush.sphere(Operation.SUB, Vertex(1, 2, 3), 1.0)
    assert brush.center == Vertex(1.0, 2.0, 3.0)
