"""
Brush: Declarative Edit Intent
==============================
A Brush describes one edit of the terrain (shape, operation, geometry, cutting
energy, material and seed). The World interprets it; the Brush itself never
touches the mesh.

Brushes are small frozen value objects so they can be shared between threads
and replicated over the network. The wire form is a fixed big-endian layout:

    operation (u8) | shape (u8) | center (3 x f64) | direction flag (u8) |
    direction (3 x f64) | size_a, size_b, size_c, energy (4 x f64) |
    material_id (i32) | seed (i64)

Classes:
    Operation: ADD or SUB.
    Shape: Primitive shape of the influence volume.
    Brush: The validated, immutable descriptor.
    BrushBuilder: Fluent builder that defaults every scalar to zero.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional, Dict, Any
import logging
import math
import struct

from terrainedit.core.errors import ValidationError
from terrainedit.geometry.primitives import Vertex

logger = logging.getLogger(__name__)

WIRE_FORMAT = struct.Struct(">BB3dB3d4diq")

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1


class Operation(IntEnum):
    """Add material to, or subtract material from, the terrain."""
    ADD = 0
    SUB = 1


class Shape(IntEnum):
    """Primitive shape of the edit volume. Codes are part of the wire format."""
    SPHERE = 0
    CAPSULE = 1
    WEDGE = 2
    BOX = 3


ORIENTED_SHAPES = frozenset({Shape.CAPSULE, Shape.WEDGE, Shape.BOX})


def _non_negative(value: Any, name: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ValidationError(f"{name} < 0 ({value})")
    return value


def _vertex(value: Any, name: str) -> Vertex:
    """Exactly three finite coordinates, from a Vertex or a sequence."""
    if isinstance(value, Vertex):
        value = (value.x, value.y, value.z)
    elif isinstance(value, (str, bytes)):
        raise ValidationError(f"{name} must be a vector, got {value!r}")
    try:
        coords = [float(c) for c in value]
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must hold numbers, got {value!r}") from None
    if len(coords) != 3:
        raise ValidationError(f"{name} needs 3 coordinates, got {len(coords)}")
    if not all(math.isfinite(c) for c in coords):
        raise ValidationError(f"{name} must be finite, got {value}")
    return Vertex(*coords)


def _bounded_int(value: Any, name: str, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise ValidationError(f"{name} out of range [{low}, {high}]: {value}")
    return value


@dataclass(frozen=True)
class Brush:
    """
    Immutable edit intent. All invariants are checked on construction, so a
    Brush that exists is always valid.

    Size parameters by shape:
        SPHERE:  size_a = radius
        CAPSULE: size_a = radius, size_b = half-length along direction
        WEDGE:   size_a = base radius, size_b = length along direction
        BOX:     size_a, size_b, size_c = half-extents along
                 (direction, side, up) of the box frame
    """
    operation: Operation
    shape: Shape
    center: Vertex
    direction: Optional[Vertex] = None
    size_a: float = 0.0
    size_b: float = 0.0
    size_c: float = 0.0
    energy: float = 0.0
    material_id: int = 0
    seed: int = 0

    def __post_init__(self) -> None:
        # frozen dataclass: normalise field types through object.__setattr__
        if self.operation is None:
            raise ValidationError("operation is required")
        if self.shape is None:
            raise ValidationError("shape is required")
        try:
            object.__setattr__(self, "operation", Operation(self.operation))
            object.__setattr__(self, "shape", Shape(self.shape))
        except ValueError as e:
            raise ValidationError(str(e)) from None

        if not isinstance(self.center, Vertex):
            raise ValidationError("center is required")
        object.__setattr__(self, "center", _vertex(self.center, "center"))

        if self.shape in ORIENTED_SHAPES:
            if not isinstance(self.direction, Vertex):
                raise ValidationError(f"direction is required for {self.shape.name}")
            object.__setattr__(self, "direction", _vertex(self.direction, "direction"))
            if self.direction.magnitude == 0.0:
                raise ValidationError(f"direction must be non-zero, got {self.direction}")
        elif self.direction is not None:
            raise ValidationError("direction must be absent for SPHERE")

        for name in ("size_a", "size_b", "size_c", "energy"):
            object.__setattr__(self, name, _non_negative(getattr(self, name), name))

        _bounded_int(self.material_id, "material_id", INT32_MIN, INT32_MAX)
        _bounded_int(self.seed, "seed", INT64_MIN, INT64_MAX)

    # ---------------------------------------------------------------
    # Convenience factories
    # ---------------------------------------------------------------

    @classmethod
    def sphere(cls, operation: Operation, center: Vertex, radius: float,
               energy: float = 0.0, material_id: int = 0, seed: int = 0) -> Brush:
        """Sphere subtract/add with radius and energy at center."""
        return (BrushBuilder()
                .operation(operation).shape(Shape.SPHERE)
                .center(center)
                .size_a(radius)
                .energy(energy).material_id(material_id).seed(seed)
                .build())

    @classmethod
    def capsule(cls, operation: Operation, center: Vertex, direction: Vertex, half_length: float,
                radius: float, energy: float = 0.0, material_id: int = 0, seed: int = 0) -> Brush:
        """Capsule along direction (half_length, radius)."""
        return (BrushBuilder()
                .operation(operation).shape(Shape.CAPSULE)
                .center(center).direction(direction)
                .size_a(radius).size_b(half_length)
                .energy(energy).material_id(material_id).seed(seed)
                .build())

    @classmethod
    def wedge(cls, operation: Operation, center: Vertex, direction: Vertex, base_radius: float,
              length: float, energy: float = 0.0, material_id: int = 0, seed: int = 0) -> Brush:
        """Wedge tapering from base_radius at center to a point at center + direction * length."""
        return (BrushBuilder()
                .operation(operation).shape(Shape.WEDGE)
                .center(center).direction(direction)
                .size_a(base_radius).size_b(length)
                .energy(energy).material_id(material_id).seed(seed)
                .build())

    @classmethod
    def box(cls, operation: Operation, center: Vertex, direction: Vertex, hx: float, hy: float,
            hz: float, energy: float = 0.0, material_id: int = 0, seed: int = 0) -> Brush:
        """Box with half-extents (hx, hy, hz) oriented by direction."""
        return (BrushBuilder()
                .operation(operation).shape(Shape.BOX)
                .center(center).direction(direction)
                .size_a(hx).size_b(hy).size_c(hz)
                .energy(energy).material_id(material_id).seed(seed)
                .build())

    # ---------------------------------------------------------------
    # Derived values
    # ---------------------------------------------------------------

    @property
    def unit_direction(self) -> Optional[Vertex]:
        if self.direction is None:
            return None
        return self.direction.normalize()

    @property
    def bounding_radius(self) -> float:
        """Radius of a sphere around ``center`` enclosing the whole influence volume."""
        if self.shape == Shape.SPHERE:
            return self.size_a
        if self.shape == Shape.CAPSULE:
            return self.size_a + self.size_b
        if self.shape == Shape.WEDGE:
            return max(self.size_a, self.size_b)
        return math.sqrt(self.size_a ** 2 + self.size_b ** 2 + self.size_c ** 2)

    def with_energy(self, energy: float) -> Brush:
        """Copy of this brush with another energy (validated)."""
        return replace(self, energy=energy)

    # ---------------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------------

    def to_bytes(self) -> bytes:
        has_direction = self.direction is not None
        direction = self.direction if has_direction else Vertex(0.0, 0.0, 0.0)
        return WIRE_FORMAT.pack(
            int(self.operation), int(self.shape),
            self.center.x, self.center.y, self.center.z,
            1 if has_direction else 0,
            direction.x, direction.y, direction.z,
            self.size_a, self.size_b, self.size_c, self.energy,
            self.material_id, self.seed,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Brush:
        if len(data) != WIRE_FORMAT.size:
            raise ValidationError(f"Brush payload must be {WIRE_FORMAT.size} bytes, got {len(data)}")
        (op, shape, cx, cy, cz, flag, dx, dy, dz,
         size_a, size_b, size_c, energy, material_id, seed) = WIRE_FORMAT.unpack(data)
        if flag not in (0, 1):
            raise ValidationError(f"Invalid direction flag: {flag}")
        return cls(
            operation=op,
            shape=shape,
            center=Vertex(cx, cy, cz),
            direction=Vertex(dx, dy, dz) if flag else None,
            size_a=size_a, size_b=size_b, size_c=size_c, energy=energy,
            material_id=material_id, seed=seed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation.name,
            "shape": self.shape.name,
            "center": list(self.center),
            "direction": list(self.direction) if self.direction is not None else None,
            "size_a": self.size_a,
            "size_b": self.size_b,
            "size_c": self.size_c,
            "energy": self.energy,
            "material_id": self.material_id,
            "seed": self.seed,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Brush:
        try:
            operation = Operation[data["operation"]]
            shape = Shape[data["shape"]]
            center = _vertex(data["center"], "center")
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Malformed brush data: {e}") from None
        direction = data.get("direction")
        return Brush(
            operation=operation,
            shape=shape,
            center=center,
            direction=_vertex(direction, "direction") if direction is not None else None,
            size_a=data.get("size_a", 0.0),
            size_b=data.get("size_b", 0.0),
            size_c=data.get("size_c", 0.0),
            energy=data.get("energy", 0.0),
            material_id=data.get("material_id", 0),
            seed=data.get("seed", 0),
        )


class BrushBuilder:
    """
    Fluent builder for readability at call sites. Scalars default to zero;
    operation, shape and center must be supplied before ``build``.
    """

    def __init__(self) -> None:
        self._operation: Optional[Operation] = None
        self._shape: Optional[Shape] = None
        self._center: Optional[Vertex] = None
        self._direction: Optional[Vertex] = None
        self._size_a = 0.0
        self._size_b = 0.0
        self._size_c = 0.0
        self._energy = 0.0
        self._material_id = 0
        self._seed = 0

    def operation(self, value: Operation) -> BrushBuilder:
        self._operation = value
        return self

    def shape(self, value: Shape) -> BrushBuilder:
        self._shape = value
        return self

    def center(self, value: Vertex) -> BrushBuilder:
        self._center = value
        return self

    def direction(self, value: Optional[Vertex]) -> BrushBuilder:
        self._direction = value
        return self

    def size_a(self, value: float) -> BrushBuilder:
        self._size_a = value
        return self

    def size_b(self, value: float) -> BrushBuilder:
        self._size_b = value
        return self

    def size_c(self, value: float) -> BrushBuilder:
        self._size_c = value
        return self

    def energy(self, value: float) -> BrushBuilder:
        self._energy = value
        return self

    def material_id(self, value: int) -> BrushBuilder:
        self._material_id = value
        return self

    def seed(self, value: int) -> BrushBuilder:
        self._seed = value
        return self

    def build(self) -> Brush:
        try:
            return Brush(
                operation=self._operation,
                shape=self._shape,
                center=self._center,
                direction=self._direction,
                size_a=self._size_a,
                size_b=self._size_b,
                size_c=self._size_c,
                energy=self._energy,
                material_id=self._material_id,
                seed=self._seed,
            )
        except ValidationError as e:
            logger.debug(f"Rejected brush: {e}")
            raise
