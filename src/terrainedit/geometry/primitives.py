"""
Geometric Primitives for the terrain mesh and brushes.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vertex:
    """
    A point (or direction) in 3D space. Value type: two vertices with the same
    coordinates are the same vertex.
    """
    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Vertex) -> Vertex:
        return Vertex(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vertex) -> Vertex:
        return Vertex(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vertex:
        return Vertex(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vertex:
        if scalar == 0.0: raise ZeroDivisionError
        return Vertex(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vertex:
        return Vertex(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def normalize(self) -> Vertex:
        mag = self.magnitude
        if mag == 0.0: return Vertex(0.0, 0.0, 0.0)
        return self / mag

    def dot(self, other: Vertex) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vertex) -> Vertex:
        return Vertex(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def distance_to(self, other: Vertex) -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, coords: npt.ArrayLike) -> Vertex:
        x, y, z = np.asarray(coords, dtype=np.float64)
        return cls(float(x), float(y), float(z))


@dataclass(frozen=True)
class Triangle:
    """
    A flat triangular face. The winding a -> b -> c defines the outward side
    (right-hand rule), i.e. the side facing away from the material.
    """
    a: Vertex
    b: Vertex
    c: Vertex

    def __iter__(self) -> Iterator[Vertex]:
        return iter((self.a, self.b, self.c))

    @property
    def area_vector(self) -> Vertex:
        """Half the cross product of the edges: normal scaled by area."""
        return (self.b - self.a).cross(self.c - self.a) * 0.5

    @property
    def area(self) -> float:
        return self.area_vector.magnitude

    @property
    def normal(self) -> Vertex:
        return self.area_vector.normalize()

    @property
    def centroid(self) -> Vertex:
        return (self.a + self.b + self.c) / 3.0

    @property
    def bounds(self) -> tuple[Vertex, Vertex]:
        """Axis-aligned bounding box as (min corner, max corner)."""
        arr = self.to_array()
        return Vertex.from_array(arr.min(axis=0)), Vertex.from_array(arr.max(axis=0))

    def to_array(self) -> npt.NDArray[np.float64]:
        """Corner coordinates as a (3, 3) array, one row per corner."""
        return np.array([[v.x, v.y, v.z] for v in self], dtype=np.float64)

    @classmethod
    def from_array(cls, coords: npt.ArrayLike) -> Triangle:
        a, b, c = np.asarray(coords, dtype=np.float64).reshape(3, 3)
        return cls(Vertex.from_array(a), Vertex.from_array(b), Vertex.from_array(c))
