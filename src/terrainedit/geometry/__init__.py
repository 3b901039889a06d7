"""
The GEOMETRY layer contains the value types shared by every other layer.
It has NO knowledge of brushes, players or the world.
"""
from terrainedit.geometry.primitives import Vertex, Triangle

__all__ = ["Vertex", "Triangle"]
