"""
Explicit set representations.

Each class implements the support-function protocol in closed form or by
linear programming.
"""

from .abstract import (
    AbstractPolyhedron,
    AbstractPolytope,
    AbstractZonotope,
    AbstractHyperrectangle,
    AbstractSingleton,
)
from .empty_set import EmptySet
from .universe import Universe
from .singleton import Singleton, ZeroSet
from .hyperrectangle import Hyperrectangle, BallInf, Interval
from .balls import Ball1, Ball2
from .zonotope import Zonotope, LineSegment
from .halfspaces import HalfSpace, Hyperplane
from .hpolyhedron import HPolyhedron, HPolytope
from .polytopes import VPolytope, VPolygon

__all__ = [
    # Abstract kinds
    "AbstractPolyhedron",
    "AbstractPolytope",
    "AbstractZonotope",
    "AbstractHyperrectangle",
    "AbstractSingleton",
    # Trivial sets
    "EmptySet",
    "Universe",
    "Singleton",
    "ZeroSet",
    # Boxes and balls
    "Hyperrectangle",
    "BallInf",
    "Interval",
    "Ball1",
    "Ball2",
    # Zonotopes
    "Zonotope",
    "LineSegment",
    # Constraint representations
    "HalfSpace",
    "Hyperplane",
    "HPolyhedron",
    "HPolytope",
    # Vertex representations
    "VPolytope",
    "VPolygon",
]
