"""Geometry value types — sizes, points, rects, and 2D affine transforms.

All coordinates are in pixels of some image space with the origin at the
top-left corner and the y axis pointing down. Positive rotation angles
turn clockwise on screen, the same convention as CSS ``rotate()`` and the
canvas 2D context.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from pydantic import BaseModel, Field


class Size(BaseModel):
    """Width/height pair (rendered image, container, design)."""

    model_config = {"frozen": True}

    width: float = Field(ge=0)
    height: float = Field(ge=0)

    @property
    def area(self) -> float:
        return self.width * self.height


class Point(BaseModel):
    """A 2D point."""

    model_config = {"frozen": True}

    x: float
    y: float


class Rect(BaseModel):
    """Axis-aligned rectangle, optionally carrying a rotation about its center.

    The rotation is informational: ``x``/``y``/``width``/``height`` always
    describe the unrotated box.
    """

    model_config = {"frozen": True}

    x: float
    y: float
    width: float
    height: float
    rotation_degrees: float = 0.0

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    @property
    def top_left(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def size(self) -> Size:
        return Size(width=max(self.width, 0.0), height=max(self.height, 0.0))

    def contains(self, other: Rect, *, tolerance: float = 1e-9) -> bool:
        """Whether *other* lies entirely inside this rect."""
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


def bounding_rect(points: Iterable[Point]) -> Rect:
    """Smallest axis-aligned rect containing every point."""
    pts = list(points)
    if not pts:
        return Rect(x=0.0, y=0.0, width=0.0, height=0.0)
    min_x = min(p.x for p in pts)
    min_y = min(p.y for p in pts)
    max_x = max(p.x for p in pts)
    max_y = max(p.y for p in pts)
    return Rect(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


class AffineTransform(BaseModel):
    """2D affine matrix ``[[a, c, e], [b, d, f], [0, 0, 1]]``.

    Same component layout as the canvas ``setTransform(a, b, c, d, e, f)``
    call, so a renderer can pass the six values through unchanged.
    Composition reads left to right as the order the operations are pushed
    on a transform stack: ``t1 @ t2`` applies ``t2`` to a point first.
    """

    model_config = {"frozen": True}

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def translation(cls, dx: float, dy: float) -> AffineTransform:
        return cls(e=dx, f=dy)

    @classmethod
    def rotation(cls, degrees: float) -> AffineTransform:
        """Clockwise rotation (y-down screen space) about the origin."""
        radians = math.radians(degrees)
        cos = math.cos(radians)
        sin = math.sin(radians)
        return cls(a=cos, b=sin, c=-sin, d=cos)

    @classmethod
    def rotation_about(cls, degrees: float, pivot: Point) -> AffineTransform:
        """Rotate about *pivot*: translate, rotate, translate back."""
        return (
            cls.translation(pivot.x, pivot.y)
            @ cls.rotation(degrees)
            @ cls.translation(-pivot.x, -pivot.y)
        )

    def __matmul__(self, other: AffineTransform) -> AffineTransform:
        return AffineTransform(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def apply(self, point: Point) -> Point:
        return Point(
            x=self.a * point.x + self.c * point.y + self.e,
            y=self.b * point.x + self.d * point.y + self.f,
        )

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)
