# sidescroller/game/draw.py
"""
Screen-space draw commands.

Entities describe themselves as a list of DrawCommand values; the pygame
Painter is the only thing that turns them into pixels, so the
simulation runs headless.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

Color = Tuple[int, ...]
Point = Tuple[float, float]


class Shape(str, Enum):
    RECT = "rect"
    CIRCLE = "circle"
    POLYGON = "polygon"
    LINE = "line"
    ARC = "arc"


@dataclass(frozen=True)
class DrawCommand:
    """
    One primitive in screen space.
    - RECT: (x, y, w, h), optionally rotated by `rotation` radians about its centre
    - CIRCLE: centre (x, y) and `radius`
    - POLYGON / LINE: `points` (a LINE uses the first two)
    - ARC: bounding box (x, y, w, h) and [start_angle, stop_angle] (pygame convention, y up)
    `width` = 0 means filled, > 0 is an outline thickness.
    """
    shape: Shape
    color: Color
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    radius: float = 0.0
    points: Tuple[Point, ...] = ()
    rotation: float = 0.0
    width: int = 0
    start_angle: float = 0.0
    stop_angle: float = 0.0

    def corners(self) -> Tuple[Point, ...]:
        """Rect corners after rotation (clockwise from top-left)."""
        cx, cy = self.x + self.w / 2, self.y + self.h / 2
        hw, hh = self.w / 2, self.h / 2
        c, s = math.cos(self.rotation), math.sin(self.rotation)
        out = []
        for dx, dy in ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)):
            out.append((cx + dx * c - dy * s, cy + dx * s + dy * c))
        return tuple(out)


def rect(color: Color, x: float, y: float, w: float, h: float,
         rotation: float = 0.0, width: int = 0) -> DrawCommand:
    return DrawCommand(Shape.RECT, color, x=x, y=y, w=w, h=h, rotation=rotation, width=width)


def circle(color: Color, cx: float, cy: float, radius: float, width: int = 0) -> DrawCommand:
    return DrawCommand(Shape.CIRCLE, color, x=cx, y=cy, radius=radius, width=width)


def polygon(color: Color, points: Sequence[Point], width: int = 0) -> DrawCommand:
    return DrawCommand(Shape.POLYGON, color, points=tuple(points), width=width)


def line(color: Color, a: Point, b: Point, width: int = 1) -> DrawCommand:
    return DrawCommand(Shape.LINE, color, points=(a, b), width=width)


def arc(color: Color, cx: float, cy: float, radius: float,
        start: float, stop: float, width: int = 2) -> DrawCommand:
    return DrawCommand(Shape.ARC, color, x=cx - radius, y=cy - radius,
                       w=2 * radius, h=2 * radius, start_angle=start,
                       stop_angle=stop, width=width)


def rotate_points(points: Sequence[Point], angle: float, cx: float, cy: float) -> Tuple[Point, ...]:
    """Rotate local points (around origin) by angle and translate them to (cx, cy)."""
    c, s = math.cos(angle), math.sin(angle)
    return tuple((cx + px * c - py * s, cy + px * s + py * c) for px, py in points)
