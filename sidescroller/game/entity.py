# sidescroller/game/entity.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Tuple
import pygame

from .draw import DrawCommand


class Entity(ABC):
    """
    Shared shape of everything that lives in the level.

    Concrete entities are dataclasses that declare these fields themselves;
    the base only carries behaviour. It cannot be instantiated, and neither
    can a variant that forgets to provide update() or render().
    """
    x: float
    y: float
    width: float
    height: float
    color: Tuple[int, int, int]
    active: bool

    @abstractmethod
    def update(self, *args) -> None:
        """Advance one tick."""

    @abstractmethod
    def render(self, camera_x: float) -> List[DrawCommand]:
        """Describe the entity in screen space. Must not mutate state."""

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))

    def collides_with(self, other: "Entity") -> bool:
        return overlaps(self, other)


def overlaps(a: Entity, b: Entity) -> bool:
    """AABB overlap of two active entities; touching edges do not count."""
    return (
        a.active and b.active
        and a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )
