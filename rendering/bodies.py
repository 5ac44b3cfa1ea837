"""Filled-circle rendering for planets."""

import math
from typing import Iterable

from OpenGL.GL import *

from config import planets as config
from planets import DrawablePlanet


class PlanetRenderer:
    """Draws each planet as a triangle fan with ``diameter`` as its radius."""

    def __init__(self, segments: int = 50):
        self.color = config.COLORS["planet"]
        step = 2.0 * math.pi / segments
        self._unit_circle = [
            (math.cos(k * step), math.sin(k * step)) for k in range(segments + 1)
        ]

    def draw(self, planets: Iterable[DrawablePlanet]):
        glColor3f(*self.color)
        for planet in planets:
            cx, cy = planet.position
            r = planet.diameter
            glBegin(GL_TRIANGLE_FAN)
            glVertex2f(cx, cy)
            for ux, uy in self._unit_circle:
                glVertex2f(cx + r * ux, cy + r * uy)
            glEnd()
