"""2D camera for panning and zooming over the simulation plane."""

import numpy as np
from OpenGL.GL import *

from config import planets as config


class Camera2D:
    """
    Screen-space camera: ``screen = (world - target) * zoom``.

    Screen coordinates have the origin at the top-left corner with y
    pointing down, matching pygame mouse positions.
    """

    def __init__(self):
        self.target = np.array([0.0, 0.0])
        self.zoom = float(config.CAMERA["initial_zoom"])

    def pan(self, dx: float, dy: float):
        """Move the view by the given amount in world units."""
        self.target += (dx, dy)

    def zoom_by(self, delta: float):
        self.zoom = max(
            config.CAMERA["min_zoom"],
            min(config.CAMERA["max_zoom"], self.zoom + delta)
        )

    def screen_to_world(self, sx: float, sy: float) -> np.ndarray:
        return np.array([sx, sy], dtype=np.float64) / self.zoom + self.target

    def world_to_screen(self, wx: float, wy: float) -> np.ndarray:
        return (np.array([wx, wy], dtype=np.float64) - self.target) * self.zoom

    def apply(self, screen_size: tuple):
        """Load the projection and modelview matrices for world-space drawing."""
        width, height = screen_size
        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        glOrtho(0, width, height, 0, -1, 1)

        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()
        glScalef(self.zoom, self.zoom, 1.0)
        glTranslatef(-self.target[0], -self.target[1], 0.0)
