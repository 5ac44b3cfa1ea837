"""Input handling for camera pan and zoom."""

import pygame
from pygame.locals import *
from config import planets as config

from .camera import Camera2D


class InputHandler:
    """Handles keyboard and mouse-wheel input for the camera."""

    def __init__(self, camera: Camera2D):
        self.camera = camera

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        zoom_step = config.CAMERA["zoom_step"]

        if event.type == QUIT:
            return False
        elif event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            elif event.key == K_i:
                self.camera.zoom_by(-zoom_step)
            elif event.key == K_o:
                self.camera.zoom_by(zoom_step)
        elif event.type == MOUSEWHEEL:
            self.camera.zoom_by(event.y * zoom_step)

        return True

    def handle_continuous_input(self):
        """Pan while W/A/S/D are held (called once per frame)."""
        keys = pygame.key.get_pressed()
        speed = config.CAMERA["pan_speed"]

        if keys[K_w]:
            self.camera.pan(0, -speed)
        if keys[K_s]:
            self.camera.pan(0, speed)
        if keys[K_a]:
            self.camera.pan(-speed, 0)
        if keys[K_d]:
            self.camera.pan(speed, 0)
