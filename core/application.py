"""Main application class that ties the planet pool to the window."""

import logging

import pygame
from pygame.locals import *
from OpenGL.GL import *

from config import planets as config
from .camera import Camera2D
from .input_handler import InputHandler
from rendering import PlanetRenderer, TextRenderer
from planets import Integrator, PlanetPool, PoolFullError, StepResult, UnresolvedCollisionError
from planets.physics import warmup
from planets.presets import initial_specs, populate, spawn_spec

logger = logging.getLogger("planets.app")


class PlanetApplication:
    """Main application managing the frame loop and rendering."""

    def __init__(self):
        pygame.init()
        self.screen_size = (config.WINDOW["width"], config.WINDOW["height"])
        pygame.display.set_mode(self.screen_size, DOUBLEBUF | OPENGL)
        pygame.display.set_caption(config.WINDOW["title"])

        # Core components
        self.camera = Camera2D()
        self.input_handler = InputHandler(self.camera)

        # Rendering components
        self.planet_renderer = PlanetRenderer()
        self.text_renderer = TextRenderer()
        self.label_renderer = TextRenderer(font_size=15)

        # Simulation
        logger.info("Compiling physics kernels...")
        warmup()
        self.pool = PlanetPool(config.SIMULATION["max_planets"])
        centre = (self.screen_size[0] / 2, self.screen_size[1] / 2)
        populate(self.pool, initial_specs(centre))
        self.integrator = Integrator()
        self.last_result = StepResult()

        # State
        self.clock = pygame.time.Clock()
        self.running = True
        self.fps = 0
        self.paused = False
        self.show_help = True

        self._setup_gl()
        logger.info("Ready with %d planets (%s)", len(self.pool), self.integrator)

    def _setup_gl(self):
        """Initialize OpenGL settings."""
        glClearColor(*config.COLORS["background"])
        glDisable(GL_DEPTH_TEST)

    def _spawn_at(self, screen_pos):
        world = self.camera.screen_to_world(*screen_pos)
        try:
            self.pool.insert(spawn_spec((world[0], world[1])))
        except PoolFullError:
            # Already logged by the pool, the click is dropped
            return

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == KEYDOWN and event.key == K_SPACE:
                self.paused = not self.paused
                logger.info("%s", "Paused" if self.paused else "Running")
            elif event.type == KEYDOWN and event.key == K_h:
                self.show_help = not self.show_help
            elif event.type == MOUSEBUTTONDOWN and event.button == 1:
                self._spawn_at(event.pos)
            elif not self.input_handler.handle_event(event):
                self.running = False

    def _update(self):
        """Advance the camera and, unless paused, the simulation by one tick."""
        self.input_handler.handle_continuous_input()

        if self.paused:
            return
        try:
            self.last_result = self.integrator.step(self.pool)
        except UnresolvedCollisionError as e:
            logger.error("%s", e)
            self.paused = True

    def _render(self):
        """Render the scene."""
        glClear(GL_COLOR_BUFFER_BIT)
        self.camera.apply(self.screen_size)

        drawables = list(self.pool.drawables())
        self.planet_renderer.draw(drawables)

        for planet in drawables:
            sx, sy = self.camera.world_to_screen(*planet.position)
            self.label_renderer.draw_text(planet.name, sx, sy, self.screen_size,
                                          color=config.COLORS["label"])

        # Draw HUD
        status = "PAUSED" if self.paused else "RUNNING"
        lines = [
            f"FPS: {self.fps:.0f}  |  Planets: {len(self.pool)}/{self.pool.max_planets}  |  {status}",
            f"Maximum allowed planets: {self.pool.max_planets}",
            f"Total allocated pool memory: {self.pool.footprint_bytes} Bytes",
        ]
        if self.last_result.degenerate_pairs or self.last_result.collisions:
            lines.append(
                f"Coincident pairs: {len(self.last_result.degenerate_pairs)}  |  "
                f"Collisions: {len(self.last_result.collisions)}"
            )
        if self.show_help:
            lines.append("WASD: Pan | I/O: Zoom | SPACE: Pause | Click: Spawn | H: Toggle help")

        for row, text in enumerate(lines):
            self.text_renderer.draw_text(text, 10, 5 + row * 20, self.screen_size,
                                         color=config.COLORS["hud"])

        pygame.display.flip()

    def run(self):
        """Main application loop."""
        try:
            while self.running:
                self.clock.tick(config.WINDOW["target_fps"])
                self.fps = self.clock.get_fps()

                self._handle_events()
                self._update()
                self._render()
        finally:
            self.pool.close()
            pygame.quit()
            logger.info("Shutdown complete")
