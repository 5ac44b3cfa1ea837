"""Rendering components for the planet simulation."""

from .bodies import PlanetRenderer
from .text import TextRenderer

__all__ = ["PlanetRenderer", "TextRenderer"]
