"""
N-Body Planet Simulation
========================

Planets in a 2D plane under direct pairwise gravity.

Controls:
    - W/A/S/D: Pan
    - I/O: Zoom out/in
    - Mouse wheel: Zoom
    - Left click: Spawn a planet at the cursor
    - SPACE: Pause/Resume simulation
    - H: Toggle help text
    - ESC: Quit
"""

from config import planets as config
from planets.logging_config import setup_logging


def main():
    setup_logging(config.LOGGING["level"], config.LOGGING["file"])

    # pygame/OpenGL are only needed for the window
    from core import PlanetApplication

    app = PlanetApplication()
    app.run()


if __name__ == "__main__":
    main()
