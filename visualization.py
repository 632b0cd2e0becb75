# visualization.py
"""
Handles the visualization of the particle gas using Pygame.

The window is split into the particle area on top and the entropy graph
strip below it. Pointer input over the particle area is forwarded to the
Simulation as spawn requests.
"""
import logging
import numpy as np
import pygame
from typing import Dict, Any, List, Optional, Sequence, Tuple

from constants import (
    BACKGROUND_COLOR, DEFAULT_GRAPH_HEIGHT, DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH, FPS, GRAPH_BACKGROUND_COLOR, GRAPH_BOTTOM_PADDING,
    GRAPH_FONT_SIZE, GRAPH_GRID_COLOR, GRAPH_GRID_COLS, GRAPH_GRID_ROWS,
    GRAPH_LINE_COLOR, GRAPH_LINE_WIDTH, GRAPH_MAX_FILL, GRAPH_PADDING,
    GRAPH_TEXT_COLOR, PARTICLE_LIGHTNESS, PARTICLE_SATURATION
)

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[Dict[str, Any]] = None):
#     - Inputs:
#       - vis_params: "visualization" section of config.json with optional
#         "window_width", "window_height", "graph_height" and "fps".
#     - Side Effects: Initializes Pygame and opens a resizable window.
#
#   - draw(self, simulation: "Simulation") -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Handles Pygame events (spawn requests, resizes), then
#       renders particles and the entropy graph.


def history_polyline(values: Sequence[float], width: float, height: float) -> List[Tuple[float, float]]:
    """
    Maps normalized entropy values to graph coordinates.

    Points are spaced linearly across the full width, oldest on the left.
    A value of 1 is drawn just below the top edge.
    """
    points = len(values)
    if points == 0:
        return []
    step = width / (points - 1) if points > 1 else width
    return [
        (index * step, height - min(value, GRAPH_MAX_FILL) * height)
        for index, value in enumerate(values)
    ]


def hsl_color(hue: float) -> pygame.Color:
    """A particle colour with the given hue at the shared saturation and lightness."""
    color = pygame.Color(0, 0, 0)
    color.hsla = (hue % 360, PARTICLE_SATURATION, PARTICLE_LIGHTNESS, 100)
    return color


class Visualizer:
    """
    Renders the particle gas and its entropy history, and turns pointer
    input into spawn requests.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        width = int(vis_params.get('window_width', DEFAULT_WINDOW_WIDTH))
        height = int(vis_params.get('window_height', DEFAULT_WINDOW_HEIGHT))
        self.graph_height = int(vis_params.get('graph_height', DEFAULT_GRAPH_HEIGHT))
        self.fps = int(vis_params.get('fps', FPS))

        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("Entropy Gas")
        self.clock = pygame.time.Clock()
        self._layout(width, height)

        # Rendering-only attribute, one entry per particle index.
        self.rng = np.random.default_rng()
        self.colors: List[pygame.Color] = []

        try:
            self.font = pygame.font.SysFont("Arial", GRAPH_FONT_SIZE)
        except pygame.error:
            logging.warning("Arial font not found, falling back to the default font.")
            self.font = pygame.font.Font(None, GRAPH_FONT_SIZE + 4)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def _layout(self, width: int, height: int):
        """Splits the window into the particle area and the graph strip."""
        self.width = width
        self.sim_width = width
        self.sim_height = max(height - self.graph_height, 1)
        self.graph_surface = pygame.Surface((width, self.graph_height))

    def _colors_for(self, count: int) -> List[pygame.Color]:
        """Extends the colour list so every particle index has a colour."""
        while len(self.colors) < count:
            self.colors.append(hsl_color(self.rng.random() * 360))
        return self.colors

    def _handle_events(self, simulation: "Simulation") -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                self._layout(event.w, event.h)
                simulation.resize(self.sim_width, self.sim_height)

            # Touch input arrives here too, as synthesized mouse events.
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                if y < self.sim_height:
                    simulation.start_spawning(x, y)

            elif event.type == pygame.MOUSEMOTION and simulation.spawning:
                x, y = event.pos
                if y < self.sim_height:
                    simulation.move_spawning(x, y)
                else:
                    simulation.stop_spawning()

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                simulation.stop_spawning()

            elif event.type == pygame.WINDOWLEAVE:
                simulation.stop_spawning()
        return True

    def _draw_particles(self, simulation: "Simulation"):
        particles = simulation.particles
        colors = self._colors_for(particles.particle_count)
        for i in range(particles.particle_count):
            x, y = particles.positions[i]
            pygame.draw.circle(self.screen, colors[i], (x, y), particles.radii[i])

    def _draw_graph(self, simulation: "Simulation"):
        surface = self.graph_surface
        width, height = surface.get_size()
        surface.fill(GRAPH_BACKGROUND_COLOR)

        row_height = height / GRAPH_GRID_ROWS
        for i in range(1, GRAPH_GRID_ROWS):
            y = i * row_height
            pygame.draw.line(surface, GRAPH_GRID_COLOR, (0, y), (width, y))
        col_width = width / GRAPH_GRID_COLS
        for i in range(1, GRAPH_GRID_COLS):
            x = i * col_width
            pygame.draw.line(surface, GRAPH_GRID_COLOR, (x, 0), (x, height))

        history = simulation.history
        if len(history) > 1:
            points = history_polyline(history.series('normalized'), width, height)
            pygame.draw.lines(surface, GRAPH_LINE_COLOR, False, points, GRAPH_LINE_WIDTH)

        label_y = height - GRAPH_BOTTOM_PADDING
        title = self.font.render("Specific Entropy", True, GRAPH_TEXT_COLOR)
        surface.blit(title, title.get_rect(bottomleft=(GRAPH_PADDING, label_y)))

        latest = history.latest
        if latest is not None:
            ratio = self.font.render(f"H/Hmax: {latest.normalized * 100:.0f}%", True, GRAPH_TEXT_COLOR)
            surface.blit(ratio, ratio.get_rect(bottomright=(width - GRAPH_PADDING, label_y)))
            values = self.font.render(f"{latest.entropy:.3f} / {latest.max_entropy:.2f}", True, GRAPH_TEXT_COLOR)
            surface.blit(values, values.get_rect(bottomright=(width - GRAPH_PADDING, label_y + 20)))

        self.screen.blit(surface, (0, self.sim_height))

    def draw(self, simulation: "Simulation") -> bool:
        """
        Handles events, then draws the particles and the entropy graph.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        if not self._handle_events(simulation):
            return False

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_particles(simulation)
        self._draw_graph(simulation)

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
