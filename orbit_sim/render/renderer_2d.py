"""2D renderer using matplotlib."""

from typing import Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from orbit_sim.physics.bodies import System

MIN_PLANET_PIXELS = 0.5


def scale_planet(radius: float, scale: float, fake: bool) -> float:
    """On-screen radius in pixels for a body of ``radius`` metres.

    Args:
        radius: Physical radius
        scale: Metres per pixel
        fake: Compress sizes so small bodies stay visible next to the Sun

    Returns:
        Radius in pixels, never below MIN_PLANET_PIXELS
    """
    if fake:
        pixels = 10.0 * (radius / scale) ** 0.3
    else:
        pixels = radius / scale
    return max(pixels, MIN_PLANET_PIXELS)


def hex_color(color: int) -> str:
    """0xRRGGBB -> '#rrggbb'"""
    return f"#{int(color) & 0xFFFFFF:06x}"


class Renderer2D:
    """2D renderer for System snapshots using matplotlib.

    The axes are measured in screen pixels: a body at distance ``d`` metres
    from the view centre is drawn ``d / distance_scale`` pixels away.
    """

    def __init__(
        self,
        figsize: Tuple[int, int] = (10, 10),
        dpi: int = 100,
        distance_scale: float = 1e10,
        planet_scale: float = 1.0,
        fake_planet_scale: bool = True,
        show_names: bool = False,
    ):
        """Initialize 2D renderer.

        Args:
            figsize: Figure size (width, height) in inches
            dpi: Dots per inch
            distance_scale: Metres per pixel
            planet_scale: Extra magnification applied to body radii
            fake_planet_scale: Use compressed body sizes
            show_names: Label each body with its name
        """
        self.figsize = figsize
        self.dpi = dpi
        self.distance_scale = distance_scale
        self.planet_scale = planet_scale
        self.fake_planet_scale = fake_planet_scale
        self.show_names = show_names

        self.fig: Optional[Figure] = None
        self.ax = None
        self.scatter = None
        self.labels = []
        self.initialized = False

    @property
    def half_extent(self) -> Tuple[float, float]:
        """Half the visible width and height, in pixels."""
        return self.figsize[0] * self.dpi / 2.0, self.figsize[1] * self.dpi / 2.0

    def _initialize(self):
        """Initialize plot if not already done."""
        if not self.initialized:
            self.fig, self.ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
            self.fig.subplots_adjust(left=0, right=1, bottom=0, top=0.95)
            self.fig.patch.set_facecolor('black')
            self.ax.set_facecolor('black')
            self.ax.set_aspect('equal')
            self.ax.set_xticks([])
            self.ax.set_yticks([])
            half_w, half_h = self.half_extent
            self.ax.set_xlim(-half_w, half_w)
            self.ax.set_ylim(-half_h, half_h)
            self.initialized = True

    def to_screen(self, positions: np.ndarray, center: Optional[Sequence[float]] = None) -> np.ndarray:
        """Project positions (n, 2) or (n, 3) onto the screen plane, in pixels."""
        pos_2d = np.asarray(positions, dtype=np.float64)[:, :2]
        if center is not None:
            pos_2d = pos_2d - np.asarray(center, dtype=np.float64)[:2]
        return pos_2d / self.distance_scale

    def marker_sizes(self, radii: np.ndarray) -> np.ndarray:
        """Scatter marker areas (points^2) for the given physical radii."""
        scale = self.distance_scale / self.planet_scale
        pixels = np.array([scale_planet(r, scale, self.fake_planet_scale) for r in radii])
        points = pixels * 72.0 / self.dpi
        return (2.0 * points) ** 2

    def render(self, system: System, center: Optional[Sequence[float]] = None, status: str = ""):
        """Render one snapshot.

        Args:
            system: Snapshot to draw
            center: World position (metres) at the middle of the screen
            status: Title text
        """
        self._initialize()

        offsets = self.to_screen(system.positions, center)
        sizes = self.marker_sizes([body.radius for body in system.roster])

        # Fast path: same bodies as last frame, only move them
        if self.scatter is not None and len(self.scatter.get_offsets()) == system.n_bodies:
            self.scatter.set_offsets(offsets)
            self.scatter.set_sizes(sizes)
        else:
            if self.scatter is not None:
                self.scatter.remove()
            self.scatter = self.ax.scatter(
                offsets[:, 0], offsets[:, 1],
                s=sizes,
                c=[hex_color(body.color) for body in system.roster],
                edgecolors=[hex_color(body.outline) for body in system.roster],
                linewidths=1.0,
                zorder=2,
            )

        for label in self.labels:
            label.remove()
        self.labels = []
        if self.show_names:
            for body, (x, y) in zip(system.roster, offsets):
                self.labels.append(self.ax.text(x, y, f"  {body.name}", color='white', fontsize=7))

        self.ax.set_title(status, color='white', fontsize=10)

    def capture_frame(self) -> np.ndarray:
        """Capture current frame as image array."""
        if self.fig is None:
            raise RuntimeError("Renderer not initialized. Call render() first.")

        self.fig.canvas.draw()
        buf = np.asarray(self.fig.canvas.buffer_rgba())
        return buf[:, :, :3].copy()

    def close(self):
        """Close the renderer."""
        if self.fig is not None:
            plt.close(self.fig)
            self.fig = None
            self.ax = None
            self.scatter = None
            self.labels = []
            self.initialized = False
