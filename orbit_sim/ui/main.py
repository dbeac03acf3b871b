"""Interactive viewer using matplotlib."""

import argparse
from typing import Dict, Callable, Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from orbit_sim.errors import OrbitSimError
from orbit_sim.loader import load_system
from orbit_sim.physics.controller import SimulationController
from orbit_sim.render.renderer_2d import Renderer2D
from orbit_sim.utils.config import Config, load_config

SECONDS_PER_DAY = 86400.0

HELP_TEXT = """Keys:
  [ / ]      slow down / speed up
  Enter      pause and review history / resume from the reviewed snapshot
  ; / '      step the review cursor back / forward
  q / z      zoom in / out
  e / c      bigger / smaller planets
  x          toggle compressed planet sizes
  w a s d    pan
  space      stop following and re-centre
  <- / ->    follow the previous / next body
  `          reset view and speed"""


class OrbitViewer:
    """Keyboard-driven window around a SimulationController.

    View state (zoom, pan, followed body, planet sizing) is purely
    presentational and never touches the physics.
    """

    def __init__(self, controller: SimulationController, config: Optional[Config] = None,
                 renderer: Optional[Renderer2D] = None):
        self.controller = controller
        self.config = config or Config()
        self.renderer = renderer or Renderer2D(
            distance_scale=self.config.distance_scale,
            planet_scale=self.config.planet_scale,
            fake_planet_scale=self.config.fake_planet_scale,
        )
        self.animation: Optional[FuncAnimation] = None
        self.reset_view()

        self._keys: Dict[str, Callable[[], None]] = {
            '[': self.slow_down,
            ']': self.speed_up,
            'enter': self.toggle_review,
            ';': self.review_back,
            "'": self.review_forward,
            'q': self.zoom_in,
            'z': self.zoom_out,
            'e': self.grow_planets,
            'c': self.shrink_planets,
            'x': self.toggle_fake_scale,
            'w': lambda: self.pan(0.0, 1.0),
            'a': lambda: self.pan(-1.0, 0.0),
            's': lambda: self.pan(0.0, -1.0),
            'd': lambda: self.pan(1.0, 0.0),
            ' ': self.reset_focus,
            'left': lambda: self.cycle_focus(-1),
            'right': lambda: self.cycle_focus(1),
            '`': self.reset_all,
        }

    # View state

    def reset_view(self):
        self.renderer.distance_scale = self.config.distance_scale
        self.renderer.planet_scale = self.config.planet_scale
        self.renderer.fake_planet_scale = self.config.fake_planet_scale
        self.reset_focus()

    def reset_focus(self):
        self.focus: Optional[int] = None
        self.pan_offset = np.zeros(2)

    def reset_all(self):
        self.reset_view()
        self.controller.set_speed(1.0)

    def center(self) -> np.ndarray:
        """World position (metres) shown in the middle of the screen."""
        center = self.pan_offset.copy()
        if self.focus is not None:
            center += self.controller.current_system.positions[self.focus, :2]
        return center

    def cycle_focus(self, step: int):
        n = self.controller.current_system.n_bodies
        if self.focus is None:
            self.focus = 0 if step > 0 else n - 1
        else:
            self.focus = (self.focus + step) % n
        self.pan_offset = np.zeros(2)

    def pan(self, dx: float, dy: float):
        # Pan in screen pixels so the step feels the same at every zoom level
        step = self.config.pan_speed * self.renderer.distance_scale
        self.pan_offset = self.pan_offset + np.array([dx, dy]) * step

    def zoom_in(self):
        self.renderer.distance_scale /= self.config.zoom_step

    def zoom_out(self):
        self.renderer.distance_scale *= self.config.zoom_step

    def grow_planets(self):
        self.renderer.planet_scale *= self.config.zoom_step

    def shrink_planets(self):
        self.renderer.planet_scale /= self.config.zoom_step

    def toggle_fake_scale(self):
        self.renderer.fake_planet_scale = not self.renderer.fake_planet_scale

    # Simulation commands

    def speed_up(self):
        self.controller.set_speed(self.controller.speed * self.config.speed_step)

    def slow_down(self):
        self.controller.set_speed(self.controller.speed / self.config.speed_step)

    def toggle_review(self):
        if self.controller.is_reviewing:
            self.controller.resume()
        else:
            self.controller.enter_review()

    def review_back(self):
        if self.controller.is_reviewing:
            self.controller.move_review_cursor(-self.config.steps_per_frame)

    def review_forward(self):
        if self.controller.is_reviewing:
            self.controller.move_review_cursor(self.config.steps_per_frame)

    def handle_key(self, key: Optional[str]) -> bool:
        """Apply the command bound to ``key``. Returns False for unbound keys."""
        action = self._keys.get(key)
        if action is None:
            return False
        action()
        return True

    def on_key_press(self, event):
        self.handle_key(event.key)

    # Frame loop

    def status(self) -> str:
        controller = self.controller
        system = controller.current_system
        oldest, newest = controller.index_range
        text = (
            f"{controller.mode.value}  #{controller.current_index} [{oldest}..{newest}]  "
            f"speed x{controller.speed:.2f}  t = {system.time / SECONDS_PER_DAY:.1f} days"
        )
        if self.focus is not None:
            text += f"  following {system.roster[self.focus].name}"
        return text

    def advance(self):
        """Run one frame's worth of ticks (nothing while reviewing)."""
        if self.controller.is_running:
            self.controller.run(self.config.steps_per_frame)

    def update(self, frame: int):
        self.advance()
        self.renderer.render(self.controller.current_system, center=self.center(), status=self.status())
        return (self.renderer.scatter,)

    def run(self):
        """Open the window and animate until it is closed."""
        # Free every key for our own bindings ('q' would quit, 's' would save, ...)
        for name in list(plt.rcParams):
            if name.startswith('keymap.'):
                plt.rcParams[name] = []

        self.renderer.render(self.controller.current_system, center=self.center(), status=self.status())
        fig = self.renderer.fig
        fig.canvas.mpl_connect('key_press_event', self.on_key_press)
        self.animation = FuncAnimation(
            fig,
            self.update,
            interval=1000.0 / self.config.fps,
            blit=False,
            cache_frame_data=False,
        )
        plt.show()


def run_viewer(argv=None):
    """Run the interactive viewer."""
    parser = argparse.ArgumentParser(
        description="Orbit Simulator - interactive viewer",
        epilog=HELP_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('system', nargs='?', default=None,
                        help='System file (.json/.yaml) or prefab name (default: ours)')
    parser.add_argument('--config', type=str, default=None,
                        help='Config file (.json or .yaml)')
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else Config()
    config = config.updated(system=args.system)

    try:
        system = load_system(config.system, G=config.G)
    except OrbitSimError as e:
        parser.exit(1, f"Could not load system '{config.system}': {e}\n")

    print(f"Loaded '{config.system}' with {system.n_bodies} bodies")
    print(HELP_TEXT)
    controller = SimulationController.from_config(system, config)
    OrbitViewer(controller, config).run()


if __name__ == '__main__':
    run_viewer()
