"""Rendering system for 2D visualization."""

from orbit_sim.render.renderer_2d import Renderer2D, hex_color, scale_planet

__all__ = ["Renderer2D", "hex_color", "scale_planet"]
