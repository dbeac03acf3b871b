"""Loading initial systems: builder entries, prefabs and JSON/YAML descriptions."""

from orbit_sim.loader.builder import (
    AsteroidBelt,
    Entry,
    EntryWithChildren,
    Locus,
    MoonRing,
    Orbit,
    SystemBuilder,
)
from orbit_sim.loader.prefabs import get_body, get_system, list_systems
from orbit_sim.loader.deserialize import load, load_file, load_system

__all__ = [
    "AsteroidBelt",
    "Entry",
    "EntryWithChildren",
    "Locus",
    "MoonRing",
    "Orbit",
    "SystemBuilder",
    "get_body",
    "get_system",
    "list_systems",
    "load",
    "load_file",
    "load_system",
]
