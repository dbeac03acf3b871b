"""Load systems from JSON or YAML descriptions.

A description is a list of entries. Which kind an entry is follows from its
keys::

    - body: sol                      # orbit: prefab name or a custom body
      kinemat: {pos: [0, 0], vel: [0, 0]}
      children:
        - body: {name: Rock, mass: 1.0e20, radius: 1.0e5}
          kinemat: {pos: [1.0e9, 0], vel: [0, 3000]}
    - pos: [5.0e12, 0]               # locus: massless anchor
      children: [...]
    - count: 12                      # moons around the parent
      min_mass: 1.0e15
      max_mass: 1.0e17
      min_orbit: 1.0e7
      max_orbit: 5.0e7
    - total_mass: 3.0e21             # asteroid belt
      min_orbit: 3.3e11
      max_orbit: 4.9e11

Everything that goes wrong surfaces as :class:`orbit_sim.errors.LoadError`.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from orbit_sim.errors import InvalidBody, LoadError
from orbit_sim.physics.bodies import G_SI, Body, System
from orbit_sim.loader.builder import (
    AsteroidBelt,
    Entry,
    Locus,
    MoonRing,
    Orbit,
    SystemBuilder,
)
from orbit_sim.loader import prefabs

_ORBIT_KEYS = {"body", "kinemat", "children"}
_LOCUS_KEYS = {"pos", "children"}
_MOONS_KEYS = {"count", "min_mass", "max_mass", "min_orbit", "max_orbit", "seed", "clockwise"}
_ASTEROIDS_KEYS = {
    "total_mass", "min_orbit", "max_orbit", "standard_dev", "max_bodies", "seed", "clockwise",
}
_BODY_KEYS = {"name", "mass", "radius", "color", "outline", "immovable"}


def _check_keys(data: Dict[str, Any], allowed: set, required: set, kind: str):
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise LoadError(f"Unknown keys for {kind} entry: {unknown}")
    missing = sorted(required - set(data))
    if missing:
        raise LoadError(f"Missing keys for {kind} entry: {missing}")


def _vector(value: Any, label: str) -> List[float]:
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        raise LoadError(f"{label} must be a list of 2 or 3 numbers, got {value!r}")
    try:
        return [float(x) for x in value]
    except (TypeError, ValueError):
        raise LoadError(f"{label} must be a list of 2 or 3 numbers, got {value!r}")


def _numbers(data: Dict[str, Any], keys) -> Dict[str, Any]:
    """Coerce the given keys to float; YAML 1.1 reads '1e20' as a string."""
    out = dict(data)
    for key in keys:
        if key in out and isinstance(out[key], str):
            try:
                out[key] = float(out[key])
            except ValueError:
                raise LoadError(f"{key} must be a number, got {out[key]!r}")
    return out


def _color(value: Any) -> int:
    """Accept 0xRRGGBB ints or '#RRGGBB' / 'RRGGBB' strings."""
    if isinstance(value, str):
        try:
            return int(value.lstrip("#"), 16)
        except ValueError:
            raise LoadError(f"Invalid colour {value!r}")
    return int(value)


def _parse_body(raw: Any, position, velocity) -> Body:
    if isinstance(raw, str):
        try:
            return prefabs.get_body(raw).moved(position, velocity)
        except KeyError as e:
            raise LoadError(str(e.args[0])) from e
    if not isinstance(raw, dict):
        raise LoadError(f"body must be a prefab name or a mapping, got {raw!r}")
    _check_keys(raw, _BODY_KEYS, {"name", "mass"}, "body")
    try:
        return Body(
            name=raw["name"],
            mass=raw["mass"],
            position=position,
            velocity=velocity,
            radius=raw.get("radius", 0.0),
            color=_color(raw.get("color", 0xFFFFFF)),
            outline=_color(raw.get("outline", 0xFFFFFF)),
            immovable=raw.get("immovable", False),
        )
    except InvalidBody as e:
        raise LoadError(str(e)) from e


def _children(data: Dict[str, Any]) -> List[Entry]:
    children = data.get("children") or []
    if not isinstance(children, list):
        raise LoadError(f"children must be a list, got {children!r}")
    return [parse_entry(child) for child in children]


def parse_entry(data: Any) -> Entry:
    """Convert one decoded mapping (and its children) into a builder entry."""
    if not isinstance(data, dict):
        raise LoadError(f"Each entry must be a mapping, got {data!r}")

    try:
        if "body" in data:
            _check_keys(data, _ORBIT_KEYS, {"body", "kinemat"}, "orbit")
            kinemat = data["kinemat"]
            if not isinstance(kinemat, dict):
                raise LoadError(f"kinemat must be a mapping with pos and vel, got {kinemat!r}")
            _check_keys(kinemat, {"pos", "vel"}, {"pos", "vel"}, "kinemat")
            body = _parse_body(
                data["body"],
                _vector(kinemat["pos"], "kinemat.pos"),
                _vector(kinemat["vel"], "kinemat.vel"),
            )
            return Orbit(body).add_bulk(_children(data))

        if "count" in data:
            _check_keys(data, _MOONS_KEYS, _MOONS_KEYS - {"seed", "clockwise"}, "moons")
            return MoonRing(**_numbers(data, ("min_mass", "max_mass", "min_orbit", "max_orbit")))

        if "total_mass" in data:
            _check_keys(
                data, _ASTEROIDS_KEYS,
                {"total_mass", "min_orbit", "max_orbit"}, "asteroids",
            )
            return AsteroidBelt(**_numbers(data, ("total_mass", "min_orbit", "max_orbit", "standard_dev")))

        if "pos" in data:
            _check_keys(data, _LOCUS_KEYS, {"pos"}, "locus")
            return Locus(_vector(data["pos"], "pos")).add_bulk(_children(data))
    except (TypeError, ValueError) as e:
        if isinstance(e, LoadError):
            raise
        raise LoadError(f"Invalid entry {data!r}: {e}") from e

    raise LoadError(f"Cannot tell what kind of entry this is: {sorted(data)}")


def load(contents: str, fmt: str = "json", G: float = G_SI) -> System:
    """Parse a system description and return the initial System.

    Args:
        contents: File contents
        fmt: 'json' or 'yaml'
        G: Gravitational constant used for generated circular orbits

    Returns:
        Initial System

    Raises:
        LoadError: If the text cannot be parsed or describes an invalid system
    """
    fmt = fmt.lower()
    try:
        if fmt in ("yaml", "yml"):
            raw = yaml.safe_load(contents)
        elif fmt == "json":
            raw = json.loads(contents)
        else:
            raise LoadError(f"Unsupported format '{fmt}'. Use json or yaml")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise LoadError(f"Could not parse system description: {e}") from e

    if not isinstance(raw, list) or not raw:
        raise LoadError("A system description must be a non-empty list of entries")

    builder = SystemBuilder(G=G)
    for root in raw:
        builder.add(parse_entry(root))
    return builder.construct()


def load_file(path: Union[str, Path], G: float = G_SI) -> System:
    """Load a system description from a .json, .yaml or .yml file."""
    path = Path(path)
    if path.suffix in (".yaml", ".yml"):
        fmt = "yaml"
    elif path.suffix == ".json":
        fmt = "json"
    else:
        raise LoadError(f"Unsupported file format: {path.suffix}. Use .json, .yaml or .yml")
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"Could not read {path}: {e}") from e
    return load(contents, fmt=fmt, G=G)


def load_system(source: str, G: float = G_SI) -> System:
    """Load a system from a file path, or build the prefab system of that name."""
    if Path(source).suffix in (".json", ".yaml", ".yml"):
        return load_file(source, G=G)
    try:
        return prefabs.get_system(source, G=G)
    except KeyError as e:
        raise LoadError(str(e.args[0])) from e
