"""Exception and warning types raised by the simulation core and loader."""


class OrbitSimError(Exception):
    """Base class for all orbit-sim errors."""


class InvalidBody(OrbitSimError, ValueError):
    """A body or system violates a construction invariant.

    Raised for non-positive or non-finite mass, malformed or non-finite
    vectors, negative radius, mixed dimensions or duplicate names.
    """


class IndexOutOfRange(OrbitSimError, IndexError):
    """A history index lies outside the retained window."""


class InvalidTransition(OrbitSimError, RuntimeError):
    """A command was issued in a simulation mode that forbids it."""


class LoadError(OrbitSimError, ValueError):
    """A system description could not be turned into a System."""


class InvalidSpeed(UserWarning):
    """A requested speed multiplier was outside the allowed range and got clamped."""
