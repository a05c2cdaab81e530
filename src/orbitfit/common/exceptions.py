"""Contains all the custom-defined exceptions used in ``orbitfit``."""

from __future__ import annotations


class OrbitDeterminationError(OSError):
    """Single I/O-style error surfaced to callers when an estimation task fails.

    The underlying failure is always chained as ``__cause__``.
    """


class InvalidForceConfigError(Exception):
    """A perturbation is enabled without the physical parameters it requires."""

    def __init__(self, parameter: str, reason: str):
        """Build the error message from the offending parameter.

        Args:
            parameter (``str``): name of the missing/invalid physical parameter
            reason (``str``): why the parameter is required
        """
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Invalid force model parameter {parameter!r}: {reason}")


class ReferenceResolutionError(Exception):
    """A station-relative measurement could not resolve its observing station.

    Note:
        Deliberately not a :class:`ValueError`, so pydantic validators re-raise it unwrapped.
    """


class NumericalSolveError(ArithmeticError):
    """The linearized least-squares system is singular, ill-conditioned, or non-finite."""


class CancelledError(Exception):
    """Cooperative cancellation was observed between estimator iterations."""


class EarthCollisionError(Exception):
    """Exception raised if a propagated trajectory passes inside the Earth."""
