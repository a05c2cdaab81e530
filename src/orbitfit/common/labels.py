"""Hold common label types for easier importing."""

from __future__ import annotations

# Standard Library Imports
from enum import Enum


class DeterminationMode(str, Enum):
    """Defines which propagation model drives an estimation."""

    NUMERICAL: str = "numerical"
    """``str``: integrate the equations of motion; the Cartesian state is estimated."""

    ANALYTICAL: str = "analytical"
    """``str``: SGP4 mean elements fitted from a seed two-line element set."""


class FrameLabel(str, Enum):
    """Defines valid labels for the reference frames a state can be expressed in."""

    ECI: str = "eci"
    """``str``: Earth-centered inertial frame (J2000 mean equator and equinox)."""

    ECEF: str = "ecef"
    """``str``: Earth-centered, Earth-fixed frame."""

    TEME: str = "teme"
    """``str``: true equator, mean equinox frame native to SGP4."""


class MeasurementLabel(str, Enum):
    """Defines valid discriminants for measurement types."""

    RANGE: str = "range"
    """``str``: scalar station-to-satellite distance."""

    POSITION: str = "position"
    """``str``: Cartesian position, optionally with velocity."""

    AZ_EL: str = "az_el"
    """``str``: topocentric azimuth and elevation pair."""


class DeterminationStatus(str, Enum):
    """Defines the terminal outcomes of an orbit determination task."""

    CONVERGED: str = "converged"
    """``str``: parameter change fell below the convergence threshold."""

    MAX_ITERATIONS_REACHED: str = "max_iterations_reached"
    """``str``: iteration or evaluation cap was hit; the last estimate is still usable."""

    CANCELLED: str = "cancelled"
    """``str``: caller requested cancellation; no result is produced."""


class IntegratorLabel(str, Enum):
    """Defines valid labels for integrator methods."""

    RK45: str = "RK45"
    """str: Runge-Kutta integration method of order 5(4)."""

    DOP853: str = "DOP853"
    """``str``: Dormand-Prince integration method of order 8(5)."""


class GeopotentialModel(str, Enum):
    """Enumeration of geopotential models mapped to their corresponding filename."""

    EGM96 = "egm96.txt"
    """str: Filename corresponding to the Earth Gravitational Model 1996."""
