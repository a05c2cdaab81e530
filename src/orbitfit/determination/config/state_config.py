"""Defines the :class:`.OrbitState` model describing a spacecraft state at an epoch."""

# ruff: noqa: UP007, TCH003

from __future__ import annotations

# Standard Library Imports
from datetime import datetime
from typing import TYPE_CHECKING, Optional

# Third Party Imports
from numpy import asarray, hstack, ndarray
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from scipy.linalg import norm

# Local Imports
from ...common.labels import FrameLabel
from ...physics.bodies import Earth
from ...physics.orbits.conversions import coe2eci, eci2coe
from ...physics.time.conversions import utcNaive
from ...physics.transforms.methods import convertFrame
from .base import PosFloat, Vector3

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from typing_extensions import Self

    # Local Imports
    from ...physics.orbits.conversions import OrbitalElementTuple


class OrbitState(BaseModel):
    R"""Spacecraft position & velocity at an epoch, in a named reference frame.

    States are immutable, every conversion returns a new :class:`.OrbitState`.
    """

    model_config = ConfigDict(frozen=True)

    epoch: datetime
    R"""``datetime``: epoch of the state, timezone aware inputs are converted to naive UTC."""

    position: Vector3
    R"""``list[float]``: 3x1 position vector, km."""

    velocity: Vector3
    R"""``list[float]``: 3x1 velocity vector, km/sec."""

    frame: FrameLabel = FrameLabel.ECI
    R"""``str``: reference frame of :attr:`.position` & :attr:`.velocity`."""

    mass: Optional[PosFloat] = None
    R"""``float``: spacecraft mass, kg."""

    @field_validator("epoch")
    @classmethod
    def as_naive_utc(cls, epoch: datetime) -> datetime:
        """Store the epoch as naive UTC."""
        return utcNaive(epoch)

    @model_validator(mode="after")
    def pos_outside_earth(self) -> Self:
        """Validate that the specified position is outside the radius of the Earth."""
        if norm(self.position) <= Earth.radius:
            msg = f"Position magnitude must be greater than Earth's radius: {norm(self.position)}"
            raise ValueError(msg)
        return self

    @property
    def state(self) -> ndarray:
        """``ndarray``: 6x1 state vector, [km; km/sec]."""
        return hstack((self.position, self.velocity))

    @classmethod
    def fromArray(
        cls,
        state: ndarray,
        epoch: datetime,
        frame: FrameLabel = FrameLabel.ECI,
        mass: float | None = None,
    ) -> OrbitState:
        """Build a state from a 6x1 state vector, [km; km/sec]."""
        state = asarray(state, dtype=float)
        return cls(
            epoch=epoch,
            position=state[:3].tolist(),
            velocity=state[3:].tolist(),
            frame=frame,
            mass=mass,
        )

    @classmethod
    def fromElements(
        cls,
        sma: float,
        ecc: float,
        inc: float,
        raan: float,
        argp: float,
        true_anom: float,
        epoch: datetime,
        frame: FrameLabel = FrameLabel.ECI,
        mass: float | None = None,
    ) -> OrbitState:
        """Build a state from classical orbital elements.

        Args:
            sma (``float``): semi-major axis, km.
            ecc (``float``): eccentricity.
            inc (``float``): inclination, radians.
            raan (``float``): right ascension of the ascending node, radians.
            argp (``float``): argument of perigee, radians.
            true_anom (``float``): true anomaly, radians.
            epoch (``datetime``): epoch of the state.
            frame (:class:`.FrameLabel`, optional): inertial frame the elements are defined in.
            mass (``float``, optional): spacecraft mass, kg.
        """
        if frame == FrameLabel.ECEF:
            raise ValueError("Orbital elements are only defined in an inertial frame")
        return cls.fromArray(coe2eci(sma, ecc, inc, raan, argp, true_anom), epoch, frame=frame, mass=mass)

    def toElements(self) -> OrbitalElementTuple:
        """Classical orbital elements of this state, (sma, ecc, inc, raan, argp, true_anom).

        States in ECEF are converted to ECI first.
        """
        state = self.toFrame(FrameLabel.ECI) if self.frame == FrameLabel.ECEF else self
        return eci2coe(state.state)

    def toFrame(self, frame: FrameLabel) -> OrbitState:
        """Express this state in another reference frame at the same epoch."""
        if frame == self.frame:
            return self
        return self.fromArray(
            convertFrame(self.state, self.frame, frame, self.epoch),
            self.epoch,
            frame=frame,
            mass=self.mass,
        )

    def withMass(self, mass: float) -> OrbitState:
        """Copy of this state for a spacecraft of `mass` kilograms."""
        return self.model_copy(update={"mass": mass})
