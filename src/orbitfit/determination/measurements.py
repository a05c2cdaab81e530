"""Defines the measurement types consumed by the estimator & their theoretical observables.

Measurements are a closed, tagged union discriminated by their ``type`` field. Each one converts
itself into an :class:`.Observable` for a given propagator frame, which precomputes everything
that depends only on the measurement epoch so the estimator can evaluate many candidate states
cheaply.
"""

# ruff: noqa: UP007, TCH003

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

# Third Party Imports
from numpy import array, asarray, atleast_2d, concatenate, full, ndarray, stack, zeros
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Local Imports
from ..common.exceptions import ReferenceResolutionError
from ..common.labels import FrameLabel, MeasurementLabel
from ..physics import constants as const
from ..physics.maths import vecWrapAngleNeg
from ..physics.measurements import getAzimuth, getElevation, getRange, getSlantRangeSEZ
from ..physics.time.conversions import utcNaive
from ..physics.transforms.methods import convertFrame, positionRotationToECEF
from .config.base import Degree0to360, DegreeNeg90to90, PosFloat, Vector3
from .config.station_config import Station


@dataclass(frozen=True)
class Observable:
    """Observed values of one measurement & the function predicting them from candidate states.

    All values are in engine units, (km; km/sec; radians).
    """

    epoch: datetime
    """``datetime``: naive UTC epoch of the measurement."""

    observed: ndarray
    """``ndarray``: Mx1 observed values."""

    sigma: ndarray
    """``ndarray``: Mx1 a priori standard deviation of each value."""

    weight: ndarray
    """``ndarray``: Mx1 relative weight of each value."""

    theoretical: Callable[[ndarray], ndarray]
    """``callable``: maps (K, 6) states in the propagator frame onto (K, M) predicted values."""

    display_scale: float = 1.0
    """``float``: converts values into the units residuals are reported in."""

    @property
    def size(self) -> int:
        """``int``: number of scalar values, M."""
        return self.observed.shape[0]

    def estimate(self, states: ndarray) -> ndarray:
        """Predicted values for a single 6x1 state or a (K, 6) stack of states."""
        return self.theoretical(atleast_2d(states))


def _resolveStation(value: Any, info: ValidationInfo) -> Any:
    """Resolve a station given by code against the ``stations`` validation context."""
    if value is None:
        raise ReferenceResolutionError(f"{info.field_name!r} is required for station-relative measurements")
    if isinstance(value, str):
        stations = (info.context or {}).get("stations") or {}
        if value not in stations:
            raise ReferenceResolutionError(f"Unknown station code: {value!r}")
        return stations[value]
    return value


class MeasurementBase(BaseModel, ABC):
    R"""Abstract base class defining the interface every measurement type implements."""

    model_config = ConfigDict(frozen=True)

    SIGMA: ClassVar[float]
    """``float``: a priori standard deviation of each observed value, in observable units (km or radians)."""

    WEIGHT: ClassVar[float] = 1.0
    """``float``: relative weight of each value."""

    epoch: datetime
    R"""``datetime``: epoch of the measurement, timezone aware inputs are converted to naive UTC."""

    @field_validator("epoch")
    @classmethod
    def as_naive_utc(cls, epoch: datetime) -> datetime:
        """Store the epoch as naive UTC."""
        return utcNaive(epoch)

    @abstractmethod
    def toObservable(self, frame: FrameLabel) -> Observable:
        """Build the observable of this measurement for a propagator operating in `frame`."""
        raise NotImplementedError


class StationMeasurementBase(MeasurementBase, ABC):
    R"""Measurement taken by a ground station."""

    station: Optional[Station] = Field(default=None, validate_default=True)
    R""":class:`.Station`: observing station, or its code resolved through the ``stations`` context."""

    @field_validator("station", mode="before")
    @classmethod
    def resolve_station(cls, value: Any, info: ValidationInfo) -> Any:
        """Fail fast when the observing station is missing or cannot be resolved."""
        return _resolveStation(value, info)

    def _topocentric(self, frame: FrameLabel) -> Callable[[ndarray], ndarray]:
        """Function mapping (K, 6) states in `frame` onto (K, 3) SEZ slant range vectors."""
        rotation = positionRotationToECEF(frame, self.epoch)
        station_ecef = self.station.ecef
        ecef_2_sez = self.station.ecef_2_sez

        def slantRange(states: ndarray) -> ndarray:
            return getSlantRangeSEZ(states[:, :3] @ rotation.T, station_ecef, ecef_2_sez)

        return slantRange


class Range(StationMeasurementBase):
    R"""Geometric distance from a station to the satellite.

    Note:
        Light time is not modeled, the satellite position is taken at the measurement epoch.
    """

    SIGMA: ClassVar[float] = 0.2 * const.M2KM

    type: Literal[MeasurementLabel.RANGE] = MeasurementLabel.RANGE  # type: ignore
    R"""``str``: type of measurement being defined."""

    range: PosFloat
    R"""``float``: observed range, km."""

    def toObservable(self, frame: FrameLabel) -> Observable:
        """Range observable, reported in km."""
        slant_range = self._topocentric(frame)
        return Observable(
            epoch=self.epoch,
            observed=array([self.range]),
            sigma=full(1, self.SIGMA),
            weight=full(1, self.WEIGHT),
            theoretical=lambda states: getRange(slant_range(states))[:, None],
        )


class AzimuthElevation(StationMeasurementBase):
    R"""Topocentric azimuth & elevation angle pair."""

    SIGMA: ClassVar[float] = 0.2

    type: Literal[MeasurementLabel.AZ_EL] = MeasurementLabel.AZ_EL  # type: ignore
    R"""``str``: type of measurement being defined."""

    azimuth: Degree0to360
    R"""``float``: observed azimuth, clockwise from north, degrees."""

    elevation: DegreeNeg90to90
    R"""``float``: observed elevation above the local horizon, degrees."""

    def toObservable(self, frame: FrameLabel) -> Observable:
        """Angle observable, reported in degrees.

        Predicted azimuths are unwrapped to lie within :math:`\\pi` of the observed one, so a
        residual never jumps by a full turn across north.
        """
        slant_range = self._topocentric(frame)
        observed = array([self.azimuth, self.elevation]) * const.DEG2RAD

        def theoretical(states: ndarray) -> ndarray:
            sez = slant_range(states)
            azimuth = observed[0] + vecWrapAngleNeg(getAzimuth(sez) - observed[0])
            return stack((azimuth, getElevation(sez)), axis=-1)

        return Observable(
            epoch=self.epoch,
            observed=observed,
            sigma=full(2, self.SIGMA),
            weight=full(2, self.WEIGHT),
            theoretical=theoretical,
            display_scale=const.RAD2DEG,
        )


class Position(MeasurementBase):
    R"""Cartesian position of the satellite, optionally with its velocity."""

    SIGMA: ClassVar[float] = 0.1 * const.M2KM
    VELOCITY_SIGMA: ClassVar[float] = 0.1 * const.M2KM
    """``float``: a priori standard deviation of each velocity component, km/sec."""

    type: Literal[MeasurementLabel.POSITION] = MeasurementLabel.POSITION  # type: ignore
    R"""``str``: type of measurement being defined."""

    position: Vector3
    R"""``list[float]``: 3x1 position vector, km."""

    velocity: Optional[Vector3] = None
    R"""``list[float]``: 3x1 velocity vector, km/sec."""

    frame: FrameLabel = FrameLabel.ECI
    R"""``str``: reference frame of :attr:`.position` & :attr:`.velocity`."""

    def toObservable(self, frame: FrameLabel) -> Observable:
        """Cartesian observable expressed in the propagator frame, reported in km."""
        velocity = zeros(3) if self.velocity is None else asarray(self.velocity, dtype=float)
        # [NOTE]: position transforms do not depend on the velocity, so a zero placeholder is safe
        state = convertFrame(concatenate((self.position, velocity)), self.frame, frame, self.epoch)

        if self.velocity is None:
            return Observable(
                epoch=self.epoch,
                observed=state[:3],
                sigma=full(3, self.SIGMA),
                weight=full(3, self.WEIGHT),
                theoretical=lambda states: states[:, :3],
            )

        return Observable(
            epoch=self.epoch,
            observed=state,
            sigma=concatenate((full(3, self.SIGMA), full(3, self.VELOCITY_SIGMA))),
            weight=full(6, self.WEIGHT),
            theoretical=lambda states: states[:, :6],
        )


Measurement = Annotated[
    Union[Range, AzimuthElevation, Position],
    Field(..., discriminator="type"),
]
"""Annotated[type]: tagged union of every measurement type."""
