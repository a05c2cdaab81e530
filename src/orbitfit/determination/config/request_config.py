"""Defines the :class:`.OrbitDeterminationRequest` model aggregating everything one estimation needs."""

# ruff: noqa: UP007, TCH003

from __future__ import annotations

# Standard Library Imports
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

# Third Party Imports
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Local Imports
from ...common.behavioral_config import BehavioralConfig
from ...common.labels import DeterminationMode
from ...physics.orbits.tle import TwoLineElement
from ..measurements import Measurement
from .base import PosFloat, PosInt
from .force_model_config import ForceModelConfig
from .state_config import OrbitState

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from typing_extensions import Self


def _defaultMass() -> float:
    return BehavioralConfig.getConfig().estimation.DefaultMass


class OrbitDeterminationRequest(BaseModel):
    R"""Immutable description of one orbit determination task.

    Stations referenced by code in :attr:`.measurements` are resolved against a ``stations``
    mapping handed to validation as context:

    .. code-block:: python

        OrbitDeterminationRequest.model_validate(data, context={"stations": {"ABC": station}})
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mode: DeterminationMode = DeterminationMode.NUMERICAL
    R"""``str``: whether the SGP4 mean elements or an integrated Cartesian state are estimated."""

    tle: Optional[TwoLineElement] = None
    R""":class:`.TwoLineElement`: reference element set, seeds analytical estimation."""

    reference_state: Optional[OrbitState] = None
    R""":class:`.OrbitState`: reference state used when there is no element set."""

    initial_state: Optional[OrbitState] = None
    R""":class:`.OrbitState`: explicit initial guess, derived from the reference when omitted."""

    mass: PosFloat = Field(default_factory=_defaultMass)
    R"""``float``: spacecraft mass, kg."""

    force_model: ForceModelConfig = Field(default_factory=ForceModelConfig)
    R""":class:`.ForceModelConfig`: perturbations driving numerical propagation."""

    measurements: tuple[Measurement, ...] = Field(..., min_length=1)
    R"""``tuple``: measurements to fit, processed in this order."""

    fit_drag_term: bool = False
    R"""``bool``: whether the SGP4 B* drag term is also estimated in analytical mode."""

    convergence_threshold: Optional[PosFloat] = None
    R"""``float``: overrides the mode's configured convergence threshold."""

    max_iterations: Optional[PosInt] = None
    R"""``int``: overrides the configured iteration cap."""

    max_evaluations: Optional[PosInt] = None
    R"""``int``: overrides the configured evaluation cap."""

    name: str = ""
    R"""``str``: label of the orbit being determined, used in log messages."""

    @field_validator("tle", mode="before")
    @classmethod
    def parse_tle(cls, value: Any) -> Any:
        """Accept the text of an element set, with or without a title line."""
        if isinstance(value, str):
            return TwoLineElement.fromString(value)
        return value

    @model_validator(mode="after")
    def check_reference(self) -> Self:
        """Validate that the mode has the reference orbit it needs."""
        if self.mode == DeterminationMode.ANALYTICAL and self.tle is None:
            raise ValueError("Analytical orbit determination requires a reference TLE")
        if self.tle is None and self.reference_state is None and self.initial_state is None:
            raise ValueError("Orbit determination requires a reference TLE or state")
        return self

    @property
    def start(self) -> datetime:
        """``datetime``: epoch of the earliest measurement."""
        return min(measurement.epoch for measurement in self.measurements)

    @property
    def threshold(self) -> float:
        """``float``: convergence threshold of this request's mode."""
        if self.convergence_threshold is not None:
            return self.convergence_threshold
        config = BehavioralConfig.getConfig().estimation
        if self.mode == DeterminationMode.ANALYTICAL:
            return config.AnalyticalConvergenceThreshold
        return config.NumericalConvergenceThreshold

    @property
    def position_scale(self) -> float:
        """``float``: position-equivalent parameter scale of this request's mode, m."""
        config = BehavioralConfig.getConfig().estimation
        if self.mode == DeterminationMode.ANALYTICAL:
            return config.AnalyticalPositionScale
        return config.NumericalPositionScale
