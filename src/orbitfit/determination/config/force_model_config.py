"""Submodule defining which perturbations drive numerical propagation."""

# ruff: noqa: UP007

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING, Optional

# Third Party Imports
from pydantic import BaseModel, ConfigDict, model_validator

# Local Imports
from ...common.exceptions import InvalidForceConfigError

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from typing_extensions import Self


class ForceModelConfig(BaseModel):
    """Perturbation switches & the spacecraft properties they need.

    The central body gravity field is always included, its degree & order come from the
    ``propagation`` section of :class:`.BehavioralConfig`.
    """

    model_config = ConfigDict(frozen=True)

    use_moon: bool = False
    """``bool``: whether to include the Moon's third body attraction."""

    use_sun: bool = False
    """``bool``: whether to include the Sun's third body attraction."""

    use_solar_pressure: bool = False
    """``bool``: whether to include solar radiation pressure, requires `cross_section` & `cr`."""

    use_atmospheric_drag: bool = False
    """``bool``: whether to include atmospheric drag, requires `cross_section` & `cd`."""

    use_relativity: bool = False
    """``bool``: whether to include the Schwarzschild relativistic correction."""

    cross_section: Optional[float] = None
    """``float``: constant cross-sectional area, (m^2)."""

    cr: Optional[float] = None
    """``float``: radiation pressure coefficient, (unit-less)."""

    cd: Optional[float] = None
    """``float``: drag coefficient, (unit-less)."""

    @model_validator(mode="after")
    def check_required_parameters(self) -> Self:
        """Fail at construction when an enabled perturbation lacks its physical parameters."""
        checkForceRequirements(self)
        return self


def checkForceRequirements(force_config: ForceModelConfig) -> None:
    """Verify that every enabled perturbation has the physical parameters it requires.

    Parameters of disabled perturbations are ignored, so they may be left at zero.

    Raises:
        :class:`.InvalidForceConfigError`: a required parameter is missing or not positive.
    """
    requirements = {
        "solar radiation pressure": (force_config.use_solar_pressure, ("cross_section", "cr")),
        "atmospheric drag": (force_config.use_atmospheric_drag, ("cross_section", "cd")),
    }
    for force, (enabled, parameters) in requirements.items():
        if not enabled:
            continue
        for name in parameters:
            value = getattr(force_config, name)
            if value is None:
                raise InvalidForceConfigError(name, f"required when {force} is enabled")
            if value <= 0.0:
                raise InvalidForceConfigError(name, f"must be positive when {force} is enabled, not {value}")
