"""Angle wrapping & elementary rotations shared by the frame, element & measurement code."""

from __future__ import annotations

# Third Party Imports
from numpy import arccos, array, clip, cos, fabs, finfo, fmod, ndarray, remainder, sign, sin

# Local Imports
from ..common.logger import orbitfitLogError
from . import constants as const

_ROTATION_AXES: dict[int, tuple[int, int]] = {1: (1, 2), 2: (2, 0), 3: (0, 1)}
"""``dict``: for each axis, the ordered pair of axes spanning the plane it rotates."""


def _axisRotation(axis: int, angle: float) -> ndarray:
    """Passive rotation of the frame by `angle` about `axis`, Vallado's ROT1, ROT2 & ROT3."""
    first, second = _ROTATION_AXES[axis]
    matrix = array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    matrix[first, first] = matrix[second, second] = cos(angle)
    matrix[first, second] = sin(angle)
    matrix[second, first] = -sin(angle)
    return matrix


def rot1(angle: float) -> ndarray:
    """3x3 rotation of the frame about its first axis, `angle` in radians."""
    return _axisRotation(1, angle)


def rot2(angle: float) -> ndarray:
    """3x3 rotation of the frame about its second axis, `angle` in radians."""
    return _axisRotation(2, angle)


def rot3(angle: float) -> ndarray:
    """3x3 rotation of the frame about its third axis, `angle` in radians."""
    return _axisRotation(3, angle)


def wrapAngleNegPiPi(angle: float) -> float:
    r"""Wrap a scalar angle into :math:`(-\pi, \pi]`."""
    # remainder() follows the sign of the divisor
    angle = remainder(angle, const.TWOPI)
    if fabs(angle) > const.PI:
        angle -= const.TWOPI * sign(angle)
    return angle


def wrapAngle2Pi(angle: float) -> float:
    r"""Wrap a scalar angle into :math:`[0, 2\pi)`."""
    # fmod() follows the sign of the dividend
    angle = fmod(angle, const.TWOPI)
    return angle + const.TWOPI if angle < 0 else angle


def vecWrapAngleNeg(angles: ndarray) -> ndarray:
    r"""Wrap an array of angles into :math:`[-\pi, \pi)`, element-wise."""
    return (angles + const.PI) % const.TWOPI - const.PI


def fpe_equals(value: float, expected: float) -> bool:
    """Whether `value` only differs from `expected` by floating point resolution."""
    return fabs(value - expected) < finfo(float).resolution


def safeArccos(arg: float) -> float:
    r"""Arc cosine tolerant of rounding just outside :math:`[-1, 1]`.

    Raises:
        ``ValueError``: `arg` lies outside the domain by more than rounding error.

    Returns:
        ``float``: :math:`\arccos{}` of `arg`, clipped into the domain, radians.
    """
    if fabs(arg) > 1.0 and not fpe_equals(fabs(arg), 1.0):
        orbitfitLogError(f"`safeArccos()` used on non-truncation/rounding error. Value: {arg}")
        raise ValueError(arg)
    return arccos(clip(arg, -1.0, 1.0))
