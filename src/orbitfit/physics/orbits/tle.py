"""Contains the two-line element set type, its text codec, and the state to mean element fit.

Angles are stored in radians and mean motion in radians per minute, matching what
:meth:`sgp4.api.Satrec.sgp4init` expects. The mean motion derivatives are kept in the units
they have on the card (rev/day^2 & rev/day^3), since SGP4 ignores them.
"""

from __future__ import annotations

# Standard Library Imports
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from math import floor, log10
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import array, asarray, concatenate, sqrt
from scipy.linalg import norm
from sgp4.api import SGP4_ERRORS, WGS72, Satrec, jday

# Local Imports
from ...common.logger import orbitfitLogWarning
from .. import constants as const
from ..maths import wrapAngle2Pi, wrapAngleNegPiPi
from ..time.conversions import utcNaive
from .conversions import eci2eqe, eqe2MeanCOE, meanCOE2EQE

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray


WGS72_MU: float = 398600.8
"""``float``: gravitational parameter of the WGS-72 constants used by SGP4, (km^3/sec^2)."""

SGP4_EPOCH_JD: float = 2433281.5
"""``float``: Julian date of 1949 December 31 00:00 UT, the origin of SGP4 epoch days."""

REV_PER_DAY2RAD_PER_MIN: float = const.TWOPI / 1440.0
"""``float``: converts mean motion from revolutions per day to radians per minute."""

_STATE_FIT_MAX_ITER: int = 100
_STATE_FIT_POSITION_TOL: float = 1.0e-7  # km
_STATE_FIT_VELOCITY_TOL: float = 1.0e-10  # km/sec


def tleChecksum(line: str) -> int:
    """Modulo-10 checksum of the first 68 columns of a TLE line.

    Digits count their value, minus signs count one, everything else counts zero.
    """
    total = 0
    for char in line[:68]:
        if char.isdigit():
            total += int(char)
        elif char == "-":
            total += 1
    return total % 10


def _parseExponent(field: str) -> float:
    """Parse an implied-decimal exponent field, e.g. ``-11606-4`` is :math:`-0.11606e-4`."""
    field = field.strip()
    if not field:
        return 0.0
    sign = -1.0 if field[0] == "-" else 1.0
    field = field.lstrip("+-")
    return sign * float(f"0.{field[:-2]}") * 10 ** int(field[-2:])


def _formatExponent(value: float) -> str:
    """Format `value` as an 8 column implied-decimal exponent field."""
    if value == 0.0:
        return " 00000-0"
    exponent = floor(log10(abs(value))) + 1
    digits = round(abs(value) / 10**exponent * 1e5)
    if digits == 100000:
        digits = 10000
        exponent += 1
    if exponent < -9:
        return " 00000-0"
    if exponent > 9:
        raise ValueError(f"Value {value} cannot be represented in a TLE exponent field")
    sign = "-" if value < 0 else " "
    exp_sign = "-" if exponent < 0 else "+"
    return f"{sign}{digits:05d}{exp_sign}{abs(exponent)}"


def _formatFirstDerivative(value: float) -> str:
    """Format the first mean motion derivative as ``-.00002182``."""
    text = f"{abs(value):.8f}"
    if not text.startswith("0"):
        raise ValueError(f"Mean motion derivative {value} cannot be represented in a TLE")
    return ("-" if value < 0 else " ") + text[1:]


def _epochFields(epoch: datetime) -> tuple[int, float]:
    """Two digit year & fractional day of year of `epoch`."""
    start_of_year = datetime(epoch.year, 1, 1)
    day_of_year = (epoch - start_of_year) / timedelta(days=1) + 1.0
    return epoch.year % 100, day_of_year


@dataclass(frozen=True)
class TwoLineElement:
    """An immutable two-line element set.

    The identity fields (catalog number through revolution number) are carried verbatim when a
    new element set is fitted from an existing one, only the mean elements and epoch change.
    """

    catalog_number: int
    """``int``: satellite catalog number."""

    classification: str
    """``str``: single character security classification, usually ``"U"``."""

    international_designator: str
    """``str``: launch year, launch number & piece, up to 8 characters."""

    epoch: datetime
    """``datetime``: naive UTC epoch of the mean elements."""

    mean_motion_dot: float
    """``float``: first derivative of mean motion divided by two, (rev/day^2)."""

    mean_motion_ddot: float
    """``float``: second derivative of mean motion divided by six, (rev/day^3)."""

    bstar: float
    """``float``: SGP4 drag term, (1/earth radii)."""

    ephemeris_type: int
    """``int``: ephemeris type, zero for distributed element sets."""

    element_set_number: int
    """``int``: element set number."""

    inclination: float
    """``float``: mean inclination, (radians)."""

    right_ascension: float
    """``float``: mean right ascension of the ascending node, (radians)."""

    eccentricity: float
    """``float``: mean eccentricity."""

    argument_of_perigee: float
    """``float``: mean argument of perigee, (radians)."""

    mean_anomaly: float
    """``float``: mean anomaly, (radians)."""

    mean_motion: float
    """``float``: Kozai mean motion, (radians/minute)."""

    revolution_number: int
    """``int``: revolution number at epoch."""

    name: str | None = None
    """``str | None``: optional title line."""

    @classmethod
    def fromLines(cls, line_1: str, line_2: str, name: str | None = None, validate: bool = True) -> TwoLineElement:
        """Parse a TLE from its two card lines.

        Args:
            line_1 (``str``): first line of the element set.
            line_2 (``str``): second line of the element set.
            name (``str``, optional): title line. Defaults to ``None``.
            validate (``bool``, optional): whether to verify the line checksums. Defaults to ``True``.

        Raises:
            ``ValueError``: malformed lines, mismatched catalog numbers, or bad checksums.

        Returns:
            :class:`.TwoLineElement`: the parsed element set.
        """
        line_1, line_2 = line_1.rstrip(), line_2.rstrip()
        if len(line_1) < 68 or len(line_2) < 68:
            raise ValueError("TLE lines must have at least 68 columns")
        if line_1[0] != "1" or line_2[0] != "2":
            raise ValueError("TLE lines must start with line numbers 1 and 2")
        if validate:
            for line in (line_1, line_2):
                if len(line) < 69 or int(line[68]) != tleChecksum(line):
                    raise ValueError(f"Invalid TLE checksum: {line!r}")

        catalog_number = int(line_1[2:7])
        if int(line_2[2:7]) != catalog_number:
            raise ValueError("TLE lines refer to different catalog numbers")

        year = int(line_1[18:20])
        year += 1900 if year > 57 else 2000
        epoch = datetime(year, 1, 1) + timedelta(days=float(line_1[20:32]) - 1.0)

        return cls(
            catalog_number=catalog_number,
            classification=line_1[7].strip() or "U",
            international_designator=line_1[9:17].strip(),
            epoch=epoch,
            mean_motion_dot=float(line_1[33:43]),
            mean_motion_ddot=_parseExponent(line_1[44:52]),
            bstar=_parseExponent(line_1[53:61]),
            ephemeris_type=int(line_1[62].strip() or 0),
            element_set_number=int(line_1[64:68]),
            inclination=float(line_2[8:16]) * const.DEG2RAD,
            right_ascension=float(line_2[17:25]) * const.DEG2RAD,
            eccentricity=float(f"0.{line_2[26:33].strip()}"),
            argument_of_perigee=float(line_2[34:42]) * const.DEG2RAD,
            mean_anomaly=float(line_2[43:51]) * const.DEG2RAD,
            mean_motion=float(line_2[52:63]) * REV_PER_DAY2RAD_PER_MIN,
            revolution_number=int(line_2[63:68].strip() or 0),
            name=name,
        )

    @classmethod
    def fromString(cls, data: str, validate: bool = True) -> TwoLineElement:
        """Parse a 2 or 3 line TLE string, the optional first line being the title."""
        lines = [line for line in data.strip().splitlines() if line.strip()]
        if len(lines) == 2:
            return cls.fromLines(lines[0], lines[1], validate=validate)
        if len(lines) == 3:
            return cls.fromLines(lines[1], lines[2], name=lines[0].strip(), validate=validate)
        raise ValueError("Invalid number of lines. TLE requires 2 or 3 lines.")

    @property
    def lines(self) -> tuple[str, str]:
        """``tuple``: the formatted card lines, checksums included."""
        year, day_of_year = _epochFields(self.epoch)
        line_1 = (
            f"1 {self.catalog_number:05d}{self.classification[:1]} "
            f"{self.international_designator:<8.8s} {year:02d}{day_of_year:012.8f} "
            f"{_formatFirstDerivative(self.mean_motion_dot)} {_formatExponent(self.mean_motion_ddot)} "
            f"{_formatExponent(self.bstar)} {self.ephemeris_type:1d} {self.element_set_number % 10000:4d}"
        )
        ecc_digits = f"{self.eccentricity:.7f}"[2:]
        line_2 = (
            f"2 {self.catalog_number:05d} {self.inclination * const.RAD2DEG:8.4f} "
            f"{wrapAngle2Pi(self.right_ascension) * const.RAD2DEG:8.4f} {ecc_digits} "
            f"{wrapAngle2Pi(self.argument_of_perigee) * const.RAD2DEG:8.4f} "
            f"{wrapAngle2Pi(self.mean_anomaly) * const.RAD2DEG:8.4f} "
            f"{self.mean_motion / REV_PER_DAY2RAD_PER_MIN:11.8f}{self.revolution_number % 100000:5d}"
        )
        return f"{line_1}{tleChecksum(line_1)}", f"{line_2}{tleChecksum(line_2)}"

    def format(self) -> str:
        """Return the newline-joined card lines, preceded by the title when present."""
        lines = self.lines
        if self.name:
            return "\n".join((self.name, *lines))
        return "\n".join(lines)

    @property
    def sgp4_epoch(self) -> float:
        """``float``: epoch expressed in days since 1949 December 31 00:00 UT."""
        jd, fraction = julianDayPair(self.epoch)
        return (jd - SGP4_EPOCH_JD) + fraction

    def satrec(self) -> Satrec:
        """Initialize an SGP4 satellite record from these mean elements.

        Raises:
            ``ValueError``: SGP4 rejects the elements, e.g. an eccentricity outside :math:`[0, 1)`.

        Returns:
            :class:`sgp4.api.Satrec`: initialized record using the WGS-72 constants.
        """
        satrec = Satrec()
        minutes_per_day = 1440.0
        satrec.sgp4init(
            WGS72,
            "i",
            self.catalog_number,
            self.sgp4_epoch,
            self.bstar,
            self.mean_motion_dot * REV_PER_DAY2RAD_PER_MIN / minutes_per_day,
            self.mean_motion_ddot * REV_PER_DAY2RAD_PER_MIN / minutes_per_day**2,
            self.eccentricity,
            self.argument_of_perigee,
            self.inclination,
            self.mean_anomaly,
            self.mean_motion,
            self.right_ascension,
        )
        if satrec.error != 0:
            raise ValueError(f"SGP4 rejected the mean elements: {SGP4_ERRORS[satrec.error]}")
        return satrec

    def withMeanElements(
        self,
        epoch: datetime,
        mean_motion: float,
        eccentricity: float,
        inclination: float,
        right_ascension: float,
        argument_of_perigee: float,
        mean_anomaly: float,
        bstar: float | None = None,
    ) -> TwoLineElement:
        """Copy of this element set with new mean elements, keeping every identity field.

        The revolution number is advanced by the whole revolutions elapsed between the epochs.
        """
        epoch = utcNaive(epoch)
        elapsed_minutes = (epoch - self.epoch) / timedelta(minutes=1)
        revolutions = floor(elapsed_minutes * 0.5 * (mean_motion + self.mean_motion) / const.TWOPI)
        return replace(
            self,
            epoch=epoch,
            mean_motion=mean_motion,
            eccentricity=eccentricity,
            inclination=inclination,
            right_ascension=wrapAngle2Pi(right_ascension),
            argument_of_perigee=wrapAngle2Pi(argument_of_perigee),
            mean_anomaly=wrapAngle2Pi(mean_anomaly),
            bstar=self.bstar if bstar is None else bstar,
            revolution_number=max(self.revolution_number + revolutions, 0),
        )

    @property
    def equinoctial(self) -> ndarray:
        """``ndarray``: mean equinoctial set :math:`[n, h, k, p, q, \\lambda_M]`, n in radians/minute."""
        return array(
            [
                self.mean_motion,
                *meanCOE2EQE(
                    self.eccentricity,
                    self.inclination,
                    self.right_ascension,
                    self.argument_of_perigee,
                    self.mean_anomaly,
                ),
            ],
        )

    def withEquinoctial(self, elements: ndarray, epoch: datetime | None = None, bstar: float | None = None) -> TwoLineElement:
        """Copy of this element set built from a mean equinoctial set, see :attr:`.equinoctial`."""
        ecc, inc, raan, argp, mean_anom = eqe2MeanCOE(*elements[1:6])
        return self.withMeanElements(
            self.epoch if epoch is None else epoch,
            float(elements[0]),
            ecc,
            inc,
            raan,
            argp,
            mean_anom,
            bstar=bstar,
        )


def julianDayPair(epoch: datetime) -> tuple[float, float]:
    """Split `epoch` into the whole & fractional Julian day pair consumed by :mod:`sgp4`."""
    return jday(
        epoch.year,
        epoch.month,
        epoch.day,
        epoch.hour,
        epoch.minute,
        epoch.second + epoch.microsecond * 1e-6,
    )


def propagateTLE(tle: TwoLineElement, epoch: datetime) -> ndarray:
    """SGP4 state of `tle` at a single epoch.

    Returns:
        ``ndarray``: 6x1 TEME state vector, (km; km/sec).
    """
    jd, fraction = julianDayPair(utcNaive(epoch))
    error, position, velocity = tle.satrec().sgp4(jd, fraction)
    if error != 0:
        raise ValueError(f"SGP4 propagation failed at {epoch}: {SGP4_ERRORS[error]}")
    return concatenate((asarray(position), asarray(velocity)))


def osculatingEquinoctial(teme_state: ndarray) -> ndarray:
    """Osculating :math:`[n, h, k, p, q, \\lambda_M]` of a TEME state, n in radians/minute."""
    sma, h, k, p, q, mean_long = eci2eqe(teme_state, mu=WGS72_MU)
    return array([sqrt(WGS72_MU / sma**3) * const.MIN2SEC, h, k, p, q, mean_long])


def stateToTLE(
    teme_state: ndarray,
    epoch: datetime,
    template: TwoLineElement,
    bstar: float | None = None,
) -> TwoLineElement:
    """Fit SGP4 mean elements reproducing an osculating TEME state at `epoch`.

    Fixed-point iteration on the equinoctial elements: the mean set is corrected by the difference
    between the target osculating elements and those of the SGP4 state at epoch, until the SGP4
    state matches `teme_state`.

    Args:
        teme_state (``ndarray``): 6x1 TEME state vector, (km; km/sec).
        epoch (``datetime``): epoch of `teme_state`, which becomes the TLE epoch.
        template (:class:`.TwoLineElement`): source of the identity fields & drag term.
        bstar (``float``, optional): drag term to use instead of the template's.

    Returns:
        :class:`.TwoLineElement`: fitted element set.
    """
    teme_state = asarray(teme_state, dtype=float)
    target = osculatingEquinoctial(teme_state)
    mean = target.copy()
    epoch = utcNaive(epoch)

    fitted = template.withEquinoctial(mean, epoch=epoch, bstar=bstar)
    for _ in range(_STATE_FIT_MAX_ITER):
        state = propagateTLE(fitted, epoch)
        if (
            norm(state[:3] - teme_state[:3]) < _STATE_FIT_POSITION_TOL
            and norm(state[3:] - teme_state[3:]) < _STATE_FIT_VELOCITY_TOL
        ):
            return fitted

        delta = target - osculatingEquinoctial(state)
        delta[5] = wrapAngleNegPiPi(delta[5])
        mean += delta
        mean[5] = wrapAngle2Pi(mean[5])
        fitted = template.withEquinoctial(mean, epoch=epoch, bstar=bstar)

    miss = norm(propagateTLE(fitted, epoch)[:3] - teme_state[:3])
    orbitfitLogWarning(f"Mean element fit stopped after {_STATE_FIT_MAX_ITER} iterations, {miss * const.KM2M:.3f} m from target")
    return fitted
