from __future__ import annotations

# Standard Library Imports
import datetime
from dataclasses import asdict
from typing import TYPE_CHECKING

# Third Party Imports
import pytest

# ORBITFIT Imports
from orbitfit.physics import constants as const
from orbitfit.physics.transforms.eops import (
    EarthOrientationParameter,
    MissingEOP,
    getEarthOrientationParameters,
    setEarthOrientationParameters,
)
from orbitfit.physics.transforms.eops.loaders import getLeapSeconds

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from pathlib import Path


EOP_FILE_ROWS: tuple[str, ...] = (
    "# year month day MJD x y UT1-UTC LOD dPsi dEps dX dY DAT\n",
    "2015 09 29 57294  0.188399  0.321516  0.2330445  0.0019330 -0.108432 -0.009051  0.000187 -0.000034 36\n",
    "2015 09 30 57295  0.187147  0.322613  0.2311442  0.0019025 -0.108434 -0.008998  0.000198 -0.000059 36\n",
)


@pytest.fixture(name="eop_data")
def fixtureEOPData() -> dict:
    """Create EOP data for testing."""
    return {
        "date": datetime.date(2018, 1, 1),
        "x_p": 0.059224,
        "y_p": 0.247646,
        "delta_ut1": 0.2163584,
        "length_of_day": 0.0008241,
        "d_delta_psi": -0.105116,
        "d_delta_eps": -0.008107,
        "delta_atomic_time": 37,
    }


@pytest.fixture(name="eop_file")
def writeEOPFile(tmp_path: Path) -> str:
    """Write a small Celestrak-style EOP file."""
    eop_file = tmp_path / "eops.dat"
    with open(eop_file, "w", encoding="utf-8") as out_file:
        out_file.writelines(EOP_FILE_ROWS)
    return str(eop_file)


def testInitKwargs(eop_data: dict):
    """Test initializing dataclass using keyword args."""
    eop = EarthOrientationParameter(**eop_data)
    assert asdict(eop) == eop_data


def testEquality(eop_data: dict):
    """Test equals and not equals operators."""
    eop1 = EarthOrientationParameter(**eop_data)
    eop2 = EarthOrientationParameter(**eop_data)

    eop_data["x_p"] = 0.2
    eop3 = EarthOrientationParameter(**eop_data)

    assert eop1 == eop2
    assert eop1 != eop3


def testCustomEOPFile(eop_file: str):
    """Test EOP reading from custom file."""
    eops = getEarthOrientationParameters(
        datetime.date(2015, 9, 30),
        loader_name="LocalDotDatEOPLoader",
        loader_location=eop_file,
    )

    assert isinstance(eops, EarthOrientationParameter)
    assert eops.date == datetime.date(2015, 9, 30)
    assert eops.delta_atomic_time == 36
    assert eops.length_of_day == 0.0019025
    assert eops.delta_ut1 == 0.2311442
    assert eops.x_p == pytest.approx(0.187147 * const.ARCSEC2RAD)

    with pytest.raises(MissingEOP):
        getEarthOrientationParameters(
            datetime.date(2015, 10, 1),
            loader_name="LocalDotDatEOPLoader",
            loader_location=eop_file,
        )


def testDefaultLoader():
    """Test the default loader, which synthesizes EOPs from the leap second table."""
    eops = getEarthOrientationParameters(datetime.date(2018, 3, 15))

    assert isinstance(eops, EarthOrientationParameter)
    assert eops.date == datetime.date(2018, 3, 15)
    assert eops.delta_atomic_time == 37
    assert eops.delta_ut1 == 0.0
    assert eops.length_of_day == 0.0
    assert (eops.x_p, eops.y_p) == (0.0, 0.0)


@pytest.mark.parametrize(
    ("eop_date", "leap_seconds"),
    [
        (datetime.date(1972, 1, 1), 10),
        (datetime.date(2008, 12, 31), 33),
        (datetime.date(2009, 1, 1), 34),
        (datetime.date(2019, 12, 9), 37),
    ],
)
def testLeapSeconds(eop_date: datetime.date, leap_seconds: int):
    """Test the leap second table lookup on and around its boundaries."""
    assert getLeapSeconds(eop_date) == leap_seconds


def testInvalidDate():
    """Test catching dates before the leap second table."""
    with pytest.raises(MissingEOP):
        getEarthOrientationParameters(datetime.date(1971, 12, 31))


def testSetEOPData(eop_data: dict):
    """Test that explicitly set EOPs take precedence over synthesized ones."""
    eops = EarthOrientationParameter(**eop_data)
    # [NOTE]: a dedicated location keeps this loader separate from the shared default one
    setEarthOrientationParameters(eops.date, eops, loader_location="set-eop-test")
    assert getEarthOrientationParameters(eops.date, loader_location="set-eop-test") == eops
    assert getEarthOrientationParameters(eops.date).x_p == 0.0


def testInvalidLoader():
    """Test catching an invalid loader name."""
    loader_name: str = "MadeUpDotDatLoader"  # Invalid loader name
    valid_date: datetime.date = datetime.date(2021, 4, 20)  # Valid date
    with pytest.raises(ValueError, match="is undefined"):
        getEarthOrientationParameters(valid_date, loader_name=loader_name)
