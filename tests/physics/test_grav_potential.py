from __future__ import annotations

# Standard Library Imports
import logging
from typing import TYPE_CHECKING

# Third Party Imports
import pytest
from numpy import allclose
from numpy import any as np_any
from numpy import array
from numpy.linalg import norm

# ORBITFIT Imports
from orbitfit.common.labels import GeopotentialModel
from orbitfit.physics.bodies import Earth
from orbitfit.physics.bodies.gravitational_potential import (
    buildGeopotentialField,
    loadGeopotentialCoefficients,
    nonSphericalAcceleration,
)

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from pathlib import Path

    # Third Party Imports
    from numpy import ndarray


TEST_CASES: list[tuple[int, int, ndarray]] = [
    # (degree, order, [truth])
    (2, 0, [-0.023402725520133, 0.178921657872794, -0.158647615812368]),
    (4, 4, [-0.025272814133158, 0.180129562607620, -0.156608150434144]),
]
# IERS test cases, no formal reference to where these came from

ITRF_POSITION: ndarray = array([-1033.4793830, 7901.2952754, 6380.3565958])  # km


@pytest.mark.parametrize(("degree", "order", "truth"), TEST_CASES)
def testGeoPotentialFunction(degree: int, order: int, truth: ndarray):
    """Test the non-spherical geopotential acceleration function."""
    field = buildGeopotentialField(GeopotentialModel.EGM96.value, degree, order)
    accelerations = nonSphericalAcceleration(ITRF_POSITION, Earth.mu, Earth.radius, field)
    assert allclose(accelerations, array(truth) * 1e-5, atol=1e-12, rtol=1e-6)


def testLoadingGravityModel():
    """Test loading the bundled gravity model."""
    c_nm, s_nm = loadGeopotentialCoefficients(GeopotentialModel.EGM96.value)
    assert c_nm.shape == s_nm.shape == (5, 5)
    assert np_any(c_nm)
    assert np_any(s_nm)
    # Degree one & the zonal sine terms are never populated
    assert not np_any(c_nm[1])
    assert not np_any(s_nm[:, 0])


def testFieldTruncation(caplog: pytest.LogCaptureFixture):
    """Test that requesting more terms than the model provides clamps the field with a warning."""
    with caplog.at_level(logging.WARNING, logger="orbitfit"):
        field = buildGeopotentialField(GeopotentialModel.EGM96.value, 64, 64)

    assert (field.degree, field.order) == (4, 4)
    assert any("truncating 64x64" in message for message in caplog.messages)

    field = buildGeopotentialField(GeopotentialModel.EGM96.value, 3, 2)
    assert (field.degree, field.order) == (3, 2)


def testInvalidTruncation():
    """Test that the order cannot exceed the degree."""
    with pytest.raises(ValueError, match="cannot exceed degree"):
        buildGeopotentialField(GeopotentialModel.EGM96.value, 2, 3)


def testHigherDegreeTermsAreSmall():
    """Test that terms beyond J2 change the acceleration, but only slightly."""
    j2_only = nonSphericalAcceleration(ITRF_POSITION, Earth.mu, Earth.radius, buildGeopotentialField("egm96.txt", 2, 0))
    full = nonSphericalAcceleration(ITRF_POSITION, Earth.mu, Earth.radius, buildGeopotentialField("egm96.txt", 4, 4))
    assert not allclose(j2_only, full, atol=0.0, rtol=1e-12)
    assert norm(full - j2_only) < 0.05 * norm(full)


def testLoadingExternalGravityModel(tmp_path: Path):
    """Test loading a model file by path, ignoring trailing sigma columns."""
    bundled_c, bundled_s = loadGeopotentialCoefficients(GeopotentialModel.EGM96.value)
    model_file = tmp_path / "egm96_to3.ascii"
    model_file.write_text(
        "    2    0 -0.484165371736E-03  0.000000000000E+00  0.356106182302E-10  0.000000000000E+00\n"
        "    2    2  0.243914352398E-05 -0.140016683654E-05  0.353808885484E-10  0.351213154245E-10\n"
        "    3    1  0.202998882184E-05  0.248513158716E-06  0.206004518775E-10  0.204928123980E-10\n",
    )

    c_nm, s_nm = loadGeopotentialCoefficients(str(model_file))
    assert c_nm.shape == s_nm.shape == (4, 4)
    assert c_nm[2, 0] == pytest.approx(bundled_c[2, 0])
    assert s_nm[2, 2] == pytest.approx(bundled_s[2, 2])
    assert c_nm[3, 1] == pytest.approx(bundled_c[3, 1])

    field = buildGeopotentialField(str(model_file), 3, 1)
    assert (field.degree, field.order) == (3, 1)
