from __future__ import annotations

# Standard Library Imports
from datetime import datetime
from typing import TYPE_CHECKING

# Third Party Imports
import pytest

# ORBITFIT Imports
import orbitfit.common.utilities as utils
from orbitfit.common import pathSafeTime

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from pathlib import Path


@pytest.fixture(name="dat_directory")
def writeDatFiles(tmp_path: Path) -> Path:
    """Write valid, empty & invalid dat files into a temporary directory."""
    (tmp_path / "valid.dat").write_text("# header\n1 2 3.5\n\n4.0 -5 6e-3\n", encoding="utf-8")
    (tmp_path / "empty.dat").write_text("# only a comment\n\n", encoding="utf-8")
    (tmp_path / "invalid.dat").write_text("1, 2, three\n", encoding="utf-8")
    return tmp_path


def testLoadDatFile(dat_directory: Path):
    """Ensure dat file loader works properly."""
    # Valid dat file
    assert utils.loadDatFile(str(dat_directory / "valid.dat")) == [[1.0, 2.0, 3.5], [4.0, -5.0, 6e-3]]
    # Empty dat file
    with pytest.raises(IOError, match="Empty DAT file:") as io_exc_info:
        utils.loadDatFile(str(dat_directory / "empty.dat"))
    err_msg: str = io_exc_info.value.args[0]
    assert err_msg.endswith(".dat")
    # Non-existant dat file
    with pytest.raises(FileNotFoundError):
        utils.loadDatFile(str(dat_directory / "nonexistant.dat"))
    # Invalid dat file
    with pytest.raises(ValueError, match="Parsing error reading DAT file:") as io_exc_info:
        utils.loadDatFile(str(dat_directory / "invalid.dat"), delim=",")
    err_msg = io_exc_info.value.args[0]
    assert err_msg.endswith(".dat")


def testPathSafeTime():
    """Ensure time stamps can be used inside file names."""
    stamp = pathSafeTime(datetime(2019, 12, 9, 16, 38, 29, 363424))
    assert stamp == "2019-12-09T16-38-29363424"
    assert ":" not in pathSafeTime()
