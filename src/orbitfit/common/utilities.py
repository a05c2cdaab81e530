"""File helpers shared by the data loaders."""

from __future__ import annotations

# Standard Library Imports
from pathlib import Path

# Local Imports
from .logger import orbitfitLogError


def loadDatFile(file_name, delim=None, comment="#"):
    """Read a table of numbers, one row per line.

    Blank lines and lines starting with `comment` are skipped.

    Args:
        file_name (``str``): path of the file.
        delim (``str``, optional): value separator. Defaults to any run of whitespace.
        comment (``str``, optional): prefix of lines to ignore.

    Raises:
        ``FileNotFoundError``: the file does not exist.
        ``ValueError``: a value is not convertible to ``float``.
        ``OSError``: the file holds no data rows.

    Returns:
        ``list``: one ``list`` of ``float`` per data row.
    """
    path = Path(file_name)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        orbitfitLogError(f"Could not find DAT file: {file_name}")
        raise

    rows = [line for line in lines if line.strip() and not line.lstrip().startswith(comment)]
    try:
        data = [[float(value) for value in row.split(sep=delim)] for row in rows]
    except ValueError as err:
        msg = f"Parsing error reading DAT file: {file_name}"
        orbitfitLogError(msg)
        raise ValueError(msg) from err

    if not data:
        msg = f"Empty DAT file: {file_name}"
        orbitfitLogError(msg)
        raise OSError(msg)
    return data
