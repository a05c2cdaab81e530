"""Submodule defining the annotated field types shared by the ``determination.config`` models."""

from __future__ import annotations

# Standard Library Imports
from typing import Annotated

# Third Party Imports
from pydantic import Field

Vector3 = Annotated[list[float], Field(..., min_length=3, max_length=3)]
"""Annotated[type]: Type annotation describing a 3 element vector."""

Degree0to360 = Annotated[float, Field(..., ge=0.0, lt=360.0)]
R"""Type annotation denoting a floating point number :math:`\in[0, 360)`"""

DegreeNeg90to90 = Annotated[float, Field(..., ge=-90.0, le=90.0)]
R"""Type annotation denoting a floating point number :math:`\in[-90, 90]`"""

DegreeNeg180to360 = Annotated[float, Field(..., ge=-180.0, le=360.0)]
"""Type annotation denoting a longitude in either the :math:`[-180, 180]` or :math:`[0, 360]` convention."""

PosFloat = Annotated[float, Field(..., gt=0.0)]
"""Type annotation denoting a positive floating point number."""

PosInt = Annotated[int, Field(..., gt=0)]
"""Type annotation denoting a positive integer."""
