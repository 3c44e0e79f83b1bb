# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Geometric primitives shared by every control-field component.

The module provides a small immutable vector helper and the field rectangle.
Positions use logical coordinates with the origin in the top-left corner,
``x`` growing towards the away goal and ``y`` growing downwards.
"""
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .config import DEFAULT_CONFIG, PitchConfig


@dataclass(frozen=True)
class Vector2D:
    """Two-dimensional vector with convenience operations.

    Instances are immutable, so a vector stored in a snapshot can never be
    altered by later writes to the entity it was taken from.

    Parameters
    ----------
    x : float
        Horizontal component in logical units.
    y : float
        Vertical component in logical units.
    """

    x: float
    y: float

    def __add__(self, other: "Vector2D") -> "Vector2D":
        """Return the vector sum of ``self`` and ``other``."""
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        """Return the vector difference ``self - other``."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        """Scale the vector by ``scalar`` while preserving direction."""
        return Vector2D(self.x * scalar, self.y * scalar)

    def dot(self, other: "Vector2D") -> float:
        """Return the scalar product of ``self`` and ``other``.

        Parameters
        ----------
        other : Vector2D
            Second operand.

        Returns
        -------
        float
            ``self.x * other.x + self.y * other.y``.
        """
        return self.x * other.x + self.y * other.y

    def magnitude(self) -> float:
        """Return the Euclidean length of the vector.

        Returns
        -------
        float
            Scalar magnitude in logical units.
        """
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalize(self) -> "Vector2D":
        """Return a unit vector pointing in the same direction as ``self``.

        Returns
        -------
        Vector2D
            Normalised vector; zero vector when ``self`` has no magnitude.
        """
        mag = self.magnitude()
        if mag == 0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / mag, self.y / mag)

    def clamp_magnitude(self, limit: float) -> "Vector2D":
        """Return ``self`` shortened to at most ``limit`` without turning it.

        Parameters
        ----------
        limit : float
            Largest magnitude the returned vector may have.

        Returns
        -------
        Vector2D
            ``self`` unchanged when already short enough, otherwise rescaled.
            A vector clamped earlier passes through unchanged.
        """
        mag = self.magnitude()
        # Rescaling can land a rounding error above the limit.
        if mag <= limit * (1 + 1e-12):
            return self
        if limit <= 0:
            return Vector2D(0.0, 0.0)
        return self * (limit / mag)

    def distance_to(self, other: "Vector2D") -> float:
        """Return the straight-line distance between ``self`` and ``other``.

        Parameters
        ----------
        other : Vector2D
            Vector whose separation from ``self`` should be measured.

        Returns
        -------
        float
            Euclidean distance between the two points.
        """
        return (other - self).magnitude()

    def as_tuple(self) -> Tuple[float, float]:
        """Return the components as a plain ``(x, y)`` tuple.

        Returns
        -------
        Tuple[float, float]
            Components in ``(x, y)`` order.
        """
        return (self.x, self.y)


def _clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` to ``[low, high]``, collapsing to the midpoint when empty.

    Parameters
    ----------
    value : float
        Number to clamp.
    low : float
        Lower bound.
    high : float
        Upper bound.

    Returns
    -------
    float
        ``value`` when inside the interval, the nearest bound otherwise.
    """
    if low > high:
        return (low + high) / 2
    return max(low, min(high, value))


class Pitch:
    """Axis-aligned field rectangle in logical coordinates.

    The pitch is read-only after construction. It clamps positions to an
    inset rectangle and describes the coarse sampling grid used by the
    control field.

    Parameters
    ----------
    width : float | None, optional
        Field width override; defaults to configuration.
    height : float | None, optional
        Field height override; defaults to configuration.
    config : PitchConfig | None, optional
        Dimension block used when overrides are omitted.
    """

    def __init__(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        config: Optional[PitchConfig] = None,
    ) -> None:
        """Initialise the field from explicit sizes or configuration.

        Parameters
        ----------
        width : float | None, optional
            Field width override; defaults to configuration.
        height : float | None, optional
            Field height override; defaults to configuration.
        config : PitchConfig | None, optional
            Dimension block used when overrides are omitted.
        """
        cfg = config if config is not None else DEFAULT_CONFIG.pitch
        self._width = float(width if width is not None else cfg.width)
        self._height = float(height if height is not None else cfg.height)
        if self._width <= 0 or self._height <= 0:
            raise ValueError("Pitch dimensions must be positive")

    @property
    def width(self) -> float:
        """Field width in logical units."""
        return self._width

    @property
    def height(self) -> float:
        """Field height in logical units."""
        return self._height

    @property
    def center(self) -> Vector2D:
        """Centre spot of the field."""
        return Vector2D(self._width / 2, self._height / 2)

    def is_in_bounds(self, position: Vector2D, margin: float = 0.0) -> bool:
        """Check whether ``position`` lies inside the field inset by ``margin``.

        Parameters
        ----------
        position : Vector2D
            Location to test.
        margin : float, optional
            Inset applied on every side.

        Returns
        -------
        bool
            ``True`` when the position is inside the inset rectangle.
        """
        return (
            margin <= position.x <= self._width - margin
            and margin <= position.y <= self._height - margin
        )

    def constrain_to_bounds(self, position: Vector2D, margin: float = 0.0) -> Vector2D:
        """Clamp ``position`` into the field inset by ``margin``.

        Parameters
        ----------
        position : Vector2D
            Location to clamp.
        margin : float, optional
            Inset applied on every side.

        Returns
        -------
        Vector2D
            The original vector when already inside, otherwise a clamped copy.
        """
        if self.is_in_bounds(position, margin):
            return position
        return Vector2D(
            _clamp(position.x, margin, self._width - margin),
            _clamp(position.y, margin, self._height - margin),
        )

    def grid_shape(self, step: float) -> Tuple[int, int]:
        """Return the number of sampling columns and rows for ``step``.

        Parameters
        ----------
        step : float
            Cell size in logical units.

        Returns
        -------
        Tuple[int, int]
            ``(columns, rows)`` covering the whole field.
        """
        if step <= 0:
            raise ValueError("Grid step must be positive")
        return math.ceil(self._width / step), math.ceil(self._height / step)

    def cell_center(self, column: int, row: int, step: float) -> Vector2D:
        """Return the sample point of a grid cell.

        Edge cells that overhang the field are sampled at the middle of
        their visible part.

        Parameters
        ----------
        column : int
            Zero-based column index.
        row : int
            Zero-based row index.
        step : float
            Cell size in logical units.

        Returns
        -------
        Vector2D
            Logical coordinates of the cell centre.
        """
        x0 = column * step
        y0 = row * step
        x1 = min(x0 + step, self._width)
        y1 = min(y0 + step, self._height)
        return Vector2D((x0 + x1) / 2, (y0 + y1) / 2)

    def iter_cells(self, step: float) -> Iterator[Tuple[int, int, Vector2D]]:
        """Yield every grid cell in row-major order.

        Parameters
        ----------
        step : float
            Cell size in logical units.

        Returns
        -------
        Iterator[Tuple[int, int, Vector2D]]
            ``(column, row, centre)`` for each cell, rows outermost.
        """
        columns, rows = self.grid_shape(step)
        for row in range(rows):
            for column in range(columns):
                yield column, row, self.cell_center(column, row, step)
