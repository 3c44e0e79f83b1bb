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
"""Coarse-grid control map over the field.

The engine samples one point per grid cell, finds each side's best arrival
cost there and turns the pair into a :class:`ControlValue`. The grid is
independent of any display resolution; renderers receive the downsampled
buffer and upscale it themselves.

Two modes are supported:

``PLAIN``
    The side with the lower cost controls the cell. The ratio of the two
    costs is mapped through the fade thresholds to a contest scalar.
``BALL_RELATIVE``
    Arrival times are compared with the ball's travel time to the cell. When
    both sides beat the ball the cell is neutral, otherwise the faster side
    controls it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence

from .arrival import ArrivalCostModel
from .config import DEFAULT_CONFIG, BallConfig, ControlConfig
from .entities import Agent, EntitySnapshot, Side
from .physics import Pitch, Vector2D


class ControlMode(Enum):
    """How a cell's controller is decided."""

    PLAIN = "plain"
    BALL_RELATIVE = "ball_relative"


@dataclass(frozen=True)
class ControlValue:
    """Per-cell verdict.

    Parameters
    ----------
    controller : Side | None
        Controlling side, ``None`` for a neutral cell.
    contest : float
        Contest scalar in ``[0, 1]``; ``0`` is unambiguous control.
    """

    controller: Optional[Side]
    contest: float

    @property
    def is_neutral(self) -> bool:
        """Whether no side controls the cell."""
        return self.controller is None


@dataclass(frozen=True)
class ControlCell:
    """One sampled grid cell.

    Parameters
    ----------
    column : int
        Zero-based column index.
    row : int
        Zero-based row index.
    center : Vector2D
        Logical coordinates of the sample point.
    value : ControlValue
        Control verdict at ``center``.
    """

    column: int
    row: int
    center: Vector2D
    value: ControlValue


@dataclass(frozen=True)
class ControlField:
    """Result of one field evaluation.

    Parameters
    ----------
    step : float
        Cell size used for sampling.
    columns : int
        Number of grid columns.
    rows : int
        Number of grid rows.
    mode : ControlMode
        Mode the field was evaluated in.
    cells : Sequence[ControlCell]
        Evaluated cells in row-major order; empty when no agents exist.
    """

    step: float
    columns: int
    rows: int
    mode: ControlMode
    cells: Sequence[ControlCell]

    def __iter__(self) -> Iterator[ControlCell]:
        """Iterate over the evaluated cells in row-major order."""
        return iter(self.cells)

    def __len__(self) -> int:
        """Return the number of evaluated cells."""
        return len(self.cells)

    def as_grid(self) -> List[List[Optional[ControlValue]]]:
        """Return the values as a ``rows x columns`` buffer for upscaling.

        Returns
        -------
        List[List[Optional[ControlValue]]]
            Row-major buffer with ``None`` where no value was produced.
        """
        grid: List[List[Optional[ControlValue]]] = [[None] * self.columns for _ in range(self.rows)]
        for cell in self.cells:
            grid[cell.row][cell.column] = cell.value
        return grid

    def control_share(self) -> Dict[str, float]:
        """Return the fraction of evaluated cells held by each side.

        Returns
        -------
        Dict[str, float]
            Fractions keyed by ``"home"``, ``"away"`` and ``"neutral"``; all
            zero when the field is empty.
        """
        counts = {Side.HOME.value: 0, Side.AWAY.value: 0, "neutral": 0}
        for cell in self.cells:
            key = "neutral" if cell.value.is_neutral else cell.value.controller.value
            counts[key] += 1
        total = len(self.cells)
        if total == 0:
            return {key: 0.0 for key in counts}
        return {key: count / total for key, count in counts.items()}


class ControlFieldEngine:
    """Evaluates control values over the sampling grid.

    Parameters
    ----------
    pitch : Pitch | None, optional
        Field to sample; built from defaults when omitted.
    config : ControlConfig | None, optional
        Grid step and contest thresholds.
    cost_model : ArrivalCostModel | None, optional
        Arrival cost model shared with pass safety.
    ball_config : BallConfig | None, optional
        Supplies the nominal ball speed for ball-relative mode.
    """

    def __init__(
        self,
        pitch: Optional[Pitch] = None,
        config: Optional[ControlConfig] = None,
        cost_model: Optional[ArrivalCostModel] = None,
        ball_config: Optional[BallConfig] = None,
    ) -> None:
        """Wire the engine to its collaborators.

        Parameters
        ----------
        pitch : Pitch | None, optional
            Field to sample; built from defaults when omitted.
        config : ControlConfig | None, optional
            Grid step and contest thresholds.
        cost_model : ArrivalCostModel | None, optional
            Arrival cost model shared with pass safety.
        ball_config : BallConfig | None, optional
            Supplies the nominal ball speed for ball-relative mode.
        """
        self.pitch = pitch if pitch is not None else Pitch()
        self.config = config if config is not None else DEFAULT_CONFIG.control
        self.cost_model = cost_model if cost_model is not None else ArrivalCostModel()
        self.ball_config = ball_config if ball_config is not None else DEFAULT_CONFIG.ball

    def contest_scalar(self, ratio: float) -> float:
        """Map a score ratio onto the contest scalar.

        Parameters
        ----------
        ratio : float
            ``min / max`` of the two sides' scores, ``1.0`` meaning a tie.

        Returns
        -------
        float
            ``0`` below ``fade_start``, ``1`` from ``full_contest`` upwards and
            linear in between.
        """
        fade_start = self.config.fade_start
        full_contest = self.config.full_contest
        if ratio < fade_start:
            return 0.0
        if ratio >= full_contest:
            return 1.0
        return (ratio - fade_start) / (full_contest - fade_start)

    @staticmethod
    def _score_ratio(home: float, away: float) -> float:
        """Return ``min / max`` of two finite, non-negative scores.

        Parameters
        ----------
        home : float
            Home side score.
        away : float
            Away side score.

        Returns
        -------
        float
            Ratio in ``[0, 1]``; ``1.0`` when both scores are zero.
        """
        high = max(home, away)
        if high == 0:
            return 1.0
        return min(home, away) / high

    def _compare(self, scores: Dict[Side, float]) -> ControlValue:
        """Resolve a cell from per-side scores where lower is better.

        Parameters
        ----------
        scores : Dict[Side, float]
            Best score per side; ``math.inf`` for an empty side.

        Returns
        -------
        ControlValue
            The lower scoring side, home on ties, with its contest scalar.
        """
        home = scores[Side.HOME]
        away = scores[Side.AWAY]
        if math.isinf(away):
            return ControlValue(Side.HOME, 0.0)
        if math.isinf(home):
            return ControlValue(Side.AWAY, 0.0)
        winner = Side.HOME if home <= away else Side.AWAY
        return ControlValue(winner, self.contest_scalar(self._score_ratio(home, away)))

    def evaluate_point(
        self,
        point: Vector2D,
        agents_by_side: Dict[Side, List[Agent]],
        ball: Vector2D,
        mode: ControlMode = ControlMode.PLAIN,
        use_velocity_bias: bool = True,
    ) -> Optional[ControlValue]:
        """Return the control value at a single point.

        Parameters
        ----------
        point : Vector2D
            Logical coordinates to evaluate.
        agents_by_side : Dict[Side, List[Agent]]
            Agents grouped by side; missing sides count as empty.
        ball : Vector2D
            Ball position, used in ball-relative mode.
        mode : ControlMode, optional
            Evaluation mode.
        use_velocity_bias : bool, optional
            Whether velocities bias the arrival costs.

        Returns
        -------
        ControlValue | None
            ``None`` when neither side has any agents.
        """
        home_agents = agents_by_side.get(Side.HOME, [])
        away_agents = agents_by_side.get(Side.AWAY, [])
        if not home_agents and not away_agents:
            return None

        if mode is ControlMode.PLAIN:
            return self._compare(
                {
                    Side.HOME: self.cost_model.best_cost(home_agents, point, use_velocity_bias),
                    Side.AWAY: self.cost_model.best_cost(away_agents, point, use_velocity_bias),
                }
            )

        if mode is ControlMode.BALL_RELATIVE:
            times = {
                Side.HOME: self.cost_model.best_time(home_agents, point, use_velocity_bias),
                Side.AWAY: self.cost_model.best_time(away_agents, point, use_velocity_bias),
            }
            ball_time = ball.distance_to(point) / self.ball_config.nominal_speed
            if times[Side.HOME] < ball_time and times[Side.AWAY] < ball_time:
                return ControlValue(None, 1.0)
            return self._compare(times)

        raise ValueError(f"Unsupported control mode: {mode!r}")

    def evaluate(
        self,
        snapshot: EntitySnapshot,
        step: Optional[float] = None,
        mode: ControlMode = ControlMode.PLAIN,
        use_velocity_bias: bool = True,
    ) -> ControlField:
        """Evaluate every grid cell against one entity snapshot.

        Parameters
        ----------
        snapshot : EntitySnapshot
            State to evaluate; never modified.
        step : float | None, optional
            Cell size override; defaults to the configured grid step.
        mode : ControlMode, optional
            Evaluation mode.
        use_velocity_bias : bool, optional
            Whether velocities bias the arrival costs.

        Returns
        -------
        ControlField
            Cells in row-major order, empty when neither side has agents.
        """
        step = self.config.grid_step if step is None else step
        columns, rows = self.pitch.grid_shape(step)
        agents_by_side = {side: snapshot.on_side(side) for side in Side}

        cells: List[ControlCell] = []
        if any(agents_by_side.values()):
            for column, row, center in self.pitch.iter_cells(step):
                value = self.evaluate_point(center, agents_by_side, snapshot.ball, mode, use_velocity_bias)
                if value is not None:
                    cells.append(ControlCell(column, row, center, value))

        return ControlField(step=step, columns=columns, rows=rows, mode=mode, cells=tuple(cells))
