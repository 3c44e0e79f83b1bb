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
"""Central configuration for control-field tuning parameters.

All distances are expressed in logical field units and all speeds in logical
units per tick. The blocks are frozen so a session can hand the same instance
to every component without any of them altering shared state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True, frozen=True)
class PitchConfig:
    """Logical dimensions of the field rectangle.

    Parameters
    ----------
    width : float, default=1050.0
        Field width in logical units (105 m scaled by ten).
    height : float, default=680.0
        Field height in logical units (68 m scaled by ten).
    """

    width: float = 1050.0
    height: float = 680.0

    def __post_init__(self) -> None:
        """Reject degenerate field sizes."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Pitch dimensions must be positive")


@dataclass(slots=True, frozen=True)
class AgentConfig:
    """Size and speed limits applied to every agent.

    Parameters
    ----------
    radius : float, default=10.0
        Visual radius of an agent; drives the clamp margin and pick radius.
    margin_factor : float, default=1.5
        Multiple of ``radius`` kept between an agent and the field edge.
    hit_radius_factor : float, default=1.5
        Multiple of ``radius`` used when hit-testing a point against agents.
    max_speed : float, default=12.0
        Largest velocity magnitude an agent may carry.
    nominal_speed : float, default=8.0
        Speed used to turn an effective distance into a travel time.
    """

    radius: float = 10.0
    margin_factor: float = 1.5
    hit_radius_factor: float = 1.5
    max_speed: float = 12.0
    nominal_speed: float = 8.0

    @property
    def margin(self) -> float:
        """Inset kept between agent centres and the field boundary.

        Returns
        -------
        float
            ``radius * margin_factor`` in logical units.
        """
        return self.radius * self.margin_factor

    @property
    def hit_radius(self) -> float:
        """Radius within which a point selects an agent.

        Returns
        -------
        float
            ``radius * hit_radius_factor`` in logical units.
        """
        return self.radius * self.hit_radius_factor


@dataclass(slots=True, frozen=True)
class BallConfig:
    """Ball size and the nominal speed used for analytic travel times.

    Parameters
    ----------
    radius : float, default=7.0
        Visual radius of the ball.
    margin_factor : float, default=1.5
        Multiple of ``radius`` kept between the ball and the field edge.
    nominal_speed : float, default=24.0
        Constant speed assumed for every pass or ball movement.
    """

    radius: float = 7.0
    margin_factor: float = 1.5
    nominal_speed: float = 24.0

    @property
    def margin(self) -> float:
        """Inset kept between the ball centre and the field boundary.

        Returns
        -------
        float
            ``radius * margin_factor`` in logical units.
        """
        return self.radius * self.margin_factor


@dataclass(slots=True, frozen=True)
class ArrivalConfig:
    """Velocity bias applied by the arrival cost model.

    Parameters
    ----------
    max_closing_speed : float, default=12.0
        Clamp applied to the signed closing speed before it biases distance.
    closing_speed_weight : float, default=6.0
        Head start, in ticks, credited per unit of clamped closing speed.
    """

    max_closing_speed: float = 12.0
    closing_speed_weight: float = 6.0


@dataclass(slots=True, frozen=True)
class ControlConfig:
    """Sampling resolution and contest thresholds for the control field.

    Parameters
    ----------
    grid_step : float, default=10.0
        Default cell size in logical units.
    fade_start : float, default=0.6
        Cost ratio below which a cell is treated as uncontested.
    full_contest : float, default=0.9
        Cost ratio at or above which a cell is fully contested.
    """

    grid_step: float = 10.0
    fade_start: float = 0.6
    full_contest: float = 0.9

    def __post_init__(self) -> None:
        """Validate the grid step and threshold ordering."""
        if self.grid_step <= 0:
            raise ValueError("grid_step must be positive")
        if not 0.0 <= self.fade_start < self.full_contest <= 1.0:
            raise ValueError("Contest thresholds must satisfy 0 <= fade_start < full_contest <= 1")


@dataclass(slots=True, frozen=True)
class PassConfig:
    """Pass safety tuning.

    Parameters
    ----------
    min_pass_length : float, default=1e-6
        Passes shorter than this are degenerate and reported unsafe.
    """

    min_pass_length: float = 1e-6


@dataclass(slots=True, frozen=True)
class TimelineConfig:
    """Replay defaults.

    Parameters
    ----------
    default_speed : float, default=1.0
        Playback multiplier used when none is requested.
    max_speed : float, default=8.0
        Largest playback multiplier accepted by the player.
    """

    default_speed: float = 1.0
    max_speed: float = 8.0


@dataclass(slots=True, frozen=True)
class FormationConfig:
    """Kick-off formation expressed as fractions of the field.

    Parameters
    ----------
    home_slots : Tuple[Tuple[float, float], ...]
        ``(x, y)`` fractions for the home side; the away side mirrors ``x``.
    """

    home_slots: Tuple[Tuple[float, float], ...] = (
        # Goalkeeper
        (0.08, 0.5),
        # Back four
        (0.22, 0.18),
        (0.22, 0.38),
        (0.22, 0.62),
        (0.22, 0.82),
        # Midfield four
        (0.40, 0.16),
        (0.40, 0.35),
        (0.40, 0.65),
        (0.40, 0.84),
        # Forwards
        (0.64, 0.35),
        (0.64, 0.65),
    )

    def __post_init__(self) -> None:
        """Ensure every slot lies on the unit square."""
        for x, y in self.home_slots:
            if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
                raise ValueError("Formation slots must be fractions between 0 and 1")


@dataclass(slots=True, frozen=True)
class EngineConfig:
    """Top-level container for all tuning blocks.

    Parameters
    ----------
    pitch : PitchConfig, default=PitchConfig()
        Field dimensions.
    agent : AgentConfig, default=AgentConfig()
        Agent size and speed limits.
    ball : BallConfig, default=BallConfig()
        Ball size and nominal speed.
    arrival : ArrivalConfig, default=ArrivalConfig()
        Arrival cost velocity bias.
    control : ControlConfig, default=ControlConfig()
        Control field sampling and thresholds.
    passing : PassConfig, default=PassConfig()
        Pass safety tuning.
    timeline : TimelineConfig, default=TimelineConfig()
        Replay defaults.
    formation : FormationConfig, default=FormationConfig()
        Kick-off formation.
    """

    pitch: PitchConfig = field(default_factory=PitchConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    ball: BallConfig = field(default_factory=BallConfig)
    arrival: ArrivalConfig = field(default_factory=ArrivalConfig)
    control: ControlConfig = field(default_factory=ControlConfig)
    passing: PassConfig = field(default_factory=PassConfig)
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    formation: FormationConfig = field(default_factory=FormationConfig)


DEFAULT_CONFIG = EngineConfig()
"""Read-only defaults used when a component is created without a config."""
