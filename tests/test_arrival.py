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
"""Tests for the arrival cost model."""

import math

import pytest

from pitchcontrol.engine.arrival import ArrivalCostModel
from pitchcontrol.engine.config import AgentConfig, ArrivalConfig
from pitchcontrol.engine.entities import Agent, Side
from pitchcontrol.engine.physics import Vector2D


def make_agent(x: float, y: float, vx: float = 0.0, vy: float = 0.0) -> Agent:
    return Agent(1, Side.HOME, Vector2D(x, y), Vector2D(vx, vy))


class TestArrivalCost:
    """Behavioural checks for ArrivalCostModel.cost."""

    def test_cost_at_own_position_is_zero(self) -> None:
        """A stationary agent needs nothing to reach where it stands."""
        model = ArrivalCostModel()
        agent = make_agent(100.0, 100.0)
        assert model.cost(agent, agent.position) == 0.0

    def test_cost_at_own_position_is_zero_while_moving(self) -> None:
        """Zero distance short-circuits before any velocity maths."""
        model = ArrivalCostModel()
        agent = make_agent(100.0, 100.0, 5.0, -3.0)
        assert model.cost(agent, agent.position) == 0.0

    def test_unbiased_cost_is_squared_distance(self) -> None:
        """Without bias the cost is the squared Euclidean distance."""
        model = ArrivalCostModel()
        agent = make_agent(0.0, 0.0, 10.0, 0.0)
        assert model.cost(agent, Vector2D(30.0, 40.0), use_velocity_bias=False) == pytest.approx(2500.0)

    def test_cost_strictly_increasing_in_distance(self) -> None:
        """Further targets always cost more without bias."""
        model = ArrivalCostModel()
        agent = make_agent(0.0, 0.0)
        costs = [model.cost(agent, Vector2D(d, 0.0), use_velocity_bias=False) for d in (1.0, 2.0, 5.0, 50.0, 500.0)]
        assert costs == sorted(costs)
        assert len(set(costs)) == len(costs)

    def test_approaching_agent_beats_receding_agent(self) -> None:
        """At equal distance the agent running towards the point is cheaper."""
        model = ArrivalCostModel()
        target = Vector2D(100.0, 0.0)
        towards = make_agent(0.0, 0.0, 4.0, 0.0)
        away = make_agent(0.0, 0.0, -4.0, 0.0)
        assert model.cost(towards, target) < model.cost(away, target)

    def test_head_start_matches_weighted_closing_speed(self) -> None:
        """The effective distance drops by weight times closing speed."""
        model = ArrivalCostModel(ArrivalConfig(max_closing_speed=12.0, closing_speed_weight=6.0))
        agent = make_agent(0.0, 0.0, 5.0, 0.0)
        assert model.effective_distance(agent, Vector2D(100.0, 0.0)) == pytest.approx(70.0)
        assert model.cost(agent, Vector2D(100.0, 0.0)) == pytest.approx(4900.0)

    def test_closing_speed_is_clamped(self) -> None:
        """Closing speed never exceeds the configured maximum either way."""
        model = ArrivalCostModel(ArrivalConfig(max_closing_speed=3.0, closing_speed_weight=1.0))
        fast_in = make_agent(0.0, 0.0, 50.0, 0.0)
        fast_out = make_agent(0.0, 0.0, -50.0, 0.0)
        assert model.closing_speed(fast_in, Vector2D(10.0, 0.0)) == 3.0
        assert model.closing_speed(fast_out, Vector2D(10.0, 0.0)) == -3.0

    def test_sideways_velocity_gives_no_bias(self) -> None:
        """Velocity perpendicular to the path has no effect."""
        model = ArrivalCostModel()
        agent = make_agent(0.0, 0.0, 0.0, 9.0)
        target = Vector2D(50.0, 0.0)
        assert model.cost(agent, target) == pytest.approx(model.cost(agent, target, use_velocity_bias=False))

    def test_cost_never_negative(self) -> None:
        """A large head start floors the effective distance at zero."""
        model = ArrivalCostModel()
        agent = make_agent(0.0, 0.0, 12.0, 0.0)
        assert model.cost(agent, Vector2D(5.0, 0.0)) == 0.0


class TestArrivalTimes:
    """Conversions from cost to time and per-side minima."""

    def test_time_to_reach_uses_nominal_speed(self) -> None:
        """Time is the square-rooted cost over the nominal agent speed."""
        model = ArrivalCostModel(agent_config=AgentConfig(nominal_speed=4.0))
        agent = make_agent(0.0, 0.0)
        assert model.time_to_reach(agent, Vector2D(0.0, 20.0)) == pytest.approx(5.0)

    def test_best_cost_of_empty_side_is_infinite(self) -> None:
        """No agents means no one ever arrives."""
        model = ArrivalCostModel()
        assert math.isinf(model.best_cost([], Vector2D(0.0, 0.0)))
        assert math.isinf(model.best_time([], Vector2D(0.0, 0.0)))

    def test_best_cost_picks_closest(self) -> None:
        """The minimum over a side is its closest agent."""
        model = ArrivalCostModel()
        agents = [make_agent(0.0, 0.0), make_agent(8.0, 0.0), make_agent(30.0, 0.0)]
        assert model.best_cost(agents, Vector2D(10.0, 0.0)) == pytest.approx(4.0)
        assert model.best_time(agents, Vector2D(10.0, 0.0)) == pytest.approx(2.0 / 8.0)
