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
"""Tests for the control field engine."""

import pytest

from pitchcontrol.engine.arrival import ArrivalCostModel
from pitchcontrol.engine.config import AgentConfig, BallConfig, ControlConfig
from pitchcontrol.engine.control_field import ControlFieldEngine, ControlMode, ControlValue
from pitchcontrol.engine.entities import Agent, EntitySnapshot, Side
from pitchcontrol.engine.physics import Pitch, Vector2D


def make_engine(ball_speed: float = 24.0) -> ControlFieldEngine:
    return ControlFieldEngine(
        pitch=Pitch(width=100.0, height=100.0),
        config=ControlConfig(grid_step=20.0, fade_start=0.6, full_contest=0.9),
        cost_model=ArrivalCostModel(agent_config=AgentConfig(nominal_speed=8.0)),
        ball_config=BallConfig(nominal_speed=ball_speed),
    )


def snapshot(*agents: Agent, ball: Vector2D = Vector2D(50.0, 50.0)) -> EntitySnapshot:
    return EntitySnapshot(agents=tuple(agents), ball=ball)


class TestContestScalar:
    """Threshold mapping from cost ratio to contest scalar."""

    def test_below_fade_start(self) -> None:
        """Ratios under the fade start are uncontested."""
        assert make_engine().contest_scalar(0.3) == 0.0

    def test_at_or_above_full_contest(self) -> None:
        """Ratios from the full-contest threshold up are fully contested."""
        engine = make_engine()
        assert engine.contest_scalar(0.9) == 1.0
        assert engine.contest_scalar(1.0) == 1.0

    def test_linear_between_thresholds(self) -> None:
        """Ratios between the thresholds interpolate linearly."""
        assert make_engine().contest_scalar(0.75) == pytest.approx(0.5)

    def test_thresholds_are_validated(self) -> None:
        """Inverted thresholds are refused."""
        with pytest.raises(ValueError):
            ControlConfig(fade_start=0.9, full_contest=0.5)


class TestPlainMode:
    """Nearest-control evaluation."""

    def test_single_side_controls_everything_uncontested(self) -> None:
        """A field with only home agents is home everywhere with contest 0."""
        engine = make_engine()
        field = engine.evaluate(snapshot(Agent(1, Side.HOME, Vector2D(20.0, 20.0)), Agent(2, Side.HOME, Vector2D(80.0, 70.0))))
        assert len(field) == field.columns * field.rows == 25
        for cell in field:
            assert cell.value == ControlValue(Side.HOME, 0.0)

    def test_only_away_side(self) -> None:
        """The away side controls unconditionally when home is empty."""
        field = make_engine().evaluate(snapshot(Agent(1, Side.AWAY, Vector2D(20.0, 20.0))))
        assert {cell.value.controller for cell in field} == {Side.AWAY}

    def test_equidistant_cell_is_fully_contested(self) -> None:
        """Home at (10,50) and away at (90,50) tie at the centre cell."""
        engine = make_engine()
        state = snapshot(Agent(1, Side.HOME, Vector2D(10.0, 50.0)), Agent(2, Side.AWAY, Vector2D(90.0, 50.0)))
        field = engine.evaluate(state, step=20.0)
        centre = field.as_grid()[2][2]
        assert centre.contest == 1.0
        assert centre.controller is Side.HOME

    def test_tie_break_is_deterministic(self) -> None:
        """Repeated evaluation of identical input gives identical output."""
        engine = make_engine()
        state = snapshot(Agent(1, Side.HOME, Vector2D(10.0, 50.0)), Agent(2, Side.AWAY, Vector2D(90.0, 50.0)))
        assert engine.evaluate(state) == engine.evaluate(state)

    def test_lower_cost_side_wins(self) -> None:
        """Cells near an agent belong to its side with little contest."""
        engine = make_engine()
        state = snapshot(Agent(1, Side.HOME, Vector2D(10.0, 50.0)), Agent(2, Side.AWAY, Vector2D(90.0, 50.0)))
        grid = engine.evaluate(state).as_grid()
        assert grid[2][0] == ControlValue(Side.HOME, 0.0)
        assert grid[2][4] == ControlValue(Side.AWAY, 0.0)

    def test_velocity_bias_moves_the_boundary(self) -> None:
        """A home agent sprinting at a cell wins it from an equidistant opponent."""
        engine = make_engine()
        home = Agent(1, Side.HOME, Vector2D(10.0, 50.0), Vector2D(4.0, 0.0))
        away = Agent(2, Side.AWAY, Vector2D(90.0, 50.0))
        by_side = {Side.HOME: [home], Side.AWAY: [away]}
        point = Vector2D(60.0, 50.0)
        assert engine.evaluate_point(point, by_side, Vector2D(0.0, 0.0)).controller is Side.HOME
        unbiased = engine.evaluate_point(point, by_side, Vector2D(0.0, 0.0), use_velocity_bias=False)
        assert unbiased.controller is Side.AWAY

    def test_no_agents_produces_no_cells(self) -> None:
        """With both sides empty no control values are produced."""
        field = make_engine().evaluate(snapshot())
        assert len(field) == 0
        assert field.control_share() == {"home": 0.0, "away": 0.0, "neutral": 0.0}
        assert make_engine().evaluate_point(Vector2D(1.0, 1.0), {}, Vector2D(0.0, 0.0)) is None

    def test_control_share_sums_to_one(self) -> None:
        """Shares over a populated field add up to one."""
        state = snapshot(Agent(1, Side.HOME, Vector2D(10.0, 50.0)), Agent(2, Side.AWAY, Vector2D(90.0, 50.0)))
        share = make_engine().evaluate(state).control_share()
        assert sum(share.values()) == pytest.approx(1.0)
        # The centre column ties and goes to home.
        assert share["home"] > share["away"]
        assert share["neutral"] == 0.0


class TestBallRelativeMode:
    """Control judged against the ball's travel time."""

    def test_both_sides_before_ball_is_neutral(self) -> None:
        """When both sides beat a slow ball the cell is contested."""
        engine = make_engine(ball_speed=1.0)
        by_side = {
            Side.HOME: [Agent(1, Side.HOME, Vector2D(40.0, 50.0))],
            Side.AWAY: [Agent(2, Side.AWAY, Vector2D(60.0, 50.0))],
        }
        value = engine.evaluate_point(Vector2D(50.0, 90.0), by_side, Vector2D(50.0, 0.0), ControlMode.BALL_RELATIVE)
        assert value == ControlValue(None, 1.0)
        assert value.is_neutral

    def test_faster_side_controls_when_ball_is_quick(self) -> None:
        """With a fast ball the quicker side takes the cell."""
        engine = make_engine(ball_speed=1000.0)
        by_side = {
            Side.HOME: [Agent(1, Side.HOME, Vector2D(20.0, 50.0))],
            Side.AWAY: [Agent(2, Side.AWAY, Vector2D(90.0, 50.0))],
        }
        value = engine.evaluate_point(Vector2D(25.0, 50.0), by_side, Vector2D(50.0, 0.0), ControlMode.BALL_RELATIVE)
        assert value.controller is Side.HOME

    def test_equal_times_are_not_strictly_before_ball(self) -> None:
        """Arriving together with the ball does not make a cell neutral."""
        # Agents 8 units away at speed 8 need 1 tick; the ball 24 units away at speed 24 too.
        engine = make_engine(ball_speed=24.0)
        by_side = {
            Side.HOME: [Agent(1, Side.HOME, Vector2D(42.0, 50.0))],
            Side.AWAY: [Agent(2, Side.AWAY, Vector2D(58.0, 50.0))],
        }
        value = engine.evaluate_point(Vector2D(50.0, 50.0), by_side, Vector2D(50.0, 26.0), ControlMode.BALL_RELATIVE)
        assert value.controller is Side.HOME
        assert value.contest == 1.0

    def test_empty_side_leaves_control_to_other(self) -> None:
        """An empty side never beats the ball, so the other side controls."""
        engine = make_engine(ball_speed=1.0)
        field = engine.evaluate(snapshot(Agent(1, Side.AWAY, Vector2D(50.0, 50.0))), mode=ControlMode.BALL_RELATIVE)
        assert all(cell.value == ControlValue(Side.AWAY, 0.0) for cell in field)
        assert field.mode is ControlMode.BALL_RELATIVE
