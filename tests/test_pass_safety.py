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
"""Tests for the pass interception check."""

from pitchcontrol.engine.arrival import ArrivalCostModel
from pitchcontrol.engine.config import BallConfig
from pitchcontrol.engine.entities import Agent, Side
from pitchcontrol.engine.pass_safety import PassSafetyAnalyzer
from pitchcontrol.engine.physics import Vector2D

ORIGIN = Vector2D(0.0, 0.0)


def make_analyzer(ball_speed: float = 400.0) -> PassSafetyAnalyzer:
    return PassSafetyAnalyzer(cost_model=ArrivalCostModel(), ball_config=BallConfig(nominal_speed=ball_speed))


def receiver_at(x: float, y: float, agent_id: int = 1) -> Agent:
    return Agent(agent_id, Side.HOME, Vector2D(x, y))


def opponent_at(x: float, y: float, agent_id: int = 20, velocity: Vector2D = Vector2D(0.0, 0.0)) -> Agent:
    return Agent(agent_id, Side.AWAY, Vector2D(x, y), velocity)


class TestPassSafety:
    """Single pass verdicts."""

    def test_no_opponents_is_safe(self) -> None:
        """A pass with nobody to intercept it is safe."""
        verdict = make_analyzer().test(ORIGIN, receiver_at(100.0, 0.0), [])
        assert verdict.safe
        assert not verdict.interceptable
        assert verdict.interceptor_id is None

    def test_opponent_on_receiver_is_unsafe(self) -> None:
        """An opponent standing on the receiver meets the ball first."""
        verdict = make_analyzer().test(ORIGIN, receiver_at(100.0, 0.0), [opponent_at(100.0, 0.0)])
        assert not verdict.safe
        assert verdict.interceptor_id == 20
        assert verdict.intercept_point == Vector2D(100.0, 0.0)

    def test_equal_arrival_counts_as_interception(self) -> None:
        """An opponent arriving exactly with the ball intercepts it."""
        # Opponent needs 1/8 tick to the path; the ball needs 50/400 to the same point.
        verdict = make_analyzer(ball_speed=400.0).test(ORIGIN, receiver_at(100.0, 0.0), [opponent_at(50.0, 1.0)])
        assert not verdict.safe
        assert verdict.intercept_point == Vector2D(50.0, 0.0)

    def test_slightly_late_opponent_is_safe(self) -> None:
        """An opponent a little too far from the path cannot intercept."""
        verdict = make_analyzer(ball_speed=400.0).test(ORIGIN, receiver_at(100.0, 0.0), [opponent_at(50.0, 2.0)])
        assert verdict.safe

    def test_opponent_behind_passer_projects_onto_origin(self) -> None:
        """Projection is clamped to the segment start."""
        verdict = make_analyzer().test(ORIGIN, receiver_at(100.0, 0.0), [opponent_at(-200.0, 0.0)])
        assert verdict.safe

    def test_opponent_beyond_receiver_projects_onto_receiver(self) -> None:
        """Projection is clamped to the segment end."""
        analyzer = make_analyzer(ball_speed=24.0)
        verdict = analyzer.test(ORIGIN, receiver_at(100.0, 0.0), [opponent_at(110.0, 0.0)])
        assert not verdict.safe
        assert verdict.intercept_point == Vector2D(100.0, 0.0)

    def test_degenerate_pass_is_unsafe(self) -> None:
        """A pass to the origin itself is never safe."""
        verdict = make_analyzer().test(ORIGIN, receiver_at(0.0, 0.0), [])
        assert not verdict.safe
        assert verdict.interceptor_id is None

    def test_velocity_bias_changes_verdict(self) -> None:
        """An opponent sprinting at the lane can reach it in time."""
        analyzer = make_analyzer(ball_speed=400.0)
        runner = opponent_at(50.0, 10.0, velocity=Vector2D(0.0, -10.0))
        assert not analyzer.is_safe(ORIGIN, receiver_at(100.0, 0.0), [runner])
        assert analyzer.is_safe(ORIGIN, receiver_at(100.0, 0.0), [runner], use_velocity_bias=False)

    def test_first_interceptor_is_reported(self) -> None:
        """Opponents are checked in the order given."""
        opponents = [opponent_at(100.0, 0.0, agent_id=21), opponent_at(50.0, 0.0, agent_id=22)]
        verdict = make_analyzer().test(ORIGIN, receiver_at(100.0, 0.0), opponents)
        assert verdict.interceptor_id == 21


class TestPassCandidates:
    """Batch evaluation of every receiver on one side."""

    def test_one_verdict_per_teammate(self) -> None:
        """Each teammate is tested independently against all opponents."""
        agents = [
            receiver_at(100.0, 0.0, agent_id=1),
            receiver_at(0.0, 100.0, agent_id=2),
            opponent_at(60.0, 0.0, agent_id=3),
        ]
        verdicts = make_analyzer().evaluate_candidates(ORIGIN, Side.HOME, agents)
        assert [verdict.receiver_id for verdict in verdicts] == [1, 2]
        assert [verdict.safe for verdict in verdicts] == [False, True]

    def test_away_side_receivers(self) -> None:
        """Candidates follow the passing side."""
        agents = [receiver_at(100.0, 0.0, agent_id=1), opponent_at(0.0, 100.0, agent_id=2)]
        verdicts = make_analyzer().evaluate_candidates(ORIGIN, Side.AWAY, agents)
        assert len(verdicts) == 1
        assert verdicts[0].receiver_id == 2
        assert verdicts[0].safe
