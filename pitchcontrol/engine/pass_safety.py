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
"""Interception test for straight passes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .arrival import ArrivalCostModel
from .config import DEFAULT_CONFIG, BallConfig, PassConfig
from .entities import Agent, Side
from .physics import Vector2D


@dataclass(frozen=True)
class PassVerdict:
    """Outcome of testing one receiver.

    Parameters
    ----------
    receiver_id : int
        Identifier of the intended receiver.
    safe : bool
        ``True`` when no opponent can reach the ball path in time.
    interceptor_id : int | None, optional
        First opponent found able to intercept, when unsafe.
    intercept_point : Vector2D | None, optional
        Point on the pass where that opponent meets the ball.
    """

    receiver_id: int
    safe: bool
    interceptor_id: Optional[int] = None
    intercept_point: Optional[Vector2D] = None

    @property
    def interceptable(self) -> bool:
        """Whether the pass can be cut out."""
        return not self.safe


class PassSafetyAnalyzer:
    """Decides whether every opponent arrives too late to cut out a pass.

    For each opponent the closest point on the pass segment is found by
    projecting the opponent onto the segment with the projection parameter
    clamped to ``[0, 1]``. The ball's time to that point at the nominal ball
    speed is compared with the opponent's arrival time; an opponent who is
    there no later than the ball makes the pass unsafe.

    Parameters
    ----------
    config : PassConfig | None, optional
        Degenerate pass threshold.
    cost_model : ArrivalCostModel | None, optional
        Arrival cost model shared with the control field.
    ball_config : BallConfig | None, optional
        Supplies the nominal ball speed.
    """

    def __init__(
        self,
        config: Optional[PassConfig] = None,
        cost_model: Optional[ArrivalCostModel] = None,
        ball_config: Optional[BallConfig] = None,
    ) -> None:
        """Wire the analyzer to its collaborators.

        Parameters
        ----------
        config : PassConfig | None, optional
            Degenerate pass threshold.
        cost_model : ArrivalCostModel | None, optional
            Arrival cost model shared with the control field.
        ball_config : BallConfig | None, optional
            Supplies the nominal ball speed.
        """
        self.config = config if config is not None else DEFAULT_CONFIG.passing
        self.cost_model = cost_model if cost_model is not None else ArrivalCostModel()
        self.ball_config = ball_config if ball_config is not None else DEFAULT_CONFIG.ball

    def test(
        self,
        origin: Vector2D,
        receiver: Agent,
        opponents: Iterable[Agent],
        use_velocity_bias: bool = True,
    ) -> PassVerdict:
        """Test a pass from ``origin`` to ``receiver``.

        Parameters
        ----------
        origin : Vector2D
            Where the ball leaves from.
        receiver : Agent
            Intended receiver; the pass ends at its position.
        opponents : Iterable[Agent]
            Agents that may intercept.
        use_velocity_bias : bool, optional
            Whether opponent velocities bias their arrival times.

        Returns
        -------
        PassVerdict
            Unsafe for degenerate passes and as soon as one opponent qualifies.
        """
        pass_vector = receiver.position - origin
        pass_length = pass_vector.magnitude()
        if pass_length < self.config.min_pass_length:
            return PassVerdict(receiver.agent_id, safe=False)

        ball_speed = self.ball_config.nominal_speed
        for opponent in opponents:
            to_opponent = opponent.position - origin
            projection = to_opponent.dot(pass_vector) / (pass_length * pass_length)
            projection = max(0.0, min(1.0, projection))
            point = origin + pass_vector * projection

            ball_time = (projection * pass_length) / ball_speed
            opponent_time = self.cost_model.time_to_reach(opponent, point, use_velocity_bias)
            if opponent_time <= ball_time:
                return PassVerdict(
                    receiver.agent_id,
                    safe=False,
                    interceptor_id=opponent.agent_id,
                    intercept_point=point,
                )

        return PassVerdict(receiver.agent_id, safe=True)

    def is_safe(
        self,
        origin: Vector2D,
        receiver: Agent,
        opponents: Iterable[Agent],
        use_velocity_bias: bool = True,
    ) -> bool:
        """Return only the boolean part of :meth:`test`.

        Parameters
        ----------
        origin : Vector2D
            Where the ball leaves from.
        receiver : Agent
            Intended receiver.
        opponents : Iterable[Agent]
            Agents that may intercept.
        use_velocity_bias : bool, optional
            Whether opponent velocities bias their arrival times.

        Returns
        -------
        bool
            ``True`` when the pass cannot be intercepted.
        """
        return self.test(origin, receiver, opponents, use_velocity_bias).safe

    def evaluate_candidates(
        self,
        origin: Vector2D,
        passer_side: Side,
        agents: Iterable[Agent],
        use_velocity_bias: bool = True,
    ) -> List[PassVerdict]:
        """Test a pass to every agent of ``passer_side``.

        Each receiver is evaluated on its own against all opponents.

        Parameters
        ----------
        origin : Vector2D
            Where the ball leaves from.
        passer_side : Side
            Side in possession; its agents are the candidate receivers.
        agents : Iterable[Agent]
            Every agent on the field.
        use_velocity_bias : bool, optional
            Whether opponent velocities bias their arrival times.

        Returns
        -------
        List[PassVerdict]
            One verdict per receiver in creation order.
        """
        population = list(agents)
        receivers = [agent for agent in population if agent.side is passer_side]
        opponents = [agent for agent in population if agent.side is passer_side.opponent]
        return [self.test(origin, receiver, opponents, use_velocity_bias) for receiver in receivers]
