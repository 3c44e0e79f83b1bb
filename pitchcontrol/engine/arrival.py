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
"""Velocity-biased arrival cost used to rank who reaches a point first.

The cost is the square of an *effective distance*: the straight-line distance
to the target reduced by a bounded multiple of the agent's closing speed. An
agent already running at the target is credited with a head start, one running
away is penalised, and the effective distance never drops below zero. Squared
costs compare in the same order as times, so ranking never needs a square
root; callers that want a time use :meth:`ArrivalCostModel.time_to_reach`.
"""
import math
from typing import Iterable, Optional

from .config import DEFAULT_CONFIG, AgentConfig, ArrivalConfig
from .entities import Agent
from .physics import Vector2D


class ArrivalCostModel:
    """Scores how quickly agents can reach arbitrary points.

    Parameters
    ----------
    config : ArrivalConfig | None, optional
        Closing-speed clamp and weight; defaults to configuration.
    agent_config : AgentConfig | None, optional
        Supplies the nominal speed used to convert costs into times.
    """

    def __init__(
        self,
        config: Optional[ArrivalConfig] = None,
        agent_config: Optional[AgentConfig] = None,
    ) -> None:
        """Store the tuning blocks.

        Parameters
        ----------
        config : ArrivalConfig | None, optional
            Closing-speed clamp and weight; defaults to configuration.
        agent_config : AgentConfig | None, optional
            Supplies the nominal speed used to convert costs into times.
        """
        self.config = config if config is not None else DEFAULT_CONFIG.arrival
        self.agent_config = agent_config if agent_config is not None else DEFAULT_CONFIG.agent

    def closing_speed(self, agent: Agent, target: Vector2D) -> float:
        """Return the clamped velocity component along the path to ``target``.

        Parameters
        ----------
        agent : Agent
            Agent whose velocity is projected.
        target : Vector2D
            Point the agent would run to.

        Returns
        -------
        float
            Positive when approaching, negative when receding, ``0.0`` at the target.
        """
        offset = target - agent.position
        distance = offset.magnitude()
        if distance == 0:
            return 0.0
        raw = agent.velocity.dot(offset) / distance
        limit = self.config.max_closing_speed
        return max(-limit, min(limit, raw))

    def effective_distance(self, agent: Agent, target: Vector2D, use_velocity_bias: bool = True) -> float:
        """Return the biased distance from ``agent`` to ``target``.

        Parameters
        ----------
        agent : Agent
            Agent being scored.
        target : Vector2D
            Point to reach.
        use_velocity_bias : bool, optional
            When ``False`` the plain Euclidean distance is returned.

        Returns
        -------
        float
            Non-negative effective distance.
        """
        distance = agent.position.distance_to(target)
        if distance == 0 or not use_velocity_bias:
            return distance
        head_start = self.config.closing_speed_weight * self.closing_speed(agent, target)
        return max(0.0, distance - head_start)

    def cost(self, agent: Agent, target: Vector2D, use_velocity_bias: bool = True) -> float:
        """Return the squared effective distance from ``agent`` to ``target``.

        Parameters
        ----------
        agent : Agent
            Agent being scored.
        target : Vector2D
            Point to reach.
        use_velocity_bias : bool, optional
            When ``False`` velocity is ignored and the cost is the squared distance.

        Returns
        -------
        float
            Cost monotonic in time to arrival; ``0.0`` at the agent's own position.
        """
        effective = self.effective_distance(agent, target, use_velocity_bias)
        return effective * effective

    def time_to_reach(self, agent: Agent, target: Vector2D, use_velocity_bias: bool = True) -> float:
        """Estimate the ticks ``agent`` needs to reach ``target``.

        Parameters
        ----------
        agent : Agent
            Agent being scored.
        target : Vector2D
            Point to reach.
        use_velocity_bias : bool, optional
            Whether the closing speed biases the estimate.

        Returns
        -------
        float
            Square root of :meth:`cost` divided by the nominal agent speed.
        """
        return math.sqrt(self.cost(agent, target, use_velocity_bias)) / self.agent_config.nominal_speed

    def best_cost(self, agents: Iterable[Agent], target: Vector2D, use_velocity_bias: bool = True) -> float:
        """Return the lowest cost over ``agents``.

        Parameters
        ----------
        agents : Iterable[Agent]
            Candidates, typically one side.
        target : Vector2D
            Point to reach.
        use_velocity_bias : bool, optional
            Whether the closing speed biases the costs.

        Returns
        -------
        float
            Minimum cost, or ``math.inf`` when ``agents`` is empty.
        """
        best = math.inf
        for agent in agents:
            value = self.cost(agent, target, use_velocity_bias)
            if value < best:
                best = value
        return best

    def best_time(self, agents: Iterable[Agent], target: Vector2D, use_velocity_bias: bool = True) -> float:
        """Return the shortest arrival time over ``agents``.

        Parameters
        ----------
        agents : Iterable[Agent]
            Candidates, typically one side.
        target : Vector2D
            Point to reach.
        use_velocity_bias : bool, optional
            Whether the closing speed biases the estimates.

        Returns
        -------
        float
            Minimum time in ticks, or ``math.inf`` when ``agents`` is empty.
        """
        best = self.best_cost(agents, target, use_velocity_bias)
        if math.isinf(best):
            return best
        return math.sqrt(best) / self.agent_config.nominal_speed
