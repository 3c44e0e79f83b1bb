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
"""Authoritative agent and ball state for a control session.

The entity model is the only place positions and velocities are written. Every
write path clamps its input so no agent or ball can leave the inset field, and
reads hand out immutable values so callers can never partially update state
behind the model's back.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pitchcontrol.utils.debug import SessionDebugger

from .config import DEFAULT_CONFIG, EngineConfig
from .physics import Pitch, Vector2D


class Side(Enum):
    """The two opposing teams; home attacks towards increasing ``x``."""

    HOME = "home"
    AWAY = "away"

    @property
    def opponent(self) -> "Side":
        """The other side."""
        return Side.AWAY if self is Side.HOME else Side.HOME


@dataclass(frozen=True)
class Agent:
    """Immutable view of one agent's state.

    Parameters
    ----------
    agent_id : int
        Identifier, unique and stable for the session.
    side : Side
        Team the agent belongs to.
    position : Vector2D
        Position in logical field units.
    velocity : Vector2D
        Velocity in logical units per tick.
    """

    agent_id: int
    side: Side
    position: Vector2D
    velocity: Vector2D = Vector2D(0.0, 0.0)


@dataclass(frozen=True)
class EntitySnapshot:
    """Consistent copy of every agent and the ball at one instant.

    Parameters
    ----------
    agents : Tuple[Agent, ...]
        Agents in creation order.
    ball : Vector2D
        Ball position.
    """

    agents: Tuple[Agent, ...]
    ball: Vector2D

    def on_side(self, side: Side) -> List[Agent]:
        """Return the agents belonging to ``side``.

        Parameters
        ----------
        side : Side
            Team to filter by.

        Returns
        -------
        List[Agent]
            Matching agents in creation order.
        """
        return [agent for agent in self.agents if agent.side is side]

    def get_agent(self, agent_id: int) -> Optional[Agent]:
        """Look up an agent by identifier.

        Parameters
        ----------
        agent_id : int
            Identifier to search for.

        Returns
        -------
        Agent | None
            The agent, or ``None`` when the snapshot does not contain it.
        """
        return next((agent for agent in self.agents if agent.agent_id == agent_id), None)


def default_formation(pitch: Pitch, config: Optional[EngineConfig] = None) -> List[Agent]:
    """Build the kick-off formation, home on the left and away mirrored.

    Parameters
    ----------
    pitch : Pitch
        Field the fractions are scaled to.
    config : EngineConfig | None, optional
        Source of the formation slots.

    Returns
    -------
    List[Agent]
        Home agents numbered from 1 followed by the away agents.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    agents: List[Agent] = []
    next_id = 1
    for side in (Side.HOME, Side.AWAY):
        for fx, fy in cfg.formation.home_slots:
            x = fx if side is Side.HOME else 1.0 - fx
            agents.append(Agent(next_id, side, Vector2D(x * pitch.width, fy * pitch.height)))
            next_id += 1
    return agents


class EntityModel:
    """Holds the agents and the ball and enforces their bounds.

    Parameters
    ----------
    pitch : Pitch | None, optional
        Field the entities live on; built from ``config`` when omitted.
    config : EngineConfig | None, optional
        Tuning used for clamp margins and speed limits.
    agents : Iterable[Agent] | None, optional
        Initial population; the default formation when omitted.
    ball_position : Vector2D | None, optional
        Initial ball position; the field centre when omitted.
    debugger : SessionDebugger | None, optional
        Receives a trace of rejected writes.
    """

    def __init__(
        self,
        pitch: Optional[Pitch] = None,
        config: Optional[EngineConfig] = None,
        agents: Optional[Iterable[Agent]] = None,
        ball_position: Optional[Vector2D] = None,
        debugger: Optional[SessionDebugger] = None,
    ) -> None:
        """Create the model and clamp the initial population into the field.

        Parameters
        ----------
        pitch : Pitch | None, optional
            Field the entities live on; built from ``config`` when omitted.
        config : EngineConfig | None, optional
            Tuning used for clamp margins and speed limits.
        agents : Iterable[Agent] | None, optional
            Initial population; the default formation when omitted.
        ball_position : Vector2D | None, optional
            Initial ball position; the field centre when omitted.
        debugger : SessionDebugger | None, optional
            Receives a trace of rejected writes.
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        self.pitch = pitch if pitch is not None else Pitch(config=self.config.pitch)
        self.debugger = debugger
        self._agents: Dict[int, Agent] = {}
        self._ball = self.pitch.center
        self._populate(default_formation(self.pitch, self.config) if agents is None else agents)
        if ball_position is not None:
            self.set_ball_position(ball_position)
        self._initial_agents = tuple(self._agents.values())
        self._initial_ball = self._ball

    def _populate(self, agents: Iterable[Agent]) -> None:
        """Replace the population with clamped copies of ``agents``.

        Parameters
        ----------
        agents : Iterable[Agent]
            Agents to install; identifiers must be unique.
        """
        population: Dict[int, Agent] = {}
        for agent in agents:
            if agent.agent_id in population:
                raise ValueError(f"Duplicate agent id {agent.agent_id}")
            population[agent.agent_id] = replace(
                agent,
                position=self._clamp_agent_position(agent.position),
                velocity=agent.velocity.clamp_magnitude(self.config.agent.max_speed),
            )
        self._agents = population

    def _clamp_agent_position(self, point: Vector2D) -> Vector2D:
        """Clamp ``point`` into the field inset by the agent margin.

        Parameters
        ----------
        point : Vector2D
            Requested position.

        Returns
        -------
        Vector2D
            Position guaranteed to respect the agent inset.
        """
        return self.pitch.constrain_to_bounds(point, self.config.agent.margin)

    def _report_missing(self, agent_id: int, action: str) -> None:
        """Log a write aimed at an unknown agent.

        Parameters
        ----------
        agent_id : int
            Identifier that could not be resolved.
        action : str
            Name of the rejected operation.
        """
        if self.debugger:
            self.debugger.log_error("not_found", f"{action}: no agent with id {agent_id}")

    # --- reads -------------------------------------------------------------------
    @property
    def agents(self) -> Tuple[Agent, ...]:
        """Every agent in creation order."""
        return tuple(self._agents.values())

    @property
    def ball_position(self) -> Vector2D:
        """Current ball position."""
        return self._ball

    def get_agent(self, agent_id: int) -> Optional[Agent]:
        """Look up an agent by identifier.

        Parameters
        ----------
        agent_id : int
            Identifier to search for.

        Returns
        -------
        Agent | None
            The agent, or ``None`` when unknown.
        """
        return self._agents.get(agent_id)

    def agents_on(self, side: Side) -> List[Agent]:
        """Return the agents of one side.

        Parameters
        ----------
        side : Side
            Team to filter by.

        Returns
        -------
        List[Agent]
            Matching agents in creation order.
        """
        return [agent for agent in self._agents.values() if agent.side is side]

    def agent_at(self, point: Vector2D) -> Optional[Agent]:
        """Return the top-most agent whose pick radius covers ``point``.

        Agents created later are drawn on top, so they win overlaps.

        Parameters
        ----------
        point : Vector2D
            Logical coordinates to hit-test.

        Returns
        -------
        Agent | None
            The selected agent, or ``None`` when nothing is under ``point``.
        """
        hit_radius = self.config.agent.hit_radius
        for agent in reversed(list(self._agents.values())):
            if agent.position.distance_to(point) <= hit_radius:
                return agent
        return None

    def snapshot(self) -> EntitySnapshot:
        """Capture every agent and the ball as one consistent value.

        Returns
        -------
        EntitySnapshot
            Immutable copy that later writes cannot alter.
        """
        return EntitySnapshot(agents=tuple(self._agents.values()), ball=self._ball)

    # --- writes ------------------------------------------------------------------
    def set_agent_position(self, agent_id: int, point: Vector2D) -> bool:
        """Move an agent, clamping the target into the inset field.

        Parameters
        ----------
        agent_id : int
            Agent to move.
        point : Vector2D
            Requested position in logical coordinates.

        Returns
        -------
        bool
            ``False`` when the agent is unknown and nothing was written.
        """
        agent = self._agents.get(agent_id)
        if agent is None:
            self._report_missing(agent_id, "set_agent_position")
            return False
        self._agents[agent_id] = replace(agent, position=self._clamp_agent_position(point))
        return True

    def set_agent_velocity(self, agent_id: int, vector: Vector2D) -> bool:
        """Set an agent's velocity, clamping its magnitude to the speed limit.

        Parameters
        ----------
        agent_id : int
            Agent to update.
        vector : Vector2D
            Requested velocity in units per tick.

        Returns
        -------
        bool
            ``False`` when the agent is unknown and nothing was written.
        """
        agent = self._agents.get(agent_id)
        if agent is None:
            self._report_missing(agent_id, "set_agent_velocity")
            return False
        self._agents[agent_id] = replace(agent, velocity=vector.clamp_magnitude(self.config.agent.max_speed))
        return True

    def set_ball_position(self, point: Vector2D) -> Vector2D:
        """Move the ball, clamping the target into the inset field.

        Parameters
        ----------
        point : Vector2D
            Requested position in logical coordinates.

        Returns
        -------
        Vector2D
            Position actually written.
        """
        self._ball = self.pitch.constrain_to_bounds(point, self.config.ball.margin)
        return self._ball

    def restore(self, snapshot: EntitySnapshot) -> None:
        """Overwrite tracked agents and the ball from ``snapshot``.

        Agents missing from the snapshot keep their state and snapshot
        entries for unknown identifiers are ignored. Saved values are
        installed as captured; out-of-bounds input is still clamped.

        Parameters
        ----------
        snapshot : EntitySnapshot
            State to apply.
        """
        for saved in snapshot.agents:
            current = self._agents.get(saved.agent_id)
            if current is None:
                continue
            self._agents[saved.agent_id] = replace(
                current,
                position=self._clamp_agent_position(saved.position),
                velocity=saved.velocity.clamp_magnitude(self.config.agent.max_speed),
            )
        self.set_ball_position(snapshot.ball)

    def reset_formation(self) -> None:
        """Return every agent and the ball to the state the model was created with."""
        self._agents = {agent.agent_id: agent for agent in self._initial_agents}
        self._ball = self._initial_ball
