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
"""Session object tying the control-field components together.

A :class:`Session` is created when a viewer opens and torn down when it
closes. It owns the configuration, the entity model, the timeline controller
and the two evaluators, and is the only surface the presentation layer talks
to.
"""
from typing import Iterable, List, Optional

from pitchcontrol.utils.debug import SessionDebugger

from .arrival import ArrivalCostModel
from .config import DEFAULT_CONFIG, EngineConfig
from .control_field import ControlField, ControlFieldEngine, ControlMode
from .entities import Agent, EntityModel, Side
from .pass_safety import PassSafetyAnalyzer, PassVerdict
from .physics import Pitch, Vector2D
from .timeline import Timeline, TimelineController, TimelineMode


class Session:
    """Single in-memory control session.

    Parameters
    ----------
    config : EngineConfig | None, optional
        Tuning for every component; defaults to ``DEFAULT_CONFIG``.
    agents : Iterable[Agent] | None, optional
        Initial population; the mirrored default formation when omitted.
    ball_position : Vector2D | None, optional
        Initial ball position; the field centre when omitted.
    debugger : SessionDebugger | None, optional
        Shared debugger handed to every component.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        agents: Optional[Iterable[Agent]] = None,
        ball_position: Optional[Vector2D] = None,
        debugger: Optional[SessionDebugger] = None,
    ) -> None:
        """Build every component from one configuration.

        Parameters
        ----------
        config : EngineConfig | None, optional
            Tuning for every component; defaults to ``DEFAULT_CONFIG``.
        agents : Iterable[Agent] | None, optional
            Initial population; the mirrored default formation when omitted.
        ball_position : Vector2D | None, optional
            Initial ball position; the field centre when omitted.
        debugger : SessionDebugger | None, optional
            Shared debugger handed to every component.
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        self.debugger = debugger
        self.pitch = Pitch(config=self.config.pitch)
        self.entities = EntityModel(
            pitch=self.pitch,
            config=self.config,
            agents=agents,
            ball_position=ball_position,
            debugger=debugger,
        )
        self.cost_model = ArrivalCostModel(self.config.arrival, self.config.agent)
        self.control_engine = ControlFieldEngine(
            pitch=self.pitch,
            config=self.config.control,
            cost_model=self.cost_model,
            ball_config=self.config.ball,
        )
        self.pass_analyzer = PassSafetyAnalyzer(
            config=self.config.passing,
            cost_model=self.cost_model,
            ball_config=self.config.ball,
        )
        self.timeline = TimelineController(config=self.config.timeline, debugger=debugger)
        self.last_timestamp: Optional[float] = None

    # --- entity mutation ---------------------------------------------------------
    def set_agent_position(self, agent_id: int, point: Vector2D) -> bool:
        """Move an agent; see :meth:`EntityModel.set_agent_position`.

        Parameters
        ----------
        agent_id : int
            Agent to move.
        point : Vector2D
            Requested logical position.

        Returns
        -------
        bool
            ``False`` when the agent is unknown.
        """
        return self.entities.set_agent_position(agent_id, point)

    def set_agent_velocity(self, agent_id: int, vector: Vector2D) -> bool:
        """Set an agent's velocity; see :meth:`EntityModel.set_agent_velocity`.

        Parameters
        ----------
        agent_id : int
            Agent to update.
        vector : Vector2D
            Requested velocity in units per tick.

        Returns
        -------
        bool
            ``False`` when the agent is unknown.
        """
        return self.entities.set_agent_velocity(agent_id, vector)

    def set_ball_position(self, point: Vector2D) -> Vector2D:
        """Move the ball; see :meth:`EntityModel.set_ball_position`.

        Parameters
        ----------
        point : Vector2D
            Requested logical position.

        Returns
        -------
        Vector2D
            Position actually written.
        """
        return self.entities.set_ball_position(point)

    # --- evaluation --------------------------------------------------------------
    def evaluate_field(
        self,
        step: Optional[float] = None,
        mode: ControlMode = ControlMode.PLAIN,
        use_velocity_bias: bool = True,
    ) -> ControlField:
        """Evaluate the control field against the current state.

        Parameters
        ----------
        step : float | None, optional
            Cell size; the configured grid step when omitted.
        mode : ControlMode, optional
            Plain or ball-relative control.
        use_velocity_bias : bool, optional
            Whether velocities bias arrival costs.

        Returns
        -------
        ControlField
            Control value per sampled cell.
        """
        return self.control_engine.evaluate(self.entities.snapshot(), step, mode, use_velocity_bias)

    def test_pass_safety(
        self,
        origin: Vector2D,
        receiver: Agent,
        opponents: Iterable[Agent],
        use_velocity_bias: bool = True,
    ) -> PassVerdict:
        """Test a single pass; see :meth:`PassSafetyAnalyzer.test`.

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
        PassVerdict
            Verdict for the pass.
        """
        return self.pass_analyzer.test(origin, receiver, opponents, use_velocity_bias)

    def pass_candidates(self, side: Side, use_velocity_bias: bool = True) -> List[PassVerdict]:
        """Test a pass from the ball to every agent of ``side``.

        Parameters
        ----------
        side : Side
            Side in possession.
        use_velocity_bias : bool, optional
            Whether opponent velocities bias their arrival times.

        Returns
        -------
        List[PassVerdict]
            One verdict per agent of ``side``.
        """
        snapshot = self.entities.snapshot()
        return self.pass_analyzer.evaluate_candidates(snapshot.ball, side, snapshot.agents, use_velocity_bias)

    # --- timeline ----------------------------------------------------------------
    @property
    def mode(self) -> TimelineMode:
        """Current timeline state."""
        return self.timeline.mode

    def start_recording(self) -> bool:
        """Start a new recording, discarding the previous one.

        Returns
        -------
        bool
            ``False`` when a replay or recording is already active.
        """
        return self.timeline.start_recording()

    def stop_recording(self) -> bool:
        """Stop the active recording.

        Returns
        -------
        bool
            ``False`` when nothing was recording.
        """
        return self.timeline.stop_recording()

    def start_replay(self, speed: Optional[float] = None) -> bool:
        """Replay the current timeline from the start.

        Parameters
        ----------
        speed : float | None, optional
            Playback multiplier; the configured default when omitted.

        Returns
        -------
        bool
            ``False`` when the replay could not start.
        """
        return self.timeline.start_replay(speed)

    def stop_replay(self) -> bool:
        """Cancel the active replay.

        Returns
        -------
        bool
            ``False`` when nothing was replaying.
        """
        return self.timeline.stop_replay()

    def load_timeline(self, timeline: Timeline) -> bool:
        """Replace the recorded timeline, for example with one loaded from disk.

        Parameters
        ----------
        timeline : Timeline
            Frames to replay next.

        Returns
        -------
        bool
            ``False`` while recording or replaying; the timeline is then kept.
        """
        if self.timeline.mode is not TimelineMode.IDLE:
            if self.debugger:
                self.debugger.log_error("illegal_transition", "load_timeline rejected: controller is busy")
            return False
        self.timeline.timeline = timeline
        return True

    def tick(self, timestamp: float) -> TimelineMode:
        """Advance the session for one display tick.

        Replay overwrites entity state first; recording then captures the
        state that evaluation and rendering will see for this tick.

        Parameters
        ----------
        timestamp : float
            Monotonic timestamp supplied by the driver.

        Returns
        -------
        TimelineMode
            Timeline state after the tick.
        """
        self.last_timestamp = timestamp
        return self.timeline.tick(timestamp, self.entities)

    def log_state(self) -> None:
        """Write every agent and the ball to the debugger, if one is attached."""
        if not self.debugger:
            return
        timestamp = self.last_timestamp if self.last_timestamp is not None else 0.0
        snapshot = self.entities.snapshot()
        for agent in snapshot.agents:
            self.debugger.log_agent_state(
                timestamp,
                agent.agent_id,
                agent.side.value,
                agent.position.as_tuple(),
                agent.velocity.as_tuple(),
            )
        self.debugger.log_ball_state(timestamp, snapshot.ball.as_tuple())

    def reset(self) -> None:
        """Stop any recording or replay and restore the initial formation."""
        if self.timeline.mode is TimelineMode.RECORDING:
            self.timeline.stop_recording()
        elif self.timeline.mode is TimelineMode.REPLAYING:
            self.timeline.stop_replay()
        self.entities.reset_formation()

    def close(self) -> None:
        """Tear the session down and close the debugger."""
        if self.debugger:
            self.debugger.close()
