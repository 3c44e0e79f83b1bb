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
"""Capture and deterministic replay of entity state.

The controller is a small state machine driven by the external tick::

    IDLE -> RECORDING -> IDLE
    IDLE -> REPLAYING -> IDLE

Recording appends one :class:`RecordingFrame` per tick with a timestamp
relative to the start of the recording. Replaying walks a forward-only cursor
over the frames and writes the selected frame back into the entity model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from pitchcontrol.utils.debug import SessionDebugger

from .config import DEFAULT_CONFIG, TimelineConfig
from .entities import EntityModel, EntitySnapshot


class TimelineMode(Enum):
    """States of the timeline controller."""

    IDLE = "idle"
    RECORDING = "recording"
    REPLAYING = "replaying"


@dataclass(frozen=True)
class RecordingFrame:
    """One timestamped snapshot of every tracked entity.

    Parameters
    ----------
    timestamp : float
        Time since the recording started, in tick timestamp units.
    snapshot : EntitySnapshot
        Agents and ball at that time.
    """

    timestamp: float
    snapshot: EntitySnapshot


class Timeline:
    """Ordered, append-only sequence of frames for one recording.

    Parameters
    ----------
    frames : Iterable[RecordingFrame] | None, optional
        Frames to seed the timeline with, for example after loading from disk.
    """

    def __init__(self, frames: Optional[Iterable[RecordingFrame]] = None) -> None:
        """Create a timeline, validating any seed frames.

        Parameters
        ----------
        frames : Iterable[RecordingFrame] | None, optional
            Frames to seed the timeline with, for example after loading from disk.
        """
        self._frames: List[RecordingFrame] = []
        for frame in frames or ():
            self.append(frame)

    def __len__(self) -> int:
        """Return the number of frames."""
        return len(self._frames)

    def __iter__(self) -> Iterator[RecordingFrame]:
        """Iterate over the frames in capture order."""
        return iter(self._frames)

    def __getitem__(self, index: int) -> RecordingFrame:
        """Return the frame at ``index``."""
        return self._frames[index]

    @property
    def frames(self) -> Tuple[RecordingFrame, ...]:
        """Read-only view of every frame."""
        return tuple(self._frames)

    @property
    def duration(self) -> float:
        """Timestamp of the last frame, ``0.0`` when empty."""
        return self._frames[-1].timestamp if self._frames else 0.0

    def append(self, frame: RecordingFrame) -> None:
        """Append ``frame``, keeping timestamps in non-decreasing order.

        Parameters
        ----------
        frame : RecordingFrame
            Frame to add.
        """
        if self._frames and frame.timestamp < self._frames[-1].timestamp:
            raise ValueError(
                f"Frame timestamp {frame.timestamp} precedes last frame at {self._frames[-1].timestamp}"
            )
        self._frames.append(frame)


class TimelineController:
    """Records and replays entity state against the external tick.

    Start calls may omit the timestamp; the clock then latches on the next
    tick so the first recorded frame sits at ``0``.

    Parameters
    ----------
    config : TimelineConfig | None, optional
        Replay defaults and limits.
    timeline : Timeline | None, optional
        Existing timeline to replay; a fresh empty one when omitted.
    debugger : SessionDebugger | None, optional
        Receives transition and rejection traces.
    """

    def __init__(
        self,
        config: Optional[TimelineConfig] = None,
        timeline: Optional[Timeline] = None,
        debugger: Optional[SessionDebugger] = None,
    ) -> None:
        """Start idle with the given or an empty timeline.

        Parameters
        ----------
        config : TimelineConfig | None, optional
            Replay defaults and limits.
        timeline : Timeline | None, optional
            Existing timeline to replay; a fresh empty one when omitted.
        debugger : SessionDebugger | None, optional
            Receives transition and rejection traces.
        """
        self.config = config if config is not None else DEFAULT_CONFIG.timeline
        self.timeline = timeline if timeline is not None else Timeline()
        self.debugger = debugger
        self._mode = TimelineMode.IDLE
        self._start_time: Optional[float] = None
        self._speed = self.config.default_speed
        self._cursor = -1
        self._last_tick = 0.0

    @property
    def mode(self) -> TimelineMode:
        """Current controller state."""
        return self._mode

    @property
    def cursor(self) -> int:
        """Index of the frame last applied during replay, ``-1`` before the first."""
        return self._cursor

    @property
    def speed(self) -> float:
        """Playback multiplier of the current or last replay."""
        return self._speed

    def _log_event(self, event_type: str, description: str) -> None:
        """Forward a transition to the debugger when one is attached.

        Parameters
        ----------
        event_type : str
            Short event label.
        description : str
            Human-readable details.
        """
        if self.debugger:
            self.debugger.log_session_event(self._last_tick, event_type, description)

    def _reject(self, action: str, reason: str) -> bool:
        """Log a refused transition.

        Parameters
        ----------
        action : str
            Name of the refused operation.
        reason : str
            Why it was refused.

        Returns
        -------
        bool
            Always ``False`` so callers can return it directly.
        """
        if self.debugger:
            self.debugger.log_error("illegal_transition", f"{action} rejected: {reason}")
        return False

    # --- transitions ---------------------------------------------------------------
    def start_recording(self, timestamp: Optional[float] = None) -> bool:
        """Replace the current timeline with an empty one and begin capturing.

        Timelines handed out earlier keep their frames.

        Parameters
        ----------
        timestamp : float | None, optional
            Recording start time; latched on the next tick when omitted.

        Returns
        -------
        bool
            ``False`` when not idle; the state is left unchanged.
        """
        if self._mode is not TimelineMode.IDLE:
            return self._reject("start_recording", f"controller is {self._mode.value}")
        self.timeline = Timeline()
        self._start_time = timestamp
        self._mode = TimelineMode.RECORDING
        self._log_event("recording", "recording started")
        return True

    def stop_recording(self) -> bool:
        """Stop capturing and make the timeline available for replay.

        Returns
        -------
        bool
            ``False`` when no recording was active.
        """
        if self._mode is not TimelineMode.RECORDING:
            return self._reject("stop_recording", f"controller is {self._mode.value}")
        self._mode = TimelineMode.IDLE
        self._start_time = None
        self._log_event("recording", f"recording stopped with {len(self.timeline)} frames")
        return True

    def start_replay(self, speed: Optional[float] = None, timestamp: Optional[float] = None) -> bool:
        """Begin replaying the timeline from its first frame.

        Parameters
        ----------
        speed : float | None, optional
            Playback multiplier; the configured default when omitted.
        timestamp : float | None, optional
            Replay start time; latched on the next tick when omitted.

        Returns
        -------
        bool
            ``False`` when not idle, the timeline is empty or ``speed`` is out of range.
        """
        speed = self.config.default_speed if speed is None else speed
        if self._mode is not TimelineMode.IDLE:
            return self._reject("start_replay", f"controller is {self._mode.value}")
        if not len(self.timeline):
            return self._reject("start_replay", "timeline is empty")
        if not 0 < speed <= self.config.max_speed:
            return self._reject("start_replay", f"speed {speed} outside (0, {self.config.max_speed}]")
        self._speed = speed
        self._start_time = timestamp
        self._cursor = -1
        self._mode = TimelineMode.REPLAYING
        self._log_event("replay", f"replay started at x{speed:g} over {len(self.timeline)} frames")
        return True

    def stop_replay(self) -> bool:
        """Cancel an active replay; frames are kept.

        Returns
        -------
        bool
            ``False`` when no replay was active.
        """
        if self._mode is not TimelineMode.REPLAYING:
            return self._reject("stop_replay", f"controller is {self._mode.value}")
        self._finish_replay("replay cancelled")
        return True

    def _finish_replay(self, reason: str) -> None:
        """Return to idle after a replay.

        Parameters
        ----------
        reason : str
            Description recorded in the debug log.
        """
        self._mode = TimelineMode.IDLE
        self._start_time = None
        self._log_event("replay", reason)

    # --- ticking -------------------------------------------------------------------
    def tick(self, timestamp: float, model: EntityModel) -> TimelineMode:
        """Advance replay or capture a frame for the tick at ``timestamp``.

        Replay writes into ``model`` before anything else reads it, and
        capture reads ``model`` as it stands, so a recorded frame is always
        the state the rest of the tick sees.

        Parameters
        ----------
        timestamp : float
            Monotonic tick timestamp supplied by the driver.
        model : EntityModel
            Entity model to overwrite (replay) or snapshot (recording).

        Returns
        -------
        TimelineMode
            State after the tick.
        """
        self._last_tick = timestamp
        if self._mode is TimelineMode.REPLAYING:
            self._advance_replay(timestamp, model)
        elif self._mode is TimelineMode.RECORDING:
            self._capture(timestamp, model)
        return self._mode

    def _capture(self, timestamp: float, model: EntityModel) -> None:
        """Append a frame for ``timestamp``.

        Parameters
        ----------
        timestamp : float
            Tick timestamp.
        model : EntityModel
            Source of the snapshot.
        """
        if self._start_time is None:
            self._start_time = timestamp
        relative = timestamp - self._start_time
        if relative < 0 or (len(self.timeline) and relative < self.timeline.duration):
            if self.debugger:
                self.debugger.log_error("clock", f"tick {timestamp} out of order; frame skipped")
            return
        self.timeline.append(RecordingFrame(relative, model.snapshot()))

    def _advance_replay(self, timestamp: float, model: EntityModel) -> None:
        """Move the cursor forward and apply the selected frame.

        Parameters
        ----------
        timestamp : float
            Tick timestamp.
        model : EntityModel
            Model overwritten from the selected frame.
        """
        if self._start_time is None:
            self._start_time = timestamp
        elapsed = (timestamp - self._start_time) * self._speed

        frames = self.timeline
        cursor = self._cursor
        while cursor + 1 < len(frames) and frames[cursor + 1].timestamp <= elapsed:
            cursor += 1
        self._cursor = cursor

        if cursor >= 0:
            model.restore(frames[cursor].snapshot)
        if cursor == len(frames) - 1:
            self._finish_replay("replay finished")
