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
"""Structured logging utilities used to trace control-field sessions."""
import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple


class SessionDebugger:
    """Helper object that streams structured session telemetry to disk.

    Parameters
    ----------
    output_dir : str, default="debug_logs"
        Directory where new session logs are created; created automatically when missing.
    """

    def __init__(self, output_dir: str = "debug_logs") -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str
            Filesystem directory where log files are created or appended.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file: Optional[TextIO] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        self.start_new_session()

    @property
    def log_path(self) -> Path:
        """Path of the file the current session writes to."""
        return self.output_dir / f"session_debug_{self.session_start}.txt"

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.log_file:
            self.log_file.close()

        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Control Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_ball_state(self, timestamp: float, position: tuple[float, float]) -> None:
        """Log the current position of the ball.

        Parameters
        ----------
        timestamp : float
            Tick timestamp the state belongs to.
        position : tuple[float, float]
            Ball coordinates on the field (x, y).
        """
        self._write_log(
            "BALL_STATE",
            f"Time: {timestamp:.1f} | Pos: ({position[0]:.1f}, {position[1]:.1f})",
        )

    def log_agent_state(
        self,
        timestamp: float,
        agent_id: int,
        side: str,
        position: tuple[float, float],
        velocity: tuple[float, float],
    ) -> None:
        """Log the current state of an agent.

        Parameters
        ----------
        timestamp : float
            Tick timestamp the state belongs to.
        agent_id : int
            Identifier of the tracked agent.
        side : str
            Label for the agent's side.
        position : tuple[float, float]
            Agent coordinates (x, y).
        velocity : tuple[float, float]
            Velocity vector in units per tick.
        """
        self._write_log(
            "AGENT_STATE",
            f"Time: {timestamp:.1f} | "
            f"Agent {agent_id} ({side}) | "
            f"Pos: ({position[0]:.1f}, {position[1]:.1f}) | "
            f"Vel: ({velocity[0]:.2f}, {velocity[1]:.2f})",
        )

    def log_session_event(self, timestamp: float, event_type: str, description: str) -> None:
        """Log a session event (recording started, replay finished, etc.).

        Parameters
        ----------
        timestamp : float
            Tick timestamp of the event, ``0.0`` when not tied to a tick.
        event_type : str
            Short label identifying the event category.
        description : str
            Human-readable summary of the event.
        """
        self._write_log("SESSION_EVENT", f"Time: {timestamp:.1f} | Event: {event_type} | Details: {description}")

    def log_error(self, error_type: str, description: str) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the file.

        Parameters
        ----------
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest debug entries with line numbers for live displays.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
