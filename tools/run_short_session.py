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
"""Record a short scripted session, replay it and optionally save the timeline."""
import argparse
from pathlib import Path
from typing import Optional

from pitchcontrol.engine.physics import Vector2D
from pitchcontrol.engine.session import Session
from pitchcontrol.engine.timeline import TimelineMode
from pitchcontrol.utils.debug import SessionDebugger
from pitchcontrol.utils.timeline_io import save_timeline


def run_short_session(
    ticks: int = 120,
    speed: float = 1.0,
    output: Optional[Path] = None,
    debug_dir: Optional[str] = None,
) -> None:
    """Drive every agent along a simple sweep, record it and replay it.

    Parameters
    ----------
    ticks : int
        Number of ticks to record (default 120, two seconds at 60 Hz).
    speed : float
        Playback multiplier used for the replay.
    output : Path | None
        Where to save the recorded timeline as JSON, if anywhere.
    debug_dir : str | None
        Directory for a session debug log, if one is wanted.
    """
    debugger = SessionDebugger(debug_dir) if debug_dir else None
    session = Session(debugger=debugger)
    start = {agent.agent_id: agent.position for agent in session.entities.agents}

    session.start_recording()
    for tick in range(ticks):
        for agent_id, origin in start.items():
            drift = Vector2D(0.0, 3.0 * ((tick % 40) - 20))
            session.set_agent_position(agent_id, origin + drift)
            session.set_agent_velocity(agent_id, Vector2D(0.0, 3.0 if tick % 40 < 20 else -3.0))
        session.set_ball_position(session.pitch.center + Vector2D(2.0 * tick, 0.0))
        session.tick(float(tick))
    session.stop_recording()
    session.log_state()

    if output is not None:
        path = save_timeline(session.timeline.timeline, output)
        print(f"Saved {len(session.timeline.timeline)} frames to {path}")

    session.reset()
    session.start_replay(speed)
    replay_ticks = 0
    while session.tick(float(ticks + replay_ticks)) is TimelineMode.REPLAYING:
        replay_ticks += 1
    session.log_state()
    session.close()
    print(f"Recorded {ticks} ticks, replayed in {replay_ticks + 1} ticks at x{speed:g}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--ticks", type=int, default=120)
    parser.add_argument("--speed", type=float, default=1.0)
    parser.add_argument("--output", type=Path, default=None)
    parser.add_argument("--debug-dir", default=None)
    args = parser.parse_args()
    run_short_session(args.ticks, args.speed, args.output, args.debug_dir)
