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
"""Utilities for persisting recorded timelines as JSON.

The engine keeps recordings in memory only; these helpers translate a
:class:`~pitchcontrol.engine.timeline.Timeline` to plain dictionaries and back
so a recording can be saved, shared and replayed later. Positions and
velocities are stored as ``[x, y]`` pairs and timestamps as plain numbers.
Python's JSON encoder writes the shortest repr of each float, so a save and
load returns exactly the values that were captured.

Example payload::

    {
      "version": 1,
      "frames": [
        {
          "timestamp": 0.0,
          "ball": [525.0, 340.0],
          "agents": [
            {"id": 1, "side": "home", "position": [84.0, 340.0], "velocity": [0.0, 0.0]}
          ]
        }
      ]
    }
"""
import json
from pathlib import Path
from typing import Any, Dict, Union

from pitchcontrol.engine.entities import Agent, EntitySnapshot, Side
from pitchcontrol.engine.physics import Vector2D
from pitchcontrol.engine.timeline import RecordingFrame, Timeline

FORMAT_VERSION = 1


def _pair(values: Any) -> Vector2D:
    """Build a vector from a two-element sequence.

    Parameters
    ----------
    values : Any
        Sequence holding ``x`` and ``y``.

    Returns
    -------
    Vector2D
        Vector with float components.
    """
    x, y = values
    return Vector2D(float(x), float(y))


def frame_to_dict(frame: RecordingFrame) -> Dict[str, Any]:
    """Serialise one frame.

    Parameters
    ----------
    frame : RecordingFrame
        Frame to convert.

    Returns
    -------
    Dict[str, Any]
        JSON-compatible mapping.
    """
    return {
        "timestamp": frame.timestamp,
        "ball": list(frame.snapshot.ball.as_tuple()),
        "agents": [
            {
                "id": agent.agent_id,
                "side": agent.side.value,
                "position": list(agent.position.as_tuple()),
                "velocity": list(agent.velocity.as_tuple()),
            }
            for agent in frame.snapshot.agents
        ],
    }


def frame_from_dict(d: dict) -> RecordingFrame:
    """Build a frame from a mapping produced by :func:`frame_to_dict`.

    Parameters
    ----------
    d : dict
        Serialised frame. ``velocity`` may be omitted and defaults to rest.

    Returns
    -------
    RecordingFrame
        Reconstructed frame.

    Raises
    ------
    KeyError
        Raised when ``timestamp``, ``ball`` or an agent's ``id``, ``side`` or
        ``position`` is missing.
    ValueError
        Raised when a side label is unknown.
    """
    agents = tuple(
        Agent(
            agent_id=int(raw["id"]),
            side=Side(raw["side"]),
            position=_pair(raw["position"]),
            velocity=_pair(raw.get("velocity", (0.0, 0.0))),
        )
        for raw in d.get("agents", [])
    )
    return RecordingFrame(
        timestamp=float(d["timestamp"]),
        snapshot=EntitySnapshot(agents=agents, ball=_pair(d["ball"])),
    )


def timeline_to_dict(timeline: Timeline) -> Dict[str, Any]:
    """Serialise a whole timeline.

    Parameters
    ----------
    timeline : Timeline
        Timeline to convert.

    Returns
    -------
    Dict[str, Any]
        Mapping with a format version and the frame list.
    """
    return {"version": FORMAT_VERSION, "frames": [frame_to_dict(frame) for frame in timeline]}


def timeline_from_dict(d: dict) -> Timeline:
    """Rebuild a timeline from :func:`timeline_to_dict` output.

    Parameters
    ----------
    d : dict
        Serialised timeline.

    Returns
    -------
    Timeline
        Timeline holding the decoded frames in order.

    Raises
    ------
    ValueError
        Raised for an unsupported format version or out-of-order frames.
    """
    version = d.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported timeline format version: {version}")
    return Timeline(frame_from_dict(raw) for raw in d.get("frames", []))


def save_timeline(timeline: Timeline, path: Union[str, Path]) -> Path:
    """Write ``timeline`` to ``path`` as JSON.

    Parameters
    ----------
    timeline : Timeline
        Timeline to persist.
    path : str | Path
        Destination file; parent directories are created.

    Returns
    -------
    Path
        The path written.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as fh:
        json.dump(timeline_to_dict(timeline), fh, indent=2)
    return p


def load_timeline(path: Union[str, Path]) -> Timeline:
    """Load a timeline written by :func:`save_timeline`.

    Parameters
    ----------
    path : str | Path
        JSON file to read.

    Returns
    -------
    Timeline
        Decoded timeline.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Timeline JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    return timeline_from_dict(data)
