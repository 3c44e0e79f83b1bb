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
"""Entry point for a headless control-field demonstration."""
from pitchcontrol.engine.control_field import ControlField, ControlMode
from pitchcontrol.engine.entities import Side
from pitchcontrol.engine.physics import Vector2D
from pitchcontrol.engine.session import Session
from pitchcontrol.engine.timeline import TimelineMode


def print_control_share(label: str, field: ControlField) -> None:
    """Print the share of cells each side controls.

    Parameters
    ----------
    label : str
        Heading printed before the figures.
    field : ControlField
        Evaluated field to summarise.
    """
    share = field.control_share()
    print(f"\n{label} ({field.columns}x{field.rows} cells, step {field.step:g}):")
    print(f"  Home:    {share['home']:.1%}")
    print(f"  Away:    {share['away']:.1%}")
    print(f"  Neutral: {share['neutral']:.1%}")


def main() -> None:
    """Run a short scripted session and print what the core computes."""
    session = Session()

    # Home forwards make a run, the away back line steps up.
    session.set_agent_velocity(10, Vector2D(9.0, -2.0))
    session.set_agent_velocity(11, Vector2D(9.0, 2.0))
    for agent in session.entities.agents_on(Side.AWAY)[1:5]:
        session.set_agent_velocity(agent.agent_id, Vector2D(-4.0, 0.0))

    print_control_share("Plain control", session.evaluate_field())
    print_control_share("Plain control without velocity bias", session.evaluate_field(use_velocity_bias=False))
    print_control_share("Ball-relative control", session.evaluate_field(mode=ControlMode.BALL_RELATIVE))

    print("\nPasses from the ball to home agents:")
    for verdict in session.pass_candidates(Side.HOME):
        if verdict.safe:
            print(f"  #{verdict.receiver_id}: safe")
        else:
            interceptor = f"#{verdict.interceptor_id}" if verdict.interceptor_id is not None else "degenerate pass"
            print(f"  #{verdict.receiver_id}: interceptable ({interceptor})")

    # Record a short run of the home striker, then replay it at double speed.
    session.start_recording()
    striker = session.entities.get_agent(10)
    for tick in range(30):
        session.set_agent_position(10, striker.position + Vector2D(6.0 * tick, 0.0))
        session.tick(float(tick))
    session.stop_recording()
    print(f"\nRecorded {len(session.timeline.timeline)} frames over {session.timeline.timeline.duration:g} ticks")

    session.reset()
    session.start_replay(2.0)
    tick = 100.0
    while session.tick(tick) is TimelineMode.REPLAYING:
        tick += 1.0
    replayed = session.entities.get_agent(10)
    print(f"Replay finished after {tick - 100.0:g} ticks; striker at ({replayed.position.x:.1f}, {replayed.position.y:.1f})")

    session.close()


if __name__ == "__main__":
    main()
