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
"""Reproduce a single pass-safety verdict from coordinates on the command line.

Usage:
    python tools/repro_pass.py --origin 0 0 --receiver 100 0 --opponent 50 1 --ball-speed 400
"""
import argparse
from dataclasses import replace
from typing import List

from pitchcontrol.engine.config import DEFAULT_CONFIG
from pitchcontrol.engine.entities import Agent, Side
from pitchcontrol.engine.pass_safety import PassSafetyAnalyzer
from pitchcontrol.engine.physics import Vector2D


def parse_opponents(raw: List[List[float]]) -> List[Agent]:
    opponents = []
    for index, values in enumerate(raw, start=100):
        x, y = values[0], values[1]
        vx, vy = (values[2], values[3]) if len(values) >= 4 else (0.0, 0.0)
        opponents.append(Agent(index, Side.AWAY, Vector2D(x, y), Vector2D(vx, vy)))
    return opponents


def main() -> None:
    parser = argparse.ArgumentParser(description="Test whether a straight pass can be intercepted.")
    parser.add_argument("--origin", nargs=2, type=float, required=True, metavar=("X", "Y"))
    parser.add_argument("--receiver", nargs=2, type=float, required=True, metavar=("X", "Y"))
    parser.add_argument(
        "--opponent",
        nargs="+",
        type=float,
        action="append",
        default=[],
        metavar="V",
        help="opponent as X Y [VX VY]; repeat for several opponents",
    )
    parser.add_argument("--ball-speed", type=float, default=DEFAULT_CONFIG.ball.nominal_speed)
    parser.add_argument("--no-bias", action="store_true", help="ignore opponent velocities")
    args = parser.parse_args()

    for values in args.opponent:
        if len(values) not in (2, 4):
            parser.error("--opponent takes X Y or X Y VX VY")

    analyzer = PassSafetyAnalyzer(ball_config=replace(DEFAULT_CONFIG.ball, nominal_speed=args.ball_speed))
    receiver = Agent(1, Side.HOME, Vector2D(*args.receiver))
    verdict = analyzer.test(
        Vector2D(*args.origin),
        receiver,
        parse_opponents(args.opponent),
        use_velocity_bias=not args.no_bias,
    )

    if verdict.safe:
        print("SAFE: every opponent arrives after the ball")
    elif verdict.interceptor_id is None:
        print("UNSAFE: pass is too short to evaluate")
    else:
        point = verdict.intercept_point
        print(f"UNSAFE: opponent {verdict.interceptor_id} reaches ({point.x:.2f}, {point.y:.2f}) in time")


if __name__ == "__main__":
    main()
