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
"""Run the director over a match file without pacing and print the directive count."""
from pathlib import Path

from stormcam.engine.director import SpectatorDirector
from stormcam.utils.debug import SpectatorDebugger
from stormcam.utils.generator import generate_match
from stormcam.utils.match_loader import load_match_from_json


def run_director(seed: int = 7) -> None:
    """Spectate a whole match as fast as possible, logging to ``debug_logs``.

    Parameters
    ----------
    seed : int
        Seed for the generated match used when ``data/match.json`` is absent.
    """
    data_path = Path(__file__).parent.parent / "data" / "match.json"
    if data_path.exists():
        timeline = load_match_from_json(str(data_path))
    else:
        timeline = generate_match(seed=seed)

    debugger = SpectatorDebugger()
    director = SpectatorDirector(timeline, debugger=debugger)

    count = sum(1 for _ in director.directives())

    debugger.close()
    print(f"Done spectating {timeline.duration:.0f}s of match time ({count} directives)")
    print(f"Log written to {debugger.log_path}")


if __name__ == "__main__":
    run_director()
