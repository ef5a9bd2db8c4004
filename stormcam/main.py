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
"""Entry point for manual spectating runs and the optional schedule viewer."""
import threading
import time
from pathlib import Path
from typing import Dict, List

from stormcam.engine.config import ENGINE_CONFIG
from stormcam.engine.director import Directive, SpectatorDirector
from stormcam.engine.timeline import MatchTimeline
from stormcam.models.hero import DEFAULT_HERO_TABLE
from stormcam.utils.debug import SpectatorDebugger
from stormcam.utils.generator import generate_match  # Fallback if no match file
from stormcam.utils.match_loader import load_match_from_json  # For loading parsed replays
from stormcam.visualizer.visualizer import start_visualizer


def _format_clock(seconds: float) -> str:
    """Format match seconds as ``mm:ss``.

    Parameters
    ----------
    seconds : float
        Match time in seconds.

    Returns
    -------
    str
        Zero-padded minutes and seconds.
    """
    return f"{int(seconds // 60):02d}:{int(seconds % 60):02d}"


def print_directives(director: SpectatorDirector, emitted: List[Directive], playback_speed: float) -> None:
    """Pull directives from ``director`` and print each one as it is issued.

    Parameters
    ----------
    director : SpectatorDirector
        Director positioned where spectating should begin.
    emitted : List[Directive]
        Shared list that receives every directive, read by the viewer.
    playback_speed : float
        Replay speed multiplier; ``0`` prints without waiting.
    """
    for directive in director.directives():
        participant = directive.participant
        hero = participant.hero_name or "unknown hero"
        print(
            f"[{_format_clock(directive.issued_at)}] key {directive.focus_key}: "
            f"{participant.name} ({hero}) for {directive.hold_duration:.1f}s - {directive.kind.value}"
        )
        emitted.append(directive)
        # Hold the camera for as long as the replay takes to play the directive
        if playback_speed > 0:
            time.sleep(directive.hold_duration / playback_speed)


def run_spectating(timeline: MatchTimeline, debugger: SpectatorDebugger, playback_speed: float) -> List[Directive]:
    """Run the director and the optional viewer in threads until both finish.

    Parameters
    ----------
    timeline : MatchTimeline
        Match to spectate.
    debugger : SpectatorDebugger
        Log sink for the director; closed before returning, even on error.
    playback_speed : float
        Replay speed multiplier; ``0`` prints without waiting.

    Returns
    -------
    List[Directive]
        Every directive emitted before the run ended.
    """
    director = SpectatorDirector(timeline, DEFAULT_HERO_TABLE, ENGINE_CONFIG, debugger=debugger)
    emitted: List[Directive] = []

    try:
        # Daemon thread so an interrupted run does not wait out the remaining holds
        director_thread = threading.Thread(
            target=print_directives,
            args=(director, emitted, playback_speed),
            daemon=True,
        )
        director_thread.start()

        # The viewer returns at once when pygame is not installed
        vis_thread = threading.Thread(target=start_visualizer, args=(timeline, director, emitted))
        vis_thread.start()

        director_thread.join()
        vis_thread.join()
    except KeyboardInterrupt:
        print("\nSpectating interrupted.")
    finally:
        debugger.close()
    return emitted


def main() -> None:
    """Spectate a match, printing directives and opening the viewer when available."""
    # Try to load a parsed replay, fall back to a generated match if not found
    match_file = Path("data/match.json")
    timeline: MatchTimeline
    if match_file.exists():
        try:
            timeline = load_match_from_json(str(match_file))
        except (KeyError, ValueError) as e:
            print(f"Error loading match from {match_file}: {e}")
            print("Falling back to a generated match...")
            timeline = generate_match(seed=7)
    else:
        print(f"No match file found at {match_file}")
        print("Using a generated match...")
        timeline = generate_match(seed=7)

    debugger = SpectatorDebugger()
    print(f"Spectating {len(timeline)} events over {_format_clock(timeline.duration)}")
    emitted = run_spectating(timeline, debugger, ENGINE_CONFIG.director.playback_speed)
    print(f"\nIssued {len(emitted)} directives. Log written to {debugger.log_path}")

    focus_counts: Dict[str, int] = {}
    for directive in emitted:
        name = directive.participant.name
        focus_counts[name] = focus_counts.get(name, 0) + 1

    print("\nFocus changes per participant:")
    for name, count in sorted(focus_counts.items(), key=lambda item: (-item[1], item[0])):
        print(f"{name}: {count}")


if __name__ == "__main__":
    main()
