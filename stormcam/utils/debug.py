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
"""Structured logging utilities used to trace camera direction."""
import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple


class SpectatorDebugger:
    """Helper object that streams structured spectating telemetry to disk.

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
        """Return the path of the current session's log file."""
        return self.output_dir / f"spectate_debug_{self.session_start}.txt"

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.log_file:
            self.log_file.close()

        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Spectate Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_selection(
        self,
        playback_time: float,
        tier: str,
        participant: str,
        occurs_at: float,
        candidates: int = 1,
    ) -> None:
        """Log the tier that won at a playback time.

        Parameters
        ----------
        playback_time : float
            Playback cursor in match seconds.
        tier : str
            Name of the winning tier.
        participant : str
            Display name of the selected participant.
        occurs_at : float
            Match time of the event behind the selection.
        candidates : int
            Number of candidates the winning tier produced.
        """
        self.log_spectate_event(
            playback_time,
            "selection",
            f"Tier {tier} | Target {participant} | At {occurs_at:.1f}s | Candidates {candidates}",
        )

    def log_no_selection(self, playback_time: float, step: float) -> None:
        """Log that every tier was empty and the cursor skipped ahead.

        Parameters
        ----------
        playback_time : float
            Playback cursor in match seconds.
        step : float
            Seconds the cursor advanced.
        """
        self.log_spectate_event(playback_time, "no_selection", f"Advancing {step:.1f}s")

    def log_directive(
        self,
        playback_time: float,
        focus_key: int,
        participant: str,
        kind: str,
        hold_duration: float,
    ) -> None:
        """Log a directive handed to the automation layer.

        Parameters
        ----------
        playback_time : float
            Playback cursor in match seconds.
        focus_key : int
            Hero-focus key the automation layer should press.
        participant : str
            Display name of the focused participant.
        kind : str
            Justification for the focus change.
        hold_duration : float
            Seconds the focus should be held.
        """
        self.log_spectate_event(
            playback_time,
            "directive",
            f"Key {focus_key} | Target {participant} | Kind {kind} | Hold {hold_duration:.1f}s",
        )

    def log_state(self, playback_time: float, previous: str, current: str) -> None:
        """Log a director state transition.

        Parameters
        ----------
        playback_time : float
            Playback cursor in match seconds.
        previous : str
            State being left.
        current : str
            State being entered.
        """
        self.log_spectate_event(playback_time, "state", f"{previous} -> {current}")

    def log_spectate_event(self, playback_time: float, event_type: str, description: str) -> None:
        """Log a spectating event.

        Parameters
        ----------
        playback_time : float
            Playback cursor in match seconds.
        event_type : str
            Short label identifying the event category.
        description : str
            Human-readable summary of the event.
        """
        self._write_log(
            "SPECTATE_EVENT", f"Time: {playback_time:.1f}s | Event: {event_type} | Details: {description}"
        )

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
