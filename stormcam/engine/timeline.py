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
"""Immutable, time-ordered match timeline and the windows used to query it."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from stormcam.engine.events import EventKind, TimelineEvent
from stormcam.models.participant import Participant


@dataclass(frozen=True, slots=True)
class AnalysisWindow:
    """Half-open time interval ``[start, end)`` used to scope an extraction.

    Parameters
    ----------
    start : float
        Inclusive lower bound in match seconds; must be non-negative.
    end : float
        Exclusive upper bound in match seconds; must exceed ``start``.
    """

    start: float
    end: float

    def __post_init__(self) -> None:
        """Fail fast on empty or negative windows."""
        if self.start < 0:
            raise ValueError(f"Window start must be non-negative, got {self.start}")
        if self.end <= self.start:
            raise ValueError(f"Window end ({self.end}) must be greater than start ({self.start})")

    @classmethod
    def following(cls, start: float, length: float) -> "AnalysisWindow":
        """Build the window ``[start, start + length)``.

        Parameters
        ----------
        start : float
            Playback time the window opens at.
        length : float
            Look-ahead in seconds.

        Returns
        -------
        AnalysisWindow
            The forward-looking window.
        """
        return cls(start, start + length)

    @classmethod
    def straddling(cls, centre: float, half_width: float) -> "AnalysisWindow":
        """Build ``[centre - half_width, centre + half_width)`` clamped at match start.

        Parameters
        ----------
        centre : float
            Playback time the window is centred on.
        half_width : float
            Seconds to look both backwards and forwards.

        Returns
        -------
        AnalysisWindow
            The straddling window.
        """
        return cls(max(0.0, centre - half_width), centre + half_width)

    @property
    def length(self) -> float:
        """Return the window length in seconds."""
        return self.end - self.start

    def contains(self, timestamp: float) -> bool:
        """Return whether ``timestamp`` falls inside the window.

        Parameters
        ----------
        timestamp : float
            Match time to test.

        Returns
        -------
        bool
            ``True`` when ``start <= timestamp < end``.
        """
        return self.start <= timestamp < self.end


class MatchTimeline:
    """Read-only event log for one recorded match.

    Events are ordered by timestamp; events sharing a timestamp keep the order
    in which they were supplied. Every participant reference inside an event
    must name a participant of the match.

    Parameters
    ----------
    participants : Iterable[Participant]
        Roster of the match. Ids and slots must be unique.
    events : Iterable[TimelineEvent]
        Recorded events in any order.
    duration : float | None, optional
        Match length in seconds. Defaults to the timestamp of the last event.
    """

    def __init__(
        self,
        participants: Iterable[Participant],
        events: Iterable[TimelineEvent],
        duration: Optional[float] = None,
    ) -> None:
        """Validate and index the supplied roster and events.

        Parameters
        ----------
        participants : Iterable[Participant]
            Roster of the match.
        events : Iterable[TimelineEvent]
            Recorded events in any order.
        duration : float | None, optional
            Match length in seconds.
        """
        roster: Dict[int, Participant] = {}
        slots: Dict[int, int] = {}
        for participant in participants:
            if participant.participant_id in roster:
                raise ValueError(f"Duplicate participant id: {participant.participant_id}")
            # Each slot maps to one hero-focus key
            if participant.slot in slots:
                raise ValueError(
                    f"Participants {slots[participant.slot]} and {participant.participant_id} share slot {participant.slot}"
                )
            roster[participant.participant_id] = participant
            slots[participant.slot] = participant.participant_id
        self._participants: Mapping[int, Participant] = MappingProxyType(roster)

        ordered = tuple(sorted(events, key=lambda event: event.timestamp))
        for event in ordered:
            unknown = [pid for pid in event.participant_ids() if pid not in roster]
            if unknown:
                raise ValueError(f"{type(event).__name__} at {event.timestamp}s references unknown participants {unknown}")
        self._events = ordered

        by_kind: Dict[EventKind, List[TimelineEvent]] = defaultdict(list)
        for event in ordered:
            by_kind[event.kind].append(event)
        self._by_kind: Dict[EventKind, Tuple[TimelineEvent, ...]] = {
            kind: tuple(items) for kind, items in by_kind.items()
        }
        self._times: Dict[EventKind, Tuple[float, ...]] = {
            kind: tuple(event.timestamp for event in items) for kind, items in self._by_kind.items()
        }

        last_event = ordered[-1].timestamp if ordered else 0.0
        if duration is None:
            duration = last_event
        if duration <= 0:
            raise ValueError("Match duration must be positive")
        if duration < last_event:
            raise ValueError(f"Match duration {duration}s ends before the last event at {last_event}s")
        self.duration = float(duration)

    @property
    def events(self) -> Tuple[TimelineEvent, ...]:
        """Return every event in timeline order."""
        return self._events

    @property
    def participants(self) -> Tuple[Participant, ...]:
        """Return the roster ordered by replay slot."""
        return tuple(sorted(self._participants.values(), key=lambda p: (p.slot, p.participant_id)))

    def participant(self, participant_id: int) -> Participant:
        """Return the participant with ``participant_id``.

        Parameters
        ----------
        participant_id : int
            Identifier used by timeline events.

        Returns
        -------
        Participant
            The matching roster entry.

        Raises
        ------
        KeyError
            When no participant has that id.
        """
        return self._participants[participant_id]

    def events_in_window(self, window: AnalysisWindow, kind: EventKind) -> Tuple[TimelineEvent, ...]:
        """Return events of ``kind`` whose timestamp lies in ``window``.

        Parameters
        ----------
        window : AnalysisWindow
            Half-open time range to query.
        kind : EventKind
            Event kind to match.

        Returns
        -------
        Tuple[TimelineEvent, ...]
            Matching events in timeline order; empty when none match.
        """
        times = self._times.get(kind)
        if not times:
            return ()
        lo = bisect_left(times, window.start)
        hi = bisect_left(times, window.end, lo)
        return self._by_kind[kind][lo:hi]

    def events_before(
        self, timestamp: float, kind: EventKind, *, inclusive: bool = False
    ) -> Tuple[TimelineEvent, ...]:
        """Return events of ``kind`` before ``timestamp``.

        Parameters
        ----------
        timestamp : float
            Upper bound in match seconds.
        kind : EventKind
            Event kind to match.
        inclusive : bool, optional
            Also return events stamped exactly at ``timestamp``.

        Returns
        -------
        Tuple[TimelineEvent, ...]
            Matching events in timeline order.
        """
        times = self._times.get(kind)
        if not times:
            return ()
        cut = bisect_right(times, timestamp) if inclusive else bisect_left(times, timestamp)
        return self._by_kind[kind][:cut]

    def __len__(self) -> int:
        return len(self._events)
