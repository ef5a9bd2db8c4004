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
"""Windowed extraction of timeline events and the aggregates tiers rely on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, cast

from stormcam.engine.config import ENGINE_CONFIG
from stormcam.engine.events import CorePresenceEvent, DeathEvent, EventKind, TimelineEvent
from stormcam.engine.timeline import AnalysisWindow, MatchTimeline
from stormcam.models.participant import Participant


@dataclass(frozen=True, slots=True)
class KillGroup:
    """Deaths inside one window credited to the same killer.

    Parameters
    ----------
    killer : int
        Participant credited with every death in the group.
    deaths : Tuple[DeathEvent, ...]
        The deaths, in timeline order.
    """

    killer: int
    deaths: Tuple[DeathEvent, ...]

    @property
    def size(self) -> int:
        """Return the number of kills in the group."""
        return len(self.deaths)

    @property
    def last_death_at(self) -> float:
        """Return the timestamp of the group's final death."""
        return max(death.timestamp for death in self.deaths)


class WindowedEventExtractor:
    """Pure queries over a timeline restricted to an analysis window.

    Parameters
    ----------
    timeline : MatchTimeline
        Timeline to read from; never modified.
    default_respawn : float, optional
        Seconds a victim stays dead when the death carries no respawn time.
    """

    def __init__(self, timeline: MatchTimeline, default_respawn: float = ENGINE_CONFIG.director.default_respawn) -> None:
        """Bind the extractor to ``timeline``.

        Parameters
        ----------
        timeline : MatchTimeline
            Timeline to read from.
        default_respawn : float, optional
            Fallback time dead after a death without a recorded respawn.
        """
        self.timeline = timeline
        self.default_respawn = default_respawn

    def extract(self, window: AnalysisWindow, kind: EventKind) -> Tuple[TimelineEvent, ...]:
        """Return events of ``kind`` inside ``window``.

        Parameters
        ----------
        window : AnalysisWindow
            Time range to query.
        kind : EventKind
            Event kind to match.

        Returns
        -------
        Tuple[TimelineEvent, ...]
            Matching events in timeline order.
        """
        return self.timeline.events_in_window(window, kind)

    def deaths(self, window: AnalysisWindow) -> Tuple[DeathEvent, ...]:
        """Return hero deaths inside ``window``.

        Parameters
        ----------
        window : AnalysisWindow
            Time range to query.

        Returns
        -------
        Tuple[DeathEvent, ...]
            Deaths in timeline order.
        """
        return cast(Tuple[DeathEvent, ...], self.extract(window, EventKind.DEATH))

    def group_kills(self, window: AnalysisWindow) -> List[KillGroup]:
        """Group deaths in ``window`` by the participant credited with the kill.

        Deaths without a credited killer are left out.

        Parameters
        ----------
        window : AnalysisWindow
            Time range to query.

        Returns
        -------
        List[KillGroup]
            One group per killer, ordered by each killer's first death.
        """
        grouped: Dict[int, List[DeathEvent]] = {}
        for death in self.deaths(window):
            if death.killed_by is None:
                continue
            grouped.setdefault(death.killed_by, []).append(death)
        return [KillGroup(killer, tuple(deaths)) for killer, deaths in grouped.items()]

    def is_alive(self, participant_id: int, at: float) -> bool:
        """Return whether a participant's hero is alive at match time ``at``.

        Parameters
        ----------
        participant_id : int
            Participant to check.
        at : float
            Match time in seconds.

        Returns
        -------
        bool
            ``False`` while inside any death-to-respawn interval covering ``at``.
        """
        return participant_id not in self._dead_at(at)

    def alive(self, window: AnalysisWindow) -> List[Participant]:
        """Return participants alive when ``window`` opens.

        Parameters
        ----------
        window : AnalysisWindow
            Window whose start is the instant inspected.

        Returns
        -------
        List[Participant]
            Alive participants ordered by slot.
        """
        return [p for p in self.timeline.participants if self.is_alive(p.participant_id, window.start)]

    def core_presence(self, window: AnalysisWindow) -> Dict[int, int]:
        """Map each participant seen in a core area during ``window`` to that core's team.

        Parameters
        ----------
        window : AnalysisWindow
            Time range to query.

        Returns
        -------
        Dict[int, int]
            Participant id to core team. The latest sighting wins.
        """
        presence: Dict[int, int] = {}
        for event in self.extract(window, EventKind.CORE_PRESENCE):
            sighting = cast(CorePresenceEvent, event)
            presence[sighting.actor] = sighting.core_team
        return presence

    def _dead_at(self, at: float) -> set[int]:
        """Return ids of participants dead at ``at``.

        Parameters
        ----------
        at : float
            Match time in seconds.

        Returns
        -------
        set[int]
            Participants whose latest death has not yet respawned.
        """
        dead: set[int] = set()
        for event in self.timeline.events_before(at, EventKind.DEATH, inclusive=True):
            death = cast(DeathEvent, event)
            respawn = death.respawn_at if death.respawn_at is not None else death.timestamp + self.default_respawn
            if at < respawn:
                dead.add(death.victim)
            else:
                dead.discard(death.victim)
        return dead
