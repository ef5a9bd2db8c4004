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
"""Tests for the match timeline, analysis windows and windowed extraction."""

import pytest

from stormcam.engine.events import (
    CorePresenceEvent,
    DeathEvent,
    EventKind,
    PingEvent,
    TauntEvent,
)
from stormcam.engine.extractor import WindowedEventExtractor
from stormcam.engine.timeline import AnalysisWindow, MatchTimeline
from stormcam.models.participant import Participant


class TestAnalysisWindow:
    """Tests for half-open analysis windows."""

    def test_half_open(self) -> None:
        window = AnalysisWindow(10.0, 20.0)
        assert window.contains(10.0)
        assert window.contains(19.99)
        assert not window.contains(20.0)
        assert window.length == 10.0

    def test_empty_window_rejected(self) -> None:
        with pytest.raises(ValueError):
            AnalysisWindow(5.0, 5.0)

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(ValueError):
            AnalysisWindow(-1.0, 5.0)

    def test_straddling_clamps_at_match_start(self) -> None:
        window = AnalysisWindow.straddling(2.0, 5.0)
        assert window.start == 0.0
        assert window.end == 7.0

    def test_following(self) -> None:
        assert AnalysisWindow.following(30.0, 12.0) == AnalysisWindow(30.0, 42.0)


class TestMatchTimeline:
    """Tests for timeline construction and queries."""

    def test_events_sorted_with_stable_ties(self, make_timeline) -> None:
        first = TauntEvent(5.0, actor=1)
        second = PingEvent(5.0, actor=2)
        earlier = TauntEvent(1.0, actor=3)
        timeline = make_timeline([first, second, earlier])
        assert timeline.events == (earlier, first, second)
        assert len(timeline) == 3

    def test_participants_ordered_by_slot(self, roster) -> None:
        timeline = MatchTimeline(reversed(roster), [], duration=60.0)
        assert [p.slot for p in timeline.participants] == list(range(10))
        assert timeline.participant(3).name == "P3"
        with pytest.raises(KeyError):
            timeline.participant(99)

    def test_duplicate_participant_rejected(self, roster) -> None:
        with pytest.raises(ValueError):
            MatchTimeline(roster + [roster[0]], [], duration=60.0)

    def test_shared_slot_rejected(self, roster) -> None:
        """Two participants on one slot would share a hero-focus key."""
        clash = Participant(participant_id=11, name="P11", team=1, slot=0, hero_name="Nova")
        with pytest.raises(ValueError, match="share slot 0"):
            MatchTimeline(roster + [clash], [], duration=60.0)

    def test_unknown_participant_reference_rejected(self, make_timeline) -> None:
        with pytest.raises(ValueError):
            make_timeline([TauntEvent(1.0, actor=42)])

    def test_duration_defaults_to_last_event(self, make_timeline) -> None:
        timeline = make_timeline([TauntEvent(1.0, actor=1), TauntEvent(80.0, actor=2)], duration=None)
        assert timeline.duration == 80.0

    def test_duration_before_last_event_rejected(self, make_timeline) -> None:
        with pytest.raises(ValueError):
            make_timeline([TauntEvent(80.0, actor=1)], duration=60.0)

    def test_empty_timeline_needs_duration(self, make_timeline) -> None:
        with pytest.raises(ValueError):
            make_timeline([], duration=None)

    def test_events_in_window_is_half_open(self, make_timeline) -> None:
        events = [TauntEvent(t, actor=1) for t in (0.0, 5.0, 9.9, 10.0)]
        timeline = make_timeline(events)
        found = timeline.events_in_window(AnalysisWindow(0.0, 10.0), EventKind.TAUNT)
        assert [e.timestamp for e in found] == [0.0, 5.0, 9.9]
        assert timeline.events_in_window(AnalysisWindow(0.0, 10.0), EventKind.PING) == ()

    def test_events_before(self, make_timeline) -> None:
        timeline = make_timeline([TauntEvent(t, actor=1) for t in (1.0, 2.0, 3.0)])
        assert len(timeline.events_before(2.0, EventKind.TAUNT)) == 1
        assert len(timeline.events_before(2.0, EventKind.TAUNT, inclusive=True)) == 2


class TestWindowedEventExtractor:
    """Tests for windowed aggregates."""

    def test_group_kills_by_killer(self, make_timeline) -> None:
        timeline = make_timeline(
            [
                DeathEvent(12.0, victim=7, killed_by=2),
                DeathEvent(10.0, victim=6, killed_by=1),
                DeathEvent(11.0, victim=8, killed_by=1),
                DeathEvent(13.0, victim=9),  # no credited killer
            ]
        )
        groups = WindowedEventExtractor(timeline).group_kills(AnalysisWindow(0.0, 20.0))
        assert [g.killer for g in groups] == [1, 2]
        assert groups[0].size == 2
        assert groups[0].last_death_at == 11.0
        assert groups[1].size == 1

    def test_is_alive_uses_recorded_respawn(self, make_timeline) -> None:
        timeline = make_timeline([DeathEvent(10.0, victim=3, respawn_at=25.0)])
        extractor = WindowedEventExtractor(timeline)
        assert extractor.is_alive(3, 9.9)
        assert not extractor.is_alive(3, 10.0)
        assert not extractor.is_alive(3, 24.9)
        assert extractor.is_alive(3, 25.0)

    def test_is_alive_falls_back_to_default_respawn(self, make_timeline) -> None:
        timeline = make_timeline([DeathEvent(10.0, victim=3)])
        extractor = WindowedEventExtractor(timeline, default_respawn=15.0)
        assert not extractor.is_alive(3, 24.0)
        assert extractor.is_alive(3, 25.0)

    def test_alive_ordered_by_slot(self, make_timeline) -> None:
        timeline = make_timeline([DeathEvent(0.0, victim=1, respawn_at=30.0)])
        alive = WindowedEventExtractor(timeline).alive(AnalysisWindow(5.0, 10.0))
        assert [p.participant_id for p in alive] == list(range(2, 11))

    def test_core_presence_latest_sighting_wins(self, make_timeline) -> None:
        timeline = make_timeline(
            [
                CorePresenceEvent(1.0, actor=4, core_team=0),
                CorePresenceEvent(3.0, actor=4, core_team=1),
                CorePresenceEvent(2.0, actor=6, core_team=1),
            ]
        )
        presence = WindowedEventExtractor(timeline).core_presence(AnalysisWindow(0.0, 5.0))
        assert presence == {4: 1, 6: 1}

    def test_extract_is_pure(self, make_timeline) -> None:
        timeline = make_timeline([TauntEvent(1.0, actor=1)])
        extractor = WindowedEventExtractor(timeline)
        window = AnalysisWindow(0.0, 5.0)
        assert extractor.extract(window, EventKind.TAUNT) == extractor.extract(window, EventKind.TAUNT)
