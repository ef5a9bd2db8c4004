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
"""Tests for the target stream driver."""

import pytest

from stormcam.engine.config import DirectorConfig, EngineConfig
from stormcam.engine.director import Directive, DirectorState, SpectatorDirector
from stormcam.engine.events import DeathEvent
from stormcam.engine.tiers import TierKind, build_tier_catalogue
from stormcam.utils.debug import SpectatorDebugger
from stormcam.utils.generator import generate_match


class TestDirective:
    """Tests for directive helpers."""

    def test_focus_key_wraps_slot_ten_to_zero(self, roster) -> None:
        first = Directive(roster[0], TierKind.ALIVE, 0.0, 0.0, 5.0)
        last = Directive(roster[9], TierKind.ALIVE, 0.0, 0.0, 5.0)
        assert first.focus_key == 1
        assert last.focus_key == 0
        assert first.release_at == 5.0

    def test_focus_keys_unique_per_match(self, make_timeline) -> None:
        timeline = make_timeline([], duration=60.0)
        keys = {Directive(p, TierKind.ALIVE, 0.0, 0.0, 5.0).focus_key for p in timeline.participants}
        assert keys == set(range(10))


class TestSpectatorDirector:
    """Tests for cursor advancement and stream lifecycle."""

    def test_stream_terminates(self) -> None:
        timeline = generate_match(seed=3, duration=300.0)
        director = SpectatorDirector(timeline)
        directives = list(director.directives())

        assert directives
        assert director.is_done
        assert director.playback_time >= timeline.duration
        issued = [d.issued_at for d in directives]
        assert issued == sorted(issued)
        assert len(set(issued)) == len(issued)
        assert all(d.hold_duration >= director.config.director.minimum_hold for d in directives)
        assert all(d.issued_at < timeline.duration for d in directives)

    def test_done_stream_yields_nothing(self, make_timeline) -> None:
        director = SpectatorDirector(make_timeline([], duration=20.0))
        assert len(list(director.directives())) == 4
        assert list(director.directives()) == []

    def test_cursor_follows_hold(self, make_timeline) -> None:
        timeline = make_timeline([DeathEvent(4.0, victim=7)], duration=30.0)
        director = SpectatorDirector(timeline)
        stream = director.directives()

        first = next(stream)
        assert first.kind is TierKind.DEATH
        assert first.participant.participant_id == 7
        assert first.hold_duration == 5.0  # death at 4s plus one second of grace
        assert director.state is DirectorState.EMITTING

        second = next(stream)
        assert second.issued_at == 5.0
        assert second.kind is TierKind.ALIVE

    def test_short_hold_is_raised_to_minimum(self, make_timeline) -> None:
        """A release just after the cursor is raised to the minimum hold."""
        timeline = make_timeline([DeathEvent(0.5, victim=7)], duration=30.0)
        config = EngineConfig(director=DirectorConfig(minimum_hold=2.0))
        director = SpectatorDirector(timeline, config=config)
        first = next(director.directives())
        assert first.hold_duration == 2.0

    def test_no_selection_advances_minimum_step(self, make_timeline, tmp_path) -> None:
        timeline = make_timeline([DeathEvent(50.0, victim=6, killed_by=1)], duration=130.0)
        tiers = [tier for tier in build_tier_catalogue() if tier.kind is not TierKind.ALIVE]
        debugger = SpectatorDebugger(output_dir=str(tmp_path))
        director = SpectatorDirector(timeline, tiers=tiers, debugger=debugger)

        directives = list(director.directives())
        debugger.close()

        assert len(directives) == 1
        assert directives[0].issued_at == 45.0
        assert directives[0].kind is TierKind.KILL
        assert directives[0].participant.participant_id == 1
        log = debugger.log_path.read_text(encoding="utf-8")
        assert "Event: no_selection" in log
        assert "Tier KILL" in log

    def test_closing_stream_keeps_cursor(self, make_timeline) -> None:
        director = SpectatorDirector(make_timeline([], duration=60.0))
        stream = director.directives()
        next(stream)
        second = next(stream)
        stream.close()

        assert director.state is DirectorState.AWAITING_SELECTION
        assert director.playback_time == second.issued_at
        assert next(director.directives()) == second

    def test_reset_replays_identically(self) -> None:
        timeline = generate_match(seed=11, duration=240.0)
        director = SpectatorDirector(timeline)
        first_run = list(director.directives())
        director.reset()
        assert director.playback_time == 0.0
        assert director.state is DirectorState.AWAITING_SELECTION
        assert list(director.directives()) == first_run

    def test_non_positive_step_rejected(self, make_timeline) -> None:
        config = EngineConfig(director=DirectorConfig(minimum_step=0.0))
        with pytest.raises(ValueError):
            SpectatorDirector(make_timeline([]), config=config)

    def test_state_changes_are_logged(self, make_timeline, tmp_path) -> None:
        debugger = SpectatorDebugger(output_dir=str(tmp_path))
        director = SpectatorDirector(make_timeline([], duration=5.0), debugger=debugger)
        list(director.directives())
        debugger.close()
        log = debugger.log_path.read_text(encoding="utf-8")
        assert "AWAITING_SELECTION -> EMITTING" in log
        assert "AWAITING_SELECTION -> DONE" in log
