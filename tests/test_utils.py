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
"""Tests for utility modules (generator, match loader, debug) and the entry point."""

import json
import random
from pathlib import Path
from types import SimpleNamespace

import pytest

import stormcam.main
from stormcam.engine.director import SpectatorDirector
from stormcam.engine.events import DeathEvent, EventKind, ObjectiveCaptureEvent, ObjectiveKind
from stormcam.main import print_directives, run_spectating
from stormcam.utils.debug import SpectatorDebugger
from stormcam.utils.generator import generate_match, generate_roster
from stormcam.utils.match_loader import event_from_dict, load_match_from_json, participant_from_dict


class TestGenerator:
    """Tests for generator utility functions."""

    def test_generate_roster(self) -> None:
        roster = generate_roster(random.Random(1))
        assert len(roster) == 10
        assert [p.slot for p in roster] == list(range(10))
        assert sum(1 for p in roster if p.team == 0) == 5
        assert len({p.participant_id for p in roster}) == 10

    def test_generate_match_is_reproducible(self) -> None:
        first = generate_match(seed=5, duration=600.0)
        second = generate_match(seed=5, duration=600.0)
        assert first.events == second.events
        assert first.participants == second.participants
        assert first.duration == 600.0

    def test_generated_deaths_carry_respawn(self) -> None:
        timeline = generate_match(seed=2)
        deaths = [e for e in timeline.events if e.kind is EventKind.DEATH]
        assert deaths
        assert all(isinstance(d, DeathEvent) and d.respawn_at is not None for d in deaths)


class TestMatchLoader:
    """Tests for match loading helpers."""

    def test_participant_from_dict(self) -> None:
        p = participant_from_dict({"id": 4, "team": 1, "name": "Kure", "hero": "Zeratul"}, default_slot=7)
        assert p.participant_id == 4
        assert p.slot == 7
        assert p.hero_name == "Zeratul"

    def test_blank_hero_is_unresolved(self) -> None:
        p = participant_from_dict({"id": 4, "team": 1, "hero": ""})
        assert p.hero_name is None
        assert p.name == "player_4"

    def test_event_from_dict(self) -> None:
        event = event_from_dict({"type": "objective_capture", "time": 12, "actor": 3, "objective": "boss"})
        assert event == ObjectiveCaptureEvent(12.0, actor=3, objective_kind=ObjectiveKind.BOSS)

    def test_unknown_event_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown event type"):
            event_from_dict({"type": "dance_off", "time": 1})

    def test_load_match_from_json(self, tmp_path: Path) -> None:
        document = {
            "duration": 120,
            "participants": [{"id": pid, "team": (pid - 1) // 5, "hero": "Raynor"} for pid in range(1, 11)],
            "events": [
                {"type": "taunt", "time": 40, "actor": 2},
                {"type": "death", "time": 10, "victim": 6, "killed_by": 1, "respawn_at": 30},
                {"type": "kill", "time": 10, "killer": 1, "victim": 6},
                {"type": "structure_destroyed", "time": 50, "destroyed_by": None},
            ],
        }
        path = tmp_path / "match.json"
        path.write_text(json.dumps(document), encoding="utf-8")

        timeline = load_match_from_json(str(path))
        assert timeline.duration == 120.0
        assert [p.slot for p in timeline.participants] == list(range(10))
        assert [e.kind for e in timeline.events] == [
            EventKind.DEATH,
            EventKind.KILL,
            EventKind.TAUNT,
            EventKind.STRUCTURE_DESTROYED,
        ]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_match_from_json(str(tmp_path / "missing.json"))

    def test_missing_participants(self, tmp_path: Path) -> None:
        path = tmp_path / "match.json"
        path.write_text(json.dumps({"events": []}), encoding="utf-8")
        with pytest.raises(KeyError):
            load_match_from_json(str(path))


class TestSpectatorDebugger:
    """Tests for the spectate debug log."""

    def test_entries_are_written(self, tmp_path: Path) -> None:
        debugger = SpectatorDebugger(output_dir=str(tmp_path))
        debugger.log_selection(12.0, "KILL", "Zemill", 15.0, candidates=2)
        debugger.log_directive(12.0, 1, "Zemill", "KILL", 4.0)
        debugger.log_error("replay", "missing hero")
        debugger.close()

        log = debugger.log_path.read_text(encoding="utf-8")
        assert "Time: 12.0s | Event: selection | Details: Tier KILL | Target Zemill" in log
        assert "Key 1 | Target Zemill | Kind KILL | Hold 4.0s" in log
        assert "ERROR: Type: replay" in log

    def test_recent_events_are_numbered(self, tmp_path: Path) -> None:
        debugger = SpectatorDebugger(output_dir=str(tmp_path))
        for step in range(5):
            debugger.log_no_selection(float(step * 5), 5.0)
        recent = debugger.get_recent_events(limit=2)
        debugger.close()
        assert len(recent) == 2
        assert recent[0].startswith("00004 ")
        assert "Advancing 5.0s" in recent[1]


class TestEntryPoint:
    """Tests for the console entry point helpers."""

    def test_print_directives_without_pacing(self, make_timeline, capsys) -> None:
        director = SpectatorDirector(make_timeline([], duration=10.0))
        emitted = []
        print_directives(director, emitted, playback_speed=0)
        out = capsys.readouterr().out
        assert len(emitted) == 2
        assert "[00:00] key 1: P1 (Illidan) for 5.0s - alive" in out

    def test_run_spectating_closes_log(self, make_timeline, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr(stormcam.main, "start_visualizer", lambda *args: None)
        debugger = SpectatorDebugger(output_dir=str(tmp_path))
        emitted = run_spectating(make_timeline([], duration=10.0), debugger, playback_speed=0)
        assert len(emitted) == 2
        assert debugger.log_file is None

    def test_run_spectating_closes_log_on_error(self, make_timeline, tmp_path: Path, monkeypatch) -> None:
        """The log file is closed even when waiting on the worker threads fails."""

        class BrokenThread:
            def __init__(self, *args, **kwargs) -> None:
                pass

            def start(self) -> None:
                pass

            def join(self) -> None:
                raise RuntimeError("join failed")

        monkeypatch.setattr(stormcam.main, "threading", SimpleNamespace(Thread=BrokenThread))
        debugger = SpectatorDebugger(output_dir=str(tmp_path))
        with pytest.raises(RuntimeError):
            run_spectating(make_timeline([], duration=10.0), debugger, playback_speed=0)
        assert debugger.log_file is None
