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
"""Utilities for constructing match timelines from serialized data sources.

The helpers in this module translate plain dictionaries or JSON payloads
emitted by a replay parser into the immutable timeline the engine queries.
They are used by the demo entrypoint and by test fixtures to spin up matches
without hand-building every event.
"""
import json
from pathlib import Path
from typing import Callable, Dict

from stormcam.engine.events import (
    CorePresenceEvent,
    DeathEvent,
    EventKind,
    KillEvent,
    ObjectiveCaptureEvent,
    ObjectiveKind,
    PingEvent,
    ProximityEvent,
    StructureDestroyedEvent,
    TauntEvent,
    TimelineEvent,
    UnitActivityEvent,
)
from stormcam.engine.timeline import MatchTimeline
from stormcam.models.participant import Participant


def participant_from_dict(d: dict, default_slot: int = 0) -> Participant:
    """Build a ``Participant`` from a plain dictionary payload.

    Parameters
    ----------
    d
        A mapping with ``id``, ``team`` and optionally ``name``, ``slot`` and
        ``hero`` keys.
    default_slot
        Slot to use when the payload does not carry one (typically the
        participant's position in the roster list).

    Returns
    -------
    Participant
        A participant whose hero stays unresolved when ``hero`` is missing.

    """
    participant_id = d["id"]
    hero = d.get("hero") or None
    return Participant(
        participant_id=participant_id,
        name=d.get("name", f"player_{participant_id}"),
        team=d["team"],
        slot=d.get("slot", default_slot),
        hero_name=hero,
    )


def _optional_id(d: dict, key: str) -> "int | None":
    """Return ``d[key]`` or ``None`` when missing or null.

    Parameters
    ----------
    d
        Event payload.
    key
        Field to read.

    Returns
    -------
    int | None
        The participant id, if present.
    """
    value = d.get(key)
    return None if value is None else int(value)


_EVENT_BUILDERS: Dict[str, Callable[[dict, float], TimelineEvent]] = {
    EventKind.KILL.value: lambda d, t: KillEvent(t, killer=d["killer"], victim=d["victim"]),
    EventKind.DEATH.value: lambda d, t: DeathEvent(
        t, victim=d["victim"], killed_by=_optional_id(d, "killed_by"), respawn_at=d.get("respawn_at")
    ),
    EventKind.OBJECTIVE_CAPTURE.value: lambda d, t: ObjectiveCaptureEvent(
        t, actor=d["actor"], objective_kind=ObjectiveKind(d["objective"])
    ),
    EventKind.STRUCTURE_DESTROYED.value: lambda d, t: StructureDestroyedEvent(
        t, destroyed_by=_optional_id(d, "destroyed_by"), controller=_optional_id(d, "controller")
    ),
    EventKind.TAUNT.value: lambda d, t: TauntEvent(t, actor=d["actor"]),
    EventKind.PING.value: lambda d, t: PingEvent(t, actor=d["actor"]),
    EventKind.UNIT_ACTIVITY.value: lambda d, t: UnitActivityEvent(t, actor=d["actor"]),
    EventKind.PROXIMITY.value: lambda d, t: ProximityEvent(t, actor=d["actor"]),
    EventKind.CORE_PRESENCE.value: lambda d, t: CorePresenceEvent(t, actor=d["actor"], core_team=d["core_team"]),
}


def event_from_dict(d: dict) -> TimelineEvent:
    """Build a timeline event from a dictionary with ``type`` and ``time`` keys.

    Parameters
    ----------
    d
        Event payload. ``type`` is one of the ``EventKind`` values and
        ``time`` is seconds from match start.

    Returns
    -------
    TimelineEvent
        The typed event.

    Raises
    ------
    ValueError
        When ``type`` is not a known event kind.

    """
    event_type = d.get("type")
    try:
        builder = _EVENT_BUILDERS[event_type]
    except KeyError as exc:
        known = ", ".join(sorted(_EVENT_BUILDERS))
        raise ValueError(f"Unknown event type '{event_type}'. Known types: {known}") from exc
    return builder(d, float(d["time"]))


def timeline_from_dict(data: dict) -> MatchTimeline:
    """Build a ``MatchTimeline`` from an already-parsed match document.

    Parameters
    ----------
    data
        Mapping with ``participants``, ``events`` and optional ``duration``.

    Returns
    -------
    MatchTimeline
        Validated, time-ordered timeline.

    Raises
    ------
    KeyError
        When the document is missing the ``participants`` section.

    """
    participants = [participant_from_dict(p, default_slot=i) for i, p in enumerate(data["participants"])]
    events = [event_from_dict(e) for e in data.get("events", [])]
    return MatchTimeline(participants, events, duration=data.get("duration"))


def load_match_from_json(path: str) -> MatchTimeline:
    """Load a match timeline from the repository's JSON schema.

    Parameters
    ----------
    path
        The filesystem path to the JSON document following the
        ``data/match.json`` schema.

    Returns
    -------
    MatchTimeline
        Timeline ready to be spectated.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    KeyError
        Raised when the JSON payload is missing required top-level sections.

    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Match JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    return timeline_from_dict(data)
