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
"""Utilities that synthesise rosters and timelines for quick spectating runs."""
import random
from typing import List, Optional

from stormcam.engine.events import (
    CorePresenceEvent,
    DeathEvent,
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
from stormcam.models.hero import HERO_CATALOGUE
from stormcam.models.participant import Participant

PLAYER_NAMES = ["Zemill", "Khaldor", "Kendo", "Fan", "Sake", "Mene", "Dunktrain", "Glaurung", "Kure", "Srey"]


def generate_roster(rng: random.Random, team_size: int = 5, unresolved_chance: float = 0.1) -> List[Participant]:
    """Generate two teams of participants with random heroes.

    Parameters
    ----------
    rng : random.Random
        Source of randomness.
    team_size : int
        Participants per team; at most half of ``SLOT_COUNT``.
    unresolved_chance : float
        Probability that a participant's hero is left unknown.

    Returns
    -------
    List[Participant]
        Team 0 in slots ``0..team_size-1`` followed by team 1.
    """
    heroes = rng.sample([name for name, _ in HERO_CATALOGUE], team_size * 2)
    roster: List[Participant] = []
    for slot in range(team_size * 2):
        hero: Optional[str] = heroes[slot]
        if rng.random() < unresolved_chance:
            hero = None
        name = PLAYER_NAMES[slot] if slot < len(PLAYER_NAMES) else f"Player {slot + 1}"
        roster.append(Participant(participant_id=slot + 1, name=name, team=slot // team_size, slot=slot, hero_name=hero))
    return roster


def _skirmish(rng: random.Random, roster: List[Participant], start: float, respawn: float) -> List[TimelineEvent]:
    """Generate a short team fight starting at ``start``.

    Parameters
    ----------
    rng : random.Random
        Source of randomness.
    roster : List[Participant]
        Participants to draw fighters from.
    start : float
        Match time of the first death.
    respawn : float
        Seconds each victim stays dead.

    Returns
    -------
    List[TimelineEvent]
        Deaths, matching kill credits and a possible taunt.
    """
    killer = rng.choice(roster)
    enemies = [p for p in roster if p.is_enemy_of(killer)]
    victims = rng.sample(enemies, rng.randint(1, min(3, len(enemies))))

    events: List[TimelineEvent] = [ProximityEvent(max(0.0, start - 2.0), actor=killer.participant_id)]
    at = start
    for victim in victims:
        credited = killer.participant_id if rng.random() > 0.15 else None
        events.append(
            DeathEvent(at, victim=victim.participant_id, killed_by=credited, respawn_at=at + respawn)
        )
        if credited is not None:
            events.append(KillEvent(at, killer=credited, victim=victim.participant_id))
        at += rng.uniform(0.5, 4.0)
    if rng.random() < 0.3:
        events.append(TauntEvent(at + 1.0, actor=killer.participant_id))
    return events


def generate_match(seed: Optional[int] = None, duration: float = 900.0, team_size: int = 5) -> MatchTimeline:
    """Generate a plausible match timeline.

    Parameters
    ----------
    seed : Optional[int]
        Seed for reproducible output; random when ``None``.
    duration : float
        Match length in seconds.
    team_size : int
        Participants per team.

    Returns
    -------
    MatchTimeline
        Timeline with fights, objectives, structures and core sightings.
    """
    rng = random.Random(seed)
    roster = generate_roster(rng, team_size=team_size)
    events: List[TimelineEvent] = []

    t = rng.uniform(45.0, 90.0)
    while t < duration - 30.0:
        roll = rng.random()
        actor = rng.choice(roster)
        if roll < 0.45:
            events.extend(_skirmish(rng, roster, t, respawn=10.0 + t / 30.0))
        elif roll < 0.60:
            events.append(ObjectiveCaptureEvent(t, actor=actor.participant_id, objective_kind=ObjectiveKind.CAMP))
            events.append(UnitActivityEvent(t + 5.0, actor=actor.participant_id))
        elif roll < 0.70:
            kind = rng.choice([ObjectiveKind.BOSS, ObjectiveKind.MAP, ObjectiveKind.TEAM])
            events.append(ObjectiveCaptureEvent(t, actor=actor.participant_id, objective_kind=kind))
        elif roll < 0.80:
            destroyer = actor.participant_id if rng.random() > 0.2 else None
            events.append(StructureDestroyedEvent(t, destroyed_by=destroyer))
        elif roll < 0.90 and actor.team == 0:
            events.append(PingEvent(t, actor=actor.participant_id))
        else:
            events.append(CorePresenceEvent(t, actor=actor.participant_id, core_team=rng.choice((0, 1))))
        t += rng.uniform(15.0, 60.0)

    return MatchTimeline(roster, events, duration=duration)
