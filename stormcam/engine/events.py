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
"""Typed timeline events produced by the replay parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple


class EventKind(Enum):
    """Closed set of event kinds stored on a timeline."""

    KILL = "kill"
    DEATH = "death"
    OBJECTIVE_CAPTURE = "objective_capture"
    STRUCTURE_DESTROYED = "structure_destroyed"
    TAUNT = "taunt"
    PING = "ping"
    UNIT_ACTIVITY = "unit_activity"
    PROXIMITY = "proximity"
    CORE_PRESENCE = "core_presence"


class ObjectiveKind(Enum):
    """Categories of objective captures."""

    BOSS = "boss"
    CAMP = "camp"
    MAP = "map"
    TEAM = "team"


@dataclass(frozen=True, slots=True)
class TimelineEvent:
    """Base class for every recorded event.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    """

    kind: ClassVar[EventKind]

    timestamp: float

    def __post_init__(self) -> None:
        """Reject negative timestamps."""
        if self.timestamp < 0:
            raise ValueError(f"Event timestamp must be non-negative, got {self.timestamp}")

    def participant_ids(self) -> Tuple[int, ...]:
        """Return ids of every participant the event refers to.

        Returns
        -------
        Tuple[int, ...]
            Participant ids, excluding unknown (``None``) references.
        """
        return ()


@dataclass(frozen=True, slots=True)
class KillEvent(TimelineEvent):
    """A hero takedown credited to a participant.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    killer : int
        Participant credited with the kill.
    victim : int
        Participant who died.
    """

    kind: ClassVar[EventKind] = EventKind.KILL

    killer: int
    victim: int

    def participant_ids(self) -> Tuple[int, ...]:
        """Return the killer and victim ids.

        Returns
        -------
        Tuple[int, ...]
            ``(killer, victim)``.
        """
        return (self.killer, self.victim)


@dataclass(frozen=True, slots=True)
class DeathEvent(TimelineEvent):
    """A participant's hero died.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    victim : int
        Participant whose hero died.
    killed_by : int | None, optional
        Participant credited with the kill; ``None`` for deaths to minions,
        towers or the environment.
    respawn_at : float | None, optional
        Match time at which the victim respawns, when the parser recorded it.
    """

    kind: ClassVar[EventKind] = EventKind.DEATH

    victim: int
    killed_by: int | None = None
    respawn_at: float | None = None

    def __post_init__(self) -> None:
        """Validate the timestamp and respawn ordering."""
        TimelineEvent.__post_init__(self)
        if self.respawn_at is not None and self.respawn_at < self.timestamp:
            raise ValueError("respawn_at must not precede the death")

    def participant_ids(self) -> Tuple[int, ...]:
        """Return the victim and, when known, the killer.

        Returns
        -------
        Tuple[int, ...]
            ``(victim,)`` or ``(victim, killed_by)``.
        """
        if self.killed_by is None:
            return (self.victim,)
        return (self.victim, self.killed_by)


@dataclass(frozen=True, slots=True)
class ObjectiveCaptureEvent(TimelineEvent):
    """A participant captured a boss, camp, map or team objective.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    actor : int
        Participant credited with the capture.
    objective_kind : ObjectiveKind
        Which family of objective was captured.
    """

    kind: ClassVar[EventKind] = EventKind.OBJECTIVE_CAPTURE

    actor: int
    objective_kind: ObjectiveKind

    def participant_ids(self) -> Tuple[int, ...]:
        """Return the capturing participant.

        Returns
        -------
        Tuple[int, ...]
            ``(actor,)``.
        """
        return (self.actor,)


@dataclass(frozen=True, slots=True)
class StructureDestroyedEvent(TimelineEvent):
    """A fort, keep, tower or gate was destroyed.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    destroyed_by : int | None, optional
        Participant credited with the final blow, if any.
    controller : int | None, optional
        Participant controlling the structure's team, if recorded.
    """

    kind: ClassVar[EventKind] = EventKind.STRUCTURE_DESTROYED

    destroyed_by: int | None = None
    controller: int | None = None

    def participant_ids(self) -> Tuple[int, ...]:
        """Return the destroyer and controller ids that are known.

        Returns
        -------
        Tuple[int, ...]
            Known participant references.
        """
        return tuple(pid for pid in (self.destroyed_by, self.controller) if pid is not None)


@dataclass(frozen=True, slots=True)
class _ActorEvent(TimelineEvent):
    """Shared shape for events attributed to a single participant.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    actor : int
        Participant the event is attributed to.
    """

    actor: int

    def participant_ids(self) -> Tuple[int, ...]:
        """Return the acting participant.

        Returns
        -------
        Tuple[int, ...]
            ``(actor,)``.
        """
        return (self.actor,)


@dataclass(frozen=True, slots=True)
class TauntEvent(_ActorEvent):
    """A participant taunted, danced or otherwise showed off.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    actor : int
        Participant who taunted.
    """

    kind: ClassVar[EventKind] = EventKind.TAUNT


@dataclass(frozen=True, slots=True)
class PingEvent(_ActorEvent):
    """A map ping. Only pings from the recording player's team are recorded.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    actor : int
        Participant who pinged.
    """

    kind: ClassVar[EventKind] = EventKind.PING


@dataclass(frozen=True, slots=True)
class UnitActivityEvent(_ActorEvent):
    """An enemy-controlled unit (mercenary, summon, vehicle) was active.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    actor : int
        Participant who owns the unit.
    """

    kind: ClassVar[EventKind] = EventKind.UNIT_ACTIVITY


@dataclass(frozen=True, slots=True)
class ProximityEvent(_ActorEvent):
    """A participant was clustered with other heroes near an event of interest.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    actor : int
        Participant at the centre of the cluster.
    """

    kind: ClassVar[EventKind] = EventKind.PROXIMITY


@dataclass(frozen=True, slots=True)
class CorePresenceEvent(_ActorEvent):
    """A participant was seen inside a team's core area.

    Parameters
    ----------
    timestamp : float
        Seconds elapsed since the start of the match.
    actor : int
        Participant seen near the core.
    core_team : int
        Team that owns the core, ``0`` or ``1``.
    """

    kind: ClassVar[EventKind] = EventKind.CORE_PRESENCE

    core_team: int

    def __post_init__(self) -> None:
        """Validate the timestamp and the core's team index."""
        TimelineEvent.__post_init__(self)
        if self.core_team not in (0, 1):
            raise ValueError(f"core_team must be 0 or 1, got {self.core_team}")
