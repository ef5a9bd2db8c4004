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
"""Priority tiers: turning extracted events into camera candidates.

Each tier pairs a justification (``TierKind``) with a fixed look-ahead window
and an evaluator. Evaluators are plain functions of a ``TierContext`` and an
``AnalysisWindow``; the catalogue returned by ``build_tier_catalogue`` is the
ordered tuple the resolver walks, highest priority first.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, List, Tuple, cast

from stormcam.engine.config import ENGINE_CONFIG, AttributionConfig, EngineConfig
from stormcam.engine.events import (
    EventKind,
    KillEvent,
    ObjectiveCaptureEvent,
    ObjectiveKind,
    StructureDestroyedEvent,
)
from stormcam.engine.extractor import KillGroup, WindowedEventExtractor
from stormcam.engine.hero_resolver import HeroResolver
from stormcam.engine.timeline import AnalysisWindow
from stormcam.models.hero import HeroClass
from stormcam.models.participant import Participant


class TierKind(Enum):
    """Justification attached to a candidate, one per priority tier."""

    PENTA_KILL = "penta_kill"
    QUAD_KILL = "quad_kill"
    TRIPLE_KILL = "triple_kill"
    MULTI_KILL = "multi_kill"
    KILL = "kill"
    DEATH = "death"
    BOSS = "boss"
    CAMP = "camp"
    MAP_OBJECTIVE = "map_objective"
    TEAM_OBJECTIVE = "team_objective"
    UNIT = "unit"
    TAUNT = "taunt"
    STRUCTURE = "structure"
    PROXIMITY = "proximity"
    KILLER = "killer"
    ALIVE = "alive"
    PING = "ping"


KILL_STREAK_KINDS = {
    5: TierKind.PENTA_KILL,
    4: TierKind.QUAD_KILL,
    3: TierKind.TRIPLE_KILL,
    2: TierKind.MULTI_KILL,
    1: TierKind.KILL,
}
"""Kill-streak tier for each exact group size."""


@dataclass(frozen=True, slots=True)
class Candidate:
    """Provisional camera target proposed by one tier.

    Parameters
    ----------
    target : Participant
        Participant the camera should follow.
    kind : TierKind
        Why the participant is worth watching.
    occurs_at : float
        Match time of the event that justified the candidate.
    hold_duration : float
        Seconds to keep the camera on the target after ``occurs_at``.
    """

    target: Participant
    kind: TierKind
    occurs_at: float
    hold_duration: float

    @property
    def release_at(self) -> float:
        """Return the match time at which the camera may move on."""
        return self.occurs_at + self.hold_duration


@dataclass(frozen=True, slots=True)
class TierContext:
    """Shared collaborators handed to every evaluator.

    Parameters
    ----------
    extractor : WindowedEventExtractor
        Windowed queries over the match timeline.
    heroes : HeroResolver
        Hero resolution cache used by attribution rules.
    attribution : AttributionConfig
        Grace periods applied to candidates.
    """

    extractor: WindowedEventExtractor
    heroes: HeroResolver
    attribution: AttributionConfig

    def participant(self, participant_id: int) -> Participant:
        """Return the roster entry for ``participant_id``.

        Parameters
        ----------
        participant_id : int
            Identifier used by timeline events.

        Returns
        -------
        Participant
            The matching participant.
        """
        return self.extractor.timeline.participant(participant_id)


TierEvaluator = Callable[[TierContext, AnalysisWindow], List[Candidate]]


@dataclass(frozen=True, slots=True)
class Tier:
    """One level of the priority ordering.

    Parameters
    ----------
    kind : TierKind
        Justification this tier produces.
    window_length : float
        Look-ahead in seconds, or half-width when ``straddle`` is set.
    evaluator : TierEvaluator
        Function producing candidates for a window.
    straddle : bool, default=False
        Centre the window on the playback time instead of starting at it.
    """

    kind: TierKind
    window_length: float
    evaluator: TierEvaluator
    straddle: bool = False

    def __post_init__(self) -> None:
        """Reject non-positive window lengths."""
        if self.window_length <= 0:
            raise ValueError(f"{self.kind.name} window length must be positive")

    def window_at(self, playback_time: float) -> AnalysisWindow:
        """Return the window this tier inspects at ``playback_time``.

        Parameters
        ----------
        playback_time : float
            Current playback cursor in match seconds.

        Returns
        -------
        AnalysisWindow
            ``[t, t + length)`` or, for straddling tiers, ``[t - length, t + length)``.
        """
        if self.straddle:
            return AnalysisWindow.straddling(playback_time, self.window_length)
        return AnalysisWindow.following(playback_time, self.window_length)

    def evaluate(self, context: TierContext, playback_time: float) -> List[Candidate]:
        """Evaluate the tier at ``playback_time``.

        Parameters
        ----------
        context : TierContext
            Collaborators shared by the evaluators.
        playback_time : float
            Current playback cursor in match seconds.

        Returns
        -------
        List[Candidate]
            Candidates sorted by ``occurs_at``; ties keep evaluation order.
        """
        window = self.window_at(playback_time)
        candidates = self.evaluator(context, window)
        return sorted(candidates, key=lambda candidate: candidate.occurs_at)


def _per_victim(context: TierContext, group: KillGroup) -> List[Candidate]:
    """Target each victim of ``group`` at its own death.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    group : KillGroup
        Kills credited to one participant.

    Returns
    -------
    List[Candidate]
        One ``DEATH`` candidate per victim.
    """
    grace = context.attribution.grace
    return [
        Candidate(context.participant(death.victim), TierKind.DEATH, death.timestamp, grace) for death in group.deaths
    ]


def attribute_kill_group(context: TierContext, group: KillGroup, kind: TierKind) -> List[Candidate]:
    """Apply the melee, ranged and split-unit attribution rules to a kill group.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    group : KillGroup
        Kills credited to one participant.
    kind : TierKind
        Kill-streak tier the group satisfied.

    Returns
    -------
    List[Candidate]
        A single killer candidate, or one candidate per victim when following
        the killer would not show the action.
    """
    killer = context.participant(group.killer)
    hero = context.heroes.resolved_hero(killer)
    if hero is None:
        return [Candidate(killer, kind, group.last_death_at, context.attribution.unresolved_grace)]

    hero_class = hero.hero_class
    if hero_class is HeroClass.MELEE:
        return [Candidate(killer, kind, group.last_death_at, context.attribution.grace)]
    if hero_class is HeroClass.RANGED:
        return _per_victim(context, group)
    if hero_class is HeroClass.SPLIT_UNIT:
        return _per_victim(context, group)
    raise ValueError(f"Unhandled hero class: {hero_class}")


def evaluate_kill_streak(context: TierContext, window: AnalysisWindow, multiplicity: int) -> List[Candidate]:
    """Candidates for killers with exactly ``multiplicity`` kills in ``window``.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    window : AnalysisWindow
        Time range to inspect.
    multiplicity : int
        Exact group size required; larger and smaller groups are ignored.

    Returns
    -------
    List[Candidate]
        Attributed candidates for every qualifying killer.
    """
    kind = KILL_STREAK_KINDS[multiplicity]
    candidates: List[Candidate] = []
    for group in context.extractor.group_kills(window):
        if group.size == multiplicity:
            candidates.extend(attribute_kill_group(context, group, kind))
    return candidates


def evaluate_deaths(context: TierContext, window: AnalysisWindow) -> List[Candidate]:
    """Follow each hero that dies in ``window``.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    window : AnalysisWindow
        Time range to inspect.

    Returns
    -------
    List[Candidate]
        One candidate per death, targeting the victim.
    """
    grace = context.attribution.grace
    return [
        Candidate(context.participant(death.victim), TierKind.DEATH, death.timestamp, grace)
        for death in context.extractor.deaths(window)
    ]


def evaluate_objectives(
    context: TierContext, window: AnalysisWindow, objective_kind: ObjectiveKind, kind: TierKind
) -> List[Candidate]:
    """Follow participants capturing objectives of ``objective_kind``.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    window : AnalysisWindow
        Time range to inspect.
    objective_kind : ObjectiveKind
        Objective family this tier covers.
    kind : TierKind
        Justification attached to the candidates.

    Returns
    -------
    List[Candidate]
        One candidate per matching capture.
    """
    grace = context.attribution.grace
    candidates: List[Candidate] = []
    for event in context.extractor.extract(window, EventKind.OBJECTIVE_CAPTURE):
        capture = cast(ObjectiveCaptureEvent, event)
        if capture.objective_kind is objective_kind:
            candidates.append(Candidate(context.participant(capture.actor), kind, capture.timestamp, grace))
    return candidates


def evaluate_actor_events(
    context: TierContext, window: AnalysisWindow, event_kind: EventKind, kind: TierKind
) -> List[Candidate]:
    """Follow the actor of each ``event_kind`` event in ``window``.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    window : AnalysisWindow
        Time range to inspect.
    event_kind : EventKind
        Single-actor event kind (taunt, ping, unit activity, proximity).
    kind : TierKind
        Justification attached to the candidates.

    Returns
    -------
    List[Candidate]
        One candidate per event.
    """
    grace = context.attribution.grace
    return [
        Candidate(context.participant(event.actor), kind, event.timestamp, grace)  # type: ignore[attr-defined]
        for event in context.extractor.extract(window, event_kind)
    ]


def evaluate_structures(context: TierContext, window: AnalysisWindow) -> List[Candidate]:
    """Follow whoever destroyed a structure; unattributed destructions are skipped.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    window : AnalysisWindow
        Time range to inspect.

    Returns
    -------
    List[Candidate]
        One candidate per attributed destruction.
    """
    grace = context.attribution.grace
    candidates: List[Candidate] = []
    for event in context.extractor.extract(window, EventKind.STRUCTURE_DESTROYED):
        structure = cast(StructureDestroyedEvent, event)
        if structure.destroyed_by is None:
            continue
        candidates.append(
            Candidate(context.participant(structure.destroyed_by), TierKind.STRUCTURE, structure.timestamp, grace)
        )
    return candidates


def evaluate_killers(context: TierContext, window: AnalysisWindow) -> List[Candidate]:
    """Follow participants credited with kills around the playback time.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    window : AnalysisWindow
        Straddling time range to inspect.

    Returns
    -------
    List[Candidate]
        One candidate per kill event, targeting the killer.
    """
    grace = context.attribution.grace
    candidates: List[Candidate] = []
    for event in context.extractor.extract(window, EventKind.KILL):
        kill = cast(KillEvent, event)
        candidates.append(Candidate(context.participant(kill.killer), TierKind.KILLER, kill.timestamp, grace))
    return candidates


def evaluate_alive(context: TierContext, window: AnalysisWindow) -> List[Candidate]:
    """Fallback: follow living heroes, preferring threats to a core.

    Participants seen in the opposing team's core come first. Otherwise every
    living participant not idling in their own core qualifies, and if that
    leaves nobody, every living participant does.

    Parameters
    ----------
    context : TierContext
        Evaluation collaborators.
    window : AnalysisWindow
        Window whose start is the instant inspected.

    Returns
    -------
    List[Candidate]
        Candidates at ``window.start`` held for the whole window, ordered by slot.
    """
    alive = context.extractor.alive(window)
    presence = context.extractor.core_presence(window)

    enemy_core = [p for p in alive if presence.get(p.participant_id) == p.opposing_team]
    ally_core = {p.participant_id for p in alive if presence.get(p.participant_id) == p.team}

    if enemy_core:
        chosen = enemy_core
    else:
        chosen = [p for p in alive if p.participant_id not in ally_core] or alive

    return [Candidate(p, TierKind.ALIVE, window.start, window.length) for p in chosen]


def build_tier_catalogue(config: EngineConfig = ENGINE_CONFIG) -> Tuple[Tier, ...]:
    """Build the ordered tier catalogue, highest priority first.

    Parameters
    ----------
    config : EngineConfig, optional
        Source of window lengths.

    Returns
    -------
    Tuple[Tier, ...]
        Tiers in the order the resolver must consult them.
    """
    windows = config.windows
    tiers: List[Tier] = []
    for multiplicity in (5, 4, 3, 2):
        tiers.append(
            Tier(
                KILL_STREAK_KINDS[multiplicity],
                windows.streak_window(multiplicity),
                partial(evaluate_kill_streak, multiplicity=multiplicity),
            )
        )
    tiers.extend(
        [
            Tier(TierKind.KILL, windows.kill, partial(evaluate_kill_streak, multiplicity=1)),
            Tier(TierKind.DEATH, windows.death, evaluate_deaths),
            Tier(TierKind.BOSS, windows.objective, partial(evaluate_objectives, objective_kind=ObjectiveKind.BOSS, kind=TierKind.BOSS)),
            Tier(TierKind.CAMP, windows.objective, partial(evaluate_objectives, objective_kind=ObjectiveKind.CAMP, kind=TierKind.CAMP)),
            Tier(
                TierKind.MAP_OBJECTIVE,
                windows.objective,
                partial(evaluate_objectives, objective_kind=ObjectiveKind.MAP, kind=TierKind.MAP_OBJECTIVE),
            ),
            Tier(
                TierKind.TEAM_OBJECTIVE,
                windows.objective,
                partial(evaluate_objectives, objective_kind=ObjectiveKind.TEAM, kind=TierKind.TEAM_OBJECTIVE),
            ),
            Tier(TierKind.UNIT, windows.short, partial(evaluate_actor_events, event_kind=EventKind.UNIT_ACTIVITY, kind=TierKind.UNIT)),
            Tier(TierKind.TAUNT, windows.short, partial(evaluate_actor_events, event_kind=EventKind.TAUNT, kind=TierKind.TAUNT)),
            Tier(TierKind.STRUCTURE, windows.short, evaluate_structures),
            Tier(
                TierKind.PROXIMITY,
                windows.short,
                partial(evaluate_actor_events, event_kind=EventKind.PROXIMITY, kind=TierKind.PROXIMITY),
            ),
            Tier(TierKind.KILLER, windows.killer_straddle, evaluate_killers, straddle=True),
            Tier(TierKind.ALIVE, windows.alive, evaluate_alive),
            # Only reachable when every hero is dead.
            Tier(TierKind.PING, windows.short, partial(evaluate_actor_events, event_kind=EventKind.PING, kind=TierKind.PING)),
        ]
    )
    return tuple(tiers)
