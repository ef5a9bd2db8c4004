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
"""Target stream driver: turns resolver selections into camera directives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence

from stormcam.engine.config import ENGINE_CONFIG, EngineConfig
from stormcam.engine.hero_resolver import HeroResolver
from stormcam.engine.resolver import PriorityResolver
from stormcam.engine.tiers import Candidate, Tier, TierKind
from stormcam.engine.timeline import MatchTimeline
from stormcam.models.hero import DEFAULT_HERO_TABLE, HeroLookup
from stormcam.models.participant import Participant
from stormcam.utils.debug import SpectatorDebugger


class DirectorState(Enum):
    """States of the directive stream."""

    AWAITING_SELECTION = "awaiting_selection"
    EMITTING = "emitting"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class Directive:
    """Instruction for the automation layer to focus a participant.

    Parameters
    ----------
    participant : Participant
        Participant to focus.
    kind : TierKind
        Justification for the focus change.
    issued_at : float
        Playback time at which the directive applies.
    occurs_at : float
        Match time of the event that justified the directive.
    hold_duration : float
        Seconds to keep the focus before asking for the next directive.
    """

    participant: Participant
    kind: TierKind
    issued_at: float
    occurs_at: float
    hold_duration: float

    @property
    def focus_key(self) -> int:
        """Return the number key that focuses the participant (slot 0 is ``1``, slot 9 is ``0``)."""
        return (self.participant.slot + 1) % 10

    @property
    def release_at(self) -> float:
        """Return the playback time at which the next directive is computed."""
        return self.issued_at + self.hold_duration


class SpectatorDirector:
    """Drive the playback cursor through a match, one selection at a time.

    The director owns the playback cursor and the hero-resolution cache. Its
    ``directives`` generator is finite: it stops once the cursor reaches the
    match duration and yields nothing further until ``reset`` is called.

    Parameters
    ----------
    timeline : MatchTimeline
        Match being spectated.
    heroes : HeroLookup, optional
        Hero reference table; defaults to ``DEFAULT_HERO_TABLE``.
    config : EngineConfig, optional
        Engine tuning parameters.
    tiers : Sequence[Tier] | None, optional
        Custom tier catalogue passed through to the resolver.
    debugger : SpectatorDebugger | None, optional
        Optional logging helper used to record selections and directives.
    """

    def __init__(
        self,
        timeline: MatchTimeline,
        heroes: HeroLookup = DEFAULT_HERO_TABLE,
        config: EngineConfig = ENGINE_CONFIG,
        tiers: Optional[Sequence[Tier]] = None,
        debugger: Optional[SpectatorDebugger] = None,
    ) -> None:
        """Create a director positioned at the start of the match.

        Parameters
        ----------
        timeline : MatchTimeline
            Match being spectated.
        heroes : HeroLookup, optional
            Hero reference table.
        config : EngineConfig, optional
            Engine tuning parameters.
        tiers : Sequence[Tier] | None, optional
            Custom tier catalogue.
        debugger : SpectatorDebugger | None, optional
            Optional logging helper.
        """
        if config.director.minimum_step <= 0 or config.director.minimum_hold <= 0:
            raise ValueError("minimum_step and minimum_hold must be positive")
        self.timeline = timeline
        self.config = config
        self.debugger = debugger
        self.hero_resolver = HeroResolver(heroes)
        self.resolver = PriorityResolver(timeline, self.hero_resolver, config, tiers)
        self.playback_time = 0.0
        self.state = DirectorState.AWAITING_SELECTION

    @property
    def is_done(self) -> bool:
        """Return ``True`` once the stream has reached the end of the match."""
        return self.state is DirectorState.DONE

    def reset(self) -> None:
        """Rewind to the start of the match and forget hero resolutions."""
        self.playback_time = 0.0
        self.hero_resolver.reset()
        self._transition(DirectorState.AWAITING_SELECTION)

    def directives(self) -> Iterator[Directive]:
        """Lazily yield directives until the cursor passes the match duration.

        The cursor advances only when the consumer asks for the next
        directive, so a consumer can wait for the camera switch to be
        confirmed before pulling again. Closing the generator early leaves
        the cursor on the last emitted directive.

        Returns
        -------
        Iterator[Directive]
            Directives in playback order.
        """
        while not self.is_done:
            if self.playback_time >= self.timeline.duration:
                self._transition(DirectorState.DONE)
                return

            result = self.resolver.first_active_tier(self.playback_time)
            if result is None:
                step = self.config.director.minimum_step
                if self.debugger:
                    self.debugger.log_no_selection(self.playback_time, step)
                self.playback_time += step
                continue

            directive = self._directive_for(result.selection)
            if self.debugger:
                self.debugger.log_selection(
                    self.playback_time,
                    result.tier.kind.name,
                    directive.participant.name,
                    directive.occurs_at,
                    len(result.candidates),
                )
                self.debugger.log_directive(
                    self.playback_time,
                    directive.focus_key,
                    directive.participant.name,
                    directive.kind.name,
                    directive.hold_duration,
                )
            self._transition(DirectorState.EMITTING)
            try:
                yield directive
            except GeneratorExit:
                self._transition(DirectorState.AWAITING_SELECTION)
                raise
            self.playback_time += directive.hold_duration
            self._transition(DirectorState.AWAITING_SELECTION)

    def _directive_for(self, candidate: Candidate) -> Directive:
        """Convert the resolver's selection into a directive at the current cursor.

        Parameters
        ----------
        candidate : Candidate
            Selection returned by the resolver.

        Returns
        -------
        Directive
            Directive held at least ``minimum_hold`` seconds so the cursor always advances.
        """
        hold = max(candidate.release_at - self.playback_time, self.config.director.minimum_hold)
        return Directive(
            participant=candidate.target,
            kind=candidate.kind,
            issued_at=self.playback_time,
            occurs_at=candidate.occurs_at,
            hold_duration=hold,
        )

    def _transition(self, state: DirectorState) -> None:
        """Move to ``state``, logging the change when a debugger is attached.

        Parameters
        ----------
        state : DirectorState
            State to enter.
        """
        if state is not self.state and self.debugger:
            self.debugger.log_state(self.playback_time, self.state.name, state.name)
        self.state = state
