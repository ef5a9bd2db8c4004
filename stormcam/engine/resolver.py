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
"""Priority resolver: the first non-empty tier decides who to watch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from stormcam.engine.config import ENGINE_CONFIG, EngineConfig
from stormcam.engine.extractor import WindowedEventExtractor
from stormcam.engine.hero_resolver import HeroResolver
from stormcam.engine.tiers import Candidate, Tier, TierContext, build_tier_catalogue
from stormcam.engine.timeline import AnalysisWindow, MatchTimeline


@dataclass(frozen=True, slots=True)
class TierResult:
    """Outcome of the winning tier at one playback time.

    Parameters
    ----------
    tier : Tier
        The highest-priority tier that produced candidates.
    window : AnalysisWindow
        Window the tier inspected.
    candidates : Tuple[Candidate, ...]
        The tier's candidates, earliest first.
    """

    tier: Tier
    window: AnalysisWindow
    candidates: Tuple[Candidate, ...]

    @property
    def selection(self) -> Candidate:
        """Return the earliest candidate of the winning tier."""
        return self.candidates[0]


class PriorityResolver:
    """Walk the tier catalogue in order and stop at the first non-empty tier.

    Lower-priority tiers are never evaluated once a higher tier has produced
    a candidate, and the resolver holds no state between calls besides the
    shared hero-resolution cache.

    Parameters
    ----------
    timeline : MatchTimeline
        Match being spectated.
    heroes : HeroResolver
        Hero resolution cache consulted by attribution rules.
    config : EngineConfig, optional
        Window lengths and grace periods.
    tiers : Sequence[Tier] | None, optional
        Custom tier catalogue; defaults to ``build_tier_catalogue(config)``.
    """

    def __init__(
        self,
        timeline: MatchTimeline,
        heroes: HeroResolver,
        config: EngineConfig = ENGINE_CONFIG,
        tiers: Optional[Sequence[Tier]] = None,
    ) -> None:
        """Wire the resolver to its timeline, hero cache and catalogue.

        Parameters
        ----------
        timeline : MatchTimeline
            Match being spectated.
        heroes : HeroResolver
            Hero resolution cache.
        config : EngineConfig, optional
            Window lengths and grace periods.
        tiers : Sequence[Tier] | None, optional
            Custom tier catalogue.
        """
        self.timeline = timeline
        self.config = config
        self.tiers: Tuple[Tier, ...] = tuple(tiers) if tiers is not None else build_tier_catalogue(config)
        if not self.tiers:
            raise ValueError("At least one tier is required")
        extractor = WindowedEventExtractor(timeline, default_respawn=config.director.default_respawn)
        self.context = TierContext(extractor=extractor, heroes=heroes, attribution=config.attribution)

    def first_active_tier(self, playback_time: float) -> Optional[TierResult]:
        """Return the highest-priority tier with candidates at ``playback_time``.

        Parameters
        ----------
        playback_time : float
            Current playback cursor in match seconds.

        Returns
        -------
        Optional[TierResult]
            The winning tier and its sorted candidates, or ``None`` when every
            tier is empty.
        """
        if playback_time < 0:
            raise ValueError(f"Playback time must be non-negative, got {playback_time}")
        for tier in self.tiers:
            candidates = tier.evaluate(self.context, playback_time)
            if candidates:
                return TierResult(tier, tier.window_at(playback_time), tuple(candidates))
        return None

    def resolve(self, playback_time: float) -> Optional[Candidate]:
        """Return the camera selection at ``playback_time``.

        Parameters
        ----------
        playback_time : float
            Current playback cursor in match seconds.

        Returns
        -------
        Optional[Candidate]
            Earliest candidate of the first non-empty tier, or ``None``.
        """
        result = self.first_active_tier(playback_time)
        return result.selection if result is not None else None
