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
"""Shared fixtures: a ten-player roster and a timeline builder."""

from typing import Callable, Iterable, List, Optional

import pytest

from stormcam.engine.config import AttributionConfig
from stormcam.engine.events import TimelineEvent
from stormcam.engine.extractor import WindowedEventExtractor
from stormcam.engine.hero_resolver import HeroResolver
from stormcam.engine.tiers import TierContext
from stormcam.engine.timeline import MatchTimeline
from stormcam.models.hero import DEFAULT_HERO_TABLE
from stormcam.models.participant import Participant

# Slot order; the last participant's hero is unknown.
HEROES = ["Illidan", "Raynor", "Abathur", "Muradin", "Jaina", "Thrall", "Tracer", "Stitches", "Nova", None]


@pytest.fixture
def roster() -> List[Participant]:
    """Ids 1-5 play for team 0 and ids 6-10 for team 1."""
    return [
        Participant(participant_id=slot + 1, name=f"P{slot + 1}", team=slot // 5, slot=slot, hero_name=hero)
        for slot, hero in enumerate(HEROES)
    ]


@pytest.fixture
def make_timeline(roster: List[Participant]) -> Callable[..., MatchTimeline]:
    """Build timelines over the shared roster."""

    def build(events: Iterable[TimelineEvent], duration: Optional[float] = 300.0) -> MatchTimeline:
        return MatchTimeline(roster, events, duration=duration)

    return build


@pytest.fixture
def make_context(make_timeline: Callable[..., MatchTimeline]) -> Callable[..., TierContext]:
    """Build evaluator contexts with the default hero table and grace periods."""

    def build(events: Iterable[TimelineEvent], duration: Optional[float] = 300.0) -> TierContext:
        return TierContext(
            extractor=WindowedEventExtractor(make_timeline(events, duration)),
            heroes=HeroResolver(DEFAULT_HERO_TABLE),
            attribution=AttributionConfig(),
        )

    return build
