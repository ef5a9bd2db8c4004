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
"""Per-match cache of participant hero resolutions."""

from __future__ import annotations

from typing import Dict, Optional

from stormcam.models.hero import Hero, HeroLookup
from stormcam.models.participant import Participant


class HeroResolver:
    """Resolve participants to heroes through an injected lookup, once each.

    A participant whose hero name is missing or unknown stays unresolved and
    is looked up again on the next request. Once resolved, the hero is fixed
    for the rest of the match.

    Parameters
    ----------
    lookup : HeroLookup
        Reference table used to turn hero names into ``Hero`` entries.
    """

    def __init__(self, lookup: HeroLookup) -> None:
        """Create an empty cache over ``lookup``.

        Parameters
        ----------
        lookup : HeroLookup
            Reference table used to turn hero names into ``Hero`` entries.
        """
        self.lookup = lookup
        self._resolved: Dict[int, Hero] = {}

    def resolved_hero(self, participant: Participant) -> Optional[Hero]:
        """Return the hero for ``participant`` or ``None`` when unresolved.

        Parameters
        ----------
        participant : Participant
            Participant whose hero is requested.

        Returns
        -------
        Optional[Hero]
            Cached or freshly resolved hero; ``None`` when no hero is known.
        """
        cached = self._resolved.get(participant.participant_id)
        if cached is not None:
            return cached
        if participant.hero_name is None:
            return None
        hero = self.lookup.lookup(participant.hero_name)
        if hero is not None:
            self._resolved[participant.participant_id] = hero
        return hero

    def reset(self) -> None:
        """Forget every resolution."""
        self._resolved.clear()
