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
"""Hero reference data and the lookup capability used during attribution."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Protocol, Tuple


class HeroClass(Enum):
    """How the camera should treat a hero after it scores a kill."""

    MELEE = "melee"
    RANGED = "ranged"
    # Heroes without a single visual form worth following (e.g. Abathur).
    SPLIT_UNIT = "split_unit"


@dataclass(frozen=True, slots=True)
class Hero:
    """Immutable hero reference entry.

    Parameters
    ----------
    name : str
        Canonical hero name as it appears in replay data.
    hero_class : HeroClass
        Movement classification decided once when the table is built.
    """

    name: str
    hero_class: HeroClass

    def __post_init__(self) -> None:
        """Reject blank hero names."""
        if not self.name.strip():
            raise ValueError("Hero name must not be empty")


class HeroLookup(Protocol):
    """Capability that maps a hero name from replay data to a ``Hero``."""

    def lookup(self, name: str) -> Optional[Hero]:
        """Return the hero registered under ``name``.

        Parameters
        ----------
        name : str
            Hero name as recorded for a participant.

        Returns
        -------
        Optional[Hero]
            The matching hero, or ``None`` when the name is unknown.
        """
        ...


class HeroTable:
    """Immutable, case-insensitive hero registry.

    Parameters
    ----------
    heroes : Iterable[Hero]
        Hero entries to register. Names must be unique ignoring case.
    """

    def __init__(self, heroes: Iterable[Hero]) -> None:
        """Index ``heroes`` by lower-cased name.

        Parameters
        ----------
        heroes : Iterable[Hero]
            Hero entries to register.
        """
        index: Dict[str, Hero] = {}
        for hero in heroes:
            key = hero.name.casefold()
            if key in index:
                raise ValueError(f"Duplicate hero name: {hero.name}")
            index[key] = hero
        self._heroes: Mapping[str, Hero] = MappingProxyType(index)

    def lookup(self, name: str) -> Optional[Hero]:
        """Return the hero registered under ``name`` ignoring case.

        Parameters
        ----------
        name : str
            Hero name as recorded for a participant.

        Returns
        -------
        Optional[Hero]
            The matching hero, or ``None`` when the name is unknown.
        """
        return self._heroes.get(name.strip().casefold())

    def __len__(self) -> int:
        return len(self._heroes)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().casefold() in self._heroes


_M = HeroClass.MELEE
_R = HeroClass.RANGED

HERO_CATALOGUE: Tuple[Tuple[str, HeroClass], ...] = (
    ("Abathur", HeroClass.SPLIT_UNIT),
    ("Alarak", _M),
    ("Alexstrasza", _R),
    ("Amazon", _R),
    ("Ana", _R),
    ("Anduin", _R),
    ("Anubarak", _M),
    ("Artanis", _M),
    ("Arthas", _M),
    ("Auriel", _R),
    ("Azmodan", _R),
    ("Barbarian", _M),
    ("Butcher", _M),
    ("Chen", _M),
    ("Cho", _M),
    ("Chromie", _R),
    ("Crusader", _M),
    ("Deathwing", _M),
    ("Deckard", _M),
    ("Dehaka", _M),
    ("DemonHunter", _R),
    ("Diablo", _M),
    ("Dryad", _R),
    ("DVa", _R),
    ("FaerieDragon", _R),
    ("Falstad", _R),
    ("Fenix", _R),
    ("Firebat", _R),
    ("Gall", _R),
    ("Garrosh", _M),
    ("Genji", _R),
    ("Greymane", _R),
    ("Guldan", _R),
    ("Hanzo", _R),
    ("Illidan", _M),
    ("Imperius", _M),
    ("Jaina", _R),
    ("Junkrat", _R),
    ("Kaelthas", _R),
    ("KelThuzad", _R),
    ("Kerrigan", _M),
    ("L90ETC", _M),
    ("Leoric", _M),
    ("LiLi", _R),
    ("LostVikings", _M),
    ("Lucio", _R),
    ("Maiev", _M),
    ("Malfurion", _R),
    ("MalGanis", _M),
    ("Malthael", _M),
    ("Medic", _R),
    ("Medivh", _R),
    ("Mephisto", _R),
    ("Monk", _M),
    ("Muradin", _M),
    ("Murky", _M),
    ("Necromancer", _M),
    ("NexusHunter", _R),
    ("Nova", _R),
    ("Orphea", _R),
    ("Probius", _R),
    ("Ragnaros", _M),
    ("Raynor", _R),
    ("Rehgar", _M),
    ("Rexxar", _R),
    ("Samuro", _M),
    ("SgtHammer", _R),
    ("Stitches", _M),
    ("Stukov", _M),
    ("Sylvanas", _R),
    ("Tassadar", _R),
    ("Thrall", _M),
    ("Tinker", _M),
    ("Tracer", _R),
    ("Tychus", _R),
    ("Tyrael", _M),
    ("Tyrande", _R),
    ("Uther", _M),
    ("Valeera", _M),
    ("Varian", _M),
    ("Whitemane", _R),
    ("WitchDoctor", _R),
    ("Wizard", _R),
    ("Yrel", _M),
    ("Zagara", _R),
    ("Zarya", _R),
    ("Zeratul", _M),
    ("Zuljin", _R),
)
"""Known heroes and their classification as ``(name, class)`` pairs."""

DEFAULT_HERO_TABLE = HeroTable(Hero(name, hero_class) for name, hero_class in HERO_CATALOGUE)
"""Reference table built from ``HERO_CATALOGUE``; pass it into the engine explicitly."""
