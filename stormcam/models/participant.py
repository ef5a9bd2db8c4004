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
"""Match participant model."""
from dataclasses import dataclass
from typing import Optional

TEAM_IDS = (0, 1)
SLOT_COUNT = 10
"""Hero-focus keys available to the spectator client, one per slot."""


@dataclass(frozen=True, slots=True)
class Participant:
    """A player taking part in the recorded match.

    Parameters
    ----------
    participant_id : int
        Stable identifier referenced by timeline events.
    name : str
        Display name (battle tag or similar).
    team : int
        Team index, either ``0`` or ``1``.
    slot : int
        Zero-based position in the replay's player list, below ``SLOT_COUNT``.
        The spectator client focuses a hero by pressing the key for this slot.
    hero_name : str | None, optional
        Hero name recorded for the participant; ``None`` while unknown.
    """

    participant_id: int
    name: str
    team: int
    slot: int
    hero_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate team and slot indices."""
        if self.team not in TEAM_IDS:
            raise ValueError(f"team must be one of {TEAM_IDS}, got {self.team}")
        if not 0 <= self.slot < SLOT_COUNT:
            raise ValueError(f"slot must be in 0..{SLOT_COUNT - 1}, got {self.slot}")

    @property
    def opposing_team(self) -> int:
        """Return the index of the other team."""
        return 1 - self.team

    def is_enemy_of(self, other: "Participant") -> bool:
        """Return whether ``other`` plays for the opposing team.

        Parameters
        ----------
        other : Participant
            Participant to compare against.

        Returns
        -------
        bool
            ``True`` when the two participants are on different teams.
        """
        return self.team != other.team
