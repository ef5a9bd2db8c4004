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
"""Central configuration for camera-selection tuning parameters."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class TierWindowConfig:
    """Look-ahead window lengths used by each priority tier.

    Parameters
    ----------
    kill_streak_timer : float, default=12.0
        Seconds the game allows between kills for a streak to continue. The
        multi, triple, quad and penta kill tiers look ahead one to four timers.
    kill : float, default=10.0
        Window for the single-kill tier.
    death : float, default=10.0
        Window for the death tier.
    objective : float, default=10.0
        Window shared by the boss, camp, map and team objective tiers.
    short : float, default=5.0
        Window for unit activity, taunts, structures, proximity and pings.
    killer_straddle : float, default=5.0
        Half-width of the killer tier window centred on the playback time.
    alive : float, default=5.0
        Window (and hold) for the alive fallback tier.
    """

    kill_streak_timer: float = 12.0
    kill: float = 10.0
    death: float = 10.0
    objective: float = 10.0
    short: float = 5.0
    killer_straddle: float = 5.0
    alive: float = 5.0

    def streak_window(self, multiplicity: int) -> float:
        """Return the look-ahead needed to observe a streak of ``multiplicity`` kills.

        Parameters
        ----------
        multiplicity : int
            Number of kills in the streak; must be at least 2.

        Returns
        -------
        float
            ``kill_streak_timer`` multiplied by the number of gaps in the streak.
        """
        if multiplicity < 2:
            raise ValueError("streak multiplicity must be at least 2")
        return self.kill_streak_timer * (multiplicity - 1)


@dataclass(slots=True)
class AttributionConfig:
    """Grace periods added after an event before the camera moves on.

    Parameters
    ----------
    grace : float, default=1.0
        Hold after the attributed event when the hero is known.
    unresolved_grace : float, default=2.0
        Longer hold used when the killer's hero could not be resolved.
    """

    grace: float = 1.0
    unresolved_grace: float = 2.0


@dataclass(slots=True)
class DirectorConfig:
    """Controls for advancing the playback cursor.

    Parameters
    ----------
    minimum_step : float, default=5.0
        Seconds to advance when no tier produced a selection.
    minimum_hold : float, default=1.0
        Lower bound on a directive's hold so the cursor always moves forward.
    default_respawn : float, default=30.0
        Assumed time dead when a death event carries no respawn time.
    playback_speed : float, default=1.0
        Replay speed multiplier used by consumers that pace directives against
        the wall clock. ``0`` disables pacing.
    """

    minimum_step: float = 5.0
    minimum_hold: float = 1.0
    default_respawn: float = 30.0
    playback_speed: float = 1.0


@dataclass(slots=True)
class EngineConfig:
    """Top-level container for all engine tuning structures.

    Parameters
    ----------
    windows : TierWindowConfig, default=TierWindowConfig()
        Tier window lengths.
    attribution : AttributionConfig, default=AttributionConfig()
        Grace periods used when attributing candidates.
    director : DirectorConfig, default=DirectorConfig()
        Playback cursor settings.
    """

    windows: TierWindowConfig = field(default_factory=TierWindowConfig)
    attribution: AttributionConfig = field(default_factory=AttributionConfig)
    director: DirectorConfig = field(default_factory=DirectorConfig)


ENGINE_CONFIG = EngineConfig()
"""Default configuration passed to the engine when none is supplied."""
