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
from typing import Dict, Sequence, Tuple

try:
    import pygame
except ImportError:
    pygame = None

from stormcam.engine.director import Directive, SpectatorDirector
from stormcam.engine.events import EventKind
from stormcam.engine.timeline import MatchTimeline

# Marker colours per event kind
EVENT_COLOURS: Dict[EventKind, Tuple[int, int, int]] = {
    EventKind.KILL: (220, 60, 60),
    EventKind.DEATH: (120, 120, 120),
    EventKind.OBJECTIVE_CAPTURE: (240, 200, 60),
    EventKind.STRUCTURE_DESTROYED: (200, 120, 40),
    EventKind.TAUNT: (200, 90, 200),
    EventKind.PING: (90, 200, 220),
    EventKind.UNIT_ACTIVITY: (90, 180, 90),
    EventKind.PROXIMITY: (160, 160, 220),
    EventKind.CORE_PRESENCE: (250, 250, 250),
}

TEAM_COLOURS = ((30, 90, 200), (200, 30, 30))


def _time_to_x(seconds: float, duration: float, left: int, width: int) -> int:
    """Map match time onto the horizontal lane area.

    Parameters
    ----------
    seconds : float
        Match time in seconds.
    duration : float
        Total match duration in seconds.
    left : int
        Pixel offset where lanes begin.
    width : int
        Pixel width of the lane area.

    Returns
    -------
    int
        Screen x coordinate.
    """
    return left + int(seconds / duration * width)


def start_visualizer(
    timeline: MatchTimeline,
    director: SpectatorDirector,
    directives: Sequence[Directive],
    screen_size: Tuple[int, int] = (1200, 520),
    fps: int = 30,
) -> None:
    """Start a pygame viewer showing the match timeline and the camera schedule.

    One lane is drawn per participant with a marker for each event they take
    part in. Directives are drawn as bars over the lane of their target while
    the director's playback cursor moves across. If `pygame` is not installed
    the function will return immediately.

    Parameters
    ----------
    timeline : MatchTimeline
        Timeline being spectated.
    director : SpectatorDirector
        Director whose playback cursor is drawn.
    directives : Sequence[Directive]
        Directives emitted so far; appended to by the thread driving ``director``.
    screen_size : Tuple[int, int], optional
        Initial window size in pixels.
    fps : int, optional
        Frame rate cap for the redraw loop.
    """
    if pygame is None:
        # pygame not available; skip viewer
        return

    pygame.init()
    screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
    pygame.display.set_caption("Stormcam")
    clock = pygame.time.Clock()

    BACKGROUND = (24, 26, 32)
    LANE = (40, 44, 54)
    PLAYHEAD = (250, 250, 120)
    TEXT = (235, 235, 235)

    font = pygame.font.SysFont(None, 18)
    participants = timeline.participants
    lane_index = {p.participant_id: index for index, p in enumerate(participants)}
    label_width = 140
    header_height = 40

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_q:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen_size = (event.w, event.h)
                screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)

        screen.fill(BACKGROUND)
        lane_width = max(1, screen_size[0] - label_width - 10)
        lane_height = max(8, (screen_size[1] - header_height - 10) // max(1, len(participants)))

        for p in participants:
            y = header_height + lane_index[p.participant_id] * lane_height
            pygame.draw.rect(screen, LANE, pygame.Rect(label_width, y + 1, lane_width, lane_height - 2))
            label = f"{p.name} ({p.hero_name or '?'})"
            screen.blit(font.render(label, True, TEAM_COLOURS[p.team]), (6, y + lane_height // 2 - 6))

        # Camera schedule underneath the markers
        for directive in list(directives):
            row = lane_index.get(directive.participant.participant_id)
            if row is None:
                continue
            x0 = _time_to_x(directive.issued_at, timeline.duration, label_width, lane_width)
            x1 = _time_to_x(
                min(directive.release_at, timeline.duration), timeline.duration, label_width, lane_width
            )
            y = header_height + row * lane_height
            pygame.draw.rect(screen, (70, 110, 70), pygame.Rect(x0, y + 2, max(1, x1 - x0), lane_height - 4))

        for timeline_event in timeline.events:
            x = _time_to_x(timeline_event.timestamp, timeline.duration, label_width, lane_width)
            colour = EVENT_COLOURS[timeline_event.kind]
            for participant_id in timeline_event.participant_ids():
                y = header_height + lane_index[participant_id] * lane_height + lane_height // 2
                pygame.draw.circle(screen, colour, (x, y), 3)

        cursor = min(director.playback_time, timeline.duration)
        px = _time_to_x(cursor, timeline.duration, label_width, lane_width)
        pygame.draw.line(screen, PLAYHEAD, (px, header_height), (px, screen_size[1] - 10), 2)

        status = f"{int(cursor // 60):02d}:{int(cursor % 60):02d}  {director.state.name}"
        if directives:
            latest = directives[-1]
            status += f"  |  key {latest.focus_key}: {latest.participant.name} ({latest.kind.value})"
        screen.blit(font.render(status, True, TEXT), (10, 12))

        pygame.display.flip()
        clock.tick(fps)

    pygame.quit()
