"""Kiosk rotation through TV scenes."""

import logging
from typing import Callable, List, Optional, Sequence

from .scenes import DEFAULT_SCENES, Scene

logger = logging.getLogger(__name__)


class SceneRotation:
    """A single countdown cycling through scenes.

    tick() is driven by the caller, normally once a second. When the
    countdown reaches zero the next scene starts with its own duration.
    Any scene change, automatic or manual, resets the countdown.
    """

    def __init__(
        self,
        scenes: Optional[Sequence[Scene]] = None,
        playing: bool = True,
        on_change: Optional[Callable[[Scene], None]] = None
    ):
        self.scenes: List[Scene] = list(scenes or DEFAULT_SCENES)
        if not self.scenes:
            raise ValueError("at least one scene is required")
        self.index = 0
        self.playing = playing
        self.on_change = on_change
        self.remaining_seconds = self.current.duracao_segundos

    @property
    def current(self) -> Scene:
        return self.scenes[self.index]

    def play(self) -> None:
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def toggle(self) -> None:
        self.playing = not self.playing

    def tick(self, seconds: int = 1) -> bool:
        """Advance the countdown.

        Returns:
            True when the scene changed
        """
        if not self.playing:
            return False
        changed = False
        for _ in range(seconds):
            if self.remaining_seconds <= 1:
                self._go((self.index + 1) % len(self.scenes))
                changed = True
            else:
                self.remaining_seconds -= 1
        return changed

    def next_scene(self) -> Scene:
        self._go((self.index + 1) % len(self.scenes))
        return self.current

    def previous_scene(self) -> Scene:
        self._go((self.index - 1) % len(self.scenes))
        return self.current

    def go_to(self, index: int) -> Scene:
        """Jump to a scene; out-of-range indexes are ignored."""
        if 0 <= index < len(self.scenes):
            self._go(index)
        return self.current

    def set_scenes(self, scenes: Sequence[Scene]) -> None:
        if not scenes:
            raise ValueError("at least one scene is required")
        self.scenes = list(scenes)
        self._go(min(self.index, len(self.scenes) - 1))

    def _go(self, index: int) -> None:
        self.index = index
        self.remaining_seconds = self.current.duracao_segundos
        logger.debug(f"Scene {self.current.id} for {self.remaining_seconds}s")
        if self.on_change:
            self.on_change(self.current)
