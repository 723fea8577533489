"""Playback timing loop for previewing an animation.

The engine owns the current time and the play state; it renders nothing.
The host calls ``tick()`` once per display frame (or passes a ``scheduler``
that does) and redraws in ``on_update``. Not thread-safe: drive it from a
single thread.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Any, Callable, Optional

from lottiekit.models import time_to_frame

logger = logging.getLogger(__name__)


class PlaybackState(str, enum.Enum):
    STOPPED = "stopped"
    PAUSED = "paused"
    PLAYING = "playing"


class PlaybackEngine:
    """Advances a current time against a clock, with optional looping.

    Args:
        on_update: Called with the current time (seconds) after every
            change.
        fps: Frame rate used for frame stepping and frame numbers.
        duration: Length of the timeline in seconds.
        loop: Wrap around at the end instead of stopping.
        clock: Monotonic time source in seconds.
        scheduler: Optional ``scheduler(callback) -> handle`` that arranges
            for ``callback`` to run on the next frame.
        cancel: Optional ``cancel(handle)`` to revoke a scheduled frame.
    """

    def __init__(
        self,
        on_update: Callable[[float], Any],
        fps: float = 30,
        duration: float = 5.0,
        loop: bool = False,
        clock: Callable[[], float] = time.perf_counter,
        scheduler: Optional[Callable[[Callable[[], None]], Any]] = None,
        cancel: Optional[Callable[[Any], None]] = None,
    ) -> None:
        self.on_update = on_update
        self.fps = fps or 30
        self.duration = duration
        self.loop = loop
        self._clock = clock
        self._scheduler = scheduler
        self._cancel = cancel

        self._current_time = 0.0
        self._state = PlaybackState.STOPPED
        self._last_frame_time = 0.0
        self._handle: Any = None

    # -- state --------------------------------------------------------------

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def current_frame(self) -> int:
        return time_to_frame(self._current_time, self.fps)

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    # -- transport ----------------------------------------------------------

    def play(self) -> None:
        """Start playing from the current time.

        No-op when already playing, when the duration is zero, or when the
        current time is already at the end.
        """
        if self.is_playing:
            return
        if self.duration == 0 or self._current_time >= self.duration:
            return

        self._state = PlaybackState.PLAYING
        self._last_frame_time = self._clock()
        self.tick()

    def pause(self) -> None:
        """Stop advancing; the current time is kept."""
        if self.is_playing:
            self._state = PlaybackState.PAUSED
        self._cancel_scheduled()

    def stop(self) -> None:
        """Stop and rewind to zero."""
        self._state = PlaybackState.STOPPED
        self._cancel_scheduled()
        self._current_time = 0.0
        self.on_update(self._current_time)

    def seek(self, time_s: float) -> None:
        self._current_time = self._clamp(time_s)
        self.on_update(self._current_time)

    def step_forward(self) -> None:
        self.seek(self._current_time + 1.0 / self.fps)

    def step_backward(self) -> None:
        self.seek(self._current_time - 1.0 / self.fps)

    # -- settings -----------------------------------------------------------

    def set_fps(self, fps: float) -> None:
        self.fps = fps

    def set_duration(self, duration: float) -> None:
        """Change the timeline length, pulling the current time back inside it."""
        self.duration = duration
        if self._current_time > duration:
            self._current_time = duration
            self.on_update(self._current_time)

    def set_loop(self, loop: bool) -> None:
        self.loop = loop

    # -- frame loop ---------------------------------------------------------

    def tick(self) -> None:
        """Advance by the clock time elapsed since the previous tick."""
        if not self.is_playing:
            return

        now = self._clock()
        delta = now - self._last_frame_time
        self._last_frame_time = now
        self._current_time += delta

        if self.duration <= 0:
            self._current_time = 0.0
            self._state = PlaybackState.PAUSED
            self._handle = None
            self.on_update(self._current_time)
            return

        if self._current_time >= self.duration:
            if self.loop:
                self._current_time %= self.duration
            else:
                self._current_time = self.duration
                self._state = PlaybackState.PAUSED
                self._handle = None
                logger.debug("Playback reached end at %.3fs", self.duration)
                self.on_update(self._current_time)
                return

        self.on_update(self._current_time)

        if self.is_playing and self._scheduler is not None:
            self._handle = self._scheduler(self.tick)

    def _cancel_scheduled(self) -> None:
        if self._handle is not None and self._cancel is not None:
            self._cancel(self._handle)
        self._handle = None

    def _clamp(self, time_s: float) -> float:
        return max(0.0, min(time_s, self.duration))
