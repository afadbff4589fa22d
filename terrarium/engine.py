"""Engine - fixed-step tick scheduling, stop handling and lifecycle hooks."""

import logging
import os
import random
from typing import Callable

from terrarium.clock import Clock
from terrarium.state import Terrarium
from terrarium.types import System, TickContext

logger = logging.getLogger(__name__)

Hook = Callable[[Terrarium, TickContext], None]


class Engine:
    """Runs the tick systems in order, one tick per ``tick_seconds`` of real time.

    A system may call ``ctx.request_stop()``; the rest of that tick is
    skipped and the engine stays stopped until :meth:`start` is called
    again.
    """

    def __init__(self, terrarium: Terrarium, tick_seconds: float = 1.0,
                 seed: int | None = None) -> None:
        self._terrarium = terrarium
        self._clock = Clock(tick_seconds)
        self._systems: list[System] = []
        self._stop_hooks: list[Hook] = []
        self._stop_requested = False
        self._running = False
        self._pending = 0.0

        if seed is None:
            seed = int.from_bytes(os.urandom(8), "big")
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def terrarium(self) -> Terrarium:
        return self._terrarium

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def random(self) -> random.Random:
        return self._rng

    @property
    def running(self) -> bool:
        return self._running

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def on_stop(self, hook: Hook) -> None:
        self._stop_hooks.append(hook)

    def _request_stop(self) -> None:
        self._stop_requested = True

    def _context(self) -> TickContext:
        return self._clock.context(self._request_stop, self._rng)

    def start(self) -> None:
        """Begin (or resume) scheduling from now; time already accrued is dropped."""
        self._stop_requested = False
        self._pending = 0.0
        self._running = True

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._pending = 0.0
        ctx = self._context()
        for hook in self._stop_hooks:
            hook(self._terrarium, ctx)

    def _tick(self) -> None:
        self._clock.advance()
        ctx = self._context()
        for system in self._systems:
            system(self._terrarium, ctx)
            if self._stop_requested:
                break
        if self._stop_requested:
            logger.debug("stop requested at tick %d", ctx.tick_number)
            self.stop()

    def step(self) -> bool:
        """Run exactly one tick. Returns False if the engine is stopped."""
        if not self._running:
            return False
        self._tick()
        return True

    def advance(self, seconds: float) -> int:
        """Account *seconds* of real time and run every tick that is due."""
        if not self._running:
            return 0
        self._pending += seconds
        ticks = 0
        dt = self._clock.dt
        while self._running and self._pending >= dt:
            self._pending -= dt
            self._tick()
            ticks += 1
        return ticks
