"""
The animation cursor: the single month offset that every view follows.

Timers are created through an injected factory with the matplotlib
``TimerBase`` surface (``add_callback`` / ``remove_callback`` / ``start`` /
``stop``), e.g. ``fig.canvas.new_timer``. Cancelling a timer stops it and
detaches the tick, so a tick that was already queued cannot touch the
cursor afterwards.
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional, Protocol

from .config import END_POLICIES, END_POLICY, INTERVAL_MS


class Timer(Protocol):
    def add_callback(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any: ...
    def remove_callback(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None: ...
    def start(self, interval: Optional[int] = None) -> None: ...
    def stop(self) -> None: ...


TimerFactory = Callable[[int], Timer]
Listener = Callable[["AnimationCursor"], None]


def _vprint(verbose: bool, *args, **kwargs):
    if verbose:
        print(*args, **kwargs)


class AnimationCursor:
    """
    Month offset plus play state.

    Mutators: `play`/`pause`/`toggle` (timer), `scrub` (slider), `reset`.
    Every change of offset or play state notifies the listeners, in
    subscription order, after the state is updated.
    """

    def __init__(
        self,
        total_months: int,
        *,
        timer_factory: TimerFactory,
        interval_ms: int = INTERVAL_MS,
        end_policy: str = END_POLICY,
        verbose: bool = False,
    ):
        if total_months <= 0:
            raise ValueError("total_months must be positive")
        if end_policy not in END_POLICIES:
            raise ValueError(f"end_policy must be one of {END_POLICIES}, got {end_policy!r}")
        self.total_months = int(total_months)
        self.interval_ms = int(interval_ms)
        self.end_policy = end_policy
        self.verbose = verbose
        self._timer_factory = timer_factory
        self._timer: Optional[Timer] = None
        self._offset = 0
        self._listeners: List[Listener] = []

    # --- state ---------------------------------------------------------
    @property
    def offset(self) -> int:
        return self._offset

    @property
    def running(self) -> bool:
        return self._timer is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self):
        for fn in list(self._listeners):
            fn(self)

    # --- transitions ---------------------------------------------------
    def play(self) -> None:
        if self._timer is not None:
            return
        if self.end_policy != "wrap" and self._offset >= self.total_months - 1:
            # nothing left to play; start over from the first month
            self._offset = 0
        timer = self._timer_factory(self.interval_ms)
        timer.add_callback(self._tick)
        self._timer = timer
        timer.start()
        _vprint(self.verbose, f"[cursor] play from offset {self._offset}")
        self._notify()

    def pause(self) -> None:
        if self._cancel():
            _vprint(self.verbose, f"[cursor] paused at offset {self._offset}")
            self._notify()

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.play()

    def scrub(self, offset: int) -> None:
        offset = int(offset)
        if not 0 <= offset < self.total_months:
            raise ValueError(f"Offset {offset} outside [0, {self.total_months - 1}]")
        self._offset = offset
        self._notify()

    def reset(self) -> None:
        self._cancel()
        self._offset = 0
        _vprint(self.verbose, "[cursor] reset")
        self._notify()

    # --- timer ---------------------------------------------------------
    def _cancel(self) -> bool:
        timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.stop()
        timer.remove_callback(self._tick)
        return True

    def _tick(self) -> None:
        nxt = self._offset + 1
        if nxt < self.total_months:
            self._offset = nxt
        elif self.end_policy == "wrap":
            self._offset = 0
        elif self.end_policy == "clamp":
            self._offset = self.total_months - 1
            self._cancel()
            _vprint(self.verbose, "[cursor] reached last month; stopped")
        else:
            self._offset = 0
            self._cancel()
            _vprint(self.verbose, "[cursor] reached last month; rewound and stopped")
        self._notify()
