"""Single-shot, cancellable timers used for the long-press gesture."""

import itertools
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Protocol


class Scheduler(Protocol):
    """Host-provided deferred callbacks.

    `cancel` must accept handles that already fired or were already
    cancelled and do nothing for them.
    """

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> int: ...

    def cancel(self, handle: int) -> None: ...


@dataclass(order=True)
class _Timer:
    due_ms: int
    seq: int
    callback: Callable[[], None] = field(compare=False)


class ManualScheduler:
    """A scheduler driven by an explicit virtual clock.

    Nothing fires until `advance` is called, which makes gesture timing
    reproducible in tests and in the headless runner.
    """

    def __init__(self):
        self.now_ms = 0
        self._seq = itertools.count(1)
        self._timers: Dict[int, _Timer] = {}

    @property
    def pending(self) -> int:
        return len(self._timers)

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> int:
        handle = next(self._seq)
        self._timers[handle] = _Timer(self.now_ms + max(0, int(delay_ms)), handle, callback)
        return handle

    def cancel(self, handle: int) -> None:
        self._timers.pop(handle, None)

    def advance(self, ms: int) -> int:
        """Move the clock forward and fire every timer that came due.

        Timers fire in due-time order, ties in registration order. Returns
        the number of callbacks run. The clock never moves backwards.
        """
        if ms < 0:
            raise ValueError(f"Cannot advance the clock by a negative amount ({ms} ms)")
        target = self.now_ms + ms
        fired = 0
        while True:
            due: List[tuple] = sorted(
                ((t, h) for h, t in self._timers.items() if t.due_ms <= target)
            )
            if not due:
                break
            timer, handle = due[0]
            del self._timers[handle]
            self.now_ms = timer.due_ms
            timer.callback()
            fired += 1
        self.now_ms = target
        return fired
