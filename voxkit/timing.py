"""Named timers that accumulate duration statistics."""

from __future__ import annotations

import io
import math
import sys
import threading
import time
from collections import deque
from typing import Optional, TextIO, Union

Key = Union[int, str]

DEFAULT_WINDOW_SIZE = 50


class Accumulator:
    """Running statistics over all samples plus a rolling window."""

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self._window: deque[float] = deque(maxlen=window_size)
        self._window_sum = 0.0
        self._total_samples = 0
        self._sum = 0.0
        self._min = sys.float_info.max
        self._max = sys.float_info.min

    def add(self, sample: float) -> None:
        """Record one sample."""
        sample = float(sample)
        if len(self._window) == self._window.maxlen:
            self._window_sum += sample - self._window[0]
        else:
            self._window_sum += sample
        self._window.append(sample)
        self._sum += sample
        self._total_samples += 1
        if sample > self._max:
            self._max = sample
        if sample < self._min:
            self._min = sample

    @property
    def total_samples(self) -> int:
        """Number of samples ever added."""
        return self._total_samples

    @property
    def sum(self) -> float:
        """Sum of all samples."""
        return self._sum

    @property
    def mean(self) -> float:
        """Mean of all samples; NaN when there are none."""
        if self._total_samples == 0:
            return math.nan
        return self._sum / self._total_samples

    @property
    def min(self) -> float:
        """Smallest sample seen."""
        return self._min

    @property
    def max(self) -> float:
        """Largest sample seen."""
        return self._max

    def rolling_mean(self) -> float:
        """Mean of the samples in the window; NaN when there are none."""
        if not self._window:
            return math.nan
        return self._window_sum / len(self._window)

    def lazy_variance(self) -> float:
        """Population variance of the samples in the window."""
        if not self._window:
            return 0.0
        mean = self.rolling_mean()
        return sum((s - mean) ** 2 for s in self._window) / len(self._window)


def seconds_to_time_string(seconds: float) -> str:
    """Format seconds zero-padded to nine characters with six decimals."""
    return "%09.6f" % seconds


class Timing:
    """Registry of timers, each identified by a tag and a numeric handle."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._timers: list[Accumulator] = []
        self._tag_map: dict[str, int] = {}
        self._max_tag_length = 0

    @property
    def timers(self) -> dict[str, int]:
        """Copy of the mapping from tag to handle."""
        with self._lock:
            return dict(self._tag_map)

    def get_handle(self, tag: str) -> int:
        """Handle of ``tag``, registering it if it is new."""
        with self._lock:
            handle = self._tag_map.get(tag)
            if handle is None:
                handle = len(self._timers)
                self._tag_map[tag] = handle
                self._timers.append(Accumulator())
                self._max_tag_length = max(self._max_tag_length, len(tag))
            return handle

    def get_tag(self, handle: int) -> str:
        """Tag registered for ``handle``, or an empty string."""
        with self._lock:
            for tag, value in self._tag_map.items():
                if value == handle:
                    return tag
            return ""

    def _accumulator(self, key: Key) -> Accumulator:
        handle = self.get_handle(key) if isinstance(key, str) else int(key)
        with self._lock:
            if not 0 <= handle < len(self._timers):
                raise IndexError(f"unknown timer handle: {handle}")
            return self._timers[handle]

    def add_time(self, handle: int, seconds: float) -> None:
        """Record a duration for the timer ``handle``."""
        with self._lock:
            self._accumulator(handle).add(seconds)

    def total_seconds(self, key: Key) -> float:
        """Total recorded time of a timer given by handle or tag."""
        with self._lock:
            return self._accumulator(key).sum

    def mean_seconds(self, key: Key) -> float:
        """Mean recorded time of a timer."""
        with self._lock:
            return self._accumulator(key).mean

    def num_samples(self, key: Key) -> int:
        """Number of recorded times of a timer."""
        return self._accumulator(key).total_samples

    def variance_seconds(self, key: Key) -> float:
        """Variance of the recent recorded times of a timer."""
        with self._lock:
            return self._accumulator(key).lazy_variance()

    def min_seconds(self, key: Key) -> float:
        """Shortest recorded time of a timer."""
        with self._lock:
            return self._accumulator(key).min

    def max_seconds(self, key: Key) -> float:
        """Longest recorded time of a timer."""
        with self._lock:
            return self._accumulator(key).max

    def hz(self, key: Key) -> float:
        """Rate implied by the rolling mean of a timer's recent times."""
        with self._lock:
            rolling_mean = self._accumulator(key).rolling_mean()
            if not rolling_mean > 0.0:
                raise ValueError(
                    f"rolling mean must be positive to give a rate, got {rolling_mean}"
                )
            return 1.0 / rolling_mean

    def write(self, out: TextIO) -> None:
        """Write a table of all timers, sorted by tag, to ``out``."""
        with self._lock:
            entries = sorted(self._tag_map.items())
            width = self._max_tag_length
        if not entries:
            return
        out.write("SM Timing\n")
        out.write("-----------\n")
        for tag, handle in entries:
            count = self.num_samples(handle)
            line = f"{tag:<{width}}\t{count:>7}\t"
            if count > 0:
                stddev = math.sqrt(self.variance_seconds(handle))
                line += (
                    f"{seconds_to_time_string(self.total_seconds(handle))}\t"
                    f"({seconds_to_time_string(self.mean_seconds(handle))} +- "
                    f"{seconds_to_time_string(stddev)})\t"
                    f"[{seconds_to_time_string(self.min_seconds(handle))},"
                    f"{seconds_to_time_string(self.max_seconds(handle))}]"
                )
            out.write(line + "\n")

    def report(self) -> str:
        """The table produced by :meth:`write`, as a string."""
        buffer = io.StringIO()
        self.write(buffer)
        return buffer.getvalue()

    def reset(self) -> None:
        """Forget all tags; previously recorded handles are not reused."""
        with self._lock:
            self._tag_map.clear()


TIMING = Timing()
"""Registry used by timers that are not given one."""


class Timer:
    """Measures wall time and records it in a :class:`Timing` registry.

    The timer starts on construction unless ``construct_stopped`` is set; as
    a context manager it stops when the block ends.
    """

    def __init__(
        self,
        key: Key,
        construct_stopped: bool = False,
        timing: Optional[Timing] = None,
    ) -> None:
        self._timing = TIMING if timing is None else timing
        self._handle = (
            self._timing.get_handle(key) if isinstance(key, str) else int(key)
        )
        self._start = 0.0
        self._running = False
        if not construct_stopped:
            self.start()

    @property
    def handle(self) -> int:
        """Handle of the timer this records into."""
        return self._handle

    @property
    def is_timing(self) -> bool:
        """True while the timer is running."""
        return self._running

    def start(self) -> None:
        """Start (or restart) timing."""
        self._running = True
        self._start = time.perf_counter()

    def stop(self) -> None:
        """Stop timing and record the elapsed time."""
        if not self._running:
            raise RuntimeError("timer is not running")
        elapsed = time.perf_counter() - self._start
        self._timing.add_time(self._handle, elapsed)
        self._running = False

    def __enter__(self) -> Timer:
        if not self._running:
            self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._running:
            self.stop()


class DummyTimer:
    """Timer with the same interface that records nothing.

    It only notes whether it has been started, so that it can stand in for
    :class:`Timer` where timing is switched off.
    """

    def __init__(self, key: Key = "", construct_stopped: bool = False,
                 timing: Optional[Timing] = None) -> None:
        self._key = key
        self._started = False

    @property
    def is_timing(self) -> bool:
        """Always False."""
        return False

    def start(self) -> None:
        """Mark the timer as started; nothing is measured."""
        self._started = True

    def stop(self) -> None:
        """Mark the timer as stopped; nothing is recorded."""
        self._started = False

    def __enter__(self) -> DummyTimer:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()