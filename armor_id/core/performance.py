"""Per-stage latency bookkeeping for the frame pipeline."""

import time
import threading
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class StageSummary:
    """Rolling latency statistics for one stage."""
    count: int = 0
    mean_ms: float = 0.0
    max_ms: float = 0.0
    last_ms: float = 0.0


class StageStats:
    """Thread-safe rolling window of stage durations."""

    def __init__(self, window: int = 120):
        self._window = window
        self._samples: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=self._window))
        self._totals: Dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def record(self, stage: str, duration_s: float) -> None:
        with self._lock:
            self._samples[stage].append(duration_s * 1000.0)
            self._totals[stage] += 1

    def summary(self, stage: Optional[str] = None) -> Dict[str, StageSummary]:
        """Summaries for one stage or for every recorded stage."""
        with self._lock:
            stages = [stage] if stage is not None else list(self._samples)
            result = {}
            for name in stages:
                samples = self._samples.get(name)
                if not samples:
                    result[name] = StageSummary()
                    continue
                result[name] = StageSummary(
                    count=self._totals[name],
                    mean_ms=sum(samples) / len(samples),
                    max_ms=max(samples),
                    last_ms=samples[-1],
                )
            return result

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()
            self._totals.clear()


class StageTimer:
    """Context manager for timing one pipeline stage."""

    def __init__(self, stage: str, stats: Optional[StageStats] = None):
        self.stage = stage
        self.stats = stats
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        if self.stats is not None:
            self.stats.record(self.stage, self.duration)
        logger.debug(f"Stage '{self.stage}' took {self.duration_ms:.2f} ms")

    @property
    def duration(self) -> float:
        """Stage duration in seconds."""
        if self.end_time is None or self.start_time is None:
            return 0.0
        return self.end_time - self.start_time

    @property
    def duration_ms(self) -> float:
        return self.duration * 1000.0
