"""Progress and ETA accounting."""
from typing import Callable

from .models import UploadStatus


class ProgressAccountant:
    """
    Derives progress snapshots from the engine's counters.
    
    The remaining-time estimate projects the whole-transfer average rate,
    so it reacts slowly to per-chunk jitter.
    """
    
    def __init__(self, total_bytes: int, clock: Callable[[], float]):
        self.total_bytes = total_bytes
        self._clock = clock
    
    def elapsed(self, started_at: float) -> int:
        return round(self._clock() - started_at)
    
    def percent(self, transferred: int) -> int:
        if self.total_bytes == 0:
            return 100
        return round(transferred * 100 / self.total_bytes)
    
    def estimate(self, transferred: int, elapsed: int, speed: int) -> int:
        if speed <= 0 or transferred <= 0 or elapsed <= 0:
            return 0
        rate = transferred / elapsed
        return round(self.total_bytes / rate - elapsed)
    
    def snapshot(
        self,
        started_at: float,
        transferred: int,
        chunk: int,
        speed: int
    ) -> UploadStatus:
        """Build the status for the current state of the transfer."""
        elapsed = self.elapsed(started_at)
        return UploadStatus(
            elapsed=elapsed,
            estimate=self.estimate(transferred, elapsed, speed),
            bytes=transferred,
            percent=self.percent(transferred),
            chunk=chunk,
            speed=speed
        )
