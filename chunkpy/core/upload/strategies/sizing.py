"""
Adaptive chunk sizing.

Chunks alternate between a steady size (base) and a probe at twice the
base. Each probe decides whether the base doubles or halves; transport
failures halve it as well.
"""
from ...logging import get_logger

logger = get_logger('chunkpy.upload.sizing')

# Floor for a measured request duration, seconds
MIN_DURATION = 0.001


class AdaptiveChunkSizer:
    """
    Chooses the size of the next chunk from the last measured request.
    
    Attributes:
        minimum: Smallest base size, bytes
        maximum: Largest base (and chunk) size, bytes
        interval: Recommended duration of one request, seconds
        base: Steady chunk size, always within [minimum, maximum]
        coefficient: 1 on steady rounds, 2 on probe rounds
        value: Size of the chunk being sent
    
    Example:
        >>> sizer = AdaptiveChunkSizer(1024, 1024 * 1024, 3.0)
        >>> sizer.next_size()
        1024
        >>> speed = sizer.record(1024, 0.1, previous_speed=0)
        >>> sizer.next_size()
        2048
    """
    
    def __init__(self, minimum: int, maximum: int, interval: float):
        if minimum <= 0 or maximum < minimum:
            raise ValueError(f"Invalid chunk size bounds: [{minimum}, {maximum}]")
        self.minimum = minimum
        self.maximum = maximum
        self.interval = interval
        self.base = minimum
        self.coefficient = 1
        self.value = minimum
    
    @property
    def is_probe(self) -> bool:
        """True when the next chunk is a probe round."""
        return self.coefficient == 2
    
    def reset(self) -> None:
        """Return to the smallest steady size."""
        self.base = self.minimum
        self.coefficient = 1
        self.value = self.minimum
    
    def next_size(self) -> int:
        """Size of the next chunk, bytes."""
        self.value = min(self.base * self.coefficient, self.maximum)
        return self.value
    
    def grow(self) -> None:
        self.base = min(self.base * 2, self.maximum)
    
    def shrink(self) -> None:
        self.base = max(self.base // 2, self.minimum)
    
    def record(self, sent: int, duration: float, previous_speed: int) -> int:
        """
        Tune the base size after a confirmed chunk.
        
        Args:
            sent: Bytes sent in the request
            duration: Request duration, seconds
            previous_speed: Throughput of the previous request, bytes/second
            
        Returns:
            Throughput of this request, bytes/second
        """
        duration = max(duration, MIN_DURATION)
        speed = round(sent / duration)
        
        if self.coefficient == 2:
            if duration < self.interval and speed >= previous_speed:
                self.grow()
            else:
                self.shrink()
            logger.debug(
                f"Probe {sent} bytes in {duration:.3f}s ({speed} B/s): base now {self.base}"
            )
        
        self.coefficient = 3 - self.coefficient
        return speed
