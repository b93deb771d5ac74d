"""
Data models for upload module.

Uses dataclasses for the engine's state and its progress snapshots.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional


class Phase(str, Enum):
    """Stage of an upload."""
    IDLE = 'idle'
    OPENING = 'opening'
    APPENDING = 'appending'
    CLOSING = 'closing'
    REMOVING = 'removing'
    PAUSED = 'paused'
    STOPPED = 'stopped'
    FINISHED = 'finished'
    FAILED = 'failed'
    CANCELLED = 'cancelled'
    
    @property
    def is_terminal(self) -> bool:
        """True once the upload can make no further requests."""
        return self in (Phase.FINISHED, Phase.FAILED, Phase.CANCELLED)


@dataclass
class ChunkCursor:
    """
    Position of the upload.
    
    Attributes:
        number: Count of chunks the server has confirmed
        offset: Bytes the server has durably accepted
    """
    number: int = 0
    offset: int = 0


@dataclass
class Timers:
    """
    Timestamps of an upload, in clock seconds; None when unset.
    
    started_at is shifted forward on resume so that elapsed time
    excludes pauses.
    """
    started_at: Optional[float] = None
    paused_at: Optional[float] = None
    stopped_at: Optional[float] = None
    request_started_at: Optional[float] = None


@dataclass(frozen=True)
class UploadStatus:
    """
    Progress snapshot passed to the iteration callback.
    
    Attributes:
        elapsed: Seconds spent uploading, pauses excluded
        estimate: Seconds remaining (0 when unknown)
        bytes: Bytes confirmed by the server
        percent: Confirmed share of the file, 0-100
        chunk: Current chunk size, bytes
        speed: Last measured throughput, bytes/second
    """
    elapsed: int
    estimate: int
    bytes: int
    percent: int
    chunk: int
    speed: int
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the nested form used by progress displays."""
        return {
            'chunk': self.chunk,
            'speed': self.speed,
            'time': {'elapsed': self.elapsed, 'estimate': self.estimate},
            'size': {'bytes': self.bytes, 'percent': self.percent},
        }
