"""Transport data models."""
from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    """Server actions of an upload, in the order a transfer uses them."""
    OPEN = 'open'
    APPEND = 'append'
    CLOSE = 'close'
    REMOVE = 'remove'


@dataclass(frozen=True)
class TransportResponse:
    """
    HTTP response as seen by the engine.
    
    Attributes:
        status: HTTP status code
        reason: HTTP reason phrase
        body: Raw response body
    """
    status: int
    reason: str = ''
    body: bytes = b''
    
    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300
