"""
Protocol definitions for upload module.

Defines the interfaces of the engine's external collaborators.
"""
from typing import Protocol, Dict, Any, Optional

from ..transport.models import Action, TransportResponse


class ByteSource(Protocol):
    """
    Protocol for the uploaded content.
    
    An immutable, addressable byte source with a known length.
    """
    
    @property
    def name(self) -> str:
        """File name sent to the server."""
        ...
    
    @property
    def size(self) -> int:
        """Total size in bytes."""
        ...
    
    @property
    def last_modified(self) -> int:
        """Modification time as Unix timestamp."""
        ...
    
    async def read(self, start: int, end: int) -> bytes:
        """
        Read the byte range [start, end).
        
        Ranges past the end of the source are truncated, so the result
        may be shorter than end - start (or empty).
        """
        ...


class TransportProtocol(Protocol):
    """Protocol for sending one upload request."""
    
    async def send(
        self,
        action: Action,
        handle: Optional[str],
        payload: Dict[str, Any]
    ) -> TransportResponse:
        """
        Send a request and return the HTTP response.
        
        Raises:
            TransportError: If no response was received
        """
        ...
