"""
Upload facade.

Provides a simplified interface for uploading local files.
Follows Facade Pattern - hides transport and source setup.
"""
from pathlib import Path
from typing import Optional, Union, Mapping, Callable
import logging

from .config import UploadConfig
from .engine import UploadEngine
from .services import FileSource
from ..transport import AiohttpTransport, TransportConfig


class UploadFacade:
    """
    Simplified interface for chunked uploads to one API endpoint.
    
    Example:
        >>> async with UploadFacade("https://example.com/api.php") as uploader:
        ...     engine = await uploader.upload("video.mp4")
        ...     print(engine.phase)
    """
    
    def __init__(
        self,
        transport: Union[str, TransportConfig, AiohttpTransport],
        config: Optional[UploadConfig] = None,
        log_level: int = logging.INFO
    ):
        """
        Initialize upload facade.
        
        Args:
            transport: Endpoint URL, transport configuration or transport
            config: Upload configuration
            log_level: Logging level
        """
        self._logger = logging.getLogger('chunkpy.upload')
        self._logger.setLevel(log_level)
        
        if isinstance(transport, str):
            transport = TransportConfig.for_url(transport)
        if isinstance(transport, TransportConfig):
            transport = AiohttpTransport(transport)
        self._transport = transport
        self._config = config or UploadConfig.default()
    
    @property
    def transport(self) -> AiohttpTransport:
        return self._transport
    
    async def __aenter__(self) -> 'UploadFacade':
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def close(self):
        """Release the HTTP session."""
        await self._transport.close()
    
    def create_engine(
        self,
        file_path: Union[str, Path],
        callbacks: Optional[Mapping[str, Callable]] = None,
        name: Optional[str] = None
    ) -> UploadEngine:
        """
        Create an engine for a local file without starting it.
        
        Raises:
            InvalidInputError: If the file is missing or too large
        """
        source = FileSource(file_path, name=name)
        return UploadEngine(
            source,
            self._transport,
            config=self._config,
            callbacks=callbacks
        )
    
    async def upload(
        self,
        file_path: Union[str, Path],
        callbacks: Optional[Mapping[str, Callable]] = None,
        name: Optional[str] = None
    ) -> UploadEngine:
        """
        Upload a file and return its engine.
        
        The engine is returned in whatever phase the upload stopped:
        FINISHED, PAUSED after a timeout, or halted after a server error.
        """
        engine = self.create_engine(file_path, callbacks, name)
        try:
            await engine.start()
        finally:
            await engine.source.close()
        return engine
