"""
Byte source services.

File-backed and in-memory sources of uploaded content.
"""
from pathlib import Path
from typing import Optional, Union
import time

import aiofiles

from ...exceptions import InvalidInputError
from ...logging import get_logger


class FileSource:
    """
    Byte source backed by a local file.
    
    Uses aiofiles for non-blocking I/O and keeps the file handle open
    between reads; call close() (or use `async with`) when done.
    """
    
    def __init__(self, file_path: Union[str, Path], name: Optional[str] = None):
        """
        Initialize file source.
        
        Args:
            file_path: Path to the file
            name: File name sent to the server (defaults to the path's name)
            
        Raises:
            InvalidInputError: If the path is missing or not a regular file
        """
        path = Path(file_path)
        if not path.exists():
            raise InvalidInputError(f"File not found: {path}")
        if not path.is_file():
            raise InvalidInputError(f"Path is not a file: {path}")
        
        stat = path.stat()
        self._path = path
        self._name = name or path.name
        self._size = stat.st_size
        self._last_modified = int(stat.st_mtime)
        self._file_handle = None
        self._logger = get_logger('chunkpy.upload.file')
    
    @property
    def path(self) -> Path:
        return self._path
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def size(self) -> int:
        return self._size
    
    @property
    def last_modified(self) -> int:
        return self._last_modified
    
    async def __aenter__(self) -> 'FileSource':
        await self.open()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def open(self) -> None:
        """Open the file for reading. Repeated calls reuse the handle."""
        if self._file_handle is None:
            self._file_handle = await aiofiles.open(self._path, 'rb')
    
    async def close(self) -> None:
        """Close the file handle, if open."""
        if self._file_handle is not None:
            await self._file_handle.close()
            self._file_handle = None
    
    async def read(self, start: int, end: int) -> bytes:
        """
        Read the byte range [start, end), truncated at end of file.
        
        Raises:
            OSError: If the file cannot be read
        """
        start = max(start, 0)
        end = min(end, self._size)
        if end <= start:
            return b''
        
        await self.open()
        await self._file_handle.seek(start)
        data = await self._file_handle.read(end - start)
        self._logger.debug(f"Read chunk: {start}-{end} ({len(data)} bytes)")
        return data


class MemorySource:
    """Byte source over an in-memory buffer."""
    
    def __init__(
        self,
        data: bytes,
        name: str = 'blob',
        last_modified: Optional[int] = None
    ):
        self._data = bytes(data)
        self._name = name
        self._last_modified = int(time.time()) if last_modified is None else last_modified
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def size(self) -> int:
        return len(self._data)
    
    @property
    def last_modified(self) -> int:
        return self._last_modified
    
    async def read(self, start: int, end: int) -> bytes:
        """Slice [start, end); slicing saturates at the buffer length."""
        return self._data[max(start, 0):max(end, 0)]
