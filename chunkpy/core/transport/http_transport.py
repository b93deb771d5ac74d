"""
HTTP upload transport.

Sends open/append/close/remove requests to the upload API with aiohttp.
"""
from typing import Optional, Dict, Any
import asyncio
import time

import aiohttp

from .config import TransportConfig
from .models import Action, TransportResponse
from ..exceptions import TransportError
from ..logging import get_logger


class AiohttpTransport:
    """
    Upload transport on top of an aiohttp session.
    
    Reuses one HTTP session for every request of a transfer. HTTP error
    statuses are returned as responses; only connection-level failures
    raise TransportError.
    
    Example:
        >>> async with AiohttpTransport(TransportConfig.for_url(url)) as transport:
        ...     engine = UploadEngine(source, transport)
        ...     await engine.start()
    """
    
    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.
        
        Args:
            config: Transport configuration (uses defaults if not provided)
            session: Optional shared session; it is not closed by close()
        """
        self._config = config or TransportConfig()
        self._session = session
        self._owns_session = False
        self._logger = get_logger('chunkpy.transport')
    
    @property
    def config(self) -> TransportConfig:
        """Get current configuration."""
        return self._config
    
    async def __aenter__(self) -> 'AiohttpTransport':
        await self._get_session()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session
    
    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._owns_session = False
    
    def build_form(
        self,
        handle: Optional[str],
        payload: Dict[str, Any]
    ) -> aiohttp.FormData:
        """
        Build the request form.
        
        The handle travels as the 'hash' field and the chunk as a file
        part named after the uploaded file.
        """
        form = aiohttp.FormData()
        if handle is not None:
            form.add_field('hash', handle)
        for key, value in payload.items():
            if key == 'name':
                continue
            if key == 'chunk':
                form.add_field(
                    'chunk',
                    value,
                    filename=payload.get('name') or 'blob',
                    content_type='application/octet-stream'
                )
            else:
                form.add_field(key, str(value))
        return form
    
    async def send(
        self,
        action: Action,
        handle: Optional[str],
        payload: Dict[str, Any]
    ) -> TransportResponse:
        """
        Send one request to the upload API.
        
        Args:
            action: Server action
            handle: File handle from open (None for open itself)
            payload: Request fields; 'name' goes into the query string
            
        Returns:
            The HTTP response, whatever its status
            
        Raises:
            TransportError: On connection errors and timeouts
        """
        action = Action(action)
        params = {'action': action.value, 'name': payload.get('name', '')}
        form = self.build_form(handle, payload)
        session = await self._get_session()
        proxy = self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
        
        request_start = time.time()
        try:
            async with session.post(
                self._config.url,
                params=params,
                data=form,
                proxy=proxy
            ) as response:
                body = await response.read()
                elapsed = time.time() - request_start
                self._logger.debug(
                    f"{action.value}: HTTP {response.status} in {elapsed:.2f}s ({len(body)} bytes)"
                )
                return TransportResponse(
                    status=response.status,
                    reason=response.reason or '',
                    body=body
                )
        except asyncio.TimeoutError as e:
            elapsed = time.time() - request_start
            self._logger.warning(f"{action.value}: timeout after {elapsed:.2f}s")
            raise TransportError(f"Request '{action.value}' timed out", action.value) from e
        except aiohttp.ClientError as e:
            self._logger.warning(f"{action.value}: connection failed: {e}")
            raise TransportError(f"Request '{action.value}' failed: {e}", action.value) from e
