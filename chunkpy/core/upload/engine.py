"""
Upload engine.

Drives one file through open -> append (xn) -> close against the upload
API, with pause, resume and cancel.

Every step is dispatched on an explicit Action tag. Pausing records the
action that was about to run, and resume() dispatches it again, so no
control flow is held across a pause.
"""
import asyncio
import json
import time
from typing import Any, Callable, Dict, Mapping, Optional

from .config import UploadConfig
from .models import Phase, ChunkCursor, Timers, UploadStatus
from .progress import ProgressAccountant
from .protocols import ByteSource, TransportProtocol
from .strategies import AdaptiveChunkSizer, RetryStrategy, BackoffRetryStrategy
from ..events import EventEmitter
from ..exceptions import (
    InvalidInputError,
    UploadStateError,
    TransportError,
    ApplicationError,
    RequestFailedError,
    MalformedResponseError,
    SizeMismatchError
)
from ..logging import get_logger
from ..transport.models import Action, TransportResponse

logger = get_logger('chunkpy.upload.engine')

EVENTS = ('iteration', 'pause', 'timeout', 'finish', 'error', 'cancel')


class UploadEngine:
    """
    Resumable chunked upload of a single file.

    Events (register with on()):
        iteration(status): after every completed exchange
        pause(): the engine stopped at a pause request
        timeout(action): retries of `action` exhausted, engine paused
        finish(): the server confirmed the full file size
        error(error): the server rejected a request
        cancel(): the upload was cancelled

    Example:
        >>> engine = UploadEngine(FileSource("video.mp4"), transport)
        >>> engine.on('iteration', lambda status: print(status.percent))
        >>> await engine.start()
    """

    def __init__(
        self,
        source: ByteSource,
        transport: TransportProtocol,
        config: Optional[UploadConfig] = None,
        callbacks: Optional[Mapping[str, Callable]] = None,
        sizer: Optional[AdaptiveChunkSizer] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize upload engine.

        Args:
            source: Content to upload
            transport: Sends requests to the upload API
            config: Upload configuration (uses defaults if not provided)
            callbacks: Optional mapping of event name to handler
            sizer: Chunk sizing strategy
            retry_strategy: Strategy for transport failures
            clock: Time source in seconds (defaults to time.time)

        Raises:
            InvalidInputError: If the file exceeds the size limit
        """
        self._config = config or UploadConfig.default()
        if source.size > self._config.file_size_limit:
            raise InvalidInputError(
                f"File size {source.size} exceeds limit {self._config.file_size_limit}"
            )

        self._source = source
        self._transport = transport
        self._clock = clock or time.time
        self._sizer = sizer or AdaptiveChunkSizer(
            self._config.chunk_size.minimum,
            self._config.chunk_size.maximum,
            self._config.interval
        )
        self._retry = retry_strategy or BackoffRetryStrategy(self._config.retry)
        self._progress = ProgressAccountant(source.size, self._clock)

        self._events = EventEmitter(EVENTS)
        for event, callback in (callbacks or {}).items():
            if callback is not None:
                self._events.on(event, callback)

        self._handle: Optional[str] = None
        self._cursor = ChunkCursor()
        self._timers = Timers()
        self._speed = 0
        self._phase = Phase.IDLE
        self._retry_count = 0
        self._action: Optional[Action] = None
        self._running = False
        self._wakeup = asyncio.Event()
        self._steps = {
            Action.OPEN: self._open,
            Action.APPEND: self._append,
            Action.CLOSE: self._close,
            Action.REMOVE: self._remove,
        }

    # Observation

    def on(self, event: str, callback: Callable) -> 'UploadEngine':
        """Register an event handler."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'UploadEngine':
        """Remove an event handler."""
        self._events.off(event, callback)
        return self

    @property
    def source(self) -> ByteSource:
        return self._source

    @property
    def config(self) -> UploadConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def handle(self) -> Optional[str]:
        """File handle assigned by the server on open."""
        return self._handle

    @property
    def cursor(self) -> ChunkCursor:
        """Copy of the confirmed position."""
        return ChunkCursor(self._cursor.number, self._cursor.offset)

    @property
    def offset(self) -> int:
        return self._cursor.offset

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def retry_count(self) -> int:
        return self._retry_count

    @property
    def sizer(self) -> AdaptiveChunkSizer:
        return self._sizer

    @property
    def is_running(self) -> bool:
        """True while a coroutine is driving the engine."""
        return self._running

    @property
    def pending_action(self) -> Optional[Action]:
        """Action that resume() will run."""
        return self._action

    @property
    def status(self) -> UploadStatus:
        """Progress snapshot of the transfer."""
        started_at = self._timers.started_at
        if started_at is None:
            started_at = self._clock()
        chunk = self._sizer.value
        if self._phase is Phase.FINISHED and self._cursor.number:
            chunk = round(self._source.size / self._cursor.number)
        return self._progress.snapshot(started_at, self._cursor.offset, chunk, self._speed)

    # Control

    async def start(self) -> None:
        """
        Start the upload and drive it until it finishes, pauses or halts.

        Raises:
            UploadStateError: If the upload was already started
            MalformedResponseError: If the server sent an unreadable body
            SizeMismatchError: If the server confirmed a different size
        """
        if self._phase is not Phase.IDLE:
            raise UploadStateError(
                f"Upload already started (phase: {self._phase.value})", 'start'
            )
        self._timers.started_at = self._clock()
        logger.info(f"Starting upload: {self._source.name} ({self._source.size} bytes)")
        await self._run(Action.OPEN)

    def pause(self) -> None:
        """
        Request a pause.

        The request in flight still completes; no new request is sent
        after it.
        """
        if self._phase.is_terminal or self._phase in (Phase.IDLE, Phase.PAUSED, Phase.STOPPED):
            logger.debug(f"Ignoring pause in phase {self._phase.value}")
            return
        if self._timers.paused_at is None:
            self._timers.paused_at = self._clock()
        if self._running:
            self._wakeup.set()
        else:
            self._enter_pause(self._action)

    async def resume(self) -> None:
        """
        Continue a paused or halted upload from the step it stopped at.

        Raises:
            UploadStateError: If the upload is not started, finished or cancelling
        """
        if self._phase is Phase.IDLE or self._phase.is_terminal or self._phase is Phase.STOPPED:
            raise UploadStateError(
                f"Cannot resume upload in phase {self._phase.value}", 'resume'
            )
        if self._timers.paused_at is not None:
            self._timers.started_at += self._clock() - self._timers.paused_at
            self._timers.paused_at = None
        if self._running:
            # pause request withdrawn before it took effect
            return
        logger.info(
            f"Resuming upload of {self._source.name} at '{self._action.value}' "
            f"(offset {self._cursor.offset})"
        )
        await self._run(self._action)

    async def cancel(self) -> None:
        """
        Cancel the upload and remove partial data from the server.

        While a request is in flight this only records the request; the
        coroutine driving the engine then removes the upload.
        """
        if self._phase.is_terminal:
            logger.debug(f"Ignoring cancel in phase {self._phase.value}")
            return
        if self._phase is Phase.IDLE:
            self._cancelled()
            return
        if self._timers.stopped_at is None:
            self._timers.stopped_at = self._clock()
        if self._running:
            self._phase = Phase.STOPPED
            self._wakeup.set()
            return
        await self._run(Action.REMOVE)

    # Dispatch

    async def _run(self, action: Optional[Action]) -> None:
        self._running = True
        try:
            while action is not None:
                action = await self._dispatch(action)
        except Exception as e:
            self._phase = Phase.FAILED
            logger.error(f"Upload of {self._source.name} failed: {e}")
            raise
        finally:
            self._running = False

    async def _dispatch(self, action: Action) -> Optional[Action]:
        """Run one step; returns the next action or None to stop driving."""
        if action is not Action.REMOVE:
            if self._timers.stopped_at is not None:
                return Action.REMOVE
            if self._timers.paused_at is not None:
                self._enter_pause(action)
                return None
        self._action = action
        try:
            return await self._steps[action]()
        except TransportError as e:
            return await self._recover(action, e)
        except ApplicationError as e:
            logger.error(f"Server rejected '{action.value}': {e}")
            self._events.emit('error', e)
            if self._timers.stopped_at is not None:
                return Action.REMOVE
            if self._timers.paused_at is not None:
                self._enter_pause(action)
            return None

    async def _recover(self, action: Action, error: TransportError) -> Optional[Action]:
        """Schedule a replay of `action` or stall once retries run out."""
        self._retry_count += 1
        self._sizer.shrink()

        if not self._retry.should_retry(self._retry_count):
            attempts = self._retry_count
            self._retry_count = 0
            self._sizer.reset()
            if action is Action.REMOVE:
                logger.warning(f"Giving up remove after {attempts} attempts: {error}")
                self._cancelled()
                return None
            if self._timers.stopped_at is not None:
                return Action.REMOVE
            logger.error(f"No response to '{action.value}' after {attempts} attempts, pausing")
            if self._timers.paused_at is None:
                self._timers.paused_at = self._clock()
            self._enter_pause(action, notify=False)
            self._events.emit('timeout', action.value)
            return None

        delay = self._retry.delay(self._retry_count)
        logger.warning(
            f"Retry #{self._retry_count} of '{action.value}' in {delay:.1f}s: {error}"
        )
        await self._wait(delay)
        return action

    async def _wait(self, delay: float) -> None:
        """Sleep before a retry; pause() and cancel() cut the wait short."""
        self._wakeup.clear()
        if delay <= 0 or self._timers.paused_at is not None or self._timers.stopped_at is not None:
            return
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    def _enter_pause(self, action: Optional[Action], notify: bool = True) -> None:
        self._phase = Phase.PAUSED
        self._action = action
        self._speed = 0
        logger.info(f"Upload of {self._source.name} paused at offset {self._cursor.offset}")
        if notify:
            self._events.emit('pause')

    def _cancelled(self) -> None:
        self._phase = Phase.CANCELLED
        logger.info(f"Upload of {self._source.name} cancelled")
        self._events.emit('cancel')

    def _emit_iteration(self) -> None:
        self._events.emit('iteration', self.status)

    # Steps

    async def _open(self) -> Optional[Action]:
        if self._handle is not None:
            return Action.APPEND
        self._phase = Phase.OPENING
        self._sizer.reset()
        body = await self._request(Action.OPEN, {'size': self._source.size})
        handle = body.get('hash')
        if not isinstance(handle, str) or not handle:
            raise MalformedResponseError("Open response carries no file handle", 'open')
        self._handle = handle
        logger.info(f"Upload opened: {self._source.name} -> {handle}")
        self._emit_iteration()
        return Action.APPEND

    async def _append(self) -> Optional[Action]:
        offset = self._cursor.offset
        if offset >= self._source.size:
            return Action.CLOSE
        self._phase = Phase.APPENDING

        size = self._sizer.next_size()
        chunk = await self._source.read(offset, offset + size)
        if not chunk:
            raise InvalidInputError(
                f"Source {self._source.name} returned no data at offset {offset}", 'append'
            )

        body = await self._request(Action.APPEND, {'offset': offset, 'chunk': chunk})
        confirmed = self._confirmed_size(Action.APPEND, body)
        if confirmed < offset or confirmed > self._source.size:
            raise MalformedResponseError(
                f"Confirmed offset {confirmed} outside [{offset}, {self._source.size}]",
                'append'
            )
        duration = self._clock() - self._timers.request_started_at

        self._cursor.offset = confirmed
        self._cursor.number += 1
        self._speed = self._sizer.record(len(chunk), duration, self._speed)
        logger.debug(
            f"Chunk {self._cursor.number}: {len(chunk)} bytes at {offset} "
            f"in {duration:.2f}s, next base {self._sizer.base}"
        )
        self._emit_iteration()
        return Action.CLOSE if confirmed >= self._source.size else Action.APPEND

    async def _close(self) -> Optional[Action]:
        self._phase = Phase.CLOSING
        body = await self._request(Action.CLOSE, {'time': self._source.last_modified})
        confirmed = self._confirmed_size(Action.CLOSE, body)
        if confirmed != self._source.size:
            self._emit_iteration()
            raise SizeMismatchError(self._source.size, confirmed)

        elapsed = self._clock() - self._timers.started_at
        if elapsed > 0:
            self._speed = round(self._source.size / elapsed)
        self._phase = Phase.FINISHED
        logger.info(
            f"Upload finished: {self._source.name} ({self._cursor.number} chunks, {elapsed:.1f}s)"
        )
        self._emit_iteration()
        self._events.emit('finish')
        return None

    async def _remove(self) -> Optional[Action]:
        self._phase = Phase.REMOVING
        if self._handle is not None:
            try:
                await self._request(Action.REMOVE, {})
            except (ApplicationError, MalformedResponseError) as e:
                logger.warning(f"Remove of {self._handle} failed: {e}")
            else:
                self._emit_iteration()
        self._cancelled()
        return None

    # Exchange

    async def _request(self, action: Action, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one request and parse the JSON body.

        Raises:
            TransportError: If no response arrived
            ApplicationError: If the server answered with an error status
            MalformedResponseError: If a successful body is not a JSON object
        """
        payload = {'name': self._source.name, **fields}
        self._timers.request_started_at = self._clock()
        response = await self._transport.send(action, self._handle, payload)
        self._retry_count = 0

        if not response.ok:
            self._emit_iteration()
            raise self._error_for(action, response)

        try:
            data = json.loads(response.body)
        except ValueError as e:
            raise MalformedResponseError(
                f"Invalid response to '{action.value}': {e}", action.value
            ) from e
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Response to '{action.value}' is not an object", action.value
            )
        return data

    @staticmethod
    def _error_for(action: Action, response: TransportResponse) -> ApplicationError:
        if response.status == 500:
            try:
                data = json.loads(response.body)
            except ValueError:
                data = None
            if isinstance(data, dict) and data.get('exception') is not None:
                return ApplicationError(
                    f"{response.reason}: {data['exception']}", action.value, response.status
                )
        return RequestFailedError(
            f"Request '{action.value}' failed with HTTP {response.status}",
            action.value,
            response.status
        )

    @staticmethod
    def _confirmed_size(action: Action, body: Dict[str, Any]) -> int:
        try:
            return int(body['size'])
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"Response to '{action.value}' carries no size", action.value
            ) from e
