"""Pytest fixtures for chunkpy tests."""
import inspect
import json

import pytest

from chunkpy.core.exceptions import TransportError
from chunkpy.core.transport.models import Action, TransportResponse
from chunkpy.core.upload import UploadConfig, ChunkSizeConfig, RetryConfig


class FakeClock:
    """Manually advanced time source."""
    
    def __init__(self, start: float = 1000.0):
        self.now = start
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeServer:
    """
    In-memory upload API implementing the transport protocol.
    
    Request durations are simulated on the fake clock: a fixed latency
    plus the chunk size divided by the transfer rate.
    """
    
    def __init__(self, clock: FakeClock, rate: float = 1024 * 1024, latency: float = 0.05):
        self.clock = clock
        self.rate = rate
        self.latency = latency
        self.handle = 'f00dcafe'
        self.data = bytearray()
        self.requests = []
        self.close_size = None
        self.removed = False
        self._failures = {}
        self._responses = {}
        self._hooks = {}
    
    def fail(self, action, times: int) -> None:
        """Drop the next `times` requests of an action."""
        self._failures[Action(action)] = times
    
    def respond(self, action, *responses: TransportResponse) -> None:
        """Answer the next requests of an action with canned responses."""
        self._responses.setdefault(Action(action), []).extend(responses)
    
    def on_request(self, action, hook) -> None:
        """Run hook (sync or async) while a request of `action` is in flight."""
        self._hooks[Action(action)] = hook
    
    def count(self, action) -> int:
        return sum(1 for a, _, _ in self.requests if a is Action(action))
    
    def actions(self):
        return [a.value for a, _, _ in self.requests]
    
    def appends(self):
        return [p for a, _, p in self.requests if a is Action.APPEND]
    
    @staticmethod
    def _json(data, status: int = 200) -> TransportResponse:
        return TransportResponse(status, 'OK', json.dumps(data).encode())
    
    async def send(self, action, handle, payload) -> TransportResponse:
        action = Action(action)
        self.requests.append((action, handle, dict(payload)))
        
        hook = self._hooks.get(action)
        if hook is not None:
            result = hook()
            if inspect.isawaitable(result):
                await result
        
        if self._failures.get(action, 0) > 0:
            self._failures[action] -= 1
            self.clock.advance(self.latency)
            raise TransportError('Connection reset by peer', action.value)
        
        if self._responses.get(action):
            self.clock.advance(self.latency)
            return self._responses[action].pop(0)
        
        if action is Action.OPEN:
            self.clock.advance(self.latency)
            return self._json({'hash': self.handle})
        
        assert handle == self.handle
        
        if action is Action.APPEND:
            chunk = payload['chunk']
            assert payload['offset'] == len(self.data)
            self.data.extend(chunk)
            self.clock.advance(self.latency + len(chunk) / self.rate)
            return self._json({'size': len(self.data)})
        
        if action is Action.CLOSE:
            self.clock.advance(self.latency)
            size = len(self.data) if self.close_size is None else self.close_size
            return self._json({'size': size})
        
        self.removed = True
        self.data.clear()
        self.clock.advance(self.latency)
        return self._json({'removed': True})


class Recorder:
    """Collects engine events."""
    
    def __init__(self):
        self.statuses = []
        self.pauses = 0
        self.timeouts = []
        self.finishes = 0
        self.errors = []
        self.cancels = 0
    
    def callbacks(self):
        return {
            'iteration': self.statuses.append,
            'pause': self._pause,
            'timeout': self.timeouts.append,
            'finish': self._finish,
            'error': self.errors.append,
            'cancel': self._cancel,
        }
    
    def _pause(self):
        self.pauses += 1
    
    def _finish(self):
        self.finishes += 1
    
    def _cancel(self):
        self.cancels += 1


@pytest.fixture
def clock():
    """Fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def server(clock):
    """In-memory upload API at 1 MiB/s with 50 ms latency."""
    return FakeServer(clock)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def config():
    """Small chunk bounds and immediate retries."""
    return UploadConfig(
        chunk_size=ChunkSizeConfig(minimum=1024, maximum=64 * 1024),
        interval=3.0,
        retry=RetryConfig(limit=3, interval=0)
    )


@pytest.fixture
def payload():
    """300 KB of patterned bytes."""
    return bytes(range(256)) * 1200


@pytest.fixture
def make_engine(server, clock, config, recorder):
    """Factory building an engine over an in-memory source and the fake server."""
    from chunkpy.core.upload import UploadEngine, MemorySource
    
    def factory(data: bytes, **kwargs):
        kwargs.setdefault('config', config)
        source = MemorySource(data, name='payload.bin', last_modified=1700000000)
        return UploadEngine(
            source,
            server,
            callbacks=recorder.callbacks(),
            clock=clock,
            **kwargs
        )
    
    return factory
