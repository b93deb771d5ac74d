"""Event emitter implementation using Observer Pattern."""
from typing import Dict, List, Callable, Optional, Iterable


class EventEmitter:
    """
    Event emitter using Observer Pattern.
    
    Handlers are invoked synchronously, in registration order. When a set
    of event names is given, registering or emitting any other name is
    rejected so that typos in callback names fail loudly.
    """
    
    def __init__(self, events: Optional[Iterable[str]] = None):
        """Initializes event emitter."""
        self._allowed = frozenset(events) if events is not None else None
        self._events: Dict[str, List[Callable]] = {}
    
    def _check(self, event: str) -> None:
        if self._allowed is not None and event not in self._allowed:
            raise ValueError(
                f"Unknown event '{event}', expected one of {sorted(self._allowed)}"
            )
    
    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        """Registers an event handler."""
        self._check(event)
        self._events.setdefault(event, []).append(callback)
        return self
    
    def emit(self, event: str, *args, **kwargs):
        """Emits an event."""
        self._check(event)
        for callback in list(self._events.get(event, ())):
            callback(*args, **kwargs)
    
    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Removes an event handler."""
        if event not in self._events:
            return self
        
        if callback is None:
            del self._events[event]
        else:
            self._events[event] = [cb for cb in self._events[event] if cb != callback]
        
        return self
    
    def listeners(self, event: str) -> List[Callable]:
        """Returns the handlers registered for an event."""
        return list(self._events.get(event, ()))
