"""
State-machine scaffolding shared by the flows.

Flows keep their own state and emit a change event whenever it changes.
Rendering layers subscribe to those events; nothing polls.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .exceptions import RequestTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]
Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """
    Minimal synchronous event emitter.

    Listeners are called in subscription order with the emitted value.
    A listener that raises does not prevent the others from being called.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener[T]] = []

    def subscribe(self, listener: Listener[T]) -> Unsubscribe:
        """
        Register a listener.

        Returns:
            Callable that removes the listener again (safe to call twice)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, value: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("State listener %r failed", listener)


async def bounded_call(
    awaitable: Awaitable[Any],
    service: str,
    timeout: float,
) -> Any:
    """
    Await a collaborator call with an upper time bound.

    Args:
        awaitable: The pending collaborator call
        service: Name of the collaborator, used in the error
        timeout: Seconds to wait before giving up

    Raises:
        RequestTimeoutError: If the call does not complete in time
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Call to %s timed out after %.1fs", service, timeout)
        raise RequestTimeoutError(service, timeout)
