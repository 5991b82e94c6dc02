"""Observable state — synchronous change notification with batched commits.

Every piece of published form state (a field's value, error, result,
touched and dirty flags; a form's data snapshot and aggregate result) is
held in a ``State``. Consumers observe it in one of two ways:

- ``subscribe(callback)``: called synchronously with each new value.
  Returns an ``unsubscribe`` callable.
- ``async for value in state.stream()``: yields the current value, then
  every change, from a per-subscriber ``asyncio.Queue``.

Mutating operations wrap their writes in ``batch()``. Inside a batch,
writes are applied immediately but notifications are deferred until the
outermost batch exits, so a subscriber reading a sibling state (``error``
while handling ``result``) always sees the fully committed picture::

    with batch():
        result.set(FieldError("Too short"))
        error.set("Too short")
    # subscribers of both fire here, after both writes

Equal values are conflated: setting a state to a value of the same type
that compares equal to the one last published does not notify, so
``1 -> True`` or ``0 -> 0.0`` still publishes.

Thread safety:
    The pending-notification set lives in a ``ContextVar`` (task-local
    under asyncio, thread-local otherwise). Subscriber sets are guarded by
    a ``Lock``; values themselves are not, so concurrent mutation of one
    form from several threads needs external synchronization.
"""

import asyncio
import contextlib
import threading
from collections.abc import AsyncIterator, Callable, Iterator
from contextvars import ContextVar
from typing import Protocol, runtime_checkable

type Unsubscribe = Callable[[], None]

_CLOSED = object()


@runtime_checkable
class Observable[T](Protocol):
    """Read-only view of a ``State``. What fields and forms hand to consumers."""

    @property
    def value(self) -> T: ...

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe: ...

    def stream(self) -> AsyncIterator[T]: ...


class State[T]:
    """A single observable value."""

    __slots__ = ("_callbacks", "_lock", "_name", "_published", "_queue_size", "_queues", "_value")

    def __init__(self, value: T, *, name: str = "", queue_size: int = 256) -> None:
        self._value = value
        self._published = value
        self._name = name
        self._queue_size = queue_size
        self._callbacks: list[Callable[[T], None]] = []
        self._queues: set[asyncio.Queue[object]] = set()
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Store *value* and notify, or defer notification inside ``batch()``."""
        self._value = value
        pending = _pending.get()
        if pending is not None:
            pending.setdefault(id(self), self)
            return
        self._publish()

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Call *callback* with every new value until unsubscribed.

        The callback is not invoked with the current value; read
        ``state.value`` for that.
        """
        with self._lock:
            self._callbacks.append(callback)

        def unsubscribe() -> None:
            with self._lock, contextlib.suppress(ValueError):
                self._callbacks.remove(callback)

        return unsubscribe

    async def stream(self) -> AsyncIterator[T]:
        """Yield the current value, then each published change.

        The subscription is cleaned up when the iterator exits. Changes are
        dropped for a consumer whose queue is full rather than blocking the
        writer.
        """
        queue: asyncio.Queue[object] = asyncio.Queue(maxsize=self._queue_size)
        queue.put_nowait(self._value)
        with self._lock:
            self._queues.add(queue)
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    break
                yield item  # type: ignore[misc]
        finally:
            with self._lock:
                self._queues.discard(queue)

    def close(self) -> None:
        """End every active ``stream()``. Callback subscribers are kept."""
        with self._lock:
            queues = set(self._queues)
            self._queues.clear()
        for queue in queues:
            with contextlib.suppress(asyncio.QueueFull):
                queue.put_nowait(_CLOSED)

    def _publish(self) -> None:
        value = self._value
        if type(value) is type(self._published) and value == self._published:
            return
        self._published = value
        with self._lock:
            callbacks = list(self._callbacks)
            queues = set(self._queues)
        for queue in queues:
            with contextlib.suppress(asyncio.QueueFull):
                queue.put_nowait(value)
        for callback in callbacks:
            callback(value)

    def __repr__(self) -> str:
        label = f" {self._name}" if self._name else ""
        return f"<State{label} {self._value!r}>"


# id(state) -> state, insertion-ordered; None outside a batch
_pending: ContextVar[dict[int, State] | None] = ContextVar("formstate_pending", default=None)


@contextlib.contextmanager
def batch() -> Iterator[None]:
    """Defer notifications until the outermost batch exits.

    Nested batches join the outer one. On exit every touched state
    publishes once, in first-write order. If a subscriber raises, the
    remaining states still publish and the first error is re-raised.
    """
    if _pending.get() is not None:
        yield
        return

    pending: dict[int, State] = {}
    token = _pending.set(pending)
    try:
        yield
    finally:
        _pending.reset(token)
        _flush(pending)


def _flush(pending: dict[int, State]) -> None:
    first_error: BaseException | None = None
    for state in pending.values():
        try:
            state._publish()
        except Exception as exc:
            if first_error is None:
                first_error = exc
    if first_error is not None:
        raise first_error
