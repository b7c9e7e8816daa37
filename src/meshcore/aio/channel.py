# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from asyncio import AbstractEventLoop, CancelledError, Future, get_running_loop
from collections import deque
from collections.abc import Callable
from enum import Enum
from typing import Final, Literal, Self

from . import exceptions

__all__ = 'Channel', 'OverflowPolicy', 'unlimited'


class WaiterQueue[T](deque[T]):
    def discard(self, value: T) -> None:
        try:  # noqa: SIM105
            self.remove(value)
        except ValueError:
            pass


class un(float, Enum):  # noqa: N801
    limited = float('inf')

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}.{self.name}'

    __str__ = __repr__


unlimited: Final = un.limited


def _running_loop() -> AbstractEventLoop | None:
    try:
        return get_running_loop()
    except RuntimeError:
        return None


class OverflowPolicy(Enum):
    Reject = 'reject'
    DropOldest = 'drop-oldest'

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}.{self.name}'


class Channel[T]:
    """
    A single consumer channel whose producers never suspend.

    When the buffer is full, the overflow policy decides the outcome of
    a send: with OverflowPolicy.Reject send_nowait() raises WouldBlock,
    while with OverflowPolicy.DropOldest the oldest unread item is evicted
    to make room for the new one and the dropped counter is incremented.

    The optional on_close callback is invoked exactly once, the first
    time the channel is closed.
    """

    def __init__(self, buffer_size: int | Literal[un.limited] = un.limited, *, overflow: OverflowPolicy = OverflowPolicy.Reject, on_close: Callable[[], object] | None = None) -> None:
        if buffer_size < 0:
            raise ValueError('buffer_size must be a non-negative integer')
        if buffer_size == 0 and overflow is OverflowPolicy.DropOldest:
            raise ValueError('the drop-oldest overflow policy requires a buffer_size of at least 1')
        self._buffer_size = buffer_size
        self._overflow = overflow
        self._on_close = on_close
        self._queue = deque[T]()
        self._readers = WaiterQueue[Future[T]]()
        self._closed = False
        self._dropped = 0

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}(buffer_size={self._buffer_size!r}, overflow={self._overflow!r})'

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def _loop(self) -> AbstractEventLoop:
        loop = get_running_loop()
        if '_loop' not in self.__dict__ and self.__dict__.setdefault('_loop', loop) is not loop:
            raise RuntimeError(f'{self!r} is bound to a different event loop')
        return loop

    @property
    def buffer_size(self) -> int | Literal[un.limited]:
        return self._buffer_size

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        """The number of items evicted by the drop-oldest overflow policy"""
        return self._dropped

    def send_nowait(self, value: T) -> None:
        if self._closed:
            raise exceptions.ClosedResourceError
        assert not self._readers or len(self._queue) == 0  # noqa: S101
        while self._readers:
            future = self._readers.popleft()
            if not future.cancelled():
                future.set_result(value)
                return
        # No active pending readers. Buffer the value, making room for it if the policy allows.
        if len(self._queue) >= self._buffer_size:
            if self._overflow is OverflowPolicy.Reject:
                raise exceptions.WouldBlock
            self._queue.popleft()
            self._dropped += 1
        self._queue.append(value)

    def receive_nowait(self) -> T:
        if self._queue:
            return self._queue.popleft()
        if self._closed:
            raise exceptions.EndOfChannel
        raise exceptions.WouldBlock

    async def receive(self) -> T:
        try:
            value = self.receive_nowait()
        except exceptions.WouldBlock:
            future = self._loop.create_future()
            self._readers.append(future)
            if self._closed:
                # closed from another thread before this loop was bound
                self._terminate_readers()
            try:
                value = await future
            except CancelledError:
                self._readers.discard(future)
                raise
        return value

    def close(self) -> None:
        """
        Close the channel.

        This can be called from any thread. Pending readers belong to the
        event loop the channel is bound to, so when called from outside
        that loop they are terminated from within it.
        """
        if self._closed:
            return
        self._closed = True
        loop = self.__dict__.get('_loop')
        if loop is None or _running_loop() is loop:
            self._terminate_readers()
        elif not loop.is_closed():
            loop.call_soon_threadsafe(self._terminate_readers)
        if self._on_close is not None:
            on_close, self._on_close = self._on_close, None
            on_close()

    def _terminate_readers(self) -> None:
        while self._readers:
            # terminate pending readers as they would otherwise wait forever.
            future = self._readers.popleft()
            if not future.cancelled():
                future.set_exception(exceptions.EndOfChannel)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: object, exc_value: object, exc_traceback: object) -> None:
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: object, exc_value: object, exc_traceback: object) -> None:
        self.close()

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except exceptions.EndOfChannel as exc:
            raise StopAsyncIteration from exc
