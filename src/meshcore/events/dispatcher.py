# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
from collections.abc import Callable
from functools import partial
from itertools import count
from threading import Lock

from meshcore.aio import Channel, ClosedResourceError, OverflowPolicy
from meshcore.configuration import Configuration

from .filter import EventPredicate
from .model import Event

__all__ = 'EventDispatcher', 'Subscription'


log = logging.getLogger(__name__)


class Subscription(Channel[Event]):
    """
    A stream of the events that matched a subscription's filter.

    The stream buffers a limited number of unread events, dropping the
    oldest ones when a slow reader falls behind. Closing it (directly or
    by leaving its context) unsubscribes it from the dispatcher.
    """

    def __init__(self, id: int, filter: EventPredicate | None, buffer_size: int, on_close: Callable[[], object]) -> None:  # noqa: A002
        super().__init__(buffer_size, overflow=OverflowPolicy.DropOldest, on_close=on_close)
        self.id = id
        self.filter = filter

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}(id={self.id!r}, filter={self.filter!r}, buffer_size={self.buffer_size!r})'

    def accepts(self, event: Event) -> bool:
        return self.filter is None or self.filter(event)


class EventDispatcher:
    """
    Fan out events to any number of independent subscriptions.

    The registry of subscriptions is guarded by a lock, so subscriptions
    can be closed from a different thread than the one that dispatches.
    Delivery never blocks: each subscription has its own bounded buffer.
    """

    def __init__(self, configuration: Configuration = Configuration.default) -> None:
        self.configuration = configuration
        self._subscriptions: dict[int, Subscription] = {}
        self._lock = Lock()
        self._ids = count(1)

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}(subscriber_count={self.subscriber_count})'

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self, filter: EventPredicate | None = None) -> Subscription:  # noqa: A002
        with self._lock:
            subscription_id = next(self._ids)
            subscription = Subscription(subscription_id, filter, self.configuration.subscription_buffer_size, on_close=partial(self._unsubscribe, subscription_id))
            self._subscriptions[subscription_id] = subscription
        log.debug('Added subscription %d (filter=%r)', subscription_id, filter)
        return subscription

    def dispatch(self, event: Event) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions.values())
        for subscription in subscriptions:
            if not subscription.accepts(event):
                continue
            dropped = subscription.dropped
            try:
                subscription.send_nowait(event)
            except ClosedResourceError:
                continue  # closed while this dispatch was in flight
            if subscription.dropped > dropped:
                log.debug('Subscription %d is not keeping up, dropped its oldest event', subscription.id)

    def close(self) -> None:
        """End all the subscription streams"""
        with self._lock:
            subscriptions = list(self._subscriptions.values())
        for subscription in subscriptions:
            subscription.close()

    def _unsubscribe(self, subscription_id: int) -> None:
        with self._lock:
            removed = self._subscriptions.pop(subscription_id, None)
        if removed is not None:
            log.debug('Removed subscription %d', subscription_id)
