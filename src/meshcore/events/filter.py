# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from collections.abc import Buffer, Callable
from dataclasses import dataclass
from typing import Any, Self

from .model import (
    Acknowledgement,
    Advertisement,
    ChannelMessage,
    ContactMessage,
    Error,
    Event,
    MessagesWaiting,
    NoMoreMessages,
    Ok,
    PathUpdate,
    StatusResponse,
    TelemetryResponse,
)

__all__ = 'EventFilter', 'EventPredicate'


type EventPredicate = Callable[[Event], bool]


@dataclass(frozen=True, slots=True)
class EventFilter:
    """
    A stateless predicate over events.

    Filters can be combined with and_(), or_() and negated (or with the
    &, | and ~ operators) and can be shared between subscriptions. A
    filter is callable, so it can be used wherever a plain predicate is
    expected.
    """

    predicate: EventPredicate

    def matches(self, event: Event) -> bool:
        return bool(self.predicate(event))

    __call__ = matches

    # Combinators

    def and_(self, other: 'EventFilter') -> 'EventFilter':
        return EventFilter(lambda event: self.matches(event) and other.matches(event))

    def or_(self, other: 'EventFilter') -> 'EventFilter':
        return EventFilter(lambda event: self.matches(event) or other.matches(event))

    @property
    def negated(self) -> 'EventFilter':
        return EventFilter(lambda event: not self.matches(event))

    __and__ = and_
    __or__ = or_

    def __invert__(self) -> 'EventFilter':
        return self.negated

    # Factories

    @classmethod
    def event_type(cls, *types: type[Event]) -> Self:
        """Match events that are instances of any of the given event types"""
        return cls(lambda event: isinstance(event, types))

    @classmethod
    def attribute(cls, name: str, value: Any) -> Self:
        """Match events whose attributes mapping contains name with the given value"""
        missing = object()
        return cls(lambda event: event.attributes.get(name, missing) == value)

    @classmethod
    def ok(cls) -> Self:
        return cls.event_type(Ok)

    @classmethod
    def error(cls) -> Self:
        return cls.event_type(Error)

    @classmethod
    def no_more_messages(cls) -> Self:
        return cls.event_type(NoMoreMessages)

    @classmethod
    def messages_waiting(cls) -> Self:
        return cls.event_type(MessagesWaiting)

    @classmethod
    def acknowledgement(cls, code: Buffer) -> Self:
        code = bytes(code)
        return cls(lambda event: isinstance(event, Acknowledgement) and event.code == code)

    @classmethod
    def contact_message(cls, from_prefix: Buffer) -> Self:
        prefix = bytes(from_prefix)
        return cls(lambda event: isinstance(event, ContactMessage) and event.sender_public_key_prefix.startswith(prefix))

    @classmethod
    def channel_message(cls, channel: int) -> Self:
        return cls(lambda event: isinstance(event, ChannelMessage) and event.channel_index == channel)

    @classmethod
    def status_response(cls, from_prefix: Buffer) -> Self:
        prefix = bytes(from_prefix)
        return cls(lambda event: isinstance(event, StatusResponse) and event.public_key_prefix.startswith(prefix))

    @classmethod
    def telemetry_response(cls, from_prefix: Buffer) -> Self:
        prefix = bytes(from_prefix)
        return cls(lambda event: isinstance(event, TelemetryResponse) and event.public_key_prefix.startswith(prefix))

    @classmethod
    def advertisement(cls, from_prefix: Buffer) -> Self:
        prefix = bytes(from_prefix)
        return cls(lambda event: isinstance(event, Advertisement) and event.public_key.startswith(prefix))

    @classmethod
    def path_update(cls, for_prefix: Buffer) -> Self:
        prefix = bytes(for_prefix)
        return cls(lambda event: isinstance(event, PathUpdate) and event.public_key.startswith(prefix))
