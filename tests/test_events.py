# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import threading
import unittest
from datetime import UTC, datetime

from meshcore.aio import EndOfChannel, WouldBlock
from meshcore.configuration import Configuration
from meshcore.events import (
    Acknowledgement,
    Advertisement,
    ChannelMessage,
    ConnectionFailed,
    ConnectionStateChanged,
    ContactMessage,
    Error,
    EventDispatcher,
    EventFilter,
    MessagesWaiting,
    NoMoreMessages,
    Ok,
    PathUpdate,
    StatusResponse,
    TelemetryResponse,
    TransportError,
    TransportErrorKind,
)
from meshcore.protocol.binary import parse_status_binary

from .test_parsers import status_fields


ACK = Acknowledgement(b'\x01\x02\x03\x04')
OTHER_ACK = Acknowledgement(b'\x09\x09\x09\x09')
KEY = bytes.fromhex('aabbccddeeff') + bytes(26)


def contact_message(prefix: bytes) -> ContactMessage:
    return ContactMessage(sender_public_key_prefix=prefix, path_length=0, text_type=0, sender_timestamp=datetime(2024, 1, 1, tzinfo=UTC), signature=None, text='hi')


def channel_message(channel: int) -> ChannelMessage:
    return ChannelMessage(channel_index=channel, path_length=0, text_type=0, sender_timestamp=datetime(2024, 1, 1, tzinfo=UTC), text='hi')


class TestEventFilter:

    def test_event_type(self) -> None:
        assert EventFilter.ok().matches(Ok())
        assert not EventFilter.ok().matches(Error())
        assert EventFilter.error()(Error(3))
        assert EventFilter.no_more_messages()(NoMoreMessages())
        assert EventFilter.messages_waiting()(MessagesWaiting())
        assert EventFilter.event_type(Ok, Error)(Error())
        assert not EventFilter.event_type(Ok, Error)(ACK)

    def test_acknowledgement(self) -> None:
        ack_filter = EventFilter.acknowledgement(b'\x01\x02\x03\x04')
        assert ack_filter(ACK)
        assert not ack_filter(OTHER_ACK)
        assert not ack_filter(Ok())

    def test_prefix_filters(self) -> None:
        prefix = bytes.fromhex('aabbcc')
        assert EventFilter.contact_message(prefix)(contact_message(bytes.fromhex('aabbccddeeff')))
        assert not EventFilter.contact_message(prefix)(contact_message(bytes.fromhex('aabbddddeeff')))
        assert EventFilter.advertisement(prefix)(Advertisement(KEY))
        assert not EventFilter.advertisement(prefix)(PathUpdate(KEY))
        assert EventFilter.path_update(prefix)(PathUpdate(KEY))
        status = parse_status_binary(status_fields(), bytes.fromhex('aabbccddeeff'))
        assert EventFilter.status_response(prefix)(status)
        assert not EventFilter.status_response(b'\xff')(status)
        telemetry = TelemetryResponse(public_key_prefix=bytes.fromhex('aabbccddeeff'), tag=None, raw_data=b'')
        assert EventFilter.telemetry_response(prefix)(telemetry)
        assert not EventFilter.telemetry_response(prefix)(status)

    def test_channel_message(self) -> None:
        assert EventFilter.channel_message(1)(channel_message(1))
        assert not EventFilter.channel_message(1)(channel_message(2))

    def test_attribute(self) -> None:
        assert EventFilter.attribute('code', ACK.code)(ACK)
        assert EventFilter.attribute('public_key_prefix', KEY[:6])(Advertisement(KEY))
        assert EventFilter.attribute('channel_index', 4)(channel_message(4))
        # events without the attribute never match, not even against None
        assert not EventFilter.attribute('code', None)(NoMoreMessages())
        assert EventFilter.attribute('code', None)(Error())

    def test_combinators(self) -> None:
        ok_or_error = EventFilter.ok() | EventFilter.error()
        assert ok_or_error(Ok())
        assert ok_or_error(Error())
        assert not ok_or_error(ACK)
        not_ok = ~EventFilter.ok()
        assert not_ok(Error())
        assert not not_ok(Ok())
        assert EventFilter.ok().negated(ACK)
        both = EventFilter.event_type(Acknowledgement).and_(EventFilter.attribute('code', ACK.code))
        assert both(ACK)
        assert not both(OTHER_ACK)
        assert EventFilter.ok().or_(EventFilter.acknowledgement(ACK.code))(ACK)
        assert (EventFilter.ok() & EventFilter.error())(Ok()) is False


class TestEventModel(unittest.TestCase):

    def test_attributes(self):
        self.assertEqual(dict(NoMoreMessages().attributes), {})
        self.assertEqual(Ok(5).attributes, {'value': 5})
        self.assertEqual(Advertisement(KEY).attributes, {'public_key_prefix': KEY[:6]})
        self.assertEqual(contact_message(b'\x01' * 6).attributes, {'public_key_prefix': b'\x01' * 6, 'text_type': 0})

    def test_connection_state(self):
        event = ConnectionStateChanged(ConnectionFailed(TransportError(TransportErrorKind.device_not_found, 'no such device')))
        match event.state:
            case ConnectionFailed(error=TransportError(kind=kind)):
                self.assertIs(kind, TransportErrorKind.device_not_found)
            case _:
                self.fail('unexpected connection state')

    def test_immutable(self):
        with self.assertRaises(AttributeError):
            ACK.code = b''  # type: ignore[misc]


class TestEventDispatcher(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.dispatcher = EventDispatcher()

    def tearDown(self):
        self.dispatcher.close()

    async def test_fan_out(self):
        ack_subscription = self.dispatcher.subscribe(EventFilter.acknowledgement(ACK.code))
        all_subscription = self.dispatcher.subscribe()
        self.assertEqual(self.dispatcher.subscriber_count, 2)

        self.dispatcher.dispatch(OTHER_ACK)
        self.assertEqual(all_subscription.receive_nowait(), OTHER_ACK)
        with self.assertRaises(WouldBlock):
            ack_subscription.receive_nowait()

        self.dispatcher.dispatch(ACK)
        self.assertEqual(await ack_subscription.receive(), ACK)
        self.assertEqual(await all_subscription.receive(), ACK)

    async def test_pending_receive(self):
        subscription = self.dispatcher.subscribe(EventFilter.ok())
        task = asyncio.create_task(subscription.receive())
        await asyncio.sleep(0)
        self.dispatcher.dispatch(Error())
        self.dispatcher.dispatch(Ok(1))
        self.assertEqual(await asyncio.wait_for(task, 1), Ok(1))

    async def test_drop_oldest(self):
        dispatcher = EventDispatcher(Configuration.default.replace(subscription_buffer_size=2))
        slow = dispatcher.subscribe()
        events = [Ok(value) for value in range(3)]
        with self.assertLogs('meshcore.events.dispatcher', level='DEBUG') as logs:
            for event in events:
                dispatcher.dispatch(event)
        self.assertTrue(any('dropped' in message for message in logs.output))
        self.assertEqual(slow.dropped, 1)
        self.assertEqual([slow.receive_nowait(), slow.receive_nowait()], events[1:])
        dispatcher.close()

    async def test_unsubscribe(self):
        with self.dispatcher.subscribe() as subscription:
            self.assertEqual(self.dispatcher.subscriber_count, 1)
        self.assertEqual(self.dispatcher.subscriber_count, 0)
        # closing again is harmless and dispatching no longer reaches the closed subscription
        subscription.close()
        self.dispatcher.dispatch(ACK)
        with self.assertRaises(EndOfChannel):
            subscription.receive_nowait()

    async def test_unsubscribe_from_another_thread(self):
        subscription = self.dispatcher.subscribe()
        thread = threading.Thread(target=subscription.close)
        thread.start()
        thread.join()
        self.assertEqual(self.dispatcher.subscriber_count, 0)
        self.dispatcher.dispatch(ACK)
        self.assertEqual(len(subscription), 0)

    async def test_unsubscribe_from_another_thread_ends_iteration(self):
        subscription = self.dispatcher.subscribe()

        async def collect():
            return [event async for event in subscription]

        task = asyncio.create_task(collect())
        self.dispatcher.dispatch(ACK)
        await asyncio.sleep(0)
        timer = threading.Timer(0.05, subscription.close)
        timer.start()
        try:
            self.assertEqual(await asyncio.wait_for(task, 5), [ACK])
        finally:
            timer.join()
        self.assertEqual(self.dispatcher.subscriber_count, 0)

    async def test_async_iteration(self):
        subscription = self.dispatcher.subscribe(EventFilter.event_type(Ok))

        async def collect():
            return [event async for event in subscription]

        task = asyncio.create_task(collect())
        for value in range(3):
            self.dispatcher.dispatch(Ok(value))
            self.dispatcher.dispatch(ACK)
        await asyncio.sleep(0)
        self.dispatcher.close()
        self.assertEqual(await asyncio.wait_for(task, 1), [Ok(0), Ok(1), Ok(2)])
        self.assertEqual(self.dispatcher.subscriber_count, 0)

    async def test_async_context(self):
        async with self.dispatcher.subscribe() as subscription:
            self.dispatcher.dispatch(ACK)
            self.assertEqual(await subscription.receive(), ACK)
        self.assertTrue(subscription.closed)
        self.assertEqual(self.dispatcher.subscriber_count, 0)
