# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from enum import Enum, IntEnum

__all__ = 'CommandCode', 'ResponseCode', 'ResponseCategory', 'BinaryRequestType', 'ControlType', 'StatsType', 'TextType'  # noqa: RUF022


class CommandCode(IntEnum):
    app_start = 0x01
    send_message = 0x02
    send_channel_message = 0x03
    get_contacts = 0x04
    get_time = 0x05
    set_time = 0x06
    send_advertisement = 0x07
    set_name = 0x08
    update_contact = 0x09
    get_message = 0x0A
    set_radio = 0x0B
    set_tx_power = 0x0C
    reset_path = 0x0D
    set_coordinates = 0x0E
    remove_contact = 0x0F
    share_contact = 0x10
    export_contact = 0x11
    import_contact = 0x12
    reboot = 0x13
    get_battery = 0x14
    set_tuning = 0x15
    device_query = 0x16
    export_private_key = 0x17
    import_private_key = 0x18
    send_raw_data = 0x19
    send_login = 0x1A
    send_status_request = 0x1B
    has_connection = 0x1C
    send_logout = 0x1D
    get_contact_by_key = 0x1E
    get_channel = 0x1F
    set_channel = 0x20
    sign_start = 0x21
    sign_data = 0x22
    sign_finish = 0x23
    send_trace = 0x24
    set_device_pin = 0x25
    set_other_params = 0x26
    get_self_telemetry = 0x27
    get_custom_vars = 0x28
    set_custom_var = 0x29
    get_advert_path = 0x2A
    get_tuning_params = 0x2B
    binary_request = 0x32
    factory_reset = 0x33
    path_discovery = 0x34
    set_flood_scope = 0x36
    send_control_data = 0x37
    get_stats = 0x38
    set_auto_add_config = 0x3A
    get_auto_add_config = 0x3B
    get_allowed_repeat_freq = 0x3C


class ResponseCategory(Enum):
    simple = 'simple'
    device = 'device'
    contact = 'contact'
    message = 'message'
    push = 'push'
    login = 'login'
    signing = 'signing'
    misc = 'misc'


class ResponseCode(IntEnum):
    # Request/response pairs

    ok = 0x00
    error = 0x01
    contact_start = 0x02
    contact = 0x03
    contact_end = 0x04
    self_info = 0x05
    message_sent = 0x06
    contact_message_received = 0x07
    channel_message_received = 0x08
    current_time = 0x09
    no_more_messages = 0x0A
    contact_uri = 0x0B
    battery = 0x0C
    device_info = 0x0D
    private_key = 0x0E
    disabled = 0x0F
    contact_message_received_v3 = 0x10
    channel_message_received_v3 = 0x11
    channel_info = 0x12
    sign_start = 0x13
    signature = 0x14
    custom_vars = 0x15
    advert_path = 0x16
    tuning_params = 0x17
    stats = 0x18
    auto_add_config = 0x19
    allowed_repeat_freq = 0x1A

    # Push notifications

    advertisement = 0x80
    path_update = 0x81
    ack = 0x82
    messages_waiting = 0x83
    raw_data = 0x84
    login_success = 0x85
    login_failed = 0x86
    status_response = 0x87
    log_data = 0x88
    trace_data = 0x89
    new_advertisement = 0x8A
    telemetry_response = 0x8B
    binary_response = 0x8C
    path_discovery_response = 0x8D
    control_data = 0x8E
    contact_deleted = 0x8F
    contacts_full = 0x90

    @property
    def is_push(self) -> bool:
        return self.value >= 0x80

    @property
    def category(self) -> ResponseCategory:
        return _categories[self]


_categories: dict[ResponseCode, ResponseCategory] = {
    ResponseCode.ok: ResponseCategory.simple,
    ResponseCode.error: ResponseCategory.simple,

    ResponseCode.self_info: ResponseCategory.device,
    ResponseCode.device_info: ResponseCategory.device,
    ResponseCode.battery: ResponseCategory.device,
    ResponseCode.current_time: ResponseCategory.device,
    ResponseCode.private_key: ResponseCategory.device,
    ResponseCode.disabled: ResponseCategory.device,
    ResponseCode.auto_add_config: ResponseCategory.device,
    ResponseCode.allowed_repeat_freq: ResponseCategory.device,
    ResponseCode.advert_path: ResponseCategory.device,
    ResponseCode.tuning_params: ResponseCategory.device,

    ResponseCode.contact_start: ResponseCategory.contact,
    ResponseCode.contact: ResponseCategory.contact,
    ResponseCode.contact_end: ResponseCategory.contact,
    ResponseCode.contact_uri: ResponseCategory.contact,

    ResponseCode.message_sent: ResponseCategory.message,
    ResponseCode.contact_message_received: ResponseCategory.message,
    ResponseCode.channel_message_received: ResponseCategory.message,
    ResponseCode.contact_message_received_v3: ResponseCategory.message,
    ResponseCode.channel_message_received_v3: ResponseCategory.message,
    ResponseCode.no_more_messages: ResponseCategory.message,

    ResponseCode.advertisement: ResponseCategory.push,
    ResponseCode.path_update: ResponseCategory.push,
    ResponseCode.ack: ResponseCategory.push,
    ResponseCode.messages_waiting: ResponseCategory.push,
    ResponseCode.new_advertisement: ResponseCategory.push,
    ResponseCode.status_response: ResponseCategory.push,
    ResponseCode.telemetry_response: ResponseCategory.push,
    ResponseCode.binary_response: ResponseCategory.push,
    ResponseCode.path_discovery_response: ResponseCategory.push,
    ResponseCode.control_data: ResponseCategory.push,
    ResponseCode.contact_deleted: ResponseCategory.push,
    ResponseCode.contacts_full: ResponseCategory.push,

    ResponseCode.login_success: ResponseCategory.login,
    ResponseCode.login_failed: ResponseCategory.login,

    ResponseCode.sign_start: ResponseCategory.signing,
    ResponseCode.signature: ResponseCategory.signing,

    ResponseCode.stats: ResponseCategory.misc,
    ResponseCode.custom_vars: ResponseCategory.misc,
    ResponseCode.channel_info: ResponseCategory.misc,
    ResponseCode.raw_data: ResponseCategory.misc,
    ResponseCode.log_data: ResponseCategory.misc,
    ResponseCode.trace_data: ResponseCategory.misc,
}


class BinaryRequestType(IntEnum):
    status = 0x01
    keep_alive = 0x02
    telemetry = 0x03
    mma = 0x04
    acl = 0x05
    neighbours = 0x06


class ControlType(IntEnum):
    node_discover_request = 0x80
    node_discover_response = 0x90


class StatsType(IntEnum):
    core = 0
    radio = 1
    packets = 2


class TextType(IntEnum):
    plain = 0x00
    binary = 0x01
    signed = 0x02
