# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later


__all__ = 'WouldBlock', 'ClosedResourceError', 'EndOfChannel'


class WouldBlock(Exception):
    """Raised by ``X_nowait`` functions if ``X`` would block."""


class ClosedResourceError(Exception):
    """
    Raised when attempting to use a resource after it has been closed.

    For channels this means sending into a channel whose close() method
    was already called, either directly or by leaving its context manager.

    """


class EndOfChannel(Exception):
    """
    Raised when trying to receive from a :class:`aio.Channel` that was
    closed and has no more buffered items left to deliver.

    """
