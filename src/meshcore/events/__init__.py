# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from . import model
from .dispatcher import EventDispatcher, Subscription
from .filter import EventFilter, EventPredicate
from .model import *  # noqa: F403

__all__ = model.__all__ + ('EventDispatcher', 'Subscription', 'EventFilter', 'EventPredicate')  # noqa: PLE0604
