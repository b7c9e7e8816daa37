# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later


__all__ = 'InvalidInputError', 'InsufficientLengthError'


class InvalidInputError(ValueError):
    """Raised when a frame builder or codec helper is given an argument it cannot encode."""


class InsufficientLengthError(InvalidInputError):
    """Raised when a key is shorter than the prefix requested from it."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f'Insufficient length: expected at least {expected} bytes, got {actual}')
        self.expected = expected
        self.actual = actual
