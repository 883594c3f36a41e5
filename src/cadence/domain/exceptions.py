"""Exceptions raised by the scheduling core."""


class CadenceError(Exception):
    """Base class for all Cadence errors."""


class InvalidArgumentError(CadenceError, ValueError):
    """An argument is outside its documented range (e.g. a negative queue limit)."""


class InvalidRatingError(CadenceError, ValueError):
    """A grade outside Again/Hard/Good/Easy was passed to a scheduler."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unsupported rating: {value!r} (expected 1-4)")
