# direnum/direnum/errors.py


class DirEnumError(Exception):
    """Base class for configuration contract violations raised by direnum."""


class OutOfRangeError(DirEnumError, ValueError):
    """A numeric option was assigned a value outside its allowed range."""


class InvalidArgumentError(DirEnumError, ValueError):
    """An unrecognized value was passed to a converter or parser."""


class FrozenOptionsError(DirEnumError, AttributeError):
    """A field of a frozen (preset) options instance was assigned."""
