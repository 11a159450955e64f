class WAVLError(Exception):
    """Base class for errors raised by the tree."""


class DuplicateKeyError(WAVLError, KeyError):
    """The key is already present; the tree was not modified."""


class NotFoundError(WAVLError, KeyError):
    """The key is not present; the tree was not modified."""


class InvariantError(WAVLError, RuntimeError):
    """The tree reached a rank configuration no rebalance case handles.

    This means an earlier operation left the tree broken and is not
    recoverable.
    """
