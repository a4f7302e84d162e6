"""
Exceptions raised by the Durak client.

None of these is fatal to a running client: the dispatcher and the client
facade log them and carry on with the last good state.
"""


class DurakClientError(Exception):
    """Base class for all Durak client errors."""

    pass


class ProtocolError(DurakClientError):
    """Raised when a frame or payload does not have the expected shape."""

    pass


class NotConnectedError(DurakClientError):
    """Raised when a command is sent before the transport is connected."""

    pass
