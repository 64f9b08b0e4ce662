class BridgeError(Exception):
    """Base class for every error raised by the bridge."""


class DecodeError(BridgeError):
    """An ingest payload could not be turned into a Sample."""


class EmptyRecordError(DecodeError):
    """The payload decoded fine but carried none of the recognized fields."""


class TransportError(BridgeError):
    """A socket-level exchange went wrong."""


class ProtocolError(TransportError):
    """A message arrived with an unexpected number of parts."""

    def __init__(self, n_parts: int, expected: int):
        super().__init__(f"Expected a {expected}-part message, got {n_parts} parts.")
        self.n_parts = n_parts
        self.expected = expected


class UpstreamUnreachableError(TransportError):
    """The remote-control peer did not answer within its timeout."""
