from typing import Protocol, runtime_checkable

from ..utils.types import TimeoutToken


@runtime_checkable
class IngestEndpoint(Protocol):
    """
    The telemetry subscription. Every message is expected to be [topic][payload].
    """
    async def receive_multipart(
        self, timeout_s: float, max_parts: int = 2
    ) -> tuple[bytes, ...] | TimeoutToken:
        """
        Returns the next message, or TIMEOUT once `timeout_s` elapsed without one.
        Raises ProtocolError after consuming a message of the wrong length.
        """
        ...


@runtime_checkable
class ControlEndpoint(Protocol):
    """
    The controller-facing reply socket. Receives and sends strictly alternate.
    """
    async def receive_frame(self, timeout_s: float) -> bytes | TimeoutToken: ...

    async def send_frame(self, data: bytes) -> None: ...


@runtime_checkable
class RemoteEndpoint(Protocol):
    """
    The sensor's remote-control request socket.
    """
    async def request_reply(self, request: bytes, timeout_s: float) -> bytes:
        """
        Sends one frame and returns the single reply.
        Raises UpstreamUnreachableError if no reply arrives within `timeout_s`.
        """
        ...
