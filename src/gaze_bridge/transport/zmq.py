import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Sequence

import zmq
import zmq.asyncio

from ..errors import ProtocolError, UpstreamUnreachableError
from ..utils.types import TIMEOUT, TimeoutToken

logger = logging.getLogger(__name__)


class ZMQEndpoint(ABC):
    """
    Wraps one asyncio ZMQ socket with bounded-wait receive and plain send.

    Receives poll first, so a timeout of 0 checks for a pending message and
    returns immediately.
    """

    def __init__(self, ctx: zmq.asyncio.Context, socket_type: int, address: str):
        self.address = address
        self._sock = ctx.socket(socket_type)

    @abstractmethod
    async def start(self) -> None:
        """Connects or binds the socket."""
        raise NotImplementedError

    async def _poll(self, timeout_s: float) -> bool:
        events = await self._sock.poll(timeout=int(timeout_s * 1000), flags=zmq.POLLIN)
        return bool(events & zmq.POLLIN)

    async def receive_frame(self, timeout_s: float) -> bytes | TimeoutToken:
        """Receives the next single-part message, or TIMEOUT."""
        if not await self._poll(timeout_s):
            return TIMEOUT
        try:
            return await self._sock.recv(flags=zmq.NOBLOCK)
        except zmq.Again:
            return TIMEOUT

    async def receive_multipart(
        self, timeout_s: float, max_parts: int = 2
    ) -> tuple[bytes, ...] | TimeoutToken:
        """
        Receives the next message as a tuple of exactly `max_parts` frames.

        ZMQ delivers multi-part messages atomically and recv_multipart reads
        every part, so a malformed message is fully consumed before
        ProtocolError is raised and the next read starts on a boundary.
        """
        if not await self._poll(timeout_s):
            return TIMEOUT
        try:
            parts = await self._sock.recv_multipart(flags=zmq.NOBLOCK)
        except zmq.Again:
            return TIMEOUT

        if len(parts) != max_parts:
            raise ProtocolError(len(parts), max_parts)
        return tuple(parts)

    async def send_frame(self, data: bytes) -> None:
        await self._sock.send(data)

    async def close(self) -> None:
        """Close immediately, don't wait for unsent messages."""
        self._sock.close(linger=0)


class ZMQSubscriber(ZMQEndpoint):
    """SUB socket connected to the sensor's telemetry publisher."""

    def __init__(self, ctx: zmq.asyncio.Context, address: str, topics: Sequence[str]):
        super().__init__(ctx, zmq.SUB, address)
        self.topics = list(topics)

    async def start(self) -> None:
        self._sock.connect(self.address)
        for topic in self.topics:
            self._sock.setsockopt_string(zmq.SUBSCRIBE, topic)
        logger.info(f"Subscribed to {self.address} with topics {self.topics}")


class ZMQReplier(ZMQEndpoint):
    """REP socket the external controller sends its commands to."""

    def __init__(self, ctx: zmq.asyncio.Context, address: str):
        super().__init__(ctx, zmq.REP, address)

    async def start(self) -> None:
        try:
            self._sock.bind(self.address)
            logger.info(f"Control replier bound to {self.address}")
        except zmq.ZMQError as e:
            logger.error(f"Failed to bind control replier to {self.address}: {e}")
            raise e


class ZMQRequester(ZMQEndpoint):
    """REQ socket to the sensor's remote-control endpoint."""

    def __init__(self, ctx: zmq.asyncio.Context, address: str):
        super().__init__(ctx, zmq.REQ, address)

    async def start(self) -> None:
        self._sock.connect(self.address)
        logger.info(f"Remote-control requester connected to {self.address}")

    async def request_reply(self, request: bytes, timeout_s: float) -> bytes:
        try:
            return await asyncio.wait_for(self._exchange(request), timeout=timeout_s)
        except asyncio.TimeoutError as e:
            raise UpstreamUnreachableError(
                f"No reply from {self.address} to {request!r} within {timeout_s:g} s."
            ) from e

    async def _exchange(self, request: bytes) -> bytes:
        await self._sock.send(request)
        return await self._sock.recv()
