import logging

from ..decoding import PayloadDecoder
from .buffer import SampleBuffer
from .recorder import RecordingStateMachine

logger = logging.getLogger(__name__)

REPLY_NO_DATA = "no data"
REPLY_UNKNOWN = "unknown request"


class ControlDispatcher:
    """
    Maps one controller request to one reply.

    Recognized requests are the exact strings `start`, `stop` and
    `receive_data`; anything else is answered with `unknown request`.
    """

    def __init__(
        self,
        recorder: RecordingStateMachine,
        buffer: SampleBuffer,
        decoder: PayloadDecoder,
    ):
        self.recorder = recorder
        self.buffer = buffer
        self.decoder = decoder

    async def handle_request(self, raw: bytes) -> bytes:
        try:
            request = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Undecodable request: %r", raw)
            return REPLY_UNKNOWN.encode()

        if request == "start":
            reply = await self.recorder.start()
        elif request == "stop":
            reply = await self.recorder.stop()
        elif request == "receive_data":
            reply = self.receive_data()
        else:
            logger.warning("Unknown request: %s", request)
            reply = REPLY_UNKNOWN

        return reply.encode("utf-8")

    def receive_data(self) -> str:
        """
        Serializes and clears the whole buffer.
        """
        samples = self.buffer.drain()
        if not samples:
            return REPLY_NO_DATA

        logger.info("Sending %d samples to the controller.", len(samples))
        return self.decoder.format_samples(samples)
