import logging

from ..errors import DecodeError, EmptyRecordError, ProtocolError
from ..transport import ControlEndpoint, IngestEndpoint
from ..utils.logging import ThrottledLogger
from ..utils.types import TIMEOUT
from .context import BridgeContext

logger = logging.getLogger(__name__)


class BridgeRunner:
    """
    Alternates between the ingest subscription and the control replier.

    Each `step()` first drains whatever telemetry is already queued, then
    waits at most the control timeout for one controller request. Draining
    only what is available keeps a burst of telemetry from delaying a
    command by more than one pass.
    """
    def __init__(
        self,
        context: BridgeContext,
        ingest: IngestEndpoint,
        control: ControlEndpoint,
    ):
        self.context = context
        self.ingest = ingest
        self.control = control

        settings = context.settings
        self._ingest_timeout_s = settings.ingest.timeout_ms / 1000
        self._control_timeout_s = settings.control.timeout_ms / 1000
        self._topics = tuple(settings.ingest.topics)
        self._debug = settings.debug
        self._empty_log = ThrottledLogger(logger)
        self._skipped_log = ThrottledLogger(logger)

        self.frames_received = 0
        self.samples_recorded = 0

    async def run(self) -> None:
        """Hot loop. Only an exception, or cancelling the task, ends it."""
        logger.info("Bridge loop running.")
        while True:
            await self.step()

    async def step(self) -> bool:
        """
        One drain-then-reply pass. Returns True if a control request was served.
        """
        await self.drain_ingest()
        return await self.service_control()

    async def drain_ingest(self) -> int:
        """
        Reads ingest messages until none is immediately available.
        Returns the number of samples appended to the buffer.
        """
        appended = 0
        while True:
            try:
                message = await self.ingest.receive_multipart(self._ingest_timeout_s)
            except ProtocolError as e:
                logger.warning("Dropping ingest message: %s", e)
                continue

            if message is TIMEOUT:
                return appended

            topic, payload = message
            self.frames_received += 1
            if self._handle_ingest(topic, payload):
                appended += 1

    def _handle_ingest(self, topic: bytes, payload: bytes) -> bool:
        topic_str = topic.decode("utf-8", errors="replace")
        if self._debug:
            logger.debug("%s: %r", topic_str, payload)

        if not topic_str.startswith(self._topics):
            self._skipped_log.info("Skipping message on unrelated topic %s", topic_str)
            return False

        try:
            sample = self.context.decoder.decode(payload)
        except EmptyRecordError:
            self._empty_log.info("Dropping %s message without any recognized field.", topic_str)
            return False
        except DecodeError as e:
            logger.warning("Failed to decode %s message: %s", topic_str, e)
            return False

        if not self.context.recorder.is_recording:
            # Drained while stopped so stale telemetry is not recorded later.
            return False

        self.context.buffer.append(sample)
        self.samples_recorded += 1
        logger.debug("Recorded %s", sample)
        return True

    async def service_control(self) -> bool:
        request = await self.control.receive_frame(self._control_timeout_s)
        if request is TIMEOUT:
            return False

        reply = await self.context.dispatcher.handle_request(request)
        await self.control.send_frame(reply)
        return True
