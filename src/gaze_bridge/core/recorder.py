import logging
from typing import Optional

from ..configs import RemoteConfig
from ..transport import RemoteEndpoint
from ..utils.clock import Stopwatch
from .state import RecorderState

logger = logging.getLogger(__name__)

REPLY_ACK = "ack"
REPLY_ALREADY_RECORDING = "already recording"
REPLY_NO_TIMER = "no timer"
REPLY_NOT_RECORDING = "not recording"


class RecordingStateMachine:
    """
    Turns start/stop commands into state transitions.

    When a remote-control endpoint is given, every transition is mirrored to
    the sensor first; if the sensor does not acknowledge in time the
    UpstreamUnreachableError propagates and the state is left unchanged.
    """

    def __init__(
        self,
        remote: Optional[RemoteEndpoint] = None,
        remote_config: Optional[RemoteConfig] = None,
        stopwatch_factory=Stopwatch,
    ):
        self.remote = remote
        self.remote_config = remote_config or RemoteConfig()
        self.state = RecorderState.STOPPED

        # Created on the first start and reused for every later segment.
        self.stopwatch: Stopwatch | None = None
        self._stopwatch_factory = stopwatch_factory

    @property
    def is_recording(self) -> bool:
        return self.state is RecorderState.RECORDING

    async def start(self) -> str:
        if self.is_recording:
            logger.warning("Start requested while already recording.")
            return REPLY_ALREADY_RECORDING

        await self._notify_remote(self.remote_config.start_command)

        if self.stopwatch is None:
            self.stopwatch = self._stopwatch_factory()
        self.stopwatch.start()
        self.state = RecorderState.RECORDING
        logger.info("Recording started.")
        return REPLY_ACK

    async def stop(self) -> str:
        if self.stopwatch is None:
            logger.warning("Stop requested but recording was never started.")
            return REPLY_NO_TIMER
        if not self.is_recording:
            logger.warning("Stop requested while already stopped.")
            return REPLY_NOT_RECORDING

        await self._notify_remote(self.remote_config.stop_command)

        elapsed = self.stopwatch.stop()
        self.state = RecorderState.STOPPED
        logger.info(
            "Recording stopped after %.3f s (%.3f s in total).",
            elapsed, self.stopwatch.total_elapsed
        )
        return f"{elapsed:f}"

    async def _notify_remote(self, command: str) -> None:
        if self.remote is None:
            return
        timeout_s = self.remote_config.timeout_ms / 1000
        reply = await self.remote.request_reply(command.encode(), timeout_s)
        logger.info(
            "Remote control acknowledged %r: %s",
            command, reply.decode("utf-8", errors="replace")
        )
