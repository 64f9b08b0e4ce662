from dataclasses import dataclass, field

from ..configs import BridgeSettings
from ..decoding import PayloadDecoder
from .buffer import SampleBuffer
from .dispatcher import ControlDispatcher
from .recorder import RecordingStateMachine


@dataclass
class BridgeContext:
    """
    Everything one bridge instance owns. Nothing here is process-global, so
    several bridges can live side by side in one interpreter.
    """
    settings: BridgeSettings
    decoder: PayloadDecoder
    recorder: RecordingStateMachine
    buffer: SampleBuffer = field(default_factory=SampleBuffer)
    dispatcher: ControlDispatcher = field(init=False)

    def __post_init__(self) -> None:
        self.dispatcher = ControlDispatcher(self.recorder, self.buffer, self.decoder)
