from .buffer import SampleBuffer
from .context import BridgeContext
from .dispatcher import ControlDispatcher
from .recorder import RecordingStateMachine
from .runner import BridgeRunner
from .state import RecorderState
