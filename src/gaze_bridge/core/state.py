from enum import Enum, auto


class RecorderState(Enum):
    """
    Recording states of the bridge. Only control commands move between them.
    """
    STOPPED = auto()  # Initial state; decoded samples are discarded.
    RECORDING = auto()  # Decoded samples are appended to the buffer.
