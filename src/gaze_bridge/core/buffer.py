from collections import deque
from typing import Iterator

from ..models import Sample


class SampleBuffer:
    """
    FIFO of decoded samples awaiting a `receive_data` request.

    Neither `append` nor `drain` awaits, so on the single event loop a drain
    can never interleave with an append. Guard both with a lock if they are
    ever called from more than one thread.
    """

    def __init__(self) -> None:
        self._samples: deque[Sample] = deque()

    def append(self, sample: Sample) -> None:
        self._samples.append(sample)

    def drain(self) -> list[Sample]:
        """Returns every buffered sample in arrival order and empties the buffer."""
        samples = list(self._samples)
        self._samples.clear()
        return samples

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)
