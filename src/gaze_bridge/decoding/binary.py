from typing import Any

import msgpack

from ..errors import DecodeError
from .nested import NestedGazeDecoder


class BinaryMapDecoder(NestedGazeDecoder):
    """
    Decodes msgpack payloads: one map, not wrapped in an array, with the same
    keys as the JSON gaze payload.
    """

    def _load(self, raw: bytes) -> Any:
        try:
            return msgpack.unpackb(raw, raw=False)
        except (msgpack.UnpackException, ValueError) as e:
            raise DecodeError(f"Error when unpacking msgpack data: {e}") from e
