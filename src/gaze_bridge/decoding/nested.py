import logging
from typing import Any, Mapping

from ..errors import DecodeError
from ..models import Sample
from .base import PayloadDecoder, load_json, to_float

logger = logging.getLogger(__name__)


class NestedGazeDecoder(PayloadDecoder):
    """
    Decodes gaze payloads: a single JSON object that may carry a normalized
    gaze point and the pupil datum it was computed from.

        {"timestamp": 12.5, "confidence": 0.9, "norm_pos": [0.4, 0.6],
         "base": [{"confidence": 0.97, "diameter": 31.2}]}

    A top-level `diameter` is also accepted so pupil-topic payloads decode
    with the same strategy.
    """

    FIELD_ORDER = (
        "timestamp",
        "diameter_px",
        "confidence",
        "gaze_x",
        "gaze_y",
        "pupil_confidence",
        "pupil_diameter_px",
    )
    KEYS = {
        "timestamp": "timestamp",
        "diameter": "diameter_px",
        "confidence": "confidence",
    }
    BASE_KEYS = {
        "confidence": "pupil_confidence",
        "diameter": "pupil_diameter_px",
    }
    # Older publishers used `base`, newer ones `base_data`.
    BASE_NAMES = ("base", "base_data")

    def _load(self, raw: bytes) -> Any:
        return load_json(raw)

    def decode(self, raw: bytes) -> Sample:
        root = self._load(raw)
        if not isinstance(root, dict):
            raise DecodeError(f"Payload root must be an object, got {type(root).__name__}.")

        values: dict[str, float] = {}
        self._extract_numbers(root, self.KEYS, values)
        self._extract_norm_pos(root, values)
        self._extract_base(root, values)
        return self._build(values)

    @staticmethod
    def _extract_norm_pos(root: Mapping[str, Any], values: dict[str, float]) -> None:
        norm_pos = root.get("norm_pos")
        if norm_pos is None:
            return
        if not isinstance(norm_pos, list):
            logger.warning("Skipping norm_pos: expected an array, got %s.", type(norm_pos).__name__)
            return
        if len(norm_pos) == 0:
            return
        if len(norm_pos) != 2:
            logger.warning("Skipping norm_pos: expected 2 elements, got %d.", len(norm_pos))
            return

        for field, value in zip(("gaze_x", "gaze_y"), norm_pos):
            number = to_float(value, field)
            if number is not None:
                values[field] = number

    def _extract_base(self, root: Mapping[str, Any], values: dict[str, float]) -> None:
        name = next((n for n in self.BASE_NAMES if n in root), None)
        if name is None:
            return

        base = root[name]
        if not isinstance(base, list):
            logger.warning("Skipping %s: expected an array, got %s.", name, type(base).__name__)
            return
        if not base:
            return
        if len(base) > 1:
            logger.warning("%s holds %d records, only the first one is used.", name, len(base))

        first = base[0]
        if not isinstance(first, dict):
            logger.warning("Skipping %s: expected an object, got %s.", name, type(first).__name__)
            return
        self._extract_numbers(first, self.BASE_KEYS, values, context=name)
