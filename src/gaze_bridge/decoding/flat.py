from ..errors import DecodeError
from ..models import Sample
from .base import PayloadDecoder, load_json


class FlatArrayDecoder(PayloadDecoder):
    """
    Decodes JSON payloads shaped as an array holding exactly one flat object:

        [{"timestamp": 12.5, "diameter": 31.2, "confidence": 0.98}]
    """

    FIELD_ORDER = ("timestamp", "diameter_px", "confidence")
    KEYS = {
        "timestamp": "timestamp",
        "diameter": "diameter_px",
        "confidence": "confidence",
    }

    def decode(self, raw: bytes) -> Sample:
        root = load_json(raw)
        if not isinstance(root, list):
            raise DecodeError("JSON root node must be an array.")
        if len(root) != 1:
            raise DecodeError(f"Expected exactly one object in the JSON array, got {len(root)}.")

        record = root[0]
        if not isinstance(record, dict):
            raise DecodeError("Expected an object inside the JSON array.")

        values: dict[str, float] = {}
        self._extract_numbers(record, self.KEYS, values)
        return self._build(values)
