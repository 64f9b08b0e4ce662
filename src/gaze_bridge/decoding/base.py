import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Optional

from ..errors import DecodeError, EmptyRecordError
from ..models import Sample

logger = logging.getLogger(__name__)


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid telemetry reading.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_float(value: Any, label: str) -> Optional[float]:
    """
    Converts one wire value to float, or logs why it was skipped and returns None.
    """
    if not is_number(value):
        logger.warning("Skipping %s: expected a number, got %s.", label, type(value).__name__)
        return None
    try:
        return float(value)
    except OverflowError:
        # JSON integers are unbounded.
        logger.warning("Skipping %s: a %d-bit integer does not fit a float.", label, value.bit_length())
        return None


def load_json(raw: bytes) -> Any:
    """Parses a JSON text payload, raising DecodeError on malformed input."""
    try:
        return json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"Error when parsing JSON data: {e}") from e
    except RecursionError as e:
        raise DecodeError("Error when parsing JSON data: nesting too deep.") from e


class PayloadDecoder(ABC):
    """
    Abstract Base Class for all ingest payload decoders.

    A decoder turns the payload part of one ingest message into a `Sample`.
    Problems confined to a single field are logged and the field is skipped;
    only problems with the payload as a whole raise `DecodeError`.

    Subclasses declare `FIELD_ORDER`, the order in which their samples are
    rendered in a `receive_data` reply.
    """

    FIELD_ORDER: ClassVar[tuple[str, ...]]

    @abstractmethod
    def decode(self, raw: bytes) -> Sample:
        """
        Decodes one payload.

        Raises:
            DecodeError: if the payload is malformed or has the wrong shape.
            EmptyRecordError: if none of the recognized fields were present.
        """
        raise NotImplementedError

    def format_samples(self, samples: list[Sample]) -> str:
        return "".join(s.format_block(self.FIELD_ORDER) for s in samples)

    @staticmethod
    def _extract_numbers(
        record: Mapping[str, Any],
        key_map: Mapping[str, str],
        values: dict[str, float],
        context: str = "record",
    ) -> None:
        """Copies every numeric `record[key]` into `values[field]` for `key -> field` in key_map."""
        for key, field in key_map.items():
            if key not in record:
                continue
            value = to_float(record[key], f"{context} field {key!r}")
            if value is not None:
                values[field] = value

    @staticmethod
    def _build(values: dict[str, float]) -> Sample:
        if not values:
            raise EmptyRecordError("No recognized field in the record.")
        return Sample(**values)
