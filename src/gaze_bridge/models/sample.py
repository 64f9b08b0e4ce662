from dataclasses import dataclass, fields
from typing import Optional, Sequence

# Rendered in place of a field the record did not carry.
SENTINEL = -1.0


@dataclass(slots=True, frozen=True)
class Sample:
    """
    A normalized, immutable telemetry record decoded from one ingest frame.

    `None` marks a field that was absent from the wire payload. The pupil_*
    fields come from the eye-camera sub-record nested in gaze payloads.
    """
    timestamp: Optional[float] = None
    diameter_px: Optional[float] = None
    confidence: Optional[float] = None
    gaze_x: Optional[float] = None
    gaze_y: Optional[float] = None
    pupil_confidence: Optional[float] = None
    pupil_diameter_px: Optional[float] = None

    @property
    def present_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is not None)

    def format_block(self, field_order: Sequence[str]) -> str:
        """
        Renders the sample as `name:value` lines, one per field, in the given order.
        Every line, the last included, ends with a newline.
        """
        lines = []
        for name in field_order:
            value = getattr(self, name)
            if value is None:
                value = SENTINEL
            lines.append(f"{name}:{value:f}\n")
        return "".join(lines)
