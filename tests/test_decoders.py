import json
import logging

import msgpack
import pytest

from gaze_bridge.configs import DecoderKind
from gaze_bridge.decoding import BinaryMapDecoder, FlatArrayDecoder, NestedGazeDecoder
from gaze_bridge.errors import DecodeError, EmptyRecordError
from gaze_bridge.factories import create_decoder
from gaze_bridge.models import Sample


def as_json(obj) -> bytes:
    return json.dumps(obj).encode()


class TestFlatArrayDecoder:
    decoder = FlatArrayDecoder()

    def test_all_fields(self):
        sample = self.decoder.decode(as_json([{"timestamp": 12.5, "diameter": 31.2, "confidence": 0.98}]))
        assert sample == Sample(timestamp=12.5, diameter_px=31.2, confidence=0.98)

    def test_subset_leaves_other_fields_absent(self):
        sample = self.decoder.decode(as_json([{"diameter": 4}]))
        assert sample.diameter_px == 4.0
        assert sample.timestamp is None
        assert sample.confidence is None
        assert sample.present_fields == ("diameter_px",)

    @pytest.mark.parametrize("payload", [[], [{"timestamp": 1.0}, {"timestamp": 2.0}]])
    def test_array_must_hold_exactly_one_record(self, payload):
        with pytest.raises(DecodeError):
            self.decoder.decode(as_json(payload))

    def test_root_must_be_array(self):
        with pytest.raises(DecodeError, match="array"):
            self.decoder.decode(as_json({"timestamp": 1.0}))

    def test_element_must_be_object(self):
        with pytest.raises(DecodeError, match="object"):
            self.decoder.decode(as_json([3.0]))

    def test_malformed_json(self):
        with pytest.raises(DecodeError):
            self.decoder.decode(b'[{"timestamp": ')

    def test_no_recognized_key(self):
        with pytest.raises(EmptyRecordError):
            self.decoder.decode(as_json([{"id": 0, "method": "2d c++"}]))

    def test_wrong_type_skips_only_that_field(self, caplog):
        with caplog.at_level(logging.WARNING):
            sample = self.decoder.decode(as_json([{"timestamp": "soon", "diameter": 5.5, "confidence": True}]))

        assert sample == Sample(diameter_px=5.5)
        assert "'timestamp'" in caplog.text
        assert "'confidence'" in caplog.text

    def test_only_wrong_types_is_empty(self):
        with pytest.raises(EmptyRecordError):
            self.decoder.decode(as_json([{"timestamp": None}]))


class TestNestedGazeDecoder:
    decoder = NestedGazeDecoder()

    def test_full_gaze_record(self):
        payload = {
            "topic": "gaze.3d.0.",
            "timestamp": 3021.25,
            "confidence": 0.9,
            "norm_pos": [0.4, 0.6],
            "base": [{"confidence": 0.97, "diameter": 31.2, "id": 0}],
        }
        assert self.decoder.decode(as_json(payload)) == Sample(
            timestamp=3021.25,
            confidence=0.9,
            gaze_x=0.4,
            gaze_y=0.6,
            pupil_confidence=0.97,
            pupil_diameter_px=31.2,
        )

    def test_flat_pupil_record(self):
        sample = self.decoder.decode(as_json({"timestamp": 1.0, "diameter": 5.5}))
        assert sample == Sample(timestamp=1.0, diameter_px=5.5)

    def test_base_data_spelling(self):
        sample = self.decoder.decode(as_json({"base_data": [{"diameter": 20}]}))
        assert sample == Sample(pupil_diameter_px=20.0)

    def test_empty_norm_pos_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            sample = self.decoder.decode(as_json({"timestamp": 1.0, "norm_pos": []}))
        assert sample == Sample(timestamp=1.0)
        assert caplog.text == ""

    def test_bad_norm_pos_length_keeps_other_fields(self, caplog):
        with caplog.at_level(logging.WARNING):
            sample = self.decoder.decode(as_json({"timestamp": 1.0, "norm_pos": [0.1, 0.2, 0.3]}))
        assert sample == Sample(timestamp=1.0)
        assert "expected 2 elements, got 3" in caplog.text

    def test_partially_typed_norm_pos(self):
        sample = self.decoder.decode(as_json({"norm_pos": [0.1, "y"]}))
        assert sample == Sample(gaze_x=0.1)

    def test_several_base_records_uses_first(self, caplog):
        payload = {"base": [{"confidence": 0.5}, {"confidence": 0.7}]}
        with caplog.at_level(logging.WARNING):
            sample = self.decoder.decode(as_json(payload))
        assert sample == Sample(pupil_confidence=0.5)
        assert "only the first one is used" in caplog.text

    def test_base_element_not_object(self):
        with pytest.raises(EmptyRecordError):
            self.decoder.decode(as_json({"base": [1, 2]}))

    def test_root_must_be_object(self):
        with pytest.raises(DecodeError, match="object"):
            self.decoder.decode(as_json([{"timestamp": 1.0}]))

    def test_no_recognized_key(self):
        with pytest.raises(EmptyRecordError):
            self.decoder.decode(as_json({"topic": "gaze", "base": []}))


class TestBinaryMapDecoder:
    decoder = BinaryMapDecoder()

    def test_map(self):
        raw = msgpack.packb({"timestamp": 7.0, "confidence": 1, "norm_pos": [0.5, 0.25]})
        assert self.decoder.decode(raw) == Sample(timestamp=7.0, confidence=1.0, gaze_x=0.5, gaze_y=0.25)

    def test_type_mismatch_skips_field(self, caplog):
        raw = msgpack.packb({"timestamp": b"\x00\x01", "diameter": 3.5})
        with caplog.at_level(logging.WARNING):
            sample = self.decoder.decode(raw)
        assert sample == Sample(diameter_px=3.5)
        assert "'timestamp'" in caplog.text

    def test_array_root_is_rejected(self):
        with pytest.raises(DecodeError):
            self.decoder.decode(msgpack.packb([{"timestamp": 1.0}]))

    def test_truncated_payload(self):
        raw = msgpack.packb({"timestamp": 7.0, "diameter": 3.5})
        with pytest.raises(DecodeError):
            self.decoder.decode(raw[:-3])

    def test_json_text_is_not_a_map(self):
        with pytest.raises(DecodeError):
            self.decoder.decode(b'{"timestamp": 1.0}')


@pytest.mark.parametrize("kind, cls", [
    ("flat_array", FlatArrayDecoder),
    (DecoderKind.NESTED_GAZE, NestedGazeDecoder),
    (DecoderKind.BINARY_MAP, BinaryMapDecoder),
])
def test_create_decoder(kind, cls):
    assert type(create_decoder(kind)) is cls


HUGE_INT = b"1" + b"0" * 400


def test_integer_too_large_for_float_skips_the_field(caplog):
    raw = b'{"timestamp": ' + HUGE_INT + b', "confidence": 0.5}'
    with caplog.at_level(logging.WARNING):
        sample = NestedGazeDecoder().decode(raw)
    assert sample == Sample(confidence=0.5)
    assert "does not fit a float" in caplog.text


def test_integer_too_large_in_norm_pos():
    raw = b'{"norm_pos": [0.5, ' + HUGE_INT + b']}'
    assert NestedGazeDecoder().decode(raw) == Sample(gaze_x=0.5)


def test_only_oversized_integers_is_empty():
    with pytest.raises(EmptyRecordError):
        FlatArrayDecoder().decode(b'[{"diameter": ' + HUGE_INT + b'}]')


@pytest.mark.parametrize("decoder", [FlatArrayDecoder(), NestedGazeDecoder()])
def test_deeply_nested_json_is_a_decode_error(decoder):
    with pytest.raises(DecodeError):
        decoder.decode(b"[" * 100000)
