import json

import numpy as np
import pytest

from face_gate.pipelines.descriptor import (
    DESCRIPTOR_DIMENSION,
    decode_stored_descriptor,
    parse_descriptor_text,
    validate_descriptor,
)


def good():
    return [i / 1000.0 for i in range(DESCRIPTOR_DIMENSION)]


def test_accepts_128_finite_numbers():
    result = validate_descriptor(good())
    assert result.is_valid
    assert result.error is None
    assert result.descriptor.shape == (128,)
    assert result.descriptor.dtype == np.float64
    assert result.descriptor[5] == pytest.approx(0.005)


def test_accepts_ints_tuples_and_arrays():
    assert validate_descriptor([1] * 128).is_valid
    assert validate_descriptor(tuple(good())).is_valid
    assert validate_descriptor(np.ones(128, dtype=np.float32)).is_valid


def test_validated_descriptor_is_read_only():
    result = validate_descriptor(good())
    with pytest.raises(ValueError):
        result.descriptor[0] = 1.0


@pytest.mark.parametrize("length", [0, 1, 127, 129, 256])
def test_rejects_wrong_length(length):
    result = validate_descriptor([0.1] * length)
    assert not result.is_valid
    assert result.descriptor is None
    assert f"got {length}" in result.error


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_rejects_non_finite_values(bad):
    values = good()
    values[17] = bad
    result = validate_descriptor(values)
    assert not result.is_valid
    assert "index 17" in result.error


@pytest.mark.parametrize("bad", ["0.5", None, True, False, [0.1], {"x": 1}])
def test_rejects_non_numeric_values(bad):
    values = good()
    values[3] = bad
    result = validate_descriptor(values)
    assert not result.is_valid
    assert "index 3" in result.error


def test_rejects_integer_too_large_for_float():
    values = good()
    values[0] = 10 ** 400
    assert not validate_descriptor(values).is_valid


@pytest.mark.parametrize("raw", [None, 0.5, "abc", json.dumps([0.1] * 128), {"descriptor": [0.1] * 128}])
def test_rejects_non_array_input(raw):
    assert not validate_descriptor(raw).is_valid


def test_rejects_multidimensional_array():
    assert not validate_descriptor(np.zeros((2, 64))).is_valid


def test_parse_text_accepts_json_array():
    result = parse_descriptor_text(json.dumps(good()))
    assert result.is_valid
    assert result.descriptor[127] == pytest.approx(0.127)


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "[0.1, 0.2",
    "not json",
    json.dumps([0.1] * 127),
    json.dumps({"embedding": [0.1] * 128}),
    "[" + ",".join(["NaN"] * 128) + "]",
    "[" + ",".join(["1e999"] * 128) + "]",
])
def test_parse_text_rejects_malformed(text):
    assert not parse_descriptor_text(text).is_valid


def test_decode_stored_accepts_both_encodings():
    native = decode_stored_descriptor(good())
    text = decode_stored_descriptor(json.dumps(good()))
    assert native.is_valid and text.is_valid
    np.testing.assert_array_equal(native.descriptor, text.descriptor)


@pytest.mark.parametrize("value", [None, 42, b"[0.1]", {"a": 1}])
def test_decode_stored_rejects_other_types(value):
    assert not decode_stored_descriptor(value).is_valid
