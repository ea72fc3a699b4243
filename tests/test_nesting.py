import logging

import pytest

from respirator.config import DEFAULT_MAX_DEPTH, DecoderConfig
from respirator.data_types import Array, Integer
from respirator.exceptions import (
    NestingTooDeepError,
    TruncatedPayloadError,
    UnknownMarkerError,
)
from respirator.resp.decoder import RESPDecoder, decode


def nested(depth: int) -> bytes:
    return b"*1\r\n" * depth + b":1\r\n"


def test_nesting_up_to_max_depth(shallow_decoder):
    value, remaining = shallow_decoder.decode(nested(3))

    assert value == Array((Array((Array((Integer(1),)),)),))
    assert remaining == b""


def test_nesting_beyond_max_depth(shallow_decoder):
    with pytest.raises(NestingTooDeepError) as exc_info:
        shallow_decoder.decode(nested(4))

    assert exc_info.value.max_depth == 3
    assert exc_info.value.offset == 12
    assert exc_info.value.kind == "NestingTooDeep"


def test_sibling_arrays_do_not_add_depth():
    decoder = RESPDecoder(DecoderConfig(max_depth=2))
    buffer = b"*3\r\n" + b"*1\r\n:1\r\n" * 3

    value, _ = decoder.decode(buffer)

    assert value.dump() == [[1], [1], [1]]


def test_scalars_do_not_count_as_depth():
    decoder = RESPDecoder(DecoderConfig(max_depth=1))

    value, _ = decoder.decode(b"*2\r\n$1\r\na\r\n:2\r\n")

    assert value.dump() == [b"a", 2]


def test_default_max_depth():
    value, _ = decode(nested(DEFAULT_MAX_DEPTH))
    assert isinstance(value, Array)

    with pytest.raises(NestingTooDeepError):
        decode(nested(DEFAULT_MAX_DEPTH + 1))


def test_deeply_nested_input_fails_without_recursion_error():
    with pytest.raises(NestingTooDeepError):
        decode(nested(100_000))


def test_depth_rejection_is_logged(shallow_decoder, caplog):
    caplog.set_level(logging.DEBUG)

    with pytest.raises(NestingTooDeepError):
        shallow_decoder.decode(nested(4))

    assert "depth 4 > 3" in caplog.text


def innermost(value: Array) -> tuple[int, object]:
    levels = 0
    while isinstance(value, Array):
        levels += 1
        value = value[0]
    return levels, value


@pytest.mark.parametrize("max_depth", [1, 2, 64, 1_000, 5_000, 100_000])
def test_depth_boundary(max_depth):
    decoder = RESPDecoder(DecoderConfig(max_depth=max_depth))

    value, remaining = decoder.decode(nested(max_depth))

    assert innermost(value) == (max_depth, Integer(1))
    assert remaining == b""

    with pytest.raises(NestingTooDeepError) as exc_info:
        decoder.decode(nested(max_depth + 1))

    assert exc_info.value.offset == 4 * max_depth


def test_large_max_depth_accepts_input_deeper_than_recursion_limit():
    decoder = RESPDecoder(DecoderConfig(max_depth=1_000))

    value, _ = decoder.decode(nested(600))

    assert innermost(value) == (600, Integer(1))


def test_deep_truncated_array_reports_truncation():
    decoder = RESPDecoder(DecoderConfig(max_depth=10_000))

    with pytest.raises(TruncatedPayloadError) as exc_info:
        decoder.decode(b"*1\r\n" * 5_000 + b"*2\r\n:1\r\n")

    assert exc_info.value.expected == 2
    assert exc_info.value.available == 1


def test_decode_value_counts_parent_depth(shallow_decoder):
    data = nested(2)

    value, pos = shallow_decoder.decode_value(data, 0, parent_depth=1)
    assert innermost(value) == (2, Integer(1))
    assert pos == len(data)

    with pytest.raises(NestingTooDeepError) as exc_info:
        shallow_decoder.decode_value(data, 0, parent_depth=2)

    assert exc_info.value.offset == 4


def test_decode_array_starts_past_marker(shallow_decoder):
    value, pos = shallow_decoder.decode_array(b"*2\r\n:1\r\n:2\r\n", 1)

    assert value.dump() == [1, 2]
    assert pos == 12


def test_decode_array_rejects_other_markers(shallow_decoder):
    with pytest.raises(UnknownMarkerError):
        shallow_decoder.decode_array(b":1\r\n", 1)
