import pytest

from dial_client.domain.exceptions import DecodingError
from dial_client.domain.json_value import decode_json_object, get_path, get_str
from dial_client.streaming.decoder import ChunkDecoder, EventKind


def test_decoder_done_sentinel():
    event = ChunkDecoder().decode("[DONE]")
    assert event.kind is EventKind.DONE
    assert event.chunk is None


def test_decoder_skips_empty_body():
    assert ChunkDecoder().decode("").kind is EventKind.SKIP


def test_decoder_parses_multiline_json():
    event = ChunkDecoder().decode('{\n  "choices": [\n    {"delta": {"content": "x"}}\n  ]\n}')
    assert event.kind is EventKind.CHUNK
    assert event.chunk["choices"][0]["delta"]["content"] == "x"


@pytest.mark.parametrize("body", ["{not json", "[1, 2]", '"text"', "42"])
def test_decoder_rejects_non_object_bodies(body):
    with pytest.raises(DecodingError) as exc:
        ChunkDecoder().decode(body)
    assert exc.value.code == "JSON_DECODE_ERROR"


def test_decode_json_object_empty_body():
    assert decode_json_object(b"") == {}
    assert decode_json_object('{"a": 1}'.encode()) == {"a": 1}


def test_get_path_returns_none_on_absence():
    chunk = {"choices": [{"delta": {"role": "assistant"}, "finish_reason": None}]}
    assert get_path(chunk, "choices", 0, "delta", "role") == "assistant"
    assert get_path(chunk, "choices", 0, "delta", "content") is None
    assert get_path(chunk, "choices", 1, "delta") is None
    assert get_path(chunk, "choices", "0") is None
    assert get_path({"choices": []}, "choices", 0) is None
    assert get_path("text", "choices") is None


def test_get_str_requires_string():
    chunk = {"choices": [{"delta": {"content": 5}}]}
    assert get_str(chunk, "choices", 0, "delta", "content") is None
    assert get_str(chunk, "choices", 0, "delta", "content", default="") == ""
    assert get_str({"a": "b"}, "a") == "b"
