import json

import pytest

from geminikit.errors import JsonError, StreamingError
from geminikit.functions import FunctionCall
from geminikit.models import (
    Candidate,
    Content,
    FinishReason,
    FunctionCallPart,
    GenerateContentResponse,
    Role,
    TextPart,
)
from geminikit.streaming import StreamAccumulator, accumulate_text, parse_stream


def _payload(text, finish=None):
    candidate = {"content": {"role": "model", "parts": [{"text": text}]}}
    if finish is not None:
        candidate["finishReason"] = finish
    return {"candidates": [candidate]}


def _raw(text, finish=None):
    return json.dumps(_payload(text, finish)).encode("utf-8")


def _response(text):
    return GenerateContentResponse([Candidate(Content(Role.MODEL, [TextPart(text)]))])


def _texts(responses):
    return [r.candidates[0].content.parts[0].text for r in responses]


def _failing_chunks():
    yield _raw("before")
    raise OSError("boom")


def test_single_object_in_one_chunk():
    responses = list(parse_stream([_raw("Hello")]))
    assert _texts(responses) == ["Hello"]
    assert responses[0].candidates[0].content.role is Role.MODEL


def test_object_split_across_chunks():
    raw = _raw("split me", "STOP")
    middle = len(raw) // 2
    responses = list(parse_stream([raw[:middle], raw[middle:]]))
    assert _texts(responses) == ["split me"]
    assert responses[0].candidates[0].finish_reason is FinishReason.STOP


def test_one_object_per_chunk():
    responses = list(parse_stream([_raw("a"), _raw("b"), _raw("c")]))
    assert _texts(responses) == ["a", "b", "c"]


def test_braces_and_escaped_quotes_inside_strings():
    text = 'brace } and { quote \\" inside'
    responses = list(parse_stream([_raw(text)]))
    assert _texts(responses) == [text]


def test_remaining_object_parsed_at_end_of_stream():
    responses = list(parse_stream([_raw("first") + _raw("second")]))
    assert _texts(responses) == ["first", "second"]


def test_trailing_garbage_at_end_is_ignored():
    responses = list(parse_stream([_raw("only") + b"\n"]))
    assert _texts(responses) == ["only"]


def test_str_chunks_are_accepted():
    responses = list(parse_stream([_raw("text chunk").decode("utf-8")]))
    assert _texts(responses) == ["text chunk"]


def test_empty_stream_yields_nothing():
    assert list(parse_stream([])) == []


def test_incomplete_object_at_end_is_dropped():
    raw = _raw("never finished")
    assert list(parse_stream([raw[:-3]])) == []


def test_malformed_object_raises_json_error():
    with pytest.raises(JsonError):
        list(parse_stream([b'{"candidates": nope}']))


def test_object_of_wrong_shape_raises_json_error():
    with pytest.raises(JsonError):
        list(parse_stream([b'{"other": 1}']))


def test_source_failure_raises_streaming_error():
    stream = parse_stream(_failing_chunks())
    assert _texts([next(stream)]) == ["before"]
    with pytest.raises(StreamingError) as info:
        next(stream)
    assert "Stream error: boom" in str(info.value)
    assert isinstance(info.value.__cause__, OSError)


def test_accumulate_text_skips_responses_without_text():
    call = GenerateContentResponse(
        [Candidate(Content(Role.MODEL, [FunctionCallPart(FunctionCall("f", {}))]))]
    )
    empty = GenerateContentResponse([])
    items = [_response("one"), call, empty, _response("two")]
    assert list(accumulate_text(items)) == ["one", "two"]


def test_accumulate_text_over_parsed_stream():
    chunks = [_raw("Hel"), _raw("lo")]
    assert "".join(accumulate_text(parse_stream(chunks))) == "Hello"


def test_accumulator_collects_text():
    acc = StreamAccumulator()
    assert acc.process_chunk(_response("Hel")) == "Hel"
    assert acc.process_chunk(_response("lo")) == "lo"
    assert acc.accumulated_text == "Hello"


def test_accumulator_ignores_non_text_chunk():
    acc = StreamAccumulator()
    acc.process_chunk(_response("text"))
    empty = GenerateContentResponse([])
    assert acc.process_chunk(empty) is None
    assert acc.accumulated_text == "text"


def test_finalize_without_chunks_returns_none():
    assert StreamAccumulator().finalize() is None


def test_finalize_replaces_text_of_last_response():
    acc = StreamAccumulator()
    first = _response("Hel")
    last = _response("lo")
    acc.process_chunk(first)
    acc.process_chunk(last)
    final = acc.finalize()
    assert final.candidates[0].content.parts[0].text == "Hello"
    assert last.candidates[0].content.parts[0].text == "lo"


def test_finalize_keeps_last_response_when_it_has_no_text():
    acc = StreamAccumulator()
    acc.process_chunk(_response("abc"))
    call = GenerateContentResponse(
        [Candidate(Content(Role.MODEL, [FunctionCallPart(FunctionCall("f", {"x": 1}))]))]
    )
    acc.process_chunk(call)
    final = acc.finalize()
    assert final == call
    assert acc.accumulated_text == "abc"