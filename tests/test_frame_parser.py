"""Parsing raw websocket frames into typed inbound messages."""
import json

import pytest

from models.wire_messages import AgentNoteMessage, PingMessage, TodoConfirmMessage, UIResponseMessage
from services.realtime.errors import MessageParseError, UnknownMessageType
from services.realtime.frame_parser import parse_frame


def test_parses_each_inbound_type():
    assert isinstance(
        parse_frame('{"type":"UI_RESPONSE","promptId":"style_a","selectedOptionId":"bold"}'),
        UIResponseMessage,
    )
    assert parse_frame('{"type":"TODO_CONFIRM","ok":false}') == TodoConfirmMessage(type="TODO_CONFIRM", ok=False)
    assert parse_frame('{"type":"AGENT_NOTE","message":"hi"}') == AgentNoteMessage(type="AGENT_NOTE", message="hi")
    assert isinstance(parse_frame(b'{"type":"PING","ts":1}'), PingMessage)


def test_ping_timestamp_is_preserved_exactly():
    assert parse_frame('{"type":"PING","ts":12345}').ts == 12345
    assert parse_frame('{"type":"PING","ts":12.5}').ts == 12.5


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", "\"PING\"", b"\xff\xfe"])
def test_malformed_frames_raise_parse_error(raw):
    with pytest.raises(MessageParseError):
        parse_frame(raw)


@pytest.mark.parametrize("raw", ['{"type":"DANCE"}', '{"promptId":"x"}', '{"type":["PING"]}'])
def test_unknown_types_raise(raw):
    with pytest.raises(UnknownMessageType):
        parse_frame(raw)


def test_schema_mismatch_names_the_field():
    with pytest.raises(MessageParseError) as exc:
        parse_frame('{"type":"TODO_CONFIRM","ok":"yes"}')
    assert "ok" in str(exc.value)


def test_oversized_frames_are_rejected():
    frame = json.dumps({"type": "AGENT_NOTE", "message": "x" * 200})
    with pytest.raises(MessageParseError):
        parse_frame(frame, max_bytes=100)


@pytest.mark.parametrize("ts", ['"12345"', "true", "null", "[1]"])
def test_ping_timestamp_must_be_a_json_number(ts):
    with pytest.raises(MessageParseError) as exc:
        parse_frame('{"type":"PING","ts":%s}' % ts)
    assert "ts" in str(exc.value)
