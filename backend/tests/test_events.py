import json

from availability.config import settings
from availability.services.events import emit_event


def test_emit_event_pushes_json(redis_mock):
    assert emit_event("availability.recompute", {"provider_id": 3}) is True

    queue, raw = redis_mock.rpush.call_args.args
    assert queue == settings.recompute_queue
    event = json.loads(raw)
    assert event["type"] == "availability.recompute"
    assert event["provider_id"] == 3
    assert isinstance(event["ts"], int)


def test_emit_event_custom_queue(redis_mock):
    emit_event("ping", {}, queue="other:queue")

    assert redis_mock.rpush.call_args.args[0] == "other:queue"


def test_emit_event_swallows_redis_errors(redis_mock, caplog):
    redis_mock.rpush.side_effect = ConnectionError("refused")

    assert emit_event("ping", {}) is False
    assert "Failed to emit event ping" in caplog.text
