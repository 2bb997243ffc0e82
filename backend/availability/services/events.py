"""
backend/availability/services/events.py

Event emitter: pushes events to Redis lists for consumption by background jobs.

Queue:
- settings.recompute_queue: requests for the cache-recomputation job
"""

import json
import time
import logging

from ..config import settings
from ..redis_client import redis_client

logger = logging.getLogger(__name__)


def emit_event(event_type: str, payload: dict, queue: str | None = None) -> bool:
    """
    Emit an event onto a Redis list.

    Failures are logged, not raised: callers have already committed their
    writes and the consumer also runs on its own schedule.

    Returns:
        True when the event was pushed.
    """
    queue = queue or settings.recompute_queue
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(queue, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {queue}")
        return True
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
        return False
